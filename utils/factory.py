"""Per-request HTTP client factories for the executor."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable

import httpx

ClientFactory = Callable[[], Awaitable[httpx.AsyncClient]]


def per_request_factory(
    factory: Any,
    *,
    fallback: Callable[[], httpx.AsyncClient],
    logger,
) -> ClientFactory:
    """Return an async callable that yields one open client per request.

    Each request closes the client it was given, so ``factory`` (sync or
    async) must hand out a new client every time. ``None`` selects
    ``fallback``.
    """
    source = factory if callable(factory) else fallback

    async def open_client() -> httpx.AsyncClient:
        client = source()
        if inspect.isawaitable(client):
            client = await client
        if not isinstance(client, httpx.AsyncClient):
            logger.error("Client factory produced %s, not httpx.AsyncClient", type(client).__name__)
            raise TypeError("client_factory must return httpx.AsyncClient")
        if client.is_closed:
            logger.error("Client factory reused a client that an earlier request closed")
            raise RuntimeError("client_factory returned a closed client; return a new one per call")
        return client

    return open_client
