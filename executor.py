"""Cancellable request execution against the node's local HTTP API.

Each call spawns the HTTP exchange as its own task and races it against the
caller's cancellation handle. Whichever finishes first decides the outcome.
When the handle wins, the exchange is detached rather than aborted: it runs
to completion in the background and its outcome is consumed and discarded.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Optional, Set

import httpx

from config import Settings
from constants import API_PATH_PREFIX, ERROR_TIMEOUT, FORM_CONTENT_TYPE
from logging_config import logger, operation_ctx
from state import settings as app_settings
from utils.factory import per_request_factory
from utils.form import encode_form, form_body
from utils.types import CancellationHandle


class RequestTimeoutError(TimeoutError):
    """Raised when the cancellation handle fires before a response arrives.

    Explicit cancellation and deadline expiry are reported the same way.
    """

    def __init__(self, message: str = ERROR_TIMEOUT) -> None:
        super().__init__(message)


def default_client_factory(settings: Settings) -> httpx.AsyncClient:
    """Create a single-use HTTP client for one request."""
    timeout = httpx.Timeout(settings.http_timeout)
    transport = httpx.AsyncHTTPTransport(retries=0)
    return httpx.AsyncClient(timeout=timeout, transport=transport)


class RequestExecutor:
    """Perform form POSTs to ``/api/<path>`` raced against a cancellation handle."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Any = None,
    ) -> None:
        """Initialize with optional settings and a per-request client factory."""
        self._settings = settings or app_settings
        self._client_factory = per_request_factory(
            client_factory,
            fallback=lambda: default_client_factory(self._settings),
            logger=logger,
        )
        self._detached: Set["asyncio.Task[bytes]"] = set()

    @property
    def settings(self) -> Settings:
        """Return the settings this executor was built with."""
        return self._settings

    @property
    def in_flight(self) -> int:
        """Number of detached requests that are still running."""
        return sum(1 for task in self._detached if not task.done())

    @staticmethod
    def validate_port(port: int) -> int:
        """Return ``port`` if it is a usable TCP port, else raise ValueError."""
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port <= 65535:
            raise ValueError(f"invalid port: {port!r}")
        return port

    def api_url(self, port: int, path: str) -> str:
        """Build the API URL for an operation path on the given port."""
        self.validate_port(port)
        return f"http://{self._settings.api_host}:{port}{API_PATH_PREFIX}/{path}"

    async def execute(
        self,
        ctx: CancellationHandle,
        port: int,
        path: str,
        values: Optional[Mapping[str, Optional[str]]] = None,
    ) -> bytes:
        """POST ``values`` to ``path`` and return the raw response body.

        Raises:
            ValueError: ``port`` is not a valid TCP port.
            UnicodeEncodeError: a value cannot be encoded as UTF-8; raised
                before any request starts.
            RequestTimeoutError: ``ctx`` fired before the exchange completed.
            httpx.HTTPError: the transport failed or the body could not be
                read; propagated unchanged.
        """
        url = self.api_url(port, path)
        form = encode_form(values or {})
        body = form_body(form)
        token = operation_ctx.set(path)
        try:
            logger.debug("Requesting %s", url, extra={"fields": sorted(form)})
            return await self._race(ctx, url, body)
        finally:
            operation_ctx.reset(token)

    async def join(self, timeout: Optional[float] = None) -> int:
        """Wait for detached requests to finish and return how many remain."""
        pending = {task for task in self._detached if not task.done()}
        if pending:
            await asyncio.wait(pending, timeout=timeout)
        return self.in_flight

    async def _race(self, ctx: CancellationHandle, url: str, body: bytes) -> bytes:
        loop = asyncio.get_running_loop()
        winner: "asyncio.Future[asyncio.Future[Any]]" = loop.create_future()

        def _claim(task: "asyncio.Future[Any]") -> None:
            if not winner.done():
                winner.set_result(task)

        # The watcher is scheduled first so an already-fired handle always wins.
        watcher = asyncio.ensure_future(ctx.wait())
        fetch = loop.create_task(self._fetch(url, body))
        watcher.add_done_callback(_claim)
        fetch.add_done_callback(_claim)

        try:
            first = await winner
        except asyncio.CancelledError:
            self._detach(fetch)
            raise
        finally:
            watcher.cancel()

        if first is fetch:
            return fetch.result()

        self._detach(fetch)
        if not watcher.cancelled() and watcher.exception() is not None:
            raise watcher.exception()  # type: ignore[misc]
        logger.debug("Cancellation handle fired before %s responded", url)
        raise RequestTimeoutError()

    async def _fetch(self, url: str, body: bytes) -> bytes:
        client = await self._client_factory()
        async with client:
            request = client.build_request(
                "POST",
                url,
                content=body,
                headers={"Content-Type": FORM_CONTENT_TYPE},
            )
            try:
                response = await client.send(request, stream=True)
            except httpx.HTTPError:
                logger.debug("Transport error", extra={"url": url}, exc_info=True)
                raise
            try:
                return await response.aread()
            except httpx.HTTPError:
                logger.debug(
                    "Response body could not be read",
                    extra={"url": url, "status": response.status_code},
                    exc_info=True,
                )
                raise
            finally:
                await response.aclose()

    def _detach(self, task: "asyncio.Task[bytes]") -> None:
        if task.done():
            _consume_detached(task)
            return
        self._detached.add(task)
        task.add_done_callback(self._detached.discard)
        task.add_done_callback(_consume_detached)


def _consume_detached(task: "asyncio.Task[bytes]") -> None:
    """Retrieve the outcome of a request nobody is waiting for."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Detached request failed: %r", exc)
        return
    logger.debug("Detached request finished with %d bytes", len(task.result()))


_default_executor: Optional[RequestExecutor] = None


def default_executor() -> RequestExecutor:
    """Return the shared executor used when a client function is given none."""
    global _default_executor  # pylint: disable=global-statement
    if _default_executor is None:
        _default_executor = RequestExecutor()
    return _default_executor
