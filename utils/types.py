"""Shared typing helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from executor import RequestExecutor


class CancellationHandle(Protocol):
    """Protocol for caller-supplied cancellation handles."""

    def done(self) -> bool:
        """Return True once the handle has fired."""

    async def wait(self) -> None:
        """Suspend until the handle has fired."""


class ClientFunc(Protocol):
    """Protocol for the per-operation request functions built by the catalog."""

    async def __call__(
        self,
        ctx: CancellationHandle,
        port: int,
        *,
        executor: Optional["RequestExecutor"] = None,
    ) -> bytes:
        """Perform one request and return the raw response body."""
