"""Cancellation handles for client function invocations.

A :class:`Context` is a signal source with a "done" event and an optional
deadline. It is owned by the caller and only observed by the executor::

    with Context.with_timeout(5.0) as ctx:
        payload = await get_boards()(ctx, 7410)

Children created with :meth:`Context.with_cancel` or
:meth:`Context.with_timeout` are done whenever their parent is, and a child
deadline never outlives the parent's.
"""

from __future__ import annotations

import asyncio
import time
import weakref
from typing import Optional


class ContextError(Exception):
    """Base class for the reason a context became done."""


class Cancelled(ContextError):
    """The context was cancelled explicitly."""

    def __init__(self) -> None:
        super().__init__("context cancelled")


class DeadlineExceeded(ContextError):
    """The context deadline passed."""

    def __init__(self) -> None:
        super().__init__("context deadline exceeded")


class Context:
    """Cooperative cancellation handle with an optional monotonic deadline."""

    def __init__(
        self,
        parent: Optional["Context"] = None,
        deadline: Optional[float] = None,
    ) -> None:
        self._event = asyncio.Event()
        self._err: Optional[ContextError] = None
        self._children: "weakref.WeakSet[Context]" = weakref.WeakSet()
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline
        if parent is not None:
            parent._children.add(self)
            if parent.done():
                self._finish(parent.err or Cancelled())

    @classmethod
    def background(cls) -> "Context":
        """Return a context that is never done unless cancelled."""
        return cls()

    @classmethod
    def with_cancel(cls, parent: Optional["Context"] = None) -> "Context":
        """Return a child context cancelled by ``cancel()`` or by its parent."""
        return cls(parent=parent)

    @classmethod
    def with_timeout(cls, seconds: float, parent: Optional["Context"] = None) -> "Context":
        """Return a child context that expires ``seconds`` from now."""
        return cls(parent=parent, deadline=time.monotonic() + seconds)

    def child(self, timeout: Optional[float] = None) -> "Context":
        """Derive a child of this context, optionally with its own timeout."""
        if timeout is None:
            return Context.with_cancel(parent=self)
        return Context.with_timeout(timeout, parent=self)

    @property
    def deadline(self) -> Optional[float]:
        """Monotonic deadline, or None when the context has none."""
        return self._deadline

    @property
    def err(self) -> Optional[ContextError]:
        """Why the context is done, or None while it is still live."""
        if self._err is None and self._expired():
            self._finish(DeadlineExceeded())
        return self._err

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline (never negative), or None."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def done(self) -> bool:
        """Return True once the context is cancelled or past its deadline."""
        return self.err is not None

    def cancel(self) -> None:
        """Cancel this context and all of its children. Idempotent."""
        self._finish(Cancelled())

    async def wait(self) -> None:
        """Suspend until the context is done."""
        if self.done():
            return
        remaining = self.remaining()
        if remaining is None:
            await self._event.wait()
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=remaining)
        except asyncio.TimeoutError:
            self._finish(DeadlineExceeded())

    def _expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def _finish(self, err: ContextError) -> None:
        if self._err is not None:
            return
        self._err = err
        self._event.set()
        for child in list(self._children):
            child._finish(err)

    def __enter__(self) -> "Context":
        return self

    def __exit__(self, *args) -> None:
        self.cancel()

    def __repr__(self) -> str:
        state = type(self._err).__name__ if self._err is not None else "live"
        return f"<Context {state} deadline={self._deadline}>"
