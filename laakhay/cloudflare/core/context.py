"""Cancellable request context with an optional deadline.

Architecture:
    A RequestContext is created by the caller and handed to a single API
    call. The executor runs the network round-trip under ``ctx.run()``, which
    races the request against the context's deadline and its cancel signal.
    Whichever fires first wins: the request task is cancelled and a
    distinguished error is raised without waiting for the server.

    Contexts form a tree. A child inherits the earlier of its own and its
    parent's deadline, and cancelling a parent cancels every child.

Example:
    >>> with RequestContext.with_timeout(5.0) as ctx:
    ...     user = await api.user_details(ctx=ctx)
"""

from __future__ import annotations

import asyncio
import time
import weakref
from collections.abc import Awaitable
from typing import Any, TypeVar

from .exceptions import CloudflareError, DeadlineExceededError, RequestCancelledError

T = TypeVar("T")


class RequestContext:
    """Cancellation and deadline scope for one API call."""

    def __init__(
        self,
        *,
        deadline: float | None = None,
        parent: RequestContext | None = None,
    ) -> None:
        """Initialize context.

        Args:
            deadline: Absolute deadline on the ``time.monotonic()`` clock
            parent: Optional parent whose deadline and cancellation apply too
        """
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline
        self._cancelled = asyncio.Event()
        self._parent: RequestContext | None = None
        # Held weakly; a cancelled child also unlinks itself
        self._children: weakref.WeakSet[RequestContext] = weakref.WeakSet()
        if parent is not None:
            if parent.cancelled:
                self._cancelled.set()
            else:
                self._parent = parent
                parent._children.add(self)

    @classmethod
    def background(cls) -> RequestContext:
        """Context that never expires and is only cancelled explicitly."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float, parent: RequestContext | None = None) -> RequestContext:
        """Context expiring ``seconds`` from now."""
        return cls(deadline=time.monotonic() + seconds, parent=parent)

    @classmethod
    def with_deadline(cls, deadline: float, parent: RequestContext | None = None) -> RequestContext:
        """Context expiring at a ``time.monotonic()`` timestamp."""
        return cls(deadline=deadline, parent=parent)

    def child(self, timeout: float | None = None) -> RequestContext:
        """Derive a child context, optionally with a tighter timeout."""
        deadline = None if timeout is None else time.monotonic() + timeout
        return RequestContext(deadline=deadline, parent=self)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        """Cancel this context and all of its children. Idempotent."""
        if self._cancelled.is_set():
            return
        self._cancelled.set()
        if self._parent is not None:
            self._parent._children.discard(self)
            self._parent = None
        children = list(self._children)
        self._children.clear()
        for c in children:
            c.cancel()

    def error(self) -> CloudflareError | None:
        """Return the error describing why the context is done, if it is."""
        if self.cancelled:
            return RequestCancelledError()
        if self.expired:
            return DeadlineExceededError()
        return None

    def raise_if_done(self) -> None:
        err = self.error()
        if err is not None:
            raise err

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` bounded by this context.

        Raises:
            DeadlineExceededError: If the deadline elapses first
            RequestCancelledError: If the context is cancelled first
        """
        err = self.error()
        if err is not None:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise err

        task: asyncio.Future[T] = asyncio.ensure_future(awaitable)
        cancel_waiter = asyncio.ensure_future(self._cancelled.wait())
        try:
            done, _ = await asyncio.wait(
                {task, cancel_waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            cancel_waiter.cancel()
            if not task.done():
                task.cancel()

        if task in done:
            return task.result()

        # Let the request task observe its cancellation before reporting
        await asyncio.wait({task})
        err = self.error()
        if err is None:
            err = DeadlineExceededError()
        raise err

    async def sleep(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless the context ends first."""
        if seconds <= 0:
            self.raise_if_done()
            return
        await self.run(asyncio.sleep(seconds))

    def __enter__(self) -> RequestContext:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cancel()

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "expired" if self.expired else "active"
        return f"RequestContext(state={state}, remaining={self.remaining()})"
