"""Precise unit tests for RequestContext.

Tests focus on deadline expiry, explicit cancellation, parent/child
propagation, and prompt unblocking of ``run()``.
"""

from __future__ import annotations

import asyncio
import gc
import time

import pytest

from laakhay.cloudflare.core.context import RequestContext
from laakhay.cloudflare.core.exceptions import (
    CloudflareError,
    DeadlineExceededError,
    RequestCancelledError,
)


class TestRequestContextState:
    """Test context state without awaiting anything."""

    def test_background_never_expires(self):
        """Test background context has no deadline."""
        ctx = RequestContext.background()
        assert ctx.deadline is None
        assert ctx.remaining() is None
        assert not ctx.done
        assert ctx.error() is None

    def test_with_timeout_sets_deadline(self):
        """Test with_timeout computes a monotonic deadline."""
        before = time.monotonic()
        ctx = RequestContext.with_timeout(5.0)
        assert before + 5.0 <= ctx.deadline <= time.monotonic() + 5.0
        assert 0 < ctx.remaining() <= 5.0

    def test_past_deadline_is_expired(self):
        """Test a deadline in the past reports DeadlineExceededError."""
        ctx = RequestContext.with_deadline(time.monotonic() - 1)
        assert ctx.expired
        assert ctx.remaining() == 0.0
        assert isinstance(ctx.error(), DeadlineExceededError)
        with pytest.raises(TimeoutError):
            ctx.raise_if_done()

    def test_cancel_is_idempotent(self):
        """Test cancel() can be called repeatedly."""
        ctx = RequestContext.background()
        ctx.cancel()
        ctx.cancel()
        assert ctx.cancelled
        assert isinstance(ctx.error(), RequestCancelledError)

    def test_cancellation_reported_before_expiry(self):
        """Test cancelled wins when a context is both cancelled and expired."""
        ctx = RequestContext.with_deadline(time.monotonic() - 1)
        ctx.cancel()
        assert isinstance(ctx.error(), RequestCancelledError)

    def test_with_block_cancels_on_exit(self):
        """Test leaving a with block cancels the context."""
        with RequestContext.with_timeout(10) as ctx:
            assert not ctx.done
        assert ctx.cancelled


class TestRequestContextTree:
    """Test parent/child propagation."""

    def test_child_inherits_earlier_deadline(self):
        """Test child never outlives its parent."""
        parent = RequestContext.with_timeout(1.0)
        child = parent.child(timeout=60.0)
        assert child.deadline == parent.deadline

    def test_child_can_tighten_deadline(self):
        """Test child timeout shorter than the parent's wins."""
        parent = RequestContext.with_timeout(60.0)
        child = parent.child(timeout=1.0)
        assert child.deadline < parent.deadline

    def test_parent_cancel_cancels_children(self):
        """Test cancelling a parent cancels the whole subtree."""
        parent = RequestContext.background()
        child = parent.child()
        grandchild = child.child()
        parent.cancel()
        assert child.cancelled
        assert grandchild.cancelled

    def test_child_cancel_leaves_parent_and_siblings(self):
        """Test cancelling one child does not affect others."""
        parent = RequestContext.background()
        first = parent.child()
        second = parent.child()
        first.cancel()
        assert not parent.cancelled
        assert not second.cancelled

    def test_child_of_cancelled_parent_starts_cancelled(self):
        """Test deriving from a cancelled parent yields a cancelled child."""
        parent = RequestContext.background()
        parent.cancel()
        assert parent.child().cancelled

    def test_finished_children_are_released(self):
        """Test children closed by a with block do not accumulate on the parent."""
        root = RequestContext.background()
        for _ in range(1000):
            with RequestContext.with_timeout(5, parent=root):
                pass
        assert len(root._children) == 0

    def test_cancelled_child_unlinks_from_parent(self):
        """Test a cancelled child is dropped while live siblings stay attached."""
        parent = RequestContext.background()
        first = parent.child()
        second = parent.child()
        first.cancel()
        assert set(parent._children) == {second}
        parent.cancel()
        assert second.cancelled

    def test_unreferenced_child_is_not_kept_alive(self):
        """Test the parent does not hold a child nobody else references."""
        parent = RequestContext.background()
        parent.child()
        gc.collect()
        assert len(parent._children) == 0


class TestRequestContextRun:
    """Test run() races the awaitable against the context."""

    @pytest.mark.asyncio
    async def test_run_returns_result(self):
        """Test run() returns the awaitable's result when it finishes first."""

        async def work():
            return 42

        assert await RequestContext.with_timeout(1.0).run(work()) == 42

    @pytest.mark.asyncio
    async def test_run_propagates_exceptions(self):
        """Test run() re-raises the awaitable's own exception."""

        async def work():
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await RequestContext.background().run(work())

    @pytest.mark.asyncio
    async def test_run_unblocks_on_deadline(self):
        """Test run() returns at the deadline, not when the work finishes."""
        ctx = RequestContext.with_timeout(0.1)
        start = time.monotonic()
        with pytest.raises(DeadlineExceededError):
            await ctx.run(asyncio.sleep(5))
        assert time.monotonic() - start < 1.0

    @pytest.mark.asyncio
    async def test_run_cancels_the_work(self):
        """Test the underlying task is cancelled when the context wins."""
        cancelled = asyncio.Event()

        async def work():
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        with pytest.raises(DeadlineExceededError):
            await RequestContext.with_timeout(0.05).run(work())
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_run_unblocks_on_cancel(self):
        """Test explicit cancellation from another task unblocks run()."""
        ctx = RequestContext.background()

        async def cancel_soon():
            await asyncio.sleep(0.05)
            ctx.cancel()

        canceller = asyncio.create_task(cancel_soon())
        start = time.monotonic()
        with pytest.raises(RequestCancelledError):
            await ctx.run(asyncio.sleep(5))
        assert time.monotonic() - start < 1.0
        await canceller

    @pytest.mark.asyncio
    async def test_run_on_done_context_fails_immediately(self):
        """Test an already-expired context never starts the work."""
        started = False

        async def work():
            nonlocal started
            started = True

        ctx = RequestContext.with_deadline(time.monotonic() - 1)
        with pytest.raises(DeadlineExceededError):
            await ctx.run(work())
        assert not started

    @pytest.mark.asyncio
    async def test_cancelling_one_context_leaves_another_running(self):
        """Test cancellation is scoped to one context."""
        a = RequestContext.background()
        b = RequestContext.background()

        async def work():
            await asyncio.sleep(0.1)
            return "b done"

        task_a = asyncio.create_task(a.run(asyncio.sleep(5)))
        task_b = asyncio.create_task(b.run(work()))
        await asyncio.sleep(0.01)
        a.cancel()

        with pytest.raises(RequestCancelledError):
            await task_a
        assert await task_b == "b done"

    @pytest.mark.asyncio
    async def test_sleep_bounded_by_deadline(self):
        """Test sleep() raises at the deadline."""
        ctx = RequestContext.with_timeout(0.05)
        with pytest.raises(CloudflareError):
            await ctx.sleep(5)

    @pytest.mark.asyncio
    async def test_sleep_zero_checks_state(self):
        """Test sleep(0) still reports a cancelled context."""
        ctx = RequestContext.background()
        await ctx.sleep(0)
        ctx.cancel()
        with pytest.raises(RequestCancelledError):
            await ctx.sleep(0)
