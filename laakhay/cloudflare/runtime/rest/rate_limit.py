"""Request spacing for a single client."""

from __future__ import annotations

import time

from ...core.context import RequestContext
from ...core.exceptions import DeadlineExceededError, RequestCancelledError


class RateLimiter:
    """Spaces requests evenly at ``rate`` requests per second (burst of one).

    A slot is reserved before waiting, so concurrent callers queue up behind
    each other instead of all waking at once. A caller whose context ends
    while waiting gives its slot back if no later caller has queued behind it.
    """

    def __init__(self, rate: float | None) -> None:
        self.rate = rate
        self._interval = 1.0 / rate if rate else 0.0
        self._next_slot = 0.0

    def reserve(self) -> float:
        """Reserve the next slot and return the delay until it opens."""
        if not self._interval:
            return 0.0
        now = time.monotonic()
        slot = max(now, self._next_slot)
        self._next_slot = slot + self._interval
        return slot - now

    async def wait(self, ctx: RequestContext) -> None:
        """Wait for the next slot, bounded by ``ctx``."""
        delay = self.reserve()
        booked = self._next_slot
        try:
            await ctx.sleep(delay)
        except (DeadlineExceededError, RequestCancelledError):
            if self._interval and self._next_slot == booked:
                self._next_slot = booked - self._interval
            raise
