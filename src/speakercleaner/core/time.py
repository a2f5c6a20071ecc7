"""Clock sources used by the scheduler and the progress animation.

A session only needs two things from a clock: "what time is it" (monotonic
seconds) and "wake me after N seconds". Both a real and a simulated
implementation are provided so that tests can drive a whole 30 second
cleaning session without waiting.

Real-time usage:
    ts = RealTimeSource()
    await ts.sleep(1.0)

Simulated usage:
    ts = SimTimeSource()
    task = asyncio.create_task(ts.sleep(1.0))
    ts.advance(1.0)  # wakes the sleeper
    await task
"""

from __future__ import annotations

import asyncio
import heapq
import time
from typing import Protocol

__all__ = [
    "TimeSource",
    "RealTimeSource",
    "SimTimeSource",
]


class TimeSource(Protocol):
    """Monotonic clock with an awaitable sleep."""

    def monotonic(self) -> float:
        ...

    async def sleep(self, seconds: float) -> None:
        ...


class RealTimeSource:
    """Wall-clock implementation backed by ``time`` and ``asyncio.sleep``."""

    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(max(0.0, seconds))


class SimTimeSource:
    """Deterministic clock that only moves when told to.

    Sleepers are kept in a heap keyed by due time and resolved when
    :meth:`advance` or :meth:`set_time` moves the clock past them. Nothing
    polls; a sleeper is simply a future.
    """

    def __init__(self, *, start: float = 0.0) -> None:
        self._now: float = float(start)
        # (due, seq, future); seq breaks ties so futures are never compared
        self._sleepers: list[tuple[float, int, asyncio.Future[None]]] = []
        self._seq: int = 0

    def monotonic(self) -> float:
        return self._now

    def advance(self, dt: float) -> None:
        """Move the clock forward by ``dt`` seconds and wake due sleepers."""
        if dt < 0:
            raise ValueError(f"Cannot advance time backwards: dt={dt}")
        self._now += dt
        self._wake_due()

    def set_time(self, t: float) -> None:
        """Jump to absolute time ``t`` (forward only)."""
        if t < self._now:
            raise ValueError(f"Cannot set time backwards: {t} < {self._now}")
        self._now = float(t)
        self._wake_due()

    async def sleep(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError(f"Sleep duration must be non-negative: {seconds}")
        if seconds == 0:
            await asyncio.sleep(0)
            return
        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._seq += 1
        heapq.heappush(self._sleepers, (self._now + seconds, self._seq, fut))
        await fut

    def next_due(self) -> float | None:
        """Return the due time of the earliest pending sleeper, if any."""
        while self._sleepers and self._sleepers[0][2].done():
            heapq.heappop(self._sleepers)
        if not self._sleepers:
            return None
        return self._sleepers[0][0]

    def _wake_due(self) -> None:
        while self._sleepers and self._sleepers[0][0] <= self._now:
            _due, _seq, fut = heapq.heappop(self._sleepers)
            # Cancelled sleepers already have a result
            if not fut.done():
                fut.set_result(None)
