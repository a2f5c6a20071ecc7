"""Periodic callback sources.

The session controller asks a :class:`Scheduler` for "call me every N
seconds" and gets back a :class:`TickHandle` it can cancel. Cancelling is
synchronous: once ``cancel()`` returns the callback is never invoked again,
even if the underlying sleep has already completed.

Two implementations are provided:

- :class:`TimeSourceScheduler` runs an asyncio task on top of a
  :class:`~speakercleaner.core.time.TimeSource`. With a ``SimTimeSource`` the
  ticks follow simulated time exactly.
- :class:`ManualScheduler` never fires on its own; tests call :meth:`fire`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol

from speakercleaner.core.time import TimeSource

__all__ = [
    "TickHandle",
    "Scheduler",
    "TimeSourceScheduler",
    "ManualScheduler",
]

logger = logging.getLogger(__name__)


class TickHandle(Protocol):
    @property
    def cancelled(self) -> bool:
        ...

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def every(self, interval_s: float, callback: Callable[[], None]) -> TickHandle:
        ...


class _TaskHandle:
    __slots__ = ("_cancelled", "_task")

    def __init__(self) -> None:
        self._cancelled = False
        self._task: asyncio.Task[None] | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()


class TimeSourceScheduler:
    """Asyncio-backed scheduler driven by a :class:`TimeSource`.

    Due times are computed from the instant :meth:`every` was called
    (``t0 + n * interval``) rather than from the previous wakeup, so a slow
    callback does not push every later tick back.
    """

    def __init__(self, ts: TimeSource) -> None:
        self._ts = ts

    def every(self, interval_s: float, callback: Callable[[], None]) -> TickHandle:
        if interval_s <= 0:
            raise ValueError(f"interval must be > 0: {interval_s}")
        handle = _TaskHandle()
        loop = asyncio.get_running_loop()
        handle._task = loop.create_task(
            self._run(self._ts.monotonic(), float(interval_s), callback, handle),
            name="periodic_tick",
        )
        return handle

    async def _run(
        self,
        t0: float,
        interval_s: float,
        callback: Callable[[], None],
        handle: _TaskHandle,
    ) -> None:
        n = 0
        try:
            while not handle.cancelled:
                n += 1
                due = t0 + n * interval_s
                await self._ts.sleep(max(0.0, due - self._ts.monotonic()))
                if handle.cancelled:
                    return
                try:
                    callback()
                except Exception:
                    logger.exception("periodic callback failed")
        except asyncio.CancelledError:
            pass


class _ManualHandle:
    __slots__ = ("callback", "interval_s", "_cancelled")

    def __init__(self, interval_s: float, callback: Callable[[], None]) -> None:
        self.interval_s = interval_s
        self.callback = callback
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """Scheduler that fires only when :meth:`fire` is called."""

    def __init__(self) -> None:
        self._handles: list[_ManualHandle] = []

    def every(self, interval_s: float, callback: Callable[[], None]) -> TickHandle:
        h = _ManualHandle(float(interval_s), callback)
        self._handles.append(h)
        return h

    @property
    def active(self) -> list[_ManualHandle]:
        self._handles = [h for h in self._handles if not h.cancelled]
        return list(self._handles)

    def fire(self, times: int = 1) -> int:
        """Invoke every live callback ``times`` times; return calls made."""
        calls = 0
        for _ in range(times):
            for h in self.active:
                # An earlier callback in this round may have cancelled it
                if h.cancelled:
                    continue
                h.callback()
                calls += 1
        return calls
