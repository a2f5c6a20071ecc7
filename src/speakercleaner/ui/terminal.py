"""Text presenter for headless runs.

Consumes session events from an :class:`~speakercleaner.core.events.EventBus`
subscription and prints one line per event. It has no controls; the
headless runner starts and stops the session itself.
"""

from __future__ import annotations

import sys
from typing import TextIO

from speakercleaner.core.events import (
    EndReason,
    SessionEnded,
    SessionEvent,
    SessionStarted,
    SessionTick,
    Subscription,
    decode_event,
)

_END_MESSAGES = {
    EndReason.COMPLETED: "Cleaning complete",
    EndReason.CANCELLED: "Cleaning cancelled",
    EndReason.BACKGROUNDED: "Cleaning stopped (app left the foreground)",
}


def format_event(event: SessionEvent) -> str:
    if isinstance(event, SessionStarted):
        return f"Cleaning started ({event.duration_s}s)"
    if isinstance(event, SessionTick):
        return f"  {event.text:>2}s remaining"
    if isinstance(event, SessionEnded):
        return _END_MESSAGES[event.reason]
    raise TypeError(f"not a session event: {event!r}")


class TerminalPresenter:
    def __init__(self, sub: Subscription, *, out: TextIO | None = None) -> None:
        self._sub = sub
        self._out = out
        self.events: list[SessionEvent] = []

    async def run(self) -> None:
        """Print events until the subscription ends."""
        async for env in self._sub:
            event = decode_event(env.payload)
            self.events.append(event)
            out = self._out or sys.stdout
            print(format_event(event), file=out, flush=True)
