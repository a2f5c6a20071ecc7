"""Cleaning session state machine.

A :class:`SessionController` owns exactly one :class:`CleaningSession`. It
plays the cleaning tone, counts down from :data:`SESSION_DURATION_S` once per
second and emits typed events (see :mod:`speakercleaner.core.events`) to its
listeners.

States and transitions::

    IDLE    --start()-------------------> RUNNING
    RUNNING --tick() [remaining > 0]----> RUNNING
    RUNNING --tick() [remaining == 0]---> IDLE
    RUNNING --cancel()/on_backgrounded()> IDLE

Every path back to IDLE goes through ``_stop()`` which leaves
``remaining_seconds == SESSION_DURATION_S``, no audio handle and no tick
schedule.

Usage:

    controller = SessionController(
        scheduler=TimeSourceScheduler(RealTimeSource()),
        audio=PygameAudioPlayer(),
    )
    controller.subscribe(screen.handle_event)
    controller.start()
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from speakercleaner.core.events import (
    EndReason,
    SessionEnded,
    SessionEvent,
    SessionStarted,
    SessionTick,
)
from speakercleaner.core.scheduler import Scheduler, TickHandle
from speakercleaner.platform.audio.pygame_audio import (
    AudioHandle,
    AudioPlaybackError,
    AudioPlayer,
    default_sound_path,
)

__all__ = [
    "SESSION_DURATION_S",
    "TICK_INTERVAL_S",
    "SessionState",
    "CleaningSession",
    "SessionController",
]

logger = logging.getLogger(__name__)

SESSION_DURATION_S = 30
TICK_INTERVAL_S = 1.0

Listener = Callable[[SessionEvent], None]


class SessionState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(slots=True)
class CleaningSession:
    remaining_seconds: int = SESSION_DURATION_S
    is_running: bool = False
    audio_handle: AudioHandle | None = None

    def reset(self) -> None:
        self.remaining_seconds = SESSION_DURATION_S
        self.is_running = False
        self.audio_handle = None


class SessionController:
    """Owns the countdown, the tick schedule and the playing sound."""

    def __init__(
        self,
        *,
        scheduler: Scheduler,
        audio: AudioPlayer,
        sound_path: Path | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._audio = audio
        self._sound_path = sound_path or default_sound_path()
        self._session = CleaningSession()
        self._ticker: TickHandle | None = None
        self._listeners: list[Listener] = []

    # Introspection -------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return SessionState.RUNNING if self._session.is_running else SessionState.IDLE

    @property
    def is_running(self) -> bool:
        return self._session.is_running

    @property
    def remaining_seconds(self) -> int:
        return self._session.remaining_seconds

    @property
    def has_audio(self) -> bool:
        return self._session.audio_handle is not None

    # Listeners -----------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        if listener not in self._listeners:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, event: SessionEvent) -> None:
        for cb in list(self._listeners):
            try:
                cb(event)
            except Exception:
                logger.exception("session listener %r failed on %r", cb, event)

    # Operations ----------------------------------------------------------
    def start(self) -> None:
        """Begin a session. Ignored while one is already running."""
        if self._session.is_running:
            logger.debug("start ignored: session already running")
            return

        try:
            self._session.audio_handle = self._audio.play(self._sound_path)
        except AudioPlaybackError as e:
            # Countdown proceeds silently
            logger.warning("cleaning sound unavailable: %s", e)
            self._session.audio_handle = None

        self._session.remaining_seconds = SESSION_DURATION_S
        self._session.is_running = True
        try:
            self._ticker = self._scheduler.every(TICK_INTERVAL_S, self.tick)
        except Exception:
            # Roll back: no sound without a countdown
            handle = self._session.audio_handle
            if handle is not None:
                handle.stop()
            self._session.reset()
            raise
        logger.info("cleaning session started (%ds)", SESSION_DURATION_S)
        self._emit(SessionStarted(duration_s=SESSION_DURATION_S))

    def tick(self) -> None:
        """Advance the countdown by one second."""
        if not self._session.is_running:
            return
        self._session.remaining_seconds = max(0, self._session.remaining_seconds - 1)
        remaining = self._session.remaining_seconds
        logger.debug("tick: %ds remaining", remaining)
        self._emit(SessionTick(remaining=remaining))
        # A listener may already have ended or restarted the session
        if self._session.is_running and self._session.remaining_seconds == 0:
            self._stop(EndReason.COMPLETED)

    def cancel(self) -> None:
        """Stop the running session now. No-op when idle."""
        if self._session.is_running:
            self._stop(EndReason.CANCELLED)

    def on_backgrounded(self) -> None:
        """Host left the foreground; same effect as :meth:`cancel`."""
        if self._session.is_running:
            self._stop(EndReason.BACKGROUNDED)

    def _stop(self, reason: EndReason) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
        handle = self._session.audio_handle
        if handle is not None:
            try:
                handle.stop()
            except Exception:
                logger.exception("failed to stop cleaning sound")
        self._session.reset()
        logger.info("cleaning session ended: %s", reason.value)
        self._emit(SessionEnded(reason=reason))
