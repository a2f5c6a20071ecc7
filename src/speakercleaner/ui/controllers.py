"""
Interactive UI controller for the speaker cleaner.

Provides a UiController that owns the frame loop: each frame it drains
input, routes taps and keys to the cleaner screen or the session controller,
maps window background transitions to ``on_backgrounded()`` and renders the
screen.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Protocol

from speakercleaner.core.session import SessionController
from speakercleaner.core.time import TimeSource
from speakercleaner.platform.input.pygame_input import UiEvent
from speakercleaner.render.canvas import DisplayBackend
from speakercleaner.ui.screen import CleanerScreen

logger = logging.getLogger(__name__)

_START_KEYS = frozenset({"space", "return", "enter"})
_CANCEL_KEYS = frozenset({"c", "backspace"})
_QUIT_KEYS = frozenset({"q", "escape"})


class InputSource(Protocol):
    def pump(self) -> Iterable[UiEvent]:
        ...


@dataclass(slots=True)
class UiConfig:
    target_fps: float = 30.0


class UiController:
    """Owns frame loop and input handling for the cleaner screen."""

    def __init__(
        self,
        *,
        display: DisplayBackend,
        screen: CleanerScreen,
        session: SessionController,
        ts: TimeSource,
        cfg: UiConfig,
        input_source: InputSource | None = None,
    ) -> None:
        self._display = display
        self._screen = screen
        self._session = session
        self._ts = ts
        self._cfg = cfg
        self._input = input_source
        self._running: bool = False
        self._frames: int = 0

        self._screen.bind(start=self._session.start, cancel=self._session.cancel)
        self._unsubscribe = self._session.subscribe(self._screen.handle_event)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def frames(self) -> int:
        return self._frames

    async def run(self) -> None:
        self._running = True
        dt_target = 1.0 / max(1e-6, float(self._cfg.target_fps))
        try:
            while self._running:
                t0 = self._ts.monotonic()
                if self._input is not None:
                    self.dispatch(self._input.pump())
                if not self._running:
                    break
                self.render()

                # Frame pacing
                remaining = dt_target - max(0.0, self._ts.monotonic() - t0)
                if remaining > 0:
                    await self._ts.sleep(remaining)
                else:
                    # Yield to avoid starving the tick task
                    await asyncio.sleep(0)
        except asyncio.CancelledError:  # pragma: no cover - cooperative cancel
            pass
        finally:
            self._running = False
            # Leaving the UI ends any session in progress
            self._session.on_backgrounded()

    def render(self) -> None:
        canvas = self._display.begin_frame()
        self._screen.draw(canvas)
        self._display.end_frame()
        self._frames += 1

    async def stop(self) -> None:
        self._running = False

    def close(self) -> None:
        """Detach the screen from the session."""
        self._unsubscribe()

    # Input ---------------------------------------------------------------
    def dispatch(self, events: Iterable[UiEvent | Any]) -> None:
        for ev in events:
            if ev.type == "quit":
                self._running = False
            elif ev.type == "background":
                logger.info("window left the foreground")
                self._session.on_backgrounded()
            elif ev.type == "tap":
                self._screen.tap(int(ev.x), int(ev.y))
            elif ev.type == "key":
                self._on_key(str(ev.key).lower())

    def _on_key(self, key: str) -> None:
        if key in _START_KEYS:
            self._session.start()
        elif key in _CANCEL_KEYS:
            self._session.cancel()
        elif key in _QUIT_KEYS:
            self._running = False
