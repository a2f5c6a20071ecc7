"""Pygame InputBackend translating SDL events into UiEvents.

Mouse releases become taps, key presses carry the pygame key name, and
window minimise/hide or mobile background transitions become a single
``background`` event. In headless mode (dummy video) pygame delivers no
events on its own; tests post them with ``pygame.event.post``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generator

pg: Any = None
try:  # pragma: no cover - optional dependency in CI
    import pygame as _pg

    pg = _pg
except Exception:  # pragma: no cover
    pg = None

# Event type names that mean "no longer in the foreground". Looked up by
# name because older SDL builds lack some of them.
_BACKGROUND_EVENT_NAMES = (
    "WINDOWMINIMIZED",
    "WINDOWHIDDEN",
    "APP_WILLENTERBACKGROUND",
    "APP_DIDENTERBACKGROUND",
)


@dataclass(slots=True)
class UiEvent:
    type: str  # "tap" | "key" | "background" | "quit"
    x: int = 0
    y: int = 0
    ts: float = 0.0
    key: str = ""


class PygameInputBackend:
    """Collects pygame events and emits UiEvents.

    Use pump() once per frame to drain the SDL queue.
    """

    def __init__(self) -> None:
        if pg is None:
            raise RuntimeError("pygame not available for input backend")
        self._background_types = frozenset(
            t
            for t in (getattr(pg, name, None) for name in _BACKGROUND_EVENT_NAMES)
            if t is not None
        )

    @staticmethod
    def _now() -> float:
        return float(pg.time.get_ticks()) / 1000.0

    def pump(self) -> Generator[UiEvent, None, None]:
        for ev in pg.event.get():
            if ev.type == pg.QUIT:
                yield UiEvent("quit", ts=self._now())
            elif ev.type == pg.MOUSEBUTTONUP and getattr(ev, "button", 1) == 1:
                yield UiEvent("tap", int(ev.pos[0]), int(ev.pos[1]), self._now())
            elif ev.type == pg.KEYDOWN:
                yield UiEvent("key", ts=self._now(), key=pg.key.name(ev.key))
            elif ev.type in self._background_types:
                yield UiEvent("background", ts=self._now())
