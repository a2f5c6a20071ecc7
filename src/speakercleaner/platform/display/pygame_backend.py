"""Pygame-based DisplayBackend with headless (offscreen) support.

This module implements the Canvas and DisplayBackend protocols using
pygame. It's suitable for deterministic, headless tests by setting the
environment variable SDL_VIDEODRIVER=dummy before creating the backend.

Example:
    import os
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    from speakercleaner.platform.display.pygame_backend import PygameDisplayBackend

    backend = PygameDisplayBackend(size=(360, 640))
    canvas = backend.begin_frame()
    canvas.clear((0, 0, 0, 255))
    canvas.arc((180, 300), 100, 0.0, 90.0, width=8)
    backend.end_frame()
    backend.save_png("/tmp/frame.png")
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

from speakercleaner.render.canvas import Canvas, Color, DisplayBackend, Rect

logger = logging.getLogger(__name__)

pg: Any = None
try:  # pragma: no cover - import guard for environments without SDL
    import pygame as _pg

    pg = _pg
except Exception:  # pragma: no cover
    pg = None

# Angular resolution of arcs
_ARC_STEP_DEG = 2.0


def _pygame_color(c: Color) -> Tuple[int, int, int, int]:
    r, g, b, a = c
    return int(r), int(g), int(b), int(a)


@dataclass(slots=True)
class _FontCache:
    fonts: Dict[int, Any]

    def __init__(self) -> None:
        self.fonts = {}

    def get(self, size_px: int) -> Any:
        f = self.fonts.get(size_px)
        if f is None:
            local_pg = pg
            if local_pg is None:
                raise RuntimeError("pygame is not available")
            # Default font for determinism across platforms
            f = local_pg.font.Font(None, size_px)
            self.fonts[size_px] = f
        return f


class _PygameCanvas(Canvas):
    def __init__(self, surface: Any, font_cache: _FontCache) -> None:
        self._surface = surface
        self._font_cache = font_cache

    def clear(self, color: Color) -> None:
        self._surface.fill(_pygame_color(color))

    def line(
        self,
        p0: Tuple[int, int],
        p1: Tuple[int, int],
        width: int = 1,
        color: Color = (255, 255, 255, 255),
    ) -> None:
        pg.draw.line(self._surface, _pygame_color(color), p0, p1, width)

    def circle(
        self,
        center: Tuple[int, int],
        radius: int,
        width: int = 1,
        color: Color = (255, 255, 255, 255),
    ) -> None:
        pg.draw.circle(self._surface, _pygame_color(color), center, radius, width)

    def arc(
        self,
        center: Tuple[int, int],
        radius: int,
        start_deg: float,
        sweep_deg: float,
        width: int = 1,
        color: Color = (255, 255, 255, 255),
    ) -> None:
        if sweep_deg <= 0 or radius <= 0:
            return
        sweep = min(360.0, float(sweep_deg))
        steps = max(1, int(math.ceil(sweep / _ARC_STEP_DEG)))
        cx, cy = center
        pts: list[Tuple[int, int]] = []
        for i in range(steps + 1):
            a = math.radians(start_deg + sweep * i / steps)
            pts.append(
                (
                    int(round(cx + radius * math.sin(a))),
                    int(round(cy - radius * math.cos(a))),
                )
            )
        col = _pygame_color(color)
        pg.draw.lines(self._surface, col, False, pts, max(1, width))
        if width > 2:
            # Round joins/caps; thick pygame polylines leave notches
            for p in pts:
                pg.draw.circle(self._surface, col, p, width // 2, 0)

    def rect(self, rect: Rect, color: Color, width: int = 0) -> None:
        pg.draw.rect(self._surface, _pygame_color(color), pg.Rect(rect), width)

    def text(
        self,
        pos: Tuple[int, int],
        s: str,
        size_px: int = 12,
        color: Color = (255, 255, 255, 255),
    ) -> None:
        font = self._font_cache.get(size_px)
        # Antialiased rendering for consistent appearance
        surf = font.render(s, True, _pygame_color(color))
        self._surface.blit(surf, pos)

    def text_size(self, s: str, size_px: int = 12) -> Tuple[int, int]:
        font = self._font_cache.get(size_px)
        w, h = font.size(s)
        return int(w), int(h)


class PygameDisplayBackend(DisplayBackend):
    """Pygame implementation of DisplayBackend with offscreen surface.

    Frames are drawn to an offscreen surface; when a window was requested
    it is blitted to the window on :meth:`end_frame`.
    """

    def __init__(
        self,
        size: Tuple[int, int] = (360, 640),
        *,
        create_window: bool = False,
        title: str = "Speaker Cleaner",
    ) -> None:
        local_pg = pg
        if local_pg is None:
            raise RuntimeError(
                "pygame is not available. "
                "Ensure it is installed and that SDL is configured."
            )

        # Headless video implies headless audio
        if os.environ.get("SDL_VIDEODRIVER") == "dummy":
            os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

        if not local_pg.get_init():
            local_pg.init()
        if not local_pg.font.get_init():
            local_pg.font.init()

        self._width, self._height = int(size[0]), int(size[1])
        self._window_surface = None
        if create_window and os.environ.get("SDL_VIDEODRIVER") != "dummy":
            try:
                self._window_surface = local_pg.display.set_mode(
                    (self._width, self._height)
                )
                local_pg.display.set_caption(title)
            except Exception:
                logger.warning(
                    "window creation failed; falling back to offscreen. "
                    "Check SDL_VIDEODRIVER and display permissions.",
                    exc_info=True,
                )
                self._window_surface = None

        self._surface = local_pg.Surface(
            (self._width, self._height), flags=local_pg.SRCALPHA
        )
        self._font_cache = _FontCache()

    @property
    def has_window(self) -> bool:
        return self._window_surface is not None

    def size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    def begin_frame(self) -> Canvas:
        return _PygameCanvas(self._surface, self._font_cache)

    def end_frame(self) -> None:
        local_pg = pg
        if self._window_surface is not None and local_pg is not None:
            self._window_surface.blit(self._surface, (0, 0))
            local_pg.display.flip()
        return None

    def save_png(self, path: str) -> None:
        local_pg = pg
        if local_pg is None:  # pragma: no cover - should not happen at runtime
            raise RuntimeError("pygame is not available")
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        local_pg.image.save(self._surface, path)

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """Return the RGBA colour at ``(x, y)`` of the offscreen surface."""
        c = self._surface.get_at((int(x), int(y)))
        return (int(c.r), int(c.g), int(c.b), int(c.a))
