"""The cleaner's single screen.

:class:`CleanerScreen` is a passive listener: it never changes session state
itself. Session events toggle which elements are visible and update the
countdown text; taps on its buttons call whatever callbacks were bound with
:meth:`CleanerScreen.bind` (normally the controller's ``start``/``cancel``).

Idle presentation shows the title, a hint to press Start and the Start
button. Running presentation hides Start and shows the countdown, the
progress ring, an animated sound wave, a "keep the app open" hint and the
Cancel button. The ring fills over the session duration using the clock the
screen was built with, independently of the per-second ticks.
"""

from __future__ import annotations

import math
from typing import Any, Callable, List, Tuple

from speakercleaner.core.events import (
    SessionEnded,
    SessionEvent,
    SessionStarted,
    SessionTick,
)
from speakercleaner.core.session import SESSION_DURATION_S
from speakercleaner.core.time import TimeSource
from speakercleaner.render.canvas import Canvas, Color
from speakercleaner.settings.values import LAYOUT, TEXT, THEME, color
from speakercleaner.ui.buttons import Button

# Oscillations per second of the sound-wave bars
_WAVE_HZ = 1.5


class CleanerScreen:
    def __init__(
        self,
        size: Tuple[int, int],
        *,
        ts: TimeSource,
        font_px: int = 20,
        theme: dict[str, Any] | None = None,
        layout: dict[str, Any] | None = None,
        text: dict[str, str] | None = None,
    ) -> None:
        self.size = (int(size[0]), int(size[1]))
        self._ts = ts
        self.font_px = int(font_px)
        self._layout = dict(LAYOUT if layout is None else layout)
        self._text = dict(TEXT if text is None else text)
        colors = (THEME if theme is None else theme).get("colors", {})
        self._bg: Color = color(colors.get("background"), (0, 0, 0, 255))
        self._title_fg: Color = color(colors.get("title"), (255, 255, 255, 255))
        self._subtitle_fg: Color = color(colors.get("subtitle"), (160, 160, 160, 255))
        self._countdown_fg: Color = color(colors.get("countdown"), (255, 255, 255, 255))
        self._ring_track: Color = color(colors.get("ring_track"), (60, 60, 60, 255))
        self._ring_fg: Color = color(colors.get("ring_progress"), (0, 160, 255, 255))
        self._hint_fg: Color = color(colors.get("hint"), (200, 200, 200, 255))
        self._wave_fg: Color = color(colors.get("wave"), (0, 160, 255, 255))

        rect = self._button_rect()
        border = int(self._layout.get("button_border_px", 2))
        press_scale = float(self._layout.get("button_press_scale", 0.92))
        self.start_button = Button(
            self._text.get("start", "Start"),
            rect,
            colors=colors.get("start_button"),
            border_width=border,
            press_scale=press_scale,
        )
        self.cancel_button = Button(
            self._text.get("cancel", "Cancel"),
            rect,
            colors=colors.get("cancel_button"),
            border_width=border,
            press_scale=press_scale,
        )

        self.countdown_text = str(SESSION_DURATION_S)
        self._anim_t0: float | None = None
        self._anim_duration_s = float(SESSION_DURATION_S)
        self.hint_text = ""
        self._show_idle()

    # Wiring --------------------------------------------------------------
    def bind(
        self,
        *,
        start: Callable[[], None] | None = None,
        cancel: Callable[[], None] | None = None,
    ) -> None:
        """Attach the callbacks invoked by the Start/Cancel buttons."""
        self.start_button.action = start
        self.cancel_button.action = cancel

    # Session events ------------------------------------------------------
    def handle_event(self, event: SessionEvent) -> None:
        if isinstance(event, SessionStarted):
            self.on_session_started(event.duration_s)
        elif isinstance(event, SessionTick):
            self.on_tick(event.text)
        elif isinstance(event, SessionEnded):
            self.on_session_ended()

    def on_session_started(self, duration_s: int = SESSION_DURATION_S) -> None:
        self.countdown_text = str(duration_s)
        self._anim_duration_s = float(max(1, duration_s))
        self._anim_t0 = self._ts.monotonic()
        self.start_button.visible = False
        self.cancel_button.visible = True
        self.show_countdown = True
        self.show_progress = True
        self.hint_text = self._text.get("running_hint", "")

    def on_tick(self, remaining_text: str) -> None:
        self.countdown_text = remaining_text

    def on_session_ended(self) -> None:
        self._show_idle()

    def _show_idle(self) -> None:
        self._anim_t0 = None
        self.countdown_text = str(SESSION_DURATION_S)
        self.start_button.visible = True
        self.cancel_button.visible = False
        self.show_countdown = False
        self.show_progress = False
        self.hint_text = self._text.get("idle_hint", "")

    # Queries -------------------------------------------------------------
    @property
    def running_presentation(self) -> bool:
        return self.show_progress

    def progress(self) -> float:
        """Fraction of the ring that is filled, 0.0 when idle."""
        if self._anim_t0 is None:
            return 0.0
        elapsed = self._ts.monotonic() - self._anim_t0
        return min(1.0, max(0.0, elapsed / self._anim_duration_s))

    def wave_levels(self) -> List[float]:
        """Heights of the sound-wave bars as fractions; empty when idle."""
        if self._anim_t0 is None:
            return []
        n = max(1, int(self._layout.get("wave_bars", 9)))
        t = self._ts.monotonic() - self._anim_t0
        levels: List[float] = []
        for i in range(n):
            phase = 2.0 * math.pi * (_WAVE_HZ * t + i / n)
            levels.append(0.2 + 0.8 * abs(math.sin(phase)))
        return levels

    def tap(self, x: int, y: int) -> bool:
        """Press the visible button under ``(x, y)``; True if one was hit."""
        for b in (self.start_button, self.cancel_button):
            if b.visible and b.contains(x, y):
                return b.press(self._ts.monotonic())
        return False

    # Layout / drawing ----------------------------------------------------
    def _button_rect(self) -> Tuple[int, int, int, int]:
        w, h = self.size
        bw = int(w * float(self._layout.get("button_width", 0.6)))
        bh = int(self._layout.get("button_height_px", 56))
        cy = int(h * float(self._layout.get("button_y", 0.8)))
        return ((w - bw) // 2, cy - bh // 2, bw, bh)

    def _ring_geometry(self) -> Tuple[Tuple[int, int], int, int]:
        w, h = self.size
        center = (w // 2, int(h * float(self._layout.get("ring_center_y", 0.45))))
        radius = int(min(w, h) * float(self._layout.get("ring_radius", 0.3)))
        width = max(1, int(self._layout.get("ring_width_px", 10)))
        return center, radius, width

    def _draw_wave(self, canvas: Canvas) -> None:
        levels = self.wave_levels()
        if not levels:
            return
        w, h = self.size
        span = int(w * float(self._layout.get("wave_width", 0.5)))
        max_h = int(self._layout.get("wave_height_px", 32))
        cy = int(h * float(self._layout.get("wave_y", 0.93)))
        slot = max(2, span // len(levels))
        bar_w = max(1, slot // 2)
        x0 = (w - slot * len(levels)) // 2 + (slot - bar_w) // 2
        for i, level in enumerate(levels):
            bh = max(1, int(max_h * level))
            canvas.rect((x0 + i * slot, cy - bh // 2, bar_w, bh), self._wave_fg)

    def _centered_text(
        self, canvas: Canvas, s: str, cy: int, size_px: int, fg: Color
    ) -> None:
        try:
            tw, th = canvas.text_size(s, size_px)
        except Exception:
            tw, th = int(size_px * 0.6) * len(s), size_px
        canvas.text(((self.size[0] - tw) // 2, cy - th // 2), s, size_px, fg)

    def draw(self, canvas: Canvas) -> None:
        _w, h = self.size
        canvas.clear(self._bg)
        self._centered_text(
            canvas,
            self._text.get("title", ""),
            int(h * float(self._layout.get("title_y", 0.08))),
            int(self.font_px * 1.5),
            self._title_fg,
        )
        self._centered_text(
            canvas,
            self._text.get("subtitle", ""),
            int(h * float(self._layout.get("subtitle_y", 0.14))),
            max(6, int(self.font_px * 0.8)),
            self._subtitle_fg,
        )

        center, radius, ring_w = self._ring_geometry()
        if self.show_progress:
            canvas.circle(center, radius, ring_w, self._ring_track)
            sweep = 360.0 * self.progress()
            canvas.arc(center, radius, 0.0, sweep, ring_w, self._ring_fg)
        if self.show_countdown:
            scale = float(self._layout.get("countdown_font_scale", 3.0))
            self._centered_text(
                canvas,
                self.countdown_text,
                center[1],
                int(self.font_px * scale),
                self._countdown_fg,
            )

        if self.hint_text:
            self._centered_text(
                canvas,
                self.hint_text,
                int(h * float(self._layout.get("hint_y", 0.68))),
                max(6, int(self.font_px * 0.8)),
                self._hint_fg,
            )
        if self.show_progress:
            self._draw_wave(canvas)

        now = self._ts.monotonic()
        self.start_button.draw(canvas, self.font_px, now)
        self.cancel_button.draw(canvas, self.font_px, now)
