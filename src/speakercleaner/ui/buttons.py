"""Simple rectangular push buttons."""

from __future__ import annotations

from typing import Callable

from speakercleaner.render.canvas import Canvas, Color, Rect
from speakercleaner.settings.values import color

_DEFAULT_BG: Color = (32, 32, 32, 255)
_DEFAULT_TEXT: Color = (255, 255, 255, 255)
_DEFAULT_BORDER: Color = (255, 255, 255, 255)

# How long a tapped button stays drawn in its pressed (shrunk) state
PRESS_FEEDBACK_S = 0.3


class Button:
    """A labelled rectangle that runs ``action`` when tapped.

    Parameters
    ----------
    label: Text centered inside the button.
    rect: ``(x, y, w, h)`` in display coordinates.
    colors: Theme mapping with optional ``bg``, ``text`` and ``border``
        RGBA lists.
    action: Zero-argument callback. May be rebound after construction.
    press_scale: Size of the pressed button relative to ``rect``.
    """

    def __init__(
        self,
        label: str,
        rect: Rect,
        *,
        colors: dict[str, object] | None = None,
        border_width: int = 2,
        action: Callable[[], None] | None = None,
        press_scale: float = 0.92,
    ) -> None:
        cols = colors or {}
        self.label = label
        self.rect = rect
        self.bg = color(cols.get("bg"), _DEFAULT_BG)
        self.fg = color(cols.get("text"), _DEFAULT_TEXT)
        self.border = color(cols.get("border"), _DEFAULT_BORDER)
        self.border_width = max(0, int(border_width))
        self.action = action
        self.press_scale = min(1.0, max(0.5, float(press_scale)))
        self.visible = True
        self.pressed_at: float | None = None

    def contains(self, x: int, y: int) -> bool:
        rx, ry, rw, rh = self.rect
        return rx <= x < rx + rw and ry <= y < ry + rh

    def press(self, now: float | None = None) -> bool:
        """Run the action; returns False when nothing is bound.

        ``now`` starts the pressed feedback shown by :meth:`draw`.
        """
        if self.action is None:
            return False
        if now is not None:
            self.pressed_at = now
        self.action()
        return True

    def is_pressed(self, now: float | None) -> bool:
        if now is None or self.pressed_at is None:
            return False
        return 0.0 <= now - self.pressed_at < PRESS_FEEDBACK_S

    def draw_rect(self, now: float | None = None) -> Rect:
        """Rectangle to draw at ``now``: shrunk about its centre while pressed."""
        if not self.is_pressed(now):
            return self.rect
        x, y, w, h = self.rect
        sw, sh = int(w * self.press_scale), int(h * self.press_scale)
        return (x + (w - sw) // 2, y + (h - sh) // 2, sw, sh)

    def draw(self, canvas: Canvas, font_px: int, now: float | None = None) -> None:
        if not self.visible:
            return
        rect = self.draw_rect(now)
        x, y, w, h = rect
        canvas.rect(rect, self.bg)
        if self.border_width:
            canvas.rect(rect, self.border, self.border_width)
        try:
            tw, th = canvas.text_size(self.label, font_px)
        except Exception:
            tw, th = int(font_px * 0.6) * len(self.label), font_px
        canvas.text(
            (x + max(0, (w - tw) // 2), y + max(0, (h - th) // 2)),
            self.label,
            size_px=font_px,
            color=self.fg,
        )
