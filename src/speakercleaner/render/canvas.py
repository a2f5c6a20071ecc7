"""Framework-agnostic Canvas and DisplayBackend protocols.

Defines the drawing primitives the cleaner screen needs and a display
backend contract so different frameworks can be plugged in. Angles passed
to :meth:`Canvas.arc` are in degrees, measured clockwise from 12 o'clock.
"""

from __future__ import annotations

from typing import Protocol, Tuple

Color = Tuple[int, int, int, int]
Rect = Tuple[int, int, int, int]


class Canvas(Protocol):
    def clear(self, color: Color) -> None:
        ...

    def line(
        self,
        p0: Tuple[int, int],
        p1: Tuple[int, int],
        width: int = 1,
        color: Color = (255, 255, 255, 255),
    ) -> None:
        ...

    def circle(
        self,
        center: Tuple[int, int],
        radius: int,
        width: int = 1,
        color: Color = (255, 255, 255, 255),
    ) -> None:
        ...

    def arc(
        self,
        center: Tuple[int, int],
        radius: int,
        start_deg: float,
        sweep_deg: float,
        width: int = 1,
        color: Color = (255, 255, 255, 255),
    ) -> None:
        ...

    def rect(
        self,
        rect: Rect,
        color: Color,
        width: int = 0,
    ) -> None:
        ...

    def text(
        self,
        pos: Tuple[int, int],
        s: str,
        size_px: int = 12,
        color: Color = (255, 255, 255, 255),
    ) -> None:
        ...

    def text_size(self, s: str, size_px: int = 12) -> Tuple[int, int]:
        ...


class DisplayBackend(Protocol):
    def size(self) -> Tuple[int, int]:
        ...

    def begin_frame(self) -> Canvas:
        ...

    def end_frame(self) -> None:
        ...

    def save_png(self, path: str) -> None:
        ...
