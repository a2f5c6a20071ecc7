from __future__ import annotations

from typing import Any, Tuple

import pytest


class RecordingCanvas:
    """Canvas double that logs every primitive as ``(name, args)``."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def clear(self, color: Any) -> None:
        self.calls.append(("clear", (color,)))

    def line(self, p0: Any, p1: Any, width: int = 1, color: Any = None) -> None:
        self.calls.append(("line", (p0, p1, width, color)))

    def circle(
        self, center: Any, radius: int, width: int = 1, color: Any = None
    ) -> None:
        self.calls.append(("circle", (center, radius, width, color)))

    def arc(
        self,
        center: Any,
        radius: int,
        start_deg: float,
        sweep_deg: float,
        width: int = 1,
        color: Any = None,
    ) -> None:
        self.calls.append(("arc", (center, radius, start_deg, sweep_deg, width)))

    def rect(self, rect: Any, color: Any, width: int = 0) -> None:
        self.calls.append(("rect", (rect, color, width)))

    def text(self, pos: Any, s: str, size_px: int = 12, color: Any = None) -> None:
        self.calls.append(("text", (pos, s, size_px)))

    def text_size(self, s: str, size_px: int = 12) -> Tuple[int, int]:
        return (len(s) * size_px // 2, size_px)

    def named(self, name: str) -> list[tuple[Any, ...]]:
        return [args for n, args in self.calls if n == name]

    def texts(self) -> list[str]:
        return [args[1] for args in self.named("text")]


class RecordingDisplay:
    def __init__(self, size: Tuple[int, int] = (360, 640)) -> None:
        self._size = size
        self.canvas = RecordingCanvas()
        self.frames = 0

    def size(self) -> Tuple[int, int]:
        return self._size

    def begin_frame(self) -> RecordingCanvas:
        self.canvas = RecordingCanvas()
        return self.canvas

    def end_frame(self) -> None:
        self.frames += 1

    def save_png(self, path: str) -> None:  # pragma: no cover - unused
        pass


@pytest.fixture
def canvas() -> RecordingCanvas:
    return RecordingCanvas()


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()
