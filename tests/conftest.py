from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest

# Headless SDL for every test that touches pygame
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from speakercleaner.core.events import SessionEvent  # noqa: E402
from speakercleaner.platform.audio.pygame_audio import (  # noqa: E402
    AudioPlaybackError,
)


class FakeHandle:
    def __init__(self) -> None:
        self.stopped = 0

    def stop(self) -> None:
        self.stopped += 1


class RecordingAudioPlayer:
    """Audio player double that remembers every play() call."""

    def __init__(self) -> None:
        self.played: list[Path] = []
        self.handles: list[FakeHandle] = []

    def play(self, path: Path) -> FakeHandle:
        self.played.append(Path(path))
        h = FakeHandle()
        self.handles.append(h)
        return h

    @property
    def playing(self) -> int:
        return sum(1 for h in self.handles if not h.stopped)


class FailingAudioPlayer:
    def __init__(self) -> None:
        self.attempts = 0

    def play(self, path: Path) -> FakeHandle:
        self.attempts += 1
        raise AudioPlaybackError(f"cannot decode {Path(path).name}")


@pytest.fixture
def audio() -> RecordingAudioPlayer:
    return RecordingAudioPlayer()


@pytest.fixture
def failing_audio() -> FailingAudioPlayer:
    return FailingAudioPlayer()


@pytest.fixture
def recorder() -> Callable[..., list[SessionEvent]]:
    """Return a factory that subscribes a list to a controller."""

    def _attach(controller) -> list[SessionEvent]:  # type: ignore[no-untyped-def]
        events: list[SessionEvent] = []
        controller.subscribe(events.append)
        return events

    return _attach
