from __future__ import annotations

import pygame as pg
import pytest

from speakercleaner.platform.display.pygame_backend import PygameDisplayBackend
from speakercleaner.platform.input.pygame_input import PygameInputBackend


@pytest.fixture
def backend() -> PygameInputBackend:
    # Display backend initialises pygame (dummy video)
    PygameDisplayBackend(size=(100, 100))
    pg.display.set_mode((100, 100))
    pg.event.clear()
    return PygameInputBackend()


def test_mouse_release_becomes_tap(backend: PygameInputBackend) -> None:
    pg.event.post(pg.event.Event(pg.MOUSEBUTTONDOWN, pos=(10, 20), button=1))
    pg.event.post(pg.event.Event(pg.MOUSEBUTTONUP, pos=(10, 20), button=1))
    events = list(backend.pump())
    assert [(e.type, e.x, e.y) for e in events] == [("tap", 10, 20)]


def test_keys_and_quit(backend: PygameInputBackend) -> None:
    pg.event.post(pg.event.Event(pg.KEYDOWN, key=pg.K_SPACE))
    pg.event.post(pg.event.Event(pg.QUIT))
    events = list(backend.pump())
    assert [(e.type, e.key) for e in events] == [("key", "space"), ("quit", "")]


def test_minimise_becomes_background(backend: PygameInputBackend) -> None:
    if not hasattr(pg, "WINDOWMINIMIZED"):
        pytest.skip("pygame build lacks window events")
    pg.event.post(pg.event.Event(pg.WINDOWMINIMIZED))
    events = list(backend.pump())
    assert [e.type for e in events] == ["background"]
