from __future__ import annotations

import pytest

from speakercleaner.core.events import (
    EndReason,
    SessionEnded,
    SessionStarted,
    SessionTick,
)
from speakercleaner.core.time import SimTimeSource
from speakercleaner.ui.screen import CleanerScreen


@pytest.fixture
def ts() -> SimTimeSource:
    return SimTimeSource(start=100.0)


@pytest.fixture
def screen(ts: SimTimeSource) -> CleanerScreen:
    return CleanerScreen((360, 640), ts=ts, font_px=20)


def _center(rect: tuple[int, int, int, int]) -> tuple[int, int]:
    x, y, w, h = rect
    return x + w // 2, y + h // 2


def test_idle_presentation(screen: CleanerScreen) -> None:
    assert screen.start_button.visible
    assert not screen.cancel_button.visible
    assert not screen.show_countdown
    assert not screen.show_progress
    assert not screen.running_presentation
    assert screen.countdown_text == "30"
    assert screen.progress() == 0.0


def test_started_switches_to_running_presentation(screen: CleanerScreen) -> None:
    screen.handle_event(SessionStarted(duration_s=30))
    assert not screen.start_button.visible
    assert screen.cancel_button.visible
    assert screen.show_countdown and screen.show_progress
    assert screen.countdown_text == "30"


def test_tick_updates_countdown_text(screen: CleanerScreen) -> None:
    screen.handle_event(SessionStarted(duration_s=30))
    screen.handle_event(SessionTick(remaining=17))
    assert screen.countdown_text == "17"
    screen.handle_event(SessionTick(remaining=0))
    assert screen.countdown_text == "0"


@pytest.mark.parametrize("reason", list(EndReason))
def test_any_end_restores_idle(screen: CleanerScreen, reason: EndReason) -> None:
    screen.handle_event(SessionStarted(duration_s=30))
    screen.handle_event(SessionTick(remaining=12))
    screen.handle_event(SessionEnded(reason=reason))
    assert screen.start_button.visible
    assert not screen.cancel_button.visible
    assert not screen.running_presentation
    assert screen.countdown_text == "30"
    assert screen.progress() == 0.0


def test_progress_follows_the_clock(
    screen: CleanerScreen, ts: SimTimeSource
) -> None:
    screen.on_session_started(30)
    assert screen.progress() == 0.0
    ts.advance(15.0)
    assert screen.progress() == pytest.approx(0.5)
    ts.advance(30.0)
    assert screen.progress() == 1.0


def test_restart_resets_progress(screen: CleanerScreen, ts: SimTimeSource) -> None:
    screen.on_session_started(30)
    ts.advance(10.0)
    screen.on_session_ended()
    screen.on_session_started(30)
    assert screen.progress() == 0.0


def test_tap_presses_only_the_visible_button(screen: CleanerScreen) -> None:
    calls: list[str] = []
    screen.bind(
        start=lambda: calls.append("start"),
        cancel=lambda: calls.append("cancel"),
    )
    pos = _center(screen.start_button.rect)

    assert screen.tap(*pos)
    assert calls == ["start"]

    screen.on_session_started(30)
    assert screen.tap(*pos)
    assert calls == ["start", "cancel"]


def test_tap_outside_buttons_is_ignored(screen: CleanerScreen) -> None:
    calls: list[str] = []
    screen.bind(start=lambda: calls.append("start"))
    assert screen.tap(0, 0) is False
    assert calls == []


def test_tap_without_binding_does_nothing(screen: CleanerScreen) -> None:
    assert screen.tap(*_center(screen.start_button.rect)) is False


def test_idle_draw_has_no_ring_or_countdown(screen: CleanerScreen, canvas) -> None:
    screen.draw(canvas)
    assert canvas.named("arc") == []
    assert canvas.named("circle") == []
    texts = canvas.texts()
    assert "Start" in texts
    assert "Cancel" not in texts
    assert "30" not in texts


def test_running_draw_shows_ring_countdown_and_cancel(
    screen: CleanerScreen, ts: SimTimeSource, canvas
) -> None:
    screen.handle_event(SessionStarted(duration_s=30))
    ts.advance(7.5)
    screen.handle_event(SessionTick(remaining=23))
    screen.draw(canvas)

    (arc,) = canvas.named("arc")
    _center_pt, _radius, start_deg, sweep_deg, _width = arc
    assert start_deg == 0.0
    assert sweep_deg == pytest.approx(90.0)
    assert len(canvas.named("circle")) == 1
    texts = canvas.texts()
    assert "23" in texts
    assert "Cancel" in texts
    assert "Start" not in texts


def test_custom_text_and_theme(ts: SimTimeSource, canvas) -> None:
    screen = CleanerScreen(
        (240, 320),
        ts=ts,
        theme={"colors": {"background": [1, 2, 3, 255]}},
        text={"title": "Clean", "subtitle": "", "start": "Go", "cancel": "Stop"},
    )
    screen.draw(canvas)
    assert canvas.calls[0] == ("clear", ((1, 2, 3, 255),))
    assert "Clean" in canvas.texts()
    assert "Go" in canvas.texts()


def test_hint_follows_session_state(screen: CleanerScreen, canvas) -> None:
    idle_hint = "Press Start to clean the speaker"
    running_hint = "Please do not close the app while cleaning"
    assert screen.hint_text == idle_hint

    screen.handle_event(SessionStarted(duration_s=30))
    assert screen.hint_text == running_hint
    screen.draw(canvas)
    assert running_hint in canvas.texts()
    assert idle_hint not in canvas.texts()

    screen.handle_event(SessionEnded(reason=EndReason.COMPLETED))
    assert screen.hint_text == idle_hint


def test_wave_animates_only_while_running(
    screen: CleanerScreen, ts: SimTimeSource, canvas
) -> None:
    assert screen.wave_levels() == []
    screen.draw(canvas)
    idle_rects = len(canvas.named("rect"))

    screen.on_session_started(30)
    first = screen.wave_levels()
    assert len(first) == 9
    assert all(0.2 <= v <= 1.0 for v in first)
    ts.advance(0.1)
    assert screen.wave_levels() != first

    canvas.calls.clear()
    screen.draw(canvas)
    # Nine bars on top of the (single, visible) button's fill and border
    assert len(canvas.named("rect")) == idle_rects + 9

    screen.on_session_ended()
    assert screen.wave_levels() == []


def test_tapped_button_draws_pressed_then_recovers(
    screen: CleanerScreen, ts: SimTimeSource, canvas
) -> None:
    screen.bind(cancel=lambda: None)
    screen.on_session_started(30)
    rect = screen.cancel_button.rect
    assert screen.tap(*_center(rect))

    screen.draw(canvas)
    pressed = canvas.named("rect")[-2][0]
    assert pressed != rect
    assert pressed[2] < rect[2] and pressed[3] < rect[3]

    ts.advance(0.5)
    canvas.calls.clear()
    screen.draw(canvas)
    assert canvas.named("rect")[-2][0] == rect
