"""Speaker cleaner application (windowed and headless runners).

``main_async`` opens a pygame window with the cleaner screen. The headless
runner starts a session immediately and prints its progress, which is what
CI and the CLI smoke tests use.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import TextIO

from speakercleaner.config import RuntimeConfig, make_runtime_config
from speakercleaner.core.events import (
    SESSION_TOPIC,
    EventBus,
    SessionEnded,
    SessionEvent,
    bus_forwarder,
)
from speakercleaner.core.scheduler import Scheduler, TimeSourceScheduler
from speakercleaner.core.session import SessionController
from speakercleaner.core.time import RealTimeSource, TimeSource
from speakercleaner.platform.audio.pygame_audio import AudioPlayer, PygameAudioPlayer
from speakercleaner.platform.display.pygame_backend import PygameDisplayBackend
from speakercleaner.platform.input.pygame_input import PygameInputBackend
from speakercleaner.ui.controllers import UiConfig, UiController
from speakercleaner.ui.screen import CleanerScreen
from speakercleaner.ui.terminal import TerminalPresenter

logger = logging.getLogger(__name__)


def _print_help() -> None:
    print("Keys: Space/Enter start, C/Backspace cancel, Q/ESC quit")


async def main_async(
    args: argparse.Namespace, *, rc: RuntimeConfig | None = None
) -> None:
    rc = rc or make_runtime_config(args=args)
    ts = RealTimeSource()
    audio = PygameAudioPlayer()
    session = SessionController(scheduler=TimeSourceScheduler(ts), audio=audio)

    display = PygameDisplayBackend(
        size=rc.settings.size,
        create_window=True,
        title=rc.text.get("title", "Speaker Cleaner"),
    )
    if not display.has_window:
        logger.warning("no window available; rendering offscreen only")
    screen = CleanerScreen(
        display.size(),
        ts=ts,
        font_px=rc.settings.font_px,
        theme=rc.theme,
        layout=rc.layout,
        text=rc.text,
    )
    ui = UiController(
        display=display,
        screen=screen,
        session=session,
        ts=ts,
        cfg=UiConfig(target_fps=rc.settings.target_fps),
        input_source=PygameInputBackend(),
    )

    _print_help()
    try:
        await ui.run()
    finally:
        session.cancel()
        ui.close()
        audio.shutdown()


async def run_headless(
    *,
    ts: TimeSource,
    scheduler: Scheduler,
    audio: AudioPlayer,
    max_runtime_s: float | None = None,
    out: TextIO | None = None,
) -> list[SessionEvent]:
    """Run one session without a display and return the events it produced.

    When ``max_runtime_s`` elapses before the countdown finishes the session
    is backgrounded, exactly as if the host had suspended the app.
    """
    bus = EventBus()
    sub = bus.subscribe(SESSION_TOPIC)
    session = SessionController(scheduler=scheduler, audio=audio)
    session.subscribe(bus_forwarder(bus))

    ended = asyncio.Event()

    def _on_event(event: SessionEvent) -> None:
        if isinstance(event, SessionEnded):
            ended.set()

    session.subscribe(_on_event)
    presenter = TerminalPresenter(sub, out=out)
    presenter_task = asyncio.create_task(presenter.run(), name="terminal_presenter")

    session.start()
    try:
        if max_runtime_s is None:
            await ended.wait()
        else:
            waiter = asyncio.create_task(ended.wait())
            timer = asyncio.create_task(ts.sleep(max_runtime_s))
            _done, pending = await asyncio.wait(
                {waiter, timer}, return_when=asyncio.FIRST_COMPLETED
            )
            for t in pending:
                t.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            if not ended.is_set():
                logger.info("max runtime %.2fs reached", max_runtime_s)
                session.on_backgrounded()
    finally:
        session.cancel()
        await bus.close()
        await presenter_task
    return presenter.events


async def _main_headless_async(args: argparse.Namespace) -> None:
    """Lightweight headless runner for CI and tests."""
    ts = RealTimeSource()
    audio = PygameAudioPlayer()
    try:
        await run_headless(
            ts=ts,
            scheduler=TimeSourceScheduler(ts),
            audio=audio,
            max_runtime_s=getattr(args, "max_runtime", None),
        )
    finally:
        audio.shutdown()


def _parse_size(s: str) -> tuple[int, int]:
    try:
        w, h = s.lower().split("x", 1)
        return (int(w), int(h))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected WIDTHxHEIGHT, got {s!r}"
        ) from None


def _positive_float(s: str) -> float:
    try:
        v = float(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {s!r}") from None
    if v <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return v


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments.

    When ``argv`` is None the values are read from ``sys.argv`` as usual.
    Accepting an ``argv`` list makes the parser testable programmatically.
    """
    p = argparse.ArgumentParser(description="Speaker Cleaner")
    p.add_argument(
        "--headless",
        dest="headless",
        action="store_true",
        help="Run one session without a window, printing the countdown",
    )
    p.add_argument(
        "--max-runtime",
        dest="max_runtime",
        type=_positive_float,
        default=None,
        help="Headless only: stop the session after this many seconds",
    )
    p.add_argument(
        "--size",
        type=_parse_size,
        default=None,
        help="Window size as WIDTHxHEIGHT (default from values.yml)",
    )
    p.add_argument(
        "--fps",
        type=float,
        default=None,
        help="UI frame rate (default from values.yml)",
    )
    p.add_argument(
        "--font-px",
        dest="font_px",
        type=int,
        default=None,
        help="Base font size in px",
    )
    p.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    p.add_argument(
        "--version",
        action="store_true",
        help="Print the version and exit",
    )
    args = p.parse_args(argv)
    if args.max_runtime is not None and not args.headless:
        p.error("--max-runtime requires --headless")
    return args
