"""Sound playback through ``pygame.mixer``.

The cleaning tone is a short clip looped until the session stops it. Any
problem between locating the file and getting a mixer channel is reported as
:class:`AudioPlaybackError`; callers treat that as non-fatal.

Headless environments can set ``SDL_AUDIODRIVER=dummy`` so the mixer
initialises without a sound card.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

__all__ = [
    "AudioPlaybackError",
    "AudioHandle",
    "AudioPlayer",
    "PygameAudioPlayer",
    "default_sound_path",
]

logger = logging.getLogger(__name__)

pg: Any = None
try:  # pragma: no cover - import guard for environments without SDL
    import pygame as _pg

    pg = _pg
except Exception:  # pragma: no cover
    pg = None

SOUND_FILENAME = "clean_sound.wav"


class AudioPlaybackError(RuntimeError):
    """The sound could not be loaded or could not start playing."""


class AudioHandle(Protocol):
    def stop(self) -> None:
        ...


class AudioPlayer(Protocol):
    def play(self, path: Path) -> AudioHandle:
        ...


def default_sound_path() -> Path:
    """Location of the bundled cleaning tone."""
    return Path(__file__).resolve().parents[2] / "assets" / SOUND_FILENAME


class _PygameHandle:
    __slots__ = ("_sound", "_channel", "_stopped")

    def __init__(self, sound: Any, channel: Any) -> None:
        self._sound = sound
        self._channel = channel
        self._stopped = False

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        try:
            self._channel.stop()
        except Exception:
            # Mixer may already be shut down at interpreter exit
            logger.debug("channel stop failed", exc_info=True)


class PygameAudioPlayer:
    """Plays a sound file on a free mixer channel.

    Parameters
    ----------
    loop:
        When true the clip repeats until the returned handle is stopped.
    """

    def __init__(self, *, loop: bool = True) -> None:
        self._loop = loop

    def _ensure_mixer(self) -> None:
        local_pg = pg
        if local_pg is None:
            raise AudioPlaybackError("pygame is not available")
        if local_pg.mixer.get_init():
            return
        try:
            local_pg.mixer.init()
        except Exception as e:
            raise AudioPlaybackError(f"audio mixer init failed: {e}") from e

    def play(self, path: Path) -> AudioHandle:
        p = Path(path)
        if not p.is_file():
            raise AudioPlaybackError(f"sound asset not found: {p}")
        self._ensure_mixer()
        try:
            sound = pg.mixer.Sound(str(p))
            channel = sound.play(loops=-1 if self._loop else 0)
        except Exception as e:
            raise AudioPlaybackError(f"cannot play {p.name}: {e}") from e
        if channel is None:
            raise AudioPlaybackError("no free mixer channel")
        logger.debug("playing %s (%.1fs clip)", p.name, sound.get_length())
        return _PygameHandle(sound, channel)

    def shutdown(self) -> None:
        """Release the mixer if this process initialised it."""
        if pg is not None and pg.mixer.get_init():
            pg.mixer.quit()
