"""Pydantic model for display settings."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, field_validator

from .values import DISPLAY_DEFAULTS

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Window and logging settings for one run.

    Parameters
    ----------
    width / height: Window size in pixels (portrait by default).
    target_fps: Frame rate of the UI loop.
    font_px: Base font size; the countdown is drawn at a multiple of it.
    log_level: Name of a standard ``logging`` level.
    """

    width: int = Field(default=int(DISPLAY_DEFAULTS.get("width", 360)))
    height: int = Field(default=int(DISPLAY_DEFAULTS.get("height", 640)))
    target_fps: float = Field(default=float(DISPLAY_DEFAULTS.get("target_fps", 30)))
    font_px: int = Field(default=int(DISPLAY_DEFAULTS.get("font_px", 20)))
    log_level: str = Field(default="INFO")

    @field_validator("width", "height")
    @classmethod
    def _chk_size(cls, v: int) -> int:
        if v < 120:
            raise ValueError("window dimensions must be >= 120 px")
        return v

    @field_validator("target_fps")
    @classmethod
    def _chk_fps(cls, v: float) -> float:
        if not 1.0 <= v <= 240.0:
            raise ValueError("target_fps must be within 1..240")
        return v

    @field_validator("font_px")
    @classmethod
    def _chk_font(cls, v: int) -> int:
        if v < 6:
            raise ValueError("font_px must be >= 6")
        return v

    @field_validator("log_level")
    @classmethod
    def _chk_level(cls, v: str) -> str:
        v = str(v).upper()
        if v not in _LEVELS:
            raise ValueError("invalid log level: must be one of " + ", ".join(_LEVELS))
        return v

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def log_level_no(self) -> int:
        return int(logging.getLevelName(self.log_level))
