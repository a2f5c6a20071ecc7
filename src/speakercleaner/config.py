"""Runtime configuration helpers.

Small aggregator that merges the packaged defaults from settings.values, an
optional ``SPEAKERCLEANER_LOG_LEVEL`` environment variable and CLI overrides
into a validated :class:`RuntimeConfig`. Nothing here is written to disk.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Optional

from .settings.schema import Settings
from .settings.values import LAYOUT, TEXT, THEME

ENV_LOG_LEVEL = "SPEAKERCLEANER_LOG_LEVEL"


@dataclass(slots=True)
class RuntimeConfig:
    settings: Settings
    theme: dict[str, Any]
    layout: dict[str, Any]
    text: dict[str, str]


def make_runtime_config(*, args: Optional[object] = None) -> RuntimeConfig:
    """Build a RuntimeConfig from defaults, environment and *args*.

    *args* is argparse.Namespace-like; only attributes that are present and
    not None override the defaults (``size``, ``fps``, ``font_px``,
    ``log_level``). Raises pydantic.ValidationError on invalid values.
    """
    data: dict[str, Any] = Settings().model_dump()

    env_level = os.environ.get(ENV_LOG_LEVEL)
    if env_level:
        data["log_level"] = env_level

    if args is not None:
        size = getattr(args, "size", None)
        if size is not None:
            data["width"], data["height"] = int(size[0]), int(size[1])
        fps = getattr(args, "fps", None)
        if fps is not None:
            data["target_fps"] = float(fps)
        font_px = getattr(args, "font_px", None)
        if font_px is not None:
            data["font_px"] = int(font_px)
        level = getattr(args, "log_level", None)
        if level is not None:
            data["log_level"] = level

    return RuntimeConfig(
        settings=Settings.model_validate(data),
        theme=dict(THEME),
        layout=dict(LAYOUT),
        text=dict(TEXT),
    )
