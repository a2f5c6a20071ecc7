"""Centralized display values loaded from YAML.

The master source is ``values.yml`` in this package. On import the file is
parsed once; sections that are missing or malformed fall back to the
literals below so the window still renders with sensible defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

logger = logging.getLogger(__name__)

_PKG_DIR = Path(__file__).parent
_YAML_PATH = _PKG_DIR / "values.yml"

Color = Tuple[int, int, int, int]

# --- Fallback literals ---------------------------------------------------
_FALLBACK_DISPLAY: Dict[str, Any] = {
    "width": 360,
    "height": 640,
    "target_fps": 30,
    "font_px": 20,
}
_FALLBACK_THEME: Dict[str, Any] = {
    "colors": {
        "background": [12, 18, 32, 255],
        "title": [230, 236, 245, 255],
        "subtitle": [140, 150, 170, 255],
        "countdown": [255, 255, 255, 255],
        "ring_track": [48, 58, 80, 255],
        "ring_progress": [64, 170, 255, 255],
        "hint": [200, 206, 220, 255],
        "wave": [64, 170, 255, 255],
        "start_button": {
            "bg": [40, 120, 220, 255],
            "text": [255, 255, 255, 255],
            "border": [90, 160, 255, 255],
        },
        "cancel_button": {
            "bg": [60, 60, 72, 255],
            "text": [230, 230, 230, 255],
            "border": [120, 120, 132, 255],
        },
    }
}
_FALLBACK_LAYOUT: Dict[str, float] = {
    "title_y": 0.08,
    "subtitle_y": 0.14,
    "ring_center_y": 0.45,
    "ring_radius": 0.30,
    "ring_width_px": 10,
    "countdown_font_scale": 3.0,
    "button_width": 0.60,
    "button_height_px": 56,
    "button_y": 0.80,
    "button_border_px": 2,
    "button_press_scale": 0.92,
    "hint_y": 0.68,
    "wave_y": 0.93,
    "wave_width": 0.50,
    "wave_height_px": 32,
    "wave_bars": 9,
}
_FALLBACK_TEXT: Dict[str, str] = {
    "title": "Speaker Cleaner",
    "subtitle": "Removes water and dust from your speaker",
    "start": "Start",
    "cancel": "Cancel",
    "idle_hint": "Press Start to clean the speaker",
    "running_hint": "Please do not close the app while cleaning",
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_values(path: Path = _YAML_PATH) -> Dict[str, Dict[str, Any]]:
    """Parse ``path`` and overlay it on the fallback literals."""
    display = dict(_FALLBACK_DISPLAY)
    theme = _merge({}, _FALLBACK_THEME)
    layout: Dict[str, Any] = dict(_FALLBACK_LAYOUT)
    text: Dict[str, Any] = dict(_FALLBACK_TEXT)
    raw: Any = {}
    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("ignoring unreadable %s: %s", path.name, e)
            raw = {}
    if not isinstance(raw, dict):
        raw = {}

    d = raw.get("display")
    if isinstance(d, dict):
        display.update({k: v for k, v in d.items() if isinstance(v, (int, float))})
    t = raw.get("theme")
    if isinstance(t, dict):
        theme = _merge(theme, t)
    lay = raw.get("layout")
    if isinstance(lay, dict):
        for k, v in lay.items():
            if isinstance(v, (int, float)):
                layout[k] = float(v)
    txt = raw.get("text")
    if isinstance(txt, dict):
        text.update({k: str(v) for k, v in txt.items()})
    return {"display": display, "theme": theme, "layout": layout, "text": text}


def color(v: object, fb: Color) -> Color:
    """Coerce a YAML colour list to an RGBA tuple, else return ``fb``."""
    if (
        isinstance(v, (list, tuple))
        and len(v) == 4
        and all(isinstance(c, (int, float)) for c in v)
    ):
        return (int(v[0]), int(v[1]), int(v[2]), int(v[3]))
    return fb


_values = load_values()

DISPLAY_DEFAULTS: Dict[str, Any] = _values["display"]
THEME: Dict[str, Any] = _values["theme"]
LAYOUT: Dict[str, Any] = _values["layout"]
TEXT: Dict[str, Any] = _values["text"]

__all__ = [
    "Color",
    "DISPLAY_DEFAULTS",
    "THEME",
    "LAYOUT",
    "TEXT",
    "color",
    "load_values",
]
