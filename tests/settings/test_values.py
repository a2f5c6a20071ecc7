from __future__ import annotations

from pathlib import Path

import pytest

from speakercleaner.settings.values import TEXT, THEME, color, load_values


def test_packaged_values_load() -> None:
    assert TEXT["start"] == "Start"
    assert TEXT["cancel"] == "Cancel"
    assert "start_button" in THEME["colors"]


def test_missing_file_uses_fallbacks(tmp_path: Path) -> None:
    v = load_values(tmp_path / "absent.yml")
    assert v["display"]["width"] == 360
    assert v["text"]["title"] == "Speaker Cleaner"
    assert v["layout"]["button_y"] == pytest.approx(0.8)


def test_malformed_yaml_is_logged_and_ignored(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    p = tmp_path / "values.yml"
    p.write_text("display: [unclosed\n", encoding="utf-8")
    v = load_values(p)
    assert v["display"]["height"] == 640
    assert "ignoring unreadable values.yml" in caplog.text


def test_partial_overrides_merge(tmp_path: Path) -> None:
    p = tmp_path / "values.yml"
    p.write_text(
        "display:\n  width: 480\n  font_px: nope\n"
        "theme:\n  colors:\n    start_button:\n      bg: [1, 2, 3, 255]\n"
        "layout:\n  ring_width_px: 14\n"
        "text:\n  start: Go\n",
        encoding="utf-8",
    )
    v = load_values(p)
    assert v["display"]["width"] == 480
    assert v["display"]["font_px"] == 20
    buttons = v["theme"]["colors"]["start_button"]
    assert buttons["bg"] == [1, 2, 3, 255]
    assert "text" in buttons  # sibling keys kept
    assert v["layout"]["ring_width_px"] == 14.0
    assert v["text"]["start"] == "Go"
    assert v["text"]["cancel"] == "Cancel"


def test_non_mapping_document_is_ignored(tmp_path: Path) -> None:
    p = tmp_path / "values.yml"
    p.write_text("- just\n- a list\n", encoding="utf-8")
    assert load_values(p)["text"]["start"] == "Start"


@pytest.mark.parametrize(
    "value,expected",
    [
        ([1, 2, 3, 4], (1, 2, 3, 4)),
        ((1.9, 2, 3, 255), (1, 2, 3, 255)),
        ([1, 2, 3], (9, 9, 9, 9)),
        ("red", (9, 9, 9, 9)),
        (None, (9, 9, 9, 9)),
    ],
)
def test_color_coercion(value: object, expected: tuple[int, ...]) -> None:
    assert color(value, (9, 9, 9, 9)) == expected
