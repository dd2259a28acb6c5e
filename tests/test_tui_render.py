from __future__ import annotations

import numpy as np

from csiscope.core.live_view import FrameData
from csiscope.tui.app import amplitude_color, format_status, render_amplitudes


def test_render_full_scale_bars_fill_every_row() -> None:
    text = render_amplitudes(np.full(4, 60.0), width=6, height=4, amplitude_max=60.0)
    lines = text.plain.split("\n")

    assert len(lines) == 4
    assert lines[0].startswith("╭─ ") and lines[0].endswith("╮")
    assert lines[1] == "│████│"
    assert lines[2] == "│████│"
    assert lines[3] == "╰────╯"


def test_render_half_scale_fills_bottom_half() -> None:
    text = render_amplitudes(np.full(4, 30.0), width=6, height=6, amplitude_max=60.0)
    rows = text.plain.split("\n")[1:-1]

    assert rows == ["│    │", "│    │", "│████│", "│████│"]


def test_render_empty_data_draws_an_empty_box() -> None:
    text = render_amplitudes(np.empty(0), width=10, height=5)
    rows = text.plain.split("\n")

    assert len(rows) == 5
    assert all(row == "│" + " " * 8 + "│" for row in rows[1:-1])


def test_render_tolerates_nan_and_tiny_areas() -> None:
    text = render_amplitudes(np.array([np.nan, 120.0]), width=4, height=3, amplitude_max=60.0)
    assert text.plain.split("\n")[1] == "│ █│"
    assert render_amplitudes(np.ones(3), width=2, height=2).plain == ""


def test_every_line_has_requested_width() -> None:
    text = render_amplitudes(np.linspace(0.0, 60.0, 64), width=40, height=12)
    assert {len(line) for line in text.plain.split("\n")} == {40}


def test_amplitude_color_bands() -> None:
    assert amplitude_color(0.0, 60.0) == "blue"
    assert amplitude_color(60.0, 60.0) == "red"
    assert amplitude_color(-5.0, 60.0) == "blue"


def test_format_status() -> None:
    assert "Waiting" in format_status(None, 100)

    frame = FrameData(
        tick=12,
        sequence=None,
        history_size=0,
        dropped=3,
        source_finished=True,
    )
    status = format_status(frame, 100)
    assert "Tick: 12" in status
    assert "Seq: -" in status
    assert "History: 0/100" in status
    assert "Dropped: 3" in status
    assert "SOURCE ENDED" in status
