"""Textual front end drawing the newest CSI amplitude snapshot."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.reactive import reactive
from textual.widgets import Static

from ..core.live_view import FrameData, LiveView
from ..tools.debug import time_block

logger = logging.getLogger(__name__)

DEFAULT_FRAME_INTERVAL_MS = 16
DEFAULT_AMPLITUDE_MAX = 60.0
CHART_TITLE = "Live WiFi CSI"

# Eighth-block characters for sub-row resolution
BLOCKS = " ▁▂▃▄▅▆▇█"

COLORS = [
    "blue",
    "cyan",
    "green",
    "yellow",
    "red",
]


def amplitude_color(value: float, amplitude_max: float) -> str:
    """Map an amplitude onto a colour band between 0 and ``amplitude_max``."""
    if amplitude_max <= 0.0:
        return COLORS[0]
    ratio = max(0.0, min(1.0, value / amplitude_max))
    index = min(len(COLORS) - 1, int(ratio * len(COLORS)))
    return COLORS[index]


def _box_top(title: str, width: int) -> str:
    label = f"╭─ {title} "
    return label + "─" * max(0, width - len(label) - 1) + "╮\n"


def render_amplitudes(
    amplitudes: np.ndarray,
    width: int,
    height: int,
    *,
    amplitude_max: float = DEFAULT_AMPLITUDE_MAX,
    title: str = CHART_TITLE,
) -> Text:
    """
    Draw ``amplitudes`` as a boxed bar chart of ``width`` x ``height`` cells.

    Subcarriers are resampled onto the available columns; values are clamped
    to ``[0, amplitude_max]`` and NaN draws as an empty column.
    """
    if height < 3 or width < 3:
        return Text("")

    inner_width = width - 2
    graph_height = height - 2

    result = Text()
    result.append(_box_top(title, width), style="bold")

    values = np.asarray(amplitudes, dtype=np.float64).reshape(-1)
    if values.size == 0:
        for _ in range(graph_height):
            result.append("│" + " " * inner_width + "│\n")
        result.append("╰" + "─" * inner_width + "╯")
        return result

    columns = np.linspace(0, values.size - 1, inner_width).round().astype(int)
    sampled = np.nan_to_num(values[columns], nan=0.0, posinf=amplitude_max, neginf=0.0)
    scale = max(amplitude_max, 1e-12)
    levels = np.clip(sampled / scale, 0.0, 1.0) * graph_height

    for row in range(graph_height):
        y = graph_height - 1 - row
        result.append("│")
        for col in range(inner_width):
            fill = levels[col] - y
            if fill >= 1.0:
                char = BLOCKS[-1]
            elif fill > 0.0:
                char = BLOCKS[int(fill * 8)]
            else:
                char = " "
            if char == " ":
                result.append(char)
            else:
                result.append(char, style=amplitude_color(sampled[col], amplitude_max))
        result.append("│\n")

    result.append("╰" + "─" * inner_width + "╯")
    return result


def format_status(frame: Optional[FrameData], capacity: int) -> str:
    if frame is None:
        return "Waiting for data | 'q' to quit"
    sequence = "-" if frame.sequence is None else str(frame.sequence)
    parts = [
        f"Tick: {frame.tick}",
        f"Seq: {sequence}",
        f"Subcarriers: {frame.subcarriers}",
        f"History: {frame.history_size}/{capacity}",
        f"Dropped: {frame.dropped}",
    ]
    if frame.source_finished:
        parts.append("SOURCE ENDED")
    parts.append("'q' to quit")
    return " | ".join(parts)


class AmplitudeChart(Static):
    """Widget showing the newest amplitude vector."""

    frame = reactive(None)
    amplitude_max = reactive(DEFAULT_AMPLITUDE_MAX)

    def render(self) -> Text:
        amplitudes = np.empty(0) if self.frame is None else self.frame.amplitudes
        return render_amplitudes(
            amplitudes,
            self.size.width,
            self.size.height,
            amplitude_max=self.amplitude_max,
        )


class StatusLine(Static):
    """Widget to display the status line."""

    frame = reactive(None)
    capacity = reactive(0)

    def render(self) -> Text:
        return Text(format_status(self.frame, self.capacity), style="bold reverse")


class CsiScopeApp(App):
    """Textual application polling a :class:`LiveView` at a fixed frame cadence."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #chart {
        height: 1fr;
    }

    #status {
        height: 1;
        dock: bottom;
    }
    """

    def __init__(
        self,
        live_view: LiveView,
        *,
        frame_interval_ms: int = DEFAULT_FRAME_INTERVAL_MS,
        amplitude_max: float = DEFAULT_AMPLITUDE_MAX,
    ) -> None:
        super().__init__()
        self.live_view = live_view
        self.frame_interval = max(1, int(frame_interval_ms)) / 1000.0
        self.amplitude_max = float(amplitude_max)

    def compose(self) -> ComposeResult:
        self.chart = AmplitudeChart(id="chart")
        self.chart.amplitude_max = self.amplitude_max

        self.status_line = StatusLine(id="status")
        self.status_line.capacity = self.live_view.history.capacity

        yield self.chart
        yield self.status_line

    def on_mount(self) -> None:
        self.set_interval(self.frame_interval, self._on_frame)

    def _on_frame(self) -> None:
        with time_block("csiscope frame"):
            frame = self.live_view.on_tick()
            self.chart.frame = frame
            self.status_line.frame = frame

    def on_key(self, event: events.Key) -> None:
        if event.key == "q":
            logger.info("Quit requested at tick %d", self.live_view.tick)
            self.live_view.close()
            self.exit()


def run_viewer(
    live_view: LiveView,
    *,
    frame_interval_ms: int = DEFAULT_FRAME_INTERVAL_MS,
    amplitude_max: float = DEFAULT_AMPLITUDE_MAX,
) -> None:
    """Run the terminal viewer until the user quits."""
    app = CsiScopeApp(
        live_view,
        frame_interval_ms=frame_interval_ms,
        amplitude_max=amplitude_max,
    )
    try:
        app.run()
    finally:
        live_view.close()
