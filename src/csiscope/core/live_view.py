"""Foreground consumer state: drains the channel and feeds the renderer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .channel import Channel
from .history import HistoryBuffer
from .models import Measurement

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class FrameData:
    """Read-only view of the latest state for one rendered frame."""

    tick: int
    sequence: Optional[int]
    history_size: int
    dropped: int
    source_finished: bool
    amplitudes: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.float64))

    @property
    def subcarriers(self) -> int:
        return int(self.amplitudes.size)


class LiveView:
    """
    Owns the :class:`HistoryBuffer` on behalf of the UI loop.

    :meth:`on_tick` is the only mutating entry point and must be called from
    one thread (the UI timer).
    """

    def __init__(
        self,
        channel: Channel[Measurement],
        history: Optional[HistoryBuffer] = None,
    ) -> None:
        self.channel = channel
        self.history = history if history is not None else HistoryBuffer()
        self._tick = 0
        self._reported_finish = False

    @property
    def tick(self) -> int:
        return self._tick

    def on_tick(self) -> FrameData:
        """Apply pending measurements and return this frame; the first frame is tick 0."""
        self.history.drain_into(self.channel.drain())
        if self.channel.exhausted and not self._reported_finish:
            self._reported_finish = True
            logger.info("CSI source ended; keeping last %d snapshots on screen", len(self.history))
        frame = self.frame()
        self._tick += 1
        return frame

    def frame(self) -> FrameData:
        latest = self.history.latest()
        return FrameData(
            tick=self._tick,
            sequence=None if latest is None else latest.sequence,
            history_size=len(self.history),
            dropped=self.channel.dropped,
            source_finished=self.channel.exhausted,
            amplitudes=self.history.latest_amplitudes(),
        )

    def close(self) -> None:
        """Tell the producer side that nobody is listening any more."""
        self.channel.close_receiver()
