"""Synthetic CSI line generator for running the viewer without hardware."""

from __future__ import annotations

import math
import threading
from typing import Iterator, Optional

import numpy as np

from ..sensors.esp_csi import DEFAULT_DELIMITER, DEFAULT_MARKER


def synthetic_amplitudes(frame: int, subcarriers: int = 64) -> np.ndarray:
    """Travelling sine wave across subcarriers, centred on 50 with swing 20."""
    k = np.arange(subcarriers, dtype=np.float64)
    return np.sin(k / 8.0 + frame / 5.0) * 20.0 + 50.0


def format_line(
    amplitudes: np.ndarray,
    *,
    marker: str = DEFAULT_MARKER,
    delimiter: str = DEFAULT_DELIMITER,
    phase: float = 0.0,
) -> str:
    """Encode magnitudes as (imaginary, real) pairs rotated by ``phase``."""
    imag = amplitudes * math.sin(phase)
    real = amplitudes * math.cos(phase)
    fields = [marker]
    for im, re in zip(imag, real):
        fields.append(f"{im:.4f}")
        fields.append(f"{re:.4f}")
    return delimiter.join(fields)


class SyntheticLines(Iterator[str]):
    """
    Endless (or ``count``-limited) stream of well-formed CSI lines.

    ``interval_s`` paces the output like a real device; :meth:`close` wakes
    a waiting iterator and ends the stream.
    """

    def __init__(
        self,
        *,
        subcarriers: int = 64,
        interval_s: float = 0.05,
        count: Optional[int] = None,
        marker: str = DEFAULT_MARKER,
        delimiter: str = DEFAULT_DELIMITER,
    ) -> None:
        if subcarriers <= 0:
            raise ValueError("subcarriers must be positive")
        self.subcarriers = int(subcarriers)
        self.interval_s = max(0.0, float(interval_s))
        self.count = count
        self.marker = marker
        self.delimiter = delimiter
        self._frame = 0
        self._stop = threading.Event()

    def __iter__(self) -> "SyntheticLines":
        return self

    def __next__(self) -> str:
        if self._stop.is_set():
            raise StopIteration
        if self.count is not None and self._frame >= self.count:
            raise StopIteration
        if self._frame > 0 and self.interval_s > 0.0:
            if self._stop.wait(self.interval_s):
                raise StopIteration
        amplitudes = synthetic_amplitudes(self._frame, self.subcarriers)
        line = format_line(
            amplitudes,
            marker=self.marker,
            delimiter=self.delimiter,
            phase=self._frame * 0.1,
        )
        self._frame += 1
        return line

    def close(self) -> None:
        self._stop.set()
