"""Shared dataclasses for decoded CSI measurements and buffered snapshots."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Measurement:
    """Magnitudes of one CSI frame, one value per subcarrier in order."""

    amplitudes: tuple[float, ...]

    @classmethod
    def from_values(cls, values: Iterable[float]) -> "Measurement":
        return cls(tuple(float(v) for v in values))

    def to_array(self) -> np.ndarray:
        """Return the magnitudes as a read-only ``float64`` array."""
        arr = np.asarray(self.amplitudes, dtype=np.float64)
        arr.flags.writeable = False
        return arr

    def __len__(self) -> int:
        return len(self.amplitudes)

    def __iter__(self) -> Iterator[float]:
        return iter(self.amplitudes)


@dataclass(frozen=True)
class Snapshot:
    """A measurement together with the sequence number it was accepted under."""

    sequence: int
    measurement: Measurement
