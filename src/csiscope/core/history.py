from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import List

import numpy as np

from .models import Measurement, Snapshot
from .ringbuffer import RingBuffer

DEFAULT_HISTORY_CAPACITY = 100


class HistoryBuffer:
    """
    Window of the most recent :class:`Snapshot` objects, oldest first.

    Only the UI loop mutates a HistoryBuffer, so no locking is done here.
    Measurements of differing lengths are stored as-is.
    """

    __slots__ = ("_buffer", "_next_sequence")

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        self._buffer: RingBuffer[Snapshot] = RingBuffer(capacity)
        self._next_sequence = 0

    @property
    def capacity(self) -> int:
        return self._buffer.capacity

    def push(self, measurement: Measurement) -> Snapshot:
        """Wrap ``measurement`` in a snapshot and append it, evicting the oldest when full."""
        snapshot = Snapshot(sequence=self._next_sequence, measurement=measurement)
        self._next_sequence += 1
        self._buffer.append(snapshot)
        return snapshot

    def drain_into(self, measurements: Iterable[Measurement]) -> int:
        """Push every pending measurement in arrival order and return the count."""
        count = 0
        for measurement in measurements:
            self.push(measurement)
            count += 1
        return count

    def latest(self) -> Snapshot | None:
        if len(self._buffer) == 0:
            return None
        return self._buffer[-1]

    def latest_amplitudes(self) -> np.ndarray:
        """Magnitudes of the newest snapshot, or an empty array before any data."""
        snapshot = self.latest()
        if snapshot is None:
            return np.empty(0, dtype=np.float64)
        return snapshot.measurement.to_array()

    def snapshots(self) -> List[Snapshot]:
        return list(self._buffer)

    def clear(self) -> None:
        """Drop buffered snapshots; sequence numbering keeps counting."""
        self._buffer.clear()

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self._buffer)
