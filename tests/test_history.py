from __future__ import annotations

import numpy as np
import pytest

from csiscope.core.history import DEFAULT_HISTORY_CAPACITY, HistoryBuffer
from csiscope.core.models import Measurement
from csiscope.core.ringbuffer import RingBuffer


def _m(*values: float) -> Measurement:
    return Measurement.from_values(values)


def test_empty_history_has_no_latest() -> None:
    history = HistoryBuffer()
    assert history.capacity == DEFAULT_HISTORY_CAPACITY == 100
    assert history.latest() is None
    assert len(history) == 0
    assert history.latest_amplitudes().size == 0


def test_sequence_numbers_start_at_zero_and_increase() -> None:
    history = HistoryBuffer(capacity=3)
    snaps = [history.push(_m(float(i))) for i in range(5)]

    assert [s.sequence for s in snaps] == [0, 1, 2, 3, 4]
    assert history.push(_m(5.0)).sequence == 5


def test_push_beyond_capacity_evicts_oldest_only() -> None:
    history = HistoryBuffer(capacity=100)
    for i in range(101):
        history.push(_m(float(i)))

    assert len(history) == 100
    latest = history.latest()
    assert latest is not None
    assert latest.measurement == _m(100.0)
    assert latest.sequence == 100

    retained = [s.measurement.amplitudes[0] for s in history]
    assert 0.0 not in retained
    assert retained[0] == 1.0


def test_retained_sequences_are_the_highest_and_contiguous() -> None:
    history = HistoryBuffer(capacity=10)
    for i in range(257):
        history.push(_m(float(i)))
        assert len(history) <= 10
        latest = history.latest()
        assert latest is not None and latest.sequence == i

    sequences = [s.sequence for s in history.snapshots()]
    assert sequences == list(range(247, 257))


def test_drain_into_preserves_arrival_order() -> None:
    history = HistoryBuffer(capacity=5)
    pushed = history.drain_into([_m(1.0), _m(2.0), _m(3.0)])

    assert pushed == 3
    assert [s.measurement.amplitudes for s in history] == [(1.0,), (2.0,), (3.0,)]
    assert history.drain_into([]) == 0


def test_variable_length_measurements_are_tolerated() -> None:
    history = HistoryBuffer(capacity=4)
    history.push(_m(1.0, 2.0, 3.0))
    history.push(_m(4.0))

    np.testing.assert_array_equal(history.latest_amplitudes(), np.array([4.0]))
    assert [len(s.measurement) for s in history] == [3, 1]


def test_clear_keeps_sequence_numbering() -> None:
    history = HistoryBuffer(capacity=2)
    history.push(_m(1.0))
    history.clear()
    assert history.latest() is None

    snap = history.push(_m(2.0))
    assert snap.sequence == 1


def test_ring_buffer_reports_evicted_item() -> None:
    buf: RingBuffer[int] = RingBuffer(2)
    assert buf.append(1) is None
    assert buf.append(2) is None
    assert buf.is_full()
    assert buf.append(3) == 1
    assert list(buf) == [2, 3]
    assert buf[-1] == 3
    assert buf[0] == 2
    with pytest.raises(IndexError):
        buf[2]


def test_ring_buffer_rejects_non_positive_capacity() -> None:
    with pytest.raises(ValueError):
        RingBuffer(0)
