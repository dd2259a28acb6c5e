from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """
    Fixed-capacity FIFO window over a preallocated slot list.

    Appending to a full buffer first evicts the oldest entry, so the buffer
    always holds the ``capacity`` most recent items in insertion order.
    """

    __slots__ = ("_capacity", "_slots", "_head", "_size")

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = int(capacity)
        self._slots: list[T | None] = [None] * self._capacity
        self._head = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def is_full(self) -> bool:
        return self._size == self._capacity

    def append(self, item: T) -> T | None:
        """Store ``item`` at the tail and return the evicted head, if any."""
        evicted: T | None = None
        if self._size == self._capacity:
            evicted = self._slots[self._head]
            self._slots[self._head] = None
            self._head = (self._head + 1) % self._capacity
            self._size -= 1
        tail = (self._head + self._size) % self._capacity
        self._slots[tail] = item
        self._size += 1
        return evicted

    def clear(self) -> None:
        self._slots = [None] * self._capacity
        self._head = 0
        self._size = 0

    def __len__(self) -> int:  # pragma: no cover - trivial
        return self._size

    def __getitem__(self, index: int) -> T:
        """Index the logical (oldest-first) contents; negative indices allowed."""
        size = self._size
        if index < 0:
            index += size
        if index < 0 or index >= size:
            raise IndexError("RingBuffer index out of range")
        item = self._slots[(self._head + index) % self._capacity]
        assert item is not None
        return item

    def __iter__(self) -> Iterator[T]:
        for offset in range(self._size):
            item = self._slots[(self._head + offset) % self._capacity]
            assert item is not None
            yield item
