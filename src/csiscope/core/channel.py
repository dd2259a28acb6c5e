"""Bounded single-producer/single-consumer conduit between the reader thread and the UI."""

from __future__ import annotations

import threading
from queue import Empty, Full, Queue
from typing import Generic, List, TypeVar

T = TypeVar("T")

DEFAULT_CHANNEL_CAPACITY = 100


class ChannelClosed(Exception):
    """Raised to the producer once the consuming side has gone away."""


class Channel(Generic[T]):
    """
    FIFO queue with explicit close flags for each end.

    The producer never blocks: when the queue is full the new item is dropped
    and counted. The consumer never blocks either: :meth:`drain` takes
    whatever is available right now.
    """

    def __init__(self, capacity: int = DEFAULT_CHANNEL_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = int(capacity)
        self._queue: Queue[T] = Queue(maxsize=self._capacity)
        self._receiver_closed = threading.Event()
        self._sender_closed = threading.Event()
        self._dropped = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    # ------------------------------------------------------------------ producer
    def send_nowait(self, item: T) -> bool:
        """
        Offer ``item`` without blocking.

        Returns ``False`` if the queue was full and the item was dropped.
        Raises :class:`ChannelClosed` once the receiver has been closed.
        """
        if self._receiver_closed.is_set():
            raise ChannelClosed("receiver closed")
        try:
            self._queue.put_nowait(item)
        except Full:
            with self._lock:
                self._dropped += 1
            return False
        return True

    def close_sender(self) -> None:
        self._sender_closed.set()

    # ------------------------------------------------------------------ consumer
    def drain(self) -> List[T]:
        """Return every item currently queued, oldest first."""
        items: List[T] = []
        try:
            while True:
                items.append(self._queue.get_nowait())
        except Empty:
            pass
        return items

    def close_receiver(self) -> None:
        """Signal the producer to stop and discard anything still queued."""
        self._receiver_closed.set()
        self.drain()

    # ------------------------------------------------------------------ state
    @property
    def receiver_closed(self) -> bool:
        return self._receiver_closed.is_set()

    @property
    def sender_closed(self) -> bool:
        return self._sender_closed.is_set()

    @property
    def exhausted(self) -> bool:
        """True once the sender is done and every item has been taken."""
        return self._sender_closed.is_set() and self._queue.empty()

    @property
    def dropped(self) -> int:
        with self._lock:
            return self._dropped

    def __len__(self) -> int:
        return self._queue.qsize()
