from __future__ import annotations

"""
Background ingestion of CSI text lines into a :class:`Channel`.

A single reader thread owns the line source (normally the external CSI
tool's stdout), decodes each line and offers the result to the channel
without ever blocking on it. The UI side drains the channel once per frame.
"""

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Callable, Optional

from ..sensors.esp_csi import parse_line
from ..tools.debug import debug_enabled
from .channel import Channel, ChannelClosed
from .models import Measurement

logger = logging.getLogger(__name__)

Decoder = Callable[[str], Optional[Measurement]]


@dataclass
class SourceStats:
    """Counters owned by the reader thread; read only after it has stopped."""

    lines: int = 0
    decoded: int = 0
    skipped: int = 0
    dropped: int = 0


def reader_loop(
    lines: Iterable[str],
    channel: Channel[Measurement],
    *,
    decoder: Decoder = parse_line,
    stop_event: Optional[threading.Event] = None,
    stats: Optional[SourceStats] = None,
) -> SourceStats:
    """
    Decode ``lines`` in order and hand each measurement to ``channel``.

    Stops when the input is exhausted, when ``stop_event`` is set or when
    the channel's receiver has been closed. Malformed lines are skipped;
    measurements that do not fit in a full channel are dropped.
    """
    stats = stats if stats is not None else SourceStats()
    for raw_line in lines:
        if stop_event is not None and stop_event.is_set():
            break
        stats.lines += 1

        measurement = decoder(raw_line)
        if measurement is None:
            stats.skipped += 1
            continue
        stats.decoded += 1

        try:
            accepted = channel.send_nowait(measurement)
        except ChannelClosed:
            logger.info("Channel receiver closed; stopping CSI reader")
            break
        if not accepted:
            stats.dropped += 1
            if debug_enabled():
                logger.debug("Channel full, dropped measurement #%d", stats.decoded)
    return stats


class StreamSource:
    """
    Runs :func:`reader_loop` in a daemon thread over a closable line source.

    ``line_source`` is any iterable of lines; if it has a ``close()`` method
    it is called on :meth:`stop` (to unblock a pending read) and when the
    loop ends. The channel's sender side is closed when the thread exits.
    """

    def __init__(
        self,
        channel: Channel[Measurement],
        line_source: Iterable[str],
        *,
        decoder: Decoder = parse_line,
        thread_name: Optional[str] = None,
    ) -> None:
        self.channel = channel
        self._line_source = line_source
        self._decoder = decoder
        self._thread_name = thread_name or "CsiStreamSource"
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.stats = SourceStats()

    def start(self) -> "StreamSource":
        if self._thread is not None:
            return self
        self._thread = threading.Thread(
            target=self._run,
            name=self._thread_name,
            daemon=True,
        )
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            reader_loop(
                self._line_source,
                self.channel,
                decoder=self._decoder,
                stop_event=self._stop_event,
                stats=self.stats,
            )
        except Exception:
            logger.exception("CSI reader loop failed")
        finally:
            self.channel.close_sender()
            self._close_line_source()
            logger.info(
                "CSI reader finished: lines=%d decoded=%d skipped=%d dropped=%d",
                self.stats.lines,
                self.stats.decoded,
                self.stats.skipped,
                self.stats.dropped,
            )

    def _close_line_source(self) -> None:
        close = getattr(self._line_source, "close", None)
        if callable(close):
            try:
                close()
            except Exception:
                logger.exception("Failed to close CSI line source")

    def stop(self, *, join: bool = False, timeout: Optional[float] = None) -> None:
        """Ask the reader to finish and release the line source."""
        self._stop_event.set()
        self._close_line_source()
        if join and self._thread is not None:
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
