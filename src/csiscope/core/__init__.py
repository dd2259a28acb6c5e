"""Core streaming pipeline: decoded models, channel, history and UI-side state.

The reader thread (:mod:`.stream_source`) decodes CSI lines and pushes them
through a bounded :class:`Channel`; the UI loop drains that channel into a
:class:`HistoryBuffer` via :class:`LiveView` once per frame.
:mod:`.stream_source` is not re-exported here because it depends on the
sensor decoders, which in turn depend on :mod:`.models`.
"""

from .ringbuffer import RingBuffer
from .models import Measurement, Snapshot
from .channel import Channel, ChannelClosed
from .history import HistoryBuffer
from .live_view import FrameData, LiveView

__all__ = [
    "RingBuffer",
    "Measurement",
    "Snapshot",
    "Channel",
    "ChannelClosed",
    "HistoryBuffer",
    "FrameData",
    "LiveView",
]
