"""Factory helpers that wire the CSI ingest pipeline from configuration."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from ..config import CsiScopeConfig
from ..sensors.esp_csi import make_decoder
from ..source.process import SensorProcess
from ..source.synthetic import SyntheticLines
from .channel import Channel
from .history import HistoryBuffer
from .live_view import LiveView
from .models import Measurement
from .stream_source import StreamSource


@dataclass(slots=True)
class PipelineHandles:
    """Return value from :func:`build_pipeline` containing ready-to-use pieces."""

    source: StreamSource
    live_view: LiveView
    channel: Channel[Measurement]

    def stop(self, *, timeout: Optional[float] = 2.0) -> None:
        """Close the consumer side, then stop and join the reader thread."""
        self.live_view.close()
        self.source.stop(join=True, timeout=timeout)


def build_line_source(cfg: CsiScopeConfig) -> Iterable[str]:
    """
    Return the configured line source, already started.

    Raises :class:`~csiscope.source.process.SourceSpawnError` when the
    external tool cannot be launched.
    """
    if cfg.simulate:
        return SyntheticLines(
            subcarriers=cfg.simulate_subcarriers,
            interval_s=cfg.simulate_interval_s,
            marker=cfg.marker,
            delimiter=cfg.delimiter,
        )
    return SensorProcess(cfg.executable, cfg.port, cfg.extra_args).start()


def build_pipeline(
    cfg: CsiScopeConfig,
    *,
    line_source: Optional[Iterable[str]] = None,
) -> PipelineHandles:
    """
    Build and start the reader thread plus the UI-side :class:`LiveView`.

    Parameters
    ----------
    cfg:
        Runtime configuration (usually loaded from YAML).
    line_source:
        Iterable of raw lines. When omitted, :func:`build_line_source` picks
        the external tool or the synthetic generator from ``cfg``.
    """
    normalized = cfg.sanitized()
    lines = line_source if line_source is not None else build_line_source(normalized)

    channel: Channel[Measurement] = Channel(normalized.channel_capacity)
    decoder = make_decoder(
        marker=normalized.marker,
        delimiter=normalized.delimiter,
        policy=normalized.decode_policy,
    )
    source = StreamSource(channel, lines, decoder=decoder).start()
    live_view = LiveView(channel, HistoryBuffer(normalized.history_capacity))
    return PipelineHandles(source=source, live_view=live_view, channel=channel)
