"""Runtime configuration for the CSI source, ingest pipeline and terminal view."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from ..sensors.esp_csi import DecodePolicy


@dataclass(slots=True)
class CsiScopeConfig:
    """
    Tuning knobs for how CSI lines are sourced, buffered, and drawn.

    The defaults match an ESP32 on ``/dev/ttyUSB0`` driven by
    ``esp-csi-cli-rs`` and a ~60 FPS terminal view.
    """

    executable: str = "esp-csi-cli-rs"
    port: str = "/dev/ttyUSB0"
    extra_args: tuple[str, ...] = field(default_factory=tuple)

    marker: str = "CSI"
    delimiter: str = ","
    decode_policy: str = DecodePolicy.SKIP_PAIR.value

    # Thread bridge and history sizing
    channel_capacity: int = 100
    history_capacity: int = 100

    frame_interval_ms: int = 16
    amplitude_max: float = 60.0

    simulate: bool = False
    simulate_interval_s: float = 0.05
    simulate_subcarriers: int = 64

    def sanitized(self) -> CsiScopeConfig:
        """Return a copy with derived limits applied."""
        extra = self.extra_args
        if isinstance(extra, str):
            extra = tuple(extra.split())
        marker = str(self.marker).strip() or "CSI"
        delimiter = str(self.delimiter) or ","
        return CsiScopeConfig(
            executable=str(self.executable),
            port=str(self.port),
            extra_args=tuple(str(arg) for arg in (extra or ())),
            marker=marker,
            delimiter=delimiter,
            decode_policy=DecodePolicy.from_name(self.decode_policy).value,
            channel_capacity=max(1, int(self.channel_capacity)),
            history_capacity=max(1, int(self.history_capacity)),
            frame_interval_ms=max(1, int(self.frame_interval_ms)),
            amplitude_max=max(1e-6, float(self.amplitude_max)),
            simulate=bool(self.simulate),
            simulate_interval_s=max(0.0, float(self.simulate_interval_s)),
            simulate_subcarriers=max(1, int(self.simulate_subcarriers)),
        )

    def with_overrides(self, **overrides: Any) -> CsiScopeConfig:
        """Apply non-``None`` overrides (e.g. from the command line) and re-sanitize."""
        payload = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **payload).sanitized()


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`CsiScopeConfig`."""
    return {f.name for f in fields(CsiScopeConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten the optional ``source``/``display`` sections into one mapping."""
    merged: MutableMapping[str, Any] = {}
    for key, value in data.items():
        if key in {"source", "display"} and isinstance(value, Mapping):
            merged.update(value)
        else:
            merged[key] = value
    return merged


def config_from_mapping(data: Mapping[str, Any] | None) -> CsiScopeConfig:
    """Build :class:`CsiScopeConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return CsiScopeConfig()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    if isinstance(payload.get("extra_args"), list):
        payload["extra_args"] = tuple(payload["extra_args"])
    return CsiScopeConfig(**payload).sanitized()


def load_config(path: str | Path | None) -> CsiScopeConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`CsiScopeConfig`.
    """
    if path is None:
        return CsiScopeConfig()
    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        return CsiScopeConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


__all__ = ["CsiScopeConfig", "config_from_mapping", "load_config"]
