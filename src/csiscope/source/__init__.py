"""Line sources feeding the ingest thread: the external CSI tool or a synthetic wave."""

from .process import SensorProcess, SourceSpawnError, build_command
from .synthetic import SyntheticLines

__all__ = ["SensorProcess", "SourceSpawnError", "build_command", "SyntheticLines"]
