"""Spawn the external CSI tool and expose its stdout as an iterator of lines."""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import Iterator, List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "esp-csi-cli-rs"
DEFAULT_PORT = "/dev/ttyUSB0"


class SourceSpawnError(RuntimeError):
    """The external sensor process could not be started."""


def build_command(executable: str, port: str, extra_args: Sequence[str] = ()) -> List[str]:
    """Return the argv used to launch the CSI tool for ``port``."""
    cmd = [str(executable), "--port", str(port)]
    cmd.extend(str(arg) for arg in extra_args)
    return cmd


class SensorProcess(Iterator[str]):
    """
    Owns one child process running the CSI tool.

    Iterating yields stdout lines (without the trailing newline) in arrival
    order until the process exits. :meth:`close` terminates the child, which
    also unblocks a reader waiting in ``readline``.
    """

    def __init__(
        self,
        executable: str = DEFAULT_EXECUTABLE,
        port: str = DEFAULT_PORT,
        extra_args: Sequence[str] = (),
        *,
        command: Optional[Sequence[str]] = None,
        terminate_timeout: float = 2.0,
    ) -> None:
        if command is not None:
            self.command = [str(part) for part in command]
        else:
            self.command = build_command(executable, port, extra_args)
        self._terminate_timeout = max(0.0, float(terminate_timeout))
        self._proc: Optional[subprocess.Popen] = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._proc is not None and self._proc.poll() is None

    @property
    def returncode(self) -> Optional[int]:
        if self._proc is None:
            return None
        return self._proc.poll()

    def start(self) -> "SensorProcess":
        """Launch the child process; raise :class:`SourceSpawnError` on failure."""
        if self._proc is not None:
            return self
        logger.info("Starting CSI source: %s", " ".join(self.command))
        try:
            self._proc = subprocess.Popen(
                self.command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as exc:
            raise SourceSpawnError(
                f"Failed to start {self.command[0]!r}: {exc}. "
                "Make sure the tool is installed and in your PATH."
            ) from exc
        return self

    def __iter__(self) -> "SensorProcess":
        return self

    def __next__(self) -> str:
        if self._closed:
            raise StopIteration
        if self._proc is None:
            self.start()
        assert self._proc is not None and self._proc.stdout is not None
        try:
            raw = self._proc.stdout.readline()
        except (OSError, ValueError):
            # stdout was closed underneath us by close()
            raise StopIteration
        if raw == "":
            logger.info("CSI source reached end of stream (rc=%s)", self.returncode)
            self._proc.stdout.close()
            raise StopIteration
        return raw.rstrip("\r\n")

    def close(self) -> None:
        """Stop the child process if it is still running. Safe to call twice."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            proc = self._proc
        if proc is None:
            return

        if proc.poll() is None:
            try:
                proc.terminate()
                proc.wait(timeout=self._terminate_timeout)
            except subprocess.TimeoutExpired:
                logger.warning("CSI source did not exit after terminate; killing it")
                proc.kill()
                proc.wait()
            except OSError:
                logger.exception("Failed to terminate CSI source")

        if proc.stdout is not None:
            proc.stdout.close()
        logger.info("CSI source stopped (rc=%s)", self.returncode)
