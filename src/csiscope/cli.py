"""Command-line entry point for the csiscope terminal viewer.

Parses arguments, loads the YAML configuration, configures logging, wires
the ingest pipeline and runs the textual front end until ``q`` is pressed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Optional, Sequence

import yaml

from .config import CsiScopeConfig, load_config
from .core.live_view import LiveView
from .core.pipeline_wiring import build_pipeline
from .source.process import SourceSpawnError

logger = logging.getLogger(__name__)

Viewer = Callable[..., None]


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Live terminal view of ESP32 WiFi CSI amplitudes",
        epilog="Example: csiscope --port /dev/ttyUSB0",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML configuration file (missing file means defaults)",
    )
    parser.add_argument(
        "--executable",
        type=str,
        default=None,
        help="CSI tool to launch (default: esp-csi-cli-rs)",
    )
    parser.add_argument(
        "--port",
        type=str,
        default=None,
        help="Serial device passed to the CSI tool (default: /dev/ttyUSB0)",
    )
    parser.add_argument(
        "--arg",
        dest="extra_args",
        action="append",
        default=None,
        help="Extra argument for the CSI tool (repeatable)",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        default=None,
        help="Use a synthetic wave instead of launching the CSI tool",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=None,
        help="Frame rate of the terminal view (default: ~60)",
    )
    parser.add_argument(
        "--capacity",
        type=int,
        default=None,
        help="Number of snapshots kept in history (default: 100)",
    )
    parser.add_argument(
        "--policy",
        choices=["skip_pair", "abort_line"],
        default=None,
        help="Handling of unparsable numbers inside a CSI line (default: skip_pair)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging to the log file",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default="csiscope.log",
        help="Debug log file path (default: csiscope.log)",
    )
    return parser


def configure_logging(verbose: bool, log_file: str) -> None:
    """Log to a file when verbose; the terminal itself belongs to the UI."""
    if verbose:
        logging.basicConfig(
            filename=log_file,
            filemode="a",
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        logging.basicConfig(level=logging.CRITICAL)


def config_from_args(args: argparse.Namespace) -> CsiScopeConfig:
    cfg = load_config(args.config)
    frame_interval_ms = None
    if args.fps is not None and args.fps > 0:
        frame_interval_ms = int(round(1000.0 / args.fps))
    return cfg.with_overrides(
        executable=args.executable,
        port=args.port,
        extra_args=tuple(args.extra_args) if args.extra_args else None,
        simulate=args.simulate,
        frame_interval_ms=frame_interval_ms,
        history_capacity=args.capacity,
        decode_policy=args.policy,
    )


def run(cfg: CsiScopeConfig, *, viewer: Optional[Viewer] = None) -> int:
    """
    Start the pipeline, hand the :class:`LiveView` to ``viewer`` and clean up.

    Returns the process exit status.
    """
    if viewer is None:
        from .tui.app import run_viewer

        viewer = run_viewer

    try:
        handles = build_pipeline(cfg)
    except SourceSpawnError as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    live_view: LiveView = handles.live_view
    try:
        viewer(
            live_view,
            frame_interval_ms=cfg.frame_interval_ms,
            amplitude_max=cfg.amplitude_max,
        )
    finally:
        handles.stop()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    configure_logging(args.verbose, args.log_file)

    try:
        cfg = config_from_args(args)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 1

    logger.info("Configuration: %s", cfg)
    return run(cfg)


if __name__ == "__main__":
    sys.exit(main())
