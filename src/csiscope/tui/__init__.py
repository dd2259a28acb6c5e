"""Terminal user interface built on textual."""

from .app import CsiScopeApp, format_status, render_amplitudes, run_viewer

__all__ = ["CsiScopeApp", "format_status", "render_amplitudes", "run_viewer"]
