"""Configuration objects and helpers for csiscope.

Settings are read from an optional YAML file whose keys may sit at the top
level or inside ``source:`` / ``display:`` sections. The resulting
:class:`~csiscope.config.runtime.CsiScopeConfig` is what the command line
entry point hands to the source, the ingest pipeline and the terminal view.
"""

from .runtime import CsiScopeConfig, config_from_mapping, load_config

__all__ = ["CsiScopeConfig", "config_from_mapping", "load_config"]
