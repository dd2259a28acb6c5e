"""Debug and instrumentation helpers, enabled with ``CSISCOPE_DEBUG=1``."""
