"""Terminal viewer for live ESP32 WiFi CSI amplitude streams."""

__version__ = "0.1.0"
