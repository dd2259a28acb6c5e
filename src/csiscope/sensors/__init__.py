"""Line decoders for sensor output.

:mod:`esp_csi` understands the ``CSI,imag,real,...`` records printed by the
ESP32 CSI tool and turns them into :class:`~csiscope.core.models.Measurement`.
"""
