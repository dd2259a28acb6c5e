"""
The ESP32 CSI tool prints one record per line:

  CSI,imag0,real0,imag1,real1,...,imagN,realN

The first field is a literal marker, the remaining fields are decimal
numbers forming interleaved (imaginary, real) pairs, one pair per
subcarrier. ``parse_line()`` turns such a line into a :class:`Measurement`
holding ``sqrt(real**2 + imag**2)`` per subcarrier, and returns ``None`` for
anything else (boot banners, log output, truncated lines).
"""

from __future__ import annotations

import enum
import logging
import time
from typing import Optional

import numpy as np

from ..core.models import Measurement
from ..tools.debug import debug_enabled

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "CSI"
DEFAULT_DELIMITER = ","


class DecodePolicy(enum.Enum):
    """What to do when a numeric field inside a pair cannot be parsed."""

    SKIP_PAIR = "skip_pair"
    ABORT_LINE = "abort_line"

    @classmethod
    def from_name(cls, name: "str | DecodePolicy") -> "DecodePolicy":
        if isinstance(name, DecodePolicy):
            return name
        key = str(name).strip().lower().replace("-", "_")
        for policy in cls:
            if policy.value == key:
                return policy
        raise ValueError(f"Unknown decode policy {name!r}")


def _to_float(field: str) -> Optional[float]:
    # float() also takes digit-group underscores, which the tool never emits
    if "_" in field:
        return None
    try:
        return float(field.strip())
    except ValueError:
        return None


_parse_time_acc = 0.0
_parse_count = 0


def parse_line(
    line: str,
    *,
    marker: str = DEFAULT_MARKER,
    delimiter: str = DEFAULT_DELIMITER,
    policy: DecodePolicy = DecodePolicy.SKIP_PAIR,
) -> Measurement | None:
    """
    Decode one text line into a :class:`Measurement`.

    Invalid lines return ``None`` so callers can skip them without raising.
    With :attr:`DecodePolicy.SKIP_PAIR` a pair containing a bad number is
    dropped and decoding continues; with :attr:`DecodePolicy.ABORT_LINE`
    the whole line is rejected.
    """
    global _parse_time_acc, _parse_count

    if not line.startswith(marker):
        return None

    text = line.rstrip("\r\n")
    fields = text.split(delimiter)

    debug_on = debug_enabled()
    start = time.perf_counter() if debug_on else 0.0

    imag: list[float] = []
    real: list[float] = []
    # A trailing unpaired field is ignored.
    for idx in range(1, len(fields) - 1, 2):
        im = _to_float(fields[idx])
        re = _to_float(fields[idx + 1])
        if im is None or re is None:
            if policy is DecodePolicy.ABORT_LINE:
                logger.debug("Rejecting CSI line with bad field at %d: %r", idx, text)
                return None
            logger.debug("Skipping bad CSI pair at field %d: %r", idx, text)
            continue
        imag.append(im)
        real.append(re)

    if not real:
        return None

    im_arr = np.asarray(imag, dtype=np.float64)
    re_arr = np.asarray(real, dtype=np.float64)
    measurement = Measurement.from_values(np.sqrt(re_arr * re_arr + im_arr * im_arr))

    if debug_on:
        _parse_time_acc += time.perf_counter() - start
        _parse_count += 1
        if _parse_count % 1000 == 0:
            avg_us = (_parse_time_acc / max(1, _parse_count)) * 1e6
            logger.info(
                "esp_csi.parse_line avg %.1f µs over %d lines", avg_us, _parse_count
            )

    return measurement


def make_decoder(
    *,
    marker: str = DEFAULT_MARKER,
    delimiter: str = DEFAULT_DELIMITER,
    policy: "str | DecodePolicy" = DecodePolicy.SKIP_PAIR,
):
    """Bind decoder options into a single-argument callable for the reader loop."""
    resolved = DecodePolicy.from_name(policy)

    def _decode(line: str) -> Measurement | None:
        return parse_line(line, marker=marker, delimiter=delimiter, policy=resolved)

    return _decode
