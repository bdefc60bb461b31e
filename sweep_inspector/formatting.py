"""Frequency label formatting for the sweep plot axis.

Labels are chosen from a small ordered unit table. Values outside the
Hz..GHz range are clamped to the nearest unit instead of producing an empty
label; only non-finite values give an empty string.
"""

from __future__ import annotations

import math
from typing import Sequence

import pyqtgraph as pg

# (minimum decimal exponent, divisor, suffix), largest unit first.
FREQ_UNITS = (
    (9, 1e9, " GHz"),
    (6, 1e6, " MHz"),
    (3, 1e3, " kHz"),
    (0, 1.0, " Hz"),
)


def _exponent(value: float) -> int:
    magnitude = abs(value)
    if magnitude == 0.0:
        return 0
    return math.floor(math.log10(magnitude))


def format_frequency(value: float) -> str:
    """Return ``value`` in Hz as a two-decimal label, e.g. ``1320 -> "1.32 kHz"``."""
    value = float(value)
    if not math.isfinite(value):
        return ""
    exponent = _exponent(value)
    for min_exponent, divisor, suffix in FREQ_UNITS:
        if exponent >= min_exponent:
            return f"{value / divisor:.2f}{suffix}"
    # Below 1 Hz stays in Hz.
    _, divisor, suffix = FREQ_UNITS[-1]
    return f"{value / divisor:.2f}{suffix}"


class FrequencyAxisItem(pg.AxisItem):
    """Bottom axis that prints Hz/kHz/MHz/GHz labels instead of raw values."""

    def __init__(self, orientation: str = "bottom", **kwargs):
        super().__init__(orientation=orientation, **kwargs)
        # SI prefixes would rescale values before tickStrings sees them.
        self.enableAutoSIPrefix(False)

    def tickStrings(self, values: Sequence[float], scale: float, spacing: float) -> list[str]:
        return [format_frequency(v * scale) for v in values]
