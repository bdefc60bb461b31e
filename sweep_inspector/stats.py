"""Summary statistics for a single sweep."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np


@dataclass(frozen=True)
class SweepStats:
    max_dbm: float
    min_dbm: float
    avg_dbm: float
    count: int

    def label(self) -> str:
        return (
            f"Max: {self.max_dbm:g} dBm   "
            f"Min: {self.min_dbm:g} dBm   "
            f"Avg: {self.avg_dbm:g} dBm"
        )


def compute_stats(power_dbm: Union[np.ndarray, Sequence[float]]) -> SweepStats:
    """Max, min and arithmetic mean of the power values (dBm, not linear power)."""
    power = np.asarray(power_dbm, dtype=np.float64)
    if power.size == 0:
        raise ValueError("cannot compute statistics of an empty sweep")
    return SweepStats(
        max_dbm=float(power.max()),
        min_dbm=float(power.min()),
        avg_dbm=float(power.mean()),
        count=int(power.size),
    )
