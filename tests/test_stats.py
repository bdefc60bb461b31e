import numpy as np
import pytest

from sweep_inspector.stats import SweepStats, compute_stats


def test_three_sample_sweep() -> None:
    stats = compute_stats([-50.0, -10.0, -90.0])
    assert stats.max_dbm == -10.0
    assert stats.min_dbm == -90.0
    assert stats.avg_dbm == pytest.approx(-50.0)
    assert stats.count == 3


def test_single_sample() -> None:
    stats = compute_stats(np.array([-42.5]))
    assert stats == SweepStats(-42.5, -42.5, -42.5, 1)


def test_empty_sweep_is_rejected() -> None:
    with pytest.raises(ValueError):
        compute_stats([])


def test_label_text() -> None:
    stats = SweepStats(max_dbm=-10.0, min_dbm=-90.0, avg_dbm=-50.0, count=3)
    assert stats.label() == "Max: -10 dBm   Min: -90 dBm   Avg: -50 dBm"
    assert "Avg: -33.3333 dBm" in SweepStats(0.0, -50.0, -100.0 / 3.0, 2).label()
