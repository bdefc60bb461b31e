import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pyqtgraph as pg  # noqa: E402

from sweep_inspector.data import Sweep  # noqa: E402


class ListSource:
    """Minimal SweepSource backed by plain lists of (frequency, power) pairs."""

    def __init__(self, sweeps, limits=None):
        self.sweeps = sweeps
        self.limits = limits
        self.calls: list[str] = []

    def sweep_count(self) -> int:
        return len(self.sweeps)

    def get_sweep(self, index: int):
        self.calls.append(f"get_sweep({index})")
        return self.sweeps[index]

    def timestamp_label(self, index: int) -> str:
        return f"2014-03-0{index + 1} 12:00:00"

    def frequency_limits(self):
        if self.limits is not None:
            return self.limits
        freqs = [f for sweep in self.sweeps for f, _ in sweep]
        return min(freqs), max(freqs)


@pytest.fixture(scope="session")
def qapp():
    return pg.mkQApp()


@pytest.fixture
def three_sweeps() -> ListSource:
    return ListSource(
        [
            [(100.0, -50.0), (200.0, -10.0), (300.0, -90.0)],
            [(100.0, -60.0), (200.0, -20.0), (300.0, -100.0)],
            [(100.0, -70.0), (200.0, -30.0), (300.0, -110.0)],
        ]
    )


@pytest.fixture
def ghz_sweep() -> Sweep:
    return Sweep([2.40e9, 2.42e9, 2.44e9, 2.46e9, 2.48e9], [-95.0, -80.0, -40.0, -82.0, -97.0])
