"""Inspector configuration defaults.

Defines the InspectorConfig dataclass and default values. This module should
not import UI classes, and it should stay focused on configuration data only.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass
class InspectorConfig:
    """
    Configuration for the sweep inspector.

    Notes
    The power axis is fixed so sweeps taken at different times compare
    visually; the frequency axis follows the data source limits.
    """

    # Fixed power axis (dBm) and its major tick step.
    power_min_dbm: float = -135.0
    power_max_dbm: float = 20.0
    power_step_db: float = 10.0

    # Major tick step on the frequency axis is span / freq_divisions.
    freq_divisions: int = 5

    # Plot colors (any pyqtgraph color spec).
    background: str = "k"
    curve_color: str = "y"
    curve_width: int = 2
    annotation_color: str = "g"
    annotation_font: Tuple[str, int] = ("Helvetica", 10)
    tracker_color: str = "c"
    grid_alpha: float = 128 / 255

    # UI responsiveness (hover).
    hover_rate_hz: int = 25

    # Timestamp labels shown next to the slider and in the title.
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"
