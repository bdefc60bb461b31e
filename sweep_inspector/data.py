"""Sweep containers and sweep-file I/O.

The inspector only talks to a SweepSource. SweepHistory is the in-memory
implementation used by the application; it can be filled by an acquisition
thread or loaded from a JSON/CSV sweep file. This module must not import UI
classes.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, List, Optional, Protocol, Sequence, Tuple, Union

import jsonschema
import numpy as np

from sweep_inspector.config import InspectorConfig

logger = logging.getLogger(__name__)

SWEEP_FILE_VERSION = 1
CSV_HEADER = "timestamp,frequency_hz,power_dbm"


class SweepFileError(ValueError):
    """A sweep file could not be read or does not match the expected layout."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass(frozen=True, eq=False)
class Sweep:
    """One scan across the band: ordered frequency (Hz) and power (dBm) samples."""

    freqs_hz: np.ndarray
    power_dbm: np.ndarray

    def __post_init__(self):
        freqs = np.asarray(self.freqs_hz, dtype=np.float64).reshape(-1)
        power = np.asarray(self.power_dbm, dtype=np.float64).reshape(-1)
        if freqs.shape != power.shape:
            raise ValueError("freqs_hz and power_dbm must have matching shapes")
        object.__setattr__(self, "freqs_hz", freqs)
        object.__setattr__(self, "power_dbm", power)

    def __len__(self) -> int:
        return int(self.freqs_hz.size)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        for f, p in zip(self.freqs_hz, self.power_dbm):
            yield float(f), float(p)

    @classmethod
    def from_pairs(cls, pairs: Union[np.ndarray, Sequence[Sequence[float]]]) -> "Sweep":
        arr = np.asarray(pairs, dtype=np.float64)
        if arr.size == 0:
            return cls(np.empty(0), np.empty(0))
        if arr.ndim != 2 or arr.shape[1] != 2:
            raise ValueError("sweep samples must be (frequency, power) pairs")
        return cls(arr[:, 0], arr[:, 1])

    def nearest_index(self, freq_hz: float) -> Optional[int]:
        if self.freqs_hz.size == 0:
            return None
        return int(np.argmin(np.abs(self.freqs_hz - float(freq_hz))))


def as_sweep(obj: Any) -> Sweep:
    if isinstance(obj, Sweep):
        return obj
    return Sweep.from_pairs(obj)


class SweepSource(Protocol):
    """What the inspector needs from whoever stores the sweeps."""

    def sweep_count(self) -> int:
        ...

    def get_sweep(self, index: int) -> Sweep:
        ...

    def timestamp_label(self, index: int) -> str:
        ...

    def frequency_limits(self) -> Tuple[float, float]:
        ...


class SweepHistory:
    """Time-ordered sweeps kept in memory."""

    def __init__(self, cfg: Optional[InspectorConfig] = None):
        self.cfg = cfg or InspectorConfig()
        # Appends may come from an acquisition thread while the UI reads.
        self._lock = threading.Lock()
        self._sweeps: List[Sweep] = []
        self._timestamps: List[datetime] = []
        self._freq_min: Optional[float] = None
        self._freq_max: Optional[float] = None

    def __len__(self) -> int:
        return self.sweep_count()

    def append(self, sweep: Any, timestamp: Union[datetime, float, None] = None) -> int:
        sweep = as_sweep(sweep)
        if timestamp is None:
            ts = datetime.now()
        elif isinstance(timestamp, datetime):
            ts = timestamp
        else:
            ts = datetime.fromtimestamp(float(timestamp))
        with self._lock:
            self._sweeps.append(sweep)
            self._timestamps.append(ts)
            if len(sweep):
                lo = float(sweep.freqs_hz.min())
                hi = float(sweep.freqs_hz.max())
                self._freq_min = lo if self._freq_min is None else min(self._freq_min, lo)
                self._freq_max = hi if self._freq_max is None else max(self._freq_max, hi)
            return len(self._sweeps) - 1

    def sweep_count(self) -> int:
        with self._lock:
            return len(self._sweeps)

    def get_sweep(self, index: int) -> Sweep:
        with self._lock:
            if index < 0 or index >= len(self._sweeps):
                raise IndexError(f"sweep index {index} out of range")
            return self._sweeps[index]

    def timestamp(self, index: int) -> datetime:
        with self._lock:
            if index < 0 or index >= len(self._timestamps):
                raise IndexError(f"sweep index {index} out of range")
            return self._timestamps[index]

    def timestamp_label(self, index: int) -> str:
        return self.timestamp(index).strftime(self.cfg.timestamp_format)

    def frequency_limits(self) -> Tuple[float, float]:
        with self._lock:
            if self._freq_min is None or self._freq_max is None:
                return 0.0, 0.0
            return self._freq_min, self._freq_max


def sweep_file_schema() -> dict[str, Any]:
    """Return the JSON schema for sweep history files."""

    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "title": "Sweep History File",
        "type": "object",
        "properties": {
            "version": {"const": SWEEP_FILE_VERSION},
            "sweeps": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "timestamp": {"type": ["string", "number"]},
                        "freq_hz": {"type": "array", "items": {"type": "number"}},
                        "power_dbm": {"type": "array", "items": {"type": "number"}},
                    },
                    "required": ["timestamp", "freq_hz", "power_dbm"],
                    "additionalProperties": False,
                },
            },
        },
        "required": ["version", "sweeps"],
    }


def _parse_timestamp(path: str, value: Union[str, float]) -> datetime:
    try:
        if isinstance(value, str):
            return datetime.fromisoformat(value)
        # nan, inf and values past the platform time_t all land here.
        return datetime.fromtimestamp(float(value))
    except (OverflowError, OSError, ValueError) as exc:
        raise SweepFileError(path, f"bad timestamp {value!r}") from exc


def _load_json(path: str, cfg: Optional[InspectorConfig]) -> SweepHistory:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except UnicodeDecodeError as exc:
        raise SweepFileError(path, "file is not UTF-8 text") from exc
    except json.JSONDecodeError as exc:
        raise SweepFileError(path, f"invalid JSON ({exc.msg})") from exc
    try:
        jsonschema.validate(data, sweep_file_schema())
    except jsonschema.ValidationError as exc:
        raise SweepFileError(path, exc.message) from exc

    history = SweepHistory(cfg)
    for entry in data["sweeps"]:
        try:
            sweep = Sweep(entry["freq_hz"], entry["power_dbm"])
        except ValueError as exc:
            raise SweepFileError(path, str(exc)) from exc
        history.append(sweep, _parse_timestamp(path, entry["timestamp"]))
    return history


def _load_csv(path: str, cfg: Optional[InspectorConfig]) -> SweepHistory:
    with open(path, "r", encoding="utf-8") as handle:
        try:
            header = handle.readline().strip()
            if header != CSV_HEADER:
                raise SweepFileError(path, f"expected header {CSV_HEADER!r}")
            rows = np.loadtxt(handle, delimiter=",", ndmin=2)
        except UnicodeDecodeError as exc:
            raise SweepFileError(path, "file is not UTF-8 text") from exc
        except SweepFileError:
            raise
        except ValueError as exc:
            raise SweepFileError(path, str(exc)) from exc

    history = SweepHistory(cfg)
    if rows.size == 0:
        return history
    if rows.shape[1] != 3:
        raise SweepFileError(path, "expected 3 columns per row")
    # Consecutive rows with the same timestamp form one sweep.
    breaks = np.flatnonzero(np.diff(rows[:, 0]) != 0) + 1
    for chunk in np.split(rows, breaks):
        timestamp = _parse_timestamp(path, float(chunk[0, 0]))
        history.append(Sweep(chunk[:, 1], chunk[:, 2]), timestamp)
    return history


def load_history(path: str, cfg: Optional[InspectorConfig] = None) -> SweepHistory:
    """Load a .json or .csv sweep file into a SweepHistory."""
    ext = os.path.splitext(path)[1].lower()
    try:
        if ext == ".json":
            history = _load_json(path, cfg)
        elif ext == ".csv":
            history = _load_csv(path, cfg)
        else:
            raise SweepFileError(path, f"unsupported sweep file type {ext or '(none)'}")
    except OSError as exc:
        raise SweepFileError(path, exc.strerror or str(exc)) from exc
    logger.info("Loaded %d sweeps from %s", history.sweep_count(), path)
    return history


def save_history(history: SweepHistory, path: str) -> None:
    """Write a SweepHistory as .json or .csv, chosen by suffix."""
    ext = os.path.splitext(path)[1].lower()
    count = history.sweep_count()
    if ext == ".json":
        data = {
            "version": SWEEP_FILE_VERSION,
            "sweeps": [
                {
                    "timestamp": history.timestamp(i).isoformat(),
                    "freq_hz": history.get_sweep(i).freqs_hz.tolist(),
                    "power_dbm": history.get_sweep(i).power_dbm.tolist(),
                }
                for i in range(count)
            ],
        }
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2)
    elif ext == ".csv":
        blocks = []
        for i in range(count):
            sweep = history.get_sweep(i)
            ts = np.full(len(sweep), history.timestamp(i).timestamp())
            blocks.append(np.column_stack((ts, sweep.freqs_hz, sweep.power_dbm)))
        data = np.vstack(blocks) if blocks else np.empty((0, 3))
        np.savetxt(
            path,
            data,
            delimiter=",",
            header=CSV_HEADER,
            comments="",
            fmt=["%.6f", "%.12g", "%.9g"],
        )
    else:
        raise SweepFileError(path, f"unsupported sweep file type {ext or '(none)'}")
    logger.info("Saved %d sweeps to %s", count, path)
