"""Persistence helpers for inspector UI state.

Stores and retrieves the state JSON file (recent files, last directories).
This module must not import UI classes; it only handles filesystem I/O.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

STATE_PATH = os.path.join(os.path.expanduser("~"), ".sweep-inspector-state.json")

# Keep a short recent list to avoid bloating state files.
RECENT_FILE_LIMIT = 5

# Keys the main window reads back, with the type each must have.
STATE_FIELDS = {
    "recent_files": list,
    "last_open_dir": str,
    "last_export_dir": str,
}


def clean_state(data: Any) -> Dict:
    """Keep only known keys of the right type; recent files stay strings."""
    if not isinstance(data, dict):
        return {}
    state: Dict = {}
    for key, kind in STATE_FIELDS.items():
        value = data.get(key)
        if not isinstance(value, kind):
            if key in data:
                logger.debug("Dropping state key %s of type %s", key, type(value).__name__)
            continue
        if kind is list:
            value = [item for item in value if isinstance(item, str) and item.strip()]
            value = value[:RECENT_FILE_LIMIT]
        state[key] = value
    return state


def load_state(path: Optional[str] = None) -> Dict:
    path = path or STATE_PATH
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        # ValueError covers bad JSON and undecodable bytes.
        logger.warning("Ignoring unreadable state file %s: %s", path, exc)
        return {}
    return clean_state(data)


def save_state(data: Dict, path: Optional[str] = None) -> None:
    with open(path or STATE_PATH, "w", encoding="utf-8") as handle:
        json.dump(clean_state(data), handle, indent=2)


def update_recent_files(recent: list[str], path: str) -> list[str]:
    path = path.strip()
    if not path:
        return recent
    filtered = [entry for entry in recent if entry != path]
    filtered.insert(0, path)
    return filtered[:RECENT_FILE_LIMIT]
