# =============================================================================
# hospital_core/data/snapshot.py
# Snapshot flattening and the local mirror of the hospitals tree
# =============================================================================
"""
The hospitals tree is stored as ``year -> id -> fields``.

``flatten_snapshot`` turns that into the flat list the UI works with.
``SnapshotMirror`` rebuilds the full tree from the put/patch events that
``firebase_admin`` streams, so every change can be re-flattened in full.
"""

from __future__ import annotations
import copy
import threading
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

ID_FIELD = "id"
YEAR_FIELD = "YEAR"


def flatten_snapshot(data: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Flatten a ``year -> id -> fields`` snapshot into a list of records.

    Each record carries its own fields plus ``id`` and ``YEAR``; those two
    win over same-named fields stored in the record. Order is unspecified.

    Args:
        data: Snapshot value at ``hospitals`` (may be None)

    Returns:
        List of record dictionaries (empty for an empty/absent snapshot)
    """
    if not data:
        return []

    hospitals = []
    for year, year_data in data.items():
        if not year_data or not isinstance(year_data, Mapping):
            continue
        for hospital_id, fields in year_data.items():
            record = dict(fields) if isinstance(fields, Mapping) else {}
            record[ID_FIELD] = hospital_id
            record[YEAR_FIELD] = year
            hospitals.append(record)

    return hospitals


def sort_hospitals(hospitals: List[Dict[str, Any]], by: str = "name") -> List[Dict[str, Any]]:
    """Sort records by ``YEAR`` then ``by`` (missing values last)."""
    return sorted(
        hospitals,
        key=lambda h: (str(h.get(YEAR_FIELD, "")), h.get(by) is None, str(h.get(by, ""))),
    )


def hospitals_to_frame(hospitals: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Build a DataFrame from flattened records with ``id`` and ``YEAR`` first.

    Returns:
        DataFrame (empty with just the key columns if there are no records)
    """
    if not hospitals:
        return pd.DataFrame(columns=[ID_FIELD, YEAR_FIELD])

    df = pd.DataFrame(hospitals)
    leading = [ID_FIELD, YEAR_FIELD]
    rest = [c for c in df.columns if c not in leading]
    return df[leading + rest]


def _split_path(path: str) -> List[str]:
    return [part for part in path.split("/") if part]


class SnapshotMirror:
    """
    Local copy of the tree under the listened path.

    ``firebase_admin`` delivers an initial ``put`` at ``/`` with the full
    value, then ``put``/``patch`` events relative to the listened path.
    A ``None`` value removes the node; parents left empty are pruned, as
    the Realtime Database never stores empty objects.
    """

    def __init__(self):
        self._tree: Optional[Dict[str, Any]] = None
        self._lock = threading.Lock()

    def snapshot(self) -> Optional[Dict[str, Any]]:
        """Deep copy of the current tree (None when the path is empty)."""
        with self._lock:
            return copy.deepcopy(self._tree)

    def reset(self) -> None:
        with self._lock:
            self._tree = None

    def apply(self, event_type: str, path: str, data: Any) -> Optional[Dict[str, Any]]:
        """
        Apply one streamed event and return the resulting full snapshot.

        Args:
            event_type: ``put`` or ``patch``
            path: Event path relative to the listened reference
            data: Event payload

        Raises:
            ValueError: for unsupported event types or a non-mapping patch
        """
        with self._lock:
            if event_type == "put":
                self._set(_split_path(path), data)
            elif event_type == "patch":
                if not isinstance(data, Mapping):
                    raise ValueError(f"patch payload must be a mapping, got {type(data).__name__}")
                base = _split_path(path)
                for key, value in data.items():
                    self._set(base + _split_path(key), value)
            else:
                raise ValueError(f"Unsupported event type: {event_type}")

            return copy.deepcopy(self._tree)

    def _set(self, parts: List[str], value: Any) -> None:
        if isinstance(value, Mapping):
            value = copy.deepcopy(dict(value)) or None

        if not parts:
            self._tree = value
            return

        if value is None:
            self._remove(parts)
            return

        if not isinstance(self._tree, dict):
            self._tree = {}
        node = self._tree
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value

    def _remove(self, parts: List[str]) -> None:
        if not isinstance(self._tree, dict):
            return

        trail = []
        node = self._tree
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                return
            trail.append((node, part))
            node = child
        node.pop(parts[-1], None)

        # prune emptied parents
        while trail and not node:
            parent, key = trail.pop()
            parent.pop(key, None)
            node = parent

        if not self._tree:
            self._tree = None
