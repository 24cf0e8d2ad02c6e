"""
Best-score / best-time persistence boundary.

The core only computes the candidate value and the comparison; storage is a
key-value collaborator holding one number per (game, difficulty) key.
"""

from __future__ import annotations

import json
import math
import os
from typing import Dict, Optional


def _as_number(raw) -> Optional[float]:
    if isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


class BestStore:
    """get(key) -> number or None; set(key, number)"""

    def get(self, key: str) -> Optional[float]:
        raise NotImplementedError

    def set(self, key: str, value: float):
        raise NotImplementedError


class MemoryStore(BestStore):
    def __init__(self, initial: Optional[Dict[str, object]] = None):
        self.values: Dict[str, object] = dict(initial or {})

    def get(self, key: str) -> Optional[float]:
        return _as_number(self.values.get(key))

    def set(self, key: str, value: float):
        self.values[key] = value


class JsonFileStore(BestStore):
    """All keys in a single JSON object file.

    The file is read once, on first use; after that reads come from memory and
    only set() touches the disk.
    """

    def __init__(self, path: str):
        self.path = path
        self._data: Optional[Dict[str, object]] = None

    def _load(self) -> Dict[str, object]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def _cached(self) -> Dict[str, object]:
        if self._data is None:
            self._data = self._load()
        return self._data

    def get(self, key: str) -> Optional[float]:
        return _as_number(self._cached().get(key))

    def set(self, key: str, value: float):
        data = self._cached()
        data[key] = value
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2)


def is_better(new: float, stored: Optional[float], higher_is_better: bool = True) -> bool:
    """Strict comparison; a missing stored value always loses"""
    if stored is None:
        return True
    return new > stored if higher_is_better else new < stored


def record_best(store: BestStore, key: str, value: float, higher_is_better: bool = True) -> bool:
    """Persist value if it beats the stored best. Returns True when written."""
    if not is_better(value, store.get(key), higher_is_better):
        return False
    store.set(key, value)
    return True
