from __future__ import annotations

import copy
from functools import lru_cache
from threading import Lock
from typing import Any, Dict, Optional


class LatestReadingCache:
    """Holds at most one reading: the last one ingested or loaded from disk."""

    def __init__(self) -> None:
        self._reading: Optional[Dict[str, Any]] = None
        self._lock = Lock()

    def put(self, reading: Dict[str, Any]) -> None:
        with self._lock:
            self._reading = copy.deepcopy(reading)

    def get(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            if self._reading is None:
                return None
            return copy.deepcopy(self._reading)

    def is_empty(self) -> bool:
        with self._lock:
            return self._reading is None


@lru_cache
def build_default_cache() -> LatestReadingCache:
    return LatestReadingCache()
