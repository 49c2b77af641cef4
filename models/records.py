"""Storage naming shared by the ingest and lookup paths."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

STORAGE_KEY_LENGTH = 14
RECORD_PREFIX = "sensor-data-"
RECORD_SUFFIX = ".json"

_STRIPPED_CHARS = str.maketrans("", "", "-:T")
_RECORD_NAME = re.compile(r"sensor-data-(\d+)\.json", re.ASCII)


def derive_storage_key(timestamp: str) -> str:
    """Turn ``2025-06-05T14:23:45Z`` into ``20250605142345``.

    Drops every ``-``, ``:`` and ``T`` then keeps the first 14 characters.
    The result is not checked; see :func:`is_valid_storage_key`.
    """
    return timestamp.translate(_STRIPPED_CHARS)[:STORAGE_KEY_LENGTH]


def is_valid_storage_key(key: str) -> bool:
    return len(key) == STORAGE_KEY_LENGTH and key.isascii() and key.isdigit()


def record_filename(key: str) -> str:
    return f"{RECORD_PREFIX}{key}{RECORD_SUFFIX}"


def parse_record_filename(name: str) -> Optional[str]:
    """Return the digit run of a record file name, or None for foreign names."""
    match = _RECORD_NAME.fullmatch(name)
    if match is None:
        return None
    return match.group(1)


@dataclass(slots=True, frozen=True)
class StoredRecord:
    """A reading file on disk, identified by its storage key."""

    key: str
    path: Path

    @property
    def sort_value(self) -> int:
        return int(self.key)
