from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from models.records import StoredRecord, parse_record_filename, record_filename
from settings import get_settings

logger = logging.getLogger(__name__)


class FlatFileReadingStore:
    """One JSON file per reading, named after the reading's storage key."""

    def __init__(self, root_path: Path) -> None:
        self.root_path = root_path
        root_path.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.root_path / record_filename(key)

    def write(self, key: str, payload: Dict[str, Any]) -> Path:
        # Serialize first so a bad payload never truncates an existing file.
        text = json.dumps(payload)
        path = self.path_for(key)
        path.write_text(text, encoding="utf-8")
        return path

    def list_records(self) -> List[StoredRecord]:
        """Return every well-named record file, newest key first.

        A missing directory is treated as an empty store. Any other listing
        failure propagates as ``OSError``.
        """
        if not self.root_path.exists():
            return []

        records: List[StoredRecord] = []
        for path in self.root_path.iterdir():
            key = parse_record_filename(path.name)
            if key is None or not path.is_file():
                logger.debug(
                    "Skipping unrecognised entry in storage directory",
                    extra={"path": path},
                )
                continue
            records.append(StoredRecord(key=key, path=path))

        records.sort(key=lambda record: (record.sort_value, record.key), reverse=True)
        return records

    def latest_record(self) -> Optional[StoredRecord]:
        records = self.list_records()
        logger.info(
            "Scanned storage directory for latest reading",
            extra={"path": self.root_path, "candidate_count": len(records)},
        )
        return records[0] if records else None

    def read(self, record: StoredRecord) -> Dict[str, Any]:
        """Load a stored reading; raises ``OSError`` or ``ValueError`` on bad files."""
        data = json.loads(record.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Stored reading {record.path.name!r} is not a JSON object.")
        return data


@lru_cache
def build_default_store(root_path: Optional[str] = None) -> FlatFileReadingStore:
    settings = get_settings()
    storage_dir = settings.storage_dir if root_path is None else root_path
    return FlatFileReadingStore(root_path=Path(storage_dir))
