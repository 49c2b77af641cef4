from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from datastore.latest_cache import LatestReadingCache
from services.telemetry import InvalidReadingError, TelemetryService
from storage.reading_store import FlatFileReadingStore


def _build_service(root: Path) -> TelemetryService:
    return TelemetryService(store=FlatFileReadingStore(root_path=root), cache=LatestReadingCache())


def _fail(*_args, **_kwargs):
    raise AssertionError("storage must not be touched on a cache hit")


def test_ingest_writes_file_and_updates_cache(tmp_path: Path) -> None:
    service = _build_service(tmp_path)
    payload = {"timestamp": "2025-06-05T14:23:45Z", "temperature": 21.5, "unit": "C"}

    reading = service.ingest(payload)

    assert reading.storage_key == "20250605142345"
    stored = json.loads((tmp_path / "sensor-data-20250605142345.json").read_text())
    assert stored == payload
    assert service.cache.get() == payload


def test_latest_after_ingest_is_served_from_cache(tmp_path: Path, monkeypatch) -> None:
    service = _build_service(tmp_path)
    service.ingest({"timestamp": "2025-06-05T14:23:45Z", "v": 1})
    service.ingest({"timestamp": "2024-01-01T00:00:00Z", "v": 2})

    monkeypatch.setattr(service.store, "latest_record", _fail)
    monkeypatch.setattr(service.store, "read", _fail)

    # The cache holds the last ingested reading even if its timestamp is older.
    assert service.latest() == {"timestamp": "2024-01-01T00:00:00Z", "v": 2}


def test_latest_cold_start_loads_newest_file_and_fills_cache(tmp_path: Path) -> None:
    writer = _build_service(tmp_path)
    for stamp, value in [
        ("2025-01-01T00:00:00Z", 1),
        ("2025-03-01T12:00:00Z", 3),
        ("2025-02-01T06:30:00Z", 2),
    ]:
        writer.ingest({"timestamp": stamp, "v": value})

    service = _build_service(tmp_path)
    assert service.cache.is_empty()

    latest = service.latest()

    assert latest == {"timestamp": "2025-03-01T12:00:00Z", "v": 3}
    assert service.cache.get() == latest


def test_latest_returns_none_when_store_is_empty(tmp_path: Path) -> None:
    service = _build_service(tmp_path / "db")

    assert service.latest() is None
    assert service.cache.is_empty()


def test_latest_propagates_parse_errors(tmp_path: Path) -> None:
    service = _build_service(tmp_path)
    (tmp_path / "sensor-data-20250101000000.json").write_text("garbage")

    with pytest.raises(ValueError):
        service.latest()
    assert service.cache.is_empty()


@pytest.mark.parametrize(
    "payload",
    [
        {"temperature": 20},
        {"timestamp": 1717596225},
        {"timestamp": None},
        {"timestamp": "yesterday"},
        ["2025-06-05T14:23:45Z"],
        "2025-06-05T14:23:45Z",
    ],
)
def test_ingest_rejects_invalid_payload_without_side_effects(tmp_path: Path, payload) -> None:
    service = _build_service(tmp_path)

    with pytest.raises(InvalidReadingError):
        service.ingest(payload)

    assert service.cache.is_empty()
    assert list(tmp_path.iterdir()) == []


def test_ingest_same_key_keeps_only_second_reading(tmp_path: Path) -> None:
    service = _build_service(tmp_path)

    service.ingest({"timestamp": "2025-06-05T14:23:45Z", "v": "first"})
    service.ingest({"timestamp": "2025-06-05T14:23:45.900Z", "v": "second"})

    files = list(tmp_path.iterdir())
    assert [path.name for path in files] == ["sensor-data-20250605142345.json"]
    assert json.loads(files[0].read_text())["v"] == "second"


def test_write_failure_keeps_cache_updated(tmp_path: Path, monkeypatch, caplog) -> None:
    service = _build_service(tmp_path)

    def failing_write(key, payload):
        raise PermissionError("read-only file system")

    monkeypatch.setattr(service.store, "write", failing_write)

    with caplog.at_level(logging.ERROR, logger="services.telemetry"):
        with pytest.raises(OSError):
            service.ingest({"timestamp": "2025-06-05T14:23:45Z", "v": 1})

    assert service.cache.get() == {"timestamp": "2025-06-05T14:23:45Z", "v": 1}
    assert list(tmp_path.iterdir()) == []
    records = [record for record in caplog.records if record.name == "services.telemetry"]
    assert records
    assert getattr(records[0], "storage_key") == "20250605142345"
