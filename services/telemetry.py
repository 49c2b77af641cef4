"""Ingest and latest-reading lookup for sensor telemetry."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import ValidationError

from app.schemas import SensorReading
from datastore.latest_cache import LatestReadingCache, build_default_cache
from storage.reading_store import FlatFileReadingStore, build_default_store

logger = logging.getLogger(__name__)


class InvalidReadingError(ValueError):
    """Raised when an incoming payload cannot be stored as a reading."""


class TelemetryService:
    """Coordinates the latest-reading cache and the flat-file store."""

    def __init__(self, store: FlatFileReadingStore, cache: LatestReadingCache) -> None:
        self.store = store
        self.cache = cache

    def ingest(self, payload: Any) -> SensorReading:
        """Cache the reading, then persist it under its storage key.

        The cache is replaced before the write and is not restored if the
        write fails, so memory and disk can disagree after an ``OSError``.
        """
        reading = self.validate(payload)
        data = reading.to_payload()
        key = reading.storage_key

        self.cache.put(data)
        try:
            path = self.store.write(key, data)
        except (OSError, TypeError, ValueError):
            logger.exception("Error saving sensor data", extra={"storage_key": key})
            raise

        logger.info("Stored sensor reading", extra={"storage_key": key, "path": path})
        return reading

    def latest(self) -> Optional[Dict[str, Any]]:
        """Return the newest known reading, or None when nothing is stored."""
        cached = self.cache.get()
        if cached is not None:
            return cached

        logger.info("No cached reading, falling back to storage directory scan")
        record = self.store.latest_record()
        if record is None:
            return None

        data = self.store.read(record)
        self.cache.put(data)
        return data

    @staticmethod
    def validate(payload: Any) -> SensorReading:
        if not isinstance(payload, dict):
            raise InvalidReadingError("Sensor data must be a JSON object.")
        try:
            return SensorReading.model_validate(payload)
        except ValidationError as exc:
            reasons = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'body'}: {error['msg']}"
                for error in exc.errors()
            )
            raise InvalidReadingError(f"Invalid sensor data: {reasons}") from exc


@lru_cache
def build_default_service() -> TelemetryService:
    """Factory that wires the service with the configured store and cache."""
    return TelemetryService(store=build_default_store(), cache=build_default_cache())
