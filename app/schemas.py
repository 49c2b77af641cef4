"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from models.records import derive_storage_key, is_valid_storage_key


class SensorReading(BaseModel):
    """One telemetry payload: a required timestamp plus any other fields."""

    model_config = ConfigDict(extra="allow")

    timestamp: StrictStr = Field(
        ...,
        description="ISO-8601 style timestamp, e.g. 2025-06-05T14:23:45Z.",
    )

    @field_validator("timestamp")
    @classmethod
    def _timestamp_has_storage_key(cls, value: str) -> str:
        if not is_valid_storage_key(derive_storage_key(value)):
            raise ValueError(
                "timestamp must look like YYYY-MM-DDTHH:MM:SS with at least 14 digits"
            )
        return value

    @property
    def storage_key(self) -> str:
        return derive_storage_key(self.timestamp)

    def to_payload(self) -> Dict[str, Any]:
        """Return the reading as a plain mapping, extension fields included."""
        return self.model_dump(mode="json")


NO_DATA_MESSAGE = "No sensor data available."


class ErrorResponse(BaseModel):
    """Body returned by the read route when nothing or nothing usable is stored."""

    error: str
