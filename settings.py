from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple


_PORT_ENV = "PORT"
_HOST_ENV = "HOST"
_ALLOWED_ORIGINS_ENV = "ALLOWED_ORIGINS"
_STORAGE_DIR_ENV = "SENSOR_DATA_DIR"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_ALLOWED_ORIGINS: Tuple[str, ...] = ("http://localhost:3000",)


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    allowed_origins: Tuple[str, ...]
    storage_dir: str
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_port(default: int) -> int:
    value = os.getenv(_PORT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if 0 < parsed < 65536 else default


def _read_allowed_origins(default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(_ALLOWED_ORIGINS_ENV)
    if value is None:
        return default
    origins = tuple(part.strip() for part in value.split(",") if part.strip())
    return origins or default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        host=_read_str_env(_HOST_ENV, "0.0.0.0"),
        port=_read_port(3001),
        allowed_origins=_read_allowed_origins(DEFAULT_ALLOWED_ORIGINS),
        storage_dir=_read_str_env(_STORAGE_DIR_ENV, "./db"),
        log_level=_read_log_level("INFO"),
    )
