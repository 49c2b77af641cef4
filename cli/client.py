from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import typer

from app.schemas import NO_DATA_MESSAGE
from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the telemetry backend."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def status(self) -> str:
        try:
            response = self._client.get("/")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.text

    def send_reading(self, reading: Dict[str, Any]) -> str:
        try:
            response = self._client.post("/api/sensor-data/add", json=reading)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.text

    def get_latest(self) -> Optional[Dict[str, Any]]:
        """Return the latest reading, or None when the backend has none."""
        try:
            response = self._client.get("/api/sensor-data/get")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        payload = response.json()
        if not isinstance(payload, dict):
            raise typer.BadParameter("Unexpected response payload when fetching latest reading.")
        if payload == {"error": NO_DATA_MESSAGE}:
            return None
        return payload

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("error") if isinstance(data, dict) else None
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
