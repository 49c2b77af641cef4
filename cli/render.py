from __future__ import annotations

import json
from typing import Any, Dict, Iterable

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        if isinstance(value, (dict, list)):
            value = json.dumps(value)
        typer.echo(f"{key}: {value}")


def render_reading(payload: Dict[str, Any]) -> None:
    echo_heading("Latest Reading")
    typer.echo(f"timestamp: {payload.get('timestamp')}")
    echo_key_values(
        (key, value) for key, value in sorted(payload.items()) if key != "timestamp"
    )
