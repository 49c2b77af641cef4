from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer

from app.schemas import NO_DATA_MESSAGE
from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_reading


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the sensor telemetry backend.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Backend base URL (defaults to API_BASE_URL env or http://localhost:3001).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("status")
def status_command(ctx: typer.Context) -> None:
    """Check that the backend is reachable."""
    state = _get_state(ctx)
    typer.echo(state.client.status())


@app.command("send")
def send_command(
    ctx: typer.Context,
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Path to a JSON reading."
    ),
    now: bool = typer.Option(
        False,
        "--now",
        help="Replace the reading's timestamp with the current UTC time.",
    ),
) -> None:
    """Send one sensor reading to the backend."""
    state = _get_state(ctx)
    try:
        reading = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{file} is not valid JSON: {exc}") from exc
    if not isinstance(reading, dict):
        raise typer.BadParameter(f"{file} must contain a JSON object.")
    if now:
        reading["timestamp"] = _utc_timestamp()

    typer.echo(f"Sending {file} to {state.config.base_url} ...")
    message = state.client.send_reading(reading)
    typer.secho(message, fg=typer.colors.GREEN)


@app.command("latest")
def latest_command(ctx: typer.Context) -> None:
    """Show the most recent reading stored by the backend."""
    state = _get_state(ctx)
    reading = state.client.get_latest()
    if reading is None:
        typer.echo(NO_DATA_MESSAGE)
        return
    render_reading(reading)
