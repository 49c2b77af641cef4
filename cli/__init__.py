"""CLI package for talking to the sensor telemetry backend."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# ``cli.app`` stays the module, not the Typer instance; tests patch
# ``cli.app.ApiClient`` through that path.

__all__ = []
