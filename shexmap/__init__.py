from __future__ import annotations

"""Package metadata and public entry points."""

from importlib.metadata import PackageNotFoundError, version

from .lens import generate_from
from .schema import Schema, load_schema
from .validator import execute

try:
    __version__ = version("shexmap")
except PackageNotFoundError:  # pragma: no cover - package not installed
    __version__ = "0.1.0"

__all__ = ["__version__", "generate_from", "execute", "load_schema", "Schema"]
