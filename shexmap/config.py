from __future__ import annotations

"""Loader for lens runtime configuration."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .namespaces import MAP_EXTENSION_IRI
from .utils.log_json import DEFAULT_MAX_DETAILS_BYTES

CONFIG_ENV = "SHEXMAP_CONFIG"

_OUTPUT_FORMATS = {"turtle", "ttl", "nt", "ntriples", "xml", "json-ld", "n3", "trig"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(slots=True)
class LensConfig:
    """Runtime toggles for the lens driver and CLI."""

    extension_iri: str = MAP_EXTENSION_IRI
    output_format: str = "turtle"
    rewrite_literal_roots: bool = False
    log_level: str = "WARNING"
    max_details_bytes: int = DEFAULT_MAX_DETAILS_BYTES


def _coerce_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return default


def config_from_mapping(data: Mapping[str, Any] | None) -> LensConfig:
    if not data:
        return LensConfig()
    defaults = LensConfig()
    output_format = str(data.get("output_format") or defaults.output_format).lower()
    if output_format not in _OUTPUT_FORMATS:
        output_format = defaults.output_format
    log_level = str(data.get("log_level") or defaults.log_level).upper()
    if log_level not in _LOG_LEVELS:
        log_level = defaults.log_level
    return LensConfig(
        extension_iri=str(data.get("extension_iri") or defaults.extension_iri),
        output_format=output_format,
        rewrite_literal_roots=_coerce_bool(
            data.get("rewrite_literal_roots"), defaults.rewrite_literal_roots
        ),
        log_level=log_level,
        max_details_bytes=max(
            0, _coerce_int(data.get("max_details_bytes"), defaults.max_details_bytes)
        ),
    )


def config_path() -> Path | None:
    env = os.getenv(CONFIG_ENV)
    if env:
        return Path(env)
    return None


def load_config(path: Path | str | None = None) -> LensConfig:
    """Load configuration from ``path`` or ``$SHEXMAP_CONFIG``.

    A missing file yields the defaults.
    """

    target = Path(path) if path else config_path()
    if target is None or not target.exists():
        return LensConfig()
    with target.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, Mapping):
        return LensConfig()
    return config_from_mapping(data)


__all__ = ["CONFIG_ENV", "LensConfig", "config_from_mapping", "config_path", "load_config"]
