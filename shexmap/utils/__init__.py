"""Shared helpers."""

from .log_json import JsonLogger, get_logger

__all__ = ["JsonLogger", "get_logger"]
