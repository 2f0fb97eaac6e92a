from __future__ import annotations

"""Exception hierarchy shared by the schema model, validator and lens."""


class ShexMapError(Exception):
    """Base class for every error raised by shexmap."""


class SchemaError(ShexMapError, ValueError):
    """Malformed or unsupported ShExJ input, or an unknown shape label."""


class TagLookupError(ShexMapError, LookupError):
    """A tag has no tagged position in the destination schema."""

    def __init__(self, tag: str, message: str | None = None) -> None:
        self.tag = tag
        super().__init__(message or f"tag not declared in destination schema: {tag}")


class MalformedPathError(ShexMapError, RuntimeError):
    """A path was replayed without segments or without a root segment."""


class ShapeValidationError(ShexMapError):
    """One or more focus nodes did not conform to their shape."""

    def __init__(self, reasons: list[str]) -> None:
        self.reasons = list(reasons)
        summary = "; ".join(self.reasons) or "validation failed"
        super().__init__(summary)


__all__ = [
    "ShexMapError",
    "SchemaError",
    "TagLookupError",
    "MalformedPathError",
    "ShapeValidationError",
]
