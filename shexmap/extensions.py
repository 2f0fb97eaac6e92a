from __future__ import annotations

"""Semantic-action extension hooks invoked by the validator."""

from typing import Any, Callable, TypeVar

_REGISTRY: dict[str, type["Extension"]] = {}

E = TypeVar("E", bound=type["Extension"])


class Extension:
    """Base class for semantic-action handlers.

    The validator creates one instance per extension IRI for each run and
    calls the lifecycle hooks below. Subclasses override what they need.
    """

    name: str = ""

    def __init__(self, *, schema: Any = None, **options: Any) -> None:
        self.schema = schema
        self.options = options

    def enter(self, **context: Any) -> None:
        """Called on entry to a shape."""

    def exit(self, **context: Any) -> None:
        """Called when a shape's triple expression has been evaluated."""

    def close(self, **context: Any) -> None:
        """Called after a shape completes, on success or failure."""

    def visit(self, code: str | None = None, matched: Any = None, **context: Any) -> bool:
        """Called once per matched statement; returning False fails the match."""
        return True


def register(iri: str) -> Callable[[E], E]:
    def decorator(cls: E) -> E:
        cls.name = iri
        _REGISTRY[iri] = cls
        return cls

    return decorator


def lookup(iri: str) -> type[Extension] | None:
    return _REGISTRY.get(str(iri))


def registered() -> dict[str, type[Extension]]:
    return dict(_REGISTRY)


__all__ = ["Extension", "register", "lookup", "registered"]
