from __future__ import annotations

"""Map semantic-action extension: collect tagged values during validation."""

from typing import Any, Mapping

from rdflib import Graph, URIRef
from rdflib.term import Node

from ..config import LensConfig
from ..errors import ShexMapError
from ..extensions import Extension, register
from ..iri import canonical_prefixes, resolve_iri
from ..namespaces import MAP_EXTENSION_IRI
from ..utils.log_json import get_logger
from .generator import Generator

_logger = get_logger("lens")


class Binding:
    """One ``(tag, value)`` observation.

    The tag is expanded with the prefix table of the schema it was written
    in, on first access.
    """

    def __init__(self, prefixes: Mapping[str, str], rawname: str, value: Node) -> None:
        self.prefixes = prefixes
        self.rawname = rawname
        self.value = value
        self._name: URIRef | None = None

    @property
    def name(self) -> URIRef:
        if self._name is None:
            self._name = resolve_iri(self.rawname, self.prefixes)
        return self._name

    def __repr__(self) -> str:
        return f"Binding({self.rawname!r}, {self.value.n3()})"


@register(MAP_EXTENSION_IRI)
class MapExtension(Extension):
    """Append a :class:`Binding` for every statement matched under a map action."""

    def __init__(self, *, schema: Any = None, **options: Any) -> None:
        super().__init__(schema=schema, **options)
        self.prefixes = canonical_prefixes(getattr(schema, "prefixes", None))
        self._bindings: list[Binding] = []
        self._drained = False

    @property
    def bindings(self) -> tuple[Binding, ...]:
        return tuple(self._bindings)

    def enter(self, **context: Any) -> None:
        _logger.debug("map.enter", shape=context.get("shape"), focus=context.get("focus"))

    def exit(self, **context: Any) -> None:
        _logger.debug("map.exit", shape=context.get("shape"), matched=context.get("matched"))

    def close(self, **context: Any) -> None:
        _logger.debug("map.close", shape=context.get("shape"))

    def visit(self, code: str | None = None, matched: Any = None, **context: Any) -> bool:
        if code is None or matched is None:
            return True
        value = matched[0] if context.get("inverse") else matched[2]
        self._bindings.append(Binding(self.prefixes, code.strip(), value))
        _logger.debug("map.visit", code=code, value=value)
        return True

    def drain(self) -> list[Binding]:
        if self._drained:
            raise ShexMapError("bindings of this validation run were already replayed")
        self._drained = True
        return list(self._bindings)

    def generate(
        self,
        schema: Any,
        target_map: Mapping[Any, Any],
        *,
        config: LensConfig | None = None,
    ) -> Graph:
        return Generator(schema, target_map, config=config).process(self.drain())


__all__ = ["Binding", "MapExtension"]
