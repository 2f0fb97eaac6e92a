from __future__ import annotations

"""Discover tagged positions in a schema tree and build their paths."""

from typing import Iterable, Mapping

from rdflib import URIRef
from rdflib.term import Node

from ..namespaces import MAP_EXTENSION_IRI
from ..schema import Constraint, Schema
from ..utils.log_json import get_logger
from .segments import Path, PathSegment, RootSegment

_logger = get_logger("lens")


class PathBuilder:
    """Walk one shape and record the ancestor chain of every tag.

    Segments are memoized per schema node for the lifetime of the builder,
    so two tags below the same triple constraint share its blank-node
    allocation. Build a fresh instance for every lens call.
    """

    def __init__(self, extension_iri: str = MAP_EXTENSION_IRI) -> None:
        self.extension_iri = extension_iri
        self.minted: set[Node] = set()
        self.paths: dict[str, Path] = {}
        self._segments: dict[Constraint, PathSegment] = {}

    def segment_for(self, node: Constraint) -> PathSegment:
        segment = self._segments.get(node)
        if segment is None:
            segment = PathSegment(node, minted=self.minted)
            self._segments[node] = segment
        return segment

    def walk(self, node: Constraint, ancestors: tuple[Constraint, ...] = ()) -> dict[str, Path]:
        tag = node.tagged_action(self.extension_iri)
        if tag is not None:
            if tag in self.paths:
                _logger.warning("lens.walk.duplicate_tag", tag=tag)
            else:
                self.paths[tag] = Path(tag, [self.segment_for(a) for a in ancestors])
        for operand in node.operands:
            self.walk(operand, ancestors + (node,))
        return self.paths

    def resolve(self, schema: Schema, prefixes: Mapping[str, str]) -> dict[URIRef, Path]:
        """Key the collected paths by canonical tag IRI."""

        resolved: dict[URIRef, Path] = {}
        for raw, path in self.paths.items():
            name = schema.resolve_iri(raw, prefixes)
            if name in resolved:
                _logger.warning("lens.walk.duplicate_tag", tag=raw, resolved=name)
                continue
            resolved[name] = path
        return resolved

    def root_at(self, paths: Iterable[Path], target: Node, *, rewrite_literals: bool = False) -> RootSegment:
        root = RootSegment(target, minted=self.minted, rewrite_literals=rewrite_literals)
        for path in paths:
            path.root_at(root)
        return root


__all__ = ["PathBuilder"]
