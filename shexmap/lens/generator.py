from __future__ import annotations

"""Replay collected bindings along the destination schema's paths."""

from typing import TYPE_CHECKING, Any, Iterable, Mapping

from rdflib import Graph, URIRef

from ..config import LensConfig
from ..errors import ShexMapError, TagLookupError
from ..iri import as_node, canonical_prefixes
from ..schema import Schema
from ..utils.log_json import get_logger
from .segments import Path
from .walker import PathBuilder

if TYPE_CHECKING:
    from .collector import Binding

_logger = get_logger("lens")


class Generator:
    """Build destination paths for one target shape and replay bindings.

    ``target_map`` holds exactly one ``{output_root: shape_label}`` entry.
    """

    def __init__(
        self,
        schema: Schema,
        target_map: Mapping[Any, Any],
        *,
        config: LensConfig | None = None,
    ) -> None:
        if len(target_map) != 1:
            raise ValueError(f"target map must have exactly one entry, got {len(target_map)}")
        ((output_root, shape_label),) = target_map.items()
        self.config = config or LensConfig()
        self.schema = schema
        self.output_root = as_node(output_root)
        self.target = schema.find(shape_label)
        self.prefixes = canonical_prefixes(schema.prefixes)

        builder = PathBuilder(self.config.extension_iri)
        builder.walk(self.target)
        self.paths: dict[URIRef, Path] = builder.resolve(schema, self.prefixes)
        builder.root_at(
            self.paths.values(),
            self.output_root,
            rewrite_literals=self.config.rewrite_literal_roots,
        )

    def path_for(self, name: URIRef) -> Path:
        try:
            return self.paths[name]
        except KeyError:
            raise TagLookupError(str(name)) from None

    def process(self, bindings: Iterable["Binding"]) -> Graph:
        graph = Graph()
        for prefix, namespace in sorted(self.prefixes.items()):
            graph.bind(prefix, namespace)
        count = 0
        for binding in bindings:
            self.path_for(binding.name).replay(binding.value, graph)
            count += 1
        _logger.info(
            "lens.generate.complete",
            root=self.output_root,
            bindings=count,
            triples=len(graph),
        )
        return graph


def generate_from(
    source: Schema,
    destination: Schema,
    target_map: Mapping[Any, Any],
    *,
    config: LensConfig | None = None,
) -> Graph:
    """Rebuild the data matched by ``source`` in the shape of ``destination``.

    ``source`` must have been validated (see :func:`shexmap.validator.execute`)
    so that its map extension holds the bindings of that run.
    ``target_map`` maps the output root node to the destination shape label.
    Raises :class:`~shexmap.errors.TagLookupError` when a collected tag has no
    position in the destination shape.
    """

    cfg = config or LensConfig()
    extension = source.extensions.get(cfg.extension_iri)
    if extension is None:
        raise ShexMapError(f"source schema has no {cfg.extension_iri} bindings; validate it first")
    _logger.info("lens.generate.start", bindings=len(extension.bindings), target=dict(target_map))
    return extension.generate(destination, target_map, config=cfg)


__all__ = ["Generator", "generate_from"]
