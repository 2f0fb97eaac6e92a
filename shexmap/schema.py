from __future__ import annotations

"""In-memory shape schema model and ShExJ loader.

The model mirrors the subset of ShExJ the lens and the bundled validator
understand. Every node exposes the same small introspection surface:

* ``operands``: child nodes in declaration order (shape references are
  labels, not nodes, and are never listed)
* ``tagged_action(extension_iri)``: the semantic-action code when the node is
  an action for ``extension_iri``
* ``produces_edge`` / ``predicate`` / ``inverse`` / ``max``

Nodes compare by identity so they can key memoization tables.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping, Union

from rdflib import BNode, Literal, URIRef
from rdflib.namespace import RDF, XSD
from rdflib.term import Identifier, Node

from .errors import SchemaError, TagLookupError
from .iri import canonical_prefixes, resolve_iri

UNBOUNDED = -1

NODE_KINDS = {"iri", "bnode", "literal", "nonliteral"}


@dataclass(eq=False)
class Constraint:
    """Base for every position in a schema's structural tree."""

    produces_edge = False
    predicate = None
    inverse = False
    max = 1

    @property
    def operands(self) -> tuple["Constraint", ...]:
        return ()

    def tagged_action(self, extension_iri: str) -> str | None:
        return None


@dataclass(eq=False)
class SemAct(Constraint):
    """Semantic action attached to a shape or triple expression."""

    name: str = ""
    code: str | None = None

    def tagged_action(self, extension_iri: str) -> str | None:
        if self.name == str(extension_iri) and self.code is not None:
            return self.code.strip()
        return None


@dataclass(eq=False)
class NodeConstraint(Constraint):
    node_kind: str | None = None
    datatype: URIRef | None = None
    values: tuple[Node, ...] = ()

    def matches(self, term: Node) -> bool:
        if self.node_kind == "iri" and not isinstance(term, URIRef):
            return False
        if self.node_kind == "bnode" and not isinstance(term, BNode):
            return False
        if self.node_kind == "literal" and not isinstance(term, Literal):
            return False
        if self.node_kind == "nonliteral" and isinstance(term, Literal):
            return False
        if self.datatype is not None:
            if not isinstance(term, Literal):
                return False
            if term.datatype is not None:
                actual = term.datatype
            else:
                actual = XSD.string if term.language is None else RDF.langString
            if actual != self.datatype:
                return False
        if self.values and term not in self.values:
            return False
        return True


# A value expression is either an inline node or a shape label.
ShapeExpr = Union["Shape", NodeConstraint, Identifier]


@dataclass(eq=False)
class TripleConstraint(Constraint):
    predicate: URIRef | None = None
    value_expr: ShapeExpr | None = None
    inverse: bool = False
    min: int = 1
    max: int = 1
    sem_acts: list[SemAct] = field(default_factory=list)

    produces_edge = True

    @property
    def operands(self) -> tuple[Constraint, ...]:
        inner: list[Constraint] = []
        if isinstance(self.value_expr, Constraint):
            inner.append(self.value_expr)
        return tuple(inner) + tuple(self.sem_acts)


@dataclass(eq=False)
class _Group(Constraint):
    expressions: list[Constraint] = field(default_factory=list)
    min: int = 1
    max: int = 1
    sem_acts: list[SemAct] = field(default_factory=list)

    @property
    def operands(self) -> tuple[Constraint, ...]:
        return tuple(self.expressions) + tuple(self.sem_acts)


@dataclass(eq=False)
class EachOf(_Group):
    """All sub-expressions must match."""


@dataclass(eq=False)
class OneOf(_Group):
    """Exactly one alternative is chosen, first match wins."""


@dataclass(eq=False)
class Shape(Constraint):
    label: Identifier | None = None
    expression: Constraint | None = None
    sem_acts: list[SemAct] = field(default_factory=list)

    @property
    def operands(self) -> tuple[Constraint, ...]:
        head = (self.expression,) if self.expression is not None else ()
        return head + tuple(self.sem_acts)


@dataclass
class Schema:
    shapes: dict[Identifier, Constraint] = field(default_factory=dict)
    prefixes: dict[str, str] = field(default_factory=dict)
    start: ShapeExpr | None = None
    # Extension instances realized by the most recent validation run.
    extensions: dict[str, Any] = field(default_factory=dict)

    def find(self, label: object) -> Constraint:
        key = label if isinstance(label, Identifier) else self.resolve_label(label)
        try:
            return self.shapes[key]
        except KeyError:
            raise SchemaError(f"shape not found in schema: {label}") from None

    def resolve_label(self, label: object) -> Identifier:
        raw = str(label).strip()
        if raw.startswith("_:"):
            return BNode(raw[2:])
        try:
            return self.resolve_iri(raw)
        except TagLookupError as exc:
            raise SchemaError(str(exc)) from exc

    def resolve_iri(self, token: object, prefixes: Mapping[str, str] | None = None) -> URIRef:
        table = prefixes if prefixes is not None else canonical_prefixes(self.prefixes)
        return resolve_iri(token, table)

    def iter_nodes(self) -> Iterator[Constraint]:
        for shape in self.shapes.values():
            yield from iter_tree(shape)

    def sem_act_iris(self) -> list[str]:
        seen: list[str] = []
        for node in self.iter_nodes():
            if isinstance(node, SemAct) and node.name not in seen:
                seen.append(node.name)
        return seen


def iter_tree(node: Constraint) -> Iterator[Constraint]:
    yield node
    for operand in node.operands:
        yield from iter_tree(operand)


# ---------------------------------------------------------------------------
# ShExJ reader


class _ShExJReader:
    def __init__(self, prefixes: Mapping[str, str]) -> None:
        self._prefixes = dict(prefixes)

    def iri(self, value: Any, what: str) -> URIRef:
        if not isinstance(value, str) or not value:
            raise SchemaError(f"{what} must be an IRI string, got {value!r}")
        try:
            return resolve_iri(value, self._prefixes)
        except TagLookupError as exc:
            raise SchemaError(f"invalid {what}: {exc}") from exc

    def label(self, value: Any) -> Identifier:
        if isinstance(value, str) and value.startswith("_:"):
            return BNode(value[2:])
        return self.iri(value, "shape label")

    def cardinality(self, data: Mapping[str, Any]) -> tuple[int, int]:
        lo = data.get("min", 1)
        hi = data.get("max", 1)
        try:
            lo, hi = int(lo), int(hi)
        except (TypeError, ValueError):
            raise SchemaError(f"invalid cardinality in {data!r}") from None
        if lo < 0 or (hi != UNBOUNDED and hi < lo):
            raise SchemaError(f"invalid cardinality {{{lo},{hi}}}")
        return lo, hi

    def sem_acts(self, data: Mapping[str, Any]) -> list[SemAct]:
        acts: list[SemAct] = []
        for raw in data.get("semActs") or []:
            if not isinstance(raw, Mapping) or raw.get("type") != "SemAct":
                raise SchemaError(f"expected SemAct, got {raw!r}")
            acts.append(SemAct(name=str(self.iri(raw.get("name"), "semantic action name")), code=raw.get("code")))
        return acts

    def value(self, raw: Any) -> Node:
        if isinstance(raw, str):
            return self.iri(raw, "value")
        if isinstance(raw, Mapping) and "value" in raw and not raw.get("type", "").endswith("Stem"):
            datatype = raw.get("type")
            return Literal(
                raw["value"],
                lang=raw.get("language"),
                datatype=self.iri(datatype, "datatype") if datatype and not raw.get("language") else None,
            )
        raise SchemaError(f"unsupported value set entry: {raw!r}")

    def shape_expr(self, data: Any) -> ShapeExpr:
        if isinstance(data, str):
            return self.label(data)
        if not isinstance(data, Mapping):
            raise SchemaError(f"expected shape expression, got {data!r}")
        kind = data.get("type")
        if kind == "ShapeDecl":
            return self.shape_expr(data.get("shapeExpr"))
        if kind == "Shape":
            label = self.label(data["id"]) if "id" in data else None
            expression = data.get("expression")
            return Shape(
                label=label,
                expression=self.triple_expr(expression) if expression is not None else None,
                sem_acts=self.sem_acts(data),
            )
        if kind == "NodeConstraint":
            node_kind = data.get("nodeKind")
            if node_kind is not None and node_kind not in NODE_KINDS:
                raise SchemaError(f"unknown nodeKind: {node_kind}")
            datatype = data.get("datatype")
            return NodeConstraint(
                node_kind=node_kind,
                datatype=self.iri(datatype, "datatype") if datatype else None,
                values=tuple(self.value(v) for v in data.get("values") or []),
            )
        raise SchemaError(f"unsupported shape expression type: {kind}")

    def triple_expr(self, data: Any) -> Constraint:
        if not isinstance(data, Mapping):
            raise SchemaError(f"expected triple expression, got {data!r}")
        kind = data.get("type")
        lo, hi = self.cardinality(data)
        if kind == "TripleConstraint":
            value_expr = data.get("valueExpr")
            return TripleConstraint(
                predicate=self.iri(data.get("predicate"), "predicate"),
                value_expr=self.shape_expr(value_expr) if value_expr is not None else None,
                inverse=bool(data.get("inverse", False)),
                min=lo,
                max=hi,
                sem_acts=self.sem_acts(data),
            )
        if kind in ("EachOf", "OneOf"):
            expressions = [self.triple_expr(e) for e in data.get("expressions") or []]
            if not expressions:
                raise SchemaError(f"{kind} requires at least one expression")
            group = EachOf if kind == "EachOf" else OneOf
            return group(expressions=expressions, min=lo, max=hi, sem_acts=self.sem_acts(data))
        raise SchemaError(f"unsupported triple expression type: {kind}")


def load_schema(source: Mapping[str, Any] | Path | str, prefixes: Mapping[Any, Any] | None = None) -> Schema:
    """Build a :class:`Schema` from ShExJ data or a ShExJ JSON file.

    A top-level ``prefixes`` object in the document supplies the table used
    to expand semantic-action codes; ``prefixes`` passed here override it.
    """

    if isinstance(source, Mapping):
        data: Any = source
    else:
        path = Path(source)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise SchemaError(f"{path}: invalid JSON: {exc}") from exc
    if not isinstance(data, Mapping) or data.get("type") != "Schema":
        raise SchemaError("ShExJ document must be an object with type 'Schema'")

    declared = data.get("prefixes") or {}
    if not isinstance(declared, Mapping):
        raise SchemaError("'prefixes' must be an object")
    merged = {**declared, **(prefixes or {})}
    table = canonical_prefixes(merged)
    reader = _ShExJReader(table)

    shapes: dict[Identifier, Constraint] = {}
    for raw in data.get("shapes") or []:
        if not isinstance(raw, Mapping) or "id" not in raw:
            raise SchemaError(f"shape declaration without id: {raw!r}")
        label = reader.label(raw["id"])
        if label in shapes:
            raise SchemaError(f"duplicate shape label: {raw['id']}")
        node = reader.shape_expr(raw)
        if isinstance(node, Identifier):
            raise SchemaError(f"shape {raw['id']} is a bare reference")
        if isinstance(node, Shape) and node.label is None:
            node.label = label
        shapes[label] = node

    start = data.get("start")
    schema = Schema(
        shapes=shapes,
        prefixes=dict(table),
        start=reader.shape_expr(start) if start is not None else None,
    )
    return schema


__all__ = [
    "UNBOUNDED",
    "Constraint",
    "SemAct",
    "NodeConstraint",
    "TripleConstraint",
    "EachOf",
    "OneOf",
    "Shape",
    "ShapeExpr",
    "Schema",
    "iter_tree",
    "load_schema",
]
