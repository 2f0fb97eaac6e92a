from __future__ import annotations

"""Greedy shape matcher that drives semantic-action extensions.

Each focus node is checked against its shape by matching the node's arcs
constraint by constraint. Semantic-action events are buffered while
alternatives are explored and only dispatched as ``visit`` calls once the
focus node is known to conform, so extensions never observe a match that
was later abandoned.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from rdflib import Graph
from rdflib.term import Identifier, Node

from .errors import ShapeValidationError
from .iri import as_node
from .extensions import Extension, lookup
from .schema import (
    UNBOUNDED,
    Constraint,
    EachOf,
    NodeConstraint,
    OneOf,
    Schema,
    Shape,
    TripleConstraint,
)
from .utils.log_json import get_logger

_logger = get_logger("validator")


@dataclass
class ActionEvent:
    extension: str
    code: str | None
    triple: tuple[Node, Node, Node]
    inverse: bool = False
    depth: int = 0


@dataclass
class FocusResult:
    focus: Node
    shape: Identifier
    conforms: bool
    reasons: list[str] = field(default_factory=list)


@dataclass
class ValidationReport:
    results: list[FocusResult] = field(default_factory=list)

    @property
    def conforms(self) -> bool:
        return all(result.conforms for result in self.results)

    @property
    def reasons(self) -> list[str]:
        return [reason for result in self.results for reason in result.reasons]


_Outcome = tuple[bool, list[ActionEvent], list[str]]


def _n3_key(triple: tuple[Node, Node, Node]) -> tuple[str, str, str]:
    return tuple(term.n3() for term in triple)  # type: ignore[return-value]


def _card(lo: int, hi: int) -> str:
    return f"{{{lo},{'*' if hi == UNBOUNDED else hi}}}"


class ShapeMatcher:
    """Check focus nodes of ``graph`` against shapes of ``schema``."""

    def __init__(self, schema: Schema, graph: Graph, extensions: Mapping[str, Extension]) -> None:
        self.schema = schema
        self.graph = graph
        self.extensions = dict(extensions)
        self._in_progress: set[tuple[Node, int]] = set()

    def check(self, focus: Node, expr: Any, depth: int = 0) -> _Outcome:
        if isinstance(expr, Identifier):
            target = self.schema.find(expr)
            key = (focus, id(target))
            if key in self._in_progress:
                # Recursive reference: assume conformance for the cycle.
                return True, [], []
            self._in_progress.add(key)
            try:
                return self.check(focus, target, depth)
            finally:
                self._in_progress.discard(key)
        if isinstance(expr, NodeConstraint):
            if expr.matches(focus):
                return True, [], []
            return False, [], [f"{focus.n3()} does not satisfy node constraint"]
        if isinstance(expr, Shape):
            return self._check_shape(focus, expr, depth)
        raise TypeError(f"not a shape expression: {expr!r}")

    def _hooks(self, hook: str, **context: Any) -> None:
        for extension in self.extensions.values():
            getattr(extension, hook)(**context)

    def _check_shape(self, focus: Node, shape: Shape, depth: int) -> _Outcome:
        self._hooks("enter", shape=shape.label, focus=focus, depth=depth)
        try:
            if shape.expression is None:
                ok, events, reasons = True, [], []
            else:
                ok, events, reasons = self._match(focus, shape.expression, depth)
            self._hooks("exit", shape=shape.label, focus=focus, matched=ok, depth=depth)
        finally:
            self._hooks("close", shape=shape.label, focus=focus, depth=depth)
        if not ok:
            label = shape.label.n3() if shape.label is not None else "inline shape"
            reasons = [f"{focus.n3()} does not conform to {label}"] + reasons
        return ok, events, reasons

    def _match(self, focus: Node, expr: Constraint, depth: int) -> _Outcome:
        if isinstance(expr, TripleConstraint):
            ok, events, reasons = self._match_triple(focus, expr, depth)
        elif isinstance(expr, EachOf):
            ok, events, reasons = True, [], []
            for sub in expr.expressions:
                sub_ok, sub_events, sub_reasons = self._match(focus, sub, depth)
                if not sub_ok:
                    ok, events, reasons = False, [], sub_reasons
                    break
                events.extend(sub_events)
        elif isinstance(expr, OneOf):
            ok, events, reasons = False, [], []
            for sub in expr.expressions:
                sub_ok, sub_events, sub_reasons = self._match(focus, sub, depth)
                if sub_ok:
                    ok, events, reasons = True, sub_events, []
                    break
                reasons.extend(sub_reasons)
        else:
            raise TypeError(f"not a triple expression: {expr!r}")
        if not ok and getattr(expr, "min", 1) == 0:
            return True, [], []
        return ok, events, reasons

    def _match_triple(self, focus: Node, tc: TripleConstraint, depth: int) -> _Outcome:
        if tc.inverse:
            arcs = sorted(self.graph.triples((None, tc.predicate, focus)), key=_n3_key)
        else:
            arcs = sorted(self.graph.triples((focus, tc.predicate, None)), key=_n3_key)
        events: list[ActionEvent] = []
        count = 0
        for triple in arcs:
            value = triple[0] if tc.inverse else triple[2]
            nested: list[ActionEvent] = []
            if tc.value_expr is not None:
                ok, nested, _ = self.check(value, tc.value_expr, depth + 1)
                if not ok:
                    continue
            count += 1
            for act in tc.sem_acts:
                events.append(ActionEvent(act.name, act.code, triple, tc.inverse, depth))
            events.extend(nested)
        if count < tc.min or (tc.max != UNBOUNDED and count > tc.max):
            direction = "^" if tc.inverse else ""
            reason = (
                f"{focus.n3()}: expected {_card(tc.min, tc.max)} matching "
                f"{direction}{tc.predicate.n3()} arcs, found {count}"
            )
            return False, [], [reason]
        return True, events, []


def execute(
    schema: Schema,
    graph: Graph,
    shape_map: Mapping[Any, Any],
    *,
    raise_on_failure: bool = True,
    extensions: Mapping[str, type[Extension]] | None = None,
) -> ValidationReport:
    """Validate every ``focus -> shape`` pair of ``shape_map``.

    Registered extensions are instantiated for every semantic-action IRI the
    schema uses and stored on ``schema.extensions`` for later inspection.
    ``extensions`` maps further IRIs to handler classes and takes precedence
    over the registry.
    """

    overrides = {str(iri): handler for iri, handler in (extensions or {}).items()}
    instances: dict[str, Extension] = {}
    for iri in schema.sem_act_iris():
        handler = overrides.get(iri) or lookup(iri)
        if handler is None:
            _logger.debug("validator.extension.unhandled", extension=iri)
            continue
        instances[iri] = handler(schema=schema)
    schema.extensions = instances

    matcher = ShapeMatcher(schema, graph, instances)
    report = ValidationReport()
    for raw_focus, raw_label in shape_map.items():
        focus = as_node(raw_focus)
        label = raw_label if isinstance(raw_label, Identifier) else schema.resolve_label(raw_label)
        ok, events, reasons = matcher.check(focus, label)
        if ok:
            for event in events:
                extension = instances.get(event.extension)
                if extension is None:
                    continue
                accepted = extension.visit(
                    code=event.code,
                    matched=event.triple,
                    inverse=event.inverse,
                    depth=event.depth,
                )
                if not accepted:
                    ok = False
                    reasons.append(f"semantic action {event.extension} rejected {event.code}")
        if not ok:
            _logger.warning("validator.shape.failed", focus=focus, shape=label, reasons=reasons)
        report.results.append(FocusResult(focus=focus, shape=label, conforms=ok, reasons=reasons))

    if raise_on_failure and not report.conforms:
        raise ShapeValidationError(report.reasons)
    return report


__all__ = ["ActionEvent", "FocusResult", "ValidationReport", "ShapeMatcher", "execute"]
