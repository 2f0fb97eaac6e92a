from __future__ import annotations

"""Executable path segments used to replay bindings into a graph.

A :class:`Path` is the chain of schema positions from a shape's root down to
one tagged position. Replaying a value folds it outward one segment at a
time: each edge-producing segment mints (or reuses) a blank node and links
it to the inner value, and the terminal :class:`RootSegment` finally
renames the outermost blank node to the caller's target identity.
"""

from dataclasses import dataclass, field

from rdflib import BNode, Graph
from rdflib.term import Node

from ..errors import MalformedPathError
from ..schema import UNBOUNDED, Constraint
from ..utils.log_json import get_logger

_logger = get_logger("lens")


class NodeGenerator:
    """Allocate blank nodes for one schema position.

    Up to ``maximum`` consecutive calls share one identity; the next call
    starts a new one. An unbounded maximum never rotates.
    """

    def __init__(self, maximum: int = 1, *, minted: set[Node] | None = None) -> None:
        self.maximum = maximum
        self._minted = minted if minted is not None else set()
        self._current: BNode | None = None
        self._uses = 0

    @property
    def current(self) -> BNode | None:
        return self._current

    def _exhausted(self) -> bool:
        if self.maximum == UNBOUNDED:
            return False
        return self._uses >= max(self.maximum, 1)

    def next(self) -> BNode:
        if self._current is None or self._exhausted():
            self._current = BNode()
            self._minted.add(self._current)
            self._uses = 0
        self._uses += 1
        return self._current


class PathSegment:
    """Fold values outward through one schema position."""

    def __init__(self, node: Constraint, *, minted: set[Node] | None = None) -> None:
        self.node = node
        self.generator = NodeGenerator(node.max, minted=minted) if node.produces_edge else None

    def fold(self, value: Node, graph: Graph) -> Node:
        if self.generator is None:
            return value
        identity = self.generator.next()
        if self.node.inverse:
            graph.add((value, self.node.predicate, identity))
        else:
            graph.add((identity, self.node.predicate, value))
        return identity

    @property
    def step(self) -> str:
        if self.node.produces_edge:
            caret = "^" if self.node.inverse else ""
            return f"{caret}{self.node.predicate.n3()}"
        return type(self.node).__name__

    def __repr__(self) -> str:
        return f"<PathSegment {self.step}>"


class RootSegment:
    """Rename a synthesized root identity to ``target`` across the graph.

    Only identities listed in ``minted`` are renamed unless
    ``rewrite_literals`` is set, in which case any value is rewritten by
    plain equality.
    """

    def __init__(
        self,
        target: Node,
        *,
        minted: set[Node] | None = None,
        rewrite_literals: bool = False,
    ) -> None:
        self.target = target
        self._minted = minted if minted is not None else set()
        self.rewrite_literals = rewrite_literals

    def bind(self, value: Node, graph: Graph) -> Node:
        if value == self.target:
            return self.target
        if value not in self._minted and not self.rewrite_literals:
            _logger.warning("lens.root.skipped", value=value, target=self.target)
            return value
        as_subject = list(graph.triples((value, None, None)))
        as_object = list(graph.triples((None, None, value)))
        for triple in as_subject + as_object:
            graph.remove(triple)
        for s, p, o in as_subject + as_object:
            graph.add(
                (
                    self.target if s == value else s,
                    p,
                    self.target if o == value else o,
                )
            )
        return self.target

    @property
    def step(self) -> str:
        return self.target.n3()

    def __repr__(self) -> str:
        return f"<RootSegment {self.step}>"


@dataclass
class Path:
    """Ancestor chain from a shape root to one tagged position."""

    tag: str
    segments: list[PathSegment | RootSegment] = field(default_factory=list)

    def root_at(self, root: RootSegment) -> None:
        if not self.segments:
            raise MalformedPathError(f"path for {self.tag} has no segments to root")
        self.segments[0] = root

    def replay(self, value: Node, graph: Graph) -> Node:
        if not self.segments:
            raise MalformedPathError(f"path for {self.tag} has no segments")
        root = self.segments[0]
        if not isinstance(root, RootSegment):
            raise MalformedPathError(f"path for {self.tag} is not rooted")
        for segment in reversed(self.segments[1:]):
            if isinstance(segment, RootSegment):
                raise MalformedPathError(f"path for {self.tag} has a nested root segment")
            value = segment.fold(value, graph)
        return root.bind(value, graph)

    def describe(self) -> list[str]:
        return [segment.step for segment in self.segments]


__all__ = ["NodeGenerator", "PathSegment", "RootSegment", "Path"]
