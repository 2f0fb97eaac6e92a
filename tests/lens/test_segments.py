from __future__ import annotations

import pytest
from rdflib import BNode, Graph, Literal, URIRef

from shexmap.errors import MalformedPathError
from shexmap.lens.segments import NodeGenerator, Path, PathSegment, RootSegment
from shexmap.schema import UNBOUNDED, EachOf, Shape, TripleConstraint

EX = "http://example/"


def _calls(generator: NodeGenerator, n: int) -> list[BNode]:
    return [generator.next() for _ in range(n)]


def test_generator_groups_up_to_maximum() -> None:
    ids = _calls(NodeGenerator(3), 7)
    assert ids[0] == ids[1] == ids[2]
    assert ids[3] == ids[4] == ids[5]
    assert len({ids[0], ids[3], ids[6]}) == 3


def test_generator_with_maximum_one_rotates_every_call() -> None:
    ids = _calls(NodeGenerator(1), 4)
    assert len(set(ids)) == 4


def test_unbounded_generator_never_rotates() -> None:
    ids = _calls(NodeGenerator(UNBOUNDED), 50)
    assert len(set(ids)) == 1


def test_generator_records_minted_identities() -> None:
    minted: set = set()
    ids = _calls(NodeGenerator(2, minted=minted), 5)
    assert minted == set(ids)


def test_non_edge_segment_passes_value_through() -> None:
    graph = Graph()
    value = Literal("P")
    for node in (EachOf(), Shape()):
        assert PathSegment(node).fold(value, graph) is value
    assert len(graph) == 0


def test_edge_segment_links_new_identity_to_value() -> None:
    graph = Graph()
    segment = PathSegment(TripleConstraint(predicate=URIRef(EX + "z")))
    identity = segment.fold(Literal("P"), graph)
    assert isinstance(identity, BNode)
    assert set(graph) == {(identity, URIRef(EX + "z"), Literal("P"))}


def test_inverse_segment_points_value_at_identity() -> None:
    graph = Graph()
    team = URIRef(EX + "team")
    segment = PathSegment(TripleConstraint(predicate=URIRef(EX + "member"), inverse=True))
    identity = segment.fold(team, graph)
    assert set(graph) == {(team, URIRef(EX + "member"), identity)}


def test_root_segment_rewrites_subject_and_object_positions() -> None:
    synthetic = BNode()
    bar = URIRef(EX + "bar")
    graph = Graph()
    graph.add((synthetic, URIRef(EX + "p"), Literal("x")))
    graph.add((URIRef(EX + "y"), URIRef(EX + "q"), synthetic))
    root = RootSegment(bar, minted={synthetic})
    assert root.bind(synthetic, graph) == bar
    assert set(graph) == {
        (bar, URIRef(EX + "p"), Literal("x")),
        (URIRef(EX + "y"), URIRef(EX + "q"), bar),
    }
    assert not any(synthetic in triple for triple in graph)


def test_root_segment_leaves_unsynthesized_values_alone() -> None:
    bar = URIRef(EX + "bar")
    graph = Graph()
    graph.add((URIRef(EX + "s"), URIRef(EX + "p"), Literal("P")))
    root = RootSegment(bar)
    assert root.bind(Literal("P"), graph) == Literal("P")
    assert (URIRef(EX + "s"), URIRef(EX + "p"), Literal("P")) in graph


def test_root_segment_literal_rewrite_when_enabled() -> None:
    bar = URIRef(EX + "bar")
    graph = Graph()
    graph.add((URIRef(EX + "s"), URIRef(EX + "p"), Literal("P")))
    RootSegment(bar, rewrite_literals=True).bind(Literal("P"), graph)
    assert set(graph) == {(URIRef(EX + "s"), URIRef(EX + "p"), bar)}


def test_path_replays_from_innermost_segment() -> None:
    minted: set = set()
    bar = URIRef(EX + "bar")
    outer = TripleConstraint(predicate=URIRef(EX + "contact"))
    inner = TripleConstraint(predicate=URIRef(EX + "mail"))
    path = Path(
        "ex:email",
        [
            PathSegment(Shape(), minted=minted),
            PathSegment(outer, minted=minted),
            PathSegment(Shape(), minted=minted),
            PathSegment(inner, minted=minted),
        ],
    )
    path.root_at(RootSegment(bar, minted=minted))
    graph = Graph()
    path.replay(Literal("m"), graph)
    (mid,) = graph.objects(bar, URIRef(EX + "contact"))
    assert isinstance(mid, BNode)
    assert (mid, URIRef(EX + "mail"), Literal("m")) in graph
    assert len(graph) == 2


def test_empty_path_is_malformed() -> None:
    with pytest.raises(MalformedPathError):
        Path("ex:a", []).replay(Literal("P"), Graph())
    with pytest.raises(MalformedPathError):
        Path("ex:a", []).root_at(RootSegment(URIRef(EX + "bar")))


def test_unrooted_path_is_malformed() -> None:
    path = Path("ex:a", [PathSegment(Shape()), PathSegment(TripleConstraint(predicate=URIRef(EX + "z")))])
    with pytest.raises(MalformedPathError):
        path.replay(Literal("P"), Graph())
