from __future__ import annotations

import pytest
from rdflib import URIRef

from shexj_builders import EX, each_of, schema_doc, shape, tc
from shexmap.errors import TagLookupError
from shexmap.iri import canonical_prefixes
from shexmap.lens.segments import RootSegment
from shexmap.lens.walker import PathBuilder
from shexmap.schema import EachOf, Shape, TripleConstraint, load_schema


def test_walk_records_ancestor_chain(contact_doc) -> None:
    schema = load_schema(contact_doc)
    root = schema.find("http://b.example/Contact")
    paths = PathBuilder().walk(root)
    assert list(paths) == ["ex:name", "ex:email"]

    name_nodes = [segment.node for segment in paths["ex:name"].segments]
    assert [type(n) for n in name_nodes] == [Shape, EachOf, TripleConstraint]
    assert name_nodes[0] is root

    email_nodes = [segment.node for segment in paths["ex:email"].segments]
    assert [type(n) for n in email_nodes] == [Shape, EachOf, TripleConstraint, Shape, TripleConstraint]
    assert email_nodes[2].predicate == URIRef(EX + "contact")
    assert email_nodes[4].predicate == URIRef(EX + "mail")


def test_segments_are_shared_per_schema_node() -> None:
    doc = schema_doc(
        shape(
            "http://b.example/S",
            tc(EX + "addr", value=shape(None, each_of(tc(EX + "street", tag="ex:street"), tc(EX + "city", tag="ex:city")))),
        )
    )
    schema = load_schema(doc)
    paths = PathBuilder().walk(schema.find("http://b.example/S"))
    assert paths["ex:street"].segments[1] is paths["ex:city"].segments[1]
    assert paths["ex:street"].segments[-1] is not paths["ex:city"].segments[-1]


def test_fresh_builder_does_not_share_state() -> None:
    schema = load_schema(schema_doc(shape("http://b.example/S", tc(EX + "z", tag="ex:a"))))
    root = schema.find("http://b.example/S")
    first = PathBuilder().walk(root)["ex:a"].segments[1]
    second = PathBuilder().walk(root)["ex:a"].segments[1]
    assert first is not second
    assert first.node is second.node


def test_duplicate_tag_keeps_first_declaration() -> None:
    doc = schema_doc(shape("http://b.example/S", each_of(tc(EX + "first", tag="ex:a"), tc(EX + "second", tag="ex:a"))))
    schema = load_schema(doc)
    paths = PathBuilder().walk(schema.find("http://b.example/S"))
    assert paths["ex:a"].segments[-1].node.predicate == URIRef(EX + "first")


def test_walker_ignores_other_extensions() -> None:
    doc = schema_doc(
        shape(
            "http://b.example/S",
            {
                "type": "TripleConstraint",
                "predicate": EX + "z",
                "semActs": [{"type": "SemAct", "name": "http://example/other", "code": "ex:a"}],
            },
        )
    )
    schema = load_schema(doc)
    assert PathBuilder().walk(schema.find("http://b.example/S")) == {}


def test_resolve_and_root(contact_doc) -> None:
    schema = load_schema(contact_doc)
    builder = PathBuilder()
    builder.walk(schema.find("http://b.example/Contact"))
    resolved = builder.resolve(schema, canonical_prefixes(schema.prefixes))
    assert set(resolved) == {URIRef(EX + "name"), URIRef(EX + "email")}
    root = builder.root_at(resolved.values(), URIRef(EX + "bob"))
    for path in resolved.values():
        assert path.segments[0] is root
        assert isinstance(path.segments[0], RootSegment)


def test_resolve_fails_on_undeclared_prefix() -> None:
    schema = load_schema(schema_doc(shape("http://b.example/S", tc(EX + "z", tag="nope:a"))))
    builder = PathBuilder()
    builder.walk(schema.find("http://b.example/S"))
    with pytest.raises(TagLookupError):
        builder.resolve(schema, canonical_prefixes(schema.prefixes))
