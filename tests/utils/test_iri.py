from __future__ import annotations

import pytest
from rdflib import BNode, Literal, URIRef

from shexmap.errors import TagLookupError
from shexmap.iri import as_node, canonical_prefixes, resolve_iri
from shexmap.namespaces import MAP_EXTENSION_IRI


def test_canonical_prefixes_stringifies_keys() -> None:
    table = canonical_prefixes({None: "http://default.example/", "ex": URIRef("http://example/"), "a:": "http://a/"})
    assert table[""] == "http://default.example/"
    assert table["ex"] == "http://example/"
    assert table["a"] == "http://a/"
    assert table["map"] == MAP_EXTENSION_IRI


def test_canonical_prefixes_can_override_builtins() -> None:
    assert canonical_prefixes({"map": "http://other/"})["map"] == "http://other/"


@pytest.mark.parametrize(
    "token, expected",
    [
        ("ex:a", "http://example/a"),
        (":a", "http://default.example/a"),
        ("<http://x.example/a>", "http://x.example/a"),
        ("http://x.example/a", "http://x.example/a"),
        ("  ex:a  ", "http://example/a"),
        ("urn:uuid:1234", "urn:uuid:1234"),
    ],
)
def test_resolve_iri(token: str, expected: str) -> None:
    table = canonical_prefixes({"": "http://default.example/", "ex": "http://example/"})
    assert resolve_iri(token, table) == URIRef(expected)


def test_resolve_is_idempotent() -> None:
    table = canonical_prefixes({"ex": "http://example/"})
    once = resolve_iri("ex:a", table)
    assert resolve_iri(once, table) == once


@pytest.mark.parametrize("token", ["", "nope:a", "just-a-word"])
def test_unresolvable_tokens_are_lookup_failures(token: str) -> None:
    with pytest.raises(LookupError):
        resolve_iri(token, canonical_prefixes({"ex": "http://example/"}))


def test_lookup_error_is_tag_lookup_error() -> None:
    with pytest.raises(TagLookupError) as excinfo:
        resolve_iri("nope:a", {})
    assert excinfo.value.tag == "nope:a"


def test_as_node_keeps_terms_and_wraps_strings() -> None:
    blank = BNode()
    assert as_node(blank) is blank
    assert as_node(Literal("x")) == Literal("x")
    assert as_node("http://example/a") == URIRef("http://example/a")
