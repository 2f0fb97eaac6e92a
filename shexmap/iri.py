from __future__ import annotations

"""Prefix-table canonicalization and tag-token expansion.

These helpers are deterministic and idempotent: expanding an absolute IRI
returns it unchanged.
"""

import re
from typing import Any, Mapping

from rdflib import URIRef
from rdflib.term import Node

from .errors import TagLookupError
from .namespaces import DEFAULT_PREFIXES

_PNAME_RE = re.compile(r"^(?P<prefix>[A-Za-z][\w.-]*)?:(?P<local>.*)$")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def canonical_prefixes(prefixes: Mapping[Any, Any] | None) -> dict[str, str]:
    """Return a copy of ``prefixes`` keyed by plain strings.

    ``None`` keys (the default prefix) become ``""``; values are stringified.
    Built-in prefixes are included unless the table overrides them.
    """

    table: dict[str, str] = dict(DEFAULT_PREFIXES)
    for key, value in (prefixes or {}).items():
        name = "" if key is None else str(key)
        table[name.rstrip(":")] = str(value)
    return table


def as_node(value: object) -> Node:
    """Return ``value`` as an RDF term, treating plain strings as IRIs."""
    if isinstance(value, Node):
        return value
    return URIRef(str(value))


def resolve_iri(token: object, prefixes: Mapping[str, str] | None = None) -> URIRef:
    """Expand ``token`` to an absolute IRI.

    Accepts ``<http://...>``, absolute IRIs, ``prefix:local`` and ``:local``.
    An undeclared prefix raises :class:`TagLookupError`.
    """

    raw = str(token or "").strip()
    if not raw:
        raise TagLookupError(raw, "empty tag token")
    if raw.startswith("<") and raw.endswith(">"):
        return URIRef(raw[1:-1])
    if _SCHEME_RE.match(raw) or raw.startswith("urn:"):
        return URIRef(raw)
    match = _PNAME_RE.match(raw)
    if not match:
        raise TagLookupError(raw, f"tag token is neither an IRI nor a prefixed name: {raw}")
    prefix = match.group("prefix") or ""
    table = prefixes if prefixes is not None else DEFAULT_PREFIXES
    if prefix not in table:
        raise TagLookupError(raw, f"undeclared prefix {prefix!r} in tag {raw}")
    return URIRef(f"{table[prefix]}{match.group('local')}")


__all__ = ["as_node", "canonical_prefixes", "resolve_iri"]
