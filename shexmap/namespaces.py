from __future__ import annotations

"""Namespaces used by the Map extension and the bundled schema model."""

from rdflib import Namespace

# IRI identifying the Map semantic-action extension.
MAP_EXTENSION_IRI = "http://shex.io/extensions/Map/"

XSD_NS = "http://www.w3.org/2001/XMLSchema#"
RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"

# rdflib Namespace helpers.
MAP = Namespace(MAP_EXTENSION_IRI)
XSD = Namespace(XSD_NS)

# Prefixes every schema may use without declaring them.
DEFAULT_PREFIXES: dict[str, str] = {
    "map": MAP_EXTENSION_IRI,
    "xsd": XSD_NS,
    "rdf": RDF_NS,
}

__all__ = [
    "MAP_EXTENSION_IRI",
    "XSD_NS",
    "RDF_NS",
    "MAP",
    "XSD",
    "DEFAULT_PREFIXES",
]
