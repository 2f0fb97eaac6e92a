from __future__ import annotations

"""Graph loading and deterministic serialization."""

from pathlib import Path

from rdflib import Graph
from rdflib.util import guess_format

_FORMAT_ALIASES = {"ttl": "turtle", "ntriples": "nt"}


def normalize_format(fmt: str | None) -> str:
    value = (fmt or "turtle").lower()
    return _FORMAT_ALIASES.get(value, value)


def load_graph(path: Path | str, format: str | None = None) -> Graph:
    """Parse ``path`` into a new graph, guessing the format from the suffix."""

    source = Path(path)
    fmt = format or guess_format(str(source)) or "turtle"
    graph = Graph()
    graph.parse(source.resolve().as_uri(), format=fmt)
    return graph


def sorted_ttl(graph: Graph) -> str:
    """Render ``graph`` as line-sorted Turtle so output diffs are stable."""

    nm = graph.namespace_manager
    prefixes = sorted(nm.namespaces(), key=lambda x: x[0])
    lines = sorted(f"{s.n3(nm)} {p.n3(nm)} {o.n3(nm)} ." for s, p, o in graph)
    header = [f"@prefix {prefix}: <{ns}> ." for prefix, ns in prefixes]
    return "\n".join(header + [""] + lines) + "\n"


def write_sorted_ttl(graph: Graph, out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8") as f:
        f.write(sorted_ttl(graph))


def serialize(graph: Graph, fmt: str | None = None) -> str:
    fmt = normalize_format(fmt)
    if fmt == "turtle":
        return sorted_ttl(graph)
    return graph.serialize(format=fmt)


def write_graph(graph: Graph, out_path: Path, fmt: str | None = None) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(serialize(graph, fmt), encoding="utf-8")


__all__ = ["normalize_format", "load_graph", "sorted_ttl", "write_sorted_ttl", "serialize", "write_graph"]
