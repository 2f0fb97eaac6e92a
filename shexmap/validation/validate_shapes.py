from __future__ import annotations

from pathlib import Path
from typing import Iterable

from pyshacl import validate
from rdflib import Graph

from ..graph_io import load_graph
from ..utils.log_json import get_logger

_logger = get_logger("validation")


def check_output(data_graph: Graph, shapes: Iterable[Path | Graph]) -> tuple[bool, str]:
    """Validate a reconstructed graph against SHACL ``shapes``.

    Returns ``(conforms, report_text)``.
    """

    sh_graph = Graph()
    for shape in shapes:
        if isinstance(shape, Graph):
            sh_graph += shape
        else:
            sh_graph += load_graph(shape)

    conforms, _report_graph, report_text = validate(
        data_graph,
        shacl_graph=sh_graph,
        inference="none",
        abort_on_first=False,
        allow_infos=True,
        allow_warnings=True,
    )
    if not conforms:
        _logger.warning("validation.shacl.failed", triples=len(data_graph))
    return bool(conforms), str(report_text)


__all__ = ["check_output"]
