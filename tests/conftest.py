from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from shexj_builders import EX, each_of, schema_doc, shape, string_value, tc


@pytest.fixture
def left_doc() -> dict[str, Any]:
    return schema_doc(shape("http://a.example/S1", tc(EX + "x", tag="ex:a", value=string_value())))


@pytest.fixture
def right_doc() -> dict[str, Any]:
    return schema_doc(shape("http://b.example/S1", tc(EX + "z", tag="ex:a", value=string_value())))


@pytest.fixture
def person_doc() -> dict[str, Any]:
    return schema_doc(
        shape(
            "http://a.example/Person",
            each_of(
                tc(EX + "name", tag="ex:name", value=string_value()),
                tc(EX + "email", tag="ex:email", value={"type": "NodeConstraint", "nodeKind": "iri"}),
            ),
        )
    )


@pytest.fixture
def contact_doc() -> dict[str, Any]:
    return schema_doc(
        shape(
            "http://b.example/Contact",
            each_of(
                tc("http://xmlns.com/foaf/0.1/name", tag="ex:name"),
                tc(EX + "contact", value=shape(None, tc(EX + "mail", tag="ex:email"))),
            ),
        )
    )


@pytest.fixture
def write_json(tmp_path: Path):
    def _write(name: str, data: dict[str, Any]) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
