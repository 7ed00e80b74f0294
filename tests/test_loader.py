"""Tests for loading front-end unit documents."""

import json

import pytest

from crosswalk.frontend import UnitDocumentError, load_unit, load_units, parse_unit
from crosswalk.model import Severity

DOCUMENT = {
    "path": "src/demo/Greeter.java",
    "source": "package demo;\n\npublic class Greeter {\n}\n",
    "root": {
        "kind": "compilation_unit",
        "children": [
            {"kind": "package", "name": "demo"},
            {
                "kind": "class",
                "name": "Greeter",
                "start": 15,
                "length": 25,
                "attributes": {"modifiers": ["public"]},
            },
        ],
    },
    "problems": [
        {"severity": "warning", "message": "raw type", "line": 3},
        {
            "severity": "error",
            "message": "missing ';'",
            "line": 1,
            "file": "src/demo/package-info.java",
        },
    ],
}


@pytest.fixture
def document_file(tmp_path):
    path = tmp_path / "Greeter.json"
    path.write_text(json.dumps(DOCUMENT))
    return path


class TestParseUnit:
    """Schema validation and conversion."""

    def test_tree_converted(self):
        unit = parse_unit(DOCUMENT)

        assert unit.path == "src/demo/Greeter.java"
        package, greeter = unit.root.children
        assert package.name == "demo"
        assert greeter.kind == "class"
        assert greeter.attr("modifiers") == ["public"]
        assert unit.line_of(greeter) == 3

    def test_problems_converted(self):
        unit = parse_unit(DOCUMENT)

        warning, error = unit.problems
        assert warning.severity == Severity.WARNING
        assert warning.path == "src/demo/Greeter.java"
        assert error.path == "src/demo/package-info.java"
        assert unit.errors == [error]

    def test_path_defaults_to_document_path(self):
        data = {"root": {"kind": "compilation_unit"}}
        assert parse_unit(data, default_path="build/A.json").path == "build/A.json"

    def test_schema_errors_reported(self):
        data = {"root": {"kind": "compilation_unit"}, "problems": [{"severity": "fatal"}]}

        with pytest.raises(UnitDocumentError) as exc_info:
            parse_unit(data, default_path="build/A.json")

        message = str(exc_info.value)
        assert message.startswith("build/A.json: Invalid unit document")
        assert "problems.0.severity" in message

    def test_missing_root(self):
        with pytest.raises(UnitDocumentError):
            parse_unit({"path": "A.java"})

    def test_attribute_types_checked(self):
        field = {"kind": "field", "name": "x", "attributes": {"type": 42}}
        data = {"root": {"kind": "compilation_unit", "children": [field]}}

        with pytest.raises(UnitDocumentError) as exc_info:
            parse_unit(data, default_path="build/A.json")

        assert "root.children.0.attributes.type" in str(exc_info.value)

    def test_null_attributes_dropped(self):
        field = {
            "kind": "field",
            "name": "x",
            "attributes": {"type": None, "modifiers": None, "initializer": "1"},
        }
        data = {"root": {"kind": "compilation_unit", "children": [field]}}

        [node] = parse_unit(data).root.children

        assert node.attributes == {"initializer": "1"}

    def test_parameters_keep_extra_keys(self):
        method = {
            "kind": "method",
            "name": "m",
            "attributes": {"parameters": [{"name": "a", "type": "int", "final": True}]},
        }
        data = {"root": {"kind": "compilation_unit", "children": [method]}}

        [node] = parse_unit(data).root.children

        assert node.attr("parameters") == [{"name": "a", "type": "int", "final": True}]


class TestLoadUnit:
    """Reading documents from disk."""

    def test_load(self, document_file):
        unit = load_unit(document_file)
        assert unit.path == "src/demo/Greeter.java"
        assert unit.source.startswith("package demo;")

    def test_load_many_keeps_order(self, tmp_path, document_file):
        other = tmp_path / "Other.json"
        other.write_text(json.dumps({"root": {"kind": "compilation_unit"}}))

        units = load_units([other, document_file])

        assert [u.path for u in units] == [str(other), "src/demo/Greeter.java"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(UnitDocumentError) as exc_info:
            load_unit(tmp_path / "nope.json")
        assert exc_info.value.path == tmp_path / "nope.json"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(UnitDocumentError, match="Not valid JSON"):
            load_unit(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(UnitDocumentError, match="must be a JSON object"):
            load_unit(path)
