"""Unit tests for per-dialect input definitions."""

import json

import pytest

from component_knowledge.dialects import Dialect
from component_knowledge.errors import InvalidDefinitionError
from component_knowledge.models import (
    ComponentDefinition,
    PropDefinition,
    SourceReference,
    load_definitions,
    read_definitions,
)


class TestComponentDefinition:
    """Tests for ComponentDefinition serialization."""

    def test_from_dict_camel_case(self):
        definition = ComponentDefinition.from_dict(
            {
                "name": "KButton",
                "dialect": "react",
                "docs": "A button",
                "props": [{"name": "size", "type": "string", "required": True}],
                "events": [{"name": "onClick"}],
                "slots": [{"name": "children"}],
                "sourceRefs": [{"filePath": "button.tsx", "startLine": 3, "endLine": 40}],
            }
        )

        assert definition.dialect == Dialect.REACT
        assert definition.props[0] == PropDefinition(name="size", type="string", required=True)
        assert definition.events[0].type == "Event"
        assert definition.slots[0].name == "children"
        assert definition.source_refs[0] == SourceReference("button.tsx", 3, 40)

    def test_framework_alias(self):
        definition = ComponentDefinition.from_dict({"name": "el-button", "framework": "Vue"})
        assert definition.dialect == Dialect.VUE

    def test_missing_name(self):
        with pytest.raises(InvalidDefinitionError):
            ComponentDefinition.from_dict({"dialect": "react"})

    def test_unknown_dialect(self):
        with pytest.raises(InvalidDefinitionError) as exc_info:
            ComponentDefinition.from_dict({"name": "KButton", "dialect": "svelte"})
        assert "Unknown dialect 'svelte'" in exc_info.value.message
        assert exc_info.value.details == {"component": "KButton"}

    def test_malformed_attribute(self):
        with pytest.raises(InvalidDefinitionError) as exc_info:
            ComponentDefinition.from_dict(
                {"name": "KButton", "dialect": "react", "props": [{"type": "string"}]}
            )
        assert "Malformed attribute" in exc_info.value.message

    @pytest.mark.parametrize(
        "data",
        [
            {"name": "KInput", "dialect": "react", "docs": 123},
            {"name": "KInput", "dialect": "react", "category": ["form"]},
            {"name": "KInput", "dialect": "react", "props": [{"name": "value", "type": 5}]},
            {"name": "KInput", "dialect": "react", "props": [{"name": 5}]},
            {"name": "KInput", "dialect": "react", "events": [{"name": "input", "payload": {}}]},
            {"name": "KInput", "dialect": "react", "slots": [{"name": "prefix", "docs": 1}]},
            {"name": "KInput", "dialect": "react", "props": ["value"]},
        ],
    )
    def test_non_string_fields_are_rejected(self, data):
        with pytest.raises(InvalidDefinitionError) as exc_info:
            ComponentDefinition.from_dict(data)
        assert "Malformed attribute" in exc_info.value.message
        assert exc_info.value.details == {"component": "KInput"}

    def test_null_optional_fields_take_defaults(self):
        definition = ComponentDefinition.from_dict(
            {
                "name": "KInput",
                "dialect": "react",
                "docs": None,
                "props": [{"name": "value", "type": None}],
            }
        )
        assert definition.docs is None
        assert definition.props[0].type == "any"

    def test_serialization_roundtrip(self, sample_definitions):
        for definition in sample_definitions:
            assert ComponentDefinition.from_dict(definition.to_dict()) == definition

    def test_definitions_are_immutable(self, button_definitions):
        with pytest.raises(AttributeError):
            button_definitions[0].name = "Other"  # type: ignore[misc]


class TestLoadDefinitions:
    """Tests for loading an extractor JSON file."""

    def test_load_file(self, definitions_file, sample_definitions):
        assert load_definitions(definitions_file) == sample_definitions

    def test_rejects_non_array(self, tmp_path):
        path = tmp_path / "defs.json"
        path.write_text(json.dumps({"name": "KButton"}))
        with pytest.raises(InvalidDefinitionError, match="JSON array"):
            load_definitions(path)

    def test_rejects_invalid_json(self, tmp_path):
        path = tmp_path / "defs.json"
        path.write_text("[{")
        with pytest.raises(InvalidDefinitionError, match="not valid JSON"):
            load_definitions(path)


class TestReadDefinitions:
    """Tests for reading files that contain some malformed entries."""

    def test_bad_entry_is_skipped(self, tmp_path):
        path = tmp_path / "defs.json"
        path.write_text(
            json.dumps(
                [
                    {"name": "KButton", "dialect": "react"},
                    {"name": "KInput", "dialect": "svelte"},
                    {"name": "el-input", "dialect": "vue", "props": [{"type": "string"}]},
                    "KForm",
                ]
            )
        )

        result = read_definitions(path)

        assert [d.name for d in result.definitions] == ["KButton"]
        assert result.rejected_count == 3
        assert result.rejected[0].startswith("Entry 1 of ")
        assert "Unknown dialect 'svelte'" in result.rejected[0]
        assert "expected an object, got str" in result.rejected[2]
        assert load_definitions(path) == result.definitions

    def test_rejections_are_logged(self, tmp_path, caplog):
        path = tmp_path / "defs.json"
        path.write_text(json.dumps([{"name": "KInput", "dialect": "svelte"}]))

        with caplog.at_level("WARNING", logger="component_knowledge"):
            result = read_definitions(path)

        assert result.definitions == []
        assert "Skipping definition: Entry 0" in caplog.text
        assert "Rejected 1 of 1 definitions" in caplog.text

    def test_clean_file_has_no_rejections(self, definitions_file, sample_definitions):
        result = read_definitions(definitions_file)

        assert result.definitions == sample_definitions
        assert result.rejected == []
