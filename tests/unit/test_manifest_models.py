"""Unit tests for manifest serialization and schema validation."""

import json

import pytest

from component_knowledge.errors import ManifestFormatError
from component_knowledge.manifest import ComponentManifest, schema_errors


class TestManifestSerialization:
    """Tests for manifest JSON round-trips and file IO."""

    def test_json_roundtrip_preserves_manifest(self, manifest):
        assert ComponentManifest.from_json(manifest.to_json()) == manifest

    def test_camel_case_keys(self, manifest):
        data = manifest.to_dict()
        binding = data["components"][0]["frameworks"][0]

        assert set(data) == {
            "library",
            "version",
            "components",
            "patterns",
            "antiPatterns",
            "metadata",
        }
        assert {"import", "componentName"} <= set(binding)
        assert data["metadata"]["generatedAt"] == manifest.metadata.generated_at
        assert "badExample" in data["antiPatterns"][0]
        assert "bestPractices" in data["patterns"][0]

    def test_save_and_load(self, manifest, tmp_path):
        path = tmp_path / "out" / "manifest.json"
        manifest.save(path)

        assert json.loads(path.read_text())["library"] == "Kpc"
        assert ComponentManifest.load(path) == manifest

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ManifestFormatError) as exc_info:
            ComponentManifest.load(tmp_path / "missing.json")
        assert exc_info.value.details == {"path": str(tmp_path / "missing.json")}

    def test_invalid_json(self):
        with pytest.raises(ManifestFormatError, match="not valid JSON"):
            ComponentManifest.from_json("{")

    def test_non_object_json(self):
        with pytest.raises(ManifestFormatError, match="must be an object"):
            ComponentManifest.from_json("[]")

    def test_missing_field(self, manifest):
        data = manifest.to_dict()
        del data["metadata"]
        with pytest.raises(ManifestFormatError, match="missing field 'metadata'"):
            ComponentManifest.from_dict(data)

    def test_unknown_enum_value(self, manifest):
        data = manifest.to_dict()
        data["components"][0]["frameworks"][0]["dialect"] = "svelte"
        with pytest.raises(ManifestFormatError, match="malformed"):
            ComponentManifest.from_dict(data)


class TestSchemaErrors:
    """Tests for the pydantic manifest schema."""

    def test_generated_manifest_passes(self, manifest):
        assert schema_errors(manifest.to_dict()) == []

    def test_missing_library(self, manifest):
        data = manifest.to_dict()
        del data["library"]
        assert schema_errors(data) == ["library: Field required"]

    def test_invalid_dialect_location(self, manifest):
        data = manifest.to_dict()
        data["components"][1]["frameworks"][0]["dialect"] = "svelte"
        errors = schema_errors(data)

        assert len(errors) == 1
        assert errors[0].startswith("components.1.frameworks.0.dialect:")

    def test_import_alias(self, manifest):
        data = manifest.to_dict()
        del data["components"][0]["frameworks"][0]["import"]
        assert schema_errors(data) == ["components.0.frameworks.0.import: Field required"]

    def test_unknown_rule_type(self, manifest):
        data = manifest.to_dict()
        data["components"][1]["composability"][0]["type"] = "wraps"
        errors = schema_errors(data)
        assert errors and errors[0].startswith("components.1.composability.0.type:")

    def test_extra_fields_allowed(self, manifest):
        data = manifest.to_dict()
        data["generator"] = "custom"
        assert schema_errors(data) == []
