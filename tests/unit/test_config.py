"""Unit tests for configuration management."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from component_knowledge.config import (
    CONFIG_FILENAME,
    ENV_PREFIX,
    ConfigLoader,
    KnowledgeConfig,
    load_config,
)
from component_knowledge.dialects import Dialect
from component_knowledge.errors import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run each test from an empty directory with no config env vars set."""
    for field_name in KnowledgeConfig.model_fields:
        monkeypatch.delenv(f"{ENV_PREFIX}{field_name.upper()}", raising=False)
    monkeypatch.chdir(tmp_path)


def _write_config(path: Path, data) -> Path:
    path.write_text(json.dumps(data))
    return path


class TestKnowledgeConfig:
    """Tests for the configuration model and its validators."""

    def test_defaults(self):
        config = KnowledgeConfig()

        assert config.library_name == "components"
        assert config.default_dialect == Dialect.REACT
        assert config.min_confidence == 0.8
        assert config.similarity_threshold == 0.7
        assert config.same_type_bucket_limit is None
        assert config.max_workers == 1
        assert config.allow_reingest is False
        assert config.log_level == "INFO"

    def test_log_level_is_uppercased(self):
        assert KnowledgeConfig(log_level="debug").log_level == "DEBUG"

    def test_dialect_is_parsed(self):
        assert KnowledgeConfig(default_dialect=" Vue ").default_dialect == Dialect.VUE

    @pytest.mark.parametrize(
        "field_name,value",
        [
            ("log_level", "LOUD"),
            ("log_format", "xml"),
            ("default_dialect", "svelte"),
            ("min_confidence", 1.5),
            ("max_workers", 0),
            ("max_workers", 64),
            ("same_type_bucket_limit", 1),
            ("library_name", "   "),
        ],
    )
    def test_invalid_values(self, field_name, value):
        with pytest.raises(ValidationError):
            KnowledgeConfig(**{field_name: value})

    def test_library_name_is_stripped(self):
        assert KnowledgeConfig(library_name=" Kpc ").library_name == "Kpc"


class TestConfigLoader:
    """Tests for source precedence: overrides, env, file, defaults."""

    def test_defaults_without_sources(self):
        assert load_config() == KnowledgeConfig()

    def test_file_in_working_directory(self, tmp_path):
        _write_config(tmp_path / CONFIG_FILENAME, {"library_name": "Kpc"})
        assert load_config().library_name == "Kpc"

    def test_explicit_path(self, tmp_path):
        path = _write_config(tmp_path / "custom.json", {"max_workers": 4})
        assert ConfigLoader(path).load().max_workers == 4

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        _write_config(tmp_path / CONFIG_FILENAME, {"library_name": "Kpc", "max_workers": 2})
        monkeypatch.setenv(f"{ENV_PREFIX}LIBRARY_NAME", "Element")
        monkeypatch.setenv(f"{ENV_PREFIX}ALLOW_REINGEST", "true")

        config = load_config()

        assert config.library_name == "Element"
        assert config.allow_reingest is True
        assert config.max_workers == 2

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv(f"{ENV_PREFIX}LIBRARY_NAME", "Element")
        config = load_config(library_name="Kpc", library_version=None)

        assert config.library_name == "Kpc"
        assert config.library_version == "1.0.0"

    def test_invalid_value_raises_configuration_error(self, tmp_path):
        path = _write_config(tmp_path / CONFIG_FILENAME, {"log_format": "xml"})

        with pytest.raises(ConfigurationError, match="Invalid configuration") as exc_info:
            load_config()
        assert Path(exc_info.value.details["config_file"]).resolve() == path.resolve()

    def test_non_object_file(self, tmp_path):
        _write_config(tmp_path / CONFIG_FILENAME, ["library_name"])

        with pytest.raises(ConfigurationError, match="must contain a JSON object"):
            load_config()

    def test_malformed_file(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("{not json")

        with pytest.raises(ConfigurationError, match="Cannot read config file"):
            load_config()
