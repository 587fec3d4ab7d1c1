"""Unit tests for the CLI commands."""

import json

import pytest
from click.testing import CliRunner

from component_knowledge.alignment import CrossDialectAligner
from component_knowledge.cli import cli
from component_knowledge.config import ENV_PREFIX, KnowledgeConfig
from component_knowledge.manifest import ComponentManifest, ManifestGenerator

GENERATED_AT = "2026-01-01T00:00:00+00:00"


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep stray config files and environment out of CLI runs."""
    for field_name in KnowledgeConfig.model_fields:
        monkeypatch.delenv(f"{ENV_PREFIX}{field_name.upper()}", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def manifest_file(runner, definitions_file, tmp_path):
    path = tmp_path / "manifest.json"
    result = runner.invoke(
        cli,
        [
            "manifest",
            str(definitions_file),
            "-o",
            str(path),
            "--library",
            "Kpc",
            "--library-version",
            "2.0.0",
            "--generated-at",
            GENERATED_AT,
        ],
    )
    assert result.exit_code == 0, result.output
    return path


class TestCLIBasics:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("align", "manifest", "validate-manifest", "build", "run"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert "0.1.0" in result.output

    def test_quiet_and_verbose_conflict(self, runner, definitions_file):
        result = runner.invoke(cli, ["align", str(definitions_file), "-q", "-v"])

        assert result.exit_code == 1
        assert "mutually exclusive" in result.output

    def test_invalid_config_file(self, runner, definitions_file, tmp_path):
        config_path = tmp_path / "bad.json"
        config_path.write_text(json.dumps({"max_workers": 0}))

        result = runner.invoke(
            cli, ["align", str(definitions_file), "--config", str(config_path)]
        )

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_missing_definitions_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["align", str(tmp_path / "missing.json")])
        assert result.exit_code != 0


class TestAlignCommand:
    """Tests for the align command."""

    def test_align_to_file(self, runner, definitions_file, tmp_path):
        output = tmp_path / "aligned.json"

        result = runner.invoke(cli, ["align", str(definitions_file), "-o", str(output)])

        assert result.exit_code == 0, result.output
        aligned = json.loads(output.read_text())
        assert [c["name"] for c in aligned] == ["Button", "Input", "Form", "Modal", "Dialog"]
        assert "Aligned 5 components from 9 definitions" in result.output

    def test_align_to_stdout(self, runner, definitions_file):
        result = runner.invoke(cli, ["align", str(definitions_file)])

        assert result.exit_code == 0, result.output
        assert '"name": "Button"' in result.output

    def test_rejected_entries_are_reported(self, runner, tmp_path):
        path = tmp_path / "mixed.json"
        path.write_text(
            json.dumps(
                [
                    {"name": "KButton", "dialect": "react"},
                    {"name": "KInput", "dialect": "svelte"},
                ]
            )
        )
        output = tmp_path / "aligned.json"

        result = runner.invoke(cli, ["align", str(path), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert [c["name"] for c in json.loads(output.read_text())] == ["Button"]
        assert "Aligned 1 components from 1 definitions" in result.output
        assert "1 rejected" in result.output
        assert "Unknown dialect 'svelte'" in result.output

    def test_malformed_definitions(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{")

        result = runner.invoke(cli, ["align", str(path)])

        assert result.exit_code == 1
        assert "is not valid JSON" in result.output


class TestManifestCommands:
    """Tests for manifest generation and validation."""

    def test_manifest_written(self, runner, definitions_file, tmp_path):
        path = tmp_path / "out.json"

        result = runner.invoke(
            cli,
            ["manifest", str(definitions_file), "-o", str(path), "--library", "Kpc"],
        )

        assert result.exit_code == 0, result.output
        assert "5 components, 2 patterns, 6 anti-patterns" in result.output
        loaded = ComponentManifest.load(path)
        assert loaded.library == "Kpc"
        assert loaded.version == "1.0.0"

    def test_manifest_timestamp_is_reproducible(self, manifest_file):
        loaded = ComponentManifest.load(manifest_file)
        assert loaded.metadata.generated_at == GENERATED_AT

    def test_validate_manifest(self, runner, manifest_file):
        result = runner.invoke(cli, ["validate-manifest", str(manifest_file)])

        assert result.exit_code == 0, result.output
        assert ": VALID (0 errors" in result.output

    def test_validate_unparseable_manifest(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"library": "Kpc"}))

        result = runner.invoke(cli, ["validate-manifest", str(path)])

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestBuildCommand:
    """Tests for building a graph from a manifest file."""

    def test_build_in_memory(self, runner, manifest_file):
        result = runner.invoke(cli, ["build", str(manifest_file)])

        assert result.exit_code == 0, result.output
        assert "Built graph: 31 nodes, 42 relationships, 12 inferred" in result.output
        assert "Graph validation: VALID" in result.output

    def test_build_reports_invalid_graph(self, runner, config, button_definitions, tmp_path):
        aligned = CrossDialectAligner(config).align(button_definitions)
        path = tmp_path / "button.json"
        ManifestGenerator(config).generate(aligned, generated_at=GENERATED_AT).save(path)

        result = runner.invoke(cli, ["build", str(path)])

        assert result.exit_code == 1
        assert "Graph validation: INVALID" in result.output
        assert "Component Button has no properties" in result.output


class TestRunCommand:
    """Tests for the end-to-end run command."""

    def test_run_succeeds(self, runner, definitions_file, tmp_path):
        manifest_output = tmp_path / "run-manifest.json"

        result = runner.invoke(
            cli,
            [
                "run",
                str(definitions_file),
                "--library",
                "Kpc",
                "--manifest-output",
                str(manifest_output),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "align: 9 processed" in result.output
        assert "Pipeline succeeded" in result.output
        assert ComponentManifest.load(manifest_output).library == "Kpc"

    def test_run_json(self, runner, definitions_file):
        result = runner.invoke(cli, ["run", str(definitions_file), "--json", "-q"])

        assert result.exit_code == 0, result.output
        assert '"promoted": true' in result.output
        assert '"success": true' in result.output

    def test_run_counts_rejected_entries(self, runner, definitions_file, tmp_path):
        path = tmp_path / "with-bad-entry.json"
        entries = json.loads(definitions_file.read_text())
        entries.append({"name": "KInput", "dialect": "svelte"})
        path.write_text(json.dumps(entries))

        result = runner.invoke(cli, ["run", str(path)])

        assert result.exit_code == 0, result.output
        assert "align: 10 processed, 1 skipped" in result.output
