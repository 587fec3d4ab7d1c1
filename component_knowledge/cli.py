"""Click-based CLI for the component knowledge pipeline."""

import json
import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from .alignment import CrossDialectAligner
from .config import KnowledgeConfig, load_config
from .errors import KnowledgeError
from .graph import GraphStore, InMemoryGraphStore, KnowledgeGraphBuilder, Neo4jGraphStore
from .knowledge_logging import setup_logging
from .manifest import ComponentManifest, ManifestGenerator, validate_manifest
from .models import read_definitions
from .pipeline import KnowledgePipeline


def common_options(f: Any) -> Any:
    """Options shared by every command."""
    f = click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")(f)
    f = click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")(f)
    f = click.option(
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        help="Configuration file path",
    )(f)
    return f


def library_options(f: Any) -> Any:
    """Library identity options for commands that generate a manifest."""
    f = click.option("--library", help="Library name stamped into the manifest")(f)
    f = click.option("--library-version", help="Library version stamped into the manifest")(f)
    return f


def _setup(
    config_path: str | None,
    verbose: bool,
    quiet: bool,
    **overrides: Any,
) -> KnowledgeConfig:
    if quiet and verbose:
        click.echo("Error: --quiet and --verbose are mutually exclusive", err=True)
        sys.exit(1)
    try:
        config = load_config(Path(config_path) if config_path else None, **overrides)
    except KnowledgeError as e:
        _fail(e)
    setup_logging(
        level=config.log_level, quiet=quiet, verbose=verbose, log_format=config.log_format
    )
    return config


def _fail(error: KnowledgeError) -> NoReturn:
    click.echo(error.format(), err=True)
    sys.exit(1)


def _echo_messages(errors: list[str], warnings: list[str], quiet: bool) -> None:
    for message in errors:
        click.echo(f"  ERROR: {message}", err=True)
    if not quiet:
        for message in warnings:
            click.echo(f"  warning: {message}")


def _create_store(config: KnowledgeConfig, use_neo4j: bool) -> GraphStore:
    if use_neo4j:
        return Neo4jGraphStore.from_config(config)
    return InMemoryGraphStore()


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Align cross-dialect UI components and build their knowledge graph."""


@cli.command()
@click.argument("definitions", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write aligned JSON here")
@common_options
def align(definitions, output, config_path, verbose, quiet):
    """Align per-dialect component definitions."""
    config = _setup(config_path, verbose, quiet)
    try:
        loaded = read_definitions(Path(definitions))
        aligner = CrossDialectAligner(config)
        aligned = aligner.align(loaded.definitions)
        validation = aligner.validate_alignment(aligned)
    except KnowledgeError as e:
        _fail(e)

    payload = json.dumps([c.to_dict() for c in aligned], indent=2, ensure_ascii=False)
    if output:
        Path(output).write_text(payload, encoding="utf-8")
    else:
        click.echo(payload)

    if not quiet:
        stats = aligner.stats
        click.echo(
            f"Aligned {stats.aligned} components from {len(loaded.definitions)} definitions "
            f"({stats.skipped} skipped, {stats.duplicates} duplicates, "
            f"{loaded.rejected_count} rejected)",
            err=output is None,
        )
    _echo_messages(
        validation.errors, loaded.rejected + validation.warnings, quiet or output is None
    )
    if not validation.success:
        sys.exit(1)


@cli.command()
@click.argument("definitions", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False), required=True, help="Manifest path"
)
@click.option("--source-revision", help="Source revision recorded in manifest metadata")
@click.option("--generated-at", help="Fixed ISO timestamp for reproducible output")
@common_options
@library_options
def manifest(
    definitions,
    output,
    source_revision,
    generated_at,
    config_path,
    verbose,
    quiet,
    library,
    library_version,
):
    """Generate a component manifest from definitions."""
    config = _setup(
        config_path, verbose, quiet, library_name=library, library_version=library_version
    )
    try:
        loaded = read_definitions(Path(definitions))
        aligned = CrossDialectAligner(config).align(loaded.definitions)
        generated = ManifestGenerator(config).generate(
            aligned,
            definitions=loaded.definitions,
            generated_at=generated_at,
            source_revision=source_revision,
        )
        generated.save(Path(output))
    except KnowledgeError as e:
        _fail(e)

    validation = validate_manifest(generated)
    if not quiet:
        click.echo(
            f"Wrote {output}: {len(generated.components)} components, "
            f"{len(generated.patterns)} patterns, {len(generated.anti_patterns)} anti-patterns"
        )
    _echo_messages(validation.errors, loaded.rejected + validation.warnings, quiet)
    if not validation.valid:
        sys.exit(1)


@cli.command("validate-manifest")
@click.argument("manifest_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
def validate_manifest_command(manifest_path, verbose, quiet):
    """Validate a manifest file's schema and cross-references."""
    _setup(None, verbose, quiet)
    try:
        loaded = ComponentManifest.load(Path(manifest_path))
    except KnowledgeError as e:
        _fail(e)

    validation = validate_manifest(loaded)
    if not quiet:
        status = "VALID" if validation.valid else "INVALID"
        click.echo(
            f"{manifest_path}: {status} ({len(validation.errors)} errors, "
            f"{len(validation.warnings)} warnings)"
        )
    _echo_messages(validation.errors, validation.warnings, quiet)
    if not validation.valid:
        sys.exit(1)


@cli.command()
@click.argument("manifest_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--neo4j-uri", help="Build into Neo4j at this URI instead of in memory")
@click.option("--allow-reingest", is_flag=True, help="Ingest an existing version again")
@common_options
def build(
    manifest_path,
    neo4j_uri,
    allow_reingest,
    config_path,
    verbose,
    quiet,
):
    """Build the knowledge graph from a manifest file."""
    config = _setup(
        config_path,
        verbose,
        quiet,
        neo4j_uri=neo4j_uri,
        allow_reingest=allow_reingest or None,
    )
    try:
        loaded = ComponentManifest.load(Path(manifest_path))
        with _create_store(config, use_neo4j=neo4j_uri is not None) as store:
            builder = KnowledgeGraphBuilder(store, config)
            report = builder.build(loaded)
            validation = builder.validate_graph()
    except KnowledgeError as e:
        _fail(e)

    if not quiet:
        click.echo(
            f"Built graph: {report.nodes_created} nodes, "
            f"{report.relationships_created} relationships, "
            f"{report.inference.total} inferred ({report.duration_ms:.0f}ms)"
        )
        click.echo(f"Graph validation: {'VALID' if validation.valid else 'INVALID'}")
    _echo_messages(validation.errors, validation.warnings, quiet)
    if not validation.valid:
        sys.exit(1)


@cli.command()
@click.argument("definitions", type=click.Path(exists=True, dir_okay=False))
@click.option("--neo4j-uri", help="Build into Neo4j at this URI instead of in memory")
@click.option("--manifest-output", type=click.Path(dir_okay=False), help="Also save the manifest")
@click.option("--source-revision", help="Source revision recorded in manifest metadata")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@common_options
@library_options
def run(
    definitions,
    neo4j_uri,
    manifest_output,
    source_revision,
    as_json,
    config_path,
    verbose,
    quiet,
    library,
    library_version,
):
    """Run the full pipeline: align, generate, build and validate."""
    config = _setup(
        config_path,
        verbose,
        quiet,
        library_name=library,
        library_version=library_version,
        neo4j_uri=neo4j_uri,
    )
    try:
        with _create_store(config, use_neo4j=neo4j_uri is not None) as store:
            result = KnowledgePipeline(store, config).run_file(
                Path(definitions), source_revision=source_revision
            )
        if manifest_output and result.manifest is not None:
            result.manifest.save(Path(manifest_output))
    except KnowledgeError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        for summary in result.stages:
            click.echo(str(summary))
        if not result.promoted:
            click.echo("Manifest was not promoted to the graph", err=True)
        click.echo("Pipeline succeeded" if result.success else "Pipeline failed")

    if not result.success:
        sys.exit(1)


def main() -> None:
    """Entry point for the console script."""
    cli()


if __name__ == "__main__":
    main()
