"""End-to-end knowledge pipeline.

align -> validate_alignment -> generate -> validate_manifest -> build ->
validate_graph, each stage consuming the complete output of the previous
one. A validation result with errors stops the run before the next stage.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .alignment import AlignedComponent, AlignmentValidationResult, CrossDialectAligner
from .cancellation import CancellationToken
from .config.models import KnowledgeConfig
from .graph import BuildReport, GraphStore, GraphValidationResult, KnowledgeGraphBuilder
from .knowledge_logging import LogCategory, get_category_logger
from .manifest import (
    ComponentManifest,
    ManifestGenerator,
    ManifestValidationResult,
    validate_manifest,
)
from .models import ComponentDefinition, read_definitions
from .timing import PerformanceTimer


@dataclass
class StageSummary:
    """Counts for one pipeline stage, reported even on success."""

    stage: str
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    warnings: int = 0
    duration_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": self.stage,
            "processed": self.processed,
            "skipped": self.skipped,
            "failed": self.failed,
            "warnings": self.warnings,
            "duration_ms": round(self.duration_ms, 2),
        }

    def __str__(self) -> str:
        return (
            f"{self.stage}: {self.processed} processed, {self.skipped} skipped, "
            f"{self.failed} failed, {self.warnings} warnings ({self.duration_ms:.0f}ms)"
        )


@dataclass
class PipelineResult:
    """Artifacts and stage summaries of one pipeline run."""

    aligned: list[AlignedComponent] = field(default_factory=list)
    alignment_validation: AlignmentValidationResult | None = None
    manifest: ComponentManifest | None = None
    manifest_validation: ManifestValidationResult | None = None
    build_report: BuildReport | None = None
    graph_validation: GraphValidationResult | None = None
    stages: list[StageSummary] = field(default_factory=list)
    promoted: bool = False

    @property
    def success(self) -> bool:
        """Manifest promoted to the graph and the graph validated cleanly."""
        return (
            self.promoted
            and self.graph_validation is not None
            and self.graph_validation.valid
        )

    def stage(self, name: str) -> StageSummary | None:
        return next((s for s in self.stages if s.stage == name), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "promoted": self.promoted,
            "stages": [s.to_dict() for s in self.stages],
            "alignment_validation": (
                self.alignment_validation.to_dict() if self.alignment_validation else None
            ),
            "manifest_validation": (
                self.manifest_validation.to_dict() if self.manifest_validation else None
            ),
            "build_report": self.build_report.to_dict() if self.build_report else None,
            "graph_validation": (
                self.graph_validation.to_dict() if self.graph_validation else None
            ),
        }


class KnowledgePipeline:
    """Runs the full definitions-to-graph pipeline against one store."""

    def __init__(
        self,
        store: GraphStore,
        config: KnowledgeConfig | None = None,
        cancel_token: CancellationToken | None = None,
    ):
        self.store = store
        self.config = config or KnowledgeConfig()
        self.cancel_token = cancel_token or CancellationToken()
        self.aligner = CrossDialectAligner(self.config)
        self.generator = ManifestGenerator(self.config)
        self.builder = KnowledgeGraphBuilder(store, self.config, self.cancel_token)
        self.logger = get_category_logger(LogCategory.PIPELINE)

    def run_file(self, path: Path, **kwargs: Any) -> PipelineResult:
        """Read a definitions file and run every stage over its valid entries.

        Entries rejected while reading are counted as skipped in the align
        stage summary.
        """
        loaded = read_definitions(path)
        return self.run(loaded.definitions, rejected=loaded.rejected_count, **kwargs)

    def run(
        self,
        definitions: Sequence[ComponentDefinition],
        *,
        generated_at: str | None = None,
        source_revision: str | None = None,
        rejected: int = 0,
    ) -> PipelineResult:
        """Run every stage in order.

        Args:
            definitions: Per-dialect component definitions.
            generated_at: Optional fixed manifest timestamp.
            source_revision: Optional source revision for manifest metadata.
            rejected: Entries already dropped while reading the definitions,
                reported with the align stage.

        Returns:
            PipelineResult; promoted is False when a validation stage reported
            errors and the graph stages did not run.

        Raises:
            DuplicateIngestionError: If the library version is already ingested.
            GraphBuildError: If the store rejects a write during the build.
            OperationCancelledError: If cancellation is requested.
        """
        result = PipelineResult()

        self.cancel_token.raise_if_cancelled("align")
        with PerformanceTimer("align", auto_log=False) as timer:
            result.aligned = self.aligner.align(definitions)
        stats = self.aligner.stats
        self._record(
            result,
            StageSummary(
                "align",
                processed=len(definitions) + rejected,
                skipped=stats.dropped_definitions + rejected,
                warnings=stats.duplicates + stats.skipped + rejected,
                duration_ms=timer.duration_ms,
            ),
        )

        with PerformanceTimer("validate_alignment", auto_log=False) as timer:
            alignment = self.aligner.validate_alignment(result.aligned)
        result.alignment_validation = alignment
        self._record(
            result,
            StageSummary(
                "validate_alignment",
                processed=len(result.aligned),
                failed=len(alignment.errors),
                warnings=len(alignment.warnings),
                duration_ms=timer.duration_ms,
            ),
        )
        if not alignment.success:
            return self._halt(result, "alignment", alignment.errors)

        self.cancel_token.raise_if_cancelled("generate_manifest")
        with PerformanceTimer("generate_manifest", auto_log=False) as timer:
            manifest = self.generator.generate(
                result.aligned,
                definitions=definitions,
                generated_at=generated_at,
                source_revision=source_revision,
            )
        result.manifest = manifest
        self._record(
            result,
            StageSummary(
                "generate_manifest",
                processed=len(manifest.components),
                warnings=self.generator.example_failures,
                duration_ms=timer.duration_ms,
            ),
        )

        with PerformanceTimer("validate_manifest", auto_log=False) as timer:
            manifest_validation = validate_manifest(manifest)
        result.manifest_validation = manifest_validation
        self._record(
            result,
            StageSummary(
                "validate_manifest",
                processed=len(manifest.components),
                failed=len(manifest_validation.errors),
                warnings=len(manifest_validation.warnings),
                duration_ms=timer.duration_ms,
            ),
        )
        if not manifest_validation.valid:
            return self._halt(result, "manifest", manifest_validation.errors)

        result.promoted = True
        report = self.builder.build(manifest)
        result.build_report = report
        self._record(
            result,
            StageSummary(
                "build",
                processed=report.components,
                skipped=report.rules_unresolved + report.inference.skipped_buckets,
                duration_ms=report.duration_ms,
            ),
        )

        with PerformanceTimer("validate_graph", auto_log=False) as timer:
            graph_validation = self.builder.validate_graph()
        result.graph_validation = graph_validation
        self._record(
            result,
            StageSummary(
                "validate_graph",
                processed=len(self.store.all_nodes()),
                failed=len(graph_validation.errors),
                warnings=len(graph_validation.warnings),
                duration_ms=timer.duration_ms,
            ),
        )
        return result

    def _record(self, result: PipelineResult, summary: StageSummary) -> None:
        result.stages.append(summary)
        self.logger.info(
            str(summary),
            extra={
                "stage": summary.stage,
                "duration_ms": summary.duration_ms,
                "item_count": summary.processed,
            },
        )

    def _halt(self, result: PipelineResult, artifact: str, errors: list[str]) -> PipelineResult:
        self.logger.error(
            f"Not promoting {artifact}: {len(errors)} validation errors; first: {errors[0]}"
        )
        return result
