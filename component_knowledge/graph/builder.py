"""Knowledge graph construction from a component manifest.

Ingestion order is fixed because later steps look up nodes created by
earlier ones:

1. Library node
2. Component nodes with CONTAINS, property/event/slot children and
   IMPLEMENTED_IN edges to shared Framework nodes
3. Composability rules as typed edges between components
4. Usage patterns and anti-patterns with USES_COMPONENT edges
5. Relationship inference over the components this build created
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..cancellation import CancellationToken
from ..config.models import KnowledgeConfig
from ..dialects import Dialect
from ..errors import DuplicateIngestionError, GraphBuildError, GraphStoreError
from ..knowledge_logging import LogCategory, get_category_logger
from ..manifest.models import AntiPattern, ComponentManifest, ComponentSpec, UsagePattern
from ..timing import PerformanceTimer
from .inference import InferenceReport, RelationshipInferrer
from .store import GraphStore
from .types import (
    AntiPatternNode,
    ComponentNode,
    EventNode,
    FrameworkNode,
    GraphNode,
    GraphRelationship,
    GraphValidationResult,
    LibraryNode,
    NodeLabel,
    PatternNode,
    PropertyNode,
    RelationshipType,
    SlotNode,
)
from .validator import GraphValidator


@dataclass
class BuildReport:
    """Summary of one build() call."""

    library_id: str = ""
    nodes_created: int = 0
    relationships_created: int = 0
    components: int = 0
    patterns: int = 0
    anti_patterns: int = 0
    rules_applied: int = 0
    rules_unresolved: int = 0
    inference: InferenceReport = field(default_factory=InferenceReport)
    duration_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "library_id": self.library_id,
            "nodes_created": self.nodes_created,
            "relationships_created": self.relationships_created,
            "components": self.components,
            "patterns": self.patterns,
            "anti_patterns": self.anti_patterns,
            "rules_applied": self.rules_applied,
            "rules_unresolved": self.rules_unresolved,
            "inference": self.inference.to_dict(),
            "duration_ms": round(self.duration_ms, 2),
        }


class KnowledgeGraphBuilder:
    """Ingests manifests into a graph store.

    The store handle is passed in explicitly; the builder holds no global
    state, so independent builders can target independent stores.
    """

    def __init__(
        self,
        store: GraphStore,
        config: KnowledgeConfig | None = None,
        cancel_token: CancellationToken | None = None,
    ):
        self.store = store
        self.config = config or KnowledgeConfig()
        self.cancel_token = cancel_token or CancellationToken()
        self.logger = get_category_logger(LogCategory.GRAPH)
        self.report = BuildReport()
        self._stage = "idle"
        self._library = ""
        self._frameworks: dict[Dialect, str] = {}
        self._build_ids: dict[str, str] | None = None

    def build(self, manifest: ComponentManifest) -> BuildReport:
        """Ingest a manifest, then infer secondary relationships.

        Any store failure during ingestion is fatal for the call; callers
        wrap build() in a transaction or clean up the partial library.

        Args:
            manifest: A validated manifest.

        Returns:
            BuildReport with creation counts and inference results.

        Raises:
            DuplicateIngestionError: If the library version is already in the
                store and allow_reingest is off.
            GraphBuildError: If the store rejects a write.
            OperationCancelledError: If cancellation is requested mid-build.
        """
        self.report = BuildReport()
        self._frameworks = {}
        self._library = manifest.library

        existing = self.store.find_nodes(
            NodeLabel.LIBRARY, {"name": manifest.library, "version": manifest.version}
        )
        if existing and not self.config.allow_reingest:
            raise DuplicateIngestionError(manifest.library, manifest.version)

        self._build_ids = {}
        try:
            self._ingest(manifest)
        finally:
            self._build_ids = None
            self._stage = "idle"

        self.logger.info(
            f"Built graph for {manifest.library}@{manifest.version}: "
            f"{self.report.nodes_created} nodes, "
            f"{self.report.relationships_created} relationships, "
            f"{self.report.inference.total} inferred in {self.report.duration_ms:.0f}ms",
            extra={"stage": "build", "duration_ms": self.report.duration_ms},
        )
        return self.report

    def _ingest(self, manifest: ComponentManifest) -> None:
        with PerformanceTimer("build_graph", auto_log=False) as timer:
            self._stage = "library"
            library_id = self._create_node(
                LibraryNode(
                    name=manifest.library,
                    version=manifest.version,
                    generated_at=manifest.metadata.generated_at,
                    source_revision=manifest.metadata.source_revision,
                    confidence=float(manifest.metadata.confidence),
                    component_count=len(manifest.components),
                ),
                item=f"library {manifest.library}",
            )
            self.report.library_id = library_id

            component_ids = [
                self.add_component(spec, library_id) for spec in manifest.components
            ]

            self._stage = "composability"
            for spec, component_id in zip(manifest.components, component_ids):
                self.apply_composability_rules(spec, component_id)

            for pattern in manifest.patterns:
                self.add_usage_pattern(pattern)
            for anti_pattern in manifest.anti_patterns:
                self.add_anti_pattern(anti_pattern)

            self.report.inference = self.infer_relationships(component_ids)

        self.report.duration_ms = timer.duration_ms

    def _create_node(self, node: GraphNode, item: str) -> str:
        self.cancel_token.raise_if_cancelled(f"build ({self._stage})")
        try:
            node_id = self.store.create_node(node)
        except GraphStoreError as e:
            raise GraphBuildError(self._stage, item, e.message) from e
        self.report.nodes_created += 1
        return node_id

    def _create_relationship(
        self,
        rel_type: RelationshipType,
        source_id: str,
        target_id: str,
        item: str,
        properties: dict[str, Any] | None = None,
    ) -> str:
        self.cancel_token.raise_if_cancelled(f"build ({self._stage})")
        try:
            rel_id = self.store.create_relationship(
                GraphRelationship(rel_type, source_id, target_id, properties or {})
            )
        except GraphStoreError as e:
            raise GraphBuildError(self._stage, item, e.message) from e
        self.report.relationships_created += 1
        return rel_id

    def _resolve_components(self, name: str) -> list[str]:
        """Ids of the components a rule or pattern target names.

        During build() only components created by that build are candidates,
        so a re-ingested library never links into an earlier copy.
        """
        if self._build_ids is not None:
            component_id = self._build_ids.get(name)
            return [component_id] if component_id else []

        filters: dict[str, Any] = {"name": name}
        if self._library:
            filters["library"] = self._library
        try:
            nodes = self.store.find_nodes(NodeLabel.COMPONENT, filters)
        except GraphStoreError as e:
            raise GraphBuildError(self._stage, f"lookup of {name}", e.message) from e
        return [node.id for node in nodes]

    def add_component(
        self, spec: ComponentSpec, library_id: str | None = None, apply_rules: bool = False
    ) -> str:
        """Create a Component node with its children and framework edges.

        Args:
            spec: The component to ingest.
            library_id: Library node to link with CONTAINS, if any.
            apply_rules: Also apply composability rules now. Rule targets must
                already exist, so build() applies rules after all components.

        Returns:
            The Component node id.
        """
        self._stage = "components"
        item = f"component {spec.name}"
        component_id = self._create_node(
            ComponentNode(
                name=spec.name,
                category=spec.category,
                description=spec.description,
                frameworks=tuple(d.value for d in spec.dialects),
                aliases=spec.aliases,
                confidence=float(spec.confidence),
                library=self._library,
            ),
            item=item,
        )
        if self._build_ids is not None:
            self._build_ids.setdefault(spec.name, component_id)
        if library_id is not None:
            self._create_relationship(
                RelationshipType.CONTAINS, library_id, component_id, item
            )

        for prop in spec.props:
            prop_id = self._create_node(
                PropertyNode(
                    name=prop.name,
                    type=prop.type,
                    required=prop.required,
                    description=prop.description,
                    component=spec.name,
                ),
                item=f"{item} prop {prop.name}",
            )
            self._create_relationship(
                RelationshipType.HAS_PROPERTY, component_id, prop_id, item
            )

        for event in spec.events:
            event_id = self._create_node(
                EventNode(
                    name=event.name,
                    type=event.type,
                    payload=event.payload,
                    required=event.required,
                    description=event.description,
                    component=spec.name,
                ),
                item=f"{item} event {event.name}",
            )
            self._create_relationship(
                RelationshipType.EMITS_EVENT, component_id, event_id, item
            )

        for slot in spec.slots:
            slot_id = self._create_node(
                SlotNode(
                    name=slot.name,
                    type=slot.type,
                    description=slot.description,
                    component=spec.name,
                ),
                item=f"{item} slot {slot.name}",
            )
            self._create_relationship(RelationshipType.HAS_SLOT, component_id, slot_id, item)

        for binding in spec.frameworks:
            framework_id = self.get_or_create_framework(binding.dialect)
            self._create_relationship(
                RelationshipType.IMPLEMENTED_IN,
                component_id,
                framework_id,
                item,
                {
                    "componentName": binding.component_name,
                    "module": binding.import_spec.module,
                },
            )

        if apply_rules:
            self.apply_composability_rules(spec, component_id)

        self.report.components += 1
        return component_id

    def get_or_create_framework(self, dialect: Dialect) -> str:
        """Return the shared Framework node for a dialect, creating it once."""
        if dialect in self._frameworks:
            return self._frameworks[dialect]

        try:
            existing = self.store.find_nodes(NodeLabel.FRAMEWORK, {"name": dialect.value})
        except GraphStoreError as e:
            raise GraphBuildError(self._stage, f"framework {dialect.value}", e.message) from e

        if existing:
            framework_id = existing[0].id
        else:
            framework_id = self._create_node(
                FrameworkNode(name=dialect.value, description=f"{dialect.value} framework"),
                item=f"framework {dialect.value}",
            )
        self._frameworks[dialect] = framework_id
        return framework_id

    def apply_composability_rules(self, spec: ComponentSpec, component_id: str) -> int:
        """Create typed edges for a component's rules; returns edges created.

        Rules whose target component is not in the graph are skipped.
        """
        created = 0
        for rule in spec.composability:
            targets = self._resolve_components(rule.target)
            if not targets:
                self.report.rules_unresolved += 1
                self.logger.debug(
                    f"Rule {rule.type.value} of {spec.name} targets unknown component "
                    f"{rule.target}"
                )
                continue
            rel_type = RelationshipType[rule.type.name]
            for target_id in targets:
                self._create_relationship(
                    rel_type,
                    component_id,
                    target_id,
                    f"rule {rule.type.value} {spec.name} -> {rule.target}",
                    {"condition": rule.condition, "message": rule.message},
                )
                created += 1
        self.report.rules_applied += created
        return created

    def add_usage_pattern(self, pattern: UsagePattern) -> str:
        """Create a Pattern node linked to the components it uses."""
        self._stage = "patterns"
        item = f"pattern {pattern.id}"
        pattern_id = self._create_node(
            PatternNode(
                pattern_id=pattern.id,
                name=pattern.name,
                description=pattern.description,
                template=pattern.template,
                best_practices=pattern.best_practices,
            ),
            item=item,
        )
        self._link_components(pattern_id, pattern.components, item)
        self.report.patterns += 1
        return pattern_id

    def add_anti_pattern(self, anti_pattern: AntiPattern) -> str:
        """Create an AntiPattern node linked to the components it concerns."""
        self._stage = "anti_patterns"
        item = f"anti-pattern {anti_pattern.id}"
        node_id = self._create_node(
            AntiPatternNode(
                pattern_id=anti_pattern.id,
                name=anti_pattern.name,
                description=anti_pattern.description,
                bad_example=anti_pattern.bad_example,
                good_example=anti_pattern.good_example,
                reason=anti_pattern.reason,
                severity=anti_pattern.severity.value,
            ),
            item=item,
        )
        self._link_components(node_id, anti_pattern.components, item)
        self.report.anti_patterns += 1
        return node_id

    def _link_components(self, source_id: str, names: tuple[str, ...], item: str) -> None:
        for name in names:
            for component_id in self._resolve_components(name):
                self._create_relationship(
                    RelationshipType.USES_COMPONENT, source_id, component_id, item
                )

    def infer_relationships(
        self, component_ids: Sequence[str] | None = None
    ) -> InferenceReport:
        """Infer secondary relationships.

        Args:
            component_ids: Components to infer around; the whole store when omitted.

        Raises:
            GraphBuildError: If the store rejects an inferred edge.
        """
        self._stage = "infer"
        inferrer = RelationshipInferrer(
            self.store, self.config, self.cancel_token, component_ids=component_ids
        )
        try:
            return inferrer.run()
        except GraphStoreError as e:
            raise GraphBuildError("infer", "inferred relationship", e.message) from e

    def validate_graph(self) -> GraphValidationResult:
        """Run read-only integrity checks over the store."""
        return GraphValidator(self.store).validate()
