"""Secondary relationship inference over an ingested graph.

Runs after primary ingestion and reads the node set in scope, so it must
not race with ingestion. Edges already in the store are never duplicated. Similarity and same-type inference are pairwise
(O(n^2)) over components and within each property type bucket.
"""

import re
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from itertools import combinations

from ..cancellation import CancellationToken
from ..config.models import KnowledgeConfig
from ..knowledge_logging import LogCategory, get_category_logger
from ..similarity import name_similarity, overlap_similarity
from .store import GraphStore
from .types import (
    Direction,
    GraphRelationship,
    NodeLabel,
    RelationshipType,
    StoredNode,
)

CATEGORY_WEIGHT = 0.3
NAME_WEIGHT = 0.4
FRAMEWORK_WEIGHT = 0.3

COMPONENT_TYPE = re.compile(r"^[A-Z][a-zA-Z]*$")
PRIMITIVE_TYPES = frozenset(
    {
        "String",
        "Number",
        "Boolean",
        "Array",
        "Object",
        "Function",
        "Date",
        "Any",
        "Event",
        "Promise",
        "Map",
        "Set",
        "Record",
        "Symbol",
        "RegExp",
        "Error",
    }
)

RELATED_EVENT_PAIRS: tuple[tuple[str, str], ...] = (
    ("click", "hover"),
    ("focus", "blur"),
    ("mouseenter", "mouseleave"),
    ("change", "input"),
)

SYMMETRIC_TYPES = frozenset(
    {RelationshipType.SIMILAR_TO, RelationshipType.SAME_TYPE, RelationshipType.RELATED_EVENT}
)


def component_similarity(first: StoredNode, second: StoredNode) -> float:
    """Weighted similarity of two Component nodes.

    0.3 for a shared category, plus 0.4 times the Jaccard similarity of the
    names' character sets, plus 0.3 times the Jaccard overlap of their
    dialect sets.
    """
    same_category = first.properties.get("category") == second.properties.get("category")
    return (
        CATEGORY_WEIGHT * (1.0 if same_category else 0.0)
        + NAME_WEIGHT * name_similarity(first.name, second.name)
        + FRAMEWORK_WEIGHT
        * overlap_similarity(
            first.properties.get("frameworks", []), second.properties.get("frameworks", [])
        )
    )


def is_component_type(type_name: str | None) -> bool:
    """Whether a declared prop type looks like a component name."""
    return bool(
        type_name and COMPONENT_TYPE.match(type_name) and type_name not in PRIMITIVE_TYPES
    )


def are_related_events(first: str, second: str) -> bool:
    """Whether two event names contain a known pair of related fragments."""
    first, second = first.lower(), second.lower()
    return any(
        (a in first and b in second) or (b in first and a in second)
        for a, b in RELATED_EVENT_PAIRS
    )


@dataclass
class InferenceReport:
    """Counts of relationships created per inference kind."""

    similar: int = 0
    dependencies: int = 0
    same_type: int = 0
    related_events: int = 0
    skipped_buckets: int = 0

    @property
    def total(self) -> int:
        return self.similar + self.dependencies + self.same_type + self.related_events

    def to_dict(self) -> dict[str, int]:
        return {
            "similar": self.similar,
            "dependencies": self.dependencies,
            "same_type": self.same_type,
            "related_events": self.related_events,
            "skipped_buckets": self.skipped_buckets,
        }


class RelationshipInferrer:
    """Infers SIMILAR_TO, DEPENDS_ON, SAME_TYPE and RELATED_EVENT edges.

    With component_ids, inference only considers those components and the
    properties and events they own, so ingesting a second library does not
    revisit the first. Without it, every node in the store is considered.
    """

    def __init__(
        self,
        store: GraphStore,
        config: KnowledgeConfig | None = None,
        cancel_token: CancellationToken | None = None,
        component_ids: Sequence[str] | None = None,
    ):
        self.store = store
        self.config = config or KnowledgeConfig()
        self.cancel_token = cancel_token or CancellationToken()
        self.component_ids = list(component_ids) if component_ids is not None else None
        self.logger = get_category_logger(LogCategory.GRAPH)
        self._existing: dict[RelationshipType, set[Hashable]] = {}

    def run(self) -> InferenceReport:
        """Run every inference step once, in order.

        Raises:
            OperationCancelledError: If cancellation is requested mid-run.
            GraphStoreError: If the store rejects a read or write.
        """
        report = InferenceReport(
            similar=self.infer_similarity(),
            dependencies=self.infer_dependencies(),
        )
        report.same_type, report.skipped_buckets = self.infer_same_type()
        report.related_events = self.infer_related_events()
        self.logger.info(
            f"Inferred {report.total} relationships: {report.to_dict()}",
            extra={"stage": "infer", "item_count": report.total},
        )
        return report

    def _components(self) -> list[StoredNode]:
        if self.component_ids is None:
            return self.store.find_nodes(NodeLabel.COMPONENT)
        nodes = (self.store.get_node(node_id) for node_id in self.component_ids)
        return [node for node in nodes if node is not None]

    def _owned(self, label: NodeLabel, rel_type: RelationshipType) -> list[StoredNode]:
        if self.component_ids is None:
            return self.store.find_nodes(label)
        owned: dict[str, StoredNode] = {}
        for component_id in self.component_ids:
            for node in self.store.find_neighbors(component_id, rel_type, Direction.OUTGOING):
                owned.setdefault(node.id, node)
        return list(owned.values())

    @staticmethod
    def _edge_key(
        rel_type: RelationshipType, source_id: str, target_id: str, properties: dict
    ) -> Hashable:
        if rel_type in SYMMETRIC_TYPES:
            return frozenset((source_id, target_id))
        return (source_id, target_id, properties.get("property"))

    def _link(
        self,
        rel_type: RelationshipType,
        source: StoredNode,
        target: StoredNode,
        **properties,
    ) -> bool:
        """Create an edge unless an equivalent one exists; returns whether created."""
        existing = self._existing.get(rel_type)
        if existing is None:
            existing = {
                self._edge_key(rel_type, rel.source_id, rel.target_id, rel.properties)
                for rel in self.store.find_relationships(rel_type)
            }
            self._existing[rel_type] = existing

        key = self._edge_key(rel_type, source.id, target.id, properties)
        if key in existing:
            return False
        self.store.create_relationship(
            GraphRelationship(rel_type, source.id, target.id, properties)
        )
        existing.add(key)
        return True

    def infer_similarity(self) -> int:
        """Create SIMILAR_TO edges for component pairs above the threshold."""
        components = self._components()
        created = 0
        for first, second in combinations(components, 2):
            self.cancel_token.raise_if_cancelled("infer_similarity")
            score = component_similarity(first, second)
            if score > self.config.similarity_threshold and self._link(
                RelationshipType.SIMILAR_TO, first, second, similarity=round(score, 4)
            ):
                created += 1
        return created

    def infer_dependencies(self) -> int:
        """Create DEPENDS_ON edges where a prop type names another component."""
        components = self._components()
        by_name: dict[str, list[StoredNode]] = {}
        for component in components:
            by_name.setdefault(component.name, []).append(component)

        created = 0
        for component in components:
            self.cancel_token.raise_if_cancelled("infer_dependencies")
            properties = self.store.find_neighbors(
                component.id, RelationshipType.HAS_PROPERTY, Direction.OUTGOING
            )
            for prop in properties:
                type_name = prop.properties.get("type")
                if not is_component_type(type_name):
                    continue
                for dependency in by_name.get(type_name, []):
                    if dependency.id == component.id:
                        continue
                    if self._link(
                        RelationshipType.DEPENDS_ON,
                        component,
                        dependency,
                        reason="property_type",
                        property=prop.name,
                    ):
                        created += 1
        return created

    def infer_same_type(self) -> tuple[int, int]:
        """Create pairwise SAME_TYPE edges within each property type bucket.

        Returns:
            (edges created, buckets skipped for exceeding same_type_bucket_limit)
        """
        buckets: dict[str, list[StoredNode]] = {}
        for prop in self._owned(NodeLabel.PROPERTY, RelationshipType.HAS_PROPERTY):
            type_name = prop.properties.get("type")
            if type_name:
                buckets.setdefault(type_name, []).append(prop)

        limit = self.config.same_type_bucket_limit
        created = skipped = 0
        for type_name, members in buckets.items():
            if len(members) < 2:
                continue
            if limit is not None and len(members) > limit:
                skipped += 1
                self.logger.warning(
                    f"Skipping SAME_TYPE inference for type {type_name!r}: "
                    f"{len(members)} properties exceed the limit of {limit}"
                )
                continue
            for first, second in combinations(members, 2):
                self.cancel_token.raise_if_cancelled("infer_same_type")
                if self._link(RelationshipType.SAME_TYPE, first, second, type=type_name):
                    created += 1
        return created, skipped

    def infer_related_events(self) -> int:
        """Create RELATED_EVENT edges between events with paired names."""
        events = self._owned(NodeLabel.EVENT, RelationshipType.EMITS_EVENT)
        created = 0
        for first, second in combinations(events, 2):
            self.cancel_token.raise_if_cancelled("infer_related_events")
            if are_related_events(first.name, second.name) and self._link(
                RelationshipType.RELATED_EVENT, first, second
            ):
                created += 1
        return created
