"""In-memory graph store for tests, dry runs and the CLI default."""

import re
import threading
from typing import Any

from ..errors import GraphStoreError
from ..knowledge_logging import LogCategory, get_category_logger
from .store import GraphStore
from .types import (
    Direction,
    GraphNode,
    GraphRelationship,
    GraphResult,
    NodeLabel,
    RelationshipType,
    StoredNode,
    StoredRelationship,
)

# The one raw query form supported: MATCH (n:Label) RETURN n
_MATCH_QUERY = re.compile(
    r"^\s*MATCH\s*\(\s*(?P<var>\w+)\s*:\s*(?P<label>\w+)\s*\)\s*RETURN\s+(?P=var)\s*;?\s*$",
    re.IGNORECASE,
)


def _matches(properties: dict[str, Any], filters: dict[str, Any] | None) -> bool:
    if not filters:
        return True
    return all(properties.get(key) == value for key, value in filters.items())


class InMemoryGraphStore(GraphStore):
    """Thread-safe dict-backed store with deterministic insertion order."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._nodes: dict[str, StoredNode] = {}
        self._relationships: dict[str, StoredRelationship] = {}
        self._next_node = 1
        self._next_relationship = 1
        self._closed = False
        self.logger = get_category_logger(LogCategory.STORAGE)

    def initialize(self) -> None:
        with self._lock:
            self._closed = False

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self.logger.debug(
                f"Closed in-memory store with {len(self._nodes)} nodes and "
                f"{len(self._relationships)} relationships"
            )

    def clear(self) -> None:
        """Remove every node and relationship."""
        with self._lock:
            self._nodes.clear()
            self._relationships.clear()

    def _check_open(self, operation: str) -> None:
        if self._closed:
            raise GraphStoreError("Graph store is closed", operation=operation)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def relationship_count(self) -> int:
        return len(self._relationships)

    def create_node(self, node: GraphNode) -> str:
        with self._lock:
            self._check_open("create_node")
            if not isinstance(node, GraphNode):
                raise GraphStoreError(
                    f"Expected a typed graph node, got {type(node).__name__}",
                    operation="create_node",
                )
            node_id = f"n{self._next_node}"
            self._next_node += 1
            self._nodes[node_id] = StoredNode(node_id, node.label, node.properties())
            return node_id

    def create_relationship(self, relationship: GraphRelationship) -> str:
        with self._lock:
            self._check_open("create_relationship")
            for endpoint in (relationship.source_id, relationship.target_id):
                if endpoint not in self._nodes:
                    raise GraphStoreError(
                        f"Relationship endpoint {endpoint} does not exist",
                        operation="create_relationship",
                    )
            rel_id = f"r{self._next_relationship}"
            self._next_relationship += 1
            self._relationships[rel_id] = StoredRelationship(
                id=rel_id,
                type=relationship.type,
                source_id=relationship.source_id,
                target_id=relationship.target_id,
                properties=dict(relationship.properties),
            )
            return rel_id

    def get_node(self, node_id: str) -> StoredNode | None:
        with self._lock:
            return self._nodes.get(node_id)

    def find_nodes(
        self, label: NodeLabel, filters: dict[str, Any] | None = None
    ) -> list[StoredNode]:
        with self._lock:
            self._check_open("find_nodes")
            return [
                node
                for node in self._nodes.values()
                if node.label == label and _matches(node.properties, filters)
            ]

    def find_relationships(
        self,
        rel_type: RelationshipType | None = None,
        source_id: str | None = None,
        target_id: str | None = None,
    ) -> list[StoredRelationship]:
        with self._lock:
            self._check_open("find_relationships")
            return [
                rel
                for rel in self._relationships.values()
                if (rel_type is None or rel.type == rel_type)
                and (source_id is None or rel.source_id == source_id)
                and (target_id is None or rel.target_id == target_id)
            ]

    def find_neighbors(
        self,
        node_id: str,
        rel_type: RelationshipType | None = None,
        direction: Direction = Direction.BOTH,
    ) -> list[StoredNode]:
        with self._lock:
            self._check_open("find_neighbors")
            neighbor_ids: dict[str, None] = {}
            for rel in self._relationships.values():
                if rel_type is not None and rel.type != rel_type:
                    continue
                if direction != Direction.INCOMING and rel.source_id == node_id:
                    neighbor_ids[rel.target_id] = None
                if direction != Direction.OUTGOING and rel.target_id == node_id:
                    neighbor_ids[rel.source_id] = None
            return [self._nodes[n] for n in neighbor_ids]

    def query(self, query: str, params: dict[str, Any] | None = None) -> GraphResult:
        """Run ``MATCH (n:Label) RETURN n``; params act as equality filters.

        Raises:
            GraphStoreError: For any other query form or an unknown label.
        """
        match = _MATCH_QUERY.match(query)
        if not match:
            raise GraphStoreError(
                "In-memory store only supports 'MATCH (n:Label) RETURN n'",
                operation="query",
            )
        try:
            label = NodeLabel(match.group("label"))
        except ValueError as e:
            raise GraphStoreError(
                f"Unknown node label {match.group('label')}", operation="query"
            ) from e

        var = match.group("var")
        return GraphResult(
            records=[
                {var: {"id": node.id, **node.properties}}
                for node in self.find_nodes(label, params)
            ]
        )
