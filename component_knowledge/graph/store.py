"""Abstract graph store interface."""

from abc import ABC, abstractmethod
from typing import Any

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


class GraphStore(ABC):
    """Narrow interface the graph builder consumes.

    Implementations must reject relationships whose endpoints do not exist
    and must return find_nodes() results in a deterministic order. Store
    failures are raised as GraphStoreError.
    """

    @abstractmethod
    def initialize(self) -> None:
        """Open connections and prepare indexes."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release connections."""
        pass

    @abstractmethod
    def create_node(self, node: GraphNode) -> str:
        """Create a node and return its store id."""
        pass

    @abstractmethod
    def create_relationship(self, relationship: GraphRelationship) -> str:
        """Create a relationship between existing nodes and return its id."""
        pass

    @abstractmethod
    def get_node(self, node_id: str) -> StoredNode | None:
        """Fetch one node by id."""
        pass

    @abstractmethod
    def find_nodes(
        self, label: NodeLabel, filters: dict[str, Any] | None = None
    ) -> list[StoredNode]:
        """Find nodes by label whose properties equal every filter value."""
        pass

    @abstractmethod
    def find_relationships(
        self,
        rel_type: RelationshipType | None = None,
        source_id: str | None = None,
        target_id: str | None = None,
    ) -> list[StoredRelationship]:
        """Find relationships matching every given criterion."""
        pass

    @abstractmethod
    def find_neighbors(
        self,
        node_id: str,
        rel_type: RelationshipType | None = None,
        direction: Direction = Direction.BOTH,
    ) -> list[StoredNode]:
        """Find distinct nodes adjacent to a node."""
        pass

    @abstractmethod
    def query(self, query: str, params: dict[str, Any] | None = None) -> GraphResult:
        """Run a raw store query."""
        pass

    def all_nodes(self) -> list[StoredNode]:
        """Every node, grouped by label in vocabulary order."""
        nodes: list[StoredNode] = []
        for label in NodeLabel:
            nodes.extend(self.find_nodes(label))
        return nodes

    def __enter__(self) -> "GraphStore":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
