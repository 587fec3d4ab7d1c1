"""Neo4j-backed graph store."""

from typing import Any

from neo4j import GraphDatabase, Query
from neo4j.exceptions import DriverError, Neo4jError

from ..config.models import KnowledgeConfig
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

SCHEMA_STATEMENTS = (
    "CREATE INDEX component_name IF NOT EXISTS FOR (n:Component) ON (n.name)",
    "CREATE INDEX framework_name IF NOT EXISTS FOR (n:Framework) ON (n.name)",
    "CREATE INDEX library_version IF NOT EXISTS FOR (n:Library) ON (n.name, n.version)",
    "CREATE INDEX property_type IF NOT EXISTS FOR (n:Property) ON (n.type)",
)

_NODE_RETURN = "elementId(n) AS id, labels(n)[0] AS label, properties(n) AS props"


class Neo4jGraphStore(GraphStore):
    """Graph store over the official neo4j driver.

    Labels and relationship types come from closed enums, so they are
    interpolated into Cypher; all values go through parameters. Every
    query runs with the configured transaction timeout.
    """

    def __init__(
        self,
        uri: str,
        user: str,
        password: str,
        database: str = "neo4j",
        timeout_seconds: float = 30.0,
        driver: Any = None,
    ):
        self.uri = uri
        self.user = user
        self.password = password
        self.database = database
        self.timeout_seconds = timeout_seconds
        self._driver = driver
        self.logger = get_category_logger(LogCategory.STORAGE)

    @classmethod
    def from_config(cls, config: KnowledgeConfig) -> "Neo4jGraphStore":
        return cls(
            uri=config.neo4j_uri,
            user=config.neo4j_user,
            password=config.neo4j_password,
            database=config.neo4j_database,
            timeout_seconds=config.store_timeout_seconds,
        )

    def initialize(self) -> None:
        """Connect (unless a driver was injected) and create indexes."""
        if self._driver is None:
            try:
                self._driver = GraphDatabase.driver(
                    self.uri,
                    auth=(self.user, self.password),
                    connection_timeout=self.timeout_seconds,
                )
                self._driver.verify_connectivity()
            except (Neo4jError, DriverError, OSError) as e:
                raise GraphStoreError(
                    f"Cannot connect to Neo4j at {self.uri}: {e}",
                    operation="initialize",
                    original_error=str(e),
                ) from e

        for statement in SCHEMA_STATEMENTS:
            self._run(statement, operation="initialize")
        self.logger.info(f"Connected to Neo4j at {self.uri} (database {self.database})")

    def close(self) -> None:
        if self._driver is not None:
            self._driver.close()
            self._driver = None

    def _run(
        self, cypher: str, params: dict[str, Any] | None = None, *, operation: str
    ) -> list[dict[str, Any]]:
        if self._driver is None:
            raise GraphStoreError("Neo4j store is not initialized", operation=operation)
        try:
            with self._driver.session(database=self.database) as session:
                result = session.run(Query(cypher, timeout=self.timeout_seconds), params or {})
                return [record.data() for record in result]
        except (Neo4jError, DriverError) as e:
            raise GraphStoreError(
                f"Neo4j {operation} failed: {e}",
                operation=operation,
                original_error=str(e),
            ) from e

    @staticmethod
    def _stored_node(record: dict[str, Any]) -> StoredNode:
        return StoredNode(
            id=record["id"], label=NodeLabel(record["label"]), properties=record["props"]
        )

    def create_node(self, node: GraphNode) -> str:
        records = self._run(
            f"CREATE (n:{node.label.value}) SET n = $props RETURN elementId(n) AS id",
            {"props": node.properties()},
            operation="create_node",
        )
        return records[0]["id"]

    def create_relationship(self, relationship: GraphRelationship) -> str:
        properties = {k: v for k, v in relationship.properties.items() if v is not None}
        records = self._run(
            "MATCH (a), (b) WHERE elementId(a) = $source AND elementId(b) = $target "
            f"CREATE (a)-[r:{relationship.type.value}]->(b) SET r = $props "
            "RETURN elementId(r) AS id",
            {
                "source": relationship.source_id,
                "target": relationship.target_id,
                "props": properties,
            },
            operation="create_relationship",
        )
        if not records:
            raise GraphStoreError(
                f"Relationship endpoints {relationship.source_id} -> "
                f"{relationship.target_id} do not exist",
                operation="create_relationship",
            )
        return records[0]["id"]

    def get_node(self, node_id: str) -> StoredNode | None:
        records = self._run(
            f"MATCH (n) WHERE elementId(n) = $id RETURN {_NODE_RETURN}",
            {"id": node_id},
            operation="get_node",
        )
        return self._stored_node(records[0]) if records else None

    def find_nodes(
        self, label: NodeLabel, filters: dict[str, Any] | None = None
    ) -> list[StoredNode]:
        records = self._run(
            f"MATCH (n:{label.value}) "
            "WHERE all(key IN keys($filters) WHERE n[key] = $filters[key]) "
            f"RETURN {_NODE_RETURN} ORDER BY id",
            {"filters": filters or {}},
            operation="find_nodes",
        )
        return [self._stored_node(record) for record in records]

    def find_relationships(
        self,
        rel_type: RelationshipType | None = None,
        source_id: str | None = None,
        target_id: str | None = None,
    ) -> list[StoredRelationship]:
        pattern = f"[r:{rel_type.value}]" if rel_type else "[r]"
        records = self._run(
            f"MATCH (a)-{pattern}->(b) "
            "WHERE ($source IS NULL OR elementId(a) = $source) "
            "AND ($target IS NULL OR elementId(b) = $target) "
            "RETURN elementId(r) AS id, type(r) AS type, elementId(a) AS source, "
            "elementId(b) AS target, properties(r) AS props ORDER BY id",
            {"source": source_id, "target": target_id},
            operation="find_relationships",
        )
        return [
            StoredRelationship(
                id=record["id"],
                type=RelationshipType(record["type"]),
                source_id=record["source"],
                target_id=record["target"],
                properties=record["props"],
            )
            for record in records
        ]

    def find_neighbors(
        self,
        node_id: str,
        rel_type: RelationshipType | None = None,
        direction: Direction = Direction.BOTH,
    ) -> list[StoredNode]:
        edge = f"[:{rel_type.value}]" if rel_type else "[]"
        if direction == Direction.OUTGOING:
            pattern = f"(m)-{edge}->(n)"
        elif direction == Direction.INCOMING:
            pattern = f"(m)<-{edge}-(n)"
        else:
            pattern = f"(m)-{edge}-(n)"
        records = self._run(
            f"MATCH {pattern} WHERE elementId(m) = $id "
            f"RETURN DISTINCT {_NODE_RETURN} ORDER BY id",
            {"id": node_id},
            operation="find_neighbors",
        )
        return [self._stored_node(record) for record in records]

    def query(self, query: str, params: dict[str, Any] | None = None) -> GraphResult:
        return GraphResult(records=self._run(query, params, operation="query"))
