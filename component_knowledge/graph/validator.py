"""Structural validation of a built knowledge graph."""

from ..knowledge_logging import LogCategory, get_category_logger
from .store import GraphStore
from .types import Direction, GraphValidationResult, NodeLabel, RelationshipType

# Labels whose nodes must carry a non-empty name
NAMED_LABELS = (
    NodeLabel.LIBRARY,
    NodeLabel.COMPONENT,
    NodeLabel.PROPERTY,
    NodeLabel.EVENT,
    NodeLabel.SLOT,
    NodeLabel.FRAMEWORK,
)


class GraphValidator:
    """Read-only integrity checks over a graph store.

    Orphaned nodes are warnings. Components without a HAS_PROPERTY edge
    and nodes with an empty name are errors.
    """

    def __init__(self, store: GraphStore):
        self.store = store
        self.logger = get_category_logger(LogCategory.GRAPH)

    def validate(self) -> GraphValidationResult:
        """Validate the graph without mutating it.

        Returns:
            GraphValidationResult with orphan ids and missing-relationship
            descriptions alongside the error and warning messages.
        """
        result = GraphValidationResult(valid=True)

        result.orphaned_nodes = self.find_orphaned_nodes()
        if result.orphaned_nodes:
            result.warnings.append(f"Found {len(result.orphaned_nodes)} orphaned nodes")

        for name in self.find_components_without_properties():
            message = f"Component {name} has no properties"
            result.missing_relationships.append(message)
            result.errors.append(message)

        result.errors.extend(self.check_data_integrity())
        result.valid = not result.errors

        self.logger.info(
            f"Graph validation completed: {'VALID' if result.valid else 'INVALID'} "
            f"({len(result.errors)} errors, {len(result.warnings)} warnings)",
            extra={"stage": "validate_graph"},
        )
        return result

    def find_orphaned_nodes(self) -> list[str]:
        """Ids of nodes with no incident edges in either direction."""
        return [
            node.id
            for node in self.store.all_nodes()
            if not self.store.find_neighbors(node.id, direction=Direction.BOTH)
        ]

    def find_components_without_properties(self) -> list[str]:
        """Names of components with no outgoing HAS_PROPERTY edge."""
        return [
            component.name
            for component in self.store.find_nodes(NodeLabel.COMPONENT)
            if not self.store.find_neighbors(
                component.id, RelationshipType.HAS_PROPERTY, Direction.OUTGOING
            )
        ]

    def check_data_integrity(self) -> list[str]:
        """Required-field checks on stored node properties."""
        errors: list[str] = []
        for label in NAMED_LABELS:
            for node in self.store.find_nodes(label):
                if not str(node.properties.get("name", "")).strip():
                    errors.append(f"{label.value} node {node.id} has an empty name")
        return errors
