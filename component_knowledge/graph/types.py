"""Graph vocabulary and typed node variants.

Node and relationship types form closed vocabularies. Each node label has
its own frozen dataclass with a typed property set, validated at
construction and converted to a flat property map for the store.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar


class NodeLabel(Enum):
    """Closed vocabulary of node labels."""

    LIBRARY = "Library"
    COMPONENT = "Component"
    PROPERTY = "Property"
    EVENT = "Event"
    SLOT = "Slot"
    PATTERN = "Pattern"
    ANTI_PATTERN = "AntiPattern"
    FRAMEWORK = "Framework"


class RelationshipType(Enum):
    """Closed vocabulary of relationship types."""

    CONTAINS = "CONTAINS"
    HAS_PROPERTY = "HAS_PROPERTY"
    EMITS_EVENT = "EMITS_EVENT"
    HAS_SLOT = "HAS_SLOT"
    IMPLEMENTED_IN = "IMPLEMENTED_IN"
    USES_COMPONENT = "USES_COMPONENT"
    SIMILAR_TO = "SIMILAR_TO"
    DEPENDS_ON = "DEPENDS_ON"
    SAME_TYPE = "SAME_TYPE"
    RELATED_EVENT = "RELATED_EVENT"
    ALLOWS_CHILD = "ALLOWS_CHILD"
    FORBIDS_CHILD = "FORBIDS_CHILD"
    REQUIRES_PARENT = "REQUIRES_PARENT"
    CONFLICTS_WITH = "CONFLICTS_WITH"


class Direction(Enum):
    """Edge direction relative to the node a neighbor query starts from."""

    OUTGOING = "outgoing"
    INCOMING = "incoming"
    BOTH = "both"


_NUMBER = (int, float)
_OPTIONAL_STR = (str, type(None))


@dataclass(frozen=True)
class GraphNode:
    """Base class of typed node variants.

    Subclasses set ``label`` and ``FIELD_TYPES`` (accepted runtime types per
    field). Tuple fields are stored as lists.
    """

    label: ClassVar[NodeLabel]
    FIELD_TYPES: ClassVar[dict[str, type | tuple[type, ...]]] = {}

    def __post_init__(self) -> None:
        for name, expected in self.FIELD_TYPES.items():
            value = getattr(self, name)
            if isinstance(value, bool) and expected is _NUMBER:
                raise TypeError(f"{type(self).__name__}.{name} must be a number, got bool")
            if not isinstance(value, expected):
                raise TypeError(
                    f"{type(self).__name__}.{name} has type {type(value).__name__}"
                )

    def properties(self) -> dict[str, Any]:
        """Flat property map for the store."""
        return {
            f.name: list(value) if isinstance(value, tuple) else value
            for f in fields(self)
            if (value := getattr(self, f.name)) is not None
        }

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> "GraphNode":
        """Rebuild a typed node from a stored property map, ignoring unknown keys."""
        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in properties:
                continue
            value = properties[f.name]
            values[f.name] = tuple(value) if isinstance(value, list) else value
        return cls(**values)


@dataclass(frozen=True)
class LibraryNode(GraphNode):
    label: ClassVar[NodeLabel] = NodeLabel.LIBRARY
    FIELD_TYPES: ClassVar = {
        "name": str,
        "version": str,
        "generated_at": _OPTIONAL_STR,
        "source_revision": _OPTIONAL_STR,
        "confidence": _NUMBER,
        "component_count": int,
    }

    name: str
    version: str
    generated_at: str | None = None
    source_revision: str | None = None
    confidence: float = 0.0
    component_count: int = 0


@dataclass(frozen=True)
class ComponentNode(GraphNode):
    label: ClassVar[NodeLabel] = NodeLabel.COMPONENT
    FIELD_TYPES: ClassVar = {
        "name": str,
        "category": str,
        "description": str,
        "frameworks": tuple,
        "aliases": tuple,
        "confidence": _NUMBER,
        "library": str,
    }

    name: str
    category: str = "general"
    description: str = ""
    frameworks: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    confidence: float = 0.0
    library: str = ""


@dataclass(frozen=True)
class PropertyNode(GraphNode):
    label: ClassVar[NodeLabel] = NodeLabel.PROPERTY
    FIELD_TYPES: ClassVar = {
        "name": str,
        "type": str,
        "required": bool,
        "description": _OPTIONAL_STR,
        "component": str,
    }

    name: str
    type: str = "any"
    required: bool = False
    description: str | None = None
    component: str = ""


@dataclass(frozen=True)
class EventNode(GraphNode):
    label: ClassVar[NodeLabel] = NodeLabel.EVENT
    FIELD_TYPES: ClassVar = {
        "name": str,
        "type": str,
        "payload": _OPTIONAL_STR,
        "required": bool,
        "description": _OPTIONAL_STR,
        "component": str,
    }

    name: str
    type: str = "Event"
    payload: str | None = None
    required: bool = False
    description: str | None = None
    component: str = ""


@dataclass(frozen=True)
class SlotNode(GraphNode):
    label: ClassVar[NodeLabel] = NodeLabel.SLOT
    FIELD_TYPES: ClassVar = {
        "name": str,
        "type": _OPTIONAL_STR,
        "description": _OPTIONAL_STR,
        "component": str,
    }

    name: str
    type: str | None = None
    description: str | None = None
    component: str = ""


@dataclass(frozen=True)
class PatternNode(GraphNode):
    label: ClassVar[NodeLabel] = NodeLabel.PATTERN
    FIELD_TYPES: ClassVar = {
        "pattern_id": str,
        "name": str,
        "description": str,
        "template": str,
        "best_practices": tuple,
    }

    pattern_id: str
    name: str
    description: str = ""
    template: str = ""
    best_practices: tuple[str, ...] = ()


@dataclass(frozen=True)
class AntiPatternNode(GraphNode):
    label: ClassVar[NodeLabel] = NodeLabel.ANTI_PATTERN
    FIELD_TYPES: ClassVar = {
        "pattern_id": str,
        "name": str,
        "description": str,
        "bad_example": str,
        "good_example": str,
        "reason": str,
        "severity": str,
    }

    pattern_id: str
    name: str
    description: str = ""
    bad_example: str = ""
    good_example: str = ""
    reason: str = ""
    severity: str = "info"


@dataclass(frozen=True)
class FrameworkNode(GraphNode):
    label: ClassVar[NodeLabel] = NodeLabel.FRAMEWORK
    FIELD_TYPES: ClassVar = {"name": str, "description": str}

    name: str
    description: str = ""


NODE_TYPES: dict[NodeLabel, type[GraphNode]] = {
    cls.label: cls
    for cls in (
        LibraryNode,
        ComponentNode,
        PropertyNode,
        EventNode,
        SlotNode,
        PatternNode,
        AntiPatternNode,
        FrameworkNode,
    )
}


@dataclass(frozen=True)
class GraphRelationship:
    """A relationship to create between two stored nodes."""

    type: RelationshipType
    source_id: str
    target_id: str
    properties: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.type, RelationshipType):
            raise TypeError(f"Unknown relationship type: {self.type!r}")


@dataclass(frozen=True)
class StoredNode:
    """A node as read back from the store."""

    id: str
    label: NodeLabel
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.properties.get("name", "")

    def typed(self) -> GraphNode:
        """Convert to the typed variant for this node's label."""
        return NODE_TYPES[self.label].from_properties(self.properties)


@dataclass(frozen=True)
class StoredRelationship:
    """A relationship as read back from the store."""

    id: str
    type: RelationshipType
    source_id: str
    target_id: str
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class GraphResult:
    """Records returned by a raw query."""

    records: list[dict[str, Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class GraphValidationResult:
    """Outcome of graph validation; never produced by mutating the graph."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    orphaned_nodes: list[str] = field(default_factory=list)
    missing_relationships: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "orphaned_nodes": self.orphaned_nodes,
            "missing_relationships": self.missing_relationships,
        }
