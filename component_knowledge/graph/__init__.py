"""Knowledge graph types, stores, construction and validation."""

from .builder import BuildReport, KnowledgeGraphBuilder
from .inference import (
    InferenceReport,
    RelationshipInferrer,
    are_related_events,
    component_similarity,
    is_component_type,
)
from .memory_store import InMemoryGraphStore
from .neo4j_store import Neo4jGraphStore
from .store import GraphStore
from .types import (
    AntiPatternNode,
    ComponentNode,
    Direction,
    EventNode,
    FrameworkNode,
    GraphNode,
    GraphRelationship,
    GraphResult,
    GraphValidationResult,
    LibraryNode,
    NodeLabel,
    PatternNode,
    PropertyNode,
    RelationshipType,
    SlotNode,
    StoredNode,
    StoredRelationship,
)
from .validator import GraphValidator

__all__ = [
    "AntiPatternNode",
    "BuildReport",
    "ComponentNode",
    "Direction",
    "EventNode",
    "FrameworkNode",
    "GraphNode",
    "GraphRelationship",
    "GraphResult",
    "GraphStore",
    "GraphValidationResult",
    "GraphValidator",
    "InMemoryGraphStore",
    "InferenceReport",
    "KnowledgeGraphBuilder",
    "LibraryNode",
    "Neo4jGraphStore",
    "NodeLabel",
    "PatternNode",
    "PropertyNode",
    "RelationshipInferrer",
    "RelationshipType",
    "SlotNode",
    "StoredNode",
    "StoredRelationship",
    "are_related_events",
    "component_similarity",
    "is_component_type",
]
