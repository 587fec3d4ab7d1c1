"""Cross-dialect UI component alignment, manifests and knowledge graphs."""

__version__ = "0.1.0"

from .alignment import AlignedComponent, CrossDialectAligner
from .config import KnowledgeConfig, load_config
from .dialects import Dialect
from .errors import KnowledgeError
from .graph import (
    GraphStore,
    InMemoryGraphStore,
    KnowledgeGraphBuilder,
    Neo4jGraphStore,
)
from .manifest import ComponentManifest, ManifestGenerator, validate_manifest
from .models import ComponentDefinition, load_definitions, read_definitions
from .pipeline import KnowledgePipeline, PipelineResult

__all__ = [
    "AlignedComponent",
    "ComponentDefinition",
    "ComponentManifest",
    "CrossDialectAligner",
    "Dialect",
    "GraphStore",
    "InMemoryGraphStore",
    "KnowledgeConfig",
    "KnowledgeError",
    "KnowledgeGraphBuilder",
    "KnowledgePipeline",
    "ManifestGenerator",
    "Neo4jGraphStore",
    "PipelineResult",
    "load_config",
    "load_definitions",
    "read_definitions",
    "validate_manifest",
]
