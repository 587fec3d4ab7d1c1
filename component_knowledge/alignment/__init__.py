"""Cross-dialect alignment of component definitions."""

from .aligner import CrossDialectAligner, compute_confidence
from .models import (
    AlignedComponent,
    AlignmentStats,
    AlignmentValidationResult,
    FrameworkImplementation,
    FrameworkMapping,
    MappingRule,
    UnifiedEvent,
    UnifiedProp,
    UnifiedSlot,
)
from .normalizer import NameNormalizer, to_camel_case, to_pascal_case, unify_types

__all__ = [
    "AlignedComponent",
    "AlignmentStats",
    "AlignmentValidationResult",
    "CrossDialectAligner",
    "FrameworkImplementation",
    "FrameworkMapping",
    "MappingRule",
    "NameNormalizer",
    "UnifiedEvent",
    "UnifiedProp",
    "UnifiedSlot",
    "compute_confidence",
    "to_camel_case",
    "to_pascal_case",
    "unify_types",
]
