"""Aligned (cross-dialect) component models."""

from dataclasses import dataclass, field
from typing import Any

from ..dialects import Dialect
from ..models import ComponentDefinition


@dataclass(frozen=True)
class FrameworkMapping:
    """How one dialect spells a unified attribute."""

    name: str
    type: str | None = None
    transform: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"name": self.name}
        if self.type:
            result["type"] = self.type
        if self.transform:
            result["transform"] = self.transform
        return result


def _mappings_dict(mappings: dict[Dialect, FrameworkMapping]) -> dict[str, Any]:
    return {dialect.value: m.to_dict() for dialect, m in mappings.items()}


@dataclass
class UnifiedProp:
    """A property merged across dialects."""

    name: str
    type: str
    required: bool = False
    default: Any = None
    description: str | None = None
    deprecated: bool = False
    framework_mappings: dict[Dialect, FrameworkMapping] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "default": self.default,
            "description": self.description,
            "deprecated": self.deprecated,
            "frameworkMappings": _mappings_dict(self.framework_mappings),
        }


@dataclass
class UnifiedEvent:
    """An event merged across dialects, including handler props."""

    name: str
    type: str = "Event"
    payload: str | None = None
    required: bool = False
    description: str | None = None
    deprecated: bool = False
    framework_mappings: dict[Dialect, FrameworkMapping] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "type": self.type,
            "payload": self.payload,
            "required": self.required,
            "description": self.description,
            "deprecated": self.deprecated,
            "frameworkMappings": _mappings_dict(self.framework_mappings),
        }


@dataclass
class UnifiedSlot:
    """A slot merged across dialects."""

    name: str
    type: str | None = None
    description: str | None = None
    deprecated: bool = False
    framework_mappings: dict[Dialect, FrameworkMapping] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "deprecated": self.deprecated,
            "frameworkMappings": _mappings_dict(self.framework_mappings),
        }


@dataclass(frozen=True)
class FrameworkImplementation:
    """One dialect implementation of an aligned component."""

    dialect: Dialect
    component: ComponentDefinition

    @property
    def name(self) -> str:
        return self.component.name


@dataclass
class AlignedComponent:
    """One logical component unified across its dialect implementations.

    Attributes:
        name: Canonical PascalCase name.
        category: Declared or inferred category.
        description: First non-empty docstring among the definitions.
        frameworks: One entry per dialect, in input order. Never empty.
        unified_props: Props merged by semantic name.
        unified_events: Events (and event-handler props) merged by semantic name.
        unified_slots: Slots merged by semantic name.
        confidence: Alignment quality score in [0, 1].
    """

    name: str
    category: str
    description: str
    frameworks: list[FrameworkImplementation]
    unified_props: list[UnifiedProp] = field(default_factory=list)
    unified_events: list[UnifiedEvent] = field(default_factory=list)
    unified_slots: list[UnifiedSlot] = field(default_factory=list)
    confidence: float = 0.0
    deprecated: bool = False

    @property
    def dialects(self) -> list[Dialect]:
        return [f.dialect for f in self.frameworks]

    def implementation(self, dialect: Dialect) -> FrameworkImplementation | None:
        """Return the implementation for a dialect, if present."""
        for framework in self.frameworks:
            if framework.dialect == dialect:
                return framework
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "frameworks": [
                {"dialect": f.dialect.value, "name": f.name} for f in self.frameworks
            ],
            "unifiedProps": [p.to_dict() for p in self.unified_props],
            "unifiedEvents": [e.to_dict() for e in self.unified_events],
            "unifiedSlots": [s.to_dict() for s in self.unified_slots],
            "confidence": round(self.confidence, 4),
            "deprecated": self.deprecated,
        }


@dataclass(frozen=True)
class MappingRule:
    """A cross-component mapping of one semantic attribute name."""

    unified_name: str
    mappings: dict[Dialect, str]
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "unifiedName": self.unified_name,
            "mappings": {d.value: name for d, name in self.mappings.items()},
            "confidence": self.confidence,
        }


@dataclass
class AlignmentValidationResult:
    """Outcome of validate_alignment(); success is False only on errors."""

    success: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    coverage: dict[Dialect, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "errors": self.errors,
            "warnings": self.warnings,
            "coverage": {d.value: round(v, 4) for d, v in self.coverage.items()},
        }


@dataclass
class AlignmentStats:
    """Counters for the most recent align() call."""

    groups: int = 0
    aligned: int = 0
    skipped: int = 0
    duplicates: int = 0
    skipped_definitions: int = 0

    @property
    def dropped_definitions(self) -> int:
        """Input definitions that did not reach an aligned component."""
        return self.skipped_definitions + self.duplicates

    def to_dict(self) -> dict[str, int]:
        return {
            "groups": self.groups,
            "aligned": self.aligned,
            "skipped": self.skipped,
            "duplicates": self.duplicates,
            "skippedDefinitions": self.skipped_definitions,
        }
