"""Manifest data models.

A ComponentManifest is a versioned, read-only snapshot of a whole
component library. All records are frozen so a manifest compares equal
to its own JSON round-trip.
"""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from ..dialects import Dialect, parse_dialect
from ..errors import ManifestFormatError
from ..models import SourceReference

# Bumped on any breaking change of the serialized shape
MANIFEST_SCHEMA_VERSION = "1.0"


class RuleType(Enum):
    """Composability constraint kinds."""

    ALLOWS_CHILD = "allows_child"
    FORBIDS_CHILD = "forbids_child"
    REQUIRES_PARENT = "requires_parent"
    CONFLICTS_WITH = "conflicts_with"


class Severity(Enum):
    """Anti-pattern severity."""

    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True)
class ImportSpec:
    """How to import a component in one dialect."""

    module: str
    named: tuple[str, ...] = ()
    default: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"module": self.module, "named": list(self.named), "default": self.default}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ImportSpec":
        return cls(
            module=data["module"],
            named=tuple(data.get("named", [])),
            default=data.get("default"),
        )


@dataclass(frozen=True)
class AttributeBinding:
    """A unified attribute as spelled by one dialect."""

    name: str
    framework_name: str | None = None
    type: str | None = None
    transform: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "frameworkName": self.framework_name,
            "type": self.type,
            "transform": self.transform,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AttributeBinding":
        return cls(
            name=data["name"],
            framework_name=data.get("frameworkName"),
            type=data.get("type"),
            transform=data.get("transform"),
        )


@dataclass(frozen=True)
class CodeExample:
    """An illustrative usage snippet."""

    title: str
    description: str
    code: str
    dialect: Dialect
    category: str = "basic"

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "code": self.code,
            "dialect": self.dialect.value,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CodeExample":
        return cls(
            title=data["title"],
            description=data["description"],
            code=data["code"],
            dialect=parse_dialect(data["dialect"]),
            category=data.get("category", "basic"),
        )


@dataclass(frozen=True)
class FrameworkBinding:
    """Everything a consumer needs to use a component in one dialect."""

    dialect: Dialect
    import_spec: ImportSpec
    component_name: str
    props: tuple[AttributeBinding, ...] = ()
    events: tuple[AttributeBinding, ...] = ()
    slots: tuple[AttributeBinding, ...] = ()
    examples: tuple[CodeExample, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "dialect": self.dialect.value,
            "import": self.import_spec.to_dict(),
            "componentName": self.component_name,
            "props": [p.to_dict() for p in self.props],
            "events": [e.to_dict() for e in self.events],
            "slots": [s.to_dict() for s in self.slots],
            "examples": [e.to_dict() for e in self.examples],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FrameworkBinding":
        return cls(
            dialect=parse_dialect(data["dialect"]),
            import_spec=ImportSpec.from_dict(data["import"]),
            component_name=data["componentName"],
            props=tuple(AttributeBinding.from_dict(p) for p in data.get("props", [])),
            events=tuple(AttributeBinding.from_dict(e) for e in data.get("events", [])),
            slots=tuple(AttributeBinding.from_dict(s) for s in data.get("slots", [])),
            examples=tuple(CodeExample.from_dict(e) for e in data.get("examples", [])),
        )


@dataclass(frozen=True)
class PropSpec:
    name: str
    type: str
    required: bool = False
    default: Any = None
    description: str | None = None
    deprecated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "default": self.default,
            "description": self.description,
            "deprecated": self.deprecated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PropSpec":
        return cls(
            name=data["name"],
            type=data["type"],
            required=data.get("required", False),
            default=data.get("default"),
            description=data.get("description"),
            deprecated=data.get("deprecated", False),
        )


@dataclass(frozen=True)
class EventSpec:
    name: str
    type: str = "Event"
    payload: str | None = None
    required: bool = False
    description: str | None = None
    deprecated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "payload": self.payload,
            "required": self.required,
            "description": self.description,
            "deprecated": self.deprecated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EventSpec":
        return cls(
            name=data["name"],
            type=data.get("type", "Event"),
            payload=data.get("payload"),
            required=data.get("required", False),
            description=data.get("description"),
            deprecated=data.get("deprecated", False),
        )


@dataclass(frozen=True)
class SlotSpec:
    name: str
    type: str | None = None
    description: str | None = None
    deprecated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "deprecated": self.deprecated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SlotSpec":
        return cls(
            name=data["name"],
            type=data.get("type"),
            description=data.get("description"),
            deprecated=data.get("deprecated", False),
        )


@dataclass(frozen=True)
class ComposabilityRule:
    """A nesting constraint between this component and a target component."""

    type: RuleType
    target: str
    condition: str | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "target": self.target,
            "condition": self.condition,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ComposabilityRule":
        return cls(
            type=RuleType(data["type"]),
            target=data["target"],
            condition=data.get("condition"),
            message=data.get("message"),
        )


@dataclass(frozen=True)
class VersionInfo:
    since: str
    deprecated: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"since": self.since, "deprecated": self.deprecated}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VersionInfo":
        return cls(since=data["since"], deprecated=data.get("deprecated"))


@dataclass(frozen=True)
class AntiPattern:
    """A discouraged usage with a suggested correction."""

    id: str
    name: str
    description: str
    bad_example: str
    good_example: str
    reason: str
    severity: Severity
    components: tuple[str, ...] = ()
    dialect: Dialect | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "badExample": self.bad_example,
            "goodExample": self.good_example,
            "reason": self.reason,
            "severity": self.severity.value,
            "components": list(self.components),
            "dialect": self.dialect.value if self.dialect else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AntiPattern":
        dialect = data.get("dialect")
        return cls(
            id=data["id"],
            name=data["name"],
            description=data["description"],
            bad_example=data["badExample"],
            good_example=data.get("goodExample", ""),
            reason=data.get("reason", ""),
            severity=Severity(data["severity"]),
            components=tuple(data.get("components", [])),
            dialect=parse_dialect(dialect) if dialect else None,
        )


@dataclass(frozen=True)
class UsagePattern:
    """A named, recommended combination of components."""

    id: str
    name: str
    description: str
    components: tuple[str, ...]
    template: str
    examples: tuple[CodeExample, ...] = ()
    best_practices: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "components": list(self.components),
            "template": self.template,
            "examples": [e.to_dict() for e in self.examples],
            "bestPractices": list(self.best_practices),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UsagePattern":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data["description"],
            components=tuple(data["components"]),
            template=data["template"],
            examples=tuple(CodeExample.from_dict(e) for e in data.get("examples", [])),
            best_practices=tuple(data.get("bestPractices", [])),
        )


@dataclass(frozen=True)
class ManifestMetadata:
    generated_at: str
    confidence: float
    source_revision: str | None = None
    schema_version: str = MANIFEST_SCHEMA_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "sourceRevision": self.source_revision,
            "confidence": self.confidence,
            "schemaVersion": self.schema_version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ManifestMetadata":
        return cls(
            generated_at=data["generatedAt"],
            confidence=data["confidence"],
            source_revision=data.get("sourceRevision"),
            schema_version=data.get("schemaVersion", MANIFEST_SCHEMA_VERSION),
        )


@dataclass(frozen=True)
class ComponentSpec:
    """Serialization-ready form of one aligned component."""

    name: str
    category: str
    description: str
    frameworks: tuple[FrameworkBinding, ...]
    version: VersionInfo
    props: tuple[PropSpec, ...] = ()
    events: tuple[EventSpec, ...] = ()
    slots: tuple[SlotSpec, ...] = ()
    composability: tuple[ComposabilityRule, ...] = ()
    aliases: tuple[str, ...] = ()
    source_refs: tuple[SourceReference, ...] = ()
    confidence: float = 0.0

    @property
    def dialects(self) -> list[Dialect]:
        return [f.dialect for f in self.frameworks]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "aliases": list(self.aliases),
            "category": self.category,
            "description": self.description,
            "frameworks": [f.to_dict() for f in self.frameworks],
            "props": [p.to_dict() for p in self.props],
            "events": [e.to_dict() for e in self.events],
            "slots": [s.to_dict() for s in self.slots],
            "composability": [r.to_dict() for r in self.composability],
            "version": self.version.to_dict(),
            "sourceRefs": [r.to_dict() for r in self.source_refs],
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ComponentSpec":
        return cls(
            name=data["name"],
            category=data["category"],
            description=data["description"],
            frameworks=tuple(FrameworkBinding.from_dict(f) for f in data["frameworks"]),
            version=VersionInfo.from_dict(data["version"]),
            props=tuple(PropSpec.from_dict(p) for p in data.get("props", [])),
            events=tuple(EventSpec.from_dict(e) for e in data.get("events", [])),
            slots=tuple(SlotSpec.from_dict(s) for s in data.get("slots", [])),
            composability=tuple(
                ComposabilityRule.from_dict(r) for r in data.get("composability", [])
            ),
            aliases=tuple(data.get("aliases", [])),
            source_refs=tuple(
                SourceReference.from_dict(r) for r in data.get("sourceRefs", [])
            ),
            confidence=data.get("confidence", 0.0),
        )


@dataclass(frozen=True)
class ComponentManifest:
    """Top-level manifest artifact for one library version."""

    library: str
    version: str
    components: tuple[ComponentSpec, ...]
    metadata: ManifestMetadata
    patterns: tuple[UsagePattern, ...] = ()
    anti_patterns: tuple[AntiPattern, ...] = ()

    def component(self, name: str) -> ComponentSpec | None:
        """Look up a component spec by canonical name."""
        return next((c for c in self.components if c.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "library": self.library,
            "version": self.version,
            "components": [c.to_dict() for c in self.components],
            "patterns": [p.to_dict() for p in self.patterns],
            "antiPatterns": [a.to_dict() for a in self.anti_patterns],
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ComponentManifest":
        """Create from dictionary.

        Raises:
            ManifestFormatError: If a required field is missing or malformed.
        """
        try:
            return cls(
                library=data["library"],
                version=data["version"],
                components=tuple(ComponentSpec.from_dict(c) for c in data["components"]),
                metadata=ManifestMetadata.from_dict(data["metadata"]),
                patterns=tuple(UsagePattern.from_dict(p) for p in data.get("patterns", [])),
                anti_patterns=tuple(
                    AntiPattern.from_dict(a) for a in data.get("antiPatterns", [])
                ),
            )
        except KeyError as e:
            raise ManifestFormatError(f"Manifest is missing field {e}") from e
        except (TypeError, ValueError, AttributeError) as e:
            raise ManifestFormatError(f"Manifest is malformed: {e}") from e

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "ComponentManifest":
        """Parse a manifest from its JSON text.

        Raises:
            ManifestFormatError: If the text is not valid manifest JSON.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ManifestFormatError(f"Manifest is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ManifestFormatError("Manifest JSON must be an object")
        return cls.from_dict(data)

    def save(self, path: Path) -> None:
        """Write the manifest as JSON, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> "ComponentManifest":
        """Read a manifest written by save()."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ManifestFormatError(f"Cannot read manifest: {e}", path=str(path)) from e
        try:
            return cls.from_json(text)
        except ManifestFormatError as e:
            raise ManifestFormatError(e.message, path=str(path)) from e
