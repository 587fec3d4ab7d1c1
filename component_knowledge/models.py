"""Input data models: one dialect's view of one component.

ComponentDefinition records are produced by an external extractor and
are immutable once created. JSON keys use camelCase to match the
extractor's interchange format.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .dialects import Dialect, parse_dialect
from .errors import InvalidDefinitionError
from .knowledge_logging import LogCategory, get_category_logger


@dataclass(frozen=True)
class SourceReference:
    """Location of a definition in the dialect's source tree."""

    file_path: str
    start_line: int = 0
    end_line: int = 0
    url: str | None = None
    commit: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "filePath": self.file_path,
            "startLine": self.start_line,
            "endLine": self.end_line,
        }
        if self.url:
            result["url"] = self.url
        if self.commit:
            result["commit"] = self.commit
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SourceReference":
        """Create from dictionary."""
        return cls(
            file_path=data["filePath"],
            start_line=data.get("startLine", 0),
            end_line=data.get("endLine", 0),
            url=data.get("url"),
            commit=data.get("commit"),
        )

    def __str__(self) -> str:
        return f"{self.file_path}:{self.start_line}"


def _text(data: dict[str, Any], key: str, required: bool = False) -> str | None:
    """Read an optional string field.

    Raises:
        KeyError: If a required field is absent.
        TypeError: If the value is not a string, or a required value is null.
    """
    value = data[key] if required else data.get(key)
    if value is None and not required:
        return None
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _ref_from(data: dict[str, Any]) -> SourceReference | None:
    ref = data.get("sourceRef")
    return SourceReference.from_dict(ref) if ref else None


@dataclass(frozen=True)
class PropDefinition:
    """A property as declared in one dialect."""

    name: str
    type: str = "any"
    required: bool = False
    default: Any = None
    docs: str | None = None
    deprecated: bool = False
    source_ref: SourceReference | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "deprecated": self.deprecated,
        }
        if self.default is not None:
            result["default"] = self.default
        if self.docs:
            result["docs"] = self.docs
        if self.source_ref:
            result["sourceRef"] = self.source_ref.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PropDefinition":
        """Create from dictionary."""
        return cls(
            name=_text(data, "name", required=True),
            type=_text(data, "type") or "any",
            required=bool(data.get("required", False)),
            default=data.get("default"),
            docs=_text(data, "docs"),
            deprecated=bool(data.get("deprecated", False)),
            source_ref=_ref_from(data),
        )


@dataclass(frozen=True)
class EventDefinition:
    """An event as declared in one dialect."""

    name: str
    type: str = "Event"
    payload: str | None = None
    docs: str | None = None
    deprecated: bool = False
    source_ref: SourceReference | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "deprecated": self.deprecated,
        }
        if self.payload:
            result["payload"] = self.payload
        if self.docs:
            result["docs"] = self.docs
        if self.source_ref:
            result["sourceRef"] = self.source_ref.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EventDefinition":
        """Create from dictionary."""
        return cls(
            name=_text(data, "name", required=True),
            type=_text(data, "type") or "Event",
            payload=_text(data, "payload"),
            docs=_text(data, "docs"),
            deprecated=bool(data.get("deprecated", False)),
            source_ref=_ref_from(data),
        )


@dataclass(frozen=True)
class SlotDefinition:
    """A slot (children/content region) as declared in one dialect."""

    name: str
    type: str | None = None
    docs: str | None = None
    deprecated: bool = False
    source_ref: SourceReference | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"name": self.name, "deprecated": self.deprecated}
        if self.type:
            result["type"] = self.type
        if self.docs:
            result["docs"] = self.docs
        if self.source_ref:
            result["sourceRef"] = self.source_ref.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SlotDefinition":
        """Create from dictionary."""
        return cls(
            name=_text(data, "name", required=True),
            type=_text(data, "type"),
            docs=_text(data, "docs"),
            deprecated=bool(data.get("deprecated", False)),
            source_ref=_ref_from(data),
        )


@dataclass(frozen=True)
class ComponentDefinition:
    """One dialect's view of one component."""

    name: str
    dialect: Dialect
    category: str | None = None
    docs: str | None = None
    props: tuple[PropDefinition, ...] = field(default_factory=tuple)
    events: tuple[EventDefinition, ...] = field(default_factory=tuple)
    slots: tuple[SlotDefinition, ...] = field(default_factory=tuple)
    source_refs: tuple[SourceReference, ...] = field(default_factory=tuple)
    deprecated: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "name": self.name,
            "dialect": self.dialect.value,
            "props": [p.to_dict() for p in self.props],
            "events": [e.to_dict() for e in self.events],
            "slots": [s.to_dict() for s in self.slots],
            "sourceRefs": [r.to_dict() for r in self.source_refs],
            "deprecated": self.deprecated,
        }
        if self.category:
            result["category"] = self.category
        if self.docs:
            result["docs"] = self.docs
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ComponentDefinition":
        """Create from dictionary.

        Accepts ``framework`` as an alias of ``dialect``.

        Raises:
            InvalidDefinitionError: If the name is missing, the dialect unknown,
                or a text field is not a string.
        """
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise InvalidDefinitionError("Component definition has no name")

        raw_dialect = data.get("dialect", data.get("framework"))
        try:
            dialect = parse_dialect(raw_dialect)
        except ValueError as e:
            raise InvalidDefinitionError(str(e), component=name) from e

        try:
            return cls(
                name=name,
                dialect=dialect,
                category=_text(data, "category"),
                docs=_text(data, "docs"),
                props=tuple(PropDefinition.from_dict(p) for p in data.get("props", [])),
                events=tuple(
                    EventDefinition.from_dict(e) for e in data.get("events", [])
                ),
                slots=tuple(SlotDefinition.from_dict(s) for s in data.get("slots", [])),
                source_refs=tuple(
                    SourceReference.from_dict(r) for r in data.get("sourceRefs", [])
                ),
                deprecated=bool(data.get("deprecated", False)),
            )
        except (KeyError, TypeError) as e:
            raise InvalidDefinitionError(
                f"Malformed attribute in definition {name}: {e}", component=name
            ) from e


@dataclass
class DefinitionLoadResult:
    """Definitions read from a file, plus the entries that were rejected."""

    definitions: list[ComponentDefinition] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)


def read_definitions(path: Path) -> DefinitionLoadResult:
    """Load component definitions, skipping entries that cannot be parsed.

    Each rejected entry is logged as a warning and its reason recorded, so
    one bad entry does not discard the rest of the file.

    Raises:
        InvalidDefinitionError: If the file is not valid JSON or not a JSON array.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidDefinitionError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise InvalidDefinitionError(f"{path} must contain a JSON array of definitions")

    logger = get_category_logger(LogCategory.ALIGNER)
    result = DefinitionLoadResult()
    for index, item in enumerate(data):
        try:
            if not isinstance(item, dict):
                raise InvalidDefinitionError(
                    f"expected an object, got {type(item).__name__}"
                )
            result.definitions.append(ComponentDefinition.from_dict(item))
        except InvalidDefinitionError as e:
            reason = f"Entry {index} of {path}: {e.message}"
            result.rejected.append(reason)
            logger.warning(f"Skipping definition: {reason}")

    if result.rejected:
        logger.warning(
            f"Rejected {result.rejected_count} of {len(data)} definitions in {path}"
        )
    return result


def load_definitions(path: Path) -> list[ComponentDefinition]:
    """Load component definitions from a JSON array file.

    Malformed entries are skipped; use read_definitions() to see which.

    Raises:
        InvalidDefinitionError: If the file is not valid JSON or not a JSON array.
    """
    return read_definitions(path).definitions
