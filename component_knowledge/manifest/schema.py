"""Pydantic schema for the serialized manifest shape.

Validates the JSON form produced by ComponentManifest.to_dict() (or read
from disk) independently of the dataclass models, so hand-edited or
foreign manifests get field-level error messages.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..dialects import Dialect


class _Schema(BaseModel):
    model_config = ConfigDict(extra="allow")


class ImportSchema(_Schema):
    module: str = Field(min_length=1)
    named: list[str] = Field(default_factory=list)
    default: str | None = None


class AttributeBindingSchema(_Schema):
    name: str = Field(min_length=1)
    frameworkName: str | None = None
    type: str | None = None
    transform: str | None = None


class CodeExampleSchema(_Schema):
    title: str
    description: str
    code: str
    dialect: Dialect
    category: str = "basic"


class FrameworkBindingSchema(_Schema):
    dialect: Dialect
    import_: ImportSchema = Field(alias="import")
    componentName: str = Field(min_length=1)
    props: list[AttributeBindingSchema] = Field(default_factory=list)
    events: list[AttributeBindingSchema] = Field(default_factory=list)
    slots: list[AttributeBindingSchema] = Field(default_factory=list)
    examples: list[CodeExampleSchema] = Field(default_factory=list)


class PropSchema(_Schema):
    name: str = Field(min_length=1)
    type: str
    required: bool = False
    default: Any = None
    description: str | None = None
    deprecated: bool = False


class EventSchema(_Schema):
    name: str = Field(min_length=1)
    type: str = "Event"
    payload: str | None = None
    required: bool = False
    description: str | None = None
    deprecated: bool = False


class SlotSchema(_Schema):
    name: str = Field(min_length=1)
    type: str | None = None
    description: str | None = None
    deprecated: bool = False


class ComposabilityRuleSchema(_Schema):
    type: Literal["allows_child", "forbids_child", "requires_parent", "conflicts_with"]
    target: str = Field(min_length=1)
    condition: str | None = None
    message: str | None = None


class VersionSchema(_Schema):
    since: str
    deprecated: str | None = None


class SourceRefSchema(_Schema):
    filePath: str
    startLine: int = 0
    endLine: int = 0


class ComponentSchema(_Schema):
    name: str
    aliases: list[str] = Field(default_factory=list)
    category: str
    description: str
    frameworks: list[FrameworkBindingSchema]
    props: list[PropSchema] = Field(default_factory=list)
    events: list[EventSchema] = Field(default_factory=list)
    slots: list[SlotSchema] = Field(default_factory=list)
    composability: list[ComposabilityRuleSchema] = Field(default_factory=list)
    version: VersionSchema
    sourceRefs: list[SourceRefSchema] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class AntiPatternSchema(_Schema):
    id: str = Field(min_length=1)
    name: str
    description: str
    badExample: str
    goodExample: str = ""
    reason: str = ""
    severity: Literal["info", "warning"]
    components: list[str] = Field(default_factory=list)
    dialect: Dialect | None = None


class UsagePatternSchema(_Schema):
    id: str = Field(min_length=1)
    name: str
    description: str
    components: list[str]
    template: str
    examples: list[CodeExampleSchema] = Field(default_factory=list)
    bestPractices: list[str] = Field(default_factory=list)


class MetadataSchema(_Schema):
    generatedAt: str = Field(min_length=1)
    sourceRevision: str | None = None
    confidence: float = Field(ge=0.0, le=1.0)
    schemaVersion: str


class ManifestSchema(_Schema):
    library: str = Field(min_length=1)
    version: str = Field(min_length=1)
    components: list[ComponentSchema]
    patterns: list[UsagePatternSchema] = Field(default_factory=list)
    antiPatterns: list[AntiPatternSchema] = Field(default_factory=list)
    metadata: MetadataSchema


def schema_errors(data: dict[str, Any]) -> list[str]:
    """Validate a manifest dict against the schema.

    Args:
        data: Manifest in its JSON (camelCase) form.

    Returns:
        One message per violation, prefixed with the field path. Empty if valid.
    """
    try:
        ManifestSchema.model_validate(data)
    except ValidationError as e:
        return [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        ]
    return []
