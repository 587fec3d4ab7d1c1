"""Manifest generation, serialization and validation."""

from .examples import ExampleGenerator
from .generator import ManifestGenerator, ManifestValidationResult, validate_manifest
from .models import (
    MANIFEST_SCHEMA_VERSION,
    AntiPattern,
    AttributeBinding,
    CodeExample,
    ComponentManifest,
    ComponentSpec,
    ComposabilityRule,
    EventSpec,
    FrameworkBinding,
    ImportSpec,
    ManifestMetadata,
    PropSpec,
    RuleType,
    Severity,
    SlotSpec,
    UsagePattern,
    VersionInfo,
)
from .rules import composability_rules, detect_anti_patterns, extract_usage_patterns
from .schema import schema_errors

__all__ = [
    "MANIFEST_SCHEMA_VERSION",
    "AntiPattern",
    "AttributeBinding",
    "CodeExample",
    "ComponentManifest",
    "ComponentSpec",
    "ComposabilityRule",
    "EventSpec",
    "ExampleGenerator",
    "FrameworkBinding",
    "ImportSpec",
    "ManifestGenerator",
    "ManifestMetadata",
    "ManifestValidationResult",
    "PropSpec",
    "RuleType",
    "Severity",
    "SlotSpec",
    "UsagePattern",
    "VersionInfo",
    "composability_rules",
    "detect_anti_patterns",
    "extract_usage_patterns",
    "schema_errors",
    "validate_manifest",
]
