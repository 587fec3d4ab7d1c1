"""Manifest generation and validation.

Turns aligned components into a versioned ComponentManifest and checks
a manifest for schema shape and internal cross-references.
"""

import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from ..alignment.models import AlignedComponent, FrameworkImplementation
from ..config.models import KnowledgeConfig
from ..dialects import Dialect, get_strategy
from ..knowledge_logging import LogCategory, get_category_logger
from ..models import ComponentDefinition
from ..timing import timed
from .examples import ExampleGenerator
from .models import (
    AttributeBinding,
    CodeExample,
    ComponentManifest,
    ComponentSpec,
    EventSpec,
    FrameworkBinding,
    ImportSpec,
    ManifestMetadata,
    PropSpec,
    SlotSpec,
    VersionInfo,
)
from .rules import composability_rules, detect_anti_patterns, extract_usage_patterns
from .schema import schema_errors


@dataclass
class ManifestValidationResult:
    """Outcome of validate_manifest(); errors block promotion to the graph."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": self.errors, "warnings": self.warnings}


class ManifestGenerator:
    """Builds ComponentManifests from aligned components."""

    def __init__(
        self,
        config: KnowledgeConfig | None = None,
        example_generator: ExampleGenerator | None = None,
    ):
        self.config = config or KnowledgeConfig()
        self.examples = example_generator or ExampleGenerator()
        self.logger = get_category_logger(LogCategory.MANIFEST)
        self.example_failures = 0
        self._failures_lock = threading.Lock()

    @timed("generate_manifest")
    def generate(
        self,
        aligned: Sequence[AlignedComponent],
        *,
        definitions: Sequence[ComponentDefinition] | None = None,
        generated_at: str | None = None,
        source_revision: str | None = None,
    ) -> ComponentManifest:
        """Generate a manifest for the configured library.

        Output is deterministic given identical input and generated_at.

        Args:
            aligned: Aligned components, in output order.
            definitions: Raw definitions scanned for anti-patterns. Defaults to
                the definitions the aligned components were built from.
            generated_at: ISO timestamp; the clock is read once when omitted.
            source_revision: Optional source revision stamped into metadata.

        Returns:
            The generated manifest.
        """
        self.example_failures = 0
        timestamp = generated_at or datetime.now(UTC).isoformat()
        if definitions is None:
            scanned = [f.component for c in aligned for f in c.frameworks]
        else:
            scanned = list(definitions)

        if self.config.max_workers > 1 and len(aligned) > 1:
            specs: list[ComponentSpec | None] = [None] * len(aligned)
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                futures = {
                    executor.submit(self.generate_spec, component): index
                    for index, component in enumerate(aligned)
                }
                for future in as_completed(futures):
                    specs[futures[future]] = future.result()
            components = tuple(spec for spec in specs if spec is not None)
        else:
            components = tuple(self.generate_spec(component) for component in aligned)

        confidence = (
            sum(c.confidence for c in aligned) / len(aligned) if aligned else 0.0
        )
        manifest = ComponentManifest(
            library=self.config.library_name,
            version=self.config.library_version,
            components=components,
            patterns=tuple(extract_usage_patterns(aligned)),
            anti_patterns=tuple(detect_anti_patterns(scanned, aligned)),
            metadata=ManifestMetadata(
                generated_at=timestamp,
                source_revision=source_revision,
                confidence=round(confidence, 4),
            ),
        )

        self.logger.info(
            f"Generated manifest {manifest.library}@{manifest.version}: "
            f"{len(manifest.components)} components, {len(manifest.patterns)} patterns, "
            f"{len(manifest.anti_patterns)} anti-patterns",
            extra={"stage": "manifest", "item_count": len(manifest.components)},
        )
        return manifest

    def primary_implementation(self, component: AlignedComponent) -> FrameworkImplementation:
        """The configured default dialect if present, else the first implementation."""
        return component.implementation(self.config.default_dialect) or component.frameworks[0]

    def generate_spec(self, component: AlignedComponent) -> ComponentSpec:
        """Build the ComponentSpec for one aligned component."""
        primary = self.primary_implementation(component)
        version = self.config.library_version

        return ComponentSpec(
            name=component.name,
            aliases=tuple(
                dict.fromkeys(
                    f.name for f in component.frameworks if f.name != component.name
                )
            ),
            category=component.category,
            description=component.description,
            frameworks=tuple(
                self._framework_binding(component, f, primary.dialect)
                for f in component.frameworks
            ),
            props=tuple(
                PropSpec(
                    name=p.name,
                    type=p.type,
                    required=p.required,
                    default=p.default,
                    description=p.description,
                    deprecated=p.deprecated,
                )
                for p in component.unified_props
            ),
            events=tuple(
                EventSpec(
                    name=e.name,
                    type=e.type,
                    payload=e.payload,
                    required=e.required,
                    description=e.description,
                    deprecated=e.deprecated,
                )
                for e in component.unified_events
            ),
            slots=tuple(
                SlotSpec(
                    name=s.name,
                    type=s.type,
                    description=s.description,
                    deprecated=s.deprecated,
                )
                for s in component.unified_slots
            ),
            composability=composability_rules(component.category),
            version=VersionInfo(
                since=version, deprecated=version if component.deprecated else None
            ),
            source_refs=primary.component.source_refs[:1],
            confidence=round(component.confidence, 4),
        )

    def _framework_binding(
        self,
        component: AlignedComponent,
        implementation: FrameworkImplementation,
        primary: Dialect,
    ) -> FrameworkBinding:
        dialect = implementation.dialect
        strategy = get_strategy(dialect)

        def bindings(unified) -> tuple[AttributeBinding, ...]:
            return tuple(
                AttributeBinding(
                    name=attribute.name,
                    framework_name=mapping.name,
                    type=mapping.type,
                    transform=mapping.transform,
                )
                for attribute in unified
                if (mapping := attribute.framework_mappings.get(dialect)) is not None
            )

        return FrameworkBinding(
            dialect=dialect,
            import_spec=ImportSpec(
                module=strategy.module_path(self.config.library_name, component.name),
                named=(component.name,),
            ),
            component_name=implementation.name,
            props=bindings(component.unified_props),
            events=bindings(component.unified_events),
            slots=bindings(component.unified_slots),
            examples=self._examples(component, dialect, primary),
        )

    def _examples(
        self, component: AlignedComponent, dialect: Dialect, primary: Dialect
    ) -> tuple[CodeExample, ...]:
        try:
            return tuple(self.examples.generate(component, dialect, primary))
        except (ValueError, KeyError, TypeError) as e:
            with self._failures_lock:
                self.example_failures += 1
            self.logger.warning(
                f"Example generation failed for {component.name} ({dialect.value}): {e}",
                extra={"component": component.name},
            )
            return ()


def validate_manifest(manifest: ComponentManifest) -> ManifestValidationResult:
    """Validate a manifest's shape and internal cross-references.

    Schema violations, spec-level gaps (missing name, description or
    framework binding, duplicate names) and usage patterns referencing
    unknown components are errors. Anti-pattern gaps are warnings.

    Args:
        manifest: The manifest to check.

    Returns:
        ManifestValidationResult; never raises for an invalid manifest.
    """
    errors = [f"Schema: {message}" for message in schema_errors(manifest.to_dict())]
    warnings: list[str] = []

    names: set[str] = set()
    for spec in manifest.components:
        if not spec.name:
            errors.append("Component spec must have a name")
        if not spec.description:
            errors.append(f"Component {spec.name} must have a description")
        if not spec.frameworks:
            errors.append(
                f"Component {spec.name} must have at least one framework implementation"
            )
        if spec.name in names:
            errors.append(f"Duplicate component name {spec.name}")
        names.add(spec.name)

    for pattern in manifest.patterns:
        for name in pattern.components:
            if name not in names:
                errors.append(
                    f"Usage pattern {pattern.id} references unknown component {name}"
                )

    for anti_pattern in manifest.anti_patterns:
        if not anti_pattern.good_example:
            warnings.append(f"Anti-pattern {anti_pattern.id} has no good example")
        if not anti_pattern.reason:
            warnings.append(f"Anti-pattern {anti_pattern.id} has no reason")
        for name in anti_pattern.components:
            if name not in names:
                warnings.append(
                    f"Anti-pattern {anti_pattern.id} references unknown component {name}"
                )

    return ManifestValidationResult(valid=not errors, errors=errors, warnings=warnings)
