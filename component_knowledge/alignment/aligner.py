"""Cross-dialect component aligner.

Groups per-dialect ComponentDefinitions by normalized identity, unifies
their props, events and slots into one semantic vocabulary and scores
each group's alignment quality.
"""

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from ..categories import infer_category
from ..config.models import KnowledgeConfig
from ..dialects import TOTAL_DIALECTS, Dialect, get_strategy
from ..errors import InvalidDefinitionError
from ..knowledge_logging import LogCategory, get_category_logger
from ..models import (
    ComponentDefinition,
    EventDefinition,
    PropDefinition,
    SlotDefinition,
)
from ..timing import timed
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
from .normalizer import NameNormalizer, unify_types

# Confidence weights: dialect coverage, prop completeness, event completeness
COVERAGE_WEIGHT = 0.4
PROP_WEIGHT = 0.4
EVENT_WEIGHT = 0.2

# Semantic name -> contributions in input order, at most one per dialect
_Bucket = dict[str, list[tuple[Dialect, PropDefinition | EventDefinition | SlotDefinition]]]


def compute_confidence(
    framework_count: int,
    props: Sequence[UnifiedProp],
    events: Sequence[UnifiedEvent],
) -> float:
    """Score an alignment from dialect coverage and mapping completeness.

    Terms for empty attribute lists are omitted and the remaining weights
    renormalized.

    Args:
        framework_count: Number of dialect implementations in the group.
        props: Unified props of the group.
        events: Unified events of the group.

    Returns:
        Confidence clamped to [0, 1].
    """
    if framework_count <= 0:
        return 0.0

    terms = [(COVERAGE_WEIGHT, framework_count / TOTAL_DIALECTS)]
    if props:
        completeness = sum(len(p.framework_mappings) for p in props) / (
            len(props) * framework_count
        )
        terms.append((PROP_WEIGHT, completeness))
    if events:
        completeness = sum(len(e.framework_mappings) for e in events) / (
            len(events) * framework_count
        )
        terms.append((EVENT_WEIGHT, completeness))

    total_weight = sum(weight for weight, _ in terms)
    score = sum(weight * value for weight, value in terms) / total_weight
    return max(0.0, min(1.0, score))


def _rename_note(original: str, semantic: str) -> str | None:
    return f"rename: {original} -> {semantic}" if original != semantic else None


def _first_docs(items: Sequence[tuple[Dialect, object]]) -> str | None:
    for _, item in items:
        docs = getattr(item, "docs", None)
        if docs and docs.strip():
            return docs.strip()
    return None


def _check_text_fields(component: str, item: object, names: Sequence[str]) -> None:
    for field_name in names:
        value = getattr(item, field_name, None)
        if value is not None and not isinstance(value, str):
            label = getattr(item, "name", component)
            raise InvalidDefinitionError(
                f"Definition {component}: {field_name} of {label} must be a string, "
                f"got {type(value).__name__}",
                component=component,
            )


class CrossDialectAligner:
    """Aligns per-dialect component definitions into cross-dialect groups."""

    def __init__(
        self,
        config: KnowledgeConfig | None = None,
        normalizer: NameNormalizer | None = None,
    ):
        self.config = config or KnowledgeConfig()
        self.normalizer = normalizer or NameNormalizer()
        self.stats = AlignmentStats()
        self.logger = get_category_logger(LogCategory.ALIGNER)

    @timed("align")
    def align(self, definitions: Sequence[ComponentDefinition]) -> list[AlignedComponent]:
        """Group definitions by normalized name and unify each group.

        A group that fails to align is logged and skipped; the rest of the
        batch still aligns. Output order follows first appearance of each
        group in the input.

        Args:
            definitions: Per-dialect component definitions, in input order.

        Returns:
            Aligned components, one per successfully aligned group.
        """
        self.stats = AlignmentStats()
        groups = self._group(definitions)
        self.stats.groups = len(groups)

        if self.config.max_workers > 1 and len(groups) > 1:
            results: list[AlignedComponent | None] = [None] * len(groups)
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                futures = {
                    executor.submit(self._align_group_safely, group): index
                    for index, group in enumerate(groups)
                }
                for future in as_completed(futures):
                    results[futures[future]] = future.result()
        else:
            results = [self._align_group_safely(group) for group in groups]

        aligned = [component for component in results if component is not None]
        self.stats.aligned = len(aligned)
        self.stats.skipped = len(groups) - len(aligned)
        self.stats.skipped_definitions += sum(
            len(group) for group, component in zip(groups, results) if component is None
        )

        self.logger.info(
            f"Aligned {len(aligned)} of {len(groups)} component groups "
            f"({self.stats.skipped} skipped, {self.stats.duplicates} duplicates)",
            extra={"stage": "align", "item_count": len(aligned)},
        )
        return aligned

    def _group(
        self, definitions: Sequence[ComponentDefinition]
    ) -> list[list[ComponentDefinition]]:
        groups: dict[str, list[ComponentDefinition]] = {}
        for definition in definitions:
            if not isinstance(definition.name, str) or not isinstance(
                definition.dialect, Dialect
            ):
                self.stats.skipped_definitions += 1
                self.logger.warning(
                    f"Skipping definition without a usable name or dialect: "
                    f"{definition.name!r}"
                )
                continue
            key = self.normalizer.normalize_component_name(definition.name)
            group = groups.setdefault(key, [])
            if any(existing.dialect == definition.dialect for existing in group):
                self.stats.duplicates += 1
                self.logger.warning(
                    f"Ignoring duplicate {definition.dialect.value} definition "
                    f"of {definition.name}",
                    extra={"component": definition.name},
                )
                continue
            group.append(definition)
        return list(groups.values())

    def _align_group_safely(
        self, group: list[ComponentDefinition]
    ) -> AlignedComponent | None:
        try:
            return self.align_group(group)
        except (InvalidDefinitionError, ValueError, TypeError) as e:
            name = group[0].name if group else "<empty>"
            self.logger.warning(
                f"Skipping component group {name!r}: {e}", extra={"component": name}
            )
            return None

    def align_group(self, group: Sequence[ComponentDefinition]) -> AlignedComponent:
        """Unify one group of same-component definitions.

        Raises:
            InvalidDefinitionError: If a definition or attribute has no name.
        """
        if not group:
            raise InvalidDefinitionError("Cannot align an empty component group")
        for definition in group:
            self._check_definition(definition)

        name = self.normalizer.canonical_name(group[0].name)
        props, events, slots = self._bucket_attributes(group)

        unified_props = [self._unify_prop(n, items) for n, items in props.items()]
        unified_events = [self._unify_event(n, items) for n, items in events.items()]
        unified_slots = [self._unify_slot(n, items) for n, items in slots.items()]

        category = next((d.category for d in group if d.category), None)
        description = next(
            (d.docs.strip() for d in group if d.docs and d.docs.strip()), None
        )

        return AlignedComponent(
            name=name,
            category=category or infer_category(name),
            description=description or f"{name} component",
            frameworks=[FrameworkImplementation(d.dialect, d) for d in group],
            unified_props=unified_props,
            unified_events=unified_events,
            unified_slots=unified_slots,
            confidence=compute_confidence(len(group), unified_props, unified_events),
            deprecated=all(d.deprecated for d in group),
        )

    def _check_definition(self, definition: ComponentDefinition) -> None:
        if not isinstance(definition.name, str) or not definition.name.strip():
            raise InvalidDefinitionError("Component definition has no name")
        name = definition.name
        if not isinstance(definition.dialect, Dialect):
            raise InvalidDefinitionError(
                f"Definition {name} has no valid dialect", component=name
            )
        _check_text_fields(name, definition, ("category", "docs"))
        for attribute in (*definition.props, *definition.events, *definition.slots):
            if not isinstance(attribute.name, str) or not attribute.name.strip():
                raise InvalidDefinitionError(
                    f"Definition {name} has an attribute without a name", component=name
                )
            _check_text_fields(name, attribute, ("type", "payload", "docs"))

    def _bucket_attributes(
        self, group: Sequence[ComponentDefinition]
    ) -> tuple[_Bucket, _Bucket, _Bucket]:
        props: _Bucket = {}
        events: _Bucket = {}
        slots: _Bucket = {}

        def add(bucket: _Bucket, semantic: str, dialect: Dialect, item) -> None:
            items = bucket.setdefault(semantic, [])
            if all(existing_dialect != dialect for existing_dialect, _ in items):
                items.append((dialect, item))

        for definition in group:
            dialect = definition.dialect
            strategy = get_strategy(dialect)
            for prop in definition.props:
                if strategy.is_event_handler(prop.name):
                    semantic = self.normalizer.semantic_event_name(prop.name, dialect)
                    add(events, semantic, dialect, prop)
                else:
                    semantic = self.normalizer.semantic_prop_name(prop.name, dialect)
                    add(props, semantic, dialect, prop)
            for event in definition.events:
                semantic = self.normalizer.semantic_event_name(event.name, dialect)
                add(events, semantic, dialect, event)
            for slot in definition.slots:
                add(slots, self.normalizer.semantic_slot_name(slot.name), dialect, slot)

        return props, events, slots

    def _unify_prop(self, semantic: str, items) -> UnifiedProp:
        return UnifiedProp(
            name=semantic,
            type=unify_types([p.type for _, p in items]) or "any",
            required=any(p.required for _, p in items),
            default=next((p.default for _, p in items if p.default is not None), None),
            description=_first_docs(items),
            deprecated=all(p.deprecated for _, p in items),
            framework_mappings={
                dialect: FrameworkMapping(p.name, p.type, _rename_note(p.name, semantic))
                for dialect, p in items
            },
        )

    def _unify_event(self, semantic: str, items) -> UnifiedEvent:
        declared = [e for _, e in items if isinstance(e, EventDefinition)]
        handlers = [p for _, p in items if isinstance(p, PropDefinition)]
        return UnifiedEvent(
            name=semantic,
            type=unify_types([e.type for e in declared]) or "Event",
            payload=next((e.payload for e in declared if e.payload), None),
            required=any(p.required for p in handlers),
            description=_first_docs(items),
            deprecated=all(item.deprecated for _, item in items),
            framework_mappings={
                dialect: FrameworkMapping(
                    item.name, item.type, _rename_note(item.name, semantic)
                )
                for dialect, item in items
            },
        )

    def _unify_slot(self, semantic: str, items) -> UnifiedSlot:
        return UnifiedSlot(
            name=semantic,
            type=unify_types([s.type for _, s in items]),
            description=_first_docs(items),
            deprecated=all(s.deprecated for _, s in items),
            framework_mappings={
                dialect: FrameworkMapping(s.name, s.type, _rename_note(s.name, semantic))
                for dialect, s in items
            },
        )

    def create_prop_mapping(
        self, definitions: Sequence[ComponentDefinition]
    ) -> list[MappingRule]:
        """Cross-component mapping table of semantic prop names.

        Event-handler props are excluded; they appear in create_event_mapping().
        """
        table: dict[str, dict[Dialect, str]] = {}
        for definition in definitions:
            strategy = get_strategy(definition.dialect)
            for prop in definition.props:
                if strategy.is_event_handler(prop.name):
                    continue
                semantic = self.normalizer.semantic_prop_name(prop.name, definition.dialect)
                table.setdefault(semantic, {}).setdefault(definition.dialect, prop.name)
        return self._mapping_rules(table)

    def create_event_mapping(
        self, definitions: Sequence[ComponentDefinition]
    ) -> list[MappingRule]:
        """Cross-component mapping table of semantic event names."""
        table: dict[str, dict[Dialect, str]] = {}
        for definition in definitions:
            strategy = get_strategy(definition.dialect)
            names = [p.name for p in definition.props if strategy.is_event_handler(p.name)]
            names.extend(e.name for e in definition.events)
            for native in names:
                semantic = self.normalizer.semantic_event_name(native, definition.dialect)
                table.setdefault(semantic, {}).setdefault(definition.dialect, native)
        return self._mapping_rules(table)

    def _mapping_rules(self, table: dict[str, dict[Dialect, str]]) -> list[MappingRule]:
        # Fixed at the acceptance threshold until usage frequency is tracked
        return [
            MappingRule(
                unified_name=name,
                mappings=mappings,
                confidence=self.config.min_confidence,
            )
            for name, mappings in table.items()
        ]

    def validate_alignment(
        self, aligned: Sequence[AlignedComponent]
    ) -> AlignmentValidationResult:
        """Check aligned components for consistency and coverage.

        Low coverage and low confidence are warnings. Only internal
        inconsistencies (empty names, missing frameworks, dangling mappings,
        out-of-range confidence) are errors.
        """
        errors: list[str] = []
        warnings: list[str] = []

        for component in aligned:
            label = component.name or "<unnamed>"
            if not component.name or not component.name.strip():
                errors.append("Aligned component has an empty name")
            if not component.frameworks:
                errors.append(f"Component {label} has no framework implementations")
            if not 0.0 <= component.confidence <= 1.0:
                errors.append(
                    f"Component {label} has confidence {component.confidence} outside [0, 1]"
                )

            if len(component.frameworks) < 2:
                warnings.append(
                    f"Component {label} has only {len(component.frameworks)} "
                    "framework implementation(s)"
                )
            if component.confidence < self.config.min_confidence:
                warnings.append(
                    f"Component {label} has low confidence ({component.confidence:.2f})"
                )

            present = set(component.dialects)
            attributes = [
                ("Property", component.unified_props),
                ("Event", component.unified_events),
                ("Slot", component.unified_slots),
            ]
            for kind, unified in attributes:
                for attribute in unified:
                    dangling = set(attribute.framework_mappings) - present
                    for dialect in sorted(dangling, key=lambda d: d.value):
                        errors.append(
                            f"Component {label}: {kind.lower()} {attribute.name} maps "
                            f"{dialect.value}, which has no implementation"
                        )
                    if len(attribute.framework_mappings) < len(component.frameworks):
                        warnings.append(
                            f"{kind} {attribute.name} of {label} is missing in some frameworks"
                        )

        coverage: dict[Dialect, float] = {}
        for dialect in Dialect:
            count = sum(1 for c in aligned if dialect in c.dialects)
            coverage[dialect] = count / len(aligned) if aligned else 0.0

        return AlignmentValidationResult(
            success=not errors, errors=errors, warnings=warnings, coverage=coverage
        )
