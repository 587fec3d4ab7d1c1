"""Heuristic rule tables: composability, anti-patterns and usage patterns."""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..alignment.models import AlignedComponent
from ..alignment.normalizer import NameNormalizer, to_pascal_case
from ..dialects import Dialect, get_strategy
from ..models import ComponentDefinition
from .models import AntiPattern, ComposabilityRule, RuleType, Severity, UsagePattern

# Category -> rules applied to every component in that category
COMPOSABILITY_RULES: dict[str, tuple[ComposabilityRule, ...]] = {
    "form-control": (
        ComposabilityRule(
            type=RuleType.REQUIRES_PARENT,
            target="Form",
            message="Form controls should be placed inside a Form",
        ),
    ),
    "form": (
        ComposabilityRule(
            type=RuleType.ALLOWS_CHILD,
            target="FormItem",
            message="Forms group their fields in FormItem children",
        ),
    ),
    "feedback": (
        ComposabilityRule(
            type=RuleType.FORBIDS_CHILD,
            target="Modal",
            message="Avoid nesting modal dialogs",
        ),
    ),
    "navigation": (
        ComposabilityRule(
            type=RuleType.ALLOWS_CHILD,
            target="MenuItem",
            message="Navigation containers hold MenuItem entries",
        ),
    ),
}

BOOLEAN_PREFIX = re.compile(r"^(?:is|has|can)(?=[A-Z])")


def composability_rules(category: str) -> tuple[ComposabilityRule, ...]:
    """Rules for a category; empty when the table has none."""
    return COMPOSABILITY_RULES.get(category, ())


def detect_anti_patterns(
    definitions: Sequence[ComponentDefinition],
    aligned: Sequence[AlignedComponent] = (),
    normalizer: NameNormalizer | None = None,
) -> list[AntiPattern]:
    """Detect anti-patterns in the raw per-dialect definitions.

    Covers non-canonical component names (snake/kebab case) and boolean
    props lacking an is/has/can prefix. Every definition is scanned,
    including duplicates the aligner ignored and members of groups that
    failed to align. Findings reference the aligned component owning the
    definition; a definition with no aligned component references none.
    Duplicate ids are dropped.

    Args:
        definitions: Raw definitions, in input order.
        aligned: Aligned components built from the same definitions.
        normalizer: Name normalizer used to match definitions to components.

    Returns:
        Anti-patterns in detection order.
    """
    normalizer = normalizer or NameNormalizer()
    owners: dict[str, str] = {}
    for component in aligned:
        for implementation in component.frameworks:
            key = normalizer.normalize_component_name(implementation.component.name)
            owners.setdefault(key, component.name)

    found: dict[str, AntiPattern] = {}
    for definition in definitions:
        if not isinstance(definition.name, str) or not isinstance(
            definition.dialect, Dialect
        ):
            continue
        dialect = definition.dialect
        owner = owners.get(normalizer.normalize_component_name(definition.name))
        canonical = owner or normalizer.canonical_name(definition.name)
        components = (owner,) if owner else ()

        if "_" in definition.name or "-" in definition.name:
            pattern_id = f"naming-{dialect.value}-{definition.name}"
            found.setdefault(
                pattern_id,
                AntiPattern(
                    id=pattern_id,
                    name="Non-canonical Component Name",
                    description=f"{definition.name} is not PascalCase",
                    bad_example=definition.name,
                    good_example=to_pascal_case(definition.name),
                    reason="PascalCase component names are consistent across dialects",
                    severity=Severity.WARNING,
                    components=components,
                    dialect=dialect,
                ),
            )

        binding_prefix = get_strategy(dialect).binding_prefix
        for prop in definition.props:
            if not isinstance(prop.name, str) or not isinstance(prop.type, str):
                continue
            if prop.type.lower() != "boolean":
                continue
            name = prop.name
            if binding_prefix and name.startswith(binding_prefix):
                name = name[len(binding_prefix):]
            if not name or BOOLEAN_PREFIX.match(name):
                continue
            pattern_id = f"prop-boolean-{canonical}-{name}"
            found.setdefault(
                pattern_id,
                AntiPattern(
                    id=pattern_id,
                    name="Boolean Prop Naming",
                    description=f"Boolean prop {name} of {canonical} lacks an is/has/can prefix",
                    bad_example=f"{name}: boolean",
                    good_example=f"is{name[:1].upper()}{name[1:]}: boolean",
                    reason="Boolean props should clearly indicate their purpose",
                    severity=Severity.INFO,
                    components=components,
                    dialect=dialect,
                ),
            )

    return list(found.values())


@dataclass(frozen=True)
class PatternFamily:
    """A usage-pattern family matched by keywords in component names."""

    id: str
    name: str
    description: str
    keywords: tuple[str, ...]
    template: str
    best_practices: tuple[str, ...]


PATTERN_FAMILIES: tuple[PatternFamily, ...] = (
    PatternFamily(
        id="form-pattern",
        name="Form Pattern",
        description="Common form layout pattern",
        keywords=("input", "button", "form", "select", "checkbox", "radio", "switch"),
        template="Form with input fields and submit button",
        best_practices=(
            "Use proper form validation",
            "Provide clear error messages",
            "Include proper labels for accessibility",
        ),
    ),
    PatternFamily(
        id="layout-pattern",
        name="Layout Pattern",
        description="Page structure built from layout containers",
        keywords=("layout", "grid", "row", "col", "container", "space", "card"),
        template="Layout container with rows and columns",
        best_practices=(
            "Prefer layout components over ad-hoc spacing",
            "Keep nesting shallow",
        ),
    ),
    PatternFamily(
        id="data-display-pattern",
        name="Data Display Pattern",
        description="Presenting collections of records",
        keywords=("table", "list", "tree", "pagination", "tag", "badge"),
        template="Table or list with pagination",
        best_practices=(
            "Provide an empty state",
            "Paginate large collections",
            "Use stable row keys",
        ),
    ),
    PatternFamily(
        id="feedback-pattern",
        name="Feedback Pattern",
        description="Informing users about results and state changes",
        keywords=("modal", "dialog", "message", "notification", "alert", "tooltip", "spin"),
        template="Dialog or message triggered by a user action",
        best_practices=(
            "Keep feedback messages short",
            "Do not stack modal dialogs",
            "Return focus after closing a dialog",
        ),
    ),
    PatternFamily(
        id="navigation-pattern",
        name="Navigation Pattern",
        description="Moving between views and sections",
        keywords=("menu", "nav", "tab", "breadcrumb", "steps", "dropdown"),
        template="Menu or tabs switching between views",
        best_practices=(
            "Highlight the active item",
            "Keep navigation labels short",
        ),
    ),
)


def extract_usage_patterns(aligned: Sequence[AlignedComponent]) -> list[UsagePattern]:
    """Group components into pattern families by name keywords.

    Families without a matching component are omitted. Patterns list
    canonical component names, so they cross-reference the manifest.
    """
    patterns: list[UsagePattern] = []
    for family in PATTERN_FAMILIES:
        members = tuple(
            dict.fromkeys(
                c.name
                for c in aligned
                if any(keyword in c.name.lower() for keyword in family.keywords)
            )
        )
        if not members:
            continue
        patterns.append(
            UsagePattern(
                id=family.id,
                name=family.name,
                description=family.description,
                components=members,
                template=family.template,
                best_practices=family.best_practices,
            )
        )
    return patterns
