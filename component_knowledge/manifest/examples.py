"""Usage example generation for component specs.

Examples are descriptive scaffolding rendered from dialect syntax
templates, not executable code.
"""

from ..alignment.models import AlignedComponent, FrameworkMapping
from ..dialects import Dialect, get_strategy
from .models import CodeExample

MAX_EXTENDED_ATTRIBUTES = 4
DEFAULT_SLOT = "default"
PLACEHOLDER_CHILDREN = "Content"


class ExampleGenerator:
    """Generates minimal and extended usage snippets per dialect.

    Seed data (which attributes are required, whether a default slot
    exists) comes from the primary dialect implementation; each dialect
    then renders the seeded attributes with its own native names.
    """

    def seed(self, component: AlignedComponent, primary: Dialect) -> tuple[set[str], bool]:
        """Required semantic attribute names and default-slot presence for the primary dialect."""
        required = {
            p.name
            for p in component.unified_props
            if p.required and primary in p.framework_mappings
        }
        required.update(
            e.name
            for e in component.unified_events
            if e.required and primary in e.framework_mappings
        )
        has_default_slot = any(
            s.name == DEFAULT_SLOT and primary in s.framework_mappings
            for s in component.unified_slots
        )
        return required, has_default_slot

    def generate(
        self, component: AlignedComponent, dialect: Dialect, primary: Dialect
    ) -> list[CodeExample]:
        """Render the minimal and extended examples for one dialect.

        Raises:
            ValueError: If the dialect has no implementation of the component.
        """
        implementation = component.implementation(dialect)
        if implementation is None:
            raise ValueError(f"{component.name} has no {dialect.value} implementation")

        strategy = get_strategy(dialect)
        tag = implementation.name
        required, has_default_slot = self.seed(component, primary)
        children = PLACEHOLDER_CHILDREN if has_default_slot else None

        rendered = self._render_attributes(component, dialect)
        minimal = [attr for name, attr in rendered if name in required]
        required_first = sorted(rendered, key=lambda item: item[0] not in required)
        extended = [attr for _, attr in required_first[:MAX_EXTENDED_ATTRIBUTES]]

        return [
            CodeExample(
                title=f"Basic {component.name}",
                description=f"Minimal {component.name} usage with required attributes only",
                code=strategy.render_element(tag, minimal, children),
                dialect=dialect,
                category="minimal",
            ),
            CodeExample(
                title=f"{component.name} with options",
                description=f"{component.name} with common props and event handlers",
                code=strategy.render_element(tag, extended, children, multiline=True),
                dialect=dialect,
                category="extended",
            ),
        ]

    def _render_attributes(
        self, component: AlignedComponent, dialect: Dialect
    ) -> list[tuple[str, str]]:
        strategy = get_strategy(dialect)
        rendered: list[tuple[str, str]] = []

        for prop in component.unified_props:
            mapping = prop.framework_mappings.get(dialect)
            if mapping is None:
                continue
            native = _strip_binding(mapping, strategy.binding_prefix)
            rendered.append((prop.name, strategy.render_prop(native, prop.type)))

        for event in component.unified_events:
            mapping = event.framework_mappings.get(dialect)
            if mapping is None:
                continue
            native = mapping.name
            if not strategy.is_event_handler(native):
                native = strategy.native_event_name(native)
            rendered.append((event.name, strategy.render_event(native, event.name)))

        return rendered


def _strip_binding(mapping: FrameworkMapping, prefix: str) -> str:
    if prefix and mapping.name.startswith(prefix):
        return mapping.name[len(prefix):]
    return mapping.name
