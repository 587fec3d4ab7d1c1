"""UI framework dialects and their per-dialect strategies.

Every dialect-specific rule (event prefixes, import paths, example syntax)
lives in one DialectStrategy record, looked up once via get_strategy().
"""

import re
from dataclasses import dataclass
from enum import Enum


class Dialect(Enum):
    """UI framework dialects a component may be implemented in."""

    REACT = "react"
    VUE = "vue"
    INTACT = "intact"


TOTAL_DIALECTS = len(Dialect)

# Example literal per declared type, shared by all dialect templates
EXAMPLE_VALUES = {
    "string": '"example"',
    "number": "42",
    "boolean": "true",
    "array": "[]",
    "object": "{}",
    "function": "() => {}",
}


@dataclass(frozen=True)
class DialectStrategy:
    """Naming and syntax rules for one dialect."""

    dialect: Dialect
    event_prefix: re.Pattern  # Must expose an "event" group
    event_attribute: str  # Format string producing the native handler name
    event_value: str  # Handler expression in examples
    bound_prop: str  # Non-string attribute syntax
    module_template: str
    binding_prefix: str = ""  # Stripped from prop names (vue ":" bindings)

    def strip_event_prefix(self, name: str) -> str | None:
        """Return the event name without the dialect prefix, or None if absent."""
        match = self.event_prefix.match(name)
        if not match:
            return None
        return match.group("event")

    def is_event_handler(self, prop_name: str) -> bool:
        """Check whether a prop name follows this dialect's handler convention."""
        return self.event_prefix.match(prop_name) is not None

    def native_event_name(self, semantic_name: str) -> str:
        """Build the dialect-native handler attribute for a semantic event."""
        return self.event_attribute.format(
            name=semantic_name, cap=semantic_name[:1].upper() + semantic_name[1:]
        )

    def module_path(self, library: str, component: str) -> str:
        """Import path of a component in this dialect's package."""
        return self.module_template.format(
            library=library.lower(), name=component.lower()
        )

    def render_prop(self, name: str, type_name: str | None) -> str:
        """Render one prop attribute for a usage example."""
        kind = (type_name or "string").lower()
        if kind == "string" or kind not in EXAMPLE_VALUES:
            return f'{name}="example"'
        return self.bound_prop.format(name=name, value=EXAMPLE_VALUES[kind])

    def render_event(self, native_name: str, semantic_name: str) -> str:
        """Render one event handler attribute for a usage example."""
        handler = "on" + semantic_name[:1].upper() + semantic_name[1:]
        return f"{native_name}={self.event_value.format(handler=handler)}"

    def render_element(
        self,
        tag: str,
        attributes: list[str],
        children: str | None = None,
        multiline: bool = False,
    ) -> str:
        """Render an element with attributes and optional text children."""
        if not attributes:
            opening = f"<{tag}"
        elif multiline:
            opening = f"<{tag}\n  " + "\n  ".join(attributes) + "\n"
        else:
            opening = f"<{tag} " + " ".join(attributes)

        if children is None:
            return f"{opening} />" if not multiline or not attributes else f"{opening}/>"
        return f"{opening}>{children}</{tag}>"


_STRATEGIES: dict[Dialect, DialectStrategy] = {
    Dialect.REACT: DialectStrategy(
        dialect=Dialect.REACT,
        event_prefix=re.compile(r"^on(?=[A-Z])(?P<event>.+)$"),
        event_attribute="on{cap}",
        event_value="{{{handler}}}",
        bound_prop="{name}={{{value}}}",
        module_template="@{library}/react/{name}",
    ),
    Dialect.VUE: DialectStrategy(
        dialect=Dialect.VUE,
        event_prefix=re.compile(r"^(?:@|v-on:)(?P<event>.+)$"),
        event_attribute="@{name}",
        event_value='"{handler}"',
        bound_prop=':{name}="{value}"',
        module_template="@{library}/vue/{name}",
        binding_prefix=":",
    ),
    Dialect.INTACT: DialectStrategy(
        dialect=Dialect.INTACT,
        event_prefix=re.compile(r"^ev-(?P<event>.+)$"),
        event_attribute="ev-{name}",
        event_value="{{this.{handler}}}",
        bound_prop="{name}={{{value}}}",
        module_template="@{library}/intact/{name}",
    ),
}


def get_strategy(dialect: Dialect) -> DialectStrategy:
    """Look up the strategy for a dialect."""
    return _STRATEGIES[dialect]


def parse_dialect(value: "str | Dialect") -> Dialect:
    """Parse a dialect from its string value (case-insensitive).

    Raises:
        ValueError: If the value names no known dialect.
    """
    if isinstance(value, Dialect):
        return value
    try:
        return Dialect(str(value).strip().lower())
    except ValueError:
        known = ", ".join(d.value for d in Dialect)
        raise ValueError(f"Unknown dialect '{value}' (expected one of: {known})") from None
