"""Name normalization for cross-dialect alignment.

Maps dialect-local component and attribute names onto a shared semantic
vocabulary so that equivalent definitions can be grouped:
- Component names lose library prefixes/suffixes and are case-folded
- Props pass through a fixed rename table and kebab-to-camel conversion
- Events lose the dialect's handler prefix and are case-folded
- Slots pass through a fixed rename table
"""

import re

from ..dialects import Dialect, get_strategy

# Priority used when dialects disagree on an attribute type
TYPE_PRIORITY = ("string", "number", "boolean")
FALLBACK_TYPE = "any"


class NameNormalizer:
    """Normalizes component and attribute names across dialects.

    normalize_component_name() is idempotent: its output contains no
    separators and no uppercase letters, so no affix rule matches again.
    """

    # Component library prefixes: KButton, ElButton, AntButton, AButton
    PASCAL_PREFIX = re.compile(r"^(?:K|El|Ant|A)(?=[A-Z])")
    # Same libraries in kebab/snake form: k-button, el-button, a_button
    KEBAB_PREFIX = re.compile(r"^(?:k|el|ant|a)[-_](?=.)", re.IGNORECASE)
    PASCAL_SUFFIX = re.compile(r"(?<=.)(?:Component|Widget)$")
    KEBAB_SUFFIX = re.compile(r"(?<=.)[-_](?:component|widget)$", re.IGNORECASE)
    SEPARATORS = re.compile(r"[-_\s]+")

    PROP_RENAMES: dict[str, str] = {
        "className": "class",
        "htmlFor": "for",
        "modelValue": "value",
        "v-model": "value",
    }

    SLOT_RENAMES: dict[str, str] = {
        "children": "default",
        "content": "default",
    }

    def strip_affixes(self, name: str) -> str:
        """Remove library prefixes and generic suffixes from a component name.

        Returns the original name when stripping would leave nothing.
        """
        stripped = name.strip()
        stripped = self.KEBAB_PREFIX.sub("", stripped, count=1)
        stripped = self.PASCAL_PREFIX.sub("", stripped, count=1)
        stripped = self.KEBAB_SUFFIX.sub("", stripped, count=1)
        stripped = self.PASCAL_SUFFIX.sub("", stripped, count=1)
        return stripped or name.strip()

    def normalize_component_name(self, name: str) -> str:
        """Grouping key for a component name (e.g. 'KButton' -> 'button')."""
        return self.SEPARATORS.sub("", self.strip_affixes(name)).casefold()

    def canonical_name(self, name: str) -> str:
        """PascalCase display name (e.g. 'el-icon-button' -> 'IconButton')."""
        stripped = self.strip_affixes(name)
        parts = [p for p in self.SEPARATORS.split(stripped) if p]
        if len(parts) > 1:
            return "".join(p[:1].upper() + p[1:].lower() for p in parts)
        return stripped[:1].upper() + stripped[1:]

    def semantic_prop_name(self, name: str, dialect: Dialect) -> str:
        """Semantic name of a non-handler prop."""
        prefix = get_strategy(dialect).binding_prefix
        if prefix and name.startswith(prefix):
            name = name[len(prefix):]
        if name in self.PROP_RENAMES:
            return self.PROP_RENAMES[name]
        camel = to_camel_case(name)
        return self.PROP_RENAMES.get(camel, camel)

    def semantic_event_name(self, name: str, dialect: Dialect) -> str:
        """Semantic name of an event or handler prop (e.g. 'onMouseEnter' -> 'mouseenter')."""
        bare = get_strategy(dialect).strip_event_prefix(name) or name
        return re.sub(r"[-_]", "", bare).casefold()

    def semantic_slot_name(self, name: str) -> str:
        """Semantic name of a slot (e.g. 'children' -> 'default')."""
        return self.SLOT_RENAMES.get(name, name)


def to_camel_case(name: str) -> str:
    """Convert kebab/snake case to camelCase, leaving other names untouched."""
    if "-" not in name and "_" not in name:
        return name
    head, *rest = [p for p in re.split(r"[-_]+", name) if p] or [name]
    return head + "".join(p[:1].upper() + p[1:] for p in rest)


def to_pascal_case(name: str) -> str:
    """Convert kebab/snake case to PascalCase (e.g. 'date_picker' -> 'DatePicker')."""
    camel = to_camel_case(name)
    return camel[:1].upper() + camel[1:]


def unify_types(types: list[str | None]) -> str | None:
    """Unify attribute types declared by several dialects.

    Returns the single type when all agree, otherwise the first of
    string > number > boolean present, otherwise 'any'. Returns None
    when no dialect declares a type.
    """
    present = [t for t in types if isinstance(t, str) and t]
    if not present:
        return None

    unique = list(dict.fromkeys(present))
    if len(unique) == 1:
        return unique[0]

    lowered = {t.lower() for t in unique}
    for candidate in TYPE_PRIORITY:
        if candidate in lowered:
            return candidate
    return FALLBACK_TYPE
