"""Keyword-based component category inference."""

# Checked in order; first match wins
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "form-control",
        ("input", "select", "textarea", "checkbox", "radio", "switch", "datepicker"),
    ),
    ("form", ("form",)),
    ("action", ("button",)),
    ("data-display", ("table", "list")),
    ("feedback", ("modal", "dialog")),
    ("navigation", ("menu", "nav", "tab")),
)

DEFAULT_CATEGORY = "general"


def infer_category(name: str) -> str:
    """Infer a component category from keywords in its name.

    Args:
        name: Component name in any casing.

    Returns:
        Category string, 'general' when no keyword matches.
    """
    lowered = name.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY
