"""Unit tests for cross-dialect name normalization."""

import pytest

from component_knowledge.alignment import (
    NameNormalizer,
    to_camel_case,
    to_pascal_case,
    unify_types,
)
from component_knowledge.dialects import Dialect


class TestComponentNames:
    """Tests for component name grouping keys and display names."""

    @pytest.fixture
    def normalizer(self) -> NameNormalizer:
        return NameNormalizer()

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("KButton", "button"),
            ("el-button", "button"),
            ("ElButton", "button"),
            ("AntDatePicker", "datepicker"),
            ("k_input", "input"),
            ("el-icon-button", "iconbutton"),
            ("ModalComponent", "modal"),
            ("select-widget", "select"),
            ("Avatar", "avatar"),
        ],
    )
    def test_normalize_component_name(self, normalizer, name, expected):
        """Test library prefixes, suffixes, separators and case are removed."""
        assert normalizer.normalize_component_name(name) == expected

    @pytest.mark.parametrize(
        "name",
        ["KButton", "el-icon-button", "AntDatePicker", "MyWidget", "k_input", "el-a-button"],
    )
    def test_normalize_is_idempotent(self, normalizer, name):
        """Test normalizing a normalized name changes nothing."""
        once = normalizer.normalize_component_name(name)
        assert normalizer.normalize_component_name(once) == once

    def test_strip_never_empties_name(self, normalizer):
        """Test a name made only of an affix is kept as-is."""
        assert normalizer.strip_affixes("Widget") == "Widget"
        assert normalizer.normalize_component_name("Widget") == "widget"

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("KButton", "Button"),
            ("el-button", "Button"),
            ("el-icon-button", "IconButton"),
            ("date_picker", "DatePicker"),
            ("Table", "Table"),
        ],
    )
    def test_canonical_name(self, normalizer, name, expected):
        """Test canonical names are PascalCase without library affixes."""
        assert normalizer.canonical_name(name) == expected


class TestAttributeNames:
    """Tests for semantic prop, event and slot names."""

    @pytest.fixture
    def normalizer(self) -> NameNormalizer:
        return NameNormalizer()

    @pytest.mark.parametrize(
        "name,dialect,expected",
        [
            ("className", Dialect.REACT, "class"),
            ("htmlFor", Dialect.REACT, "for"),
            ("modelValue", Dialect.VUE, "value"),
            ("v-model", Dialect.VUE, "value"),
            (":model-value", Dialect.VUE, "value"),
            (":disabled", Dialect.VUE, "disabled"),
            ("max-length", Dialect.VUE, "maxLength"),
            ("placeholder", Dialect.INTACT, "placeholder"),
        ],
    )
    def test_semantic_prop_name(self, normalizer, name, dialect, expected):
        assert normalizer.semantic_prop_name(name, dialect) == expected

    def test_binding_prefix_only_stripped_for_vue(self, normalizer):
        """Test ':' is only a binding prefix in the vue dialect."""
        assert normalizer.semantic_prop_name(":odd", Dialect.REACT) == ":odd"

    @pytest.mark.parametrize(
        "name,dialect,expected",
        [
            ("onClick", Dialect.REACT, "click"),
            ("onMouseEnter", Dialect.REACT, "mouseenter"),
            ("@click", Dialect.VUE, "click"),
            ("v-on:change", Dialect.VUE, "change"),
            ("mouse-enter", Dialect.VUE, "mouseenter"),
            ("ev-click", Dialect.INTACT, "click"),
            ("click", Dialect.INTACT, "click"),
        ],
    )
    def test_semantic_event_name(self, normalizer, name, dialect, expected):
        assert normalizer.semantic_event_name(name, dialect) == expected

    def test_semantic_slot_name(self, normalizer):
        assert normalizer.semantic_slot_name("children") == "default"
        assert normalizer.semantic_slot_name("content") == "default"
        assert normalizer.semantic_slot_name("footer") == "footer"


class TestCaseHelpers:
    """Tests for case conversion helpers."""

    def test_to_camel_case(self):
        assert to_camel_case("max-length") == "maxLength"
        assert to_camel_case("on_row_click") == "onRowClick"
        assert to_camel_case("alreadyCamel") == "alreadyCamel"

    def test_to_pascal_case(self):
        assert to_pascal_case("date_picker") == "DatePicker"
        assert to_pascal_case("el-button") == "ElButton"
        assert to_pascal_case("button") == "Button"


class TestUnifyTypes:
    """Tests for cross-dialect type unification."""

    def test_agreeing_types(self):
        assert unify_types(["string", "string"]) == "string"

    def test_missing_types_are_ignored(self):
        assert unify_types([None, "boolean"]) == "boolean"

    def test_non_string_types_are_ignored(self):
        assert unify_types([5, "string"]) == "string"
        assert unify_types([5]) is None

    def test_no_declared_type(self):
        assert unify_types([None, None]) is None
        assert unify_types([]) is None

    def test_priority_order(self):
        """Test string beats number beats boolean on disagreement."""
        assert unify_types(["number", "string"]) == "string"
        assert unify_types(["boolean", "number"]) == "number"

    def test_unrelated_types_fall_back_to_any(self):
        assert unify_types(["Foo", "Bar"]) == "any"
