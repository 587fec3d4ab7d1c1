"""Unit tests for usage example generation."""

import pytest

from component_knowledge.alignment import CrossDialectAligner
from component_knowledge.dialects import Dialect
from component_knowledge.manifest import ExampleGenerator


class TestExampleGenerator:
    """Tests for minimal and extended examples."""

    @pytest.fixture
    def button(self, button_definitions):
        return CrossDialectAligner().align(button_definitions)[0]

    def test_minimal_react_example(self, button):
        examples = ExampleGenerator().generate(button, Dialect.REACT, Dialect.REACT)

        assert [e.category for e in examples] == ["minimal", "extended"]
        assert examples[0].code == "<KButton onClick={onClick} />"
        assert examples[0].dialect == Dialect.REACT

    def test_minimal_vue_example_uses_native_names(self, button):
        examples = ExampleGenerator().generate(button, Dialect.VUE, Dialect.REACT)
        assert examples[0].code == '<el-button @click="onClick" />'

    def test_extended_example_is_multiline(self, button):
        examples = ExampleGenerator().generate(button, Dialect.REACT, Dialect.REACT)
        assert examples[1].code == "<KButton\n  onClick={onClick}\n/>"

    def test_missing_implementation(self, button):
        with pytest.raises(ValueError, match="no intact implementation"):
            ExampleGenerator().generate(button, Dialect.INTACT, Dialect.REACT)

    def test_seed_from_primary_dialect(self, button):
        """Test required attributes come from the primary implementation only."""
        generator = ExampleGenerator()

        assert generator.seed(button, Dialect.REACT) == ({"click"}, False)
        assert generator.seed(button, Dialect.INTACT) == (set(), False)

    def test_default_slot_adds_children(self, aligned):
        form = next(c for c in aligned if c.name == "Form")
        examples = ExampleGenerator().generate(form, Dialect.REACT, Dialect.REACT)
        assert examples[0].code == "<KForm model={{}}>Content</KForm>"

    def test_plain_events_get_native_handler_names(self, aligned):
        button = next(c for c in aligned if c.name == "Button")
        examples = ExampleGenerator().generate(button, Dialect.VUE, Dialect.REACT)
        assert '@click="onClick"' in examples[1].code
