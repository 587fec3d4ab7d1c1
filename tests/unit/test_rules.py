"""Unit tests for composability, anti-pattern and usage-pattern rules."""

from component_knowledge.alignment import CrossDialectAligner
from component_knowledge.dialects import Dialect
from component_knowledge.manifest import (
    RuleType,
    Severity,
    composability_rules,
    detect_anti_patterns,
    extract_usage_patterns,
)
from component_knowledge.models import ComponentDefinition, PropDefinition


class TestComposabilityRules:
    def test_known_categories(self):
        assert composability_rules("form-control")[0].type == RuleType.REQUIRES_PARENT
        assert composability_rules("form")[0].target == "FormItem"
        assert composability_rules("feedback")[0].type == RuleType.FORBIDS_CHILD
        assert composability_rules("navigation")[0].target == "MenuItem"

    def test_unknown_category(self):
        assert composability_rules("general") == ()


class TestDetectAntiPatterns:
    """Tests for naming and boolean-prop anti-patterns."""

    def test_sample_findings(self, sample_definitions, aligned):
        found = detect_anti_patterns(sample_definitions, aligned)

        assert [a.id for a in found] == [
            "prop-boolean-Button-disabled",
            "naming-vue-el-button",
            "naming-vue-el-input",
            "naming-vue-el-form",
            "prop-boolean-Modal-visible",
            "naming-vue-el-dialog",
        ]

    def test_naming_anti_pattern(self, sample_definitions, aligned):
        naming = next(
            a
            for a in detect_anti_patterns(sample_definitions, aligned)
            if a.id == "naming-vue-el-button"
        )

        assert naming.severity == Severity.WARNING
        assert naming.bad_example == "el-button"
        assert naming.good_example == "ElButton"
        assert naming.components == ("Button",)
        assert naming.dialect == Dialect.VUE

    def test_boolean_prop_anti_pattern(self, sample_definitions, aligned):
        boolean = next(
            a
            for a in detect_anti_patterns(sample_definitions, aligned)
            if a.id == "prop-boolean-Modal-visible"
        )

        assert boolean.severity == Severity.INFO
        assert boolean.bad_example == "visible: boolean"
        assert boolean.good_example == "isVisible: boolean"
        assert boolean.components == ("Modal",)

    def test_prefixed_boolean_props_pass(self):
        definitions = [
            ComponentDefinition(
                name="KSwitch",
                dialect=Dialect.REACT,
                props=(
                    PropDefinition(name="isChecked", type="boolean"),
                    PropDefinition(name="hasIcon", type="boolean"),
                    PropDefinition(name="label", type="string"),
                ),
            )
        ]
        aligned = CrossDialectAligner().align(definitions)
        assert detect_anti_patterns(definitions, aligned) == []

    def test_ignored_duplicate_is_scanned(self):
        """Test a definition the aligner ignored as a duplicate is still checked."""
        definitions = [
            ComponentDefinition(
                name="KTag",
                dialect=Dialect.VUE,
                props=(PropDefinition(name="closable", type="string"),),
            ),
            ComponentDefinition(
                name="k_tag",
                dialect=Dialect.VUE,
                props=(PropDefinition(name="closable", type="boolean"),),
            ),
        ]
        aligner = CrossDialectAligner()
        aligned = aligner.align(definitions)

        found = detect_anti_patterns(definitions, aligned)

        assert aligner.stats.duplicates == 1
        assert [a.id for a in found] == ["naming-vue-k_tag", "prop-boolean-Tag-closable"]
        assert all(a.components == ("Tag",) for a in found)

    def test_skipped_group_is_scanned_without_component_reference(self):
        definitions = [
            ComponentDefinition(name="KButton", dialect=Dialect.REACT),
            ComponentDefinition(
                name="el-select",
                dialect=Dialect.VUE,
                props=(PropDefinition(name="", type="string"),),
            ),
        ]
        aligned = CrossDialectAligner().align(definitions)

        found = detect_anti_patterns(definitions, aligned)

        assert [c.name for c in aligned] == ["Button"]
        assert [a.id for a in found] == ["naming-vue-el-select"]
        assert found[0].components == ()

    def test_without_aligned_components_uses_canonical_names(self):
        definitions = [
            ComponentDefinition(
                name="KCheckbox",
                dialect=Dialect.REACT,
                props=(PropDefinition(name="checked", type="Boolean"),),
            )
        ]

        found = detect_anti_patterns(definitions)

        assert [a.id for a in found] == ["prop-boolean-Checkbox-checked"]
        assert found[0].components == ()

    def test_malformed_attributes_are_passed_over(self):
        definitions = [
            ComponentDefinition(
                name="KRate",
                dialect=Dialect.REACT,
                props=(
                    PropDefinition(name="half", type=5),
                    PropDefinition(name="readonly", type="boolean"),
                ),
            )
        ]

        found = detect_anti_patterns(definitions)

        assert [a.id for a in found] == ["prop-boolean-Rate-readonly"]


class TestUsagePatterns:
    def test_sample_patterns(self, aligned):
        patterns = extract_usage_patterns(aligned)

        assert [(p.id, p.components) for p in patterns] == [
            ("form-pattern", ("Button", "Input", "Form")),
            ("feedback-pattern", ("Modal", "Dialog")),
        ]
        assert patterns[0].best_practices

    def test_no_matches(self):
        definitions = [ComponentDefinition(name="KAvatar", dialect=Dialect.REACT)]
        assert extract_usage_patterns(CrossDialectAligner().align(definitions)) == []
