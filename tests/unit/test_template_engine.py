"""Unit tests for the template engine: rendering, validation and catalog."""

import pytest

from docstudio.core.exceptions import TemplateDepthError, TemplateNotFoundError
from docstudio.engine.catalog import (
    NDA_TEMPLATE,
    TEMPLATES,
    get_categories,
    get_template_by_id,
    get_templates_by_category,
    search_templates,
)
from docstudio.engine.models import Section, ShowIf, Template, Variable, VariableValidation
from docstudio.engine.renderer import PLACEHOLDER, TemplateRenderer, is_truthy, process_template, stringify
from docstudio.engine.validation import (
    default_values,
    validate_variables,
    visible_sections,
    visible_variables,
)


NESTED = "{{#if a}}{{#if b}}X{{else}}Y{{/if}}{{else}}Z{{/if}}"
GREETING = "Hello {{#if vip}}VIP {{/if}}{{name}}!"


# =============================================================================
# Renderer Tests
# =============================================================================


class TestTemplateRenderer:
    """Test suite for TemplateRenderer."""

    @pytest.fixture
    def renderer(self):
        """Create a renderer with the default depth limit."""
        return TemplateRenderer()

    # =========================================================================
    # Substitution Tests
    # =========================================================================

    def test_substitutes_known_values(self, renderer):
        """Test that every occurrence of a reference is replaced."""
        result = renderer.render("{{name}} and {{name}} at {{ place }}", {"name": "Ann", "place": "Home"})
        assert result == "Ann and Ann at Home"

    def test_missing_value_becomes_placeholder(self, renderer):
        """Test that unknown references render as the placeholder."""
        assert renderer.render("Dear {{recipient}},", {}) == f"Dear {PLACEHOLDER},"
        assert PLACEHOLDER == "[___]"

    def test_values_are_not_rescanned(self, renderer):
        """Test that markup inside an inserted value is kept literally."""
        result = renderer.render("{{a}}", {"a": "{{b}}", "b": "nope"})
        assert result == "{{b}}"

    @pytest.mark.parametrize(
        "template,values",
        [
            (NESTED, {"a": True, "b": False}),
            (GREETING, {"vip": True}),
            ("{{#if x}}{{y}}{{else}}none{{/if}} {{z}}", {"x": 1, "y": "Y"}),
        ],
    )
    def test_rendering_is_idempotent(self, renderer, template, values):
        """Test that rendering resolved output again changes nothing."""
        once = renderer.render(template, values)
        assert renderer.render(once, values) == once
        assert renderer.render(once, {}) == once

    def test_text_without_markup_is_unchanged(self, renderer):
        """Test that plain text passes through byte for byte."""
        text = "# Title\n\n- one\n- two { not a tag }\n"
        assert renderer.render(text, {"x": 1}) == text

    # =========================================================================
    # Conditional Tests
    # =========================================================================

    def test_nested_conditionals(self, renderer):
        """Test that inner blocks resolve inside the selected outer branch."""
        assert renderer.render(NESTED, {"a": True, "b": False}) == "Y"
        assert renderer.render(NESTED, {"a": True, "b": True}) == "X"
        assert renderer.render(NESTED, {"a": False}) == "Z"

    def test_greeting_scenarios(self, renderer):
        """Test the optional prefix with present and missing names."""
        assert renderer.render(GREETING, {"name": "Ann", "vip": True}) == "Hello VIP Ann!"
        assert renderer.render(GREETING, {"name": "Ann", "vip": False}) == "Hello Ann!"
        assert renderer.render(GREETING, {"vip": True}) == "Hello VIP [___]!"

    def test_falsy_values_select_else_branch(self, renderer):
        """Test that empty string, zero and missing values are falsy."""
        template = "{{#if x}}yes{{else}}no{{/if}}"
        for value in ("", 0, 0.0, False):
            assert renderer.render(template, {"x": value}) == "no"
        assert renderer.render(template, {}) == "no"
        assert renderer.render(template, {"x": "false"}) == "yes"
        assert renderer.render(template, {"x": 3}) == "yes"

    def test_stray_markup_is_dropped(self, renderer):
        """Test that unmatched else and /if tags vanish from the output."""
        assert renderer.render("a{{else}}b{{/if}}c", {}) == "abc"
        assert renderer.render("x{{#unless y}}z{{/unless}}", {}) == "xz"

    @pytest.mark.parametrize(
        "tag",
        ["{{#if}}", "{{#if a b}}", "{{ #if  }}", "{{/if a}}", "{{#each items}}", "{{else if c}}", "{{/}}"],
    )
    def test_malformed_block_tags_are_dropped(self, renderer, tag):
        """Test that block tags that do not parse never reach the output."""
        assert renderer.render(f"a{tag}b", {"a": True, "c": True}) == "ab"
        assert renderer.render(f"{{{{#if a}}}}y{tag}z{{{{/if}}}}|k", {"a": False}) == "|k"

    def test_malformed_tag_does_not_hide_names(self, renderer):
        """Test that names starting with else or if still substitute."""
        assert renderer.render("{{elsewhere}} {{iffy}}", {"elsewhere": "E", "iffy": "I"}) == "E I"

    def test_unterminated_block_keeps_content(self, renderer):
        """Test that an unclosed block keeps its text without the tag."""
        assert renderer.render("start {{#if flag}}middle", {"flag": False}) == "start middle"

    def test_depth_limit(self):
        """Test that nesting beyond max_depth raises TemplateDepthError."""
        renderer = TemplateRenderer(max_depth=2)
        ok = "{{#if a}}{{#if b}}x{{/if}}{{/if}}"
        too_deep = "{{#if a}}{{#if b}}{{#if c}}x{{/if}}{{/if}}{{/if}}"

        assert renderer.render(ok, {"a": True, "b": True}) == "x"
        with pytest.raises(TemplateDepthError) as exc_info:
            renderer.render(too_deep, {})
        assert exc_info.value.max_depth == 2

    def test_deep_nesting_within_limit(self):
        """Test that a long chain of nested blocks renders in one pass."""
        depth = 50
        template = "".join(f"{{{{#if v{i}}}}}" for i in range(depth)) + "core" + "{{/if}}" * depth
        values = {f"v{i}": True for i in range(depth)}
        assert process_template(template, values) == "core"

    def test_references(self, renderer):
        """Test that both substitutions and conditions count as references."""
        refs = renderer.references("{{#if a}}{{b}}{{else}}{{c}}{{/if}} {{b}}")
        assert refs == {"a", "b", "c"}

    # =========================================================================
    # Value Helpers
    # =========================================================================

    def test_stringify(self):
        """Test the text produced for each value type."""
        assert stringify(True) == "true"
        assert stringify(False) == "false"
        assert stringify(5.0) == "5"
        assert stringify(2.5) == "2.5"
        assert stringify(120000) == "120000"

    def test_is_truthy(self):
        """Test truthiness rules for template conditions."""
        assert is_truthy(None) is False
        assert is_truthy("text") is True
        assert is_truthy(-1) is True


# =============================================================================
# Validation Tests
# =============================================================================


def _variable(**kwargs) -> Variable:
    base = {"name": "field", "label": "Field"}
    base.update(kwargs)
    return Variable(**base)


class TestValidateVariables:
    """Test suite for validate_variables."""

    def test_required_missing(self):
        """Test that a missing required value produces an error."""
        result = validate_variables([_variable(required=True)], {})
        assert result.is_valid is False
        assert result.errors == {"field": "Field is required"}

    def test_required_empty_string(self):
        """Test that an empty string counts as missing."""
        result = validate_variables([_variable(required=True)], {"field": ""})
        assert "field" in result.errors

    def test_required_present(self):
        """Test that a present value passes."""
        result = validate_variables([_variable(required=True)], {"field": "x"})
        assert result.is_valid is True
        assert result.errors == {}

    def test_required_false_is_present(self):
        """Test that False is a value, not an absence."""
        variable = _variable(type="boolean", required=True)
        assert validate_variables([variable], {"field": False}).is_valid is True

    def test_optional_absent_skips_constraints(self):
        """Test that optional absent values ignore all other rules."""
        variable = _variable(validation=VariableValidation(pattern=r"^\d+$", min_length=5, min=3))
        assert validate_variables([variable], {}).is_valid is True

    def test_pattern(self):
        """Test that a non-matching string reports an invalid format."""
        variable = _variable(label="ZIP", validation=VariableValidation(pattern=r"^\d{5}$"))
        assert validate_variables([variable], {"field": "1234a"}).errors == {"field": "ZIP format is invalid"}
        assert validate_variables([variable], {"field": "12345"}).is_valid

    def test_numeric_bounds(self):
        """Test min and max messages for numbers."""
        variable = _variable(label="Term", type="number", validation=VariableValidation(min=1, max=10))
        assert validate_variables([variable], {"field": 0}).errors["field"] == "Term must be at least 1"
        assert validate_variables([variable], {"field": 11}).errors["field"] == "Term must be at most 10"
        assert validate_variables([variable], {"field": 10}).is_valid

    def test_length_bounds(self):
        """Test min_length and max_length messages for strings."""
        variable = _variable(label="Purpose", validation=VariableValidation(min_length=3, max_length=5))
        assert validate_variables([variable], {"field": "ab"}).errors["field"] == (
            "Purpose must be at least 3 characters"
        )
        assert validate_variables([variable], {"field": "abcdef"}).errors["field"] == (
            "Purpose must be at most 5 characters"
        )

    def test_pattern_takes_precedence_over_length(self):
        """Test that only the first failing check is reported."""
        variable = _variable(label="Code", validation=VariableValidation(pattern=r"^[A-Z]+$", min_length=4))
        assert validate_variables([variable], {"field": "ab"}).errors["field"] == "Code format is invalid"

    def test_collects_every_error(self):
        """Test that all failing variables are reported together."""
        variables = [_variable(name="a", label="A", required=True), _variable(name="b", label="B", required=True)]
        result = validate_variables(variables, {})
        assert set(result.errors) == {"a", "b"}


class TestVisibility:
    """Test suite for section visibility and default values."""

    @pytest.fixture
    def template(self):
        """A template with one conditional section."""
        return Template(
            id="t",
            name="T",
            description="d",
            category="nda",
            content="",
            sections=[
                Section(id="base", title="Base", variables=[Variable(name="flag", label="Flag", type="boolean")]),
                Section(
                    id="extra",
                    title="Extra",
                    show_if=ShowIf(variable_id="flag", value=True),
                    variables=[Variable(name="months", label="Months", type="number", default_value=12)],
                ),
            ],
        )

    def test_section_shown_when_predicate_holds(self, template):
        """Test that show_if compares the current value."""
        assert [s.id for s in visible_sections(template, {"flag": True})] == ["base", "extra"]
        assert [s.id for s in visible_sections(template, {"flag": False})] == ["base"]
        assert [s.id for s in visible_sections(template, {})] == ["base"]

    def test_int_does_not_match_bool(self, template):
        """Test that 1 does not satisfy a show_if expecting True."""
        assert [s.id for s in visible_sections(template, {"flag": 1})] == ["base"]

    def test_visible_variables(self, template):
        """Test that hidden sections contribute no variables."""
        assert [v.name for v in visible_variables(template, {"flag": False})] == ["flag"]

    def test_default_values(self, template):
        """Test boolean and declared defaults with overrides."""
        assert default_values(template) == {"flag": False, "months": 12}
        assert default_values(template, {"flag": True, "other": "x"}) == {
            "flag": True,
            "months": 12,
            "other": "x",
        }


# =============================================================================
# Catalog Tests
# =============================================================================


class TestCatalog:
    """Test suite for the built-in template catalog."""

    @pytest.mark.parametrize("template", TEMPLATES, ids=lambda t: t.id)
    def test_every_reference_is_declared(self, template):
        """Test that template bodies only reference declared variables."""
        declared = {v.name for v in template.variables}
        assert TemplateRenderer().references(template.content) <= declared

    @pytest.mark.parametrize("template", TEMPLATES, ids=lambda t: t.id)
    def test_variable_names_unique(self, template):
        """Test that variable names are unique within a template."""
        names = [v.name for v in template.variables]
        assert len(names) == len(set(names))

    def test_get_template_by_id(self):
        """Test lookup by id and the missing-id error."""
        assert get_template_by_id("nda-mutual") is NDA_TEMPLATE
        with pytest.raises(TemplateNotFoundError):
            get_template_by_id("missing")

    def test_categories(self):
        """Test that only categories with templates are listed."""
        categories = get_categories()
        assert [c["id"] for c in categories] == ["employment", "nda", "services"]
        assert all(c["count"] == 1 for c in categories)
        assert [t.id for t in get_templates_by_category("lease")] == []

    def test_search(self):
        """Test case-insensitive search across name, description and tags."""
        assert [t.id for t in search_templates("NON-DISCLOSURE")] == ["nda-mutual"]
        assert [t.id for t in search_templates("freelance")] == ["contractor-agreement"]
        assert search_templates("zzz") == []

    def test_nda_renders_completely(self):
        """Test that a filled NDA has no markup or placeholders left."""
        values = default_values(
            NDA_TEMPLATE,
            {
                "party_a_name": "Acme Inc.",
                "party_a_type": "corporation",
                "party_a_state": "Delaware",
                "party_b_name": "Beta LLC",
                "party_b_type": "llc",
                "party_b_state": "California",
                "effective_date": "2024-01-15",
                "purpose": "evaluating a potential partnership",
                "include_non_solicit": True,
                "governing_state": "Delaware",
            },
        )
        assert validate_variables(visible_variables(NDA_TEMPLATE, values), values).is_valid

        content = process_template(NDA_TEMPLATE.content, values)
        assert "{{" not in content
        assert PLACEHOLDER not in content
        assert "Non-Solicitation" in content
        assert "12 months" in content

        without = process_template(NDA_TEMPLATE.content, {**values, "include_non_solicit": False})
        assert "Non-Solicitation" not in without
