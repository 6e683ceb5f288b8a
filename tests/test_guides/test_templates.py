"""Tests for category template rendering."""

import pytest

from fieldguide.core.exceptions import TemplateRenderError
from fieldguide.guides.templates import (
    fill_placeholders,
    load_templates,
    render_template,
    required_variables,
    template_names,
)


class TestRenderTemplate:
    """Rendering named templates into guides."""

    def test_generic_template(self) -> None:
        guide = render_template("generic", label="Foo", field_type="text")
        assert guide.title == "How to get Foo?"
        assert "Field Type: text" in guide.steps
        assert guide.security_warning is None

    def test_blank_lines_kept(self) -> None:
        guide = render_template("generic", label="Foo", field_type="text")
        assert "" in guide.steps

    def test_missing_variable(self) -> None:
        with pytest.raises(TemplateRenderError) as exc_info:
            render_template("generic", label="Foo")
        assert exc_info.value.missing == ["field_type"]
        assert "generic" in str(exc_info.value)

    def test_extra_variables_ignored(self) -> None:
        guide = render_template("temperature", label="unused")
        assert guide.title == "How to set Temperature?"

    def test_literal_expressions_untouched(self) -> None:
        guide = render_template("expression", label="Value")
        assert "Step 2: Format: {{input.fieldName}} or {{$json.fieldName}}" in guide.steps
        assert guide.example == "{{input.userName}}"

    def test_substituted_values_not_expanded_again(self) -> None:
        guide = render_template("generic", label="{{field_type}}", field_type="text")
        assert guide.title == "How to get {{field_type}}?"

    def test_empty_optional_value_becomes_none(self) -> None:
        guide = render_template(
            "documentation_url",
            label="Docs",
            doc_url="",
            doc_target="the documentation URL",
            service="the service's",
        )
        assert guide.url is None
        assert guide.example is None
        assert guide.steps[0] == "Step 1: Go to the documentation URL"

    def test_explicit_security_flag(self) -> None:
        assert render_template("slack_bot_token").security_warning is True

    def test_unknown_template(self) -> None:
        with pytest.raises(KeyError):
            render_template("no_such_template")


class TestTemplateData:
    """The packaged template file."""

    def test_every_template_renders(self) -> None:
        for name in template_names():
            variables = {var: "x" for var in required_variables(load_templates()[name])}
            guide = render_template(name, **variables)
            assert guide.title, name
            assert guide.has_steps(), name

    def test_required_variables(self) -> None:
        assert required_variables(load_templates()["resource_id"]) == {
            "resource",
            "resource_lower",
            "resource_key",
            "example",
        }

    def test_fill_placeholders_leaves_unknown_names(self) -> None:
        assert fill_placeholders("{{a}} and {{b}}", {"a": "1"}) == "1 and {{b}}"
