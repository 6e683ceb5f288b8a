"""Tests for the pydantic data models."""

import pytest
from pydantic import ValidationError

from fieldguide.core.models import FieldDescriptor, Guide, GuideResolution, NodeUsageGuide


class TestFieldDescriptor:
    """Null-safe construction of field descriptors."""

    def test_defaults_are_empty_strings(self) -> None:
        field = FieldDescriptor()
        assert field.key == ""
        assert field.label == ""
        assert field.type == ""
        assert field.placeholder == ""
        assert field.node_type == ""
        assert field.help_text == ""

    def test_non_string_values_become_empty(self) -> None:
        """None, numbers, lists and dicts all read as empty text."""
        field = FieldDescriptor.model_validate(
            {"key": None, "label": 42, "type": ["text"], "placeholder": {"a": 1}, "nodeType": 3.5}
        )
        assert field.key == ""
        assert field.label == ""
        assert field.type == ""
        assert field.placeholder == ""
        assert field.node_type == ""

    def test_camel_case_aliases(self) -> None:
        field = FieldDescriptor.model_validate({"nodeType": "slack", "helpText": "1) Open"})
        assert field.node_type == "slack"
        assert field.help_text == "1) Open"

    def test_snake_case_names(self) -> None:
        field = FieldDescriptor(node_type="slack", help_text="Step 1: Open")
        assert field.node_type == "slack"
        assert field.help_text == "Step 1: Open"

    def test_unknown_keys_ignored(self) -> None:
        field = FieldDescriptor.model_validate({"key": "apiKey", "required": True})
        assert field.key == "apiKey"

    def test_frozen(self) -> None:
        field = FieldDescriptor(key="apiKey")
        with pytest.raises(ValidationError):
            field.key = "other"

    def test_coerce_passes_descriptor_through(self) -> None:
        field = FieldDescriptor(key="apiKey")
        assert FieldDescriptor.coerce(field) is field

    def test_coerce_mapping_drops_non_string_keys(self) -> None:
        field = FieldDescriptor.coerce({1: "ignored", "label": "API Key"})
        assert field.label == "API Key"

    @pytest.mark.parametrize("value", [None, 42, "apiKey", ["key"], object()])
    def test_coerce_anything_else_is_empty(self, value) -> None:
        assert FieldDescriptor.coerce(value) == FieldDescriptor()


class TestGuide:
    """Guide model behavior."""

    def test_steps_from_text_block_keep_blank_lines(self) -> None:
        guide = Guide(title="T", steps="Step 1: A\n\nStep 2: B")
        assert guide.steps == ("Step 1: A", "", "Step 2: B")

    def test_steps_from_list(self) -> None:
        guide = Guide(title="T", steps=["Step 1: A", "Step 2: B"])
        assert guide.steps == ("Step 1: A", "Step 2: B")
        assert guide.has_steps()

    def test_no_steps(self) -> None:
        assert not Guide(title="T").has_steps()

    def test_security_warning_unset_is_none(self) -> None:
        assert Guide(title="T").security_warning is None

    def test_security_warning_alias(self) -> None:
        guide = Guide.model_validate({"title": "T", "steps": ["a"], "securityWarning": True})
        assert guide.security_warning is True

    def test_to_dict_uses_camel_case_and_drops_none(self) -> None:
        guide = Guide(title="T", steps=["a", ""], security_warning=False)
        assert guide.to_dict() == {"title": "T", "steps": ["a", ""], "securityWarning": False}

    def test_to_dict_includes_url_and_example(self) -> None:
        guide = Guide(title="T", steps=["a"], url="https://example.com", example="abc")
        data = guide.to_dict()
        assert data["url"] == "https://example.com"
        assert data["example"] == "abc"
        assert "securityWarning" not in data


class TestGuideResolution:
    """Serialized resolution shape."""

    def test_to_dict(self) -> None:
        resolution = GuideResolution(
            guide=Guide(title="How to get Host?", steps=["Step 1: a"]),
            question_label="How to get Host?",
            source="generator",
            category="host",
            security_warning=False,
        )
        assert resolution.to_dict() == {
            "guide": {"title": "How to get Host?", "steps": ["Step 1: a"]},
            "questionLabel": "How to get Host?",
            "source": "generator",
            "category": "host",
            "securityWarning": False,
        }

    def test_unknown_source_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GuideResolution(guide=Guide(title="T", steps=["a"]), question_label="T", source="somewhere")


class TestNodeUsageGuide:
    def test_to_dict_lists(self) -> None:
        usage = NodeUsageGuide(overview="Does things", inputs=["a"], outputs=["b"], tips=["c"])
        assert usage.to_dict() == {"overview": "Does things", "inputs": ["a"], "outputs": ["b"], "tips": ["c"]}
