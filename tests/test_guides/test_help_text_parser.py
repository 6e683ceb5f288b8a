"""Tests for the free-text help parser."""

import pytest

from fieldguide.guides.help_text_parser import (
    STEP_STRATEGIES,
    HelpTextParser,
    extract_dotted_numbered_steps,
    extract_filtered_lines,
    extract_paren_numbered_steps,
    extract_raw_lines,
    extract_step_word_steps,
    looks_step_like,
    parse_help_text,
)


@pytest.fixture
def parser() -> HelpTextParser:
    return HelpTextParser()


class TestDetectionGate:
    """Only step-like text is parsed at all."""

    @pytest.mark.parametrize(
        "text",
        [
            "How to get your token: open settings",
            "Step 1: open settings",
            "1) Open settings",
            "1. Open settings",
            "Open settings 3) copy",
            "Open settings, then Step 4",
        ],
    )
    def test_step_like(self, text: str) -> None:
        assert looks_step_like(text)

    @pytest.mark.parametrize("text", ["Just a plain sentence.", "Line one\nLine two", "", None, 12])
    def test_not_step_like(self, text) -> None:
        assert not looks_step_like(text)

    def test_parser_accepts_matches_gate(self, parser: HelpTextParser) -> None:
        assert parser.accepts("1) Open")
        assert not parser.accepts("Just a plain sentence.")


class TestStepStrategies:
    """Each extraction strategy on its own."""

    def test_paren_numbered(self) -> None:
        assert extract_paren_numbered_steps("1) First 2) Second") == ["Step 1: First", "Step 2: Second"]

    def test_paren_numbered_multi_digit(self) -> None:
        text = "9) Nine 10) Ten"
        assert extract_paren_numbered_steps(text) == ["Step 9: Nine", "Step 10: Ten"]

    def test_paren_numbered_without_parens(self) -> None:
        assert extract_paren_numbered_steps("Step 1: Do A\nStep 2: Do B") == []

    def test_step_word(self) -> None:
        assert extract_step_word_steps("Step 1: Do A\nStep 2: Do B") == ["Step 1: Do A", "Step 2: Do B"]

    def test_step_word_on_one_line(self) -> None:
        assert extract_step_word_steps("Step 1: Open Step 2: Copy") == ["Step 1: Open", "Step 2: Copy"]

    def test_dotted_numbered(self) -> None:
        assert extract_dotted_numbered_steps("1. Open settings 2. Copy key") == [
            "Step 1: Open settings",
            "Step 2: Copy key",
        ]

    def test_filtered_lines_skip_headings_examples_and_notes(self) -> None:
        text = "How to get access:\nOpen the dashboard\nNote: admins only\n\nCopy the value\nExample: abc"
        assert extract_filtered_lines(text) == ["Step 1: Open the dashboard", "Step 2: Copy the value"]

    def test_raw_lines_only_skip_heading(self) -> None:
        text = "How to get it\nExample: abc\n\nNote: x"
        assert extract_raw_lines(text) == ["Step 2: Example: abc", "Step 3: Note: x"]

    def test_raw_lines_keep_positions_after_heading(self) -> None:
        assert extract_raw_lines("How to get X\nNote: y") == ["Step 2: Note: y"]

    def test_raw_lines_indented_heading_is_a_step(self) -> None:
        assert extract_raw_lines("  How to get X\nNote: y") == ["Step 1: How to get X", "Step 2: Note: y"]

    def test_strategy_order(self) -> None:
        names = [name for name, _ in STEP_STRATEGIES]
        assert names == ["paren_numbered", "step_word", "dotted_numbered", "filtered_lines", "raw_lines"]


class TestParse:
    """Full parse into a Guide."""

    def test_paren_numbered_steps_exact(self, parser: HelpTextParser) -> None:
        guide = parser.parse("1) First 2) Second", "Field")
        assert guide.steps == ("Step 1: First", "Step 2: Second")

    def test_step_word_used_when_paren_finds_nothing(self, parser: HelpTextParser) -> None:
        guide = parser.parse("Step 1: Do A\nStep 2: Do B", "Field")
        assert guide.steps == ("Step 1: Do A", "Step 2: Do B")

    def test_title_from_text(self, parser: HelpTextParser) -> None:
        guide = parser.parse("How to get your API token: 1) Open settings 2) Copy token", "Token")
        assert guide.title == "How to get your API token?"
        assert guide.steps == ("Step 1: Open settings", "Step 2: Copy token")

    def test_title_question_mark_not_doubled(self, parser: HelpTextParser) -> None:
        guide = parser.parse("How to get a key?\n1) Open 2) Copy", "Key")
        assert guide.title == "How to get a key?"

    def test_title_falls_back_to_label(self, parser: HelpTextParser) -> None:
        assert parser.parse("1) a 2) b", "Webhook").title == "How to get Webhook?"

    def test_url_extracted(self, parser: HelpTextParser) -> None:
        guide = parser.parse("Step 1: Go to https://example.com/keys\nStep 2: Copy", "Key")
        assert guide.url == "https://example.com/keys"

    def test_example_extracted(self, parser: HelpTextParser) -> None:
        guide = parser.parse("1) Open page 2) Copy ID\nExample: 12345", "ID")
        assert guide.example == "12345"

    def test_no_url_or_example(self, parser: HelpTextParser) -> None:
        guide = parser.parse("1) Open 2) Copy", "ID")
        assert guide.url is None
        assert guide.example is None

    def test_sensitive_text_flagged(self, parser: HelpTextParser) -> None:
        assert parser.parse("1) Open 2) Copy the token", "X").security_warning is True

    def test_plain_text_flag_is_explicit_false(self, parser: HelpTextParser) -> None:
        assert parser.parse("1) Open the dashboard 2) Copy the ID", "X").security_warning is False

    def test_filtered_lines_fallback(self, parser: HelpTextParser) -> None:
        guide = parser.parse("How to get access:\nOpen the dashboard\nNote: admins only\nCopy the value", "X")
        assert guide.title == "How to get access?"
        assert guide.steps == ("Step 1: Open the dashboard", "Step 2: Copy the value")

    def test_raw_lines_fallback(self, parser: HelpTextParser) -> None:
        guide = parser.parse("How to get it\nExample: abc", "X")
        assert guide.steps == ("Step 2: Example: abc",)
        assert guide.example == "abc"

    def test_no_structure_found(self, parser: HelpTextParser) -> None:
        assert parser.parse("How to get it", "X") is None

    @pytest.mark.parametrize("text", ["", None, 5])
    def test_empty_input(self, parser: HelpTextParser, text) -> None:
        assert parser.parse(text, "X") is None

    def test_non_string_label(self, parser: HelpTextParser) -> None:
        assert parser.parse("1) a", None).title == "How to get ?"

    def test_custom_strategies(self) -> None:
        parser = HelpTextParser(strategies=(("raw_lines", extract_raw_lines),))
        guide = parser.parse("1) First 2) Second", "X")
        assert guide.steps == ("Step 1: 1) First 2) Second",)

    def test_module_helper(self) -> None:
        assert parse_help_text("1) First 2) Second", "X").steps == ("Step 1: First", "Step 2: Second")


class TestProseEdgeCases:
    """Prose that mentions "Step" without real numbering.

    The output quality here is deliberately unspecified; parsing must simply
    not fail.
    """

    @pytest.mark.parametrize(
        "text",
        [
            "How to get this: Step carefully through the wizard.",
            "Step 1 is optional. Step carefully after that.",
            "Step 2 only, then nothing else",
        ],
    )
    def test_parse_does_not_fail(self, parser: HelpTextParser, text: str) -> None:
        guide = parser.parse(text, "Field")
        assert guide is None or guide.has_steps()
