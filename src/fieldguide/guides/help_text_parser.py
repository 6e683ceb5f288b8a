"""Free-text help parser.

Turns an unstructured help string into a Guide: a title, numbered steps, an
optional URL and example, and a sensitivity flag. Step extraction is an
ordered chain of strategies; each later strategy is looser than the one
before it, and the first one that yields at least one step wins.
"""

import logging
import re
from collections.abc import Callable
from typing import Any, Optional

from fieldguide.core.models import Guide
from fieldguide.core.security_utils import help_text_is_sensitive
from fieldguide.core.text_utils import normalize_text

logger = logging.getLogger(__name__)

StepStrategy = Callable[[str], list[str]]

# Detection gate signals
_GATE_PAREN_PATTERN = re.compile(r"\d+\)")
_GATE_STEP_PATTERN = re.compile(r"Step \d+")

TITLE_PATTERN = re.compile(r"^How to get ([^:\n]+)", re.IGNORECASE)
EXAMPLE_PATTERN = re.compile(r"Example[:\s]+([^\n]+)", re.IGNORECASE)
URL_PATTERN = re.compile(r"https?://\S+")

# "1) foo 2) bar": split in front of every number that is followed by ")"
_PAREN_SPLIT_PATTERN = re.compile(r"(?<!\d)(?=\d+\))")
_PAREN_ITEM_PATTERN = re.compile(r"^(\d+)\)\s*(.+?)(?=\s*\d+\)|\Z)", re.DOTALL)
# "Step 1: foo Step 2: bar", each step bounded by the next "Step N" or the end
_STEP_WORD_PATTERN = re.compile(r"Step\s+(\d+)[:\s]*([^\n]+?)(?=\s*Step\s+\d+|\s*\Z)", re.IGNORECASE)
# "1. foo 2. bar"
_DOTTED_ITEM_PATTERN = re.compile(r"(\d+)\.\s*([^\n]+?)(?=\s*\d+\.|\s*\Z)")
_DOTTED_GATE_PATTERN = re.compile(r"\d+\.")

_SKIPPED_LINE_PREFIXES = ("how to get", "example", "note")


def looks_step_like(help_text: Any) -> bool:
    """Detection gate: does the help text carry any step-like structure?

    Text without one of these signals is never parsed, even if splitting it
    on newlines would produce "steps".

    Examples:
        >>> looks_step_like("1) Open the dashboard 2) Copy the key")
        True
        >>> looks_step_like("Just a plain sentence.")
        False
    """
    text = normalize_text(help_text)
    if not text:
        return False
    return (
        "how to get" in text.lower()
        or "Step 1" in text
        or "1)" in text
        or "1." in text
        or bool(_GATE_PAREN_PATTERN.search(text))
        or bool(_GATE_STEP_PATTERN.search(text))
    )


def _format_step(number: str, text: str) -> str:
    return f"Step {number}: {text}"


def extract_paren_numbered_steps(text: str) -> list[str]:
    """Strategy 1: ``1) foo 2) bar``."""
    if ")" not in text:
        return []
    steps = []
    for part in _PAREN_SPLIT_PATTERN.split(text):
        match = _PAREN_ITEM_PATTERN.match(part)
        if match:
            step_text = match.group(2).strip()
            if step_text:
                steps.append(_format_step(match.group(1), step_text))
    return steps


def extract_step_word_steps(text: str) -> list[str]:
    """Strategy 2: ``Step 1: foo`` / ``Step 2 bar``."""
    if "Step" not in text:
        return []
    steps = []
    for match in _STEP_WORD_PATTERN.finditer(text):
        step_text = match.group(2).strip()
        if step_text:
            steps.append(_format_step(match.group(1), step_text))
    return steps


def extract_dotted_numbered_steps(text: str) -> list[str]:
    """Strategy 3: ``1. foo 2. bar``."""
    if not _DOTTED_GATE_PATTERN.search(text):
        return []
    steps = []
    for match in _DOTTED_ITEM_PATTERN.finditer(text):
        step_text = match.group(2).strip()
        if step_text:
            steps.append(_format_step(match.group(1), step_text))
    return steps


def extract_filtered_lines(text: str) -> list[str]:
    """Strategy 4: number every line except headings, examples and notes."""
    lines = [line.strip() for line in text.split("\n")]
    kept = [line for line in lines if line and not line.lower().startswith(_SKIPPED_LINE_PREFIXES)]
    return [_format_step(str(index), line) for index, line in enumerate(kept, start=1)]


def extract_raw_lines(text: str) -> list[str]:
    """Strategy 5: number every non-blank line except a "How to get" heading.

    Step numbers are line positions among the non-blank lines, so a skipped
    heading leaves a gap. Only an unindented heading is skipped.
    """
    lines = [line for line in text.split("\n") if line.strip()]
    return [
        _format_step(str(index), line.strip())
        for index, line in enumerate(lines, start=1)
        if not line.lower().startswith("how to get")
    ]


# Order matters: stricter formats first
STEP_STRATEGIES: tuple[tuple[str, StepStrategy], ...] = (
    ("paren_numbered", extract_paren_numbered_steps),
    ("step_word", extract_step_word_steps),
    ("dotted_numbered", extract_dotted_numbered_steps),
    ("filtered_lines", extract_filtered_lines),
    ("raw_lines", extract_raw_lines),
)


class HelpTextParser:
    """Parse free help text into a Guide."""

    def __init__(self, strategies: tuple[tuple[str, StepStrategy], ...] = STEP_STRATEGIES):
        self.strategies = strategies

    def accepts(self, help_text: Any) -> bool:
        return looks_step_like(help_text)

    def parse(self, help_text: Any, field_label: Any) -> Optional[Guide]:
        """Parse help text into a Guide.

        Args:
            help_text: Raw help string from the field definition
            field_label: Display label, used for the title when the text has none

        Returns:
            A Guide, or None when no strategy finds any step
        """
        text = normalize_text(help_text)
        if not text:
            return None

        steps, strategy_name = self._extract_steps(text)
        if not steps:
            logger.debug("No steps found in help text", extra={"phase": "help_text_parse"})
            return None

        logger.debug(
            "Help text parsed",
            extra={"phase": "help_text_parse", "strategy": strategy_name, "step_count": len(steps)},
        )

        return Guide(
            title=self._extract_title(text, normalize_text(field_label)),
            steps=tuple(steps),
            url=self._extract_url(text),
            example=self._extract_example(text),
            security_warning=help_text_is_sensitive(text),
        )

    def _extract_steps(self, text: str) -> tuple[list[str], Optional[str]]:
        for name, strategy in self.strategies:
            steps = strategy(text)
            if steps:
                return steps, name
        return [], None

    @staticmethod
    def _extract_title(text: str, field_label: str) -> str:
        match = TITLE_PATTERN.match(text)
        if match:
            subject = match.group(1).strip().rstrip("?").strip()
            if subject:
                return f"How to get {subject}?"
        return f"How to get {field_label}?"

    @staticmethod
    def _extract_example(text: str) -> Optional[str]:
        match = EXAMPLE_PATTERN.search(text)
        return match.group(1).strip() if match else None

    @staticmethod
    def _extract_url(text: str) -> Optional[str]:
        match = URL_PATTERN.search(text)
        return match.group(0) if match else None


def parse_help_text(help_text: Any, field_label: Any) -> Optional[Guide]:
    """Parse help text with the default strategy chain (no detection gate)."""
    return HelpTextParser().parse(help_text, field_label)
