"""Security keyword detection for guides.

Two independent signals decide whether a guide carries a security warning:
the guide source's own flag, and a coarser pass over the resolved title (and
generator category) implemented here. They may disagree.
"""

from typing import Optional

from fieldguide.core.text_utils import lower_text

# Substrings in a resolved title/category that imply the value is sensitive
SENSITIVE_TITLE_KEYWORDS = (
    "api key",
    "token",
    "credential",
    "secret",
    "password",
)

# Substrings in free help text that make the parsed guide sensitive
SENSITIVE_HELP_TEXT_KEYWORDS = (
    "secure",
    "secret",
    "token",
    "key",
)


def infer_security_warning(title: str, category: Optional[str] = None) -> bool:
    """Infer sensitivity from the text of a resolved guide.

    Args:
        title: The resolved guide title
        category: Optional generator category name; underscores read as spaces

    Returns:
        True if any sensitive keyword appears (case-insensitive)

    Examples:
        >>> infer_security_warning("How to get Gemini API Key?")
        True
        >>> infer_security_warning("How to get Host?", category="host")
        False
        >>> infer_security_warning("How to get Port?", category="api_key")
        True
    """
    text = lower_text(title)
    if category:
        text = f"{text} {category.replace('_', ' ').lower()}"
    return any(keyword in text for keyword in SENSITIVE_TITLE_KEYWORDS)


def help_text_is_sensitive(help_text: str) -> bool:
    """Check free help text for words that suggest a secret value."""
    lowered = lower_text(help_text)
    return any(keyword in lowered for keyword in SENSITIVE_HELP_TEXT_KEYWORDS)


def merge_security_warning(explicit: Optional[bool], title: str, category: Optional[str] = None) -> bool:
    """Final security flag: the source's explicit value wins, otherwise infer from text."""
    if explicit is not None:
        return explicit
    return infer_security_warning(title, category)
