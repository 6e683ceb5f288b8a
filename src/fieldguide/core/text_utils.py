"""Null-safe text helpers shared by every guide source.

Field descriptors come straight from node schemas, so any attribute may be
missing, ``None`` or something other than a string. Keyword matching in the
parser, generator, resolver and security checks reads text through these
helpers so that such values read as ``""``.
"""

from typing import Any


def normalize_text(value: Any) -> str:
    """Return ``value`` if it is a string, otherwise an empty string.

    Examples:
        >>> normalize_text("API Key")
        'API Key'
        >>> normalize_text(None)
        ''
        >>> normalize_text(42)
        ''
    """
    return value if isinstance(value, str) else ""


def lower_text(value: Any) -> str:
    """Lower-case ``value`` after null-safe normalization."""
    return normalize_text(value).lower()


def contains_any(haystack: str, needles: tuple[str, ...] | list[str]) -> bool:
    """Check whether any of ``needles`` occurs in ``haystack``."""
    return any(needle in haystack for needle in needles)
