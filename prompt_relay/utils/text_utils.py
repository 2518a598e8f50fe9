"""
Text processing utilities for Prompt Relay.
"""

import re


# Opening fence; a language tag (e.g. ```json) only counts when a line break follows it
_LEADING_FENCE = re.compile(r"^```(?:[A-Za-z0-9_+.-]+[ \t]*\r?\n|[ \t]*\r?\n?)")
_TRAILING_FENCE = re.compile(r"\r?\n?[ \t]*```$")


def strip_code_fences(text: str) -> str:
    """
    Remove a markdown code fence wrapped around generated content.

    Only a fence at the very start and one at the very end are removed;
    backticks inside the content are left alone.

    Args:
        text: Generated text, possibly wrapped in ```lang ... ```

    Returns:
        The inner content, stripped of surrounding whitespace
    """
    if not text:
        return ""

    stripped = text.strip()
    stripped = _LEADING_FENCE.sub("", stripped, count=1)
    stripped = _TRAILING_FENCE.sub("", stripped, count=1)
    return stripped.strip()


def truncate_text(text: str, max_length: int = 200, suffix: str = "...") -> str:
    """
    Truncate text for log output.

    Args:
        text: Text to truncate
        max_length: Maximum length including the suffix
        suffix: Marker appended when text is cut

    Returns:
        Truncated text
    """
    if not text or len(text) <= max_length:
        return text or ""
    return text[: max(max_length - len(suffix), 0)] + suffix
