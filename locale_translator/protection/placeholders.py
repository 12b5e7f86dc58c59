"""
Placeholder protection for template variables.

Variables such as {{name}} are swapped for __VAR0__, __VAR1__, ... before
text goes to the translation provider and swapped back afterwards.
"""

import re
from typing import Dict, Tuple

from locale_translator.exceptions import PlaceholderMismatchError
from locale_translator.logger import get_logger

logger = get_logger(__name__)

VARIABLE_PATTERN = re.compile(r"\{\{[^{}]+\}\}")


def make_marker(index: int) -> str:
    return f"__VAR{index}__"


def protect_placeholders(text: str) -> Tuple[str, Dict[str, str]]:
    """
    Replace template variables in text with indexed markers.

    Args:
        text: The text containing {{...}} variables

    Returns:
        Tuple of (text_with_markers, token_map)
        where token_map is {"__VAR0__": "{{name}}", ...} in index order

    Example:
        >>> protect_placeholders("Hello {{name}}, you have {{count}} items")
        ('Hello __VAR0__, you have __VAR1__ items', {'__VAR0__': '{{name}}', '__VAR1__': '{{count}}'})
    """
    tokens: Dict[str, str] = {}

    def _substitute(match: re.Match) -> str:
        marker = make_marker(len(tokens))
        tokens[marker] = match.group(0)
        return marker

    protected_text = VARIABLE_PATTERN.sub(_substitute, text)

    if tokens:
        logger.debug(f"Protected {len(tokens)} variables: {text[:50]} -> {protected_text[:50]}")

    return protected_text, tokens


def restore_placeholders(text: str, tokens: Dict[str, str], strict: bool = False) -> str:
    """
    Restore original variables from markers after translation.

    Each marker is replaced once, in index order. Markers the provider dropped
    or duplicated are left as they are unless strict is set.

    Args:
        text: Translated text containing __VARn__ markers
        tokens: Mapping from markers to original variables
        strict: Raise instead of warning when markers do not match

    Returns:
        Text with markers replaced by the original variables

    Raises:
        PlaceholderMismatchError: In strict mode, if a marker is missing or repeated
    """
    if not tokens:
        return text

    missing = [marker for marker in tokens if marker not in text]
    repeated = [marker for marker in tokens if text.count(marker) > 1]

    if missing or repeated:
        details = {"missing": missing, "repeated": repeated, "text": text}
        if strict:
            raise PlaceholderMismatchError("Translated text does not match its placeholders", details=details)
        logger.warning(f"Placeholder mismatch (missing={missing}, repeated={repeated}) in: {text[:80]}")

    restored_text = text
    for marker, original in tokens.items():
        restored_text = restored_text.replace(marker, original, 1)

    return restored_text
