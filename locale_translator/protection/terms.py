"""
Protected Terms Module

Literal UI strings that must never be sent to translation. Membership is an
exact, case-sensitive comparison of the whole value.
"""

from typing import Dict, Iterable, Tuple

# UI chrome kept verbatim in every language
DO_NOT_TRANSLATE = ("Add to cart", "Checkout", "SKU", "cart", "Cart")


def is_protected_term(text: str, protected_terms: Iterable[str] = DO_NOT_TRANSLATE) -> bool:
    """
    Check whether a value is on the skip-list.

    Example:
        >>> is_protected_term("Cart")
        True
        >>> is_protected_term("CART")
        False
        >>> is_protected_term("Go to Cart")
        False
    """
    return text in protected_terms


def needs_translation(text: str, protected_terms: Iterable[str] = DO_NOT_TRANSLATE) -> bool:
    """True for non-empty strings that are not on the skip-list."""
    return isinstance(text, str) and bool(text.strip()) and not is_protected_term(text, protected_terms)


def split_protected(
    entries: Dict[str, str],
    protected_terms: Iterable[str] = DO_NOT_TRANSLATE,
) -> Tuple[Dict[str, str], Dict[str, str]]:
    """
    Separate entries into (require_translation, kept_verbatim).

    Both dicts keep the document order of the input.
    """
    require_translation = {}
    kept = {}

    for key, value in entries.items():
        if needs_translation(value, protected_terms):
            require_translation[key] = value
        else:
            kept[key] = value

    return require_translation, kept
