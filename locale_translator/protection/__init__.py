"""
Protection module - text that must survive translation unchanged

This module provides:
- terms: skip-list of literal strings that are never translated
- placeholders: {{variable}} protection and restoration
"""

from locale_translator.protection.terms import (
    DO_NOT_TRANSLATE,
    is_protected_term,
    needs_translation,
    split_protected,
)

from locale_translator.protection.placeholders import (
    VARIABLE_PATTERN,
    protect_placeholders,
    restore_placeholders,
)
