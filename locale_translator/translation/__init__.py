"""
Translation module - Core translation functionality

This module provides:
- TranslationManager: per-language translation run coordinator
- ProgressState / TranslationRun: run state dataclasses
- flatten/unflatten and locale file parsing utilities
- Key-by-key processing with throttle, placeholder guard and retry
"""

from locale_translator.translation.progress import ProgressState, Throttle, TranslationRun
from locale_translator.translation.utils import (
    flatten_json,
    unflatten_json,
    strip_json_comments,
    parse_locale_document,
)
from locale_translator.translation.processor import (
    translate_entries,
    translate_text_guarded,
)
from locale_translator.translation.manager import TranslationManager, TranslationResult
