"""
Translation Processing Module

Key-by-key translation of a flat locale map:
- skip-list and empty values pass through untouched
- fixed-window throttling between requests
- placeholder protection around every provider call
- per-key retry with backoff
"""

import time
from typing import Callable, Dict, Iterable

from locale_translator.client.retry import call_with_retry
from locale_translator.config import RetrySettings
from locale_translator.logger import get_logger
from locale_translator.protection import (
    DO_NOT_TRANSLATE,
    needs_translation,
    protect_placeholders,
    restore_placeholders,
)
from locale_translator.translation.progress import Throttle

logger = get_logger(__name__)


def translate_text_guarded(
    text: str,
    translate_text: Callable[[str], str],
    strict: bool = False,
) -> str:
    """
    Translate one string with its {{variables}} shielded.

    The markers live only for this call: created before, consumed after.
    """
    protected_text, tokens = protect_placeholders(text)
    translated = translate_text(protected_text)
    return restore_placeholders(translated, tokens, strict=strict)


def translate_entries(
    entries: Dict[str, str],
    translate_text: Callable[[str], str],
    throttle: Throttle,
    retry: RetrySettings,
    sleep: Callable[[float], None] = time.sleep,
    strict: bool = False,
    protected_terms: Iterable[str] = DO_NOT_TRANSLATE,
    description: str = "",
) -> Dict[str, str]:
    """
    Translate a flat map key by key, in document order.

    Args:
        entries: Flat key -> text map
        translate_text: Callable performing one provider request for one text
        throttle: Throttle shared by every request of the caller's scope
        retry: Retry policy applied to each key
        sleep: Sleep function used for backoff waits
        strict: Raise on placeholder mismatch (retried like any failure)
        protected_terms: Skip-list values returned verbatim
        description: Label used in log messages

    Returns:
        Translated flat map with the same keys and order

    Raises:
        The last error of a key whose retries were exhausted
    """
    translated_data: Dict[str, str] = {}
    translated_count = 0

    for key, value in entries.items():
        if not needs_translation(value, protected_terms):
            translated_data[key] = value
            continue

        throttle.tick()

        translated_data[key] = call_with_retry(
            lambda: translate_text_guarded(value, translate_text, strict=strict),
            retry,
            sleep=sleep,
            description=f"{description} key '{key}'".strip(),
        )
        translated_count += 1

    logger.debug(f"Translated {translated_count} of {len(entries)} keys {description}".rstrip())
    return translated_data
