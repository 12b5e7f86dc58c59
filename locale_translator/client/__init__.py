"""
Client Module

This module provides the translation clients and their retry policy.
"""

from locale_translator.client.retry import call_with_retry
from locale_translator.client.service import (
    TranslationClient,
    RemoteTranslationClient,
    DirectTranslationClient,
    build_client,
)

__all__ = [
    'call_with_retry',
    'TranslationClient',
    'RemoteTranslationClient',
    'DirectTranslationClient',
    'build_client',
]
