"""
Supported language table and provider code mappings.

Internal codes are the ones used for file names (e.g. 'de' -> 'de.json').
Provider codes are the DeepL target codes, which differ for some languages
(e.g. internal 'en-UK' -> provider 'EN-GB').

Language JSON File Naming Convention:
- Language code 'de' maps to filename 'de.json'
- Language code 'en-UK' maps to filename 'en-UK.json'
"""

from typing import List, Optional

SOURCE_LANGUAGE = 'en-UK'

# Ordered: translation runs follow this order
SUPPORTED_LANGUAGES = {
    'pl': {'name': 'Polish', 'provider_code': 'PL'},
    'uk': {'name': 'Ukrainian', 'provider_code': 'UK'},
    'de': {'name': 'German', 'provider_code': 'DE'},
    'it': {'name': 'Italian', 'provider_code': 'IT'},
    'es': {'name': 'Spanish', 'provider_code': 'ES'},
    'en-UK': {'name': 'British English', 'provider_code': 'EN-GB'},
}


def is_supported_language(code: str) -> bool:
    """
    Check if a language code is in the supported table.

    Examples:
        >>> is_supported_language('de')
        True
        >>> is_supported_language('fr')
        False
    """
    return code in SUPPORTED_LANGUAGES


def get_language_name(code: str) -> Optional[str]:
    """
    Get the display name for a language code.

    Examples:
        >>> get_language_name('uk')
        'Ukrainian'
        >>> get_language_name('xx') is None
        True
    """
    info = SUPPORTED_LANGUAGES.get(code)
    return info['name'] if info else None


def get_provider_code(code: str) -> Optional[str]:
    """
    Map an internal code to the provider's own code.

    Examples:
        >>> get_provider_code('es')
        'ES'
        >>> get_provider_code('en-UK')
        'EN-GB'
    """
    info = SUPPORTED_LANGUAGES.get(code)
    return info.get('provider_code') if info else None


def get_target_languages(source_language: str = SOURCE_LANGUAGE) -> List[str]:
    """All supported languages except the source, in table order."""
    return [code for code in SUPPORTED_LANGUAGES if code != source_language]


def get_language_file_name(language_code: str) -> str:
    """
    Get the archive filename for a language.

    Examples:
        >>> get_language_file_name('de')
        'de.json'
    """
    return f"{language_code}.json"
