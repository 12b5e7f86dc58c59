"""
Translation archive export.

This module turns a TranslationSet into downloadable files:
- One <languageCode>.json per language, unflattened and pretty printed
- All files bundled in a single zip archive
"""

import io
import json
import zipfile
from typing import Dict

from locale_translator import language_codes as lc
from locale_translator.exceptions import ExportFailure, LocaleKeyError
from locale_translator.logger import get_logger
from locale_translator.translation.utils import unflatten_json

logger = get_logger(__name__)


def render_language_file(flat_map: Dict[str, str]) -> str:
    """
    Render one language as the JSON text stored in the archive.

    Example:
        >>> print(render_language_file({"a.b": "Hallo"}))
        {
          "a": {
            "b": "Hallo"
          }
        }
    """
    return json.dumps(unflatten_json(flat_map), ensure_ascii=False, indent=2)


def build_archive(translations: Dict[str, Dict[str, str]]) -> bytes:
    """
    Build the zip archive for a TranslationSet.

    Args:
        translations: language code -> flat locale map

    Returns:
        Zip file content

    Raises:
        ExportFailure: If there is nothing to export or a file cannot be built
    """
    if not translations:
        raise ExportFailure("No translations to export")

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for language_code, flat_map in translations.items():
                filename = lc.get_language_file_name(language_code)
                archive.writestr(filename, render_language_file(flat_map))
                logger.debug(f"Added {filename} ({len(flat_map)} keys) to archive")
    except (LocaleKeyError, TypeError, ValueError, zipfile.BadZipFile) as e:
        raise ExportFailure(f"Failed to export translations: {e}")

    logger.info(f"Built archive with {len(translations)} language files")
    return buffer.getvalue()
