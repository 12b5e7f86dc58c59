"""
Translation utility functions for flatten/unflatten and locale file parsing.
Provides capabilities for processing nested JSON locale documents.
"""

import json
import re
from typing import Any, Dict

from locale_translator.exceptions import LocaleKeyError, ParseError

KEY_SEPARATOR = "."

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def _stringify(value: Any) -> str:
    """Coerce a non-object leaf into its string form."""
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return json.dumps(value, ensure_ascii=False)


def _check_key(key: str, path: str) -> None:
    if not key:
        raise LocaleKeyError(
            f"Empty key under '{path or '<root>'}'",
            details={"path": path},
        )
    if KEY_SEPARATOR in key:
        raise LocaleKeyError(
            f"Key '{key}' under '{path or '<root>'}' contains '{KEY_SEPARATOR}' and cannot be flattened",
            details={"path": path, "key": key},
        )


def flatten_json(obj: Dict[str, Any], path: str = "", result: Dict[str, str] = None) -> Dict[str, str]:
    """
    Flatten a nested locale document into dotted-path keys.

    Args:
        obj: Locale document to flatten
        path: Current key path
        result: Accumulator dict (created if None)

    Returns:
        Dict of key_path -> string value, in document order

    Raises:
        LocaleKeyError: If a key is empty or contains a literal dot, or a section is empty

    Example:
        >>> flatten_json({"home": {"title": "Hello"}})
        {'home.title': 'Hello'}
    """
    if result is None:
        result = {}

    for key, value in obj.items():
        key = str(key)
        _check_key(key, path)
        new_path = f"{path}{KEY_SEPARATOR}{key}" if path else key
        if isinstance(value, dict):
            if not value:
                raise LocaleKeyError(
                    f"Section '{new_path}' is empty and cannot be flattened",
                    details={"path": new_path},
                )
            flatten_json(value, new_path, result)
        else:
            result[new_path] = _stringify(value)

    return result


def unflatten_json(flat: Dict[str, str]) -> Dict[str, Any]:
    """
    Rebuild a nested locale document from dotted-path keys.

    Args:
        flat: Dict of key_path -> value

    Returns:
        Nested dictionary

    Raises:
        LocaleKeyError: If a path has an empty segment

    Example:
        >>> unflatten_json({"home.title": "Hello"})
        {'home': {'title': 'Hello'}}
    """
    result: Dict[str, Any] = {}

    for path, value in flat.items():
        keys = path.split(KEY_SEPARATOR)
        if any(not key for key in keys):
            raise LocaleKeyError(f"Path '{path}' has an empty segment", details={"path": path})

        node = result
        for key in keys[:-1]:
            if not isinstance(node.get(key), dict):
                # A leaf at a prefix is replaced by a branch
                node[key] = {}
            node = node[key]

        node[keys[-1]] = value

    return result


def strip_json_comments(text: str) -> str:
    """
    Remove // and /* */ comments and trailing commas from JSON-like text.

    String literals are left untouched, so URLs such as "https://..." survive.
    """
    out = []
    i = 0
    length = len(text)
    in_string = False

    while i < length:
        char = text[i]

        if in_string:
            out.append(char)
            if char == '\\' and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
            i += 1
        elif text.startswith('//', i):
            end = text.find('\n', i)
            i = length if end == -1 else end
        elif text.startswith('/*', i):
            end = text.find('*/', i + 2)
            i = length if end == -1 else end + 2
        else:
            out.append(char)
            i += 1

    return _remove_trailing_commas(''.join(out)).strip()


def _remove_trailing_commas(text: str) -> str:
    """Drop commas directly before a closing brace or bracket, outside strings."""
    out = []
    last = 0
    in_string = False
    escape_next = False

    for i, char in enumerate(text):
        if escape_next:
            escape_next = False
            continue
        if in_string:
            if char == '\\':
                escape_next = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == ',' and _TRAILING_COMMA.match(text, i):
            out.append(text[last:i])
            last = i + 1

    out.append(text[last:])
    return ''.join(out)


def parse_locale_document(text: str) -> Dict[str, Any]:
    """
    Parse an uploaded locale file.

    Args:
        text: Raw file content, may contain comments and trailing commas

    Returns:
        Parsed locale document

    Raises:
        ParseError: If the content is not a JSON object after stripping
    """
    cleaned = strip_json_comments(text or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseError(
            "Error processing the file. Please make sure it's a valid JSON file.",
            details={"reason": str(e), "line": e.lineno, "column": e.colno},
        )

    if not isinstance(data, dict):
        raise ParseError(
            "Locale file must contain a JSON object at the top level.",
            details={"reason": f"top-level value is {type(data).__name__}"},
        )

    return data
