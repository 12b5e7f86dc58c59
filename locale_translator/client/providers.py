"""
Translation Backend HTTP Calls

This module contains the HTTP call implementations:
- DeepL /v2/translate (direct provider path and the translate service)
- The translate endpoint (remote service path)

Each call performs exactly one HTTP request and raises ProviderError on
failure; retry decisions are made by the caller.
"""

from typing import Any, Dict, List, Optional

import httpx

from locale_translator.config import Settings
from locale_translator.exceptions import ConfigurationError, ProviderError
from locale_translator.logger import get_logger
from locale_translator.schemas import TranslateRequest, parse_error_response, parse_translate_response

logger = get_logger(__name__)

DEEPL_KEY_HEADER = "X-DeepL-API-Key"


def get_httpx_timeout(timeout_config: Any) -> httpx.Timeout:
    """
    Convert timeout configuration to httpx.Timeout object.

    Args:
        timeout_config: Either a number (total timeout) or a dict with
            connect, write, read, pool keys

    Returns:
        httpx.Timeout object
    """
    if isinstance(timeout_config, dict):
        return httpx.Timeout(
            connect=timeout_config.get('connect', 10.0),
            write=timeout_config.get('write', 30.0),
            read=timeout_config.get('read', 30.0),
            pool=timeout_config.get('pool', 10.0),
        )
    else:
        timeout_value = float(timeout_config) if timeout_config else 30.0
        return httpx.Timeout(timeout_value)


def handle_http_error(e: httpx.HTTPStatusError, provider: str):
    """Raise ProviderError (or ConfigurationError) with a detailed message."""
    status_code = e.response.status_code
    error_text = "Unknown error"
    error_code = None

    try:
        error_json = e.response.json()
        error_body = parse_error_response(error_json)
        if error_body is not None:
            error_text = error_body.error
            error_code = error_body.code
        elif isinstance(error_json, dict) and "message" in error_json:
            error_text = str(error_json["message"])
        else:
            error_text = e.response.text[:500]
    except ValueError:
        error_text = e.response.text[:500] if e.response.text else "No details"

    if error_code == ConfigurationError.default_code:
        raise ConfigurationError(f"{provider}: {error_text}")

    raise ProviderError(f"{provider} API error ({status_code}): {error_text}", status_code=status_code)


def call_deepl_api(
    settings: Settings,
    texts: List[str],
    target_code: str,
    api_key: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> List[str]:
    """
    Translate texts with DeepL.

    Args:
        settings: Application settings
        texts: Texts to translate (order preserved)
        target_code: DeepL target language code, e.g. 'DE' or 'EN-GB'
        api_key: Key to use instead of the configured one
        transport: Optional httpx transport (tests)

    Returns:
        Translated texts in input order
    """
    api_key = api_key or settings.require_provider_key()

    headers = {
        "Authorization": f"DeepL-Auth-Key {api_key}",
        "Content-Type": "application/json",
    }

    body = {
        "text": texts,
        "source_lang": settings.deepl_source_lang,
        "target_lang": target_code,
        "preserve_formatting": settings.deepl_preserve_formatting,
    }
    if settings.deepl_formality:
        body["formality"] = settings.deepl_formality

    logger.debug(f"  Calling DeepL API ({len(texts)} texts, target: {target_code})...")

    try:
        with httpx.Client(timeout=get_httpx_timeout(settings.timeout), transport=transport) as client:
            response = client.post(settings.deepl_api_url, headers=headers, json=body)
            response.raise_for_status()

            result = response.json()
            translations = result.get("translations") if isinstance(result, dict) else None
            if not isinstance(translations, list) or len(translations) != len(texts):
                raise ProviderError(f"Unexpected DeepL API response format: {str(result)[:200]}")

            return [item.get("text", "") for item in translations]

    except httpx.HTTPStatusError as e:
        handle_http_error(e, "DeepL")
    except httpx.TimeoutException:
        raise ProviderError("DeepL API request timeout", code="timeout")
    except httpx.HTTPError as e:
        raise ProviderError(f"DeepL API call failed: {e}")
    except ValueError as e:
        raise ProviderError(f"DeepL API returned invalid JSON: {e}")


def call_translate_endpoint(
    settings: Settings,
    request: TranslateRequest,
    transport: Optional[httpx.BaseTransport] = None,
) -> Dict[str, str]:
    """
    POST a whole flattened document to the translate endpoint.

    Returns:
        The translated flat map from the response body
    """
    if not settings.endpoint_url:
        raise ConfigurationError("Translate endpoint URL not configured. Set TRANSLATE_ENDPOINT_URL.")

    headers = {"Content-Type": "application/json"}
    if settings.bearer_token:
        headers["Authorization"] = f"Bearer {settings.bearer_token}"
    if settings.has_provider_key:
        headers[DEEPL_KEY_HEADER] = settings.deepl_api_key

    logger.debug(
        f"  Calling translate endpoint ({len(request.source_data)} keys, target: {request.target_lang})..."
    )

    try:
        with httpx.Client(timeout=get_httpx_timeout(settings.timeout), transport=transport) as client:
            response = client.post(settings.endpoint_url, headers=headers, json=request.to_wire())
            response.raise_for_status()
            return parse_translate_response(response.json())

    except httpx.HTTPStatusError as e:
        handle_http_error(e, "Translate endpoint")
    except httpx.TimeoutException:
        raise ProviderError("Translate endpoint request timeout", code="timeout")
    except httpx.HTTPError as e:
        raise ProviderError(f"Translate endpoint call failed: {e}")
    except ValueError as e:
        raise ProviderError(f"Translate endpoint returned invalid JSON: {e}")
