"""
Translation Client Module

This module provides the clients used by the pipeline to translate one
flattened locale document into one target language:
- RemoteTranslationClient: one request per document to the translate service
- DirectTranslationClient: key-by-key calls straight to DeepL
- build_client: picks a client from Settings

For the raw HTTP calls, see client/providers.py
"""

import time
from typing import Callable, Dict, Optional

import httpx

from locale_translator import language_codes as lc
from locale_translator.client.providers import call_deepl_api, call_translate_endpoint
from locale_translator.client.retry import call_with_retry, is_timeout
from locale_translator.config import Settings
from locale_translator.exceptions import (
    ConfigurationError,
    TranslationFailure,
    TranslationTimeoutError,
)
from locale_translator.logger import get_logger
from locale_translator.protection import protect_placeholders, restore_placeholders, split_protected
from locale_translator.schemas import TranslateRequest
from locale_translator.translation.progress import Throttle, TranslationRun

logger = get_logger(__name__)


class TranslationClient:
    """Base class for clients translating a flat locale map."""

    def __init__(
        self,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.settings = settings
        self.sleep = sleep
        self.transport = transport

    def translate(
        self,
        flat_map: Dict[str, str],
        target_language: str,
        run: Optional[TranslationRun] = None,
    ) -> Dict[str, str]:
        raise NotImplementedError

    def _failure(self, target_language: str, error: Exception) -> TranslationFailure:
        if is_timeout(error):
            return TranslationTimeoutError(target_language, error)
        return TranslationFailure(target_language, error)


class RemoteTranslationClient(TranslationClient):
    """Sends the whole document to the translate service in one request."""

    def translate(
        self,
        flat_map: Dict[str, str],
        target_language: str,
        run: Optional[TranslationRun] = None,
    ) -> Dict[str, str]:
        """
        Translate a flat map through the translate endpoint.

        Skip-list and empty values never leave the process. Template variables
        are swapped for markers before sending and restored from the response.

        Raises:
            ConfigurationError: If the endpoint reports missing credentials
            TranslationFailure: If retries are exhausted
        """
        to_send, kept = split_protected(flat_map)
        if not to_send:
            logger.info(f"Nothing to translate for {target_language}; all values kept verbatim")
            return dict(flat_map)

        protected_data = {}
        tokens_by_key = {}
        for key, value in to_send.items():
            protected_data[key], tokens_by_key[key] = protect_placeholders(value)

        request = TranslateRequest(sourceData=protected_data, targetLang=target_language)

        logger.info(f"Requesting {len(protected_data)} keys for {target_language} ({len(kept)} kept verbatim)")

        def request_and_restore() -> Dict[str, str]:
            response_data = call_translate_endpoint(self.settings, request, transport=self.transport)
            result = {}
            for key, value in flat_map.items():
                if key not in to_send:
                    result[key] = value
                elif key in response_data:
                    result[key] = restore_placeholders(
                        response_data[key],
                        tokens_by_key[key],
                        strict=self.settings.strict_placeholders,
                    )
                else:
                    logger.warning(f"Key '{key}' missing from {target_language} response; keeping source text")
                    result[key] = value
            return result

        try:
            return call_with_retry(
                request_and_restore,
                self.settings.retry,
                sleep=self.sleep,
                description=f"translate endpoint ({target_language})",
            )
        except ConfigurationError:
            raise
        except Exception as e:
            raise self._failure(target_language, e) from e


class DirectTranslationClient(TranslationClient):
    """Calls DeepL key by key; skip-list, guard and throttle all run here."""

    def translate(
        self,
        flat_map: Dict[str, str],
        target_language: str,
        run: Optional[TranslationRun] = None,
    ) -> Dict[str, str]:
        """
        Translate a flat map directly against DeepL.

        The throttle counter comes from the run state when one is given so it
        spans every language of the run.

        Raises:
            ConfigurationError: If the DeepL key or the language mapping is missing
            TranslationFailure: If a key exhausts its retries
        """
        from locale_translator.translation.processor import translate_entries

        api_key = self.settings.require_provider_key()
        provider_code = lc.get_provider_code(target_language)
        if not provider_code:
            raise TranslationFailure(
                target_language,
                ValueError(f"Unsupported target language: {target_language}"),
            )

        throttle = run.throttle if run is not None else Throttle(
            every=self.settings.throttle.every,
            pause=self.settings.throttle.pause,
            sleep=self.sleep,
        )

        def translate_text(text: str) -> str:
            return call_deepl_api(
                self.settings, [text], provider_code, api_key=api_key, transport=self.transport
            )[0]

        try:
            return translate_entries(
                flat_map,
                translate_text,
                throttle=throttle,
                retry=self.settings.retry,
                sleep=self.sleep,
                strict=self.settings.strict_placeholders,
                description=f"({target_language})",
            )
        except ConfigurationError:
            raise
        except Exception as e:
            raise self._failure(target_language, e) from e


def build_client(settings: Settings, **kwargs) -> TranslationClient:
    """
    Pick the translation client for the given settings.

    The translate service is preferred; the direct DeepL path is the fallback.

    Raises:
        ConfigurationError: If neither an endpoint nor a DeepL key is configured
    """
    if settings.has_endpoint:
        logger.info(f"Using translate endpoint: {settings.endpoint_url}")
        return RemoteTranslationClient(settings, **kwargs)
    if settings.has_provider_key:
        logger.info("No translate endpoint configured; calling DeepL directly")
        return DirectTranslationClient(settings, **kwargs)
    raise ConfigurationError(
        "No translation backend configured. Set TRANSLATE_ENDPOINT_URL or DEEPL_API_KEY.",
        details={"missing_field": "service.endpoint_url"},
    )
