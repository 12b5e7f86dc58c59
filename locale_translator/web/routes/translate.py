"""Translate service route: flat locale map in, translated flat map out."""

from __future__ import annotations

import time

from flask import Blueprint, current_app, jsonify, request

import locale_translator.language_codes as lc
from locale_translator.client.providers import DEEPL_KEY_HEADER, call_deepl_api
from locale_translator.config import Settings
from locale_translator.exceptions import ConfigurationError, SchemaValidationError
from locale_translator.logger import get_logger
from locale_translator.schemas import parse_translate_request
from locale_translator.translation.processor import translate_entries
from locale_translator.translation.progress import Throttle

translate_bp = Blueprint("translate", __name__)
logger = get_logger(__name__)


def _is_authorized(settings: Settings) -> bool:
    if not settings.bearer_token:
        return True
    return request.headers.get("Authorization", "") == f"Bearer {settings.bearer_token}"


@translate_bp.route("/translate", methods=["POST", "OPTIONS"])
def translate_locale_data():
    """Translate every string of a flat locale map into one target language."""
    if request.method == "OPTIONS":
        return "", 204

    settings: Settings = current_app.config["SETTINGS"]

    if not _is_authorized(settings):
        logger.warning("Rejected translate request with missing or invalid bearer token")
        return jsonify({"error": "Unauthorized", "code": "unauthorized"}), 401

    try:
        payload = parse_translate_request(request.get_json(silent=True))
    except SchemaValidationError as e:
        logger.warning("Invalid translate request: %s", e.details.get("reason"))
        return jsonify(e.to_dict()), 400

    target_lang = payload.target_lang
    source_data = payload.source_data

    # Header key is only a fallback for deployments without a configured key
    api_key = settings.deepl_api_key if settings.has_provider_key else request.headers.get(DEEPL_KEY_HEADER, "")
    if not api_key:
        error = ConfigurationError("DeepL API key not configured", details={"missing_field": "deepl.api_key"})
        logger.error("Translate request rejected: %s", error)
        return jsonify(error.to_dict()), 500

    policy = settings.language_policies.get(target_lang)
    provider_code = lc.get_provider_code(target_lang)
    if policy == "copy":
        logger.info("Target %s is configured to copy source text", target_lang)
        return jsonify(source_data)
    if policy == "reject" or not provider_code:
        return jsonify({"error": f"Unsupported target language: {target_lang}", "code": "unsupported_language"}), 400

    transport = current_app.config.get("HTTP_TRANSPORT")
    sleep = current_app.config.get("SLEEP", time.sleep)

    def translate_text(text: str) -> str:
        return call_deepl_api(settings, [text], provider_code, api_key=api_key, transport=transport)[0]

    # One throttle window per request
    throttle = Throttle(every=settings.throttle.every, pause=settings.throttle.pause, sleep=sleep)

    logger.info("Translating %d keys to %s (%s)", len(source_data), target_lang, provider_code)
    try:
        translated_data = translate_entries(
            source_data,
            translate_text,
            throttle=throttle,
            retry=settings.retry,
            sleep=sleep,
            strict=settings.strict_placeholders,
            description=f"({target_lang})",
        )
    except ConfigurationError as e:
        logger.error("Translate request failed: %s", e)
        return jsonify(e.to_dict()), 500
    except Exception as e:
        logger.exception("Translation to %s failed: %s", target_lang, e)
        return jsonify({"error": f"Failed to translate text: {e}"}), 500

    return jsonify(translated_data)
