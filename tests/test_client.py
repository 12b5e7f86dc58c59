from __future__ import annotations

import json
from dataclasses import replace

import httpx
import pytest

from locale_translator.client.service import (
    DirectTranslationClient,
    RemoteTranslationClient,
    build_client,
)
from locale_translator.exceptions import (
    ConfigurationError,
    PlaceholderMismatchError,
    TranslationFailure,
    TranslationTimeoutError,
)


def _endpoint(handler_results: list):
    """Mock translate endpoint returning the queued results in order."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        result = handler_results.pop(0)
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result(request)
        return result

    return httpx.MockTransport(handler), requests


def _echo_german(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    data = {key: value.replace("Hello", "Hallo") for key, value in body["sourceData"].items()}
    return httpx.Response(200, json=data)


def test_remote_client_sends_whole_document_once(settings, sleep) -> None:
    transport, requests = _endpoint([_echo_german])
    client = RemoteTranslationClient(settings, sleep=sleep, transport=transport)

    result = client.translate({"a.b": "Hello {{name}}", "a.c": "Hello world"}, "de")

    assert result == {"a.b": "Hallo {{name}}", "a.c": "Hallo world"}
    assert len(requests) == 1
    request = requests[0]
    assert request.headers["Authorization"] == "Bearer anon-token"
    assert request.headers["X-DeepL-API-Key"] == "deepl-test-key"
    assert json.loads(request.content) == {
        "sourceData": {"a.b": "Hello __VAR0__", "a.c": "Hello world"},
        "targetLang": "de",
    }


def test_remote_client_never_sends_skip_list_values(settings, sleep) -> None:
    transport, requests = _endpoint([_echo_german])
    client = RemoteTranslationClient(settings, sleep=sleep, transport=transport)

    result = client.translate({"cart": "Cart", "greet": "Hello", "sku": "SKU"}, "de")

    assert result == {"cart": "Cart", "greet": "Hallo", "sku": "SKU"}
    assert list(result) == ["cart", "greet", "sku"]
    assert json.loads(requests[0].content)["sourceData"] == {"greet": "Hello"}


def test_remote_client_makes_no_call_when_everything_is_protected(settings, sleep) -> None:
    transport, requests = _endpoint([])
    client = RemoteTranslationClient(settings, sleep=sleep, transport=transport)

    assert client.translate({"a": "Checkout", "b": "Add to cart"}, "it") == {"a": "Checkout", "b": "Add to cart"}
    assert requests == []


def test_remote_client_retries_then_succeeds(settings, sleep) -> None:
    transport, requests = _endpoint([
        httpx.Response(500, json={"error": "Failed to translate text: upstream"}),
        httpx.Response(503, text="unavailable"),
        _echo_german,
    ])
    client = RemoteTranslationClient(settings, sleep=sleep, transport=transport)

    assert client.translate({"a": "Hello"}, "de") == {"a": "Hallo"}
    assert len(requests) == 3
    assert sleep.calls == [1.0, 2.0]


def test_remote_client_raises_translation_failure_after_retries(settings, sleep) -> None:
    transport, requests = _endpoint([httpx.Response(500, json={"error": "boom"}) for _ in range(3)])
    client = RemoteTranslationClient(settings, sleep=sleep, transport=transport)

    with pytest.raises(TranslationFailure) as exc_info:
        client.translate({"a": "Hello"}, "pl")

    assert exc_info.value.language == "pl"
    assert "boom" in str(exc_info.value.cause)
    assert len(requests) == 3


def test_remote_client_reports_timeouts_distinctly(settings, sleep) -> None:
    transport, _ = _endpoint([httpx.ReadTimeout("timed out") for _ in range(3)])
    client = RemoteTranslationClient(settings, sleep=sleep, transport=transport)

    with pytest.raises(TranslationTimeoutError) as exc_info:
        client.translate({"a": "Hello"}, "es")

    assert exc_info.value.code == "timeout"
    assert sleep.calls == [1.0, 2.0]


def test_remote_client_stops_on_configuration_error(settings, sleep) -> None:
    transport, requests = _endpoint([
        httpx.Response(500, json={"error": "DeepL API key not configured", "code": "configuration_error"}),
    ])
    client = RemoteTranslationClient(settings, sleep=sleep, transport=transport)

    with pytest.raises(ConfigurationError):
        client.translate({"a": "Hello"}, "de")

    assert len(requests) == 1
    assert sleep.calls == []


def test_remote_client_retries_dropped_markers_in_strict_mode(settings, sleep) -> None:
    transport, requests = _endpoint([httpx.Response(200, json={"a": "Hallo"}) for _ in range(3)])
    client = RemoteTranslationClient(replace(settings, strict_placeholders=True), sleep=sleep, transport=transport)

    with pytest.raises(TranslationFailure) as exc_info:
        client.translate({"a": "Hello {{name}}"}, "de")

    assert isinstance(exc_info.value.cause, PlaceholderMismatchError)
    assert len(requests) == 3
    assert sleep.calls == [1.0, 2.0]


def test_remote_client_strict_mode_recovers_on_next_attempt(settings, sleep) -> None:
    transport, requests = _endpoint([
        httpx.Response(200, json={"a": "Hallo"}),
        httpx.Response(200, json={"a": "Hallo __VAR0__"}),
    ])
    client = RemoteTranslationClient(replace(settings, strict_placeholders=True), sleep=sleep, transport=transport)

    assert client.translate({"a": "Hello {{name}}"}, "de") == {"a": "Hallo {{name}}"}
    assert len(requests) == 2
    assert sleep.calls == [1.0]


def test_remote_client_rejects_malformed_response(settings, sleep) -> None:
    transport, _ = _endpoint([httpx.Response(200, json={"a": 1}) for _ in range(3)])
    client = RemoteTranslationClient(settings, sleep=sleep, transport=transport)

    with pytest.raises(TranslationFailure):
        client.translate({"a": "Hello"}, "de")


def _deepl(requests: list, fail_first: int = 0):
    state = {"failures": fail_first}

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if state["failures"]:
            state["failures"] -= 1
            return httpx.Response(429, json={"message": "Too many requests"})
        body = json.loads(request.content)
        texts = [f"[{body['target_lang']}] {text}" for text in body["text"]]
        return httpx.Response(200, json={"translations": [{"detected_source_language": "EN", "text": t} for t in texts]})

    return httpx.MockTransport(handler)


def test_direct_client_calls_deepl_key_by_key(settings, sleep) -> None:
    requests: list[httpx.Request] = []
    client = DirectTranslationClient(settings, sleep=sleep, transport=_deepl(requests))

    result = client.translate({"a": "Hello {{name}}", "b": "Cart", "c": "Bye"}, "en-UK")

    assert result == {"a": "[EN-GB] Hello {{name}}", "b": "Cart", "c": "[EN-GB] Bye"}
    assert len(requests) == 2
    first = json.loads(requests[0].content)
    assert first["text"] == ["Hello __VAR0__"]
    assert first["source_lang"] == "EN"
    assert first["formality"] == "prefer_more"
    assert requests[0].headers["Authorization"] == "DeepL-Auth-Key deepl-test-key"


def test_direct_client_backs_off_on_rate_limit(settings, sleep) -> None:
    requests: list[httpx.Request] = []
    client = DirectTranslationClient(settings, sleep=sleep, transport=_deepl(requests, fail_first=1))

    assert client.translate({"a": "Hi"}, "de") == {"a": "[DE] Hi"}
    assert sleep.calls == [2.0]


def test_direct_client_requires_provider_key(settings, sleep) -> None:
    client = DirectTranslationClient(replace(settings, deepl_api_key=""), sleep=sleep)

    with pytest.raises(ConfigurationError):
        client.translate({"a": "Hi"}, "de")


def test_build_client_prefers_endpoint_then_direct(settings) -> None:
    assert isinstance(build_client(settings), RemoteTranslationClient)
    assert isinstance(build_client(replace(settings, endpoint_url="")), DirectTranslationClient)

    with pytest.raises(ConfigurationError):
        build_client(replace(settings, endpoint_url="", deepl_api_key="YOUR_API_KEY_HERE"))
