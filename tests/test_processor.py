from __future__ import annotations

import pytest

from locale_translator.config import RetrySettings
from locale_translator.exceptions import PlaceholderMismatchError, ProviderError
from locale_translator.translation.processor import translate_entries
from locale_translator.translation.progress import Throttle


def _upper(calls: list):
    def translate_text(text: str) -> str:
        calls.append(text)
        return text.upper()
    return translate_text


def test_translates_in_document_order_and_skips_protected_values(sleep) -> None:
    calls: list[str] = []
    entries = {"z": "zebra", "a": "Cart", "m": "hello {{name}}", "e": ""}

    result = translate_entries(
        entries, _upper(calls), throttle=Throttle(sleep=sleep), retry=RetrySettings(), sleep=sleep
    )

    assert list(result) == ["z", "a", "m", "e"]
    assert result == {"z": "ZEBRA", "a": "Cart", "m": "HELLO {{name}}", "e": ""}
    assert calls == ["zebra", "hello __VAR0__"]


def test_throttle_pauses_after_every_window(sleep) -> None:
    calls: list[str] = []
    entries = {f"k{i}": f"text {i}" for i in range(11)}
    throttle = Throttle(every=5, pause=1.0, sleep=sleep)

    translate_entries(entries, _upper(calls), throttle=throttle, retry=RetrySettings(), sleep=sleep)

    assert len(calls) == 11
    assert throttle.count == 11
    # Pauses before the 6th and 11th requests
    assert sleep.calls == [1.0, 1.0]


def test_skip_list_values_do_not_count_towards_throttle(sleep) -> None:
    entries = {f"k{i}": "SKU" for i in range(10)}
    throttle = Throttle(every=2, pause=1.0, sleep=sleep)

    translate_entries(entries, _upper([]), throttle=throttle, retry=RetrySettings(), sleep=sleep)

    assert throttle.count == 0
    assert sleep.calls == []


def test_each_key_is_retried(sleep) -> None:
    attempts = {"count": 0}

    def flaky(text: str) -> str:
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise ProviderError("temporary", status_code=503)
        return f"ok {text}"

    result = translate_entries(
        {"a": "one"}, flaky, throttle=Throttle(sleep=sleep), retry=RetrySettings(base_delay=1.0), sleep=sleep
    )

    assert result == {"a": "ok one"}
    assert sleep.calls == [1.0]


def test_strict_placeholder_mismatch_fails_after_retries(sleep) -> None:
    with pytest.raises(PlaceholderMismatchError):
        translate_entries(
            {"a": "Hello {{name}}"},
            lambda text: "Hallo",
            throttle=Throttle(sleep=sleep),
            retry=RetrySettings(max_attempts=2, base_delay=1.0),
            sleep=sleep,
            strict=True,
        )

    assert sleep.calls == [1.0]
