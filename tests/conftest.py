from __future__ import annotations

import os

# Keep test runs from writing logs/app.log
os.environ.setdefault("LOCALE_TRANSLATOR_LOG_FILE", "0")
os.environ.setdefault("LOCALE_TRANSLATOR_LOG_MODE", "off")

import pytest

from locale_translator.config import RetrySettings, Settings, ThrottleSettings
from locale_translator.exceptions import TranslationFailure


class RecordingSleep:
    """Stand-in for time.sleep that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeClient:
    """Translation client that prefixes values and fails for chosen languages."""

    def __init__(self, failing: tuple = (), prefix: str = "") -> None:
        self.failing = set(failing)
        self.prefix = prefix
        self.calls: list[str] = []

    def translate(self, flat_map, target_language, run=None):
        self.calls.append(target_language)
        if target_language in self.failing:
            raise TranslationFailure(target_language, RuntimeError("service unavailable"))
        return {key: f"{self.prefix or target_language}:{value}" for key, value in flat_map.items()}


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        deepl_api_key="deepl-test-key",
        deepl_api_url="https://deepl.test/v2/translate",
        endpoint_url="https://functions.test/translate",
        bearer_token="anon-token",
        retry=RetrySettings(max_attempts=3, base_delay=1.0, rate_limit_multiplier=2.0),
        throttle=ThrottleSettings(every=5, pause=1.0),
    )


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()
