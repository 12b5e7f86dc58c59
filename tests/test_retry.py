from __future__ import annotations

import httpx
import pytest

from locale_translator.client.retry import call_with_retry, is_rate_limited, should_retry
from locale_translator.config import RetrySettings
from locale_translator.exceptions import ConfigurationError, ProviderError


class _Flaky:
    def __init__(self, failures: list[Exception], result: str = "ok") -> None:
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


def test_fails_twice_then_succeeds_with_doubling_backoff(sleep) -> None:
    fn = _Flaky([ProviderError("boom", status_code=500), ProviderError("boom", status_code=502)])

    result = call_with_retry(fn, RetrySettings(max_attempts=3, base_delay=1.0), sleep=sleep)

    assert result == "ok"
    assert fn.calls == 3
    assert sleep.calls == [1.0, 2.0]


def test_rate_limited_failure_waits_longer(sleep) -> None:
    fn = _Flaky([ProviderError("Too many requests", status_code=429)])

    call_with_retry(fn, RetrySettings(max_attempts=3, base_delay=1.0, rate_limit_multiplier=2.0), sleep=sleep)

    assert sleep.calls == [2.0]


def test_backoff_keeps_growing_after_rate_limit(sleep) -> None:
    fn = _Flaky([
        ProviderError("Too many requests", status_code=429),
        ProviderError("server error", status_code=503),
    ])

    call_with_retry(fn, RetrySettings(max_attempts=3, base_delay=1.0, rate_limit_multiplier=2.0), sleep=sleep)

    assert sleep.calls == [2.0, 4.0]


def test_exhausted_retries_raise_last_error(sleep) -> None:
    errors = [ProviderError(f"fail {i}", status_code=500) for i in range(3)]
    fn = _Flaky(errors)

    with pytest.raises(ProviderError, match="fail 2"):
        call_with_retry(fn, RetrySettings(max_attempts=3, base_delay=0.5), sleep=sleep)

    assert fn.calls == 3
    assert sleep.calls == [0.5, 1.0]


def test_authentication_errors_are_not_retried(sleep) -> None:
    fn = _Flaky([ProviderError("forbidden", status_code=403)])

    with pytest.raises(ProviderError):
        call_with_retry(fn, RetrySettings(max_attempts=3), sleep=sleep)

    assert fn.calls == 1
    assert sleep.calls == []


def test_configuration_errors_are_not_retried() -> None:
    assert not should_retry(ConfigurationError("no key"))
    assert should_retry(httpx.ReadTimeout("slow"))


def test_rate_limit_detection() -> None:
    assert is_rate_limited(ProviderError("x", status_code=429))
    assert is_rate_limited(RuntimeError("Too many requests"))
    assert not is_rate_limited(ProviderError("x", status_code=500))
