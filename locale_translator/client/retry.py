"""
Retry-with-backoff for outbound translation calls.
"""

import time
from typing import Callable, TypeVar

import httpx

from locale_translator.config import RetrySettings
from locale_translator.exceptions import ConfigurationError, ProviderError
from locale_translator.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

RATE_LIMIT_MARKERS = ("too many requests", "rate limit")

# Client errors that will not succeed on a second try
NON_RETRYABLE_STATUS = {400, 401, 403, 404, 413, 456}


def is_rate_limited(error: Exception) -> bool:
    if isinstance(error, ProviderError) and error.status_code == 429:
        return True
    error_str = str(error).lower()
    return any(marker in error_str for marker in RATE_LIMIT_MARKERS)


def is_timeout(error: Exception) -> bool:
    return isinstance(error, httpx.TimeoutException) or getattr(error, "code", None) == "timeout"


def should_retry(error: Exception) -> bool:
    """Decide whether an error is worth another attempt."""
    if isinstance(error, ConfigurationError):
        return False
    if isinstance(error, ProviderError) and error.status_code in NON_RETRYABLE_STATUS:
        return False
    return True


def call_with_retry(
    fn: Callable[[], T],
    retry: RetrySettings,
    sleep: Callable[[float], None] = time.sleep,
    description: str = "request",
) -> T:
    """
    Call fn, retrying with exponential backoff.

    The wait starts at retry.base_delay and doubles after every wait. A
    rate-limited failure multiplies the current wait by
    retry.rate_limit_multiplier first.

    Raises:
        The last error once attempts are exhausted, or immediately for
        errors that should not be retried.
    """
    backoff = retry.base_delay
    last_error = None

    for attempt in range(retry.max_attempts):
        try:
            if attempt > 0:
                logger.info(f"  Retry attempt {attempt + 1}/{retry.max_attempts} for {description}")
            return fn()
        except Exception as e:
            last_error = e
            if not should_retry(e):
                logger.error(f"  Non-recoverable error for {description}: {e}")
                raise

            if attempt >= retry.max_attempts - 1:
                break

            wait_time = backoff * retry.rate_limit_multiplier if is_rate_limited(e) else backoff
            logger.warning(f"  Attempt {attempt + 1} for {description} failed: {e}. Waiting {wait_time}s before retry...")
            sleep(wait_time)
            backoff = wait_time * 2

    logger.warning(f"{description} failed after {retry.max_attempts} attempts: {last_error}")
    raise last_error
