"""
Retry mechanism with exponential backoff and jitter.

Failures are retried only when the raised exception is tagged
``retryable=True``; every other exception ends the loop on first occurrence.
An exception may carry a ``retry_after`` hint (seconds) that replaces the
computed backoff for that attempt.
"""

import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from yieldmap.utils.core.logger import get_logger

logger = get_logger(__name__, utility="data_collector")

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 3  # Retries after the first attempt
    base_delay: float = 1.0  # Base delay in seconds
    max_delay: float = 10.0  # Cap on the exponential part, in seconds
    backoff_factor: float = 2.0  # Exponential backoff multiplier
    max_jitter: float = 1.0  # Random jitter in [0, max_jitter) seconds

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Calculate delay for exponential backoff with additive jitter."""
    delay = min(config.base_delay * (config.backoff_factor**attempt), config.max_delay)
    if config.max_jitter > 0:
        delay += random.uniform(0, config.max_jitter)
    return delay


def is_retryable_exception(exception: BaseException) -> bool:
    """Check if an exception should trigger a retry."""
    return bool(getattr(exception, "retryable", False))


def retry_delay_for(exception: BaseException, attempt: int, config: RetryConfig) -> float:
    """Delay before the next attempt, honoring a server-provided hint verbatim."""
    retry_after = getattr(exception, "retry_after", None)
    if retry_after is not None:
        return float(retry_after)
    return calculate_delay(attempt, config)


def execute_with_retry(
    func: Callable[[], T],
    config: RetryConfig,
    sleep: Optional[Callable[[float], None]] = None,
    description: str = "operation",
) -> T:
    """Execute ``func`` with retry logic.

    Makes at most ``config.max_attempts`` calls. When attempts run out the last
    exception is re-raised unchanged so callers keep the typed error.
    """
    for attempt in range(config.max_attempts):
        try:
            return func()
        except Exception as e:
            if not is_retryable_exception(e):
                logger.debug(f"Non-retryable exception for {description}: {type(e).__name__}: {e}")
                raise

            if attempt >= config.max_attempts - 1:
                logger.error(
                    f"All {config.max_attempts} attempts failed for {description}. "
                    f"Last error: {type(e).__name__}: {e}"
                )
                raise

            delay = retry_delay_for(e, attempt, config)
            logger.warning(
                f"Attempt {attempt + 1}/{config.max_attempts} for {description} failed "
                f"({type(e).__name__}). Retrying in {delay:.2f}s: {e}"
            )
            (sleep or time.sleep)(delay)

    raise ValueError(f"max_attempts must be >= 1, got {config.max_attempts}")


