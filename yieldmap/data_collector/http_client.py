"""
Resilient HTTP client with timeout, response classification and retry/backoff
"""

from typing import Any, Callable, Dict, Optional, TypeVar

import requests

from yieldmap.data_collector.config import SnapshotConfig, config as default_config
from yieldmap.data_collector.errors import NetworkError, RateLimitError, ValidationError
from yieldmap.utils.core.logger import get_logger
from yieldmap.utils.core.retry import RetryConfig, execute_with_retry

logger = get_logger(__name__, utility="data_collector")

T = TypeVar("T")


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Parse a ``Retry-After`` header given in seconds; dates and junk yield None."""
    if value is None:
        return None
    try:
        seconds = int(value.strip())
    except ValueError:
        return None
    return float(seconds) if seconds >= 0 else None


class ResilientHttpClient:
    """GET wrapper that classifies responses into succeed / retry / fail"""

    def __init__(
        self,
        config: Optional[SnapshotConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the client

        Args:
            config: Settings for timeout and retry budget (defaults to global config)
            session: Optional pre-configured session (one is created otherwise)
        """
        self.config: SnapshotConfig = config or default_config
        self.session: requests.Session = session or requests.Session()
        self.session.headers.update(self.config.headers)
        self.retry_config = RetryConfig(
            max_retries=self.config.MAX_RETRIES,
            base_delay=self.config.RETRY_BASE_DELAY,
            max_delay=self.config.RETRY_MAX_DELAY,
        )

    def _make_single_request(
        self,
        url: str,
        parse: Callable[[requests.Response], T],
        params: Optional[Dict[str, Any]],
        headers: Optional[Dict[str, str]],
    ) -> T:
        """
        Make a single HTTP request without retry logic

        Raises:
            NetworkError: timeout, connection failure, 5xx or unparseable body
            RateLimitError: HTTP 429 (retryable, carries Retry-After when given)
            ValidationError: any other 4xx
        """
        logger.debug(f"Making request to {url}")

        try:
            response = self.session.get(
                url, params=params, headers=headers, timeout=self.config.REQUEST_TIMEOUT
            )
        except requests.Timeout as e:
            raise NetworkError("Request timeout") from e
        except requests.RequestException as e:
            raise NetworkError(f"Connection failed: {e}") from e

        status = response.status_code

        if status == 429:
            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            raise RateLimitError("API rate limit exceeded", retry_after=retry_after, retryable=True)

        if 500 <= status < 600:
            raise NetworkError(f"Server error: {status}", status_code=status)

        if 400 <= status < 500:
            reason = response.reason or ""
            raise ValidationError(
                f"Client error: {status} - {reason}", status_code=status, reason=reason
            )

        if 200 <= status < 300:
            try:
                return parse(response)
            except (ValueError, KeyError, TypeError) as e:
                logger.error(f"Error parsing response from {url}: {e}")
                raise NetworkError(
                    "Malformed response body", status_code=status, retryable=False
                ) from e

        raise NetworkError(f"Unexpected status: {status}", status_code=status)

    def call(
        self,
        url: str,
        parse: Callable[[requests.Response], T],
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        max_retries: Optional[int] = None,
    ) -> T:
        """
        Make a GET request with timeout and exponential-backoff retries

        Args:
            url: Full URL to request
            parse: Converts a successful response into the returned value
            params: Query parameters
            headers: Extra headers for this request
            max_retries: Retry budget; total attempts are max_retries + 1

        Returns:
            The parsed value
        """
        retry_config = self.retry_config
        if max_retries is not None:
            retry_config = RetryConfig(
                max_retries=max_retries,
                base_delay=retry_config.base_delay,
                max_delay=retry_config.max_delay,
                backoff_factor=retry_config.backoff_factor,
                max_jitter=retry_config.max_jitter,
            )

        return execute_with_retry(
            lambda: self._make_single_request(url, parse, params, headers),
            retry_config,
            description=f"GET {url}",
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ResilientHttpClient":
        """Context manager entry"""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit - cleanup session"""
        self.close()
