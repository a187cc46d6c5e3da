import pytest

from yieldmap.data_collector.errors import (
    CacheUnavailableError,
    ErrorKind,
    NetworkError,
    RateLimitError,
    ValidationError,
    error_payload,
)


def test_error_kinds_and_default_retryability():
    assert RateLimitError().kind is ErrorKind.RATE_LIMIT
    assert RateLimitError().retryable is False
    assert NetworkError("Request timeout").retryable is True
    assert ValidationError("bad").retryable is False
    assert CacheUnavailableError().kind is ErrorKind.UNAVAILABLE


def test_rate_limit_carries_retry_after():
    error = RateLimitError(retry_after=2.0, retryable=True)
    assert error.retry_after == 2.0
    assert error.retryable is True


@pytest.mark.parametrize(
    "error, expected",
    [
        (
            ValidationError("Invalid ticker symbol: ZZZZ"),
            {"error": "VALIDATION_ERROR", "message": "Invalid ticker symbol: ZZZZ"},
        ),
        (
            RateLimitError("Alpha Vantage API rate limit reached"),
            {"error": "RATE_LIMIT", "message": "API rate limit exceeded. Please try again later."},
        ),
        (
            NetworkError("Server error: 503 - upstream host 10.0.0.4", status_code=503),
            {"error": "NETWORK_ERROR", "message": "Network error occurred. Please try again."},
        ),
        (
            CacheUnavailableError(),
            {"error": "UNAVAILABLE", "message": "Data store is unavailable. Please try again later."},
        ),
        (
            RuntimeError("stack details"),
            {"error": "UNKNOWN_ERROR", "message": "An unexpected error occurred."},
        ),
    ],
)
def test_error_payload(error, expected):
    """Only validation messages reach the caller verbatim"""
    assert error_payload(error) == expected
