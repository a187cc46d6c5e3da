"""
Error taxonomy for the external-data fetch pipeline.

Every failure the pipeline can surface is one of four kinds. The HTTP client
and fundamentals fetcher raise them, the batch fetcher captures them per
symbol, and the snapshot job counts them per symbol (except cache
unavailability, which always propagates).
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Closed set of pipeline error kinds"""

    RATE_LIMIT = "RATE_LIMIT"
    NETWORK = "NETWORK_ERROR"
    VALIDATION = "VALIDATION_ERROR"
    UNAVAILABLE = "UNAVAILABLE"


class FetchError(Exception):
    """Base class for typed pipeline errors.

    Attributes:
        kind: The error kind
        message: Human-readable message, safe to show to callers
        retryable: True only for failures the HTTP retry loop may repeat
    """

    kind: ErrorKind

    def __init__(self, message: str, retryable: bool = False) -> None:
        self.message: str = message
        self.retryable: bool = retryable
        super().__init__(message)


class RateLimitError(FetchError):
    """The external API throttled us (HTTP 429 or an in-payload note)"""

    kind = ErrorKind.RATE_LIMIT

    def __init__(
        self,
        message: str = "API rate limit exceeded",
        retry_after: Optional[float] = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message, retryable=retryable)
        self.retry_after: Optional[float] = retry_after


class NetworkError(FetchError):
    """Connectivity failure, timeout, 5xx or unparseable body"""

    kind = ErrorKind.NETWORK

    def __init__(
        self, message: str, status_code: Optional[int] = None, retryable: bool = True
    ) -> None:
        super().__init__(message, retryable=retryable)
        self.status_code: Optional[int] = status_code


class ValidationError(FetchError):
    """Bad input, unknown symbol or a non-429 4xx response"""

    kind = ErrorKind.VALIDATION

    def __init__(
        self, message: str, status_code: Optional[int] = None, reason: Optional[str] = None
    ) -> None:
        super().__init__(message, retryable=False)
        self.status_code: Optional[int] = status_code
        self.reason: Optional[str] = reason


class CacheUnavailableError(FetchError):
    """The shared key-value store could not be reached"""

    kind = ErrorKind.UNAVAILABLE

    def __init__(self, message: str = "Cache unavailable") -> None:
        super().__init__(message, retryable=False)


class ConfigurationError(Exception):
    """Required configuration (e.g. the API credential) is missing or invalid"""


class SnapshotJobError(Exception):
    """The snapshot job could not start or continue its run"""


_PUBLIC_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.RATE_LIMIT: "API rate limit exceeded. Please try again later.",
    ErrorKind.NETWORK: "Network error occurred. Please try again.",
    ErrorKind.UNAVAILABLE: "Data store is unavailable. Please try again later.",
}


def error_payload(error: BaseException) -> Dict[str, Any]:
    """Build the structured ``{error, message}`` payload shown at the route boundary.

    Validation messages are passed through since they describe the caller's
    input; all other kinds use a fixed message so internal details never leak.
    """
    if isinstance(error, FetchError):
        if error.kind is ErrorKind.VALIDATION:
            return {"error": error.kind.value, "message": error.message}
        return {"error": error.kind.value, "message": _PUBLIC_MESSAGES[error.kind]}
    return {"error": "UNKNOWN_ERROR", "message": "An unexpected error occurred."}
