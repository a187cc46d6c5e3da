"""
Data Acquisition Module

Fetches dividend fundamentals from Alpha Vantage through a Redis-backed
cache, with retry/backoff, batch fetching and a checkpointed snapshot job.
"""

from .errors import (
    ErrorKind,
    FetchError,
    RateLimitError,
    NetworkError,
    ValidationError,
    CacheUnavailableError,
    ConfigurationError,
    SnapshotJobError,
    error_payload,
)
from .http_client import ResilientHttpClient
from .record_cache import RecordCache
from .fetcher import DataFetcher
from .snapshot_job import SnapshotJob, CancellationToken

__all__ = [
    "ErrorKind",
    "FetchError",
    "RateLimitError",
    "NetworkError",
    "ValidationError",
    "CacheUnavailableError",
    "ConfigurationError",
    "SnapshotJobError",
    "error_payload",
    "ResilientHttpClient",
    "RecordCache",
    "DataFetcher",
    "SnapshotJob",
    "CancellationToken",
]
