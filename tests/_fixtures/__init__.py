"""Fixtures package for tests.

Re-export commonly used fakes and factories for convenient imports
from `tests._fixtures` package.
"""

from .redis_fake import RedisFake
from .remote_api_responses import (
    FakeResponse,
    canned_api_factory,
    SAMPLE_OVERVIEW,
    SAMPLE_SEC_TICKERS,
)
from .factories import build_record, record_json

__all__ = [
    "RedisFake",
    "FakeResponse",
    "canned_api_factory",
    "SAMPLE_OVERVIEW",
    "SAMPLE_SEC_TICKERS",
    "build_record",
    "record_json",
]
