"""
Configuration settings for fundamentals collection and the snapshot job
"""

import os
from dataclasses import dataclass
from typing import Dict

from dotenv import load_dotenv

from yieldmap.data_collector.errors import ConfigurationError

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class SnapshotConfig:
    """Configuration class for the external data API, cache and snapshot job"""

    # API Configuration
    API_KEY: str = ""
    BASE_URL: str = "https://www.alphavantage.co/query"
    SEC_TICKERS_URL: str = "https://www.sec.gov/files/company_tickers.json"
    # SEC rejects requests without a descriptive User-Agent
    SEC_USER_AGENT: str = "yieldmap admin@example.com"

    # HTTP behaviour
    REQUEST_TIMEOUT: float = 10.0
    MAX_RETRIES: int = 3
    RETRY_BASE_DELAY: float = 1.0
    RETRY_MAX_DELAY: float = 10.0

    # Snapshot job
    REQUESTS_PER_MINUTE: int = 60
    CHECKPOINT_INTERVAL: int = 50

    # Batch fetcher
    BATCH_CONCURRENCY: int = 5
    BATCH_PACING_SECONDS: float = 1.0

    # Cache
    REDIS_URL: str = "redis://localhost:6379"

    def __post_init__(self) -> None:
        if self.REQUESTS_PER_MINUTE < 1:
            raise ConfigurationError(
                f"AV_REQUESTS_PER_MINUTE must be >= 1, got {self.REQUESTS_PER_MINUTE}"
            )
        if self.MAX_RETRIES < 0:
            raise ConfigurationError(f"MAX_RETRIES must be >= 0, got {self.MAX_RETRIES}")

    @property
    def headers(self) -> Dict[str, str]:
        """HTTP headers for API requests"""
        return {"Accept": "application/json", "User-Agent": "yieldmap/1.0"}

    def require_api_key(self) -> str:
        """Return the API credential or fail; a missing key is never retried."""
        if not self.API_KEY:
            raise ConfigurationError("ALPHA_VANTAGE_API_KEY environment variable not set")
        return self.API_KEY

    @classmethod
    def from_env(cls) -> "SnapshotConfig":
        """Create configuration from environment variables"""
        return cls(
            API_KEY=os.getenv("ALPHA_VANTAGE_API_KEY", ""),
            BASE_URL=os.getenv("ALPHA_VANTAGE_BASE_URL", cls.BASE_URL),
            SEC_TICKERS_URL=os.getenv("SEC_TICKERS_URL", cls.SEC_TICKERS_URL),
            SEC_USER_AGENT=os.getenv("SEC_USER_AGENT", cls.SEC_USER_AGENT),
            REQUEST_TIMEOUT=_env_float("REQUEST_TIMEOUT", cls.REQUEST_TIMEOUT),
            MAX_RETRIES=_env_int("MAX_RETRIES", cls.MAX_RETRIES),
            RETRY_BASE_DELAY=_env_float("RETRY_BASE_DELAY", cls.RETRY_BASE_DELAY),
            RETRY_MAX_DELAY=_env_float("RETRY_MAX_DELAY", cls.RETRY_MAX_DELAY),
            REQUESTS_PER_MINUTE=_env_int("AV_REQUESTS_PER_MINUTE", cls.REQUESTS_PER_MINUTE),
            BATCH_CONCURRENCY=_env_int("BATCH_CONCURRENCY", cls.BATCH_CONCURRENCY),
            REDIS_URL=os.getenv("REDIS_URL", cls.REDIS_URL),
        )


# Global configuration instance
config = SnapshotConfig.from_env()
