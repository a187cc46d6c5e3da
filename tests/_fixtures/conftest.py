import pytest

from yieldmap.data_collector.config import SnapshotConfig
from yieldmap.data_collector.record_cache import RecordCache

from tests._fixtures.redis_fake import RedisFake


@pytest.fixture
def snapshot_config():
    """Config with a dummy credential and a fast request rate."""
    return SnapshotConfig(API_KEY="TEST", REQUESTS_PER_MINUTE=600, MAX_RETRIES=3)


@pytest.fixture
def redis_fake():
    """Return a fresh in-memory Redis double."""
    return RedisFake()


@pytest.fixture
def record_cache(redis_fake):
    """RecordCache wired to the in-memory Redis double."""
    return RecordCache(redis_fake)
