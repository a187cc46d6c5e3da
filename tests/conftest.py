import os
import time

import pytest

# Keep test runs from writing log files; must be set before yieldmap is imported
os.environ.setdefault("YIELDMAP_FILE_LOGGING", "0")

# Shared fixtures from tests._fixtures
from tests._fixtures.conftest import snapshot_config, redis_fake, record_cache  # noqa: E402,F401


@pytest.fixture(autouse=True)
def no_sleep(mocker):
    """Prevent actual sleeping in tests to speed up retry/backoff and pacing paths."""
    mocker.patch.object(time, "sleep", lambda s: None)


@pytest.fixture(autouse=True)
def block_network(mocker):
    """Autouse fixture: prevent any test from performing real network calls"""
    from tests._fixtures.remote_api_responses import canned_api_factory

    mocker.patch("requests.Session.get", return_value=canned_api_factory("empty"))
    yield
