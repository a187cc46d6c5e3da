import json

import pytest

from yieldmap.data_collector import run_snapshot
from yieldmap.data_collector.fetcher import DataFetcher
from yieldmap.data_collector.record_cache import JOB_STATUS_KEY, SNAPSHOT_KEY, TICKERS_KEY
from yieldmap.data_collector.snapshot_job import SnapshotJob
from tests._fixtures import build_record


@pytest.fixture
def cli_job(record_cache, snapshot_config, mocker):
    """Point the CLI at a job backed by the in-memory cache."""
    fetcher = DataFetcher(record_cache, mocker.Mock(), mocker.Mock(), config=snapshot_config)
    job = SnapshotJob(record_cache, fetcher, config=snapshot_config)
    mocker.patch.object(run_snapshot, "build_job", return_value=job)
    return job


def test_seed_tickers_caches_universe(cli_job, redis_fake):
    cli_job.fetcher.ticker_client.fetch_tickers.return_value = ["AAPL", "MSFT"]

    assert run_snapshot.main(["seed-tickers"]) == 0
    assert json.loads(redis_fake.store[TICKERS_KEY]) == ["AAPL", "MSFT"]


def test_run_builds_snapshot_and_prints_status(cli_job, redis_fake, capsys):
    redis_fake.store[TICKERS_KEY] = json.dumps(["AAA"])
    cli_job.fetcher.fundamentals_client.fetch.return_value = build_record("AAA", 4.0)

    assert run_snapshot.main(["run"]) == 0

    out = capsys.readouterr().out
    assert "status: idle" in out
    assert "progress: 1/1" in out
    assert "snapshot: 1" in out
    assert json.loads(redis_fake.store[SNAPSHOT_KEY])[0]["ticker"] == "AAA"


def test_run_without_universe_exits_nonzero(cli_job, redis_fake):
    assert run_snapshot.main(["run"]) == 1
    assert redis_fake.store[JOB_STATUS_KEY] == "failed"


def test_status_on_empty_cache(cli_job, capsys):
    assert run_snapshot.main(["status"]) == 0
    out = capsys.readouterr().out
    assert "status: idle" in out
    assert "snapshot: not available" in out


def test_cancel_without_running_job(cli_job):
    assert run_snapshot.main(["cancel"]) == 1


def test_cancel_running_job(cli_job, redis_fake):
    redis_fake.store[JOB_STATUS_KEY] = "running"
    assert run_snapshot.main(["cancel"]) == 0
    assert redis_fake.store[JOB_STATUS_KEY] == "idle"
