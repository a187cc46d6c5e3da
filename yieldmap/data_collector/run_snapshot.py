"""
Command line entry point for the snapshot job

Usage:
    python -m yieldmap.data_collector.run_snapshot seed-tickers
    python -m yieldmap.data_collector.run_snapshot run
    python -m yieldmap.data_collector.run_snapshot status
    python -m yieldmap.data_collector.run_snapshot cancel
"""

import argparse
import sys
from typing import List, Optional

from yieldmap.data_collector.alpha_vantage.models import JobStatus
from yieldmap.data_collector.config import config
from yieldmap.data_collector.errors import FetchError, SnapshotJobError, error_payload
from yieldmap.data_collector.fetcher import DataFetcher
from yieldmap.data_collector.record_cache import RecordCache
from yieldmap.data_collector.snapshot_job import SnapshotJob
from yieldmap.utils.core.logger import get_logger

logger = get_logger(__name__, utility="snapshot")


def build_job(redis_url: Optional[str] = None) -> SnapshotJob:
    cache = RecordCache.from_url(redis_url or config.REDIS_URL)
    return SnapshotJob(cache, DataFetcher(cache, config=config), config=config)


def _print_status(job: SnapshotJob) -> None:
    status = job.get_status()
    progress = job.get_progress()
    snapshot = job.get_snapshot()
    print(f"status: {status.value}")
    if progress is not None:
        print(
            f"progress: {progress.completed}/{progress.total} "
            f"(failed {progress.failed}, ~{progress.estimated_minutes_remaining} min left, "
            f"started {progress.started_at.isoformat()})"
        )
    print(f"snapshot: {len(snapshot) if snapshot is not None else 'not available'}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Build and inspect the dividend snapshot")
    parser.add_argument("command", choices=["seed-tickers", "run", "status", "cancel"])
    parser.add_argument("--redis-url", default=None, help="Override REDIS_URL")
    args = parser.parse_args(argv)

    job = build_job(args.redis_url)

    try:
        if args.command == "seed-tickers":
            tickers = job.fetcher.load_tickers()
            logger.info(f"Ticker universe holds {len(tickers)} symbols")
        elif args.command == "run":
            if not job.trigger():
                logger.info("A snapshot job is already running.")
                return 1
            job.wait()
            _print_status(job)
            if job.get_status() is JobStatus.FAILED:
                return 1
        elif args.command == "status":
            _print_status(job)
        elif args.command == "cancel":
            if not job.cancel():
                logger.info("No running job to cancel.")
                return 1
    except (FetchError, SnapshotJobError) as e:
        logger.error(f"{args.command} failed: {error_payload(e)}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
