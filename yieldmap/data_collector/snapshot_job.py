"""
Snapshot job

Builds a full snapshot of dividend-paying symbols by walking the cached ticker
universe one symbol at a time at the configured request rate. Progress is
checkpointed to the cache so a polling or streaming consumer can report it;
cancellation is cooperative and checked once per symbol.

Designed to run as a background job (cron or worker thread), never inside a
request handler.
"""

import json
import math
import threading
import time
from datetime import datetime, timezone
from typing import List, Optional

from yieldmap.data_collector.alpha_vantage.models import (
    JobProgress,
    JobStatus,
    SnapshotEntry,
    snapshot_to_json,
)
from yieldmap.data_collector.config import SnapshotConfig, config as default_config
from yieldmap.data_collector.errors import (
    CacheUnavailableError,
    ConfigurationError,
    FetchError,
    SnapshotJobError,
)
from yieldmap.data_collector.fetcher import DataFetcher
from yieldmap.data_collector.record_cache import (
    JOB_PROGRESS_KEY,
    JOB_STATUS_KEY,
    SNAPSHOT_KEY,
    SNAPSHOT_TTL,
    TICKERS_KEY,
    RecordCache,
)
from yieldmap.utils.core.logger import get_logger

logger = get_logger(__name__, utility="snapshot")


class CancellationToken:
    """In-process cancellation flag polled by the job loop"""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class SnapshotJob:
    """Single snapshot job coordinated through the shared cache"""

    def __init__(
        self,
        cache: RecordCache,
        fetcher: DataFetcher,
        config: Optional[SnapshotConfig] = None,
    ) -> None:
        """
        Initialize the job service

        Args:
            cache: Shared cache holding status, progress, universe and snapshot
            fetcher: Per-symbol fetcher with cache read-through
            config: Settings for request rate and checkpoint interval
        """
        self.config: SnapshotConfig = config or default_config
        self.cache = cache
        self.fetcher = fetcher
        self.requests_per_minute: int = self.config.REQUESTS_PER_MINUTE
        self.checkpoint_interval: int = self.config.CHECKPOINT_INTERVAL

        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._token: Optional[CancellationToken] = None

    @property
    def request_interval(self) -> float:
        """Seconds to wait after each symbol: ceil(60000 / rpm) milliseconds"""
        return math.ceil(60_000 / self.requests_per_minute) / 1000

    def _estimate_minutes(self, remaining: int) -> int:
        return max(0, math.ceil(remaining / self.requests_per_minute))

    def _load_universe(self) -> List[str]:
        tickers = self.cache.get_json(TICKERS_KEY)
        if tickers is None:
            raise SnapshotJobError("Tickers not in cache. Load the ticker universe first.")
        return list(tickers)

    def _write_progress(self, progress: JobProgress) -> None:
        self.cache.set(JOB_PROGRESS_KEY, progress.to_json())

    def _is_cancelled(self, token: Optional[CancellationToken]) -> bool:
        if token is not None and token.cancelled:
            return True
        return self.get_status() is not JobStatus.RUNNING

    def run(self, token: Optional[CancellationToken] = None) -> Optional[List[SnapshotEntry]]:
        """
        Run the job to completion in the calling thread

        Args:
            token: Optional in-process cancellation token

        Returns:
            The persisted snapshot, or None when the run was skipped (already
            running) or cancelled

        Raises:
            SnapshotJobError: the ticker universe is not cached
            CacheUnavailableError: the cache became unreachable
        """
        if self.get_status() is JobStatus.RUNNING:
            logger.info("Job already running - skipping duplicate trigger.")
            return None

        tickers = self._load_universe()
        total = len(tickers)
        succeeded = 0
        failed = 0
        snapshot: List[SnapshotEntry] = []

        started_at = datetime.now(timezone.utc)
        self.cache.set(JOB_STATUS_KEY, JobStatus.RUNNING.value)
        self._write_progress(
            JobProgress(
                completed=0,
                total=total,
                failed=0,
                started_at=started_at,
                estimated_minutes_remaining=self._estimate_minutes(total),
            )
        )

        logger.info(
            f"Starting - {total} tickers @ {self.requests_per_minute} req/min "
            f"(~{self._estimate_minutes(total)} min)"
        )

        for index, ticker in enumerate(tickers):
            if self._is_cancelled(token):
                logger.info(f"Cancelled after {succeeded + failed}/{total} tickers.")
                return None

            try:
                record = self.fetcher.fetch_single(ticker)
            except (CacheUnavailableError, ConfigurationError):
                raise
            except FetchError as e:
                # Non-fatal: one bad ticker never aborts the run
                logger.warning(f"Failed to fetch {ticker}: {e}")
                failed += 1
            except Exception as e:
                logger.error(f"Unexpected error fetching {ticker}: {type(e).__name__}: {e}")
                failed += 1
            else:
                if record.dividend_yield_percent > 0:
                    snapshot.append(record)
                succeeded += 1

            processed = succeeded + failed
            is_last = index == total - 1
            if is_last or processed % self.checkpoint_interval == 0:
                self._write_progress(
                    JobProgress(
                        completed=processed,
                        total=total,
                        failed=failed,
                        started_at=started_at,
                        estimated_minutes_remaining=self._estimate_minutes(total - processed),
                    )
                )

            time.sleep(self.request_interval)

        self.cache.set(SNAPSHOT_KEY, snapshot_to_json(snapshot), ttl=SNAPSHOT_TTL)
        self.cache.set(JOB_STATUS_KEY, JobStatus.IDLE.value)

        logger.info(
            f"Done - {len(snapshot)} paying-dividend stocks stored, {failed} tickers skipped."
        )
        return snapshot

    def _run_guarded(self, token: CancellationToken) -> None:
        """Thread target: a run that dies unexpectedly leaves status=failed."""
        try:
            self.run(token)
        except Exception as e:
            logger.exception(f"Snapshot job failed: {type(e).__name__}: {e}")
            try:
                self.cache.set(JOB_STATUS_KEY, JobStatus.FAILED.value)
            except CacheUnavailableError as write_error:
                logger.error(f"Could not record failed job status: {write_error}")

    def trigger(self) -> bool:
        """
        Start the job in a background thread (fire-and-forget)

        Returns:
            True when a run was started, False when one is already in progress
        """
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                logger.info("Job thread already active - ignoring trigger.")
                return False
            if self.get_status() is JobStatus.RUNNING:
                logger.info("Job already running - ignoring trigger.")
                return False

            self._token = CancellationToken()
            self._thread = threading.Thread(
                target=self._run_guarded,
                args=(self._token,),
                name="snapshot-job",
                daemon=True,
            )
            self._thread.start()
            return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Join the background run; returns True when no run is still active."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def cancel(self) -> bool:
        """
        Request cancellation of a running job

        The job notices at its next per-symbol check, so at most one in-flight
        fetch may still complete.

        Returns:
            True when a running job was asked to stop
        """
        if self.get_status() is not JobStatus.RUNNING:
            return False

        self.cache.set(JOB_STATUS_KEY, JobStatus.IDLE.value)
        if self._token is not None:
            self._token.cancel()
        logger.info("Cancellation requested.")
        return True

    def get_status(self) -> JobStatus:
        raw = self.cache.get(JOB_STATUS_KEY)
        if raw is None:
            return JobStatus.IDLE
        try:
            return JobStatus(raw)
        except ValueError:
            logger.warning(f"Unrecognized job status {raw!r}; treating as idle")
            return JobStatus.IDLE

    def get_progress(self) -> Optional[JobProgress]:
        raw = self.cache.get(JOB_PROGRESS_KEY)
        return JobProgress.from_json(raw) if raw is not None else None

    def get_snapshot(self) -> Optional[List[SnapshotEntry]]:
        raw = self.cache.get(SNAPSHOT_KEY)
        if raw is None:
            return None
        return [SnapshotEntry.model_validate(item) for item in json.loads(raw)]
