"""
Cache read-through fetching for single symbols, batches and the ticker universe
"""

import json
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Union

from yieldmap.data_collector.alpha_vantage.client import AlphaVantageClient
from yieldmap.data_collector.alpha_vantage.models import FundamentalsRecord
from yieldmap.data_collector.config import SnapshotConfig, config as default_config
from yieldmap.data_collector.errors import FetchError, ValidationError
from yieldmap.data_collector.record_cache import (
    RECORD_TTL,
    TICKERS_KEY,
    TICKERS_TTL,
    RecordCache,
)
from yieldmap.data_collector.sec_tickers import SecTickerClient
from yieldmap.utils.core.logger import get_logger

logger = get_logger(__name__, utility="data_collector")

BatchResult = Dict[str, Union[FundamentalsRecord, Exception]]


def normalize_symbol(symbol: str) -> str:
    if not isinstance(symbol, str) or not symbol.strip():
        raise ValidationError("Invalid key provided")
    return symbol.strip().upper()


class DataFetcher:
    """Fetches fundamentals through the shared cache"""

    def __init__(
        self,
        cache: RecordCache,
        fundamentals_client: Optional[AlphaVantageClient] = None,
        ticker_client: Optional[SecTickerClient] = None,
        config: Optional[SnapshotConfig] = None,
    ) -> None:
        """
        Initialize the fetcher

        Args:
            cache: Shared record cache
            fundamentals_client: Client for per-symbol fundamentals
            ticker_client: Client for the symbol universe
            config: Settings for batch concurrency and pacing
        """
        self.config: SnapshotConfig = config or default_config
        self.cache = cache
        self.fundamentals_client = fundamentals_client or AlphaVantageClient(config=self.config)
        self.ticker_client = ticker_client or SecTickerClient(config=self.config)

    def fetch_single(self, symbol: str) -> FundamentalsRecord:
        """
        Return fundamentals for ``symbol``, calling the API only on a cache miss

        Raises:
            ValidationError, RateLimitError, NetworkError: fetch failures
            CacheUnavailableError: the cache could not be read or written
        """
        key = normalize_symbol(symbol)

        cached = self.cache.get(key)
        if cached is not None:
            try:
                record = FundamentalsRecord.from_json(cached)
            except ValueError as e:
                logger.warning(f"Discarding unreadable cache entry for {key}: {e}")
            else:
                logger.debug(f"Cache hit for key: {key}")
                return record

        logger.debug(f"Cache miss for key: {key}")
        record = self.fundamentals_client.fetch(key)
        self.cache.set(key, record.to_json(), ttl=RECORD_TTL)
        return record

    def load_tickers(self) -> List[str]:
        """Return the symbol universe, downloading and caching it on a miss"""
        cached = self.cache.get_json(TICKERS_KEY)
        if cached is not None:
            logger.debug(f"Cache hit for key: {TICKERS_KEY}")
            return list(cached)

        logger.info(f"Cache miss for key: {TICKERS_KEY}")
        tickers = self.ticker_client.fetch_tickers()
        self.cache.set(TICKERS_KEY, json.dumps(tickers), ttl=TICKERS_TTL)
        return tickers

    def _fetch_isolated(self, symbol: str) -> Union[FundamentalsRecord, Exception]:
        try:
            return self.fetch_single(symbol)
        except FetchError as e:
            logger.warning(f"Failed to fetch {symbol}: {e}")
            return e
        except Exception as e:
            logger.error(f"Unexpected error fetching {symbol}: {type(e).__name__}: {e}")
            return e

    def fetch_batch(self, symbols: Sequence[str], concurrency: Optional[int] = None) -> BatchResult:
        """
        Fetch many symbols in sequential windows of ``concurrency`` parallel fetches

        Args:
            symbols: Symbols to fetch, in order
            concurrency: Window width (defaults to BATCH_CONCURRENCY)

        Returns:
            Mapping of each symbol to its record or to the error it failed with
        """
        width = concurrency if concurrency is not None else self.config.BATCH_CONCURRENCY
        if width < 1:
            raise ValueError(f"concurrency must be >= 1, got {width}")

        results: BatchResult = {}
        symbols = list(symbols)

        for start in range(0, len(symbols), width):
            window = symbols[start:start + width]
            with ThreadPoolExecutor(max_workers=len(window)) as executor:
                outcomes = list(executor.map(self._fetch_isolated, window))
            results.update(zip(window, outcomes))

            # Pace windows so bursts stay below the API limit
            if start + width < len(symbols):
                time.sleep(self.config.BATCH_PACING_SECONDS)

        failures = sum(1 for value in results.values() if isinstance(value, Exception))
        logger.info(f"Batch complete: {len(results) - failures} fetched, {failures} failed")
        return results
