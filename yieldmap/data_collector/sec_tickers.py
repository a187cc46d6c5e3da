"""
Symbol universe loader backed by the SEC company tickers file
"""

from typing import Any, Dict, List, Optional

import requests

from yieldmap.data_collector.config import SnapshotConfig, config as default_config
from yieldmap.data_collector.http_client import ResilientHttpClient
from yieldmap.utils.core.logger import get_logger

logger = get_logger(__name__, utility="data_collector")


def _parse_ticker_file(response: requests.Response) -> Dict[str, Any]:
    data = response.json()
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class SecTickerClient:
    """Downloads the list of listed symbols published by the SEC"""

    def __init__(
        self,
        http_client: Optional[ResilientHttpClient] = None,
        config: Optional[SnapshotConfig] = None,
    ) -> None:
        self.config: SnapshotConfig = config or default_config
        self.http_client: ResilientHttpClient = http_client or ResilientHttpClient(self.config)

    def fetch_tickers(self) -> List[str]:
        """Return every ticker in the file, in document order, without duplicates"""
        logger.info(f"Fetching ticker universe from {self.config.SEC_TICKERS_URL}")
        data: Dict[str, Any] = self.http_client.call(
            self.config.SEC_TICKERS_URL,
            _parse_ticker_file,
            headers={"User-Agent": self.config.SEC_USER_AGENT},
        )

        tickers: List[str] = []
        seen = set()
        for item in data.values():
            ticker = item.get("ticker") if isinstance(item, dict) else None
            if not ticker or ticker in seen:
                continue
            seen.add(ticker)
            tickers.append(ticker)

        logger.info(f"Loaded {len(tickers)} tickers")
        return tickers
