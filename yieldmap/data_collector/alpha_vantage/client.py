"""
Alpha Vantage company-overview client

Fetches one symbol's fundamentals, screens the payload for API-level
anomalies and normalizes it into a FundamentalsRecord.
"""

from typing import Any, Dict, Optional

import requests

from yieldmap.data_collector.alpha_vantage.models import FundamentalsRecord
from yieldmap.data_collector.alpha_vantage.transforms import (
    parse_dividend_yield,
    translate_sector,
)
from yieldmap.data_collector.config import SnapshotConfig, config as default_config
from yieldmap.data_collector.errors import NetworkError, RateLimitError, ValidationError
from yieldmap.data_collector.http_client import ResilientHttpClient
from yieldmap.utils.core.logger import get_logger

logger = get_logger(__name__, utility="data_collector")


def _parse_json_object(response: requests.Response) -> Dict[str, Any]:
    data = response.json()
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class AlphaVantageClient:
    """Client for the OVERVIEW endpoint"""

    def __init__(
        self,
        http_client: Optional[ResilientHttpClient] = None,
        config: Optional[SnapshotConfig] = None,
    ) -> None:
        self.config: SnapshotConfig = config or default_config
        self.http_client: ResilientHttpClient = http_client or ResilientHttpClient(self.config)

    def fetch_overview(self, symbol: str) -> Dict[str, Any]:
        """Return the raw overview payload for ``symbol``"""
        api_key = self.config.require_api_key()
        params = {"function": "OVERVIEW", "symbol": symbol, "apikey": api_key}
        return self.http_client.call(self.config.BASE_URL, _parse_json_object, params=params)

    def fetch(self, symbol: str) -> FundamentalsRecord:
        """
        Fetch and normalize fundamentals for a single symbol

        Args:
            symbol: Ticker symbol as stored in the universe

        Returns:
            Normalized FundamentalsRecord

        Raises:
            ConfigurationError: API credential not configured
            ValidationError: invalid symbol or no data for symbol
            RateLimitError: API reported its call quota as exhausted
            NetworkError: transport failure after retries
        """
        logger.debug(f"Fetching fundamentals for {symbol}")
        payload = self.fetch_overview(symbol)
        return self.to_record(symbol, payload)

    @staticmethod
    def to_record(symbol: str, payload: Dict[str, Any]) -> FundamentalsRecord:
        """Screen API-level anomalies, then map the payload to a record."""
        if payload.get("Error Message"):
            raise ValidationError(f"Invalid ticker symbol: {symbol}")

        # Throttling arrives as a 200 with a "Note" (older API) or "Information" field
        if payload.get("Note") or payload.get("Information"):
            raise RateLimitError("Alpha Vantage API rate limit reached")

        api_symbol = payload.get("Symbol")
        if not api_symbol:
            raise ValidationError(f"No data found for ticker: {symbol}")

        name = payload.get("Name")
        try:
            return FundamentalsRecord(
                symbol=api_symbol,
                display_name=name if isinstance(name, str) and name.strip() else api_symbol,
                sector_label=translate_sector(payload.get("Sector")),
                dividend_yield_percent=parse_dividend_yield(payload.get("DividendYield")),
            )
        except ValueError as e:
            raise NetworkError(
                f"Unexpected overview payload for {symbol}: {e}", retryable=False
            ) from e
