"""
Alpha Vantage fundamentals: client, payload transforms and record models
"""

from .client import AlphaVantageClient
from .models import FundamentalsRecord, SnapshotEntry, JobStatus, JobProgress
from .transforms import parse_dividend_yield, translate_sector, SECTOR_TRANSLATIONS

__all__ = [
    "AlphaVantageClient",
    "FundamentalsRecord",
    "SnapshotEntry",
    "JobStatus",
    "JobProgress",
    "parse_dividend_yield",
    "translate_sector",
    "SECTOR_TRANSLATIONS",
]
