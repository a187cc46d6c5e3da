"""
Pydantic data models for fundamentals records and snapshot job state

Field aliases match the JSON shape stored in the cache and read by the
route layer and frontend (``ticker``, ``name``, ``sector``, ``yield``,
``startedAt``, ``estimatedMinutes``).
"""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from yieldmap.data_collector.alpha_vantage.transforms import SECTOR_LABELS, UNKNOWN_SECTOR


class FundamentalsRecord(BaseModel):
    """Normalized fundamentals for a single symbol"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    symbol: str = Field(..., min_length=1, alias="ticker")
    display_name: str = Field(..., alias="name")
    sector_label: str = Field(UNKNOWN_SECTOR, alias="sector")
    dividend_yield_percent: float = Field(0.0, ge=0, alias="yield", description="0-100 scale")

    @field_validator("sector_label")
    @classmethod
    def validate_sector_label(cls, v: str) -> str:
        if v not in SECTOR_LABELS and v != UNKNOWN_SECTOR:
            raise ValueError(f"Unknown sector label: {v}")
        return v

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str) -> "FundamentalsRecord":
        return cls.model_validate_json(raw)


# Snapshot entries share the record shape
SnapshotEntry = FundamentalsRecord


class JobStatus(str, Enum):
    """Lifecycle state of the single snapshot job"""

    IDLE = "idle"
    RUNNING = "running"
    FAILED = "failed"


class JobProgress(BaseModel):
    """Checkpointed progress of a snapshot run

    ``completed`` counts processed symbols, successful or not; ``failed`` is
    the subset that failed.
    """

    model_config = ConfigDict(populate_by_name=True)

    completed: int = Field(0, ge=0)
    total: int = Field(0, ge=0)
    failed: int = Field(0, ge=0)
    started_at: datetime = Field(..., alias="startedAt")
    estimated_minutes_remaining: int = Field(0, ge=0, alias="estimatedMinutes")

    @model_validator(mode="after")
    def check_counts(self) -> "JobProgress":
        if self.completed > self.total:
            raise ValueError(f"completed ({self.completed}) exceeds total ({self.total})")
        if self.failed > self.completed:
            raise ValueError(f"failed ({self.failed}) exceeds completed ({self.completed})")
        return self

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str) -> "JobProgress":
        return cls.model_validate_json(raw)


def snapshot_to_json(entries: List[SnapshotEntry]) -> str:
    return "[" + ",".join(entry.to_json() for entry in entries) + "]"
