import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from yieldmap.data_collector.alpha_vantage.models import (
    FundamentalsRecord,
    JobProgress,
    JobStatus,
    snapshot_to_json,
)
from tests._fixtures import build_record


def test_record_serializes_with_wire_aliases():
    """Cached JSON keeps the ticker/name/sector/yield shape consumers read"""
    record = build_record("AAPL", 0.44, "Manufacturing", name="Apple Inc")

    assert json.loads(record.to_json()) == {
        "ticker": "AAPL",
        "name": "Apple Inc",
        "sector": "Manufacturing",
        "yield": 0.44,
    }
    assert FundamentalsRecord.from_json(record.to_json()) == record


def test_record_rejects_negative_yield():
    with pytest.raises(PydanticValidationError):
        build_record(dividend_yield=-1.0)


def test_record_rejects_label_outside_taxonomy():
    with pytest.raises(PydanticValidationError):
        build_record(sector="Technology")


def test_progress_roundtrip_uses_camel_case_keys():
    started = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    progress = JobProgress(
        completed=50, total=120, failed=3, started_at=started, estimated_minutes_remaining=2
    )

    payload = json.loads(progress.to_json())
    assert payload["startedAt"].startswith("2025-01-01T12:00:00")
    assert payload["estimatedMinutes"] == 2
    assert JobProgress.from_json(progress.to_json()) == progress


def test_progress_rejects_completed_above_total():
    with pytest.raises(PydanticValidationError):
        JobProgress(completed=5, total=4, started_at=datetime.now(timezone.utc))


def test_job_status_values():
    assert [s.value for s in JobStatus] == ["idle", "running", "failed"]


def test_snapshot_to_json_is_array_of_records():
    entries = [build_record("AAA", 4.0), build_record("BBB", 1.5)]
    payload = json.loads(snapshot_to_json(entries))

    assert [item["ticker"] for item in payload] == ["AAA", "BBB"]
    assert json.loads(snapshot_to_json([])) == []
