"""Tests for normalized run models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from boostsec.playwright_results.models.normalized import (
    NormalizedTest,
    NormalizedTestRun,
    TestTotals,
)


def test_normalized_test_defaults() -> None:
    """NormalizedTest fills location, project and collections."""
    test = NormalizedTest(id="t", title="t", full_title="t", status="passed")
    assert test.file == "unknown"
    assert test.line == 0
    assert test.column == 0
    assert test.project == "default"
    assert test.retries == 0
    assert test.error is None
    assert test.attachments == []
    assert test.annotations == []


def test_normalized_test_invalid_status() -> None:
    """NormalizedTest rejects statuses outside the closed set."""
    with pytest.raises(ValidationError) as exc_info:
        NormalizedTest(
            id="t",
            title="t",
            full_title="t",
            status="expected",  # type: ignore[arg-type]
        )
    assert "status" in str(exc_info.value)


def test_normalized_test_is_frozen() -> None:
    """NormalizedTest instances can't be modified."""
    test = NormalizedTest(id="t", title="t", full_title="t", status="passed")
    with pytest.raises(ValidationError):
        test.status = "failed"  # type: ignore[misc]


def test_normalized_run_serializes_timestamps() -> None:
    """NormalizedTestRun dumps timestamps as ISO-8601 strings."""
    run = NormalizedTestRun(
        run_id="r",
        started_at=datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc),
        ended_at=datetime(2024, 1, 1, 10, 0, 5, tzinfo=timezone.utc),
        duration=5000,
    )

    dumped = run.model_dump(mode="json")

    assert dumped["started_at"] == "2024-01-01T10:00:00Z"
    assert dumped["ended_at"] == "2024-01-01T10:00:05Z"
    assert dumped["shards"] is None
    assert dumped["metadata"] is None
    assert run.totals == TestTotals()
