"""Shared fixtures for normalized test runs."""

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from boostsec.playwright_results.models.normalized import (
    NormalizedTest,
    NormalizedTestRun,
)
from boostsec.playwright_results.normalizer import calculate_totals

FIXTURES_DIR = Path(__file__).parent / "fixtures"

MakeTest = Callable[..., NormalizedTest]
MakeRun = Callable[..., NormalizedTestRun]


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the JSON report fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def make_test() -> MakeTest:
    """Build normalized tests with sensible defaults."""

    def factory(**overrides: Any) -> NormalizedTest:
        title = overrides.pop("title", "test")
        values: dict[str, Any] = {
            "id": f"default-unknown-{title}",
            "title": title,
            "full_title": f"Suite › {title}",
            "status": "passed",
            "duration": 100,
        }
        values.update(overrides)
        return NormalizedTest(**values)

    return factory


@pytest.fixture
def make_run() -> MakeRun:
    """Build normalized runs whose totals match their tests."""

    def factory(
        tests: list[NormalizedTest] | None = None, **overrides: Any
    ) -> NormalizedTestRun:
        tests = tests or []
        values: dict[str, Any] = {
            "run_id": "run-1",
            "started_at": datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc),
            "ended_at": datetime(2024, 1, 1, 10, 10, tzinfo=timezone.utc),
            "duration": 600000,
            "projects": sorted({test.project for test in tests}),
            "totals": calculate_totals(tests),
            "tests": tests,
        }
        values.update(overrides)
        return NormalizedTestRun(**values)

    return factory
