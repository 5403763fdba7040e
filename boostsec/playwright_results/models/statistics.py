"""Models for test run statistics."""

from pydantic import BaseModel, Field


class GroupStatistics(BaseModel):
    """Per-status counters for a project or file."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    flaky: int = 0
    duration: float = 0


class DurationStatistics(BaseModel):
    """Distribution of test durations in ms."""

    total: float = 0
    average: float = 0
    median: float = 0
    p95: float = 0
    min: float = 0
    max: float = 0


class TestStatistics(BaseModel):
    """Aggregate statistics of a test run."""

    __test__ = False

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    flaky: int = 0
    duration: DurationStatistics = Field(default_factory=DurationStatistics)
    by_project: dict[str, GroupStatistics] = Field(default_factory=dict)
    by_file: dict[str, GroupStatistics] = Field(default_factory=dict)


class TestSummary(BaseModel):
    """Counts and rates of a test run."""

    __test__ = False

    total: int
    passed: int
    failed: int
    skipped: int
    flaky: int
    pass_rate: float = Field(..., description="Passed percentage (0-100)")
    flaky_rate: float = Field(..., description="Flaky percentage (0-100)")
