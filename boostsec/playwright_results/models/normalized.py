"""Models for normalized test runs."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

TestStatus = Literal["passed", "failed", "skipped", "flaky"]


class NormalizedModel(BaseModel):
    """Base for immutable normalized values."""

    model_config = ConfigDict(frozen=True)


class TestError(NormalizedModel):
    """Error of the representative failing attempt."""

    __test__ = False

    message: str = Field(..., description="Error message")
    stack: str | None = None
    snippet: str | None = None
    file: str | None = None
    line: int | None = None
    column: int | None = None


class TestAttachment(NormalizedModel):
    """Attachment of the last attempt (screenshot, trace, ...)."""

    __test__ = False

    name: str
    content_type: str = "application/octet-stream"
    path: str | None = None
    body: str | None = None


class TestAnnotation(NormalizedModel):
    """Annotation attached to a test."""

    __test__ = False

    type: str
    description: str | None = None


class ShardInfo(NormalizedModel):
    """Shard of a partitioned run."""

    current: int = Field(..., description="1-based shard index")
    total: int = Field(..., description="Number of shards in the run")
    duration: float = Field(default=0, description="Shard duration in ms")
    test_count: int = Field(default=0, description="Tests seen by the shard")


class TestTotals(NormalizedModel):
    """Per-status counts and summed duration of a list of tests."""

    __test__ = False

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    flaky: int = 0
    duration: float = 0


class NormalizedTest(NormalizedModel):
    """One test executed under one project."""

    __test__ = False

    id: str = Field(..., description="Deterministic test identifier")
    title: str = Field(..., description="Test title")
    full_title: str = Field(..., description="Ancestor titles joined with ›")
    file: str = "unknown"
    line: int = 0
    column: int = 0
    project: str = "default"
    status: TestStatus = Field(..., description="Resolved test status")
    duration: float = Field(default=0, description="Last attempt duration in ms")
    retries: int = 0
    error: TestError | None = None
    attachments: list[TestAttachment] = Field(default_factory=list)
    annotations: list[TestAnnotation] = Field(default_factory=list)


class NormalizedTestRun(NormalizedModel):
    """Flat, tool-version independent view of a test run."""

    __test__ = False

    run_id: str = Field(..., description="Run identifier")
    started_at: datetime
    ended_at: datetime
    duration: float = Field(default=0, description="Run duration in ms")
    projects: list[str] = Field(default_factory=list)
    shards: list[ShardInfo] | None = None
    totals: TestTotals = Field(default_factory=TestTotals)
    tests: list[NormalizedTest] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None
