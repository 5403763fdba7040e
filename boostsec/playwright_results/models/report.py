"""Models for the Playwright JSON reporter output."""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReportModel(BaseModel):
    """Base model accepting the camelCase keys used by the reporter."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Location(ReportModel):
    """Source location of a test or error."""

    file: str | None = None
    line: int | None = None
    column: int | None = None


class ErrorInfo(ReportModel):
    """Error raised during a test attempt."""

    message: str = ""
    stack: str | None = None
    snippet: str | None = None
    location: Location | None = None


class Attachment(ReportModel):
    """File or inline content attached to a test attempt."""

    name: str = "attachment"
    content_type: str = "application/octet-stream"
    path: str | None = None
    body: str | None = None


class Annotation(ReportModel):
    """Annotation such as skip, fixme or slow."""

    type: str = "unknown"
    description: str | None = None


class TestAttempt(ReportModel):
    """A single execution try of a test."""

    __test__ = False

    status: str = Field(..., description="Attempt status (passed, failed, ...)")
    duration: float = Field(default=0, description="Attempt duration in ms")
    worker_index: int | None = None
    retry: int | None = None
    start_time: str | None = None
    error: ErrorInfo | None = None
    errors: list[ErrorInfo] = Field(default_factory=list)
    stdout: list[Any] = Field(default_factory=list)
    stderr: list[Any] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)


class TestResult(ReportModel):
    """Attempt holder: one test executed under one project."""

    __test__ = False

    status: str = Field(
        ..., description="Coarse status (expected, unexpected, skipped, flaky)"
    )
    project_name: str | None = None
    project_id: str | None = None
    expected_status: str | None = None
    timeout: float | None = None
    annotations: list[Annotation] = Field(default_factory=list)
    results: list[TestAttempt] = Field(default_factory=list)


class TestCase(ReportModel):
    """Test node, either nested in a spec or directly in a legacy suite."""

    __test__ = False

    title: str = ""
    ok: bool | None = None
    tags: list[str] = Field(default_factory=list)
    id: str | None = None
    retries: int | None = Field(
        default=None, description="Explicit retry count reported by the runner"
    )
    location: Location | None = None
    tests: list[TestResult] = Field(default_factory=list)


class Spec(ReportModel):
    """Spec node grouping the per-project tests of one test function."""

    title: str
    ok: bool | None = None
    id: str | None = None
    file: str | None = None
    line: int | None = None
    column: int | None = None
    tests: list[TestCase] = Field(default_factory=list)


@dataclass(frozen=True)
class SpecLeaf:
    """Leaf test found under a spec node."""

    spec: Spec
    case: TestCase


@dataclass(frozen=True)
class CaseLeaf:
    """Leaf test found directly under a suite (legacy layout)."""

    case: TestCase


LeafTest = SpecLeaf | CaseLeaf


class Suite(ReportModel):
    """Named group of tests, possibly nesting further suites."""

    title: str
    file: str | None = None
    line: int | None = None
    column: int | None = None
    suites: list["Suite"] | None = None
    specs: list[Spec] | None = None
    tests: list[TestCase] | None = None

    def iter_leaves(self) -> Iterator[LeafTest]:
        """Yield the suite's own leaf tests, specs first then legacy tests."""
        for spec in self.specs or []:
            for case in spec.tests:
                yield SpecLeaf(spec=spec, case=case)
        for case in self.tests or []:
            yield CaseLeaf(case=case)

    def iter_results(self) -> Iterator[TestResult]:
        """Yield every attempt holder in this suite and its descendants."""
        for child in self.suites or []:
            yield from child.iter_results()
        for leaf in self.iter_leaves():
            yield from leaf.case.tests


class ProjectConfig(ReportModel):
    """Project declared in the runner configuration."""

    id: str | None = None
    name: str


class ShardDescriptor(ReportModel):
    """Shard position of a report within a partitioned run."""

    current: int
    total: int


class ReportConfig(ReportModel):
    """Runner configuration captured in the report."""

    root_dir: str | None = None
    projects: list[ProjectConfig] | None = None
    metadata: dict[str, Any] | None = None
    shard: ShardDescriptor | None = None


class ReportStats(ReportModel):
    """Run-level timing and outcome counters."""

    start_time: datetime
    end_time: datetime | None = None
    duration: float = 0
    expected: int = 0
    unexpected: int = 0
    skipped: int = 0
    flaky: int = 0


class Report(ReportModel):
    """Root of a Playwright JSON report."""

    config: ReportConfig = Field(default_factory=ReportConfig)
    suites: list[Suite]
    stats: ReportStats | None = None
    shards: list[ShardDescriptor] | None = None

    def iter_results(self) -> Iterator[TestResult]:
        """Yield every attempt holder in the report."""
        for suite in self.suites:
            yield from suite.iter_results()
