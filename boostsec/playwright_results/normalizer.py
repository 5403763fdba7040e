"""Flatten a validated Playwright report into a normalized test run."""

import logging
import re
import uuid
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from boostsec.playwright_results.models.normalized import (
    NormalizedTest,
    NormalizedTestRun,
    ShardInfo,
    TestAnnotation,
    TestAttachment,
    TestError,
    TestStatus,
    TestTotals,
)
from boostsec.playwright_results.models.report import (
    ErrorInfo,
    LeafTest,
    Report,
    SpecLeaf,
    Suite,
    TestAttempt,
    TestResult,
)

logger = logging.getLogger(__name__)

TITLE_SEPARATOR = " › "
DEFAULT_PROJECT = "default"
UNKNOWN_FILE = "unknown"

PASSING_STATUSES = frozenset({"expected", "passed"})
FAILING_ATTEMPT_STATUSES = frozenset({"failed", "timedOut"})

_ID_UNSAFE = re.compile(r"[^a-zA-Z0-9-]")


@dataclass(frozen=True)
class _Position:
    """Location inherited from the nearest suites declaring one."""

    file: str | None = None
    line: int | None = None
    column: int | None = None

    def override(
        self, file: str | None, line: int | None, column: int | None
    ) -> "_Position":
        """Return a position with the given fields replacing known ones."""
        return _Position(
            file=file if file is not None else self.file,
            line=line if line is not None else self.line,
            column=column if column is not None else self.column,
        )


def _utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(timezone.utc)


def _new_run_id() -> str:
    """Return a fresh random run identifier."""
    return str(uuid.uuid4())


def generate_test_id(project: str, file: str, title: str, index: int) -> str:
    """Build a deterministic identifier for a test."""
    return _ID_UNSAFE.sub("_", f"{project}-{file}-{title}-{index}")


def resolve_retries(
    case_retries: int | None, attempts: Sequence[TestAttempt]
) -> int:
    """Return the explicit retry count, or one less than the attempt count."""
    if case_retries is not None:
        return max(0, case_retries)
    return max(0, len(attempts) - 1)


def determine_status(
    status: str, retries: int, attempts: Sequence[TestAttempt]
) -> TestStatus:
    """Resolve the status of a test from its coarse status and attempts.

    This is a mixed policy. Attempts are retry-aware: a test that passed on
    its final attempt after a failed or timed out attempt is flaky, even when
    the runner reports it as expected. A coarse "flaky" status reported by the
    runner is also kept as flaky rather than counted as failed. Any other
    status that is neither passing nor skipped is failed.
    """
    if status == "skipped":
        return "skipped"
    if status == "flaky":
        return "flaky"
    if status in PASSING_STATUSES:
        if retries > 0 and any(
            attempt.status in FAILING_ATTEMPT_STATUSES for attempt in attempts
        ):
            return "flaky"
        return "passed"
    return "failed"


def calculate_totals(tests: Iterable[NormalizedTest]) -> TestTotals:
    """Count tests per status and sum their durations in one pass."""
    counts = {"passed": 0, "failed": 0, "skipped": 0, "flaky": 0}
    total = 0
    duration = 0.0
    for test in tests:
        total += 1
        duration += test.duration or 0
        counts[test.status] += 1
    return TestTotals(total=total, duration=duration, **counts)


def _extract_error(attempt: TestAttempt | None) -> TestError | None:
    """Convert the error of an attempt, if any."""
    if attempt is None:
        return None
    error: ErrorInfo | None = attempt.error
    if error is None and attempt.errors:
        error = attempt.errors[0]
    if error is None:
        return None
    location = error.location
    return TestError(
        message=error.message or "Unknown error",
        stack=error.stack,
        snippet=error.snippet,
        file=location.file if location else None,
        line=location.line if location else None,
        column=location.column if location else None,
    )


def _extract_attachments(attempt: TestAttempt | None) -> list[TestAttachment]:
    """Convert the attachments of an attempt."""
    if attempt is None:
        return []
    return [
        TestAttachment(
            name=attachment.name,
            content_type=attachment.content_type,
            path=attachment.path,
            body=attachment.body,
        )
        for attachment in attempt.attachments
    ]


class _Flattener:
    """Walks the suite tree and emits one normalized test per attempt holder."""

    def __init__(self, project: str = DEFAULT_PROJECT) -> None:
        """Initialize with the project used for tests without one."""
        self.project = project
        self.tests: list[NormalizedTest] = []

    def flatten(
        self,
        suites: Sequence[Suite],
        parent_path: Sequence[str] = (),
        parent_position: _Position = _Position(),
    ) -> list[NormalizedTest]:
        """Flatten suites depth-first, child suites before the suite's own tests."""
        for suite in suites:
            suite_path = [*parent_path, suite.title]
            position = parent_position.override(suite.file, suite.line, suite.column)

            if suite.suites:
                self.flatten(suite.suites, suite_path, position)

            for leaf in suite.iter_leaves():
                self._emit_leaf(leaf, suite_path, position)

        return self.tests

    def _emit_leaf(
        self, leaf: LeafTest, suite_path: Sequence[str], position: _Position
    ) -> None:
        """Append one normalized test per attempt holder of a leaf."""
        case = leaf.case
        if isinstance(leaf, SpecLeaf):
            spec = leaf.spec
            path = [*suite_path, spec.title, case.title]
            title = case.title or spec.title
            position = position.override(spec.file, spec.line, spec.column)
        else:
            path = [*suite_path, case.title]
            title = case.title

        if case.location is not None:
            position = position.override(
                case.location.file, case.location.line, case.location.column
            )

        full_title = TITLE_SEPARATOR.join(segment for segment in path if segment)
        for result in case.tests:
            self.tests.append(
                self._build_test(result, case.retries, title, full_title, position)
            )

    def _build_test(
        self,
        result: TestResult,
        case_retries: int | None,
        title: str,
        full_title: str,
        position: _Position,
    ) -> NormalizedTest:
        """Build the normalized test of one attempt holder."""
        project = result.project_name or result.project_id or self.project
        file = position.file or UNKNOWN_FILE
        attempts = result.results
        last_attempt = attempts[-1] if attempts else None
        retries = resolve_retries(case_retries, attempts)

        return NormalizedTest(
            id=generate_test_id(project, file, title, len(self.tests)),
            title=title,
            full_title=full_title,
            file=file,
            line=position.line or 0,
            column=position.column or 0,
            project=project,
            status=determine_status(result.status, retries, attempts),
            duration=last_attempt.duration if last_attempt else 0,
            retries=retries,
            error=_extract_error(last_attempt),
            attachments=_extract_attachments(last_attempt),
            annotations=[
                TestAnnotation(type=annotation.type, description=annotation.description)
                for annotation in result.annotations
            ],
        )


def flatten_tests(
    suites: Sequence[Suite], project: str = DEFAULT_PROJECT
) -> list[NormalizedTest]:
    """Flatten a suite tree into a list of normalized tests.

    Args:
        suites: Root suites of the report
        project: Project used for tests that do not declare one

    Returns:
        Normalized tests in depth-first document order

    """
    return _Flattener(project).flatten(suites)


def extract_projects(report: Report) -> list[str]:
    """Collect declared and observed project names, sorted and unique."""
    projects = {project.name for project in report.config.projects or []}
    projects.update(
        result.project_name for result in report.iter_results() if result.project_name
    )
    return sorted(projects)


def extract_shards(report: Report, test_count: int) -> list[ShardInfo] | None:
    """Build shard information from the report's shard descriptors.

    The test count is the count of the whole report, as a single report does
    not tell which of its tests belong to which shard.
    """
    descriptors = report.shards
    if descriptors is None and report.config.shard is not None:
        descriptors = [report.config.shard]
    if not descriptors:
        return None

    duration = report.stats.duration if report.stats else 0
    return [
        ShardInfo(
            current=descriptor.current,
            total=descriptor.total,
            duration=duration,
            test_count=test_count,
        )
        for descriptor in descriptors
    ]


def _as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def normalize_report(
    report: Report,
    *,
    clock: Callable[[], datetime] = _utc_now,
    id_factory: Callable[[], str] = _new_run_id,
) -> NormalizedTestRun:
    """Normalize a validated report into a flat test run.

    Args:
        report: Validated report
        clock: Source of the current time, used when the report has no stats
        id_factory: Source of the run identifier

    Returns:
        Normalized test run

    """
    stats = report.stats
    if stats is not None:
        started_at = _as_utc(stats.start_time)
        if stats.end_time is not None:
            ended_at = _as_utc(stats.end_time)
        else:
            ended_at = started_at + timedelta(milliseconds=stats.duration)
        duration = stats.duration
    else:
        started_at = _as_utc(clock())
        ended_at = _as_utc(clock())
        duration = 0

    tests = flatten_tests(report.suites)
    totals = calculate_totals(tests)

    run = NormalizedTestRun(
        run_id=id_factory(),
        started_at=started_at,
        ended_at=ended_at,
        duration=duration,
        projects=extract_projects(report),
        shards=extract_shards(report, len(tests)),
        totals=totals,
        tests=tests,
        metadata=report.config.metadata,
    )
    logger.debug(
        f"Normalized run {run.run_id}: {totals.total} tests "
        f"({totals.passed} passed, {totals.failed} failed, "
        f"{totals.skipped} skipped, {totals.flaky} flaky)"
    )
    return run
