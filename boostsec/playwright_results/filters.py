"""Filter tests of a normalized run."""

import re
from collections.abc import Callable

from boostsec.playwright_results.models.normalized import (
    NormalizedTest,
    NormalizedTestRun,
    TestStatus,
)
from boostsec.playwright_results.normalizer import calculate_totals

Predicate = Callable[[NormalizedTest], bool]


def filter_tests(run: NormalizedTestRun, predicate: Predicate) -> NormalizedTestRun:
    """Return a new run holding only the tests matching the predicate.

    Totals are recalculated from the kept tests; every other field of the
    run is preserved.

    Examples:
        failed_run = filter_tests(run, failed)
        slow_run = filter_tests(run, slow(5000))

    """
    tests = [test for test in run.tests if predicate(test)]
    return run.model_copy(update={"tests": tests, "totals": calculate_totals(tests)})


def failed(test: NormalizedTest) -> bool:
    """Match failed tests."""
    return test.status == "failed"


def passed(test: NormalizedTest) -> bool:
    """Match passed tests."""
    return test.status == "passed"


def skipped(test: NormalizedTest) -> bool:
    """Match skipped tests."""
    return test.status == "skipped"


def flaky(test: NormalizedTest) -> bool:
    """Match tests marked flaky or that were retried."""
    return test.status == "flaky" or test.retries > 0


def with_errors(test: NormalizedTest) -> bool:
    """Match tests that recorded an error."""
    return test.error is not None


def with_attachments(test: NormalizedTest) -> bool:
    """Match tests with at least one attachment."""
    return bool(test.attachments)


def by_status(status: TestStatus) -> Predicate:
    """Match tests with the given status."""
    return lambda test: test.status == status


def slow(threshold_ms: float) -> Predicate:
    """Match tests that took longer than the threshold."""
    return lambda test: test.duration > threshold_ms


def by_project(project: str) -> Predicate:
    """Match tests that ran under the given project."""
    return lambda test: test.project == project


def by_file(file_path: str) -> Predicate:
    """Match tests defined in the given file."""
    return lambda test: test.file == file_path


def _matches(value: str, pattern: str | re.Pattern[str]) -> bool:
    """Check a value against a substring or compiled regex."""
    if isinstance(pattern, str):
        return pattern in value
    return pattern.search(value) is not None


def by_title(pattern: str | re.Pattern[str]) -> Predicate:
    """Match titles containing a string or matching a compiled regex."""
    return lambda test: _matches(test.title, pattern)


def by_full_title(pattern: str | re.Pattern[str]) -> Predicate:
    """Match full titles containing a string or matching a compiled regex."""
    return lambda test: _matches(test.full_title, pattern)


def combine_predicates(*predicates: Predicate) -> Predicate:
    """Combine predicates with AND logic."""
    return lambda test: all(predicate(test) for predicate in predicates)


def combine_predicates_or(*predicates: Predicate) -> Predicate:
    """Combine predicates with OR logic."""
    return lambda test: any(predicate(test) for predicate in predicates)
