"""Grouping and summary helpers for normalized runs."""

import re
from collections.abc import Callable, Hashable, Iterable
from typing import TypeVar

from boostsec.playwright_results.models.normalized import (
    NormalizedTest,
    NormalizedTestRun,
)
from boostsec.playwright_results.models.statistics import TestSummary

K = TypeVar("K", bound=Hashable)


def group_tests(
    tests: Iterable[NormalizedTest], key_fn: Callable[[NormalizedTest], K]
) -> dict[K, list[NormalizedTest]]:
    """Group tests by the key returned for each of them.

    Args:
        tests: Tests to group
        key_fn: Function extracting the group key of a test

    Returns:
        Mapping of keys to tests, both in first-seen order

    """
    groups: dict[K, list[NormalizedTest]] = {}
    for test in tests:
        groups.setdefault(key_fn(test), []).append(test)
    return groups


def get_unique_values(
    tests: Iterable[NormalizedTest], extract_fn: Callable[[NormalizedTest], K]
) -> list[K]:
    """Return the distinct extracted values in first-seen order."""
    return list(dict.fromkeys(extract_fn(test) for test in tests))


def get_unique_projects(run: NormalizedTestRun) -> list[str]:
    """Return the projects of the run in first-seen order."""
    return get_unique_values(run.tests, lambda test: test.project)


def get_unique_files(run: NormalizedTestRun) -> list[str]:
    """Return the files of the run in first-seen order."""
    return get_unique_values(run.tests, lambda test: test.file)


def calculate_pass_rate(run: NormalizedTestRun) -> float:
    """Return the percentage of passed tests (0 for an empty run)."""
    if run.totals.total == 0:
        return 0
    return run.totals.passed / run.totals.total * 100


def calculate_flaky_rate(run: NormalizedTestRun) -> float:
    """Return the percentage of flaky tests (0 for an empty run)."""
    if run.totals.total == 0:
        return 0
    return run.totals.flaky / run.totals.total * 100


def find_tests_by_pattern(
    run: NormalizedTestRun, pattern: str | re.Pattern[str]
) -> list[NormalizedTest]:
    """Find tests whose title or full title matches the pattern.

    A string pattern is compiled as a case-insensitive regex.
    """
    regex = re.compile(pattern, re.IGNORECASE) if isinstance(pattern, str) else pattern
    return [
        test
        for test in run.tests
        if regex.search(test.title) or regex.search(test.full_title)
    ]


def get_test_summary(run: NormalizedTestRun) -> TestSummary:
    """Summarize the counts and rates of a run."""
    totals = run.totals
    return TestSummary(
        total=totals.total,
        passed=totals.passed,
        failed=totals.failed,
        skipped=totals.skipped,
        flaky=totals.flaky,
        pass_rate=calculate_pass_rate(run),
        flaky_rate=calculate_flaky_rate(run),
    )


def all_tests_passed(run: NormalizedTestRun) -> bool:
    """Check that the run has tests and none of them failed."""
    return run.totals.failed == 0 and run.totals.total > 0


def has_failures(run: NormalizedTestRun) -> bool:
    """Check whether any test failed."""
    return run.totals.failed > 0


def has_flaky_tests(run: NormalizedTestRun) -> bool:
    """Check whether any test is flaky."""
    return run.totals.flaky > 0
