"""Statistics over normalized test runs."""

import math
from collections.abc import Sequence

from boostsec.playwright_results.models.normalized import (
    NormalizedTest,
    NormalizedTestRun,
)
from boostsec.playwright_results.models.statistics import (
    DurationStatistics,
    GroupStatistics,
    TestStatistics,
)


def calculate_percentile(sorted_values: Sequence[float], percentile: float) -> float:
    """Return the nearest-rank percentile of ascending values (0 when empty)."""
    if not sorted_values:
        return 0
    index = math.ceil(percentile / 100 * len(sorted_values)) - 1
    return sorted_values[max(0, min(index, len(sorted_values) - 1))]


def calculate_duration_stats(tests: Sequence[NormalizedTest]) -> DurationStatistics:
    """Compute total, average, median, p95, min and max durations."""
    if not tests:
        return DurationStatistics()

    durations = sorted(test.duration or 0 for test in tests)
    total = sum(durations)
    return DurationStatistics(
        total=total,
        average=total / len(durations),
        median=calculate_percentile(durations, 50),
        p95=calculate_percentile(durations, 95),
        min=durations[0],
        max=durations[-1],
    )


def _update_group(group: GroupStatistics, test: NormalizedTest) -> None:
    """Count a test in a group."""
    group.total += 1
    group.duration += test.duration or 0
    setattr(group, test.status, getattr(group, test.status) + 1)


def calculate_statistics(run: NormalizedTestRun) -> TestStatistics:
    """Calculate counts, duration distribution and project/file rollups.

    Args:
        run: Normalized test run

    Returns:
        Statistics of the run; all zero for a run without tests

    """
    stats = TestStatistics()

    for test in run.tests:
        stats.total += 1
        setattr(stats, test.status, getattr(stats, test.status) + 1)

        project = test.project or "default"
        if project not in stats.by_project:
            stats.by_project[project] = GroupStatistics()
        _update_group(stats.by_project[project], test)

        file = test.file or "unknown"
        if file not in stats.by_file:
            stats.by_file[file] = GroupStatistics()
        _update_group(stats.by_file[file], test)

    stats.duration = calculate_duration_stats(run.tests)
    return stats


def get_failed_tests(run: NormalizedTestRun) -> list[NormalizedTest]:
    """Return tests with failed status."""
    return [test for test in run.tests if test.status == "failed"]


def get_flaky_tests(run: NormalizedTestRun) -> list[NormalizedTest]:
    """Return tests marked flaky or that needed at least one retry."""
    return [test for test in run.tests if test.status == "flaky" or test.retries > 0]


def get_tests_by_project(
    run: NormalizedTestRun, project: str
) -> list[NormalizedTest]:
    """Return tests that ran under the given project."""
    return [test for test in run.tests if test.project == project]


def get_tests_by_file(
    run: NormalizedTestRun, file_path: str
) -> list[NormalizedTest]:
    """Return tests defined in the given file."""
    return [test for test in run.tests if test.file == file_path]
