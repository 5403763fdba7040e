"""Sort tests of a normalized run."""

import functools
from collections.abc import Callable

from boostsec.playwright_results.models.normalized import (
    NormalizedTest,
    NormalizedTestRun,
)

Comparator = Callable[[NormalizedTest, NormalizedTest], int]

STATUS_ORDER = {"failed": 0, "flaky": 1, "passed": 2, "skipped": 3}


def _compare(a: object, b: object) -> int:
    """Three-way compare two values."""
    return (a > b) - (a < b)  # type: ignore[operator]


def sort_tests(run: NormalizedTestRun, comparator: Comparator) -> NormalizedTestRun:
    """Return a new run with tests sorted by the comparator.

    The sort is stable and the input run is left untouched.
    """
    tests = sorted(run.tests, key=functools.cmp_to_key(comparator))
    return run.model_copy(update={"tests": tests})


def by_duration_desc(a: NormalizedTest, b: NormalizedTest) -> int:
    """Slowest first."""
    return _compare(b.duration or 0, a.duration or 0)


def by_duration_asc(a: NormalizedTest, b: NormalizedTest) -> int:
    """Fastest first."""
    return _compare(a.duration or 0, b.duration or 0)


def by_status(a: NormalizedTest, b: NormalizedTest) -> int:
    """Failed, then flaky, passed and skipped."""
    return _compare(STATUS_ORDER.get(a.status, 4), STATUS_ORDER.get(b.status, 4))


def by_title(a: NormalizedTest, b: NormalizedTest) -> int:
    """Alphabetical by title."""
    return _compare(a.title, b.title)


def by_full_title(a: NormalizedTest, b: NormalizedTest) -> int:
    """Alphabetical by full title."""
    return _compare(a.full_title, b.full_title)


def by_file(a: NormalizedTest, b: NormalizedTest) -> int:
    """Alphabetical by file path."""
    return _compare(a.file, b.file)


def by_project(a: NormalizedTest, b: NormalizedTest) -> int:
    """Alphabetical by project."""
    return _compare(a.project, b.project)


def by_retries(a: NormalizedTest, b: NormalizedTest) -> int:
    """Most retried first."""
    return _compare(b.retries, a.retries)


def by_location(a: NormalizedTest, b: NormalizedTest) -> int:
    """File, then line, then column."""
    return _compare((a.file, a.line, a.column), (b.file, b.line, b.column))


def compound_sort(*comparators: Comparator) -> Comparator:
    """Chain comparators; the first non-zero result wins."""

    def compare(a: NormalizedTest, b: NormalizedTest) -> int:
        """Return the first non-zero comparison."""
        for comparator in comparators:
            result = comparator(a, b)
            if result != 0:
                return result
        return 0

    return compare


def reverse_sort(comparator: Comparator) -> Comparator:
    """Invert the order of a comparator."""
    return lambda a, b: -comparator(a, b)
