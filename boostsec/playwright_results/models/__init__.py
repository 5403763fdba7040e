"""Data models for raw reports, normalized runs, and statistics."""

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
    CaseLeaf,
    LeafTest,
    Report,
    SpecLeaf,
    Suite,
)
from boostsec.playwright_results.models.statistics import (
    DurationStatistics,
    GroupStatistics,
    TestStatistics,
    TestSummary,
)

__all__ = [
    "CaseLeaf",
    "DurationStatistics",
    "GroupStatistics",
    "LeafTest",
    "NormalizedTest",
    "NormalizedTestRun",
    "Report",
    "ShardInfo",
    "SpecLeaf",
    "Suite",
    "TestAnnotation",
    "TestAttachment",
    "TestError",
    "TestStatistics",
    "TestStatus",
    "TestSummary",
    "TestTotals",
]
