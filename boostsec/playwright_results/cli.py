"""CLI entry point for the Playwright results parser."""

import asyncio
import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any

import typer
import yaml

from boostsec.playwright_results.errors import ValidationError
from boostsec.playwright_results.helpers import get_test_summary
from boostsec.playwright_results.models.normalized import NormalizedTestRun
from boostsec.playwright_results.parser import parse_reports
from boostsec.playwright_results.shards import (
    aggregate_sharded_runs,
    are_runs_from_same_execution,
)
from boostsec.playwright_results.statistics import (
    calculate_statistics,
    get_failed_tests,
    get_flaky_tests,
)

# Log to stderr so stdout only carries the summary
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,
)
logger = logging.getLogger(__name__)

app = typer.Typer()


class OutputFormat(str, Enum):
    """Rendering of the summary written to stdout."""

    json = "json"
    yaml = "yaml"


class LogLevel(str, Enum):
    """Logging levels accepted by the CLI."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def build_summary(run: NormalizedTestRun) -> dict[str, Any]:
    """Build the serializable summary of a run."""
    summary = get_test_summary(run)
    stats = calculate_statistics(run)
    return {
        "run_id": run.run_id,
        "started_at": run.started_at.isoformat(),
        "ended_at": run.ended_at.isoformat(),
        "duration": run.duration,
        "projects": run.projects,
        "shards": [shard.model_dump() for shard in run.shards or []],
        "totals": run.totals.model_dump(),
        "pass_rate": round(summary.pass_rate, 2),
        "flaky_rate": round(summary.flaky_rate, 2),
        "durations": stats.duration.model_dump(),
        "by_project": {
            name: group.model_dump() for name, group in stats.by_project.items()
        },
        "by_file": {name: group.model_dump() for name, group in stats.by_file.items()},
        "failed": [
            {
                "id": test.id,
                "full_title": test.full_title,
                "project": test.project,
                "file": test.file,
                "line": test.line,
                "message": test.error.message if test.error else None,
            }
            for test in get_failed_tests(run)
        ],
        "flaky": [test.full_title for test in get_flaky_tests(run)],
    }


@app.command()
def main(
    reports: list[Path] = typer.Argument(  # noqa: B008
        ..., help="Playwright JSON report files, one per shard"
    ),
    check_shards: bool = typer.Option(
        True,
        help="Require multiple reports to be distinct shards of one run",
        envvar="PW_RESULTS_CHECK_SHARDS",
    ),
    output_format: OutputFormat = typer.Option(  # noqa: B008
        OutputFormat.json,
        "--output-format",
        help="Summary format (json or yaml)",
        envvar="PW_RESULTS_OUTPUT_FORMAT",
    ),
    fail_on_flaky: bool = typer.Option(
        False,
        help="Exit with an error when flaky tests are found",
        envvar="PW_RESULTS_FAIL_ON_FLAKY",
    ),
    log_level: LogLevel = typer.Option(  # noqa: B008
        LogLevel.INFO,
        help="Logging level",
        envvar="PW_RESULTS_LOG_LEVEL",
        case_sensitive=False,
    ),
) -> None:
    """Summarize one or more Playwright JSON reports."""
    logging.getLogger().setLevel(log_level.value)
    logger.info(f"Parsing {len(reports)} report(s)")

    try:
        runs = asyncio.run(parse_reports(reports))
    except ValidationError as e:
        logger.error(f"Invalid report: {e}")
        for issue in e.issues:
            logger.error(f"  {issue.path}: {issue.message}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if check_shards and len(runs) > 1 and not are_runs_from_same_execution(runs):
        typer.echo(
            "Error: reports are not distinct shards of the same execution", err=True
        )
        raise typer.Exit(code=1)

    run = aggregate_sharded_runs(runs)
    summary = build_summary(run)

    if output_format is OutputFormat.yaml:
        typer.echo(yaml.safe_dump(summary, sort_keys=False, allow_unicode=True))
    else:
        typer.echo(json.dumps(summary, indent=2, ensure_ascii=False))

    totals = run.totals
    logger.info(
        f"Tests: {totals.total} total, {totals.passed} passed, "
        f"{totals.failed} failed, {totals.skipped} skipped, {totals.flaky} flaky"
    )

    if totals.failed:
        logger.error(f"Tests failed: {totals.failed}/{totals.total}")
        raise typer.Exit(code=1)

    if fail_on_flaky and totals.flaky:
        logger.error(f"Flaky tests found: {totals.flaky}/{totals.total}")
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
