"""Merge test runs produced by the shards of one execution."""

import logging
from collections.abc import Sequence
from typing import Any

from boostsec.playwright_results.models.normalized import NormalizedTestRun, ShardInfo
from boostsec.playwright_results.normalizer import calculate_totals

logger = logging.getLogger(__name__)


def aggregate_sharded_runs(runs: Sequence[NormalizedTestRun]) -> NormalizedTestRun:
    """Aggregate shard runs into a single run.

    Tests are concatenated in input order and totals are recalculated from
    the merged tests. The merged run spans from the earliest start to the
    latest end and keeps the run id of the first run.

    Args:
        runs: Runs from the different shards

    Returns:
        Aggregated run. A single run is returned as is.

    Raises:
        ValueError: If no runs are provided

    """
    if not runs:
        raise ValueError("No test runs provided for aggregation")

    if len(runs) == 1:
        return runs[0]

    base_run = runs[0]
    tests = [test for run in runs for test in run.tests]
    projects = sorted({project for run in runs for project in run.projects})
    shards: list[ShardInfo] = [shard for run in runs for shard in run.shards or []]

    metadata: dict[str, Any] = {}
    for run in runs:
        if run.metadata:
            metadata.update(run.metadata)

    started_at = min(run.started_at for run in runs)
    ended_at = max(run.ended_at for run in runs)
    duration = (ended_at - started_at).total_seconds() * 1000

    logger.info(
        f"Aggregated {len(runs)} runs into {base_run.run_id}: "
        f"{len(tests)} tests, {len(shards)} shards"
    )

    return NormalizedTestRun(
        run_id=base_run.run_id,
        started_at=started_at,
        ended_at=ended_at,
        duration=duration,
        projects=projects,
        shards=shards or None,
        totals=calculate_totals(tests),
        tests=tests,
        metadata=metadata or None,
    )


def are_runs_from_same_execution(runs: Sequence[NormalizedTestRun]) -> bool:
    """Check that runs look like distinct shards of one execution.

    Every run must carry shard information, all runs must agree on the
    number of shards and no shard index may appear twice. Missing shards are
    allowed.
    """
    if len(runs) <= 1:
        return True

    if not all(run.shards for run in runs):
        logger.info("Not all runs carry shard information")
        return False

    shard_totals = {shard.total for run in runs for shard in run.shards or []}
    if len(shard_totals) > 1:
        logger.info("Runs declare different shard totals")
        return False

    seen: set[int] = set()
    for run in runs:
        for shard in run.shards or []:
            if shard.current in seen:
                logger.info(f"Shard {shard.current} appears more than once")
                return False
            seen.add(shard.current)

    return True
