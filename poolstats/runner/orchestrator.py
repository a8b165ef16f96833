"""Sequential pool walker: one log file per pool per run."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import structlog

from poolstats.collector.agents import AgentSummary, collect_agent_stats
from poolstats.collector.builds import BuildSummary, collect_build_stats
from poolstats.common.console import info
from poolstats.runner.context import RunContext


@dataclass
class PoolReport:
    """Outcome for one pool of the run."""

    pool_id: str
    pool_name: str
    log_path: Path
    agents: AgentSummary | None = None   # None when the response was unusable
    builds: BuildSummary | None = None


def collect_pool(pool_id: str, pool_name: str, ctx: RunContext) -> PoolReport:
    """Write the header and both collectors' output for a single pool.

    ``OSError`` from creating the directory or the log file propagates.
    """
    log_path = ctx.log_path(pool_name)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    report = PoolReport(pool_id=pool_id, pool_name=pool_name, log_path=log_path)

    with open(log_path, "w", encoding="utf-8") as log_file:
        log_file.write(f"Pool: {pool_name}\n")
        report.agents = collect_agent_stats(pool_id, log_file, ctx)
        report.builds = collect_build_stats(pool_id, log_file, ctx)
    return report


def run(
    pools: dict[str, str],
    ctx: RunContext,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> list[PoolReport]:
    """Collect every configured pool in order, pausing ``ctx.delay`` after each."""
    log = structlog.get_logger("orchestrator")
    reports: list[PoolReport] = []

    for pool_id, pool_name in pools.items():
        info(f"Checking pool: {pool_name}")
        report = collect_pool(pool_id, pool_name, ctx)
        reports.append(report)

        log.info(
            "pool_done",
            pool_id=pool_id,
            pool_name=pool_name,
            log_path=str(report.log_path),
            builds_running=report.builds.builds_running if report.builds else None,
        )
        sleep(ctx.delay)

    return reports
