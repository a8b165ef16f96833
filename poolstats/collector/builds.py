"""Queued and running build statistics for a single pool."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Iterable, TextIO

import structlog

from poolstats.collector.models import JobRequest, JobRequestList, decode
from poolstats.common.errors import RecordDecodeError
from poolstats.common.http import fetch

if TYPE_CHECKING:
    from poolstats.runner.context import RunContext

_log = structlog.get_logger("builds")

# Elapsed times for unparseable timestamps are measured from here.
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

# Date, "T", time, optional fraction, then "Z" or a numeric offset.
_RFC3339 = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)

# fromisoformat() stops at microseconds; the API sends up to 7 digits.
_FRACTION = re.compile(r"(\.\d{6})\d+")


@dataclass
class BuildSummary:
    builds_in_the_queue: int = 0
    builds_running: int = 0
    details: list[str] = field(default_factory=list)

    def lines(self) -> list[str]:
        # builds_running is not part of the file report.
        return [*self.details, f"Builds in the queue: {self.builds_in_the_queue}\n"]


def parse_rfc3339(value: str | None) -> datetime:
    """Parse an RFC3339 timestamp, falling back to :data:`ZERO_TIME`.

    A failure is logged, not raised.
    """
    if value is None:
        _log.warning("timestamp_missing")
        return ZERO_TIME
    if not _RFC3339.fullmatch(value):
        _log.warning("timestamp_not_rfc3339", value=value)
        return ZERO_TIME
    normalized = _FRACTION.sub(r"\1", value.upper().replace("Z", "+00:00"))
    try:
        return datetime.fromisoformat(normalized)
    except ValueError as exc:
        _log.warning("timestamp_parse_failed", value=value, error=str(exc))
        return ZERO_TIME


def format_elapsed(elapsed: timedelta) -> str:
    """H:MM:SS[.ffffff], with a leading minus when the server clock is ahead."""
    if elapsed < timedelta(0):
        return f"-{-elapsed}"
    return str(elapsed)


def _detail(job: JobRequest, state: str, elapsed: timedelta) -> str:
    return (
        f"Build: {job.owner_name} - {state} for {format_elapsed(elapsed)}. "
        f"Full build data: {job.dump()}\n"
    )


def summarize_builds(jobs: Iterable[JobRequest], now: datetime) -> BuildSummary:
    """Classify job requests as queued, running or finished (ignored)."""
    s = BuildSummary()
    for job in jobs:
        if not job.is_assigned:
            elapsed = now - parse_rfc3339(job.queue_time)
            s.builds_in_the_queue += 1
            s.details.append(_detail(job, "in the queue", elapsed))
        elif not job.has_result:
            elapsed = now - parse_rfc3339(job.assign_time)
            s.builds_running += 1
            s.details.append(_detail(job, "running", elapsed))
    return s


def collect_build_stats(
    pool_id: str,
    log_file: TextIO,
    ctx: RunContext,
    now: datetime | None = None,
) -> BuildSummary | None:
    """Fetch job requests for *pool_id* and append queue details to *log_file*."""
    body = fetch(ctx.job_requests_url(pool_id), ctx.token, timeout=ctx.timeout)
    try:
        data: JobRequestList = decode(JobRequestList, body)
    except RecordDecodeError as exc:
        _log.warning("job_requests_decode_failed", pool_id=pool_id, error=str(exc))
        return None

    summary = summarize_builds(data.value, now or datetime.now(timezone.utc))
    log_file.write("".join(summary.lines()))
    _log.info(
        "builds_collected",
        pool_id=pool_id,
        queued=summary.builds_in_the_queue,
        running=summary.builds_running,
    )
    return summary
