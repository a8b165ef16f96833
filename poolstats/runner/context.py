"""Run context: configuration shared by every pool of a single run."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from poolstats.common.constants import (
    AGENTS_PATH,
    ENV_TOKEN,
    ENV_URL,
    JOB_REQUESTS_PATH,
    OUTPUT_DIR,
    POOL_DELAY_SECS,
    TIMESTAMP_FORMAT,
)


@dataclass(frozen=True)
class RunContext:
    """Immutable settings captured once at startup."""

    base_url: str                       # e.g. "https://dev.azure.com/my-org"
    token: str                          # ADO personal access token
    started_at: datetime = field(default_factory=datetime.now)
    output_dir: Path = field(default_factory=lambda: Path(OUTPUT_DIR))
    delay: float = POOL_DELAY_SECS
    timeout: float | None = None        # socket timeout; None = stack default

    @classmethod
    def from_env(cls, **overrides) -> RunContext:  # noqa: ANN003
        """Build a context from ``ADO_URL`` / ``ADO_TOKEN``.

        Missing variables become empty strings, not a startup failure.
        """
        return cls(
            base_url=os.environ.get(ENV_URL, ""),
            token=os.environ.get(ENV_TOKEN, ""),
            **overrides,
        )

    @property
    def timestamp(self) -> str:
        """Log file name shared by all pools of this run."""
        return self.started_at.strftime(TIMESTAMP_FORMAT)

    def agents_url(self, pool_id: str) -> str:
        return self.base_url + AGENTS_PATH.format(pool_id=pool_id)

    def job_requests_url(self, pool_id: str) -> str:
        return self.base_url + JOB_REQUESTS_PATH.format(pool_id=pool_id)

    def log_path(self, pool_name: str) -> Path:
        return self.output_dir / pool_name / self.timestamp


def parse_timestamp(name: str) -> datetime:
    """Inverse of :attr:`RunContext.timestamp`."""
    return datetime.strptime(name, TIMESTAMP_FORMAT)
