"""CLI entrypoint for the pool statistics collector.

Architecture:
  1. Load .env, then ADO_URL / ADO_TOKEN into a RunContext
  2. Read pools.json
  3. For each pool: write pools/<name>/<timestamp> with agent and build stats
"""

from __future__ import annotations

import argparse
import os
import textwrap
from pathlib import Path

import structlog

from poolstats.common.console import C, banner, fail, info, ok, warn
from poolstats.common.constants import (
    DOTENV_FILE,
    ENV_TOKEN,
    ENV_URL,
    OUTPUT_DIR,
    POOL_DELAY_SECS,
    POOLS_FILE,
)
from poolstats.common.errors import ConfigError
from poolstats.common.logging import configure_structlog
from poolstats.runner.context import RunContext
from poolstats.runner.orchestrator import run
from poolstats.runner.pools import load_pools


def load_dotenv(env_path: Path) -> list[str]:
    """Apply KEY=VALUE lines from *env_path* to os.environ.

    Accepts an optional ``export`` prefix, matching quotes, and ` #` comments
    after unquoted values.  Variables already set win.  Returns the names
    that were applied; values are never logged.
    """
    if not env_path.is_file():
        return []
    applied: list[str] = []
    for raw in env_path.read_text().splitlines():
        line = raw.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key, value = key.strip(), value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        else:
            value = value.split(" #", 1)[0].rstrip()
        if key and key not in os.environ:
            os.environ[key] = value
            applied.append(key)
    structlog.get_logger("cli").info("dotenv_loaded", path=str(env_path), keys=applied)
    return applied


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Record agent utilization and build queue statistics per pool.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent(f"""\
            environment:
              {ENV_URL}     organization URL, e.g. https://dev.azure.com/my-org
              {ENV_TOKEN}   personal access token
        """),
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=Path(POOLS_FILE),
        help=f"JSON object of pool ID -> pool name. Default: {POOLS_FILE}",
    )
    parser.add_argument(
        "-o", "--output-dir", type=Path, default=Path(OUTPUT_DIR),
        help=f"Root directory for per-pool log files. Default: {OUTPUT_DIR}",
    )
    parser.add_argument(
        "--delay", type=float, default=POOL_DELAY_SECS,
        help=f"Seconds to wait after each pool. Default: {POOL_DELAY_SECS:g}",
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Socket timeout for API requests, in seconds. Default: none",
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_structlog(verbose=args.verbose)

    load_dotenv(Path(DOTENV_FILE))
    ctx = RunContext.from_env(
        output_dir=args.output_dir, delay=args.delay, timeout=args.timeout,
    )
    if not ctx.base_url:
        warn(f"{ENV_URL} is not set; requests will fail.")

    try:
        pools = load_pools(args.config)
    except ConfigError as exc:
        fail(str(exc))

    banner("Pool statistics")
    info(f"Pools: {len(pools)}  Run: {ctx.timestamp}")
    print()

    try:
        reports = run(pools, ctx)
    except OSError as exc:
        fail(f"Cannot write pool log: {exc}")

    print()
    for report in reports:
        ok(f"{report.pool_name}: {report.log_path}")
    print(f"{C.BOLD}All done.{C.NC}")
