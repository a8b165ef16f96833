"""Pool configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from poolstats.common.errors import ConfigError

_log = structlog.get_logger("pools")


def load_pools(path: Path) -> dict[str, str]:
    """Read the pool ID -> pool name mapping from *path*.

    An unreadable file is fatal.  Content that is not a JSON object of
    strings yields no pools; the run then does nothing.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ConfigError(
            f"Failed to find {path.name}", details={"path": str(path)}, cause=exc
        ) from exc

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        _log.warning("pools_config_malformed", path=str(path), error=str(exc))
        return {}

    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        _log.warning("pools_config_not_a_mapping", path=str(path))
        return {}
    return data
