"""Agent utilization statistics for a single pool."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, TextIO

import structlog

from poolstats.collector.models import AgentList, AgentRecord, decode
from poolstats.common.errors import RecordDecodeError
from poolstats.common.http import fetch

if TYPE_CHECKING:
    from poolstats.runner.context import RunContext

_log = structlog.get_logger("agents")


@dataclass
class AgentSummary:
    total_agents: int = 0
    active_agents: int = 0
    idle_agents: int = 0
    enabled_agents: int = 0
    disabled_agents: int = 0
    online_agents: int = 0
    offline_agents: int = 0
    agent_utilization: float = math.nan

    def lines(self) -> list[str]:
        """Log file lines, in the fixed order the reports are read in."""
        return [
            f"totalAgents: {self.total_agents}\n",
            f"activeAgents: {self.active_agents}\n",
            f"idleAgents: {self.idle_agents}\n",
            f"enabledAgents: {self.enabled_agents}\n",
            f"disabledAgents: {self.disabled_agents}\n",
            f"onlineAgents: {self.online_agents}\n",
            f"offlineAgents: {self.offline_agents}\n",
            f"agentUtilization: {format_float(self.agent_utilization)}\n",
        ]


def utilization(active: int, enabled: int) -> float:
    """Percentage of enabled agents that are active.

    Zero enabled agents is not guarded: 0/0 gives NaN, n/0 gives +Inf.
    """
    if enabled == 0:
        return math.nan if active == 0 else math.inf
    return active / enabled * 100


def format_float(value: float) -> str:
    """Shortest round-trip form: 50, 66.66666666666667, NaN, +Inf."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = repr(value)
    return text[:-2] if text.endswith(".0") else text


def summarize_agents(agents: Iterable[AgentRecord]) -> AgentSummary:
    s = AgentSummary()
    for agent in agents:
        s.total_agents += 1
        if agent.is_active:
            s.active_agents += 1
        if agent.enabled:
            s.enabled_agents += 1
        else:
            s.disabled_agents += 1
        if agent.is_online:
            s.online_agents += 1
        else:
            s.offline_agents += 1

    s.idle_agents = s.total_agents - s.active_agents
    s.agent_utilization = utilization(s.active_agents, s.enabled_agents)
    return s


def collect_agent_stats(
    pool_id: str, log_file: TextIO, ctx: RunContext
) -> AgentSummary | None:
    """Fetch agents for *pool_id* and append the summary to *log_file*.

    Returns ``None`` (and writes nothing) when the response cannot be
    decoded.
    """
    body = fetch(ctx.agents_url(pool_id), ctx.token, timeout=ctx.timeout)
    try:
        data: AgentList = decode(AgentList, body)
    except RecordDecodeError as exc:
        _log.debug("agents_decode_failed", pool_id=pool_id, error=str(exc))
        return None

    summary = summarize_agents(data.value)
    log_file.write("".join(summary.lines()))
    _log.info(
        "agents_collected",
        pool_id=pool_id,
        total=summary.total_agents,
        active=summary.active_agents,
        utilization=format_float(summary.agent_utilization),
    )
    return summary
