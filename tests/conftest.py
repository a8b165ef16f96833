"""
Pytest configuration and fixtures for poolstats tests.
"""

from __future__ import annotations

import json
from datetime import datetime

import pytest
import structlog

from poolstats.runner.context import RunContext

BASE_URL = "https://ado.example/org"


@pytest.fixture
def ctx(tmp_path) -> RunContext:
    """Provide a run context writing under a temporary directory."""
    return RunContext(
        base_url=BASE_URL,
        token="secret-pat",
        started_at=datetime(2024, 3, 1, 14, 5, 9),
        output_dir=tmp_path / "pools",
        delay=0.0,
    )


class FakeApi:
    """Stands in for the HTTP layer: URL -> response body."""

    def __init__(self) -> None:
        self.responses: dict[str, bytes] = {}
        self.calls: list[tuple[str, str]] = []

    def set_json(self, url: str, payload) -> None:  # noqa: ANN001
        self.responses[url] = json.dumps(payload).encode()

    def set_raw(self, url: str, body: bytes) -> None:
        self.responses[url] = body

    def __call__(self, url: str, token: str, *, timeout=None) -> bytes:  # noqa: ANN001
        self.calls.append((url, token))
        return self.responses.get(url, b"")


@pytest.fixture
def api(monkeypatch) -> FakeApi:
    """Patch both collectors' fetch with an in-memory API."""
    fake = FakeApi()
    monkeypatch.setattr("poolstats.collector.agents.fetch", fake)
    monkeypatch.setattr("poolstats.collector.builds.fetch", fake)
    return fake


def make_agent(enabled: bool = True, online: bool = True, active: bool = False) -> dict:
    agent = {
        "id": 1,
        "name": "agent",
        "enabled": enabled,
        "status": "online" if online else "offline",
    }
    if active:
        agent["assignedRequest"] = {"requestId": 42}
    return agent


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo configure_structlog() calls made by CLI tests."""
    yield
    structlog.reset_defaults()
