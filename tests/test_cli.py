"""
End-to-end tests for the command line entrypoint.
"""

from __future__ import annotations

import json
import os

import pytest

from conftest import make_agent
from poolstats.runner import cli

ADO_URL = "https://dev.azure.com/acme"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("ADO_URL", "ADO_TOKEN"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return tmp_path


def test_run_writes_pool_logs(workdir, api, monkeypatch):
    monkeypatch.setenv("ADO_URL", ADO_URL)
    monkeypatch.setenv("ADO_TOKEN", "pat")
    (workdir / "pools.json").write_text(json.dumps({"p1": "PoolA"}))
    api.set_json(
        f"{ADO_URL}/_apis/distributedtask/pools/p1/agents?includeAssignedRequest=true",
        {"value": [make_agent(active=True), make_agent(enabled=False)]},
    )

    cli.main(["--delay", "0"])

    logs = list((workdir / "pools" / "PoolA").iterdir())
    assert len(logs) == 1
    content = logs[0].read_text()
    assert content.startswith("Pool: PoolA\ntotalAgents: 2\n")
    assert "agentUtilization: 100\n" in content
    assert all(token == "pat" for _, token in api.calls)


def test_dotenv_supplies_credentials(workdir, api):
    (workdir / ".env").write_text('# ado\nADO_URL="https://dev.azure.com/fromfile"\nADO_TOKEN=abc\n')
    (workdir / "pools.json").write_text(json.dumps({"9": "Nine"}))

    cli.main(["--delay", "0", "--output-dir", str(workdir / "out")])

    assert api.calls[0] == (
        "https://dev.azure.com/fromfile/_apis/distributedtask/pools/9/agents?includeAssignedRequest=true",
        "abc",
    )
    assert (workdir / "out" / "Nine").is_dir()


def test_missing_config_exits_non_zero(workdir, api):
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])

    assert exc_info.value.code == 1
    assert api.calls == []
    assert not (workdir / "pools").exists()


def test_malformed_config_processes_no_pools(workdir, api):
    (workdir / "pools.json").write_text("{oops")

    cli.main(["--delay", "0"])

    assert api.calls == []


class TestLoadDotenv:
    KEYS = ("POOLSTATS_A", "POOLSTATS_B", "POOLSTATS_C", "POOLSTATS_D")

    @pytest.fixture(autouse=True)
    def _isolate(self, monkeypatch):
        for name in self.KEYS:
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)

    def test_missing_file_applies_nothing(self, tmp_path):
        assert cli.load_dotenv(tmp_path / ".env") == []

    def test_parses_export_quotes_and_comments(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text(
            "# comment\n"
            "export POOLSTATS_A=plain # trailing note\n"
            "POOLSTATS_B='single # not a comment'\n"
            'POOLSTATS_C = "double"\n'
            "not a pair\n"
        )

        applied = cli.load_dotenv(env)

        assert applied == ["POOLSTATS_A", "POOLSTATS_B", "POOLSTATS_C"]
        assert os.environ["POOLSTATS_A"] == "plain"
        assert os.environ["POOLSTATS_B"] == "single # not a comment"
        assert os.environ["POOLSTATS_C"] == "double"

    def test_existing_variables_win(self, tmp_path, monkeypatch):
        monkeypatch.setenv("POOLSTATS_D", "from-shell")
        env = tmp_path / ".env"
        env.write_text("POOLSTATS_D=from-file\n")

        assert cli.load_dotenv(env) == []
        assert os.environ["POOLSTATS_D"] == "from-shell"
