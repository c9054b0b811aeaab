"""Tests for the doctor diagnostics sub-app."""

import json

from typer.testing import CliRunner

from cli import doctor
from cli.main import app
from tests.conftest import REGISTRY_DATA

cli_runner = CliRunner()


def test_doctor_reports_without_leaking_secrets(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SUBGRAPH_DEPLOYER_HOSTED_ACCESS_TOKEN", "tok-123")
    monkeypatch.delenv("SUBGRAPH_DEPLOYER_STUDIO_DEPLOY_KEY", raising=False)
    monkeypatch.setenv("SUBGRAPH_DEPLOYER_GRAPH_COMMAND", "definitely-not-a-graph-cli deploy")
    registry = tmp_path / "networks.json"
    registry.write_text(json.dumps(REGISTRY_DATA), encoding="utf-8")

    async def fake_reachable(url, *, settings=None):
        return True, "HTTP 200"

    monkeypatch.setattr(doctor, "check_reachable", fake_reachable)

    result = cli_runner.invoke(app, ["--registry", str(registry), "doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "MISSING" in result.output
    assert "HTTP 200" in result.output
    assert "tok-123" not in result.output


def test_check_executable():
    ok, detail = doctor._check_executable("definitely-not-a-graph-cli deploy")
    assert not ok
    assert "not found" in detail


def test_check_executable_unbalanced_quote():
    ok, detail = doctor._check_executable("yarn 'graph")
    assert not ok
    assert "cannot parse command" in detail


def test_doctor_empty_token_is_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SUBGRAPH_DEPLOYER_HOSTED_ACCESS_TOKEN", "")
    monkeypatch.setenv("SUBGRAPH_DEPLOYER_STUDIO_DEPLOY_KEY", "key-456")
    monkeypatch.setenv("SUBGRAPH_DEPLOYER_GRAPH_COMMAND", "yarn 'graph")

    async def fake_reachable(url, *, settings=None):
        return False, "offline"

    monkeypatch.setattr(doctor, "check_reachable", fake_reachable)

    result = cli_runner.invoke(app, ["--registry", str(tmp_path / "missing.json"), "doctor", "run"])

    assert result.exit_code == 0, result.output
    assert result.output.count("MISSING") == 1
    assert "Hosted token" in result.output
    assert "key-456" not in result.output
