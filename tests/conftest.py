"""Pytest configuration and shared fixtures for subgraph-deployer tests."""

from __future__ import annotations

import os
from typing import Sequence

import pytest
from pydantic import SecretStr

from core.config import AppSettings
from core.domain.models import CommandResult, Credentials
from core.interfaces.command_runner import redact
from core.network_registry import parse_registry
from core.services.deployment_pipeline import DeploymentContext, PipelineHooks

HOSTED_TOKEN = "hosted-secret-token"
STUDIO_KEY = "studio-secret-key"

REGISTRY_DATA = {
    "networks": ["mainnet", "polygon"],
    "mainnet": {
        "name": "Ethereum",
        "subgraph": {"endpointV2": "https://api.thegraph.com/subgraphs/name/unlock-protocol/unlock"},
    },
    "default": {"name": "Ethereum"},
    "polygon": {
        "name": "Polygon",
        "subgraph": {
            "endpointV2": "https://api.studio.thegraph.com/query/44190/unlock-protocol-polygon/0.3.1",
            "networkName": "matic",
        },
    },
    "palm": {
        "name": "Palm",
        "subgraph": {"endpointV2": "https://api.studio.thegraph.com/query/44190/unlock-protocol-palm/0.0.1"},
    },
    "xdai": {
        "name": "Gnosis Chain",
        "subgraph": {
            "endpointV2": "https://api.thegraph.com/subgraphs/name/unlock-protocol/xdai",
            "networkName": "gnosis",
        },
    },
}


class RecordingRunner:
    """Fake command runner: records redacted commands, fails on demand."""

    def __init__(self, failing: Sequence[str] = ()) -> None:
        self.failing = tuple(failing)
        self.commands: list[str] = []

    async def run(self, command: str, *, sensitive: Sequence[str] = ()) -> CommandResult:
        shown = redact(command, sensitive)
        self.commands.append(shown)
        exit_code = 1 if any(marker in command for marker in self.failing) else 0
        return CommandResult(command=shown, stderr="boom" if exit_code else "", exit_code=exit_code)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep the developer's own environment and user config `.env` out of tests."""

    for name in list(os.environ):
        if name.upper().startswith("SUBGRAPH_DEPLOYER_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setitem(AppSettings.model_config, "env_file", (str(tmp_path / "project.env"),))


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        codegen_command="yarn codegen",
        prepare_command="yarn prepare",
        build_command="yarn build",
        graph_command="graph",
    )


@pytest.fixture
def registry():
    return parse_registry(REGISTRY_DATA)


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def warnings() -> list[str]:
    return []


@pytest.fixture
def ctx(registry, runner, settings, warnings) -> DeploymentContext:
    return DeploymentContext(
        registry=registry,
        runner=runner,
        settings=settings,
        hooks=PipelineHooks(warning=warnings.append),
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        hosted_access_token=SecretStr(HOSTED_TOKEN),
        studio_deploy_key=SecretStr(STUDIO_KEY),
    )
