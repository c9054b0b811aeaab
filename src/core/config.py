"""Core configuration.

- Centralizes environment variables (pydantic-settings) away from the CLI.
- Adapters and services read the same typed contract.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_EXCLUDED_NETWORKS: frozenset[str] = frozenset({"networks", "default", "palm"})


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "subgraph-deployer"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "subgraph-deployer"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "subgraph-deployer"
    return Path.home() / ".config" / "subgraph-deployer"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global `.env`."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# subgraph-deployer user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Application settings.

    Order of sources: process env, project `.env`, then the user config `.env`.
    Credentials are held as `SecretStr` so they never render in reprs or logs.
    """

    model_config = SettingsConfigDict(
        env_prefix="SUBGRAPH_DEPLOYER_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    registry_path: Path = Field(
        default=Path("networks.json"),
        description="JSON registry mapping network ids to their subgraph endpoints.",
    )

    hosted_access_token: SecretStr | None = Field(
        default=None,
        description="Access token for the hosted service (thegraph.com dashboard).",
    )
    studio_deploy_key: SecretStr | None = Field(
        default=None,
        description="Deploy key for Subgraph Studio (thegraph.com/studio).",
    )

    hosted_node_url: str = Field(
        default="https://api.thegraph.com/deploy/",
        min_length=8,
        description="Graph node used for hosted-service deployments.",
    )
    hosted_ipfs_url: str = Field(
        default="https://api.thegraph.com/ipfs/",
        min_length=8,
        description="IPFS gateway used for hosted-service deployments.",
    )
    studio_account_id: int = Field(
        default=44190,
        ge=0,
        description="Studio account id embedded in studio query URLs.",
    )

    excluded_networks: set[str] = Field(
        default_factory=lambda: set(DEFAULT_EXCLUDED_NETWORKS),
        description="Registry keys never deployed (meta keys and unsupported networks).",
    )

    codegen_command: str = Field(default="yarn codegen", min_length=1)
    prepare_command: str = Field(default="yarn prepare", min_length=1)
    build_command: str = Field(default="yarn build", min_length=1)
    graph_command: str = Field(
        default="yarn graph",
        min_length=1,
        description="Prefix used to invoke the graph CLI (auth/deploy).",
    )
    working_dir: Path | None = Field(
        default=None,
        description="Directory commands run in (defaults to the current directory).",
    )

    strict: bool = Field(
        default=False,
        description="Abort on the first failed external command instead of logging and continuing.",
    )

    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for diagnostic HTTP checks (seconds).",
    )
    user_agent: str = Field(
        default="subgraph-deployer/0.1",
        min_length=1,
    )

    log_level: str = Field(default="INFO", min_length=1)
