"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import shlex
import shutil

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import check_reachable
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import ConfigError
from core.domain.models import secret_value
from core.network_registry import deployable_networks, load_registry

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_executable(command: str) -> tuple[bool, str]:
    """Check that the first word of `command` resolves on PATH."""

    try:
        parts = shlex.split(command)
    except ValueError as exc:
        return False, f"cannot parse command: {exc}"
    if not parts:
        return False, "empty command"
    found = shutil.which(parts[0])
    if found is None:
        return False, f"{parts[0]} not found on PATH"
    return True, found


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    state = ctx.find_root().obj
    settings: AppSettings = state.settings if state is not None else AppSettings()

    table = Table(title="subgraph-deployer doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Credentials (presence only)
    if secret_value(settings.hosted_access_token):
        table.add_row("Hosted token", "OK", "set")
    else:
        table.add_row("Hosted token", "MISSING", "Needed for hosted-service networks")
    if secret_value(settings.studio_deploy_key):
        table.add_row("Studio key", "OK", "set")
    else:
        table.add_row("Studio key", "MISSING", "Needed for studio networks")

    # Registry
    try:
        registry = load_registry(settings.registry_path)
        count = len(deployable_networks(registry, settings.excluded_networks))
        table.add_row("Registry", "OK", f"{settings.registry_path} ({count} deployable networks)")
    except ConfigError as exc:
        table.add_row("Registry", "FAIL", str(exc))

    # Toolchain
    ok_graph, detail_graph = _check_executable(settings.graph_command)
    table.add_row("Graph CLI", "OK" if ok_graph else "FAIL", detail_graph)

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(check_reachable(settings.hosted_node_url, settings=settings))
    table.add_row("Hosted node", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)


@app.command(name="setup")
def setup() -> None:
    """Interactive credential setup (stored in the user config .env)."""

    hosted = typer.prompt(
        "Hosted-service access token (leave empty to skip)",
        default="",
        show_default=False,
        hide_input=True,
    ).strip()
    studio = typer.prompt(
        "Subgraph Studio deploy key (leave empty to skip)",
        default="",
        show_default=False,
        hide_input=True,
    ).strip()

    values: dict[str, str] = {}
    if hosted:
        values["SUBGRAPH_DEPLOYER_HOSTED_ACCESS_TOKEN"] = hosted
    if studio:
        values["SUBGRAPH_DEPLOYER_STUDIO_DEPLOY_KEY"] = studio
    if not values:
        raise typer.BadParameter("at least one credential is required")

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved credentials to:[/green] {env_path}")
