"""CLI entry-point (typer).

Thin adapter: parses options, sources settings and credentials once, and
delegates every decision to `core.services.deployment_pipeline`.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Coroutine, Optional, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from adapters.json_exporter import export_outcomes_json
from adapters.shell_runner import DryRunCommandRunner, ShellCommandRunner
from cli import doctor
from cli.ui_components import build_networks_table, build_outcomes_table, print_banner
from core.config import AppSettings
from core.domain.errors import ConfigError, DeploymentError
from core.domain.models import Credentials, DeploymentOutcome, NetworkConfig, StudioTarget
from core.domain.version import next_version
from core.interfaces.command_runner import CommandRunner
from core.logging_config import configure_logging
from core.network_registry import deployable_networks, load_registry
from core.services.deployment_pipeline import (
    DeploymentContext,
    PipelineHooks,
    resolve_target,
    run_build,
    run_codegen,
    run_deploy,
    run_fleet_deploy,
)

T = TypeVar("T")

app = typer.Typer(
    name="subgraph-deployer",
    no_args_is_help=True,
    help="Build and deploy per-network subgraphs to the hosted service or Subgraph Studio.",
)
app.add_typer(doctor.app, name="doctor")

_REPORT_OPTION = typer.Option(None, "--report", help="Write a JSON report of the deployments to this path.")

_console = Console()
_err_console = Console(stderr=True)


@dataclass
class CliState:
    settings: AppSettings
    dry_run: bool = False


def _state(ctx: typer.Context) -> CliState:
    state = ctx.find_object(CliState)
    if state is None:
        state = CliState(settings=AppSettings())
        ctx.obj = state
    return state


@app.callback()
def main(
    ctx: typer.Context,
    registry: Optional[Path] = typer.Option(
        None,
        "--registry",
        "-r",
        help="Network registry JSON (default: SUBGRAPH_DEPLOYER_REGISTRY_PATH or ./networks.json).",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print commands instead of running them."),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help="Abort on the first failed external command.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide the banner."),
) -> None:
    settings = AppSettings()
    updates: dict[str, Any] = {}
    if registry is not None:
        updates["registry_path"] = registry
    if strict is not None:
        updates["strict"] = strict
    if updates:
        settings = settings.model_copy(update=updates)

    configure_logging("DEBUG" if verbose else settings.log_level, console=_err_console)
    if not quiet and ctx.invoked_subcommand not in (None, "doctor"):
        print_banner(_err_console)

    ctx.obj = CliState(settings=settings, dry_run=dry_run)


def _build_runner(state: CliState) -> CommandRunner:
    if state.dry_run:
        return DryRunCommandRunner(
            echo=lambda command: _console.print(command, markup=False, highlight=False, soft_wrap=True)
        )
    return ShellCommandRunner(
        cwd=state.settings.working_dir,
        echo=lambda output: _console.print(output, markup=False, highlight=False, soft_wrap=True),
    )


def _load_registry(state: CliState) -> dict[str, NetworkConfig]:
    try:
        return load_registry(state.settings.registry_path)
    except ConfigError as exc:
        _err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _context(state: CliState, registry: dict[str, NetworkConfig] | None = None) -> DeploymentContext:
    hooks = PipelineHooks(
        warning=lambda message: _err_console.print(f"[yellow]Warning:[/yellow] {escape(message)}"),
        step=lambda network, step: _err_console.rule(f"{network} • {step}"),
    )
    return DeploymentContext(
        registry=registry if registry is not None else {},
        runner=_build_runner(state),
        settings=state.settings,
        hooks=hooks,
    )


def _credentials(settings: AppSettings) -> Credentials:
    return Credentials(
        hosted_access_token=settings.hosted_access_token,
        studio_deploy_key=settings.studio_deploy_key,
    )


def _require_network(state: CliState, registry: dict[str, NetworkConfig], network: str) -> None:
    allowed = deployable_networks(registry, state.settings.excluded_networks)
    if network not in allowed:
        raise typer.BadParameter(
            f"'{network}' is not a deployable network. Choose from: {', '.join(allowed) or '(none)'}",
            param_hint="NETWORK",
        )


def _run(coro: Coroutine[Any, Any, T]) -> T:
    try:
        return asyncio.run(coro)
    except DeploymentError as exc:
        _err_console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1) from exc


def _report(outcomes: list[DeploymentOutcome], path: Path | None) -> None:
    _console.print(build_outcomes_table(outcomes))
    if path is not None:
        export_outcomes_json(outcomes=outcomes, output_path=path)
        _console.print(f"[green]Report written to:[/green] {escape(str(path))}")


@app.command()
def codegen(ctx: typer.Context) -> None:
    """Run the subgraph code generation."""

    state = _state(ctx)
    _run(run_codegen(_context(state)))


@app.command()
def build(
    ctx: typer.Context,
    network: str = typer.Argument(..., help="Registry network id."),
) -> None:
    """Prepare and build the subgraph for NETWORK."""

    state = _state(ctx)
    registry = _load_registry(state)
    _require_network(state, registry, network)
    _run(run_build(_context(state, registry), network))


@app.command()
def deploy(
    ctx: typer.Context,
    network: str = typer.Argument(..., help="Registry network id."),
    label: Optional[str] = typer.Option(
        None,
        "--label",
        "-l",
        help="Version label for hosted-service deploys (studio deploys are auto-versioned).",
    ),
    report: Optional[Path] = _REPORT_OPTION,
) -> None:
    """Deploy the subgraph of NETWORK to its hosted-service or studio endpoint."""

    state = _state(ctx)
    registry = _load_registry(state)
    _require_network(state, registry, network)
    outcome = _run(
        run_deploy(
            _context(state, registry),
            network,
            credentials=_credentials(state.settings),
            label=label,
        )
    )
    _report([outcome], report)


@app.command(name="deploy-all")
def deploy_all(
    ctx: typer.Context,
    label: Optional[str] = typer.Option(
        None,
        "--label",
        "-l",
        help="Version label for hosted-service deploys (studio deploys are auto-versioned).",
    ),
    report: Optional[Path] = _REPORT_OPTION,
) -> None:
    """Codegen, build and deploy every deployable network, one after another."""

    state = _state(ctx)
    registry = _load_registry(state)
    outcomes = _run(
        run_fleet_deploy(
            _context(state, registry),
            credentials=_credentials(state.settings),
            label=label,
        )
    )
    _report(outcomes, report)


@app.command()
def networks(ctx: typer.Context) -> None:
    """List deployable networks and where each one deploys to."""

    state = _state(ctx)
    registry = _load_registry(state)
    deployment = _context(state, registry)

    table = build_networks_table()
    for network in deployable_networks(registry, state.settings.excluded_networks):
        try:
            target = resolve_target(deployment, network)
        except ConfigError as exc:
            table.add_row(network, "-", "-", "-", "-", escape(str(exc)))
            continue
        if isinstance(target, StudioTarget):
            table.add_row(
                network,
                target.kind,
                target.subgraph_name,
                str(target.current_version),
                next_version(target.current_version),
                "",
            )
        else:
            table.add_row(network, target.kind, target.subgraph_name, "-", "-", "")
    _console.print(table)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
