"""Rich UI components for the CLI.

Keeps presentation details out of the command functions.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import DeploymentOutcome


def print_banner(console: Console) -> None:
    title = Text("subgraph-deployer", style="bold cyan")
    subtitle = Text("codegen • build • deploy", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_networks_table() -> Table:
    table = Table(title="Deployable networks")
    table.add_column("Network", style="cyan", no_wrap=True)
    table.add_column("Target", style="white")
    table.add_column("Subgraph", style="magenta")
    table.add_column("Current", style="dim")
    table.add_column("Next", style="green")
    table.add_column("Error", style="red")
    return table


def build_outcomes_table(outcomes: list[DeploymentOutcome]) -> Table:
    """Summary of a deploy run: one row per network."""

    table = Table(title="Deployments")
    table.add_column("Network", style="cyan", no_wrap=True)
    table.add_column("Target", style="white")
    table.add_column("Subgraph", style="magenta")
    table.add_column("Version", style="green")
    table.add_column("Commands", style="white")
    for outcome in outcomes:
        failed = sum(1 for result in outcome.results if not result.ok)
        status = f"{len(outcome.results)} ok" if not failed else f"[red]{failed} failed[/red]"
        table.add_row(
            outcome.network,
            outcome.target.kind,
            outcome.target.subgraph_name,
            outcome.version_label or "-",
            status,
        )
    return table
