"""Deployment orchestration.

Sequences codegen → build → deploy for one network or the whole fleet. The CLI
delegates every decision to these helpers, so the same flow can be driven from
tests or other entry-points without printing or environment access.

Rules:
- Steps run strictly one after another; nothing is retried.
- Configuration and credential errors propagate and abort the operation.
- Failed external commands are logged by the runner and execution continues,
  unless `settings.strict` is set, in which case `CommandFailedError` aborts.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from typing import Callable, Sequence

from core.config import AppSettings
from core.domain.errors import (
    CommandFailedError,
    MissingHostedCredentialError,
    MissingStudioCredentialError,
)
from core.domain.models import (
    CommandResult,
    Credentials,
    DeploymentOutcome,
    DeploymentTarget,
    HostedTarget,
    StudioTarget,
    secret_value,
)
from core.domain.version import next_version
from core.interfaces.command_runner import CommandRunner
from core.network_registry import (
    NetworkRegistry,
    build_target_name,
    deployable_networks,
    lookup_endpoint,
)
from core.services.endpoint_classifier import classify

logger = logging.getLogger(__name__)


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    warning: Callable[[str], None] | None = None
    step: Callable[[str, str], None] | None = None
    network_done: Callable[[DeploymentOutcome], None] | None = None


@dataclass
class DeploymentContext:
    """Everything an operation needs, resolved once per invocation."""

    registry: NetworkRegistry
    runner: CommandRunner
    settings: AppSettings = field(default_factory=AppSettings)
    hooks: PipelineHooks = field(default_factory=PipelineHooks)


def _warn(ctx: DeploymentContext, message: str) -> None:
    logger.warning(message)
    if ctx.hooks.warning:
        ctx.hooks.warning(message)


def _step(ctx: DeploymentContext, network: str, name: str) -> None:
    if ctx.hooks.step:
        ctx.hooks.step(network, name)


async def _execute(
    ctx: DeploymentContext,
    command: str,
    *,
    sensitive: Sequence[str] = (),
) -> CommandResult:
    result = await ctx.runner.run(command, sensitive=sensitive)
    if not result.ok and ctx.settings.strict:
        raise CommandFailedError(result)
    return result


def resolve_target(ctx: DeploymentContext, network: str) -> DeploymentTarget:
    """Registry lookup + classification for `network`. Issues no command."""

    url = lookup_endpoint(ctx.registry, network)
    return classify(url, studio_account_id=ctx.settings.studio_account_id)


async def run_codegen(ctx: DeploymentContext) -> CommandResult:
    logger.info("Generating code")
    return await _execute(ctx, ctx.settings.codegen_command)


async def run_build(ctx: DeploymentContext, network: str) -> list[CommandResult]:
    target_name = build_target_name(ctx.registry, network)

    results = [await _execute(ctx, ctx.settings.prepare_command)]
    logger.info("Building subgraph for %s (build target: %s)", network, target_name)
    results.append(await _execute(ctx, f"{ctx.settings.build_command} {shlex.quote(target_name)}"))
    return results


async def _deploy_hosted(
    ctx: DeploymentContext,
    target: HostedTarget,
    *,
    credentials: Credentials,
    label: str | None,
) -> list[CommandResult]:
    token = secret_value(credentials.hosted_access_token)
    if not token:
        raise MissingHostedCredentialError()

    parts = [
        ctx.settings.graph_command,
        "deploy",
        "--product hosted-service",
        f"--access-token {shlex.quote(token)}",
        f"--node {shlex.quote(ctx.settings.hosted_node_url)}",
        f"--ipfs {shlex.quote(ctx.settings.hosted_ipfs_url)}",
        shlex.quote(target.subgraph_name),
    ]
    if label:
        parts.append(f"--version-label={shlex.quote(label)}")

    logger.info("Deploying %s to the hosted service", target.subgraph_name)
    return [await _execute(ctx, " ".join(parts), sensitive=[token])]


async def _deploy_studio(
    ctx: DeploymentContext,
    target: StudioTarget,
    *,
    credentials: Credentials,
    version_label: str,
) -> list[CommandResult]:
    key = secret_value(credentials.studio_deploy_key)
    if not key:
        raise MissingStudioCredentialError()

    results = [
        await _execute(
            ctx,
            f"{ctx.settings.graph_command} auth --studio {shlex.quote(key)}",
            sensitive=[key],
        )
    ]
    logger.info(
        "Deploying %s to studio (%s -> %s)",
        target.subgraph_name,
        target.current_version,
        version_label,
    )
    results.append(
        await _execute(
            ctx,
            f"{ctx.settings.graph_command} deploy --studio {shlex.quote(target.subgraph_name)} "
            f"--version-label={shlex.quote(version_label)}",
        )
    )
    return results


async def run_deploy(
    ctx: DeploymentContext,
    network: str,
    *,
    credentials: Credentials,
    label: str | None = None,
) -> DeploymentOutcome:
    """Deploy the subgraph of `network` to the backend its endpoint points at.

    Hosted targets take `label` as an optional version label. Studio targets
    always deploy the next patch version of their current endpoint; a supplied
    `label` is reported as ignored.
    """

    target = resolve_target(ctx, network)
    logger.info("Resolved %s to %s target '%s'", network, target.kind, target.subgraph_name)

    if isinstance(target, HostedTarget):
        results = await _deploy_hosted(ctx, target, credentials=credentials, label=label)
        return DeploymentOutcome(network=network, target=target, version_label=label, results=results)

    version_label = next_version(target.current_version)
    if label:
        _warn(
            ctx,
            f"Ignoring label '{label}' for {network}: studio deployments are "
            f"auto-versioned ({version_label}).",
        )
    results = await _deploy_studio(ctx, target, credentials=credentials, version_label=version_label)
    return DeploymentOutcome(
        network=network,
        target=target,
        version_label=version_label,
        results=results,
    )


def fleet_plan(ctx: DeploymentContext) -> list[str]:
    return deployable_networks(ctx.registry, ctx.settings.excluded_networks)


async def run_fleet_deploy(
    ctx: DeploymentContext,
    *,
    credentials: Credentials,
    label: str | None = None,
) -> list[DeploymentOutcome]:
    """Codegen, build and deploy every deployable network, in registry order.

    The first error aborts the run: networks already deployed stay deployed and
    the remaining ones are not touched.
    """

    plan = fleet_plan(ctx)
    logger.info("Deploying %d networks: %s", len(plan), ", ".join(plan))

    outcomes: list[DeploymentOutcome] = []
    for network in plan:
        _step(ctx, network, "codegen")
        await run_codegen(ctx)
        _step(ctx, network, "build")
        await run_build(ctx, network)
        _step(ctx, network, "deploy")
        outcome = await run_deploy(ctx, network, credentials=credentials, label=label)
        outcomes.append(outcome)
        if ctx.hooks.network_done:
            ctx.hooks.network_done(outcome)
    return outcomes
