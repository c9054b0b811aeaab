"""Deployment error taxonomy.

- `ConfigError`: malformed or missing registry data; fatal for the network.
- `AuthError`: missing credential; carries remediation guidance for the user.
- `CommandFailedError`: external command failure, raised only in strict mode.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.domain.models import CommandResult


class DeploymentError(Exception):
    """Base class for every error surfaced by the deployment core."""


class ConfigError(DeploymentError):
    pass


class RegistryLoadError(ConfigError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not load network registry {path}: {reason}")
        self.path = path
        self.reason = reason


class MissingNetworkError(ConfigError):
    def __init__(self, network: str) -> None:
        super().__init__(f"Network '{network}' is not configured in the registry.")
        self.network = network


class MissingEndpointError(ConfigError):
    def __init__(self, network: str) -> None:
        super().__init__(f"Network '{network}' has no subgraph.endpointV2 configured.")
        self.network = network


class UnrecognizedEndpointError(ConfigError):
    def __init__(self, url: str) -> None:
        super().__init__(f"Endpoint is neither a hosted-service nor a studio URL: {url}")
        self.url = url


class AuthError(DeploymentError):
    remediation: str = ""

    def __str__(self) -> str:
        message = super().__str__()
        if self.remediation:
            return f"{message}\n{self.remediation}"
        return message


class MissingHostedCredentialError(AuthError):
    remediation = (
        "Set SUBGRAPH_DEPLOYER_HOSTED_ACCESS_TOKEN to the access token shown on "
        "https://thegraph.com/hosted-service/dashboard (or run `doctor setup`)."
    )

    def __init__(self) -> None:
        super().__init__("Missing hosted-service access token.")


class MissingStudioCredentialError(AuthError):
    remediation = (
        "Set SUBGRAPH_DEPLOYER_STUDIO_DEPLOY_KEY to the deploy key shown on "
        "https://thegraph.com/studio (or run `doctor setup`)."
    )

    def __init__(self) -> None:
        super().__init__("Missing Subgraph Studio deploy key.")


class CommandFailedError(DeploymentError):
    def __init__(self, result: CommandResult) -> None:
        detail = f"exit code {result.exit_code}"
        if result.signal is not None:
            detail = f"signal {result.signal}"
        super().__init__(f"Command failed ({detail}): {result.command}")
        self.result = result
