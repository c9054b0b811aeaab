"""Domain models (Pydantic v2).

- Strict validation and self-documenting fields without coupling the core to I/O.
- These models describe *what* a deployment is, not *how* it is executed.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, SecretStr
from pydantic.config import ConfigDict


class SemanticVersion(BaseModel):
    """A `major.minor.patch` triple of non-negative integers."""

    model_config = ConfigDict(frozen=True)

    major: int = Field(..., ge=0)
    minor: int = Field(..., ge=0)
    patch: int = Field(..., ge=0)

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class HostedTarget(BaseModel):
    """Subgraph served by the hosted service (fixed node/IPFS pair)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["hosted"] = "hosted"
    subgraph_name: str = Field(
        ...,
        min_length=1,
        description="Slug after `/subgraphs/name/`, e.g. 'unlock-protocol/unlock'.",
    )


class StudioTarget(BaseModel):
    """Subgraph published through Subgraph Studio (auth + auto-versioning)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["studio"] = "studio"
    subgraph_name: str = Field(
        ...,
        min_length=1,
        description="Studio slug, e.g. 'unlock-protocol-polygon'.",
    )
    current_version: SemanticVersion = Field(
        ...,
        description="Version currently served by the studio query URL.",
    )


DeploymentTarget = Annotated[Union[HostedTarget, StudioTarget], Field(discriminator="kind")]


class SubgraphEndpointConfig(BaseModel):
    """The `subgraph` block of a registry record."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    endpoint_v2: str | None = Field(
        default=None,
        alias="endpointV2",
        description="URL where the deployed subgraph is queryable.",
    )
    network_name: str | None = Field(
        default=None,
        alias="networkName",
        description="Build-target name understood by the subgraph build scripts.",
    )


class NetworkConfig(BaseModel):
    """One registry record, keyed externally by network id."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, description="Human readable network name.")
    subgraph: SubgraphEndpointConfig | None = None


def secret_value(secret: SecretStr | None) -> str:
    """Plain value of `secret`; empty when unset."""

    if secret is None:
        return ""
    return secret.get_secret_value()


class Credentials(BaseModel):
    """Deploy credentials, sourced once at the boundary and passed explicitly."""

    model_config = ConfigDict(frozen=True)

    hosted_access_token: SecretStr | None = None
    studio_deploy_key: SecretStr | None = None


class CommandResult(BaseModel):
    """Outcome of one external command. `command` is always redacted."""

    command: str
    stdout: str = ""
    stderr: str = ""
    exit_code: int | None = Field(
        default=0,
        description="Process return code; None when the process could not be spawned.",
    )
    signal: int | None = Field(
        default=None,
        description="Terminating signal number, if the process was killed by one.",
    )

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class DeploymentOutcome(BaseModel):
    """What a single-network deploy resolved to and which commands it ran."""

    network: str
    target: DeploymentTarget
    version_label: str | None = Field(
        default=None,
        description="Label passed to `graph deploy` (computed for studio, user-provided for hosted).",
    )
    results: list[CommandResult] = Field(default_factory=list)
