"""Endpoint classification.

Turns a registry endpoint URL into an explicit `DeploymentTarget`. Each target
kind has its own full-match grammar; Hosted is tried first and Studio is only
attempted when Hosted does not match.
"""

from __future__ import annotations

import re

from core.domain.errors import UnrecognizedEndpointError
from core.domain.models import DeploymentTarget, HostedTarget, StudioTarget
from core.domain.version import parse_version

DEFAULT_STUDIO_ACCOUNT_ID = 44190

_HOSTED_RE = re.compile(r"https://api\.thegraph\.com/subgraphs/name/(?P<name>[^\s?#]+)")


def _studio_pattern(account_id: int) -> re.Pattern[str]:
    return re.compile(
        rf"https://api\.studio\.thegraph\.com/query/{account_id}/"
        r"(?P<name>[^/\s?#]+)/(?P<version>[^/\s?#]+)"
    )


def parse_hosted(url: str) -> HostedTarget | None:
    match = _HOSTED_RE.fullmatch(url)
    if match is None:
        return None
    return HostedTarget(subgraph_name=match.group("name"))


def parse_studio(url: str, *, account_id: int = DEFAULT_STUDIO_ACCOUNT_ID) -> StudioTarget | None:
    match = _studio_pattern(account_id).fullmatch(url)
    if match is None:
        return None
    try:
        version = parse_version(match.group("version"))
    except ValueError as exc:
        raise UnrecognizedEndpointError(url) from exc
    return StudioTarget(subgraph_name=match.group("name"), current_version=version)


def classify(url: str, *, studio_account_id: int = DEFAULT_STUDIO_ACCOUNT_ID) -> DeploymentTarget:
    """Classify `url` as a hosted-service or studio deployment target.

    Raises `UnrecognizedEndpointError` when neither grammar matches, including
    studio URLs whose version is not a `major.minor.patch` integer triple.
    """

    url = url.strip()
    hosted = parse_hosted(url)
    if hosted is not None:
        return hosted

    studio = parse_studio(url, account_id=studio_account_id)
    if studio is not None:
        return studio

    raise UnrecognizedEndpointError(url)
