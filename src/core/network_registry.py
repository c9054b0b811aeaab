"""Network registry loader and lookups.

The registry is a read-only JSON object mapping network ids to records with a
nested `subgraph.endpointV2` URL. Key order is preserved and defines the
deployment order of a fleet run.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Mapping

from pydantic import ValidationError

from core.domain.errors import MissingEndpointError, MissingNetworkError, RegistryLoadError
from core.domain.models import NetworkConfig

NetworkRegistry = Mapping[str, NetworkConfig]


def parse_registry(data: object) -> dict[str, NetworkConfig]:
    """Validate raw JSON data into an ordered `{network_id: NetworkConfig}`.

    Non-object values (e.g. helper lists exported next to the networks) are
    kept as empty records so they remain visible as keys but never resolve.
    """

    if not isinstance(data, dict):
        raise ValueError("registry root must be a JSON object")

    registry: dict[str, NetworkConfig] = {}
    for network, record in data.items():
        if isinstance(record, dict):
            registry[str(network)] = NetworkConfig.model_validate(record)
        else:
            registry[str(network)] = NetworkConfig()
    return registry


def load_registry(path: Path) -> dict[str, NetworkConfig]:
    try:
        raw = path.read_text(encoding="utf-8")
        return parse_registry(json.loads(raw))
    except (OSError, ValueError, ValidationError) as exc:
        raise RegistryLoadError(str(path), str(exc)) from exc


def lookup_endpoint(registry: NetworkRegistry, network: str) -> str:
    """Return the endpoint URL configured for `network`."""

    config = registry.get(network)
    if config is None:
        raise MissingNetworkError(network)

    url = config.subgraph.endpoint_v2 if config.subgraph else None
    if not url or not url.strip():
        raise MissingEndpointError(network)
    return url.strip()


def build_target_name(registry: NetworkRegistry, network: str) -> str:
    """Name passed to the build script for `network` (`subgraph.networkName`, else the id)."""

    config = registry.get(network)
    if config is None:
        raise MissingNetworkError(network)
    if config.subgraph and config.subgraph.network_name:
        return config.subgraph.network_name
    return network


def deployable_networks(registry: NetworkRegistry, excluded: Iterable[str]) -> list[str]:
    """Registry keys in registry order, minus the excluded ids."""

    excluded_set = set(excluded)
    return [network for network in registry if network not in excluded_set]
