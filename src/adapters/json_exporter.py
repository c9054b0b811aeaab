"""JSON export of deployment outcomes.

Lets CI pipelines pick up which networks were deployed and with which
version labels. Command output is not included.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from core.domain.models import DeploymentOutcome


def export_outcomes_json(*, outcomes: Sequence[DeploymentOutcome], output_path: Path) -> Path:
    """Export outcomes to UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [
        outcome.model_dump(mode="json", exclude={"results": {"__all__": {"stdout", "stderr"}}})
        for outcome in outcomes
    ]
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
