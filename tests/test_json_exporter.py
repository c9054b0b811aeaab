"""Tests for the outcomes JSON report."""

import json

from adapters.json_exporter import export_outcomes_json
from core.domain.models import CommandResult, DeploymentOutcome, SemanticVersion, StudioTarget


def test_export_outcomes(tmp_path):
    outcome = DeploymentOutcome(
        network="polygon",
        target=StudioTarget(
            subgraph_name="unlock-protocol-polygon",
            current_version=SemanticVersion(major=0, minor=3, patch=1),
        ),
        version_label="0.3.2",
        results=[CommandResult(command="graph auth --studio ***", stdout="noise")],
    )

    path = export_outcomes_json(outcomes=[outcome], output_path=tmp_path / "out" / "report.json")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data[0]["network"] == "polygon"
    assert data[0]["target"]["kind"] == "studio"
    assert data[0]["target"]["current_version"] == {"major": 0, "minor": 3, "patch": 1}
    assert data[0]["version_label"] == "0.3.2"
    assert data[0]["results"][0] == {
        "command": "graph auth --studio ***",
        "exit_code": 0,
        "signal": None,
    }
