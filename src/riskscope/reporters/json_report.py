"""JSON report exporter."""

from __future__ import annotations

import json

from riskscope.models import ScanResult


def render_json(result: ScanResult) -> str:
    """Render scan results as JSON string."""
    data = result.model_dump(mode="json")
    data["findings"] = [f.model_dump(mode="json") for f in result.sorted_findings()]
    data["risk"]["legacy_overall"] = result.risk.legacy_overall
    return json.dumps(data, indent=2, ensure_ascii=False)
