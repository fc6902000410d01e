"""Bounded 1-10 score for SAST/DAST severity tiers: severity x environmental factor.

Independent of the 0-100 contract. SAST uses a 5-tier scale, DAST a
severity-with-confidence scale ("High (Medium)"). Labels that match neither
fall back to keywords ("blocker" -> critical, ...) and finally to medium.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel

from riskscope.models import ConcertContext, StaticAnalysisFinding
from riskscope.scoring.base import clamp
from riskscope.scoring.concert import ConcertBreakdown, environmental_factor
from riskscope.scoring.tables import DAST_SEVERITY, SAST_SEVERITY

ToolType = Literal["sast", "dast"]

DAST_SOURCES = ("zap", "burp", "dast", "dynamic", "runtime", "nikto", "nuclei")
_COMBINED_LEVEL = re.compile(r"^\s*(\w+)\s*(?:\(\s*(\w+)\s*\))?\s*$")


class ToolScore(BaseModel):
    score: float
    severity: float
    environmental_factor: float
    tool_type: ToolType
    breakdown: ConcertBreakdown


def sast_severity(level: str) -> float:
    key = level.strip().lower()
    if key in SAST_SEVERITY:
        return SAST_SEVERITY[key]

    if "critical" in key or "blocker" in key:
        return 10.0
    if "high" in key or "error" in key:
        return 7.5
    if "medium" in key or "warning" in key:
        return 5.0
    if "low" in key:
        return 2.5
    if "info" in key:
        return 1.0
    return 5.0


def dast_severity(level: str) -> float:
    key = level.strip().lower()
    if key in DAST_SEVERITY:
        return DAST_SEVERITY[key]

    match = _COMBINED_LEVEL.match(key)
    if match:
        base, confidence = match.groups()
        base = "info" if base.startswith("info") else base
        if confidence and f"{base} ({confidence})" in DAST_SEVERITY:
            return DAST_SEVERITY[f"{base} ({confidence})"]
        if base in DAST_SEVERITY:
            return DAST_SEVERITY[base]

    if "critical" in key or "blocker" in key or "error" in key:
        return 10.0
    if "high" in key:
        return 6.84
    if "medium" in key:
        return 3.80
    if "low" in key:
        return 0.76
    if "info" in key:
        return 0.50
    return 3.80


class SastDastCalculator:
    def __init__(self, context: ConcertContext | None = None) -> None:
        self.context = context

    def _score(self, severity: float, tool_type: ToolType) -> ToolScore:
        env_factor, breakdown = environmental_factor(self.context)
        return ToolScore(
            score=round(clamp(severity * env_factor, 1.0, 10.0), 2),
            severity=severity,
            environmental_factor=env_factor,
            tool_type=tool_type,
            breakdown=breakdown,
        )

    def sast_score(self, level: str) -> ToolScore:
        return self._score(sast_severity(level), "sast")

    def dast_score(self, level: str) -> ToolScore:
        return self._score(dast_severity(level), "dast")

    def from_finding(
        self,
        finding: StaticAnalysisFinding,
        tool_type: ToolType | None = None,
    ) -> ToolScore:
        tool_type = tool_type or finding.tool_type or detect_tool_type(finding)
        level = finding.severity_level
        if not level:
            level = finding.severity.value.capitalize()
            if tool_type == "dast" and finding.confidence:
                level = f"{level} ({finding.confidence.capitalize()})"

        if tool_type == "dast":
            return self.dast_score(level)
        return self.sast_score(level)


def detect_tool_type(finding: StaticAnalysisFinding) -> ToolType:
    combined = f"{finding.source} {finding.rule_id}".lower()
    if any(i in combined for i in DAST_SOURCES):
        return "dast"
    return "sast"
