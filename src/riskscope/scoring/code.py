"""Static/dynamic analysis scoring: weakness severity x confidence x reachability.

Confidence and reachability are guessed from rule names and paths when the
tool does not report them. The keyword lists are heuristics, checked in order.
"""

from __future__ import annotations

from riskscope.models import Category, StaticAnalysisFinding
from riskscope.scoring.base import BaseCalculator, clamp
from riskscope.scoring.tables import (
    CODE_SEVERITY_FALLBACK,
    CONFIDENCE_FACTOR,
    CWE_ISSUE_TYPE,
    CWE_SEVERITY,
    REACHABILITY_FACTOR,
)

DEAD_CODE_INDICATORS = (
    "test", "spec", "__tests__", "mock", "fixture", "deprecated", "unused", "dead",
)
PUBLIC_INDICATORS = (
    "controller", "handler", "route", "api", "endpoint", "view", "pages/", "app/",
)
AUTH_INDICATORS = ("auth", "login", "session", "middleware", "protected")


def weakness_severity(finding: StaticAnalysisFinding) -> float:
    issue_type = (finding.issue_type or "").lower()
    if issue_type in CWE_SEVERITY and issue_type != "other":
        return CWE_SEVERITY[issue_type]

    for cwe in finding.cwe:
        mapped = CWE_ISSUE_TYPE.get(cwe.strip().upper())
        if mapped:
            return CWE_SEVERITY[mapped]

    return CODE_SEVERITY_FALLBACK[finding.severity.value]


def confidence_factor(finding: StaticAnalysisFinding) -> float:
    if finding.confidence:
        return CONFIDENCE_FACTOR.get(finding.confidence.lower(), CONFIDENCE_FACTOR["medium"])

    rule = finding.rule_name.lower()
    if "definite" in rule or "certain" in rule:
        return CONFIDENCE_FACTOR["high"]
    if "possible" in rule or "potential" in rule:
        return CONFIDENCE_FACTOR["medium"]
    if "suspicious" in rule or "might" in rule:
        return CONFIDENCE_FACTOR["low"]
    return CONFIDENCE_FACTOR["medium"]


def infer_reachability(finding: StaticAnalysisFinding, public_app: bool = False) -> str:
    combined = f"{finding.file_path or ''} {finding.location}".lower()

    if any(i in combined for i in DEAD_CODE_INDICATORS):
        return "dead_code"
    if any(i in combined for i in PUBLIC_INDICATORS):
        if any(i in combined for i in AUTH_INDICATORS):
            return "authenticated"
        return "public_endpoint"
    if public_app:
        return "authenticated"
    return "internal"


class CodeCalculator(BaseCalculator[StaticAnalysisFinding]):
    category = Category.STATIC_ANALYSIS

    def _reachability(self, finding: StaticAnalysisFinding) -> str:
        public_app = self.app_context is not None and self.app_context.network_exposure == "public"
        return infer_reachability(finding, public_app)

    def base_score(self, finding: StaticAnalysisFinding) -> float:
        return clamp(
            weakness_severity(finding)
            * confidence_factor(finding)
            * REACHABILITY_FACTOR[self._reachability(finding)]
        )

    def type_factors(self, finding: StaticAnalysisFinding) -> dict[str, float]:
        return {
            "weakness_severity": float(weakness_severity(finding)),
            "confidence_factor": confidence_factor(finding),
            "reachability_factor": REACHABILITY_FACTOR[self._reachability(finding)],
            "has_cwe": 1.0 if finding.cwe else 0.0,
            "line_number": float(finding.line_number or 0),
        }
