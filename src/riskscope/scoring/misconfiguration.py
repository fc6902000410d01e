"""Infrastructure misconfiguration scoring: scanner severity x exposure x data."""

from __future__ import annotations

from riskscope.models import Category, MisconfigurationFinding
from riskscope.scoring.base import BaseCalculator, clamp
from riskscope.scoring.tables import MISCONFIG_DATA, MISCONFIG_EXPOSURE, MISCONFIG_SEVERITY_SCORE

PUBLIC_INDICATORS = ("public", "internet", "ingress", "external", "open to world", "0.0.0.0")
DMZ_INDICATORS = ("dmz", "perimeter", "edge", "loadbalancer", "load balancer", "api gateway")
ISOLATED_INDICATORS = ("isolated", "segmented", "private subnet")


def infer_exposure(finding: MisconfigurationFinding) -> str:
    """Explicit accessibility flag first, then keywords in type and check name."""
    if finding.publicly_accessible:
        return "internet_facing"

    combined = f"{finding.resource_type} {finding.check_id} {finding.check_name}".lower()
    if any(i in combined for i in PUBLIC_INDICATORS):
        return "internet_facing"
    if any(i in combined for i in DMZ_INDICATORS):
        return "dmz"
    if finding.publicly_accessible is False and any(i in combined for i in ISOLATED_INDICATORS):
        return "segmented"
    return "internal"


class MisconfigurationCalculator(BaseCalculator[MisconfigurationFinding]):
    category = Category.MISCONFIGURATION

    def data_multiplier(self) -> float:
        if self.app_context is None:
            return MISCONFIG_DATA["non_sensitive"]
        flags = self.app_context.data
        if flags.pci or flags.phi:
            return MISCONFIG_DATA["pii_phi_financial"]
        if flags.pii:
            return MISCONFIG_DATA["pii"]
        if flags.trade_secrets:
            return MISCONFIG_DATA["sensitive_business"]
        return MISCONFIG_DATA["non_sensitive"]

    def base_score(self, finding: MisconfigurationFinding) -> float:
        return clamp(
            MISCONFIG_SEVERITY_SCORE[finding.severity.value]
            * MISCONFIG_EXPOSURE[infer_exposure(finding)]
            * self.data_multiplier()
        )

    def type_factors(self, finding: MisconfigurationFinding) -> dict[str, float]:
        return {
            "scanner_severity_score": float(MISCONFIG_SEVERITY_SCORE[finding.severity.value]),
            "exposure_multiplier": MISCONFIG_EXPOSURE[infer_exposure(finding)],
            "data_multiplier": self.data_multiplier(),
            "publicly_accessible": 1.0 if finding.publicly_accessible else 0.0,
        }
