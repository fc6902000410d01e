"""License compliance scoring: risk tier x distribution x modification."""

from __future__ import annotations

from riskscope.models import ApplicationContext, Category, LicenseFinding
from riskscope.scoring.base import BaseCalculator, clamp
from riskscope.scoring.tables import (
    LICENSE_DEFAULT_TIER,
    LICENSE_DISTRIBUTION,
    LICENSE_MODIFIED,
    LICENSE_RISK_TIER,
    LICENSE_STRONG_COPYLEFT,
)

# Ordered: AGPL before GPL, LGPL before GPL
LICENSE_FAMILIES = [
    ("AGPL", "AGPL-3.0"),
    ("LGPL", "LGPL-3.0"),
    ("GPL", "GPL-3.0"),
    ("MPL", "MPL-2.0"),
    ("EPL", "EPL-2.0"),
    ("MIT", "MIT"),
    ("APACHE", "APACHE-2.0"),
    ("BSD", "BSD-3-CLAUSE"),
    ("ISC", "ISC"),
]


def license_risk_tier(finding: LicenseFinding) -> int:
    if finding.unknown:
        return LICENSE_RISK_TIER["UNKNOWN"]

    name = finding.license_id.strip().upper()
    kind = finding.license_type.strip().upper()
    if name in LICENSE_RISK_TIER:
        return LICENSE_RISK_TIER[name]

    for family, representative in LICENSE_FAMILIES:
        if family in name or family in kind:
            return LICENSE_RISK_TIER[representative]

    if finding.copyleft:
        return LICENSE_STRONG_COPYLEFT
    return LICENSE_DEFAULT_TIER


def distribution_model(context: ApplicationContext | None) -> str:
    """Explicit distribution, else guessed from industry and purpose text."""
    if context is None:
        return "commercial"
    if context.distribution and context.distribution in LICENSE_DISTRIBUTION:
        return context.distribution

    combined = f"{context.industry} {context.purpose}".lower()
    if "open source" in combined or "oss" in combined:
        return "open_source"
    if "internal" in combined:
        return "internal"
    if "saas" in combined or "service" in combined or "cloud" in combined:
        return "saas"
    return "commercial"


class LicenseCalculator(BaseCalculator[LicenseFinding]):
    category = Category.LICENSE

    def base_score(self, finding: LicenseFinding) -> float:
        return clamp(
            license_risk_tier(finding)
            * LICENSE_DISTRIBUTION[distribution_model(self.app_context)]
            * (LICENSE_MODIFIED if finding.modified else 1.0)
        )

    def type_factors(self, finding: LicenseFinding) -> dict[str, float]:
        return {
            "license_risk_tier": float(license_risk_tier(finding)),
            "distribution_multiplier": LICENSE_DISTRIBUTION[distribution_model(self.app_context)],
            "modification_factor": LICENSE_MODIFIED if finding.modified else 1.0,
            "copyleft": 1.0 if finding.copyleft else 0.0,
            "unknown": 1.0 if finding.unknown else 0.0,
        }
