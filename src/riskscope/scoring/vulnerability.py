"""Known-vulnerability scoring.

Two formulas are provided:

* the unified 0-100 score feeding the base contract:
  ``100`` if known-exploited, else ``clamp(cvss * 2.5 + epss * 35, 0, 100)``
* the bounded 0.1-10 score ``severity * exploitability * environment`` used by
  consumers of the legacy scale (see :func:`concert_vulnerability_score`).
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel

from riskscope.models import Category, ConcertContext, VulnerabilityFinding
from riskscope.scoring.base import BaseCalculator, clamp
from riskscope.scoring.concert import ConcertBreakdown, environmental_factor
from riskscope.scoring.tables import (
    EPSS_EXPLOITABILITY_RANGES,
    EPSS_FACTOR_MAX,
    EPSS_FACTOR_MIN,
    NEW_CVE_DEFAULT_SEVERITY,
    NEW_CVE_THRESHOLD_DAYS,
    OLD_CVE_DEFAULT_SEVERITY,
    VULN_CVSS_MULTIPLIER,
    VULN_DEFAULT_CVSS,
    VULN_EPSS_MULTIPLIER,
    VULN_KEV_BONUS,
    VULN_KEV_SCORE,
)


class VulnerabilityCalculator(BaseCalculator[VulnerabilityFinding]):
    category = Category.VULNERABILITY

    def base_score(self, finding: VulnerabilityFinding) -> float:
        if finding.known_exploited:
            return VULN_KEV_SCORE

        cvss = finding.cvss if finding.cvss is not None else VULN_DEFAULT_CVSS
        epss = finding.epss or 0.0
        return clamp(cvss * VULN_CVSS_MULTIPLIER + epss * VULN_EPSS_MULTIPLIER)

    def type_factors(self, finding: VulnerabilityFinding) -> dict[str, float]:
        cvss = finding.cvss if finding.cvss is not None else VULN_DEFAULT_CVSS
        epss = finding.epss or 0.0
        return {
            "cvss": cvss,
            "cvss_contribution": cvss * VULN_CVSS_MULTIPLIER,
            "epss": epss,
            "epss_contribution": epss * VULN_EPSS_MULTIPLIER,
            "kev_bonus": VULN_KEV_BONUS if finding.known_exploited else 0.0,
            "known_exploited": 1.0 if finding.known_exploited else 0.0,
            "exploitability_factor": exploitability_factor(epss),
        }


def exploitability_factor(epss: float) -> float:
    """Piecewise EPSS factor: 1.0 at 0.1, down to 0.5 below, up to 1.25 above."""
    for low, high, factor in EPSS_EXPLOITABILITY_RANGES:
        if low <= epss < high:
            return factor
    if epss >= EPSS_EXPLOITABILITY_RANGES[-1][1]:
        return EPSS_FACTOR_MAX
    return EPSS_FACTOR_MIN


def fallback_severity(
    finding: VulnerabilityFinding,
    now: datetime | None = None,
) -> float:
    """CVSS if known; otherwise 10.0 for recently modified entries, else 5.0."""
    if finding.cvss is not None:
        return max(0.1, min(10.0, finding.cvss))

    if finding.last_modified is not None:
        age = (now or datetime.now(UTC)) - finding.last_modified
        if age.days <= NEW_CVE_THRESHOLD_DAYS:
            return NEW_CVE_DEFAULT_SEVERITY
    return OLD_CVE_DEFAULT_SEVERITY


class ConcertVulnerabilityScore(BaseModel):
    score: float
    severity: float
    exploitability_factor: float
    environmental_factor: float
    breakdown: ConcertBreakdown


def concert_vulnerability_score(
    finding: VulnerabilityFinding,
    context: ConcertContext | None = None,
    now: datetime | None = None,
) -> ConcertVulnerabilityScore:
    severity = fallback_severity(finding, now)
    exploitability = exploitability_factor(finding.epss or 0.0)
    env_factor, breakdown = environmental_factor(context)

    score = clamp(severity * exploitability * env_factor, 0.1, 10.0)
    return ConcertVulnerabilityScore(
        score=round(score, 2),
        severity=severity,
        exploitability_factor=exploitability,
        environmental_factor=env_factor,
        breakdown=breakdown,
    )
