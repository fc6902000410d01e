"""Category dispatch over the finding discriminant."""

from __future__ import annotations

from datetime import datetime

from riskscope.errors import MalformedFindingError
from riskscope.models import (
    ApplicationContext,
    Category,
    EnvironmentalContext,
    Finding,
    RiskScore,
    ScoreOverride,
)
from riskscope.scoring.base import BaseCalculator
from riskscope.scoring.certificate import CertificateCalculator
from riskscope.scoring.code import CodeCalculator
from riskscope.scoring.credential import CredentialCalculator
from riskscope.scoring.license import LicenseCalculator
from riskscope.scoring.misconfiguration import MisconfigurationCalculator
from riskscope.scoring.vulnerability import VulnerabilityCalculator

CALCULATOR_CLASSES: dict[Category, type[BaseCalculator]] = {
    Category.VULNERABILITY: VulnerabilityCalculator,
    Category.CREDENTIAL: CredentialCalculator,
    Category.CERTIFICATE: CertificateCalculator,
    Category.MISCONFIGURATION: MisconfigurationCalculator,
    Category.LICENSE: LicenseCalculator,
    Category.STATIC_ANALYSIS: CodeCalculator,
}


def get_calculator(
    finding: Finding,
    app_context: ApplicationContext | None = None,
    now: datetime | None = None,
) -> BaseCalculator:
    category = getattr(finding, "category", None)
    match category:
        case (
            Category.VULNERABILITY
            | Category.CREDENTIAL
            | Category.CERTIFICATE
            | Category.MISCONFIGURATION
            | Category.LICENSE
            | Category.STATIC_ANALYSIS
        ):
            return CALCULATOR_CLASSES[Category(category)](app_context, now)
        case _:
            raise MalformedFindingError(f"unknown finding category {category!r}")


def score_finding(
    finding: Finding,
    context: EnvironmentalContext | None = None,
    override: ScoreOverride | None = None,
    *,
    app_context: ApplicationContext | None = None,
    now: datetime | None = None,
) -> RiskScore:
    """Score one finding on the 0-100 scale.

    ``context`` defaults to the environmental view of ``app_context`` when
    only the latter is given.
    """
    if not getattr(finding, "id", None):
        raise MalformedFindingError("finding has no identifier")
    if context is None and app_context is not None:
        context = app_context.to_environmental()
    return get_calculator(finding, app_context, now).score(finding, context, override)


def score_findings(
    findings: list[Finding],
    app_context: ApplicationContext | None = None,
    overrides: dict[str, ScoreOverride] | None = None,
    now: datetime | None = None,
) -> None:
    """Calculate risk_score for each finding in-place."""
    context = app_context.to_environmental() if app_context else None
    overrides = overrides or {}
    for f in findings:
        f.risk_score = score_finding(
            f,
            context,
            overrides.get(f.id),
            app_context=app_context,
            now=now,
        )
