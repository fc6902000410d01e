"""Remediation deadlines and SLA status.

Status is recomputed on every call from the finding's current score,
category and the organizational tier; nothing is persisted between calls.

* overdue:  deadline passed, or the certificate has already expired
* due_soon: within 7 days, any critical finding, any credential, or a high
            finding within 14 days
* on_track: everything else
"""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

from riskscope.models import (
    ApplicationContext,
    CertificateFinding,
    CredentialFinding,
    Finding,
    LicenseFinding,
    Severity,
    SLARecord,
    SLAStatus,
    SLASummary,
)
from riskscope.scoring.tables import (
    SLA_CERTIFICATE_HOURS,
    SLA_CREDENTIAL_HOURS,
    SLA_DUE_SOON_DAYS,
    SLA_HIGH_DUE_SOON_DAYS,
    SLA_HOURS,
    SLA_LICENSE_HOURS,
)

DEFAULT_TIER = 3


def deadline_hours(
    finding: Finding,
    context: ApplicationContext | None = None,
    now: datetime | None = None,
) -> int:
    if isinstance(finding, CredentialFinding):
        return SLA_CREDENTIAL_HOURS

    if isinstance(finding, CertificateFinding):
        days = finding.days_left(now)
        if finding.is_expired(now) or (days is not None and days <= 0):
            return SLA_CERTIFICATE_HOURS["expired"]
        if days is None:
            return SLA_CERTIFICATE_HOURS["default"]
        if days <= 7:
            return SLA_CERTIFICATE_HOURS["within_7_days"]
        if days <= 30:
            return SLA_CERTIFICATE_HOURS["within_30_days"]
        if days <= 90:
            return SLA_CERTIFICATE_HOURS["within_90_days"]
        return SLA_CERTIFICATE_HOURS["default"]

    if isinstance(finding, LicenseFinding):
        if finding.effective_score >= 70:
            return SLA_LICENSE_HOURS["high"]
        return SLA_LICENSE_HOURS["default"]

    tier = context.tier if context else DEFAULT_TIER
    bucket = Severity.from_score(finding.effective_score)
    return SLA_HOURS[bucket.value][tier]


def sla_for(
    finding: Finding,
    context: ApplicationContext | None = None,
    now: datetime | None = None,
) -> SLARecord:
    now = now or datetime.now(UTC)
    deadline = finding.detected_at + timedelta(hours=deadline_hours(finding, context, now))
    days_remaining = math.ceil((deadline - now) / timedelta(days=1))
    bucket = Severity.from_score(finding.effective_score)

    if days_remaining < 0 or (isinstance(finding, CertificateFinding) and finding.is_expired(now)):
        status = SLAStatus.OVERDUE
    elif (
        days_remaining <= SLA_DUE_SOON_DAYS
        or bucket == Severity.CRITICAL
        or isinstance(finding, CredentialFinding)
    ):
        status = SLAStatus.DUE_SOON
    elif days_remaining <= SLA_HIGH_DUE_SOON_DAYS and bucket == Severity.HIGH:
        status = SLAStatus.DUE_SOON
    else:
        status = SLAStatus.ON_TRACK

    return SLARecord(deadline=deadline, status=status, days_remaining=days_remaining)


def apply_sla(
    findings: list[Finding],
    context: ApplicationContext | None = None,
    now: datetime | None = None,
) -> list[Finding]:
    """Return copies of ``findings`` annotated with their SLA record."""
    now = now or datetime.now(UTC)
    return [f.model_copy(update={"sla": sla_for(f, context, now)}) for f in findings]


def summarize_sla(findings: list[Finding]) -> SLASummary:
    summary = SLASummary()
    for f in findings:
        if f.sla is None or f.sla.status == SLAStatus.ON_TRACK:
            summary.on_track += 1
        elif f.sla.status == SLAStatus.OVERDUE:
            summary.overdue += 1
        else:
            summary.due_soon += 1

    total = len(findings)
    if total:
        summary.compliance_rate = round((total - summary.overdue) / total * 100)
    return summary
