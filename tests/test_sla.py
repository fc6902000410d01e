"""Tests for SLA deadlines and status."""

from datetime import UTC, datetime, timedelta

import pytest

from riskscope.analysis.sla import apply_sla, deadline_hours, sla_for, summarize_sla
from riskscope.models import (
    ApplicationContext,
    CertificateFinding,
    CredentialFinding,
    LicenseFinding,
    RiskScore,
    SLAStatus,
    VulnerabilityFinding,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def _vuln(score: float, detected_days_ago: float = 0, **kwargs) -> VulnerabilityFinding:
    return VulnerabilityFinding(
        id=kwargs.pop("id", "CVE-2024-0001"),
        risk_score=RiskScore(final=score),
        detected_at=NOW - timedelta(days=detected_days_ago),
        **kwargs,
    )


@pytest.mark.parametrize("detected_days_ago", [0, 1 / 24, 1, 3, 30])
def test_credential_never_on_track(detected_days_ago):
    f = CredentialFinding(
        id="secret",
        risk_score=RiskScore(final=5.0),
        detected_at=NOW - timedelta(days=detected_days_ago),
    )
    assert sla_for(f, now=NOW).status != SLAStatus.ON_TRACK


def test_credential_deadline_is_immediate():
    f = CredentialFinding(id="secret", detected_at=NOW - timedelta(days=3))
    record = sla_for(f, now=NOW)
    assert record.deadline == f.detected_at
    assert record.days_remaining == -3
    assert record.status == SLAStatus.OVERDUE


def test_expired_certificate_is_overdue():
    f = CertificateFinding(id="cert", detected_at=NOW, expires_at=NOW - timedelta(days=2))
    assert deadline_hours(f, now=NOW) == 24
    assert sla_for(f, now=NOW).status == SLAStatus.OVERDUE


@pytest.mark.parametrize(
    ("days", "hours"),
    [(3, 24), (20, 168), (60, 720), (365, 720)],
)
def test_certificate_deadline_by_days_left(days, hours):
    f = CertificateFinding(id="cert", detected_at=NOW, expires_at=NOW + timedelta(days=days))
    assert deadline_hours(f, now=NOW) == hours


def test_critical_is_due_soon_even_with_time_left():
    ctx = ApplicationContext(criticality=1)
    record = sla_for(_vuln(95.0), ctx, NOW)
    assert record.days_remaining == 14
    assert record.status == SLAStatus.DUE_SOON


def test_high_by_tier():
    f = _vuln(75.0)
    assert sla_for(f, ApplicationContext(criticality=3), NOW).status == SLAStatus.ON_TRACK
    assert sla_for(f, ApplicationContext(criticality=4), NOW).status == SLAStatus.DUE_SOON
    assert sla_for(f, ApplicationContext(criticality=5), NOW).days_remaining == 7


def test_default_tier_without_context():
    f = _vuln(50.0)
    assert deadline_hours(f) == 1440
    assert sla_for(f, now=NOW).days_remaining == 60


def test_overdue_medium():
    record = sla_for(_vuln(50.0, detected_days_ago=70), now=NOW)
    assert record.days_remaining == -10
    assert record.status == SLAStatus.OVERDUE


def test_low_on_track():
    assert sla_for(_vuln(10.0), now=NOW).status == SLAStatus.ON_TRACK


def test_license_deadlines():
    high = LicenseFinding(id="lic", risk_score=RiskScore(final=80.0))
    low = LicenseFinding(id="lic", risk_score=RiskScore(final=20.0))
    assert deadline_hours(high) == 1440
    assert deadline_hours(low) == 2160


def test_apply_sla_returns_annotated_copies():
    findings = [_vuln(95.0, id="CVE-1"), _vuln(10.0, id="CVE-2")]
    annotated = apply_sla(findings, now=NOW)
    assert [f.id for f in annotated] == ["CVE-1", "CVE-2"]
    assert all(f.sla is not None for f in annotated)
    assert findings[0].sla is None


def test_summarize_sla():
    findings = apply_sla(
        [
            _vuln(50.0, detected_days_ago=70, id="CVE-1"),
            _vuln(95.0, id="CVE-2"),
            _vuln(10.0, id="CVE-3"),
            _vuln(10.0, id="CVE-4"),
        ],
        now=NOW,
    )
    summary = summarize_sla(findings)
    assert summary.overdue == 1
    assert summary.due_soon == 1
    assert summary.on_track == 2
    assert summary.compliance_rate == 75


def test_summarize_empty():
    assert summarize_sla([]).compliance_rate == 100
