"""Tests for the base scoring contract and category dispatch."""

from datetime import UTC, datetime, timedelta

import pytest

from riskscope.errors import MalformedFindingError
from riskscope.models import (
    ApplicationContext,
    CertificateFinding,
    CredentialFinding,
    DataFlags,
    EnvironmentalContext,
    LicenseFinding,
    MisconfigurationFinding,
    ScoreOverride,
    Severity,
    StaticAnalysisFinding,
    VulnerabilityFinding,
)
from riskscope.scoring import get_calculator, score_finding, score_findings
from riskscope.scoring.base import clamp, environmental_multiplier, severity_from_score
from riskscope.scoring.certificate import CertificateCalculator
from riskscope.scoring.code import CodeCalculator
from riskscope.scoring.credential import CredentialCalculator
from riskscope.scoring.license import LicenseCalculator
from riskscope.scoring.misconfiguration import MisconfigurationCalculator
from riskscope.scoring.vulnerability import VulnerabilityCalculator

NOW = datetime(2025, 6, 1, tzinfo=UTC)


def _make_vuln(**kwargs) -> VulnerabilityFinding:
    defaults = {"id": "CVE-2024-0001", "title": "Test", "cvss": 9.1, "epss": 0.45}
    defaults.update(kwargs)
    return VulnerabilityFinding(**defaults)


def test_formula_b_example():
    score = score_finding(_make_vuln())
    assert score.final == 38.5
    assert score.base_score == 38.5


def test_known_exploited_is_100():
    assert score_finding(_make_vuln(known_exploited=True, cvss=1.0, epss=0.0)).final == 100.0
    assert score_finding(_make_vuln(known_exploited=True, cvss=None, epss=None)).final == 100.0


def test_known_exploited_capped_under_amplifying_context():
    ctx = EnvironmentalContext(asset_criticality=5, data_sensitivity="restricted", network_exposure="dmz")
    assert score_finding(_make_vuln(known_exploited=True), ctx).final == 100.0


def test_missing_cvss_defaults():
    # 5.0 * 2.5
    assert score_finding(_make_vuln(cvss=None, epss=None)).final == 12.5


def test_no_context_is_neutral():
    score = score_finding(_make_vuln())
    assert environmental_multiplier(None) == 1.0
    assert score.environmental_multiplier == 1.0
    assert score.breakdown.asset_criticality_factor == 1.0
    assert score.breakdown.data_sensitivity_factor == 1.0
    assert score.breakdown.network_exposure_factor == 1.0


def test_partial_context_defaults_missing_factors():
    ctx = EnvironmentalContext(asset_criticality=5)
    score = score_finding(_make_vuln(cvss=8.0, epss=0.0), ctx)
    assert score.breakdown.asset_criticality_factor == 1.5
    assert score.breakdown.data_sensitivity_factor == 1.0
    assert score.environmental_multiplier == round(1.5 ** (1 / 3), 3)
    assert score.final == round(20.0 * 1.5 ** (1 / 3), 1)


def test_environmental_geometric_mean():
    ctx = EnvironmentalContext(
        asset_criticality=5, data_sensitivity="restricted", network_exposure="internet-facing"
    )
    assert environmental_multiplier(ctx) == pytest.approx((1.5 * 1.4 * 1.5) ** (1 / 3))


def test_unknown_context_values_are_neutral():
    ctx = EnvironmentalContext(asset_criticality=9, data_sensitivity="top-secret", network_exposure="moon")
    assert environmental_multiplier(ctx) == 1.0


def test_override_applied():
    override = ScoreOverride(multiplier=0.5, reason="WAF in front", expires_at=NOW + timedelta(days=30))
    score = score_finding(_make_vuln(cvss=8.0, epss=0.0), override=override, now=NOW)
    assert score.override_multiplier == 0.5
    assert score.final == 10.0


def test_final_recomputes_from_stored_fields():
    # 9.1 * 2.5 + 0.449 * 35 = 38.465, stored as 38.5
    override = ScoreOverride(multiplier=2.0, reason="exposed admin")
    score = score_finding(_make_vuln(epss=0.449), override=override, now=NOW)
    assert score.base_score == 38.5
    assert score.final == 77.0
    assert score.final == round(score.base_score * score.environmental_multiplier * score.override_multiplier, 1)


def test_expired_override_same_as_none():
    expired = ScoreOverride(multiplier=0.1, reason="old exception", expires_at=NOW - timedelta(seconds=1))
    finding = _make_vuln()
    assert score_finding(finding, override=expired, now=NOW) == score_finding(finding, now=NOW)


def test_override_cannot_exceed_100():
    override = ScoreOverride(multiplier=10.0, reason="crown jewels")
    assert score_finding(_make_vuln(), override=override).final == 100.0


def test_legacy_scores():
    score = score_finding(_make_vuln())
    assert score.concert == 3.85
    assert score.comprehensive == 3.85


def test_clamp():
    assert clamp(-5) == 0.0
    assert clamp(150) == 100.0
    assert clamp(float("nan")) == 0.0
    assert clamp(0.01, 0.1, 10.0) == 0.1


def test_severity_from_score():
    assert severity_from_score(38.5) == Severity.LOW
    assert severity_from_score(100) == Severity.CRITICAL


@pytest.mark.parametrize(
    ("finding", "calculator"),
    [
        (VulnerabilityFinding(id="CVE-1"), VulnerabilityCalculator),
        (CredentialFinding(id="s"), CredentialCalculator),
        (CertificateFinding(id="c"), CertificateCalculator),
        (MisconfigurationFinding(id="m"), MisconfigurationCalculator),
        (LicenseFinding(id="l"), LicenseCalculator),
        (StaticAnalysisFinding(id="r"), CodeCalculator),
    ],
)
def test_dispatch_by_category(finding, calculator):
    assert isinstance(get_calculator(finding), calculator)


def test_dispatch_rejects_unknown_object():
    with pytest.raises(MalformedFindingError):
        score_finding(object())


def test_missing_identifier_rejected():
    finding = VulnerabilityFinding.model_construct(id="", category="vulnerability")
    with pytest.raises(MalformedFindingError):
        score_finding(finding)


def test_app_context_derives_environment():
    app = ApplicationContext(criticality=5, data=DataFlags(phi=True), network_exposure="public")
    score = score_finding(_make_vuln(), app_context=app)
    assert score.breakdown.asset_criticality_factor == 1.5
    assert score.breakdown.data_sensitivity_factor == 1.4
    assert score.breakdown.network_exposure_factor == 1.5


def test_score_findings_in_place():
    findings = [_make_vuln(id="CVE-1"), _make_vuln(id="CVE-2", known_exploited=True)]
    overrides = {"CVE-1": ScoreOverride(multiplier=2.0, reason="exposed admin")}
    score_findings(findings, overrides=overrides, now=NOW)
    assert findings[0].risk_score.final == 77.0
    assert findings[1].risk_score.final == 100.0


@pytest.mark.parametrize("cvss", [0.0, 3.3, 7.7, 10.0])
@pytest.mark.parametrize("epss", [0.0, 0.5, 1.0])
def test_final_always_in_range(cvss, epss):
    ctx = EnvironmentalContext(asset_criticality=5, data_sensitivity="restricted", network_exposure="dmz")
    score = score_finding(_make_vuln(cvss=cvss, epss=epss), ctx)
    assert 0.0 <= score.final <= 100.0
