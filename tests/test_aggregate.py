"""Tests for application-level aggregation."""

import math
import random

from riskscope.analysis.aggregate import aggregate, bayesian_aggregate, breakdown
from riskscope.models import (
    Category,
    CredentialFinding,
    RiskScore,
    Severity,
    VulnerabilityFinding,
)


def _scored(score: float, idx: int = 0, cls=VulnerabilityFinding):
    return cls(id=f"F-{idx}", risk_score=RiskScore(final=score))


def _findings(scores: list[float]):
    return [_scored(s, i) for i, s in enumerate(scores)]


def test_empty_set_is_all_zero():
    result = aggregate([])
    assert result.overall == 0.0
    assert result.highest_score == 0.0
    assert result.avg_top5_critical == 0.0
    assert result.avg_top10_high == 0.0
    assert result.volume_contribution == 0.0
    assert result.breakdown.total == 0
    assert all(b.count == 0 for b in result.breakdown.by_category.values())
    assert bayesian_aggregate([]) == 0.0


def test_weighted_maximum():
    result = aggregate(_findings([95.0, 80.0, 50.0]))
    volume = math.log10(4) * 2
    expected = 95 * 0.4 + (95 / 5) * 0.3 + (80 / 10) * 0.2 + volume
    assert result.highest_score == 95.0
    assert result.avg_top5_critical == 19.0
    assert result.avg_top10_high == 8.0
    assert result.volume_contribution == round(volume, 1)
    assert result.overall == round(expected, 1)
    assert result.legacy_overall == round(result.overall / 10, 1)


def test_overall_capped_at_100():
    result = aggregate(_findings([100.0] * 5000))
    assert result.overall <= 100.0


def test_adding_findings_never_decreases_overall():
    rng = random.Random(1234)
    findings = []
    previous = 0.0
    for i in range(60):
        findings.append(_scored(round(rng.uniform(0, 100), 1), i))
        current = aggregate(findings).overall
        assert current >= previous
        previous = current


def test_adding_a_low_finding_to_critical_set():
    base = _findings([95.0, 92.0])
    more = base + [_scored(5.0, 99)]
    assert aggregate(more).overall >= aggregate(base).overall


def test_unscored_findings_use_severity_default():
    findings = [VulnerabilityFinding(id="CVE-1", severity=Severity.CRITICAL)]
    assert aggregate(findings).highest_score == 95.0


def test_bayesian_example():
    # 90 + 80 * 0.1 = 98; 50 * 0.02 = 1.0 still counts
    assert bayesian_aggregate(_findings([50.0, 90.0, 80.0])) == 99.0


def test_bayesian_keeps_small_contributions():
    # 90 + 20 * 0.1 = 92; 5 * 0.08 = 0.4
    assert bayesian_aggregate(_findings([90.0, 20.0, 5.0])) == 92.4


def test_bayesian_never_decreases_when_adding():
    base = [40.0] + [2.0] * 10
    before = bayesian_aggregate(_findings(base))
    assert before == 51.0
    for extra in (0.0, 1.0, 3.0, 39.0, 80.0):
        assert bayesian_aggregate(_findings(base + [extra])) >= before


def test_bayesian_single_and_cap():
    assert bayesian_aggregate(_findings([42.0])) == 42.0
    assert bayesian_aggregate(_findings([100.0, 100.0])) == 100.0


def test_bayesian_top_n():
    scores = [30.0] * 25
    assert bayesian_aggregate(_findings(scores), top_n=1) == 30.0
    assert bayesian_aggregate(_findings(scores)) <= 100.0


def test_breakdown_by_category_and_severity():
    findings = [
        _scored(95.0, 1),
        _scored(75.0, 2),
        _scored(30.0, 3, CredentialFinding),
        _scored(50.0, 4, CredentialFinding),
    ]
    result = breakdown(findings)
    assert result.total == 4
    assert result.critical_count == 1
    assert result.high_count == 1
    assert result.medium_count == 1
    assert result.low_count == 1

    vulns = result.by_category[Category.VULNERABILITY]
    assert vulns.count == 2
    assert vulns.avg_score == 85.0
    assert vulns.max_score == 95.0
    assert result.by_category[Category.CREDENTIAL].avg_score == 40.0
    assert result.by_category[Category.LICENSE].count == 0
    assert result.by_severity[Severity.LOW].max_score == 30.0
