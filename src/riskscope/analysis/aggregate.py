"""Application-level aggregation of finding scores.

Weighted maximum::

    overall = min(100, highest * 0.4
                       + avg(top 5 critical) * 0.3
                       + avg(top 10 high) * 0.2
                       + log10(n + 1) * 2)

The top-N averages always divide by N (missing slots count as zero), so adding
a finding can never lower the result.

Bayesian alternative: seed with the top score and fold in each next score as
``next * (1 - running / 100)`` over the top 20. Every fold is kept, however
small, so this one never drops when a finding is added either.
"""

from __future__ import annotations

import math

from riskscope.models import (
    ApplicationRiskBreakdown,
    ApplicationRiskScore,
    BucketStats,
    Category,
    Finding,
    Severity,
)
from riskscope.scoring.tables import (
    AGGREGATE_CRITICAL_WEIGHT,
    AGGREGATE_HIGH_WEIGHT,
    AGGREGATE_HIGHEST_WEIGHT,
    AGGREGATE_TOP_CRITICAL,
    AGGREGATE_TOP_HIGH,
    AGGREGATE_VOLUME_WEIGHT,
    BAYESIAN_TOP_N,
    CRITICAL_THRESHOLD,
    HIGH_THRESHOLD,
)


def extract_scores(findings: list[Finding]) -> list[float]:
    scores = (f.effective_score for f in findings)
    return [s for s in scores if not math.isnan(s)]


def _top_average(scores: list[float], n: int) -> float:
    return sum(scores[:n]) / n


def _round(value: float) -> float:
    return round(value, 1)


def aggregate(findings: list[Finding]) -> ApplicationRiskScore:
    """Combine all findings of one application into a single 0-100 score."""
    scores = sorted(extract_scores(findings), reverse=True)
    if not scores:
        return ApplicationRiskScore()

    critical = [s for s in scores if s >= CRITICAL_THRESHOLD]
    high = [s for s in scores if HIGH_THRESHOLD <= s < CRITICAL_THRESHOLD]

    highest = scores[0]
    avg_critical = _top_average(critical, AGGREGATE_TOP_CRITICAL)
    avg_high = _top_average(high, AGGREGATE_TOP_HIGH)
    volume = math.log10(len(scores) + 1) * AGGREGATE_VOLUME_WEIGHT

    overall = min(
        100.0,
        highest * AGGREGATE_HIGHEST_WEIGHT
        + avg_critical * AGGREGATE_CRITICAL_WEIGHT
        + avg_high * AGGREGATE_HIGH_WEIGHT
        + volume,
    )

    return ApplicationRiskScore(
        overall=_round(overall),
        highest_score=_round(highest),
        avg_top5_critical=_round(avg_critical),
        avg_top10_high=_round(avg_high),
        volume_contribution=_round(volume),
        breakdown=breakdown(findings),
    )


def bayesian_aggregate(findings: list[Finding], top_n: int = BAYESIAN_TOP_N) -> float:
    """Compounding-but-saturating aggregate of the top ``top_n`` scores."""
    scores = sorted(extract_scores(findings), reverse=True)[:top_n]
    if not scores:
        return 0.0

    running = scores[0]
    for score in scores[1:]:
        running += score * (1 - running / 100)

    return min(100.0, _round(running))


def _stats(scores: list[float]) -> BucketStats:
    if not scores:
        return BucketStats()
    return BucketStats(
        count=len(scores),
        avg_score=_round(sum(scores) / len(scores)),
        max_score=_round(max(scores)),
    )


def breakdown(findings: list[Finding]) -> ApplicationRiskBreakdown:
    by_category: dict[Category, list[float]] = {c: [] for c in Category}
    by_severity: dict[Severity, list[float]] = {s: [] for s in Severity}

    for f in findings:
        score = f.effective_score
        if math.isnan(score):
            continue
        by_category[Category(f.category)].append(score)
        by_severity[Severity.from_score(score)].append(score)

    return ApplicationRiskBreakdown(
        by_category={c: _stats(s) for c, s in by_category.items()},
        by_severity={s: _stats(v) for s, v in by_severity.items()},
        total=len(findings),
        critical_count=len(by_severity[Severity.CRITICAL]),
        high_count=len(by_severity[Severity.HIGH]),
        medium_count=len(by_severity[Severity.MEDIUM]),
        low_count=len(by_severity[Severity.LOW]),
    )
