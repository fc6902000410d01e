"""Base scoring contract shared by every category calculator.

score = clamp(base_score x environmental_multiplier x override_multiplier, 0, 100)

The environmental multiplier is the geometric mean of three independent
context factors, so no single factor dominates. Missing context, a missing
factor or an expired override all resolve to a neutral 1.0.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import ClassVar, Generic, TypeVar

from riskscope.models import (
    ApplicationContext,
    Category,
    EnvironmentalContext,
    FindingBase,
    RiskScore,
    ScoreBreakdown,
    ScoreOverride,
    Severity,
)
from riskscope.scoring.tables import ASSET_CRITICALITY, DATA_SENSITIVITY, NETWORK_EXPOSURE

F = TypeVar("F", bound=FindingBase)


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp to [low, high]; NaN collapses to ``low``."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def severity_from_score(score: float) -> Severity:
    return Severity.from_score(score)


def environmental_factors(context: EnvironmentalContext | None) -> tuple[float, float, float]:
    """(asset, data, network) factors, each 1.0 when unknown."""
    if context is None:
        return 1.0, 1.0, 1.0
    asset = ASSET_CRITICALITY.get(context.asset_criticality, 1.0)
    data = DATA_SENSITIVITY.get((context.data_sensitivity or "").lower(), 1.0)
    network = NETWORK_EXPOSURE.get((context.network_exposure or "").lower(), 1.0)
    return asset, data, network


def environmental_multiplier(context: EnvironmentalContext | None) -> float:
    asset, data, network = environmental_factors(context)
    return (asset * data * network) ** (1 / 3)


class BaseCalculator(Generic[F]):
    """Skeleton of the scoring contract; subclasses supply the base score."""

    category: ClassVar[Category]

    def __init__(
        self,
        app_context: ApplicationContext | None = None,
        now: datetime | None = None,
    ) -> None:
        self.app_context = app_context
        self.now = now or datetime.now(UTC)

    def base_score(self, finding: F) -> float:
        """Category-specific score in [0, 100]."""
        raise NotImplementedError

    def type_factors(self, finding: F) -> dict[str, float]:
        return {}

    def score(
        self,
        finding: F,
        context: EnvironmentalContext | None = None,
        override: ScoreOverride | None = None,
    ) -> RiskScore:
        # final is derived from the stored (rounded) base
        base = round(clamp(self.base_score(finding)), 1)
        asset, data, network = environmental_factors(context)
        env_multiplier = environmental_multiplier(context)
        override_multiplier = override.effective_multiplier(self.now) if override else 1.0

        final = round(clamp(base * env_multiplier * override_multiplier), 1)

        return RiskScore(
            final=final,
            base_score=base,
            environmental_multiplier=round(env_multiplier, 3),
            override_multiplier=round(override_multiplier, 2),
            breakdown=ScoreBreakdown(
                asset_criticality_factor=asset,
                data_sensitivity_factor=data,
                network_exposure_factor=network,
                type_factors=self.type_factors(finding),
            ),
            concert=round(final / 10, 2),
            comprehensive=round(final / 10, 2),
        )
