"""Environmental factor of the bounded 0-10 formulas.

The factor is the plain average of whichever of application criticality,
data sensitivity and access-point count are known, so it degrades to fewer
terms rather than failing. With no usable signal it is 1.0.
"""

from __future__ import annotations

from pydantic import BaseModel

from riskscope.models import ConcertContext
from riskscope.scoring.tables import (
    APP_CRITICALITY_FACTOR,
    DATA_SENSITIVITY_FACTOR,
    PRIVATE_ACCESS_POINTS,
    PUBLIC_ACCESS_POINTS,
)


class ConcertBreakdown(BaseModel):
    application_criticality_factor: float = 1.0
    data_sensitivity_factor: float = 1.0
    access_points_factor: float = 1.0


def environmental_factor(context: ConcertContext | None) -> tuple[float, ConcertBreakdown]:
    breakdown = ConcertBreakdown()
    if context is None:
        return 1.0, breakdown

    components: list[float] = []

    if context.application_criticality in APP_CRITICALITY_FACTOR:
        breakdown.application_criticality_factor = APP_CRITICALITY_FACTOR[context.application_criticality]
        components.append(breakdown.application_criticality_factor)

    if context.data_sensitivity in DATA_SENSITIVITY_FACTOR:
        breakdown.data_sensitivity_factor = DATA_SENSITIVITY_FACTOR[context.data_sensitivity]
        components.append(breakdown.data_sensitivity_factor)

    # Public access points take precedence over private ones
    if context.public_access_points > 0:
        breakdown.access_points_factor = PUBLIC_ACCESS_POINTS[min(context.public_access_points, 16)]
        components.append(breakdown.access_points_factor)
    elif context.private_access_points > 0:
        breakdown.access_points_factor = PRIVATE_ACCESS_POINTS[min(context.private_access_points, 4)]
        components.append(breakdown.access_points_factor)

    if not components:
        return 1.0, breakdown
    return round(sum(components) / len(components), 3), breakdown
