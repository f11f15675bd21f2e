"""Convert a segment duration and per-hour rates into absolute targets."""

from __future__ import annotations

import math
from typing import Optional

from racefuel.config.settings import RatesConfig
from racefuel.planner.models import Target


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def calculate_targets(
    segment_minutes: float,
    carbs_per_hour: Optional[float] = None,
    sodium_per_hour: Optional[float] = None,
    water_per_hour: Optional[float] = None,
    rates: Optional[RatesConfig] = None,
) -> Target:
    """Calculate nutrient targets for a segment.

    Unset rates fall back to ``rates`` (or the built-in defaults of
    60 g/h carbs, 300 mg/h sodium and 500 ml/h water). A zero or negative
    duration is returned as-is; the planner reports it as a warning.

    Args:
        segment_minutes: Segment duration in minutes
        carbs_per_hour: Carbohydrate rate (g/h)
        sodium_per_hour: Sodium rate (mg/h)
        water_per_hour: Water rate (ml/h)
        rates: Default rates for any unset value

    Returns:
        Target with amounts rounded to whole units.

    Example:
        >>> calculate_targets(90)
        Target(carbs=90, sodium=450, water=750, duration_hours=1.5)
    """
    rates = rates or RatesConfig()
    if carbs_per_hour is None:
        carbs_per_hour = rates.carbs_per_hour
    if sodium_per_hour is None:
        sodium_per_hour = rates.sodium_per_hour
    if water_per_hour is None:
        water_per_hour = rates.water_per_hour

    hours = segment_minutes / 60
    return Target(
        carbs=round_half_up(carbs_per_hour * hours),
        sodium=round_half_up(sodium_per_hour * hours),
        water=round_half_up(water_per_hour * hours),
        duration_hours=hours,
    )
