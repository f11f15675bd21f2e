"""Coverage and quality scoring for fueling plans.

A plan's score starts at 100 and loses points for each nutrient outside the
acceptance band. Carbs are penalised hardest for overshooting (GI distress),
sodium hardest for undershooting, and water gently in both directions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from racefuel.config.settings import PlannerConfig
from racefuel.planner.models import Nutrient, Nutrients, Target
from racefuel.planner.targets import round_half_up


@dataclass(frozen=True)
class PenaltyCurve:
    """Linear penalty per percentage point outside the band, with a cap."""

    under_rate: float
    under_cap: float
    over_rate: float
    over_cap: float


PENALTIES = {
    Nutrient.CARBS: PenaltyCurve(under_rate=0.5, under_cap=25, over_rate=1.0, over_cap=30),
    Nutrient.SODIUM: PenaltyCurve(under_rate=0.4, under_cap=25, over_rate=0.5, over_cap=20),
    Nutrient.WATER: PenaltyCurve(under_rate=0.3, under_cap=15, over_rate=0.3, over_cap=10),
}


def _percent(amount: float, needed: float) -> float:
    return amount / needed * 100 if needed > 0 else 100.0


def raw_coverage(totals: Nutrients, target: Target) -> Nutrients:
    """Coverage of each nutrient as an unrounded percentage.

    A nutrient with no requirement counts as fully covered.
    """
    return Nutrients(
        carbs=_percent(totals.carbs, target.carbs),
        sodium=_percent(totals.sodium, target.sodium),
        water=_percent(totals.water, target.water),
    )


def calculate_coverage(totals: Nutrients, target: Target) -> Nutrients:
    """Coverage of each nutrient rounded to whole percentage points."""
    raw = raw_coverage(totals, target)
    return Nutrients(
        carbs=round_half_up(raw.carbs),
        sodium=round_half_up(raw.sodium),
        water=round_half_up(raw.water),
    )


def score_coverage(coverage: Nutrients, config: Optional[PlannerConfig] = None) -> int:
    """Map coverage percentages to a 0-100 quality score.

    Args:
        coverage: Percent of target per nutrient
        config: Planner config supplying the acceptance band

    Returns:
        Integer score clamped to [0, 100].
    """
    config = config or PlannerConfig()
    score = 100.0

    for nutrient, curve in PENALTIES.items():
        pct = coverage.get(nutrient)
        if pct < config.band_floor:
            score -= min(curve.under_cap, (config.band_floor - pct) * curve.under_rate)
        elif pct > config.band_ceiling:
            score -= min(curve.over_cap, (pct - config.band_ceiling) * curve.over_rate)

    return max(0, min(100, round_half_up(score)))


def deficient_nutrients(coverage: Nutrients, config: Optional[PlannerConfig] = None) -> list[Nutrient]:
    """Nutrients whose coverage is below the acceptance floor."""
    config = config or PlannerConfig()
    return [n for n in Nutrient if coverage.get(n) < config.band_floor]


# =============================================================================
# Coverage status (for display)
# =============================================================================


class CoverageStatus(Enum):
    """Display status of a nutrient's coverage."""

    CRITICAL_LOW = "critical_low"
    LOW = "low"
    OPTIMAL = "optimal"
    ELEVATED = "elevated"
    WARNING = "warning"
    DANGER = "danger"


# Upper bound (inclusive where noted) of each status, in percent of target
CRITICAL_LOW_BELOW = 70
OPTIMAL_MIN = 90
OPTIMAL_MAX = 120
ELEVATED_MAX = 130
WARNING_MAX = 150

STATUS_MESSAGES = {
    CoverageStatus.CRITICAL_LOW: "Below target - add more nutrition",
    CoverageStatus.LOW: "Close to target",
    CoverageStatus.OPTIMAL: "Meeting your goal",
    CoverageStatus.ELEVATED: "Slightly above target - monitor GI comfort",
    CoverageStatus.WARNING: "High intake - risk of GI distress",
    CoverageStatus.DANGER: "Excessive intake - high risk of stomach issues",
}

STATUS_COLORS = {
    CoverageStatus.CRITICAL_LOW: "red",
    CoverageStatus.LOW: "yellow",
    CoverageStatus.OPTIMAL: "green",
    CoverageStatus.ELEVATED: "yellow",
    CoverageStatus.WARNING: "dark_orange",
    CoverageStatus.DANGER: "red",
}


def coverage_status(percentage: float) -> CoverageStatus:
    """Classify a coverage percentage into a display status."""
    if percentage < CRITICAL_LOW_BELOW:
        return CoverageStatus.CRITICAL_LOW
    if percentage < OPTIMAL_MIN:
        return CoverageStatus.LOW
    if percentage <= OPTIMAL_MAX:
        return CoverageStatus.OPTIMAL
    if percentage <= ELEVATED_MAX:
        return CoverageStatus.ELEVATED
    if percentage <= WARNING_MAX:
        return CoverageStatus.WARNING
    return CoverageStatus.DANGER
