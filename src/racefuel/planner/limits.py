"""Acceptance band and overshoot limits for a target."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from racefuel.config.settings import PlannerConfig
from racefuel.planner.models import Nutrient, Nutrients, Target


@dataclass(frozen=True)
class NutrientLimits:
    """Absolute limits for one nutrient.

    Attributes:
        floor: Lower edge of the acceptance band
        ceiling: Upper edge of the acceptance band
        hard_max: Overshoot ceiling no insertion may exceed
    """

    floor: int
    ceiling: int
    hard_max: float


@dataclass(frozen=True)
class PlanLimits:
    """Limits for all three nutrients of a target."""

    carbs: NutrientLimits
    sodium: NutrientLimits
    water: NutrientLimits

    def get(self, nutrient: Nutrient) -> NutrientLimits:
        return getattr(self, nutrient.value)

    def exceeded(self, totals: Nutrients) -> Optional[Nutrient]:
        """Return the first nutrient whose total is above its overshoot ceiling."""
        for nutrient in Nutrient:
            if totals.get(nutrient) > self.get(nutrient).hard_max:
                return nutrient
        return None

    def within(self, totals: Nutrients) -> bool:
        return self.exceeded(totals) is None


def _nutrient_limits(amount: float, overshoot: float, config: PlannerConfig) -> NutrientLimits:
    ceiling = math.floor(amount * config.band_ceiling / 100)
    return NutrientLimits(
        floor=math.floor(amount * config.band_floor / 100),
        ceiling=ceiling,
        hard_max=ceiling * overshoot,
    )


def calculate_limits(target: Target, config: Optional[PlannerConfig] = None) -> PlanLimits:
    """Calculate band and overshoot limits for a target.

    Band edges are floored to whole units; the overshoot ceiling applies the
    per-nutrient multiplier to the band ceiling, not to the raw target.
    """
    config = config or PlannerConfig()
    return PlanLimits(
        carbs=_nutrient_limits(target.carbs, config.carbs_overshoot, config),
        sodium=_nutrient_limits(target.sodium, config.sodium_overshoot, config),
        water=_nutrient_limits(target.water, config.water_overshoot, config),
    )
