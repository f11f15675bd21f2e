"""Data models for fueling plans.

Plans are value objects: an ordered list of (item, quantity) entries, their
summed nutrient totals, coverage of the target and a quality score. Planner
phases build new plans rather than editing existing ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from racefuel.catalog.models import Item


class Nutrient(Enum):
    """The three nutrients tracked by the planner."""

    CARBS = "carbs"
    SODIUM = "sodium"
    WATER = "water"

    @property
    def unit(self) -> str:
        return {"carbs": "g", "sodium": "mg", "water": "ml"}[self.value]

    @property
    def label(self) -> str:
        return {"carbs": "Carbs", "sodium": "Sodium", "water": "Water"}[self.value]


@dataclass(frozen=True)
class Nutrients:
    """An amount of each tracked nutrient (g carbs, mg sodium, ml water)."""

    carbs: float = 0.0
    sodium: float = 0.0
    water: float = 0.0

    def __add__(self, other: "Nutrients") -> "Nutrients":
        return Nutrients(
            carbs=self.carbs + other.carbs,
            sodium=self.sodium + other.sodium,
            water=self.water + other.water,
        )

    def __sub__(self, other: "Nutrients") -> "Nutrients":
        return Nutrients(
            carbs=self.carbs - other.carbs,
            sodium=self.sodium - other.sodium,
            water=self.water - other.water,
        )

    def scaled(self, factor: float) -> "Nutrients":
        return Nutrients(
            carbs=self.carbs * factor,
            sodium=self.sodium * factor,
            water=self.water * factor,
        )

    def get(self, nutrient: Nutrient) -> float:
        return getattr(self, nutrient.value)

    def to_dict(self) -> dict[str, float]:
        return {"carbs": self.carbs, "sodium": self.sodium, "water": self.water}


@dataclass(frozen=True)
class Target:
    """Required nutrient quantities for a time window.

    Attributes:
        carbs: Carbohydrate needed (g)
        sodium: Sodium needed (mg)
        water: Water needed (ml)
        duration_hours: Length of the window in hours
    """

    carbs: int
    sodium: int
    water: int
    duration_hours: float

    @property
    def needs(self) -> Nutrients:
        return Nutrients(carbs=self.carbs, sodium=self.sodium, water=self.water)

    @property
    def has_duration(self) -> bool:
        return self.duration_hours > 0

    def to_dict(self) -> dict:
        return {
            "carbs": self.carbs,
            "sodium": self.sodium,
            "water": self.water,
            "duration_hours": round(self.duration_hours, 3),
        }


@dataclass(frozen=True)
class PlanEntry:
    """An item, its quantity and what that quantity contributes.

    Attributes:
        item: Catalog item
        quantity: Number of servings (>= 1)
        contributes: Nutrients supplied, using the effective water yield
    """

    item: Item
    quantity: int
    contributes: Nutrients

    @property
    def per_serving(self) -> Nutrients:
        return self.contributes.scaled(1 / self.quantity)


@dataclass(frozen=True)
class Plan:
    """A scored fueling plan produced for one strategy.

    Attributes:
        id: Label for this plan (not used for selection)
        strategy_id: Identifier of the strategy that produced it
        name: Display name
        description: Strategy description
        entries: Selected items in insertion order
        totals: Summed contributions
        coverage: Percent of target per nutrient, rounded to integers
        score: Quality score 0-100
        includes_required_category: Whether the strategy's must-include
            class is present (True when the strategy declares none)
        created_at: Wall-clock time the plan was labelled
    """

    id: str = field(compare=False)
    strategy_id: str
    name: str
    description: str
    entries: tuple[PlanEntry, ...]
    totals: Nutrients
    coverage: Nutrients
    score: int
    includes_required_category: bool = True
    created_at: datetime = field(default_factory=datetime.now, compare=False)

    @property
    def fingerprint(self) -> str:
        """Content key: sorted name:quantity pairs."""
        return "|".join(sorted(f"{e.item.name}:{e.quantity}" for e in self.entries))

    def quantities(self) -> dict[str, int]:
        return {e.item.name: e.quantity for e in self.entries}


@dataclass
class SuggestionResult:
    """Output of a planning run.

    Attributes:
        target: The target the plans were built for
        plans: Best plan per strategy, highest score first
        warnings: Nutrients no plan could cover, or unusable inputs
        tips: General advice and duplicate-strategy advisories
    """

    target: Target
    plans: list[Plan] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    tips: list[str] = field(default_factory=list)

    @property
    def best_plan(self) -> Optional[Plan]:
        return self.plans[0] if self.plans else None
