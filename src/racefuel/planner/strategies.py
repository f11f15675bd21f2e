"""Built-in plan strategies.

A strategy is a named rule set: which catalog categories to reach for first,
which items are banned outright, and which low-sodium foods to use when
carbs still fall short. Each strategy yields one alternative plan, so the
athlete can choose between a mixed, liquid-only, gel-only or low-sodium
approach for the same segment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from racefuel.catalog.classify import ItemClass
from racefuel.catalog.models import ItemCategory


class MacroRestriction(Enum):
    """Hard restriction to one physical form of fuel."""

    LIQUIDS_ONLY = "liquids_only"  # No gels; drinks, food, electrolytes
    NO_LIQUIDS = "no_liquids"  # No drink mixes; gels, food, electrolytes


@dataclass(frozen=True)
class Strategy:
    """A named, immutable selection profile.

    Attributes:
        id: Strategy identifier (e.g. "balanced")
        name: Display name
        emoji: Display prefix
        description: Human-readable description
        category_priority: Categories in preference order for primary fill
        prefer_patterns: Name patterns used to break ordering ties
        avoid_patterns: Name patterns (case-insensitive) never selected
        real_food_priority: Name patterns ordering low-sodium gap-fill food
        allowed_categories: If set, ONLY these categories (plus water) allowed
        excluded_categories: Categories never selected
        max_sodium_per_serving: Per-serving sodium ceiling (mg)
        macro_restriction: Hard restriction to liquids or solids
        must_include: Class the plan should contain at least one of
    """

    id: str
    name: str
    emoji: str
    description: str
    category_priority: tuple[ItemCategory, ...]
    prefer_patterns: tuple[str, ...] = ()
    avoid_patterns: tuple[str, ...] = ()
    real_food_priority: tuple[str, ...] = ()
    allowed_categories: Optional[frozenset[ItemCategory]] = None
    excluded_categories: frozenset[ItemCategory] = frozenset()
    max_sodium_per_serving: Optional[float] = None
    macro_restriction: Optional[MacroRestriction] = None
    must_include: Optional[ItemClass] = None

    @property
    def display_name(self) -> str:
        return f"{self.emoji} {self.name}"

    def category_rank(self, category: ItemCategory) -> int:
        """Position of a category in the priority list (99 if absent)."""
        try:
            return self.category_priority.index(category)
        except ValueError:
            return 99

    def preference_rank(self, name: str) -> int:
        """Position of the first preferred pattern in a name (99 if none)."""
        return _pattern_rank(self.prefer_patterns, name)

    def real_food_rank(self, name: str) -> int:
        """Position of the first real-food pattern in a name (99 if none)."""
        return _pattern_rank(self.real_food_priority, name)

    def avoids(self, name: str) -> bool:
        lowered = name.lower()
        return any(pattern.lower() in lowered for pattern in self.avoid_patterns)


def _pattern_rank(patterns: tuple[str, ...], name: str) -> int:
    lowered = name.lower()
    for index, pattern in enumerate(patterns):
        if pattern.lower() in lowered:
            return index
    return 99


# =============================================================================
# Strategy Definitions
# =============================================================================

BALANCED = Strategy(
    id="balanced",
    name="Balanced Mix",
    emoji="⚖️",
    description="Optimal balance of gels, drinks, and electrolytes",
    category_priority=(
        ItemCategory.GELS,
        ItemCategory.DRINKS,
        ItemCategory.BARS,
        ItemCategory.REAL_FOOD,
        ItemCategory.ELECTROLYTES,
        ItemCategory.OTHER,
    ),
    prefer_patterns=("Active Root", "Maurten", "Tailwind"),
    real_food_priority=("Banana", "Bar", "Jelly"),
    must_include=ItemClass.GEL,
)

DRINK_FOCUSED = Strategy(
    id="drink-focused",
    name="Drink-Focused",
    emoji="🥤",
    description="Prioritizes liquid nutrition for hydration + carbs",
    category_priority=(
        ItemCategory.DRINKS,
        ItemCategory.REAL_FOOD,
        ItemCategory.ELECTROLYTES,
        ItemCategory.OTHER,
    ),
    prefer_patterns=("Tailwind", "SIS Go Electrolyte", "Precision Fuel"),
    real_food_priority=("Jelly", "Banana", "Rice Pudding"),
    excluded_categories=frozenset({ItemCategory.GELS, ItemCategory.BARS}),
    macro_restriction=MacroRestriction.LIQUIDS_ONLY,
    must_include=ItemClass.DRINK,
)

GEL_FOCUSED = Strategy(
    id="gel-focused",
    name="Gel-Focused",
    emoji="⚡",
    description="Compact energy from gels, add water separately",
    category_priority=(
        ItemCategory.GELS,
        ItemCategory.REAL_FOOD,
        ItemCategory.ELECTROLYTES,
        ItemCategory.OTHER,
    ),
    prefer_patterns=("Maurten", "GU", "SIS Go Isotonic", "Active Root Energy Gel"),
    avoid_patterns=("Drink Mix", "Sports Drink"),
    real_food_priority=("Rice Pudding", "Custard", "Jelly", "Banana"),
    excluded_categories=frozenset({ItemCategory.DRINKS}),
    macro_restriction=MacroRestriction.NO_LIQUIDS,
    must_include=ItemClass.GEL,
)

LOW_SODIUM = Strategy(
    id="electrolyte-light",
    name="Low Sodium",
    emoji="❄️",
    description="For runners who need less sodium or cooler conditions",
    category_priority=(
        ItemCategory.REAL_FOOD,
        ItemCategory.GELS,
        ItemCategory.BARS,
        ItemCategory.OTHER,
    ),
    prefer_patterns=("Maurten", "Spring", "Banana", "Jelly", "Rice Pudding"),
    avoid_patterns=(
        "Precision", "PH 1500", "Salt", "S!Caps", "LMNT", "Tailwind", "Active Root",
    ),
    real_food_priority=("Jelly", "Rice Pudding", "Custard", "Banana", "Honey"),
    max_sodium_per_serving=60,
)


# =============================================================================
# Strategy Registry
# =============================================================================

STRATEGIES: tuple[Strategy, ...] = (BALANCED, DRINK_FOCUSED, GEL_FOCUSED, LOW_SODIUM)

STRATEGY_REGISTRY: dict[str, Strategy] = {s.id: s for s in STRATEGIES}


def get_strategy(strategy_id: str) -> Strategy | None:
    """Get a strategy by identifier.

    Args:
        strategy_id: Strategy identifier (e.g., "balanced", "gel-focused")

    Returns:
        Strategy or None if not found.
    """
    return STRATEGY_REGISTRY.get(strategy_id.lower())


def list_strategies() -> list[Strategy]:
    """Return the built-in strategies in evaluation order."""
    return list(STRATEGIES)
