"""Item classification based on stored category and name heuristics.

Catalog categories are entered by hand and are not always reliable: an
"Energy Gel Mix" filed under Gels is really a drink powder, and a drink mix
with no water listed still yields a bottle of fluid once mixed. This module
resolves each item to a single ``ItemClass`` once per run so the planner
phases never repeat string matching.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from racefuel.catalog.models import Item, ItemCategory


class ItemClass(Enum):
    """Resolved class of an item, used by strategy rules."""

    GEL = "gel"
    DRINK = "drink"
    BAR = "bar"
    REAL_FOOD = "real_food"
    ELECTROLYTE = "electrolyte"
    WATER = "water"
    OTHER = "other"


# Recovery/supplement products, never suggested for race-day fueling
EXCLUDED_KEYWORDS = [
    "protein", "whey", "casein", "recovery", "bcaa", "amino", "creatine",
    "collagen", "mass gainer", "weight gainer", "meal replacement",
]

GEL_KEYWORDS = ["gel", "iso", "shot", "bloks", "chews"]
NOT_GEL_KEYWORDS = ["drink", "mix", "hydration"]

DRINK_KEYWORDS = ["drink", "fuel", "hydration", "tailwind", "electrolyte mix"]

DRINK_MIX_KEYWORDS = [
    "drink mix", "hydration mix", "fuel mix", "endurance fuel", "tailwind",
    "sis go electrolyte", "carb mix", "energy drink", "sports drink",
    "electrolyte drink",
]

# A Drinks item with no listed water counts as a mix above these yields
DRINK_MIX_MIN_CARBS = 15.0
DRINK_MIX_MIN_SODIUM = 150.0

_CATEGORY_CLASSES = {
    ItemCategory.BARS: ItemClass.BAR,
    ItemCategory.REAL_FOOD: ItemClass.REAL_FOOD,
    ItemCategory.ELECTROLYTES: ItemClass.ELECTROLYTE,
    ItemCategory.WATER: ItemClass.WATER,
}


def matched_exclusion_keyword(item: Item) -> str | None:
    """Return the recovery/supplement keyword in the item name, if any."""
    name = item.name.lower()
    for keyword in EXCLUDED_KEYWORDS:
        if keyword in name:
            return keyword
    return None


def is_water(item: Item) -> bool:
    """Check if an item is plain water."""
    return item.category == ItemCategory.WATER or item.name.strip().lower() == "water"


def is_gel(item: Item) -> bool:
    """Check if an item is a gel, by category and name.

    A Gels item with "drink" or "mix" in its name is a drink powder.
    """
    name = item.name.lower()

    if item.category == ItemCategory.GELS:
        return not ("drink" in name or "mix" in name)

    matches_gel = any(kw in name for kw in GEL_KEYWORDS)
    matches_not_gel = any(kw in name for kw in NOT_GEL_KEYWORDS)
    return matches_gel and not matches_not_gel


def is_drink(item: Item) -> bool:
    """Check if an item is a drink, by category and name."""
    name = item.name.lower()

    if item.category == ItemCategory.DRINKS:
        return True
    if item.category == ItemCategory.GELS and "mix" in name:
        return True
    return any(kw in name for kw in DRINK_KEYWORDS)


def is_drink_mix(item: Item) -> bool:
    """Check if an item is a powder or concentrate that is mixed with water.

    Recovery products are never drink mixes, even when sold as powders.
    """
    if matched_exclusion_keyword(item) is not None:
        return False

    name = item.name.lower()
    if any(pattern in name for pattern in DRINK_MIX_KEYWORDS):
        return True

    if item.category == ItemCategory.DRINKS and item.water == 0:
        return item.carbs >= DRINK_MIX_MIN_CARBS or item.sodium >= DRINK_MIX_MIN_SODIUM

    return False


def effective_water(item: Item, drink_mix_water_ml: float = 500.0) -> float:
    """Get the water an item contributes per serving.

    Drink mixes cataloged with 0 ml are assumed to be mixed into
    ``drink_mix_water_ml`` of water. The item itself is never modified.
    """
    if item.water > 0:
        return item.water
    if is_drink_mix(item):
        return drink_mix_water_ml
    return 0.0


def classify(item: Item) -> ItemClass:
    """Resolve an item to a single class.

    Water wins over everything, then gel and drink name heuristics, then the
    stored category.
    """
    if is_water(item):
        return ItemClass.WATER
    if is_gel(item):
        return ItemClass.GEL
    if is_drink(item):
        return ItemClass.DRINK
    return _CATEGORY_CLASSES.get(item.category, ItemClass.OTHER)


@dataclass(frozen=True)
class ItemProfile:
    """Classification results for one item."""

    item_class: ItemClass
    is_gel: bool
    is_drink: bool
    is_drink_mix: bool
    is_water: bool
    effective_water: float


class ItemClassifier:
    """Per-run cache of item profiles.

    Create one per planning run; profiles are computed on first use.
    """

    def __init__(self, drink_mix_water_ml: float = 500.0):
        self.drink_mix_water_ml = drink_mix_water_ml
        self._profiles: dict[Item, ItemProfile] = {}

    def profile(self, item: Item) -> ItemProfile:
        cached = self._profiles.get(item)
        if cached is not None:
            return cached

        profile = ItemProfile(
            item_class=classify(item),
            is_gel=is_gel(item),
            is_drink=is_drink(item),
            is_drink_mix=is_drink_mix(item),
            is_water=is_water(item),
            effective_water=effective_water(item, self.drink_mix_water_ml),
        )
        self._profiles[item] = profile
        return profile

    def classify(self, item: Item) -> ItemClass:
        return self.profile(item).item_class

    def effective_water(self, item: Item) -> float:
        return self.profile(item).effective_water

    def __len__(self) -> int:
        return len(self._profiles)
