"""Data models for the product catalog.

An item is one discrete consumable (a gel, a sachet of drink mix, a banana)
with fixed per-serving yields for the three nutrients the planner tracks:
carbohydrate (g), sodium (mg) and water (ml).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ItemCategory(Enum):
    """Stored catalog category of an item."""

    GELS = "Gels"
    DRINKS = "Drinks"
    BARS = "Bars"
    REAL_FOOD = "Real Food"
    ELECTROLYTES = "Electrolytes"
    OTHER = "Other"
    WATER = "Water"

    @classmethod
    def parse(cls, value: str) -> "ItemCategory":
        """Parse a category label, accepting enum values or names.

        Raises:
            ValueError: If the label matches no category
        """
        text = value.strip()
        for category in cls:
            if text.lower() in (category.value.lower(), category.name.lower()):
                return category
        raise ValueError(f"Unknown item category: {value}")


@dataclass(frozen=True)
class Item:
    """A catalog entry with fixed per-serving nutrient yields.

    Attributes:
        name: Display name, unique within a catalog
        category: Stored catalog category
        carbs: Carbohydrate per serving (g)
        sodium: Sodium per serving (mg)
        water: Water per serving (ml); zero for unmixed drink powders
        serving_size: Human-readable serving label (e.g. "1 sachet")
        brand: Optional brand name
        exclude_from_smart_fill: If True, never suggested by the planner
    """

    name: str
    category: ItemCategory
    carbs: float = 0.0
    sodium: float = 0.0
    water: float = 0.0
    serving_size: str = "1 serving"
    brand: Optional[str] = None
    exclude_from_smart_fill: bool = False

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Item name must not be empty")
        for attr in ("carbs", "sodium", "water"):
            if getattr(self, attr) < 0:
                raise ValueError(f"{self.name}: {attr} must be non-negative")

    @property
    def has_yield(self) -> bool:
        """Whether the item contributes any tracked nutrient as cataloged."""
        return self.carbs > 0 or self.sodium > 0 or self.water > 0
