"""Tests for the strategy catalog."""

from __future__ import annotations

from racefuel.catalog.classify import ItemClass
from racefuel.catalog.models import ItemCategory
from racefuel.planner.strategies import (
    BALANCED,
    GEL_FOCUSED,
    LOW_SODIUM,
    MacroRestriction,
    get_strategy,
    list_strategies,
)


class TestRegistry:
    """Tests for strategy lookup."""

    def test_four_strategies_in_order(self):
        """Test that the built-in strategies are listed in evaluation order."""
        assert [s.id for s in list_strategies()] == [
            "balanced",
            "drink-focused",
            "gel-focused",
            "electrolyte-light",
        ]

    def test_get_strategy(self):
        """Test lookup by id, case-insensitive."""
        assert get_strategy("gel-focused") is GEL_FOCUSED
        assert get_strategy("Balanced") is BALANCED
        assert get_strategy("keto") is None


class TestStrategyRules:
    """Tests for strategy helper methods."""

    def test_category_rank(self):
        """Test category priority lookup, with unknown categories last."""
        assert BALANCED.category_rank(ItemCategory.GELS) == 0
        assert BALANCED.category_rank(ItemCategory.DRINKS) == 1
        assert BALANCED.category_rank(ItemCategory.WATER) == 99

    def test_avoid_patterns_case_insensitive(self):
        """Test that avoid patterns match regardless of case."""
        assert LOW_SODIUM.avoids("tailwind endurance fuel")
        assert GEL_FOCUSED.avoids("Orange SPORTS DRINK")
        assert not GEL_FOCUSED.avoids("Maurten Gel 100")

    def test_real_food_rank(self):
        """Test that the first matching real-food pattern sets the rank."""
        assert GEL_FOCUSED.real_food_rank("Rice Pudding Pot") == 0
        assert GEL_FOCUSED.real_food_rank("Banana") == 3
        assert GEL_FOCUSED.real_food_rank("Potato") == 99

    def test_declared_rules(self):
        """Test the hard rules each strategy declares."""
        assert GEL_FOCUSED.macro_restriction == MacroRestriction.NO_LIQUIDS
        assert GEL_FOCUSED.must_include == ItemClass.GEL
        assert LOW_SODIUM.max_sodium_per_serving == 60
        assert LOW_SODIUM.must_include is None
        assert BALANCED.display_name.endswith("Balanced Mix")
