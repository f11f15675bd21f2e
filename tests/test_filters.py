"""Tests for catalog filtering."""

from __future__ import annotations

import logging

from racefuel.catalog.models import Item, ItemCategory
from racefuel.planner.filters import (
    filter_energy_items,
    filter_for_strategy,
    real_food_candidates,
)
from racefuel.planner.strategies import (
    BALANCED,
    DRINK_FOCUSED,
    GEL_FOCUSED,
    LOW_SODIUM,
    Strategy,
)


def _names(items):
    return [item.name for item in items]


class TestFilterEnergyItems:
    """Tests for the global race-appropriateness filter."""

    def test_drops_recovery_products(self, race_catalog):
        """Test that protein/recovery products are removed."""
        names = _names(filter_energy_items(race_catalog))
        assert "Whey Protein Recovery Shake" not in names
        assert "Maurten Gel 100" in names

    def test_drops_user_excluded_items(self, race_catalog):
        """Test that items flagged exclude_from_smart_fill are removed."""
        assert "Spare Gel" not in _names(filter_energy_items(race_catalog))

    def test_preserves_order(self, race_catalog):
        """Test that kept items stay in catalog order."""
        kept = filter_energy_items(race_catalog)
        assert _names(kept) == [i.name for i in race_catalog if i in kept]
        assert len(kept) == len(race_catalog) - 2

    def test_logs_exclusion_reason(self, race_catalog, caplog):
        """Test that each exclusion is logged with its reason."""
        caplog.set_level(logging.DEBUG, logger="racefuel")
        filter_energy_items(race_catalog)

        reasons = {r.item: r.reason for r in caplog.records if hasattr(r, "item")}
        assert reasons["Whey Protein Recovery Shake"] == "contains 'protein'"
        assert reasons["Spare Gel"] == "excluded from smart fill"


class TestFilterForStrategy:
    """Tests for per-strategy hard rules."""

    def test_balanced_keeps_everything(self, race_catalog):
        """Test that the balanced strategy has no hard exclusions."""
        energy = filter_energy_items(race_catalog)
        assert filter_for_strategy(energy, BALANCED) == energy

    def test_drink_focused(self, race_catalog):
        """Test that drink-focused drops gels and bars."""
        kept = _names(filter_for_strategy(filter_energy_items(race_catalog), DRINK_FOCUSED))
        assert kept == [
            "Tailwind Endurance Fuel",
            "SIS Go Electrolyte Drink Mix",
            "Banana",
            "Rice Pudding",
            "SaltStick Caps",
            "LMNT",
            "Precision Hydration PH 1500",
            "Water",
        ]

    def test_drink_focused_drops_gel_named_items(self):
        """Test that a gel filed under Other is still excluded from liquids-only."""
        catalog = [Item("Clif Bloks", ItemCategory.OTHER, carbs=24, sodium=50)]
        assert filter_for_strategy(catalog, DRINK_FOCUSED) == []

    def test_gel_focused(self, race_catalog):
        """Test that gel-focused drops drinks but keeps electrolyte drinks."""
        kept = _names(filter_for_strategy(filter_energy_items(race_catalog), GEL_FOCUSED))
        assert kept == [
            "Maurten Gel 100",
            "SIS Go Isotonic Energy Gel",
            "GU Energy Gel",
            "Banana",
            "Rice Pudding",
            "SaltStick Caps",
            "LMNT",
            "Precision Hydration PH 1500",
            "Water",
        ]

    def test_low_sodium(self, race_catalog):
        """Test the sodium ceiling and avoid patterns."""
        kept = filter_for_strategy(filter_energy_items(race_catalog), LOW_SODIUM)
        assert _names(kept) == [
            "Maurten Gel 100",
            "SIS Go Isotonic Energy Gel",
            "GU Energy Gel",
            "Banana",
            "Rice Pudding",
            "Water",
        ]
        assert all(item.sodium <= 60 for item in kept)

    def test_allowed_categories_exempt_water(self, race_catalog):
        """Test that an allow-list keeps only listed categories, plus water."""
        strategy = Strategy(
            id="gels-only",
            name="Gels Only",
            emoji="",
            description="",
            category_priority=(ItemCategory.GELS,),
            allowed_categories=frozenset({ItemCategory.GELS}),
        )
        kept = _names(filter_for_strategy(filter_energy_items(race_catalog), strategy))
        assert kept == [
            "Maurten Gel 100",
            "SIS Go Isotonic Energy Gel",
            "GU Energy Gel",
            "Active Root Energy Gel Mix",
            "Water",
        ]

    def test_logs_rejections(self, race_catalog, caplog):
        """Test that rejections are logged per strategy."""
        caplog.set_level(logging.DEBUG, logger="racefuel")
        filter_for_strategy(filter_energy_items(race_catalog), LOW_SODIUM)

        records = [
            r for r in caplog.records
            if getattr(r, "strategy", None) == "electrolyte-light" and hasattr(r, "item")
        ]
        reasons = {r.item: r.reason for r in records}
        assert reasons["LMNT"] == "sodium 1000mg exceeds 60mg limit"
        assert reasons["Active Root Energy Gel Mix"] == "matches avoid pattern"


class TestRealFoodCandidates:
    """Tests for low-sodium carb gap-fill candidates."""

    def test_only_low_sodium_food(self, race_catalog):
        """Test that salty items and non-food categories are excluded."""
        names = _names(real_food_candidates(race_catalog, BALANCED))
        assert sorted(names) == ["Banana", "Rice Pudding"]

    def test_strategy_priority(self, race_catalog):
        """Test that the strategy's real-food priority orders candidates."""
        assert _names(real_food_candidates(race_catalog, BALANCED))[0] == "Banana"
        assert _names(real_food_candidates(race_catalog, GEL_FOCUSED))[0] == "Rice Pudding"

    def test_ratio_breaks_ties(self):
        """Test that unranked foods are ordered by carb-to-sodium ratio."""
        catalog = [
            Item("Boiled Potato", ItemCategory.REAL_FOOD, carbs=20, sodium=10),
            Item("Dates", ItemCategory.REAL_FOOD, carbs=18, sodium=1),
        ]
        assert _names(real_food_candidates(catalog, BALANCED)) == ["Dates", "Boiled Potato"]

    def test_zero_sodium_food(self):
        """Test that sodium-free food is accepted."""
        catalog = [Item("Sugar Cubes", ItemCategory.OTHER, carbs=8)]
        assert _names(real_food_candidates(catalog, BALANCED)) == ["Sugar Cubes"]
