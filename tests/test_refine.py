"""Tests for gap-filling refinement."""

from __future__ import annotations

import pytest

from racefuel.config.settings import PlannerConfig
from racefuel.planner.accumulator import Accumulator, PlanContext
from racefuel.planner.composer import compose_plan
from racefuel.planner.filters import filter_energy_items, filter_for_strategy
from racefuel.planner.models import Nutrient, Target
from racefuel.planner.refine import add_serving, candidates_for, refine_plan, weakest_nutrient
from racefuel.planner.strategies import BALANCED, DRINK_FOCUSED, GEL_FOCUSED, STRATEGIES


class TestWeakestNutrient:
    """Tests for weakest_nutrient."""

    def test_largest_gap(self, energy_gel, water, hour_target):
        """Test that the nutrient furthest below the floor is chosen."""
        ctx = PlanContext.create(hour_target, GEL_FOCUSED, [energy_gel, water])
        acc = Accumulator().with_entry(ctx.entry(energy_gel, 2)).with_entry(ctx.entry(water, 1))
        assert weakest_nutrient(ctx, acc) == Nutrient.SODIUM

    def test_none_when_all_at_floor(self, simple_catalog, hour_target, energy_gel, drink_mix):
        """Test that nothing is weak once every nutrient reaches the floor."""
        ctx = PlanContext.create(hour_target, BALANCED, simple_catalog)
        acc = Accumulator().with_entry(ctx.entry(energy_gel, 2)).with_entry(ctx.entry(drink_mix, 1))
        assert weakest_nutrient(ctx, acc) is None


class TestCandidates:
    """Tests for candidates_for."""

    def test_unused_items_first(self, race_catalog, hour_target):
        """Test that unused carb sources are tried before topping up used ones."""
        items = filter_energy_items(race_catalog)
        ctx = PlanContext.create(hour_target, BALANCED, items)
        clif = next(i for i in items if i.name == "Clif Bar")
        acc = Accumulator().with_entry(ctx.entry(clif, 1))

        names = [i.name for i in candidates_for(ctx, Nutrient.CARBS, acc)]
        assert names[-1] == "Clif Bar"
        assert names[0] == "SIS Go Electrolyte Drink Mix"

    def test_water_candidates_include_mixes(self, simple_catalog, hour_target):
        """Test that drink mixes count as water sources."""
        ctx = PlanContext.create(hour_target, BALANCED, simple_catalog)
        names = {i.name for i in candidates_for(ctx, Nutrient.WATER, Accumulator())}
        assert names == {"Electrolyte Drink Mix", "Water"}


class TestAddServing:
    """Tests for add_serving."""

    @pytest.fixture
    def long_target(self):
        return Target(carbs=120, sodium=600, water=1000, duration_hours=2.0)

    def test_merges_with_existing_entry(self, energy_gel, long_target):
        """Test that a serving of a used item increments its quantity."""
        ctx = PlanContext.create(long_target, BALANCED, [energy_gel])
        acc = Accumulator().with_entry(ctx.entry(energy_gel, 2))

        added = add_serving(ctx, acc, energy_gel)
        assert len(added) == 1
        assert added.entries[0].quantity == 3
        assert added.totals.carbs == 75

    def test_item_cap(self, energy_gel, long_target):
        """Test that an item is not topped up past the refinement cap."""
        ctx = PlanContext.create(
            long_target, BALANCED, [energy_gel], PlannerConfig(refine_item_cap=2)
        )
        acc = Accumulator().with_entry(ctx.entry(energy_gel, 2))
        assert add_serving(ctx, acc, energy_gel) is None

    def test_entry_cap(self, energy_gel, water, long_target):
        """Test that no new entry is added once the plan is full."""
        ctx = PlanContext.create(
            long_target, BALANCED, [energy_gel, water], PlannerConfig(refine_entry_cap=1)
        )
        acc = Accumulator().with_entry(ctx.entry(energy_gel, 1))
        assert add_serving(ctx, acc, water) is None

    def test_overshoot_rejected(self, energy_gel, hour_target):
        """Test that a serving past an overshoot ceiling is rejected."""
        ctx = PlanContext.create(hour_target, BALANCED, [energy_gel])
        acc = Accumulator().with_entry(ctx.entry(energy_gel, 3))
        assert add_serving(ctx, acc, energy_gel) is None


class TestRefinePlan:
    """Tests for refine_plan."""

    def test_adds_gel_for_sodium(self, energy_gel, water, hour_target):
        """Test that refinement tops up the only sodium source."""
        ctx = PlanContext.create(hour_target, GEL_FOCUSED, [energy_gel, water])
        plan = compose_plan(ctx)

        refined = refine_plan(ctx, plan)
        assert refined.quantities() == {"Energy Gel": 3, "Water": 1}
        assert refined.score == 79
        assert refined.id == plan.id

    def test_returns_original_when_no_gain(self, drink_mix, water, hour_target):
        """Test that the input plan is kept if nothing improves it."""
        ctx = PlanContext.create(hour_target, DRINK_FOCUSED, [drink_mix, water])
        plan = compose_plan(ctx)

        assert refine_plan(ctx, plan) is plan

    @pytest.mark.parametrize("minutes", [45, 90, 180])
    def test_never_lowers_score(self, race_catalog, minutes):
        """Test that refinement never returns a lower-scoring plan."""
        target = Target(
            carbs=minutes, sodium=minutes * 5, water=round(minutes * 500 / 60),
            duration_hours=minutes / 60,
        )
        energy = filter_energy_items(race_catalog)
        for strategy in STRATEGIES:
            ctx = PlanContext.create(target, strategy, filter_for_strategy(energy, strategy))
            plan = compose_plan(ctx)
            refined = refine_plan(ctx, plan)

            assert refined.score >= plan.score
            assert ctx.limits.within(refined.totals)
