"""Four-phase greedy plan composition for one strategy.

1. Primary fill: strategy-preferred products, category order then carb
   density, until carbs reach the floor or sodium is nearly covered
2. Real food: near-zero-sodium carbs to close any remaining carb gap
3. Hydration: plain water up to the water floor
4. Fine-tuning: trim multi-serving entries while anything is over the band

Limits:
- Max 3 primary entries
- Max 2 servings of any single item
- Max 5 entries per plan
"""

from __future__ import annotations

import logging
import math

from racefuel.planner.accumulator import Accumulator, PlanContext, build_plan
from racefuel.planner.filters import real_food_candidates
from racefuel.planner.models import Plan
from racefuel.planner.scoring import raw_coverage

logger = logging.getLogger(__name__)


def _primary_quantity(ctx: PlanContext, acc: Accumulator, item) -> int:
    """Servings that bring carbs up to the floor without overshooting."""
    config = ctx.config
    limits = ctx.limits
    totals = acc.totals

    qty = 1
    if item.carbs > 0:
        carbs_needed = limits.carbs.floor - totals.carbs
        qty = min(math.ceil(carbs_needed / item.carbs), config.per_item_cap)

    if item.sodium > 0 and ctx.target.sodium > 0:
        headroom = limits.sodium.ceiling - totals.sodium
        qty = min(qty, max(1, math.floor(headroom / item.sodium)))

    water = ctx.classifier.effective_water(item)
    if water > 0 and ctx.target.water > 0:
        headroom = limits.water.hard_max - totals.water
        qty = min(qty, max(1, math.floor(headroom / water)))

    return min(qty, config.per_item_cap)


def primary_fill(ctx: PlanContext, acc: Accumulator) -> Accumulator:
    """Phase 1: add strategy products in priority order until carbs hit the floor."""
    config = ctx.config
    strategy = ctx.strategy

    ordered = sorted(
        ctx.catalog,
        key=lambda item: (
            strategy.category_rank(item.category),
            -item.carbs,
            strategy.preference_rank(item.name),
        ),
    )

    for item in ordered:
        if len(acc) >= config.primary_item_cap:
            logger.debug("[%s] reached max %d primary items", strategy.id, config.primary_item_cap)
            break

        sodium_pct = ctx.coverage(acc).sodium
        if sodium_pct >= config.sodium_switch_pct:
            logger.debug(
                "[%s] sodium at %.0f%% - switching to real food for carbs",
                strategy.id,
                sodium_pct,
            )
            break

        if item.name in acc.names:
            continue
        if ctx.classifier.profile(item).is_water:
            continue

        qty = _primary_quantity(ctx, acc, item)
        if qty > 0:
            acc = ctx.add_largest(acc, item, qty, config.plan_entry_cap, "primary") or acc

        if ctx.coverage(acc).carbs >= config.band_floor:
            logger.debug("[%s] carbs reached floor from primary items", strategy.id)
            break

    return acc


def real_food_fill(ctx: PlanContext, acc: Accumulator) -> Accumulator:
    """Phase 2: close a carb gap with near-zero-sodium food."""
    config = ctx.config

    if ctx.coverage(acc).carbs >= config.band_floor or len(acc) >= config.plan_entry_cap:
        return acc

    foods = real_food_candidates(ctx.catalog, ctx.strategy, config)
    logger.debug("[%s] %d real food candidates for carb gap", ctx.strategy.id, len(foods))

    for food in foods:
        if ctx.coverage(acc).carbs >= 100:
            break
        if len(acc) >= config.plan_entry_cap:
            break
        if food.name in acc.names:
            continue

        carbs_needed = ctx.target.carbs - acc.totals.carbs
        qty = min(math.ceil(carbs_needed / food.carbs), config.per_item_cap)
        if qty > 0:
            acc = ctx.add_largest(acc, food, qty, config.plan_entry_cap, "real_food") or acc

    return acc


def hydration_fill(ctx: PlanContext, acc: Accumulator) -> Accumulator:
    """Phase 3: add plain water up to the water floor."""
    config = ctx.config

    if ctx.coverage(acc).water >= config.band_floor or len(acc) >= config.plan_entry_cap:
        return acc

    water = next(
        (
            item
            for item in ctx.catalog
            if ctx.classifier.profile(item).is_water and item.name not in acc.names
        ),
        None,
    )
    if water is None:
        return acc

    per_serving = ctx.classifier.effective_water(water)
    if per_serving <= 0:
        return acc

    water_needed = ctx.limits.water.floor - acc.totals.water
    qty = min(math.ceil(water_needed / per_serving), config.per_item_cap)
    if qty > 0:
        acc = ctx.add_largest(acc, water, qty, config.plan_entry_cap, "hydration") or acc
    return acc


def fine_tune(ctx: PlanContext, acc: Accumulator) -> Accumulator:
    """Phase 4: trim servings, newest first, while any nutrient is over the band.

    A serving is only removed if carbs stay within ``fine_tune_carb_slack``
    points of the floor.
    """
    config = ctx.config
    min_carb_pct = config.band_floor - config.fine_tune_carb_slack

    for index in range(len(acc) - 1, -1, -1):
        while acc.entries[index].quantity > 1:
            cov = ctx.coverage(acc)
            if (
                cov.carbs <= config.band_ceiling
                and cov.sodium <= config.band_ceiling
                and cov.water <= config.band_ceiling
            ):
                return acc

            entry = acc.entries[index]
            reduced = ctx.entry(entry.item, entry.quantity - 1)
            trial = acc.with_replaced(index, reduced)
            if raw_coverage(trial.totals, ctx.target).carbs < min_carb_pct:
                break

            acc = trial
            logger.debug(
                "[%s] reduced %s to %dx",
                ctx.strategy.id,
                entry.item.name,
                reduced.quantity,
                extra={
                    "strategy": ctx.strategy.id,
                    "phase": "fine_tune",
                    "item": entry.item.name,
                    "quantity": reduced.quantity,
                    "reason": "over_band",
                },
            )

    return acc


def compose_plan(ctx: PlanContext) -> Plan:
    """Build one plan for the context's strategy with the four greedy phases.

    Returns:
        Scored Plan, possibly with no entries.
    """
    acc = Accumulator()
    acc = primary_fill(ctx, acc)
    acc = real_food_fill(ctx, acc)
    acc = hydration_fill(ctx, acc)
    acc = fine_tune(ctx, acc)

    plan = build_plan(ctx, acc)
    logger.debug(
        "[%s] greedy plan: %d entries, score %d",
        ctx.strategy.id,
        len(plan.entries),
        plan.score,
        extra={"strategy": ctx.strategy.id, "phase": "compose"},
    )
    return plan
