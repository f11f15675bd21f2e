"""Multi-start greedy search.

Greedy insertion is order-sensitive, so this searcher rebuilds a plan from
several rotations of the catalog and keeps the best-scoring one. Each build
has three phases: a carb base, a sodium gap-fill preferring salty low-carb
items, and a water gap-fill preferring items that add fluid without adding
much else.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from racefuel.catalog.models import Item
from racefuel.planner.accumulator import Accumulator, PlanContext, build_plan
from racefuel.planner.models import Plan
from racefuel.planner.scoring import raw_coverage

logger = logging.getLogger(__name__)

# Ranking bonus that puts carb-free sodium sources ahead of everything else
ZERO_CARB_BONUS = 1000.0


def sodium_preference(item: Item) -> float:
    """Higher for items that add sodium with little carb impact."""
    ratio = item.sodium / max(item.carbs, 0.1)
    return ratio + (ZERO_CARB_BONUS if item.carbs == 0 else 0.0)


def hydration_preference(ctx: PlanContext, item: Item) -> float:
    """Net fluid after charging for the carbs and sodium that come with it."""
    return ctx.classifier.effective_water(item) - item.carbs * 10 - item.sodium * 0.5


def carb_base(ctx: PlanContext, ordered: Sequence[Item], acc: Accumulator) -> Accumulator:
    """Phase 1: take 1-2 servings per item until carbs are inside the band.

    Stays within the band ceiling for carbs and sodium (not the overshoot
    ceiling) to leave room for the gap-fill phases.
    """
    config = ctx.config
    limits = ctx.limits

    for item in ordered:
        if len(acc) >= config.search_base_entry_cap:
            break
        if item.name in acc.names:
            continue
        if ctx.all_at_floor(acc):
            break
        carb_pct = ctx.coverage(acc).carbs
        if config.band_floor <= carb_pct <= config.band_ceiling:
            break

        best = None
        for qty in range(1, config.per_item_cap + 1):
            entry = ctx.entry(item, qty)
            totals = acc.totals + entry.contributes
            if totals.carbs > limits.carbs.ceiling:
                break
            if totals.sodium > limits.sodium.ceiling:
                break
            if totals.water > limits.water.hard_max:
                break
            if raw_coverage(totals, ctx.target).carbs <= config.band_ceiling:
                best = entry

        if best is not None:
            acc = acc.with_entry(best)
            logger.debug(
                "[%s] [search] base %dx %s",
                ctx.strategy.id,
                best.quantity,
                item.name,
                extra={
                    "strategy": ctx.strategy.id,
                    "phase": "search_base",
                    "item": item.name,
                    "quantity": best.quantity,
                    "reason": "accepted",
                },
            )

    return acc


def sodium_fill(ctx: PlanContext, acc: Accumulator) -> Accumulator:
    """Phase 2: add high-sodium items until sodium reaches the floor."""
    config = ctx.config
    limits = ctx.limits

    if ctx.coverage(acc).sodium >= config.band_floor or len(acc) >= config.search_entry_cap:
        return acc

    candidates = sorted(
        (
            item
            for item in ctx.catalog
            if item.name not in acc.names and item.sodium >= config.sodium_candidate_min
        ),
        key=sodium_preference,
        reverse=True,
    )

    for item in candidates:
        if len(acc) >= config.search_entry_cap:
            break
        if ctx.coverage(acc).sodium >= config.band_floor:
            break

        qty = math.ceil((limits.sodium.floor - acc.totals.sodium) / item.sodium)
        if item.carbs == 0:
            qty = min(qty, config.search_zero_carb_qty_cap)
        else:
            carb_room = math.floor((limits.carbs.ceiling - acc.totals.carbs) / item.carbs)
            qty = min(qty, max(1, carb_room), config.per_item_cap)

        if qty > 0:
            acc = ctx.try_add(acc, item, qty, config.search_entry_cap, "search_sodium") or acc

    return acc


def water_fill(ctx: PlanContext, acc: Accumulator) -> Accumulator:
    """Phase 3: add fluid sources until water reaches the floor."""
    config = ctx.config
    limits = ctx.limits

    if ctx.coverage(acc).water >= config.band_floor or len(acc) >= config.search_entry_cap:
        return acc

    candidates = sorted(
        (
            item
            for item in ctx.catalog
            if item.name not in acc.names and ctx.classifier.effective_water(item) > 0
        ),
        key=lambda item: hydration_preference(ctx, item),
        reverse=True,
    )

    for item in candidates:
        if len(acc) >= config.search_entry_cap:
            break
        if ctx.coverage(acc).water >= config.band_floor:
            break

        per_serving = ctx.classifier.effective_water(item)
        qty = math.ceil((limits.water.floor - acc.totals.water) / per_serving)
        water_room = math.floor((limits.water.ceiling - acc.totals.water) / per_serving)
        qty = min(qty, max(1, water_room))

        if item.carbs > 5:
            carb_room = math.floor((limits.carbs.ceiling - acc.totals.carbs) / item.carbs)
            qty = min(qty, max(1, carb_room))
        if item.sodium > 100:
            sodium_room = math.floor((limits.sodium.ceiling - acc.totals.sodium) / item.sodium)
            qty = min(qty, max(1, sodium_room))

        qty = min(qty, config.per_item_cap)
        if qty > 0:
            acc = ctx.try_add(acc, item, qty, config.search_entry_cap, "search_water") or acc

    return acc


def search_from(ctx: PlanContext, ordered: Sequence[Item]) -> Optional[Plan]:
    """Run one three-phase build over a given item order."""
    acc = Accumulator()
    acc = carb_base(ctx, ordered, acc)
    acc = sodium_fill(ctx, acc)
    acc = water_fill(ctx, acc)

    if not acc.entries:
        return None
    return build_plan(ctx, acc)


def search_plan(ctx: PlanContext) -> Optional[Plan]:
    """Try several catalog rotations and keep the highest-scoring plan.

    Returns:
        Best Plan found, or None if no rotation produced any entries.
    """
    usable = [item for item in ctx.catalog if item.has_yield]
    starts = min(len(usable), ctx.config.search_start_count)

    best: Optional[Plan] = None
    for start in range(starts):
        rotated = usable[start:] + usable[:start]
        plan = search_from(ctx, rotated)
        if plan is None:
            continue
        logger.debug(
            "[%s] search start %d scored %d",
            ctx.strategy.id,
            start,
            plan.score,
            extra={"strategy": ctx.strategy.id, "phase": "search"},
        )
        if best is None or plan.score > best.score:
            best = plan

    return best
