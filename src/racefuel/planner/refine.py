"""Gap-filling refinement of a candidate plan.

Repeatedly adds a single serving aimed at the nutrient furthest below the
acceptance floor. Quantity and entry caps are relaxed compared with
composition (4 servings per item, 8 entries), but the overshoot ceilings
still apply to every addition.
"""

from __future__ import annotations

import logging
from typing import Optional

from racefuel.catalog.models import Item
from racefuel.planner.accumulator import Accumulator, PlanContext, build_plan
from racefuel.planner.models import Nutrient, Plan
from racefuel.planner.search import sodium_preference

logger = logging.getLogger(__name__)


def weakest_nutrient(ctx: PlanContext, acc: Accumulator) -> Optional[Nutrient]:
    """Nutrient with the largest shortfall below the floor, or None."""
    cov = ctx.coverage(acc)
    gaps = [(n, ctx.config.band_floor - cov.get(n)) for n in Nutrient]
    gaps = [(n, gap) for n, gap in gaps if gap > 0]
    if not gaps:
        return None
    return max(gaps, key=lambda pair: pair[1])[0]


def candidates_for(ctx: PlanContext, nutrient: Nutrient, acc: Accumulator) -> list[Item]:
    """Catalog items suited to a nutrient, unused items first."""
    if nutrient == Nutrient.CARBS:
        ranked = sorted(
            (item for item in ctx.catalog if item.carbs > 0),
            key=lambda item: item.carbs,
            reverse=True,
        )
    elif nutrient == Nutrient.SODIUM:
        ranked = sorted(
            (item for item in ctx.catalog if item.sodium >= ctx.config.sodium_candidate_min),
            key=sodium_preference,
            reverse=True,
        )
    else:
        ranked = sorted(
            (item for item in ctx.catalog if ctx.classifier.effective_water(item) > 0),
            key=ctx.classifier.effective_water,
            reverse=True,
        )

    used = acc.names
    return [i for i in ranked if i.name not in used] + [i for i in ranked if i.name in used]


def add_serving(ctx: PlanContext, acc: Accumulator, item: Item) -> Optional[Accumulator]:
    """Add one serving of an item, merging with an existing entry."""
    serving = ctx.entry(item, 1)
    if not ctx.limits.within(acc.totals + serving.contributes):
        return None

    index = acc.index_of(item.name)
    if index is None:
        if len(acc) >= ctx.config.refine_entry_cap:
            return None
        return acc.with_entry(serving)

    quantity = acc.entries[index].quantity + 1
    if quantity > ctx.config.refine_item_cap:
        return None
    return acc.with_replaced(index, ctx.entry(item, quantity))


def refine_plan(ctx: PlanContext, plan: Plan) -> Plan:
    """Fill nutrient gaps one serving at a time.

    Args:
        ctx: Planning context for the plan's strategy
        plan: Candidate plan to refine

    Returns:
        The refined plan if its score is strictly higher, else ``plan``.
    """
    config = ctx.config
    acc = Accumulator.from_plan(plan)

    for attempt in range(config.refine_max_iterations):
        if ctx.all_at_floor(acc) or len(acc) >= config.refine_entry_cap:
            break

        nutrient = weakest_nutrient(ctx, acc)
        if nutrient is None:
            break

        added = None
        for item in candidates_for(ctx, nutrient, acc):
            added = add_serving(ctx, acc, item)
            if added is not None:
                logger.debug(
                    "[%s] refinement %d: added 1x %s for %s",
                    ctx.strategy.id,
                    attempt + 1,
                    item.name,
                    nutrient.value,
                    extra={
                        "strategy": ctx.strategy.id,
                        "phase": "refine",
                        "item": item.name,
                        "quantity": 1,
                        "reason": nutrient.value,
                    },
                )
                break

        if added is None:
            logger.debug(
                "[%s] no item can improve %s",
                ctx.strategy.id,
                nutrient.value,
                extra={"strategy": ctx.strategy.id, "phase": "refine", "reason": "exhausted"},
            )
            break
        acc = added

    refined = build_plan(ctx, acc, plan_id=plan.id)
    logger.info(
        "[%s] refinement score %d (was %d)",
        ctx.strategy.id,
        refined.score,
        plan.score,
        extra={"strategy": ctx.strategy.id, "phase": "refine"},
    )
    return refined if refined.score > plan.score else plan
