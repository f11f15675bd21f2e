"""Plan suggestion orchestration.

For each strategy: filter the catalog, build a plan with both the greedy
composer and the multi-start searcher, keep the better one, refine it, then
rank all strategies' plans and attach warnings and tips.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from racefuel.catalog.classify import ItemClassifier
from racefuel.catalog.models import Item
from racefuel.config.settings import PlannerConfig
from racefuel.planner.accumulator import PlanContext
from racefuel.planner.composer import compose_plan
from racefuel.planner.filters import filter_energy_items, filter_for_strategy
from racefuel.planner.models import Plan, SuggestionResult, Target
from racefuel.planner.refine import refine_plan
from racefuel.planner.scoring import deficient_nutrients
from racefuel.planner.search import search_plan
from racefuel.planner.strategies import STRATEGIES, Strategy

logger = logging.getLogger(__name__)

# Tip thresholds
LONG_SEGMENT_HOURS = 2
HIGH_CARB_TARGET = 150
HIGH_SODIUM_TARGET = 800


def plan_for_strategy(
    catalog: Sequence[Item],
    target: Target,
    strategy: Strategy,
    config: Optional[PlannerConfig] = None,
    classifier: Optional[ItemClassifier] = None,
) -> Optional[Plan]:
    """Best plan for one strategy, or None if the strategy has nothing usable.

    Args:
        catalog: Globally filtered catalog
        target: Nutrient target
        strategy: Strategy to plan for
        config: Planner tunables
        classifier: Per-run classification cache

    Returns:
        Plan with at least one entry, or None.
    """
    config = config or PlannerConfig()
    classifier = classifier or ItemClassifier(config.drink_mix_water_ml)

    items = filter_for_strategy(catalog, strategy, classifier)
    if not items:
        logger.info(
            "[%s] no items available after filtering - skipping",
            strategy.id,
            extra={"strategy": strategy.id, "reason": "empty_catalog"},
        )
        return None

    ctx = PlanContext.create(target, strategy, items, config, classifier)

    searched = search_plan(ctx)
    greedy = compose_plan(ctx)
    if searched is None or greedy.score > searched.score:
        plan, source = greedy, "greedy"
    else:
        plan, source = searched, "search"

    if plan.score < 100:
        plan = refine_plan(ctx, plan)

    logger.info(
        "[%s] kept %s plan: score %d, %d entries",
        strategy.id,
        source,
        plan.score,
        len(plan.entries),
        extra={"strategy": strategy.id, "reason": source},
    )
    if not plan.includes_required_category:
        logger.info(
            "[%s] plan lacks a %s item",
            strategy.id,
            strategy.must_include.value,
            extra={"strategy": strategy.id, "reason": "missing_required_class"},
        )

    return plan if plan.entries else None


def _target_tips(target: Target) -> list[str]:
    tips: list[str] = []
    if target.duration_hours > LONG_SEGMENT_HOURS:
        tips.append("Long segment: Consider adding variety to prevent flavor fatigue.")
    if target.carbs > HIGH_CARB_TARGET:
        tips.append("High carb requirement: Mix liquid and solid sources for better absorption.")
    if target.sodium > HIGH_SODIUM_TARGET:
        tips.append("High sodium needs: Consider salt capsules or electrolyte tablets.")
    return tips


def _duplicate_pairs(plans: Sequence[Plan]) -> list[str]:
    """Describe plans whose contents match a higher-ranked plan."""
    seen: dict[str, str] = {}
    duplicates: list[str] = []
    for plan in plans:
        existing = seen.get(plan.fingerprint)
        if existing is not None:
            duplicates.append(f"{plan.name} = {existing}")
            logger.warning(
                "duplicate plan: %s has the same items as %s",
                plan.name,
                existing,
                extra={"strategy": plan.strategy_id, "reason": "duplicate"},
            )
        else:
            seen[plan.fingerprint] = plan.name
    return duplicates


def generate_suggestions(
    catalog: Sequence[Item],
    target: Target,
    recently_used: Optional[Sequence[str]] = None,
    config: Optional[PlannerConfig] = None,
    strategies: Optional[Sequence[Strategy]] = None,
) -> SuggestionResult:
    """Suggest one fueling plan per strategy for a target.

    Never raises for degenerate input: a missing duration or an unusable
    catalog yields a result with no plans and an explanatory warning.

    Args:
        catalog: Available items
        target: Nutrient target for the segment
        recently_used: Names of recently used items (accepted, not yet used
            for selection)
        config: Planner tunables
        strategies: Strategies to evaluate (defaults to the built-in four)

    Returns:
        SuggestionResult with plans sorted by score, highest first.

    Example:
        >>> target = calculate_targets(60)
        >>> result = generate_suggestions(catalog, target)
        >>> for plan in result.plans:
        ...     print(plan.name, plan.score)
    """
    config = config or PlannerConfig()
    strategies = STRATEGIES if strategies is None else strategies
    result = SuggestionResult(target=target)

    if not target.has_duration:
        result.warnings.append("Set a pace to calculate nutrition needs for this segment.")
        result.tips.append("Add segment distance and pace to get smart nutrition suggestions.")
        return result

    if not catalog:
        result.warnings.append("No products available in your library.")
        result.tips.append("Go to Manage Products to add nutrition products.")
        return result

    if recently_used:
        logger.debug("ignoring %d recently used item names", len(recently_used))

    energy_items = filter_energy_items(catalog)
    logger.info(
        "filtered %d items down to %d energy items",
        len(catalog),
        len(energy_items),
    )

    result.tips.extend(_target_tips(target))

    usable = [item for item in energy_items if item.has_yield]
    if not usable:
        result.warnings.append(
            "No usable energy products found. Add gels, drinks, bars, or electrolytes."
        )
        return result

    classifier = ItemClassifier(config.drink_mix_water_ml)
    plans: list[Plan] = []
    for strategy in strategies:
        plan = plan_for_strategy(usable, target, strategy, config, classifier)
        if plan is not None:
            plans.append(plan)

    plans.sort(key=lambda p: p.score, reverse=True)
    result.plans = plans

    if _duplicate_pairs(plans):
        result.tips.append(
            "Some strategies may suggest similar products. "
            "Check your Quick Add Products for more variety."
        )

    best = result.best_plan
    if best is not None:
        missing = deficient_nutrients(best.coverage, config)
        if missing:
            detail = ", ".join(f"{n.label} ({best.coverage.get(n):.0f}%)" for n in missing)
            result.warnings.append(
                f"Could not achieve {config.band_floor:.0f}%+ on: {detail}. "
                "Consider adding more products that provide these nutrients."
            )

    return result


def quick_suggest(
    catalog: Sequence[Item],
    target: Target,
    recently_used: Optional[Sequence[str]] = None,
    config: Optional[PlannerConfig] = None,
) -> Optional[Plan]:
    """Return the single best plan, or None if no plan could be built."""
    return generate_suggestions(catalog, target, recently_used, config).best_plan
