"""Catalog filtering: race-appropriateness and per-strategy hard rules."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from racefuel.catalog.classify import ItemClassifier, matched_exclusion_keyword
from racefuel.catalog.models import Item, ItemCategory
from racefuel.config.settings import PlannerConfig
from racefuel.planner.strategies import MacroRestriction, Strategy

logger = logging.getLogger(__name__)

# Stored categories that pass either macro restriction
_NEUTRAL_CATEGORIES = frozenset(
    {ItemCategory.REAL_FOOD, ItemCategory.ELECTROLYTES, ItemCategory.OTHER}
)

# Stored categories eligible as low-sodium carb gap-fill
REAL_FOOD_CATEGORIES = frozenset(
    {ItemCategory.REAL_FOOD, ItemCategory.BARS, ItemCategory.OTHER}
)


def _reject(strategy_id: str, item: Item, reason: str) -> None:
    logger.debug(
        "[%s] excluding %s - %s",
        strategy_id,
        item.name,
        reason,
        extra={"strategy": strategy_id, "item": item.name, "reason": reason},
    )


def filter_energy_items(catalog: Sequence[Item]) -> list[Item]:
    """Drop recovery/supplement items and items the user excluded.

    Args:
        catalog: Full catalog

    Returns:
        Items appropriate for in-race consumption, in catalog order.
    """
    kept: list[Item] = []
    for item in catalog:
        keyword = matched_exclusion_keyword(item)
        if keyword is not None:
            _reject("global", item, f"contains '{keyword}'")
            continue
        if item.exclude_from_smart_fill:
            _reject("global", item, "excluded from smart fill")
            continue
        kept.append(item)
    return kept


def _macro_rejection(
    item: Item,
    restriction: MacroRestriction,
    classifier: ItemClassifier,
) -> Optional[str]:
    """Return why an item fails a macro restriction, or None if it passes."""
    profile = classifier.profile(item)

    if restriction == MacroRestriction.LIQUIDS_ONLY:
        if profile.is_gel:
            return "is a gel product"
        if not (profile.is_drink or profile.is_water or item.category in _NEUTRAL_CATEGORIES):
            return "not a drink/real food/electrolyte"
        return None

    # NO_LIQUIDS
    if profile.is_drink and item.category != ItemCategory.ELECTROLYTES:
        return "is a drink product"
    if not (profile.is_gel or profile.is_water or item.category in _NEUTRAL_CATEGORIES):
        return "not a gel/real food/electrolyte"
    return None


def filter_for_strategy(
    catalog: Sequence[Item],
    strategy: Strategy,
    classifier: Optional[ItemClassifier] = None,
) -> list[Item]:
    """Apply a strategy's hard inclusion/exclusion rules.

    The catalog is expected to be globally filtered already
    (see ``filter_energy_items``).

    Args:
        catalog: Globally filtered catalog
        strategy: Strategy whose rules to apply
        classifier: Per-run classification cache

    Returns:
        Items legal for the strategy, in catalog order.
    """
    classifier = classifier or ItemClassifier()
    kept: list[Item] = []

    for item in catalog:
        is_water = classifier.profile(item).is_water

        if strategy.macro_restriction is not None:
            reason = _macro_rejection(item, strategy.macro_restriction, classifier)
            if reason:
                _reject(strategy.id, item, reason)
                continue

        if (
            strategy.max_sodium_per_serving is not None
            and item.sodium > strategy.max_sodium_per_serving
        ):
            _reject(
                strategy.id,
                item,
                f"sodium {item.sodium:g}mg exceeds {strategy.max_sodium_per_serving:g}mg limit",
            )
            continue

        if strategy.avoids(item.name):
            _reject(strategy.id, item, "matches avoid pattern")
            continue

        if item.category in strategy.excluded_categories:
            _reject(strategy.id, item, f"category {item.category.value} is excluded")
            continue

        if (
            strategy.allowed_categories is not None
            and item.category not in strategy.allowed_categories
            and not is_water
        ):
            _reject(strategy.id, item, f"category {item.category.value} not allowed")
            continue

        kept.append(item)

    logger.debug(
        "[%s] filtered to %d eligible items",
        strategy.id,
        len(kept),
        extra={"strategy": strategy.id},
    )
    return kept


def real_food_candidates(
    catalog: Sequence[Item],
    strategy: Strategy,
    config: Optional[PlannerConfig] = None,
) -> list[Item]:
    """Near-zero-sodium carb sources for filling a carb gap.

    Sorted by the strategy's real-food preference, then by carb-to-sodium
    ratio (highest first).
    """
    config = config or PlannerConfig()
    candidates = [
        item
        for item in filter_energy_items(catalog)
        if item.sodium <= config.real_food_max_sodium
        and item.carbs >= config.real_food_min_carbs
        and item.category in REAL_FOOD_CATEGORIES
    ]
    return sorted(
        candidates,
        key=lambda item: (
            strategy.real_food_rank(item.name),
            -(item.carbs / max(item.sodium, 0.1)),
        ),
    )
