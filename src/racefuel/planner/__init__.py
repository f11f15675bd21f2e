"""Fueling plan selection engine.

Given a catalog of race-day products and a nutrient target for a segment,
build several alternative plans (one per strategy) whose carbs, sodium and
water each land inside an acceptance band of the target.

The engine is heuristic: a phased greedy composer and a multi-start searcher
compete per strategy, the winner is refined by single-serving additions, and
the results are scored, ranked and checked for duplicates.
"""

from __future__ import annotations

from racefuel.planner.engine import generate_suggestions, plan_for_strategy, quick_suggest
from racefuel.planner.models import (
    Nutrient,
    Nutrients,
    Plan,
    PlanEntry,
    SuggestionResult,
    Target,
)
from racefuel.planner.strategies import STRATEGIES, Strategy, get_strategy, list_strategies
from racefuel.planner.targets import calculate_targets

__all__ = [
    "Nutrient",
    "Nutrients",
    "Plan",
    "PlanEntry",
    "STRATEGIES",
    "Strategy",
    "SuggestionResult",
    "Target",
    "calculate_targets",
    "generate_suggestions",
    "get_strategy",
    "list_strategies",
    "plan_for_strategy",
    "quick_suggest",
]
