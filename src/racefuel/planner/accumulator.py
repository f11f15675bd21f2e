"""Running plan state threaded through the planner phases.

Each phase is a function ``(context, accumulator) -> accumulator``. The
accumulator is immutable, so a phase can be tested in isolation by handing
it any starting state, and a rejected insertion leaves no trace.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional, Sequence

from racefuel.catalog.classify import ItemClassifier
from racefuel.catalog.models import Item
from racefuel.config.settings import PlannerConfig
from racefuel.planner.limits import PlanLimits, calculate_limits
from racefuel.planner.models import Nutrients, Plan, PlanEntry, Target
from racefuel.planner.scoring import calculate_coverage, raw_coverage, score_coverage
from racefuel.planner.strategies import Strategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Accumulator:
    """Entries selected so far and their running totals."""

    entries: tuple[PlanEntry, ...] = ()
    totals: Nutrients = field(default_factory=Nutrients)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def names(self) -> frozenset[str]:
        return frozenset(e.item.name for e in self.entries)

    def index_of(self, name: str) -> Optional[int]:
        for index, entry in enumerate(self.entries):
            if entry.item.name == name:
                return index
        return None

    def with_entry(self, entry: PlanEntry) -> "Accumulator":
        return Accumulator(
            entries=self.entries + (entry,),
            totals=self.totals + entry.contributes,
        )

    def with_replaced(self, index: int, entry: PlanEntry) -> "Accumulator":
        old = self.entries[index]
        entries = self.entries[:index] + (entry,) + self.entries[index + 1:]
        return Accumulator(
            entries=entries,
            totals=self.totals - old.contributes + entry.contributes,
        )

    @classmethod
    def from_plan(cls, plan: Plan) -> "Accumulator":
        return cls(entries=plan.entries, totals=plan.totals)


@dataclass(frozen=True)
class PlanContext:
    """Read-only inputs shared by every phase of one strategy's pipeline.

    Attributes:
        target: Nutrient target
        strategy: Strategy being planned
        catalog: Strategy-filtered catalog
        limits: Band and overshoot limits for the target
        config: Planner tunables
        classifier: Per-run classification cache
    """

    target: Target
    strategy: Strategy
    catalog: tuple[Item, ...]
    limits: PlanLimits
    config: PlannerConfig
    classifier: ItemClassifier

    @classmethod
    def create(
        cls,
        target: Target,
        strategy: Strategy,
        catalog: Sequence[Item],
        config: Optional[PlannerConfig] = None,
        classifier: Optional[ItemClassifier] = None,
    ) -> "PlanContext":
        config = config or PlannerConfig()
        return cls(
            target=target,
            strategy=strategy,
            catalog=tuple(catalog),
            limits=calculate_limits(target, config),
            config=config,
            classifier=classifier or ItemClassifier(config.drink_mix_water_ml),
        )

    def yields(self, item: Item) -> Nutrients:
        """Per-serving yield using the effective water."""
        return Nutrients(
            carbs=item.carbs,
            sodium=item.sodium,
            water=self.classifier.effective_water(item),
        )

    def entry(self, item: Item, quantity: int) -> PlanEntry:
        return PlanEntry(
            item=item,
            quantity=quantity,
            contributes=self.yields(item).scaled(quantity),
        )

    def coverage(self, acc: Accumulator) -> Nutrients:
        return raw_coverage(acc.totals, self.target)

    def all_at_floor(self, acc: Accumulator) -> bool:
        cov = self.coverage(acc)
        floor = self.config.band_floor
        return cov.carbs >= floor and cov.sodium >= floor and cov.water >= floor

    def try_add(
        self,
        acc: Accumulator,
        item: Item,
        quantity: int,
        entry_cap: int,
        phase: str,
    ) -> Optional[Accumulator]:
        """Append a new entry if it keeps every total under its overshoot ceiling.

        Returns:
            The new accumulator, or None if the entry was rejected.
        """
        if quantity <= 0 or item.name in acc.names or len(acc) >= entry_cap:
            return None

        entry = self.entry(item, quantity)
        exceeded = self.limits.exceeded(acc.totals + entry.contributes)
        if exceeded is not None:
            logger.debug(
                "[%s] rejected %dx %s - would exceed %s limit",
                self.strategy.id,
                quantity,
                item.name,
                exceeded.value,
                extra={
                    "strategy": self.strategy.id,
                    "phase": phase,
                    "item": item.name,
                    "quantity": quantity,
                    "reason": f"{exceeded.value}_overshoot",
                },
            )
            return None

        logger.debug(
            "[%s] [%s] added %dx %s",
            self.strategy.id,
            phase,
            quantity,
            item.name,
            extra={
                "strategy": self.strategy.id,
                "phase": phase,
                "item": item.name,
                "quantity": quantity,
                "reason": "accepted",
            },
        )
        return acc.with_entry(entry)

    def add_largest(
        self,
        acc: Accumulator,
        item: Item,
        quantity: int,
        entry_cap: int,
        phase: str,
    ) -> Optional[Accumulator]:
        """Add ``quantity`` servings, or the largest smaller quantity that fits."""
        for qty in range(quantity, 0, -1):
            added = self.try_add(acc, item, qty, entry_cap, phase)
            if added is not None:
                return added
        return None


def build_plan(ctx: PlanContext, acc: Accumulator, plan_id: Optional[str] = None) -> Plan:
    """Score an accumulator and wrap it as a Plan for the context's strategy."""
    coverage = calculate_coverage(acc.totals, ctx.target)
    strategy = ctx.strategy

    includes_required = True
    if strategy.must_include is not None:
        includes_required = any(
            ctx.classifier.classify(e.item) == strategy.must_include for e in acc.entries
        )

    return Plan(
        id=plan_id or f"{strategy.id}-{uuid.uuid4().hex[:8]}",
        strategy_id=strategy.id,
        name=strategy.display_name,
        description=strategy.description,
        entries=acc.entries,
        totals=acc.totals,
        coverage=coverage,
        score=score_coverage(coverage, ctx.config),
        includes_required_category=includes_required,
    )
