"""Pytest fixtures for racefuel tests."""

from __future__ import annotations

import pytest

from racefuel.catalog.models import Item, ItemCategory
from racefuel.config.settings import PlannerConfig
from racefuel.planner.models import Target


@pytest.fixture
def energy_gel():
    return Item("Energy Gel", ItemCategory.GELS, carbs=25, sodium=50)


@pytest.fixture
def drink_mix():
    # No water listed: counts as a 500ml bottle once mixed
    return Item("Electrolyte Drink Mix", ItemCategory.DRINKS, carbs=20, sodium=200)


@pytest.fixture
def water():
    return Item("Water", ItemCategory.WATER, water=500, serving_size="500ml bottle")


@pytest.fixture
def simple_catalog(energy_gel, drink_mix, water):
    """Gel, drink mix and water."""
    return [energy_gel, drink_mix, water]


@pytest.fixture
def hour_target():
    """One hour at 60 g/h carbs, 300 mg/h sodium, 500 ml/h water."""
    return Target(carbs=60, sodium=300, water=500, duration_hours=1.0)


@pytest.fixture
def config():
    return PlannerConfig()


@pytest.fixture
def race_catalog():
    """A realistic mixed product library, including items the planner must skip."""
    return [
        Item("Maurten Gel 100", ItemCategory.GELS, carbs=25, sodium=20, brand="Maurten"),
        Item("SIS Go Isotonic Energy Gel", ItemCategory.GELS, carbs=22, sodium=10),
        Item("GU Energy Gel", ItemCategory.GELS, carbs=22, sodium=60),
        Item("Active Root Energy Gel Mix", ItemCategory.GELS, carbs=35, sodium=50),
        Item("Tailwind Endurance Fuel", ItemCategory.DRINKS, carbs=25, sodium=303),
        Item("SIS Go Electrolyte Drink Mix", ItemCategory.DRINKS, carbs=36, sodium=300),
        Item("Clif Bar", ItemCategory.BARS, carbs=45, sodium=200),
        Item("Banana", ItemCategory.REAL_FOOD, carbs=27, sodium=1),
        Item("Rice Pudding", ItemCategory.REAL_FOOD, carbs=30, sodium=10),
        Item("SaltStick Caps", ItemCategory.ELECTROLYTES, sodium=215),
        Item("LMNT", ItemCategory.ELECTROLYTES, sodium=1000),
        Item("Precision Hydration PH 1500", ItemCategory.ELECTROLYTES, sodium=750),
        Item("Water", ItemCategory.WATER, water=500),
        Item("Whey Protein Recovery Shake", ItemCategory.OTHER, carbs=8, sodium=150, water=300),
        Item("Spare Gel", ItemCategory.GELS, carbs=25, sodium=40, exclude_from_smart_fill=True),
    ]
