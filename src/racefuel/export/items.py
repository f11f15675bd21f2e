"""Convert accepted plans into per-serving nutrition line items."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from racefuel.planner.models import Plan


@dataclass
class NutritionItem:
    """One line of a saved segment nutrition list.

    Attributes:
        product_name: Item name
        quantity: Number of servings
        carbs_per_serving: Carbohydrate per serving (g)
        sodium_per_serving: Sodium per serving (mg)
        water_per_serving: Effective water per serving (ml), so mixed
            drinks keep the fluid the plan counted on
        serving_size: Serving label
    """

    product_name: str
    quantity: int
    carbs_per_serving: float
    sodium_per_serving: float
    water_per_serving: float
    serving_size: str

    def to_dict(self) -> dict:
        return asdict(self)


def plan_to_nutrition_items(plan: Plan) -> list[NutritionItem]:
    """Convert a plan to line items for storage.

    Args:
        plan: Accepted plan

    Returns:
        One NutritionItem per plan entry, in plan order.
    """
    items: list[NutritionItem] = []
    for entry in plan.entries:
        per_serving = entry.per_serving
        items.append(
            NutritionItem(
                product_name=entry.item.name,
                quantity=entry.quantity,
                carbs_per_serving=entry.item.carbs,
                sodium_per_serving=entry.item.sodium,
                water_per_serving=per_serving.water,
                serving_size=entry.item.serving_size,
            )
        )
    return items
