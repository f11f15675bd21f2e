"""Output formatters and plan export."""

from racefuel.export.formatters import (
    JSONFormatter,
    MarkdownFormatter,
    TableFormatter,
    format_result,
)
from racefuel.export.items import NutritionItem, plan_to_nutrition_items

__all__ = [
    "JSONFormatter",
    "MarkdownFormatter",
    "NutritionItem",
    "TableFormatter",
    "format_result",
    "plan_to_nutrition_items",
]
