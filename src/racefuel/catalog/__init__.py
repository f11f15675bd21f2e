"""Product catalog: item models, classification and file loading."""

from racefuel.catalog.classify import ItemClass, ItemClassifier, classify, effective_water
from racefuel.catalog.loader import CatalogError, load_catalog
from racefuel.catalog.models import Item, ItemCategory

__all__ = [
    "CatalogError",
    "Item",
    "ItemCategory",
    "ItemClass",
    "ItemClassifier",
    "classify",
    "effective_water",
    "load_catalog",
]
