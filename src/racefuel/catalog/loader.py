"""Load and validate product catalogs from YAML, JSON or CSV files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import pandas as pd
import yaml

from racefuel.catalog.models import Item, ItemCategory


class CatalogError(ValueError):
    """Raised when a catalog file cannot be read or fails validation."""


REQUIRED_FIELDS = ["name", "category"]
NUMERIC_FIELDS = ["carbs", "sodium", "water"]
OPTIONAL_FIELDS = ["serving_size", "brand", "exclude_from_smart_fill"]

# Alternate column names accepted from exported product libraries
FIELD_ALIASES = {
    "carbs_per_serving": "carbs",
    "sodium_per_serving": "sodium",
    "water_per_serving": "water",
    "serving": "serving_size",
}

_TRUE_STRINGS = {"true", "yes", "1", "y"}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _as_bool(value: Any) -> bool:
    if _is_missing(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def item_from_record(record: dict[str, Any], position: int = 0) -> Item:
    """Build an Item from a mapping of field names to values.

    Args:
        record: Field mapping (aliases accepted)
        position: 1-based record number, for error messages

    Raises:
        CatalogError: If a field is missing or invalid
    """
    data = {FIELD_ALIASES.get(str(k).strip(), str(k).strip()): v for k, v in record.items()}

    missing = [f for f in REQUIRED_FIELDS if _is_missing(data.get(f))]
    if missing:
        raise CatalogError(f"Record {position}: missing required fields {missing}")

    name = str(data["name"]).strip()
    try:
        category = ItemCategory.parse(str(data["category"]))
    except ValueError as e:
        raise CatalogError(f"Record {position} ({name}): {e}") from e

    amounts: dict[str, float] = {}
    for field_name in NUMERIC_FIELDS:
        value = data.get(field_name)
        try:
            amounts[field_name] = 0.0 if _is_missing(value) else float(value)
        except (TypeError, ValueError) as e:
            raise CatalogError(
                f"Record {position} ({name}): {field_name} must be a number, got {value!r}"
            ) from e

    serving_size = data.get("serving_size")
    brand = data.get("brand")

    try:
        return Item(
            name=name,
            category=category,
            carbs=amounts["carbs"],
            sodium=amounts["sodium"],
            water=amounts["water"],
            serving_size="1 serving" if _is_missing(serving_size) else str(serving_size),
            brand=None if _is_missing(brand) else str(brand),
            exclude_from_smart_fill=_as_bool(data.get("exclude_from_smart_fill")),
        )
    except ValueError as e:
        raise CatalogError(f"Record {position}: {e}") from e


def items_from_records(records: Iterable[dict[str, Any]]) -> list[Item]:
    """Build a catalog from records, rejecting duplicate names.

    Raises:
        CatalogError: If any record is invalid or a name repeats
    """
    items: list[Item] = []
    seen: set[str] = set()
    for position, record in enumerate(records, start=1):
        if not isinstance(record, dict):
            raise CatalogError(f"Record {position}: expected a mapping, got {type(record).__name__}")
        item = item_from_record(record, position)
        if item.name in seen:
            raise CatalogError(f"Duplicate item name: {item.name}")
        seen.add(item.name)
        items.append(item)
    return items


def _records_from_document(data: Any, path: Path) -> list[dict[str, Any]]:
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("items", [])
    if not isinstance(data, list):
        raise CatalogError(f"{path}: expected a list of items or an 'items' key")
    return data


def load_catalog(path: Path) -> list[Item]:
    """Load a catalog file.

    Supported formats, chosen by extension:
        .yaml/.yml: list of items, or a mapping with an ``items`` list
        .json: same structure as YAML
        .csv: one item per row, columns named after the item fields

    Example YAML:
        items:
          - name: Maurten Gel 100
            category: Gels
            carbs: 25
            sodium: 20
            serving_size: 40g sachet

    Args:
        path: Catalog file path

    Returns:
        Items in file order.

    Raises:
        FileNotFoundError: If the file does not exist
        CatalogError: If the file is malformed or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CatalogError(f"{path}: invalid YAML: {e}") from e
        records = _records_from_document(data, path)
    elif suffix == ".json":
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"{path}: invalid JSON: {e}") from e
        records = _records_from_document(data, path)
    elif suffix == ".csv":
        try:
            df = pd.read_csv(path)
        except pd.errors.EmptyDataError:
            return []
        missing = set(REQUIRED_FIELDS) - set(df.columns)
        if missing:
            raise CatalogError(
                f"Missing required columns: {sorted(missing)}. "
                f"Required columns are: {REQUIRED_FIELDS}"
            )
        records = df.to_dict(orient="records")
    else:
        raise CatalogError(f"Unsupported catalog format: {path.suffix or '(none)'}")

    return items_from_records(records)
