"""Data access helpers for loading warehouse locations, items and inventory."""

from __future__ import annotations

import csv
import functools
import logging
from pathlib import Path
from typing import Iterator, Literal, Optional, Sequence

from ..config import settings
from ..models.domain import InventoryRecord, Item, Location, PickTarget, Point

UnresolvedSkuPolicy = Literal["drop", "fail"]


class UnknownSkuError(ValueError):
    """Raised when a requested SKU cannot be resolved and the policy forbids dropping it."""

    def __init__(self, sku: str, reason: str) -> None:
        super().__init__(f"Unknown SKU '{sku}': {reason}")
        self.sku = sku


def _coerce_int(value: Optional[str], *, field: str) -> int:
    if value is None or value.strip() == "":
        raise ValueError(f"Missing integer value for '{field}'")
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ValueError(f"Unable to parse integer from value '{value}' for '{field}'") from exc


def _optional(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def _read_rows(csv_path: Path) -> Iterator[dict[str, str]]:
    if not csv_path.exists():
        raise FileNotFoundError(f"Warehouse data file not found: {csv_path}")
    with csv_path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise ValueError(f"Warehouse data file '{csv_path}' is missing a header row.")
        yield from reader


@functools.lru_cache(maxsize=1)
def load_locations(source: Optional[Path] = None) -> tuple[Location, ...]:
    """Load shelf locations from the configured CSV file."""

    locations: list[Location] = []
    for row in _read_rows(source or settings.locations_file):
        code = (row.get("location_code") or row.get("LocationCode") or "").strip()
        if not code:
            continue  # ignore records without a code
        locations.append(
            Location(
                location_code=code,
                point=Point(
                    _coerce_int(row.get("x"), field="x"),
                    _coerce_int(row.get("y"), field="y"),
                ),
                zone=_optional(row.get("zone")),
                aisle=_optional(row.get("aisle")),
                bay=_optional(row.get("bay")),
                level=_optional(row.get("level")),
            )
        )
    return tuple(locations)


@functools.lru_cache(maxsize=1)
def load_items(source: Optional[Path] = None) -> tuple[Item, ...]:
    items: list[Item] = []
    for row in _read_rows(source or settings.items_file):
        sku = (row.get("sku") or "").strip()
        if sku:
            items.append(Item(sku=sku, name=(row.get("name") or "").strip()))
    return tuple(items)


@functools.lru_cache(maxsize=1)
def load_inventory(source: Optional[Path] = None) -> tuple[InventoryRecord, ...]:
    records: list[InventoryRecord] = []
    for row in _read_rows(source or settings.inventory_file):
        sku = (row.get("sku") or "").strip()
        code = (row.get("location_code") or "").strip()
        if not sku or not code:
            continue
        quantity_raw = row.get("quantity")
        quantity = _coerce_int(quantity_raw, field="quantity") if quantity_raw else 0
        records.append(InventoryRecord(sku=sku, location_code=code, quantity=quantity))
    return tuple(records)


def clear_caches() -> None:
    """Drop cached layout data so the next lookup re-reads the CSV files."""
    load_locations.cache_clear()
    load_items.cache_clear()
    load_inventory.cache_clear()


def get_location_lookup() -> dict[str, Location]:
    return {location.location_code: location for location in load_locations()}


def find_location(code: Optional[str]) -> Optional[Location]:
    if not code:
        return None
    return get_location_lookup().get(code.strip())


def resolve_start(code: Optional[str]) -> Optional[Location]:
    return find_location(code)


def resolve_end(code: Optional[str]) -> Optional[Location]:
    return find_location(code)


def resolve_targets(
    skus: Sequence[str] | None,
    policy: UnresolvedSkuPolicy | None = None,
) -> list[PickTarget]:
    """Resolve SKUs to pick targets, keeping request order.

    Each SKU maps to the location of its first inventory record. SKUs that are not
    in the catalog or have no inventory are dropped (``policy="drop"``) or rejected
    with :class:`UnknownSkuError` (``policy="fail"``).
    """
    policy = policy or settings.unresolved_sku_policy
    if not skus:
        return []

    known_skus = {item.sku for item in load_items()}
    first_location: dict[str, str] = {}
    for record in load_inventory():
        first_location.setdefault(record.sku, record.location_code)
    locations = get_location_lookup()

    targets: list[PickTarget] = []
    for raw_sku in skus:
        sku = raw_sku.strip()
        if sku not in known_skus:
            reason = "not in item catalog"
        elif sku not in first_location:
            reason = "no inventory record"
        elif first_location[sku] not in locations:
            reason = f"inventory location '{first_location[sku]}' does not exist"
        else:
            targets.append(PickTarget(sku=sku, location=locations[first_location[sku]]))
            continue

        if policy == "fail":
            raise UnknownSkuError(sku, reason)
        logging.info(f"Dropping SKU '{sku}' from pick list: {reason}")
    return targets
