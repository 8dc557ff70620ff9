# farm/history/services.py
"""
Inventory history ledger.

Every stock-affecting write goes through here: the per-field diff on a
product update, the explicit +/- adjustment and the seed row of a new
product. Rows are append-only.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Optional

from flask import current_app
from sqlalchemy import or_

from extensions import db
from farm.api import ApiValidationError
from .models import InventoryHistory

# Largest quantity kept in the ledger; differences of two stay inside a 32-bit INTEGER
QUANTITY_LIMIT = 1_000_000_000


class TrackedField(Enum):
    """Quantities whose edits are written to the ledger: attribute → display name."""

    CURRENT_STOCK = ("current_stock", "Current Stock")
    WASH_INVENTORY = ("wash_inventory", "Wash Inventory")
    STAND_INVENTORY = ("stand_inventory", "Stand Inventory")
    HARVEST_BINS = ("harvest_bins", "Harvest Bins")
    UNITS_HARVESTED = ("units_harvested", "Units Harvested")
    CROP_NEEDS = ("crop_needs", "Crop Needs")

    def __init__(self, attr, label):
        self.attr = attr
        self.label = label

    @property
    def tag(self) -> str:
        return self.attr

    def history_label(self, location) -> str:
        return f"{self.label} - {location}"

    @classmethod
    def from_tag(cls, tag) -> Optional["TrackedField"]:
        for member in cls:
            if member.tag == tag:
                return member
        return None


def legacy_tag(field_location):
    """(tag, location) recovered from an untagged row's "<Label> - <location>" text."""
    text = field_location or ""
    for tracked in TrackedField:
        prefix = tracked.history_label("")
        if text.startswith(prefix):
            return tracked.tag, text[len(prefix):] or None
    # adjustments and seed rows carry a bare location
    return TrackedField.CURRENT_STOCK.tag, text or None


def coerce_quantity(value) -> Optional[int]:
    """
    Text quantity → int.
    None / blank → 0, "12" → 12, "2.5" → 2; anything non-numeric or
    beyond ±QUANTITY_LIMIT → None.
    """
    number = _to_int(value)
    if number is None or abs(number) > QUANTITY_LIMIT:
        return None
    return number


def _to_int(value):
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None

    text = str(value).strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def _entry(product, previous, change, new, field_location, tracked, updated_by):
    entry = InventoryHistory(
        product_id=product.id,
        previous_stock=previous,
        change=change,
        new_stock=new,
        field_location=field_location,
        location=product.field_location,
        changed_attribute=tracked.tag if tracked else None,
        updated_by=updated_by,
    )
    db.session.add(entry)
    return entry


def record_initial_stock(product, updated_by) -> InventoryHistory:
    """Seed row of a freshly created product: 0 → current stock."""
    stock = product.current_stock or 0
    return _entry(product, 0, stock, stock, product.field_location,
                  TrackedField.CURRENT_STOCK, updated_by)


def record_product_changes(product, before: dict, updated_by) -> List[InventoryHistory]:
    """
    One history row per tracked field whose numeric value differs between
    `before` (Product.snapshot()) and the product's current state.
    Values that don't coerce to a number are skipped, with a warning.
    """
    entries = []
    for tracked in TrackedField:
        old_raw = before.get(tracked.attr)
        new_raw = getattr(product, tracked.attr)

        old = coerce_quantity(old_raw)
        new = coerce_quantity(new_raw)
        if old is None or new is None:
            if old_raw != new_raw:
                current_app.logger.warning(
                    "History skipped for product %s (%s): non-numeric value %r -> %r",
                    product.id, tracked.label, old_raw, new_raw,
                )
            continue
        if old == new:
            continue

        entries.append(_entry(
            product, old, new - old, new,
            tracked.history_label(product.field_location),
            tracked, updated_by,
        ))
    return entries


def adjust_stock(product, change: int, updated_by, field_location=None) -> InventoryHistory:
    """
    Applies a signed delta to current stock, floored at 0.
    The ledger row holds the delta actually applied, so
    new_stock == previous_stock + change always holds.
    """
    previous = product.current_stock or 0
    if previous + change > QUANTITY_LIMIT:
        raise ApiValidationError("Invalid adjustment data", [
            {"field": "change", "message": f"Stock may not exceed {QUANTITY_LIMIT}."},
        ])
    new = max(0, previous + change)
    if new != previous + change:
        current_app.logger.info(
            "Adjustment for product %s clamped at 0 (requested %s from %s)",
            product.id, change, previous,
        )
    product.current_stock = new
    return _entry(
        product, previous, new - previous, new,
        field_location or product.field_location,
        TrackedField.CURRENT_STOCK, updated_by,
    )


def end_of_day(value):
    return value.replace(hour=23, minute=59, second=59, microsecond=999000)


def _not_reserved(column, reserved):
    return or_(column.is_(None), column.notin_(reserved))


def query_history(start=None, end=None, product_id=None, include_reserved=True):
    """Ledger rows, newest first. `end` is taken as inclusive up to the end of its day."""
    query = InventoryHistory.query
    if start is not None:
        query = query.filter(InventoryHistory.timestamp >= start)
    if end is not None:
        query = query.filter(InventoryHistory.timestamp <= end_of_day(end))
    if product_id is not None:
        query = query.filter(InventoryHistory.product_id == product_id)
    if not include_reserved:
        reserved = list(current_app.config['RESERVED_LOCATIONS'])
        query = query.filter(
            _not_reserved(InventoryHistory.field_location, reserved),
            _not_reserved(InventoryHistory.location, reserved),
        )
    return query.order_by(InventoryHistory.timestamp.desc(), InventoryHistory.id.desc()).all()
