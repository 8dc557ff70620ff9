# farm/reports/services.py
"""
Inventory report: per product, how much of one tracked quantity (Wash
Inventory by default) was added and removed inside a date window.

`current` is read from the product, `added`/`removed` come from replaying
the ledger rows tagged for that quantity, and `starting` is derived as
current - added + removed. Rows outside the window are not seen, so
`starting` is only as good as the window and the ledger.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from flask import current_app

from farm.history.services import TrackedField, coerce_quantity, query_history
from farm.ordering.services import apply_row_order, load_row_order
from farm.products.models import Product, stock_status


@dataclass
class ReportLine:
    id: int
    name: str
    field_location: str
    unit: str
    current: int
    status: str
    added: int = 0
    removed: int = 0
    starting: int = 0
    notes: Dict[str, str] = field(default_factory=dict)

    @property
    def is_low_stock(self) -> bool:
        return self.status in ("low", "critical")

    @property
    def is_critical_stock(self) -> bool:
        return self.status == "critical"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "fieldLocation": self.field_location,
            "unit": self.unit,
            "starting": self.starting,
            "added": self.added,
            "removed": self.removed,
            "current": self.current,
            "stockStatus": self.status,
            "isLowStock": self.is_low_stock,
            "isCriticalStock": self.is_critical_stock,
            **self.notes,
        }


def is_tagged_for(entry, tracked: TrackedField) -> bool:
    """Rows carry an explicit tag; older rows only have the "<Label> - <location>" text."""
    if entry.changed_attribute:
        return entry.changed_attribute == tracked.tag
    return tracked.label in (entry.field_location or "")


def _seed_line(product, tracked, low, critical) -> ReportLine:
    current = coerce_quantity(getattr(product, tracked.attr))
    if current is None:
        current = 0
    return ReportLine(
        id=product.id,
        name=product.name,
        field_location=product.field_location,
        unit=product.unit or "",
        current=current,
        status=stock_status(current, low=low, critical=critical),
        notes={
            "fieldNotes": product.field_notes or "",
            "retailNotes": product.retail_notes or "",
            "washInventory": product.wash_inventory or "",
            "standInventory": product.stand_inventory or "",
            "harvestBins": product.harvest_bins or "",
            "cropNeeds": product.crop_needs or "",
            "unitsHarvested": product.units_harvested or "",
        },
    )


def build_inventory_report(start, end, include_reserved=False, product_id: Optional[int] = None,
                           tracked: TrackedField = TrackedField.WASH_INVENTORY) -> List[ReportLine]:
    cfg = current_app.config
    reserved = set(cfg["RESERVED_LOCATIONS"])

    products = apply_row_order(Product.query.all(), load_row_order())
    lines: Dict[int, ReportLine] = {}
    for p in products:
        if not include_reserved and p.field_location in reserved:
            continue
        if product_id is not None and p.id != product_id:
            continue
        lines[p.id] = _seed_line(p, tracked, cfg["LOW_STOCK_THRESHOLD"], cfg["CRITICAL_STOCK_THRESHOLD"])

    if lines:
        for entry in query_history(start=start, end=end, product_id=product_id,
                                   include_reserved=include_reserved):
            line = lines.get(entry.product_id)
            if line is None or not is_tagged_for(entry, tracked):
                continue
            if entry.change > 0:
                line.added += entry.change
            else:
                line.removed += abs(entry.change)

    for line in lines.values():
        line.starting = line.current - line.added + line.removed

    return list(lines.values())


def summarize(lines: List[ReportLine]) -> dict:
    return {
        "totalProducts": len(lines),
        "totalAdded": sum(l.added for l in lines),
        "totalRemoved": sum(l.removed for l in lines),
        "lowStockCount": sum(1 for l in lines if l.is_low_stock),
        "criticalStockCount": sum(1 for l in lines if l.is_critical_stock),
    }
