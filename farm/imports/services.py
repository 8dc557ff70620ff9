# farm/imports/services.py
"""
Bulk product import from a spreadsheet pasted as tab-separated text.

Expected columns (first row is the header and is skipped):
Field Location, Crop, Crop Needs, Stand Inventory, Wash Inventory,
Harvest (Bins), Units Harvested, Field Notes, Retail Notes
"""

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from farm.api import form_errors, form_from_json, present_fields
from farm.fields.forms import normalize_name
from farm.fields.services import find_by_name
from farm.fields.models import FieldLocation
from farm.history.services import coerce_quantity, record_initial_stock
from farm.products.forms import ProductForm
from farm.products.models import Product

COLUMNS = (
    "fieldLocation",
    "name",
    "cropNeeds",
    "standInventory",
    "washInventory",
    "harvestBins",
    "unitsHarvested",
    "fieldNotes",
    "retailNotes",
)
DEFAULT_UNIT = "count"


def parse_tab_delimited(text):
    """Rows as dicts keyed like the product API. A blank location repeats the previous one."""
    lines = [line.rstrip("\r") for line in (text or "").split("\n") if line.strip()]
    rows = []
    location = ""
    for line in lines[1:]:
        values = [v.strip() for v in line.split("\t")]
        values += [""] * (len(COLUMNS) - len(values))

        if values[0]:
            location = normalize_name(values[0])
        if not values[1]:
            continue

        row = dict(zip(COLUMNS, values))
        row["fieldLocation"] = location
        rows.append(row)
    return rows


def _product_payload(row):
    payload = {k: v for k, v in row.items() if v != ""}
    payload["unit"] = DEFAULT_UNIT
    payload["currentStock"] = max(0, coerce_quantity(row.get("standInventory")) or 0)
    return payload


def import_rows(rows, updated_by):
    """
    Creates one product per row, committed row by row so a failing row
    leaves the others in place. Missing field locations are created on the way.
    """
    result = {"total": len(rows), "created": 0, "failed": 0, "locationsCreated": [], "errors": []}

    for index, row in enumerate(rows, start=1):
        payload = _product_payload(row)
        form = form_from_json(ProductForm, payload)
        if not form.validate():
            result["failed"] += 1
            result["errors"].append({"row": index, "name": row.get("name"), "errors": form_errors(form)})
            continue

        new_location = None
        try:
            location = row["fieldLocation"]
            if find_by_name(location) is None:
                db.session.add(FieldLocation(name=location))
                new_location = location

            product = Product(show_in_wholesale=False, show_in_kitchen=False, show_in_retail=True)
            for field in present_fields(form, payload):
                setattr(product, Product.API_FIELDS[field.name], field.data)
            db.session.add(product)
            db.session.flush()
            record_initial_stock(product, updated_by)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.warning("Import row %d (%s) failed: %s", index, row.get("name"), exc)
            result["failed"] += 1
            result["errors"].append({"row": index, "name": row.get("name"),
                                     "errors": [{"field": None, "message": "Could not save row"}]})
            continue

        result["created"] += 1
        if new_location:
            result["locationsCreated"].append(new_location)

    current_app.logger.info(
        "Import finished: %d/%d created, %d failed, %d new location(s)",
        result["created"], result["total"], result["failed"], len(result["locationsCreated"]),
    )
    return result
