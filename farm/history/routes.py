from flask import current_app, jsonify, request
from extensions import db
from farm.api import form_from_json, validate_or_raise
from farm.products.models import Product
from . import inventory_bp
from .forms import AdjustInventoryForm, DateRangeForm
from .services import adjust_stock, query_history


def _updated_by(value):
    return (value or "").strip() or current_app.config["DEFAULT_UPDATED_BY"]


# ---------- ADJUSTMENT ----------

@inventory_bp.post("/adjust")
def adjust():
    """
    Explicit +/- on current stock (also used by the Wholesale/Kitchen tabs,
    which pass their own fieldLocation tag). Stock never goes below 0.
    """
    form = validate_or_raise(form_from_json(AdjustInventoryForm), "Invalid adjustment data")
    product = db.get_or_404(Product, form.productId.data, description="Product not found")

    requested = form.change.data
    entry = adjust_stock(
        product,
        requested,
        updated_by=_updated_by(form.updatedBy.data),
        field_location=(form.fieldLocation.data or "").strip() or None,
    )
    db.session.commit()

    return jsonify({
        "product": product.to_dict(),
        "history": entry.to_dict(),
        "requestedChange": requested,
    })


# ---------- JOURNAL ----------

@inventory_bp.get("/history")
def history():
    form = validate_or_raise(DateRangeForm(request.args), "Invalid history filter")

    entries = query_history(
        start=form.startDate.data,
        end=form.endDate.data,
        product_id=form.selected_product_id,
        include_reserved=form.include_reserved(default=True),
    )

    # snapshot of product names for the journal (orphans → "Unknown Product")
    ids = {e.product_id for e in entries}
    products = {p.id: p for p in Product.query.filter(Product.id.in_(ids)).all()} if ids else {}

    rows = []
    for e in entries:
        p = products.get(e.product_id)
        row = e.to_dict()
        row["productName"] = p.name if p else "Unknown Product"
        row["productLocation"] = p.field_location if p else "Unknown Location"
        row["unit"] = (p.unit or "") if p else ""
        rows.append(row)
    return jsonify(rows)
