from flask import Blueprint, current_app, jsonify
from extensions import db
from farm.api import (
    form_from_json,
    json_payload,
    present_fields,
    validate_or_raise,
    validate_partial_or_raise,
)
from farm.history.services import record_initial_stock, record_product_changes
from farm.notifications.services import notify_retail_notes_changed
from farm.ordering.services import apply_row_order, forget_product, load_row_order
from farm.products.forms import ProductForm
from farm.products.models import Product, stock_status

products_bp = Blueprint('products', __name__, url_prefix='/api/products')


def _updated_by(payload):
    value = payload.get('updatedBy')
    if isinstance(value, str) and value.strip():
        return value.strip()[:100]
    return current_app.config['DEFAULT_UPDATED_BY']


def _apply(product, form, payload):
    """Copies only the keys that were sent; null currentStock is ignored."""
    for field in present_fields(form, payload):
        if field.name == 'currentStock' and field.data is None:
            continue
        setattr(product, Product.API_FIELDS[field.name], field.data)


# 🗂️ Products in display order
@products_bp.get('')
def index():
    products = Product.query.order_by(Product.id).all()
    return jsonify([p.to_dict() for p in apply_row_order(products, load_row_order())])


@products_bp.get('/low-stock')
def low_stock():
    cfg = current_app.config
    products = Product.query.order_by(Product.current_stock, Product.name).all()
    return jsonify([
        p.to_dict() for p in products
        if stock_status(p.current_stock or 0,
                        low=cfg['LOW_STOCK_THRESHOLD'],
                        critical=cfg['CRITICAL_STOCK_THRESHOLD']) != 'ok'
    ])


@products_bp.get('/<int:id>')
def show(id):
    product = db.get_or_404(Product, id, description='Product not found')
    return jsonify(product.to_dict())


# ➕ Create product
@products_bp.post('')
def create():
    payload = json_payload()
    form = validate_or_raise(form_from_json(ProductForm, payload), 'Invalid product data')

    product = Product(current_stock=0, show_in_wholesale=False, show_in_kitchen=False, show_in_retail=True)
    _apply(product, form, payload)
    db.session.add(product)
    db.session.flush()

    record_initial_stock(product, _updated_by(payload))
    db.session.commit()
    current_app.logger.info("Product %s created (%s, stock %s)", product.id, product.name, product.current_stock)
    return jsonify(product.to_dict()), 201


# ✏️ Partial update, tracked quantities go to the ledger
@products_bp.put('/<int:id>')
def update(id):
    product = db.get_or_404(Product, id, description='Product not found')
    payload = json_payload()
    form = validate_partial_or_raise(form_from_json(ProductForm, payload), payload, 'Invalid product data')

    before = product.snapshot()
    _apply(product, form, payload)
    entries = record_product_changes(product, before, _updated_by(payload))
    db.session.commit()

    if entries:
        current_app.logger.info("Product %s updated, %d history row(s) written", product.id, len(entries))

    if product.retail_notes and product.retail_notes != before['retail_notes']:
        notify_retail_notes_changed(product, before['retail_notes'])

    return jsonify(product.to_dict())


# 🗑️ Delete product (history rows are kept)
@products_bp.delete('/<int:id>')
def delete(id):
    product = db.get_or_404(Product, id, description='Product not found')
    db.session.delete(product)
    forget_product(id)
    db.session.commit()
    return '', 204
