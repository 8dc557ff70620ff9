from flask import Blueprint, jsonify
from extensions import db
from farm.api import form_from_json, validate_or_raise
from farm.products.models import Product
from .forms import MoveProductForm, RowOrderForm
from .services import load_row_order, move_product, ordered_ids, rank_map, save_row_order

ordering_bp = Blueprint('ordering', __name__, url_prefix='/api/products')


def _live_ids():
    return [pid for (pid,) in db.session.query(Product.id).all()]


@ordering_bp.get('/order')
def show_order():
    ranks = rank_map(load_row_order(), _live_ids())
    return jsonify({'productIds': ordered_ids(ranks)})


@ordering_bp.put('/order')
def save_order():
    form = validate_or_raise(form_from_json(RowOrderForm), 'Invalid row order')
    ranks = rank_map(form.productIds.data, _live_ids())
    ids = save_row_order(ordered_ids(ranks))
    db.session.commit()
    return jsonify({'productIds': ids})


@ordering_bp.post('/<int:id>/move')
def move(id):
    db.get_or_404(Product, id, description='Product not found')
    form = validate_or_raise(form_from_json(MoveProductForm), 'Invalid row number')

    ranks = rank_map(load_row_order(), _live_ids())
    ranks = move_product(ranks, id, form.position.data)
    ids = save_row_order(ordered_ids(ranks))
    db.session.commit()
    return jsonify({'productIds': ids})
