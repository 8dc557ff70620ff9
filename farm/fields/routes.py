from flask import Blueprint, abort, current_app, jsonify
from extensions import db
from farm.api import form_from_json, validate_or_raise
from .forms import FieldLocationForm
from .models import FieldLocation
from .services import find_by_name

fields_bp = Blueprint('fields', __name__, url_prefix='/api/field-locations')


@fields_bp.get('')
def index():
    locations = FieldLocation.query.order_by(FieldLocation.name).all()
    return jsonify([loc.to_dict() for loc in locations])


@fields_bp.post('')
def create():
    form = validate_or_raise(form_from_json(FieldLocationForm), 'Invalid field location data')
    name = form.name.data

    if find_by_name(name):
        current_app.logger.warning("Duplicate field location rejected: %s", name)
        abort(409, description=f"Field location '{name}' already exists")

    location = FieldLocation(name=name)
    db.session.add(location)
    db.session.commit()
    return jsonify(location.to_dict()), 201


# Products keep the name as plain text, so deleting a location leaves them untouched
@fields_bp.delete('/<int:id>')
def delete(id):
    location = db.get_or_404(FieldLocation, id, description='Field location not found')
    db.session.delete(location)
    db.session.commit()
    return '', 204
