from flask import Blueprint, current_app, jsonify, request

from farm.api import form_from_json, json_payload, parse_bool, validate_or_raise
from .forms import ImportForm
from .services import import_rows, parse_tab_delimited

imports_bp = Blueprint('imports', __name__, url_prefix='/api/import')


# 📥 Paste from spreadsheet
@imports_bp.post('/products')
def import_products():
    payload = json_payload()
    # "data" would shadow Form.data
    form = form_from_json(ImportForm, {"text": payload.get("data"), "updatedBy": payload.get("updatedBy")})
    validate_or_raise(form, 'Invalid import data')
    rows = parse_tab_delimited(form.text.data)

    if parse_bool(request.args.get('dryRun')):
        return jsonify({"total": len(rows), "rows": rows})

    updated_by = (form.updatedBy.data or '').strip() or current_app.config['DEFAULT_UPDATED_BY']
    return jsonify(import_rows(rows, updated_by))
