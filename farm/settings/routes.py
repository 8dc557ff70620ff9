from flask import Blueprint, jsonify
from extensions import db
from farm.api import ApiValidationError, form_from_json, json_payload, validate_or_raise
from .forms import SettingKeyForm
from .models import Setting
from .services import set_setting

settings_bp = Blueprint('settings', __name__, url_prefix='/api/settings')


def _save(key, payload):
    if 'value' not in payload:
        raise ApiValidationError('Invalid setting data', [{'field': 'value', 'message': 'This field is required.'}])
    form = validate_or_raise(form_from_json(SettingKeyForm, {'key': key}), 'Invalid setting data')
    setting = set_setting(form.key.data, payload['value'])
    db.session.commit()
    return jsonify(setting.to_dict())


@settings_bp.get('')
def index():
    return jsonify([s.to_dict() for s in Setting.query.order_by(Setting.key).all()])


@settings_bp.get('/<key>')
def show(key):
    setting = Setting.query.filter_by(key=key).first_or_404(description='Setting not found')
    return jsonify(setting.to_dict())


@settings_bp.post('')
def save():
    payload = json_payload()
    return _save(payload.get('key'), payload)


@settings_bp.post('/<key>')
def save_key(key):
    return _save(key, json_payload())
