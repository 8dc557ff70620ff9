from flask import Blueprint, jsonify
from extensions import db
from farm.api import form_from_json, json_payload, present_fields, validate_partial_or_raise
from .forms import EmailSettingsForm
from .services import (
    MASKED_PASSWORD,
    get_email_settings,
    public_settings,
    send_test_email,
    update_email_settings,
)

notifications_bp = Blueprint('notifications', __name__, url_prefix='/api/email-settings')


@notifications_bp.get('')
def show():
    return jsonify(public_settings(get_email_settings()))


@notifications_bp.post('')
def update():
    payload = json_payload()
    form = validate_partial_or_raise(form_from_json(EmailSettingsForm, payload), payload, 'Invalid e-mail settings')
    changes = {f.name: f.data for f in present_fields(form, payload)}
    if changes.get('smtpPort') is None:
        changes.pop('smtpPort', None)
    if changes.get('smtpPassword') == MASKED_PASSWORD:
        changes.pop('smtpPassword')
    update_email_settings(changes)
    db.session.commit()
    return jsonify(public_settings(get_email_settings()))


@notifications_bp.post('/test')
def test():
    sent = send_test_email()
    return jsonify({'success': sent})
