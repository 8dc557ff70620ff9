# farm/api.py
"""
Shared plumbing for the JSON blueprints: the base form, payload parsing
and the validation error that the app turns into a 400 response.
"""

from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict


class ApiValidationError(Exception):
    status_code = 400

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def to_dict(self):
        return {"message": self.message, "errors": self.errors}


class ApiForm(FlaskForm):
    """FlaskForm for JSON endpoints; the auth cookie is SameSite=Lax, so no CSRF token."""

    class Meta:
        csrf = False


def json_payload() -> dict:
    """Request body as a dict. Empty body → {}."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ApiValidationError("Request body must be a JSON object")
    return payload


def _form_value(value):
    # WTForms expects what a browser would post: text
    if isinstance(value, dict):
        raise TypeError("object")
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        if any(isinstance(v, list) for v in value):
            raise TypeError("nested list")
        return [_form_value(v) for v in value]
    return value


def form_from_json(form_cls, payload=None):
    """
    Builds a form from a JSON object, values converted to form text
    (null → "", 0 → "0", false → "false"); a list becomes repeated values.
    """
    if payload is None:
        payload = json_payload()
    data, errors = {}, []
    for key, value in payload.items():
        try:
            data[key] = _form_value(value)
        except TypeError:
            errors.append({"field": key, "message": "Must be a plain value or a list of plain values."})
    if errors:
        raise ApiValidationError("Invalid data", errors)
    return form_cls(formdata=ImmutableMultiDict(data))


def form_errors(form) -> list:
    out = []
    for name, messages in (form.errors or {}).items():
        for msg in messages:
            out.append({"field": name, "message": str(msg)})
    return out


def validate_or_raise(form, message="Invalid data"):
    if not form.validate():
        raise ApiValidationError(message, form_errors(form))
    return form


def validate_partial_or_raise(form, payload, message="Invalid data"):
    """Like validate_or_raise, but only fields present in the payload count."""
    form.validate()
    errors = {name: msgs for name, msgs in (form.errors or {}).items() if name in payload}
    if errors:
        raise ApiValidationError(
            message,
            [{"field": name, "message": str(m)} for name, msgs in errors.items() for m in msgs],
        )
    return form


def present_fields(form, payload):
    """Form fields whose key was actually sent (partial updates)."""
    return [field for field in form if field.name in payload]


def parse_bool(value, default=False) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")
