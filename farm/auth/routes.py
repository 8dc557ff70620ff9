from flask import Blueprint, current_app, jsonify, request
from extensions import db
from farm.api import ApiValidationError, form_from_json, validate_or_raise
from .forms import ChangePasswordForm, LoginForm
from .services import (
    clear_auth_cookie,
    get_site_auth,
    set_auth_cookie,
    set_password,
    token_matches,
    unauthorized,
    verify_password,
)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.post('/login')
def login():
    form = validate_or_raise(form_from_json(LoginForm), 'Invalid login data')
    password = form.password.data
    site_auth = get_site_auth()

    # First login on a fresh install sets the password
    if site_auth is None:
        minimum = current_app.config['MIN_PASSWORD_LENGTH']
        if len(password) < minimum:
            raise ApiValidationError('Invalid login data', [
                {'field': 'password', 'message': f'Password must be at least {minimum} characters'}
            ])
        site_auth = set_password(password)
        db.session.commit()
        current_app.logger.info("Site password set on first login")
        response = jsonify({'success': True, 'message': 'Password set and logged in'})
        return set_auth_cookie(response, site_auth.password_hash)

    if not verify_password(site_auth, password):
        current_app.logger.warning("Failed login from %s", request.remote_addr)
        return unauthorized('Invalid password')

    response = jsonify({'success': True, 'message': 'Logged in successfully'})
    return set_auth_cookie(response, site_auth.password_hash)


@auth_bp.post('/logout')
def logout():
    return clear_auth_cookie(jsonify({'success': True, 'message': 'Logged out'}))


@auth_bp.get('/check')
def check():
    site_auth = get_site_auth()
    if site_auth is None:
        return jsonify({'isProtected': False, 'isAuthenticated': True})

    ok = token_matches(site_auth, request.cookies.get(current_app.config['AUTH_COOKIE_NAME']))
    response = jsonify({'isProtected': True, 'isAuthenticated': ok})
    if not ok:
        clear_auth_cookie(response)
    return response


@auth_bp.post('/change-password')
def change_password():
    form = validate_or_raise(form_from_json(ChangePasswordForm), 'Invalid password data')
    site_auth = get_site_auth()
    if site_auth is None:
        raise ApiValidationError('No site password is set yet, log in to set one')
    if not verify_password(site_auth, form.currentPassword.data):
        raise ApiValidationError('Invalid password data', [
            {'field': 'currentPassword', 'message': 'Current password is incorrect'}
        ])

    site_auth = set_password(form.newPassword.data)
    db.session.commit()
    current_app.logger.info("Site password changed")
    response = jsonify({'success': True, 'message': 'Password changed'})
    return set_auth_cookie(response, site_auth.password_hash)
