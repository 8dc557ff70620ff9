# farm/auth/services.py
"""
Single site password.

States: no SiteAuth row → open access; row present → every /api call
except check/login/logout needs the authToken cookie, whose value is the
stored password hash itself.
"""

import hmac

from flask import current_app, jsonify, request
from werkzeug.security import check_password_hash, generate_password_hash

from extensions import db
from .models import SiteAuth

OPEN_PATHS = ('/api/auth/check', '/api/auth/login', '/api/auth/logout')


def get_site_auth():
    return SiteAuth.query.order_by(SiteAuth.id).first()


def set_password(password) -> SiteAuth:
    """Stores a new hash (replacing the old one); the caller commits."""
    site_auth = get_site_auth()
    password_hash = generate_password_hash(password)
    if site_auth is None:
        site_auth = SiteAuth(password_hash=password_hash)
        db.session.add(site_auth)
    else:
        site_auth.password_hash = password_hash
    return site_auth


def verify_password(site_auth, password) -> bool:
    return check_password_hash(site_auth.password_hash, password or '')


def token_matches(site_auth, token) -> bool:
    if not token:
        return False
    return hmac.compare_digest(token.encode('utf-8'), site_auth.password_hash.encode('utf-8'))


def is_authenticated() -> bool:
    site_auth = get_site_auth()
    if site_auth is None:
        return True
    return token_matches(site_auth, request.cookies.get(current_app.config['AUTH_COOKIE_NAME']))


def set_auth_cookie(response, password_hash):
    cfg = current_app.config
    options = dict(
        max_age=cfg['AUTH_COOKIE_MAX_AGE'],
        path='/',
        samesite='Lax',
        secure=cfg['AUTH_COOKIE_SECURE'],
    )
    response.set_cookie(cfg['AUTH_COOKIE_NAME'], password_hash, httponly=True, **options)
    # readable by the browser, only a hint for the UI
    response.set_cookie(cfg['AUTH_FLAG_COOKIE_NAME'], 'true', httponly=False, **options)
    return response


def clear_auth_cookie(response):
    cfg = current_app.config
    options = dict(path='/', samesite='Lax', secure=cfg['AUTH_COOKIE_SECURE'])
    response.delete_cookie(cfg['AUTH_COOKIE_NAME'], httponly=True, **options)
    response.delete_cookie(cfg['AUTH_FLAG_COOKIE_NAME'], httponly=False, **options)
    return response


def unauthorized(message='Authentication required'):
    response = jsonify({'message': message})
    response.status_code = 401
    return clear_auth_cookie(response)


def require_site_password():
    """before_request hook for the whole app."""
    path = request.path
    if not (path == '/api' or path.startswith('/api/')) or path in OPEN_PATHS:
        return None
    if is_authenticated():
        return None
    current_app.logger.info("Rejected unauthenticated %s %s", request.method, path)
    return unauthorized()
