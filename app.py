import sys, os
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

import logging
import time

from flask import Flask, g, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException
from config import Config
from extensions import db
from register_blueprints import register_blueprints


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///"):
        os.makedirs(os.path.join(os.path.dirname(__file__), "instance"), exist_ok=True)

    db.init_app(app)
    register_blueprints(app)

    # Models, so create_all sees every table
    from farm.products.models import Product
    from farm.history.models import InventoryHistory
    from farm.fields.models import FieldLocation
    from farm.settings.models import Setting
    from farm.auth.models import SiteAuth
    from farm.fields.services import seed_default_locations

    with app.app_context():
        db.create_all()
        seed_default_locations()

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    # ── site password gate
    from farm.auth.services import require_site_password
    app.before_request(require_site_password)

    @app.after_request
    def _log_request(response):
        if request.path.startswith("/api"):
            started = g.get("request_started")
            elapsed = (time.perf_counter() - started) * 1000 if started else 0
            app.logger.info("%s %s %s in %dms", request.method, request.path, response.status_code, elapsed)
        return response

    @app.get("/")
    def index():
        return jsonify({"name": "Farm Inventory", "status": "ok"})

    # ── error handlers, every API error is JSON
    from farm.api import ApiValidationError

    def _validation_error_handler(e):
        app.logger.info("Validation failed on %s: %s", request.path, e.errors or e.message)
        return jsonify(e.to_dict()), e.status_code

    def _http_error_handler(e):
        return jsonify({"message": e.description or e.name}), e.code

    def _integrity_error_handler(e):
        db.session.rollback()
        msg = str(getattr(e, "orig", e))
        app.logger.warning(f"IntegrityError caught: {msg}")
        return jsonify({"message": "Record already exists or is still referenced."}), 409

    def _unhandled_error_handler(e):
        db.session.rollback()
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"message": "Internal Server Error"}), 500

    app.register_error_handler(ApiValidationError, _validation_error_handler)
    app.register_error_handler(HTTPException, _http_error_handler)
    app.register_error_handler(IntegrityError, _integrity_error_handler)
    app.register_error_handler(Exception, _unhandled_error_handler)

    return app

if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=5001, debug=True)
