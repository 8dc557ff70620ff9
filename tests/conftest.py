"""
Shared fixtures: a fresh app on an in-memory SQLite database per test,
its test client and a small helper to create products through the API.
"""

import pytest

from app import create_app
from extensions import db


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SECRET_KEY': 'test-secret',
        'MAIL_SERVER': '',
        'MAIL_USERNAME': None,
        'MAIL_PASSWORD': None,
        'MAIL_DEFAULT_SENDER': '',
        'PDF_FONT_PATH': '/nonexistent/DejaVuSans.ttf',
    })

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_product(client):
    """POSTs a product and returns its JSON; keyword arguments override the defaults."""

    def _make(**overrides):
        payload = {'name': 'Head Lettuce', 'fieldLocation': 'North Field', 'unit': 'heads'}
        payload.update(overrides)
        resp = client.post('/api/products', json=payload)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _make
