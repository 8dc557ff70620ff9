from flask import current_app
from sqlalchemy import func
from extensions import db
from .models import FieldLocation


def find_by_name(name):
    """Case-insensitive lookup."""
    return FieldLocation.query.filter(func.lower(FieldLocation.name) == func.lower(name)).first()


def ensure_field_location(name):
    """Existing location with that name, or a new one (added to the session)."""
    location = find_by_name(name)
    if location is None:
        location = FieldLocation(name=name)
        db.session.add(location)
    return location


def seed_default_locations():
    created = 0
    for name in current_app.config['DEFAULT_FIELD_LOCATIONS']:
        if find_by_name(name) is None:
            db.session.add(FieldLocation(name=name))
            created += 1
    if created:
        db.session.commit()
        current_app.logger.info("Seeded %d default field location(s)", created)
    return created
