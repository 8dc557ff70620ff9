import os
import sys
from sqlalchemy import text, inspect

# --- make the project root importable ---
BASE_DIR = os.path.dirname(os.path.dirname(__file__))  # ../
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from app import create_app
from extensions import db
from farm.history.models import InventoryHistory
from farm.history.services import legacy_tag

TABLE = "inventory_history"

# columns added after the first release
COLUMNS = {
    "location": "VARCHAR(100)",
    "changed_attribute": "VARCHAR(50)",
}


def main():
    app = create_app()
    with app.app_context():
        insp = inspect(db.engine)
        existing = {c["name"] for c in insp.get_columns(TABLE)}
        added = []
        for name, coltype in COLUMNS.items():
            if name not in existing:
                db.session.execute(text(f'ALTER TABLE {TABLE} ADD COLUMN {name} {coltype}'))
                added.append(name)
        db.session.commit()
        print(f"Columns added: {added or 'none (already up-to-date)'}")

        tagged = 0
        for entry in InventoryHistory.query.filter(InventoryHistory.changed_attribute.is_(None)):
            entry.changed_attribute, location = legacy_tag(entry.field_location)
            if entry.location is None:
                entry.location = location
            tagged += 1
        db.session.commit()
        print(f"Done. Tagged {tagged} legacy row(s).")


if __name__ == "__main__":
    main()
