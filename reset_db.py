# reset_db.py
"""
Drops every table and recreates an empty schema.

    python reset_db.py            # asks before dropping
    python reset_db.py --yes      # no question (scripts, CI)
    python reset_db.py --no-seed  # leave the field-location registry empty
"""

import argparse

from extensions import db
from farm.fields.services import seed_default_locations


def reset_database(seed=True):
    """Drop + create inside the current app context; returns the table names recreated."""
    tables = [t.name for t in db.metadata.sorted_tables]
    db.session.remove()
    db.drop_all()
    db.create_all()
    if seed:
        seed_default_locations()
    return tables


def main(argv=None):
    parser = argparse.ArgumentParser(description="Recreate the inventory database from scratch.")
    parser.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    parser.add_argument("--no-seed", action="store_true", help="skip the default field locations")
    args = parser.parse_args(argv)

    from app import create_app

    app = create_app()
    with app.app_context():
        url = db.engine.url.render_as_string(hide_password=True)
        if not args.yes:
            answer = input(f"Drop all data in {url}? Type 'yes' to continue: ")
            if answer.strip().lower() != "yes":
                print("Aborted, nothing changed.")
                return 1

        tables = reset_database(seed=not args.no_seed)
        app.logger.warning("Database %s reset (%d tables)", url, len(tables))
        print(f"Recreated {len(tables)} table(s): {', '.join(tables)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
