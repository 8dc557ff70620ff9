# farm/products/models.py

from datetime import datetime

from flask import current_app
from extensions import db


def stock_status(value, low=10, critical=5) -> str:
    """critical < 5 ≤ low < 10 ≤ ok. Recomputed on every read, never stored."""
    if value < critical:
        return 'critical'
    if value < low:
        return 'low'
    return 'ok'


class Product(db.Model):
    __tablename__ = 'products'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)

    # Joined to FieldLocation by name only, renames do not cascade
    field_location = db.Column(db.String(100), nullable=False)
    current_stock = db.Column(db.Integer, nullable=False, default=0)
    unit = db.Column(db.String(50))

    # Quantities typed in by hand on the sheet, kept as text
    crop_needs = db.Column(db.String(50))
    stand_inventory = db.Column(db.String(50))
    wash_inventory = db.Column(db.String(50))
    harvest_bins = db.Column(db.String(50))
    units_harvested = db.Column(db.String(50))

    field_notes = db.Column(db.Text)
    retail_notes = db.Column(db.Text)
    image_url = db.Column(db.String(500))
    date_added = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    show_in_wholesale = db.Column(db.Boolean, nullable=False, default=False)
    show_in_kitchen = db.Column(db.Boolean, nullable=False, default=False)
    show_in_retail = db.Column(db.Boolean, nullable=False, default=True)

    # JSON key → column
    API_FIELDS = {
        'name': 'name',
        'fieldLocation': 'field_location',
        'currentStock': 'current_stock',
        'unit': 'unit',
        'cropNeeds': 'crop_needs',
        'standInventory': 'stand_inventory',
        'washInventory': 'wash_inventory',
        'harvestBins': 'harvest_bins',
        'unitsHarvested': 'units_harvested',
        'fieldNotes': 'field_notes',
        'retailNotes': 'retail_notes',
        'imageUrl': 'image_url',
        'showInWholesale': 'show_in_wholesale',
        'showInKitchen': 'show_in_kitchen',
        'showInRetail': 'show_in_retail',
    }

    def snapshot(self) -> dict:
        """Column values keyed by attribute name, taken before an update."""
        return {attr: getattr(self, attr) for attr in self.API_FIELDS.values()}

    def to_dict(self):
        data = {key: getattr(self, attr) for key, attr in self.API_FIELDS.items()}
        data['id'] = self.id
        data['dateAdded'] = self.date_added.isoformat() if self.date_added else None
        data['stockStatus'] = stock_status(
            self.current_stock or 0,
            low=current_app.config['LOW_STOCK_THRESHOLD'],
            critical=current_app.config['CRITICAL_STOCK_THRESHOLD'],
        )
        return data

    def __repr__(self):
        return f'<Product {self.name}>'
