from extensions import db
from datetime import datetime


class InventoryHistory(db.Model):
    __tablename__ = "inventory_history"

    id = db.Column(db.Integer, primary_key=True)

    # No FK on purpose: entries outlive deleted products
    product_id = db.Column(db.Integer, nullable=False, index=True)

    previous_stock = db.Column(db.Integer, nullable=False)
    change = db.Column(db.Integer, nullable=False)      # + = added
    new_stock = db.Column(db.Integer, nullable=False)

    # Display tag, e.g. "Wash Inventory - Upper Blais", "Wholesale"
    field_location = db.Column(db.String(255))
    # Plain product location at write time
    location = db.Column(db.String(100))
    # TrackedField value; NULL on rows written before the column existed
    changed_attribute = db.Column(db.String(50), index=True)

    updated_by = db.Column(db.String(100), nullable=False)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "productId": self.product_id,
            "previousStock": self.previous_stock,
            "change": self.change,
            "newStock": self.new_stock,
            "fieldLocation": self.field_location,
            "location": self.location,
            "changedAttribute": self.changed_attribute,
            "updatedBy": self.updated_by,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }

    def __repr__(self):
        return f"<InventoryHistory product={self.product_id} change={self.change}>"
