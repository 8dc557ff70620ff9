# farm/fields/models.py

from extensions import db


class FieldLocation(db.Model):
    __tablename__ = 'field_locations'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)

    def to_dict(self):
        return {'id': self.id, 'name': self.name}

    def __repr__(self):
        return f"<FieldLocation id={self.id} name='{self.name}'>"
