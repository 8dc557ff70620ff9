# farm/settings/models.py

from extensions import db


class Setting(db.Model):
    __tablename__ = 'settings'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), nullable=False, unique=True)
    value = db.Column(db.JSON)

    def to_dict(self):
        return {'key': self.key, 'value': self.value}

    def __repr__(self):
        return f'<Setting {self.key}>'
