from datetime import datetime
from extensions import db


class SiteAuth(db.Model):
    """The one site-wide password. At most one row."""
    __tablename__ = 'site_auth'

    id = db.Column(db.Integer, primary_key=True)
    password_hash = db.Column(db.String(255), nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
