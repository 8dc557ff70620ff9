from extensions import db
from .models import Setting


def get_setting(key, default=None):
    setting = Setting.query.filter_by(key=key).first()
    return setting.value if setting is not None else default


def set_setting(key, value) -> Setting:
    """Upsert; the caller commits."""
    setting = Setting.query.filter_by(key=key).first()
    if setting is None:
        setting = Setting(key=key, value=value)
        db.session.add(setting)
    else:
        setting.value = value
    return setting
