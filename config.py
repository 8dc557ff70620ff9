import os
from datetime import timedelta

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key')

    # Own variable first, then the one Render provides
    uri = os.environ.get('RENDER_DATABASE_URL') or os.environ.get('DATABASE_URL')

    if uri and uri.startswith('postgresql://'):
        uri = uri.replace('postgresql://', 'postgresql+psycopg://', 1)

    SQLALCHEMY_DATABASE_URI = uri or f"sqlite:///{os.path.join(basedir, 'instance', 'farm_inventory.db')}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Site password cookie
    AUTH_COOKIE_NAME = 'authToken'
    AUTH_FLAG_COOKIE_NAME = 'isLoggedIn'
    AUTH_COOKIE_MAX_AGE = int(timedelta(days=30).total_seconds())
    AUTH_COOKIE_SECURE = os.environ.get('AUTH_COOKIE_SECURE', 'false').lower() == 'true'
    MIN_PASSWORD_LENGTH = 6

    # Identity written to history rows until per-user auth exists
    DEFAULT_UPDATED_BY = os.environ.get('DEFAULT_UPDATED_BY', 'Farm Admin')

    # Inventory
    RESERVED_LOCATIONS = ('Wholesale', 'Kitchen')
    LOW_STOCK_THRESHOLD = 10
    CRITICAL_STOCK_THRESHOLD = 5
    ROW_ORDER_KEY = 'inventoryRowOrder'
    DEFAULT_FIELD_LOCATIONS = (
        'North Field',
        'South Field',
        'East Field',
        'West Field',
        'Greenhouse',
    )

    # Fallback SMTP values, the settings store wins when filled in
    MAIL_SERVER = os.environ.get('MAIL_SERVER', '')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', 'True').lower() == 'true'
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', '')

    PDF_FONT_PATH = os.environ.get('PDF_FONT_PATH', os.path.join(basedir, 'static', 'fonts', 'DejaVuSans.ttf'))
