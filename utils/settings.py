"""
Environment-backed settings for the school backend.

Values are read once when the app is built and copied into ``app.config``;
call sites read ``current_app.config`` rather than the environment.
"""
import os

# Timetable classes accepted by the file-host routes
CLASSES = [
    'LKG', 'UKG',
    'Class1', 'Class2', 'Class3', 'Class4', 'Class5',
    'Class6', 'Class7', 'Class8', 'Class9', 'Class10',
]

USER_TAB = 'User'

_DEFAULTS = {
    'SECRET_KEY': 'change-me',
    'DATABASE_URL': 'sqlite:///school.db',
    'SPREADSHEET_ID': '',
    'GOOGLE_CREDENTIALS': '',
    'GOOGLE_APPLICATION_CREDENTIALS': '',
    'IMAGEKIT_PUBLIC_KEY': '',
    'IMAGEKIT_PRIVATE_KEY': '',
    'IMAGEKIT_URL_ENDPOINT': '',
    'SCHOOL_TIMEZONE': 'Asia/Kolkata',
    'SHEET_LAST_COLUMN': 'ZZ',
    'REMOTE_RETRIES': 3,
    'MAX_CONTENT_LENGTH': 16 * 1024 * 1024,
    'LOG_LEVEL': 'INFO',
    'PORT': 5000,
}

_INT_KEYS = {'REMOTE_RETRIES', 'MAX_CONTENT_LENGTH', 'PORT'}


def _coerce(key, value):
    if key in _INT_KEYS:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise RuntimeError(f"{key} must be an integer, got {value!r}")
    return value


def load_settings(overrides=None):
    """Build the settings mapping from the environment, then apply overrides"""
    settings = {}
    for key, default in _DEFAULTS.items():
        value = os.getenv(key)
        settings[key] = _coerce(key, value) if value not in (None, '') else default

    # Older deployments set the SQLAlchemy name directly
    if not os.getenv('DATABASE_URL') and os.getenv('SQLALCHEMY_DATABASE_URI'):
        settings['DATABASE_URL'] = os.getenv('SQLALCHEMY_DATABASE_URI')

    if overrides:
        settings.update(overrides)

    settings['SQLALCHEMY_DATABASE_URI'] = settings['DATABASE_URL']
    settings['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    return settings


def sheets_configured(config):
    return bool(config.get('SPREADSHEET_ID')) and bool(
        config.get('GOOGLE_CREDENTIALS') or config.get('GOOGLE_APPLICATION_CREDENTIALS')
    )


def file_host_configured(config):
    return all(
        config.get(key) for key in ('IMAGEKIT_PUBLIC_KEY', 'IMAGEKIT_PRIVATE_KEY', 'IMAGEKIT_URL_ENDPOINT')
    )
