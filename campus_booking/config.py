import os
from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), '.env'))


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('true', '1', 'yes')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-prod'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///campus_booking.db'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Wall-clock timezone of the campus; bookings are stored as naive local times
    CAMPUS_TIMEZONE = os.environ.get('CAMPUS_TIMEZONE', 'Africa/Johannesburg')

    # Business Rules Defaults
    ENFORCE_CAPACITY = _env_bool('ENFORCE_CAPACITY', False)
    MAX_RECURRENCE_OCCURRENCES = int(os.environ.get('MAX_RECURRENCE_OCCURRENCES', 366))
    LOCK_TIMEOUT_SECONDS = float(os.environ.get('LOCK_TIMEOUT_SECONDS', 5))

    # Notifications
    NOTIFY_WEBHOOK_URL = os.environ.get('NOTIFY_WEBHOOK_URL')
    NOTIFY_TIMEOUT_SECONDS = float(os.environ.get('NOTIFY_TIMEOUT_SECONDS', 5))


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'testing-secret'
    CAMPUS_TIMEZONE = 'Africa/Johannesburg'
    ENFORCE_CAPACITY = False
    NOTIFY_WEBHOOK_URL = None
    LOCK_TIMEOUT_SECONDS = 1


class ProductionConfig(Config):
    DEBUG = False
    # In prod, rely on env vars strictly
