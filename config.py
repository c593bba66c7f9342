"""Configuration module for the POS application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name, default):
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '0') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')

    # Storage - a single local database holding one JSON document per key
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///pos.db')
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = _env_bool('SQLALCHEMY_ECHO', 'false')

    # Reporting
    LOW_STOCK_THRESHOLD = int(os.getenv('LOW_STOCK_THRESHOLD', '10'))
    TOP_PRODUCTS_LIMIT = int(os.getenv('TOP_PRODUCTS_LIMIT', '5'))

    # Receipts
    RECEIPT_PREFIX = os.getenv('RECEIPT_PREFIX', 'RCP')

    # Tax defaults (used until settings are saved for the first time)
    DEFAULT_TAX_ENABLED = _env_bool('DEFAULT_TAX_ENABLED', 'true')
    DEFAULT_TAX_RATE = os.getenv('DEFAULT_TAX_RATE', '20')
    DEFAULT_TAX_NAME = os.getenv('DEFAULT_TAX_NAME', 'Tax')

    # Business Information (for receipts)
    BUSINESS_NAME = os.getenv('BUSINESS_NAME', 'My Store')
    BUSINESS_ADDRESS = os.getenv('BUSINESS_ADDRESS', '')
    BUSINESS_PHONE = os.getenv('BUSINESS_PHONE', '')
    BUSINESS_EMAIL = os.getenv('BUSINESS_EMAIL', '')

    # Error tracking (production only)
    SENTRY_DSN = os.getenv('SENTRY_DSN')


class TestingConfig(Config):
    """Configuration used by the test suite."""

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ECHO = False
    DEFAULT_TAX_ENABLED = True
    DEFAULT_TAX_RATE = '20'
    DEFAULT_TAX_NAME = 'Tax'
    BUSINESS_NAME = 'Test Store'
    SENTRY_DSN = None
