"""
Centralized configuration for all environments.

Select a config by setting:
  APP_CONFIG=garden_tracker.config.DevConfig      # local dev
  APP_CONFIG=garden_tracker.config.ProdConfig     # production (default if unset)
  APP_CONFIG=garden_tracker.config.TestConfig     # pytest

Notes:
- SECRET_KEY is read from FLASK_SECRET_KEY
- DATABASE_URL accepts any SQLAlchemy URL (SQLite by default)
- Rate limiting uses Flask-Limiter v3 keys (RATELIMIT_*).
"""

from __future__ import annotations
import os
from datetime import timedelta

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


class BaseConfig:
    # Secrets & basics
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "")
    DEBUG = False
    TESTING = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Session configuration
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)
    SESSION_COOKIE_SECURE = True  # Only send cookies over HTTPS (overridden in dev)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL", "sqlite:///" + os.path.join(PACKAGE_DIR, "..", "garden_tracker.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Flask-Limiter v3
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "true").lower() == "true"
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "100 per 15 minutes")
    SIGNIN_RATE_LIMIT = "5 per 15 minutes"
    SIGNUP_RATE_LIMIT = "5 per minute; 20 per hour"
    UPLOAD_RATE_LIMIT = "20 per hour"  # Rate limit for plant photo uploads

    # File uploads
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(PACKAGE_DIR, "static", "uploads"))
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # hard request cap; photos are limited to 5MB

    # Reminders
    UPCOMING_REMINDER_DAYS = 7
    MAX_UPCOMING_REMINDER_DAYS = 365

    # Misc
    PREFERRED_URL_SCHEME = os.getenv("PREFERRED_URL_SCHEME", "https")


class ProdConfig(BaseConfig):
    """Production settings (selected by default if APP_CONFIG is unset)."""
    pass


class DevConfig(BaseConfig):
    """Developer-friendly settings."""
    DEBUG = True
    LOG_LEVEL = "DEBUG"
    PREFERRED_URL_SCHEME = "http"
    # Allow cookies over HTTP in dev
    SESSION_COOKIE_SECURE = False
    SIGNIN_RATE_LIMIT = "100 per minute"


class TestConfig(BaseConfig):
    """CI/pytest settings."""
    TESTING = True
    DEBUG = True
    SECRET_KEY = "test-secret-key-for-testing-only"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SESSION_COOKIE_SECURE = False
    # Usually disable the limiter in tests to avoid flakiness
    RATELIMIT_ENABLED = False
