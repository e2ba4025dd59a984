# tests/conftest.py
"""
Test configuration and shared fixtures.

Provides the Flask app (TestConfig, in-memory SQLite), test client, an
application context for service-level tests, and small factories for
users, plants and logged-in sessions.
"""

import os
import sys
from datetime import date
from io import BytesIO

import pytest
from PIL import Image

# Add the project root to sys.path
PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture
def app(monkeypatch, tmp_path):
    """Create and configure a Flask app instance for testing."""
    monkeypatch.setenv("APP_CONFIG", "garden_tracker.config.TestConfig")

    from garden_tracker import create_app
    from garden_tracker.extensions import db

    app = create_app({
        "TESTING": True,
        "WTF_CSRF_ENABLED": False,  # Disable CSRF for tests
        "RATELIMIT_ENABLED": False,  # Disable rate limiting for tests
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
    })

    with app.app_context():
        db.create_all()

    # No context is left pushed: each test client request gets a fresh `g`
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client for the Flask app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create a test CLI runner for the Flask app."""
    return app.test_cli_runner()


@pytest.fixture
def ctx(app):
    """Application context for calling services directly."""
    with app.app_context():
        yield


@pytest.fixture
def make_user(app):
    """Factory: create a user and return its id."""
    from garden_tracker.extensions import db
    from garden_tracker.models import User

    def _make(username="joonas", password="correct-horse-1"):
        with app.app_context():
            user = User(username=username)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make


@pytest.fixture
def make_plant(app):
    """Factory: create a plant through the registry service and return its id."""
    from garden_tracker.services import plants as plant_service

    def _make(user_id, cultivar="Tomato", species="Solanum lycopersicum",
              planting_time=date(2024, 5, 1), est_cropping_days=80, photo_url=None):
        with app.app_context():
            plant = plant_service.create_plant(
                user_id, cultivar, species, planting_time, est_cropping_days, photo_url
            )
            return plant["id"]

    return _make


@pytest.fixture
def login(client):
    """Log a user in by writing the session directly."""
    def _login(user_id, username="joonas"):
        with client.session_transaction() as sess:
            sess["user"] = {"id": user_id, "username": username}

    return _login


@pytest.fixture
def png_bytes():
    """A small but complete PNG image."""
    buf = BytesIO()
    Image.new("RGB", (8, 8), color=(34, 139, 34)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def sample_plant_form():
    """Form fields accepted by add/update plant."""
    return {
        "plant_cultivar": "Tomato",
        "plant_species": "Solanum lycopersicum",
        "planting_time": "2024-05-01",
        "est_cropping": "80",
    }
