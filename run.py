"""
Local development entry point.

Creates the Flask app via create_app(), makes sure the schema exists and
runs the dev server. Keeps startup simple and avoids embedding app logic here.
"""

import os

from garden_tracker import create_app
from garden_tracker.extensions import db

os.environ.setdefault("APP_CONFIG", "garden_tracker.config.DevConfig")

app = create_app()

if __name__ == "__main__":
    with app.app_context():
        db.create_all()
    # For local dev only; use a proper WSGI server in production.
    app.run(debug=True)
