"""
WSGI entrypoint for production servers (gunicorn/uwsgi).

The server imports `app` from this module to obtain the Flask application
object created by the application factory. Run `flask --app garden_tracker
init-db` once before the first start.
"""

from garden_tracker import create_app

app = create_app()
