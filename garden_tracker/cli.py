"""
Flask CLI commands for one-off administrative tasks.

Usage:
    flask --app garden_tracker init-db           # Create missing tables
    flask --app garden_tracker init-db --drop    # Drop everything first
"""

from __future__ import annotations

import click
from flask.cli import with_appcontext


@click.command("init-db")
@click.option("--drop", is_flag=True, default=False,
              help="Drop all tables before creating them (destroys data).")
@with_appcontext
def init_db_command(drop: bool) -> None:
    """Create the database schema."""
    from garden_tracker.extensions import db
    from garden_tracker import models  # noqa: F401  (registers the tables)

    if drop:
        click.confirm("This deletes every user, plant, reminder and remark. Continue?", abort=True)
        db.drop_all()
        click.echo("Dropped all tables.")

    db.create_all()
    click.echo("Database initialized.")
