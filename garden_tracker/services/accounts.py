"""
Account service: registration and credential checks.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from garden_tracker.extensions import db
from garden_tracker.models import User

logger = logging.getLogger(__name__)


def get_user(user_id: int) -> Optional[Dict[str, Any]]:
    user = db.session.get(User, user_id)
    return user.to_dict() if user else None


def create_user(username: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Register a new account.

    Returns:
        (user_dict, None) on success, (None, "Username already exists") when
        the username is taken
    """
    if User.query.filter_by(username=username).first() is not None:
        return None, "Username already exists"

    user = User(username=username)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race against a concurrent sign-up with the same name
        logger.warning("Concurrent sign-up collided on username")
        db.session.rollback()
        return None, "Username already exists"
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return user.to_dict(), None


def authenticate(username: str, password: str) -> Optional[Dict[str, Any]]:
    """Return the user dict when username and password match, else None."""
    user = User.query.filter_by(username=username).first()
    if user is None or not user.check_password(password):
        return None
    return user.to_dict()
