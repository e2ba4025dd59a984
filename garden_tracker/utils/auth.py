"""
Authentication utilities and decorators for route protection.

Provides:
- @require_auth: Decorator to require an authenticated user (401 JSON otherwise)
- Session management helpers
"""

from __future__ import annotations
from functools import wraps
from typing import Optional, Dict, Any
from flask import session, g, jsonify
from garden_tracker.services import accounts


# ============================================================================
# Session Management
# ============================================================================

SESSION_USER_KEY = "user"


def get_current_user() -> Optional[Dict[str, Any]]:
    """
    Get currently logged-in user from session.

    The user row must still exist; a session pointing at a removed account
    is cleared.

    Returns:
        User dict with id and username, or None if not logged in
    """
    # Check if user already loaded in request context
    if "user" in g:
        return g.user

    session_user = session.get(SESSION_USER_KEY)
    if not session_user or session_user.get("id") is None:
        g.user = None
        return None

    user = accounts.get_user(session_user["id"])
    if not user:
        clear_session()
        g.user = None
        return None

    g.user = user
    return user


def get_current_user_id() -> Optional[int]:
    """
    Get current user's ID.

    Returns:
        User id or None if not logged in
    """
    user = get_current_user()
    return user.get("id") if user else None


def set_session(user: Dict[str, Any]) -> None:
    """
    Store user session data.

    Security: Clears the previous session contents to prevent session fixation.

    Args:
        user: User dict from the accounts service
    """
    session.clear()
    session.modified = True

    session[SESSION_USER_KEY] = {
        "id": user.get("id"),
        "username": user.get("username"),
    }
    session.permanent = True  # Use permanent session (configurable lifetime)
    g.user = user


def clear_session() -> None:
    """Clear user session data."""
    session.pop(SESSION_USER_KEY, None)
    g.pop("user", None)


def is_authenticated() -> bool:
    """Check if user is currently authenticated."""
    return get_current_user() is not None


# ============================================================================
# Decorators
# ============================================================================

def require_auth(f):
    """
    Decorator to require authentication for a route.

    Anonymous requests get a 401 JSON response.

    Usage:
        @bp.route('/api/plants')
        @require_auth
        def list_plants():
            user_id = get_current_user_id()
            ...
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_authenticated():
            return jsonify({"success": False, "error": "Unauthorized"}), 401

        return f(*args, **kwargs)

    return decorated_function
