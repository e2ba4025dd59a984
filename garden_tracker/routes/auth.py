"""
Authentication routes for signup, signin, and logout.

Sessions are cookie-based (Flask session). Sign-up and sign-in are exempt
from CSRF since no session exists yet; both are rate limited.
"""

from __future__ import annotations
from flask import Blueprint, jsonify, current_app
from garden_tracker.utils.auth import require_auth, get_current_user, set_session, clear_session
from garden_tracker.utils.errors import error_response, log_security_event, sanitize_error
from garden_tracker.utils.validation import get_request_data, validate_credentials
from garden_tracker.services import accounts
from garden_tracker.extensions import limiter, csrf


auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/signup", methods=["POST"])
@csrf.exempt
@limiter.limit(lambda: current_app.config["SIGNUP_RATE_LIMIT"])  # Protect against bot signups
def signup():
    """
    Register a new account.

    Body: {"username", "password"}
    Returns 201 with the user, 409 if the username is taken.
    """
    payload, errors = validate_credentials(get_request_data(), signup=True)
    if errors:
        return error_response("Missing or invalid fields", 400, errors)

    try:
        user, error = accounts.create_user(payload["username"], payload["password"])
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error creating user"), 500)

    if error:
        return error_response(error, 409)

    log_security_event("USER_CREATED", username=user["username"])
    return jsonify({"success": True, "message": "User created successfully", "user": user}), 201


@auth_bp.route("/signin", methods=["POST"])
@csrf.exempt
@limiter.limit(lambda: current_app.config["SIGNIN_RATE_LIMIT"])
def signin():
    """
    Sign in with username and password.

    Unknown usernames and wrong passwords get the same 401 answer.
    """
    payload, errors = validate_credentials(get_request_data())
    if errors:
        return error_response("Missing or invalid fields", 400, errors)

    try:
        user = accounts.authenticate(payload["username"], payload["password"])
    except Exception as e:
        return error_response(sanitize_error(e, "auth", "Error during sign-in"), 500)

    if not user:
        log_security_event("FAILED_LOGIN", username=payload["username"])
        return error_response("Invalid credentials", 401)

    # Regenerates the session before storing the user
    set_session(user)
    log_security_event("SUCCESSFUL_LOGIN", username=user["username"])
    return jsonify({"success": True, "message": "Signed in successfully", "user": user})


@auth_bp.route("/logout", methods=["POST"])
@require_auth
def logout():
    """Log out current user and clear session."""
    log_security_event("LOGOUT")
    clear_session()
    return jsonify({"success": True, "message": "Logged out successfully"})


@auth_bp.route("/me")
@require_auth
def me():
    """Current user as JSON (for client-side use)."""
    return jsonify({"success": True, "user": get_current_user()})
