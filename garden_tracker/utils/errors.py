"""
Error handling and logging helpers.

Provides:
- AppError: operational error with an HTTP status, raised from request code
- sanitize_error(): log the real cause server-side, return a generic message
- log_info()/log_error(): log through current_app.logger when an app context
  exists, otherwise through the module logger
- log_security_event(): structured audit line for auth events
- register_error_handlers(): JSON error responses for the whole app
"""

from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import Flask, current_app, has_app_context, has_request_context, jsonify, request, session
from flask_wtf.csrf import CSRFError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)

# Messages safe to show to clients. Details stay in the server log.
GENERIC_MESSAGES = {
    "database": "A database error occurred. Please try again later.",
    "upload": "Photo upload failed.",
    "auth": "Authentication failed.",
    "general": "Something went wrong!",
}


class AppError(Exception):
    """Operational error that maps to a client-visible message and status."""

    def __init__(self, message: str, status_code: int = 400, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors


def log_info(message: str) -> None:
    if has_app_context():
        current_app.logger.info(message)
    else:
        logger.info(message)


def log_error(message: str) -> None:
    if has_app_context():
        current_app.logger.error(message)
    else:
        logger.error(message)


def sanitize_error(error: BaseException, category: str = "general", context: str = "") -> str:
    """
    Log an unexpected error with its cause and return a client-safe message.

    Args:
        error: The exception that was caught
        category: Key into GENERIC_MESSAGES
        context: Short description of the failed operation for the log

    Returns:
        Generic message suitable for a JSON response
    """
    prefix = f"{context}: " if context else ""
    if has_app_context():
        current_app.logger.exception(f"{prefix}{type(error).__name__}: {error}")
    else:
        logger.error(f"{prefix}{type(error).__name__}: {error}")
    return GENERIC_MESSAGES.get(category, GENERIC_MESSAGES["general"])


def log_security_event(event: str, **details: Any) -> None:
    """Log a security-relevant event (sign-in, sign-up, logout)."""
    entry: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "details": details,
    }
    if has_request_context():
        user = session.get("user") or {}
        entry.update({
            "ip": request.remote_addr,
            "user_id": user.get("id", "unauthenticated"),
            "path": request.path,
            "method": request.method,
        })
    log_info(f"SECURITY {entry}")


def error_response(message: str, status_code: int, errors: Optional[Dict[str, str]] = None):
    body: Dict[str, Any] = {"success": False, "error": message}
    if errors:
        body["errors"] = errors
    return jsonify(body), status_code


def register_error_handlers(app: Flask) -> None:
    """Answer every error with the JSON envelope used by the API."""

    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        return error_response(err.message, err.status_code, err.errors)

    @app.errorhandler(CSRFError)
    def handle_csrf_error(err: CSRFError):
        return error_response("Invalid or missing CSRF token", 400)

    @app.errorhandler(429)
    def handle_rate_limit(err):
        return error_response("Too many requests, please try again later", 429)

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return error_response(err.description or err.name, err.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        message = sanitize_error(err, "general", f"Unhandled error on {request.method} {request.path}")
        return error_response(message, 500)
