"""
Plain web routes: stored photo files, CSRF token issue and a liveness check.
"""

from __future__ import annotations
from flask import Blueprint, jsonify, current_app, send_from_directory
from flask_wtf.csrf import generate_csrf

web_bp = Blueprint("web", __name__)


@web_bp.route("/uploads/<path:filename>")
def uploaded_file(filename: str):
    """Serve a stored plant photo. send_from_directory refuses paths outside the folder."""
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)


@web_bp.route("/csrf-token")
def csrf_token():
    """Issue a CSRF token; clients send it back in the X-CSRFToken header."""
    return jsonify({"csrfToken": generate_csrf()})


@web_bp.route("/healthz")
def healthz():
    return jsonify({"status": "ok"})
