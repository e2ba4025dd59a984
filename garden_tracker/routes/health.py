"""
Plant health log routes.

Remarks are listed newest first. The latest-remark endpoint tells apart a
plant that cannot be found from a plant that has no remarks yet.
"""

from __future__ import annotations
from flask import Blueprint, jsonify
from garden_tracker.utils.auth import require_auth, get_current_user_id
from garden_tracker.utils.errors import error_response, sanitize_error
from garden_tracker.utils.validation import get_request_data, validate_health_payload
from garden_tracker.services import health as health_service
from garden_tracker.services.health import LatestRemark

health_bp = Blueprint("health", __name__, url_prefix="/api")

PLANT_NOT_FOUND = "Plant not found"
REMARK_NOT_FOUND = "Health remark not found"
NO_REMARKS = "No health remarks found for this plant"


@health_bp.route("/plants/<int:plant_id>/health", methods=["GET"])
@require_auth
def index(plant_id: int):
    user_id = get_current_user_id()
    try:
        remarks = health_service.get_health_remarks(plant_id, user_id)
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error fetching health remarks"), 500)

    if remarks is None:
        return error_response(PLANT_NOT_FOUND, 404)

    return jsonify({"success": True, "remarks": remarks})


@health_bp.route("/plants/<int:plant_id>/health", methods=["POST"])
@require_auth
def add(plant_id: int):
    """Append a remark. Body: {"remarks": "..."}"""
    user_id = get_current_user_id()

    payload, errors = validate_health_payload(get_request_data())
    if errors:
        return error_response("Missing or invalid fields", 400, errors)

    try:
        remark = health_service.add_health_remark(plant_id, user_id, payload["remarks"])
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error adding health remark"), 500)

    if remark is None:
        return error_response(PLANT_NOT_FOUND, 404)

    return jsonify({"success": True, "remark": remark}), 201


@health_bp.route("/plants/<int:plant_id>/health/latest", methods=["GET"])
@require_auth
def latest(plant_id: int):
    user_id = get_current_user_id()
    try:
        outcome, remark = health_service.get_latest_health_remark(plant_id, user_id)
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error fetching latest health remark"), 500)

    if outcome is LatestRemark.PLANT_NOT_FOUND:
        return error_response(PLANT_NOT_FOUND, 404)
    if outcome is LatestRemark.NO_REMARKS:
        return error_response(NO_REMARKS, 404)

    return jsonify({"success": True, "remark": remark})


@health_bp.route("/health/<int:remark_id>", methods=["PUT"])
@require_auth
def edit(remark_id: int):
    """Replace a remark's text; its timestamp is kept."""
    user_id = get_current_user_id()

    payload, errors = validate_health_payload(get_request_data())
    if errors:
        return error_response("Missing or invalid fields", 400, errors)

    try:
        remark = health_service.update_health_remark(remark_id, user_id, payload["remarks"])
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error updating health remark"), 500)

    if remark is None:
        return error_response(REMARK_NOT_FOUND, 404)

    return jsonify({"success": True, "remark": remark})


@health_bp.route("/health/<int:remark_id>", methods=["DELETE"])
@require_auth
def delete(remark_id: int):
    user_id = get_current_user_id()
    try:
        deleted = health_service.delete_health_remark(remark_id, user_id)
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error deleting health remark"), 500)

    if not deleted:
        return error_response(REMARK_NOT_FOUND, 404)

    return jsonify({"success": True, "message": "Health remark deleted"})
