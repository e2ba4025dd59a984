"""
Plant registry API.

Handles:
- Plant listing (newest planting first)
- Adding plants with optional photo upload (multipart form)
- Viewing/updating individual plants
- Soft deletion

Missing plants and plants owned by someone else both answer 404.
"""

from __future__ import annotations
from flask import Blueprint, jsonify, request, current_app
from garden_tracker.utils.auth import require_auth, get_current_user_id
from garden_tracker.utils.errors import error_response, sanitize_error
from garden_tracker.utils.photo_handler import handle_photo_upload, remove_stored_photo
from garden_tracker.utils.validation import validate_plant_form
from garden_tracker.services import plants as plant_service
from garden_tracker.extensions import limiter


plants_bp = Blueprint("plants", __name__, url_prefix="/api/plants")

NOT_FOUND_MESSAGE = "Plant not found or unauthorized"


@plants_bp.route("", methods=["GET"])
@require_auth
def index():
    """List the user's plants."""
    user_id = get_current_user_id()
    try:
        plants = plant_service.get_user_plants(user_id)
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error fetching plants"), 500)

    return jsonify({"success": True, "count": len(plants), "plants": plants})


@plants_bp.route("/<int:plant_id>", methods=["GET"])
@require_auth
def view(plant_id: int):
    """View a single plant."""
    user_id = get_current_user_id()
    try:
        plant = plant_service.get_plant_by_id(plant_id, user_id)
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error fetching plant details"), 500)

    if not plant:
        return error_response(NOT_FOUND_MESSAGE, 404)

    return jsonify({"success": True, "plant": plant})


@plants_bp.route("", methods=["POST"])
@require_auth
@limiter.limit(lambda: current_app.config["UPLOAD_RATE_LIMIT"])
def add():
    """Add a new plant to the user's collection."""
    user_id = get_current_user_id()

    payload, errors = validate_plant_form(request.form)
    if errors:
        return error_response("Missing or invalid fields", 400, errors)

    # Raises AppError(400) on a rejected file
    photo_url = handle_photo_upload(request.files.get("photo"))

    try:
        plant = plant_service.create_plant(user_id, photo_url=photo_url, **payload)
    except Exception as e:
        remove_stored_photo(photo_url)
        return error_response(sanitize_error(e, "database", "Error adding plant"), 500)

    return jsonify({
        "success": True,
        "message": "Plant added successfully",
        "plant": plant,
    }), 201


@plants_bp.route("/<int:plant_id>", methods=["PUT"])
@require_auth
@limiter.limit(lambda: current_app.config["UPLOAD_RATE_LIMIT"])
def edit(plant_id: int):
    """Update a plant. Omitting the photo keeps the current one."""
    user_id = get_current_user_id()

    payload, errors = validate_plant_form(request.form)
    if errors:
        return error_response("Missing or invalid fields", 400, errors)

    try:
        existing = plant_service.get_plant_by_id(plant_id, user_id)
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error fetching plant details"), 500)

    # Nothing is written to disk for a plant the user cannot edit
    if not existing:
        return error_response(NOT_FOUND_MESSAGE, 404)

    photo_url = handle_photo_upload(request.files.get("photo"))

    try:
        plant = plant_service.update_plant(plant_id, user_id, photo_url=photo_url, **payload)
    except Exception as e:
        remove_stored_photo(photo_url)
        return error_response(sanitize_error(e, "database", "Error updating plant"), 500)

    if not plant:
        remove_stored_photo(photo_url)
        return error_response(NOT_FOUND_MESSAGE, 404)

    # The replaced file is no longer referenced
    if photo_url and existing["photoUrl"] != photo_url:
        remove_stored_photo(existing["photoUrl"])

    return jsonify({
        "success": True,
        "message": "Plant updated successfully",
        "plant": plant,
    })


@plants_bp.route("/<int:plant_id>", methods=["DELETE"])
@require_auth
def delete(plant_id: int):
    """Remove a plant from the user's collection (soft delete)."""
    user_id = get_current_user_id()
    try:
        deleted = plant_service.delete_plant(plant_id, user_id)
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error deleting plant"), 500)

    if not deleted:
        return error_response(NOT_FOUND_MESSAGE, 404)

    return jsonify({"success": True, "message": "Plant deleted successfully"})
