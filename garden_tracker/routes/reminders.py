"""
Reminder routes for plant care scheduling.

Handles listing, saving, completing and deleting reminders, plus the
upcoming-reminders window across all of a user's plants.
"""

from __future__ import annotations
from flask import Blueprint, jsonify, request, current_app
from garden_tracker.utils.auth import require_auth, get_current_user_id
from garden_tracker.utils.errors import error_response, sanitize_error
from garden_tracker.utils.validation import (
    get_request_data,
    parse_window_days,
    validate_reminder_payload,
)
from garden_tracker.services import reminders as reminder_service

reminders_bp = Blueprint("reminders", __name__, url_prefix="/api")

PLANT_NOT_FOUND = "Plant not found or unauthorized"
REMINDER_NOT_FOUND = "Reminder not found or unauthorized"


@reminders_bp.route("/plants/<int:plant_id>/reminders", methods=["GET"])
@require_auth
def plant_reminders(plant_id: int):
    """Active reminders for one plant, soonest due first."""
    user_id = get_current_user_id()
    try:
        reminders = reminder_service.get_plant_reminders(plant_id, user_id)
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error fetching reminders"), 500)

    if reminders is None:
        return error_response(PLANT_NOT_FOUND, 404)

    return jsonify({"success": True, "reminders": reminders})


@reminders_bp.route("/plants/<int:plant_id>/reminders", methods=["POST"])
@require_auth
def save(plant_id: int):
    """
    Create or overwrite the plant's active reminder of the given type.

    Body: {"type", "intervalDays", "startDate", "notes"?}
    """
    user_id = get_current_user_id()

    payload, errors = validate_reminder_payload(get_request_data())
    if errors:
        return error_response("Missing or invalid fields", 400, errors)

    try:
        reminder = reminder_service.save_reminder(user_id=user_id, plant_id=plant_id, **payload)
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error saving reminder"), 500)

    if reminder is None:
        return error_response(PLANT_NOT_FOUND, 404)

    return jsonify({
        "success": True,
        "message": f"{reminder_service.REMINDER_TYPE_NAMES[payload['reminder_type']]} reminder saved",
        "reminder": reminder,
    }), 201


@reminders_bp.route("/reminders/<int:reminder_id>/complete", methods=["PUT"])
@require_auth
def complete(reminder_id: int):
    """Mark a reminder done today; the next one is due interval days from today."""
    user_id = get_current_user_id()
    try:
        reminder = reminder_service.complete_reminder(reminder_id, user_id)
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error completing reminder"), 500)

    if reminder is None:
        return error_response(REMINDER_NOT_FOUND, 404)

    return jsonify({
        "success": True,
        "message": "Reminder marked as complete",
        "reminder": reminder,
    })


@reminders_bp.route("/reminders/<int:reminder_id>", methods=["DELETE"])
@require_auth
def delete(reminder_id: int):
    """Deactivate a reminder."""
    user_id = get_current_user_id()
    try:
        deleted = reminder_service.delete_reminder(reminder_id, user_id)
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error deleting reminder"), 500)

    if not deleted:
        return error_response(REMINDER_NOT_FOUND, 404)

    return jsonify({"success": True, "message": "Reminder deleted"})


@reminders_bp.route("/reminders/upcoming", methods=["GET"])
@require_auth
def upcoming():
    """
    Reminders due from today through today + days (both included).

    Query params:
        days: Window length, 1..MAX_UPCOMING_REMINDER_DAYS. Anything else
              falls back to UPCOMING_REMINDER_DAYS.
    """
    user_id = get_current_user_id()
    days = parse_window_days(
        request.args.get("days"),
        current_app.config.get("UPCOMING_REMINDER_DAYS", reminder_service.DEFAULT_UPCOMING_DAYS),
        current_app.config.get("MAX_UPCOMING_REMINDER_DAYS", 365),
    )

    try:
        reminders = reminder_service.get_upcoming_reminders(user_id, days=days)
    except Exception as e:
        return error_response(sanitize_error(e, "database", "Error fetching upcoming reminders"), 500)

    return jsonify({"success": True, "days": days, "reminders": reminders})
