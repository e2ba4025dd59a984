"""
Input validation and normalization.

Each validator takes the raw request data (form or JSON) and returns
(payload, errors). errors maps field names to messages and is empty when
the input is valid; the payload then holds typed values ready for the
service layer.
"""

from __future__ import annotations
import re
from datetime import date, timedelta
from typing import Any, Dict, Mapping, Optional, Tuple

from flask import request

from garden_tracker.models import REMINDER_TYPES

MAX_NAME_LEN = 100
MAX_NOTES_LEN = 2000
MAX_REMARKS_LEN = 5000
MIN_USERNAME_LEN = 3
MAX_USERNAME_LEN = 64
MIN_PASSWORD_LEN = 8
MAX_INTERVAL_DAYS = 365
MAX_CROPPING_DAYS = 3650
# Longer digit strings are rejected before int() sees them
MAX_INT_DIGITS = 9

Errors = Dict[str, str]

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_INT_RE = re.compile(r"\s*-?\d{1,%d}\s*" % MAX_INT_DIGITS)


def parse_iso_date(value: Any) -> Optional[date]:
    """Parse YYYY-MM-DD; returns None for anything else."""
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def parse_int(value: Any) -> Optional[int]:
    """Accept ints and digit strings; reject bools, floats and junk."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_RE.fullmatch(value):
        return int(value)
    return None


def _clean_text(value: Any, max_len: int) -> str:
    """Strip, drop control characters and bound the length."""
    if not isinstance(value, str):
        return ""
    text = _CONTROL_CHARS.sub("", value).strip()
    return text[:max_len]


def validate_plant_form(form: Mapping[str, Any]) -> Tuple[Dict[str, Any], Errors]:
    """
    Validate add/update plant fields.

    Cultivar and species are passed on exactly as supplied: catalog matching
    is case- and whitespace-sensitive.
    """
    errors: Errors = {}

    cultivar = form.get("plant_cultivar")
    species = form.get("plant_species")
    for field, value in (("plant_cultivar", cultivar), ("plant_species", species)):
        if not isinstance(value, str) or not value.strip():
            errors[field] = "This field is required."
        elif len(value) > MAX_NAME_LEN:
            errors[field] = f"Must be at most {MAX_NAME_LEN} characters."

    planting_time = parse_iso_date(form.get("planting_time"))
    if planting_time is None:
        errors["planting_time"] = "A valid date (YYYY-MM-DD) is required."

    est_cropping = None
    raw_cropping = form.get("est_cropping")
    if raw_cropping not in (None, ""):
        est_cropping = parse_int(raw_cropping)
        if est_cropping is None or not 0 <= est_cropping <= MAX_CROPPING_DAYS:
            errors["est_cropping"] = f"Must be a whole number of days from 0 to {MAX_CROPPING_DAYS}."

    if errors:
        return {}, errors

    return {
        "cultivar": cultivar,
        "species": species,
        "planting_time": planting_time,
        "est_cropping_days": est_cropping,
    }, errors


def validate_reminder_payload(data: Mapping[str, Any]) -> Tuple[Dict[str, Any], Errors]:
    """Validate a save-reminder body: type, intervalDays, startDate, notes."""
    errors: Errors = {}

    reminder_type = data.get("type")
    if reminder_type not in REMINDER_TYPES:
        errors["type"] = f"Must be one of: {', '.join(REMINDER_TYPES)}."

    interval_days = parse_int(data.get("intervalDays"))
    if interval_days is None or not 1 <= interval_days <= MAX_INTERVAL_DAYS:
        errors["intervalDays"] = f"Must be a whole number of days from 1 to {MAX_INTERVAL_DAYS}."

    start_date = parse_iso_date(data.get("startDate"))
    if start_date is None:
        errors["startDate"] = "A valid date (YYYY-MM-DD) is required."
    elif start_date > date.max - timedelta(days=MAX_INTERVAL_DAYS):
        # The first due date must stay representable
        errors["startDate"] = "Date is too far in the future."

    notes = data.get("notes")
    if notes is not None and not isinstance(notes, str):
        errors["notes"] = "Must be text."

    if errors:
        return {}, errors

    return {
        "reminder_type": reminder_type,
        "interval_days": interval_days,
        "start_date": start_date,
        "notes": _clean_text(notes, MAX_NOTES_LEN) or None,
    }, errors


def validate_health_payload(data: Mapping[str, Any]) -> Tuple[Dict[str, Any], Errors]:
    """Validate a health remark body; remarks must be non-empty text."""
    remarks = _clean_text(data.get("remarks"), MAX_REMARKS_LEN)
    if not remarks:
        return {}, {"remarks": "Remarks are required."}
    return {"remarks": remarks}, {}


def validate_credentials(data: Mapping[str, Any], signup: bool = False) -> Tuple[Dict[str, Any], Errors]:
    """Validate username/password for sign-up (strict) or sign-in (presence only)."""
    errors: Errors = {}
    raw_username = data.get("username")
    username = raw_username.strip() if isinstance(raw_username, str) else ""
    password = data.get("password")
    if not isinstance(password, str):
        password = ""

    if signup:
        if len(username) < MIN_USERNAME_LEN or len(username) > MAX_USERNAME_LEN:
            errors["username"] = f"Must be {MIN_USERNAME_LEN}-{MAX_USERNAME_LEN} characters."
        if len(password) < MIN_PASSWORD_LEN:
            errors["password"] = f"Must be at least {MIN_PASSWORD_LEN} characters."
    else:
        if not username:
            errors["username"] = "Username is required."
        if not password:
            errors["password"] = "Password is required."

    if errors:
        return {}, errors
    return {"username": username, "password": password}, errors


def parse_window_days(value: Any, default: int, maximum: int) -> int:
    """Coerce the upcoming-window length; out-of-range or junk means default."""
    days = parse_int(value)
    if days is None or days < 1 or days > maximum:
        return default
    return days


def get_request_data() -> Mapping[str, Any]:
    """JSON body when one was sent, otherwise the submitted form."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form
