"""
Reminder service for plant care scheduling.

Each plant has at most one active reminder per type (watering, fertilizing,
harvesting, other). A reminder is due on next_reminder; completing it
records today's date and schedules the next occurrence interval_days from
today, not from the missed due date. Due dates are computed on read; there
is no background scheduler.

The find-then-update-or-insert in save_reminder is not isolated from a
concurrent save of the same type. Two simultaneous first saves can both
insert; the next save overwrites the first active row and leaves the other.
"""

from __future__ import annotations
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from garden_tracker.extensions import db
from garden_tracker.models import PlantType, Reminder, UserPlant
from garden_tracker.services.access import get_owned_plant, get_owned_reminder
from garden_tracker.utils.errors import log_info

DEFAULT_UPCOMING_DAYS = 7

# Reminder type display names
REMINDER_TYPE_NAMES = {
    'watering': 'Watering',
    'fertilizing': 'Fertilizing',
    'harvesting': 'Harvesting',
    'other': 'Other Care',
}


def _today() -> date:
    return date.today()


def _commit() -> None:
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


def next_due_date(from_date: date, interval_days: int) -> date:
    """Calendar-day arithmetic: from_date + interval_days."""
    return from_date + timedelta(days=interval_days)


def get_plant_reminders(plant_id: int, user_id: int) -> Optional[List[Dict[str, Any]]]:
    """
    Get active reminders for one plant, soonest due first.

    Args:
        plant_id: Plant's id
        user_id: User's id (for authorization)

    Returns:
        List of reminder dictionaries, or None if the plant is not found/owned
    """
    if get_owned_plant(plant_id, user_id) is None:
        return None

    reminders = (
        Reminder.query
        .filter(Reminder.user_plant_id == plant_id, Reminder.is_active.is_(True))
        .order_by(Reminder.next_reminder.asc(), Reminder.id.asc())
        .all()
    )
    return [reminder.to_dict() for reminder in reminders]


def save_reminder(
    user_id: int,
    plant_id: int,
    reminder_type: str,
    interval_days: int,
    start_date: date,
    notes: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Create or overwrite the active reminder of a given type for a plant.

    next_reminder = start_date + interval_days. If an active reminder of this
    type exists, its interval, start date, next date and notes are replaced;
    otherwise a new active reminder is inserted.

    Args:
        user_id: User's id (for authorization)
        plant_id: Plant's id
        reminder_type: One of REMINDER_TYPES
        interval_days: Days between occurrences (>= 1, validated upstream)
        start_date: First day the schedule counts from
        notes: Optional notes

    Returns:
        Reminder dictionary, or None if the plant is not found/owned
    """
    if get_owned_plant(plant_id, user_id) is None:
        return None

    next_reminder = next_due_date(start_date, interval_days)

    existing = (
        Reminder.query
        .filter(
            Reminder.user_plant_id == plant_id,
            Reminder.reminder_type == reminder_type,
            Reminder.is_active.is_(True),
        )
        .order_by(Reminder.id.asc())
        .first()
    )

    if existing is not None:
        reminder = existing
        reminder.interval_days = interval_days
        reminder.start_date = start_date
        reminder.next_reminder = next_reminder
        reminder.notes = notes or None
    else:
        reminder = Reminder(
            user_plant_id=plant_id,
            reminder_type=reminder_type,
            interval_days=interval_days,
            start_date=start_date,
            next_reminder=next_reminder,
            notes=notes or None,
            is_active=True,
        )
        db.session.add(reminder)

    _commit()
    log_info(f"Reminder {reminder.id} ({reminder_type}) saved for plant {plant_id}")
    return reminder.to_dict()


def complete_reminder(reminder_id: int, user_id: int) -> Optional[Dict[str, Any]]:
    """
    Mark a reminder done today and schedule the next occurrence.

    last_completed = today, next_reminder = today + interval_days. A late
    completion does not catch up on missed occurrences.

    Returns:
        Updated reminder dictionary, or None if not found/not owned
    """
    reminder = get_owned_reminder(reminder_id, user_id)
    if reminder is None:
        return None

    today = _today()
    reminder.last_completed = today
    reminder.next_reminder = next_due_date(today, reminder.interval_days)
    _commit()
    return reminder.to_dict()


def delete_reminder(reminder_id: int, user_id: int) -> bool:
    """
    Soft-delete a reminder (is_active = False).

    next_reminder and last_completed are kept as history.

    Returns:
        True if successful, False if not found/not owned
    """
    reminder = get_owned_reminder(reminder_id, user_id)
    if reminder is None:
        return False

    reminder.is_active = False
    _commit()
    return True


def get_upcoming_reminders(user_id: int, days: int = DEFAULT_UPCOMING_DAYS) -> List[Dict[str, Any]]:
    """
    Get active reminders across all of a user's plants due within
    [today, today + days], both ends included, soonest first.

    Overdue reminders (next_reminder before today) are not included.

    Args:
        user_id: User's id
        days: Window length in days

    Returns:
        List of reminder dictionaries with plantId, plantName, plantSpecies
    """
    today = _today()
    window_end = today + timedelta(days=days)

    rows = (
        db.session.query(Reminder, UserPlant.id, PlantType.cultivar, PlantType.species)
        .join(UserPlant, Reminder.user_plant_id == UserPlant.id)
        .join(PlantType, UserPlant.plant_type_id == PlantType.id)
        .filter(
            UserPlant.user_id == user_id,
            UserPlant.is_deleted.is_(False),
            Reminder.is_active.is_(True),
            Reminder.next_reminder >= today,
            Reminder.next_reminder <= window_end,
        )
        .order_by(Reminder.next_reminder.asc(), Reminder.id.asc())
        .all()
    )

    upcoming = []
    for reminder, plant_id, cultivar, species in rows:
        upcoming.append({
            "id": reminder.id,
            "type": reminder.reminder_type,
            "nextReminder": reminder.next_reminder.isoformat(),
            "intervalDays": reminder.interval_days,
            "notes": reminder.notes,
            "plantId": plant_id,
            "plantName": cultivar,
            "plantSpecies": species,
        })
    return upcoming
