"""
Ownership checks shared by the plant, reminder and health services.

Every id-scoped lookup joins back to user_plants.user_id and filters out
soft-deleted plants. A row that does not exist and a row owned by someone
else are indistinguishable here: both come back as None.
"""

from __future__ import annotations
from typing import Optional

from garden_tracker.models import HealthRemark, Reminder, UserPlant


def owned_plants_query(user_id: int):
    """Base query over a user's visible (not soft-deleted) plants."""
    return UserPlant.query.filter(
        UserPlant.user_id == user_id,
        UserPlant.is_deleted.is_(False),
    )


def get_owned_plant(plant_id: int, user_id: int) -> Optional[UserPlant]:
    """Return the plant if it exists, belongs to user_id and is not deleted."""
    return owned_plants_query(user_id).filter(UserPlant.id == plant_id).first()


def get_owned_reminder(reminder_id: int, user_id: int) -> Optional[Reminder]:
    """
    Return a reminder whose plant belongs to user_id and is not deleted.

    The reminder's own is_active flag is not checked: completing or deleting
    an inactive reminder is still an owner-scoped operation.
    """
    return (
        Reminder.query
        .join(UserPlant, Reminder.user_plant_id == UserPlant.id)
        .filter(
            Reminder.id == reminder_id,
            UserPlant.user_id == user_id,
            UserPlant.is_deleted.is_(False),
        )
        .first()
    )


def get_owned_remark(remark_id: int, user_id: int) -> Optional[HealthRemark]:
    """Return a health remark whose plant belongs to user_id and is not deleted."""
    return (
        HealthRemark.query
        .join(UserPlant, HealthRemark.user_plant_id == UserPlant.id)
        .filter(
            HealthRemark.id == remark_id,
            UserPlant.user_id == user_id,
            UserPlant.is_deleted.is_(False),
        )
        .first()
    )
