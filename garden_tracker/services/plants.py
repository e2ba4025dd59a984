"""
User plant registry.

Handles listing, reading, creating, updating and soft-deleting a user's
plants. Creation and update resolve the catalog entry and write the plant
in a single transaction; any database error rolls the whole unit back
before it propagates.
"""

from __future__ import annotations
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from garden_tracker.extensions import db
from garden_tracker.models import UserPlant
from garden_tracker.services import catalog
from garden_tracker.services.access import get_owned_plant, owned_plants_query
from garden_tracker.utils.errors import log_info

# One retry covers losing the catalog insert race to a concurrent request.
_CATALOG_RACE_ATTEMPTS = 2


def get_user_plants(user_id: int) -> List[Dict[str, Any]]:
    """
    Get all visible plants for a user, most recently planted first.

    Args:
        user_id: Owner's id

    Returns:
        List of plant dictionaries joined with catalog fields
    """
    plants = (
        owned_plants_query(user_id)
        .order_by(UserPlant.planting_time.desc(), UserPlant.id.desc())
        .all()
    )
    return [plant.to_dict() for plant in plants]


def get_plant_by_id(plant_id: int, user_id: int) -> Optional[Dict[str, Any]]:
    """
    Get a single plant, verifying ownership.

    Returns:
        Plant dictionary, or None when the plant is missing, soft-deleted or
        owned by another user
    """
    plant = get_owned_plant(plant_id, user_id)
    return plant.to_dict() if plant else None


def _run_in_transaction(work):
    """Run work() and commit; roll back and re-raise on any error."""
    for attempt in range(1, _CATALOG_RACE_ATTEMPTS + 1):
        try:
            result = work()
            db.session.commit()
            return result
        except IntegrityError:
            db.session.rollback()
            if attempt == _CATALOG_RACE_ATTEMPTS:
                raise
            log_info("Integrity error while writing plant, retrying once")
        except Exception:
            db.session.rollback()
            raise


def create_plant(
    user_id: int,
    cultivar: str,
    species: str,
    planting_time: date,
    est_cropping_days: Optional[int] = None,
    photo_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a plant for the user, reusing or creating its catalog entry.

    Either both the catalog entry (if new) and the plant are committed, or
    neither is.

    Returns:
        The created plant dictionary
    """
    def work() -> UserPlant:
        plant_type_id = catalog.find_or_create_plant_type(cultivar, species)
        plant = UserPlant(
            user_id=user_id,
            plant_type_id=plant_type_id,
            planting_time=planting_time,
            est_cropping_days=est_cropping_days,
            photo_url=photo_url or None,
        )
        db.session.add(plant)
        db.session.flush()
        return plant

    plant = _run_in_transaction(work)
    log_info(f"Plant {plant.id} added for user {user_id}")
    return plant.to_dict()


def update_plant(
    plant_id: int,
    user_id: int,
    cultivar: str,
    species: str,
    planting_time: date,
    est_cropping_days: Optional[int] = None,
    photo_url: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Replace a plant's catalog entry, planting date and cropping estimate.

    The photo is replaced only when a new non-empty photo_url is given;
    otherwise the previous photo stays.

    Returns:
        Updated plant dictionary, or None if not found/not owned
    """
    def work() -> Optional[UserPlant]:
        plant = get_owned_plant(plant_id, user_id)
        if plant is None:
            return None
        plant.plant_type_id = catalog.find_or_create_plant_type(cultivar, species)
        plant.planting_time = planting_time
        plant.est_cropping_days = est_cropping_days
        if photo_url:
            plant.photo_url = photo_url
        db.session.flush()
        return plant

    plant = _run_in_transaction(work)
    if plant is None:
        return None
    # plant_type is a joined relationship; reload it after the id change
    db.session.refresh(plant)
    return plant.to_dict()


def delete_plant(plant_id: int, user_id: int) -> bool:
    """
    Soft-delete a plant (is_deleted = True).

    Reminders and health remarks of the plant are left untouched; they stay
    in storage but become unreachable through the owner checks.

    Returns:
        True if successful, False if not found/not owned
    """
    plant = get_owned_plant(plant_id, user_id)
    if plant is None:
        return False

    plant.is_deleted = True
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    log_info(f"Plant {plant_id} deleted for user {user_id}")
    return True
