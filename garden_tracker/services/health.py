"""
Health log service.

Timestamped free-text remarks per plant. created_at never changes; the text
can be edited and a remark can be hard-deleted. All access goes through the
owning plant.
"""

from __future__ import annotations
import enum
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from garden_tracker.extensions import db
from garden_tracker.models import HealthRemark
from garden_tracker.services.access import get_owned_plant, get_owned_remark

logger = logging.getLogger(__name__)


class LatestRemark(enum.Enum):
    """Outcome of get_latest_health_remark."""

    PLANT_NOT_FOUND = "plant_not_found"
    NO_REMARKS = "no_remarks"
    FOUND = "found"


def _commit() -> None:
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


def _remarks_for_plant(plant_id: int):
    return HealthRemark.query.filter(HealthRemark.user_plant_id == plant_id).order_by(
        HealthRemark.created_at.desc(), HealthRemark.id.desc()
    )


def get_health_remarks(plant_id: int, user_id: int) -> Optional[List[Dict[str, Any]]]:
    """
    Get all health remarks for a plant, newest first.

    Returns:
        List of remark dictionaries, or None if the plant is not found/owned
    """
    if get_owned_plant(plant_id, user_id) is None:
        return None
    return [remark.to_dict() for remark in _remarks_for_plant(plant_id).all()]


def add_health_remark(plant_id: int, user_id: int, remarks: str) -> Optional[Dict[str, Any]]:
    """
    Append a health remark to a plant's log.

    Returns:
        Created remark dictionary, or None if the plant is not found/owned
    """
    if get_owned_plant(plant_id, user_id) is None:
        return None

    remark = HealthRemark(user_plant_id=plant_id, remarks=remarks)
    db.session.add(remark)
    _commit()
    return remark.to_dict()


def get_latest_health_remark(
    plant_id: int, user_id: int
) -> Tuple[LatestRemark, Optional[Dict[str, Any]]]:
    """
    Get the most recent health remark for a plant.

    Returns:
        (LatestRemark.PLANT_NOT_FOUND, None) if the plant is not found/owned,
        (LatestRemark.NO_REMARKS, None) if the plant has no remarks yet,
        (LatestRemark.FOUND, remark_dict) otherwise
    """
    if get_owned_plant(plant_id, user_id) is None:
        return LatestRemark.PLANT_NOT_FOUND, None

    remark = _remarks_for_plant(plant_id).first()
    if remark is None:
        return LatestRemark.NO_REMARKS, None
    return LatestRemark.FOUND, remark.to_dict()


def update_health_remark(remark_id: int, user_id: int, remarks: str) -> Optional[Dict[str, Any]]:
    """Replace a remark's text. Returns None if not found/not owned."""
    remark = get_owned_remark(remark_id, user_id)
    if remark is None:
        return None

    remark.remarks = remarks
    _commit()
    return remark.to_dict()


def delete_health_remark(remark_id: int, user_id: int) -> bool:
    """Hard-delete a remark. Returns False if not found/not owned."""
    remark = get_owned_remark(remark_id, user_id)
    if remark is None:
        return False

    db.session.delete(remark)
    _commit()
    logger.info("Health remark %s deleted by user %s", remark_id, user_id)
    return True
