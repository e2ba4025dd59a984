"""
Relational schema for the garden tracker.

Tables:
- users: accounts (username + password hash)
- all_plants: shared catalog of cultivar/species pairs
- user_plants: a user's plants, soft-deleted via is_deleted
- plant_reminders: care reminders, soft-deleted via is_active
- plant_health: timestamped health remarks, hard-deleted

Child rows reference user_plants with ON DELETE CASCADE. The application
only ever soft-deletes user_plants, so the cascade fires solely on manual
administrative deletes.
"""

from __future__ import annotations
from datetime import date, datetime
from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from .extensions import db

REMINDER_TYPES = ("watering", "fertilizing", "harvesting", "other")


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    plants = db.relationship(
        "UserPlant", backref="owner", lazy=True, passive_deletes=True
    )

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "username": self.username}

    def __repr__(self):
        return f"<User {self.username}>"


class PlantType(db.Model):
    """Catalog entry. Created lazily on first use, never updated."""

    __tablename__ = "all_plants"
    __table_args__ = (
        # At most one active row per pair; closes the find-or-create race.
        db.Index(
            "uq_all_plants_active_pair",
            "cultivar",
            "species",
            unique=True,
            sqlite_where=db.text("NOT is_deleted"),
            postgresql_where=db.text("NOT is_deleted"),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    cultivar = db.Column(db.String(100), nullable=False)
    species = db.Column(db.String(100), nullable=False)
    is_deleted = db.Column(db.Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<PlantType {self.cultivar} ({self.species})>"


class UserPlant(db.Model):
    __tablename__ = "user_plants"
    __table_args__ = (
        db.Index("idx_user_plants_user_deleted", "user_id", "is_deleted"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    plant_type_id = db.Column(
        db.Integer, db.ForeignKey("all_plants.id"), nullable=False, index=True
    )
    planting_time = db.Column(db.Date, nullable=False)
    est_cropping_days = db.Column(db.Integer, nullable=True)
    photo_url = db.Column(db.String(255), nullable=True)
    is_deleted = db.Column(db.Boolean, default=False, nullable=False)

    plant_type = db.relationship("PlantType", lazy="joined")
    reminders = db.relationship(
        "Reminder", backref="plant", lazy=True, passive_deletes=True
    )
    health_remarks = db.relationship(
        "HealthRemark", backref="plant", lazy=True, passive_deletes=True
    )

    def to_dict(self) -> Dict[str, Any]:
        """Public shape, joined with the catalog entry."""
        return {
            "id": self.id,
            "name": self.plant_type.cultivar,
            "species": self.plant_type.species,
            "plantingTime": _iso(self.planting_time),
            "estCropping": self.est_cropping_days,
            "photoUrl": self.photo_url,
        }

    def __repr__(self):
        return f"<UserPlant {self.id} user={self.user_id}>"


class Reminder(db.Model):
    __tablename__ = "plant_reminders"

    id = db.Column(db.Integer, primary_key=True)
    user_plant_id = db.Column(
        db.Integer,
        db.ForeignKey("user_plants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reminder_type = db.Column(
        db.Enum(*REMINDER_TYPES, name="reminder_type"), nullable=False, index=True
    )
    start_date = db.Column(db.Date, nullable=False)
    interval_days = db.Column(db.Integer, nullable=False)
    next_reminder = db.Column(db.Date, nullable=False, index=True)
    last_completed = db.Column(db.Date, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.reminder_type,
            "startDate": _iso(self.start_date),
            "intervalDays": self.interval_days,
            "nextReminder": _iso(self.next_reminder),
            "lastCompleted": _iso(self.last_completed),
            "notes": self.notes,
            "isActive": bool(self.is_active),
        }

    def __repr__(self):
        return f"<Reminder {self.reminder_type} plant={self.user_plant_id}>"


class HealthRemark(db.Model):
    __tablename__ = "plant_health"

    id = db.Column(db.Integer, primary_key=True)
    user_plant_id = db.Column(
        db.Integer,
        db.ForeignKey("user_plants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    remarks = db.Column(db.Text, nullable=False)
    created_at = db.Column(
        db.DateTime, default=datetime.utcnow, nullable=False, index=True
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "remarks": self.remarks,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<HealthRemark {self.id} plant={self.user_plant_id}>"
