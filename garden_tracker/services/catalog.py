"""
Plant catalog: shared cultivar/species entries.

Entries are matched exactly (case- and whitespace-sensitive) and created on
first use. Callers own the transaction; this module only flushes.
"""

from __future__ import annotations
from typing import Optional

from garden_tracker.extensions import db
from garden_tracker.models import PlantType


def find_plant_type(cultivar: str, species: str) -> Optional[PlantType]:
    return PlantType.query.filter(
        PlantType.cultivar == cultivar,
        PlantType.species == species,
        PlantType.is_deleted.is_(False),
    ).first()


def find_or_create_plant_type(cultivar: str, species: str) -> int:
    """
    Return the id of the active catalog entry for (cultivar, species),
    inserting one if none exists.

    Runs inside the caller's transaction. Two concurrent first inserts of
    the same pair collide on the partial unique index; the loser's flush
    raises IntegrityError and the caller decides whether to retry.
    """
    existing = find_plant_type(cultivar, species)
    if existing is not None:
        return existing.id

    plant_type = PlantType(cultivar=cultivar, species=species)
    db.session.add(plant_type)
    db.session.flush()
    return plant_type.id
