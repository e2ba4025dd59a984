"""
Unit tests for the reminder scheduler service.

Tests:
- Next-date computation on save and on completion
- At most one active reminder per (plant, type)
- Soft delete keeps history
- Upcoming window boundaries and scoping
The clock is fixed by patching reminders._today.
"""

from datetime import date
from unittest.mock import patch

import pytest

from garden_tracker.extensions import db
from garden_tracker.models import Reminder
from garden_tracker.services import plants as plant_service
from garden_tracker.services import reminders as reminder_service

TODAY = date(2024, 5, 10)


@pytest.fixture
def frozen_today():
    with patch("garden_tracker.services.reminders._today", return_value=TODAY):
        yield TODAY


@pytest.fixture
def owner(ctx, make_user, make_plant):
    """A user with one plant: (user_id, plant_id)."""
    user_id = make_user("alice")
    return user_id, make_plant(user_id, "Tomato")


class TestSaveReminder:
    """Test create-or-overwrite semantics."""

    def test_next_reminder_is_start_plus_interval(self, owner):
        user_id, plant_id = owner

        reminder = reminder_service.save_reminder(user_id, plant_id, "watering", 3, date(2024, 5, 1))

        assert reminder["nextReminder"] == "2024-05-04"
        assert reminder["startDate"] == "2024-05-01"
        assert reminder["intervalDays"] == 3
        assert reminder["lastCompleted"] is None
        assert reminder["isActive"] is True

    def test_next_reminder_crosses_month_and_leap_day(self, owner):
        user_id, plant_id = owner

        reminder = reminder_service.save_reminder(user_id, plant_id, "fertilizing", 2, date(2024, 2, 28))

        assert reminder["nextReminder"] == "2024-03-01"

    def test_saving_same_type_overwrites(self, owner):
        """Second save of a type replaces the first instead of adding a row."""
        user_id, plant_id = owner

        first = reminder_service.save_reminder(user_id, plant_id, "watering", 3, date(2024, 5, 1), "old")
        second = reminder_service.save_reminder(user_id, plant_id, "watering", 5, date(2024, 5, 2), "new")

        assert first["id"] == second["id"]
        assert second["nextReminder"] == "2024-05-07"
        assert second["notes"] == "new"
        assert Reminder.query.filter_by(user_plant_id=plant_id, is_active=True).count() == 1

    def test_different_types_coexist(self, owner):
        user_id, plant_id = owner

        reminder_service.save_reminder(user_id, plant_id, "watering", 3, date(2024, 5, 1))
        reminder_service.save_reminder(user_id, plant_id, "harvesting", 30, date(2024, 5, 1))

        types = {r["type"] for r in reminder_service.get_plant_reminders(plant_id, user_id)}
        assert types == {"watering", "harvesting"}

    def test_save_after_delete_creates_new_row(self, owner):
        """A deactivated reminder is history; saving again starts a new one."""
        user_id, plant_id = owner

        old = reminder_service.save_reminder(user_id, plant_id, "watering", 3, date(2024, 5, 1))
        reminder_service.delete_reminder(old["id"], user_id)
        new = reminder_service.save_reminder(user_id, plant_id, "watering", 4, date(2024, 5, 1))

        assert new["id"] != old["id"]
        assert Reminder.query.filter_by(user_plant_id=plant_id).count() == 2
        assert Reminder.query.filter_by(user_plant_id=plant_id, is_active=True).count() == 1

    def test_save_on_foreign_plant_returns_none(self, owner, make_user):
        _, plant_id = owner
        intruder = make_user("mallory")

        assert reminder_service.save_reminder(intruder, plant_id, "watering", 3, date(2024, 5, 1)) is None
        assert Reminder.query.count() == 0

    def test_save_on_deleted_plant_returns_none(self, owner):
        user_id, plant_id = owner
        plant_service.delete_plant(plant_id, user_id)

        assert reminder_service.save_reminder(user_id, plant_id, "watering", 3, date(2024, 5, 1)) is None


class TestListReminders:
    """Test per-plant listing."""

    def test_list_orders_by_next_reminder(self, owner):
        user_id, plant_id = owner
        reminder_service.save_reminder(user_id, plant_id, "harvesting", 30, date(2024, 5, 1))
        reminder_service.save_reminder(user_id, plant_id, "watering", 2, date(2024, 5, 1))
        reminder_service.save_reminder(user_id, plant_id, "fertilizing", 14, date(2024, 5, 1))

        types = [r["type"] for r in reminder_service.get_plant_reminders(plant_id, user_id)]

        assert types == ["watering", "fertilizing", "harvesting"]

    def test_list_excludes_inactive(self, owner):
        user_id, plant_id = owner
        kept = reminder_service.save_reminder(user_id, plant_id, "watering", 2, date(2024, 5, 1))
        dropped = reminder_service.save_reminder(user_id, plant_id, "other", 9, date(2024, 5, 1))
        reminder_service.delete_reminder(dropped["id"], user_id)

        ids = [r["id"] for r in reminder_service.get_plant_reminders(plant_id, user_id)]

        assert ids == [kept["id"]]

    def test_list_for_foreign_plant_returns_none(self, owner, make_user):
        _, plant_id = owner
        intruder = make_user("mallory")

        assert reminder_service.get_plant_reminders(plant_id, intruder) is None

    def test_list_for_plant_without_reminders_is_empty(self, owner):
        user_id, plant_id = owner

        assert reminder_service.get_plant_reminders(plant_id, user_id) == []


class TestCompleteReminder:
    """Completion reschedules from today."""

    def test_complete_schedules_from_today(self, owner, frozen_today):
        user_id, plant_id = owner
        reminder = reminder_service.save_reminder(user_id, plant_id, "watering", 3, date(2024, 5, 8))

        done = reminder_service.complete_reminder(reminder["id"], user_id)

        assert done["lastCompleted"] == "2024-05-10"
        assert done["nextReminder"] == "2024-05-13"

    def test_late_completion_does_not_catch_up(self, owner, frozen_today):
        """An overdue reminder moves to today + interval, skipping missed dates."""
        user_id, plant_id = owner
        reminder = reminder_service.save_reminder(user_id, plant_id, "watering", 2, date(2024, 4, 1))
        assert reminder["nextReminder"] == "2024-04-03"

        done = reminder_service.complete_reminder(reminder["id"], user_id)

        assert done["nextReminder"] == "2024-05-12"

    def test_early_completion_moves_due_date_forward_from_today(self, owner, frozen_today):
        user_id, plant_id = owner
        reminder = reminder_service.save_reminder(user_id, plant_id, "fertilizing", 14, date(2024, 5, 9))
        assert reminder["nextReminder"] == "2024-05-23"

        done = reminder_service.complete_reminder(reminder["id"], user_id)

        assert done["nextReminder"] == "2024-05-24"

    def test_complete_foreign_reminder_returns_none(self, owner, make_user, frozen_today):
        user_id, plant_id = owner
        reminder = reminder_service.save_reminder(user_id, plant_id, "watering", 3, date(2024, 5, 1))
        intruder = make_user("mallory")

        assert reminder_service.complete_reminder(reminder["id"], intruder) is None
        assert db.session.get(Reminder, reminder["id"]).last_completed is None

    def test_complete_unknown_reminder_returns_none(self, owner, frozen_today):
        user_id, _ = owner

        assert reminder_service.complete_reminder(999, user_id) is None


class TestDeleteReminder:
    """Soft delete keeps the schedule as history."""

    def test_delete_deactivates_and_keeps_dates(self, owner, frozen_today):
        user_id, plant_id = owner
        reminder = reminder_service.save_reminder(user_id, plant_id, "watering", 3, date(2024, 5, 8))
        reminder_service.complete_reminder(reminder["id"], user_id)

        assert reminder_service.delete_reminder(reminder["id"], user_id) is True

        row = db.session.get(Reminder, reminder["id"])
        assert row.is_active is False
        assert row.next_reminder == date(2024, 5, 13)
        assert row.last_completed == TODAY

    def test_delete_foreign_reminder_returns_false(self, owner, make_user):
        user_id, plant_id = owner
        reminder = reminder_service.save_reminder(user_id, plant_id, "watering", 3, date(2024, 5, 1))
        intruder = make_user("mallory")

        assert reminder_service.delete_reminder(reminder["id"], intruder) is False
        assert db.session.get(Reminder, reminder["id"]).is_active is True


class TestUpcomingReminders:
    """Window is [today, today + days], both ends included."""

    def _due_on(self, user_id, plant_id, reminder_type, due):
        """Save a reminder whose next date lands on `due` (interval 1)."""
        start = date.fromordinal(due.toordinal() - 1)
        return reminder_service.save_reminder(user_id, plant_id, reminder_type, 1, start)

    def test_window_includes_both_ends(self, owner, frozen_today):
        user_id, plant_id = owner
        self._due_on(user_id, plant_id, "watering", date(2024, 5, 10))     # today
        self._due_on(user_id, plant_id, "fertilizing", date(2024, 5, 17))  # today + 7

        upcoming = reminder_service.get_upcoming_reminders(user_id, days=7)

        assert [r["nextReminder"] for r in upcoming] == ["2024-05-10", "2024-05-17"]

    def test_window_excludes_overdue_and_later(self, owner, frozen_today):
        user_id, plant_id = owner
        self._due_on(user_id, plant_id, "watering", date(2024, 5, 9))      # yesterday
        self._due_on(user_id, plant_id, "fertilizing", date(2024, 5, 18))  # today + 8

        assert reminder_service.get_upcoming_reminders(user_id, days=7) == []

    def test_default_window_is_seven_days(self, owner, frozen_today):
        user_id, plant_id = owner
        self._due_on(user_id, plant_id, "watering", date(2024, 5, 17))
        self._due_on(user_id, plant_id, "other", date(2024, 5, 18))

        upcoming = reminder_service.get_upcoming_reminders(user_id)

        assert [r["type"] for r in upcoming] == ["watering"]

    def test_upcoming_carries_plant_fields(self, owner, frozen_today):
        user_id, plant_id = owner
        saved = self._due_on(user_id, plant_id, "watering", date(2024, 5, 12))

        (item,) = reminder_service.get_upcoming_reminders(user_id, days=7)

        assert item == {
            "id": saved["id"],
            "type": "watering",
            "nextReminder": "2024-05-12",
            "intervalDays": 1,
            "notes": None,
            "plantId": plant_id,
            "plantName": "Tomato",
            "plantSpecies": "Solanum lycopersicum",
        }

    def test_upcoming_skips_inactive_and_deleted_plants(self, owner, make_plant, frozen_today):
        user_id, plant_id = owner
        other_plant = make_plant(user_id, "Basil", "Ocimum basilicum")
        inactive = self._due_on(user_id, plant_id, "watering", date(2024, 5, 11))
        reminder_service.delete_reminder(inactive["id"], user_id)
        self._due_on(user_id, other_plant, "watering", date(2024, 5, 11))
        plant_service.delete_plant(other_plant, user_id)

        assert reminder_service.get_upcoming_reminders(user_id, days=7) == []

    def test_upcoming_is_scoped_to_user(self, owner, make_user, make_plant, frozen_today):
        user_id, plant_id = owner
        bob = make_user("bob")
        bob_plant = make_plant(bob, "Pepper", "Capsicum annuum")
        self._due_on(user_id, plant_id, "watering", date(2024, 5, 11))
        self._due_on(bob, bob_plant, "watering", date(2024, 5, 11))

        alice_items = reminder_service.get_upcoming_reminders(user_id, days=7)
        bob_items = reminder_service.get_upcoming_reminders(bob, days=7)

        assert [r["plantName"] for r in alice_items] == ["Tomato"]
        assert [r["plantName"] for r in bob_items] == ["Pepper"]
