"""提醒工具函数测试。"""
from datetime import datetime, timedelta, timezone

from plant_care.reminders.models import DueLabel, Reminder, ReminderStatus
from plant_care.reminders.utils import (
    build_notification,
    days_remaining,
    derive_status,
    due_label,
    fire_time,
    frequency_label,
    generate_reminder_id,
)

NOW = datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc)


def _reminder(**extra) -> Reminder:
    fields = {
        "id": "r1",
        "plant_id": "p1",
        "plant_name": "Fern",
        "care_type": "watering",
        "frequency_days": 7,
        "next_due": NOW + timedelta(days=1),
    }
    fields.update(extra)
    return Reminder.model_validate(fields)


def test_generate_reminder_id_unique() -> None:
    ids = {generate_reminder_id() for _ in range(200)}
    assert len(ids) == 200
    assert all(i.isalnum() and i == i.lower() for i in ids)


def test_frequency_label() -> None:
    assert frequency_label(1) == "Daily"
    assert frequency_label(7) == "Weekly"
    assert frequency_label(14) == "Bi-weekly"
    assert frequency_label(30) == "Monthly"
    assert frequency_label(3) == "Every 3 days"


def test_days_remaining_and_due_label() -> None:
    assert days_remaining(NOW + timedelta(hours=1), NOW) == 1
    assert days_remaining(NOW - timedelta(days=1, hours=1), NOW) == -1
    assert due_label(NOW - timedelta(days=2), NOW) == DueLabel.OVERDUE
    assert due_label(NOW + timedelta(days=2), NOW) == DueLabel.DUE_SOON
    assert due_label(NOW + timedelta(days=5), NOW) == DueLabel.UPCOMING


def test_fire_time_uses_time_of_day_only() -> None:
    due = datetime(2026, 10, 20, 0, 0, tzinfo=timezone.utc)
    assert fire_time(due, None) == due
    at = fire_time(due, datetime(2020, 5, 5, 18, 45, 12, tzinfo=timezone.utc))
    assert at == datetime(2026, 10, 20, 18, 45, tzinfo=timezone.utc)
    plus_two = timezone(timedelta(hours=2))
    at = fire_time(due, datetime(2020, 5, 5, 7, 0, tzinfo=plus_two))
    assert at == datetime(2026, 10, 20, 5, 0, tzinfo=timezone.utc)


def test_naive_datetimes_are_utc() -> None:
    r = _reminder(next_due="2026-10-20T09:00:00")
    assert r.next_due == datetime(2026, 10, 20, 9, 0, tzinfo=timezone.utc)


def test_derive_status() -> None:
    assert derive_status(_reminder(), NOW) == ReminderStatus.SCHEDULED
    assert derive_status(_reminder(next_due=NOW), NOW) == ReminderStatus.DUE
    assert derive_status(_reminder(enabled=False, next_due=NOW), NOW) == ReminderStatus.DISABLED
    assert derive_status(_reminder(), NOW, plant_ids={"p2"}) == ReminderStatus.ORPHANED
    assert derive_status(_reminder(enabled=False), NOW, plant_ids=set()) == ReminderStatus.ORPHANED


def test_build_notification_text() -> None:
    title, body, data = build_notification(_reminder())
    assert title == "Watering Reminder: Fern"
    assert body == "Your Fern needs water! Keep soil moist but not soggy."
    assert data == {
        "reminder_id": "r1",
        "plant_id": "p1",
        "care_type": "watering",
        "plant_name": "Fern",
        "notes": "",
    }
    _, body, _ = build_notification(_reminder(care_type="fertilizing", notes="Half strength"))
    assert body == "Time to fertilize your Fern! Half strength"
    title, body, _ = build_notification(_reminder(care_type="pruning", plant_name=None))
    assert title == "Pruning Reminder: plant"
    assert body == "Time to pruning your plant."


def test_due_label_rounds_up_partial_days() -> None:
    assert due_label(NOW - timedelta(hours=3), NOW) == DueLabel.DUE_SOON
    assert due_label(NOW - timedelta(days=1), NOW) == DueLabel.OVERDUE
