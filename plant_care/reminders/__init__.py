"""养护提醒：模型、引擎与后台清理。"""
from plant_care.reminders.engine import ReminderEngine
from plant_care.reminders.models import CareType, DueLabel, Reminder, ReminderStatus
from plant_care.reminders.watcher import orphan_cleanup_loop

__all__ = [
    "CareType",
    "DueLabel",
    "Reminder",
    "ReminderStatus",
    "ReminderEngine",
    "orphan_cleanup_loop",
]
