"""提醒相关的纯函数：ID、到期计算、状态推导、通知文案。"""
import math
import secrets
import time
from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple

from plant_care.config import DUE_SOON_DAYS
from plant_care.reminders.models import CareType, DueLabel, Reminder, ReminderStatus

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_BASE36[r])
    return "".join(reversed(out))


def generate_reminder_id() -> str:
    """毫秒时间戳 + 随机数，均为 36 进制。"""
    return _base36(int(time.time() * 1000)) + _base36(secrets.randbits(52))


def calculate_next_due(frequency_days: int, start: datetime) -> datetime:
    return start + timedelta(days=frequency_days)


def frequency_label(frequency_days: int) -> str:
    labels = {1: "Daily", 7: "Weekly", 14: "Bi-weekly", 30: "Monthly"}
    return labels.get(frequency_days, f"Every {frequency_days} days")


def days_remaining(due: datetime, now: datetime) -> int:
    """距到期的天数，向上取整；已过期为负数。"""
    return math.ceil((due - now).total_seconds() / 86400)


def due_label(due: datetime, now: datetime) -> DueLabel:
    """
    按 days_remaining 分档。天数向上取整，过期不足一天仍算 0 天，
    标为 DUE_SOON；过期满一天才是 OVERDUE。
    """
    remaining = days_remaining(due, now)
    if remaining < 0:
        return DueLabel.OVERDUE
    if remaining <= DUE_SOON_DAYS:
        return DueLabel.DUE_SOON
    return DueLabel.UPCOMING


def fire_time(next_due: datetime, reminder_time: Optional[datetime]) -> datetime:
    """通知触发时间：next_due 的日期 + reminder_time 的时分。"""
    if reminder_time is None:
        return next_due
    if next_due.tzinfo is not None and reminder_time.tzinfo is not None:
        reminder_time = reminder_time.astimezone(next_due.tzinfo)
    return next_due.replace(
        hour=reminder_time.hour,
        minute=reminder_time.minute,
        second=0,
        microsecond=0,
    )


def derive_status(
    reminder: Reminder,
    now: datetime,
    plant_ids: Optional[Iterable[str]] = None,
) -> ReminderStatus:
    """推导提醒状态；给出 plant_ids 时才判断是否为孤儿。"""
    if plant_ids is not None and reminder.plant_id and reminder.plant_id not in set(plant_ids):
        return ReminderStatus.ORPHANED
    if not reminder.enabled:
        return ReminderStatus.DISABLED
    if reminder.next_due <= now:
        return ReminderStatus.DUE
    return ReminderStatus.SCHEDULED


def build_notification(reminder: Reminder) -> Tuple[str, str, dict]:
    """生成通知 (标题, 正文, 数据)。"""
    care_type = CareType(reminder.care_type).value
    plant_name = reminder.plant_name or "plant"
    notes = reminder.notes or ""
    title = f"{care_type.capitalize()} Reminder: {plant_name}"
    if care_type == CareType.WATERING.value:
        body = f"Your {plant_name} needs water! {notes or 'Keep soil moist but not soggy.'}"
    elif care_type == CareType.FERTILIZING.value:
        body = f"Time to fertilize your {plant_name}! {notes or 'Use a balanced fertilizer for best results.'}"
    else:
        body = f"Time to {care_type} your {plant_name}. {notes}".rstrip()
    data = {
        "reminder_id": reminder.id,
        "plant_id": reminder.plant_id,
        "care_type": care_type,
        "plant_name": reminder.plant_name,
        "notes": notes,
    }
    return title, body, data
