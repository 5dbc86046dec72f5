"""本地通知：排期、取消与点击回调。"""
from plant_care.notifications.models import NotificationTap, ScheduledNotification
from plant_care.notifications.scheduler import (
    LocalNotificationScheduler,
    NotificationScheduler,
    notification_identifier,
)

__all__ = [
    "NotificationTap",
    "ScheduledNotification",
    "NotificationScheduler",
    "LocalNotificationScheduler",
    "notification_identifier",
]
