"""本地通知调度：排期、取消、到点投递，以及点击事件监听。"""
import sys
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Dict, List, Optional

from plant_care.notifications.models import NotificationTap, ScheduledNotification

TapListener = Callable[[NotificationTap], None]
FireHandler = Callable[[ScheduledNotification], None]


def notification_identifier(reminder_id: str) -> str:
    return f"reminder-{reminder_id}"


class NotificationScheduler(ABC):
    """通知调度器基类；点击监听在基类中统一维护。"""

    def __init__(self) -> None:
        self._tap_listeners: List[TapListener] = []

    @abstractmethod
    def schedule(self, reminder_id: str, fire_at: datetime, payload: dict) -> str:
        """排期一条通知，返回通知标识。payload 含 title / body / data。"""

    @abstractmethod
    def cancel(self, reminder_id: str) -> None:
        ...

    @abstractmethod
    def cancel_all(self) -> None:
        ...

    def add_tap_listener(self, listener: TapListener) -> Callable[[], None]:
        """注册点击监听，返回移除函数。"""
        self._tap_listeners.append(listener)

        def remove() -> None:
            if listener in self._tap_listeners:
                self._tap_listeners.remove(listener)

        return remove

    def dispatch_tap(self, data: dict) -> Optional[NotificationTap]:
        """用户点击通知：解析数据并分发给监听者。无 reminder_id 时忽略。"""
        if not data.get("reminder_id"):
            return None
        tap = NotificationTap.model_validate(data)
        for listener in list(self._tap_listeners):
            try:
                listener(tap)
            except Exception as e:
                print(f"[养护-通知] 点击监听出错: {e}", file=sys.stderr, flush=True)
        return tap


class LocalNotificationScheduler(NotificationScheduler):
    """进程内调度：到点由 fire_due 取出并交给 on_fire 投递。"""

    def __init__(self, on_fire: Optional[FireHandler] = None):
        super().__init__()
        self.on_fire = on_fire
        self._pending: Dict[str, ScheduledNotification] = {}

    def schedule(self, reminder_id: str, fire_at: datetime, payload: dict) -> str:
        identifier = notification_identifier(reminder_id)
        self._pending[identifier] = ScheduledNotification(
            identifier=identifier,
            reminder_id=reminder_id,
            fire_at=fire_at,
            title=payload.get("title", ""),
            body=payload.get("body", ""),
            data=payload.get("data", {}),
        )
        print(f"[养护-通知] 已排期 {identifier} @ {fire_at.isoformat()}", file=sys.stderr, flush=True)
        return identifier

    def cancel(self, reminder_id: str) -> None:
        if self._pending.pop(notification_identifier(reminder_id), None) is not None:
            print(f"[养护-通知] 已取消 reminder-{reminder_id}", file=sys.stderr, flush=True)

    def cancel_all(self) -> None:
        self._pending.clear()

    def pending(self) -> List[ScheduledNotification]:
        """按触发时间排序的待发通知。"""
        return sorted(self._pending.values(), key=lambda n: n.fire_at)

    def get(self, reminder_id: str) -> Optional[ScheduledNotification]:
        return self._pending.get(notification_identifier(reminder_id))

    def fire_due(self, now: datetime) -> List[ScheduledNotification]:
        """取出已到点的通知并投递，返回本次投递的列表。"""
        fired = [n for n in self.pending() if n.fire_at <= now]
        for n in fired:
            del self._pending[n.identifier]
            if self.on_fire:
                try:
                    self.on_fire(n)
                except Exception as e:
                    print(f"[养护-通知] 投递失败 {n.identifier}: {e}", file=sys.stderr, flush=True)
        return fired
