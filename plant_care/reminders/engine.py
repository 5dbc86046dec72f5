"""
养护提醒引擎：内存列表 + 持久化 + 通知排期 + 孤儿清理。

内存中的列表是会话内的事实来源；存储或通知调用失败只记录日志，
不会阻止数据变更本身。
"""
import json
import sys
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Set

from plant_care.config import REMINDERS_KEY
from plant_care.notifications.scheduler import NotificationScheduler
from plant_care.plants.store import SavedPlantStore
from plant_care.reminders.models import Reminder, ReminderStatus
from plant_care.reminders.utils import (
    build_notification,
    calculate_next_due,
    derive_status,
    fire_time,
    generate_reminder_id,
)
from plant_care.storage.kv import KeyValueStore

Clock = Callable[[], datetime]
ErrorHandler = Callable[[str], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReminderEngine:
    """提醒的增删改、完成/跳过、启停，以及与已保存植物的一致性维护。"""

    def __init__(
        self,
        store: KeyValueStore,
        scheduler: NotificationScheduler,
        plants: Optional[SavedPlantStore] = None,
        clock: Optional[Clock] = None,
        on_error: Optional[ErrorHandler] = None,
        key: str = REMINDERS_KEY,
    ):
        self.store = store
        self.scheduler = scheduler
        self.plants = plants
        self.clock = clock or _utcnow
        self.on_error = on_error
        self.key = key
        self._reminders: List[Reminder] = []
        self._last_deleted: Optional[Reminder] = None
        self._loaded = False
        self._known_plant_ids: Optional[frozenset] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        if plants is not None:
            # 植物删除时直接级联，不必等下一次轮询
            self._unsubscribe = plants.subscribe(self._on_plant_deleted)

    # ---------- 读写 ----------

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def reminders(self) -> List[Reminder]:
        return [r.model_copy(deep=True) for r in self._reminders]

    @property
    def last_deleted(self) -> Optional[Reminder]:
        return self._last_deleted.model_copy(deep=True) if self._last_deleted else None

    def _read_persisted(self) -> Optional[List[Reminder]]:
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            print(f"[养护-提醒] 读取提醒失败: {e}", file=sys.stderr, flush=True)
            return None
        if not raw:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"期望列表，得到 {type(data).__name__}")
            return [Reminder.model_validate(item) for item in data]
        except ValueError as e:
            print(f"[养护-提醒] 提醒数据损坏: {e}", file=sys.stderr, flush=True)
            return None

    def load(self) -> List[Reminder]:
        """从存储加载提醒列表；若关联了植物存储，顺带清理孤儿提醒。"""
        self._reminders = self._read_persisted() or []
        self._loaded = True
        self._known_plant_ids = None
        print(f"[养护-提醒] 已加载 {len(self._reminders)} 条提醒", file=sys.stderr, flush=True)
        if self.plants is not None:
            self.sync_with_plants()
        return self.reminders

    def _ensure_loaded(self) -> None:
        # 未加载就写入会用内存中的空列表覆盖已保存的提醒
        if not self._loaded:
            self.load()

    def _persist(self) -> bool:
        data = [r.model_dump(mode="json") for r in self._reminders]
        try:
            self.store.set(self.key, json.dumps(data, ensure_ascii=False))
            return True
        except Exception as e:
            print(f"[养护-提醒] 保存提醒失败: {e}", file=sys.stderr, flush=True)
            self._report("Couldn't save your reminders. Changes may be lost after restart.")
            return False

    def _report(self, message: str) -> None:
        if self.on_error is None:
            return
        try:
            self.on_error(message)
        except Exception as e:
            print(f"[养护-提醒] 错误提示回调出错: {e}", file=sys.stderr, flush=True)

    # ---------- 通知 ----------

    def _schedule(self, reminder: Reminder) -> bool:
        title, body, data = build_notification(reminder)
        at = fire_time(reminder.next_due, reminder.reminder_time)
        if at <= self.clock():
            print(f"[养护-提醒] 提醒 {reminder.id} 的时间已过 ({at.isoformat()})", file=sys.stderr, flush=True)
        try:
            self.scheduler.schedule(reminder.id, at, {"title": title, "body": body, "data": data})
            return True
        except Exception as e:
            print(f"[养护-提醒] 排期通知失败 {reminder.id}: {e}", file=sys.stderr, flush=True)
            return False

    def _cancel(self, reminder_id: str) -> bool:
        try:
            self.scheduler.cancel(reminder_id)
            return True
        except Exception as e:
            print(f"[养护-提醒] 取消通知失败 {reminder_id}: {e}", file=sys.stderr, flush=True)
            return False

    def reschedule_all(self) -> int:
        """取消全部通知后为每条启用的提醒重新排期，返回成功排期数。"""
        self._ensure_loaded()
        try:
            self.scheduler.cancel_all()
        except Exception as e:
            print(f"[养护-提醒] 取消全部通知失败: {e}", file=sys.stderr, flush=True)
        return sum(1 for r in self._reminders if r.enabled and self._schedule(r))

    # ---------- 变更 ----------

    def _index(self, reminder_id: str) -> Optional[int]:
        for i, r in enumerate(self._reminders):
            if r.id == reminder_id:
                return i
        return None

    def add(self, fields: dict) -> Reminder:
        """新建提醒：分配 ID 与创建时间，保存，启用时排期通知。"""
        self._ensure_loaded()
        data = dict(fields)
        data["id"] = generate_reminder_id()
        data["created_at"] = self.clock()
        reminder = Reminder.model_validate(data)
        self._reminders.append(reminder)
        self._persist()
        if reminder.enabled:
            self._schedule(reminder)
        return reminder.model_copy(deep=True)

    def update(self, reminder_id: str, fields: dict) -> Optional[Reminder]:
        """合并字段；ID 不存在时不做任何事。"""
        self._ensure_loaded()
        idx = self._index(reminder_id)
        if idx is None:
            return None
        merged = self._reminders[idx].model_dump()
        merged.update(fields)
        merged["id"] = reminder_id
        reminder = Reminder.model_validate(merged)
        self._reminders[idx] = reminder
        self._persist()
        self._cancel(reminder_id)
        if reminder.enabled:
            self._schedule(reminder)
        return reminder.model_copy(deep=True)

    def delete(self, reminder_id: str) -> bool:
        """删除提醒，保留最近一次删除以便撤销（只保留一条）。"""
        self._ensure_loaded()
        idx = self._index(reminder_id)
        if idx is None:
            return False
        self._cancel(reminder_id)
        self._last_deleted = self._reminders.pop(idx)
        self._persist()
        return True

    def undo_delete(self) -> Optional[Reminder]:
        """恢复最近删除的提醒，启用时重新排期。"""
        self._ensure_loaded()
        reminder = self._last_deleted
        if reminder is None:
            return None
        self._last_deleted = None
        self._reminders.append(reminder)
        self._persist()
        if reminder.enabled:
            self._schedule(reminder)
        return reminder.model_copy(deep=True)

    def toggle_enabled(self, reminder_id: str) -> Optional[Reminder]:
        self._ensure_loaded()
        idx = self._index(reminder_id)
        if idx is None:
            return None
        reminder = self._reminders[idx].model_copy(update={"enabled": not self._reminders[idx].enabled})
        self._reminders[idx] = reminder
        self._persist()
        if reminder.enabled:
            self._schedule(reminder)
        else:
            self._cancel(reminder_id)
        return reminder.model_copy(deep=True)

    def toggle_all(self, enabled: bool) -> List[str]:
        """
        一次性设置所有提醒的启用状态，再逐条处理通知。
        返回通知未能同步的提醒 ID；这些提醒的 enabled 不回滚，可用 reschedule_all 重新对齐。
        """
        self._ensure_loaded()
        self._reminders = [r.model_copy(update={"enabled": enabled}) for r in self._reminders]
        self._persist()
        failed = []
        for r in self._reminders:
            ok = self._schedule(r) if enabled else self._cancel(r.id)
            if not ok:
                failed.append(r.id)
        if failed:
            print(f"[养护-提醒] {len(failed)} 条提醒的通知未同步: {failed}", file=sys.stderr, flush=True)
        return failed

    def complete(self, reminder_id: str, skipped: bool = False) -> Optional[Reminder]:
        """完成（或跳过）一次：下次时间 = 现在 + 间隔天数，启用状态不变。"""
        self._ensure_loaded()
        idx = self._index(reminder_id)
        if idx is None:
            idx = self._reload_for(reminder_id)
            if idx is None:
                print(f"[养护-提醒] 未找到提醒 {reminder_id}", file=sys.stderr, flush=True)
                return None
        now = self.clock()
        current = self._reminders[idx]
        update = {"next_due": calculate_next_due(current.frequency_days, now)}
        update["last_skipped" if skipped else "last_completed"] = now
        reminder = current.model_copy(update=update)
        self._reminders[idx] = reminder
        self._persist()
        if reminder.enabled:
            self._cancel(reminder_id)
            self._schedule(reminder)
        return reminder.model_copy(deep=True)

    def skip(self, reminder_id: str) -> Optional[Reminder]:
        return self.complete(reminder_id, skipped=True)

    def _reload_for(self, reminder_id: str) -> Optional[int]:
        # 内存中找不到时回读一次存储，取回其他实例写入的记录
        persisted = self._read_persisted() or []
        found = next((r for r in persisted if r.id == reminder_id), None)
        if found is None:
            return None
        self._reminders.append(found)
        return self._index(reminder_id)

    # ---------- 查询 ----------

    def get(self, reminder_id: str) -> Optional[Reminder]:
        idx = self._index(reminder_id)
        return self._reminders[idx].model_copy(deep=True) if idx is not None else None

    def for_plant(self, plant_id: str) -> List[Reminder]:
        if not plant_id:
            return []
        return [r.model_copy(deep=True) for r in self._reminders if r.plant_id == str(plant_id)]

    def active(self) -> List[Reminder]:
        return [r.model_copy(deep=True) for r in self._reminders if r.enabled]

    def all_enabled(self) -> bool:
        """列表为空时返回 False。"""
        return bool(self._reminders) and all(r.enabled for r in self._reminders)

    def due(self) -> List[Reminder]:
        """已到期（含逾期）的启用提醒。"""
        now = self.clock()
        return [r.model_copy(deep=True) for r in self._reminders if r.enabled and r.next_due <= now]

    def status(self, reminder_id: str) -> Optional[ReminderStatus]:
        idx = self._index(reminder_id)
        if idx is None:
            return None
        plant_ids = self._plant_ids() if self.plants is not None else None
        return derive_status(self._reminders[idx], self.clock(), plant_ids)

    # ---------- 孤儿清理 ----------

    def _plant_ids(self) -> Optional[Set[str]]:
        try:
            return self.plants.ids()
        except Exception as e:
            print(f"[养护-提醒] 读取已保存植物失败: {e}", file=sys.stderr, flush=True)
            return None

    def _remove(self, doomed: List[Reminder]) -> None:
        ids = {r.id for r in doomed}
        self._reminders = [r for r in self._reminders if r.id not in ids]
        for r in doomed:
            self._cancel(r.id)
        self._persist()

    def cleanup_orphans(self, plant_ids: Optional[Iterable[str]] = None) -> List[Reminder]:
        """删除所属植物已不存在的提醒；没有 plant_id 的提醒跳过。"""
        if not self._loaded:
            return []
        if plant_ids is None:
            if self.plants is None:
                return []
            plant_ids = self._plant_ids()
            if plant_ids is None:
                return []
        existing = {str(p) for p in plant_ids}
        orphans = [r for r in self._reminders if r.plant_id and r.plant_id not in existing]
        if not orphans:
            return []
        self._remove(orphans)
        print(f"[养护-提醒] 已清理 {len(orphans)} 条孤儿提醒", file=sys.stderr, flush=True)
        return orphans

    def sync_with_plants(self) -> List[Reminder]:
        """植物集合与上次同步相比有变化时才清理；加载前不记录快照。"""
        if not self._loaded or self.plants is None:
            return []
        plant_ids = self._plant_ids()
        if plant_ids is None:
            return []
        snapshot = frozenset(plant_ids)
        if snapshot == self._known_plant_ids:
            return []
        self._known_plant_ids = snapshot
        return self.cleanup_orphans(snapshot)

    def _on_plant_deleted(self, plant_id: str) -> None:
        if not self._loaded:
            return
        doomed = [r for r in self._reminders if r.plant_id == str(plant_id)]
        if doomed:
            self._remove(doomed)
            print(f"[养护-提醒] 植物 {plant_id} 已删除，移除 {len(doomed)} 条提醒", file=sys.stderr, flush=True)

    def close(self) -> None:
        """取消对植物删除事件的订阅。"""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
