"""后台轮询：定期比对已保存植物，清理孤儿提醒。"""
import asyncio
import sys

from plant_care.config import ORPHAN_POLL_INTERVAL
from plant_care.reminders.engine import ReminderEngine


async def orphan_cleanup_loop(engine: ReminderEngine, interval_seconds: float = ORPHAN_POLL_INTERVAL) -> None:
    """
    植物存储被其他进程修改、收不到删除事件时使用。
    植物集合变化后最迟 interval_seconds 秒内完成清理。
    """
    while True:
        try:
            engine.sync_with_plants()
        except Exception as e:
            print(f"[养护-提醒] 轮询清理出错: {e}", file=sys.stderr, flush=True)
        await asyncio.sleep(interval_seconds)
