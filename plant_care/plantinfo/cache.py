"""
AI 植物信息缓存：按植物名缓存 Gemini 返回，7 天过期，最多 50 条。

超限时先清掉过期项，再按时间从旧到新淘汰到上限的 90%。
整张表在每次写入时序列化保存，启动后首次访问时读回一次。
缓存丢失只会导致重新请求，不影响其他数据。
"""
import json
import sys
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, Field

from plant_care.config import (
    CACHE_EXPIRY_DAYS,
    CACHE_KEEP_RATIO,
    CACHE_MAX_ITEMS,
    PLANT_INFO_CACHE_KEY,
)
from plant_care.storage.kv import KeyValueStore

Clock = Callable[[], datetime]


class CacheEntry(BaseModel):
    value: Any = Field(..., description="缓存值")
    timestamp: datetime = Field(..., description="写入时间")


def normalize_key(plant_name: str) -> str:
    return f"plant-{plant_name.lower().strip()}"


class PlantInfoCache:
    """带过期与容量上限的植物信息缓存。"""

    def __init__(
        self,
        store: KeyValueStore,
        clock: Optional[Clock] = None,
        max_items: int = CACHE_MAX_ITEMS,
        expiry: timedelta = timedelta(days=CACHE_EXPIRY_DAYS),
        key: str = PLANT_INFO_CACHE_KEY,
    ):
        self.store = store
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.max_items = max_items
        self.expiry = expiry
        self.key = key
        self._entries: Dict[str, CacheEntry] = {}
        self._loaded = False

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._entries)

    def keys(self) -> list:
        self._ensure_loaded()
        return list(self._entries)

    def _expired(self, entry: CacheEntry, now: datetime) -> bool:
        return now - entry.timestamp >= self.expiry

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            print(f"[养护-缓存] 读取缓存失败: {e}", file=sys.stderr, flush=True)
            return
        if not raw:
            return
        now = self.clock()
        try:
            for k, item in json.loads(raw).items():
                entry = CacheEntry.model_validate(item)
                if not self._expired(entry, now):
                    self._entries[k] = entry
        except (ValueError, AttributeError) as e:
            print(f"[养护-缓存] 缓存数据损坏，已忽略: {e}", file=sys.stderr, flush=True)
            self._entries.clear()

    def _save(self) -> None:
        data = {k: e.model_dump(mode="json") for k, e in self._entries.items()}
        try:
            self.store.set(self.key, json.dumps(data, ensure_ascii=False))
        except Exception as e:
            print(f"[养护-缓存] 保存缓存失败: {e}", file=sys.stderr, flush=True)

    def get(self, plant_name: str) -> Optional[Any]:
        """命中且未过期返回缓存值，否则 None；过期项在此时删除。"""
        self._ensure_loaded()
        key = normalize_key(plant_name)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._expired(entry, self.clock()):
            del self._entries[key]
            return None
        return entry.value

    def set(self, plant_name: str, value: Any) -> None:
        self._ensure_loaded()
        key = normalize_key(plant_name)
        now = self.clock()
        if key not in self._entries and len(self._entries) >= self.max_items:
            self._evict(now)
        self._entries[key] = CacheEntry(value=value, timestamp=now)
        self._save()

    def _evict(self, now: datetime) -> None:
        for k in [k for k, e in self._entries.items() if self._expired(e, now)]:
            del self._entries[k]
        if len(self._entries) < self.max_items:
            return
        keep = int(self.max_items * CACHE_KEEP_RATIO)
        oldest = sorted(self._entries, key=lambda k: self._entries[k].timestamp)
        for k in oldest[: len(self._entries) - keep]:
            del self._entries[k]
        print(f"[养护-缓存] 已淘汰至 {len(self._entries)} 条", file=sys.stderr, flush=True)

    def clear(self) -> None:
        """清空内存与存储中的缓存。"""
        self._entries.clear()
        self._loaded = True
        try:
            self.store.remove(self.key)
        except Exception as e:
            print(f"[养护-缓存] 清除缓存失败: {e}", file=sys.stderr, flush=True)
