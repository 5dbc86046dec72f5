"""AI 植物信息缓存测试。"""
import json
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

from plant_care.config import PLANT_INFO_CACHE_KEY
from plant_care.plantinfo.cache import PlantInfoCache, normalize_key
from plant_care.storage.kv import JsonFileStore, MemoryStore

T0 = datetime(2026, 10, 1, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class BrokenStore(MemoryStore):
    def set(self, key, value):
        raise OSError("disk full")


def test_normalize_key() -> None:
    assert normalize_key("  Monstera Deliciosa ") == "plant-monstera deliciosa"


def test_get_set_is_case_insensitive() -> None:
    cache = PlantInfoCache(MemoryStore(), clock=FixedClock(T0))
    cache.set("Snake Plant", {"family": "Asparagaceae"})
    assert cache.get(" snake plant") == {"family": "Asparagaceae"}
    assert cache.get("fern") is None


def test_expired_entry_returns_none() -> None:
    clock = FixedClock(T0)
    cache = PlantInfoCache(MemoryStore(), clock=clock)
    cache.set("fern", {"a": 1})
    clock.now = T0 + timedelta(days=6, hours=23)
    assert cache.get("fern") == {"a": 1}
    clock.now = T0 + timedelta(days=7, seconds=1)
    assert cache.get("fern") is None
    assert "plant-fern" not in cache.keys()


def test_eviction_drops_oldest_first() -> None:
    clock = FixedClock(T0)
    cache = PlantInfoCache(MemoryStore(), clock=clock)
    for i in range(1, 51):
        clock.now = T0 + timedelta(minutes=i)
        cache.set(f"plant{i}", i)
    assert len(cache) == 50
    clock.now = T0 + timedelta(hours=2)
    cache.set("newcomer", 0)
    keys = set(cache.keys())
    assert len(cache) == 46
    assert all(f"plant-plant{i}" not in keys for i in range(1, 6))
    assert all(f"plant-plant{i}" in keys for i in range(6, 51))
    assert "plant-newcomer" in keys


def test_overwrite_at_cap_does_not_evict() -> None:
    clock = FixedClock(T0)
    cache = PlantInfoCache(MemoryStore(), clock=clock)
    for i in range(50):
        cache.set(f"plant{i}", i)
    cache.set("plant3", "updated")
    assert len(cache) == 50
    assert cache.get("plant3") == "updated"


def test_eviction_prefers_expired_entries() -> None:
    clock = FixedClock(T0)
    cache = PlantInfoCache(MemoryStore(), clock=clock, max_items=10)
    for i in range(3):
        cache.set(f"old{i}", i)
    clock.now = T0 + timedelta(days=8)
    for i in range(7):
        cache.set(f"fresh{i}", i)
    cache.set("one-more", 1)
    assert len(cache) == 8
    assert all(not k.startswith("plant-old") for k in cache.keys())


def test_persisted_and_reloaded_once() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        clock = FixedClock(T0)
        cache = PlantInfoCache(JsonFileStore(base_dir=Path(tmp)), clock=clock)
        cache.set("fern", {"light": "shade"})
        clock.now = T0 + timedelta(days=3)
        cache.set("cactus", {"light": "sun"})
        clock.now = T0 + timedelta(days=8)
        reloaded = PlantInfoCache(JsonFileStore(base_dir=Path(tmp)), clock=clock)
        assert reloaded.keys() == ["plant-cactus"]
        assert reloaded.get("cactus") == {"light": "sun"}


def test_clear_removes_persisted_copy() -> None:
    store = MemoryStore()
    cache = PlantInfoCache(store, clock=FixedClock(T0))
    cache.set("fern", 1)
    assert json.loads(store.get(PLANT_INFO_CACHE_KEY))["plant-fern"]["value"] == 1
    cache.clear()
    assert len(cache) == 0
    assert store.get(PLANT_INFO_CACHE_KEY) is None


def test_corrupt_or_unwritable_store_is_harmless() -> None:
    cache = PlantInfoCache(MemoryStore({PLANT_INFO_CACHE_KEY: "not json"}), clock=FixedClock(T0))
    assert cache.get("fern") is None
    broken = PlantInfoCache(BrokenStore(), clock=FixedClock(T0))
    broken.set("fern", 1)
    assert broken.get("fern") == 1
