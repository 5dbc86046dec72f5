"""已保存植物存储：整个列表作为 JSON 数组存于键值存储。"""
import json
import sys
from datetime import datetime, timezone
from typing import Callable, List, Optional, Set

from plant_care.config import SAVED_PLANTS_KEY
from plant_care.plants.models import JournalEntry, SavedPlant
from plant_care.storage.kv import KeyValueStore

PlantDeletedListener = Callable[[str], None]


class SavedPlantStore:
    """植物的增删查；删除时通知订阅者（提醒引擎据此级联删除提醒）。"""

    def __init__(self, store: KeyValueStore, key: str = SAVED_PLANTS_KEY):
        self.store = store
        self.key = key
        self._listeners: List[PlantDeletedListener] = []

    def _load(self) -> List[SavedPlant]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        return [SavedPlant.model_validate(item) for item in json.loads(raw)]

    def _save(self, plants: List[SavedPlant]) -> None:
        self.store.set(self.key, json.dumps([p.model_dump(mode="json") for p in plants], ensure_ascii=False))

    def list(self) -> List[SavedPlant]:
        """全部已保存植物。"""
        return self._load()

    def ids(self) -> Set[str]:
        return {str(p.id) for p in self._load()}

    def get(self, plant_id: str) -> Optional[SavedPlant]:
        for p in self._load():
            if p.id == plant_id:
                return p
        return None

    def add(self, plant: SavedPlant) -> Optional[SavedPlant]:
        """保存植物。重复（同 ID，或同图片且同学名）返回 None。"""
        plants = self._load()
        for p in plants:
            if p.id == plant.id:
                return None
            if plant.image_uri and p.image_uri == plant.image_uri and p.scientific_name == plant.scientific_name:
                return None
        plant.saved_at = datetime.now(timezone.utc)
        plants.append(plant)
        self._save(plants)
        return plant

    def delete(self, plant_id: str) -> bool:
        """删除植物并发布删除事件。"""
        plants = self._load()
        remaining = [p for p in plants if p.id != plant_id]
        if len(remaining) == len(plants):
            return False
        self._save(remaining)
        for listener in list(self._listeners):
            try:
                listener(plant_id)
            except Exception as e:
                print(f"[养护-植物] 删除事件处理失败: {e}", file=sys.stderr, flush=True)
        return True

    def add_journal_entry(self, plant_id: str, entry: JournalEntry) -> Optional[JournalEntry]:
        """追加一条日志；植物不存在返回 None。"""
        plants = self._load()
        for p in plants:
            if p.id == plant_id:
                p.journal_entries.append(entry)
                self._save(plants)
                return entry
        return None

    def subscribe(self, listener: PlantDeletedListener) -> Callable[[], None]:
        """订阅植物删除事件，返回取消订阅函数。"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
