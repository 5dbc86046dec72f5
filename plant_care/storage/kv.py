"""本地键值存储（单个 JSON 文件，类似移动端 AsyncStorage）。"""
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from plant_care.config import STORAGE_DIR, STORAGE_FILENAME, ensure_dirs


class KeyValueStore(ABC):
    """字符串键值存储接口。"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class MemoryStore(KeyValueStore):
    """进程内存储，测试或临时会话用。"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


class JsonFileStore(KeyValueStore):
    """所有键存于一个 JSON 对象文件，每次写入整体覆盖。"""

    def __init__(self, base_dir: Optional[Path] = None, filename: str = STORAGE_FILENAME):
        self.base_dir = base_dir or STORAGE_DIR
        self.filename = filename
        if base_dir is None:
            ensure_dirs()
        else:
            self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self) -> Path:
        return self.base_dir / self.filename

    def _load(self) -> Dict[str, str]:
        if not self._path().exists():
            return {}
        with open(self._path(), "r", encoding="utf-8") as f:
            return json.load(f)

    def _save(self, data: Dict[str, str]) -> None:
        with open(self._path(), "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def clear(self) -> None:
        if self._path().exists():
            self._path().unlink()
