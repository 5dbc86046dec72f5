"""键值存储：字符串值，JSON 编码由调用方负责。"""
from plant_care.storage.kv import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "KeyValueStore",
    "JsonFileStore",
    "MemoryStore",
]
