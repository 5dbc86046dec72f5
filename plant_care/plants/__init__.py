"""已保存植物与养护日志。"""
from plant_care.plants.models import JournalEntry, SavedPlant, create_journal_entry, create_standard_plant
from plant_care.plants.store import SavedPlantStore

__all__ = [
    "JournalEntry",
    "SavedPlant",
    "SavedPlantStore",
    "create_journal_entry",
    "create_standard_plant",
]
