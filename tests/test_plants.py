"""键值存储与已保存植物测试。"""
import tempfile
from pathlib import Path

from plant_care.plants.models import SavedPlant, create_journal_entry, create_standard_plant
from plant_care.plants.store import SavedPlantStore
from plant_care.storage.kv import JsonFileStore, MemoryStore


def test_json_file_store_roundtrip() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        store = JsonFileStore(base_dir=Path(tmp))
        assert store.get("k") is None
        store.set("k", "[1, 2]")
        store.set("other", "x")
        assert JsonFileStore(base_dir=Path(tmp)).get("k") == "[1, 2]"
        store.remove("k")
        assert store.get("k") is None
        assert store.get("other") == "x"
        store.clear()
        assert store.get("other") is None


def test_add_rejects_duplicates() -> None:
    store = SavedPlantStore(MemoryStore())
    first = store.add(SavedPlant(id="1", common_name="Fern", scientific_name="Nephrolepis", image_uri="a.jpg"))
    assert first is not None
    assert first.saved_at is not None
    assert store.add(SavedPlant(id="1", common_name="Other")) is None
    assert store.add(SavedPlant(id="2", scientific_name="Nephrolepis", image_uri="a.jpg")) is None
    assert store.add(SavedPlant(id="3", scientific_name="Nephrolepis", image_uri="b.jpg")) is not None
    assert store.ids() == {"1", "3"}


def test_delete_publishes_event() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        store = SavedPlantStore(JsonFileStore(base_dir=Path(tmp)))
        store.add(SavedPlant(id="1", common_name="Fern"))
        seen = []
        unsubscribe = store.subscribe(seen.append)
        assert store.delete("missing") is False
        assert store.delete("1") is True
        assert seen == ["1"]
        assert store.list() == []
        unsubscribe()
        store.add(SavedPlant(id="2", common_name="Cactus"))
        store.delete("2")
        assert seen == ["1"]


def test_failing_listener_does_not_block_delete() -> None:
    store = SavedPlantStore(MemoryStore())
    store.add(SavedPlant(id="1", common_name="Fern"))

    def boom(plant_id: str) -> None:
        raise RuntimeError("listener failed")

    store.subscribe(boom)
    assert store.delete("1") is True
    assert store.get("1") is None


def test_journal_entries() -> None:
    store = SavedPlantStore(MemoryStore())
    store.add(SavedPlant(id="1", common_name="Fern"))
    entry = create_journal_entry("watering", images=["x.jpg"], description="deep soak")
    assert store.add_journal_entry("1", entry) == entry
    assert store.add_journal_entry("missing", entry) is None
    loaded = store.get("1")
    assert len(loaded.journal_entries) == 1
    assert loaded.journal_entries[0].description == "deep soak"
    assert loaded.journal_entries[0].images == ["x.jpg"]


def test_create_standard_plant() -> None:
    identification = {
        "suggestions": [
            {
                "probability": 0.91,
                "plant_details": {
                    "common_names": ["Swiss cheese plant"],
                    "scientific_name": "Monstera deliciosa",
                    "family": "Araceae",
                    "genus": "Monstera",
                },
            }
        ]
    }
    plant = create_standard_plant(identification, image_uri="m.jpg", plant_id="42")
    assert plant.id == "42"
    assert plant.common_name == "Swiss cheese plant"
    assert plant.scientific_name == "Monstera deliciosa"
    assert plant.family == "Araceae"
    assert plant.probability == 0.91
    text = create_standard_plant(ai_info={"commonName": "Aloe"}, search_type="text", search_term="aloe")
    assert text.common_name == "Aloe"
    assert text.search_type == "text"
    assert create_standard_plant(search_term="mint").common_name == "mint"
    assert create_standard_plant().common_name == "Unknown Plant"
