from __future__ import annotations

import json
from pathlib import Path

import pytest

from space_explorer.core.catalog import default_catalog
from space_explorer.core.errors import PersistenceError, SaveNotFoundError
from space_explorer.core.models import SAVE_VERSION, Equipment, GameState, PlanetItem, Position
from space_explorer.core.persistence import PersistenceManager, migrate_save, state_from_document


def _rich_state() -> GameState:
    catalog = default_catalog()
    return GameState(
        wave=7,
        score=230,
        gold=42,
        playerHealth=120,
        inventory=[catalog.acquire("Health Pack"), catalog.acquire("Warp Drive")],
        equipment=Equipment(
            weapon=catalog.acquire("Ion Blaster"),
            shield=catalog.acquire("Basic Shield"),
            engine=catalog.acquire("Boost Engine"),
        ),
        planetItems=[PlanetItem(item=catalog.acquire("Gold Ore"), position=Position(x=321.5, y=144.0))],
    )


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    store = PersistenceManager(tmp_path / "saves")
    state = _rich_state()

    path = store.save(state)
    assert path == tmp_path / "saves" / "spaceExplorerSave.json"
    assert store.exists()

    loaded = store.load()
    assert loaded == state
    assert loaded.equipment.weapon.name == "Ion Blaster"
    assert loaded.player_health == 120


def test_save_document_uses_camel_case_and_explicit_nulls(tmp_path: Path) -> None:
    store = PersistenceManager(tmp_path, slot_name="slot-a")
    store.save(GameState())

    document = json.loads((tmp_path / "slot-a.json").read_text(encoding="utf-8"))
    assert document["saveVersion"] == SAVE_VERSION
    game_state = document["gameState"]
    assert game_state["playerHealth"] == 100
    assert game_state["planetItems"] == []
    assert game_state["equipment"] == {"weapon": None, "shield": None, "engine": None}
    assert not list(tmp_path.glob("*.tmp"))


def test_missing_save_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(SaveNotFoundError) as excinfo:
        PersistenceManager(tmp_path).load()
    assert excinfo.value.slot_name == "spaceExplorerSave"


def test_corrupt_save_raises_persistence_error(tmp_path: Path) -> None:
    store = PersistenceManager(tmp_path)
    store.path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceError, match="unreadable"):
        store.load()

    store.path.write_text(json.dumps({"saveVersion": 1, "gameState": {"wave": 0}}), encoding="utf-8")
    with pytest.raises(PersistenceError, match="invalid"):
        store.load()


def test_unwritable_save_dir_raises_persistence_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(PersistenceError, match="Could not write"):
        PersistenceManager(blocker).save(GameState())


def test_delete_removes_slot(tmp_path: Path) -> None:
    store = PersistenceManager(tmp_path)
    store.save(GameState())
    store.delete()
    assert not store.exists()
    store.delete()


def test_legacy_browser_save_migrates() -> None:
    legacy = {
        "wave": 4,
        "score": 120,
        "gold": 80,
        "playerHealth": 90,
        "maxHealth": 100,
        "shipSpeed": 200,
        "fireRate": 0.3,
        "damage": 10,
        "inventory": [{"type": "consumable", "name": "Health Pack", "price": 25, "color": [255, 0, 0], "heal": 50}],
        "equipment": {
            "weapon": {"type": "weapon", "name": "Laser Cannon", "price": 50, "color": [255, 0, 0], "damage": 15},
            "shield": None,
            "engine": None,
        },
        "planetItems": [
            {
                "type": "engine",
                "name": "Warp Drive",
                "price": 120,
                "color": [0, 0, 255],
                "speed": 100,
                "pos": {"x": 200, "y": 300},
            }
        ],
    }

    document = migrate_save(legacy)
    assert document["saveVersion"] == SAVE_VERSION

    state = state_from_document(legacy)
    assert state.wave == 4
    assert state.inventory[0].attribute == 50
    assert state.equipment.weapon.attribute == 15
    assert state.equipment.shield is None
    assert state.planet_items[0].item.name == "Warp Drive"
    assert state.planet_items[0].position == Position(x=200, y=300)


@pytest.mark.parametrize("raw", ["null", "[]", "42", "{}", '{"saveVersion": 1, "gameState": null}'])
def test_non_save_documents_are_rejected(tmp_path: Path, raw: str) -> None:
    store = PersistenceManager(tmp_path)
    store.path.write_text(raw, encoding="utf-8")
    with pytest.raises(PersistenceError, match="invalid"):
        store.load()


def test_failed_write_leaves_previous_save_intact(tmp_path: Path) -> None:
    store = PersistenceManager(tmp_path)
    store.save(GameState(wave=3))
    store.path.with_suffix(".json.tmp").mkdir()

    with pytest.raises(PersistenceError):
        store.save(GameState(wave=4))
    assert store.load().wave == 3
