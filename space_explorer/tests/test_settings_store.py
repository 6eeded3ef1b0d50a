from __future__ import annotations

import json
from pathlib import Path

from space_explorer.app.services.settings_store import SettingsStore
from space_explorer.core.settings import merge_settings


def test_settings_store_read_write(tmp_path: Path) -> None:
    path = tmp_path / "config" / "settings.json"
    store = SettingsStore(path)
    loaded = store.load()
    assert path.exists()
    assert loaded["gameplay"]["equip_returns_replaced_item"] is True
    assert loaded["gameplay"]["bullet_damage_mode"] == "fixed"
    assert loaded["exploration"]["max_items"] == 12

    loaded["gameplay"]["bullet_damage_mode"] = "weapon"
    loaded["gameplay"]["wave_clear_delay"] = 0.5
    loaded["exploration"]["x_range"] = [50, 750]
    store.save(loaded)

    model = store.load_model()
    assert model.gameplay.bullet_damage_mode == "weapon"
    assert model.gameplay.wave_clear_delay == 0.5
    assert model.exploration.x_range == [50.0, 750.0]


def test_unknown_keys_are_dropped_and_defaults_filled(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"gameplay": {"seeded_mode": False, "legacy_flag": 1}, "video": {}}), encoding="utf-8")

    loaded = SettingsStore(path).load()
    assert loaded["gameplay"]["seeded_mode"] is False
    assert "legacy_flag" not in loaded["gameplay"]
    assert "video" not in loaded
    assert loaded["gameplay"]["save_slot_name"] == "spaceExplorerSave"


def test_unreadable_settings_fall_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{broken", encoding="utf-8")
    assert SettingsStore(path).load() == merge_settings({})
    assert json.loads(path.read_text(encoding="utf-8")) == merge_settings(None)


def test_invalid_values_reset_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"gameplay": {"bullet_damage_mode": "laser"}}), encoding="utf-8")

    model = SettingsStore(path).load_model()
    assert model.gameplay.bullet_damage_mode == "fixed"
