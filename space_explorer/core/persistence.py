from __future__ import annotations

import json
import logging
from contextlib import suppress
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import PersistenceError, SaveNotFoundError
from .models import SAVE_VERSION, GameState

logger = logging.getLogger(__name__)

DEFAULT_SLOT_NAME = "spaceExplorerSave"

LEGACY_ATTRIBUTE_KEYS: dict[str, tuple[str, ...]] = {
    "weapon": ("damage",),
    "shield": ("health",),
    "engine": ("speed",),
    "consumable": ("heal", "gold", "energy"),
}


def _coerce_dict(value: Any, default: dict[str, Any] | None = None) -> dict[str, Any]:
    if isinstance(value, dict):
        return value
    return {} if default is None else dict(default)


def _migrate_legacy_item(raw: Any) -> Any:
    item = _coerce_dict(raw)
    if "category" in item or "type" not in item:
        return raw
    category = str(item.get("type"))
    attribute = 0.0
    for key in LEGACY_ATTRIBUTE_KEYS.get(category, ()):
        if key in item:
            attribute = float(item[key] or 0)
            break
    return {
        "category": category,
        "name": item.get("name", ""),
        "price": int(item.get("price", 0) or 0),
        "color": list(item.get("color", [255, 255, 255])),
        "attribute": attribute,
    }


def _migrate_legacy_planet_item(raw: Any) -> dict[str, Any]:
    entry = _coerce_dict(raw)
    if "item" in entry:
        return entry
    pos = _coerce_dict(entry.get("pos"), default={"x": 0.0, "y": 0.0})
    return {
        "item": _migrate_legacy_item(entry),
        "position": {"x": float(pos.get("x", 0.0) or 0.0), "y": float(pos.get("y", 0.0) or 0.0)},
    }


def _migrate_v0_to_v1(payload: dict[str, Any]) -> dict[str, Any]:
    if "gameState" not in payload:
        payload = {"gameState": payload}
    state = _coerce_dict(payload.get("gameState"))
    inventory = state.get("inventory")
    state["inventory"] = [_migrate_legacy_item(entry) for entry in inventory] if isinstance(inventory, list) else []
    equipment = _coerce_dict(state.get("equipment"))
    state["equipment"] = {
        slot: (_migrate_legacy_item(equipment[slot]) if equipment.get(slot) else None)
        for slot in ("weapon", "shield", "engine")
    }
    planet_items = state.get("planetItems")
    state["planetItems"] = (
        [_migrate_legacy_planet_item(entry) for entry in planet_items] if isinstance(planet_items, list) else []
    )
    payload["gameState"] = state
    payload["saveVersion"] = 1
    return payload


MIGRATION_STEPS: dict[int, Any] = {
    0: _migrate_v0_to_v1,
}


def migrate_save(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError(f"Save document must be a JSON object, not {type(payload).__name__}.")
    document = dict(payload) if "gameState" in payload else {"gameState": dict(payload)}
    game_state = document["gameState"]
    if not isinstance(game_state, dict) or "wave" not in game_state:
        raise ValueError("Save document carries no game state.")

    version_raw = document.get("saveVersion")
    try:
        version = int(version_raw) if version_raw is not None else 0
    except (TypeError, ValueError):
        version = 0
    version = max(0, min(SAVE_VERSION, version))

    while version < SAVE_VERSION:
        step = MIGRATION_STEPS.get(version)
        if step is None:
            raise ValueError(f"No migration step defined from version {version}.")
        document = step(document)
        version = int(document.get("saveVersion", version + 1))
    document["saveVersion"] = SAVE_VERSION
    return document


def state_to_document(state: GameState) -> dict[str, Any]:
    return {"saveVersion": SAVE_VERSION, "gameState": state.to_document()}


def state_from_document(payload: Any) -> GameState:
    document = migrate_save(payload)
    return GameState.model_validate(document["gameState"])


class PersistenceManager:
    """One named save slot stored as a JSON document under ``saves_dir``."""

    def __init__(self, saves_dir: Path | str, slot_name: str = DEFAULT_SLOT_NAME) -> None:
        self.saves_dir = Path(saves_dir)
        self.slot_name = slot_name
        self.path = self.saves_dir / f"{slot_name}.json"

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, state: GameState) -> Path:
        payload = json.dumps(state_to_document(state), indent=2)
        temp_path = self.path.with_suffix(".json.tmp")
        try:
            self.saves_dir.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(payload, encoding="utf-8")
            temp_path.replace(self.path)
        except OSError as exc:
            with suppress(OSError):
                temp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Could not write save slot '{self.slot_name}': {exc}") from exc
        logger.info("Saved game to %s (wave %d).", self.path, state.wave)
        return self.path

    def load(self) -> GameState:
        if not self.path.exists():
            raise SaveNotFoundError(self.slot_name)
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Save slot '{self.slot_name}' is unreadable: {exc}") from exc
        try:
            state = state_from_document(payload)
        except (ValidationError, ValueError) as exc:
            raise PersistenceError(f"Save slot '{self.slot_name}' is invalid: {exc}") from exc
        logger.info("Loaded game from %s (wave %d).", self.path, state.wave)
        return state

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)
