from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

BulletDamageMode = Literal["fixed", "weapon"]


class GameplaySettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    equip_returns_replaced_item: bool = True
    bullet_damage_mode: BulletDamageMode = "fixed"
    escaped_enemies_count_as_cleared: bool = False
    consumables_apply_on_pickup: bool = True
    wave_clear_delay: float = Field(default=2.0, ge=0.0)
    seeded_mode: bool = True
    base_seed: int = 1337
    save_slot_name: str = Field(default="spaceExplorerSave", min_length=1)


class ExplorationSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    min_items: int = Field(default=5, ge=0)
    max_items: int = Field(default=12, ge=0)
    x_range: list[float] = Field(default_factory=lambda: [100.0, 700.0], min_length=2, max_length=2)
    y_range: list[float] = Field(default_factory=lambda: [100.0, 500.0], min_length=2, max_length=2)


class AppSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    gameplay: GameplaySettings = Field(default_factory=GameplaySettings)
    exploration: ExplorationSettings = Field(default_factory=ExplorationSettings)

    def as_dict(self) -> dict[str, Any]:
        return json.loads(self.model_dump_json(by_alias=True))


def merge_settings(payload: dict[str, Any] | None) -> dict[str, Any]:
    if not isinstance(payload, dict):
        payload = {}
    return AppSettings.model_validate(payload).as_dict()


def default_settings() -> dict[str, Any]:
    return AppSettings().as_dict()
