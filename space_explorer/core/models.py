from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

ItemCategory = Literal["weapon", "shield", "engine", "consumable"]
EquipSlot = Literal["weapon", "shield", "engine"]

SAVE_VERSION = 1

ITEM_CATEGORIES: tuple[ItemCategory, ItemCategory, ItemCategory, ItemCategory] = (
    "weapon",
    "shield",
    "engine",
    "consumable",
)
EQUIP_SLOTS: tuple[EquipSlot, EquipSlot, EquipSlot] = ("weapon", "shield", "engine")

DEFAULT_WAVE = 1
DEFAULT_GOLD = 100
DEFAULT_HEALTH = 100
DEFAULT_SHIP_SPEED = 200.0
DEFAULT_FIRE_RATE = 0.3
DEFAULT_DAMAGE = 10.0

HEALTH_PACK = "Health Pack"
GOLD_ORE = "Gold Ore"


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class Item(StrictModel):
    """Catalog entry or a player-held snapshot of one. Never mutated in place."""

    model_config = ConfigDict(frozen=True)

    category: ItemCategory
    name: str = Field(min_length=1)
    price: int = Field(ge=0)
    color: tuple[int, int, int]
    attribute: float = 0.0

    @property
    def is_consumable(self) -> bool:
        return self.category == "consumable"

    def snapshot(self) -> "Item":
        return self.model_copy()


class Position(StrictModel):
    x: float
    y: float


class PlanetItem(StrictModel):
    item: Item
    position: Position


class Equipment(StrictModel):
    weapon: Item | None = None
    shield: Item | None = None
    engine: Item | None = None

    @model_validator(mode="after")
    def validate_slot_categories(self) -> "Equipment":
        for slot in EQUIP_SLOTS:
            item = getattr(self, slot)
            if item is not None and item.category != slot:
                raise ValueError(f"Equipment slot '{slot}' cannot hold a {item.category} item.")
        return self

    def get(self, slot: EquipSlot) -> Item | None:
        return getattr(self, slot)

    def put(self, slot: EquipSlot, item: Item | None) -> Item | None:
        if item is not None and item.category != slot:
            raise ValueError(f"Equipment slot '{slot}' cannot hold a {item.category} item.")
        previous = getattr(self, slot)
        setattr(self, slot, item)
        return previous

    def as_values(self) -> list[Item]:
        return [item for item in (self.weapon, self.shield, self.engine) if item is not None]


class GameState(StrictModel):
    wave: int = Field(default=DEFAULT_WAVE, ge=1)
    score: int = Field(default=0, ge=0)
    gold: int = Field(default=DEFAULT_GOLD, ge=0)
    player_health: int = Field(default=DEFAULT_HEALTH, alias="playerHealth")
    max_health: int = Field(default=DEFAULT_HEALTH, alias="maxHealth", ge=1)
    ship_speed: float = Field(default=DEFAULT_SHIP_SPEED, alias="shipSpeed")
    fire_rate: float = Field(default=DEFAULT_FIRE_RATE, alias="fireRate", gt=0)
    damage: float = DEFAULT_DAMAGE
    inventory: list[Item] = Field(default_factory=list)
    equipment: Equipment = Field(default_factory=Equipment)
    planet_items: list[PlanetItem] = Field(default_factory=list, alias="planetItems")

    @model_validator(mode="after")
    def clamp_player_health(self) -> "GameState":
        self.player_health = max(0, min(effective_max_health(self), int(self.player_health)))
        return self

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def effective_max_health(state: GameState) -> int:
    shield = state.equipment.shield
    return int(state.max_health + (shield.attribute if shield is not None else 0))


def create_new_game_state() -> GameState:
    return GameState()


@dataclass(slots=True)
class Player:
    id: int = 0


@dataclass(slots=True)
class Enemy:
    id: int
    health: int
    speed: float
    x: float
    y: float
    last_shot: float = 0.0


@dataclass(slots=True)
class Bullet:
    id: int
    damage: float
    speed: float = 400.0


@dataclass(slots=True)
class EnemyBullet:
    id: int
    speed: float = 200.0


@dataclass(slots=True)
class GroundItem:
    planet_item: PlanetItem


Entity = Player | Enemy | Bullet | EnemyBullet | GroundItem
