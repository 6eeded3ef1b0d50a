from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from .models import Bullet, EnemyBullet, Entity, EquipSlot

Phase = Literal["menu", "combat", "paused", "exploration", "shop", "inventory", "ship", "game_over"]

InputAction = Literal[
    "move-left",
    "move-right",
    "move-up",
    "move-down",
    "fire",
    "pause",
    "equip",
    "use",
    "select-up",
    "select-down",
    "return-to-ship",
    "open-inventory",
    "open-ship-screen",
    "new-game",
    "load-game",
    "save",
    "resume",
    "continue",
    "back",
    "restart",
    "menu",
]


# Events fed in by the host engine.


@dataclass(frozen=True, slots=True)
class Tick:
    dt: float


@dataclass(frozen=True, slots=True)
class Input:
    action: InputAction


@dataclass(frozen=True, slots=True)
class Purchase:
    item_name: str


@dataclass(frozen=True, slots=True)
class Unequip:
    slot: EquipSlot


@dataclass(frozen=True, slots=True)
class Collision:
    first: Entity
    second: Entity


@dataclass(frozen=True, slots=True)
class EnemyEscaped:
    enemy_id: int


@dataclass(frozen=True, slots=True)
class BulletExpired:
    bullet_id: int


Event = Tick | Input | Purchase | Unequip | Collision | EnemyEscaped | BulletExpired


# Effects declared back to the host.


@dataclass(frozen=True, slots=True)
class Notice:
    message: str


@dataclass(frozen=True, slots=True)
class PhaseChanged:
    previous: Phase
    current: Phase


@dataclass(frozen=True, slots=True)
class Saved:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class Fired:
    bullet: Bullet


@dataclass(frozen=True, slots=True)
class EnemiesFired:
    bullets: tuple[EnemyBullet, ...]


@dataclass(frozen=True, slots=True)
class EntityRemoved:
    entity_id: int


@dataclass(frozen=True, slots=True)
class GameOver:
    score: int
    waves_survived: int


Effect = Notice | PhaseChanged | Saved | Fired | EnemiesFired | EntityRemoved | GameOver


@dataclass(frozen=True, slots=True)
class HudSnapshot:
    wave_text: str
    score_text: str
    gold_text: str
    health_text: str
    health_fraction: float


@dataclass(slots=True)
class StepResult:
    phase: Phase
    hud: HudSnapshot
    effects: list[Effect] = field(default_factory=list)

    def notices(self) -> list[str]:
        return [effect.message for effect in self.effects if isinstance(effect, Notice)]
