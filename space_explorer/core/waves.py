from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from .models import Bullet, Enemy, EnemyBullet, GameState
from .planet import PlanetItemGenerator
from .rng import DeterministicRNG

WavePhase = Literal["spawning", "in_progress", "clearing", "complete"]
Destination = Literal["shop", "exploration"]

SHOP_WAVE_INTERVAL = 5
ENEMY_SPEED_RANGE = (50.0, 100.0)
ENEMY_SPAWN_X_RANGE = (50.0, 750.0)
ENEMY_SPAWN_Y_RANGE = (-200.0, -50.0)
ENEMY_FIRE_COOLDOWN = 2.0
ENEMY_FIRE_CHANCE = 0.01
WAVE_CLEAR_MESSAGE = "Wave Complete! Proceeding to planet..."


def enemy_count(wave: int) -> int:
    return wave * 3 + 2


def enemy_health(wave: int) -> int:
    return wave // 2 + 1


@dataclass(slots=True)
class WaveRun:
    """Live bookkeeping for one wave: entities on the field and kill counters."""

    wave: int
    enemy_count: int
    enemies: dict[int, Enemy] = field(default_factory=dict)
    bullets: dict[int, Bullet] = field(default_factory=dict)
    enemy_bullets: dict[int, EnemyBullet] = field(default_factory=dict)
    enemies_killed: int = 0
    enemies_escaped: int = 0
    phase: WavePhase = "spawning"
    destination: Destination | None = None
    last_shot: float = 0.0
    next_id: int = 1

    @property
    def remaining(self) -> int:
        return len(self.enemies)

    def issue_id(self) -> int:
        value = self.next_id
        self.next_id += 1
        return value

    def remove_enemy(self, enemy_id: int, killed: bool) -> Enemy | None:
        enemy = self.enemies.pop(enemy_id, None)
        if enemy is None:
            return None
        if killed:
            self.enemies_killed += 1
        else:
            self.enemies_escaped += 1
        return enemy

    def is_cleared(self, count_escapes: bool = False) -> bool:
        if self.remaining != 0:
            return False
        accounted = self.enemies_killed + (self.enemies_escaped if count_escapes else 0)
        return accounted >= self.enemy_count


def spawn_wave(state: GameState, rng: DeterministicRNG) -> WaveRun:
    run = WaveRun(wave=state.wave, enemy_count=enemy_count(state.wave))
    health = enemy_health(state.wave)
    for _ in range(run.enemy_count):
        enemy = Enemy(
            id=run.issue_id(),
            health=health,
            speed=rng.next_uniform(*ENEMY_SPEED_RANGE),
            x=rng.next_uniform(*ENEMY_SPAWN_X_RANGE),
            y=rng.next_uniform(*ENEMY_SPAWN_Y_RANGE),
        )
        run.enemies[enemy.id] = enemy
    run.phase = "in_progress"
    return run


def begin_clearing(run: WaveRun, count_escapes: bool = False) -> bool:
    """Move a finished wave into the clearing delay. True only on the first call."""
    if run.phase != "in_progress" or not run.is_cleared(count_escapes):
        return False
    run.phase = "clearing"
    return True


def advance_wave(state: GameState, run: WaveRun) -> Destination:
    state.wave += 1
    run.destination = "shop" if state.wave % SHOP_WAVE_INTERVAL == 0 else "exploration"
    run.phase = "complete"
    return run.destination


def stock_planet(state: GameState, generator: PlanetItemGenerator, rng: DeterministicRNG) -> None:
    state.planet_items = generator.generate(rng)


def enemies_ready_to_fire(run: WaveRun, now: float, rng: DeterministicRNG) -> list[EnemyBullet]:
    fired: list[EnemyBullet] = []
    for enemy in run.enemies.values():
        if now - enemy.last_shot <= ENEMY_FIRE_COOLDOWN:
            continue
        if rng.next_float() >= ENEMY_FIRE_CHANCE:
            continue
        bullet = EnemyBullet(id=run.issue_id())
        run.enemy_bullets[bullet.id] = bullet
        enemy.last_shot = now
        fired.append(bullet)
    return fired
