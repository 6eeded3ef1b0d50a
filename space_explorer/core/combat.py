from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .errors import InvalidOperation
from .models import Bullet, Enemy, EnemyBullet, Entity, GameState, Player
from .settings import BulletDamageMode
from .stats import EffectiveStats
from .waves import WaveRun

KILL_SCORE = 10
KILL_GOLD = 5
ENEMY_BULLET_DAMAGE = 10
RAM_DAMAGE = 20
FIXED_BULLET_DAMAGE = 1


@dataclass(slots=True)
class HitResult:
    enemy_destroyed: bool = False
    score_gained: int = 0
    gold_gained: int = 0
    player_damage: int = 0
    game_over: bool = False
    stale: bool = False


def _damage_player(state: GameState, amount: int) -> HitResult:
    state.player_health = max(0, state.player_health - amount)
    return HitResult(player_damage=amount, game_over=state.player_health <= 0)


def resolve_bullet_enemy_hit(
    state: GameState,
    run: WaveRun,
    bullet: Bullet,
    enemy: Enemy,
    damage_mode: BulletDamageMode = "fixed",
) -> HitResult:
    if bullet.id not in run.bullets or enemy.id not in run.enemies:
        return HitResult(stale=True)
    del run.bullets[bullet.id]

    enemy.health -= FIXED_BULLET_DAMAGE if damage_mode == "fixed" else max(1, int(bullet.damage))
    if enemy.health > 0:
        return HitResult()

    run.remove_enemy(enemy.id, killed=True)
    state.score += KILL_SCORE
    state.gold += KILL_GOLD
    return HitResult(enemy_destroyed=True, score_gained=KILL_SCORE, gold_gained=KILL_GOLD)


def resolve_enemy_bullet_player_hit(state: GameState, run: WaveRun, bullet: EnemyBullet) -> HitResult:
    if run.enemy_bullets.pop(bullet.id, None) is None:
        return HitResult(stale=True)
    return _damage_player(state, ENEMY_BULLET_DAMAGE)


def resolve_enemy_player_collision(state: GameState, run: WaveRun, enemy: Enemy) -> HitResult:
    # A rammed enemy leaves the field without counting as a kill.
    if run.remove_enemy(enemy.id, killed=False) is None:
        return HitResult(stale=True)
    result = _damage_player(state, RAM_DAMAGE)
    result.enemy_destroyed = True
    return result


CollisionHandler = Callable[[GameState, WaveRun, Entity, Entity, BulletDamageMode], HitResult]

COLLISION_HANDLERS: dict[tuple[type, type], CollisionHandler] = {
    (Bullet, Enemy): lambda state, run, a, b, mode: resolve_bullet_enemy_hit(state, run, a, b, mode),
    (EnemyBullet, Player): lambda state, run, a, b, mode: resolve_enemy_bullet_player_hit(state, run, a),
    (Enemy, Player): lambda state, run, a, b, mode: resolve_enemy_player_collision(state, run, a),
}


def resolve_collision(
    state: GameState,
    run: WaveRun,
    first: Entity,
    second: Entity,
    damage_mode: BulletDamageMode = "fixed",
) -> HitResult:
    """Dispatch a combat collision on the entity pair, in either order."""
    handler = COLLISION_HANDLERS.get((type(first), type(second)))
    if handler is not None:
        return handler(state, run, first, second, damage_mode)
    handler = COLLISION_HANDLERS.get((type(second), type(first)))
    if handler is not None:
        return handler(state, run, second, first, damage_mode)
    raise InvalidOperation(
        f"No combat rule for collision between {type(first).__name__} and {type(second).__name__}."
    )


def try_fire(run: WaveRun, now: float, stats: EffectiveStats) -> Bullet | None:
    if now - run.last_shot <= stats.fire_rate:
        return None
    bullet = Bullet(id=run.issue_id(), damage=stats.damage)
    run.bullets[bullet.id] = bullet
    run.last_shot = now
    return bullet
