from __future__ import annotations

from dataclasses import dataclass

from .models import GameState, effective_max_health

MIN_FIRE_RATE = 0.1
WEAPON_FIRE_RATE_BONUS = 0.05
SHIELD_OVERCHARGE_CAP = 50


@dataclass(frozen=True, slots=True)
class EffectiveStats:
    speed: float
    damage: float
    max_health: int
    fire_rate: float


def compute_effective_stats(state: GameState) -> EffectiveStats:
    equipment = state.equipment
    speed = state.ship_speed + (equipment.engine.attribute if equipment.engine else 0.0)
    damage = state.damage + (equipment.weapon.attribute if equipment.weapon else 0.0)
    if equipment.weapon is not None:
        fire_rate = max(MIN_FIRE_RATE, state.fire_rate - WEAPON_FIRE_RATE_BONUS)
    else:
        fire_rate = state.fire_rate
    return EffectiveStats(
        speed=speed,
        damage=damage,
        max_health=effective_max_health(state),
        fire_rate=fire_rate,
    )


def apply_shield_overcharge(state: GameState, stats: EffectiveStats) -> int:
    """Top the player up when a shield raises max health above current health.

    Must be called once per stat recomputation (wave start), not per tick.
    Returns the amount healed.
    """
    if state.equipment.shield is None:
        return 0
    missing = stats.max_health - state.player_health
    if missing <= 0:
        return 0
    healed = min(SHIELD_OVERCHARGE_CAP, missing)
    state.player_health += healed
    return healed


def clamp_health(state: GameState) -> int:
    state.player_health = max(0, min(effective_max_health(state), int(state.player_health)))
    return state.player_health


def health_fraction(state: GameState) -> float:
    maximum = effective_max_health(state)
    if maximum <= 0:
        return 0.0
    return max(0.0, min(1.0, state.player_health / maximum))
