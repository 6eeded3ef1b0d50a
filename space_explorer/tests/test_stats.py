from __future__ import annotations

import pytest

from space_explorer.core.catalog import default_catalog
from space_explorer.core.models import Equipment, GameState
from space_explorer.core.stats import apply_shield_overcharge, clamp_health, compute_effective_stats


def test_base_stats_without_equipment() -> None:
    stats = compute_effective_stats(GameState())
    assert stats.speed == 200
    assert stats.damage == 10
    assert stats.max_health == 100
    assert stats.fire_rate == pytest.approx(0.3)


def test_equipment_adds_its_attribute_to_the_matching_stat() -> None:
    catalog = default_catalog()
    state = GameState()
    state.equipment.weapon = catalog.acquire("Plasma Gun")
    state.equipment.engine = catalog.acquire("Warp Drive")
    state.equipment.shield = catalog.acquire("Energy Shield")

    stats = compute_effective_stats(state)
    assert stats.damage == 35
    assert stats.speed == 300
    assert stats.max_health == 200
    assert stats.fire_rate == pytest.approx(0.25)


def test_weapon_fire_rate_bonus_is_floored() -> None:
    state = GameState(fireRate=0.12)
    state.equipment.weapon = default_catalog().acquire("Laser Cannon")
    assert compute_effective_stats(state).fire_rate == pytest.approx(0.1)


def test_stat_computation_has_no_side_effects() -> None:
    state = GameState(playerHealth=40)
    state.equipment.shield = default_catalog().acquire("Basic Shield")
    compute_effective_stats(state)
    assert state.player_health == 40


def test_shield_overcharge_heals_at_most_fifty() -> None:
    state = GameState(playerHealth=40)
    state.equipment.shield = default_catalog().acquire("Energy Shield")
    healed = apply_shield_overcharge(state, compute_effective_stats(state))
    assert healed == 50
    assert state.player_health == 90


def test_shield_overcharge_stops_at_effective_max() -> None:
    state = GameState(playerHealth=130, equipment=Equipment(shield=default_catalog().acquire("Basic Shield")))
    healed = apply_shield_overcharge(state, compute_effective_stats(state))
    assert healed == 20
    assert state.player_health == 150


def test_no_overcharge_without_shield() -> None:
    state = GameState(playerHealth=40)
    assert apply_shield_overcharge(state, compute_effective_stats(state)) == 0
    assert state.player_health == 40


def test_clamp_health_after_shield_removed() -> None:
    state = GameState(playerHealth=140, equipment=Equipment(shield=default_catalog().acquire("Basic Shield")))
    assert state.player_health == 140
    state.equipment.shield = None
    assert clamp_health(state) == 100
