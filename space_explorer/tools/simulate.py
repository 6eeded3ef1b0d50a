from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from space_explorer.app.services.logger import configure_logging
from space_explorer.app.services.paths import resolve_user_paths
from space_explorer.app.services.settings_store import SettingsStore
from space_explorer.core.events import Collision, EnemiesFired, Fired, Input, Purchase, Tick
from space_explorer.core.models import HEALTH_PACK, GameState, GroundItem, Player
from space_explorer.core.persistence import DEFAULT_SLOT_NAME, PersistenceManager
from space_explorer.core.rng import DeterministicRNG
from space_explorer.core.session import GameSession
from space_explorer.core.settings import AppSettings

app = typer.Typer(add_completion=False, help="Run a deterministic headless session for balancing and testing.")
console = Console()

TICK = 0.1
MAX_TICKS_PER_WAVE = 3000


def _normalize_seed(raw_seed: str) -> int | str:
    try:
        return int(raw_seed)
    except ValueError:
        return raw_seed


def _play_combat(session: GameSession, bot: DeterministicRNG, hit_chance: float, dodge_chance: float) -> None:
    player = Player()
    for _ in range(MAX_TICKS_PER_WAVE):
        if session.phase != "combat":
            return
        result = session.dispatch(Tick(TICK))
        for effect in result.effects:
            if isinstance(effect, EnemiesFired):
                for bullet in effect.bullets:
                    if bot.next_float() >= dodge_chance:
                        session.dispatch(Collision(bullet, player))
        run = session.wave_run
        if session.phase != "combat" or run is None:
            continue
        for effect in session.dispatch(Input("fire")).effects:
            if isinstance(effect, Fired) and run.enemies and bot.next_float() < hit_chance:
                target = bot.choose(list(run.enemies.values()))
                session.dispatch(Collision(effect.bullet, target))


def _loot_and_refit(session: GameSession) -> None:
    player = Player()
    for planet_item in list(session.state.planet_items):
        session.dispatch(Collision(player, GroundItem(planet_item)))
    session.dispatch(Input("open-inventory"))
    index = 0
    while index < len(session.state.inventory):
        item = session.state.inventory[index]
        session.inventory.selected = index
        equipped = session.state.equipment.get(item.category) if not item.is_consumable else None
        if not item.is_consumable and (equipped is None or equipped.attribute < item.attribute):
            session.dispatch(Input("equip"))
            continue
        if item.name == HEALTH_PACK and session.hud().health_fraction < 1.0:
            session.dispatch(Input("use"))
            continue
        index += 1
    session.dispatch(Input("back"))


def run_bot(
    seed: int | str,
    waves: int,
    hit_chance: float = 0.6,
    dodge_chance: float = 0.5,
    store: PersistenceManager | None = None,
    settings: AppSettings | None = None,
) -> tuple[GameSession, int]:
    """Drive a session with a seeded bot until ``waves`` are cleared or the ship is lost."""
    session = GameSession(store=store, settings=settings, seed=seed)
    bot = session.rng.fork("bot")
    session.dispatch(Input("new-game"))

    cleared = 0
    while cleared < waves and session.phase != "game_over":
        start_wave = session.state.wave
        _play_combat(session, bot, hit_chance, dodge_chance)
        if session.phase == "combat":
            console.print(f"[bold yellow]Wave {start_wave} stalled; stopping.[/bold yellow]")
            break
        if session.phase == "game_over":
            break
        cleared += 1
        if session.phase == "exploration":
            _loot_and_refit(session)
            session.dispatch(Input("return-to-ship"))
        elif session.phase == "shop":
            session.dispatch(Purchase(HEALTH_PACK))
            session.dispatch(Input("continue"))
    return session, cleared


def state_signature(state: GameState) -> str:
    return hashlib.sha256(json.dumps(state.to_document(), sort_keys=True).encode("utf-8")).hexdigest()[:16]


@app.command()
def main(
    seed: str = typer.Option("123", "--seed", help="Seed value (int or string)."),
    waves: int = typer.Option(10, "--waves", min=1, help="Stop after this many cleared waves."),
    hit_chance: float = typer.Option(0.6, "--hit-chance", min=0.0, max=1.0, help="Chance a player shot lands."),
    dodge_chance: float = typer.Option(0.5, "--dodge-chance", min=0.0, max=1.0, help="Chance to dodge enemy fire."),
    save_dir: Optional[Path] = typer.Option(None, "--save-dir", help="Write checkpoints to this directory."),
    settings_file: Optional[Path] = typer.Option(None, "--settings", help="Read gameplay settings from this JSON file."),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Write latest.log and gameplay.log here."),
    user_dirs: bool = typer.Option(
        False, "--user-dirs", help="Default saves, logs and settings to the per-user data directories."
    ),
) -> None:
    if user_dirs:
        user_paths = resolve_user_paths()
        save_dir = save_dir or user_paths.saves
        settings_file = settings_file or user_paths.settings_file
        log_dir = log_dir or user_paths.logs
    logging_bundle = configure_logging(log_dir) if log_dir is not None else None
    settings = SettingsStore(settings_file).load_model() if settings_file is not None else None
    store = None
    if save_dir is not None:
        slot = settings.gameplay.save_slot_name if settings is not None else DEFAULT_SLOT_NAME
        store = PersistenceManager(save_dir, slot)
    session, cleared = run_bot(_normalize_seed(seed), waves, hit_chance, dodge_chance, store, settings)

    final_state = session.state
    stats = session.stats
    summary = Table(title="Simulation Summary")
    summary.add_column("Field", style="cyan", no_wrap=True)
    summary.add_column("Value", style="white")
    summary.add_row("Seed", str(seed))
    summary.add_row("Phase", session.phase)
    summary.add_row("Waves Cleared", str(cleared))
    summary.add_row("Wave", str(final_state.wave))
    summary.add_row("Score", str(final_state.score))
    summary.add_row("Gold", str(final_state.gold))
    summary.add_row("Health", session.hud().health_text)
    summary.add_row(
        "Stats",
        f"speed={stats.speed:.0f}, damage={stats.damage:.0f}, fire_rate={stats.fire_rate:.2f}",
    )
    summary.add_row(
        "Equipment",
        ", ".join(f"{item.category}={item.name}" for item in final_state.equipment.as_values()) or "-",
    )
    summary.add_row("Inventory", ", ".join(item.name for item in final_state.inventory) or "-")
    console.print(summary)
    console.print(f"\n[bold green]Deterministic signature:[/bold green] {state_signature(final_state)}")
    if logging_bundle is not None:
        logging_bundle.close()


if __name__ == "__main__":
    app()
