from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from .catalog import ItemCatalog, default_catalog
from .combat import resolve_collision, try_fire
from .economy import purchase
from .errors import InvalidOperation, PersistenceError, SaveNotFoundError
from .events import (
    BulletExpired,
    Collision,
    Effect,
    EnemiesFired,
    EnemyEscaped,
    EntityRemoved,
    Event,
    Fired,
    GameOver,
    HudSnapshot,
    Input,
    InputAction,
    Notice,
    Phase,
    PhaseChanged,
    Purchase,
    Saved,
    StepResult,
    Tick,
    Unequip,
)
from .inventory import InventoryManager
from .models import Enemy, GameState, GroundItem, Player, create_new_game_state, effective_max_health
from .persistence import PersistenceManager
from .planet import PlanetItemGenerator
from .rng import DeterministicRNG
from .settings import AppSettings
from .stats import apply_shield_overcharge, compute_effective_stats, health_fraction
from .waves import (
    WAVE_CLEAR_MESSAGE,
    WaveRun,
    advance_wave,
    begin_clearing,
    enemies_ready_to_fire,
    spawn_wave,
    stock_planet,
)

logger = logging.getLogger(__name__)
gameplay_log = logging.getLogger("space_explorer.gameplay")

NO_SAVE_MESSAGE = "No save file found!"
BAD_SAVE_MESSAGE = "Save file could not be loaded."


@dataclass(slots=True)
class ScheduledAction:
    fire_at: float
    phase: Phase
    label: str
    callback: Callable[[], None]


class GameSession:
    """Owns the live game state and turns host events into state changes.

    The host engine calls :meth:`dispatch` once per event; each call runs to
    completion and returns the effects the host should present plus fresh HUD
    values. Checkpoint saves happen synchronously inside ``dispatch``.
    """

    def __init__(
        self,
        store: PersistenceManager | None = None,
        settings: AppSettings | None = None,
        catalog: ItemCatalog | None = None,
        seed: int | str | None = None,
        state: GameState | None = None,
    ) -> None:
        self.settings = settings or AppSettings()
        self.catalog = catalog or default_catalog()
        self.store = store
        gameplay = self.settings.gameplay
        if seed is None:
            seed = gameplay.base_seed if gameplay.seeded_mode else time.time_ns()
        self.rng = DeterministicRNG.from_seed(seed)
        self.state = state or create_new_game_state()
        self.phase: Phase = "menu"
        self.return_phase: Phase | None = None
        self.wave_run: WaveRun | None = None
        self.stats = compute_effective_stats(self.state)
        self.inventory = InventoryManager(gameplay)
        self.generator = PlanetItemGenerator(self.catalog, self.settings.exploration)
        self.clock = 0.0
        self._timers: list[ScheduledAction] = []
        self._effects: list[Effect] = []
        self._handlers: dict[type, Callable[[Any], None]] = {
            Tick: self._on_tick,
            Input: self._on_input,
            Purchase: self._on_purchase,
            Unequip: self._on_unequip,
            Collision: self._on_collision,
            EnemyEscaped: self._on_enemy_escaped,
            BulletExpired: self._on_bullet_expired,
        }
        self._input_table: dict[tuple[Phase, InputAction], Callable[[], None]] = {
            ("menu", "new-game"): self._new_game,
            ("menu", "load-game"): self._load_game,
            ("combat", "fire"): self._fire,
            ("combat", "pause"): self._pause,
            ("paused", "resume"): self._resume,
            ("paused", "pause"): self._resume,
            ("paused", "open-inventory"): lambda: self._open_screen("inventory"),
            ("paused", "open-ship-screen"): lambda: self._open_screen("ship"),
            ("paused", "save"): self._save_and_quit,
            ("exploration", "return-to-ship"): self._return_to_ship,
            ("exploration", "open-inventory"): lambda: self._open_screen("inventory"),
            ("exploration", "open-ship-screen"): lambda: self._open_screen("ship"),
            ("shop", "continue"): self._leave_shop,
            ("shop", "open-inventory"): lambda: self._open_screen("inventory"),
            ("shop", "open-ship-screen"): lambda: self._open_screen("ship"),
            ("inventory", "select-up"): lambda: self.inventory.select_up(self.state),
            ("inventory", "select-down"): lambda: self.inventory.select_down(self.state),
            ("inventory", "equip"): self._equip_selected,
            ("inventory", "use"): self._use_selected,
            ("inventory", "back"): self._close_screen,
            ("ship", "back"): self._close_screen,
            ("game_over", "restart"): self._new_game,
            ("game_over", "menu"): lambda: self._transition("menu"),
        }

    # -- public API -----------------------------------------------------

    def dispatch(self, event: Event) -> StepResult:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event type: {type(event).__name__}")
        self._effects = []
        try:
            handler(event)
        except InvalidOperation as exc:
            logger.debug("Rejected %r in phase %s: %s", event, self.phase, exc)
        return StepResult(phase=self.phase, hud=self.hud(), effects=self._effects)

    def hud(self) -> HudSnapshot:
        state = self.state
        return HudSnapshot(
            wave_text=f"Wave: {state.wave}",
            score_text=f"Score: {state.score}",
            gold_text=f"Gold: {state.gold}",
            health_text=f"Health: {state.player_health}/{effective_max_health(state)}",
            health_fraction=health_fraction(state),
        )

    def pending_timers(self) -> list[str]:
        return [timer.label for timer in self._timers]

    # -- event handlers -------------------------------------------------

    def _on_tick(self, event: Tick) -> None:
        self.clock += max(0.0, event.dt)
        self._fire_due_timers()
        run = self.wave_run
        if self.phase != "combat" or run is None:
            return
        if begin_clearing(run, self.settings.gameplay.escaped_enemies_count_as_cleared):
            gameplay_log.info("Wave %d cleared: %d kills.", run.wave, run.enemies_killed)
            self._emit(Notice(WAVE_CLEAR_MESSAGE))
            self._schedule_wave_advance()
        if run.phase == "in_progress":
            fired = enemies_ready_to_fire(run, self.clock, self.rng)
            if fired:
                self._emit(EnemiesFired(tuple(fired)))

    def _on_input(self, event: Input) -> None:
        action = self._input_table.get((self.phase, event.action))
        if action is None:
            # Movement and out-of-phase keys carry no engine state.
            return
        action()

    def _on_purchase(self, event: Purchase) -> None:
        if self.phase != "shop":
            raise InvalidOperation("Purchases are only possible in the shop.")
        try:
            entry = self.catalog.get(event.item_name)
        except KeyError as exc:
            raise InvalidOperation(str(exc)) from exc
        receipt = purchase(self.state, entry)
        if receipt.success:
            gameplay_log.info("Bought %s for %d gold (left %d).", receipt.item_name, receipt.cost, self.state.gold)
        self._emit(Notice(receipt.message))

    def _on_unequip(self, event: Unequip) -> None:
        if self.phase != "ship":
            raise InvalidOperation("Equipment can only be removed on the ship screen.")
        item = self.inventory.unequip(self.state, event.slot)
        gameplay_log.info("Unequipped %s from %s.", item.name, event.slot)
        self._emit(Notice(f"Removed: {item.name}"))

    def _on_collision(self, event: Collision) -> None:
        pair = (event.first, event.second)
        ground = next((entity for entity in pair if isinstance(entity, GroundItem)), None)
        if ground is not None:
            if self.phase != "exploration" or not any(isinstance(entity, Player) for entity in pair):
                raise InvalidOperation("Items can only be picked up by the player while exploring.")
            self._collect(ground)
            return

        run = self.wave_run
        if self.phase != "combat" or run is None:
            return
        result = resolve_collision(self.state, run, event.first, event.second, self.settings.gameplay.bullet_damage_mode)
        if result.stale:
            return
        if result.enemy_destroyed:
            enemy_id = next(entity.id for entity in pair if isinstance(entity, Enemy))
            self._emit(EntityRemoved(enemy_id))
        if result.game_over:
            self._game_over()

    def _on_enemy_escaped(self, event: EnemyEscaped) -> None:
        run = self.wave_run
        if run is None or run.remove_enemy(event.enemy_id, killed=False) is None:
            return
        logger.debug("Enemy %d left the play area in wave %d.", event.enemy_id, run.wave)
        self._emit(EntityRemoved(event.enemy_id))

    def _on_bullet_expired(self, event: BulletExpired) -> None:
        run = self.wave_run
        if run is None:
            return
        run.bullets.pop(event.bullet_id, None)
        run.enemy_bullets.pop(event.bullet_id, None)

    # -- actions --------------------------------------------------------

    def _new_game(self) -> None:
        self.state = create_new_game_state()
        self.inventory.reset_selection(self.state)
        gameplay_log.info("New game started.")
        self._start_wave()

    def _load_game(self) -> None:
        if self.store is None:
            self._emit(Notice(NO_SAVE_MESSAGE))
            return
        try:
            self.state = self.store.load()
        except SaveNotFoundError:
            self._emit(Notice(NO_SAVE_MESSAGE))
            return
        except PersistenceError as exc:
            logger.warning("Load failed: %s", exc)
            self._emit(Notice(BAD_SAVE_MESSAGE))
            return
        self.inventory.reset_selection(self.state)
        gameplay_log.info("Loaded game at wave %d.", self.state.wave)
        self._start_wave()

    def _start_wave(self) -> None:
        self.stats = compute_effective_stats(self.state)
        healed = apply_shield_overcharge(self.state, self.stats)
        self.wave_run = spawn_wave(self.state, self.rng)
        gameplay_log.info(
            "Wave %d started: %d enemies, health %d/%d (shield overcharge +%d).",
            self.state.wave,
            self.wave_run.enemy_count,
            self.state.player_health,
            self.stats.max_health,
            healed,
        )
        self._transition("combat")

    def _fire(self) -> None:
        if self.wave_run is None:
            return
        bullet = try_fire(self.wave_run, self.clock, self.stats)
        if bullet is not None:
            self._emit(Fired(bullet))

    def _pause(self) -> None:
        self._transition("paused")

    def _resume(self) -> None:
        if self.wave_run is None:
            self._start_wave()
            return
        self.stats = compute_effective_stats(self.state)
        self._transition("combat")
        if self.wave_run.phase == "clearing":
            self._schedule_wave_advance()

    def _save_and_quit(self) -> None:
        self._checkpoint("explicit save")
        self.wave_run = None
        self._transition("menu")

    def _return_to_ship(self) -> None:
        self._checkpoint("return to ship")
        self._start_wave()

    def _leave_shop(self) -> None:
        self._checkpoint("shop checkout")
        self._start_wave()

    def _open_screen(self, screen: Phase) -> None:
        self.return_phase = self.phase
        if screen == "inventory":
            self.inventory.reset_selection(self.state)
        self._transition(screen)

    def _close_screen(self) -> None:
        target = self.return_phase or "menu"
        self.return_phase = None
        self._transition(target)

    def _equip_selected(self) -> None:
        result = self.inventory.equip(self.state)
        gameplay_log.info("Equipped %s.", result.item.name)
        self._emit(Notice(f"Equipped: {result.item.name}"))

    def _use_selected(self) -> None:
        effect = self.inventory.use_consumable(self.state)
        gameplay_log.info("Used %s.", effect.item.name)
        self._emit(Notice(f"Used: {effect.item.name}"))

    def _collect(self, ground: GroundItem) -> None:
        self.inventory.collect(self.state, ground.planet_item)
        self._emit(Notice(f"Found: {ground.planet_item.item.name}"))

    def _game_over(self) -> None:
        waves_survived = self.state.wave - 1
        gameplay_log.info("Game over at wave %d with score %d.", self.state.wave, self.state.score)
        self.wave_run = None
        self._transition("game_over")
        self._emit(GameOver(score=self.state.score, waves_survived=waves_survived))

    def _finish_wave(self) -> None:
        run = self.wave_run
        if self.phase != "combat" or run is None or run.phase != "clearing":
            return
        destination = advance_wave(self.state, run)
        try:
            self._checkpoint("wave complete")
        except PersistenceError:
            # Undo the advance so the next clear delay retries it.
            self.state.wave = run.wave
            run.phase = "clearing"
            run.destination = None
            self._schedule_wave_advance()
            raise
        if destination == "exploration":
            stock_planet(self.state, self.generator, self.rng)
        self.wave_run = None
        self._transition(destination)

    # -- plumbing -------------------------------------------------------

    def _emit(self, effect: Effect) -> None:
        self._effects.append(effect)

    def _checkpoint(self, reason: str) -> None:
        if self.store is None:
            return
        path = self.store.save(self.state)
        gameplay_log.info("Checkpoint (%s) at wave %d.", reason, self.state.wave)
        self._emit(Saved(path=path, reason=reason))

    def _transition(self, target: Phase) -> None:
        previous = self.phase
        if previous == target:
            return
        self._timers = [timer for timer in self._timers if timer.phase == target]
        self.phase = target
        self._emit(PhaseChanged(previous=previous, current=target))

    def _schedule(self, delay: float, label: str, callback: Callable[[], None]) -> None:
        self._timers.append(ScheduledAction(self.clock + delay, self.phase, label, callback))

    def _schedule_wave_advance(self) -> None:
        if "wave-advance" in self.pending_timers():
            return
        self._schedule(self.settings.gameplay.wave_clear_delay, "wave-advance", self._finish_wave)

    def _fire_due_timers(self) -> None:
        due = [timer for timer in self._timers if timer.fire_at <= self.clock]
        if not due:
            return
        self._timers = [timer for timer in self._timers if timer.fire_at > self.clock]
        for timer in due:
            if timer.phase != self.phase:
                continue
            timer.callback()
