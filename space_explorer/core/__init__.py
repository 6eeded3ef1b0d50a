"""Core game-state and progression engine."""

from .catalog import ContentValidationError, ItemCatalog, default_catalog, load_catalog
from .combat import resolve_collision
from .economy import PurchaseReceipt, purchase
from .errors import InvalidOperation, PersistenceError, SaveNotFoundError
from .inventory import InventoryManager
from .models import Equipment, GameState, Item, PlanetItem, create_new_game_state
from .persistence import PersistenceManager
from .planet import PlanetItemGenerator
from .session import GameSession
from .stats import EffectiveStats, apply_shield_overcharge, compute_effective_stats
from .waves import WaveRun, enemy_count, enemy_health, spawn_wave

__all__ = [
    "ContentValidationError",
    "EffectiveStats",
    "Equipment",
    "GameSession",
    "GameState",
    "InvalidOperation",
    "InventoryManager",
    "Item",
    "ItemCatalog",
    "PersistenceError",
    "PersistenceManager",
    "PlanetItem",
    "PlanetItemGenerator",
    "PurchaseReceipt",
    "SaveNotFoundError",
    "WaveRun",
    "apply_shield_overcharge",
    "compute_effective_stats",
    "create_new_game_state",
    "default_catalog",
    "enemy_count",
    "enemy_health",
    "load_catalog",
    "purchase",
    "resolve_collision",
    "spawn_wave",
]
