from __future__ import annotations

import logging
from dataclasses import dataclass

from .catalog import ItemCatalog
from .models import GameState, Item

logger = logging.getLogger(__name__)

INSUFFICIENT_GOLD_MESSAGE = "Not enough gold!"


@dataclass(slots=True)
class PurchaseReceipt:
    success: bool
    item_name: str
    cost: int
    message: str
    item: Item | None = None


def can_afford(state: GameState, entry: Item) -> bool:
    return state.gold >= entry.price


def purchase(state: GameState, entry: Item) -> PurchaseReceipt:
    if not can_afford(state, entry):
        logger.info("Insufficient gold for '%s'; cost=%d, have=%d", entry.name, entry.price, state.gold)
        return PurchaseReceipt(False, entry.name, entry.price, INSUFFICIENT_GOLD_MESSAGE)

    bought = entry.snapshot()
    state.gold -= entry.price
    state.inventory.append(bought)
    return PurchaseReceipt(True, entry.name, entry.price, f"Bought: {entry.name}", item=bought)


def shop_listing(catalog: ItemCatalog) -> list[Item]:
    return list(catalog.entries)
