from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import InvalidOperation
from .models import EQUIP_SLOTS, GOLD_ORE, HEALTH_PACK, EquipSlot, GameState, Item, PlanetItem, effective_max_health
from .settings import GameplaySettings
from .stats import clamp_health

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ConsumableEffect:
    item: Item
    healed: int = 0
    gold_gained: int = 0


@dataclass(slots=True)
class EquipResult:
    item: Item
    replaced: Item | None = None
    replaced_returned: bool = False


def apply_consumable_effect(state: GameState, item: Item) -> ConsumableEffect:
    """Apply a consumable by name. Unknown consumables have no effect."""
    effect = ConsumableEffect(item=item)
    if item.name == HEALTH_PACK:
        before = state.player_health
        state.player_health = min(effective_max_health(state), before + int(item.attribute))
        effect.healed = max(0, state.player_health - before)
    elif item.name == GOLD_ORE:
        effect.gold_gained = int(item.attribute)
        state.gold += effect.gold_gained
    return effect


class InventoryManager:
    """Equip, unequip, use and pick-up transitions over one game state.

    Holds the selection cursor only; the state itself is passed in for every
    operation and never cached across calls.
    """

    def __init__(self, settings: GameplaySettings | None = None) -> None:
        self.settings = settings or GameplaySettings()
        self.selected: int | None = None

    def reset_selection(self, state: GameState) -> None:
        self.selected = 0 if state.inventory else None

    def _clamp_selection(self, state: GameState) -> None:
        if not state.inventory:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        else:
            self.selected = max(0, min(len(state.inventory) - 1, self.selected))

    def select_up(self, state: GameState) -> int | None:
        self._clamp_selection(state)
        if self.selected is not None and self.selected > 0:
            self.selected -= 1
        return self.selected

    def select_down(self, state: GameState) -> int | None:
        self._clamp_selection(state)
        if self.selected is not None and self.selected < len(state.inventory) - 1:
            self.selected += 1
        return self.selected

    def _item_at(self, state: GameState, index: int | None) -> Item:
        if not state.inventory:
            raise InvalidOperation("Inventory is empty.")
        if index is None or not 0 <= index < len(state.inventory):
            raise InvalidOperation(f"No inventory item at index {index}.")
        return state.inventory[index]

    def equip(self, state: GameState, index: int | None = None) -> EquipResult:
        """Move the item at ``index`` (default: selection) into its slot.

        A previous occupant goes back to the end of the inventory, or is
        discarded when ``equip_returns_replaced_item`` is off.
        """
        index = self.selected if index is None else index
        item = self._item_at(state, index)
        if item.is_consumable:
            raise InvalidOperation(f"'{item.name}' is a consumable and cannot be equipped.")

        del state.inventory[index]
        replaced = state.equipment.put(item.category, item)
        result = EquipResult(item=item, replaced=replaced)
        if replaced is not None and self.settings.equip_returns_replaced_item:
            state.inventory.append(replaced)
            result.replaced_returned = True
        elif replaced is not None:
            logger.debug("Equipping %s discarded %s.", item.name, replaced.name)
        clamp_health(state)
        self._clamp_selection(state)
        return result

    def unequip(self, state: GameState, slot: EquipSlot) -> Item:
        if slot not in EQUIP_SLOTS:
            raise InvalidOperation(f"Unknown equipment slot '{slot}'.")
        item = state.equipment.get(slot)
        if item is None:
            raise InvalidOperation(f"Equipment slot '{slot}' is empty.")
        state.equipment.put(slot, None)
        state.inventory.append(item)
        clamp_health(state)
        self._clamp_selection(state)
        return item

    def use_consumable(self, state: GameState, index: int | None = None) -> ConsumableEffect:
        index = self.selected if index is None else index
        item = self._item_at(state, index)
        if not item.is_consumable:
            raise InvalidOperation(f"'{item.name}' is not a consumable.")
        del state.inventory[index]
        effect = apply_consumable_effect(state, item)
        self._clamp_selection(state)
        return effect

    def collect(self, state: GameState, planet_item: PlanetItem) -> ConsumableEffect | None:
        """Pick up planet loot. Consumables may also take effect on pickup."""
        for index, candidate in enumerate(state.planet_items):
            if candidate is planet_item:
                del state.planet_items[index]
                break
        else:
            raise InvalidOperation(f"'{planet_item.item.name}' is no longer on this planet.")

        state.inventory.append(planet_item.item)
        self._clamp_selection(state)
        if planet_item.item.is_consumable and self.settings.consumables_apply_on_pickup:
            return apply_consumable_effect(state, planet_item.item)
        return None
