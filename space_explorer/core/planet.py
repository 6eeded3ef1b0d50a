from __future__ import annotations

from dataclasses import dataclass, field

from .catalog import ItemCatalog
from .models import PlanetItem, Position
from .rng import DeterministicRNG
from .settings import ExplorationSettings


@dataclass(slots=True)
class PlanetItemGenerator:
    """Stocks a planet with randomly placed loot drawn from the catalog.

    Every draw is independent: a category is picked uniformly first, then an
    entry within that category, so sparse categories are not under-represented.
    """

    catalog: ItemCatalog
    settings: ExplorationSettings = field(default_factory=ExplorationSettings)

    def generate(self, rng: DeterministicRNG) -> list[PlanetItem]:
        count = rng.next_int(self.settings.min_items, self.settings.max_items + 1)
        categories = self.catalog.categories()
        x_low, x_high = self.settings.x_range
        y_low, y_high = self.settings.y_range

        items: list[PlanetItem] = []
        for _ in range(count):
            category = rng.choose(categories)
            entry = rng.choose(self.catalog.by_category(category))
            position = Position(x=rng.next_uniform(x_low, x_high), y=rng.next_uniform(y_low, y_high))
            items.append(PlanetItem(item=entry.snapshot(), position=position))
        return items
