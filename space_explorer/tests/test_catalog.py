from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from space_explorer.core.catalog import ContentValidationError, default_catalog, load_catalog


def test_packaged_catalog_stocks_every_category() -> None:
    catalog = default_catalog()
    assert catalog.categories() == ["weapon", "shield", "engine", "consumable"]
    assert [item.name for item in catalog.by_category("weapon")] == ["Laser Cannon", "Plasma Gun", "Ion Blaster"]
    assert catalog.get("Quantum Shield").attribute == 200
    assert catalog.get("Gold Ore").price == 0


def test_acquire_returns_a_snapshot_not_the_catalog_entry() -> None:
    catalog = default_catalog()
    bought = catalog.acquire("Plasma Gun")
    assert bought == catalog.get("Plasma Gun")
    assert bought is not catalog.get("Plasma Gun")


def test_unknown_item_name_raises_key_error() -> None:
    with pytest.raises(KeyError, match="Photon Torpedo"):
        default_catalog().get("Photon Torpedo")


def test_duplicate_item_name_raises_clear_error(tmp_path: Path) -> None:
    source_content = Path(__file__).resolve().parents[1] / "content"
    test_content = tmp_path / "content"
    shutil.copytree(source_content, test_content)

    items_path = test_content / "items.json"
    items = json.loads(items_path.read_text(encoding="utf-8"))
    items[1]["name"] = items[0]["name"]
    items_path.write_text(json.dumps(items, indent=2), encoding="utf-8")

    with pytest.raises(ContentValidationError, match="Duplicate item name 'Laser Cannon'"):
        load_catalog(test_content)


def test_negative_price_fails_schema_validation(tmp_path: Path) -> None:
    test_content = tmp_path / "content"
    test_content.mkdir()
    (test_content / "items.json").write_text(
        json.dumps([{"category": "weapon", "name": "Broken", "price": -5, "color": [1, 2, 3], "attribute": 1}]),
        encoding="utf-8",
    )

    with pytest.raises(ContentValidationError, match="Schema validation failed") as excinfo:
        load_catalog(test_content)
    assert any("price" in detail for detail in excinfo.value.details)


def test_missing_category_is_rejected(tmp_path: Path) -> None:
    test_content = tmp_path / "content"
    test_content.mkdir()
    (test_content / "items.json").write_text(
        json.dumps([{"category": "weapon", "name": "Only Gun", "price": 5, "color": [1, 2, 3], "attribute": 1}]),
        encoding="utf-8",
    )

    with pytest.raises(ContentValidationError, match="no entries for: shield, engine, consumable"):
        load_catalog(test_content)


def test_items_are_frozen_and_strict() -> None:
    from pydantic import ValidationError

    from space_explorer.core.models import Item

    item = default_catalog().get("Laser Cannon")
    with pytest.raises(ValidationError):
        item.price = 1
    with pytest.raises(ValidationError):
        Item(category="weapon", name="Extra", price=1, color=(1, 2, 3), attribute=1, rarity="rare")
