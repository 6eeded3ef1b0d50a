from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .models import ITEM_CATEGORIES, Item, ItemCategory

CONTENT_DIR = Path(__file__).resolve().parents[1] / "content"


class ContentValidationError(ValueError):
    def __init__(self, message: str, details: list[str] | None = None) -> None:
        self.details = details or []
        suffix = "\n".join(self.details)
        super().__init__(f"{message}\n{suffix}" if suffix else message)


@dataclass(slots=True)
class ItemCatalog:
    entries: list[Item]
    item_by_name: dict[str, Item]

    @classmethod
    def from_entries(cls, entries: list[Item]) -> "ItemCatalog":
        _assert_unique_names(entries)
        _assert_categories_stocked(entries)
        return cls(entries=list(entries), item_by_name={entry.name: entry for entry in entries})

    def categories(self) -> list[ItemCategory]:
        return [category for category in ITEM_CATEGORIES if self.by_category(category)]

    def by_category(self, category: ItemCategory) -> list[Item]:
        return [entry for entry in self.entries if entry.category == category]

    def get(self, name: str) -> Item:
        try:
            return self.item_by_name[name]
        except KeyError:
            raise KeyError(f"Unknown catalog item '{name}'.") from None

    def acquire(self, name: str) -> Item:
        return self.get(name).snapshot()


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ContentValidationError(f"Missing content file: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ContentValidationError(f"Invalid JSON in {path.name}: {exc.msg} at line {exc.lineno}") from exc


def _load_items(path: Path) -> list[Item]:
    data = _load_json(path)
    adapter = TypeAdapter(list[Item])
    try:
        return adapter.validate_python(data)
    except ValidationError as exc:
        errors = []
        for issue in exc.errors():
            issue_path = ".".join(str(part) for part in issue.get("loc", [])) or "(root)"
            errors.append(f"{path.name}:{issue_path}: {issue.get('msg', 'validation error')}")
        raise ContentValidationError(f"Schema validation failed for {path.name}.", errors) from exc


def _assert_unique_names(entries: list[Item]) -> None:
    seen: set[str] = set()
    for entry in entries:
        if entry.name in seen:
            raise ContentValidationError(f"Duplicate item name '{entry.name}'.")
        seen.add(entry.name)


def _assert_categories_stocked(entries: list[Item]) -> None:
    stocked = {entry.category for entry in entries}
    missing = [category for category in ITEM_CATEGORIES if category not in stocked]
    if missing:
        raise ContentValidationError(f"Item catalog has no entries for: {', '.join(missing)}.")


def load_catalog(content_dir: Path | str = CONTENT_DIR) -> ItemCatalog:
    return ItemCatalog.from_entries(_load_items(Path(content_dir) / "items.json"))


@lru_cache(maxsize=1)
def default_catalog() -> ItemCatalog:
    return load_catalog(CONTENT_DIR)
