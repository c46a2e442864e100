"""Reference menu catalog used by the item breakdowns."""

import json
from collections.abc import Iterable
from pathlib import Path

import marshmallow as ma
import structlog
from attrs import define, field

from .models import CATEGORIES, MenuCatalogEntry, MenuCatalogEntrySchema

logger = structlog.get_logger(__name__)

DEFAULT_DISHES = [
    ("d1", "Margherita Pizza", 12.50),
    ("d2", "Pasta Carbonara", 14.00),
    ("d3", "Caesar Salad", 9.50),
    ("d4", "Grilled Salmon", 18.00),
    ("d5", "Beef Burger", 13.50),
    ("d6", "Chicken Tikka", 15.00),
    ("d7", "Vegetable Stir Fry", 11.00),
    ("d8", "Fish & Chips", 14.50),
]

DEFAULT_DRINKS = [
    ("dr1", "Coca Cola", 3.00),
    ("dr2", "Orange Juice", 4.00),
    ("dr3", "Coffee", 3.50),
    ("dr4", "Beer", 5.00),
    ("dr5", "Wine Glass", 7.00),
    ("dr6", "Water", 2.00),
]

# Average units per order used when spreading daily orders over the menu.
ITEMS_PER_ORDER = {"dish": 2.2, "drink": 1.1}


@define(slots=True, frozen=True)
class MenuCatalog:
    """Fixed, ordered collection of menu entries."""

    entries: tuple[MenuCatalogEntry, ...] = field(converter=tuple)

    def list_catalog(self, category: str) -> list[MenuCatalogEntry]:
        """Return catalog entries of ``category`` in catalog order."""
        if category not in CATEGORIES:
            raise ValueError(f"Unknown category {category!r}.")
        return [entry for entry in self.entries if entry.category == category]

    @classmethod
    def from_rows(cls, rows: Iterable[tuple[str, str, float]], category: str) -> "MenuCatalog":
        return cls(
            MenuCatalogEntry(id=code, name=name, category=category, price=price)
            for code, name, price in rows
        )

    def merge(self, other: "MenuCatalog") -> "MenuCatalog":
        return MenuCatalog(self.entries + other.entries)


DEFAULT_CATALOG = MenuCatalog.from_rows(DEFAULT_DISHES, "dish").merge(
    MenuCatalog.from_rows(DEFAULT_DRINKS, "drink")
)


def load_catalog(path: Path) -> MenuCatalog:
    """Load a menu from a JSON list (or ``{"items": [...]}`` document) of entries.

    Entries keep file order, which decides how daily orders are spread over
    the menu.
    """
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("items", [])
    try:
        entries = MenuCatalogEntrySchema(many=True).load(payload)
    except ma.ValidationError as exc:
        raise ValueError(f"Invalid menu catalog in {path}: {exc.messages}") from exc
    catalog = MenuCatalog(entries)
    missing = [category for category in CATEGORIES if not catalog.list_catalog(category)]
    if missing:
        raise ValueError(f"Menu catalog {path} has no {', '.join(missing)} entries.")
    logger.debug("catalog.loaded", path=str(path), entries=len(catalog.entries))
    return catalog


__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_DISHES",
    "DEFAULT_DRINKS",
    "ITEMS_PER_ORDER",
    "MenuCatalog",
    "load_catalog",
]
