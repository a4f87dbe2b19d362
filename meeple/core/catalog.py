#!/usr/bin/env python

"""
    Catalog index for Meeple: the local view of board-game metadata,
    the borrow cart, and token resolution for scans.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import json
import logging
import os
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError
from meeple.core.normalizer import normalize
from meeple.core.exceptions import ItemNotFoundError
from meeple.schemas.catalog import CatalogItem, CatalogItemIn

logger = logging.getLogger(__name__)

INITIAL_GAMES = [
    {"id": 1, "name": "Catan", "barcode": "007", "category": "Strategy", "isPopular": True,
     "description": "Trade, build and settle the island of Catan.",
     "imageUrl": "https://picsum.photos/seed/catan/400/300"},
    {"id": 2, "name": "Ticket to Ride", "barcode": "008", "category": "Family", "isPopular": True,
     "description": "Claim railway routes across the map.",
     "imageUrl": "https://picsum.photos/seed/ticket/400/300"},
    {"id": 3, "name": "Codenames", "barcode": "009", "category": "Party",
     "description": "Give one-word clues to find your agents.",
     "imageUrl": "https://picsum.photos/seed/codenames/400/300"},
    {"id": 4, "name": "Splendor", "barcode": "010", "category": "Strategy",
     "description": "Collect gems and attract nobles.",
     "imageUrl": "https://picsum.photos/seed/splendor/400/300"},
    {"id": 5, "name": "Exploding Kittens", "barcode": "011", "category": "Party",
     "description": "Russian roulette, with kittens.",
     "imageUrl": "https://picsum.photos/seed/kittens/400/300"},
]


def _fold(text: Optional[str]) -> str:
    return (text or "").strip().casefold()


class Catalog:
    """In-memory collection of CatalogItems.

    Lookups never consult the ledger: whether a game is on loan is the
    ledger's business, this index only knows what exists.
    """

    def __init__(self, items: Optional[Iterable] = None, path: Optional[str] = None):
        self.path = path
        self._items: Dict[int, CatalogItem] = {}
        for item in (INITIAL_GAMES if items is None else items):
            item = item if isinstance(item, CatalogItem) else CatalogItem.model_validate(item)
            if item.id in self._items:
                raise ValueError(f"Duplicate catalog id {item.id}")
            self._items[item.id] = item

    @classmethod
    def load(cls, path: Optional[str] = None):
        """Reads the JSON cache at `path`, falling back to the default
        games when there is no usable cache."""
        if path and os.path.exists(path):
            try:
                with open(path, encoding="utf-8") as fp:
                    return cls(json.load(fp), path=path)
            except (OSError, ValueError, ValidationError) as e:
                logger.warning(f"Ignoring unreadable catalog cache {path}: {e}")
        return cls(path=path)

    def save(self):
        if not self.path:
            return
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        data = [i.model_dump(by_alias=True, exclude={"selected"}) for i in self]
        with open(self.path, "w", encoding="utf-8") as fp:
            json.dump(data, fp, ensure_ascii=False, indent=2)

    def __iter__(self):
        return iter(sorted(self._items.values(), key=lambda i: i.id))

    def __len__(self):
        return len(self._items)

    def __contains__(self, item_id):
        return item_id in self._items

    def get(self, item_id: int) -> CatalogItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise ItemNotFoundError(str(item_id), f"No catalog item with id {item_id}.")

    def by_barcode(self, code: str) -> Optional[CatalogItem]:
        for item in self:
            if item.barcode and item.barcode == code:
                return item

    def by_name(self, name: str) -> Optional[CatalogItem]:
        folded = _fold(name)
        if not folded:
            return None
        for item in self:
            if _fold(item.name) == folded:
                return item

    def resolve(self, token: str) -> CatalogItem:
        """Barcode first, then name, then each keyboard-layout variant
        of the token."""
        raw = (token or "").strip()
        if raw:
            if item := self.by_barcode(raw) or self.by_name(raw):
                return item
            for variant in normalize(raw).variants():
                if item := self.by_barcode(variant) or self.by_name(variant):
                    logger.debug(f"Resolved '{raw}' via layout variant '{variant}'")
                    return item
        raise ItemNotFoundError(token)

    def search(self, text: str = "") -> List[CatalogItem]:
        folded = _fold(text)
        return [i for i in self if folded in i.name.casefold()]

    def popular(self) -> List[CatalogItem]:
        return [i for i in self if i.is_popular]

    def by_category(self) -> Dict[str, List[CatalogItem]]:
        groups: Dict[str, List[CatalogItem]] = {}
        for item in self:
            groups.setdefault(item.category, []).append(item)
        return groups

    # Borrow cart

    def toggle_select(self, item_id: int) -> CatalogItem:
        item = self.get(item_id)
        item.selected = not item.selected
        return item

    def select(self, item_id: int, selected: bool = True) -> CatalogItem:
        item = self.get(item_id)
        item.selected = selected
        return item

    @property
    def selected(self) -> List[CatalogItem]:
        return [i for i in self if i.selected]

    def clear_selection(self):
        for item in self._items.values():
            item.selected = False

    # Catalog management

    def next_id(self) -> int:
        return max(self._items, default=0) + 1

    def add(self, data: CatalogItemIn) -> CatalogItem:
        item = CatalogItem(id=self.next_id(), **data.model_dump())
        self._items[item.id] = item
        self.save()
        logger.info(f"Added '{item.name}' to catalog as #{item.id}")
        return item

    def update(self, item_id: int, data: CatalogItemIn) -> CatalogItem:
        current = self.get(item_id)
        item = CatalogItem(id=item_id, selected=current.selected, **data.model_dump())
        self._items[item_id] = item
        self.save()
        return item

    def delete(self, item_ids: Iterable[int]) -> int:
        removed = 0
        for item_id in set(item_ids):
            if self._items.pop(item_id, None) is not None:
                removed += 1
        self.save()
        return removed

    def reset(self):
        self._items = {i["id"]: CatalogItem.model_validate(i) for i in INITIAL_GAMES}
        if self.path and os.path.exists(self.path):
            os.remove(self.path)
        logger.info("Catalog reset to defaults")
