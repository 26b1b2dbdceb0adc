"""Catalog store: the user's tagged items, persisted as one slot."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterator

from mixnmatch.catalog.models import Item
from mixnmatch.catalog.taxonomy import WARDROBE, Category, Taxonomy
from mixnmatch.errors import ItemNotFoundError
from mixnmatch.storage.repository import SharedStore, load_records

logger = logging.getLogger(__name__)

CATALOG_SLOT = "catalog"


@dataclass(slots=True)
class SubcategoryGroup:
    """Items of one subcategory, most recently added first."""

    subcategory: str
    items: list[Item] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)


class CatalogStore:
    """Keeps the catalog in memory and writes it through on every mutation.

    Mutations hold a lock from reading the current list until the new list
    is stored, so overlapping calls are applied one after the other.
    """

    def __init__(self, store: SharedStore, taxonomy: Taxonomy = WARDROBE, slot: str = CATALOG_SLOT) -> None:
        self._store = store
        self._taxonomy = taxonomy
        self._slot = slot
        self._items: list[Item] = []
        self._lock = asyncio.Lock()

    @property
    def taxonomy(self) -> Taxonomy:
        return self._taxonomy

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    async def load(self) -> list[Item]:
        """Replace the in-memory catalog with the persisted one."""

        async with self._lock:
            self._items = await load_records(
                self._store,
                self._slot,
                lambda raw: Item.from_record(raw, self._taxonomy),
            )
        logger.debug("Loaded %d catalog items", len(self._items))
        return self.list()

    def list(self) -> list[Item]:
        return list(self._items)

    def get(self, item_id: str) -> Item:
        for item in self._items:
            if item.id == item_id:
                return item
        raise ItemNotFoundError(item_id)

    def grouped(self, category: Category | str, subcategory: str | None = None) -> list[SubcategoryGroup]:
        """Browse one category: a group per subcategory in taxonomy order.

        Empty subcategories are kept so they can be shown with a zero count.
        Passing ``subcategory`` narrows the result to that single group.
        """

        if subcategory is None:
            resolved = self._taxonomy.resolve_category(category)
            names = list(self._taxonomy.subcategories_for(resolved))
        else:
            resolved, normalised = self._taxonomy.validate(category, subcategory)
            names = [normalised]

        groups = {name: SubcategoryGroup(name) for name in names}
        for item in reversed(self._items):
            if item.category is resolved and item.subcategory in groups:
                groups[item.subcategory].items.append(item)
        return list(groups.values())

    async def add(
        self,
        name: str,
        image_ref: str,
        category: Category | str,
        subcategory: str,
    ) -> Item:
        """Create a new item and append it to the catalog."""

        item = Item.create(name, image_ref, category, subcategory, taxonomy=self._taxonomy)
        async with self._lock:
            await self._commit([*self._items, item])
        return item

    async def replace(
        self,
        item_id: str,
        *,
        name: str | None = None,
        image_ref: str | None = None,
        subcategory: str | None = None,
    ) -> Item:
        """Swap the editable fields of an existing item."""

        async with self._lock:
            position = self._position(item_id)
            updated = self._items[position].replaced(
                name=name,
                image_ref=image_ref,
                subcategory=subcategory,
                taxonomy=self._taxonomy,
            )
            items = list(self._items)
            items[position] = updated
            await self._commit(items)
        return updated

    async def remove(self, item_id: str) -> Item:
        async with self._lock:
            position = self._position(item_id)
            items = list(self._items)
            removed = items.pop(position)
            await self._commit(items)
        return removed

    def _position(self, item_id: str) -> int:
        for position, item in enumerate(self._items):
            if item.id == item_id:
                return position
        raise ItemNotFoundError(item_id)

    async def _commit(self, items: list[Item]) -> None:
        await self._store.write(self._slot, [item.to_record() for item in items])
        self._items = items
