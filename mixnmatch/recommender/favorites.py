"""De-duplicating, write-through ledger of committed pairs."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterator

from mixnmatch.catalog.models import Item, Pair
from mixnmatch.catalog.taxonomy import WARDROBE, Category, Taxonomy
from mixnmatch.errors import MissingPart, MissingSelectionError
from mixnmatch.storage.repository import SharedStore, load_records

logger = logging.getLogger(__name__)

FAVORITES_SLOT = "favorites"


def missing_selection_message(missing: MissingPart, taxonomy: Taxonomy = WARDROBE) -> str:
    """User-facing explanation for an incomplete commit."""

    hint = f"Please add some {taxonomy.item_noun} before you proceed."
    outer = taxonomy.label(Category.OUTER)
    inner = taxonomy.label(Category.INNER)
    if missing is MissingPart.BOTH:
        return f"Both {outer} and {inner} are missing. {hint}"
    if missing is MissingPart.OUTER:
        return f"There is no {outer} available. {hint}"
    return f"There is no {inner} available. {hint}"


class FavoritesLedger:
    """Insertion-ordered favorites without duplicate (outer, inner) id pairs.

    Every mutation re-encodes and stores the whole ledger. When the write
    fails the in-memory state is left as it was before the call. A lock is
    held from the duplicate check until the new list is stored.
    """

    def __init__(self, store: SharedStore, taxonomy: Taxonomy = WARDROBE, slot: str = FAVORITES_SLOT) -> None:
        self._store = store
        self._taxonomy = taxonomy
        self._slot = slot
        self._pairs: list[Pair] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[Pair]:
        return iter(self._pairs)

    def __contains__(self, pair: object) -> bool:
        return pair in self._pairs

    @property
    def pairs(self) -> list[Pair]:
        return list(self._pairs)

    async def load(self) -> list[Pair]:
        async with self._lock:
            pairs = await load_records(
                self._store,
                self._slot,
                lambda raw: Pair.from_record(raw, self._taxonomy),
            )
            # Older releases could store the same pair twice; keep the first.
            unique: list[Pair] = []
            for pair in pairs:
                if pair not in unique:
                    unique.append(pair)
            self._pairs = unique
            if len(unique) != len(pairs):
                logger.info("Collapsed %d duplicate favorites on load", len(pairs) - len(unique))
                await self._persist(unique)
        return self.pairs

    async def commit(self, outer: Item | None, inner: Item | None) -> Pair | None:
        """Append ``(outer, inner)`` unless the same id pair is already stored.

        Returns the new pair, or ``None`` when it was a duplicate.
        """

        if outer is None or inner is None:
            if outer is None and inner is None:
                missing = MissingPart.BOTH
            elif outer is None:
                missing = MissingPart.OUTER
            else:
                missing = MissingPart.INNER
            raise MissingSelectionError(missing, missing_selection_message(missing, self._taxonomy))

        pair = Pair(outer=outer, inner=inner)
        async with self._lock:
            if pair in self._pairs:
                logger.debug("Pair %s/%s already in favorites", outer.id, inner.id)
                return None
            await self._persist([*self._pairs, pair])
        return pair

    async def remove(self, position: int) -> Pair:
        """Remove the pair at ``position`` in insertion order."""

        async with self._lock:
            if not 0 <= position < len(self._pairs):
                raise IndexError(f"No favorite at position {position}.")
            pairs = list(self._pairs)
            removed = pairs.pop(position)
            await self._persist(pairs)
        return removed

    def newest_first(self) -> list[Pair]:
        return list(reversed(self._pairs))

    def position_from_newest(self, display_index: int) -> int:
        """Translate an index into :meth:`newest_first` to a ledger position."""

        if not 0 <= display_index < len(self._pairs):
            raise IndexError(f"No favorite at display index {display_index}.")
        return len(self._pairs) - 1 - display_index

    async def prune(self, item_id: str) -> int:
        """Drop every pair that references ``item_id``; returns how many went."""

        async with self._lock:
            kept = [pair for pair in self._pairs if not pair.references(item_id)]
            removed = len(self._pairs) - len(kept)
            if removed:
                await self._persist(kept)
        return removed

    async def _persist(self, pairs: list[Pair]) -> None:
        await self._store.write(self._slot, [pair.to_record() for pair in pairs])
        self._pairs = pairs
