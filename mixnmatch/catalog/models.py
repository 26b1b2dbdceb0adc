"""Catalog items and committed pairs."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from mixnmatch.catalog.taxonomy import WARDROBE, Category, Taxonomy

# Field names written by the first wardrobe releases.
LEGACY_CATEGORY_NAMES = {
    "topwear": Category.OUTER,
    "bottomwear": Category.INNER,
}


def new_item_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class Item:
    """A single tagged catalog entry."""

    name: str
    image_ref: str
    category: Category
    subcategory: str
    id: str = field(default_factory=new_item_id)

    @classmethod
    def create(
        cls,
        name: str,
        image_ref: str,
        category: Category | str,
        subcategory: str,
        *,
        taxonomy: Taxonomy = WARDROBE,
        item_id: str | None = None,
    ) -> Item:
        """Build an item after checking it against the taxonomy."""

        resolved, normalised = taxonomy.validate(category, subcategory)
        if item_id is None:
            return cls(name=name, image_ref=image_ref, category=resolved, subcategory=normalised)
        return cls(name=name, image_ref=image_ref, category=resolved, subcategory=normalised, id=item_id)

    def replaced(
        self,
        *,
        name: str | None = None,
        image_ref: str | None = None,
        subcategory: str | None = None,
        taxonomy: Taxonomy = WARDROBE,
    ) -> Item:
        """Return a copy with the editable fields swapped; id and category stay."""

        updated = replace(
            self,
            name=self.name if name is None else name,
            image_ref=self.image_ref if image_ref is None else image_ref,
        )
        if subcategory is not None:
            _, normalised = taxonomy.validate(self.category, subcategory)
            updated = replace(updated, subcategory=normalised)
        return updated

    def to_record(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "imageRef": self.image_ref,
            "category": self.category.value,
            "subcategory": self.subcategory,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any], taxonomy: Taxonomy = WARDROBE) -> Item:
        """Decode a stored record, accepting the legacy wardrobe field names.

        Raises ``KeyError``, ``TypeError`` or ``ValueError`` for malformed records.
        """

        if not isinstance(record, Mapping):
            raise TypeError(f"Item record must be an object, got {type(record).__name__}.")

        raw_category = record.get("category", record.get("type"))
        if not isinstance(raw_category, str):
            raise ValueError("Item record has no category.")
        category = LEGACY_CATEGORY_NAMES.get(raw_category.lower(), raw_category.lower())

        subcategory = record.get("subcategory", record.get("subtype"))
        image_ref = record.get("imageRef", record.get("imageName"))
        if image_ref is None:
            image_ref = ""
        name = record["name"]
        item_id = record["id"]
        if not isinstance(subcategory, str) or not isinstance(name, str) or not isinstance(item_id, str):
            raise TypeError("Item record fields must be strings.")
        if not isinstance(image_ref, str):
            raise TypeError("Item record imageRef must be a string or null.")

        return cls.create(
            name,
            image_ref,
            category,
            subcategory,
            taxonomy=taxonomy,
            item_id=item_id,
        )


@dataclass(frozen=True, slots=True, eq=False)
class Pair:
    """A committed (outer, inner) combination.

    Two pairs are equal when their item ids match, whatever the other fields hold.
    """

    outer: Item
    inner: Item

    @property
    def key(self) -> tuple[str, str]:
        return self.outer.id, self.inner.id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pair):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def references(self, item_id: str) -> bool:
        return item_id in self.key

    def to_record(self) -> dict[str, dict[str, str]]:
        return {"outer": self.outer.to_record(), "inner": self.inner.to_record()}

    @classmethod
    def from_record(cls, record: Mapping[str, Any], taxonomy: Taxonomy = WARDROBE) -> Pair:
        if not isinstance(record, Mapping):
            raise TypeError(f"Pair record must be an object, got {type(record).__name__}.")
        outer = record.get("outer", record.get("topWear"))
        inner = record.get("inner", record.get("bottomWear"))
        if outer is None or inner is None:
            raise KeyError("Pair record requires both outer and inner items.")
        return cls(
            outer=Item.from_record(outer, taxonomy),
            inner=Item.from_record(inner, taxonomy),
        )
