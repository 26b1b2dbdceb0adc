"""Category and subcategory taxonomies with their weather threshold rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from mixnmatch.errors import TaxonomyError

COLD_THRESHOLD_CELSIUS = 20.0


class Category(str, Enum):
    """The two layers that get paired."""

    OUTER = "outer"
    INNER = "inner"


class Climate(str, Enum):
    """Side of the threshold on which a subcategory is eligible."""

    COLD = "cold"
    WARM = "warm"


@dataclass(frozen=True, slots=True)
class TemperatureRule:
    """Restricts one subcategory of a category to one side of the cold threshold."""

    category: Category
    subcategory: str
    climate: Climate

    def is_satisfied(self, temperature: float) -> bool:
        """Return ``True`` when an item of this subcategory may be shown."""

        if self.climate is Climate.COLD:
            return temperature <= COLD_THRESHOLD_CELSIUS
        return temperature > COLD_THRESHOLD_CELSIUS


@dataclass(frozen=True, slots=True)
class Taxonomy:
    """Allowed subcategories per category plus the rules that apply to them."""

    name: str
    labels: Mapping[Category, str]
    subcategories: Mapping[Category, tuple[str, ...]]
    rules: Mapping[tuple[Category, str], TemperatureRule] = field(default_factory=dict)
    item_noun: str = "items"

    def label(self, category: Category) -> str:
        return self.labels.get(category, category.value)

    def subcategories_for(self, category: Category) -> tuple[str, ...]:
        return self.subcategories.get(category, ())

    def resolve_category(self, category: Category | str) -> Category:
        try:
            return Category(category)
        except ValueError as exc:
            raise TaxonomyError(f"Unknown category {category!r} for taxonomy {self.name}.") from exc

    def validate(self, category: Category | str, subcategory: str) -> tuple[Category, str]:
        """Normalise and check a (category, subcategory) combination."""

        resolved = self.resolve_category(category)
        normalised = subcategory.strip().lower()
        if normalised not in self.subcategories_for(resolved):
            raise TaxonomyError(
                f"Subcategory {subcategory!r} is not allowed for {self.label(resolved)} "
                f"(expected one of {', '.join(self.subcategories_for(resolved))}).",
            )
        return resolved, normalised

    def is_eligible(self, category: Category, subcategory: str, temperature: float) -> bool:
        """Subcategories without a rule are always eligible.

        Rules are looked up per category, so the same subcategory name may
        carry a rule in one category and none in the other.
        """

        rule = self.rules.get((category, subcategory))
        if rule is None:
            return True
        return rule.is_satisfied(temperature)


def _rules(*rules: TemperatureRule) -> dict[tuple[Category, str], TemperatureRule]:
    return {(rule.category, rule.subcategory): rule for rule in rules}


WARDROBE = Taxonomy(
    name="wardrobe",
    labels={Category.OUTER: "top wear", Category.INNER: "bottom wear"},
    subcategories={
        Category.OUTER: ("shirt", "sweater", "tshirt"),
        Category.INNER: ("jeans", "shorts", "trousers"),
    },
    rules=_rules(
        TemperatureRule(Category.OUTER, "sweater", Climate.COLD),
        TemperatureRule(Category.OUTER, "tshirt", Climate.WARM),
        TemperatureRule(Category.INNER, "shorts", Climate.WARM),
    ),
    item_noun="clothing",
)

PANTRY = Taxonomy(
    name="pantry",
    labels={Category.OUTER: "main", Category.INNER: "side"},
    subcategories={
        Category.OUTER: ("chicken", "beef", "tofu", "stew"),
        Category.INNER: ("rice", "bread", "soup", "salad"),
    },
    rules=_rules(
        TemperatureRule(Category.OUTER, "stew", Climate.COLD),
        TemperatureRule(Category.INNER, "soup", Climate.COLD),
        TemperatureRule(Category.INNER, "salad", Climate.WARM),
    ),
    item_noun="food",
)

TAXONOMIES: dict[str, Taxonomy] = {taxonomy.name: taxonomy for taxonomy in (WARDROBE, PANTRY)}


def get_taxonomy(name: str) -> Taxonomy:
    """Look up a registered taxonomy by name."""

    try:
        return TAXONOMIES[name.strip().lower()]
    except KeyError as exc:
        raise TaxonomyError(f"Unknown taxonomy {name!r}.") from exc
