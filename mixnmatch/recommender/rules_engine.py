"""Weather-conditioned eligibility rules for pairing candidates."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

from mixnmatch.catalog.models import Item
from mixnmatch.catalog.taxonomy import WARDROBE, Category, Taxonomy


class DisplayMode(str, Enum):
    """How candidates are chosen from the catalog."""

    WEATHER_BASED = "weather_based"
    SHOW_ALL = "show_all"


@dataclass(slots=True)
class Candidates:
    """Ordered candidate lists for both layers."""

    outer: list[Item] = field(default_factory=list)
    inner: list[Item] = field(default_factory=list)

    def for_category(self, category: Category) -> list[Item]:
        return self.outer if category is Category.OUTER else self.inner


def _of_category(catalog: Iterable[Item], category: Category) -> list[Item]:
    return [item for item in catalog if item.category is category]


def filter_candidates(
    catalog: Sequence[Item],
    mode: DisplayMode,
    temperature: float | None,
    taxonomy: Taxonomy = WARDROBE,
) -> Candidates:
    """Split the catalog into outer and inner candidates.

    In ``SHOW_ALL`` mode every item of a category is a candidate. In
    ``WEATHER_BASED`` mode nothing is eligible until a temperature is known;
    afterwards each subcategory is checked against its threshold rule.
    Catalog order is preserved.
    """

    if mode is DisplayMode.SHOW_ALL:
        return Candidates(
            outer=_of_category(catalog, Category.OUTER),
            inner=_of_category(catalog, Category.INNER),
        )

    if temperature is None:
        return Candidates()

    eligible = [item for item in catalog if taxonomy.is_eligible(item.category, item.subcategory, temperature)]
    return Candidates(
        outer=_of_category(eligible, Category.OUTER),
        inner=_of_category(eligible, Category.INNER),
    )


class EligibilityFilter:
    """Binds a taxonomy so callers only pass the changing inputs."""

    def __init__(self, taxonomy: Taxonomy = WARDROBE) -> None:
        self._taxonomy = taxonomy

    @property
    def taxonomy(self) -> Taxonomy:
        return self._taxonomy

    def evaluate(
        self,
        catalog: Sequence[Item],
        mode: DisplayMode,
        temperature: float | None,
    ) -> Candidates:
        return filter_candidates(catalog, mode, temperature, self._taxonomy)
