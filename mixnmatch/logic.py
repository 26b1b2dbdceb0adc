"""Pairing session: one explicit state object mutated through named transitions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from mixnmatch.catalog.models import Item, Pair
from mixnmatch.catalog.taxonomy import Category
from mixnmatch.errors import MissingSelectionError, WeatherUnavailableError
from mixnmatch.integrations.weather_client import WeatherReading
from mixnmatch.recommender.cursor import SelectionCursor
from mixnmatch.recommender.favorites import FavoritesLedger
from mixnmatch.recommender.rules_engine import Candidates, DisplayMode, EligibilityFilter
from mixnmatch.storage.catalog import CatalogStore

logger = logging.getLogger(__name__)

WEATHER_UNAVAILABLE_MESSAGE = (
    "Unable to fetch weather data. Check your connection. "
    "You can only use Show All without network connection."
)


class WeatherGateway(Protocol):
    async def fetch(self, city_name: str | None = None) -> WeatherReading: ...


class WeatherStatus(str, Enum):
    """Progress of the most recent weather request."""

    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"
    UNAVAILABLE = "unavailable"


@dataclass(slots=True)
class PairingState:
    """Everything the pairing screen needs to render."""

    mode: DisplayMode = DisplayMode.WEATHER_BASED
    weather_status: WeatherStatus = WeatherStatus.IDLE
    reading: WeatherReading | None = None
    outer: SelectionCursor = field(default_factory=SelectionCursor)
    inner: SelectionCursor = field(default_factory=SelectionCursor)
    message: str | None = None

    @property
    def temperature(self) -> float | None:
        return self.reading.temperature_celsius if self.reading else None

    def cursor(self, category: Category) -> SelectionCursor:
        return self.outer if category is Category.OUTER else self.inner


@dataclass(slots=True)
class Selection:
    """Candidates currently shown for each layer."""

    outer: Item | None
    inner: Item | None


class PairingSession:
    """Coordinates the catalog, the eligibility filter and the favorites ledger."""

    def __init__(
        self,
        catalog: CatalogStore,
        favorites: FavoritesLedger,
        weather: WeatherGateway,
        *,
        city_name: str | None = None,
    ) -> None:
        self._catalog = catalog
        self._favorites = favorites
        self._weather = weather
        self._city_name = city_name
        self._filter = EligibilityFilter(catalog.taxonomy)
        self._weather_ticket = 0
        self.state = PairingState()

    @property
    def favorites(self) -> FavoritesLedger:
        return self._favorites

    @property
    def catalog(self) -> CatalogStore:
        return self._catalog

    def candidates(self) -> Candidates:
        return self._filter.evaluate(self._catalog.list(), self.state.mode, self.state.temperature)

    def selection(self) -> Selection:
        candidates = self.candidates()
        return Selection(
            outer=self.state.outer.current(candidates.outer),
            inner=self.state.inner.current(candidates.inner),
        )

    def set_mode(self, mode: DisplayMode) -> Candidates:
        self.state.mode = mode
        self.state.message = None
        return self._clamp()

    def advance(self, category: Category) -> int:
        items = self.candidates().for_category(category)
        return self.state.cursor(category).advance(items)

    def retreat(self, category: Category) -> int:
        items = self.candidates().for_category(category)
        return self.state.cursor(category).retreat(items)

    def catalog_changed(self) -> Candidates:
        """Re-clamp both cursors after the catalog was edited elsewhere."""

        return self._clamp()

    async def refresh_weather(self) -> WeatherReading | None:
        """Fetch a new reading; only the most recent request may update state.

        On failure the previous reading, if any, stays in place.
        """

        self._weather_ticket += 1
        ticket = self._weather_ticket
        self.state.weather_status = WeatherStatus.FETCHING

        try:
            reading = await self._weather.fetch(self._city_name)
        except WeatherUnavailableError as exc:
            if ticket != self._weather_ticket:
                logger.debug("Discarding failure of superseded weather request %d", ticket)
                return None
            logger.warning("Weather unavailable: %s", exc)
            self.state.weather_status = WeatherStatus.UNAVAILABLE
            self.state.message = WEATHER_UNAVAILABLE_MESSAGE
            return None

        if ticket != self._weather_ticket:
            logger.debug("Discarding result of superseded weather request %d", ticket)
            return None

        self.state.reading = reading
        self.state.weather_status = WeatherStatus.READY
        self.state.message = None
        self._clamp()
        return reading

    async def commit(self) -> Pair | None:
        """Add the currently shown pair to favorites.

        Returns ``None`` when the pair was already a favorite. A missing side
        is reported through ``state.message`` and re-raised.
        """

        selection = self.selection()
        try:
            pair = await self._favorites.commit(selection.outer, selection.inner)
        except MissingSelectionError as exc:
            self.state.message = str(exc)
            raise
        self.state.message = None
        return pair

    async def remove_favorite(self, display_index: int) -> Pair:
        """Remove a favorite addressed by its position in newest-first order."""

        position = self._favorites.position_from_newest(display_index)
        return await self._favorites.remove(position)

    async def add_item(self, name: str, image_ref: str, category: Category | str, subcategory: str) -> Item:
        item = await self._catalog.add(name, image_ref, category, subcategory)
        self._clamp()
        return item

    async def replace_item(
        self,
        item_id: str,
        *,
        name: str | None = None,
        image_ref: str | None = None,
        subcategory: str | None = None,
    ) -> Item:
        item = await self._catalog.replace(item_id, name=name, image_ref=image_ref, subcategory=subcategory)
        self._clamp()
        return item

    async def remove_item(self, item_id: str, *, prune_favorites: bool = False) -> Item:
        """Delete a catalog item.

        Favorites embed full item records and keep working after the item is
        gone, unless ``prune_favorites`` asks for them to be dropped too.
        """

        item = await self._catalog.remove(item_id)
        if prune_favorites:
            pruned = await self._favorites.prune(item_id)
            logger.info("Removed %d favorites referencing deleted item %s", pruned, item_id)
        self._clamp()
        return item

    def _clamp(self) -> Candidates:
        candidates = self.candidates()
        self.state.outer.clamp(candidates.outer)
        self.state.inner.clamp(candidates.inner)
        return candidates
