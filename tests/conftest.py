"""Shared fixtures for catalog, storage and session tests."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from mixnmatch.catalog.models import Item
from mixnmatch.catalog.taxonomy import Category
from mixnmatch.errors import WeatherUnavailableError
from mixnmatch.integrations.weather_client import WeatherReading
from mixnmatch.storage.repository import SharedStore


def make_item(name: str, category: Category, subcategory: str, item_id: str | None = None) -> Item:
    return Item.create(name, f"{name}.jpg", category, subcategory, item_id=item_id)


class FakeWeather:
    """Weather gateway that returns queued readings or errors."""

    def __init__(self, *results: WeatherReading | Exception) -> None:
        self._results = list(results)
        self.calls: list[str | None] = []

    async def fetch(self, city_name: str | None = None) -> WeatherReading:
        self.calls.append(city_name)
        result = self._results.pop(0) if self._results else WeatherUnavailableError("offline")
        if isinstance(result, Exception):
            raise result
        return result


class GatedWeather:
    """Weather gateway whose calls complete only when released by the test."""

    def __init__(self) -> None:
        self.pending: list[tuple[asyncio.Event, WeatherReading | Exception]] = []

    def queue(self, result: WeatherReading | Exception) -> asyncio.Event:
        gate = asyncio.Event()
        self.pending.append((gate, result))
        return gate

    async def fetch(self, city_name: str | None = None) -> WeatherReading:
        gate, result = self.pending.pop(0)
        await gate.wait()
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def store(tmp_path: Path) -> SharedStore:
    return SharedStore(tmp_path / "store", "group.test")


@pytest.fixture
def heavy_top() -> Item:
    return make_item("Wool sweater", Category.OUTER, "sweater", item_id="sweater-1")


@pytest.fixture
def light_top() -> Item:
    return make_item("Band tee", Category.OUTER, "tshirt", item_id="tshirt-1")


@pytest.fixture
def plain_top() -> Item:
    return make_item("Oxford shirt", Category.OUTER, "shirt", item_id="shirt-1")


@pytest.fixture
def jeans() -> Item:
    return make_item("Blue jeans", Category.INNER, "jeans", item_id="jeans-1")


@pytest.fixture
def shorts() -> Item:
    return make_item("Cargo shorts", Category.INNER, "shorts", item_id="shorts-1")
