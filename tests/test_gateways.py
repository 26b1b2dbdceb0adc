"""Tests for the weather and recipe HTTP clients."""

from __future__ import annotations

import httpx
import pytest

from mixnmatch.config.settings import Settings
from mixnmatch.errors import RecipeUnavailableError, WeatherUnavailableError
from mixnmatch.integrations.recipe_client import RecipeClient
from mixnmatch.integrations.weather_client import WeatherClient

SETTINGS = Settings(
    weather_api_key="weather-key",
    weather_base_url="https://weather.test/data/2.5/weather",
    recipe_api_key="recipe-key",
    recipe_base_url="https://recipes.test/",
)

WEATHER_BODY = {
    "weather": [{"id": 803, "main": "Clouds"}],
    "main": {"temp": 17.4, "humidity": 60},
    "name": "Chicago",
}


@pytest.mark.asyncio
async def test_weather_fetch_parses_reading() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=WEATHER_BODY)

    client = WeatherClient(SETTINGS, transport=httpx.MockTransport(handler))
    try:
        reading = await client.fetch("Chicago")
    finally:
        await client.close()

    assert reading.temperature_celsius == pytest.approx(17.4)
    assert reading.city_name == "Chicago"
    assert reading.condition_id == 803
    params = seen[0].url.params
    assert params["appid"] == "weather-key"
    assert params["q"] == "Chicago"
    assert params["units"] == "metric"


@pytest.mark.asyncio
async def test_weather_empty_condition_list_defaults_to_zero() -> None:
    body = {**WEATHER_BODY, "weather": []}
    client = WeatherClient(SETTINGS, transport=httpx.MockTransport(lambda _: httpx.Response(200, json=body)))
    try:
        reading = await client.fetch()
    finally:
        await client.close()

    assert reading.condition_id == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(401, json={"message": "Invalid API key"}),
        httpx.Response(204),
        httpx.Response(200, text="<html>oops</html>"),
        httpx.Response(200, json={"weather": [], "name": "Chicago"}),
        httpx.Response(200, json={"weather": [], "main": {"temp": "warm"}, "name": "Chicago"}),
    ],
)
async def test_weather_failures_raise_unavailable(response: httpx.Response) -> None:
    client = WeatherClient(SETTINGS, transport=httpx.MockTransport(lambda _: response))
    try:
        with pytest.raises(WeatherUnavailableError):
            await client.fetch("Chicago")
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_weather_transport_error_raises_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route", request=request)

    client = WeatherClient(SETTINGS, transport=httpx.MockTransport(handler))
    try:
        with pytest.raises(WeatherUnavailableError) as excinfo:
            await client.fetch("Chicago")
    finally:
        await client.close()

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_recipe_search_joins_ingredients() -> None:
    seen: list[httpx.Request] = []
    body = [
        {
            "id": 73420,
            "title": "Apple Crumble",
            "image": "https://img.test/73420.jpg",
            "usedIngredientCount": 2,
            "missedIngredientCount": 1,
        },
        {"id": 632660, "title": "Apricot Glazed Apple Tart", "image": "https://img.test/632660.jpg"},
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=body)

    client = RecipeClient(SETTINGS, transport=httpx.MockTransport(handler))
    try:
        recipes = await client.find_by_ingredients(["apple", " sugar ", ""])
    finally:
        await client.close()

    assert [recipe.id for recipe in recipes] == [73420, 632660]
    assert recipes[0].used_ingredient_count == 2
    assert recipes[1].summary is None
    assert seen[0].url.path == "/recipes/findByIngredients"
    assert seen[0].url.params["ingredients"] == "apple,sugar"
    assert seen[0].url.params["apiKey"] == "recipe-key"


@pytest.mark.asyncio
async def test_recipe_search_without_ingredients_skips_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = RecipeClient(SETTINGS, transport=httpx.MockTransport(handler))
    try:
        assert await client.find_by_ingredients([" ", ""]) == []
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_recipe_information_falls_back_to_source_url() -> None:
    body = {"id": 7, "title": "Soup", "instructions": None, "sourceUrl": "https://example.test/soup"}
    client = RecipeClient(SETTINGS, transport=httpx.MockTransport(lambda _: httpx.Response(200, json=body)))
    try:
        detail = await client.get_information(7)
    finally:
        await client.close()

    assert detail.instructions == ""
    assert detail.source_url == "https://example.test/soup"


@pytest.mark.asyncio
async def test_recipe_errors_raise_unavailable() -> None:
    client = RecipeClient(
        SETTINGS,
        transport=httpx.MockTransport(lambda _: httpx.Response(402, json={"message": "quota"})),
    )
    try:
        with pytest.raises(RecipeUnavailableError) as excinfo:
            await client.find_by_ingredients(["apple"])
    finally:
        await client.close()

    assert excinfo.value.status_code == 402
