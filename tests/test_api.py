"""Tests for the FastAPI surface."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import FakeWeather
from mixnmatch.api.main import create_app
from mixnmatch.config.settings import Settings
from mixnmatch.integrations.recipe_client import RecipeClient
from mixnmatch.integrations.weather_client import WeatherReading


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(storage_root=str(tmp_path / "store"), storage_group="group.api")


def _client(settings: Settings, weather: FakeWeather, recipes: RecipeClient | None = None) -> TestClient:
    return TestClient(create_app(settings, weather=weather, recipes=recipes))


def test_health_returns_ok(settings: Settings) -> None:
    with _client(settings, FakeWeather()) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_pairing_flow(settings: Settings) -> None:
    weather = FakeWeather(WeatherReading(temperature_celsius=12.0, city_name="Chicago"))
    with _client(settings, weather) as client:
        sweater = client.post(
            "/items",
            json={"name": "Sweater", "imageRef": "s.jpg", "category": "outer", "subcategory": "sweater"},
        ).json()
        client.post("/items", json={"name": "Tee", "category": "outer", "subcategory": "tshirt"})
        jeans = client.post("/items", json={"name": "Jeans", "category": "inner", "subcategory": "jeans"}).json()

        state = client.post("/pairing/weather/refresh").json()
        assert state["weather"] == {"status": "ready", "temperature": 12.0, "city": "Chicago"}
        assert [item["id"] for item in state["outer"]["candidates"]] == [sweater["id"]]

        added = client.post("/favorites").json()
        duplicate = client.post("/favorites").json()
        favorites = client.get("/favorites").json()

    assert weather.calls == ["Chicago"]
    assert added["added"] is True
    assert added["pair"]["inner"]["id"] == jeans["id"]
    assert duplicate == {"added": False, "pair": None}
    assert len(favorites) == 1


def test_commit_without_candidates_is_rejected(settings: Settings) -> None:
    with _client(settings, FakeWeather()) as client:
        response = client.post("/favorites")

    assert response.status_code == 422
    assert response.json()["missing"] == "both"


def test_weather_failure_is_reported_in_state(settings: Settings) -> None:
    with _client(settings, FakeWeather()) as client:
        client.post("/items", json={"name": "Tee", "category": "outer", "subcategory": "tshirt"})
        state = client.post("/pairing/weather/refresh").json()
        show_all = client.put("/pairing/mode", json={"mode": "show_all"}).json()

    assert state["weather"]["status"] == "unavailable"
    assert state["outer"]["candidates"] == []
    assert "Show All" in state["message"]
    assert len(show_all["outer"]["candidates"]) == 1


def test_navigation_endpoints(settings: Settings) -> None:
    with _client(settings, FakeWeather()) as client:
        for name in ("One", "Two"):
            client.post("/items", json={"name": name, "category": "outer", "subcategory": "shirt"})
        client.put("/pairing/mode", json={"mode": "show_all"})

        forward = client.post("/pairing/outer/advance").json()
        at_end = client.post("/pairing/outer/advance").json()
        back = client.post("/pairing/outer/retreat").json()

    assert forward["outer"]["index"] == 1
    assert at_end["outer"]["index"] == 1
    assert back["outer"]["index"] == 0


def test_item_errors(settings: Settings) -> None:
    with _client(settings, FakeWeather()) as client:
        invalid = client.post("/items", json={"name": "Odd", "category": "outer", "subcategory": "jeans"})
        missing = client.get("/items/does-not-exist")
        bad_delete = client.delete("/favorites/3")

    assert invalid.status_code == 422
    assert missing.status_code == 404
    assert bad_delete.status_code == 404


def test_items_persist_across_restarts(settings: Settings) -> None:
    with _client(settings, FakeWeather()) as client:
        created = client.post("/items", json={"name": "Tee", "category": "outer", "subcategory": "tshirt"}).json()
        client.put(f"/items/{created['id']}", json={"name": "Plain tee"})

    with _client(settings, FakeWeather()) as client:
        items = client.get("/items").json()
        taxonomy = client.get("/items/taxonomy").json()

    assert [item["name"] for item in items] == ["Plain tee"]
    assert taxonomy["categories"]["inner"]["subcategories"] == ["jeans", "shorts", "trousers"]


def test_items_grouped_by_subcategory(settings: Settings) -> None:
    with _client(settings, FakeWeather()) as client:
        for name, subcategory in (("Old tee", "tshirt"), ("Oxford", "shirt"), ("New tee", "tshirt")):
            client.post("/items", json={"name": name, "category": "outer", "subcategory": subcategory})
        client.post("/items", json={"name": "Jeans", "category": "inner", "subcategory": "jeans"})

        grouped = client.get("/items", params={"category": "outer"}).json()
        tees = client.get("/items", params={"category": "outer", "subcategory": "tshirt"}).json()
        wrong = client.get("/items", params={"category": "outer", "subcategory": "jeans"})
        orphan = client.get("/items", params={"subcategory": "jeans"})

    assert [(group["subcategory"], group["count"]) for group in grouped] == [
        ("shirt", 1),
        ("sweater", 0),
        ("tshirt", 2),
    ]
    assert [item["name"] for item in grouped[2]["items"]] == ["New tee", "Old tee"]
    assert len(tees) == 1
    assert [item["name"] for item in tees[0]["items"]] == ["New tee", "Old tee"]
    assert wrong.status_code == 422
    assert orphan.status_code == 422


def _recipe_client(settings: Settings, handler) -> RecipeClient:
    return RecipeClient(settings, transport=httpx.MockTransport(handler))


def test_recipe_search_defaults_to_pantry_items(settings: Settings) -> None:
    pantry = replace(settings, taxonomy="pantry", recipe_api_key="k", recipe_base_url="https://recipes.test")
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": 1, "title": "Chicken fried rice", "usedIngredientCount": 2}])

    with _client(pantry, FakeWeather(), _recipe_client(pantry, handler)) as client:
        client.post("/items", json={"name": "Chicken thighs", "category": "outer", "subcategory": "chicken"})
        client.post("/items", json={"name": "Rice", "category": "inner", "subcategory": "rice"})
        found = client.get("/recipes").json()
        explicit = client.get("/recipes", params={"ingredients": "egg, ,leek"}).json()

    assert found["ingredients"] == ["Chicken thighs", "Rice"]
    assert found["recipes"][0]["usedIngredientCount"] == 2
    assert seen[0].url.params["ingredients"] == "Chicken thighs,Rice"
    assert explicit["ingredients"] == ["egg", "leek"]
    assert seen[1].url.params["ingredients"] == "egg,leek"


def test_recipe_search_needs_ingredients_outside_pantry(settings: Settings) -> None:
    recipes = _recipe_client(settings, lambda _: httpx.Response(200, json=[]))

    with _client(settings, FakeWeather(), recipes) as client:
        response = client.get("/recipes")

    assert response.status_code == 422


def test_recipe_details(settings: Settings) -> None:
    body = {"id": 716429, "title": "Pasta", "instructions": None, "sourceUrl": "https://example.org/pasta"}
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=body)

    with _client(settings, FakeWeather(), _recipe_client(settings, handler)) as client:
        detail = client.get("/recipes/716429").json()

    assert seen[0].url.path.endswith("/recipes/716429/information")
    assert detail["id"] == 716429
    assert detail["instructions"] == ""
    assert detail["spoonacularSourceUrl"] == "https://example.org/pasta"


def test_recipe_provider_errors_are_mapped(settings: Settings) -> None:
    quota = _recipe_client(settings, lambda _: httpx.Response(402, json={"message": "quota"}))

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(settings, FakeWeather(), quota) as client:
        rejected = client.get("/recipes", params={"ingredients": "apple"})
    with _client(settings, FakeWeather(), _recipe_client(settings, refuse)) as client:
        offline = client.get("/recipes/1")

    assert rejected.status_code == 502
    assert rejected.json()["upstream_status"] == 402
    assert offline.status_code == 503
    assert offline.json()["upstream_status"] is None
