"""Async client for recipe search by ingredients and recipe details."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from mixnmatch.config.settings import Settings, get_settings
from mixnmatch.errors import RecipeUnavailableError

logger = logging.getLogger(__name__)


class RecipeSummary(BaseModel):
    """One search hit."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    image: str = ""
    summary: str | None = None
    used_ingredient_count: int | None = Field(default=None, alias="usedIngredientCount")
    missed_ingredient_count: int | None = Field(default=None, alias="missedIngredientCount")


class RecipeDetail(BaseModel):
    """Instructions and source link for a single recipe."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str | None = None
    instructions: str = ""
    source_url: str = Field(default="", alias="spoonacularSourceUrl")

    @model_validator(mode="before")
    @classmethod
    def _fallback_source_url(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("spoonacularSourceUrl") and data.get("sourceUrl"):
            data = {**data, "spoonacularSourceUrl": data["sourceUrl"]}
        if isinstance(data, dict) and data.get("instructions") is None:
            data = {**data, "instructions": ""}
        return data


_SUMMARIES = TypeAdapter(list[RecipeSummary])


class RecipeClient:
    """Thin wrapper over the recipe provider's REST endpoints."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = httpx.AsyncClient(
            base_url=self._settings.recipe_base_url.rstrip("/"),
            timeout=self._settings.request_timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    async def find_by_ingredients(self, ingredients: Sequence[str]) -> list[RecipeSummary]:
        """Search recipes that use the given ingredients."""

        cleaned = [ingredient.strip() for ingredient in ingredients if ingredient.strip()]
        if not cleaned:
            return []
        body = await self._request_json(
            "/recipes/findByIngredients",
            {"ingredients": ",".join(cleaned)},
        )
        try:
            return _SUMMARIES.validate_python(body)
        except ValidationError as exc:
            logger.warning("Recipe search response could not be decoded: %s", exc)
            raise RecipeUnavailableError("Recipe search response could not be decoded.") from exc

    async def get_information(self, recipe_id: int) -> RecipeDetail:
        """Fetch instructions and the source link for one recipe."""

        body = await self._request_json(f"/recipes/{recipe_id}/information", {})
        try:
            return RecipeDetail.model_validate(body)
        except ValidationError as exc:
            logger.warning("Recipe %s details could not be decoded: %s", recipe_id, exc)
            raise RecipeUnavailableError(f"Details for recipe {recipe_id} could not be decoded.") from exc

    async def ping(self) -> bool:
        """Return ``True`` if a minimal search succeeds."""

        await self.find_by_ingredients(["salt"])
        return True

    async def _request_json(self, endpoint: str, params: dict[str, str]) -> Any:
        query = {**params, "apiKey": self._settings.recipe_api_key}
        try:
            response = await self._client.get(endpoint, params=query)
        except httpx.TimeoutException as exc:
            raise RecipeUnavailableError("Timed out waiting for the recipe service.") from exc
        except httpx.HTTPError as exc:
            logger.warning("Recipe request to %s failed: %s", endpoint, exc)
            raise RecipeUnavailableError(f"Recipe request failed: {exc}") from exc

        if response.status_code != 200:
            raise RecipeUnavailableError(
                f"Recipe service returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise RecipeUnavailableError("Recipe service returned a non-JSON body.") from exc
