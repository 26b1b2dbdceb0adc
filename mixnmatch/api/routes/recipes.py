"""Recipe search over the pantry and recipe details."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from mixnmatch.api.context import AppContext, get_context
from mixnmatch.catalog.taxonomy import PANTRY

router = APIRouter(prefix="/recipes", tags=["recipes"])


def _ingredients(raw: str | None, context: AppContext) -> list[str]:
    if raw is not None:
        return [part.strip() for part in raw.split(",") if part.strip()]
    catalog = context.session.catalog
    if catalog.taxonomy.name != PANTRY.name:
        raise HTTPException(status_code=422, detail="Pass ingredients as a comma-separated list.")
    # Keep the first spelling of each name, in catalog order.
    names: dict[str, str] = {}
    for item in catalog:
        names.setdefault(item.name.strip().lower(), item.name.strip())
    return [name for name in names.values() if name]


@router.get("")
async def search_recipes(
    ingredients: str | None = None,
    context: AppContext = Depends(get_context),
) -> dict[str, Any]:
    """Recipes that use the given ingredients, or the pantry's items when none are given."""

    wanted = _ingredients(ingredients, context)
    recipes = await context.recipes.find_by_ingredients(wanted)
    return {
        "ingredients": wanted,
        "recipes": [recipe.model_dump(by_alias=True) for recipe in recipes],
    }


@router.get("/{recipe_id}")
async def get_recipe(recipe_id: int, context: AppContext = Depends(get_context)) -> dict[str, Any]:
    detail = await context.recipes.get_information(recipe_id)
    return detail.model_dump(by_alias=True)
