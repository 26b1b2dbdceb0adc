"""Catalog CRUD endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from mixnmatch.api.context import AppContext, get_context, item_payload
from mixnmatch.catalog.taxonomy import Category

router = APIRouter(prefix="/items", tags=["catalog"])


class ItemCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    image_ref: str = Field(default="", alias="imageRef")
    category: Category
    subcategory: str


class ItemUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, min_length=1)
    image_ref: str | None = Field(default=None, alias="imageRef")
    subcategory: str | None = None


@router.get("")
async def list_items(
    category: str | None = None,
    subcategory: str | None = None,
    context: AppContext = Depends(get_context),
) -> list[dict[str, Any]]:
    """The whole catalog, or one category grouped by subcategory.

    With ``category`` the response holds one group per subcategory in
    taxonomy order, each with its count and its items newest first.
    ``subcategory`` narrows that to a single group.
    """

    catalog = context.session.catalog
    if category is None:
        if subcategory is not None:
            raise HTTPException(status_code=422, detail="subcategory requires a category.")
        return [item_payload(item) for item in catalog.list()]

    return [
        {
            "subcategory": group.subcategory,
            "count": group.count,
            "items": [item_payload(item) for item in group.items],
        }
        for group in catalog.grouped(category, subcategory)
    ]


@router.get("/taxonomy")
async def describe_taxonomy(context: AppContext = Depends(get_context)) -> dict[str, Any]:
    """Categories, labels and allowed subcategories of the active taxonomy."""

    taxonomy = context.session.catalog.taxonomy
    return {
        "name": taxonomy.name,
        "categories": {
            category.value: {
                "label": taxonomy.label(category),
                "subcategories": list(taxonomy.subcategories_for(category)),
            }
            for category in Category
        },
    }


@router.get("/{item_id}")
async def get_item(item_id: str, context: AppContext = Depends(get_context)) -> dict[str, str]:
    return item_payload(context.session.catalog.get(item_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_item(body: ItemCreate, context: AppContext = Depends(get_context)) -> dict[str, str]:
    item = await context.session.add_item(body.name, body.image_ref, body.category, body.subcategory)
    return item_payload(item)


@router.put("/{item_id}")
async def update_item(
    item_id: str,
    body: ItemUpdate,
    context: AppContext = Depends(get_context),
) -> dict[str, str]:
    item = await context.session.replace_item(
        item_id,
        name=body.name,
        image_ref=body.image_ref,
        subcategory=body.subcategory,
    )
    return item_payload(item)


@router.delete("/{item_id}")
async def delete_item(
    item_id: str,
    prune_favorites: bool = False,
    context: AppContext = Depends(get_context),
) -> dict[str, str]:
    item = await context.session.remove_item(item_id, prune_favorites=prune_favorites)
    return item_payload(item)
