"""Shared dependencies attached to the running application."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from mixnmatch.catalog.models import Item, Pair
from mixnmatch.integrations.recipe_client import RecipeClient
from mixnmatch.logic import PairingSession


@dataclass(slots=True)
class AppContext:
    """Container for objects shared across routes."""

    session: PairingSession
    recipes: RecipeClient


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def item_payload(item: Item) -> dict[str, str]:
    return item.to_record()


def pair_payload(pair: Pair) -> dict[str, dict[str, str]]:
    return pair.to_record()
