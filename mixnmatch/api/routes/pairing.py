"""Pairing screen endpoints: mode, navigation, weather and favorites."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from mixnmatch.api.context import AppContext, get_context, item_payload, pair_payload
from mixnmatch.catalog.taxonomy import Category
from mixnmatch.logic import PairingSession
from mixnmatch.recommender.rules_engine import DisplayMode

router = APIRouter(tags=["pairing"])


class ModeUpdate(BaseModel):
    mode: DisplayMode


def _render(session: PairingSession) -> dict[str, Any]:
    state = session.state
    candidates = session.candidates()
    reading = state.reading
    return {
        "mode": state.mode.value,
        "weather": {
            "status": state.weather_status.value,
            "temperature": reading.temperature_celsius if reading else None,
            "city": reading.city_name if reading else None,
        },
        "message": state.message,
        "outer": {
            "index": state.outer.index,
            "candidates": [item_payload(item) for item in candidates.outer],
        },
        "inner": {
            "index": state.inner.index,
            "candidates": [item_payload(item) for item in candidates.inner],
        },
    }


@router.get("/pairing")
async def pairing_state(context: AppContext = Depends(get_context)) -> dict[str, Any]:
    return _render(context.session)


@router.put("/pairing/mode")
async def set_mode(body: ModeUpdate, context: AppContext = Depends(get_context)) -> dict[str, Any]:
    context.session.set_mode(body.mode)
    return _render(context.session)


@router.post("/pairing/{category}/advance")
async def advance(category: Category, context: AppContext = Depends(get_context)) -> dict[str, Any]:
    context.session.advance(category)
    return _render(context.session)


@router.post("/pairing/{category}/retreat")
async def retreat(category: Category, context: AppContext = Depends(get_context)) -> dict[str, Any]:
    context.session.retreat(category)
    return _render(context.session)


@router.post("/pairing/weather/refresh")
async def refresh_weather(context: AppContext = Depends(get_context)) -> dict[str, Any]:
    await context.session.refresh_weather()
    return _render(context.session)


@router.get("/favorites")
async def list_favorites(context: AppContext = Depends(get_context)) -> list[dict[str, Any]]:
    """Favorites, most recent first."""

    return [pair_payload(pair) for pair in context.session.favorites.newest_first()]


@router.post("/favorites")
async def commit_favorite(context: AppContext = Depends(get_context)) -> dict[str, Any]:
    pair = await context.session.commit()
    if pair is None:
        return {"added": False, "pair": None}
    return {"added": True, "pair": pair_payload(pair)}


@router.delete("/favorites/{display_index}")
async def delete_favorite(display_index: int, context: AppContext = Depends(get_context)) -> dict[str, Any]:
    try:
        pair = await context.session.remove_favorite(display_index)
    except IndexError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return pair_payload(pair)
