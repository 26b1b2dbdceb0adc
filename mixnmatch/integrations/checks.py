"""Connectivity checks for the weather and recipe providers."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from mixnmatch.errors import MixnMatchError
from mixnmatch.integrations.recipe_client import RecipeClient
from mixnmatch.integrations.weather_client import WeatherClient


@dataclass(slots=True)
class IntegrationCheckResult:
    """Structured result describing the integration check outcome."""

    name: str
    success: bool
    message: str


async def _run_check(
    name: str,
    factory: Callable[[], Awaitable[bool]],
    success_message: str,
) -> IntegrationCheckResult:
    try:
        result = await factory()
    except MixnMatchError as exc:
        return IntegrationCheckResult(name=name, success=False, message=str(exc))

    if result:
        return IntegrationCheckResult(name=name, success=True, message=success_message)
    return IntegrationCheckResult(
        name=name,
        success=False,
        message="Service responded with non-success status.",
    )


async def check_weather() -> IntegrationCheckResult:
    """Fetch a reading for the configured city."""

    client = WeatherClient()

    async def _ping() -> bool:
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _run_check(
        name="Weather",
        factory=_ping,
        success_message="Weather API is reachable.",
    )


async def check_recipes() -> IntegrationCheckResult:
    """Run a minimal recipe search."""

    client = RecipeClient()

    async def _ping() -> bool:
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _run_check(
        name="Recipes",
        factory=_ping,
        success_message="Recipe API is reachable.",
    )


async def run_all_checks() -> list[IntegrationCheckResult]:
    """Execute all integration checks concurrently."""

    return list(await asyncio.gather(check_weather(), check_recipes()))
