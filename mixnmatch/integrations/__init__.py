"""Clients for the weather and recipe providers."""

from .checks import (
    IntegrationCheckResult,
    check_recipes,
    check_weather,
    run_all_checks,
)
from .recipe_client import RecipeClient, RecipeDetail, RecipeSummary
from .weather_client import WeatherClient, WeatherReading

__all__ = [
    "IntegrationCheckResult",
    "RecipeClient",
    "RecipeDetail",
    "RecipeSummary",
    "WeatherClient",
    "WeatherReading",
    "check_recipes",
    "check_weather",
    "run_all_checks",
]
