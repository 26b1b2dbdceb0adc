"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised project settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    storage_root: str = "data/store"
    storage_group: str = "group.mixnmatch"
    taxonomy: str = "wardrobe"

    weather_api_key: str = ""
    weather_base_url: str = "https://api.openweathermap.org/data/2.5/weather"
    weather_city: str = "Chicago"
    weather_units: str = "metric"

    recipe_api_key: str = ""
    recipe_base_url: str = "https://api.spoonacular.com"

    request_timeout: float = 30.0


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        storage_root=os.getenv("MIXNMATCH_STORAGE_ROOT", "data/store"),
        storage_group=os.getenv("MIXNMATCH_STORAGE_GROUP", "group.mixnmatch"),
        taxonomy=os.getenv("MIXNMATCH_TAXONOMY", "wardrobe"),
        weather_api_key=os.getenv("WEATHER_API_KEY", ""),
        weather_base_url=os.getenv("WEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5/weather"),
        weather_city=os.getenv("WEATHER_CITY", "Chicago"),
        weather_units=os.getenv("WEATHER_UNITS", "metric"),
        recipe_api_key=os.getenv("RECIPE_API_KEY", ""),
        recipe_base_url=os.getenv("RECIPE_BASE_URL", "https://api.spoonacular.com"),
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30")),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
