"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from mixnmatch import __version__
from mixnmatch.api.context import AppContext
from mixnmatch.api.routes import items, pairing
from mixnmatch.api.routes import recipes as recipe_routes
from mixnmatch.catalog.taxonomy import get_taxonomy
from mixnmatch.config.settings import Settings, get_settings
from mixnmatch.errors import (
    ItemNotFoundError,
    MissingSelectionError,
    PersistenceError,
    RecipeUnavailableError,
    TaxonomyError,
)
from mixnmatch.integrations.recipe_client import RecipeClient
from mixnmatch.integrations.weather_client import WeatherClient
from mixnmatch.logic import PairingSession, WeatherGateway
from mixnmatch.monitoring.logging import configure_logging
from mixnmatch.recommender.favorites import FavoritesLedger
from mixnmatch.storage.catalog import CatalogStore
from mixnmatch.storage.repository import SharedStore

logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(MissingSelectionError)
    async def _missing_selection(_: Request, exc: MissingSelectionError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "missing": exc.missing.value},
        )

    @app.exception_handler(ItemNotFoundError)
    async def _not_found(_: Request, exc: ItemNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": f"Item {exc.args[0]} not found."},
        )

    @app.exception_handler(TaxonomyError)
    async def _bad_taxonomy(_: Request, exc: TaxonomyError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(PersistenceError)
    async def _persistence(_: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("Persistence failure: %s", exc)
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})

    @app.exception_handler(RecipeUnavailableError)
    async def _recipes_unavailable(_: Request, exc: RecipeUnavailableError) -> JSONResponse:
        logger.warning("Recipe provider failure: %s", exc)
        # Error status from the provider: 502. No usable response: 503.
        code = status.HTTP_503_SERVICE_UNAVAILABLE if exc.status_code is None else status.HTTP_502_BAD_GATEWAY
        return JSONResponse(
            status_code=code,
            content={"detail": str(exc), "upstream_status": exc.status_code},
        )


def create_app(
    settings: Settings | None = None,
    *,
    weather: WeatherGateway | None = None,
    recipes: RecipeClient | None = None,
) -> FastAPI:
    """Initialise the FastAPI application.

    ``weather`` and ``recipes`` replace the HTTP clients the app would
    otherwise own, mainly for tests. Injected clients are not closed.
    """

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        taxonomy = get_taxonomy(settings.taxonomy)
        store = SharedStore(Path(settings.storage_root), settings.storage_group)
        catalog = CatalogStore(store, taxonomy)
        favorites = FavoritesLedger(store, taxonomy)
        await catalog.load()
        await favorites.load()

        owned_weather = WeatherClient(settings) if weather is None else None
        owned_recipes = RecipeClient(settings) if recipes is None else None
        session = PairingSession(
            catalog,
            favorites,
            weather or owned_weather,
            city_name=settings.weather_city,
        )
        app.state.context = AppContext(session=session, recipes=recipes or owned_recipes)
        logger.info(
            "Loaded %d items and %d favorites from %s",
            len(catalog),
            len(favorites),
            store.directory,
        )
        try:
            yield
        finally:
            if owned_weather is not None:
                await owned_weather.close()
            if owned_recipes is not None:
                await owned_recipes.close()

    app = FastAPI(
        title="MixnMatch API",
        version=__version__,
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=lifespan,
    )

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness probes."""

        return {"status": "ok"}

    _register_error_handlers(app)
    app.include_router(items.router)
    app.include_router(pairing.router)
    app.include_router(recipe_routes.router)
    return app


app = create_app()
