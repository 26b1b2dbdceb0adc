"""Async client for the current-weather endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from mixnmatch.config.settings import Settings, get_settings
from mixnmatch.errors import WeatherUnavailableError

logger = logging.getLogger(__name__)


class _Condition(BaseModel):
    id: int


class _MainBlock(BaseModel):
    temp: float


class WeatherPayload(BaseModel):
    """Fields consumed from the provider response body."""

    weather: list[_Condition]
    main: _MainBlock
    name: str


@dataclass(frozen=True, slots=True)
class WeatherReading:
    """A successful observation for one city."""

    temperature_celsius: float
    city_name: str
    condition_id: int = 0


class WeatherClient:
    """Single-attempt fetch of the current temperature for a city."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = httpx.AsyncClient(
            timeout=self._settings.request_timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    async def fetch(self, city_name: str | None = None) -> WeatherReading:
        """Return the current reading or raise :class:`WeatherUnavailableError`."""

        city = city_name or self._settings.weather_city
        params = {
            "appid": self._settings.weather_api_key,
            "q": city,
            "units": self._settings.weather_units,
        }
        logger.info("Fetching weather for %s", city)
        body = await self._request_json(params)
        try:
            payload = WeatherPayload.model_validate(body)
        except ValidationError as exc:
            logger.warning("Weather response for %s could not be decoded: %s", city, exc)
            raise WeatherUnavailableError("Weather response could not be decoded.") from exc

        condition_id = payload.weather[0].id if payload.weather else 0
        return WeatherReading(
            temperature_celsius=payload.main.temp,
            city_name=payload.name,
            condition_id=condition_id,
        )

    async def ping(self) -> bool:
        """Return ``True`` if a reading for the configured city can be fetched."""

        await self.fetch()
        return True

    async def _request_json(self, params: dict[str, str]) -> Any:
        try:
            response = await self._client.get(self._settings.weather_base_url, params=params)
        except httpx.TimeoutException as exc:
            raise WeatherUnavailableError("Timed out waiting for the weather service.") from exc
        except httpx.HTTPError as exc:
            logger.warning("Weather request failed: %s", exc)
            raise WeatherUnavailableError(f"Weather request failed: {exc}") from exc

        if response.status_code != 200:
            raise WeatherUnavailableError(
                f"Weather service returned {response.status_code}.",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise WeatherUnavailableError("Weather service returned a non-JSON body.") from exc
