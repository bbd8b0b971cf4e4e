from __future__ import annotations

import logging
from typing import Any, Dict, Literal

import httpx
from pydantic import BaseModel, Field

from react_loop.tools.base import Tool

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

WEATHER_TOOL_NAME = "get_weather"
WEATHER_TOOL_DESCRIPTION = (
    "Get the current weather for a city. Returns temperature, apparent "
    "temperature, conditions, humidity and wind speed."
)

# WMO weather interpretation codes returned by Open-Meteo.
_WMO_CODES: Dict[int, str] = {
    0: "clear sky",
    1: "mainly clear",
    2: "partly cloudy",
    3: "overcast",
    45: "fog",
    48: "depositing rime fog",
    51: "light drizzle",
    53: "moderate drizzle",
    55: "dense drizzle",
    61: "slight rain",
    63: "moderate rain",
    65: "heavy rain",
    71: "slight snow",
    73: "moderate snow",
    75: "heavy snow",
    80: "slight rain showers",
    81: "moderate rain showers",
    82: "violent rain showers",
    95: "thunderstorm",
    96: "thunderstorm with slight hail",
    99: "thunderstorm with heavy hail",
}


class WeatherParams(BaseModel):
    location: str = Field(..., min_length=1, description="City name, optionally followed by a country code, e.g. 'Paris, FR'.")
    units: Literal["metric", "imperial"] = Field("metric", description="Unit system for temperature and wind speed.")


class WeatherTool(Tool):
    """Current conditions from Open-Meteo, which needs no API key."""

    def __init__(self, client: httpx.Client | None = None, timeout_s: float = 30.0) -> None:
        super().__init__(
            name=WEATHER_TOOL_NAME,
            description=WEATHER_TOOL_DESCRIPTION,
            parameters=WeatherParams,
        )
        self.timeout_s = timeout_s
        self._client = client

    def run(self, params: WeatherParams) -> str:
        client = self._client or httpx.Client(
            headers={"User-Agent": "react-loop weather tool"}, timeout=self.timeout_s
        )
        try:
            place = self._geocode(client, params.location)
            current = self._current(client, place["latitude"], place["longitude"], params.units)
        finally:
            if self._client is None:
                client.close()
        return self._describe(place, current, params.units)

    def _geocode(self, client: httpx.Client, location: str) -> Dict[str, Any]:
        query = location.strip()
        name, country_code = query, None
        if "," in query:
            parts = [p.strip() for p in query.split(",") if p.strip()]
            if len(parts) >= 2 and 2 <= len(parts[-1]) <= 3:
                name, country_code = parts[0], parts[-1].upper()

        params: Dict[str, Any] = {"name": name, "count": 5, "language": "en"}
        if country_code:
            params["country_code"] = country_code
        response = client.get(GEOCODING_URL, params=params)
        response.raise_for_status()
        results = response.json().get("results") or []
        if not results:
            raise ValueError(f"Could not geocode location: {location}")

        # Prefer the most populous match.
        results.sort(key=lambda r: r.get("population") or 0, reverse=True)
        logger.debug("Geocoded %r to %s", location, results[0].get("name"))
        return results[0]

    def _current(self, client: httpx.Client, lat: float, lon: float, units: str) -> Dict[str, Any]:
        params = {
            "latitude": lat,
            "longitude": lon,
            "current": "temperature_2m,relative_humidity_2m,apparent_temperature,wind_speed_10m,weather_code",
            "temperature_unit": "celsius" if units == "metric" else "fahrenheit",
            "wind_speed_unit": "kmh" if units == "metric" else "mph",
            "timezone": "auto",
        }
        response = client.get(FORECAST_URL, params=params)
        response.raise_for_status()
        return response.json().get("current", {})

    @staticmethod
    def _describe(place: Dict[str, Any], current: Dict[str, Any], units: str) -> str:
        temp_unit = "°C" if units == "metric" else "°F"
        wind_unit = "km/h" if units == "metric" else "mph"
        code = current.get("weather_code")
        conditions = _WMO_CODES.get(code, f"weather code {code}") if code is not None else "unknown conditions"
        where = place.get("name", "unknown")
        if place.get("country_code"):
            where = f"{where}, {place['country_code']}"
        return (
            f"{where}: {current.get('temperature_2m')}{temp_unit} "
            f"(feels like {current.get('apparent_temperature')}{temp_unit}), {conditions}, "
            f"humidity {current.get('relative_humidity_2m')}%, "
            f"wind {current.get('wind_speed_10m')} {wind_unit}"
        )
