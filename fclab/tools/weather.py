"""
Temperature tools.

    - MockTemperatureTool: fixed temperatures for a couple of cities
    - OpenMeteoTemperatureTool: live hourly forecast from api.open-meteo.com
"""

import json
import logging
import unicodedata
from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

import httpx
from pydantic import BaseModel, Field

from ..Tool import Tool

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

# normalized city fragment -> (display name, temperature)
MOCK_TEMPERATURES = {
    "sao paulo": ("São Paulo", "32"),
    "porto alegre": ("Porto Alegre", "25"),
}


def _fold(text: str) -> str:
    """Lowercase and strip accents, so 'São Paulo' and 'sao paulo' match."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def get_current_temperature(location: str, unit: str = "celsius") -> str:
    """
    Mock weather lookup.

    Returns:
        JSON string {"location", "temperature", "unit"}; unknown cities keep
        the given name and report "unknown".
    """
    folded = _fold(location)
    for fragment, (name, temperature) in MOCK_TEMPERATURES.items():
        if fragment in folded:
            return json.dumps(
                {"location": name, "temperature": temperature, "unit": unit},
                ensure_ascii=False,
            )

    return json.dumps(
        {"location": location, "temperature": "unknown", "unit": unit},
        ensure_ascii=False,
    )


class CurrentTemperatureInput(BaseModel):
    location: str = Field(
        min_length=1,
        description="The name of the city. Ex: São Paulo",
    )
    unit: Literal["celsius", "fahrenheit"] = Field(
        default="celsius",
        description="Temperature unit (celsius or fahrenheit)",
    )


class MockTemperatureTool(Tool):
    name: str = "get_current_temperature"
    description: str = "Gets the current temperature in a given city"

    def __init__(self, **kwargs):
        super().__init__(**kwargs, input_schema=CurrentTemperatureInput, impl=self)

    def run(self, input: CurrentTemperatureInput) -> str:
        return get_current_temperature(input.location, input.unit)


# =========================================================
# Open-Meteo
# =========================================================

class CoordinatesInput(BaseModel):
    latitude: float = Field(description="Latitude of the location to get temperature")
    longitude: float = Field(description="Longitude of the location to get temperature")


def closest_hour_index(times: List[str], now: Optional[datetime] = None) -> int:
    """
    Index of the hourly timestamp closest to `now`.

    Open-Meteo returns naive ISO timestamps in GMT unless a timezone is
    requested, so `now` is compared as naive UTC.
    """
    if not times:
        raise ValueError("Forecast has no hourly data")

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)

    hours = [datetime.fromisoformat(t) for t in times]
    return min(range(len(hours)), key=lambda i: abs((hours[i] - now).total_seconds()))


class OpenMeteoTemperatureTool(Tool):
    """
    Current temperature for given coordinates, from the Open-Meteo forecast.

    Attributes:
        client: Optional httpx.Client to reuse (a short-lived one is opened
                per call otherwise)
        timeout: Request timeout in seconds
    """

    name: str = "get_temperature_by_coordinates"
    description: str = "Gets the current temperature for given coordinates"
    result_template: Optional[str] = "The current temperature is {result}"

    client: Optional[Any] = Field(default=None, exclude=True, repr=False)
    timeout: float = Field(default=10.0, exclude=True)

    def __init__(self, **kwargs):
        super().__init__(**kwargs, input_schema=CoordinatesInput, impl=self)

    def fetch(self, latitude: float, longitude: float) -> dict:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "hourly": "temperature_2m",
            "forecast_days": 1,
        }
        try:
            if self.client is not None:
                response = self.client.get(OPEN_METEO_URL, params=params)
                response.raise_for_status()
                return response.json()

            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(OPEN_METEO_URL, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as exc:
            logger.error("Error getting temperature: %s", exc)
            raise RuntimeError(f"Request to API {OPEN_METEO_URL} failed: {exc}") from exc

    def run(self, input: CoordinatesInput, now: Optional[datetime] = None) -> str:
        data = self.fetch(input.latitude, input.longitude)
        hourly = data["hourly"]
        index = closest_hour_index(hourly["time"], now)
        return f"{hourly['temperature_2m'][index]}°C"
