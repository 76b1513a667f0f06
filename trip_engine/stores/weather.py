"""Daily forecasts from the OpenWeatherMap 5 day / 3 hour API."""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx

from trip_engine.config import Settings, get_settings
from trip_engine.geo import CITY_CENTERS
from trip_engine.log import get_logger
from trip_engine.schemas import Precipitation, TemperatureRange, WeatherForecast

logger = get_logger(__name__)

CONDITION_DESCRIPTIONS: Dict[str, str] = {
    "clear": "Clear sky",
    "clouds": "Cloudy",
    "rain": "Rainy",
    "drizzle": "Light rain",
    "thunderstorm": "Thunderstorm",
    "snow": "Snowy",
    "mist": "Misty",
    "fog": "Foggy",
    "haze": "Hazy",
}

MOCK_RAIN_EVERY_N_DAYS = 5


def map_condition_code(code: int) -> str:
    """OpenWeatherMap condition id -> forecast condition."""
    if 200 <= code < 300:
        return "thunderstorm"
    if 300 <= code < 400:
        return "drizzle"
    if 500 <= code < 600:
        return "rain"
    if 600 <= code < 700:
        return "snow"
    if 700 <= code < 800:
        if code in (701, 741):
            return "mist"
        if code == 721:
            return "haze"
        return "fog"
    if code == 800:
        return "clear"
    if 801 <= code <= 804:
        return "clouds"
    return "clear"


def mock_forecast(start: date, end: date) -> Dict[str, WeatherForecast]:
    """Deterministic stand-in: mild and clear, with every fifth day of the year rainy."""
    forecasts: Dict[str, WeatherForecast] = {}
    current = start
    while current <= end:
        rainy = current.timetuple().tm_yday % MOCK_RAIN_EVERY_N_DAYS == 0
        key = current.isoformat()
        forecasts[key] = WeatherForecast(
            date=key,
            condition="rain" if rainy else "clear",
            temperature=TemperatureRange(min=15, max=25),
            precipitation=Precipitation(probability=60, amount=5.2) if rainy else None,
            humidity=75 if rainy else 50,
            description="Light rain" if rainy else "Clear sky",
        )
        current += timedelta(days=1)
    return forecasts


def aggregate_daily(items: List[Dict[str, Any]], start: date, end: date) -> Dict[str, WeatherForecast]:
    """Collapse 3-hour slots into one forecast per day.

    Any rainy or drizzly slot makes the whole day rainy; otherwise the middle
    slot of the day stands for it.
    """
    by_day: Dict[date, List[Dict[str, Any]]] = {}
    for item in items:
        day = datetime.fromtimestamp(item["dt"], tz=timezone.utc).date()
        if start <= day <= end:
            by_day.setdefault(day, []).append(item)

    forecasts: Dict[str, WeatherForecast] = {}
    for day in sorted(by_day):
        slots = by_day[day]
        conditions = [map_condition_code((slot.get("weather") or [{}])[0].get("id", 800)) for slot in slots]
        temps = [slot["main"]["temp"] for slot in slots]
        amounts = [
            (slot.get("rain") or {}).get("3h") or (slot.get("snow") or {}).get("3h") or 0 for slot in slots
        ]
        humidity = [slot["main"].get("humidity", 0) for slot in slots]

        has_rain = any(condition in ("rain", "drizzle") for condition in conditions)
        condition = "rain" if has_rain else conditions[len(conditions) // 2]
        total = sum(amounts)

        key = day.isoformat()
        forecasts[key] = WeatherForecast(
            date=key,
            condition=condition,
            temperature=TemperatureRange(min=round(min(temps)), max=round(max(temps))),
            precipitation=Precipitation(
                probability=min(100, round(total * 10)) if has_rain else 0,
                amount=round(total, 1) if total > 0 else None,
            ),
            humidity=round(sum(humidity) / len(humidity)),
            description=CONDITION_DESCRIPTIONS.get(condition, "Clear sky"),
        )
    return forecasts


class OpenWeatherClient:
    BASE_URL = "https://api.openweathermap.org/data/2.5/forecast"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "OpenWeatherClient":
        settings = settings or get_settings()
        return cls(settings.openweather_api_key, timeout=settings.http_timeout)

    async def fetch_forecast(self, city_id: str, start: date, end: date) -> Dict[str, WeatherForecast]:
        """Forecasts keyed by ISO date for ``start``..``end`` inclusive.

        Falls back to :func:`mock_forecast` when no API key is configured, the
        city has no known coordinates, or the API call fails.
        """
        if not self.api_key:
            logger.warning("OpenWeatherMap API key not configured, returning mock weather data")
            return mock_forecast(start, end)

        coords = CITY_CENTERS.get((city_id or "").lower())
        if coords is None:
            logger.warning("Unknown city %s, returning mock weather data", city_id)
            return mock_forecast(start, end)

        params = {"lat": coords.lat, "lon": coords.lng, "appid": self.api_key, "units": "metric"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.BASE_URL, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError:
            logger.warning("Weather forecast request failed for %s", city_id, exc_info=True)
            return mock_forecast(start, end)

        return aggregate_daily(data.get("list", []), start, end)
