import logging
import math
from datetime import datetime

import requests

from ..models import WeatherReading
from .http import http_session

logger = logging.getLogger(__name__)

OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
NOMINATIM_URL = "https://nominatim.openstreetmap.org/reverse"

WEATHER_CACHE = {}
CACHE_DURATION = 600

# Used when location permission is denied or the provider fails
DEFAULT_TEMPERATURE = 32
DEFAULT_CONDITION = "Clear"
DEFAULT_PLACE = "Houston, USA"
DEFAULT_DESCRIPTION = "32°C, sunny"
PLACEHOLDER_TEMPERATURE = 30
UNAVAILABLE_DESCRIPTION = "Weather unavailable"


def round_half_up(value):
    return int(math.floor(float(value) + 0.5))


def default_reading():
    return WeatherReading(
        temperature_c=DEFAULT_TEMPERATURE,
        condition=DEFAULT_CONDITION,
        description=DEFAULT_DESCRIPTION,
        place=DEFAULT_PLACE,
        degraded=True,
    )


def reverse_geocode(lat, lon):
    """'City, Country' for the coordinates, or 'Unknown'."""
    try:
        res = http_session.get(
            NOMINATIM_URL,
            params={"format": "json", "lat": lat, "lon": lon},
            timeout=5,
        )
        res.raise_for_status()
        address = res.json().get("address", {})
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Reverse geocode failed for {lat},{lon}: {e}")
        return "Unknown"

    city = (address.get("city") or address.get("town") or address.get("village")
            or address.get("county") or address.get("state") or "Unknown")
    country = address.get("country", "")
    return f"{city}, {country}" if country else city


def _fetch_current_weather(lat, lon, api_key):
    cache_key = f"{round(float(lat), 2)},{round(float(lon), 2)}"
    now_ts = datetime.utcnow().timestamp()

    if cache_key in WEATHER_CACHE:
        cached_entry = WEATHER_CACHE[cache_key]
        if now_ts - cached_entry["timestamp"] < CACHE_DURATION:
            logger.info(f"Serving weather for {cache_key} from cache")
            return cached_entry["data"]

    res = http_session.get(
        OPENWEATHER_URL,
        params={"lat": lat, "lon": lon, "units": "metric", "appid": api_key},
        timeout=5,
    )
    res.raise_for_status()
    data = res.json()

    WEATHER_CACHE[cache_key] = {"timestamp": now_ts, "data": data}
    return data


def fetch_weather_reading(lat, lon, api_key=None):
    """
    Current weather for the coordinates as a WeatherReading.

    Never raises: missing coordinates, a missing API key or a failed
    provider call all produce a default reading.
    """
    if lat is None or lon is None or lat == "" or lon == "":
        return default_reading()

    place = reverse_geocode(lat, lon)

    if not api_key:
        return WeatherReading(
            temperature_c=PLACEHOLDER_TEMPERATURE,
            condition=DEFAULT_CONDITION,
            description=f"{PLACEHOLDER_TEMPERATURE}°C, clear (placeholder)",
            place=place,
            degraded=True,
        )

    try:
        data = _fetch_current_weather(lat, lon, api_key)
        temp = round_half_up(data["main"]["temp"])
        weather = (data.get("weather") or [{}])[0]
        condition = weather.get("main") or DEFAULT_CONDITION
        desc = weather.get("description", "")
        return WeatherReading(
            temperature_c=temp,
            condition=condition,
            description=f"{temp}°C, {desc}",
            place=place,
        )
    except (requests.RequestException, ValueError, KeyError, TypeError) as e:
        logger.error(f"Failed to fetch current weather: {e}")
        return WeatherReading(
            temperature_c=DEFAULT_TEMPERATURE,
            condition=DEFAULT_CONDITION,
            description=UNAVAILABLE_DESCRIPTION,
            place=place,
            degraded=True,
        )
