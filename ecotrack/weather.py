# ecotrack/weather.py
import logging

import requests

from . import config
from .errors import WeatherUnavailable

logger = logging.getLogger(__name__)

CLEAR_SKY_CODES = (0, 1)
# Open-Meteo reports Celsius; these are the 75/50 F cut-offs converted
HOT_ABOVE_C = 24
COOL_BELOW_C = 10


def fetch_current_weather():
    """Return ``{"temperature": float, "weather_code": int}`` for the configured spot."""
    params = {
        "latitude": config.WEATHER_LATITUDE,
        "longitude": config.WEATHER_LONGITUDE,
        "current": "temperature_2m,weather_code",
        "timezone": "auto",
    }
    try:
        r = requests.get(config.WEATHER_URL, params=params, timeout=config.WEATHER_TIMEOUT)
        r.raise_for_status()
        current = r.json()["current"]
        return {
            "temperature": float(current["temperature_2m"]),
            "weather_code": int(current["weather_code"]),
        }
    except (requests.RequestException, ValueError, KeyError, TypeError) as e:
        logger.exception("Weather lookup failed")
        raise WeatherUnavailable(str(e)) from e


def weather_advice(temperature, weather_code):
    if weather_code in CLEAR_SKY_CODES:
        return "Perfect weather today! Consider walking or biking instead of driving."
    if temperature > HOT_ABOVE_C:
        return "Hot day ahead. Use fans instead of AC when possible to save energy."
    if temperature < COOL_BELOW_C:
        return "Cool weather. Layer clothing before turning up the heat to reduce energy use."
    return "Weather looks good for eco-friendly transportation!"
