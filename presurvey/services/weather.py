# presurvey/services/weather.py

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from presurvey import config
from presurvey.models import WeatherResponse
from presurvey.services.http import get_client, get_json

CLEAR_CODES = (0, 1)


def shape_weather(payload: Dict[str, Any], today: Optional[datetime] = None) -> WeatherResponse:
    """
    Resume el current_weather de Open-Meteo a lo que usa el front.
    Códigos WMO 0/1 -> Clear; todo lo demás -> Cloudy.
    """
    current = payload.get("current_weather") or {}
    condition = "Clear" if current.get("weathercode") in CLEAR_CODES else "Cloudy"

    return WeatherResponse(
        date=(today or datetime.now(timezone.utc)).date().isoformat(),
        condition=condition,
        temp_c=current.get("temperature"),
        wind_kmh=current.get("windspeed"),
        precip_chance_pct=10 if condition == "Clear" else 50,
    )


async def current_weather(lat: float, lng: float) -> WeatherResponse:
    params = {
        "latitude": lat,
        "longitude": lng,
        "hourly": "temperature_2m,precipitation,wind_speed_10m",
        "current_weather": "true",
    }
    async with get_client() as client:
        data = await get_json(client, config.OPEN_METEO_URL, params)
    return shape_weather(data or {})
