# presurvey/services/google.py

import asyncio
import logging
from typing import Any, Dict, Tuple

from presurvey import config
from presurvey.errors import ApiError, UpstreamError
from presurvey.geo.distance import round_half_up
from presurvey.models import GeocodedPlace
from presurvey.services.http import get_client, get_json

logger = logging.getLogger(__name__)

LIVE_LEAVE_BY = "Plan 10 min buffer"


def _status_hint(payload: Dict[str, Any]) -> str:
    status = str(payload.get("status", "UNKNOWN"))
    if payload.get("error_message"):
        return f"{status} - {payload['error_message']}"
    return status


def _to_place(place_id: str, payload: Dict[str, Any]) -> GeocodedPlace:
    first = payload["results"][0]
    location = first["geometry"]["location"]
    return GeocodedPlace(
        id=place_id,
        label=first.get("formatted_address", ""),
        lat=float(location["lat"]),
        lng=float(location["lng"]),
    )


async def geocode_pair(depot_text: str, customer_text: str) -> Tuple[GeocodedPlace, GeocodedPlace]:
    """
    Geocodifica depósito y cliente con Google en paralelo.
    Si cualquiera de los dos no es OK se responde 502 geocode_failed.
    """
    key = config.GOOGLE_API_KEY

    async with get_client() as client:
        origin_raw, dest_raw = await asyncio.gather(
            get_json(client, config.GOOGLE_GEOCODE_URL, {"address": depot_text, "key": key}),
            get_json(client, config.GOOGLE_GEOCODE_URL, {"address": customer_text, "key": key}),
        )

    if origin_raw.get("status") != "OK" or dest_raw.get("status") != "OK":
        hint = f"origin={_status_hint(origin_raw)} dest={_status_hint(dest_raw)}"
        logger.warning("Google geocoding failed: %s", hint)
        raise ApiError(502, "geocode_failed", hint)

    try:
        return _to_place("live_origin", origin_raw), _to_place("live_dest", dest_raw)
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise UpstreamError("unexpected geocode payload") from exc


async def directions(
    origin_lat: float,
    origin_lng: float,
    dest_lat: float,
    dest_lng: float,
    departure_unix: int,
) -> Dict[str, Any]:
    """
    Ruta con tráfico de Google Directions.
    Regresa distance_km (1 decimal) y eta_minutes usando duration_in_traffic
    cuando viene en la respuesta.
    """
    params = {
        "origin": f"{origin_lat},{origin_lng}",
        "destination": f"{dest_lat},{dest_lng}",
        "departure_time": departure_unix,
        "traffic_model": "best_guess",
        "key": config.GOOGLE_API_KEY,
    }
    async with get_client() as client:
        data = await get_json(client, config.GOOGLE_DIRECTIONS_URL, params)

    if data.get("status") != "OK":
        logger.warning("Google directions failed: %s", data.get("status"))
        raise ApiError(502, "directions_failed", str(data.get("status")))

    try:
        leg = data["routes"][0]["legs"][0]
        duration = leg.get("duration_in_traffic") or leg["duration"]
        eta = int(round_half_up(duration["value"] / 60))
        km = round_half_up(leg["distance"]["value"] / 1000, 1)
    except (KeyError, IndexError, TypeError) as exc:
        raise UpstreamError("unexpected directions payload") from exc

    return {
        "distance_km": km,
        "eta_minutes": eta,
        "leave_by": LIVE_LEAVE_BY,
    }


def streetview_urls(lat: float, lng: float) -> Dict[str, str]:
    key = config.GOOGLE_API_KEY
    return {
        "image_url": f"{config.GOOGLE_STREETVIEW_URL}?size=640x360&location={lat},{lng}&key={key}",
        "satellite_url": (
            f"{config.GOOGLE_STATICMAP_URL}?center={lat},{lng}"
            f"&zoom=18&size=320x180&maptype=satellite&key={key}"
        ),
    }
