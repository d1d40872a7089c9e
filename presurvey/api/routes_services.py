# presurvey/api/routes_services.py

import logging
import math
from typing import Optional, Tuple

from fastapi import APIRouter, Query

from presurvey import config
from presurvey.errors import ApiError, UpstreamError
from presurvey.models import IncidentsResponse, PropertyImageResponse, WeatherResponse
from presurvey.services import google, traffic, weather
from presurvey.services.loader import resolve_address

logger = logging.getLogger(__name__)

router = APIRouter(tags=["services"])

SANDBOX_IMAGE_URL = "https://placehold.co/640x360?text=Street+View"
SANDBOX_SATELLITE_URL = "https://placehold.co/320x180?text=Satellite"


def _parse_coord(value: Optional[str]) -> Optional[float]:
    """Texto del query -> float finito; cualquier otra cosa -> None."""
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _point(lat: Optional[str], lng: Optional[str]) -> Optional[Tuple[float, float]]:
    lat_f, lng_f = _parse_coord(lat), _parse_coord(lng)
    if lat_f is None or lng_f is None:
        return None
    return lat_f, lng_f


def _require_point(lat: Optional[str], lng: Optional[str]) -> Tuple[float, float]:
    point = _point(lat, lng)
    if point is None:
        raise ApiError(400, "missing_params")
    return point


@router.get("/property-image", response_model=PropertyImageResponse)
def get_property_image(
    address_id: Optional[str] = Query(None),
    lat: Optional[str] = Query(None),
    lng: Optional[str] = Query(None),
):
    """
    Street View + satélite de la propiedad.
    - address_id: dirección del directorio (live si hay key, si no sus placeholders)
    - lat/lng: punto libre (live si hay key, si no placeholders genéricos)
    """
    if address_id:
        address = resolve_address(address_id)
        if address is None:
            raise ApiError(400, "unknown address")
        if config.GOOGLE_API_KEY:
            return PropertyImageResponse(
                **google.streetview_urls(address.lat, address.lng),
                type_guess=address.type_guess,
                source="live",
            )
        return PropertyImageResponse(
            image_url=address.image_url,
            satellite_url=address.satellite_url,
            type_guess=address.type_guess,
            source="mock",
        )

    point = _point(lat, lng)
    if point is not None:
        if not config.GOOGLE_API_KEY:
            return PropertyImageResponse(
                image_url=SANDBOX_IMAGE_URL,
                satellite_url=SANDBOX_SATELLITE_URL,
                type_guess=None,
                source="sandbox",
            )
        return PropertyImageResponse(
            **google.streetview_urls(*point),
            type_guess=None,
            source="live",
        )

    raise ApiError(400, "missing_params")


@router.get("/incidents", response_model=IncidentsResponse)
async def get_incidents(
    lat: Optional[str] = Query(None),
    lng: Optional[str] = Query(None),
    radius_km: float = Query(config.DEFAULT_INCIDENT_RADIUS_KM, gt=0),
):
    """Obras e incidentes viales: TomTom, TfL o mock (en ese orden)."""
    lat_f, lng_f = _require_point(lat, lng)

    result = await traffic.find_incidents(lat_f, lng_f, radius_km)
    return IncidentsResponse(**result)


@router.get("/weather", response_model=WeatherResponse)
async def get_weather(
    lat: Optional[str] = Query(None),
    lng: Optional[str] = Query(None),
):
    """Clima actual vía Open-Meteo (no requiere key)."""
    lat_f, lng_f = _require_point(lat, lng)

    try:
        return await weather.current_weather(lat_f, lng_f)
    except UpstreamError as exc:
        raise ApiError(502, "weather_failed", str(exc)) from exc
