# presurvey/services/traffic.py

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from presurvey import config
from presurvey.errors import UpstreamError
from presurvey.services.http import get_client, get_json

logger = logging.getLogger(__name__)

TOMTOM_FIELDS = (
    "{incidents{type,iconCategory,startTime,endTime,from,to,roadNumbers,"
    "polyline,probabilityOfOccurrence,delaySeconds}}"
)


def bbox_around(lat: float, lng: float, km: float = config.DEFAULT_INCIDENT_RADIUS_KM) -> Dict[str, float]:
    """
    Caja aproximada de `km` alrededor del punto.
    ~111 km por grado de latitud; la longitud se corrige por cos(lat).
    """
    d_lat = km / 111
    d_lng = km / (111 * math.cos(math.radians(lat)))
    return {
        "top": lat + d_lat,
        "bottom": lat - d_lat,
        "left": lng - d_lng,
        "right": lng + d_lng,
    }


def in_london(lat: float, lng: float) -> bool:
    box = config.LONDON_BBOX
    return box["lat_min"] < lat < box["lat_max"] and box["lng_min"] < lng < box["lng_max"]


def _shape_tomtom(item: Dict[str, Any]) -> Dict[str, Any]:
    road_numbers = item.get("roadNumbers") or []
    return {
        "type": item.get("type"),
        "icon": item.get("iconCategory"),
        "from": item.get("from"),
        "to": item.get("to"),
        "start": item.get("startTime"),
        "end": item.get("endTime"),
        "delay_s": item.get("delaySeconds") or 0,
        "polyline": item.get("polyline"),
        "road": road_numbers[0] if road_numbers else None,
    }


def _shape_tfl(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "category": item.get("category"),
        "severity": item.get("severity"),
        "start": item.get("startDateTime"),
        "end": item.get("endDateTime"),
        "road": item.get("roadName") or item.get("roadNumber"),
        "location": item.get("location") or item.get("comments"),
    }


async def fetch_tomtom(box: Dict[str, float]) -> List[Dict[str, Any]]:
    params = {
        "bbox": f"{box['top']},{box['left']},{box['bottom']},{box['right']}",
        "fields": TOMTOM_FIELDS,
        "key": config.TOMTOM_API_KEY,
    }
    async with get_client() as client:
        data = await get_json(client, config.TOMTOM_INCIDENTS_URL, params)
    return [_shape_tomtom(i) for i in (data or {}).get("incidents") or []]


async def fetch_tfl() -> List[Dict[str, Any]]:
    params = {"app_id": config.TFL_APP_ID, "app_key": config.TFL_APP_KEY}
    async with get_client() as client:
        data = await get_json(client, config.TFL_DISRUPTION_URL, params)

    items = data if isinstance(data, list) else []
    relevant = [d for d in items if d.get("category") or d.get("severity")]
    return [_shape_tfl(d) for d in relevant[: config.TFL_MAX_ITEMS]]


def mock_incidents(now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    start = (now or datetime.now(timezone.utc)).isoformat()
    return [
        {"category": "Roadworks", "severity": "moderate", "start": start, "end": None,
         "road": "A3212", "location": "Temporary lane closure"},
        {"category": "Congestion", "severity": "minor", "start": start, "end": None,
         "road": "Battersea Bridge", "location": "Peak-time congestion"},
    ]


async def find_incidents(lat: float, lng: float, radius_km: float) -> Dict[str, Any]:
    """
    Incidentes viales cerca del punto, en orden de preferencia:
      1) TomTom (si hay key)
      2) TfL (si el punto está en Londres y hay credenciales)
      3) mock fijo
    Una falla de un proveedor solo hace caer al siguiente.
    """
    if config.TOMTOM_API_KEY:
        try:
            items = await fetch_tomtom(bbox_around(lat, lng, radius_km))
            return {"source": "tomtom", "count": len(items), "items": items}
        except UpstreamError:
            logger.warning("TomTom incidents unavailable, falling back")

    if in_london(lat, lng) and config.TFL_APP_ID and config.TFL_APP_KEY:
        try:
            items = await fetch_tfl()
            return {"source": "tfl", "count": len(items), "items": items}
        except UpstreamError:
            logger.warning("TfL disruptions unavailable, falling back to mock")

    items = mock_incidents()
    return {"source": "mock", "count": len(items), "items": items}
