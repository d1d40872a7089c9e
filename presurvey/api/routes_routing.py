# presurvey/api/routes_routing.py

import json
import logging
import math
import time
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Body, Query
from fastapi.responses import JSONResponse

from presurvey import config
from presurvey.errors import ApiError, UpstreamError
from presurvey.geo.distance import LEAVE_SOON, draw_jitter, estimate_route
from presurvey.geo.sandbox import sandbox_geocode
from presurvey.models import (
    GeocodedPlace,
    IntakeRequest,
    IntakeResponse,
    RouteResponse,
)
from presurvey.services import google
from presurvey.services.loader import resolve_address, resolve_depot

logger = logging.getLogger(__name__)

router = APIRouter(tags=["routing"])


def _to_unix(value: Optional[str], now: Optional[float] = None) -> int:
    """
    Convierte `when` a segundos UNIX.
      - vacío -> ahora
      - solo dígitos -> milisegundos
      - ISO-8601 -> fecha (sin zona = UTC)
      - cualquier otra cosa -> ahora
    """
    fallback = int(now if now is not None else time.time())
    if not value:
        return fallback
    if value.isascii() and value.isdigit():
        return int(value) // 1000
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return fallback
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return math.floor(dt.timestamp())


def _all_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


class AsciiJSONResponse(JSONResponse):
    """JSON con escapes \\uXXXX; acepta cualquier code unit UTF-16."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=True, separators=(",", ":")).encode("ascii")


# ---------- Intake: origen/destino por ids o texto libre ----------

@router.post("/intake", response_model=IntakeResponse)
async def intake(req: Optional[IntakeRequest] = Body(None)):
    """
    Resuelve origen (depósito) y destino (cliente) de la mudanza.

    - customer_address_id + depot_id -> directorio estático (mode=mock_ids)
    - textos libres sin GOOGLE_API_KEY -> geocoder sandbox (mode=sandbox_text)
    - textos libres con key -> Google en paralelo (mode=live_text)
    """
    req = req or IntakeRequest()

    if req.customer_address_id and req.depot_id:
        depot = resolve_depot(req.depot_id)
        address = resolve_address(req.customer_address_id)
        if depot is None or address is None:
            raise ApiError(400, "unknown origin/dest")
        return IntakeResponse(
            origin=GeocodedPlace(**depot.model_dump()),
            dest=GeocodedPlace(**address.model_dump()),
            mode="mock_ids",
        )

    if req.customer_address_text and req.depot_address_text:
        if not config.GOOGLE_API_KEY:
            origin = sandbox_geocode(req.depot_address_text, *config.SANDBOX_DEPOT_CENTER)
            dest = sandbox_geocode(req.customer_address_text, *config.SANDBOX_CUSTOMER_CENTER)
            sandbox = IntakeResponse(
                origin=GeocodedPlace(**origin.model_dump()),
                dest=GeocodedPlace(**dest.model_dump()),
                mode="sandbox_text",
            )
            # los labels repiten el texto del usuario, que puede traer surrogates sueltos
            return AsciiJSONResponse(content=sandbox.model_dump())

        try:
            origin_live, dest_live = await google.geocode_pair(
                req.depot_address_text, req.customer_address_text
            )
        except UpstreamError as exc:
            raise ApiError(502, "geocode_failed", str(exc)) from exc
        return IntakeResponse(origin=origin_live, dest=dest_live, mode="live_text")

    raise ApiError(400, "invalid_payload", "Use mock IDs or free-text addresses.")


# ---------- Ruta: live / sandbox por coordenadas / mock por ids ----------

@router.get("/route", response_model=RouteResponse)
async def get_route(
    origin_lat: Optional[float] = Query(None),
    origin_lng: Optional[float] = Query(None),
    dest_lat: Optional[float] = Query(None),
    dest_lng: Optional[float] = Query(None),
    origin_id: Optional[str] = Query(None),
    dest_id: Optional[str] = Query(None),
    when: Optional[str] = Query(None, description="ISO-8601 o milisegundos UNIX"),
):
    """
    Distancia, ETA y recomendación de salida.

    Con las 4 coordenadas:
      - con GOOGLE_API_KEY: Google Directions con tráfico (source=live)
      - sin key: haversine + jitter de tráfico (source=sandbox)
    Con origin_id (depósito) + dest_id (cliente): haversine + jitter
    y leave_by según umbral de ETA (source=mock).
    """
    departure_unix = _to_unix(when)
    coords = (origin_lat, origin_lng, dest_lat, dest_lng)

    if all(c is not None for c in coords):
        if not _all_finite(*coords):
            raise ApiError(400, "invalid_params", "Coordinates must be finite numbers.")

        if config.GOOGLE_API_KEY:
            try:
                live = await google.directions(*coords, departure_unix=departure_unix)
            except UpstreamError as exc:
                raise ApiError(502, "directions_failed", str(exc)) from exc
            return RouteResponse(
                **live,
                polyline=None,
                source="live",
                departure_unix=departure_unix,
            )

        estimate = estimate_route(
            *coords,
            jitter=draw_jitter(config.JITTER_COORDS),
            leave_by=LEAVE_SOON,
        )
        return RouteResponse(
            **estimate.model_dump(),
            source="sandbox",
            departure_unix=departure_unix,
        )

    if origin_id and dest_id:
        depot = resolve_depot(origin_id)
        address = resolve_address(dest_id)
        if depot is None or address is None:
            raise ApiError(400, "unknown origin/dest")

        estimate = estimate_route(
            depot.lat,
            depot.lng,
            address.lat,
            address.lng,
            jitter=draw_jitter(config.JITTER_IDS),
            threshold=config.LEAVE_NOW_THRESHOLD_MIN,
        )
        return RouteResponse(
            **estimate.model_dump(),
            source="mock",
            departure_unix=departure_unix,
        )

    raise ApiError(400, "missing_params")
