# presurvey/geo/distance.py

import math
import random
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple

from presurvey.config import (
    EARTH_RADIUS_KM,
    LEAVE_NOW_THRESHOLD_MIN,
    MIN_ETA_MINUTES,
    MOCK_AVG_SPEED_KMH,
)
from presurvey.models import LineString, RouteEstimate


LEAVE_NOW = "Leave now"
LEAVE_SOON = "Leave within 15 min"


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Distancia de gran círculo (haversine) en km sobre una esfera de radio
    EARTH_RADIUS_KM. Sin corrección elipsoidal.
    """
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Redondeo decimal "half up" sobre el valor exacto del float
    (round() de Python usa half-even).
    """
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def estimate_eta_minutes(km: float, jitter: float) -> int:
    """ETA mock: velocidad media fija, factor de tráfico y piso de despacho."""
    raw = (km / MOCK_AVG_SPEED_KMH) * 60 * jitter
    return max(MIN_ETA_MINUTES, math.floor(raw + 0.5))


def draw_jitter(jitter_range: Tuple[float, float], rng: Optional[random.Random] = None) -> float:
    low, high = jitter_range
    draw = (rng or random).random()
    return low + draw * (high - low)


def leave_by_for(eta_minutes: int, threshold: Optional[int] = None) -> str:
    if threshold is None:
        threshold = LEAVE_NOW_THRESHOLD_MIN
    return LEAVE_NOW if eta_minutes < threshold else LEAVE_SOON


def straight_line(lat1: float, lng1: float, lat2: float, lng2: float) -> LineString:
    # GeoJSON: [lng, lat]
    return LineString(coordinates=[[lng1, lat1], [lng2, lat2]])


def estimate_route(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
    jitter: float,
    leave_by: Optional[str] = None,
    threshold: Optional[int] = None,
) -> RouteEstimate:
    """
    Construye la estimación mock entre dos puntos.

    - leave_by fijo si se pasa (ruta por coordenadas); si no, se decide con
      el umbral de ETA (ruta por ids).
    - polyline es una línea recta de 2 puntos, no sigue calles.
    """
    km = distance_km(lat1, lng1, lat2, lng2)
    eta = estimate_eta_minutes(km, jitter)

    return RouteEstimate(
        distance_km=round_half_up(km, 1),
        eta_minutes=eta,
        leave_by=leave_by if leave_by is not None else leave_by_for(eta, threshold),
        polyline=straight_line(lat1, lng1, lat2, lng2),
    )
