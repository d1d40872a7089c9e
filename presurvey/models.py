# presurvey/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional, Tuple


Source = Literal["live", "sandbox", "mock"]


# --------- CORE: GEOCODER SANDBOX / ESTIMADOR ---------

class SandboxAddress(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    lat: float
    lng: float


class LineString(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["LineString"] = "LineString"
    coordinates: List[List[float]]  # [[lng, lat], [lng, lat]]


class RouteEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_km: float
    eta_minutes: int
    leave_by: str
    polyline: LineString


# --------- DIRECTORIO ESTÁTICO ---------

class Address(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    lat: float
    lng: float
    image_url: str
    satellite_url: str
    type_guess: str


class Depot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    lat: float
    lng: float


class Area(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    centroid: Tuple[float, float]  # [lat, lng]
    demand_index: int


class SampleAddressesResponse(BaseModel):
    depots: List[Depot]
    customers: List[Address]


class AreasResponse(BaseModel):
    areas: List[Area]


class AreaMetricsResponse(BaseModel):
    area: Area
    current_rate: float
    competitor_avg_rate: float
    recommended_rate: float
    change_pct: float
    rationale: str


# --------- INTAKE ---------

class IntakeRequest(BaseModel):
    customer_address_id: Optional[str] = None
    depot_id: Optional[str] = None
    customer_address_text: Optional[str] = None
    depot_address_text: Optional[str] = None


class GeocodedPlace(BaseModel):
    # Las direcciones del directorio traen campos extra (image_url, type_guess...)
    model_config = ConfigDict(extra="allow")

    id: str
    label: str
    lat: float
    lng: float


class IntakeResponse(BaseModel):
    origin: GeocodedPlace
    dest: GeocodedPlace
    mode: Literal["mock_ids", "sandbox_text", "live_text"]


# --------- RUTA ---------

class RouteResponse(BaseModel):
    distance_km: float
    eta_minutes: int
    incidents: List[Dict[str, Any]] = Field(default_factory=list)
    leave_by: str
    polyline: Optional[LineString] = None
    source: Source
    departure_unix: int


# --------- IMÁGENES ---------

class PropertyImageResponse(BaseModel):
    image_url: str
    satellite_url: str
    type_guess: Optional[str] = None
    source: Source


# --------- INCIDENTES ---------

class IncidentsResponse(BaseModel):
    source: Literal["tomtom", "tfl", "mock"]
    count: int
    items: List[Dict[str, Any]]


# --------- CLIMA ---------

class WeatherResponse(BaseModel):
    date: str
    condition: Literal["Clear", "Cloudy"]
    temp_c: Optional[float] = None
    wind_kmh: Optional[float] = None
    precip_chance_pct: int
    source: Literal["live"] = "live"


# --------- CALENDARIO ---------

class CalendarRequest(BaseModel):
    title: str = "Move Job"
    start_iso: Optional[str] = None
    duration_minutes: float = 120
    location: str = ""
    notes: str = ""


# --------- IA ---------

class AiRequest(BaseModel):
    context: Dict[str, Any] = Field(default_factory=dict)


# --------- HEATMAP ---------

class PointFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    properties: Dict[str, Any]
    geometry: Dict[str, Any]


class FeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[PointFeature]
