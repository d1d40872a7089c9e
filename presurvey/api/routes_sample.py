# presurvey/api/routes_sample.py

from fastapi import APIRouter, Query
from fastapi.responses import Response

from presurvey.errors import ApiError
from presurvey.models import (
    AreaMetricsResponse,
    AreasResponse,
    FeatureCollection,
    PointFeature,
    SampleAddressesResponse,
)
from presurvey.services.loader import (
    address_metadata,
    find_area,
    load_postcodes_raw,
    load_sample,
)
from presurvey.services.pricing import area_metrics

router = APIRouter(tags=["sample"])


@router.get("/sample_addresses", response_model=SampleAddressesResponse)
def get_sample_addresses():
    """Depósitos y clientes de la demo (los ids que acepta /route e /intake)."""
    sample = load_sample()
    return SampleAddressesResponse(depots=list(sample.depots), customers=list(sample.addresses))


@router.get("/areas", response_model=AreasResponse)
def get_areas():
    return AreasResponse(areas=list(load_sample().areas))


@router.get("/metrics", response_model=AreaMetricsResponse)
def get_area_metrics(area_code: str = Query("")):
    area = find_area(area_code)
    if area is None:
        raise ApiError(404, "unknown_area")
    return area_metrics(area)


@router.get("/heatmap", response_model=FeatureCollection)
def get_heatmap():
    """
    Índice de demanda por zona como GeoJSON de puntos.
    Los centroides se guardan [lat, lng]; GeoJSON pide [lng, lat].
    """
    features = [
        PointFeature(
            properties={"code": a.code, "name": a.name, "demand_index": a.demand_index},
            geometry={"type": "Point", "coordinates": [a.centroid[1], a.centroid[0]]},
        )
        for a in load_sample().areas
    ]
    return FeatureCollection(features=features)


@router.get("/geo/postcodes")
def get_postcodes():
    # Se sirve el archivo tal cual, sin re-serializar
    return Response(content=load_postcodes_raw(), media_type="application/json")


@router.get("/parking")
def get_parking(address_id: str = Query(""), when: str | None = Query(None)):
    # `when` se acepta para planeación futura; las reglas mock no dependen de la fecha
    return address_metadata("parking", address_id)


@router.get("/building")
def get_building(address_id: str = Query("")):
    return address_metadata("building", address_id)


@router.get("/safety")
def get_safety(address_id: str = Query("")):
    return address_metadata("safety", address_id)
