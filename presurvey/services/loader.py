# presurvey/services/loader.py

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from presurvey.models import Address, Area, Depot

BASE_DIR = Path(__file__).resolve().parent.parent
SAMPLE_PATH = BASE_DIR / "data" / "sample.json"
POSTCODES_PATH = BASE_DIR / "data" / "postcodes.geo.json"


class SampleData(BaseModel):
    """
    Directorio estático de la demo: clientes, depósitos, zonas y la metadata
    por dirección (parking / edificio / seguridad).
    """
    model_config = ConfigDict(frozen=True)

    addresses: Tuple[Address, ...]
    depots: Tuple[Depot, ...]
    areas: Tuple[Area, ...]
    parking: Dict[str, Dict[str, Any]]
    building: Dict[str, Dict[str, Any]]
    safety: Dict[str, Dict[str, Any]]


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


@lru_cache(maxsize=1)
def load_sample() -> SampleData:
    """
    Carga data/sample.json una sola vez por proceso.
    Se cachea en memoria para no leerlo en cada request.
    """
    data = _read_json(SAMPLE_PATH)

    if not isinstance(data, dict):
        raise ValueError("sample.json must contain a JSON object")

    return SampleData(**data)


@lru_cache(maxsize=1)
def load_postcodes_raw() -> str:
    """GeoJSON de códigos postales tal cual está en disco."""
    if not POSTCODES_PATH.exists():
        raise FileNotFoundError(f"Postcodes file not found: {POSTCODES_PATH}")
    return POSTCODES_PATH.read_text(encoding="utf-8")


@lru_cache(maxsize=1)
def _addresses_by_id() -> Dict[str, Address]:
    return {a.id: a for a in load_sample().addresses}


@lru_cache(maxsize=1)
def _depots_by_id() -> Dict[str, Depot]:
    return {d.id: d for d in load_sample().depots}


def resolve_address(address_id: str) -> Optional[Address]:
    return _addresses_by_id().get(address_id)


def resolve_depot(depot_id: str) -> Optional[Depot]:
    return _depots_by_id().get(depot_id)


def find_area(code: str) -> Optional[Area]:
    """Busca una zona por código (sin distinguir mayúsculas)."""
    code = (code or "").upper()
    for area in load_sample().areas:
        if area.code == code:
            return area
    return None


def address_metadata(kind: str, address_id: str) -> Dict[str, Any]:
    """
    Metadata estática por dirección: kind = parking | building | safety.
    Regresa {} si la dirección no tiene datos.
    """
    table: Dict[str, Dict[str, Any]] = getattr(load_sample(), kind)
    return dict(table.get(address_id, {}))
