# presurvey/geo/sandbox.py

from presurvey.config import SANDBOX_CENTER_LAT, SANDBOX_CENTER_LNG
from presurvey.geo.int32 import imul, to_int32, to_uint32, utf16_code_units
from presurvey.models import SandboxAddress


SEED_MODULUS = 10000

# Offsets: lat en [-0.03, 0.03), lng en [-0.05, 0.05)
LAT_SPREAD, LAT_SHIFT = 0.06, 0.03
LNG_SPREAD, LNG_SHIFT = 0.10, 0.05


def hash_code(text: str) -> int:
    """
    Hash rodante de 32 bits con signo (h = h * 31 + c) sobre las unidades
    UTF-16 del texto. Es el mismo valor que String.hashCode en Java.
    """
    h = 0
    for code in utf16_code_units(text):
        h = to_int32(h * 31 + code)
    return h


def seed_for(text: str) -> int:
    return abs(hash_code(text)) % SEED_MODULUS


class Mulberry32:
    """
    Generador Mulberry32: un único estado de 32 bits sin signo.
    Cada geocodificación construye su propia instancia.
    """

    def __init__(self, seed: int):
        self.state = to_uint32(seed)

    def next(self) -> float:
        self.state = to_uint32(self.state + 0x6D2B79F5)
        t = self.state
        t = imul(t ^ (t >> 15), t | 1)
        t ^= to_uint32(t + imul(t ^ (t >> 7), t | 61))
        return to_uint32(t ^ (t >> 14)) / 4294967296


def sandbox_geocode(
    text: str,
    center_lat: float = SANDBOX_CENTER_LAT,
    center_lng: float = SANDBOX_CENTER_LNG,
) -> SandboxAddress:
    """
    Geocodificación determinista sin API key.

    El mismo texto siempre cae en el mismo punto cercano al centro dado:
      - seed = |hash_code(text)| % 10000
      - dos sorteos de Mulberry32(seed): primero lat, luego lng.
    Textos distintos pueden compartir seed (y por lo tanto id).
    """
    seed = seed_for(text)
    rng = Mulberry32(seed)

    lat_offset = (rng.next() * LAT_SPREAD) - LAT_SHIFT
    lng_offset = (rng.next() * LNG_SPREAD) - LNG_SHIFT

    return SandboxAddress(
        id=f"sandbox_{seed}",
        label=f"{text} (sandbox match)",
        lat=center_lat + lat_offset,
        lng=center_lng + lng_offset,
    )
