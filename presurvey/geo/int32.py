# presurvey/geo/int32.py

"""
Aritmética entera de 32 bits con desbordamiento explícito.

Python tiene enteros de precisión arbitraria, así que el hash y el PRNG del
geocoder sandbox necesitan enmascarar a 32 bits en cada paso para reproducir
exactamente los valores que produce un runtime con enteros de 32 bits.
"""

MASK32 = 0xFFFFFFFF
_SIGN_BIT = 0x80000000


def to_uint32(value: int) -> int:
    """Reduce `value` módulo 2^32 (rango [0, 2^32))."""
    return value & MASK32


def to_int32(value: int) -> int:
    """Reinterpreta los 32 bits bajos de `value` como entero con signo."""
    value &= MASK32
    if value & _SIGN_BIT:
        return value - (1 << 32)
    return value


def imul(a: int, b: int) -> int:
    """
    Multiplicación 32x32 que conserva solo los 32 bits bajos (sin signo).
    Equivale a Math.imul seguido de `>>> 0`.
    """
    return ((a & MASK32) * (b & MASK32)) & MASK32


def utf16_code_units(text: str):
    """
    Itera `text` como unidades de código UTF-16.
    Los caracteres fuera del BMP se emiten como par sustituto (alto, bajo).
    """
    for ch in text:
        code = ord(ch)
        if code > 0xFFFF:
            code -= 0x10000
            yield 0xD800 + (code >> 10)
            yield 0xDC00 + (code & 0x3FF)
        else:
            yield code
