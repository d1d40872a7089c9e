# presurvey/services/calendar.py

import time
from datetime import datetime, timedelta, timezone
from typing import Optional

from presurvey.errors import ApiError

PRODID = "-//Moving Pre-Survey//EN"
UID_DOMAIN = "moving-pre-survey"


def format_ics_utc(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def parse_start(start_iso: Optional[str], now: Optional[datetime] = None) -> datetime:
    """Inicio del evento; vacío = ahora. Fechas sin zona se toman como UTC."""
    now = now or datetime.now(timezone.utc)
    if not start_iso:
        return now
    try:
        dt = datetime.fromisoformat(start_iso.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ApiError(400, "invalid_start") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _one_line(value: str) -> str:
    return (value or "").replace("\n", " ")


def build_ics(
    title: str,
    start: datetime,
    duration_minutes: float,
    location: str = "",
    notes: str = "",
    now: Optional[datetime] = None,
) -> str:
    """VCALENDAR con un único VEVENT para agendar la mudanza."""
    now = now or datetime.now(timezone.utc)
    # fin (o inicio en UTC) fuera del rango de datetime: años 1..9999
    try:
        dtstart = format_ics_utc(start)
        dtend = format_ics_utc(start + timedelta(minutes=duration_minutes))
    except (OverflowError, ValueError) as exc:
        raise ApiError(400, "invalid_start") from exc

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "BEGIN:VEVENT",
        f"UID:{int(time.time() * 1000)}@{UID_DOMAIN}",
        f"DTSTAMP:{format_ics_utc(now)}",
        f"DTSTART:{dtstart}",
        f"DTEND:{dtend}",
        f"SUMMARY:{_one_line(title)}",
        f"LOCATION:{_one_line(location)}",
        f"DESCRIPTION:{_one_line(notes)}",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\n".join(lines)
