# presurvey/api/routes_planning.py

from typing import Optional

from fastapi import APIRouter, Body
from fastapi.responses import Response

from presurvey.models import AiRequest, CalendarRequest
from presurvey.services import assistant
from presurvey.services.calendar import build_ics, parse_start

router = APIRouter(tags=["planning"])


@router.post("/calendar")
def create_calendar_event(req: Optional[CalendarRequest] = Body(None)):
    """
    Genera un .ics descargable para agendar la mudanza.
    start_iso vacío = ahora; duración por defecto 120 min.
    """
    req = req or CalendarRequest()
    start = parse_start(req.start_iso)

    ics = build_ics(
        title=req.title,
        start=start,
        duration_minutes=req.duration_minutes,
        location=req.location,
        notes=req.notes,
    )
    return Response(
        content=ics,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="move-job.ics"'},
    )


@router.post("/ai/{name}")
async def ai_insight(name: str, req: Optional[AiRequest] = Body(None)):
    """
    Análisis operativo con IA: duration | crew | quote | risk | message | analyse.
    Sin OPENAI_API_KEY responde con datos mock.
    """
    req = req or AiRequest()
    return await assistant.generate_insight(name, req.context)
