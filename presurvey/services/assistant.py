# presurvey/services/assistant.py

import copy
import json
import logging
from typing import Any, Dict, Optional

from presurvey import config
from presurvey.errors import ApiError, UpstreamError
from presurvey.services.http import get_client, post_json

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert access & operations assistant for a moving company in London.\n"
    "Given JSON context (origin, destination, route, incidents, parking, building, safety, "
    "weather, datetime),\n"
    "return STRICT JSON with actionable insights and clear recommendations."
)

# Respuestas fijas cuando no hay OPENAI_API_KEY
MOCK_RESPONSES: Dict[str, Dict[str, Any]] = {
    "duration": {
        "estimated_minutes": 180,
        "confidence_pct": 78,
        "breakdown": {"loading": 70, "drive": 40, "unloading": 60, "buffer": 10},
    },
    "crew": {
        "crew_size": 3,
        "vehicle": "Luton van",
        "equipment": ["dollies", "blankets", "straps"],
    },
    "quote": {
        "price_gbp": 420,
        "line_items": [
            {"label": "Base move", "amount": 330},
            {"label": "Fuel", "amount": 40},
            {"label": "Materials", "amount": 50},
        ],
        "terms": ["50% deposit", "48h reschedule"],
    },
    "risk": {
        "risk_level": "medium",
        "flags": ["Stairs", "One-way", "Bus lane"],
        "checklist": [{"item": "Waiver", "status": "pending"}],
    },
    "message": {
        "channels": ["Email", "SMS"],
        "sms_eta": "Hi, your movers are on the way.",
    },
    "analyse": {
        "pricing": {
            "current_rate": 95,
            "competitor_avg_rate": 88.5,
            "recommended_rate": 89.6,
            "change_pct": -5.7,
            "rationale": "High demand premium",
        },
        "lead_score": {"score": 78, "tier": "A-"},
        "marketing": {"channels": ["LSAs", "Meta", "GMB posts"], "budget_hint_gbp": 350},
        "competitor_watch": [
            {"name": "Speedy Move", "strength": "price", "risk": "medium"},
            {"name": "Canary Movers", "strength": "brand", "risk": "low"},
        ],
        "access_summary": (
            "Narrow terraced street, morning loading restrictions, "
            "consider smaller vehicle or waiver."
        ),
    },
}


def mock_insight(name: str) -> Dict[str, Any]:
    if name not in MOCK_RESPONSES:
        raise ApiError(404, "unknown_ai_endpoint")
    return copy.deepcopy(MOCK_RESPONSES[name])


def _extract_content(payload: Dict[str, Any]) -> Optional[str]:
    try:
        return payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None


async def generate_insight(name: str, context: Dict[str, Any]) -> Dict[str, Any]:
    """
    Pide a OpenAI (modo JSON) el análisis `name` para el contexto dado.
    Sin key regresa el mock correspondiente.
    """
    if not config.OPENAI_API_KEY:
        return mock_insight(name)

    body = {
        "model": config.OPENAI_MODEL,
        "temperature": 0.2,
        "response_format": {"type": "json_object"},
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": json.dumps(context)},
        ],
    }
    headers = {"Authorization": f"Bearer {config.OPENAI_API_KEY}"}

    async with get_client() as client:
        try:
            raw = await post_json(client, config.OPENAI_CHAT_URL, body, headers)
        except UpstreamError as exc:
            raise ApiError(502, "openai_failed", str(exc)) from exc

    content = _extract_content(raw)
    try:
        parsed = json.loads(content) if content is not None else None
    except ValueError:
        parsed = None

    if not isinstance(parsed, dict):
        logger.warning("OpenAI returned non-JSON content for %s", name)
        raise ApiError(502, "openai_bad_json")

    return parsed
