# presurvey/services/http.py

import logging
from typing import Any, Dict, Optional

import httpx

from presurvey import config
from presurvey.errors import UpstreamError

logger = logging.getLogger(__name__)


def get_client() -> httpx.AsyncClient:
    """
    Único punto donde se construye el cliente HTTP hacia APIs externas.
    Los tests lo reemplazan por uno con httpx.MockTransport.
    """
    return httpx.AsyncClient(timeout=config.HTTP_TIMEOUT_S)


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[Dict[str, Any]] = None,
) -> Any:
    """GET + raise_for_status + .json(), con errores traducidos a UpstreamError."""
    try:
        resp = await client.get(url, params=params)
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPError as exc:
        logger.warning("GET %s failed: %s", url, exc)
        raise UpstreamError(str(exc)) from exc
    except ValueError as exc:
        logger.warning("GET %s returned invalid JSON", url)
        raise UpstreamError("invalid JSON") from exc


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    body: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    try:
        resp = await client.post(url, json=body, headers=headers)
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPError as exc:
        logger.warning("POST %s failed: %s", url, exc)
        raise UpstreamError(str(exc)) from exc
    except ValueError as exc:
        logger.warning("POST %s returned invalid JSON", url)
        raise UpstreamError("invalid JSON") from exc
