from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

from presurvey import config
from presurvey.main import app

SERVICE_MODULES = ("google", "traffic", "weather", "assistant")


@pytest.fixture(autouse=True)
def no_credentials(monkeypatch):
    """Cada test arranca en modo sandbox, sin importar el .env local."""
    for name in (
        "GOOGLE_API_KEY",
        "TOMTOM_API_KEY",
        "TFL_APP_ID",
        "TFL_APP_KEY",
        "OPENAI_API_KEY",
    ):
        monkeypatch.setattr(config, name, None)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def upstream(monkeypatch):
    """
    Reemplaza el cliente HTTP de los servicios por uno con MockTransport.
    Los tests registran un handler por host en `upstream.routes`.
    """
    routes = {}
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        fn = routes.get(request.url.host)
        if fn is None:
            return httpx.Response(404, json={})
        return fn(request)

    def factory() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    for module in SERVICE_MODULES:
        monkeypatch.setattr(f"presurvey.services.{module}.get_client", factory)

    return SimpleNamespace(routes=routes, calls=calls)
