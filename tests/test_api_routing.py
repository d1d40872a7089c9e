import httpx
import pytest

from presurvey import config
from presurvey.api.routes_routing import _to_unix

DOWNING_BAKER = {
    "origin_lat": 51.5033635,
    "origin_lng": -0.1276248,
    "dest_lat": 51.523767,
    "dest_lng": -0.1585557,
}


# ---------- _to_unix ----------

def test_to_unix_variants():
    now = 1_700_000_000.9
    assert _to_unix(None, now=now) == 1_700_000_000
    assert _to_unix("", now=now) == 1_700_000_000
    assert _to_unix("1792402200000", now=now) == 1792402200
    assert _to_unix("1792402200999", now=now) == 1792402200
    assert _to_unix("2026-10-19T09:30:00Z", now=now) == 1792402200
    assert _to_unix("2026-10-19T09:30:00+01:00", now=now) == 1792398600
    assert _to_unix("next tuesday", now=now) == 1_700_000_000


@pytest.mark.parametrize("when", ["\u00b2", "\u0661\u0662\u0663", "\uff11\uff12"])
def test_to_unix_non_ascii_digits_fall_back_to_now(when):
    assert _to_unix(when, now=1_700_000_000.0) == 1_700_000_000


def test_route_non_ascii_when(client):
    params = {"origin_id": "depot_1", "dest_id": "cust_1", "when": "\u00b2"}
    resp = client.get("/api/route", params=params)
    assert resp.status_code == 200
    assert isinstance(resp.json()["departure_unix"], int)


# ---------- /api/route ----------

def test_route_missing_params(client):
    resp = client.get("/api/route")
    assert resp.status_code == 400
    assert resp.json() == {"error": "missing_params"}

    resp = client.get("/api/route", params={"origin_lat": 51.5, "origin_lng": -0.1})
    assert resp.status_code == 400
    assert resp.json() == {"error": "missing_params"}


def test_route_sandbox_by_coordinates(client):
    body = client.get("/api/route", params=DOWNING_BAKER).json()
    assert body["source"] == "sandbox"
    assert body["distance_km"] == 3.1
    # 7.49 min * jitter [0.9, 1.3)
    assert 7 <= body["eta_minutes"] <= 10
    assert body["leave_by"] == "Leave within 15 min"
    assert body["incidents"] == []
    assert body["polyline"] == {
        "type": "LineString",
        "coordinates": [[-0.1276248, 51.5033635], [-0.1585557, 51.523767]],
    }
    assert isinstance(body["departure_unix"], int)


def test_route_rejects_non_finite_coordinates(client):
    params = dict(DOWNING_BAKER, dest_lat="nan")
    resp = client.get("/api/route", params=params)
    assert resp.status_code == 400
    assert resp.json() == {"error": "invalid_params", "hint": "Coordinates must be finite numbers."}


def test_route_mock_by_ids(client):
    resp = client.get(
        "/api/route",
        params={"origin_id": "depot_1", "dest_id": "cust_1", "when": "1792402200000"},
    )
    body = resp.json()
    assert resp.status_code == 200
    assert body["source"] == "mock"
    assert body["distance_km"] == 4.6
    # 10.95 min * jitter [0.85, 1.35)
    assert 9 <= body["eta_minutes"] <= 15
    assert body["leave_by"] == "Leave now"
    assert body["polyline"]["coordinates"] == [[-0.151, 51.465], [-0.1276248, 51.5033635]]
    assert body["departure_unix"] == 1792402200


def test_route_mock_threshold_is_configurable(client, monkeypatch):
    monkeypatch.setattr(config, "LEAVE_NOW_THRESHOLD_MIN", 5)
    body = client.get("/api/route", params={"origin_id": "depot_1", "dest_id": "cust_1"}).json()
    assert body["leave_by"] == "Leave within 15 min"


def test_route_unknown_ids(client):
    resp = client.get("/api/route", params={"origin_id": "depot_9", "dest_id": "cust_1"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "unknown origin/dest"}

    # el origen debe ser un depósito, no un cliente
    resp = client.get("/api/route", params={"origin_id": "cust_2", "dest_id": "cust_1"})
    assert resp.status_code == 400


def _directions_ok(request: httpx.Request) -> httpx.Response:
    assert request.url.params["traffic_model"] == "best_guess"
    assert request.url.params["departure_time"] == "1792402200"
    return httpx.Response(200, json={
        "status": "OK",
        "routes": [{"legs": [{
            "distance": {"value": 3120},
            "duration": {"value": 600},
            "duration_in_traffic": {"value": 750},
        }]}],
    })


def test_route_live_uses_traffic_duration(client, upstream, monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_API_KEY", "g-key")
    upstream.routes["maps.googleapis.com"] = _directions_ok

    params = dict(DOWNING_BAKER, when="2026-10-19T09:30:00Z")
    body = client.get("/api/route", params=params).json()
    assert body == {
        "distance_km": 3.1,
        "eta_minutes": 13,
        "incidents": [],
        "leave_by": "Plan 10 min buffer",
        "polyline": None,
        "source": "live",
        "departure_unix": 1792402200,
    }
    assert upstream.calls[0].url.params["key"] == "g-key"


def test_route_live_directions_failed(client, upstream, monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_API_KEY", "g-key")
    upstream.routes["maps.googleapis.com"] = lambda r: httpx.Response(200, json={"status": "ZERO_RESULTS"})

    resp = client.get("/api/route", params=DOWNING_BAKER)
    assert resp.status_code == 502
    assert resp.json() == {"error": "directions_failed", "hint": "ZERO_RESULTS"}


def test_route_live_network_error(client, upstream, monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_API_KEY", "g-key")
    upstream.routes["maps.googleapis.com"] = lambda r: httpx.Response(503)

    resp = client.get("/api/route", params=DOWNING_BAKER)
    assert resp.status_code == 502
    assert resp.json()["error"] == "directions_failed"


# ---------- /api/intake ----------

def test_intake_mock_ids(client):
    body = client.post("/api/intake", json={"customer_address_id": "cust_2", "depot_id": "depot_2"}).json()
    assert body["mode"] == "mock_ids"
    assert body["origin"]["id"] == "depot_2"
    assert body["dest"]["id"] == "cust_2"
    assert body["dest"]["type_guess"] == "flat_above_shop"


def test_intake_unknown_ids(client):
    resp = client.post("/api/intake", json={"customer_address_id": "cust_9", "depot_id": "depot_1"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "unknown origin/dest"}


def test_intake_sandbox_text(client):
    payload = {
        "customer_address_text": "10 Downing Street, London SW1A 2AA",
        "depot_address_text": "10 Downing Street, London SW1A 2AA",
    }
    body = client.post("/api/intake", json=payload).json()
    assert body["mode"] == "sandbox_text"
    # mismo texto, distintos centros
    assert body["origin"]["id"] == body["dest"]["id"] == "sandbox_3958"
    assert body["origin"]["lat"] == 51.448117321238854
    assert body["origin"]["lng"] == -0.14604374375939366
    assert body["dest"]["lat"] == pytest.approx(51.515 - 0.0238826787611494)


def test_intake_sandbox_text_lone_surrogate(client):
    # "\ud800" escapado en el JSON del request, tal como lo manda un navegador
    raw = '{"customer_address_text": "\\ud800", "depot_address_text": "x"}'
    resp = client.post("/api/intake", content=raw, headers={"content-type": "application/json"})
    assert resp.status_code == 200
    assert b'"\\ud800 (sandbox match)"' in resp.content

    body = resp.json()
    assert body["mode"] == "sandbox_text"
    assert body["dest"]["id"] == "sandbox_5296"
    assert body["dest"]["label"] == "\ud800 (sandbox match)"


@pytest.mark.parametrize("payload", [{}, {"depot_id": "depot_1"}, {"customer_address_text": "x"}])
def test_intake_invalid_payload(client, payload):
    resp = client.post("/api/intake", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "invalid_payload", "hint": "Use mock IDs or free-text addresses."}


def test_intake_without_body(client):
    resp = client.post("/api/intake")
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_payload"


def _geocode_handler(statuses):
    def handler(request: httpx.Request) -> httpx.Response:
        address = request.url.params["address"]
        status = statuses.get(address, "OK")
        if status != "OK":
            return httpx.Response(200, json={"status": status, "results": []})
        return httpx.Response(200, json={
            "status": "OK",
            "results": [{
                "formatted_address": f"{address}, London, UK",
                "geometry": {"location": {"lat": 51.5 if "Depot" in address else 51.52, "lng": -0.1}},
            }],
        })
    return handler


def test_intake_live_geocodes_both_in_parallel(client, upstream, monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_API_KEY", "g-key")
    upstream.routes["maps.googleapis.com"] = _geocode_handler({})

    payload = {"customer_address_text": "221B Baker St", "depot_address_text": "Depot Battersea"}
    body = client.post("/api/intake", json=payload).json()

    assert body["mode"] == "live_text"
    assert body["origin"] == {"id": "live_origin", "label": "Depot Battersea, London, UK", "lat": 51.5, "lng": -0.1}
    assert body["dest"]["id"] == "live_dest"
    assert body["dest"]["lat"] == 51.52
    assert len(upstream.calls) == 2


def test_intake_live_geocode_failed(client, upstream, monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_API_KEY", "g-key")
    upstream.routes["maps.googleapis.com"] = _geocode_handler({"221B Baker St": "ZERO_RESULTS"})

    payload = {"customer_address_text": "221B Baker St", "depot_address_text": "Depot Battersea"}
    resp = client.post("/api/intake", json=payload)
    assert resp.status_code == 502
    assert resp.json() == {"error": "geocode_failed", "hint": "origin=OK dest=ZERO_RESULTS"}
