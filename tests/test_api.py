"""
HTTP-level tests: a session driven end to end through the FastAPI app with
the model replaced by a fake generator.
"""

import json

import pytest
from fastapi.testclient import TestClient

from conftest import FakeGenerator
from main import api, app

AIRPORTS = json.dumps([
    {"name": "Charles de Gaulle Airport", "iata": "CDG", "location": "Paris, France"},
    {"name": "Orly Airport", "iata": "ORY", "location": "Paris, France"},
])
FLIGHTS = json.dumps({
    "departureFlights": [{"day": "Wednesday", "date": "2024-12-25", "airline": "Delta", "price": 640}] * 7,
    "returnFlights": [],
    "summary": ["A cheaper fare exists on 2024-12-18 for $520."],
})


@pytest.fixture
def client():
    with TestClient(app) as c:
        api.state.sessions.quiet_period = 0.01
        yield c


def use_generator(*responses) -> FakeGenerator:
    gen = FakeGenerator(*responses)
    api.state.sessions.generator = gen
    return gen


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_unknown_session_is_404(client):
    assert client.get("/sessions/nope").status_code == 404
    assert client.delete("/sessions/nope").status_code == 404


def test_unknown_field_is_422(client):
    use_generator(AIRPORTS)
    sid = client.post("/sessions").json()["id"]
    r = client.post(f"/sessions/{sid}/fields/layover", json={"text": "abc"})
    assert r.status_code == 422


def test_autocomplete_flow(client):
    use_generator(AIRPORTS)
    sid = client.post("/sessions").json()["id"]

    snap = client.post(f"/sessions/{sid}/fields/arrival", json={"text": "Pa"}).json()
    assert snap["form"]["arrival"] == "Pa"
    assert snap["suggestions"]["arrival"] == []

    client.post(f"/sessions/{sid}/fields/arrival", json={"text": "Paris"})
    body = client.get(f"/sessions/{sid}/suggestions/arrival", params={"wait": True}).json()
    assert body["active"] is True
    assert [s["iata"] for s in body["suggestions"]] == ["CDG", "ORY"]

    snap = client.post(f"/sessions/{sid}/fields/arrival/select", json={"index": 0}).json()
    assert snap["form"]["arrival"] == "Charles de Gaulle Airport (CDG)"
    assert snap["active_suggestion_box"] is None

    r = client.post(f"/sessions/{sid}/fields/arrival/select", json={"index": 5})
    assert r.status_code == 422


def test_pointer_down_closes_box(client):
    use_generator(AIRPORTS)
    sid = client.post("/sessions").json()["id"]
    client.post(f"/sessions/{sid}/fields/departure", json={"text": "Paris"})
    client.get(f"/sessions/{sid}/suggestions/departure", params={"wait": True})

    snap = client.post(f"/sessions/{sid}/pointer", json={"target": None}).json()
    assert snap["active_suggestion_box"] is None


def test_search_validation_then_success(client):
    gen = use_generator(FLIGHTS)
    sid = client.post("/sessions").json()["id"]

    snap = client.post(f"/sessions/{sid}/search").json()
    assert snap["error"] == "Please fill in all required fields."
    assert snap["status"] == "idle"
    assert gen.calls == []

    client.post(f"/sessions/{sid}/fields/departure", json={"text": "New York, USA"})
    client.post(f"/sessions/{sid}/fields/arrival", json={"text": "Paris, France"})
    snap = client.patch(
        f"/sessions/{sid}/form",
        json={"departure_date": "2024-12-25", "is_round_trip": False},
    ).json()
    assert snap["can_submit"] is True

    snap = client.post(f"/sessions/{sid}/search", json={"trigger": "enter"}).json()
    assert snap["status"] == "success"
    assert snap["error"] == ""
    assert len(snap["result"]["departure_quotes"]) == 7
    assert snap["result"]["return_quotes"] == []
    assert "Smart Savings Tip" in snap["rendered"]

    search_calls = [c for c in gen.calls if c["name"] == "flight_search"]
    assert len(search_calls) == 1


def test_mode_switch_clears_results(client):
    use_generator(FLIGHTS)
    sid = client.post("/sessions").json()["id"]
    client.post(f"/sessions/{sid}/fields/departure", json={"text": "NYC"})
    client.post(f"/sessions/{sid}/fields/arrival", json={"text": "CDG"})
    client.patch(f"/sessions/{sid}/form", json={"departure_date": "2024-12-25", "is_round_trip": False})
    client.post(f"/sessions/{sid}/search")

    snap = client.post(f"/sessions/{sid}/mode", json={"mode": "explore"}).json()
    assert snap["mode"] == "explore"
    assert snap["result"] == {"kind": "empty"}
    assert snap["error"] == ""


def test_transport_error_message(client):
    use_generator(ConnectionError("network down"))
    sid = client.post("/sessions").json()["id"]
    client.post(f"/sessions/{sid}/mode", json={"mode": "explore"})
    client.post(f"/sessions/{sid}/fields/departure", json={"text": "Denver"})
    client.patch(f"/sessions/{sid}/form", json={"travel_period": "June", "interests": "hiking"})

    snap = client.post(f"/sessions/{sid}/search").json()
    assert snap["status"] == "failed"
    assert "check your connection or API key" in snap["error"]
    assert snap["result"]["kind"] == "error"


def test_delete_session(client):
    use_generator()
    sid = client.post("/sessions").json()["id"]
    assert client.delete(f"/sessions/{sid}").json() == {"status": "closed", "id": sid}
    assert client.get(f"/sessions/{sid}").status_code == 404


def test_metrics_capture_requests(client):
    client.get("/health")
    data = client.get("/metrics").json()

    assert any(
        c["name"] == "requests_total" and c["labels"].get("route") == "/health" and c["labels"].get("status") == "200"
        for c in data["counters"]
    )
    assert any(h["name"] == "request_latency_ms" for h in data["histograms"])
