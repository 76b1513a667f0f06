from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from trip_engine.main import app
from trip_engine.schemas import PlaceActivity, ReplacementOptions
from trip_engine.stores.locations import LocationStoreConfigError
from trip_engine.stores.weather import OpenWeatherClient


def _sample_activity() -> dict:
    return {
        "kind": "place",
        "id": "act-1",
        "title": "Kinkaku-ji",
        "timeOfDay": "morning",
        "durationMin": 60,
        "locationId": "kinkaku",
    }


def _sample_payload() -> dict:
    return {
        "activity": _sample_activity(),
        "tripData": {"interests": ["culture"], "style": "relaxed", "budget": {"level": "moderate"}},
        "allActivities": [_sample_activity(), {"kind": "note", "id": "note-1", "title": "Lunch"}],
        "dayActivities": [_sample_activity()],
        "dayIndex": 2,
        "maxCandidates": 5,
        "date": "2026-04-06",
    }


def test_health():
    client = TestClient(app)
    assert client.get("/health").json() == {"status": "ok"}


def test_replacements_endpoint(monkeypatch):
    client = TestClient(app)
    finder = AsyncMock(
        return_value=ReplacementOptions(candidates=[], original_activity=PlaceActivity.model_validate(_sample_activity()))
    )
    monkeypatch.setattr("trip_engine.main.find_replacement_candidates", finder)

    response = client.post("/api/replacements", json=_sample_payload())

    assert response.status_code == 200
    finder.assert_awaited_once()
    args = finder.await_args.args
    assert args[0].location_id == "kinkaku"
    assert args[1].style == "relaxed"
    assert len(args[2]) == 2
    assert args[4] == 2
    assert args[5] == 5
    assert finder.await_args.kwargs["date"] == "2026-04-06"
    body = response.json()
    assert body["candidates"] == []
    assert body["originalActivity"]["locationId"] == "kinkaku"


def test_replacements_rejects_invalid_payload(monkeypatch):
    client = TestClient(app)
    finder = AsyncMock()
    monkeypatch.setattr("trip_engine.main.find_replacement_candidates", finder)

    payload = _sample_payload()
    payload["activity"] = {"kind": "place", "title": "No id"}
    response = client.post("/api/replacements", json=payload)

    assert response.status_code == 422
    finder.assert_not_awaited()


def test_replacements_without_store_configuration(monkeypatch):
    client = TestClient(app)
    finder = AsyncMock(side_effect=LocationStoreConfigError("SUPABASE_URL and SUPABASE_ANON_KEY must be configured"))
    monkeypatch.setattr("trip_engine.main.find_replacement_candidates", finder)

    response = client.post("/api/replacements", json=_sample_payload())

    assert response.status_code == 503


def test_score_location_endpoint():
    client = TestClient(app)
    payload = {
        "location": {"id": "kinkaku", "name": "Kinkaku-ji", "city": "Kyoto", "category": "temple", "rating": 4.6},
        "criteria": {"interests": ["culture", "history"], "timeSlot": "morning"},
    }

    response = client.post("/api/locations/score", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["breakdown"]["interestMatch"] == 30
    assert body["score"] == sum(body["breakdown"].values())
    assert body["recommendation"]["primaryReason"].startswith("temple matches your interests well")


def test_weather_endpoint_uses_client(monkeypatch):
    monkeypatch.setattr(OpenWeatherClient, "from_settings", classmethod(lambda cls, settings=None: cls(None)))
    client = TestClient(app)

    response = client.get("/api/weather/kyoto", params={"start": "2026-01-04", "end": "2026-01-05"})

    assert response.status_code == 200
    body = response.json()
    assert body["2026-01-05"]["condition"] == "rain"
    assert body["2026-01-04"]["temperature"] == {"min": 15, "max": 25}


def test_weather_endpoint_rejects_reversed_range():
    client = TestClient(app)
    response = client.get("/api/weather/kyoto", params={"start": "2026-01-05", "end": "2026-01-04"})
    assert response.status_code == 422
