import uuid

from trip_engine.schemas import Itinerary, ItineraryDay, StoredTrip, TripBuilderData, TripDates
from trip_engine.trip import trip_operations
from trip_engine.trip.trip_operations import (
    create_trip_record,
    delete_trip,
    generate_trip_id,
    get_trip_by_id,
    rename_trip,
    restore_trip,
    sanitize_trips,
    update_day_intros,
    update_trip_itinerary,
)

STAMP = "2026-01-20T00:00:00+00:00"


def _build_itinerary() -> Itinerary:
    return Itinerary(days=[ItineraryDay(id="day-1", date="2026-01-21")])


def _build_builder_data() -> TripBuilderData:
    return TripBuilderData(dates=TripDates(start="2026-01-21", end="2026-01-23"))


def _build_trip(trip_id: str, name: str, created_at: str = STAMP) -> StoredTrip:
    return StoredTrip(
        id=trip_id,
        name=name,
        created_at=created_at,
        updated_at=created_at,
        itinerary=_build_itinerary(),
        builder_data=_build_builder_data(),
    )


def test_generate_trip_id_is_uuid():
    assert uuid.UUID(generate_trip_id()).version == 4


def test_create_trip_record(monkeypatch):
    monkeypatch.setattr(trip_operations, "generate_trip_id", lambda: "mock-uuid-12345")
    itinerary = _build_itinerary()
    builder_data = _build_builder_data()

    trip = create_trip_record("  My Tokyo Trip  ", itinerary, builder_data)

    assert trip.id == "mock-uuid-12345"
    assert trip.name == "My Tokyo Trip"
    assert trip.itinerary is itinerary
    assert trip.builder_data is builder_data
    assert trip.created_at == trip.updated_at


def test_create_trip_record_default_name():
    assert create_trip_record("   ", _build_itinerary(), _build_builder_data()).name == "Untitled itinerary"


def test_update_trip_itinerary():
    trips = [_build_trip("trip-1", "Trip 1"), _build_trip("trip-2", "Trip 2")]
    new_itinerary = Itinerary(days=[])

    result = update_trip_itinerary(trips, "trip-1", new_itinerary)

    assert result[0].itinerary is new_itinerary
    assert result[0].updated_at != STAMP
    assert result[1] is trips[1]
    assert trips[0].itinerary is not new_itinerary


def test_update_trip_itinerary_no_ops():
    trip = _build_trip("trip-1", "Trip 1")
    assert update_trip_itinerary([trip], "missing", Itinerary()) is None
    assert update_trip_itinerary([trip], "trip-1", trip.itinerary) is None


def test_update_day_intros():
    trips = [_build_trip("trip-1", "Trip 1")]
    result = update_day_intros(trips, "trip-1", {"day-1": "Temples of the east side"})
    assert result[0].day_intros == {"day-1": "Temples of the east side"}
    assert update_day_intros(result, "trip-1", {"day-1": "Temples of the east side"}) is None
    assert update_day_intros(trips, "missing", {}) is None


def test_rename_trip():
    trips = [_build_trip("trip-1", "Old Name")]
    assert rename_trip(trips, "trip-1", " New Name ")[0].name == "New Name"
    assert rename_trip(trips, "trip-1", "   ") is None
    assert rename_trip(trips, "trip-1", "Old Name ") is None
    assert rename_trip(trips, "missing", "Other") is None


def test_delete_trip():
    trips = [_build_trip("trip-1", "Trip 1"), _build_trip("trip-2", "Trip 2")]
    result = delete_trip(trips, "trip-1")
    assert [t.id for t in result] == ["trip-2"]
    assert delete_trip(trips, "missing") is None


def test_restore_trip_sorts_by_creation():
    later = _build_trip("trip-1", "Trip 1", created_at="2026-01-22T00:00:00+00:00")
    earlier = _build_trip("trip-2", "Trip 2", created_at="2026-01-20T00:00:00+00:00")

    result = restore_trip([later], earlier)

    assert [t.id for t in result] == ["trip-2", "trip-1"]
    assert restore_trip(result, later) is None


def test_get_trip_by_id():
    trips = [_build_trip("trip-1", "Trip 1")]
    assert get_trip_by_id(trips, "trip-1") is trips[0]
    assert get_trip_by_id(trips, "missing") is None


def test_sanitize_trips_rejects_non_lists():
    for raw in (None, "string", 123, {"id": "trip-1"}):
        assert sanitize_trips(raw) == []


def test_sanitize_trips_filters_invalid_entries():
    raw = [
        None,
        {},
        {"id": ""},
        {"id": "valid", "name": ""},
        {"id": "valid", "name": "Valid", "itinerary": None},
        {"id": "valid", "name": "Valid", "itinerary": {"days": []}, "builderData": None},
        {"id": "broken", "name": "Broken", "itinerary": {"days": "nope"}, "builderData": {}},
    ]
    assert sanitize_trips(raw) == []


def test_sanitize_trips_keeps_valid_and_fills_timestamps():
    raw = [
        {
            "id": "trip-1",
            "name": "Valid Trip",
            "createdAt": "2026-01-20T00:00:00.000Z",
            "updatedAt": "2026-01-20T00:00:00.000Z",
            "itinerary": {"days": [{"id": "day-1", "activities": [{"kind": "place", "id": "a", "title": "A"}]}]},
            "builderData": {"interests": ["food"]},
        },
        {"id": "trip-2", "name": "Trip", "itinerary": {"days": []}, "builderData": {}},
    ]

    result = sanitize_trips(raw)

    assert [t.id for t in result] == ["trip-1", "trip-2"]
    assert result[0].created_at == "2026-01-20T00:00:00.000Z"
    assert result[0].itinerary.days[0].activities[0].title == "A"
    assert result[0].builder_data.interests == ["food"]
    assert result[1].created_at
    assert result[1].updated_at
