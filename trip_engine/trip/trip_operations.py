"""CRUD helpers over the list of saved trips.

Mutating helpers return a new list, or ``None`` when the request would change
nothing, so callers can skip persistence and re-rendering.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from trip_engine.log import get_logger
from trip_engine.schemas import Itinerary, StoredTrip, TripBuilderData

logger = get_logger(__name__)

DEFAULT_TRIP_NAME = "Untitled itinerary"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_trip_id() -> str:
    return str(uuid.uuid4())


def create_trip_record(
    name: str,
    itinerary: Itinerary,
    builder_data: TripBuilderData,
    day_intros: Optional[Dict[str, str]] = None,
) -> StoredTrip:
    timestamp = _now()
    return StoredTrip(
        id=generate_trip_id(),
        name=(name or "").strip() or DEFAULT_TRIP_NAME,
        created_at=timestamp,
        updated_at=timestamp,
        itinerary=itinerary,
        builder_data=builder_data,
        day_intros=day_intros,
    )


def update_trip_itinerary(trips: List[StoredTrip], trip_id: str, itinerary: Itinerary) -> Optional[List[StoredTrip]]:
    trip = get_trip_by_id(trips, trip_id)
    if trip is None or trip.itinerary is itinerary:
        return None
    updated = trip.model_copy(update={"itinerary": itinerary, "updated_at": _now()})
    return [updated if t.id == trip_id else t for t in trips]


def update_day_intros(
    trips: List[StoredTrip], trip_id: str, day_intros: Dict[str, str]
) -> Optional[List[StoredTrip]]:
    trip = get_trip_by_id(trips, trip_id)
    if trip is None or trip.day_intros == day_intros:
        return None
    updated = trip.model_copy(update={"day_intros": dict(day_intros), "updated_at": _now()})
    return [updated if t.id == trip_id else t for t in trips]


def rename_trip(trips: List[StoredTrip], trip_id: str, name: str) -> Optional[List[StoredTrip]]:
    trimmed = (name or "").strip()
    if not trimmed:
        return None
    trip = get_trip_by_id(trips, trip_id)
    if trip is None or trip.name == trimmed:
        return None
    updated = trip.model_copy(update={"name": trimmed, "updated_at": _now()})
    return [updated if t.id == trip_id else t for t in trips]


def delete_trip(trips: List[StoredTrip], trip_id: str) -> Optional[List[StoredTrip]]:
    remaining = [t for t in trips if t.id != trip_id]
    if len(remaining) == len(trips):
        return None
    return remaining


def restore_trip(trips: List[StoredTrip], trip: StoredTrip) -> Optional[List[StoredTrip]]:
    """Put a deleted trip back, keeping the list ordered by creation time."""
    if get_trip_by_id(trips, trip.id) is not None:
        return None
    return sorted([*trips, trip], key=lambda t: t.created_at)


def get_trip_by_id(trips: List[StoredTrip], trip_id: str) -> Optional[StoredTrip]:
    for trip in trips:
        if trip.id == trip_id:
            return trip
    return None


def _field(entry: Dict[str, Any], camel: str, snake: str) -> Any:
    return entry[camel] if camel in entry else entry.get(snake)


def sanitize_trips(raw: Any) -> List[StoredTrip]:
    """Rebuild trips from persisted JSON, dropping entries that can't be used."""
    if not isinstance(raw, list):
        return []

    trips: List[StoredTrip] = []
    for entry in raw:
        if isinstance(entry, StoredTrip):
            trips.append(entry)
            continue
        if not isinstance(entry, dict):
            continue
        trip_id = entry.get("id")
        name = entry.get("name")
        itinerary = entry.get("itinerary")
        builder_data = _field(entry, "builderData", "builder_data")
        if not isinstance(trip_id, str) or not trip_id:
            continue
        if not isinstance(name, str) or not name:
            continue
        if itinerary is None or builder_data is None:
            continue

        fallback = _now()
        try:
            trip = StoredTrip.model_validate(
                {
                    "id": trip_id,
                    "name": name,
                    "created_at": _field(entry, "createdAt", "created_at") or fallback,
                    "updated_at": _field(entry, "updatedAt", "updated_at") or fallback,
                    "itinerary": itinerary,
                    "builder_data": builder_data,
                    "day_intros": _field(entry, "dayIntros", "day_intros"),
                }
            )
        except ValidationError:
            logger.warning("Dropping malformed stored trip %s", trip_id, exc_info=True)
            continue
        trips.append(trip)
    return trips
