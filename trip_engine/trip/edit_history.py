"""Per-trip undo/redo history of itinerary edits.

Each trip has a list of edits and a pointer to the last applied one; ``-1``
means nothing is applied and there is nothing to undo. Adding an edit after an
undo discards the redo branch, and only the newest
``MAX_EDIT_HISTORY_ENTRIES`` edits are kept.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from trip_engine.log import get_logger
from trip_engine.schemas import (
    EditHistoryState,
    HistoryTransition,
    Itinerary,
    ItineraryEdit,
    StoredTrip,
)

logger = get_logger(__name__)

MAX_EDIT_HISTORY_ENTRIES = 50


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_empty_history_state() -> EditHistoryState:
    return EditHistoryState()


def create_edit_history_entry(
    trip_id: str,
    day_id: str,
    edit_type: str,
    previous_itinerary: Itinerary,
    next_itinerary: Itinerary,
    metadata: Optional[Dict[str, Any]] = None,
) -> ItineraryEdit:
    return ItineraryEdit(
        id=str(uuid.uuid4()),
        trip_id=trip_id,
        day_id=day_id,
        timestamp=_now(),
        type=edit_type,
        previous_itinerary=previous_itinerary,
        next_itinerary=next_itinerary,
        metadata=metadata,
    )


def _current_index(state: EditHistoryState, trip_id: str) -> int:
    return state.current_history_index.get(trip_id, -1)


def _with_trip_history(
    state: EditHistoryState, trip_id: str, history: List[ItineraryEdit], index: int
) -> EditHistoryState:
    return state.model_copy(
        update={
            "edit_history": {**state.edit_history, trip_id: history},
            "current_history_index": {**state.current_history_index, trip_id: index},
        }
    )


def add_edit_to_history(state: EditHistoryState, trip_id: str, edit: ItineraryEdit) -> EditHistoryState:
    history = state.edit_history.get(trip_id, [])
    kept = history[: _current_index(state, trip_id) + 1]
    kept.append(edit)
    trimmed = kept[-MAX_EDIT_HISTORY_ENTRIES:]
    return _with_trip_history(state, trip_id, trimmed, len(trimmed) - 1)


def _restore(trips: List[StoredTrip], trip_id: str, itinerary: Itinerary) -> List[StoredTrip]:
    timestamp = _now()
    return [
        trip.model_copy(update={"itinerary": itinerary, "updated_at": timestamp}) if trip.id == trip_id else trip
        for trip in trips
    ]


def perform_undo(
    trips: List[StoredTrip], state: EditHistoryState, trip_id: str
) -> Optional[HistoryTransition]:
    history = state.edit_history.get(trip_id, [])
    index = _current_index(state, trip_id)
    if index < 0 or index >= len(history):
        return None
    edit = history[index]
    return HistoryTransition(
        trips=_restore(trips, trip_id, edit.previous_itinerary),
        history_state=_with_trip_history(state, trip_id, history, index - 1),
    )


def perform_redo(
    trips: List[StoredTrip], state: EditHistoryState, trip_id: str
) -> Optional[HistoryTransition]:
    history = state.edit_history.get(trip_id, [])
    index = _current_index(state, trip_id)
    if index >= len(history) - 1:
        return None
    edit = history[index + 1]
    return HistoryTransition(
        trips=_restore(trips, trip_id, edit.next_itinerary),
        history_state=_with_trip_history(state, trip_id, history, index + 1),
    )


def can_undo(state: EditHistoryState, trip_id: str) -> bool:
    return _current_index(state, trip_id) >= 0 and bool(state.edit_history.get(trip_id))


def can_redo(state: EditHistoryState, trip_id: str) -> bool:
    history = state.edit_history.get(trip_id, [])
    return _current_index(state, trip_id) < len(history) - 1


def clear_history(state: EditHistoryState, trip_id: str) -> EditHistoryState:
    """Forget a trip's history, e.g. after the trip is deleted."""
    if trip_id not in state.edit_history and trip_id not in state.current_history_index:
        return state
    edit_history = {key: value for key, value in state.edit_history.items() if key != trip_id}
    indexes = {key: value for key, value in state.current_history_index.items() if key != trip_id}
    return state.model_copy(update={"edit_history": edit_history, "current_history_index": indexes})


def apply_itinerary_edit(
    trips: List[StoredTrip],
    state: EditHistoryState,
    trip_id: str,
    day_id: str,
    edit_type: str,
    updater: Callable[[Itinerary], Itinerary],
    metadata: Optional[Dict[str, Any]] = None,
) -> Optional[HistoryTransition]:
    """Apply ``updater`` to a trip's itinerary and record the edit in one step."""
    trip = next((t for t in trips if t.id == trip_id), None)
    if trip is None:
        return None

    previous = trip.itinerary
    updated = updater(previous)
    edit = create_edit_history_entry(trip_id, day_id, edit_type, previous, updated, metadata)
    logger.debug("Recorded %s edit on trip %s day %s", edit_type, trip_id, day_id)
    return HistoryTransition(
        trips=_restore(trips, trip_id, updated),
        history_state=add_edit_to_history(state, trip_id, edit),
    )
