"""Immutable edits to the activities of one itinerary day.

Every function returns a new ``Itinerary``; days other than the edited one are
carried over as the same objects.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from trip_engine.schemas import Activity, Itinerary, ItineraryDay


def _update_day(
    itinerary: Itinerary,
    day_id: str,
    update: Callable[[List[Activity]], List[Activity]],
) -> Itinerary:
    days: List[ItineraryDay] = []
    for day in itinerary.days:
        if day.id == day_id:
            day = day.model_copy(update={"activities": update(list(day.activities))})
        days.append(day)
    return itinerary.model_copy(update={"days": days})


def replace_activity(itinerary: Itinerary, day_id: str, activity_id: str, new_activity: Activity) -> Itinerary:
    def update(activities: List[Activity]) -> List[Activity]:
        return [new_activity if activity.id == activity_id else activity for activity in activities]

    return _update_day(itinerary, day_id, update)


def delete_activity(itinerary: Itinerary, day_id: str, activity_id: str) -> Itinerary:
    def update(activities: List[Activity]) -> List[Activity]:
        return [activity for activity in activities if activity.id != activity_id]

    return _update_day(itinerary, day_id, update)


def add_activity(
    itinerary: Itinerary,
    day_id: str,
    activity: Activity,
    position: Optional[int] = None,
) -> Itinerary:
    """Insert ``activity`` at ``position`` (clamped), or append when omitted."""

    def update(activities: List[Activity]) -> List[Activity]:
        index = len(activities) if position is None else max(0, min(position, len(activities)))
        activities.insert(index, activity)
        return activities

    return _update_day(itinerary, day_id, update)


def reorder_activities(itinerary: Itinerary, day_id: str, activity_ids: Sequence[str]) -> Itinerary:
    """Order the day by ``activity_ids``.

    Unknown ids are ignored. Activities the ordering leaves out are appended
    in their current order so nothing is lost.
    """

    def update(activities: List[Activity]) -> List[Activity]:
        by_id: Dict[str, Activity] = {activity.id: activity for activity in activities}
        ordered: List[Activity] = []
        placed = set()
        for activity_id in activity_ids:
            activity = by_id.get(activity_id)
            if activity is None or activity_id in placed:
                continue
            ordered.append(activity)
            placed.add(activity_id)
        ordered.extend(activity for activity in activities if activity.id not in placed)
        return ordered

    return _update_day(itinerary, day_id, update)
