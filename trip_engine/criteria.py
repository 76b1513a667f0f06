"""Derive scoring criteria from the trip builder answers and the activity in hand."""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from trip_engine.schemas import (
    AccessibilityRequirements,
    Coordinates,
    LocationScoringCriteria,
    PlaceActivity,
    TripBuilderData,
    WeatherForecast,
)

DEFAULT_AVAILABLE_MINUTES = 90
RECENT_ACTIVITY_WINDOW = 5


def build_scoring_criteria(
    trip_data: TripBuilderData,
    activity: PlaceActivity,
    *,
    current_location: Optional[Coordinates] = None,
    recent_categories: Optional[Sequence[str]] = None,
    weather_forecast: Optional[WeatherForecast] = None,
    date: Optional[str] = None,
) -> LocationScoringCriteria:
    """Return the criteria used to score candidates for ``activity``.

    The slot length is the activity's own duration, so a replacement is judged
    on how well it fills the gap the original left. Mobility needs translate to
    a wheelchair requirement only; the builder does not ask about elevators.
    """
    budget = trip_data.budget
    accessibility: Optional[AccessibilityRequirements] = None
    if trip_data.accessibility is not None and trip_data.accessibility.mobility:
        accessibility = AccessibilityRequirements(wheelchair_accessible=True, elevator_required=False)

    return LocationScoringCriteria(
        interests=list(trip_data.interests),
        travel_style=trip_data.style or "balanced",
        budget_level=budget.level if budget else None,
        budget_total=budget.total if budget else None,
        budget_per_day=budget.per_day if budget else None,
        accessibility=accessibility,
        current_location=current_location or activity.coordinates,
        available_minutes=DEFAULT_AVAILABLE_MINUTES if activity.duration_min is None else activity.duration_min,
        recent_categories=[c for c in (recent_categories or []) if c][-RECENT_ACTIVITY_WINDOW:],
        weather_forecast=weather_forecast,
        weather_preferences=trip_data.weather_preferences,
        time_slot=activity.time_of_day,
        date=date,
        group=trip_data.group,
    )


def place_activities(activities: Iterable[object]) -> List[PlaceActivity]:
    return [activity for activity in activities if isinstance(activity, PlaceActivity)]


def recent_place_activities(
    day_activities: Iterable[object],
    exclude_id: str,
    window: int = RECENT_ACTIVITY_WINDOW,
) -> List[PlaceActivity]:
    """Last ``window`` place activities of the day, skipping the one being replaced."""
    others = [activity for activity in place_activities(day_activities) if activity.id != exclude_id]
    return others[-window:] if window > 0 else []


def used_location_ids(activities: Iterable[object]) -> List[str]:
    seen: List[str] = []
    for activity in place_activities(activities):
        if activity.location_id and activity.location_id not in seen:
            seen.append(activity.location_id)
    return seen
