"""Find and rank alternatives for a place activity in an itinerary."""
from __future__ import annotations

import random
import string
import time
from typing import Dict, List, Optional, Sequence

from trip_engine.criteria import build_scoring_criteria, recent_place_activities, used_location_ids
from trip_engine.durations import category_default_duration
from trip_engine.log import get_logger
from trip_engine.schemas import (
    Activity,
    Location,
    PlaceActivity,
    ReplacementCandidate,
    ReplacementOptions,
    TripBuilderData,
    WeatherForecast,
)
from trip_engine.scoring.location import score_location
from trip_engine.stores.locations import DEFAULT_CANDIDATE_LIMIT, LocationStore, get_default_store

logger = get_logger(__name__)

FALLBACK_CATEGORY = "landmark"
_ID_ALPHABET = string.ascii_lowercase + string.digits


def _recent_categories(recent: Sequence[PlaceActivity], resolved: Dict[str, Location]) -> List[str]:
    categories: List[str] = []
    for activity in recent:
        location = resolved.get(activity.location_id or "")
        if location is not None and location.category:
            categories.append(location.category)
    return categories


async def find_replacement_candidates(
    activity: PlaceActivity,
    trip_data: TripBuilderData,
    all_activities: Sequence[Activity],
    day_activities: Sequence[Activity],
    day_index: int,
    max_candidates: int = 10,
    *,
    weather_forecast: Optional[WeatherForecast] = None,
    date: Optional[str] = None,
    store: Optional[LocationStore] = None,
) -> ReplacementOptions:
    """Score same-city locations as swaps for ``activity``, best first.

    Locations already used anywhere in the trip are excluded, as is the
    original. An unresolvable original or an empty city yields no candidates;
    store failures propagate to the caller.
    """
    store = store or get_default_store()

    recent = recent_place_activities(day_activities, activity.id)
    lookup_ids = [a.location_id for a in [activity, *recent] if a.location_id]
    resolved = await store.get_locations(lookup_ids) if lookup_ids else {}
    original: Optional[Location] = resolved.get(activity.location_id) if activity.location_id else None

    exclude = used_location_ids(all_activities)
    if original is not None and original.id not in exclude:
        exclude.append(original.id)

    recent_categories = _recent_categories(recent, resolved)
    current_location = activity.coordinates or (original.coordinates if original is not None else None)
    criteria = build_scoring_criteria(
        trip_data,
        activity,
        current_location=current_location,
        recent_categories=recent_categories,
        weather_forecast=weather_forecast,
        date=date,
    )

    city = (original.city if original is not None and original.city else activity.neighborhood) or ""
    city = city.strip()
    if not city:
        logger.info("No city for activity %s on day %d, skipping candidate lookup", activity.id, day_index)
        return ReplacementOptions(candidates=[], original_activity=activity)

    try:
        locations = await store.fetch_locations_by_city(
            city,
            limit=DEFAULT_CANDIDATE_LIMIT,
            exclude_ids=exclude,
            require_place_id=True,
        )
    except Exception:
        logger.warning("Candidate lookup failed for activity %s in %s", activity.id, city, exc_info=True)
        raise

    excluded = set(exclude)
    scored: List[ReplacementCandidate] = []
    for location in locations:
        if location.id in excluded:
            continue
        result = score_location(location, criteria)
        scored.append(
            ReplacementCandidate(
                location=result.location,
                score=result.score,
                breakdown=result.breakdown,
                reasoning=result.reasoning,
            )
        )
    scored.sort(key=lambda candidate: candidate.score, reverse=True)
    candidates = scored[:max_candidates]

    logger.info(
        "Found %d candidates for %s in %s (scored %d, day %d)",
        len(candidates),
        activity.id,
        city,
        len(scored),
        day_index,
    )
    return ReplacementOptions(candidates=candidates, original_activity=activity)


def _activity_id(location_id: str) -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=7))
    return f"{location_id}-{int(time.time() * 1000)}-{suffix}"


def location_to_activity(location: Location, original_activity: PlaceActivity) -> PlaceActivity:
    """Place activity for ``location`` that keeps the original's slot and notes."""
    typical = location.recommended_visit.typical_minutes if location.recommended_visit else None
    duration = typical or category_default_duration(location.category or FALLBACK_CATEGORY)
    return PlaceActivity(
        id=_activity_id(location.id),
        title=location.name,
        time_of_day=original_activity.time_of_day,
        duration_min=duration,
        neighborhood=location.city,
        tags=[location.category] if location.category else [],
        location_id=location.id,
        notes=original_activity.notes,
    )
