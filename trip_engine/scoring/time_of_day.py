"""Time-of-day preference and opening-hours checks."""
from __future__ import annotations

import re
from datetime import date as date_cls
from typing import Dict, List, Optional, Tuple

from trip_engine.schemas import Location, OpeningHoursFit, ScoreAdjustment

TIME_SLOTS: Tuple[str, ...] = ("morning", "afternoon", "evening")

OPTIMAL_TIMES_BY_CATEGORY: Dict[str, List[str]] = {
    "viewpoint": ["morning", "evening"],  # sunrise/sunset
    "park": ["morning", "afternoon"],
    "garden": ["morning", "afternoon"],
    "shrine": ["morning", "evening"],
    "temple": ["morning", "evening"],
    "restaurant": ["afternoon", "evening"],
    "market": ["morning", "afternoon"],
    "museum": ["afternoon"],
    "shopping": ["afternoon", "evening"],
    "bar": ["evening"],
    "entertainment": ["evening"],
    "landmark": ["morning", "afternoon"],
    "historic": ["morning", "afternoon"],
}

# slot -> (start, end) in minutes after midnight
SLOT_WINDOWS: Dict[str, Tuple[int, int]] = {
    "morning": (9 * 60, 12 * 60),
    "afternoon": (12 * 60, 17 * 60),
    "evening": (17 * 60, 21 * 60),
}

_MINUTES_IN_DAY = 24 * 60
_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def score_time_of_day_fit(location: Location, time_slot: str, date: Optional[str] = None) -> ScoreAdjustment:
    category = (location.category or "").lower()
    optimal = OPTIMAL_TIMES_BY_CATEGORY.get(category)
    if not optimal:
        return ScoreAdjustment(score_adjustment=0, reasoning="No specific time preference for this category")

    if time_slot in optimal:
        return ScoreAdjustment(
            score_adjustment=8,
            reasoning=f"{time_slot} is an optimal time to visit {category} (less crowded, better experience)",
        )

    current = TIME_SLOTS.index(time_slot) if time_slot in TIME_SLOTS else -1
    if current >= 0 and any(abs(current - TIME_SLOTS.index(slot)) == 1 for slot in optimal):
        return ScoreAdjustment(
            score_adjustment=3,
            reasoning=f"{time_slot} is acceptable for {category}, though {' or '.join(optimal)} would be better",
        )

    return ScoreAdjustment(
        score_adjustment=-3,
        reasoning=f"{time_slot} is not ideal for {category} (optimal times: {', '.join(optimal)})",
    )


def check_opening_hours_fit(
    location: Location,
    time_slot: str,
    date: Optional[str] = None,
    min_visit_minutes: int = 30,
) -> OpeningHoursFit:
    """Whether the location is open for at least ``min_visit_minutes`` inside the slot."""
    hours = location.operating_hours
    if hours is None or not hours.periods:
        return OpeningHoursFit(fits=True, reasoning="No opening hours information available")

    window = SLOT_WINDOWS.get(time_slot)
    if window is None:
        return OpeningHoursFit(fits=True, reasoning="Invalid time slot")

    weekday = _weekday(date)
    slot_start, slot_end = window
    for period in hours.periods:
        # Periods without a day apply every day.
        if weekday and period.day and period.day.lower() != weekday:
            continue
        open_min = _parse_time(period.open)
        close_min = _parse_time(period.close)
        if open_min is None or close_min is None:
            continue
        if period.is_overnight:
            close_min += _MINUTES_IN_DAY
        overlap = max(0, min(slot_end, close_min) - max(slot_start, open_min))
        if overlap >= min_visit_minutes:
            return OpeningHoursFit(
                fits=True,
                reasoning=f"Open during {time_slot} ({period.open}-{period.close}, {overlap}min available)",
            )

    return OpeningHoursFit(
        fits=False,
        reasoning=f"Insufficient opening hours during {time_slot} (need {min_visit_minutes}min)",
    )


def _parse_time(value: Optional[str]) -> Optional[int]:
    """Minutes after midnight for an ``H:MM`` clock string, else None."""
    match = _CLOCK_RE.match((value or "").strip())
    if match is None:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def _weekday(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return _WEEKDAYS[date_cls.fromisoformat(value[:10]).weekday()]
    except ValueError:
        return None
