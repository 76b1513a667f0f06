"""Composite location scoring used for itinerary candidates.

Each factor returns ``(score, reasoning)``; ``score_location`` sums the factors
and keeps the reasoning in a fixed order so the UI can show why a candidate
ranked where it did. Ranges per factor:

* interest match 5..30
* rating quality 0..25
* logistical fit 0..20
* budget fit 2..10
* accessibility fit 0..10
* diversity bonus -5..5
* weather, time-of-day and group fit come from their own scorers
"""
from __future__ import annotations

import math
import re
from typing import Dict, List, Optional, Tuple

from trip_engine.durations import category_default_duration, parse_duration_text
from trip_engine.geo import distance_km
from trip_engine.log import get_logger
from trip_engine.schemas import (
    AccessibilityRequirements,
    Location,
    LocationScore,
    LocationScoringCriteria,
    ScoreAdjustment,
    ScoreBreakdown,
)
from trip_engine.scoring.group import score_group_fit
from trip_engine.scoring.time_of_day import check_opening_hours_fit, score_time_of_day_fit
from trip_engine.scoring.weather import score_weather_fit

logger = get_logger(__name__)

CATEGORY_TO_INTERESTS: Dict[str, List[str]] = {
    "shrine": ["culture", "history"],
    "temple": ["culture", "history"],
    "landmark": ["culture", "photography"],
    "historic": ["culture", "history"],
    "restaurant": ["food"],
    "market": ["food", "shopping"],
    "park": ["nature", "wellness", "photography"],
    "garden": ["nature", "wellness", "photography"],
    "bar": ["nightlife"],
    "entertainment": ["nightlife"],
    "shopping": ["shopping"],
    "museum": ["culture", "history"],
    "viewpoint": ["photography", "nature"],
}

RECENT_CATEGORY_WINDOW = 5
CLOSED_HOURS_PENALTY = 5
ACTIVITIES_PER_TRIP_ESTIMATE = 20
PER_ACTIVITY_SHARE_OF_DAY = 0.3

_BUDGET_RANGES: Dict[str, Tuple[float, float]] = {
    "budget": (0, 1000),
    "moderate": (500, 3000),
    "luxury": (2000, float("inf")),
}
_SYMBOL_RANGES: Dict[str, Tuple[int, ...]] = {
    "budget": (1, 2),
    "moderate": (2, 3),
    "luxury": (3, 4),
}
_NUMERIC_PRICE = re.compile(r"¥?\s*(\d+)")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_interest_match(location: Location, interests: List[str]) -> Tuple[int, str]:
    category = location.category
    if not category:
        return 10, "No category information available"

    related = CATEGORY_TO_INTERESTS.get(category.lower(), [])
    matched = [interest for interest in interests if interest in related]
    if not matched:
        return 5, f'Category "{category}" doesn\'t match any selected interests'
    if len(matched) == len(interests):
        return 30, f'Perfect match: "{category}" aligns with all interests ({", ".join(matched)})'

    ratio = len(matched) / len(interests)
    score = _round_half_up(15 + ratio * 15)
    return score, (
        f'Partial match: "{category}" aligns with {len(matched)} of {len(interests)} '
        f'interests ({", ".join(matched)})'
    )


def score_rating_quality(location: Location) -> Tuple[int, str]:
    rating = location.rating or 0.0
    reviews = location.review_count or 0
    if rating == 0 and reviews == 0:
        return 12, "No rating data available, using neutral score"

    rating_score = rating / 5 * 15
    if reviews <= 0:
        review_score = 0
    elif reviews < 10:
        review_score = 2
    elif reviews < 50:
        review_score = 4
    elif reviews < 200:
        review_score = 6
    elif reviews < 1000:
        review_score = 8
    else:
        review_score = 10

    total = _round_half_up(rating_score + review_score)
    quality = "high quality" if total >= 20 else "good quality" if total >= 15 else "moderate quality"
    return total, f"Rating: {rating:.1f}/5 ({reviews} reviews) - {quality}"


def get_location_duration_minutes(location: Location) -> int:
    """Recommended visit, then the free-text estimate, then the category default."""
    if location.recommended_visit and location.recommended_visit.typical_minutes:
        return location.recommended_visit.typical_minutes
    parsed = parse_duration_text(location.estimated_duration)
    if parsed:
        return parsed
    return category_default_duration(location.category)


def score_logistical_fit(location: Location, criteria: LocationScoringCriteria) -> Tuple[int, str]:
    score = 10
    reasons: List[str] = []

    if criteria.current_location and location.coordinates:
        km = distance_km(criteria.current_location, location.coordinates)
        if km < 1:
            score += 8
            reasons.append("Very close (<1km)")
        elif km < 3:
            score += 6
            reasons.append("Nearby (1-3km)")
        elif km < 5:
            score += 4
            reasons.append("Moderate distance (3-5km)")
        elif km < 10:
            score += 2
            reasons.append("Far (5-10km)")
        else:
            score -= 2
            reasons.append("Very far (>10km)")
    else:
        reasons.append("No distance data available")

    duration = get_location_duration_minutes(location)
    available = criteria.available_minutes
    if duration <= available * 0.3:
        score += 2
        reasons.append("Short duration, fits easily")
    elif duration <= available * 0.7:
        score += 7
        reasons.append("Duration fits well in time slot")
    elif duration <= available * 1.1:
        score += 4
        reasons.append("Duration slightly exceeds available time")
    else:
        score -= 3
        reasons.append("Duration exceeds available time significantly")

    if criteria.travel_style == "fast" and duration > 180:
        score -= 2
        reasons.append("Too long for fast-paced travel")
    elif criteria.travel_style == "relaxed" and duration < 60:
        score -= 1
        reasons.append("Short duration for relaxed pace")

    return max(0, min(20, score)), "; ".join(reasons)


def parse_price_level(min_budget: Optional[str]) -> Tuple[int, str]:
    """``("¥400")`` -> ``(400, "numeric")``; ``("¥¥")`` -> ``(2, "symbol")``."""
    if not min_budget:
        return 0, "numeric"
    match = _NUMERIC_PRICE.search(min_budget)
    if match:
        return int(match.group(1)), "numeric"
    symbols = min_budget.count("¥")
    if symbols:
        return symbols, "symbol"
    return 0, "numeric"


def score_budget_fit(location: Location, criteria: LocationScoringCriteria) -> Tuple[int, str]:
    level, kind = parse_price_level(location.min_budget)
    numeric = kind == "numeric" and level > 0

    if criteria.budget_per_day is not None and numeric:
        per_day = criteria.budget_per_day
        cap = per_day * PER_ACTIVITY_SHARE_OF_DAY
        if level <= cap:
            return 10, (
                f"Price (¥{level}) fits within daily budget (¥{per_day:.0f}, max ¥{round(cap)} per activity)"
            )
        if level <= per_day:
            return 7, f"Price (¥{level}) is within daily budget but high (¥{per_day:.0f})"
        return 2, f"Price (¥{level}) exceeds daily budget (¥{per_day:.0f})"

    if criteria.budget_total is not None and numeric:
        total = criteria.budget_total
        average = total / ACTIVITIES_PER_TRIP_ESTIMATE
        if level <= average:
            return 10, (
                f"Price (¥{level}) fits within total budget estimate "
                f"(¥{total:.0f} total, ~¥{round(average)} per activity)"
            )
        if level <= average * 1.5:
            return 7, f"Price (¥{level}) is within total budget but on the higher side"
        return 3, f"Price (¥{level}) may exceed total budget (¥{total:.0f})"

    budget_level = criteria.budget_level
    if not budget_level:
        return 5, "No budget preference specified"

    if kind == "numeric":
        if level == 0:
            return 5, "No price information available"
        low, high = _BUDGET_RANGES[budget_level]
        if low <= level <= high:
            return 10, f"Price (¥{level}) fits {budget_level} budget"
        if level < low:
            return 8, f"Price (¥{level}) is below {budget_level} range but acceptable"
        return 3, f"Price (¥{level}) exceeds {budget_level} budget"

    expected = _SYMBOL_RANGES[budget_level]
    symbols = "¥" * level
    if level in expected:
        return 10, f"Price level ({symbols}) fits {budget_level} budget"
    if level < expected[0]:
        return 8, f"Price level ({symbols}) is below {budget_level} range but acceptable"
    return 3, f"Price level ({symbols}) exceeds {budget_level} budget"


def score_accessibility_fit(
    location: Location, requirements: Optional[AccessibilityRequirements]
) -> Tuple[int, str]:
    if requirements is None or not (requirements.wheelchair_accessible or requirements.elevator_required):
        return 5, "No accessibility requirements specified"

    available = location.accessibility
    if available is None:
        return 5, "Accessibility information not available for this location"

    score = 0
    reasons: List[str] = []
    if requirements.wheelchair_accessible:
        if available.wheelchair_accessible:
            score += 5
            reasons.append("Wheelchair accessible")
        else:
            score -= 3
            reasons.append("Not wheelchair accessible")

    if requirements.elevator_required:
        if available.elevator_available:
            score += 3
            reasons.append("Elevator available")
        elif available.step_free_access:
            score += 2
            reasons.append("Step-free access available (no elevator needed)")
        else:
            score -= 2
            reasons.append("Elevator not available")

    if requirements.wheelchair_accessible and available.step_free_access:
        score += 2
        reasons.append("Step-free access confirmed")

    score = max(0, min(10, score))
    if score < 3:
        return 0, f"Does not meet accessibility requirements: {'; '.join(reasons)}"
    return score, "; ".join(reasons) if reasons else "Meets accessibility requirements"


def score_diversity(location: Location, recent_categories: List[str]) -> Tuple[int, str]:
    category = location.category
    if not category:
        return 0, "No category information"

    window = recent_categories[-RECENT_CATEGORY_WINDOW:]
    count = sum(1 for recent in window if recent == category)
    if count == 0:
        return 5, f'New category "{category}" adds variety'
    if count == 1:
        return 2, f'Category "{category}" appeared once recently, slight variety'
    if count == 2:
        return -2, f'Category "{category}" appeared twice recently, reducing variety'
    return -5, f'Category "{category}" appeared {count} times recently, strong penalty for repetition'


def score_location(location: Location, criteria: LocationScoringCriteria) -> LocationScore:
    interest_score, interest_reason = score_interest_match(location, criteria.interests)
    rating_score, rating_reason = score_rating_quality(location)
    logistics_score, logistics_reason = score_logistical_fit(location, criteria)
    budget_score, budget_reason = score_budget_fit(location, criteria)
    access_score, access_reason = score_accessibility_fit(location, criteria.accessibility)
    diversity_score, diversity_reason = score_diversity(location, criteria.recent_categories)
    weather = score_weather_fit(location, criteria.weather_forecast, criteria.weather_preferences)

    if criteria.time_slot:
        time_fit = score_time_of_day_fit(location, criteria.time_slot, criteria.date)
        hours_fit = check_opening_hours_fit(location, criteria.time_slot, criteria.date)
    else:
        time_fit = ScoreAdjustment(score_adjustment=0, reasoning="No time slot specified")
        hours_fit = None
    time_score = time_fit.score_adjustment
    if hours_fit is not None and not hours_fit.fits:
        time_score -= CLOSED_HOURS_PENALTY

    group = score_group_fit(location, criteria.group)

    breakdown = ScoreBreakdown(
        interest_match=interest_score,
        rating_quality=rating_score,
        logistical_fit=logistics_score,
        budget_fit=budget_score,
        accessibility_fit=access_score,
        diversity_bonus=diversity_score,
        weather_fit=weather.score_adjustment,
        time_optimization=time_score,
        group_fit=group.score_adjustment,
    )
    total = sum(breakdown.model_dump().values())

    reasoning = [
        interest_reason,
        rating_reason,
        logistics_reason,
        budget_reason,
        access_reason,
        diversity_reason,
        weather.reasoning,
        time_fit.reasoning,
        hours_fit.reasoning if hours_fit is not None else "No time slot specified",
        group.reasoning,
    ]
    logger.debug("Scored %s at %d", location.id, total)
    return LocationScore(location=location, score=total, breakdown=breakdown, reasoning=reasoning)
