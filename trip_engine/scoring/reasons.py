"""Turn a score breakdown into a short explanation the UI can show."""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from trip_engine.schemas import (
    Location,
    ReasonContext,
    RecommendationFactor,
    RecommendationReason,
    ScoreBreakdown,
)

# breakdown field -> (label, max magnitude)
FACTOR_META: Dict[str, Tuple[str, int]] = {
    "interest_match": ("Interest match", 30),
    "rating_quality": ("Rating & reviews", 25),
    "logistical_fit": ("Distance & logistics", 20),
    "budget_fit": ("Budget fit", 10),
    "accessibility_fit": ("Accessibility", 10),
    "diversity_bonus": ("Variety", 5),
    "weather_fit": ("Weather fit", 10),
    "time_optimization": ("Time-of-day fit", 10),
    "group_fit": ("Group fit", 8),
}

PRIMARY_FACTOR_COUNT = 3


def humanize_factor(key: str, score: int, location: Location) -> str:
    """One-line description of a factor; empty when it isn't worth mentioning."""
    if key == "interest_match":
        if score >= 25:
            return f"{location.category or 'This place'} matches your interests well"
        if score >= 15:
            return "Partially matches your interests"
        return "Outside your main interests - adds variety"

    if key == "rating_quality":
        rating = location.rating
        reviews = location.review_count
        if rating and rating >= 4.5 and reviews and reviews >= 200:
            return f"Highly rated ({rating:.1f}, {reviews:,}+ reviews)"
        if rating and rating >= 4.0:
            return f"Well rated ({rating:.1f})"
        if rating:
            return f"Rated {rating:.1f}"
        return "No rating data"

    if key == "logistical_fit":
        if score >= 15:
            return "Very close to your previous stop"
        if score >= 10:
            return "Nearby - short commute"
        if score >= 0:
            return "Moderate distance"
        return "A bit of a trek, but worth it"

    if key == "budget_fit":
        if score >= 9:
            return "Fits your budget perfectly"
        if score >= 6:
            return "Within budget"
        return "May stretch your budget"

    if key == "accessibility_fit":
        if score >= 8:
            return "Fully accessible"
        if score >= 5:
            return "Accessibility not confirmed"
        return "Limited accessibility info"

    if key == "diversity_bonus":
        if score >= 4:
            return "Adds a fresh category to your day"
        if score <= -3:
            return "Similar to recent stops"
        return ""

    if key == "weather_fit":
        if score >= 5:
            return "Great choice for today's weather"
        if score <= -5:
            return "Weather may not be ideal - consider an indoor backup"
        return ""

    if key == "time_optimization":
        if score >= 5:
            slot = "evening" if location.category in ("bar", "entertainment") else "time slot"
            return f"Well-suited for the {slot}"
        if score <= -3:
            return "Slightly off-peak for this time slot"
        return ""

    if key == "group_fit":
        if score >= 5:
            return "Great for your group"
        if score <= -3:
            return "May not suit your group well"
        return ""

    return ""


def _primary_reason(breakdown: ScoreBreakdown, location: Location, context: Optional[ReasonContext]) -> str:
    if context is not None and context.is_favorite:
        return "From your favorites"
    if context is not None and context.source == "smart_prompt":
        return "Suggested to fill a gap in your day"

    scores = breakdown.model_dump()
    positive = sorted(
        ((key, score) for key, score in scores.items() if score > 0),
        key=lambda item: item[1],
        reverse=True,
    )[:PRIMARY_FACTOR_COUNT]
    if not positive:
        return "Selected to round out your day"

    fragments = [text for text in (humanize_factor(key, score, location) for key, score in positive) if text]
    if not fragments:
        return "Selected based on your interests and preferences"
    if len(fragments) == 1:
        return fragments[0]
    if len(fragments) == 2:
        return f"{fragments[0]}; {fragments[1]}"
    return f"{fragments[0]}; {fragments[1]}. {fragments[2]}"


def format_recommendation_reason(
    breakdown: ScoreBreakdown,
    location: Location,
    context: Optional[ReasonContext] = None,
) -> RecommendationReason:
    """Build the primary sentence plus the list of notable factors.

    Zero scores are dropped, as are +/-1 scores on the small-range factors, and
    factors are ordered from strongest positive to strongest negative.
    """
    scores = breakdown.model_dump()
    factors: List[RecommendationFactor] = []
    for key, (label, max_magnitude) in FACTOR_META.items():
        score = scores[key]
        if score == 0:
            continue
        if abs(score) <= 1 and max_magnitude <= 5:
            continue
        reasoning = humanize_factor(key, score, location)
        if not reasoning:
            continue
        factors.append(RecommendationFactor(factor=label, score=score, reasoning=reasoning))

    factors.sort(key=lambda factor: factor.score, reverse=True)

    return RecommendationReason(
        primary_reason=_primary_reason(breakdown, location, context),
        factors=factors or None,
        alternatives_considered=context.alternatives_considered if context is not None else None,
    )
