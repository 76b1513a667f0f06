"""Weather-aware score adjustments for candidate locations."""
from __future__ import annotations

from typing import Dict, FrozenSet, Literal, Optional

from trip_engine.log import get_logger
from trip_engine.schemas import Location, ScoreAdjustment, WeatherForecast, WeatherPreferences

logger = get_logger(__name__)

Environment = Literal["indoor", "outdoor", "mixed"]

_ENVIRONMENT_TAGS: FrozenSet[str] = frozenset({"indoor", "outdoor", "mixed"})

_INDOOR_CATEGORIES: FrozenSet[str] = frozenset(
    {"museum", "restaurant", "shopping", "bar", "entertainment", "onsen", "aquarium"}
)
_OUTDOOR_CATEGORIES: FrozenSet[str] = frozenset(
    {"park", "garden", "shrine", "temple", "viewpoint", "nature", "beach", "hiking", "historic"}
)

_WET_CONDITIONS: FrozenSet[str] = frozenset({"rain", "drizzle", "thunderstorm"})

# condition -> environment -> delta
_CONDITION_DELTAS: Dict[str, Dict[str, int]] = {
    "wet": {"outdoor": -5, "mixed": -3, "indoor": 5},
    "snow": {"outdoor": -6, "mixed": -2, "indoor": 4},
    "clear": {"outdoor": 2, "mixed": 1, "indoor": 0},
}
WET_OUTDOOR_PENALTY_INDOOR_PREF = -8

COLD_MAX_C = 2.0
HOT_MIN_C = 33.0
COLD_OUTDOOR_PENALTY = -3
HEAT_INDOOR_BONUS = 2


def classify_environment(location: Location) -> Environment:
    """Explicit environment tag first, then the category heuristic."""
    for tag in location.tags:
        normalised = tag.strip().lower()
        if normalised in _ENVIRONMENT_TAGS:
            return normalised  # type: ignore[return-value]
    category = (location.category or "").lower()
    if category in _INDOOR_CATEGORIES:
        return "indoor"
    if category in _OUTDOOR_CATEGORIES:
        return "outdoor"
    return "mixed"


def score_weather_fit(
    location: Location,
    forecast: Optional[WeatherForecast],
    preferences: Optional[WeatherPreferences] = None,
) -> ScoreAdjustment:
    if forecast is None:
        return ScoreAdjustment(score_adjustment=0, reasoning="No weather forecast available")

    environment = classify_environment(location)
    condition = forecast.condition
    prefs = preferences or WeatherPreferences()

    if condition in _WET_CONDITIONS:
        delta = _CONDITION_DELTAS["wet"][environment]
        if environment == "outdoor" and prefs.prefer_indoor_on_rain:
            delta = WET_OUTDOOR_PENALTY_INDOOR_PREF
        if delta:
            return ScoreAdjustment(
                score_adjustment=delta,
                reasoning=_condition_reason(condition, environment, delta),
            )
    elif condition == "snow":
        delta = _CONDITION_DELTAS["snow"][environment]
        return ScoreAdjustment(
            score_adjustment=delta,
            reasoning=_condition_reason(condition, environment, delta),
        )
    elif condition == "clear":
        delta = _CONDITION_DELTAS["clear"][environment]
        if delta:
            return ScoreAdjustment(
                score_adjustment=delta,
                reasoning=_condition_reason(condition, environment, delta),
            )

    # Temperature extremes only matter when the sky itself didn't decide.
    cold_limit = prefs.min_temperature if prefs.min_temperature is not None else COLD_MAX_C
    hot_limit = prefs.max_temperature if prefs.max_temperature is not None else HOT_MIN_C
    temperature = forecast.temperature
    if environment == "outdoor" and temperature.max <= cold_limit:
        return ScoreAdjustment(
            score_adjustment=COLD_OUTDOOR_PENALTY,
            reasoning=f"Cold day (max {temperature.max:.0f}°C) makes outdoor visits less pleasant",
        )
    if environment == "indoor" and temperature.min >= hot_limit:
        return ScoreAdjustment(
            score_adjustment=HEAT_INDOOR_BONUS,
            reasoning=f"Hot day (min {temperature.min:.0f}°C) favours indoor visits",
        )

    logger.debug("No weather adjustment for %s (%s, %s)", location.id, environment, condition)
    return ScoreAdjustment(
        score_adjustment=0,
        reasoning=f"{condition.capitalize()} weather has no notable effect on this {environment} location",
    )


def _condition_reason(condition: str, environment: str, delta: int) -> str:
    if delta > 0:
        return f"{environment.capitalize()} location is a good fit for {condition} weather"
    return f"{environment.capitalize()} location is less suitable in {condition} weather"
