from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TimeOfDay = Literal["morning", "afternoon", "evening"]
TravelMode = Literal["walk", "transit", "taxi"]
TravelStyle = Literal["relaxed", "balanced", "fast"]
BudgetLevel = Literal["budget", "moderate", "luxury"]
GroupType = Literal["solo", "couple", "family", "friends", "business"]
WeatherCondition = Literal[
    "clear",
    "clouds",
    "cloudy",
    "rain",
    "drizzle",
    "thunderstorm",
    "snow",
    "mist",
    "fog",
    "haze",
]
EditType = Literal[
    "replaceActivity",
    "deleteActivity",
    "addActivity",
    "reorderActivities",
    "updateItinerary",
]


class _Model(BaseModel):
    # snake_case in Python, camelCase in the JSON documents the UI persists
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class _Frozen(_Model):
    model_config = ConfigDict(frozen=True)


# ------- Locations (owned by the location store) -------
class Coordinates(_Frozen):
    lat: float
    lng: float


class LocationAccessibility(_Frozen):
    wheelchair_accessible: bool = False
    elevator_available: bool = False
    step_free_access: bool = False


class OperatingPeriod(_Frozen):
    day: Optional[str] = None  # lowercase weekday; None means every day
    open: str
    close: str
    is_overnight: bool = False


class OperatingHours(_Frozen):
    timezone: Optional[str] = None
    periods: List[OperatingPeriod] = Field(default_factory=list)


class RecommendedVisit(_Frozen):
    typical_minutes: Optional[int] = None
    min_minutes: Optional[int] = None
    max_minutes: Optional[int] = None


class DietaryOptions(_Frozen):
    serves_vegetarian_food: Optional[bool] = None


class MealOptions(_Frozen):
    serves_breakfast: Optional[bool] = None
    serves_brunch: Optional[bool] = None
    serves_lunch: Optional[bool] = None
    serves_dinner: Optional[bool] = None


class Location(_Frozen):
    id: str
    name: str
    city: str = ""
    region: str = ""
    prefecture: Optional[str] = None
    neighborhood: Optional[str] = None
    category: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    price_level: Optional[int] = None
    min_budget: Optional[str] = None
    estimated_duration: Optional[str] = None
    recommended_visit: Optional[RecommendedVisit] = None
    operating_hours: Optional[OperatingHours] = None
    accessibility: Optional[LocationAccessibility] = None
    dietary_options: Optional[DietaryOptions] = None
    meal_options: Optional[MealOptions] = None
    good_for_children: Optional[bool] = None
    good_for_groups: Optional[bool] = None
    tags: List[str] = Field(default_factory=list)
    business_status: Optional[str] = None
    place_id: Optional[str] = None


# ------- Itinerary documents -------
class PlaceActivity(_Frozen):
    kind: Literal["place"] = "place"
    id: str
    title: str
    time_of_day: TimeOfDay = "morning"
    duration_min: Optional[int] = None
    neighborhood: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    location_id: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class NoteActivity(_Frozen):
    """Free time or a user note; never references a location."""

    kind: Literal["note"] = "note"
    id: str
    title: str
    time_of_day: TimeOfDay = "morning"
    duration_min: Optional[int] = None
    notes: Optional[str] = None


class TravelActivity(_Frozen):
    kind: Literal["travel"] = "travel"
    id: str
    title: str
    time_of_day: TimeOfDay = "morning"
    mode: TravelMode = "transit"
    duration_min: Optional[int] = None
    from_location_id: Optional[str] = None
    to_location_id: Optional[str] = None


Activity = Annotated[Union[PlaceActivity, NoteActivity, TravelActivity], Field(discriminator="kind")]


class ItineraryDay(_Frozen):
    id: str
    date: Optional[str] = None
    city_id: Optional[str] = None
    activities: List[Activity] = Field(default_factory=list)


class Itinerary(_Frozen):
    days: List[ItineraryDay] = Field(default_factory=list)


# ------- Trip builder preferences -------
class TripDates(_Frozen):
    start: Optional[str] = None
    end: Optional[str] = None


class TripBudget(_Frozen):
    level: Optional[BudgetLevel] = None
    total: Optional[float] = None
    per_day: Optional[float] = None


class AccessibilityPreferences(_Frozen):
    mobility: bool = False
    notes: Optional[str] = None


class WeatherPreferences(_Frozen):
    prefer_indoor_on_rain: bool = False
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None


class GroupInfo(_Frozen):
    type: Optional[GroupType] = None
    size: Optional[int] = None
    children_ages: List[int] = Field(default_factory=list)


class TripBuilderData(_Frozen):
    dates: TripDates = Field(default_factory=TripDates)
    regions: List[str] = Field(default_factory=list)
    cities: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    style: Optional[TravelStyle] = None
    budget: Optional[TripBudget] = None
    accessibility: Optional[AccessibilityPreferences] = None
    weather_preferences: Optional[WeatherPreferences] = None
    group: Optional[GroupInfo] = None


# ------- Weather -------
class TemperatureRange(_Frozen):
    min: float
    max: float


class Precipitation(_Frozen):
    probability: int = 0
    amount: Optional[float] = None


class WeatherForecast(_Frozen):
    date: str
    condition: WeatherCondition
    temperature: TemperatureRange
    precipitation: Optional[Precipitation] = None
    humidity: Optional[int] = None
    description: Optional[str] = None


# ------- Scoring -------
class ScoreAdjustment(_Frozen):
    score_adjustment: int = 0
    reasoning: str = ""


class OpeningHoursFit(_Frozen):
    fits: bool
    reasoning: str


class AccessibilityRequirements(_Frozen):
    wheelchair_accessible: bool = False
    elevator_required: bool = False


class LocationScoringCriteria(_Frozen):
    interests: List[str] = Field(default_factory=list)
    travel_style: TravelStyle = "balanced"
    budget_level: Optional[BudgetLevel] = None
    budget_total: Optional[float] = None
    budget_per_day: Optional[float] = None
    accessibility: Optional[AccessibilityRequirements] = None
    current_location: Optional[Coordinates] = None
    available_minutes: int = 90
    recent_categories: List[str] = Field(default_factory=list)
    weather_forecast: Optional[WeatherForecast] = None
    weather_preferences: Optional[WeatherPreferences] = None
    time_slot: Optional[TimeOfDay] = None
    date: Optional[str] = None
    group: Optional[GroupInfo] = None


class ScoreBreakdown(_Frozen):
    interest_match: int = 0
    rating_quality: int = 0
    logistical_fit: int = 0
    budget_fit: int = 0
    accessibility_fit: int = 0
    diversity_bonus: int = 0
    weather_fit: int = 0
    time_optimization: int = 0
    group_fit: int = 0


class LocationScore(_Frozen):
    location: Location
    score: int
    breakdown: ScoreBreakdown
    reasoning: List[str] = Field(default_factory=list)


class ReplacementCandidate(LocationScore):
    """A scored location offered as a swap for an existing activity."""


class ReplacementOptions(_Frozen):
    candidates: List[ReplacementCandidate] = Field(default_factory=list)
    original_activity: PlaceActivity


class RecommendationFactor(_Frozen):
    factor: str
    score: int
    reasoning: str


class RecommendationReason(_Frozen):
    primary_reason: str
    factors: Optional[List[RecommendationFactor]] = None
    alternatives_considered: Optional[List[str]] = None


class ReasonContext(_Frozen):
    time_slot: Optional[TimeOfDay] = None
    is_favorite: bool = False
    source: Optional[str] = None  # e.g. "smart_prompt"
    alternatives_considered: Optional[List[str]] = None


# ------- Stored trips & edit history -------
class StoredTrip(_Frozen):
    id: str
    name: str
    created_at: str
    updated_at: str
    itinerary: Itinerary
    builder_data: TripBuilderData
    day_intros: Optional[Dict[str, str]] = None


class ItineraryEdit(_Frozen):
    id: str
    trip_id: str
    day_id: str
    timestamp: str
    type: EditType
    previous_itinerary: Itinerary
    next_itinerary: Itinerary
    metadata: Optional[Dict[str, Any]] = None


class EditHistoryState(_Frozen):
    edit_history: Dict[str, List[ItineraryEdit]] = Field(default_factory=dict)
    current_history_index: Dict[str, int] = Field(default_factory=dict)


class HistoryTransition(_Frozen):
    trips: List[StoredTrip]
    history_state: EditHistoryState


# ------- HTTP request models -------
class ReplacementRequest(_Model):
    activity: PlaceActivity
    trip_data: TripBuilderData = Field(default_factory=TripBuilderData)
    all_activities: List[Activity] = Field(default_factory=list)
    day_activities: List[Activity] = Field(default_factory=list)
    day_index: int = 0
    max_candidates: int = Field(10, ge=1, le=50)
    weather_forecast: Optional[WeatherForecast] = None
    date: Optional[str] = None


class ScoreLocationRequest(_Model):
    location: Location
    criteria: LocationScoringCriteria
