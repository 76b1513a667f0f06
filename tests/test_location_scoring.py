import pytest

from trip_engine.schemas import (
    AccessibilityRequirements,
    Coordinates,
    Location,
    LocationAccessibility,
    LocationScoringCriteria,
    OperatingHours,
    OperatingPeriod,
    RecommendedVisit,
    TemperatureRange,
    WeatherForecast,
)
from trip_engine.scoring.location import (
    get_location_duration_minutes,
    parse_price_level,
    score_accessibility_fit,
    score_budget_fit,
    score_diversity,
    score_interest_match,
    score_location,
    score_logistical_fit,
    score_rating_quality,
)

GION = Coordinates(lat=35.0037, lng=135.7788)


def _build_location(**kwargs) -> Location:
    data = {"id": "loc-1", "name": "Kennin-ji", "city": "kyoto", "category": "temple"}
    data.update(kwargs)
    return Location(**data)


def _build_criteria(**kwargs) -> LocationScoringCriteria:
    return LocationScoringCriteria(**kwargs)


def test_interest_match_levels():
    temple = _build_location()
    assert score_interest_match(temple, ["culture", "history"])[0] == 30
    assert score_interest_match(temple, ["culture", "food"])[0] == 23
    assert score_interest_match(temple, ["culture", "food", "nature"])[0] == 20
    assert score_interest_match(temple, ["nightlife"])[0] == 5
    assert score_interest_match(_build_location(category=None), ["culture"])[0] == 10


def test_rating_quality():
    score, reason = score_rating_quality(_build_location(rating=4.6, review_count=1200))
    assert score == 24
    assert "high quality" in reason
    assert score_rating_quality(_build_location(rating=4.0, review_count=30))[0] == 16
    assert score_rating_quality(_build_location())[0] == 12


def test_duration_prefers_recommended_visit():
    assert get_location_duration_minutes(_build_location(recommended_visit=RecommendedVisit(typical_minutes=45))) == 45
    assert get_location_duration_minutes(_build_location(estimated_duration="1.5 hours")) == 90
    assert get_location_duration_minutes(_build_location(category="museum")) == 120
    assert get_location_duration_minutes(_build_location(category=None)) == 90


def test_logistics_without_coordinates():
    score, reason = score_logistical_fit(_build_location(category="museum"), _build_criteria(available_minutes=90))
    # base 10, 120 min visit in a 90 min slot
    assert score == 7
    assert "No distance data available" in reason


def test_logistics_nearby_and_well_sized_is_capped():
    location = _build_location(coordinates=GION, recommended_visit=RecommendedVisit(typical_minutes=45))
    criteria = _build_criteria(current_location=GION, available_minutes=90)
    assert score_logistical_fit(location, criteria)[0] == 20


def test_logistics_fast_pace_dislikes_long_visits():
    location = _build_location(recommended_visit=RecommendedVisit(typical_minutes=200))
    score, reason = score_logistical_fit(location, _build_criteria(available_minutes=240, travel_style="fast"))
    # 10 + 4 (fits within 110%) - 2
    assert score == 12
    assert "fast-paced" in reason


@pytest.mark.parametrize(
    "text, expected",
    [("¥400", (400, "numeric")), ("¥ 1500", (1500, "numeric")), ("¥¥", (2, "symbol")), (None, (0, "numeric"))],
)
def test_parse_price_level(text, expected):
    assert parse_price_level(text) == expected


def test_budget_per_day_takes_precedence():
    location = _build_location(min_budget="¥500")
    assert score_budget_fit(location, _build_criteria(budget_per_day=10000, budget_level="luxury"))[0] == 10
    assert score_budget_fit(location, _build_criteria(budget_per_day=1000))[0] == 7
    assert score_budget_fit(location, _build_criteria(budget_per_day=400))[0] == 2


def test_budget_total_spreads_over_trip():
    location = _build_location(min_budget="¥2000")
    assert score_budget_fit(location, _build_criteria(budget_total=40000))[0] == 10
    assert score_budget_fit(location, _build_criteria(budget_total=30000))[0] == 7
    assert score_budget_fit(location, _build_criteria(budget_total=10000))[0] == 3


def test_budget_level_ranges():
    assert score_budget_fit(_build_location(min_budget="¥400"), _build_criteria(budget_level="budget"))[0] == 10
    assert score_budget_fit(_build_location(min_budget="¥400"), _build_criteria(budget_level="luxury"))[0] == 8
    assert score_budget_fit(_build_location(min_budget="¥5000"), _build_criteria(budget_level="budget"))[0] == 3
    assert score_budget_fit(_build_location(min_budget="¥¥"), _build_criteria(budget_level="moderate"))[0] == 10
    assert score_budget_fit(_build_location(min_budget="¥¥"), _build_criteria(budget_level="luxury"))[0] == 8
    assert score_budget_fit(_build_location(min_budget="¥¥¥"), _build_criteria(budget_level="budget"))[0] == 3
    assert score_budget_fit(_build_location(min_budget="Free"), _build_criteria(budget_level="budget"))[0] == 5
    assert score_budget_fit(_build_location(min_budget="¥400"), _build_criteria())[0] == 5


def test_accessibility_requirements():
    wheelchair = AccessibilityRequirements(wheelchair_accessible=True)
    accessible = _build_location(
        accessibility=LocationAccessibility(wheelchair_accessible=True, step_free_access=True)
    )
    assert score_accessibility_fit(accessible, wheelchair)[0] == 7

    inaccessible = _build_location(accessibility=LocationAccessibility())
    score, reason = score_accessibility_fit(inaccessible, wheelchair)
    assert score == 0
    assert reason.startswith("Does not meet accessibility requirements")

    assert score_accessibility_fit(_build_location(), wheelchair)[0] == 5
    assert score_accessibility_fit(accessible, None)[0] == 5


def test_diversity_penalises_repeats():
    temple = _build_location()
    assert score_diversity(temple, [])[0] == 5
    assert score_diversity(temple, ["temple"])[0] == 2
    assert score_diversity(temple, ["temple", "museum", "temple"])[0] == -2
    assert score_diversity(temple, ["temple"] * 4)[0] == -5
    # only the last five count
    assert score_diversity(temple, ["temple", "temple", "park", "park", "park", "park", "park"])[0] == 5
    assert score_diversity(_build_location(category=None), ["temple"])[0] == 0


def test_score_is_sum_of_breakdown():
    location = _build_location(
        rating=4.5,
        review_count=800,
        coordinates=GION,
        min_budget="¥600",
        tags=["outdoor"],
    )
    criteria = _build_criteria(
        interests=["culture"],
        budget_level="budget",
        current_location=GION,
        recent_categories=["museum"],
        weather_forecast=WeatherForecast(
            date="2026-04-06", condition="rain", temperature=TemperatureRange(min=10, max=16)
        ),
        time_slot="morning",
        date="2026-04-06",
    )
    result = score_location(location, criteria)

    assert result.score == sum(result.breakdown.model_dump().values())
    assert result.breakdown.interest_match == 30
    assert result.breakdown.weather_fit == -5
    assert result.breakdown.time_optimization == 8
    assert len(result.reasoning) == 10
    assert result.location is location


def test_closed_hours_cost_time_points():
    location = _build_location(operating_hours=OperatingHours(periods=[OperatingPeriod(open="18:00", close="23:00")]))
    result = score_location(location, _build_criteria(time_slot="morning"))
    assert result.breakdown.time_optimization == 8 - 5
    assert result.reasoning[8].startswith("Insufficient opening hours")
