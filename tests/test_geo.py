import math

import pytest

from trip_engine.geo import (
    CITY_CENTERS,
    DEFAULT_INTERCITY_MINUTES,
    distance_km,
    estimate_travel_minutes,
    route_travel_minutes,
    travel_minutes,
)
from trip_engine.schemas import Coordinates

KYOTO_STATION = Coordinates(lat=34.9858, lng=135.7588)
FUSHIMI_INARI = Coordinates(lat=34.9671, lng=135.7727)


def test_distance_is_symmetric():
    pairs = [
        (KYOTO_STATION, FUSHIMI_INARI),
        (CITY_CENTERS["tokyo"], CITY_CENTERS["osaka"]),
        (Coordinates(lat=-33.9, lng=151.2), Coordinates(lat=51.5, lng=-0.12)),
    ]
    for a, b in pairs:
        assert distance_km(a, b) == pytest.approx(distance_km(b, a))


def test_distance_to_self_is_zero():
    for point in CITY_CENTERS.values():
        assert distance_km(point, point) == 0


def test_distance_between_cities_is_plausible():
    km = distance_km(CITY_CENTERS["tokyo"], CITY_CENTERS["osaka"])
    assert 380 < km < 410


@pytest.mark.parametrize("mode, buffer", [("walk", 5), ("transit", 10), ("taxi", 5)])
def test_zero_distance_costs_only_the_buffer(mode, buffer):
    assert estimate_travel_minutes(0, mode) == buffer


def test_travel_minutes_round_up_before_buffer():
    # 1 km at 4 km/h is 15 minutes; 1.01 km tips over to 16
    assert estimate_travel_minutes(1, "walk") == 20
    assert estimate_travel_minutes(1.01, "walk") == 21
    assert estimate_travel_minutes(10, "transit") == 40


def test_nan_distance_propagates():
    assert math.isnan(estimate_travel_minutes(float("nan"), "taxi"))


def test_unknown_mode_is_rejected():
    with pytest.raises(ValueError):
        estimate_travel_minutes(1, "bicycle")


def test_city_travel_table():
    assert travel_minutes("kyoto", "osaka") == 30
    assert travel_minutes("kyoto", "kyoto") == 0
    assert travel_minutes("Osaka", "KYOTO") == 30
    assert travel_minutes("tokyo", "kyoto") == travel_minutes("kyoto", "tokyo") == 135


def test_unknown_city_pair_is_none():
    assert travel_minutes("kyoto", "sapporo") is None


def test_route_uses_default_for_unknown_legs():
    assert route_travel_minutes(["tokyo", "kyoto", "osaka"]) == 165
    assert route_travel_minutes(["kyoto", "sapporo"]) == DEFAULT_INTERCITY_MINUTES
    assert route_travel_minutes(["kyoto"]) == 0
