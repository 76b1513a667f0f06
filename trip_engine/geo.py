"""Distance and travel-time helpers."""
from __future__ import annotations

import math
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from trip_engine.schemas import Coordinates

EARTH_RADIUS_KM = 6371.0

# mode -> (average speed km/h, fixed buffer minutes)
_MODE_PROFILES: Dict[str, Tuple[float, int]] = {
    "walk": (4.0, 5),
    "transit": (20.0, 10),
    "taxi": (30.0, 5),
}

DEFAULT_INTERCITY_MINUTES = 120

CITY_CENTERS: Dict[str, Coordinates] = {
    "kyoto": Coordinates(lat=35.0116, lng=135.7681),
    "osaka": Coordinates(lat=34.6937, lng=135.5023),
    "nara": Coordinates(lat=34.6851, lng=135.8048),
    "kobe": Coordinates(lat=34.6901, lng=135.1955),
    "tokyo": Coordinates(lat=35.6762, lng=139.6503),
    "yokohama": Coordinates(lat=35.4437, lng=139.638),
    "kamakura": Coordinates(lat=35.3192, lng=139.5467),
    "nikko": Coordinates(lat=36.7199, lng=139.6982),
    "hakone": Coordinates(lat=35.2324, lng=139.1069),
}

# Door-to-door minutes between city centres by the usual rail option.
_CITY_TRAVEL_MINUTES: Dict[FrozenSet[str], int] = {
    frozenset(("kyoto", "osaka")): 30,
    frozenset(("kyoto", "nara")): 45,
    frozenset(("kyoto", "kobe")): 50,
    frozenset(("osaka", "nara")): 40,
    frozenset(("osaka", "kobe")): 25,
    frozenset(("nara", "kobe")): 75,
    frozenset(("tokyo", "yokohama")): 30,
    frozenset(("tokyo", "kamakura")): 60,
    frozenset(("tokyo", "nikko")): 120,
    frozenset(("tokyo", "hakone")): 90,
    frozenset(("yokohama", "kamakura")): 30,
    frozenset(("tokyo", "kyoto")): 135,
    frozenset(("tokyo", "osaka")): 150,
    frozenset(("tokyo", "nara")): 180,
    frozenset(("tokyo", "kobe")): 165,
    frozenset(("yokohama", "kyoto")): 125,
    frozenset(("yokohama", "osaka")): 140,
}


def distance_km(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two coordinates (haversine)."""
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lat = lat2 - lat1
    d_lng = math.radians(b.lng - a.lng)
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def estimate_travel_minutes(distance: float, mode: str = "walk") -> int:
    """Minutes to cover ``distance`` km by ``mode``, including the mode's buffer.

    A NaN distance comes back as NaN rather than raising; validating
    coordinates is the caller's job.
    """
    try:
        speed_kmh, buffer_min = _MODE_PROFILES[mode]
    except KeyError:
        raise ValueError(f"Unknown travel mode: {mode!r}") from None
    minutes = distance / speed_kmh * 60
    if math.isnan(minutes):
        return minutes  # type: ignore[return-value]
    return math.ceil(minutes) + buffer_min


def travel_minutes(from_city: str, to_city: str) -> Optional[int]:
    """Static intercity lookup; ``None`` when the pair isn't tabulated."""
    a = (from_city or "").strip().lower()
    b = (to_city or "").strip().lower()
    if a and a == b:
        return 0
    return _CITY_TRAVEL_MINUTES.get(frozenset((a, b)))


def route_travel_minutes(cities: Iterable[str]) -> int:
    """Total transfer time for visiting ``cities`` in order."""
    ordered: List[str] = [c for c in cities if c]
    total = 0
    for frm, to in zip(ordered[:-1], ordered[1:]):
        minutes = travel_minutes(frm, to)
        total += DEFAULT_INTERCITY_MINUTES if minutes is None else minutes
    return total
