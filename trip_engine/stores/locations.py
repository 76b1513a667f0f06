"""Location catalogue access.

``SupabaseLocationStore`` talks to the ``locations`` table through the
PostgREST endpoint Supabase exposes; ``InMemoryLocationStore`` applies the same
filters to a list and backs tests and offline runs.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

import httpx

from trip_engine.config import Settings, get_settings
from trip_engine.log import get_logger
from trip_engine.schemas import Location

logger = get_logger(__name__)

DEFAULT_CANDIDATE_LIMIT = 100
PERMANENTLY_CLOSED = "PERMANENTLY_CLOSED"

LOCATION_COLUMNS = ",".join(
    [
        "id",
        "name",
        "region",
        "city",
        "prefecture",
        "neighborhood",
        "category",
        "coordinates",
        "operating_hours",
        "recommended_visit",
        "estimated_duration",
        "place_id",
        "rating",
        "review_count",
        "min_budget",
        "price_level",
        "business_status",
        "accessibility_options",
        "dietary_options",
        "meal_options",
        "good_for_children",
        "good_for_groups",
    ]
)


class LocationStoreConfigError(RuntimeError):
    """Raised when the remote store is used without its URL or key."""


class LocationStore(Protocol):
    async def fetch_locations_by_city(
        self,
        city: str,
        *,
        limit: int = DEFAULT_CANDIDATE_LIMIT,
        exclude_ids: Iterable[str] = (),
        require_place_id: bool = True,
    ) -> List[Location]:
        ...

    async def get_location(self, location_id: str) -> Optional[Location]:
        ...

    async def get_locations(self, location_ids: Iterable[str]) -> Dict[str, Location]:
        ...


class InMemoryLocationStore:
    def __init__(self, locations: Iterable[Location] = ()):
        self._locations: List[Location] = list(locations)
        self._by_id: Dict[str, Location] = {loc.id: loc for loc in self._locations}

    async def fetch_locations_by_city(
        self,
        city: str,
        *,
        limit: int = DEFAULT_CANDIDATE_LIMIT,
        exclude_ids: Iterable[str] = (),
        require_place_id: bool = True,
    ) -> List[Location]:
        wanted = city.strip().lower()
        excluded = set(exclude_ids)
        matches: List[Location] = []
        for location in self._locations:
            if location.city.lower() != wanted:
                continue
            if location.id in excluded:
                continue
            if require_place_id and not location.place_id:
                continue
            if location.business_status == PERMANENTLY_CLOSED:
                continue
            matches.append(location)
            if len(matches) >= limit:
                break
        return matches

    async def get_location(self, location_id: str) -> Optional[Location]:
        return self._by_id.get(location_id)

    async def get_locations(self, location_ids: Iterable[str]) -> Dict[str, Location]:
        return {location_id: self._by_id[location_id] for location_id in location_ids if location_id in self._by_id}


class SupabaseLocationStore:
    """Read-only client for the ``locations`` table."""

    TABLE = "locations"

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not url or not api_key:
            raise LocationStoreConfigError("SUPABASE_URL and SUPABASE_ANON_KEY must be configured")
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{self.TABLE}"
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabaseLocationStore":
        return cls(settings.supabase_url, settings.supabase_key, timeout=settings.http_timeout)

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    async def _select(self, params: Sequence[Tuple[str, str]]) -> List[Dict[str, Any]]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(self.endpoint, params=list(params), headers=self._headers())
            response.raise_for_status()
            data = response.json()
        return data if isinstance(data, list) else []

    async def fetch_locations_by_city(
        self,
        city: str,
        *,
        limit: int = DEFAULT_CANDIDATE_LIMIT,
        exclude_ids: Iterable[str] = (),
        require_place_id: bool = True,
    ) -> List[Location]:
        params = city_query_params(city, limit=limit, exclude_ids=exclude_ids, require_place_id=require_place_id)
        try:
            rows = await self._select(params)
        except httpx.HTTPError:
            logger.warning("Location query failed for city %s", city, exc_info=True)
            raise
        logger.info("Fetched %d locations for city %s", len(rows), city)
        return [row_to_location(row) for row in rows]

    async def get_location(self, location_id: str) -> Optional[Location]:
        params = [("select", LOCATION_COLUMNS), ("id", f"eq.{location_id}"), ("limit", "1")]
        try:
            rows = await self._select(params)
        except httpx.HTTPError:
            logger.warning("Location lookup failed for %s", location_id, exc_info=True)
            raise
        return row_to_location(rows[0]) if rows else None

    async def get_locations(self, location_ids: Iterable[str]) -> Dict[str, Location]:
        """Resolve several ids with a single ``id=in.(...)`` query."""
        wanted = list(dict.fromkeys(location_id for location_id in location_ids if location_id))
        if not wanted:
            return {}
        params = [("select", LOCATION_COLUMNS), ("id", f"in.({','.join(wanted)})"), ("limit", str(len(wanted)))]
        try:
            rows = await self._select(params)
        except httpx.HTTPError:
            logger.warning("Location lookup failed for %d ids", len(wanted), exc_info=True)
            raise
        locations = [row_to_location(row) for row in rows]
        return {location.id: location for location in locations}


def city_query_params(
    city: str,
    *,
    limit: int = DEFAULT_CANDIDATE_LIMIT,
    exclude_ids: Iterable[str] = (),
    require_place_id: bool = True,
) -> List[Tuple[str, str]]:
    """PostgREST query string for the city candidate lookup."""
    params: List[Tuple[str, str]] = [
        ("select", LOCATION_COLUMNS),
        ("city", f"ilike.{city}"),
    ]
    if require_place_id:
        params.append(("place_id", "not.is.null"))
        params.append(("place_id", "neq."))
    # null status counts as open
    params.append(("or", f"(business_status.is.null,business_status.neq.{PERMANENTLY_CLOSED})"))
    excluded = [location_id for location_id in exclude_ids if location_id]
    if excluded:
        params.append(("id", f"not.in.({','.join(excluded)})"))
    params.append(("limit", str(limit)))
    return params


def row_to_location(row: Dict[str, Any]) -> Location:
    """Map a snake_case ``locations`` row onto ``Location``."""
    data = dict(row)
    options = data.pop("accessibility_options", None)
    if isinstance(options, dict):
        entrance = options.get("wheelchairAccessibleEntrance", options.get("wheelchair_accessible_entrance"))
        elevator = options.get("wheelchairAccessibleElevator", options.get("elevator_available"))
        data["accessibility"] = {
            "wheelchair_accessible": bool(entrance),
            "elevator_available": bool(elevator),
            "step_free_access": bool(options.get("stepFreeAccess", options.get("step_free_access", entrance))),
        }
    for key in ("city", "region"):
        if data.get(key) is None:
            data[key] = ""
    return Location.model_validate(data)


def get_default_store(settings: Optional[Settings] = None) -> LocationStore:
    """Supabase-backed store built from the environment."""
    return SupabaseLocationStore.from_settings(settings or get_settings())
