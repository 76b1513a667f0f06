from __future__ import annotations

from datetime import date
from typing import Any, Dict, Type

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError

from trip_engine.config import get_settings
from trip_engine.replacement import find_replacement_candidates
from trip_engine.schemas import ReplacementRequest, ScoreLocationRequest
from trip_engine.scoring.location import score_location
from trip_engine.scoring.reasons import format_recommendation_reason
from trip_engine.stores.locations import LocationStoreConfigError
from trip_engine.stores.weather import OpenWeatherClient

MAX_FORECAST_DAYS = 16

app = FastAPI(title="Trip Engine API")

# Origins come from TRIP_ENGINE_ALLOWED_ORIGINS; "*" when unset.
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _validate(model: Type[BaseModel], payload: Dict[str, Any]) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False)) from exc


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/api/replacements")
async def api_replacements(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    """Ranked swap candidates for one place activity."""
    request: ReplacementRequest = _validate(ReplacementRequest, payload)
    try:
        options = await find_replacement_candidates(
            request.activity,
            request.trip_data,
            request.all_activities,
            request.day_activities,
            request.day_index,
            request.max_candidates,
            weather_forecast=request.weather_forecast,
            date=request.date,
        )
    except LocationStoreConfigError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return options.model_dump(by_alias=True, exclude_none=True)


@app.post("/api/locations/score")
async def api_score_location(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    request: ScoreLocationRequest = _validate(ScoreLocationRequest, payload)
    result = score_location(request.location, request.criteria)
    reason = format_recommendation_reason(result.breakdown, request.location)
    body = result.model_dump(by_alias=True, exclude_none=True)
    body["recommendation"] = reason.model_dump(by_alias=True, exclude_none=True)
    return body


@app.get("/api/weather/{city_id}")
async def api_weather(city_id: str, start: date, end: date) -> Dict[str, Any]:
    """Daily forecasts for a city, keyed by ISO date."""
    if end < start:
        raise HTTPException(status_code=422, detail="end must not be before start")
    if (end - start).days >= MAX_FORECAST_DAYS:
        raise HTTPException(status_code=422, detail=f"range is limited to {MAX_FORECAST_DAYS} days")
    forecasts = await OpenWeatherClient.from_settings().fetch_forecast(city_id, start, end)
    return {key: forecast.model_dump(by_alias=True, exclude_none=True) for key, forecast in forecasts.items()}
