"""Environment-backed settings for the engine and its HTTP surface."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


def _split_origins(raw: str | None) -> List[str]:
    origins = [origin.strip() for origin in (raw or "*").split(",") if origin.strip()]
    return origins or ["*"]


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    openweather_api_key: Optional[str] = None
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    http_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_key=os.getenv("SUPABASE_ANON_KEY") or None,
            openweather_api_key=os.getenv("OPENWEATHER_API_KEY") or None,
            allowed_origins=_split_origins(os.getenv("TRIP_ENGINE_ALLOWED_ORIGINS")),
            http_timeout=_float_env("TRIP_ENGINE_HTTP_TIMEOUT", 10.0),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings are read once per process; tests call ``get_settings.cache_clear()``."""
    return Settings.from_env()
