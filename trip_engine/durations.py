"""Fallback visit durations by location category."""
from __future__ import annotations

import re
from typing import Dict, Optional

DEFAULT_DURATION = 90

CATEGORY_DEFAULT_DURATIONS: Dict[str, int] = {
    "shrine": 60,
    "temple": 90,
    "landmark": 120,
    "museum": 120,
    "historic": 90,
    "park": 90,
    "garden": 60,
    "viewpoint": 30,
    "market": 90,
    "restaurant": 60,
    "bar": 90,
    "entertainment": 120,
    "onsen": 90,
    # legacy generic categories
    "culture": 90,
    "nature": 120,
    "shopping": 90,
    "view": 30,
    # infrastructure, not visits
    "accommodation": 0,
    "transportation": 0,
}

_HOURS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:hour|hours|hr|hrs)", re.IGNORECASE)


def category_default_duration(category: Optional[str]) -> int:
    return CATEGORY_DEFAULT_DURATIONS.get((category or "").lower(), DEFAULT_DURATION)


def parse_duration_text(text: Optional[str]) -> Optional[int]:
    """Minutes from free text like ``"1.5 hours"``; ``None`` if no hour figure."""
    if not text:
        return None
    match = _HOURS_PATTERN.search(text)
    if not match:
        return None
    return round(float(match.group(1)) * 60)
