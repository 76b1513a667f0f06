"""Group composition scoring (party type, size, children)."""
from __future__ import annotations

from typing import Dict, FrozenSet, List, Optional

from trip_engine.schemas import GroupInfo, Location, ScoreAdjustment

# Tunable UX cap on the combined adjustment.
GROUP_SCORE_MIN = -5
GROUP_SCORE_MAX = 10

YOUNG_CHILD_MAX_AGE = 10
TEEN_MIN_AGE = 13

GROUP_PREFERENCES: Dict[str, Dict[str, FrozenSet[str]]] = {
    "solo": {
        "preferred": frozenset({"museum", "shrine", "temple", "viewpoint", "park"}),
        "avoided": frozenset({"bar", "entertainment"}),
    },
    "couple": {
        "preferred": frozenset({"restaurant", "park", "garden", "viewpoint", "shrine"}),
        "avoided": frozenset(),
    },
    "family": {
        "preferred": frozenset({"park", "museum", "garden", "entertainment"}),
        "avoided": frozenset({"bar", "shrine"}),
    },
    "friends": {
        "preferred": frozenset({"restaurant", "bar", "entertainment", "shopping", "market"}),
        "avoided": frozenset(),
    },
    "business": {
        "preferred": frozenset({"restaurant", "landmark", "museum"}),
        "avoided": frozenset({"bar", "entertainment"}),
    },
}

_LARGE_GROUP_FRIENDLY = frozenset({"restaurant", "park", "market", "shopping", "entertainment"})
_SMALL_GROUP_PREFERRED = frozenset({"shrine", "temple", "museum"})
_CHILD_FRIENDLY = frozenset({"park", "garden", "museum", "entertainment", "aquarium", "zoo"})
_ADULT_FOCUSED = frozenset({"shrine", "temple", "bar"})


def _category(location: Location) -> str:
    return (location.category or "").lower()


def score_group_type_fit(location: Location, group_type: str) -> ScoreAdjustment:
    category = _category(location)
    preferences = GROUP_PREFERENCES.get(group_type)
    if preferences is None:
        return ScoreAdjustment(score_adjustment=0, reasoning=f"Unknown group type {group_type}")
    if category in preferences["preferred"]:
        return ScoreAdjustment(score_adjustment=6, reasoning=f"{category} is ideal for {group_type} travelers")
    if category in preferences["avoided"]:
        return ScoreAdjustment(
            score_adjustment=-4, reasoning=f"{category} may not be ideal for {group_type} travelers"
        )
    return ScoreAdjustment(score_adjustment=0, reasoning=f"{category} is suitable for {group_type} travelers")


def score_group_size_fit(location: Location, size: int) -> ScoreAdjustment:
    if size <= 1:
        return ScoreAdjustment(score_adjustment=0, reasoning="Solo traveler - no group size adjustment")

    category = _category(location)
    flag = location.good_for_groups

    if size >= 6:
        if category in _LARGE_GROUP_FRIENDLY:
            return ScoreAdjustment(
                score_adjustment=5, reasoning=f"{category} is well-suited for large groups ({size} people)"
            )
        if category in _SMALL_GROUP_PREFERRED:
            return ScoreAdjustment(
                score_adjustment=-3, reasoning=f"{category} may be challenging for large groups ({size} people)"
            )
    elif size >= 4:
        if flag is True:
            return ScoreAdjustment(score_adjustment=4, reasoning=f"Listed as good for groups ({size} people)")
        if flag is False:
            return ScoreAdjustment(score_adjustment=-4, reasoning=f"Listed as not suited to groups ({size} people)")
        if category in _LARGE_GROUP_FRIENDLY:
            return ScoreAdjustment(
                score_adjustment=2, reasoning=f"{category} works well for medium groups ({size} people)"
            )
    else:
        if flag is True:
            return ScoreAdjustment(score_adjustment=2, reasoning=f"Listed as good for groups ({size} people)")
        if flag is False:
            return ScoreAdjustment(score_adjustment=-1, reasoning=f"Listed as not suited to groups ({size} people)")

    return ScoreAdjustment(score_adjustment=0, reasoning=f"Group size ({size}) is suitable for {category}")


def score_children_fit(location: Location, children_ages: List[int]) -> ScoreAdjustment:
    if not children_ages:
        return ScoreAdjustment(score_adjustment=0, reasoning="No children in group")

    category = _category(location)
    avg_age = sum(children_ages) / len(children_ages)
    young = avg_age <= YOUNG_CHILD_MAX_AGE
    teens = avg_age >= TEEN_MIN_AGE
    flag = location.good_for_children

    if flag is True:
        delta = 6 if young else 2
        return ScoreAdjustment(
            score_adjustment=delta, reasoning=f"Listed as good for children (avg age {avg_age:.1f})"
        )
    if flag is False:
        delta = -5 if young else -2
        return ScoreAdjustment(
            score_adjustment=delta, reasoning=f"Listed as not suited to children (avg age {avg_age:.1f})"
        )

    if young:
        if category in _CHILD_FRIENDLY:
            return ScoreAdjustment(
                score_adjustment=8,
                reasoning=f"{category} is excellent for young children (avg age {avg_age:.1f})",
            )
        if category in _ADULT_FOCUSED:
            return ScoreAdjustment(
                score_adjustment=-5,
                reasoning=f"{category} may not be engaging for young children (avg age {avg_age:.1f})",
            )
    elif category in _CHILD_FRIENDLY:
        delta = 3 if teens else 5
        audience = "teenagers" if teens else "older children"
        return ScoreAdjustment(
            score_adjustment=delta, reasoning=f"{category} is suitable for {audience} (avg age {avg_age:.1f})"
        )

    return ScoreAdjustment(
        score_adjustment=0, reasoning=f"{category} is appropriate for children (avg age {avg_age:.1f})"
    )


def score_group_fit(location: Location, group: Optional[GroupInfo] = None) -> ScoreAdjustment:
    """Sum the type, size and children signals, then clamp to the group range."""
    if group is None:
        return ScoreAdjustment(score_adjustment=0, reasoning="No group information provided")

    parts: List[ScoreAdjustment] = []
    if group.size is not None and group.size > 0:
        parts.append(score_group_size_fit(location, group.size))
    if group.type:
        parts.append(score_group_type_fit(location, group.type))
    if group.children_ages:
        parts.append(score_children_fit(location, group.children_ages))

    total = sum(part.score_adjustment for part in parts)
    capped = max(GROUP_SCORE_MIN, min(GROUP_SCORE_MAX, total))
    reasoning = "; ".join(part.reasoning for part in parts) if parts else "No group-specific adjustments"
    return ScoreAdjustment(score_adjustment=capped, reasoning=reasoning)
