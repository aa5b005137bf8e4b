"""Service layer for podmatch request handling."""

from podmatch.services.match_service import (
    find_matches,
    find_matches_for_seeker,
    plan_hangout,
    search_hobbies,
    suggest_activities,
)

__all__ = [
    "find_matches",
    "find_matches_for_seeker",
    "plan_hangout",
    "search_hobbies",
    "suggest_activities",
]
