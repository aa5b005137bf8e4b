"""Deterministic candidate filters for matching."""

import logging

from podmatch.schemas.profile import Profile
from podmatch.schemas.request import CandidateRecord, MatchFilters

logger = logging.getLogger(__name__)


def _lowered(values: list[str]) -> set[str]:
    return {value.strip().lower() for value in values if value.strip()}


def exclude_seeker(
    candidates: list[CandidateRecord],
    seeker: Profile,
) -> list[CandidateRecord]:
    """Remove the seeker (and records with no id) from the pool.

    Args:
        candidates: Candidate pool.
        seeker: Profile requesting matches.

    Returns:
        Candidates other than the seeker.
    """
    results = []
    for record in candidates:
        if record.profile.id is None:
            logger.warning(f"Skipping candidate without an id: {record.profile.name!r}")
            continue
        if record.profile.id == seeker.id:
            continue
        results.append(record)
    return results


def filter_by_majors(
    candidates: list[CandidateRecord],
    majors: list[str],
) -> list[CandidateRecord]:
    """Keep candidates whose major is one of the requested majors.

    Args:
        candidates: Candidate pool.
        majors: Accepted majors (empty means no filter).

    Returns:
        Candidates with a matching major.
    """
    wanted = _lowered(majors)
    if not wanted:
        return candidates
    return [
        record
        for record in candidates
        if record.profile.major and record.profile.major.lower() in wanted
    ]


def filter_by_classes(
    candidates: list[CandidateRecord],
    classes: list[str],
) -> list[CandidateRecord]:
    """Keep candidates taking at least one of the requested classes."""
    wanted = _lowered(classes)
    if not wanted:
        return candidates
    return [record for record in candidates if _lowered(record.profile.classes) & wanted]


def filter_by_interests(
    candidates: list[CandidateRecord],
    interests: list[str],
) -> list[CandidateRecord]:
    """Keep candidates listing at least one of the requested interests."""
    wanted = _lowered(interests)
    if not wanted:
        return candidates
    return [record for record in candidates if _lowered(record.profile.interests) & wanted]


def filter_by_hobby_query(
    candidates: list[CandidateRecord],
    hobby_query: str | None,
) -> list[CandidateRecord]:
    """Keep candidates with a hobby containing the query (case-insensitive).

    Args:
        candidates: Candidate pool.
        hobby_query: Substring to look for (None or blank means no filter).

    Returns:
        Candidates with at least one matching hobby.
    """
    if not hobby_query or not hobby_query.strip():
        return candidates

    term = hobby_query.strip().lower()
    return [
        record
        for record in candidates
        if any(term in hobby.lower() for hobby in record.profile.hobbies)
    ]


def filter_by_same_course(
    candidates: list[CandidateRecord],
    seeker: Profile,
    require_same_course: bool,
) -> list[CandidateRecord]:
    """Keep candidates sharing at least one class with the seeker."""
    if not require_same_course:
        return candidates

    seeker_classes = _lowered(seeker.classes)
    return [
        record
        for record in candidates
        if _lowered(record.profile.classes) & seeker_classes
    ]


def apply_filters(
    candidates: list[CandidateRecord],
    seeker: Profile,
    filters: MatchFilters | None = None,
) -> list[CandidateRecord]:
    """Exclude the seeker and apply every filter conjunctively.

    Args:
        candidates: Candidate pool.
        seeker: Profile requesting matches.
        filters: Requested filters (None applies none).

    Returns:
        Candidates passing all filters, in their original order.
    """
    filters = filters or MatchFilters()

    candidates = exclude_seeker(candidates, seeker)
    candidates = filter_by_majors(candidates, filters.majors)
    candidates = filter_by_classes(candidates, filters.classes)
    candidates = filter_by_interests(candidates, filters.interests)
    candidates = filter_by_hobby_query(candidates, filters.hobby_query)
    candidates = filter_by_same_course(candidates, seeker, filters.require_same_course)

    return candidates
