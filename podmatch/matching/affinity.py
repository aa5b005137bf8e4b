"""Content affinity between a seeker and a candidate pool.

Each candidate gets explicit overlaps (shared hobbies, shared interests, same
major) plus a semantic similarity blended from token-vector cosine and the
shared-tag counts. A fresh context is built for every request.
"""

import logging
from collections.abc import Iterable, Sequence

from podmatch.config import MAX_HIGHLIGHT_LENGTH
from podmatch.matching.similarity import cosine
from podmatch.matching.vectorizer import STOP_WORDS, vectorize
from podmatch.matching.weights import DEFAULT_WEIGHTS, ScoreWeights
from podmatch.schemas.match import (
    PROFILE_MATCH,
    SCHEDULE_MATCH,
    AffinityContext,
    AffinityEntry,
)
from podmatch.schemas.profile import Profile

logger = logging.getLogger(__name__)


def intersect_lists(source: Iterable[str], target: Iterable[str]) -> list[str]:
    """Entries of target also in source, compared case-insensitively.

    Keeps target's casing and order; the first spelling of a duplicate wins.
    """
    normalized_source = {value.strip().lower() for value in source if value.strip()}
    if not normalized_source:
        return []
    matches: dict[str, str] = {}
    for value in target:
        key = value.strip().lower()
        if key in normalized_source and key not in matches:
            matches[key] = value.strip()
    return list(matches.values())


def _truncate(text: str, limit: int = MAX_HIGHLIGHT_LENGTH) -> str:
    if len(text) > limit:
        return f"{text[:limit - 1]}…"
    return text


def build_highlight(
    seeker: Profile,
    candidate: Profile,
    shared_hobbies: Sequence[str],
    shared_interests: Sequence[str],
) -> str | None:
    """Pick the single most telling reason to show for a candidate."""
    if shared_hobbies:
        return f"Shared hobby: {shared_hobbies[0]}"
    if shared_interests:
        return f"Overlap on {', '.join(shared_interests[:2])}"
    for text in (candidate.vibe_check, candidate.fun_fact, candidate.bio):
        if text:
            return _truncate(text)
    if candidate.favorite_spot and seeker.favorite_spot == candidate.favorite_spot:
        return f"Both love {candidate.favorite_spot}"
    if candidate.favorite_spot:
        return f"Favorite spot: {candidate.favorite_spot}"
    return None


def _seed_entry(seeker: Profile, candidate: Profile) -> AffinityEntry:
    shared_hobbies = intersect_lists(seeker.hobbies, candidate.hobbies)
    shared_interests = intersect_lists(seeker.interests, candidate.interests)
    return AffinityEntry(
        shared_hobbies=shared_hobbies,
        shared_interests=shared_interests,
        same_major=bool(seeker.major and candidate.major and seeker.major == candidate.major),
        highlight=build_highlight(seeker, candidate, shared_hobbies, shared_interests),
    )


def blend_similarity(
    text_similarity: float,
    hobby_count: int,
    interest_count: int,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> float:
    """Blend cosine similarity with shared-tag counts, rounded to 3 places.

    The result is never below the raw text similarity.
    """
    list_overlap = min(
        weights.list_overlap_cap,
        hobby_count * weights.hobby_list_weight + interest_count * weights.interest_list_weight,
    )
    combined = max(
        text_similarity,
        min(1.0, text_similarity * weights.text_weight + list_overlap),
    )
    return round(combined, 3) if combined > 0 else 0.0


def build_affinity(
    seeker: Profile,
    candidates: Sequence[Profile],
    weights: ScoreWeights = DEFAULT_WEIGHTS,
    stop_words: frozenset[str] = STOP_WORDS,
) -> AffinityContext:
    """Compute affinity entries for every candidate in the pool.

    Args:
        seeker: Profile requesting matches.
        candidates: Pool to evaluate (the seeker must already be excluded).
        weights: Blend constants for semantic similarity.
        stop_words: Stop words passed through to the vectorizer.

    Returns:
        AffinityContext keyed by candidate id. When the seeker has no
        descriptive content every similarity stays 0 and the label is
        "Schedule Match".
    """
    entries: dict[str, AffinityEntry] = {}
    for candidate in candidates:
        if candidate.id is None:
            continue
        entries[candidate.id] = _seed_entry(seeker, candidate)

    seeker_vector = vectorize(seeker, stop_words)
    if seeker_vector is None:
        logger.info("Seeker profile has no descriptive data; semantic similarity stays at 0")
        return AffinityContext(entries=entries, cluster_label=SCHEDULE_MATCH)

    assignments = 0
    for candidate in candidates:
        entry = entries.get(candidate.id)
        if entry is None:
            continue
        candidate_vector = vectorize(candidate, stop_words)
        if candidate_vector is None:
            continue

        entry.semantic_similarity = blend_similarity(
            cosine(seeker_vector, candidate_vector),
            len(entry.shared_hobbies),
            len(entry.shared_interests),
            weights,
        )
        entry.highlight = (
            build_highlight(seeker, candidate, entry.shared_hobbies, entry.shared_interests)
            or entry.highlight
        )
        if entry.semantic_similarity > 0:
            assignments += 1

    label = PROFILE_MATCH if assignments > 0 else SCHEDULE_MATCH
    for entry in entries.values():
        entry.cluster_label = label

    logger.info(
        f"Semantic similarity computed for {len(candidates)} candidates "
        f"({assignments} nonzero)"
    )
    return AffinityContext(
        entries=entries,
        cluster_label=label,
        strategy="profile-tokens",
        assignments=assignments,
    )
