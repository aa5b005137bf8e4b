"""Ranked match assembly for pairs and three-person pods."""

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from itertools import combinations
from typing import TypeVar

import numpy as np

from podmatch.config import (
    GROUP_OVERLAP_TARGET,
    MAX_WORKERS,
    PAIR_OVERLAP_TARGET,
    POD_PRUNE_K,
)
from podmatch.matching.affinity import build_affinity
from podmatch.matching.filter import apply_filters
from podmatch.matching.overlap import Interval, compute_overlap, merge_slots
from podmatch.matching.scorer import score_group, score_pair
from podmatch.matching.weights import DEFAULT_WEIGHTS, ScoreWeights
from podmatch.schemas.match import AffinityContext, MatchPreview, MatchResponse
from podmatch.schemas.profile import AvailabilitySlot, Profile
from podmatch.schemas.request import CandidateRecord, MatchFilters, MatchMode
from podmatch.utils import InvalidMatchRequestError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

NO_FILTER_MATCHES_REASON = "No candidates matched the selected filters."
NO_OVERLAP_REASON = "No overlapping availability with matching candidates."
NO_AVAILABILITY_REASON = "Add at least one availability slot to find matches."


def _parallel_map(fn: Callable[[T], R], items: Sequence[T], max_workers: int) -> list[R]:
    """Map fn over items on a bounded thread pool, preserving order."""
    if len(items) <= 1 or max_workers <= 1:
        return [fn(item) for item in items]
    with ThreadPoolExecutor(max_workers=min(len(items), max_workers)) as executor:
        return list(executor.map(fn, items))


def validate_request(
    seeker: Profile,
    candidate_pool: Sequence[CandidateRecord],
    mode: MatchMode | str,
    limit: int | None,
) -> MatchMode:
    """Reject malformed requests before any scoring work.

    Returns:
        The parsed MatchMode.

    Raises:
        InvalidMatchRequestError: On missing seeker id, empty pool, unknown
            mode, or negative limit.
    """
    if not seeker.id:
        raise InvalidMatchRequestError("Seeker id is required")
    if not candidate_pool:
        raise InvalidMatchRequestError("Candidate pool is empty")
    try:
        parsed_mode = MatchMode(mode)
    except ValueError:
        raise InvalidMatchRequestError(f"Unknown match mode: {mode!r}") from None
    if limit is not None and limit < 0:
        raise InvalidMatchRequestError("Limit must be non-negative")
    return parsed_mode


def _sort_key(preview: MatchPreview) -> tuple:
    return (
        -preview.compatibility_score,
        -preview.overlap_minutes,
        tuple(sorted(preview.participant_ids)),
    )


def _pair_previews(
    seeker_slots: list[Interval],
    candidates: list[CandidateRecord],
    merged: dict[str, list[Interval]],
    affinity: AffinityContext,
    weights: ScoreWeights,
    target: float,
    max_workers: int,
) -> list[MatchPreview]:
    def build(record: CandidateRecord) -> MatchPreview | None:
        overlap = compute_overlap([seeker_slots, merged[record.profile.id]])
        if overlap.minutes <= 0:
            return None
        entry = affinity.get(record.profile.id)
        result = score_pair(overlap.minutes, entry, target, weights)
        return MatchPreview(
            participants=[record.profile.to_summary()],
            overlap_minutes=overlap.minutes,
            shared_availability=overlap.windows,
            compatibility_score=result.score,
            semantic_similarity=entry.semantic_similarity if entry else 0.0,
            shared_hobbies=result.shared_hobbies,
            shared_interests=result.shared_interests,
            cluster_label=affinity.cluster_label,
            summary=result.summary,
            breakdown=result.breakdown,
        )

    return [p for p in _parallel_map(build, candidates, max_workers) if p is not None]


def select_pod_candidates(
    seeker_slots: list[Interval],
    candidates: list[CandidateRecord],
    merged: dict[str, list[Interval]],
    prune_k: int,
    max_workers: int,
) -> list[CandidateRecord]:
    """Keep the top-K candidates by overlap with the seeker.

    Candidates with no seeker overlap can never join a pod and are dropped
    first. Ties are broken by candidate id for determinism.
    """
    minutes = _parallel_map(
        lambda record: compute_overlap([seeker_slots, merged[record.profile.id]]).minutes,
        candidates,
        max_workers,
    )
    ranked = sorted(
        ((m, record) for m, record in zip(minutes, candidates) if m > 0),
        key=lambda item: (-item[0], item[1].profile.id),
    )
    return [record for _, record in ranked[:prune_k]]


def mutual_overlap_matrix(
    candidates: list[CandidateRecord],
    merged: dict[str, list[Interval]],
) -> np.ndarray:
    """Symmetric matrix of pairwise overlap minutes between candidates."""
    size = len(candidates)
    matrix = np.zeros((size, size), dtype=np.int64)
    for i, j in combinations(range(size), 2):
        minutes = compute_overlap(
            [merged[candidates[i].profile.id], merged[candidates[j].profile.id]]
        ).minutes
        matrix[i, j] = matrix[j, i] = minutes
    return matrix


def _pod_previews(
    seeker_slots: list[Interval],
    candidates: list[CandidateRecord],
    merged: dict[str, list[Interval]],
    affinity: AffinityContext,
    weights: ScoreWeights,
    target: float,
    prune_k: int,
    max_workers: int,
) -> list[MatchPreview]:
    pool = select_pod_candidates(seeker_slots, candidates, merged, prune_k, max_workers)
    if len(pool) < 2:
        return []

    matrix = mutual_overlap_matrix(pool, merged)
    pairs = [(i, j) for i, j in combinations(range(len(pool)), 2) if matrix[i, j] > 0]
    logger.info(
        f"Pod enumeration: {len(pool)} candidates kept, "
        f"{len(pairs)} combinations with mutual overlap"
    )

    def build(pair: tuple[int, int]) -> MatchPreview | None:
        members = [pool[pair[0]], pool[pair[1]]]
        overlap = compute_overlap(
            [seeker_slots, *(merged[member.profile.id] for member in members)]
        )
        if overlap.minutes <= 0:
            return None
        profiles = [member.profile for member in members]
        result = score_group(overlap.minutes, profiles, affinity, target, weights)
        return MatchPreview(
            participants=[profile.to_summary() for profile in profiles],
            overlap_minutes=overlap.minutes,
            shared_availability=overlap.windows,
            compatibility_score=result.score,
            semantic_similarity=result.breakdown.affinity,
            shared_hobbies=result.shared_hobbies,
            shared_interests=result.shared_interests,
            cluster_label=affinity.cluster_label,
            summary=result.summary,
            breakdown=result.breakdown,
        )

    return [p for p in _parallel_map(build, pairs, max_workers) if p is not None]


def assemble_matches(
    seeker: Profile,
    availability: Sequence[AvailabilitySlot],
    candidate_pool: Sequence[CandidateRecord],
    mode: MatchMode | str = MatchMode.PAIR,
    filters: MatchFilters | None = None,
    limit: int | None = None,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
    pod_prune_k: int = POD_PRUNE_K,
    max_workers: int | None = None,
    pair_target: float = PAIR_OVERLAP_TARGET,
    group_target: float = GROUP_OVERLAP_TARGET,
) -> MatchResponse:
    """Filter, score and rank the candidate pool for one seeker.

    Args:
        seeker: Profile requesting matches.
        availability: Seeker's weekly free-time slots.
        candidate_pool: Candidates with their availability.
        mode: PAIR for 1:1 matches, POD_OF_THREE for seeker + 2 candidates.
        filters: Conjunctive candidate filters.
        limit: Maximum previews to return (None for all).
        weights: Scoring constants.
        pod_prune_k: Candidates kept before pod combinations are enumerated.
        max_workers: Thread pool bound (None uses MAX_WORKERS).
        pair_target: Minimum overlap target for pairs.
        group_target: Minimum overlap target for pods.

    Returns:
        MatchResponse sorted by score, then overlap, then participant ids.
        An empty result carries empty_reason instead of raising.

    Raises:
        InvalidMatchRequestError: If the request is malformed.
    """
    mode = validate_request(seeker, candidate_pool, mode, limit)
    workers = max_workers or MAX_WORKERS

    candidates = apply_filters(list(candidate_pool), seeker, filters)
    logger.info(f"{len(candidates)} of {len(candidate_pool)} candidates passed filters")
    if not candidates:
        return MatchResponse(empty_reason=NO_FILTER_MATCHES_REASON)

    seeker_slots = merge_slots(availability)
    if not seeker_slots:
        return MatchResponse(empty_reason=NO_AVAILABILITY_REASON)

    merged = {record.profile.id: merge_slots(record.availability) for record in candidates}
    affinity = build_affinity(seeker, [record.profile for record in candidates], weights)

    if mode is MatchMode.PAIR:
        previews = _pair_previews(
            seeker_slots, candidates, merged, affinity, weights, pair_target, workers
        )
    else:
        previews = _pod_previews(
            seeker_slots,
            candidates,
            merged,
            affinity,
            weights,
            group_target,
            pod_prune_k,
            workers,
        )

    if not previews:
        return MatchResponse(empty_reason=NO_OVERLAP_REASON)

    previews.sort(key=_sort_key)
    if limit is not None:
        previews = previews[:limit]

    logger.info(f"Assembled {len(previews)} {mode.value} previews")
    return MatchResponse(matches=previews)
