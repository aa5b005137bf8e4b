"""Compatibility scoring for pairs and pods."""

import math
from collections.abc import Iterable, Sequence

from podmatch.config import GROUP_OVERLAP_TARGET, PAIR_OVERLAP_TARGET
from podmatch.matching.weights import DEFAULT_WEIGHTS, ScoreWeights
from podmatch.schemas.match import (
    AffinityContext,
    AffinityEntry,
    CompatibilityBreakdown,
    CompatibilityResult,
)
from podmatch.schemas.profile import Profile


def schedule_component(
    overlap_minutes: float,
    minimum_overlap_target: float,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> float:
    """Saturating schedule credit in [0, 1].

    Overlap beyond ratio_cap times the target earns nothing extra.
    """
    target = max(minimum_overlap_target, 1)
    ratio = min(max(overlap_minutes, 0) / target, weights.ratio_cap)
    return min(ratio / weights.ratio_cap, 1.0)


def _finalize(base: float, boost: float, weights: ScoreWeights) -> int:
    # Half-up rounding: 84.5 scores 85.
    return max(0, min(weights.ceiling, math.floor(base + boost + 0.5)))


def build_summary(
    overlap_minutes: float,
    highlight: str | None = None,
    shared_hobbies: Sequence[str] = (),
    shared_interests: Sequence[str] = (),
) -> str:
    """One-line explanation: shared minutes plus the strongest reason."""
    summary = f"{round(overlap_minutes)} shared minutes available"
    if highlight:
        return f"{summary} · {highlight}"
    if shared_hobbies:
        return f"{summary} · Shared hobby: {shared_hobbies[0]}"
    if shared_interests:
        return f"{summary} · Shared interest: {shared_interests[0]}"
    return summary


def score_pair(
    overlap_minutes: float,
    affinity: AffinityEntry | None,
    minimum_overlap_target: float = PAIR_OVERLAP_TARGET,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> CompatibilityResult:
    """Score a seeker/candidate pair.

    Args:
        overlap_minutes: Minutes both are free together.
        affinity: Affinity entry for the candidate (None counts as no affinity).
        minimum_overlap_target: Overlap that earns half the schedule credit.
        weights: Scoring constants.

    Returns:
        CompatibilityResult with score in [0, 99].
    """
    affinity = affinity or AffinityEntry()
    schedule = schedule_component(overlap_minutes, minimum_overlap_target, weights)

    semantic = min(affinity.semantic_similarity, 1.0)
    hobby_count = len(affinity.shared_hobbies)
    interest_count = len(affinity.shared_interests)
    major_bonus = weights.major_bonus if affinity.same_major else 0.0

    base = weights.base + schedule * weights.schedule_span
    boost = (
        semantic
        + min(hobby_count * weights.hobby_step, weights.hobby_cap)
        + min(interest_count * weights.interest_step, weights.interest_cap)
        + major_bonus
    ) * weights.affinity_scale

    return CompatibilityResult(
        score=_finalize(base, boost, weights),
        breakdown=CompatibilityBreakdown(
            schedule=round(schedule, 3),
            affinity=round(semantic, 3),
            hobbies=hobby_count,
            interests=interest_count,
            major_bonus=round(major_bonus, 3),
        ),
        summary=build_summary(
            overlap_minutes,
            affinity.highlight,
            affinity.shared_hobbies,
            affinity.shared_interests,
        ),
        highlight=affinity.highlight,
        shared_hobbies=list(affinity.shared_hobbies),
        shared_interests=list(affinity.shared_interests),
    )


def _dedupe(values: Iterable[str]) -> list[str]:
    seen: dict[str, str] = {}
    for value in values:
        key = value.strip().lower()
        if key not in seen:
            seen[key] = value.strip()
    return list(seen.values())



def score_group(
    overlap_minutes: float,
    participants: Sequence[Profile],
    affinity_context: AffinityContext,
    minimum_overlap_target: float = GROUP_OVERLAP_TARGET,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> CompatibilityResult:
    """Score a pod of the seeker plus several candidates.

    Similarity is averaged only over participants that have an affinity entry,
    so one thin profile does not drag a pod down. Shared hobbies/interests are
    pooled across participants. Pods get no major bonus.
    """
    schedule = schedule_component(overlap_minutes, minimum_overlap_target, weights)

    entries = [
        entry
        for entry in (affinity_context.get(p.id) for p in participants)
        if entry is not None
    ]
    similarities = [min(entry.semantic_similarity, 1.0) for entry in entries]
    average_semantic = sum(similarities) / len(similarities) if similarities else 0.0

    pooled_hobbies = _dedupe(h for entry in entries for h in entry.shared_hobbies)
    pooled_interests = _dedupe(i for entry in entries for i in entry.shared_interests)
    highlight = next((entry.highlight for entry in entries if entry.highlight), None)

    base = weights.base + schedule * weights.schedule_span
    boost = (
        average_semantic
        + min(len(pooled_hobbies) * weights.hobby_step, weights.hobby_cap)
        + min(len(pooled_interests) * weights.interest_step, weights.interest_cap)
    ) * weights.affinity_scale

    return CompatibilityResult(
        score=_finalize(base, boost, weights),
        breakdown=CompatibilityBreakdown(
            schedule=round(schedule, 3),
            affinity=round(average_semantic, 3),
            hobbies=len(pooled_hobbies),
            interests=len(pooled_interests),
            major_bonus=0.0,
        ),
        summary=build_summary(overlap_minutes, highlight, pooled_hobbies, pooled_interests),
        highlight=highlight,
        shared_hobbies=pooled_hobbies[:3],
        shared_interests=pooled_interests[:3],
    )
