"""Tunable constants shared by the affinity builder and the scorer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoreWeights:
    # Schedule
    base: float = 45.0
    schedule_span: float = 40.0
    ratio_cap: float = 2.0
    # Affinity boost (sum of components, times affinity_scale)
    affinity_scale: float = 20.0
    hobby_step: float = 0.05
    hobby_cap: float = 0.2
    interest_step: float = 0.04
    interest_cap: float = 0.2
    major_bonus: float = 0.04
    # Semantic similarity blend
    text_weight: float = 0.7
    hobby_list_weight: float = 0.12
    interest_list_weight: float = 0.08
    list_overlap_cap: float = 0.35
    ceiling: int = 99


DEFAULT_WEIGHTS = ScoreWeights()
