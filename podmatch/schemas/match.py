from pydantic import BaseModel, Field, computed_field

from podmatch.schemas.profile import ParticipantSummary, Weekday

PROFILE_MATCH = "Profile Match"
SCHEDULE_MATCH = "Schedule Match"


class AffinityEntry(BaseModel):
    """Content affinity between the seeker and one candidate."""

    semantic_similarity: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Blended text and shared-tag similarity (0-1)",
    )
    shared_hobbies: list[str] = Field(default_factory=list, description="Hobbies both list")
    shared_interests: list[str] = Field(default_factory=list, description="Interests both list")
    same_major: bool = Field(default=False, description="Whether both declared the same major")
    highlight: str | None = Field(default=None, description="One human-readable reason")
    cluster_label: str = Field(default=SCHEDULE_MATCH, description="Why the match scored well")


class AffinityContext(BaseModel):
    """Affinity entries for a whole candidate pool, built once per request."""

    entries: dict[str, AffinityEntry] = Field(default_factory=dict)
    cluster_label: str = Field(default=SCHEDULE_MATCH)
    strategy: str = Field(default="baseline", description="'baseline' or 'profile-tokens'")
    assignments: int = Field(default=0, description="Candidates with nonzero similarity")

    def get(self, candidate_id: str | None) -> AffinityEntry | None:
        if candidate_id is None:
            return None
        return self.entries.get(candidate_id)


class CompatibilityBreakdown(BaseModel):
    schedule: float = Field(description="Saturating schedule component (0-1)")
    affinity: float = Field(description="Semantic similarity used (0-1)")
    hobbies: int = Field(description="Shared hobby count")
    interests: int = Field(description="Shared interest count")
    major_bonus: float = Field(default=0.0, description="Same-major bonus")


class CompatibilityResult(BaseModel):
    """Score for one pair or pod, with the pieces that produced it."""

    score: int = Field(ge=0, le=99, description="Compatibility score, capped at 99")
    breakdown: CompatibilityBreakdown
    summary: str = Field(description="One-line explanation shown on the preview")
    highlight: str | None = Field(default=None)
    shared_hobbies: list[str] = Field(default_factory=list)
    shared_interests: list[str] = Field(default_factory=list)


class SharedWindow(BaseModel):
    """A concrete free-time window every participant has in common."""

    day: Weekday
    start: int = Field(description="Start, in minutes since midnight")
    end: int = Field(description="End (exclusive), in minutes since midnight")

    @computed_field
    @property
    def minutes(self) -> int:
        return self.end - self.start

    @computed_field
    @property
    def label(self) -> str:
        return f"{self.day.short_name} {_clock(self.start)}-{_clock(self.end)}"


def _clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class MatchPreview(BaseModel):
    """A proposed pair or pod, as returned to the caller."""

    participants: list[ParticipantSummary] = Field(description="Matched candidates (seeker excluded)")
    overlap_minutes: int = Field(description="Total minutes everyone is free together")
    shared_availability: list[SharedWindow] = Field(default_factory=list)
    compatibility_score: int = Field(ge=0, le=99)
    semantic_similarity: float = Field(default=0.0)
    shared_hobbies: list[str] = Field(default_factory=list)
    shared_interests: list[str] = Field(default_factory=list)
    cluster_label: str = Field(default=SCHEDULE_MATCH)
    summary: str
    breakdown: CompatibilityBreakdown | None = Field(default=None)

    @property
    def participant_ids(self) -> tuple[str, ...]:
        return tuple(p.id or "" for p in self.participants)


class MatchResponse(BaseModel):
    matches: list[MatchPreview] = Field(default_factory=list)
    empty_reason: str | None = Field(
        default=None,
        description="Why no matches were returned (filters vs. availability)",
    )
