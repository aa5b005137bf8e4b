from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from podmatch.config import MAX_DESCRIPTION_LENGTH
from podmatch.schemas.profile import (
    AvailabilitySlot,
    Profile,
    clean_optional_string,
    clean_string_list,
)
from podmatch.utils import InvalidMatchRequestError


class MatchMode(StrEnum):
    """Requested match shape.

    Use _missing_ for lenient parsing of client values ("pair", "pod").
    """

    PAIR = "PAIR"
    POD_OF_THREE = "POD_OF_THREE"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().upper().replace("-", "_").replace(" ", "_")
            if normalized == "POD":
                return cls.POD_OF_THREE
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class MatchFilters(BaseModel):
    """Conjunctive candidate filters. Empty values are no-ops."""

    model_config = ConfigDict(populate_by_name=True)

    majors: list[str] = Field(default_factory=list)
    classes: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    hobby_query: str | None = Field(default=None, alias="hobbyQuery")
    require_same_course: bool = Field(default=False, alias="requireSameCourse")

    @field_validator("majors", "classes", "interests", mode="before")
    @classmethod
    def _clean_lists(cls, value):
        return clean_string_list(value)

    @field_validator("hobby_query", mode="before")
    @classmethod
    def _clean_query(cls, value):
        return clean_optional_string(value)

    def active_keys(self) -> list[str]:
        """Names of filters that will actually narrow the pool."""
        return [
            key
            for key, value in (
                ("majors", self.majors),
                ("classes", self.classes),
                ("interests", self.interests),
                ("hobbyQuery", self.hobby_query),
                ("requireSameCourse", self.require_same_course),
            )
            if value
        ]


class CandidateRecord(BaseModel):
    """A pool member together with their weekly availability."""

    profile: Profile
    availability: list[AvailabilitySlot] = Field(default_factory=list)


class MatchRequest(BaseModel):
    """Everything one matching pass needs, already materialized in memory."""

    model_config = ConfigDict(populate_by_name=True)

    seeker: Profile
    availability: list[AvailabilitySlot] = Field(default_factory=list)
    mode: MatchMode = Field(default=MatchMode.PAIR)
    filters: MatchFilters = Field(default_factory=MatchFilters)
    candidate_pool: list[CandidateRecord] = Field(default_factory=list, alias="candidatePool")
    limit: int | None = Field(default=None, ge=0, description="Max previews (None for all)")

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "MatchRequest":
        """Validate a raw request body.

        Accepts the legacy "user" key for the seeker profile.

        Raises:
            InvalidMatchRequestError: If the payload does not validate.
        """
        if not isinstance(payload, dict):
            raise InvalidMatchRequestError("Request body must be a JSON object")
        data = dict(payload)
        if "seeker" not in data and "user" in data:
            data["seeker"] = data.pop("user")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidMatchRequestError(f"Invalid match request: {e}") from e


def clean_description(value) -> str:
    """Trim a free-form activity description and cap its length."""
    trimmed = clean_optional_string(value) or ""
    return trimmed[:MAX_DESCRIPTION_LENGTH]
