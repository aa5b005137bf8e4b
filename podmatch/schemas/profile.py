import re
from datetime import datetime
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from podmatch.config import MINUTES_PER_DAY

_INSTAGRAM_URL = re.compile(r"^https?://(www\.)?instagram\.com/", re.IGNORECASE)


class Weekday(IntEnum):
    """Calendar days in week order (Monday first, matching datetime.weekday()).

    Use _missing_ for case-insensitive name parsing ("tuesday", "TUE").
    """

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def _missing_(cls, value):
        """Allow full or three-letter day names in any case."""
        if isinstance(value, str):
            value_lower = value.strip().lower()
            for member in cls:
                name = member.name.lower()
                if value_lower in (name, name[:3]):
                    return member
        return None

    @property
    def short_name(self) -> str:
        return self.name[:3].title()


def clean_string_list(value) -> list[str]:
    """Normalize a list-ish value into trimmed, non-empty strings.

    Accepts a list of values or a comma-separated string. Order is preserved.
    """
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple, set, frozenset)):
        return []
    return [str(entry).strip() for entry in value if str(entry).strip()]


def clean_optional_string(value) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def clean_instagram_handle(value) -> str | None:
    """Strip profile URLs, a leading @ and whitespace from an Instagram handle."""
    if not isinstance(value, str):
        return None
    handle = _INSTAGRAM_URL.sub("", value.strip()).rstrip("/")
    if handle.startswith("@") and len(handle) > 1:
        handle = handle[1:]
    handle = re.sub(r"\s+", "", handle)
    return handle or None


class ParticipantSummary(BaseModel):
    """Public subset of a profile shown on a match preview."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, description="Stable profile identifier")
    name: str | None = Field(default=None, description="Display name")
    major: str | None = Field(default=None, description="Declared major")
    hobbies: list[str] = Field(default_factory=list, description="Hobbies as entered")
    interests: list[str] = Field(default_factory=list, description="Interests as entered")
    classes: list[str] = Field(default_factory=list, description="Current classes")
    instagram: str | None = Field(default=None, description="Sanitized Instagram handle")

    @field_validator("hobbies", "interests", "classes", mode="before")
    @classmethod
    def _clean_lists(cls, value):
        return clean_string_list(value)

    @field_validator("name", "major", mode="before")
    @classmethod
    def _clean_strings(cls, value):
        return clean_optional_string(value)

    @field_validator("instagram", mode="before")
    @classmethod
    def _clean_instagram(cls, value):
        return clean_instagram_handle(value)


class Profile(ParticipantSummary):
    """A person under consideration, either the seeker or a candidate.

    Free-text fields only feed the content signal; they are never matched
    structurally. Wire payloads use camelCase names (funFact, vibeCheck,
    favoriteSpot), which are accepted as aliases.
    """

    bio: str | None = Field(default=None, description="Short free-form bio")
    fun_fact: str | None = Field(default=None, alias="funFact", description="Fun fact")
    vibe_check: str | None = Field(default=None, alias="vibeCheck", description="Vibe check answer")
    favorite_spot: str | None = Field(
        default=None, alias="favoriteSpot", description="Favorite campus spot"
    )

    @field_validator("bio", "fun_fact", "vibe_check", "favorite_spot", mode="before")
    @classmethod
    def _clean_free_text(cls, value):
        return clean_optional_string(value)

    def to_summary(self) -> ParticipantSummary:
        return ParticipantSummary(
            id=self.id,
            name=self.name,
            major=self.major,
            hobbies=self.hobbies,
            interests=self.interests,
            classes=self.classes,
            instagram=self.instagram,
        )


class AvailabilitySlot(BaseModel):
    """A half-open free-time interval [start, end) on one weekday.

    start/end are minutes since midnight. Slots with end <= start are accepted
    here so the overlap calculator can drop them individually.
    """

    day: Weekday = Field(description="Day of the week")
    start: int = Field(description="Start, in minutes since midnight")
    end: int = Field(description="End (exclusive), in minutes since midnight")

    @model_validator(mode="before")
    @classmethod
    def _from_datetimes(cls, data):
        """Accept the serialized calendar shape: ISO start/end timestamps."""
        if not isinstance(data, dict):
            return data
        start, end = data.get("start"), data.get("end")
        if isinstance(start, str) and "T" in start:
            start = datetime.fromisoformat(start)
        if isinstance(end, str) and "T" in end:
            end = datetime.fromisoformat(end)
        if not isinstance(start, datetime) or not isinstance(end, datetime):
            return data

        midnight = start.replace(hour=0, minute=0, second=0, microsecond=0)
        start_minutes = start.hour * 60 + start.minute
        end_minutes = int((end - midnight).total_seconds() // 60)
        return {
            **data,
            "day": data.get("day", start.weekday()),
            "start": start_minutes,
            "end": min(end_minutes, MINUTES_PER_DAY),
        }

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def is_valid(self) -> bool:
        return 0 <= self.start < self.end <= MINUTES_PER_DAY
