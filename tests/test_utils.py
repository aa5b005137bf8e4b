"""Shared test utility functions."""

from podmatch.schemas.profile import AvailabilitySlot, Profile, Weekday
from podmatch.schemas.request import CandidateRecord


def make_test_profile(
    profile_id: str | None,
    name: str | None = None,
    major: str | None = None,
    hobbies: list[str] | None = None,
    interests: list[str] | None = None,
    classes: list[str] | None = None,
    **extra,
) -> Profile:
    """Create a dummy profile for testing."""
    return Profile(
        id=profile_id,
        name=name,
        major=major,
        hobbies=hobbies or [],
        interests=interests or [],
        classes=classes or [],
        **extra,
    )


def _to_minutes(value: str | int) -> int:
    if isinstance(value, int):
        return value
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def make_slot(day: str | Weekday, start: str | int, end: str | int) -> AvailabilitySlot:
    """Create a slot from a day name and "HH:MM" (or minute) bounds."""
    return AvailabilitySlot(day=Weekday(day), start=_to_minutes(start), end=_to_minutes(end))


def make_record(
    profile: Profile,
    slots: list[AvailabilitySlot] | None = None,
) -> CandidateRecord:
    """Wrap a profile and its availability into a pool entry."""
    return CandidateRecord(profile=profile, availability=slots or [])
