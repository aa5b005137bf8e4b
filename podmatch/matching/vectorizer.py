"""Term-frequency vectors built from a profile's descriptive fields."""

import math
import re
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from podmatch.schemas.profile import Profile

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9\s]")

# Connective and academic filler. Hobby/interest nouns must never appear here.
STOP_WORDS = frozenset({
    "and", "the", "for", "with", "you", "your", "about", "this", "that",
    "from", "have", "just", "like", "they", "their", "them", "are", "was",
    "were", "she", "him", "her", "his", "its", "cant", "dont", "but", "into",
    "over", "under", "also", "really", "very", "more", "most", "some", "any",
    "each", "every", "other", "than", "then", "will", "what", "when", "where",
    "why", "who", "how", "been", "because", "year", "years", "student",
    "students", "major", "class", "classes", "study", "studying", "love",
    "enjoy", "enjoys", "enjoying", "likes", "liked", "looking", "forward",
})


@dataclass(frozen=True)
class TermVector:
    """Sparse token -> count map with its Euclidean magnitude."""

    frequencies: Mapping[str, int]
    magnitude: float

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> "TermVector":
        counts = Counter(tokens)
        magnitude = math.sqrt(sum(count * count for count in counts.values()))
        return cls(frequencies=MappingProxyType(dict(counts)), magnitude=magnitude)

    def __len__(self) -> int:
        return len(self.frequencies)


def tokenize(text: str, stop_words: frozenset[str] = STOP_WORDS) -> list[str]:
    """Lowercase, strip punctuation, and drop short tokens and stop words."""
    if not isinstance(text, str):
        return []
    cleaned = _NON_ALPHANUMERIC.sub(" ", text.lower())
    return [
        token
        for token in cleaned.split()
        if len(token) > 2 and token not in stop_words
    ]


def build_profile_document(profile: Profile) -> str | None:
    """Join every present field into labeled lines; None if nothing is present."""
    segments = []
    if profile.name:
        segments.append(f"Name: {profile.name}")
    if profile.major:
        segments.append(f"Major: {profile.major}")
    if profile.interests:
        segments.append(f"Interests: {', '.join(profile.interests)}")
    if profile.hobbies:
        segments.append(f"Hobbies: {', '.join(profile.hobbies)}")
    if profile.classes:
        segments.append(f"Classes: {', '.join(profile.classes)}")
    if profile.bio:
        segments.append(f"Bio: {profile.bio}")
    if profile.fun_fact:
        segments.append(f"Fun fact: {profile.fun_fact}")
    if profile.vibe_check:
        segments.append(f"Vibe: {profile.vibe_check}")
    if profile.favorite_spot:
        segments.append(f"Favorite spot: {profile.favorite_spot}")

    if not segments:
        return None
    return "\n".join(segments)


def _list_field_tokens(profile: Profile) -> list[str]:
    # Not stop-word filtered: short domain words like "art" must survive.
    entries = [*profile.hobbies, *profile.interests, *profile.classes]
    return [
        token
        for entry in entries
        for token in entry.lower().split()
        if len(token) > 2
    ]


def vectorize(
    profile: Profile,
    stop_words: frozenset[str] = STOP_WORDS,
) -> TermVector | None:
    """Build the term vector for a profile.

    Args:
        profile: Seeker or candidate profile.
        stop_words: Tokens removed from the labeled document.

    Returns:
        TermVector, or None when the profile carries no content signal.
    """
    document = build_profile_document(profile)
    if document is None:
        return None

    tokens = tokenize(document, stop_words) + _list_field_tokens(profile)
    if not tokens:
        return None
    return TermVector.from_tokens(tokens)
