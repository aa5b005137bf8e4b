"""Cosine similarity between sparse term vectors."""

from podmatch.matching.vectorizer import TermVector


def cosine(a: TermVector | None, b: TermVector | None) -> float:
    """Cosine similarity clamped to [0, 1].

    The dot product walks the smaller map and probes the larger one, so cost
    scales with the sparser profile.

    Returns:
        0.0 if either vector is missing or has zero magnitude.
    """
    if a is None or b is None or a.magnitude == 0 or b.magnitude == 0:
        return 0.0

    smaller, larger = (
        (a.frequencies, b.frequencies)
        if len(a.frequencies) < len(b.frequencies)
        else (b.frequencies, a.frequencies)
    )
    dot = 0
    for token, count in smaller.items():
        other = larger.get(token)
        if other:
            dot += count * other
    if dot == 0:
        return 0.0

    similarity = dot / (a.magnitude * b.magnitude)
    return max(0.0, min(1.0, similarity))
