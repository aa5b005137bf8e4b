"""Tests for the affinity builder."""

import pytest

from podmatch.matching.affinity import (
    blend_similarity,
    build_affinity,
    build_highlight,
    intersect_lists,
)
from podmatch.schemas.match import PROFILE_MATCH, SCHEDULE_MATCH
from podmatch.schemas.profile import Profile
from tests.test_utils import make_test_profile


class TestIntersectLists:
    def test_case_insensitive_keeps_target_casing(self):
        assert intersect_lists(["Chess", "Hiking"], ["chess", "Reading"]) == ["chess"]

    def test_preserves_target_order(self):
        result = intersect_lists(["go", "chess", "poker"], ["poker", "chess"])

        assert result == ["poker", "chess"]

    def test_drops_case_duplicates(self):
        assert intersect_lists(["chess"], ["Chess", "CHESS", " chess "]) == ["Chess"]

    def test_empty_source(self):
        assert intersect_lists([], ["chess"]) == []


class TestBuildHighlight:
    def test_shared_hobby_first(self):
        seeker = make_test_profile("s")
        candidate = make_test_profile("c", vibeCheck="Always down for boba")

        highlight = build_highlight(seeker, candidate, ["chess"], ["AI"])

        assert highlight == "Shared hobby: chess"

    def test_shared_interests_joined(self):
        seeker = make_test_profile("s")
        candidate = make_test_profile("c")

        highlight = build_highlight(seeker, candidate, [], ["AI", "robotics", "space"])

        assert highlight == "Overlap on AI, robotics"

    def test_free_text_priority(self):
        seeker = make_test_profile("s")
        candidate = make_test_profile("c", bio="Bio text", funFact="Fun fact text")

        assert build_highlight(seeker, candidate, [], []) == "Fun fact text"

    def test_truncates_long_text(self):
        seeker = make_test_profile("s")
        candidate = make_test_profile("c", bio="x" * 200)

        highlight = build_highlight(seeker, candidate, [], [])

        assert len(highlight) == 140
        assert highlight.endswith("…")

    def test_same_favorite_spot(self):
        seeker = make_test_profile("s", favoriteSpot="Library patio")
        candidate = make_test_profile("c", favoriteSpot="Library patio")

        assert build_highlight(seeker, candidate, [], []) == "Both love Library patio"

    def test_candidate_favorite_spot(self):
        seeker = make_test_profile("s")
        candidate = make_test_profile("c", favoriteSpot="Quad")

        assert build_highlight(seeker, candidate, [], []) == "Favorite spot: Quad"

    def test_nothing_to_say(self):
        assert build_highlight(make_test_profile("s"), make_test_profile("c"), [], []) is None


class TestBlendSimilarity:
    def test_never_below_text_similarity(self):
        assert blend_similarity(0.5, 1, 0) == 0.5

    def test_tag_overlap_lifts_low_text_similarity(self):
        assert blend_similarity(0.1, 2, 0) == pytest.approx(0.31)

    def test_list_overlap_capped(self):
        assert blend_similarity(0.0, 5, 5) == 0.35

    def test_no_signal(self):
        assert blend_similarity(0.0, 0, 0) == 0.0


class TestBuildAffinity:
    def test_shared_hobby_pair(self):
        seeker = make_test_profile("s", hobbies=["chess", "hiking"])
        candidate = make_test_profile("c", hobbies=["chess", "reading"])

        context = build_affinity(seeker, [candidate])
        entry = context.get("c")

        assert entry.shared_hobbies == ["chess"]
        assert entry.semantic_similarity == 0.556
        assert entry.highlight == "Shared hobby: chess"
        assert entry.cluster_label == PROFILE_MATCH
        assert context.cluster_label == PROFILE_MATCH
        assert context.strategy == "profile-tokens"
        assert context.assignments == 1

    def test_same_major(self):
        seeker = make_test_profile("s", major="Biology")
        same = make_test_profile("c1", major="Biology")
        other = make_test_profile("c2", major="History")

        context = build_affinity(seeker, [same, other])

        assert context.get("c1").same_major is True
        assert context.get("c2").same_major is False

    def test_empty_seeker_is_schedule_match(self):
        seeker = Profile(id="s")
        candidates = [
            make_test_profile("c1", hobbies=["chess"]),
            make_test_profile("c2", bio="Loves hiking"),
        ]

        context = build_affinity(seeker, candidates)

        assert context.cluster_label == SCHEDULE_MATCH
        assert context.strategy == "baseline"
        for entry in context.entries.values():
            assert entry.semantic_similarity == 0.0
            assert entry.cluster_label == SCHEDULE_MATCH

    def test_empty_candidate_gets_zero_similarity(self):
        seeker = make_test_profile("s", hobbies=["chess"])
        candidates = [make_test_profile("c1", hobbies=["chess"]), Profile(id="c2")]

        context = build_affinity(seeker, candidates)

        assert context.get("c1").semantic_similarity > 0
        assert context.get("c2").semantic_similarity == 0.0
        assert context.get("c2").cluster_label == PROFILE_MATCH

    def test_no_overlapping_content_is_schedule_match(self):
        seeker = make_test_profile("s", hobbies=["chess"])
        candidate = make_test_profile("c", bio="Surfing every weekend")

        context = build_affinity(seeker, [candidate])

        assert context.get("c").semantic_similarity == 0.0
        assert context.cluster_label == SCHEDULE_MATCH
        assert context.assignments == 0

    def test_skips_candidates_without_id(self):
        seeker = make_test_profile("s", hobbies=["chess"])
        candidates = [make_test_profile(None, hobbies=["chess"]), make_test_profile("c")]

        context = build_affinity(seeker, candidates)

        assert list(context.entries) == ["c"]

    def test_similarity_in_unit_range(self):
        seeker = make_test_profile(
            "s", name="Ana", hobbies=["chess", "hiking"], interests=["AI", "space"]
        )
        candidates = [
            make_test_profile("c1", name="Ana", hobbies=["chess", "hiking"], interests=["AI", "space"]),
            make_test_profile("c2", hobbies=["knitting"]),
        ]

        context = build_affinity(seeker, candidates)

        for entry in context.entries.values():
            assert 0.0 <= entry.semantic_similarity <= 1.0

    def test_unknown_id_returns_none(self):
        context = build_affinity(make_test_profile("s"), [])

        assert context.get("missing") is None
        assert context.get(None) is None
