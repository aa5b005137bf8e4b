"""Tests for availability merging and intersection."""

from itertools import permutations

import pytest

from podmatch.matching.overlap import compute_overlap, intersect, merge_slots
from podmatch.schemas.profile import Weekday
from tests.test_utils import make_slot

MON, TUE = Weekday.MONDAY, Weekday.TUESDAY


class TestMergeSlots:
    def test_merges_adjacent_slots(self):
        slots = [make_slot("mon", "09:00", "10:00"), make_slot("mon", "10:00", "11:00")]

        assert merge_slots(slots) == [(MON, 540, 660)]

    def test_merges_overlapping_unsorted_slots(self):
        slots = [
            make_slot("mon", "10:30", "12:00"),
            make_slot("mon", "09:00", "11:00"),
            make_slot("mon", "09:30", "10:00"),
        ]

        assert merge_slots(slots) == [(MON, 540, 720)]

    def test_keeps_days_apart(self):
        slots = [make_slot("tue", "09:00", "10:00"), make_slot("mon", "09:00", "10:00")]

        assert merge_slots(slots) == [(MON, 540, 600), (TUE, 540, 600)]

    def test_drops_malformed_slots(self):
        slots = [
            make_slot("mon", "11:00", "10:00"),
            make_slot("mon", "10:00", "10:00"),
            make_slot("mon", -30, 60),
            make_slot("mon", 1400, 1500),
            make_slot("tue", "09:00", "10:00"),
        ]

        assert merge_slots(slots) == [(TUE, 540, 600)]

    def test_idempotent(self):
        slots = [
            make_slot("mon", "09:00", "10:00"),
            make_slot("mon", "09:30", "11:00"),
            make_slot("tue", "13:00", "14:00"),
        ]

        merged = merge_slots(slots)

        assert merge_slots(merged) == merged

    def test_empty(self):
        assert merge_slots([]) == []


class TestIntersect:
    def test_same_day_intersection(self):
        a = [(MON, 540, 720)]
        b = [(MON, 600, 780)]

        assert intersect(a, b) == [(MON, 600, 720)]

    def test_different_days_do_not_intersect(self):
        assert intersect([(MON, 540, 720)], [(TUE, 540, 720)]) == []

    def test_touching_intervals_do_not_intersect(self):
        assert intersect([(MON, 540, 600)], [(MON, 600, 660)]) == []

    def test_one_interval_spanning_several(self):
        a = [(MON, 480, 1080)]
        b = [(MON, 540, 600), (MON, 660, 720), (TUE, 540, 600)]

        assert intersect(a, b) == [(MON, 540, 600), (MON, 660, 720)]


class TestComputeOverlap:
    def test_two_participants(self):
        seeker = [make_slot("tue", "14:00", "16:00")]
        candidate = [make_slot("tue", "15:00", "17:00")]

        result = compute_overlap([seeker, candidate])

        assert result.minutes == 60
        assert len(result.windows) == 1
        assert result.windows[0].label == "Tue 15:00-16:00"

    def test_three_participants(self):
        a = [make_slot("mon", "09:00", "12:00"), make_slot("wed", "13:00", "15:00")]
        b = [make_slot("mon", "10:00", "13:00"), make_slot("wed", "14:00", "16:00")]
        c = [make_slot("mon", "11:00", "11:30"), make_slot("wed", "13:00", "16:00")]

        result = compute_overlap([a, b, c])

        assert result.minutes == 90
        assert [w.label for w in result.windows] == ["Mon 11:00-11:30", "Wed 14:00-15:00"]

    def test_no_overlap(self):
        result = compute_overlap(
            [[make_slot("mon", "09:00", "10:00")], [make_slot("tue", "09:00", "10:00")]]
        )

        assert result.minutes == 0
        assert result.windows == []

    def test_empty_calendar(self):
        result = compute_overlap([[make_slot("mon", "09:00", "10:00")], []])

        assert result.minutes == 0

    def test_commutative(self):
        a = [make_slot("mon", "09:00", "12:00"), make_slot("fri", "08:00", "09:00")]
        b = [make_slot("mon", "11:00", "14:00"), make_slot("fri", "08:30", "10:00")]

        assert compute_overlap([a, b]) == compute_overlap([b, a])

    def test_same_result_for_every_participant_order(self):
        a = [
            make_slot("mon", "09:00", "12:00"),
            make_slot("mon", "10:00", "11:00"),
            make_slot("wed", "13:00", "15:00"),
        ]
        b = [
            make_slot("mon", "10:00", "11:30"),
            make_slot("mon", "11:30", "13:00"),
            make_slot("wed", "16:00", "14:00"),
            make_slot("wed", "14:00", "16:00"),
        ]
        c = [
            make_slot("mon", "11:00", "11:45"),
            make_slot("wed", "13:00", "16:00"),
            make_slot("wed", "13:30", "14:30"),
            make_slot("fri", "10:00", "09:00"),
        ]

        results = [compute_overlap(list(order)) for order in permutations([a, b, c])]

        assert results[0].minutes == 105
        assert [w.label for w in results[0].windows] == ["Mon 11:00-11:45", "Wed 14:00-15:00"]
        assert all(result == results[0] for result in results)

    def test_windows_sorted_by_day_then_start(self):
        a = [make_slot("fri", "08:00", "09:00"), make_slot("mon", "13:00", "14:00"),
             make_slot("mon", "08:00", "09:00")]
        b = [make_slot("mon", "00:00", "23:59"), make_slot("fri", "00:00", "23:59")]

        result = compute_overlap([a, b])

        assert [(w.day, w.start) for w in result.windows] == [
            (Weekday.MONDAY, 480),
            (Weekday.MONDAY, 780),
            (Weekday.FRIDAY, 480),
        ]

    def test_malformed_slot_ignored(self):
        seeker = [make_slot("tue", "14:00", "16:00")]
        candidate = [make_slot("tue", "16:00", "15:00"), make_slot("tue", "14:30", "15:30")]

        result = compute_overlap([seeker, candidate])

        assert result.minutes == 60

    def test_accepts_interval_tuples(self):
        result = compute_overlap([[(MON, 540, 600)], [make_slot("mon", "09:30", "11:00")]])

        assert result.minutes == 30

    def test_requires_two_participants(self):
        with pytest.raises(ValueError, match="at least two"):
            compute_overlap([[make_slot("mon", "09:00", "10:00")]])
