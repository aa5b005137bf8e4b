"""Tests for the JSON snapshot repository."""

import json

from podmatch.data.repository import JsonSnapshotRepository
from podmatch.schemas.profile import Weekday


class TestJsonSnapshotRepository:
    def test_loads_profiles_object(self, snapshot_file):
        repository = JsonSnapshotRepository.from_file(snapshot_file)

        assert len(repository) == 4
        ben = repository.get_record("ben")
        assert ben.profile.instagram == "ben.codes"
        assert ben.availability[0].day == Weekday.TUESDAY

    def test_loads_plain_list(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps([{"id": "a"}, {"profile": {"id": "b"}, "availability": []}]))

        repository = JsonSnapshotRepository.from_file(path)

        assert [r.profile.id for r in repository.all_records()] == ["a", "b"]

    def test_skips_invalid_entries(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps(
                [
                    {"id": "ok"},
                    {"id": "bad-slot", "availability": [{"day": "someday", "start": 1, "end": 2}]},
                    42,
                ]
            )
        )

        repository = JsonSnapshotRepository.from_file(path)

        assert [r.profile.id for r in repository.all_records()] == ["ok"]

    def test_iso_availability(self, tmp_path):
        path = tmp_path / "iso.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "id": "a",
                        "availability": [
                            {"start": "2024-01-03T13:00:00Z", "end": "2024-01-03T14:30:00Z"}
                        ],
                    }
                ]
            )
        )

        record = JsonSnapshotRepository.from_file(path).get_record("a")

        assert record.availability[0].day == Weekday.WEDNESDAY
        assert record.availability[0].duration == 90

    def test_unknown_record(self, snapshot_file):
        repository = JsonSnapshotRepository.from_file(snapshot_file)

        assert repository.get_record("nobody") is None

    def test_dataset_excludes_seeker(self, snapshot_file):
        repository = JsonSnapshotRepository.from_file(snapshot_file)

        dataset = repository.fetch_matchmaking_dataset(seeker_id="ana")

        assert dataset.seeker.profile.id == "ana"
        assert [r.profile.id for r in dataset.candidates] == ["ben", "cara", "dev"]

    def test_dataset_without_seeker(self, snapshot_file):
        repository = JsonSnapshotRepository.from_file(snapshot_file)

        dataset = repository.fetch_matchmaking_dataset()

        assert dataset.seeker is None
        assert len(dataset.candidates) == 4
