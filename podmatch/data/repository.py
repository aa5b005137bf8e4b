"""Profile and availability lookup.

Real deployments plug in their own storage behind ProfileRepository. The
JSON snapshot implementation here backs the CLI and tests.
"""

import json
import logging
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field, ValidationError

from podmatch.schemas.request import CandidateRecord

logger = logging.getLogger(__name__)


class MatchmakingDataset(BaseModel):
    """The seeker's stored record (if any) and everyone else."""

    seeker: CandidateRecord | None = Field(default=None)
    candidates: list[CandidateRecord] = Field(default_factory=list)


class ProfileRepository(Protocol):
    def get_record(self, profile_id: str) -> CandidateRecord | None: ...

    def fetch_matchmaking_dataset(self, seeker_id: str | None = None) -> MatchmakingDataset: ...


def _normalize_record(raw: dict) -> dict:
    """Normalize a snapshot entry to the CandidateRecord shape.

    Entries may be flat profiles carrying an "availability" key, or already
    split into {"profile": ..., "availability": ...}.
    """
    if "profile" in raw:
        return raw
    profile = {key: value for key, value in raw.items() if key != "availability"}
    return {"profile": profile, "availability": raw.get("availability") or []}


class JsonSnapshotRepository:
    """Read-only repository over a JSON file of profiles."""

    def __init__(self, records: list[CandidateRecord]):
        self._records = list(records)

    @classmethod
    def from_file(cls, file_path: Path) -> "JsonSnapshotRepository":
        """Load a snapshot file.

        The file holds a list of profile entries, or an object with a
        "profiles" list. Entries that fail validation are skipped with a
        warning.

        Args:
            file_path: Path to the snapshot JSON.

        Returns:
            Repository over the valid entries.
        """
        with open(file_path) as f:
            data = json.load(f)

        entries = data.get("profiles", []) if isinstance(data, dict) else data
        records = []
        for index, raw in enumerate(entries):
            try:
                records.append(CandidateRecord.model_validate(_normalize_record(raw)))
            except (ValidationError, TypeError) as e:
                logger.warning(f"Skipping invalid snapshot entry #{index}: {e}")

        logger.info(f"Loaded {len(records)} profiles from {file_path}")
        return cls(records)

    def __len__(self) -> int:
        return len(self._records)

    def all_records(self) -> list[CandidateRecord]:
        return list(self._records)

    def get_record(self, profile_id: str) -> CandidateRecord | None:
        return next((r for r in self._records if r.profile.id == profile_id), None)

    def fetch_matchmaking_dataset(self, seeker_id: str | None = None) -> MatchmakingDataset:
        seeker = self.get_record(seeker_id) if seeker_id else None
        candidates = [r for r in self._records if seeker_id is None or r.profile.id != seeker_id]
        return MatchmakingDataset(seeker=seeker, candidates=candidates)
