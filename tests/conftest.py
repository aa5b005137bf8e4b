"""Shared pytest fixtures for all tests."""

import json
from unittest.mock import patch

import pytest


SNAPSHOT_PROFILES = [
    {
        "id": "ana",
        "name": "Ana",
        "major": "Computer Science",
        "hobbies": ["chess", "hiking"],
        "interests": ["AI"],
        "classes": ["CS 101"],
        "availability": [
            {"day": "tuesday", "start": 840, "end": 960},
            {"day": "thursday", "start": 600, "end": 720},
        ],
    },
    {
        "id": "ben",
        "name": "Ben",
        "major": "Computer Science",
        "hobbies": ["chess", "reading"],
        "interests": ["AI", "robotics"],
        "classes": ["CS 101"],
        "instagram": "@ben.codes",
        "availability": [{"day": "tuesday", "start": 840, "end": 930}],
    },
    {
        "id": "cara",
        "name": "Cara",
        "major": "Biology",
        "hobbies": ["Rock climbing"],
        "interests": ["genetics"],
        "classes": ["BIO 210"],
        "availability": [{"day": "thursday", "start": 600, "end": 660}],
    },
    {
        "id": "dev",
        "name": "Dev",
        "major": "History",
        "hobbies": ["painting"],
        "availability": [{"day": "friday", "start": 480, "end": 540}],
    },
]


@pytest.fixture
def snapshot_file(tmp_path):
    """Write a small profiles snapshot and return its path."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"profiles": SNAPSHOT_PROFILES}))
    return path


@pytest.fixture(autouse=True)
def no_llm():
    """Keep service calls on the local fallbacks even when GROQ_API_KEY is set."""
    with patch("podmatch.services.match_service.create_llm", return_value=None) as mock_create:
        yield mock_create
