"""
Pytest configuration and fixtures for ParFlow tests.

This module provides shared fixtures: sample scorecards, clubs, shots and a
DI-GOLF style data directory written to a temporary folder.
"""

import json
import tempfile
from pathlib import Path

import pytest

from parflow.analytics.clubs import ClubRegistry
from parflow.config import Settings, reset_settings
from parflow.storage.model import Club, ClubType, Lie, Scorecard, Shot


@pytest.fixture
def temp_dir():
    """Create temporary directory for testing."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture(autouse=True)
def clean_settings():
    """Make sure no cached settings leak between tests."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def club_types():
    return [
        ClubType(id=1, name="Driver"),
        ClubType(id=7, name="7 Iron"),
        ClubType(id=20, name="Sand Wedge"),
        ClubType(id=23, name="Putter"),
    ]


@pytest.fixture
def clubs():
    return [
        Club(id=101, name="Big Stick", club_type_id=1, model="Stealth"),
        Club(id=107, name="7i", club_type_id=7, model="T200"),
        Club(id=120, name="", club_type_id=20),
        Club(id=123, name="Putter", club_type_id=23),
        Club(id=199, name="Old 7i", club_type_id=7, retired=True),
        Club(id=198, name="Lost driver", club_type_id=1, deleted=True),
    ]


@pytest.fixture
def registry(clubs, club_types):
    return ClubRegistry(clubs, club_types)


@pytest.fixture
def make_shot():
    """Factory for shots with sensible defaults."""
    def _make(round_id="1", hole_number=1, club_id=107, start_lie=Lie.FAIRWAY,
              end_lie=Lie.GREEN, distance=None, shot_order=None, shot_time=None, shot_id=None):
        return Shot(
            round_id=round_id,
            hole_number=hole_number,
            club_id=club_id,
            start_lie=start_lie,
            end_lie=end_lie,
            distance=distance,
            shot_order=shot_order,
            shot_time=shot_time,
            shot_id=shot_id,
        )
    return _make


@pytest.fixture
def scorecard_entries():
    """Raw entries of a scorecard export (camelCase, as exported)."""
    return [
        {
            "id": 101,
            "startTime": "2023-05-12T08:00:00.0",
            "formattedStartTime": "2023-05-12 08:00:00",
            "holesCompleted": 2,
            "excludeFromStats": False,
            "courseGlobalId": 5000,
            "strokes": 7,
            "holes": [
                {"number": 1, "strokes": 4, "putts": 2},
                {"number": 2, "strokes": 3, "putts": 1},
            ],
        },
        {
            "id": 102,
            "startTime": "2023-04-01T08:00:00.0",
            "formattedStartTime": "2023-04-01 08:00:00",
            "holesCompleted": 9,
            "excludeFromStats": None,
            "courseGlobalId": 6000,
            "holes": [{"number": n, "strokes": 5, "putts": 2} for n in range(1, 10)],
        },
    ]


@pytest.fixture
def scorecards(scorecard_entries):
    return [Scorecard.model_validate(entry) for entry in scorecard_entries]


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def data_dir(temp_dir, scorecard_entries):
    """A DI-GOLF export directory with every source present."""
    root = temp_dir / "DI-GOLF"
    write_json(root / "Golf-SCORECARD.json", {"version": "1", "type": "scorecard", "data": scorecard_entries})
    write_json(root / "Golf-CLUB.json", {"data": [
        {"id": 107, "name": "7i", "clubTypeId": 7, "model": "T200"},
        {"id": 101, "name": None, "clubTypeId": 1},
    ]})
    write_json(root / "Golf-CLUB_TYPES.json", {"data": [
        {"value": 1, "name": "Driver"},
        {"value": 7, "name": "7 Iron"},
    ]})
    write_json(root / "Golf-SHOT.json", {"data": [
        {"scorecardId": 101, "holeNumber": 2, "shotOrder": 1, "clubId": 107,
         "startLoc": {"lie": "Tee"}, "endLoc": {"lie": "Green"}, "meters": 140.0},
        {"scorecardId": 101, "holeNumber": 1, "shotOrder": 2, "clubId": 107,
         "startLoc": {"lie": "Fairway"}, "endLoc": {"lie": "Green"}, "meters": 135.0},
        {"scorecardId": 101, "holeNumber": 1, "shotOrder": 1, "clubId": 101,
         "startLoc": {"lie": "Tee"}, "endLoc": {"lie": "Fairway"}, "yards": 250.0},
    ]})
    write_json(root / "derived" / "hole-pars" / "Golf-SCORECARD_RAWDATA-101.json", {"1": 4, "2": 3})
    write_json(root / "fit-json" / "Golf-SCORECARD_RAWDATA-101.json", {
        "records": [{"heart_rate": 90}, {"heart_rate": 110}, {"heart_rate": None}],
        "sessions": [{"total_distance": 5400.5}],
        "190": [{"name": "Pine Hills", "total par": 72}],
        "193": [{"0": 1, "2": 5}, {"0": 2, "2": 3}],
        "192": [{"1": 1, "2": 4, "5": 2}],
    })
    return root


@pytest.fixture
def settings(data_dir):
    return Settings(data_dir=data_dir, fitcsvtool_jar=data_dir / "tools" / "FitCSVTool.jar")
