"""
Tests for the export loaders and path helpers.
"""

import json

import pytest

from parflow.processors.sources import (
    coerce_par_map, envelope_entries, find_fit_files, iter_decoded_documents,
    load_club_types, load_clubs, load_par_maps, load_scorecards, load_shots,
    read_json, round_id_from_path,
)
from parflow.storage.model import Lie


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestRoundIdFromPath:
    """Test round id recovery from file names."""

    @pytest.mark.parametrize("name,expected", [
        ("Golf-SCORECARD_RAWDATA-1234.fit", "1234"),
        ("Golf-SCORECARD_RAWDATA-1234.json", "1234"),
        ("golf-scorecard_rawdata-77.CSV", "77"),
        ("RAWDATA-55.json", "55"),
        ("991.json", "991"),
        ("notes.json", None),
        ("Golf-SCORECARD_RAWDATA-1234.txt", None),
    ])
    def test_patterns(self, name, expected):
        assert round_id_from_path(f"/tmp/out/{name}") == expected


class TestReadJson:
    """Test lenient JSON reading."""

    def test_missing_file(self, temp_dir):
        assert read_json(temp_dir / "missing.json") is None

    def test_malformed_file(self, temp_dir):
        path = temp_dir / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        assert read_json(path) is None

    def test_envelope_entries(self):
        assert envelope_entries({"data": [1, 2]}) == [1, 2]
        assert envelope_entries([3]) == [3]
        assert envelope_entries({"data": "x"}) == []
        assert envelope_entries(None) == []


class TestLoaders:
    """Test export loaders."""

    def test_load_scorecards(self, data_dir):
        scorecards = load_scorecards(data_dir / "Golf-SCORECARD.json")
        assert [s.round_id for s in scorecards] == ["101", "102"]
        assert scorecards[0].holes[1].putts == 1
        assert scorecards[1].exclude_from_stats is False

    def test_invalid_entries_are_skipped(self, temp_dir):
        path = write_json(temp_dir / "Golf-SCORECARD.json", {"data": [
            {"id": 1, "holes": []},
            {"holes": []},
            {"id": 2, "holes": [{"number": 0}]},
        ]})
        assert [s.round_id for s in load_scorecards(path)] == ["1"]

    def test_missing_export_is_empty(self, temp_dir):
        assert load_scorecards(temp_dir / "Golf-SCORECARD.json") == []

    def test_load_clubs_and_types(self, data_dir):
        clubs = load_clubs(data_dir / "Golf-CLUB.json")
        types = load_club_types(data_dir / "Golf-CLUB_TYPES.json")
        assert {c.id for c in clubs} == {101, 107}
        assert clubs[1].name is None
        assert {t.id: t.name for t in types} == {1: "Driver", 7: "7 Iron"}

    def test_load_shots(self, data_dir):
        shots = load_shots(data_dir / "Golf-SHOT.json")
        assert len(shots) == 3
        assert all(s.round_id == "101" for s in shots)
        assert shots[1].start_lie == Lie.FAIRWAY
        assert shots[2].distance == pytest.approx(250.0 * 0.9144)


class TestParMaps:
    """Test curated par maps."""

    def test_coerce_par_map(self):
        assert coerce_par_map({"1": 4, "2": "3", "x": 5, "4": None}) == {1: 4, 2: 3}
        assert coerce_par_map([4, 3]) == {}

    def test_load_par_maps(self, data_dir):
        directory = data_dir / "derived" / "hole-pars"
        write_json(directory / "unrelated.json", {"1": 3})
        write_json(directory / "Golf-SCORECARD_RAWDATA-300.json", {})
        assert load_par_maps(directory) == {"101": {1: 4, 2: 3}}

    def test_missing_directory(self, temp_dir):
        assert load_par_maps(temp_dir / "nope") == {}


class TestDecodedFiles:
    """Test discovery of decoded and raw files."""

    def test_iter_decoded_documents(self, data_dir):
        documents = list(iter_decoded_documents(data_dir / "fit-json"))
        assert [round_id for round_id, _ in documents] == ["101"]
        assert "records" in documents[0][1]

    def test_find_fit_files_recursive(self, temp_dir):
        (temp_dir / "a" / "b").mkdir(parents=True)
        (temp_dir / "a" / "b" / "Golf-SCORECARD_RAWDATA-1.FIT").write_bytes(b"")
        (temp_dir / "a" / "Activity-2.fit").write_bytes(b"")
        (temp_dir / "a" / "readme.txt").write_text("x")
        assert [p.name for p in find_fit_files(temp_dir)] == [
            "Activity-2.fit", "Golf-SCORECARD_RAWDATA-1.FIT",
        ]
        assert [p.name for p in find_fit_files(temp_dir, "scorecard_rawdata")] == [
            "Golf-SCORECARD_RAWDATA-1.FIT",
        ]
