"""
Tests for the record normalizer, category rules and par discovery.
"""

import pytest

from parflow.processors.normalizer import (
    GROUPING_RULES, PAR_RULES, RecordNormalizer, RuleEvaluator,
    decode_fairway_outcome, extract_par_map, group_sections, has_hole_key,
    has_par_key, is_generic_document, iter_raw_messages, message_label,
    normalize_message, rows_to_objects, scan_par_map,
)
from parflow.storage.model import Course, FileInfo, Hole, Lie, MessageCategory, Score, Shot


CSV_ROWS = [
    ["Type", "Local Number", "Message", "Field 1", "Value 1", "Units 1", "Field 2", "Value 2", "Units 2"],
    ["Definition", "0", "file_id", "type", "1", "", "", "", ""],
    ["Data", "0", "file_id", "type", "58", "", "manufacturer", "garmin", ""],
    ["Data", "1", "golf_course", "name", "Pine Hills", "", "total par", "72", ""],
    ["Data", "2", "hole", "hole_number", "1", "", "par", "4", ""],
    ["Data", "2", "hole", "hole_number", "2", "", "par", "3", ""],
    ["Data", "3", "score", "hole_number", "1", "", "score", "5", ""],
    ["Data", "4", "shot", "hole_number", "1", "", "club id", "7", ""],
    ["Data", "5", "golf_stats", "fairways", "7", "", "", "", ""],
]


class TestNormalizeMessage:
    """Test normalization of single raw messages."""

    def test_hole_with_human_labels(self):
        hole = normalize_message({"hole number": "3", "par": "4", "distance": 350.5}, MessageCategory.HOLE, "42")
        assert isinstance(hole, Hole)
        assert hole.round_id == "42"
        assert hole.hole_number == 3
        assert hole.par == 4
        assert hole.distance == pytest.approx(350.5)

    def test_hole_with_opaque_keys(self):
        hole = normalize_message({"0": 5, "2": 3}, MessageCategory.HOLE)
        assert hole.hole_number == 5
        assert hole.par == 3

    def test_hole_out_of_range_par_is_dropped_from_record(self):
        hole = normalize_message({"hole_number": 2, "par": 9}, MessageCategory.HOLE)
        assert hole.hole_number == 2
        assert hole.par is None

    def test_missing_hole_number_yields_none(self):
        assert normalize_message({"par": 4}, MessageCategory.HOLE) is None
        assert normalize_message({"score": 4}, MessageCategory.SCORE) is None
        assert normalize_message({"clubId": 7}, MessageCategory.SHOT) is None

    def test_zero_hole_number_yields_none(self):
        assert normalize_message({"hole_number": 0, "par": 4}, MessageCategory.HOLE) is None

    def test_score_opaque_keys(self):
        score = normalize_message({"1": 4, "2": 5, "5": 2}, MessageCategory.SCORE, "7")
        assert isinstance(score, Score)
        assert score.hole_number == 4
        assert score.strokes == 5
        assert score.putts == 2

    @pytest.mark.parametrize("code,expected", [(0, "left"), (1, "right"), (2, "hit"), ("2", "hit")])
    def test_fairway_outcome_codes(self, code, expected):
        score = normalize_message({"hole_number": 1, "fairway": code}, MessageCategory.SCORE)
        assert score.fairway_outcome == expected

    def test_unknown_fairway_code_passes_through(self):
        assert decode_fairway_outcome(7) == 7
        assert decode_fairway_outcome("n/a") == "n/a"

    def test_structured_fairway_value_keeps_the_score(self):
        score = normalize_message(
            {"hole_number": 3, "score": 4, "putts": 2, "fairway": {"code": 9}}, MessageCategory.SCORE
        )
        assert score is not None
        assert score.strokes == 4
        assert score.putts == 2
        assert score.fairway_outcome == {"code": 9}

    def test_course_requires_name_and_par(self):
        course = normalize_message({"name": "Pine Hills", "total par": 72}, MessageCategory.COURSE)
        assert isinstance(course, Course)
        assert course.total_par == 72
        assert normalize_message({"name": "Pine Hills"}, MessageCategory.COURSE) is None
        assert normalize_message({"total par": 72}, MessageCategory.COURSE) is None

    def test_shot_from_export(self):
        raw = {
            "id": 9001, "scorecardId": 123, "holeNumber": 2, "shotOrder": 1, "clubId": 7,
            "startLoc": {"lie": "Fairway", "lat": 1.5}, "endLoc": {"lie": "Green"}, "meters": 140.5,
        }
        shot = normalize_message(raw, MessageCategory.SHOT)
        assert isinstance(shot, Shot)
        assert shot.round_id == "123"
        assert shot.shot_id == "9001"
        assert shot.start_lie == Lie.FAIRWAY
        assert shot.end_lie == Lie.GREEN
        assert shot.start_lat == pytest.approx(1.5)
        assert shot.distance == pytest.approx(140.5)

    def test_shot_yards_converted_to_meters(self):
        shot = normalize_message({"holeNumber": 1, "yards": 100}, MessageCategory.SHOT)
        assert shot.distance == pytest.approx(91.44)

    def test_shot_meters_preferred_over_yards(self):
        shot = normalize_message({"holeNumber": 1, "meters": 80, "yards": 100}, MessageCategory.SHOT)
        assert shot.distance == pytest.approx(80)

    def test_negative_meters_discards_distance(self):
        shot = normalize_message({"holeNumber": 1, "clubId": 7, "meters": -3, "yards": 100}, MessageCategory.SHOT)
        assert shot is not None
        assert shot.club_id == 7
        assert shot.distance is None

    def test_non_numeric_meters_falls_back_to_yards(self):
        shot = normalize_message({"holeNumber": 1, "meters": "n/a", "yards": 100}, MessageCategory.SHOT)
        assert shot.distance == pytest.approx(91.44)

    def test_negative_yards_discards_distance(self):
        shot = normalize_message({"holeNumber": 1, "yards": -10}, MessageCategory.SHOT)
        assert shot.distance is None

    def test_club_zero_is_kept_distinct_from_missing(self):
        unknown = normalize_message({"holeNumber": 1, "clubId": 0}, MessageCategory.SHOT)
        missing = normalize_message({"holeNumber": 1}, MessageCategory.SHOT)
        assert unknown.club_id == 0
        assert missing.club_id is None

    def test_path_round_id_wins_over_content(self):
        shot = normalize_message({"holeNumber": 1, "scorecardId": 5}, MessageCategory.SHOT, "99")
        assert shot.round_id == "99"

    def test_file_info_passthrough(self):
        info = normalize_message({"manufacturer": "garmin", "serial": None}, MessageCategory.FILE_INFO)
        assert isinstance(info, FileInfo)
        assert info.fields == {"manufacturer": "garmin"}

    def test_non_mapping_yields_none(self):
        assert RecordNormalizer().normalize(["hole", 1], MessageCategory.HOLE) is None


class TestRules:
    """Test each classification predicate."""

    def test_message_label(self):
        assert message_label({"Message": " Hole "}) == "hole"
        assert message_label({"name": "Golf Course"}) == "golf course"
        assert message_label({}) == ""

    @pytest.mark.parametrize("key", ["hole", "Hole", "hole_number", "hole no", "holeNumber"])
    def test_hole_key_pattern(self, key):
        assert has_hole_key({key: 1})

    def test_hole_key_pattern_negative(self):
        assert not has_hole_key({"whale": 1, "number": 2})

    @pytest.mark.parametrize("key,expected", [
        ("par", True), ("hole_par", True), ("par_value", True), ("Par", True),
        ("parking", False), ("spare", False), ("compare_x", False),
    ])
    def test_par_key_pattern(self, key, expected):
        assert has_par_key({key: 1}) is expected

    @pytest.mark.parametrize("label", ["golf_course", "Hole", "score", "GOLF STATS"])
    def test_par_rules_label_keywords(self, label):
        assert RuleEvaluator(PAR_RULES).classify({"Message": label}) == MessageCategory.HOLE

    def test_par_rules_hole_and_par_keys(self):
        evaluator = RuleEvaluator(PAR_RULES)
        assert evaluator.classify({"Message": "unknown", "hole_number": 1, "par": 4}) == MessageCategory.HOLE
        assert evaluator.classify({"Message": "record", "hole_number": 1}) is None

    def test_first_matching_rule_wins(self):
        rule = RuleEvaluator(PAR_RULES).match({"Message": "hole", "hole": 1, "par": 4})
        assert rule.name == "golf keyword label"

    @pytest.mark.parametrize("label,category", [
        ("File ID", MessageCategory.FILE_INFO),
        ("file_creator", MessageCategory.FILE_INFO),
        ("Golf Course", MessageCategory.COURSE),
        ("golf_course", MessageCategory.COURSE),
        ("Hole", MessageCategory.HOLE),
        ("score", MessageCategory.SCORE),
        ("Shot", MessageCategory.SHOT),
        ("golf_stats", None),
    ])
    def test_grouping_rules_exact_labels(self, label, category):
        assert RuleEvaluator(GROUPING_RULES).classify({"Message": label}) == category


class TestDocumentShapes:
    """Test rich and minimal decoder documents."""

    def test_rows_to_objects_pairs_headers_and_expands_fields(self):
        objects = rows_to_objects(CSV_ROWS)
        assert len(objects) == 7
        hole = objects[2]
        assert hole["Message"] == "hole"
        assert hole["hole_number"] == "1"
        assert hole["par"] == "4"

    def test_data_rows_before_header_are_ignored(self):
        assert rows_to_objects([["Data", "0", "hole"], ["Type", "Message"]]) == []

    def test_is_generic_document(self):
        assert is_generic_document(CSV_ROWS)
        assert is_generic_document({"rows": CSV_ROWS})
        assert not is_generic_document({"193": [{"0": 1}]})

    def test_rich_document_numeric_message_keys(self):
        document = {"193": [{"0": 1, "2": 4}], "holes": [{"hole_number": 9, "par": 5}]}
        messages = list(iter_raw_messages(document, MessageCategory.HOLE))
        assert messages == [{"hole_number": 9, "par": 5}]

    def test_normalize_rich_document(self):
        document = {
            "193": [{"0": 1, "2": 4}, {"0": 2, "2": 3}, {"2": 4}],
            "192": [{"1": 1, "2": 5, "5": 2}],
            "194": [{"1": 1, "clubId": 7}],
            "190": [{"name": "Pine Hills", "total par": 72}],
        }
        result = RecordNormalizer().normalize_document(document, round_id="55")
        assert [h.hole_number for h in result.holes] == [1, 2]
        assert result.dropped == 1
        assert result.scores[0].round_id == "55"
        assert result.shots[0].club_id == 7
        assert result.courses[0].name == "Pine Hills"
        assert result.total_records == 5

    def test_normalize_minimal_document(self):
        result = RecordNormalizer().normalize_document(CSV_ROWS, round_id="9")
        assert [(h.hole_number, h.par) for h in result.holes] == [(1, 4), (2, 3)]
        assert result.scores[0].strokes == 5
        assert result.shots[0].club_id == 7
        assert result.courses[0].name == "Pine Hills"
        assert len(result.file_info) == 1


class TestParDiscovery:
    """Test par map extraction."""

    def test_extract_par_map_from_rows(self):
        assert extract_par_map(rows_to_objects(CSV_ROWS)) == {1: 4, 2: 3}

    def test_extract_par_map_unlabelled_rows(self):
        objects = [{"hole_no": "7", "par": "5"}, {"hole_no": "8"}]
        assert extract_par_map(objects) == {7: 5}

    def test_scan_par_map_recursive(self):
        document = {
            "records": [{"heart_rate": 90}],
            "nested": {"holes": [{"hole": 1, "par": 4}, {"holeNumber": 2, "holePar": 3}]},
            "strings": [{"hole": "3", "par": "4"}],
        }
        assert scan_par_map(document) == {1: 4, 2: 3}

    def test_scan_par_map_ignores_booleans(self):
        assert scan_par_map([{"hole": True, "par": 4}]) == {}


class TestGroupSections:
    """Test scorecard section extraction."""

    def test_group_sections(self):
        sections = group_sections(CSV_ROWS)
        assert sections["file_id"]["manufacturer"] == "garmin"
        assert sections["golf_course"]["name"] == "Pine Hills"
        assert sections["holes"] == [{"hole_number": 1, "par": 4}, {"hole_number": 2, "par": 3}]
        assert sections["scores"] == [{"hole_number": 1, "strokes": 5}]
        assert sections["shots"][0]["club_id"] == 7
        assert sections["stats"]["fairways"] == "7"
        assert sections["file_creator"] is None
