"""
Tests for putting analytics.
"""

import pytest

from parflow.analytics.interface import DateRange, RoundLength
from parflow.analytics.putting import (
    PuttBuckets, PuttsDatum, filter_rounds, gir_putts_series, is_summary_eligible,
    putts_per_round, sort_by_date, summarize_putting,
)
from parflow.storage.model import Scorecard


def make_scorecard(round_id, start, putts, holes_completed=None, exclude=False, strokes=5):
    return Scorecard.model_validate({
        "id": round_id,
        "formattedStartTime": start,
        "holesCompleted": holes_completed if holes_completed is not None else len(putts),
        "excludeFromStats": exclude,
        "holes": [
            {"number": n, "strokes": strokes, "putts": p}
            for n, p in enumerate(putts, start=1)
        ],
    })


class TestPuttsPerRound:
    """Test the per-round putts series."""

    def test_sum_and_order(self, scorecards):
        series = putts_per_round(scorecards)
        assert [(d.round_id, d.putts) for d in series] == [("102", 18), ("101", 3)]

    def test_missing_putts_count_as_zero(self):
        sc = Scorecard.model_validate({"id": 1, "holes": [{"number": 1, "putts": 2}, {"number": 2}]})
        assert putts_per_round([sc])[0].putts == 2

    def test_every_round_appears(self):
        excluded = make_scorecard(1, "2023-01-01", [2] * 9, exclude=True)
        assert len(putts_per_round([excluded])) == 1

    def test_unparseable_dates_sort_last_stably(self):
        series = [
            PuttsDatum(round_id="a", date="not a date", putts=1),
            PuttsDatum(round_id="b", date="2023-02-01", putts=1),
            PuttsDatum(round_id="c", date="", putts=1),
            PuttsDatum(round_id="d", date="2022-12-31", putts=1),
        ]
        assert [d.round_id for d in sort_by_date(series)] == ["d", "b", "a", "c"]

    def test_date_falls_back_to_id(self):
        sc = Scorecard.model_validate({"id": 55, "holes": []})
        assert putts_per_round([sc])[0].date == "55"


class TestEligibility:
    """Test summary filters."""

    def test_implausible_putts_excluded(self):
        # 9 holes need at least 9 x 0.8 = 7.2 putts
        datum = PuttsDatum(round_id="1", date="2023-01-01", putts=5, holes_count=9)
        assert not is_summary_eligible(datum)

    def test_threshold_boundary(self):
        assert is_summary_eligible(PuttsDatum("1", "2023-01-01", putts=8, holes_count=9))
        assert not is_summary_eligible(PuttsDatum("1", "2023-01-01", putts=7, holes_count=9))
        assert is_summary_eligible(PuttsDatum("1", "2023-01-01", putts=7, holes_count=9), 0.7)

    def test_partial_round_excluded(self):
        assert not is_summary_eligible(PuttsDatum("1", "2023-01-01", putts=20, holes_count=12))
        assert not is_summary_eligible(PuttsDatum("1", "2023-01-01", putts=20, holes_count=None))

    def test_excluded_from_stats(self):
        datum = PuttsDatum("1", "2023-01-01", putts=30, holes_count=18, exclude_from_stats=True)
        assert not is_summary_eligible(datum)

    def test_round_length_filter(self):
        series = [
            PuttsDatum("9", "2023-01-01", putts=15, holes_count=9),
            PuttsDatum("18", "2023-01-02", putts=30, holes_count=18),
        ]
        assert [d.round_id for d in filter_rounds(series, round_length=RoundLength.NINE)] == ["9"]
        assert [d.round_id for d in filter_rounds(series, round_length=RoundLength.EIGHTEEN)] == ["18"]
        assert len(filter_rounds(series)) == 2

    def test_date_range_filter(self):
        series = [
            PuttsDatum("a", "2023-01-01", putts=15, holes_count=9),
            PuttsDatum("b", "2023-03-01", putts=15, holes_count=9),
            PuttsDatum("c", "garbage", putts=15, holes_count=9),
        ]
        date_range = DateRange(start="2023-02-01", end="2023-03-01")
        assert [d.round_id for d in filter_rounds(series, date_range)] == ["b"]


class TestSummary:
    """Test the putting summary."""

    def test_summary(self):
        scorecards = [
            make_scorecard(1, "2023-01-01", [1, 2, 2, 3, 2, 2, 4, 2, 2]),
            make_scorecard(2, "2023-01-08", [2] * 18),
            make_scorecard(3, "2023-01-15", [0] * 9),
        ]
        summary = summarize_putting(scorecards)
        assert summary.rounds == 2
        assert summary.total_putts == 20 + 36
        assert summary.holes == 27
        assert summary.average_per_round == pytest.approx(28.0)
        assert summary.average_per_hole == pytest.approx(56 / 27)
        assert summary.buckets == PuttBuckets(one=1, two=24, three=1, four_plus=1)

    def test_empty_summary(self):
        summary = summarize_putting([])
        assert summary.rounds == 0
        assert summary.average_per_round == 0.0
        assert summary.average_per_hole == 0.0
        assert summary.buckets.total == 0


class TestGirPutts:
    """Test putts on greens in regulation."""

    def test_gir_putts_series(self, scorecards):
        par_index = {("101", 1): 4, ("101", 2): 3}
        series = gir_putts_series(scorecards, par_index)
        by_round = {d.round_id: d for d in series}
        assert by_round["101"].gir_holes == 1
        assert by_round["101"].putts_total == 2
        assert by_round["101"].putts_average == pytest.approx(2.0)
        assert by_round["102"].gir_holes == 0
        assert by_round["102"].putts_average is None

    def test_gir_putts_series_date_order(self):
        scorecards = [
            make_scorecard(1, "2023-06-01 08:00:00", [2]),
            make_scorecard(2, "unknown", [2]),
            make_scorecard(3, "2023-01-01 08:00:00", [1]),
        ]
        series = gir_putts_series(scorecards, {})
        assert [d.round_id for d in series] == ["3", "1", "2"]
        assert series[2].start is None
