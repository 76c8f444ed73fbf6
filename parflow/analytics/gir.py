#!/usr/bin/env python3
"""
Greens in regulation (GIR).

A hole is hit in regulation when the ball is on the green with at least two
strokes to spare for par: ``strokes - putts <= par - 2``. Holes missing any of
par, strokes or putts are left out of both the numerator and denominator.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..const import DEFAULT_GIR_MIN_HOLES
from ..processors.joiner import HoleScore, RoundHoleKey
from ..storage.model import Course, Scorecard
from .interface import DateRange, Diagnostics, percent


def classify_gir(strokes: Optional[int], putts: Optional[int], par: Optional[int]) -> Optional[bool]:
    """GIR flag of a hole, or None when an input is missing"""
    if strokes is None or putts is None or par is None:
        return None
    return strokes - putts <= par - 2


@dataclass
class GirRoundRow:
    round_id: str
    date_label: str
    course_global_id: Optional[int] = None
    course_name: Optional[str] = None
    holes_considered: int = 0
    gir_holes: int = 0

    @property
    def gir_pct(self) -> float:
        return percent(self.gir_holes, self.holes_considered)


@dataclass
class GirViews:
    """All rounds with a complete hole, and the full or half rounds"""
    all_holes: List[GirRoundRow] = field(default_factory=list)
    full_rounds: List[GirRoundRow] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @staticmethod
    def totals(rows: Sequence[GirRoundRow]) -> Dict[str, float]:
        holes = sum(r.holes_considered for r in rows)
        gir = sum(r.gir_holes for r in rows)
        return {'rounds': len(rows), 'holes': holes, 'gir': gir, 'gir_pct': percent(gir, holes)}


def course_names_by_global_id(scorecards: Iterable[Scorecard],
                              courses_by_round: Mapping[str, Sequence[Course]]) -> Dict[int, str]:
    """
    Resolve course names from the decoder's course messages.

    Course messages are per decoded file (so per round); they are joined to
    course global ids through the scorecards. The first name seen wins.
    """
    names: Dict[int, str] = {}
    for sc in scorecards:
        if sc.course_global_id is None or sc.course_global_id in names:
            continue
        courses = courses_by_round.get(sc.round_id) or []
        if courses and courses[0].name:
            names[sc.course_global_id] = courses[0].name
    return names


def _round_sort_key(row: GirRoundRow):
    return (0, int(row.round_id), "") if row.round_id.isdigit() else (1, 0, row.round_id)


def gir_per_round(scorecards: Iterable[Scorecard],
                  par_index: Mapping[RoundHoleKey, int],
                  score_index: Optional[Mapping[RoundHoleKey, HoleScore]] = None,
                  date_range: Optional[DateRange] = None,
                  ignored_courses: Iterable[int] = (),
                  course_names: Optional[Mapping[int, str]] = None,
                  min_holes: int = 1,
                  diagnostics: Optional[Diagnostics] = None) -> List[GirRoundRow]:
    """
    GIR counts per scorecard round, sorted by round id.

    Args:
        scorecards: Scorecard export rounds
        par_index: ``par_by_round_hole`` from the joiner
        score_index: ``score_putts_by_round_hole``; supplies strokes or putts
            that a scorecard hole lacks
        date_range: Optional filter on the round start
        ignored_courses: Course global ids to leave out
        course_names: Course global id to display name
        min_holes: Minimum complete holes for a round to be listed
    """
    score_index = score_index or {}
    course_names = course_names or {}
    ignored = set(ignored_courses)
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    rows = []
    for sc in scorecards:
        if sc.course_global_id is not None and sc.course_global_id in ignored:
            diagnostics.incr('rounds.ignored_course')
            continue
        if date_range is not None and not date_range.contains(sc.formatted_start_time or sc.start_time):
            diagnostics.incr('rounds.out_of_range')
            continue

        row = GirRoundRow(
            round_id=sc.round_id,
            date_label=sc.formatted_start_time or sc.start_time or "",
            course_global_id=sc.course_global_id,
            course_name=course_names.get(sc.course_global_id) if sc.course_global_id is not None else None,
        )
        for hole in sc.holes:
            key = (sc.round_id, hole.number)
            fallback = score_index.get(key)
            strokes = hole.strokes if hole.strokes is not None else (fallback.strokes if fallback else None)
            putts = hole.putts if hole.putts is not None else (fallback.putts if fallback else None)
            gir = classify_gir(strokes, putts, par_index.get(key))
            if gir is None:
                diagnostics.incr('holes.incomplete')
                continue
            row.holes_considered += 1
            if gir:
                row.gir_holes += 1
        if row.holes_considered >= max(1, min_holes):
            rows.append(row)
    return sorted(rows, key=_round_sort_key)


def gir_views(scorecards: Sequence[Scorecard],
              par_index: Mapping[RoundHoleKey, int],
              score_index: Optional[Mapping[RoundHoleKey, HoleScore]] = None,
              date_range: Optional[DateRange] = None,
              ignored_courses: Iterable[int] = (),
              course_names: Optional[Mapping[int, str]] = None,
              full_round_min_holes: int = DEFAULT_GIR_MIN_HOLES) -> GirViews:
    """Both GIR views over the same inputs"""
    ignored = list(ignored_courses)
    diagnostics = Diagnostics()
    all_holes = gir_per_round(scorecards, par_index, score_index, date_range, ignored,
                              course_names, min_holes=1, diagnostics=diagnostics)
    full_rounds = [row for row in all_holes if row.holes_considered >= full_round_min_holes]
    diagnostics.incr('rows.all_holes', len(all_holes))
    diagnostics.incr('rows.full_rounds', len(full_rounds))
    return GirViews(all_holes=all_holes, full_rounds=full_rounds, diagnostics=diagnostics)
