#!/usr/bin/env python3
"""
Putting analytics: putts per round, putting summary and GIR putts.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, TypeVar

from ..const import DEFAULT_IMPLAUSIBLE_PUTTS_RATIO, FULL_ROUND_HOLES
from ..processors.joiner import RoundHoleKey
from ..storage.model import Scorecard
from .gir import classify_gir
from .interface import DateRange, RoundLength, parse_datetime


DatedT = TypeVar("DatedT")


@dataclass
class PuttsDatum:
    """Total putts of one scorecard round"""
    round_id: str
    date: str
    putts: int
    holes_count: Optional[int] = None
    exclude_from_stats: bool = False

    @property
    def start(self) -> Optional[datetime]:
        return parse_datetime(self.date)


@dataclass
class PuttBuckets:
    """Per-hole putt counts: one or fewer, two, three, four or more"""
    one: int = 0
    two: int = 0
    three: int = 0
    four_plus: int = 0

    def add(self, putts: int) -> None:
        if putts <= 1:
            self.one += 1
        elif putts == 2:
            self.two += 1
        elif putts == 3:
            self.three += 1
        else:
            self.four_plus += 1

    @property
    def total(self) -> int:
        return self.one + self.two + self.three + self.four_plus


@dataclass
class PuttingSummary:
    rounds: int = 0
    total_putts: int = 0
    holes: int = 0
    buckets: PuttBuckets = field(default_factory=PuttBuckets)
    series: List[PuttsDatum] = field(default_factory=list)

    @property
    def average_per_round(self) -> float:
        return self.total_putts / self.rounds if self.rounds else 0.0

    @property
    def average_per_hole(self) -> float:
        return self.total_putts / self.holes if self.holes else 0.0


def _date_key(datum) -> Tuple[bool, datetime]:
    start = datum.start
    return start is None, start or datetime.min


def sort_by_date(series: Iterable[DatedT]) -> List[DatedT]:
    """Ascending by parsed date; unparseable labels go last in input order"""
    return sorted(series, key=_date_key)


def putts_per_round(scorecards: Iterable[Scorecard]) -> List[PuttsDatum]:
    """
    Total putts per scorecard round, in date order.

    Holes without putts count as zero. Every round appears, including the
    ones the summary filters would exclude.
    """
    series = [
        PuttsDatum(
            round_id=sc.round_id,
            date=sc.date_label,
            putts=sum(hole.putts or 0 for hole in sc.holes),
            holes_count=sc.holes_count,
            exclude_from_stats=sc.exclude_from_stats,
        )
        for sc in scorecards
    ]
    return sort_by_date(series)


def is_summary_eligible(datum: PuttsDatum,
                        implausible_putts_ratio: float = DEFAULT_IMPLAUSIBLE_PUTTS_RATIO) -> bool:
    """Rounds counted by summaries: not excluded, 9 or 18 holes, plausible putts"""
    if datum.exclude_from_stats:
        return False
    holes = datum.holes_count or 0
    if holes not in FULL_ROUND_HOLES:
        return False
    return datum.putts >= holes * implausible_putts_ratio


def filter_rounds(series: Sequence[PuttsDatum], date_range: Optional[DateRange] = None,
                  round_length: RoundLength = RoundLength.ALL,
                  implausible_putts_ratio: float = DEFAULT_IMPLAUSIBLE_PUTTS_RATIO) -> List[PuttsDatum]:
    filtered = []
    for datum in series:
        if date_range is not None and not date_range.contains(datum.start):
            continue
        if not is_summary_eligible(datum, implausible_putts_ratio):
            continue
        if round_length != RoundLength.ALL and datum.holes_count != int(round_length.value):
            continue
        filtered.append(datum)
    return filtered


def putt_buckets(scorecards: Iterable[Scorecard], round_ids: Set[str]) -> PuttBuckets:
    buckets = PuttBuckets()
    for sc in scorecards:
        if sc.round_id not in round_ids:
            continue
        for hole in sc.holes:
            if hole.putts is not None:
                buckets.add(hole.putts)
    return buckets


def summarize_putting(scorecards: Sequence[Scorecard], date_range: Optional[DateRange] = None,
                      round_length: RoundLength = RoundLength.ALL,
                      implausible_putts_ratio: float = DEFAULT_IMPLAUSIBLE_PUTTS_RATIO) -> PuttingSummary:
    """Putting summary over the rounds that pass every summary filter"""
    series = filter_rounds(putts_per_round(scorecards), date_range, round_length, implausible_putts_ratio)
    return PuttingSummary(
        rounds=len(series),
        total_putts=sum(d.putts for d in series),
        holes=sum(d.holes_count or 0 for d in series),
        buckets=putt_buckets(scorecards, {d.round_id for d in series}),
        series=series,
    )


@dataclass
class GirPuttsDatum:
    round_id: str
    date: str
    gir_holes: int = 0
    putts_total: int = 0

    @property
    def start(self) -> Optional[datetime]:
        return parse_datetime(self.date)

    @property
    def putts_average(self) -> Optional[float]:
        return self.putts_total / self.gir_holes if self.gir_holes else None


def gir_putts_series(scorecards: Iterable[Scorecard],
                     par_index: Mapping[RoundHoleKey, int]) -> List[GirPuttsDatum]:
    """Per round, putts summed over the greens hit in regulation only"""
    series: List[GirPuttsDatum] = []
    for sc in scorecards:
        datum = GirPuttsDatum(round_id=sc.round_id, date=sc.date_label)
        for hole in sc.holes:
            par = par_index.get((sc.round_id, hole.number))
            if classify_gir(hole.strokes, hole.putts, par):
                datum.gir_holes += 1
                datum.putts_total += hole.putts
        series.append(datum)
    return sort_by_date(series)
