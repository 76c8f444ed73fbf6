#!/usr/bin/env python3
"""
Analytics interface definitions and data structures.

This module defines the filters, result rows and small helpers shared by
the golf metrics (putting, GIR, club distances, approach and par-3).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from dateutil import parser as date_parser

from ..exceptions import InvalidParameterError


class MetricType(Enum):
    """Metrics computed by the engine"""
    PUTTING = "putting"
    GIR = "gir"
    CLUB_DISTANCES = "club_distances"
    APPROACH = "approach"
    PAR3 = "par3"


class RoundLength(Enum):
    """Round-length filter of the putting summary"""
    ALL = "all"
    NINE = "9"
    EIGHTEEN = "18"


class DistanceUnits(Enum):
    METERS = "meters"
    YARDS = "yards"


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse a date-like value; None when it cannot be parsed.

    Timezone-aware values are converted to naive UTC so that every parsed
    value is comparable with every other.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = date_parser.parse(value)
        except (ValueError, OverflowError):
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@dataclass
class DateRange:
    """Inclusive date range; an open end is unbounded"""
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def __post_init__(self):
        for name in ('start', 'end'):
            raw = getattr(self, name)
            if raw is None:
                continue
            parsed = parse_datetime(raw)
            if parsed is None:
                raise InvalidParameterError(f"Invalid date range {name}", {name: str(raw)})
            setattr(self, name, parsed)
        if self.start and self.end and self.start > self.end:
            raise InvalidParameterError(
                "Date range start must not be after its end",
                {'start': self.start.isoformat(), 'end': self.end.isoformat()}
            )

    def contains(self, value: Any) -> bool:
        """Whether a date-like value lies in the range; unparseable values never do"""
        moment = parse_datetime(value)
        if moment is None:
            return False
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment > self.end:
            return False
        return True


def in_range(date_range: Optional[DateRange], value: Any) -> bool:
    """No active range admits everything"""
    return date_range is None or date_range.contains(value)


def percent(part: float, total: float) -> float:
    """Percentage of part in total; 0.0 when total is zero"""
    if not total:
        return 0.0
    return part / total * 100.0


@dataclass
class Diagnostics:
    """Debug counters reported alongside an aggregation"""
    counters: Dict[str, int] = field(default_factory=dict)

    def incr(self, name: str, amount: int = 1) -> None:
        self.counters[name] = self.counters.get(name, 0) + amount

    def get(self, name: str) -> int:
        return self.counters.get(name, 0)


@dataclass
class OutcomeRow:
    """Outcome counts of one club (approach and par-3 tables)"""
    club_key: str
    label: str
    total: int = 0
    counts: Dict[str, int] = field(default_factory=dict)
    model: Optional[str] = None

    def pct(self, outcome: str) -> float:
        return percent(self.counts.get(outcome, 0), self.total)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'club': self.club_key,
            'label': self.label,
            'model': self.model,
            'total': self.total,
        }
        for outcome, count in self.counts.items():
            result[outcome] = count
            result[f"{outcome}_pct"] = self.pct(outcome)
        return result


@dataclass
class OutcomeTable:
    rows: List[OutcomeRow] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


def round_start_index(scorecards: Iterable[Any]) -> Dict[str, Optional[datetime]]:
    """Round id to parsed start time (formatted start, then raw start)"""
    return {
        sc.round_id: parse_datetime(sc.formatted_start_time or sc.start_time)
        for sc in scorecards
    }


def round_in_range(date_range: Optional[DateRange], round_id: Optional[str],
                   round_starts: Dict[str, Optional[datetime]]) -> bool:
    """Whether a round passes the date filter; unknown rounds fail an active filter"""
    if date_range is None:
        return True
    if round_id is None:
        return False
    return date_range.contains(round_starts.get(round_id))
