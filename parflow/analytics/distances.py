#!/usr/bin/env python3
"""
Club carry-distance distributions.

Per club, distances are trimmed to the ``[p_low, p_high]`` percentile band and
binned into fixed-width bins shared by every club, from zero to the largest
trimmed distance across all clubs. Percentiles interpolate linearly at index
``(n - 1) * p`` (numpy's default method).
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from ..const import (
    DEFAULT_BIN_SIZE, DEFAULT_HIGH_PERCENTILE, DEFAULT_LOW_PERCENTILE,
    DEFAULT_WEDGE_FULL_SWING_PERCENTILE, METERS_TO_YARDS,
)
from ..exceptions import InvalidParameterError
from ..storage.model import Shot
from .clubs import ClubRegistry
from .interface import DateRange, Diagnostics, DistanceUnits, round_in_range


def validate_percentiles(low: float, high: float) -> None:
    """Raise InvalidParameterError unless ``0 <= low < high <= 100``"""
    for name, value in (('low', low), ('high', high)):
        if value is None or not math.isfinite(value) or not 0 <= value <= 100:
            raise InvalidParameterError(f"{name} percentile must be within 0-100", {name: value})
    if low >= high:
        raise InvalidParameterError("low percentile must be lower than high percentile",
                                    {'low': low, 'high': high})


def percentile(values: Sequence[float], p: float) -> float:
    """Linear-interpolated percentile, p in 0-100; 0.0 for no values"""
    if len(values) == 0:
        return 0.0
    return float(np.percentile(np.asarray(values, dtype=float), p))


@dataclass(frozen=True)
class TrimBounds:
    low: float
    high: float

    def apply(self, values: Iterable[float]) -> List[float]:
        return [v for v in values if self.low <= v <= self.high]


def trim(values: Sequence[float], low_pct: float = DEFAULT_LOW_PERCENTILE,
         high_pct: float = DEFAULT_HIGH_PERCENTILE):
    """Trim values to their percentile band; returns ``(trimmed, bounds)``"""
    bounds = TrimBounds(percentile(values, low_pct), percentile(values, high_pct))
    return bounds.apply(values), bounds


def bin_count(axis_max: float, bin_size: float = DEFAULT_BIN_SIZE) -> int:
    return max(1, math.ceil(max(0, math.ceil(axis_max)) / bin_size))


def histogram(values: Iterable[float], axis_max: float, bin_size: float = DEFAULT_BIN_SIZE) -> List[int]:
    """Count values into bins of ``bin_size`` from zero; values above the axis go to the last bin"""
    count = bin_count(axis_max, bin_size)
    bins = [0] * count
    for value in values:
        capped = max(0.0, min(value, axis_max))
        bins[min(count - 1, int(math.floor(capped / bin_size)))] += 1
    return bins


@dataclass
class ClubDistanceRow:
    club_id: int
    label: str
    p_low: float
    p_high: float
    average: float
    maximum: float
    histogram: List[int] = field(default_factory=list)
    model: Optional[str] = None
    type_name: str = ""
    is_wedge: bool = False
    full_swing: Optional[float] = None
    samples: int = 0


@dataclass
class ClubDistanceReport:
    rows: List[ClubDistanceRow] = field(default_factory=list)
    axis_max: float = 0.0
    bin_size: float = DEFAULT_BIN_SIZE
    units: DistanceUnits = DistanceUnits.METERS
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


def distances_by_club(shots: Iterable[Shot], registry: ClubRegistry,
                      units: DistanceUnits = DistanceUnits.METERS,
                      date_range: Optional[DateRange] = None,
                      round_starts: Optional[Mapping] = None,
                      diagnostics: Optional[Diagnostics] = None) -> Dict[int, List[float]]:
    """Usable distances grouped by active registered club, in the requested units"""
    round_starts = round_starts or {}
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    grouped: Dict[int, List[float]] = {}
    for shot in shots:
        diagnostics.incr('shots.total')
        if registry.get(shot.club_id) is None:
            continue
        if not round_in_range(date_range, shot.round_id, round_starts):
            continue
        if shot.distance is None:
            continue
        distance = shot.distance if units == DistanceUnits.METERS else shot.distance * METERS_TO_YARDS
        if not math.isfinite(distance) or distance < 0:
            continue
        grouped.setdefault(shot.club_id, []).append(distance)
        diagnostics.incr('shots.used')
    return grouped


def club_distances(shots: Iterable[Shot], registry: ClubRegistry,
                   low_percentile: float = DEFAULT_LOW_PERCENTILE,
                   high_percentile: float = DEFAULT_HIGH_PERCENTILE,
                   units: DistanceUnits = DistanceUnits.METERS,
                   bin_size: float = DEFAULT_BIN_SIZE,
                   date_range: Optional[DateRange] = None,
                   round_starts: Optional[Mapping] = None,
                   wedge_percentile: float = DEFAULT_WEDGE_FULL_SWING_PERCENTILE) -> ClubDistanceReport:
    """
    Percentile-trimmed carry distance histograms per club.

    Args:
        shots: Shots with carry distance in meters
        registry: Club registry (excludes putter, retired and deleted clubs)
        low_percentile: Lower trim percentile (0-100)
        high_percentile: Upper trim percentile (0-100), above low_percentile
        units: Output units
        bin_size: Histogram bin width in output units
        date_range: Optional filter on the shot's round start
        round_starts: Round id to start time, required with date_range
        wedge_percentile: Percentile of the trimmed set reported for wedges

    Returns:
        ClubDistanceReport with rows sorted by trimmed average, longest first

    Raises:
        InvalidParameterError: For percentiles outside 0-100 or low >= high
    """
    validate_percentiles(low_percentile, high_percentile)
    if not bin_size or bin_size <= 0:
        raise InvalidParameterError("bin size must be positive", {'bin_size': bin_size})

    report = ClubDistanceReport(bin_size=bin_size, units=units)
    grouped = distances_by_club(shots, registry, units, date_range, round_starts, report.diagnostics)

    trimmed_by_club: Dict[int, List[float]] = {}
    for club_id, distances in grouped.items():
        club = registry.get(club_id)
        trimmed, bounds = trim(distances, low_percentile, high_percentile)
        if not trimmed:
            continue
        is_wedge = registry.is_wedge(club)
        report.rows.append(ClubDistanceRow(
            club_id=club_id,
            label=registry.label(club_id),
            p_low=bounds.low,
            p_high=bounds.high,
            average=float(np.mean(trimmed)),
            maximum=max(trimmed),
            model=club.model,
            type_name=registry.type_name(club),
            is_wedge=is_wedge,
            full_swing=percentile(trimmed, wedge_percentile) if is_wedge else None,
            samples=len(trimmed),
        ))
        trimmed_by_club[club_id] = trimmed
        report.axis_max = max(report.axis_max, max(trimmed))

    for row in report.rows:
        row.histogram = histogram(trimmed_by_club[row.club_id], report.axis_max, bin_size)
    report.rows.sort(key=lambda r: -r.average)
    report.diagnostics.incr('rows', len(report.rows))
    return report
