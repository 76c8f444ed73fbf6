#!/usr/bin/env python3
"""
Analytics
"""

from .interface import (
    MetricType, RoundLength, DistanceUnits, DateRange, Diagnostics,
    OutcomeRow, OutcomeTable, percent,
)
from .clubs import ClubRegistry
from .putting import PuttsDatum, PuttingSummary, putts_per_round, summarize_putting, gir_putts_series
from .gir import GirRoundRow, GirViews, classify_gir, gir_per_round, gir_views
from .distances import ClubDistanceRow, ClubDistanceReport, club_distances, percentile, trim
from .approach import approach_by_club
from .par3 import par3_by_club, par3_from_decoded

__all__ = [
    # Data structures
    'MetricType', 'RoundLength', 'DistanceUnits', 'DateRange', 'Diagnostics',
    'OutcomeRow', 'OutcomeTable', 'percent',
    'ClubRegistry',

    # Putting
    'PuttsDatum', 'PuttingSummary', 'putts_per_round', 'summarize_putting', 'gir_putts_series',

    # GIR
    'GirRoundRow', 'GirViews', 'classify_gir', 'gir_per_round', 'gir_views',

    # Club distances
    'ClubDistanceRow', 'ClubDistanceReport', 'club_distances', 'percentile', 'trim',

    # Outcome tables
    'approach_by_club', 'par3_by_club', 'par3_from_decoded',
]
