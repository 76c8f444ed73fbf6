#!/usr/bin/env python3
"""
Approach outcome by club: where shots played from the fairway end up.
"""

from typing import Dict, Iterable, Mapping, Optional

from ..storage.model import Lie, Shot
from .clubs import ClubRegistry
from .interface import DateRange, OutcomeRow, OutcomeTable, round_in_range


APPROACH_OUTCOMES = ('green', 'fairway', 'other')


def approach_outcome(end_lie: Optional[Lie]) -> str:
    if end_lie == Lie.GREEN:
        return 'green'
    if end_lie == Lie.FAIRWAY:
        return 'fairway'
    return 'other'


def approach_by_club(shots: Iterable[Shot], registry: ClubRegistry,
                     date_range: Optional[DateRange] = None,
                     round_starts: Optional[Mapping] = None) -> OutcomeTable:
    """
    Count end lies of fairway-start shots per club.

    Rows are sorted by green rate, then fairway rate, then volume, all
    descending.
    """
    round_starts = round_starts or {}
    table = OutcomeTable()
    rows: Dict[str, OutcomeRow] = {}
    for shot in shots:
        table.diagnostics.incr('shots.total')
        if not round_in_range(date_range, shot.round_id, round_starts):
            continue
        if shot.start_lie != Lie.FAIRWAY:
            continue
        key = registry.club_key(shot.club_id)
        if key is None:
            table.diagnostics.incr('shots.skipped_club')
            continue
        table.diagnostics.incr('shots.fairway_start')

        row = rows.get(key)
        if row is None:
            row = OutcomeRow(
                club_key=key,
                label=registry.label_for_key(key),
                counts={outcome: 0 for outcome in APPROACH_OUTCOMES},
                model=registry.model_for_key(key),
            )
            rows[key] = row
        row.total += 1
        row.counts[approach_outcome(shot.end_lie)] += 1

    table.rows = sorted(rows.values(), key=lambda r: (-r.pct('green'), -r.pct('fairway'), -r.total))
    table.diagnostics.incr('rows', len(table.rows))
    return table
