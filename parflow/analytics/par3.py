#!/usr/bin/env python3
"""
Par-3 tee-shot accuracy by club.

The first tee shot of every par-3 hole is credited with a green in regulation
when the hole was played in ``strokes - putts <= 1``.
"""

from typing import Dict, Iterable, Mapping, Optional, Tuple

from ..processors.joiner import (
    HoleScore, RoundHoleKey, build_first_tee_shot_index, build_par_index,
    build_score_putts_index,
)
from ..processors.normalizer import NormalizedMessages
from ..storage.model import Shot
from .clubs import ClubRegistry
from .interface import DateRange, Diagnostics, OutcomeRow, OutcomeTable, round_in_range


def par3_gir(score: Optional[HoleScore]) -> Optional[bool]:
    if score is None or not score.is_complete:
        return None
    return score.strokes - score.putts <= 1


class Par3Tally:
    """Accumulates par-3 rows keyed by club"""

    def __init__(self, registry: ClubRegistry):
        self.registry = registry
        self.rows: Dict[str, OutcomeRow] = {}

    def add(self, shot: Shot, gir: bool) -> bool:
        key = self.registry.club_key(shot.club_id)
        if key is None:
            return False
        row = self.rows.get(key)
        if row is None:
            row = OutcomeRow(
                club_key=key,
                label=self.registry.label_for_key(key),
                counts={'gir': 0},
                model=self.registry.model_for_key(key),
            )
            self.rows[key] = row
        row.total += 1
        if gir:
            row.counts['gir'] += 1
        return True

    def table(self, diagnostics: Diagnostics) -> OutcomeTable:
        rows = sorted(self.rows.values(), key=lambda r: (-r.pct('gir'), -r.total))
        diagnostics.incr('rows', len(rows))
        return OutcomeTable(rows=rows, diagnostics=diagnostics)


def par3_by_club(first_tee_shots: Mapping[RoundHoleKey, Shot],
                 par_index: Mapping[RoundHoleKey, int],
                 score_index: Mapping[RoundHoleKey, HoleScore],
                 registry: ClubRegistry,
                 date_range: Optional[DateRange] = None,
                 round_starts: Optional[Mapping] = None) -> OutcomeTable:
    """
    Par-3 GIR rate per club from the joined indexes.

    Rows are sorted by GIR rate, then volume, both descending.
    """
    round_starts = round_starts or {}
    diagnostics = Diagnostics()
    tally = Par3Tally(registry)
    for key, shot in first_tee_shots.items():
        if not round_in_range(date_range, key[0], round_starts):
            continue
        if par_index.get(key) != 3:
            continue
        diagnostics.incr('shots.par3')
        gir = par3_gir(score_index.get(key))
        if gir is None:
            continue
        diagnostics.incr('shots.scored')
        if not tally.add(shot, gir):
            diagnostics.incr('shots.skipped_club')
    return tally.table(diagnostics)


def par3_from_decoded(documents: Iterable[Tuple[str, NormalizedMessages]],
                      registry: ClubRegistry,
                      date_range: Optional[DateRange] = None,
                      round_starts: Optional[Mapping] = None) -> OutcomeTable:
    """
    Par-3 GIR rate per club derived from decoded files alone.

    Used when no shot export exists: each file supplies its own hole, score
    and shot messages, keyed by the round id of its file name.
    """
    round_starts = round_starts or {}
    diagnostics = Diagnostics()
    tally = Par3Tally(registry)
    for round_id, messages in documents:
        if not round_in_range(date_range, round_id, round_starts):
            continue
        diagnostics.incr('fit.holes', len(messages.holes))
        diagnostics.incr('fit.scores', len(messages.scores))
        diagnostics.incr('fit.shots', len(messages.shots))

        par_index = build_par_index(holes=messages.holes)
        score_index = build_score_putts_index(scores=messages.scores)
        first_shots = build_first_tee_shot_index(messages.shots)
        for key, par in par_index.items():
            if par != 3:
                continue
            diagnostics.incr('fit.par3')
            shot = first_shots.get(key)
            gir = par3_gir(score_index.get(key))
            if shot is None or gir is None:
                continue
            if not tally.add(shot, gir):
                diagnostics.incr('fit.skipped_club')
    return tally.table(diagnostics)
