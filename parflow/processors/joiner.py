#!/usr/bin/env python3
"""
Cross-Source Joiner - Builds per-(round, hole) lookup maps

Par, score/putts and first-tee-shot data come from independent sources that
are joined by ``(round_id, hole_number)``. Where several sources supply the
same value an explicit precedence chain decides, evaluated per key.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from ..storage.model import Hole, Score, Scorecard, Shot


RoundHoleKey = Tuple[str, int]
V = TypeVar('V')


@dataclass(frozen=True)
class HoleScore:
    strokes: Optional[int] = None
    putts: Optional[int] = None
    penalties: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.strokes is not None and self.putts is not None


@dataclass(frozen=True)
class HoleComposite:
    """Joined view of one played hole"""
    round_id: str
    hole_number: int
    par: Optional[int] = None
    strokes: Optional[int] = None
    putts: Optional[int] = None
    first_tee_shot: Optional[Shot] = None


def resolve_by_precedence(sources: Sequence[Mapping[RoundHoleKey, V]]) -> Dict[RoundHoleKey, V]:
    """Merge sources so that, per key, the earliest source holding it wins"""
    merged: Dict[RoundHoleKey, V] = {}
    for source in sources:
        for key, value in source.items():
            if key not in merged:
                merged[key] = value
    return merged


def par_map_source(par_maps: Mapping[str, Mapping[int, int]]) -> Dict[RoundHoleKey, int]:
    """Curated ``{round_id: {hole: par}}`` maps as a keyed source"""
    return {
        (str(round_id), int(hole_number)): par
        for round_id, par_by_hole in par_maps.items()
        for hole_number, par in par_by_hole.items()
    }


def hole_message_source(holes: Iterable[Hole]) -> Dict[RoundHoleKey, int]:
    source: Dict[RoundHoleKey, int] = {}
    for hole in holes:
        if hole.round_id is None or hole.par is None:
            continue
        source.setdefault((hole.round_id, hole.hole_number), hole.par)
    return source


def build_par_index(par_maps: Optional[Mapping[str, Mapping[int, int]]] = None,
                    holes: Iterable[Hole] = ()) -> Dict[RoundHoleKey, int]:
    """``par_by_round_hole``: curated par maps, then decoder Hole messages"""
    return resolve_by_precedence([par_map_source(par_maps or {}), hole_message_source(holes)])


def scorecard_source(scorecards: Iterable[Scorecard]) -> Dict[RoundHoleKey, HoleScore]:
    source: Dict[RoundHoleKey, HoleScore] = {}
    for scorecard in scorecards:
        for hole in scorecard.holes:
            source.setdefault(
                (scorecard.round_id, hole.number),
                HoleScore(strokes=hole.strokes, putts=hole.putts, penalties=hole.penalties),
            )
    return source


def score_message_source(scores: Iterable[Score]) -> Dict[RoundHoleKey, HoleScore]:
    source: Dict[RoundHoleKey, HoleScore] = {}
    for score in scores:
        if score.round_id is None:
            continue
        source.setdefault(
            (score.round_id, score.hole_number),
            HoleScore(strokes=score.strokes, putts=score.putts, penalties=score.penalties),
        )
    return source


def merge_hole_scores(sources: Sequence[Mapping[RoundHoleKey, HoleScore]]) -> Dict[RoundHoleKey, HoleScore]:
    """Per key and per field, the earliest source with a value wins"""
    merged: Dict[RoundHoleKey, HoleScore] = {}
    for key in resolve_by_precedence(sources):
        values = {}
        for name in ('strokes', 'putts', 'penalties'):
            values[name] = next(
                (getattr(s[key], name) for s in sources if key in s and getattr(s[key], name) is not None),
                None,
            )
        merged[key] = HoleScore(**values)
    return merged


def build_score_putts_index(scorecards: Iterable[Scorecard] = (),
                            scores: Iterable[Score] = ()) -> Dict[RoundHoleKey, HoleScore]:
    """``score_putts_by_round_hole``: scorecard export, then decoder Score messages"""
    return merge_hole_scores([scorecard_source(scorecards), score_message_source(scores)])


def _ordered_minimum(shots: List[Shot], attribute: str) -> Optional[Shot]:
    best: Optional[Shot] = None
    for shot in shots:
        value = getattr(shot, attribute)
        if value is None:
            continue
        # Strict comparison keeps the earliest of equal values
        if best is None or value < getattr(best, attribute):
            best = shot
    return best


def select_first_tee_shot(shots: Sequence[Shot]) -> Optional[Shot]:
    """
    Pick the tee shot of a hole: smallest shot_order when any shot has one,
    otherwise smallest shot_time, otherwise the first shot in input order.
    """
    shots = list(shots)
    if not shots:
        return None
    return _ordered_minimum(shots, 'shot_order') or _ordered_minimum(shots, 'shot_time') or shots[0]


def group_shots(shots: Iterable[Shot]) -> Dict[RoundHoleKey, List[Shot]]:
    grouped: Dict[RoundHoleKey, List[Shot]] = {}
    for shot in shots:
        if shot.round_id is None:
            continue
        grouped.setdefault((shot.round_id, shot.hole_number), []).append(shot)
    return grouped


def build_first_tee_shot_index(shots: Iterable[Shot]) -> Dict[RoundHoleKey, Shot]:
    """``first_tee_shot_by_round_hole``"""
    index = {}
    for key, hole_shots in group_shots(shots).items():
        first = select_first_tee_shot(hole_shots)
        if first is not None:
            index[key] = first
    return index


def join_holes(par_index: Mapping[RoundHoleKey, int],
               score_index: Mapping[RoundHoleKey, HoleScore],
               shot_index: Optional[Mapping[RoundHoleKey, Shot]] = None) -> List[HoleComposite]:
    """Composites for every key that has both a par and a score, in key order"""
    shot_index = shot_index or {}
    composites = []
    for key in sorted(set(par_index) & set(score_index), key=_sort_key):
        score = score_index[key]
        composites.append(HoleComposite(
            round_id=key[0],
            hole_number=key[1],
            par=par_index[key],
            strokes=score.strokes,
            putts=score.putts,
            first_tee_shot=shot_index.get(key),
        ))
    return composites


def _sort_key(key: RoundHoleKey):
    round_id, hole_number = key
    return (0, int(round_id), hole_number) if round_id.isdigit() else (1, round_id, hole_number)
