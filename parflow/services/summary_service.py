#!/usr/bin/env python3
"""
Round Summary Service - Builds the derived rounds document

Combines the scorecard export with per-round fitness extras from the decoded
FIT files (heart rate, distance, par per hole) and GIR flags per hole.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np

from ..config import Settings, get_settings
from ..const import SCORECARD_FIT_PATTERN
from ..analytics.gir import classify_gir
from ..processors.normalizer import RecordNormalizer, scan_par_map
from ..processors.sources import load_par_maps, load_scorecards, read_json, round_id_from_path
from ..storage.document import write_derived_document
from ..storage.model import DerivedHole, DerivedRound, FitExtras, GirSummary, Scorecard
from ..utils import get_logger

logger = get_logger(__name__)


def _message_list(document: Dict[str, Any], *keys: str) -> List[Dict[str, Any]]:
    for key in keys:
        value = document.get(key)
        if isinstance(value, list) and value:
            return [item for item in value if isinstance(item, dict)]
    return []


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def fit_extras_from_document(document: Any, par_by_hole: Optional[Dict[int, int]] = None) -> FitExtras:
    """
    Fitness extras of one decoded file.

    Args:
        document: Decoded FIT document (rich shape)
        par_by_hole: Curated par map of the round; when empty the document is
            scanned for ``{hole, par}`` shaped mappings, then for hole messages

    Returns:
        FitExtras with heart rate stats from record messages and the total
        distance of the first session message
    """
    if not isinstance(document, dict):
        return FitExtras(has_fit=False)

    extras = FitExtras(has_fit=True)
    heart_rates = [r['heart_rate'] for r in _message_list(document, 'records', 'record')
                   if _is_number(r.get('heart_rate'))]
    if heart_rates:
        extras.avg_heart_rate = float(np.mean(heart_rates))
        extras.max_heart_rate = float(max(heart_rates))

    sessions = _message_list(document, 'sessions', 'session')
    if sessions and _is_number(sessions[0].get('total_distance')):
        extras.total_distance = float(sessions[0]['total_distance'])

    pars = dict(par_by_hole or {})
    if not pars:
        pars = scan_par_map(document)
    if not pars:
        holes = RecordNormalizer().normalize_document(document).holes
        pars = {hole.hole_number: hole.par for hole in holes if hole.par is not None}
    extras.par_by_hole = pars or None
    return extras


def build_derived_round(scorecard: Scorecard, extras: FitExtras) -> DerivedRound:
    """Derived round with par and GIR per hole and the GIR putts summary"""
    par_by_hole = extras.par_by_hole or {}
    holes = []
    gir = GirSummary()
    for hole in scorecard.holes:
        par = par_by_hole.get(hole.number)
        hit = classify_gir(hole.strokes, hole.putts, par)
        if hit:
            gir.holes += 1
            gir.putts_total += hole.putts
        holes.append(DerivedHole(
            number=hole.number,
            putts=hole.putts,
            strokes=hole.strokes,
            penalties=hole.penalties,
            par=par,
            gir=hit,
        ))
    if gir.holes:
        gir.putts_average = gir.putts_total / gir.holes

    round_id = int(scorecard.round_id) if scorecard.round_id.isdigit() else scorecard.round_id
    return DerivedRound(
        id=round_id,
        date=scorecard.date_label,
        start_time=scorecard.start_time,
        formatted_start_time=scorecard.formatted_start_time,
        end_time=scorecard.end_time,
        formatted_end_time=scorecard.formatted_end_time,
        holes_completed=scorecard.holes_completed,
        exclude_from_stats=scorecard.exclude_from_stats,
        course_global_id=scorecard.course_global_id,
        strokes=scorecard.strokes,
        steps_taken=scorecard.steps_taken,
        distance_walked=scorecard.distance_walked,
        holes=holes,
        fit=extras,
        gir=gir,
    )


class RoundSummaryService:
    """Builds and writes ``derived/rounds.json``"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._fit_index: Optional[Dict[str, Path]] = None

    def fit_document_path(self, round_id: str) -> Optional[Path]:
        """Decoded file of a round: the scorecard raw data file when present"""
        preferred = self.settings.fit_json_dir / f"Golf-{SCORECARD_FIT_PATTERN}-{round_id}.json"
        if preferred.is_file():
            return preferred
        if self._fit_index is None:
            self._fit_index = {}
            if self.settings.fit_json_dir.is_dir():
                for path in sorted(self.settings.fit_json_dir.glob('*.json')):
                    file_round_id = round_id_from_path(path)
                    if file_round_id is not None:
                        self._fit_index.setdefault(file_round_id, path)
        return self._fit_index.get(round_id)

    def build_rounds(self) -> List[DerivedRound]:
        scorecard_path = self.settings.export_path(self.settings.scorecard_export)
        logger.info(f"📋 Loading scorecards: {scorecard_path}")
        scorecards = load_scorecards(scorecard_path)
        par_maps = load_par_maps(self.settings.pars_dir)

        rounds = []
        with_fit = 0
        for scorecard in scorecards:
            path = self.fit_document_path(scorecard.round_id)
            document = read_json(path) if path else None
            extras = fit_extras_from_document(document, par_maps.get(scorecard.round_id))
            if extras.has_fit:
                with_fit += 1
            rounds.append(build_derived_round(scorecard, extras))
        logger.info(f"Built {len(rounds)} rounds ({with_fit} with decoded FIT data)")
        return rounds

    def summarize(self, output: Optional[Path] = None) -> Path:
        """Build every round and write the derived document"""
        rounds = self.build_rounds()
        return write_derived_document(rounds, output or self.settings.output_file)
