#!/usr/bin/env python3
"""
Metrics Service - Loads the golf data sources once and runs the metrics
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..analytics.approach import approach_by_club
from ..analytics.clubs import ClubRegistry
from ..analytics.distances import ClubDistanceReport, club_distances
from ..analytics.gir import GirViews, course_names_by_global_id, gir_views
from ..analytics.interface import DateRange, DistanceUnits, OutcomeTable, RoundLength, round_start_index
from ..analytics.par3 import par3_by_club, par3_from_decoded
from ..analytics.putting import GirPuttsDatum, PuttingSummary, gir_putts_series, summarize_putting
from ..config import Settings, get_settings
from ..processors.joiner import (
    build_first_tee_shot_index, build_par_index, build_score_putts_index,
)
from ..processors.normalizer import NormalizedMessages, RecordNormalizer
from ..processors.sources import (
    iter_decoded_documents, load_club_types, load_clubs, load_par_maps,
    load_scorecards, load_shots,
)
from ..storage.model import Scorecard, Shot
from ..utils import get_logger

logger = get_logger(__name__)


@dataclass
class GolfDataset:
    """In-memory snapshot of every source of one run"""
    scorecards: List[Scorecard] = field(default_factory=list)
    shots: List[Shot] = field(default_factory=list)
    registry: ClubRegistry = field(default_factory=ClubRegistry)
    par_maps: Dict[str, Dict[int, int]] = field(default_factory=dict)
    decoded: List[Tuple[str, NormalizedMessages]] = field(default_factory=list)

    @property
    def holes(self):
        return [hole for _, messages in self.decoded for hole in messages.holes]

    @property
    def scores(self):
        return [score for _, messages in self.decoded for score in messages.scores]


def load_dataset(settings: Optional[Settings] = None) -> GolfDataset:
    """Load exports, curated par maps and decoded files from the data directory"""
    settings = settings or get_settings()
    normalizer = RecordNormalizer()
    dataset = GolfDataset(
        scorecards=load_scorecards(settings.export_path(settings.scorecard_export)),
        shots=load_shots(settings.export_path(settings.shot_export), normalizer),
        registry=ClubRegistry(
            load_clubs(settings.export_path(settings.club_export)),
            load_club_types(settings.export_path(settings.club_types_export)),
            putter_club_type_id=settings.metrics.putter_club_type_id,
        ),
        par_maps=load_par_maps(settings.pars_dir),
        decoded=[
            (round_id, normalizer.normalize_document(document, round_id))
            for round_id, document in iter_decoded_documents(settings.fit_json_dir)
        ],
    )
    logger.info(
        f"Loaded {len(dataset.scorecards)} scorecards, {len(dataset.shots)} shots, "
        f"{len(dataset.registry)} active clubs, {len(dataset.decoded)} decoded files"
    )
    return dataset


class MetricsService:
    """Runs the golf metrics over a loaded dataset"""

    def __init__(self, dataset: GolfDataset, settings: Optional[Settings] = None):
        self.dataset = dataset
        self.settings = settings or get_settings()
        self.round_starts = round_start_index(dataset.scorecards)
        self.par_index = build_par_index(dataset.par_maps, dataset.holes)
        self.score_index = build_score_putts_index(dataset.scorecards, dataset.scores)
        self.first_tee_shots = build_first_tee_shot_index(dataset.shots)

    def putting(self, date_range: Optional[DateRange] = None,
                round_length: RoundLength = RoundLength.ALL) -> PuttingSummary:
        return summarize_putting(self.dataset.scorecards, date_range, round_length,
                                 self.settings.metrics.implausible_putts_ratio)

    def gir_putts(self) -> List[GirPuttsDatum]:
        return gir_putts_series(self.dataset.scorecards, self.par_index)

    def gir(self, date_range: Optional[DateRange] = None,
            ignored_courses: Iterable[int] = ()) -> GirViews:
        courses_by_round = {round_id: messages.courses for round_id, messages in self.dataset.decoded}
        return gir_views(
            self.dataset.scorecards, self.par_index, self.score_index,
            date_range=date_range,
            ignored_courses=ignored_courses,
            course_names=course_names_by_global_id(self.dataset.scorecards, courses_by_round),
            full_round_min_holes=self.settings.metrics.gir_min_holes,
        )

    def club_distances(self, date_range: Optional[DateRange] = None,
                       units: DistanceUnits = DistanceUnits.METERS,
                       low_percentile: Optional[float] = None,
                       high_percentile: Optional[float] = None) -> ClubDistanceReport:
        metrics = self.settings.metrics
        return club_distances(
            self.dataset.shots, self.dataset.registry,
            low_percentile=metrics.low_percentile if low_percentile is None else low_percentile,
            high_percentile=metrics.high_percentile if high_percentile is None else high_percentile,
            units=units,
            bin_size=metrics.bin_size,
            date_range=date_range,
            round_starts=self.round_starts,
            wedge_percentile=metrics.wedge_full_swing_percentile,
        )

    def approach(self, date_range: Optional[DateRange] = None) -> OutcomeTable:
        return approach_by_club(self.dataset.shots, self.dataset.registry, date_range, self.round_starts)

    def par3(self, date_range: Optional[DateRange] = None) -> OutcomeTable:
        """Par-3 accuracy from the shot export, or from decoded files when there is none"""
        if self.dataset.shots:
            return par3_by_club(self.first_tee_shots, self.par_index, self.score_index,
                                self.dataset.registry, date_range, self.round_starts)
        logger.info("No shot export; deriving par-3 accuracy from decoded files")
        return par3_from_decoded(self.dataset.decoded, self.dataset.registry, date_range, self.round_starts)
