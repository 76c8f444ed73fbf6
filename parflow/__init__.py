#!/usr/bin/env python3
"""
ParFlow - Golf round normalization and derived metrics
Maps decoded FIT golf messages and Garmin exports onto canonical records and
computes putting, GIR, club distance, approach and par-3 statistics
"""

# Setup logging first
from .utils import setup_parflow_logging
setup_parflow_logging()

# Canonical records and the derived document
from .storage.model import (
    MessageCategory, Lie, FileInfo, Course, Hole, Score, Shot,
    Scorecard, Club, ClubType, DerivedRound, DerivedHole,
)
from .storage.document import read_derived_document, write_derived_document

# Normalization and joins
from .processors.normalizer import RecordNormalizer, normalize_message
from .processors.joiner import (
    build_par_index, build_score_putts_index, build_first_tee_shot_index,
)

# Metrics
from .analytics.clubs import ClubRegistry
from .analytics.interface import DateRange

__version__ = "0.1.0"

__all__ = [
    # Records
    'MessageCategory', 'Lie', 'FileInfo', 'Course', 'Hole', 'Score', 'Shot',
    'Scorecard', 'Club', 'ClubType', 'DerivedRound', 'DerivedHole',

    # Derived document
    'read_derived_document', 'write_derived_document',

    # Processing
    'RecordNormalizer', 'normalize_message',
    'build_par_index', 'build_score_putts_index', 'build_first_tee_shot_index',

    # Analytics
    'ClubRegistry', 'DateRange',
]
