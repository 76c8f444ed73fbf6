#!/usr/bin/env python3
"""
Storage Module - Canonical models and the derived rounds document
"""

from .model import (
    MessageCategory, Lie, FairwayOutcome,
    FileInfo, Course, Hole, Score, Shot,
    Scorecard, ScorecardHole, Club, ClubType,
    DerivedHole, DerivedRound, DerivedRoundsDocument, FitExtras, GirSummary,
)
from .document import (
    dump_derived_document, load_derived_document,
    read_derived_document, write_derived_document,
)

__all__ = [
    'MessageCategory', 'Lie', 'FairwayOutcome',
    'FileInfo', 'Course', 'Hole', 'Score', 'Shot',
    'Scorecard', 'ScorecardHole', 'Club', 'ClubType',
    'DerivedHole', 'DerivedRound', 'DerivedRoundsDocument', 'FitExtras', 'GirSummary',
    'dump_derived_document', 'load_derived_document',
    'read_derived_document', 'write_derived_document',
]
