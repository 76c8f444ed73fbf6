#!/usr/bin/env python3
"""
Processors module - Decoding, normalization and cross-source joins
"""

from .interface import DocumentShape, ProcessingStatus, DecodeResult, BatchResult, FitDecoder
from .normalizer import RecordNormalizer, NormalizedMessages, normalize_message
from .joiner import (
    HoleScore, HoleComposite,
    build_par_index, build_score_putts_index, build_first_tee_shot_index,
    select_first_tee_shot, join_holes,
)
from .decoder import FitParseDecoder, FitCsvToolDecoder, decode_batch

__all__ = [
    'DocumentShape', 'ProcessingStatus', 'DecodeResult', 'BatchResult', 'FitDecoder',

    # Normalization
    'RecordNormalizer', 'NormalizedMessages', 'normalize_message',

    # Joins
    'HoleScore', 'HoleComposite',
    'build_par_index', 'build_score_putts_index', 'build_first_tee_shot_index',
    'select_first_tee_shot', 'join_holes',

    # Decoders
    'FitParseDecoder', 'FitCsvToolDecoder', 'decode_batch',
]
