#!/usr/bin/env python3
"""
Services package - High-level services for the offline golf pipeline
"""

from .summary_service import RoundSummaryService
from .metrics_service import MetricsService, GolfDataset, load_dataset
from .extraction_service import ExtractionService

__all__ = ['RoundSummaryService', 'MetricsService', 'GolfDataset', 'load_dataset', 'ExtractionService']
