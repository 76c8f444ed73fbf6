#!/usr/bin/env python3
"""
Extraction Service - Decodes FIT files and writes per-round artifacts

- decoded JSON documents (fitparse) into ``fit-json/``
- curated par maps (FitCSVTool) into ``derived/hole-pars/``
- grouped scorecard sections (FitCSVTool) into ``derived/scorecards/``
"""

from pathlib import Path
from typing import Any, Optional

from ..config import Settings, get_settings
from ..const import SCORECARD_FIT_PATTERN
from ..processors.decoder import (
    FitCsvToolDecoder, FitParseDecoder, decode_batch, write_json_document,
)
from ..processors.interface import BatchResult
from ..processors.normalizer import extract_par_map, group_sections, rows_to_objects
from ..processors.sources import find_fit_files
from ..utils import get_logger

logger = get_logger(__name__)


class ExtractionService:
    """Batch decoding steps of the offline pipeline"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def csv_decoder(self) -> FitCsvToolDecoder:
        """FitCSVTool decoder; raises ConfigurationError when the jar is missing"""
        decoder = FitCsvToolDecoder(
            self.settings.fitcsvtool_jar,
            self.settings.fit_csv_dir,
            java_bin=self.settings.java_bin,
            timeout=self.settings.decode_timeout,
        )
        decoder.check_available()
        return decoder

    def decode_to_json(self) -> BatchResult:
        """Decode every FIT file of the data directory with fitparse"""
        out_dir = self.settings.fit_json_dir
        paths = find_fit_files(self.settings.data_dir)
        logger.info(f"🔍 Found {len(paths)} FIT file(s) in {self.settings.data_dir}")

        def sink(path: Path, document: Any) -> Path:
            output = out_dir / f"{path.stem}.json"
            write_json_document(document, output)
            return output

        return decode_batch(FitParseDecoder(), paths, self.settings.decode_workers, sink)

    def extract_pars(self) -> BatchResult:
        """Write a ``{hole: par}`` map per scorecard raw data file"""
        decoder = self.csv_decoder()
        out_dir = self.settings.pars_dir
        paths = find_fit_files(self.settings.data_dir, SCORECARD_FIT_PATTERN)
        logger.info(f"🔍 Found {len(paths)} {SCORECARD_FIT_PATTERN} file(s)")

        def sink(path: Path, rows: Any) -> Path:
            par_by_hole = extract_par_map(rows_to_objects(rows))
            output = out_dir / f"{path.stem}.json"
            write_json_document({str(hole): par for hole, par in sorted(par_by_hole.items())}, output)
            logger.info(f"⛳ {path.stem}: {len(par_by_hole)} holes")
            return output

        return decode_batch(decoder, paths, self.settings.decode_workers, sink)

    def extract_scorecards(self) -> BatchResult:
        """Write grouped scorecard sections per scorecard raw data file"""
        decoder = self.csv_decoder()
        out_dir = self.settings.scorecards_dir
        paths = find_fit_files(self.settings.data_dir, SCORECARD_FIT_PATTERN)
        logger.info(f"🔍 Found {len(paths)} {SCORECARD_FIT_PATTERN} file(s)")

        def sink(path: Path, rows: Any) -> Path:
            output = out_dir / f"{path.stem}.json"
            write_json_document(group_sections(rows), output)
            return output

        return decode_batch(decoder, paths, self.settings.decode_workers, sink)
