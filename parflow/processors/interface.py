#!/usr/bin/env python3
"""
Processors Interface - Decoder contract and batch result types
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class DocumentShape(Enum):
    """Shape of a decoded document"""
    RICH = "rich"          # {message_key: [field mapping, ...]}
    MINIMAL = "minimal"    # flat CSV rows with Type/Data header pairing


class ProcessingStatus(Enum):
    """Processing status enumeration"""
    COMPLETED = "completed"
    FAILED = "failed"
    PARTIALLY_COMPLETED = "partially_completed"


@dataclass
class DecodeResult:
    """Outcome of decoding one FIT file"""
    source: Path
    ok: bool
    round_id: Optional[str] = None
    document: Any = None
    error: Optional[str] = None
    output: Optional[Path] = None


@dataclass
class BatchResult:
    """Summary of a decode batch"""
    results: List[DecodeResult] = field(default_factory=list)
    processing_time: Optional[float] = None

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> List[DecodeResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> List[DecodeResult]:
        return [r for r in self.results if not r.ok]

    @property
    def status(self) -> ProcessingStatus:
        if not self.failed:
            return ProcessingStatus.COMPLETED
        if not self.succeeded:
            return ProcessingStatus.FAILED
        return ProcessingStatus.PARTIALLY_COMPLETED

    @property
    def success_rate(self) -> float:
        """Success rate"""
        if self.total == 0:
            return 0.0
        return (len(self.succeeded) / self.total) * 100

    @property
    def errors(self) -> Dict[str, str]:
        return {str(r.source): r.error or "" for r in self.failed}


class FitDecoder(ABC):
    """External FIT decoder adapter"""

    shape: DocumentShape

    @abstractmethod
    def decode(self, path: Path) -> Any:
        """Decode one FIT file; raises DecodeError on failure"""
        pass

    @property
    def name(self) -> str:
        return type(self).__name__
