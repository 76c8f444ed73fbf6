#!/usr/bin/env python3
"""
FIT Decoders - Adapters around the external FIT decoders

- FitParseDecoder decodes in-process with fitparse and returns a rich
  document ``{message_key: [field mapping, ...]}``
- FitCsvToolDecoder runs Garmin's FitCSVTool.jar and returns the minimal
  shape: the CSV rows of its output

decode_batch runs a decoder over many files with bounded concurrency. A file
that fails to decode is logged and recorded; the batch always continues.
"""
import csv
import json
import subprocess
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, time as dt_time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from fitparse import FitFile
from fitparse.utils import FitParseError

from ..exceptions import ConfigurationError, DecodeError
from ..utils import get_logger
from .interface import BatchResult, DecodeResult, DocumentShape, FitDecoder
from .sources import round_id_from_path


logger = get_logger(__name__)


def _json_value(value: Any) -> Any:
    """Convert fitparse field values into JSON-compatible values"""
    if isinstance(value, (datetime, date, dt_time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, tuple):
        return [_json_value(v) for v in value]
    return value


def _message_key(name: str, mesg_num: Optional[int]) -> str:
    # Golf messages are not in the fitparse profile; key them by global number
    if name.startswith('unknown') and mesg_num is not None:
        return str(mesg_num)
    return f"{name}s"


def _field_key(name: str, def_num: Optional[int]) -> str:
    if name.startswith('unknown') and def_num is not None:
        return str(def_num)
    return name


class FitParseDecoder(FitDecoder):
    """Decode FIT files in-process with fitparse"""

    shape = DocumentShape.RICH

    def decode(self, path: Path) -> Dict[str, List[Dict[str, Any]]]:
        try:
            fitfile = FitFile(str(path))
            document: Dict[str, List[Dict[str, Any]]] = {}
            for message in fitfile.get_messages():
                fields = {}
                for field_data in message.fields:
                    if field_data.value is None:
                        continue
                    key = _field_key(field_data.name, field_data.def_num)
                    fields[key] = _json_value(field_data.value)
                key = _message_key(message.name, message.mesg_num)
                document.setdefault(key, []).append(fields)
            return document
        except (FitParseError, OSError) as e:
            raise DecodeError(f"fitparse could not decode {Path(path).name}", {'error': str(e)}) from e


class FitCsvToolDecoder(FitDecoder):
    """Decode FIT files with Garmin's FitCSVTool.jar into CSV rows"""

    shape = DocumentShape.MINIMAL

    def __init__(self, jar_path: Path, csv_dir: Path, java_bin: str = "java",
                 timeout: Optional[float] = None):
        self.jar_path = Path(jar_path)
        self.csv_dir = Path(csv_dir)
        self.java_bin = java_bin
        self.timeout = timeout

    def check_available(self) -> None:
        if not self.jar_path.is_file():
            raise ConfigurationError(
                f"Missing FitCSVTool.jar at {self.jar_path}",
                {'hint': 'Download the FIT SDK and place FitCSVTool.jar there'}
            )

    def csv_path_for(self, path: Path) -> Path:
        return self.csv_dir / f"{Path(path).stem}.csv"

    def decode(self, path: Path) -> List[List[str]]:
        csv_path = self.csv_path_for(path)
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        command = [self.java_bin, '-jar', str(self.jar_path), str(path), str(csv_path)]
        try:
            result = subprocess.run(command, capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise DecodeError(f"FitCSVTool timed out after {self.timeout}s", {'file': str(path)}) from e
        except OSError as e:
            raise DecodeError(f"Could not run {self.java_bin}", {'error': str(e)}) from e

        if result.returncode != 0:
            raise DecodeError(
                f"FitCSVTool failed ({result.returncode})",
                {'file': str(path), 'stderr': result.stderr.strip()}
            )
        return read_csv_rows(csv_path)


def read_csv_rows(path: Path) -> List[List[str]]:
    """Read CSV rows, dropping blank lines"""
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return [row for row in csv.reader(f) if row]
    except OSError as e:
        raise DecodeError(f"Could not read decoder output {path}", {'error': str(e)}) from e


def write_json_document(document: Any, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(document, f, indent=2)


def decode_file(decoder: FitDecoder, path: Path,
                sink: Optional[Callable[[Path, Any], Optional[Path]]] = None) -> DecodeResult:
    """Decode one file; failures are returned as a failed DecodeResult"""
    path = Path(path)
    round_id = round_id_from_path(path)
    try:
        document = decoder.decode(path)
        output = sink(path, document) if sink else None
        logger.debug(f"Decoded {path.name} with {decoder.name}")
        return DecodeResult(source=path, ok=True, round_id=round_id, document=document, output=output)
    except DecodeError as e:
        logger.error(f"Failed to decode {path.name}: {e}")
        return DecodeResult(source=path, ok=False, round_id=round_id, error=str(e))
    except Exception as e:
        # Anything raised by a decoder or sink stays scoped to this file
        logger.exception(f"Unexpected error decoding {path.name}: {e}")
        return DecodeResult(source=path, ok=False, round_id=round_id, error=f"{type(e).__name__}: {e}")


def decode_batch(decoder: FitDecoder, paths: Iterable[Path], workers: int = 4,
                 sink: Optional[Callable[[Path, Any], Optional[Path]]] = None) -> BatchResult:
    """
    Decode files with at most ``workers`` concurrent decoder invocations.

    Args:
        decoder: Decoder adapter
        paths: FIT files to decode
        workers: Maximum concurrent invocations (at least 1)
        sink: Optional callback persisting each decoded document; returns
            the written path

    Returns:
        BatchResult with one DecodeResult per input, in input order
    """
    paths = list(paths)
    start_time = time.time()
    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        results = list(executor.map(lambda p: decode_file(decoder, p, sink), paths))

    batch = BatchResult(results=results, processing_time=time.time() - start_time)
    logger.info(
        f"Decoded {len(batch.succeeded)}/{batch.total} files with {decoder.name} "
        f"({len(batch.failed)} failed) in {batch.processing_time:.2f}s"
    )
    return batch
