#!/usr/bin/env python3
"""
Source Loaders - Reads the JSON exports, curated par maps and decoded files

Every loader is lenient: a missing or malformed file yields an empty result
and invalid entries inside a valid envelope are skipped one by one.
"""
import json
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..storage.model import Club, ClubType, MessageCategory, Scorecard, Shot
from ..utils import get_logger
from .fields import parse_int
from .normalizer import RecordNormalizer


logger = get_logger(__name__)

ModelT = TypeVar('ModelT', bound=BaseModel)
PathLike = Union[str, Path]

# Tried in order; the first match wins
ROUND_ID_PATTERNS = (
    re.compile(r"SCORECARD[_-]RAWDATA-(\d+)\.(?:fit|json|csv)$", re.IGNORECASE),
    re.compile(r"RAWDATA-(\d+)\.(?:fit|json|csv)$", re.IGNORECASE),
    re.compile(r"(\d+)\.(?:fit|json|csv)$", re.IGNORECASE),
)


def round_id_from_path(path: PathLike) -> Optional[str]:
    """Recover the round id encoded in a decoder output file name"""
    name = Path(path).name
    for pattern in ROUND_ID_PATTERNS:
        match = pattern.search(name)
        if match:
            return match.group(1)
    return None


def read_json(path: PathLike) -> Optional[Any]:
    """Read a JSON file, or None when it is missing or malformed"""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError:
        logger.debug(f"JSON file not found: {path}")
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read JSON file {path}: {e}")
    return None


def envelope_entries(document: Any) -> List[Any]:
    """Entries of an export envelope ``{data: [...]}``; bare lists are accepted"""
    if isinstance(document, dict):
        data = document.get('data')
        return data if isinstance(data, list) else []
    if isinstance(document, list):
        return document
    return []


def validate_entries(entries: List[Any], model: Type[ModelT]) -> List[ModelT]:
    records = []
    skipped = 0
    for entry in entries:
        try:
            records.append(model.model_validate(entry))
        except ValidationError as e:
            skipped += 1
            logger.debug(f"Skipping invalid {model.__name__} entry: {e.error_count()} errors")
    if skipped:
        logger.info(f"Skipped {skipped} invalid {model.__name__} entries")
    return records


def load_scorecards(path: PathLike) -> List[Scorecard]:
    """Load the scorecard export ``{version, type, data: Scorecard[]}``"""
    return validate_entries(envelope_entries(read_json(path)), Scorecard)


def load_clubs(path: PathLike) -> List[Club]:
    return validate_entries(envelope_entries(read_json(path)), Club)


def load_club_types(path: PathLike) -> List[ClubType]:
    return validate_entries(envelope_entries(read_json(path)), ClubType)


def load_shots(path: PathLike, normalizer: Optional[RecordNormalizer] = None) -> List[Shot]:
    """Load the shot export; round ids come from each entry's content"""
    normalizer = normalizer or RecordNormalizer()
    shots = []
    for entry in envelope_entries(read_json(path)):
        shot = normalizer.normalize(entry, MessageCategory.SHOT)
        if shot is not None:
            shots.append(shot)
    return shots


def coerce_par_map(data: Any) -> Dict[int, int]:
    """Normalize a ``{hole: par}`` mapping whose keys may be strings"""
    if not isinstance(data, dict):
        return {}
    par_by_hole = {}
    for key, value in data.items():
        hole_number = parse_int(key)
        par = parse_int(value)
        if hole_number is not None and par is not None:
            par_by_hole[hole_number] = par
    return par_by_hole


def load_par_map(path: PathLike) -> Dict[int, int]:
    return coerce_par_map(read_json(path))


def load_par_maps(directory: PathLike) -> Dict[str, Dict[int, int]]:
    """Load every curated par map of a directory, keyed by round id"""
    par_maps: Dict[str, Dict[int, int]] = {}
    directory = Path(directory)
    if not directory.is_dir():
        return par_maps
    for path in sorted(directory.glob('*.json')):
        round_id = round_id_from_path(path)
        if round_id is None:
            continue
        par_map = load_par_map(path)
        if par_map:
            par_maps[round_id] = par_map
    return par_maps


def iter_decoded_documents(directory: PathLike) -> Iterator[Tuple[str, Any]]:
    """Yield ``(round_id, document)`` for every decoded JSON file of a directory"""
    directory = Path(directory)
    if not directory.is_dir():
        return
    for path in sorted(directory.glob('*.json')):
        round_id = round_id_from_path(path)
        if round_id is None:
            logger.debug(f"No round id in file name: {path.name}")
            continue
        document = read_json(path)
        if document is not None:
            yield round_id, document


def find_fit_files(directory: PathLike, name_pattern: Optional[str] = None) -> List[Path]:
    """Recursively find ``.fit`` files, optionally filtered by a name substring"""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    files = []
    for path in sorted(directory.rglob('*')):
        if not path.is_file() or path.suffix.lower() != '.fit':
            continue
        if name_pattern and name_pattern.lower() not in path.name.lower():
            continue
        files.append(path)
    return files
