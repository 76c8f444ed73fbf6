#!/usr/bin/env python3
"""
Derived rounds document writer and reader.

The document ``{rounds: Round[]}`` is written with camelCase keys for the
presentation layer. Reading is lenient: a missing, malformed or
envelope-mismatched document yields an empty list.
"""

import json
from pathlib import Path
from typing import Any, List, Union

from pydantic import ValidationError

from ..exceptions import DocumentError
from ..utils import get_logger
from .model import DerivedRound, DerivedRoundsDocument


logger = get_logger(__name__)


def dump_derived_document(rounds: List[DerivedRound]) -> dict:
    """Serialize rounds to the JSON-ready envelope (camelCase, nulls dropped)"""
    document = DerivedRoundsDocument(rounds=rounds)
    return document.model_dump(mode='json', by_alias=True, exclude_none=True)


def write_derived_document(rounds: List[DerivedRound], path: Union[str, Path]) -> Path:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(dump_derived_document(rounds), f, indent=2)
    except OSError as e:
        raise DocumentError(f"Could not write derived document {path}", {'error': str(e)}) from e
    logger.info(f"Wrote {len(rounds)} rounds to {path}")
    return path


def load_derived_document(data: Any) -> List[DerivedRound]:
    """Validate a parsed document; malformed input gives an empty list"""
    if not isinstance(data, dict) or set(data) != {'rounds'}:
        logger.warning("Derived document envelope mismatch; expected {rounds: [...]}")
        return []
    try:
        return DerivedRoundsDocument.model_validate(data).rounds
    except ValidationError as e:
        logger.warning(f"Derived document is malformed: {e.error_count()} errors")
        return []


def read_derived_document(path: Union[str, Path]) -> List[DerivedRound]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug(f"Derived document not found: {path}")
        return []
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read derived document {path}: {e}")
        return []
    return load_derived_document(data)
