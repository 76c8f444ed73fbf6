#!/usr/bin/env python3
"""
Field Tables - Ordered candidate keys for every canonical field

Decoders name the same FIT field differently depending on their version:
human labels ("hole number"), snake_case ("hole_number"), camelCase from the
JSON exports ("holeNumber") or the opaque field definition number ("1").
Every canonical field is resolved by trying its candidates in order; the
first candidate that is present and parses as the expected kind wins.
"""
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..storage.model import Lie, MessageCategory


class ValueKind(Enum):
    """Expected kind of a canonical field value"""
    INT = "int"
    FLOAT = "float"
    TEXT = "text"
    ID = "id"
    LIE = "lie"
    RAW = "raw"


@dataclass(frozen=True)
class FieldSpec:
    """Candidate keys and validation bounds of one canonical field"""
    kind: ValueKind
    candidates: Tuple[str, ...]
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    required: bool = False


_MISSING = object()


def parse_int(value: Any) -> Optional[int]:
    """Parse a count or id; fractional, non-finite and boolean values are rejected"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        number = parse_float(text)
        if number is not None and number.is_integer():
            return int(number)
    return None


def parse_float(value: Any) -> Optional[float]:
    """Parse a finite float from a number or numeric string"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_id(value: Any) -> Optional[str]:
    """Identifiers are compared as strings: 123, 123.0 and "123" are the same round"""
    number = parse_int(value)
    if number is not None:
        return str(number)
    return parse_text(value)


def parse_lie(value: Any) -> Optional[Lie]:
    text = parse_text(value)
    if text is None:
        return None
    try:
        return Lie(text.lower())
    except ValueError:
        return Lie.OTHER


def parse_raw(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return value


PARSERS: Dict[ValueKind, Callable[[Any], Any]] = {
    ValueKind.INT: parse_int,
    ValueKind.FLOAT: parse_float,
    ValueKind.TEXT: parse_text,
    ValueKind.ID: parse_id,
    ValueKind.LIE: parse_lie,
    ValueKind.RAW: parse_raw,
}


def lookup(raw: Mapping[str, Any], key: str) -> Any:
    """Get a value by key, or by dotted path into nested mappings"""
    if key in raw:
        return raw[key]
    if "." not in key:
        return _MISSING
    current: Any = raw
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def resolve_field(raw: Mapping[str, Any], spec: FieldSpec) -> Any:
    """Resolve a canonical field value from a raw message, or None"""
    parser = PARSERS[spec.kind]
    for key in spec.candidates:
        value = lookup(raw, key)
        if value is _MISSING:
            continue
        parsed = parser(value)
        if parsed is None:
            continue
        if spec.minimum is not None and parsed < spec.minimum:
            continue
        if spec.maximum is not None and parsed > spec.maximum:
            continue
        return parsed
    return None


HOLE_NUMBER_KEYS = ("hole number", "hole_number", "holeNumber", "number", "hole")
ROUND_ID_KEYS = ("scorecardId", "roundId", "scorecard_id", "round_id", "scorecard id")

FIELD_CANDIDATES: Dict[MessageCategory, Dict[str, FieldSpec]] = {
    MessageCategory.COURSE: {
        'course_id': FieldSpec(ValueKind.ID, ("course id", "course_id", "courseGlobalId", "global id", "id")),
        'name': FieldSpec(ValueKind.TEXT, ("name", "course name", "course_name", "courseName", "1"), required=True),
        'out_par': FieldSpec(ValueKind.INT, ("out par", "out_par", "outPar", "front par"), minimum=0),
        'in_par': FieldSpec(ValueKind.INT, ("in par", "in_par", "inPar", "back par"), minimum=0),
        'total_par': FieldSpec(ValueKind.INT, ("total par", "total_par", "totalPar", "par"), minimum=0),
        'rating': FieldSpec(ValueKind.FLOAT, ("rating", "course rating", "course_rating", "courseRating"), minimum=0),
        'slope': FieldSpec(ValueKind.INT, ("slope", "slope rating", "slope_rating", "slopeRating"), minimum=0),
    },
    MessageCategory.HOLE: {
        'hole_number': FieldSpec(ValueKind.INT, HOLE_NUMBER_KEYS + ("0", "1"), minimum=1, required=True),
        'distance': FieldSpec(ValueKind.FLOAT, ("distance",), minimum=0),
        'par': FieldSpec(ValueKind.INT, ("par", "hole_par", "holePar", "2"), minimum=3, maximum=5),
        'handicap': FieldSpec(ValueKind.INT, ("handicap",)),
        'position_lat': FieldSpec(ValueKind.INT, ("position lat", "position_lat", "positionLat")),
        'position_long': FieldSpec(ValueKind.INT, ("position long", "position_long", "positionLong")),
    },
    MessageCategory.SCORE: {
        'hole_number': FieldSpec(ValueKind.INT, HOLE_NUMBER_KEYS + ("1", "0"), minimum=1, required=True),
        'strokes': FieldSpec(ValueKind.INT, ("score", "strokes", "2"), minimum=0),
        'putts': FieldSpec(ValueKind.INT, ("putts", "5", "6"), minimum=0),
        'fairway_outcome': FieldSpec(ValueKind.RAW, ("fairway", "fairway_outcome", "fairwayOutcome")),
        'penalties': FieldSpec(ValueKind.INT, ("penalties", "penalty"), minimum=0),
    },
    MessageCategory.SHOT: {
        'round_id': FieldSpec(ValueKind.ID, ROUND_ID_KEYS),
        'hole_number': FieldSpec(ValueKind.INT, ("holeNumber", "hole_number", "hole number", "hole", "1", "0"),
                                 minimum=1, required=True),
        'shot_id': FieldSpec(ValueKind.ID, ("id", "shotId", "shot_id")),
        'shot_order': FieldSpec(ValueKind.INT, ("shotOrder", "shot_order", "shot order")),
        'shot_time': FieldSpec(ValueKind.FLOAT, ("shotTime", "shot_time", "shot time")),
        'club_id': FieldSpec(ValueKind.INT, ("clubId", "club_id", "club id"), minimum=0),
        'start_lie': FieldSpec(ValueKind.LIE, ("startLoc.lie", "start.lie", "start lie", "start_lie")),
        'end_lie': FieldSpec(ValueKind.LIE, ("endLoc.lie", "end.lie", "end lie", "end_lie")),
        'start_lat': FieldSpec(ValueKind.FLOAT, ("startLoc.lat", "start.lat", "start position lat", "start_position_lat")),
        'start_long': FieldSpec(ValueKind.FLOAT, ("startLoc.lon", "start.lon", "start position long", "start_position_long")),
        'end_lat': FieldSpec(ValueKind.FLOAT, ("endLoc.lat", "end.lat", "end position lat", "end_position_lat")),
        'end_long': FieldSpec(ValueKind.FLOAT, ("endLoc.lon", "end.lon", "end position long", "end_position_long")),
        'meters': FieldSpec(ValueKind.FLOAT, ("meters", "distance_meters", "distance")),
        'yards': FieldSpec(ValueKind.FLOAT, ("yards", "distance_yards")),
    },
}

# Keys under which a rich decoder document stores each message category
MESSAGE_KEYS: Dict[MessageCategory, Tuple[str, ...]] = {
    MessageCategory.FILE_INFO: ("file_ids", "file_id", "fileId", "File ID", "file_creator", "fileCreator", "File Creator"),
    MessageCategory.COURSE: ("golf_courses", "golf_course", "golfCourse", "Golf Course", "190"),
    MessageCategory.SCORE: ("score", "scores", "Score", "192"),
    MessageCategory.HOLE: ("hole", "holes", "Hole", "193"),
    MessageCategory.SHOT: ("shot", "shots", "Shot", "194"),
}

# Message/name label keys of generic rows
LABEL_KEYS = ("Message", "message", "Name", "name")

FAIRWAY_OUTCOME_CODES = {0: "left", 1: "right", 2: "hit"}

HOLE_KEY_PATTERN = re.compile(r"hole.*(no|num|number)?|^hole$", re.IGNORECASE)
PAR_KEY_PATTERN = re.compile(r"(^|_)par($|_)", re.IGNORECASE)
