#!/usr/bin/env python3
"""
Record Normalizer - Maps decoded golf FIT messages onto canonical records

Accepts both decoder shapes:
- rich documents: ``{message_key: [field mapping, ...]}`` where the message key
  is a name ("hole", "golf_course") or a global message number ("193")
- minimal documents: flat CSV rows as written by FitCSVTool, where a header
  row (first cell ``Type``) names the columns of the following ``Data`` rows
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from ..const import YARDS_TO_METERS
from ..storage.model import (
    Course, FileInfo, Hole, MessageCategory, Score, Shot,
)
from ..utils import get_logger
from .fields import (
    FAIRWAY_OUTCOME_CODES, FIELD_CANDIDATES, HOLE_KEY_PATTERN, LABEL_KEYS,
    MESSAGE_KEYS, PAR_KEY_PATTERN, parse_int, resolve_field,
)


logger = get_logger(__name__)

RawMessage = Mapping[str, Any]
CanonicalRecord = Union[FileInfo, Course, Hole, Score, Shot]

_MODELS = {
    MessageCategory.COURSE: Course,
    MessageCategory.HOLE: Hole,
    MessageCategory.SCORE: Score,
    MessageCategory.SHOT: Shot,
}

_COURSE_PAR_FIELDS = ('out_par', 'in_par', 'total_par')


def decode_fairway_outcome(value: Any) -> Any:
    """Map the 0/1/2 fairway code to left/right/hit; other values pass through"""
    code = parse_int(value)
    if code is not None and code in FAIRWAY_OUTCOME_CODES:
        return FAIRWAY_OUTCOME_CODES[code]
    return value


# ---------------------------------------------------------------------------
# Category classification of generic rows
# ---------------------------------------------------------------------------

def message_label(row: RawMessage) -> str:
    """Message/name label of a generic row, lowercased ('' when absent)"""
    for key in LABEL_KEYS:
        value = row.get(key)
        if value:
            return str(value).strip().lower()
    return ""


def has_hole_key(row: RawMessage) -> bool:
    return any(HOLE_KEY_PATTERN.search(str(key)) for key in row)


def has_par_key(row: RawMessage) -> bool:
    return any(PAR_KEY_PATTERN.search(str(key)) for key in row)


def label_in(*labels: str) -> Callable[[RawMessage], bool]:
    expected = {label.lower() for label in labels}
    return lambda row: message_label(row) in expected


def label_contains(*keywords: str) -> Callable[[RawMessage], bool]:
    return lambda row: any(keyword in message_label(row) for keyword in keywords)


@dataclass(frozen=True)
class CategoryRule:
    """A named predicate assigning a category to a generic row"""
    name: str
    predicate: Callable[[RawMessage], bool]
    category: MessageCategory


class RuleEvaluator:
    """Ordered (predicate, category) rules; the first matching rule wins"""

    def __init__(self, rules: Sequence[CategoryRule]):
        self.rules = list(rules)

    def classify(self, row: RawMessage) -> Optional[MessageCategory]:
        rule = self.match(row)
        return rule.category if rule else None

    def match(self, row: RawMessage) -> Optional[CategoryRule]:
        for rule in self.rules:
            if rule.predicate(row):
                return rule
        return None


# Grouping of generic rows by their exact message label
GROUPING_RULES = (
    CategoryRule('file id label', label_in('file id', 'file_id', 'file creator', 'file_creator'),
                 MessageCategory.FILE_INFO),
    CategoryRule('golf course label', label_in('golf course', 'golf_course'), MessageCategory.COURSE),
    CategoryRule('hole label', label_in('hole'), MessageCategory.HOLE),
    CategoryRule('score label', label_in('score'), MessageCategory.SCORE),
    CategoryRule('shot label', label_in('shot'), MessageCategory.SHOT),
)

# Par discovery: decoder output sometimes omits the message label, so a row
# carrying both a hole-number-like key and a par key also counts as a hole
PAR_RULES = (
    CategoryRule('golf keyword label', label_contains('golf', 'hole', 'score'), MessageCategory.HOLE),
    CategoryRule('hole and par keys', lambda row: has_hole_key(row) and has_par_key(row), MessageCategory.HOLE),
)


# ---------------------------------------------------------------------------
# Document shapes
# ---------------------------------------------------------------------------

def is_generic_document(document: Any) -> bool:
    """True for the minimal decoder shape (flat CSV rows)"""
    if isinstance(document, Mapping):
        return isinstance(document.get('rows'), list) and not any(
            key in document for keys in MESSAGE_KEYS.values() for key in keys
        )
    return isinstance(document, list) and all(isinstance(row, (list, tuple)) for row in document)


def rows_to_objects(rows: Iterable[Sequence[str]]) -> List[Dict[str, Any]]:
    """
    Pair generic ``Data`` rows with the most recent header row.

    FitCSVTool writes fields as ``Field N``/``Value N`` column pairs; those are
    expanded into named keys so that field tables can resolve them.
    """
    headers: Optional[Sequence[str]] = None
    objects: List[Dict[str, Any]] = []
    for row in rows:
        if not row:
            continue
        kind = str(row[0]).strip().lower()
        if kind == 'type':
            headers = row
            continue
        if kind != 'data' or headers is None:
            continue
        obj: Dict[str, Any] = {}
        for key, value in zip(headers, row):
            obj[key] = value
        _expand_field_value_pairs(obj)
        objects.append(obj)
    return objects


def _expand_field_value_pairs(obj: Dict[str, Any]) -> None:
    index = 1
    while f"Field {index}" in obj:
        name = obj.get(f"Field {index}")
        if isinstance(name, str) and name.strip() and name not in obj:
            obj[name.strip()] = obj.get(f"Value {index}")
        index += 1


def generic_objects(document: Any) -> List[Dict[str, Any]]:
    rows = document.get('rows', []) if isinstance(document, Mapping) else document
    return rows_to_objects(rows)


def _as_message_list(value: Any) -> List[RawMessage]:
    if isinstance(value, Mapping):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, Mapping)]
    return []


def iter_raw_messages(document: Any, category: MessageCategory) -> Iterator[RawMessage]:
    """Yield the raw messages of one category from either document shape"""
    if is_generic_document(document):
        grouping = RuleEvaluator(GROUPING_RULES)
        for obj in generic_objects(document):
            if grouping.classify(obj) == category:
                yield obj
        return
    if not isinstance(document, Mapping):
        return
    for key in MESSAGE_KEYS[category]:
        messages = _as_message_list(document.get(key))
        if messages:
            yield from messages
            return


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

@dataclass
class NormalizedMessages:
    """Canonical records of one decoded file"""
    round_id: Optional[str] = None
    file_info: List[FileInfo] = field(default_factory=list)
    courses: List[Course] = field(default_factory=list)
    holes: List[Hole] = field(default_factory=list)
    scores: List[Score] = field(default_factory=list)
    shots: List[Shot] = field(default_factory=list)
    dropped: int = 0

    @property
    def total_records(self) -> int:
        return len(self.file_info) + len(self.courses) + len(self.holes) + len(self.scores) + len(self.shots)


class RecordNormalizer:
    """Normalizes raw decoder messages using the static field tables"""

    def __init__(self, field_candidates: Optional[Dict[MessageCategory, Dict[str, Any]]] = None):
        self.field_candidates = field_candidates or FIELD_CANDIDATES

    def normalize(self, raw: RawMessage, category: MessageCategory,
                  round_id: Optional[str] = None) -> Optional[CanonicalRecord]:
        """
        Produce the canonical record of a raw message, or None.

        Args:
            raw: Decoded message (arbitrary key naming)
            category: Message category to normalize into
            round_id: Round id recovered from the source path; takes
                precedence over any id found in the message content

        Returns:
            Canonical record, or None when required fields are missing
        """
        if not isinstance(raw, Mapping):
            return None
        if category == MessageCategory.FILE_INFO:
            return FileInfo(fields={str(k): v for k, v in raw.items() if v is not None})

        table = self.field_candidates[category]
        values = {name: resolve_field(raw, spec) for name, spec in table.items()}

        missing = [name for name, spec in table.items() if spec.required and values[name] is None]
        if missing:
            logger.debug(f"Dropping {category.value} message without {', '.join(missing)}")
            return None

        if category == MessageCategory.COURSE:
            if all(values[name] is None for name in _COURSE_PAR_FIELDS):
                logger.debug("Dropping course message without par fields")
                return None
        elif category == MessageCategory.SCORE:
            if values['fairway_outcome'] is not None:
                values['fairway_outcome'] = decode_fairway_outcome(values['fairway_outcome'])
        elif category == MessageCategory.SHOT:
            meters = values.pop('meters')
            yards = values.pop('yards')
            if meters is not None:
                distance = meters
            elif yards is not None:
                distance = yards * YARDS_TO_METERS
            else:
                distance = None
            # A negative meters value does not fall back to yards
            values['distance'] = distance if distance is not None and distance >= 0 else None

        if round_id is not None and category in (MessageCategory.HOLE, MessageCategory.SCORE, MessageCategory.SHOT):
            values['round_id'] = round_id

        try:
            return _MODELS[category](**values)
        except ValidationError as e:
            logger.debug(f"Dropping invalid {category.value} message: {e}")
            return None

    def normalize_many(self, messages: Iterable[RawMessage], category: MessageCategory,
                       round_id: Optional[str] = None) -> List[CanonicalRecord]:
        records = []
        for raw in messages:
            record = self.normalize(raw, category, round_id)
            if record is not None:
                records.append(record)
        return records

    def normalize_document(self, document: Any, round_id: Optional[str] = None) -> NormalizedMessages:
        """Normalize every golf message of a decoded document"""
        result = NormalizedMessages(round_id=round_id)
        targets = {
            MessageCategory.FILE_INFO: result.file_info,
            MessageCategory.COURSE: result.courses,
            MessageCategory.HOLE: result.holes,
            MessageCategory.SCORE: result.scores,
            MessageCategory.SHOT: result.shots,
        }
        for category, records in targets.items():
            for raw in iter_raw_messages(document, category):
                record = self.normalize(raw, category, round_id)
                if record is None:
                    result.dropped += 1
                else:
                    records.append(record)
        return result


# ---------------------------------------------------------------------------
# Par discovery
# ---------------------------------------------------------------------------

def _first_int(row: RawMessage, pattern) -> Optional[int]:
    for key, value in row.items():
        if pattern.search(str(key)):
            number = parse_int(value)
            if number is not None:
                return number
    return None


def extract_par_map(objects: Iterable[RawMessage]) -> Dict[int, int]:
    """Build ``{hole: par}`` from generic rows classified by the par rules"""
    evaluator = RuleEvaluator(PAR_RULES)
    par_by_hole: Dict[int, int] = {}
    for obj in objects:
        if evaluator.classify(obj) != MessageCategory.HOLE:
            continue
        hole_number = _first_int(obj, HOLE_KEY_PATTERN)
        par = _first_int(obj, PAR_KEY_PATTERN)
        if hole_number is not None and hole_number >= 1 and par is not None:
            par_by_hole[hole_number] = par
    return par_by_hole


_SCAN_HOLE_KEYS = ('hole', 'hole_number', 'holeNumber')
_SCAN_PAR_KEYS = ('par', 'hole_par', 'holePar')


def _first_number(obj: Mapping[str, Any], keys: Sequence[str]) -> Optional[Any]:
    for key in keys:
        value = obj.get(key)
        if value is not None:
            return value
    return None


def scan_par_map(obj: Any, par_by_hole: Optional[Dict[int, int]] = None) -> Dict[int, int]:
    """
    Recursively scan a decoded document for ``{hole: n, par: m}`` shaped
    mappings. Only genuine numbers are accepted; later matches overwrite
    earlier ones for the same hole.
    """
    if par_by_hole is None:
        par_by_hole = {}
    if isinstance(obj, list):
        for item in obj:
            scan_par_map(item, par_by_hole)
        return par_by_hole
    if not isinstance(obj, Mapping):
        return par_by_hole

    hole_number = _first_number(obj, _SCAN_HOLE_KEYS)
    par = _first_number(obj, _SCAN_PAR_KEYS)
    if _is_number(hole_number) and _is_number(par):
        hole_int = parse_int(hole_number)
        par_int = parse_int(par)
        if hole_int is not None and par_int is not None:
            par_by_hole[hole_int] = par_int
    for value in obj.values():
        scan_par_map(value, par_by_hole)
    return par_by_hole


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def group_sections(document: Any) -> Dict[str, Any]:
    """
    Group a generic document into scorecard sections.

    Hole, score and shot rows are normalized; file, course and stats rows are
    passed through as their first raw row.
    """
    objects = generic_objects(document) if is_generic_document(document) else []
    by_label: Dict[str, List[Dict[str, Any]]] = {}
    for obj in objects:
        by_label.setdefault(message_label(obj), []).append(obj)

    def first(*labels: str) -> Optional[Dict[str, Any]]:
        for label in labels:
            rows = by_label.get(label)
            if rows:
                return rows[0]
        return None

    normalized = RecordNormalizer().normalize_document(document)
    return {
        'file_id': first('file id', 'file_id'),
        'file_creator': first('file creator', 'file_creator'),
        'golf_course': first('golf course', 'golf_course'),
        'holes': [hole.model_dump(exclude_none=True) for hole in normalized.holes],
        'scores': [score.model_dump(exclude_none=True) for score in normalized.scores],
        'shots': [shot.model_dump(mode='json', exclude_none=True) for shot in normalized.shots],
        'stats': first('golf stats', 'golf_stats'),
    }


_default_normalizer = RecordNormalizer()


def normalize_message(raw: RawMessage, category: MessageCategory,
                      round_id: Optional[str] = None) -> Optional[CanonicalRecord]:
    """Normalize a single raw message with the default field candidates"""
    return _default_normalizer.normalize(raw, category, round_id)
