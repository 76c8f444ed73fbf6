#!/usr/bin/env python3
"""
Pydantic Data Models for Golf Round Data

Canonical records produced by the normalizer (file info, course, hole, score,
shot), the export records consumed read-only (scorecards, clubs, club types)
and the derived rounds document written for the presentation layer.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class MessageCategory(str, Enum):
    """Canonical message categories of a decoded golf FIT file"""

    FILE_INFO = "file_info"
    COURSE = "course"
    HOLE = "hole"
    SCORE = "score"
    SHOT = "shot"


class Lie(str, Enum):
    """Terrain category a ball rests on"""

    FAIRWAY = "fairway"
    GREEN = "green"
    ROUGH = "rough"
    OTHER = "other"


class FairwayOutcome(str, Enum):
    """Tee shot outcome on par 4/5 holes"""

    LEFT = "left"
    RIGHT = "right"
    HIT = "hit"


def _coerce_id(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


RecordId = Annotated[Optional[str], BeforeValidator(_coerce_id)]


# ---------------------------------------------------------------------------
# Canonical decoder records
# ---------------------------------------------------------------------------

class FileInfo(BaseModel):
    """File creation and device metadata, kept as a passthrough"""

    fields: Dict[str, Any] = Field(default_factory=dict)


class Course(BaseModel):
    """Golf course message"""

    course_id: RecordId = None
    name: str
    out_par: Optional[int] = None
    in_par: Optional[int] = None
    total_par: Optional[int] = None
    rating: Optional[float] = None
    slope: Optional[int] = None


class Hole(BaseModel):
    """Hole definition of the course played in a round"""

    round_id: RecordId = None
    hole_number: int = Field(..., ge=1)
    distance: Optional[float] = Field(None, ge=0, description="Hole length in meters")
    par: Optional[int] = Field(None, ge=3, le=5)
    handicap: Optional[int] = None
    position_lat: Optional[int] = Field(None, description="Latitude in semicircles")
    position_long: Optional[int] = Field(None, description="Longitude in semicircles")


class Score(BaseModel):
    """Per-hole score entered on the device"""

    round_id: RecordId = None
    hole_number: int = Field(..., ge=1)
    strokes: Optional[int] = Field(None, ge=0)
    putts: Optional[int] = Field(None, ge=0)
    fairway_outcome: Optional[Any] = Field(None, description="left, right, hit, or the raw value when unmapped")
    penalties: Optional[int] = Field(None, ge=0)


class Shot(BaseModel):
    """A single shot, from a decoded FIT file or from the shot export"""

    round_id: RecordId = None
    hole_number: int = Field(..., ge=1)
    shot_id: RecordId = None
    shot_order: Optional[int] = None
    shot_time: Optional[float] = None
    club_id: Optional[int] = Field(None, description="0 means unknown club, None means not recorded")
    start_lie: Optional[Lie] = None
    end_lie: Optional[Lie] = None
    start_lat: Optional[float] = None
    start_long: Optional[float] = None
    end_lat: Optional[float] = None
    end_long: Optional[float] = None
    distance: Optional[float] = Field(None, ge=0, description="Carry distance in meters")


# ---------------------------------------------------------------------------
# Export records
# ---------------------------------------------------------------------------

class ExportModel(BaseModel):
    """Base class for records of the JSON exports (camelCase keys)"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ScorecardHole(ExportModel):
    number: int = Field(..., ge=1, validation_alias=AliasChoices("number", "hole", "holeNumber"))
    strokes: Optional[int] = Field(None, ge=0, validation_alias=AliasChoices("strokes", "score"))
    putts: Optional[int] = Field(None, ge=0)
    penalties: Optional[int] = Field(None, ge=0)


class Scorecard(ExportModel):
    """One round from the scorecard export"""

    round_id: Annotated[str, BeforeValidator(_coerce_id)] = Field(..., validation_alias=AliasChoices("id", "scorecardId", "roundId", "round_id"))
    start_time: Optional[str] = None
    formatted_start_time: Optional[str] = None
    end_time: Optional[str] = None
    formatted_end_time: Optional[str] = None
    holes_completed: Optional[int] = None
    exclude_from_stats: bool = False
    course_global_id: Optional[int] = None
    strokes: Optional[int] = None
    steps_taken: Optional[int] = None
    distance_walked: Optional[float] = None
    holes: List[ScorecardHole] = Field(default_factory=list)

    @field_validator("exclude_from_stats", mode="before")
    @classmethod
    def _none_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def date_label(self) -> str:
        """Display label of the round: formatted start, raw start, then id"""
        return self.formatted_start_time or self.start_time or self.round_id

    @property
    def holes_count(self) -> Optional[int]:
        if self.holes_completed is not None:
            return self.holes_completed
        return len(self.holes) if self.holes else None


class Club(ExportModel):
    id: int
    name: Optional[str] = None
    club_type_id: int
    model: Optional[str] = None
    retired: bool = False
    deleted: bool = False

    @field_validator("retired", "deleted", mode="before")
    @classmethod
    def _none_is_false(cls, value: Any) -> Any:
        return False if value is None else value


class ClubType(ExportModel):
    id: int = Field(..., validation_alias=AliasChoices("value", "id"))
    name: str


# ---------------------------------------------------------------------------
# Derived rounds document
# ---------------------------------------------------------------------------

class DerivedModel(BaseModel):
    """Base class of the derived document (camelCase on the wire)"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class DerivedHole(DerivedModel):
    number: int
    putts: Optional[int] = None
    strokes: Optional[int] = None
    penalties: Optional[int] = None
    par: Optional[int] = None
    gir: Optional[bool] = None


class FitExtras(DerivedModel):
    has_fit: bool = False
    avg_heart_rate: Optional[float] = None
    max_heart_rate: Optional[float] = None
    total_distance: Optional[float] = None
    par_by_hole: Optional[Dict[int, int]] = None


class GirSummary(DerivedModel):
    holes: int = 0
    putts_total: int = 0
    putts_average: Optional[float] = None


class DerivedRound(DerivedModel):
    id: Union[int, str]
    date: str
    start_time: Optional[str] = None
    formatted_start_time: Optional[str] = None
    end_time: Optional[str] = None
    formatted_end_time: Optional[str] = None
    holes_completed: Optional[int] = None
    exclude_from_stats: bool = False
    course_global_id: Optional[int] = None
    strokes: Optional[int] = None
    steps_taken: Optional[int] = None
    distance_walked: Optional[float] = None
    holes: List[DerivedHole] = Field(default_factory=list)
    fit: Optional[FitExtras] = None
    gir: Optional[GirSummary] = None


class DerivedRoundsDocument(DerivedModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    rounds: List[DerivedRound]
