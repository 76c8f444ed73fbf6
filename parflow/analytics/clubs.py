#!/usr/bin/env python3
"""
Club registry: labels, exclusion rules and club keys for aggregation.

Retired or deleted clubs and the putter never take part in club-keyed
aggregations. A shot's club resolves to one of three cases:

- ``None`` (not recorded): the shot is dropped
- ``0`` (unknown club): grouped under the ``unknown`` key
- any other id: grouped under the id when the club is active and registered,
  dropped otherwise
"""

import re
from typing import Dict, Iterable, Optional

from ..const import PUTTER_CLUB_TYPE_ID, UNKNOWN_CLUB_ID, UNKNOWN_CLUB_LABEL
from ..storage.model import Club, ClubType


WEDGE_PATTERN = re.compile(r"wedge", re.IGNORECASE)


class ClubRegistry:
    """Active clubs by id plus club type names"""

    def __init__(self, clubs: Iterable[Club] = (), club_types: Iterable[ClubType] = (),
                 putter_club_type_id: int = PUTTER_CLUB_TYPE_ID):
        self.putter_club_type_id = putter_club_type_id
        self.all_clubs: Dict[int, Club] = {}
        self.clubs: Dict[int, Club] = {}
        for club in clubs:
            self.all_clubs[club.id] = club
            if self.is_excluded(club):
                continue
            self.clubs[club.id] = club
        self.type_names: Dict[int, str] = {t.id: t.name for t in club_types}

    def is_excluded(self, club: Club) -> bool:
        return club.deleted or club.retired or club.club_type_id == self.putter_club_type_id

    def get(self, club_id: Optional[int]) -> Optional[Club]:
        if club_id is None:
            return None
        return self.clubs.get(club_id)

    def type_name(self, club: Club) -> str:
        return self.type_names.get(club.club_type_id, "")

    def is_wedge(self, club: Club) -> bool:
        return bool(WEDGE_PATTERN.search(self.type_name(club)))

    def club_key(self, club_id: Optional[int]) -> Optional[str]:
        """Aggregation key of a shot's club, or None when the shot is dropped"""
        if club_id is None:
            return None
        if club_id == UNKNOWN_CLUB_ID:
            return UNKNOWN_CLUB_LABEL
        if club_id not in self.clubs:
            return None
        return str(club_id)

    def label(self, club_id: Optional[int]) -> str:
        """Display label: club name, then club type name, then ``Club <type id>``"""
        if club_id is None:
            return "Unknown"
        if club_id == UNKNOWN_CLUB_ID:
            return UNKNOWN_CLUB_LABEL
        club = self.all_clubs.get(club_id)
        if club is None:
            return str(club_id)
        if club.name and club.name.strip():
            return club.name.strip()
        return self.type_name(club) or f"Club {club.club_type_id}"

    def label_for_key(self, key: str) -> str:
        if key == UNKNOWN_CLUB_LABEL:
            return UNKNOWN_CLUB_LABEL
        return self.label(int(key))

    def model_for_key(self, key: str) -> Optional[str]:
        if key == UNKNOWN_CLUB_LABEL:
            return None
        club = self.all_clubs.get(int(key))
        return club.model if club else None

    def __len__(self) -> int:
        return len(self.clubs)
