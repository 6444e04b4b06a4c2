"""Data model for a single doubles match."""

# Rally Pairing
# Copyright (C) 2025  Rally Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from rallypairing.constants import MATCH_COMPLETED, MATCH_SCHEDULED
from rallypairing.exceptions import InvalidPairingException


@dataclass(frozen=True)
class Match:
    """A 2v2 fixture, team ``(a1, a2)`` against team ``(b1, b2)``.

    Matches are immutable. Recording a score produces a new completed match
    that supersedes the scheduled one.

    Attributes:
        id: Match identifier
        round_index: Round (stage) the match belongs to, 1-indexed
        a1, a2: Player ids of team A
        b1, b2: Player ids of team B
        court: Display label only
        mini_round_index: Wave number within the round
        score_a, score_b: Rally points, set once completed
        status: ``scheduled`` or ``completed``
        compromise: Worst soft constraint relaxed to produce this match
    """

    id: str
    round_index: int
    a1: str
    a2: str
    b1: str
    b2: str
    court: int = 1
    mini_round_index: Optional[int] = None
    score_a: Optional[int] = None
    score_b: Optional[int] = None
    status: str = MATCH_SCHEDULED
    compromise: Optional[str] = None

    def __post_init__(self) -> None:
        ids = (self.a1, self.a2, self.b1, self.b2)
        if len(set(ids)) != 4:
            raise InvalidPairingException(
                f"Match {self.id} needs four distinct players, got {ids}"
            )

    @property
    def team_a(self) -> Tuple[str, str]:
        return (self.a1, self.a2)

    @property
    def team_b(self) -> Tuple[str, str]:
        return (self.b1, self.b2)

    @property
    def player_ids(self) -> Tuple[str, str, str, str]:
        return (self.a1, self.a2, self.b1, self.b2)

    @property
    def is_completed(self) -> bool:
        return self.status == MATCH_COMPLETED

    def involves(self, player_id: str) -> bool:
        return player_id in self.player_ids

    def teammate_of(self, player_id: str) -> str:
        """Return the partner of ``player_id`` in this match."""
        if player_id == self.a1:
            return self.a2
        if player_id == self.a2:
            return self.a1
        if player_id == self.b1:
            return self.b2
        if player_id == self.b2:
            return self.b1
        raise KeyError(player_id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "round_index": self.round_index,
            "a1": self.a1,
            "a2": self.a2,
            "b1": self.b1,
            "b2": self.b2,
            "court": self.court,
            "mini_round_index": self.mini_round_index,
            "score_a": self.score_a,
            "score_b": self.score_b,
            "status": self.status,
            "compromise": self.compromise,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        return cls(
            id=data["id"],
            round_index=data["round_index"],
            a1=data["a1"],
            a2=data["a2"],
            b1=data["b1"],
            b2=data["b2"],
            court=data.get("court", 1),
            mini_round_index=data.get("mini_round_index"),
            score_a=data.get("score_a"),
            score_b=data.get("score_b"),
            status=data.get("status", MATCH_SCHEDULED),
            compromise=data.get("compromise"),
        )
