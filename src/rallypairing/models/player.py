"""Player data model."""

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

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from rallypairing.constants import DEFAULT_RATING
from rallypairing.utils import generate_id
from rallypairing.utils.validation import validate_player_fields_strict


@dataclass(frozen=True)
class EloLogEntry:
    """One rating change applied to a player."""

    match_id: str
    delta: int
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"match_id": self.match_id, "delta": self.delta, "reason": self.reason}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EloLogEntry":
        return cls(
            match_id=data["match_id"],
            delta=int(data["delta"]),
            reason=data.get("reason", ""),
        )


@dataclass
class Player:
    """
    A doubles player entered in the bracket.

    Pairing and rating code never mutates a player in place; updated copies
    are produced with :func:`dataclasses.replace`.

    Attributes
    ----------
    id : str
        Unique identifier for the player.
    name : str
        Display name.
    seed : int
        Initial ranking position, 1 is the strongest.
    rating : int
        Live rating. Always an integer.
    seed_prior : float or None
        Seed-derived rating anchor used while live ratings are immature.
    games_played : int
        Completed matches the player appeared in.
    points_for, points_against : int
        Cumulative rally points won and conceded.
    eliminated_at_round : int or None
        Round index at whose close the player was cut.
    locked_rank : int or None
        Frozen placement assigned at elimination.
    last_partner_id : str or None
        Partner in the most recent completed match.
    last_played_at : int or None
        Tick of the most recent completed match, from an injected clock.
    elo_log : list of EloLogEntry
        Rating changes in the order they were applied.
    """

    name: str
    seed: int
    id: str = field(default_factory=generate_id)
    rating: int = DEFAULT_RATING
    seed_prior: Optional[float] = None
    games_played: int = 0
    points_for: int = 0
    points_against: int = 0
    eliminated_at_round: Optional[int] = None
    locked_rank: Optional[int] = None
    last_partner_id: Optional[str] = None
    last_played_at: Optional[int] = None
    elo_log: List[EloLogEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        validate_player_fields_strict(self.rating, self.seed)

    @property
    def is_active(self) -> bool:
        return self.eliminated_at_round is None

    @property
    def point_diff(self) -> int:
        return self.points_for - self.points_against

    def __repr__(self) -> str:
        return f"Player(#{self.seed} {self.name}, {self.rating})"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize player to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "seed": self.seed,
            "rating": self.rating,
            "seed_prior": self.seed_prior,
            "games_played": self.games_played,
            "points_for": self.points_for,
            "points_against": self.points_against,
            "eliminated_at_round": self.eliminated_at_round,
            "locked_rank": self.locked_rank,
            "last_partner_id": self.last_partner_id,
            "last_played_at": self.last_played_at,
            "elo_log": [entry.to_dict() for entry in self.elo_log],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """Deserialize player from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            seed=data["seed"],
            rating=data.get("rating", DEFAULT_RATING),
            seed_prior=data.get("seed_prior"),
            games_played=data.get("games_played", 0),
            points_for=data.get("points_for", 0),
            points_against=data.get("points_against", 0),
            eliminated_at_round=data.get("eliminated_at_round"),
            locked_rank=data.get("locked_rank"),
            last_partner_id=data.get("last_partner_id"),
            last_played_at=data.get("last_played_at"),
            elo_log=[EloLogEntry.from_dict(e) for e in data.get("elo_log", [])],
        )
