"""Data models for tournament rounds and the round plan."""

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

from rallypairing.constants import ROUND_CLOSED, ROUND_PENDING
from rallypairing.models.tournament.match import Match


@dataclass(frozen=True)
class RoundPlanEntry:
    """Declarative schedule for one stage.

    Attributes
    ----------
    index : int
        Stage index, 1-indexed.
    kind : str
        ``prelim``, ``eight`` or ``final``.
    target_size : int
        Field size the survivors are cut to when the stage closes.
    """

    index: int
    kind: str
    target_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "kind": self.kind, "target_size": self.target_size}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundPlanEntry":
        return cls(
            index=data["index"], kind=data["kind"], target_size=data["target_size"]
        )


@dataclass
class Round:
    """Container for all data related to a single tournament stage.

    Attributes
    ----------
    index : int
        Round number (1-indexed).
    kind : str
        ``prelim``, ``eight`` or ``final``.
    matches : list of Match
        Every match generated so far, in wave order.
    status : str
        ``pending``, ``active`` or ``closed``.
    current_wave : int
        Number of waves generated so far.
    total_waves : int
        Waves planned for the round.
    target_size : int
        Field size survivors are cut to when the round closes.
    wave_kinds : list of str
        ``explore``/``showdown`` label per planned wave.
    """

    index: int
    kind: str
    target_size: int
    matches: List[Match] = field(default_factory=list)
    status: str = ROUND_PENDING
    current_wave: int = 0
    total_waves: int = 1
    wave_kinds: List[str] = field(default_factory=list)

    @property
    def is_closed(self) -> bool:
        return self.status == ROUND_CLOSED

    @property
    def all_completed(self) -> bool:
        return bool(self.matches) and all(m.is_completed for m in self.matches)

    def wave_matches(self, wave_index: int) -> List[Match]:
        return [m for m in self.matches if m.mini_round_index == wave_index]

    def wave_kind(self, wave_index: int) -> Optional[str]:
        if 1 <= wave_index <= len(self.wave_kinds):
            return self.wave_kinds[wave_index - 1]
        return None

    def appearances(self) -> Dict[str, int]:
        """Count how many matches each player has in this round."""
        counts: Dict[str, int] = {}
        for match in self.matches:
            for pid in match.player_ids:
                counts[pid] = counts.get(pid, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        """Serialize round data to dictionary."""
        return {
            "index": self.index,
            "kind": self.kind,
            "target_size": self.target_size,
            "matches": [m.to_dict() for m in self.matches],
            "status": self.status,
            "current_wave": self.current_wave,
            "total_waves": self.total_waves,
            "wave_kinds": list(self.wave_kinds),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Round":
        """Deserialize round data from dictionary."""
        return cls(
            index=data["index"],
            kind=data["kind"],
            target_size=data["target_size"],
            matches=[Match.from_dict(m) for m in data.get("matches", [])],
            status=data.get("status", ROUND_PENDING),
            current_wave=data.get("current_wave", 0),
            total_waves=data.get("total_waves", 1),
            wave_kinds=list(data.get("wave_kinds", [])),
        )
