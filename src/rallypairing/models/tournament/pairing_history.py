"""Partner and opponent history derived from matches."""

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
from typing import Any, Dict, Iterable

from rallypairing.models.tournament.match import Match
from rallypairing.models.tournament.round_data import Round
from rallypairing.type_hints import RelationMap


@dataclass
class PairingHistory:
    """
    Tracks who has partnered and who has opposed whom.

    History only ever grows. Code that needs to extend a history while
    building a wave works on a :meth:`clone` so snapshots held elsewhere are
    never changed.

    Attributes
    ----------
    partners : dict of str to set of str
        Player id to the ids of every partner so far.
    opponents : dict of str to set of str
        Player id to the ids of every opponent so far.
    """

    partners: RelationMap = field(default_factory=dict)
    opponents: RelationMap = field(default_factory=dict)

    def add_partners(self, player1_id: str, player2_id: str) -> None:
        """Record that two players have been teammates."""
        self.partners.setdefault(player1_id, set()).add(player2_id)
        self.partners.setdefault(player2_id, set()).add(player1_id)

    def add_opponents(self, player1_id: str, player2_id: str) -> None:
        """Record that two players have faced each other."""
        self.opponents.setdefault(player1_id, set()).add(player2_id)
        self.opponents.setdefault(player2_id, set()).add(player1_id)

    def apply_match(self, match: Match) -> None:
        """Extend the history in place with one match."""
        self.add_partners(match.a1, match.a2)
        self.add_partners(match.b1, match.b2)
        for a in match.team_a:
            for b in match.team_b:
                self.add_opponents(a, b)

    def have_partnered(self, player1_id: str, player2_id: str) -> bool:
        return player2_id in self.partners.get(player1_id, ())

    def have_opposed(self, player1_id: str, player2_id: str) -> bool:
        return player2_id in self.opponents.get(player1_id, ())

    def opponent_repeats(self, team_a: Iterable[str], team_b: Iterable[str]) -> int:
        """Count cross-team pairs that have already met as opponents."""
        team_b = list(team_b)
        return sum(1 for a in team_a for b in team_b if self.have_opposed(a, b))

    def clone(self) -> "PairingHistory":
        """Return a deep copy safe to extend."""
        return PairingHistory(
            partners={pid: set(ids) for pid, ids in self.partners.items()},
            opponents={pid: set(ids) for pid, ids in self.opponents.items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize pairing history to dictionary."""
        return {
            "partners": {pid: sorted(ids) for pid, ids in self.partners.items()},
            "opponents": {pid: sorted(ids) for pid, ids in self.opponents.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PairingHistory":
        """Deserialize pairing history from dictionary."""
        return cls(
            partners={k: set(v) for k, v in data.get("partners", {}).items()},
            opponents={k: set(v) for k, v in data.get("opponents", {}).items()},
        )


def build_history(matches: Iterable[Match]) -> PairingHistory:
    """Build partner and opponent sets from a list of matches."""
    history = PairingHistory()
    for match in matches:
        history.apply_match(match)
    return history


def merge_histories(*histories: PairingHistory) -> PairingHistory:
    """Union several histories into a new one."""
    merged = PairingHistory()
    for history in histories:
        for pid, ids in history.partners.items():
            merged.partners.setdefault(pid, set()).update(ids)
        for pid, ids in history.opponents.items():
            merged.opponents.setdefault(pid, set()).update(ids)
    return merged


def history_from_rounds(rounds: Iterable[Round]) -> PairingHistory:
    """Build history from every match of every round, scheduled or completed."""
    return build_history(m for r in rounds for m in r.matches)
