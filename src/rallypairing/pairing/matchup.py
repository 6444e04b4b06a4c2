"""Intermediate team pairings and their conversion to matches."""

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
from typing import List, Optional, Sequence

from rallypairing.exceptions import InvalidFieldSizeException
from rallypairing.models.tournament import Match
from rallypairing.type_hints import MatchIdFactory, Team
from rallypairing.utils import default_match_id


@dataclass(frozen=True)
class Matchup:
    """Two teams of player ids, not yet placed on a court."""

    team_a: Team
    team_b: Team
    compromise: Optional[str] = None


def require_multiple_of_four(count: int, context: str) -> None:
    if count == 0 or count % 4 != 0:
        raise InvalidFieldSizeException(
            f"{context}: player count must be a positive multiple of 4, got {count}"
        )


def to_matches(
    matchups: Sequence[Matchup],
    round_index: int,
    wave_index: int,
    id_factory: Optional[MatchIdFactory] = None,
) -> List[Match]:
    """Place matchups on courts 1..n of a wave."""
    id_factory = id_factory or default_match_id
    matches = []
    for court, matchup in enumerate(matchups, start=1):
        matches.append(
            Match(
                id=id_factory(round_index, wave_index, court),
                round_index=round_index,
                a1=matchup.team_a[0],
                a2=matchup.team_a[1],
                b1=matchup.team_b[0],
                b2=matchup.team_b[1],
                court=court,
                mini_round_index=wave_index,
                compromise=matchup.compromise,
            )
        )
    return matches
