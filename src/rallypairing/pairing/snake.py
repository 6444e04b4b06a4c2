"""Fixed-pattern waves: the seed snake opening and the four-player final."""

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

from typing import List, Optional, Sequence

from rallypairing.constants import FINAL_SIZE
from rallypairing.exceptions import InvalidFieldSizeException
from rallypairing.models.player import Player
from rallypairing.models.tournament import Match
from rallypairing.pairing.matchup import Matchup, require_multiple_of_four, to_matches
from rallypairing.type_hints import MatchIdFactory
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)

# Index pairs of the seed-sorted finalists, one split per wave
FINAL_SPLITS = (
    ((0, 1), (2, 3)),
    ((0, 2), (1, 3)),
    ((0, 3), (1, 2)),
)


def snake_matchups(players: Sequence[Player]) -> List[Matchup]:
    """Chunk by seed into fours and pair ``{p1, p4}`` against ``{p2, p3}``."""
    require_multiple_of_four(len(players), "Snake wave")
    ordered = sorted(players, key=lambda p: p.seed)
    matchups = []
    for i in range(0, len(ordered), 4):
        p1, p2, p3, p4 = ordered[i : i + 4]
        matchups.append(Matchup(team_a=(p1.id, p4.id), team_b=(p2.id, p3.id)))
    return matchups


def snake_wave(
    players: Sequence[Player],
    round_index: int = 1,
    wave_index: int = 1,
    id_factory: Optional[MatchIdFactory] = None,
) -> List[Match]:
    """Opening wave balanced on seed alone.

    Example:
        Eight players seeded 1-8 give ``{1,4} v {2,3}`` and ``{5,8} v {6,7}``.
    """
    matches = to_matches(snake_matchups(players), round_index, wave_index, id_factory)
    logger.debug("Snake wave %s: %s matches", wave_index, len(matches))
    return matches


def final_round_matches(
    players: Sequence[Player],
    round_index: int,
    id_factory: Optional[MatchIdFactory] = None,
) -> List[Match]:
    """All three partner splits of the finalists, one match per wave.

    Every finalist partners each of the other three exactly once.

    Raises:
        InvalidFieldSizeException: If there are not exactly four finalists
    """
    if len(players) != FINAL_SIZE:
        raise InvalidFieldSizeException(
            f"Final needs exactly {FINAL_SIZE} players, got {len(players)}"
        )
    ordered = sorted(players, key=lambda p: p.seed)
    matches: List[Match] = []
    for wave_index, ((a1, a2), (b1, b2)) in enumerate(FINAL_SPLITS, start=1):
        matchup = Matchup(
            team_a=(ordered[a1].id, ordered[a2].id),
            team_b=(ordered[b1].id, ordered[b2].id),
        )
        matches.extend(to_matches([matchup], round_index, wave_index, id_factory))
    return matches
