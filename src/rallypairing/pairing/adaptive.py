"""Adaptive greedy pairing on blended ratings.

Players are sorted by blend and split into tiers of four. Teams are built by
repeatedly committing the globally cheapest remaining pair, then teams are
matched the same way. The greedy passes are not globally optimal; every
constraint here is soft, and whatever had to be relaxed is recorded on the
match as a compromise.
"""

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

from typing import Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from rallypairing.constants import (
    COMPROMISE_RATING_GAP,
    COMPROMISE_REPEAT_OPPONENT,
    COMPROMISE_REPEAT_PARTNER,
    OPPONENT_REPEAT_WEIGHT,
    PARTNER_REPEAT_PENALTY,
    RATING_GAP_THRESHOLD,
    TIER_PENALTY_ADJACENT,
    TIER_PENALTY_FAR,
    TIER_PENALTY_SAME,
    TIER_SIZE,
)
from rallypairing.models.player import Player
from rallypairing.models.tournament import Match, PairingHistory
from rallypairing.pairing.matchup import Matchup, require_multiple_of_four, to_matches
from rallypairing.rating.seeding import blend_map
from rallypairing.type_hints import Compromise, MatchIdFactory, Team
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)

T = TypeVar("T")


def _greedy_pairs(items: List[T], cost: Callable[[T, T], float]) -> List[Tuple[T, T]]:
    """Pair items by repeatedly taking the cheapest remaining pair.

    Ties keep the first pair found in ``(i, j)`` order.
    """
    remaining = list(items)
    pairs = []
    while len(remaining) >= 2:
        best_i, best_j = 0, 1
        best_cost = float("inf")
        for i in range(len(remaining)):
            for j in range(i + 1, len(remaining)):
                c = cost(remaining[i], remaining[j])
                if c < best_cost:
                    best_cost = c
                    best_i, best_j = i, j
        second = remaining.pop(best_j)
        first = remaining.pop(best_i)
        pairs.append((first, second))
    return pairs


def tier_penalty(tier_a: int, tier_b: int) -> int:
    distance = abs(tier_a - tier_b)
    if distance == 0:
        return TIER_PENALTY_SAME
    if distance == 1:
        return TIER_PENALTY_ADJACENT
    return TIER_PENALTY_FAR


def build_teams(
    ordered: Sequence[Player], blends: Dict[str, float], history: PairingHistory
) -> List[Team]:
    """Greedy team building over blend-ordered players."""
    tiers = {p.id: idx // TIER_SIZE for idx, p in enumerate(ordered)}

    def pair_cost(a: Player, b: Player) -> float:
        cost = PARTNER_REPEAT_PENALTY if history.have_partnered(a.id, b.id) else 0
        cost += tier_penalty(tiers[a.id], tiers[b.id])
        return cost + abs(blends[a.id] - blends[b.id])

    return [(a.id, b.id) for a, b in _greedy_pairs(list(ordered), pair_cost)]


def _classify(
    team_a: Team,
    team_b: Team,
    blends: Dict[str, float],
    history: PairingHistory,
) -> Optional[Compromise]:
    """Worst soft constraint a match relaxes, if any."""
    if history.have_partnered(*team_a) or history.have_partnered(*team_b):
        return COMPROMISE_REPEAT_PARTNER
    if history.opponent_repeats(team_a, team_b) > 0:
        return COMPROMISE_REPEAT_OPPONENT
    avg_a = (blends[team_a[0]] + blends[team_a[1]]) / 2
    avg_b = (blends[team_b[0]] + blends[team_b[1]]) / 2
    if abs(avg_a - avg_b) > RATING_GAP_THRESHOLD:
        return COMPROMISE_RATING_GAP
    return None


def build_matchups(
    teams: Sequence[Team], blends: Dict[str, float], history: PairingHistory
) -> List[Matchup]:
    """Greedy match building over teams."""

    def team_sum(team: Team) -> float:
        return blends[team[0]] + blends[team[1]]

    def match_cost(a: Team, b: Team) -> float:
        cost = abs(team_sum(a) - team_sum(b))
        cost += history.opponent_repeats(a, b) * OPPONENT_REPEAT_WEIGHT
        for team in (a, b):
            if history.have_partnered(*team):
                cost += PARTNER_REPEAT_PENALTY
        return cost

    return [
        Matchup(team_a=a, team_b=b, compromise=_classify(a, b, blends, history))
        for a, b in _greedy_pairs(list(teams), match_cost)
    ]


def create_adaptive_matchups(
    players: Sequence[Player],
    history: PairingHistory,
    beta: float,
    round_index: int,
    wave_index: int,
    id_factory: Optional[MatchIdFactory] = None,
    field_size: Optional[int] = None,
) -> List[Match]:
    """Pair a wave on blended ratings while avoiding repeats.

    Args:
        players: Players on court this wave, a multiple of 4
        history: Partner and opponent history so far; not modified
        beta: Weight of live rating against seed prior
        round_index: Round the wave belongs to
        wave_index: Wave number within the round
        id_factory: Builds match ids, deterministic by default
        field_size: Field size for players without a stored seed prior

    Returns:
        One match per four players, each player exactly once

    Raises:
        InvalidFieldSizeException: If the player count is not a multiple of 4
    """
    require_multiple_of_four(len(players), "Adaptive wave")
    blends = blend_map(players, beta, field_size)
    ordered = sorted(players, key=lambda p: (-blends[p.id], p.seed))

    teams = build_teams(ordered, blends, history)
    matchups = build_matchups(teams, blends, history)

    for matchup in matchups:
        if matchup.compromise == COMPROMISE_REPEAT_PARTNER:
            logger.warning(
                "Round %s wave %s: forced repeat partnership in %s v %s",
                round_index,
                wave_index,
                matchup.team_a,
                matchup.team_b,
            )
        elif matchup.compromise:
            logger.debug(
                "Round %s wave %s: %s in %s v %s",
                round_index,
                wave_index,
                matchup.compromise,
                matchup.team_a,
                matchup.team_b,
            )
    return to_matches(matchups, round_index, wave_index, id_factory)
