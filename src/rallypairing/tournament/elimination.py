"""Ranking active players and cutting the field between stages."""

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

from dataclasses import dataclass, field, replace
from functools import cmp_to_key
from typing import Dict, Iterable, List, Sequence, Tuple

from rallypairing.models.player import Player
from rallypairing.models.tournament import Round
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class CutResult:
    """Outcome of cutting a field to a target size.

    Attributes:
        keep_ids: Survivors, best first
        eliminated_ids: Players cut, best first
        ranked_ids: The whole active field in ranking order
    """

    keep_ids: List[str] = field(default_factory=list)
    eliminated_ids: List[str] = field(default_factory=list)
    ranked_ids: List[str] = field(default_factory=list)


def head_to_head_wins(rounds: Iterable[Round]) -> Dict[Tuple[str, str], int]:
    """Count completed-match wins of each player over each opponent.

    Returns:
        Mapping ``(winner_id, loser_id)`` to number of wins. Tied scores
        count for nobody.
    """
    wins: Dict[Tuple[str, str], int] = {}
    for round_data in rounds:
        for match in round_data.matches:
            if not match.is_completed or match.score_a == match.score_b:
                continue
            if match.score_a > match.score_b:
                winners, losers = match.team_a, match.team_b
            else:
                winners, losers = match.team_b, match.team_a
            for w in winners:
                for l in losers:
                    wins[(w, l)] = wins.get((w, l), 0) + 1
    return wins


def _ranking_comparator(wins: Dict[Tuple[str, str], int]):
    def compare(p1: Player, p2: Player) -> int:
        if p1.point_diff != p2.point_diff:
            return -1 if p1.point_diff > p2.point_diff else 1
        p1_wins = wins.get((p1.id, p2.id), 0)
        p2_wins = wins.get((p2.id, p1.id), 0)
        if p1_wins != p2_wins:
            return -1 if p1_wins > p2_wins else 1
        return p1.seed - p2.seed

    return compare


def rank_players(players: Sequence[Player], rounds: Iterable[Round]) -> List[Player]:
    """Order players best first.

    Point differential (descending), then head-to-head wins between the two
    players being compared, then seed (ascending). Players who never met, or
    who beat each other equally often, fall through to seed.
    """
    wins = head_to_head_wins(rounds)
    return sorted(players, key=cmp_to_key(_ranking_comparator(wins)))


def cut_to_target(
    players: Sequence[Player], rounds: Iterable[Round], target_size: int
) -> CutResult:
    """Select which active players survive a cut to ``target_size``.

    Only active players take part. Players eliminated in an earlier round
    appear in no list of the result. Nobody is cut when the active field is
    already at or below the target.

    Returns:
        CutResult whose ``keep_ids`` hold every active player when the
        active field fits the target, else the best ``target_size`` of them
    """
    active = [p for p in players if p.is_active]
    ranked = [p.id for p in rank_players(active, rounds)]
    if len(ranked) <= target_size:
        return CutResult(keep_ids=ranked, eliminated_ids=[], ranked_ids=ranked)

    cut = CutResult(
        keep_ids=ranked[:target_size],
        eliminated_ids=ranked[target_size:],
        ranked_ids=ranked,
    )
    logger.info(
        "Cut %s players to %s, eliminated: %s",
        len(ranked),
        target_size,
        ", ".join(cut.eliminated_ids),
    )
    return cut


def apply_cut(
    players: Sequence[Player], cut: CutResult, round_index: int
) -> List[Player]:
    """Return copies of ``players`` with the cut applied.

    Eliminated players get ``eliminated_at_round`` and a ``locked_rank``
    equal to their position in the ranked active field, which is their final
    placement.
    """
    positions = {pid: pos for pos, pid in enumerate(cut.ranked_ids, start=1)}
    eliminated = set(cut.eliminated_ids)
    updated = []
    for player in players:
        if player.id in eliminated:
            player = replace(
                player,
                eliminated_at_round=round_index,
                locked_rank=positions[player.id],
            )
        updated.append(player)
    return updated


def final_standings(players: Sequence[Player], rounds: Iterable[Round]) -> List[Player]:
    """Leaderboard for everyone: active players ranked, then the eliminated."""
    rounds = list(rounds)
    active = rank_players([p for p in players if p.is_active], rounds)
    eliminated = sorted(
        (p for p in players if not p.is_active),
        key=lambda p: (p.locked_rank if p.locked_rank is not None else 10**9, p.seed),
    )
    return active + eliminated
