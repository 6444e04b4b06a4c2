"""Choosing who plays when a wave cannot hold the whole field."""

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

from typing import Dict, List, Sequence, Tuple

from rallypairing.models.player import Player
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


def _play_priority(
    player: Player, appearances: Dict[str, int], blends: Dict[str, float]
) -> tuple:
    # Never-played players count as idle the longest
    idle = player.last_played_at if player.last_played_at is not None else float("-inf")
    return (
        appearances.get(player.id, 0),
        player.games_played,
        idle,
        blends.get(player.id, 0.0),
        player.seed,
    )


def select_wave_players(
    players: Sequence[Player],
    capacity: int,
    appearances: Dict[str, int],
    blends: Dict[str, float],
) -> Tuple[List[Player], List[Player]]:
    """Split the roster into players on court and players on the bench.

    Players with the fewest appearances in the current round play first,
    then fewest games overall, then longest idle, then lowest blend, with
    seed as the final tie-break.

    Args:
        players: Active roster
        capacity: Players that fit in the wave
        appearances: Matches already played in this round, by player id
        blends: Blend value by player id

    Returns:
        Tuple of (playing, benched), each ordered by seed
    """
    if capacity >= len(players):
        return sorted(players, key=lambda p: p.seed), []

    ordered = sorted(players, key=lambda p: _play_priority(p, appearances, blends))
    playing = sorted(ordered[:capacity], key=lambda p: p.seed)
    benched = sorted(ordered[capacity:], key=lambda p: p.seed)
    logger.warning(
        "Benching %s of %s players: %s",
        len(benched),
        len(players),
        ", ".join(p.name for p in benched),
    )
    return playing, benched
