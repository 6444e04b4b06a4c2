"""Scheduling arithmetic: games per player, matches, waves and courts."""

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

import math
from typing import Optional

from rallypairing.constants import FINAL_MATCHES, KIND_FINAL, KIND_PRELIM
from rallypairing.models.tournament import SchedulePrefs


def target_games_per_round(
    round_index: int, prefs: Optional[SchedulePrefs] = None, kind: Optional[str] = None
) -> int:
    """Games each player should get in a round."""
    return (prefs or SchedulePrefs()).target_games(round_index, kind)


def matches_needed(
    player_count: int,
    round_index: int,
    prefs: Optional[SchedulePrefs] = None,
    kind: Optional[str] = None,
) -> int:
    """Matches a round needs so every player gets their target games.

    A final always has exactly three matches.
    """
    if kind == KIND_FINAL:
        return FINAL_MATCHES
    games = target_games_per_round(round_index, prefs, kind)
    return int(math.ceil(player_count * games / 4))


def wave_capacity(player_count: int, courts: Optional[int] = None) -> int:
    """Players who can be on court in one wave.

    The largest multiple of 4 not above ``player_count``, capped at four
    players per court.
    """
    capacity = player_count - player_count % 4
    if courts is not None:
        capacity = min(capacity, 4 * courts)
    return capacity


def waves_needed(
    matches: int, courts: Optional[int] = None, player_count: Optional[int] = None
) -> int:
    """Waves required to play ``matches`` matches.

    Args:
        matches: Matches to schedule
        courts: Courts available, None for unlimited
        player_count: Field size; a wave never holds more than a quarter of it

    Returns:
        Number of waves, 0 when there is nothing to play
    """
    if matches <= 0:
        return 0
    per_wave = matches if courts is None else max(1, courts)
    if player_count is not None:
        per_wave = min(per_wave, max(1, player_count // 4))
    return int(math.ceil(matches / per_wave))


def total_waves_for(
    kind: str,
    round_index: int,
    player_count: int,
    prefs: Optional[SchedulePrefs] = None,
) -> int:
    """Waves planned for a round.

    Prelim rounds play at least one full cycle of their wave order; every
    round plays enough waves to reach its match count.
    """
    prefs = prefs or SchedulePrefs()
    if kind == KIND_FINAL:
        return FINAL_MATCHES
    needed = waves_needed(
        matches_needed(player_count, round_index, prefs, kind),
        prefs.courts,
        player_count,
    )
    if kind == KIND_PRELIM:
        return max(len(prefs.wave_pattern(round_index)), needed)
    return max(1, needed)
