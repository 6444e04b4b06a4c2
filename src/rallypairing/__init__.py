"""Rally Pairing: doubles elimination tournament pairing and ratings."""

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

from rallypairing.models import Match, Player, Round, RoundPlanEntry, SchedulePrefs
from rallypairing.pairing import (
    WaveResult,
    generate_later_round,
    generate_prelim_wave,
    generate_r1_wave,
    prepare_later_round,
    prepare_prelim_round,
    prepare_round1,
)
from rallypairing.rating import doubles_elo_delta, doubles_elo_delta_detailed
from rallypairing.tournament import (
    ResultRecorder,
    compute_round_plan,
    cut_to_target,
    rank_players,
)
from rallypairing.tournament.round_manager import RoundManager

__all__ = [
    "Match",
    "Player",
    "ResultRecorder",
    "Round",
    "RoundManager",
    "RoundPlanEntry",
    "SchedulePrefs",
    "WaveResult",
    "compute_round_plan",
    "cut_to_target",
    "doubles_elo_delta",
    "doubles_elo_delta_detailed",
    "generate_later_round",
    "generate_prelim_wave",
    "generate_r1_wave",
    "prepare_later_round",
    "prepare_prelim_round",
    "prepare_round1",
    "rank_players",
]
