"""Stage planning, scheduling, elimination and result recording.

The round driver lives in :mod:`rallypairing.tournament.round_manager`; it
depends on the pairing package, which itself uses the planner and
scheduling helpers here, so it is imported from its module.
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

from rallypairing.tournament.elimination import (
    CutResult,
    apply_cut,
    cut_to_target,
    final_standings,
    head_to_head_wins,
    rank_players,
)
from rallypairing.tournament.result_recorder import ResultRecorder
from rallypairing.tournament.round_planner import (
    compute_round_plan,
    next_field_size,
    plan_entry_for,
)
from rallypairing.tournament.scheduling import (
    matches_needed,
    target_games_per_round,
    total_waves_for,
    wave_capacity,
    waves_needed,
)

__all__ = [
    "CutResult",
    "ResultRecorder",
    "apply_cut",
    "compute_round_plan",
    "cut_to_target",
    "final_standings",
    "head_to_head_wins",
    "matches_needed",
    "next_field_size",
    "plan_entry_for",
    "rank_players",
    "target_games_per_round",
    "total_waves_for",
    "wave_capacity",
    "waves_needed",
]
