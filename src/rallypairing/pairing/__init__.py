"""Wave generation: snake, adaptive and gate-based pairing."""

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

from rallypairing.pairing.adaptive import create_adaptive_matchups
from rallypairing.pairing.gated import (
    bubble_matchups,
    compute_gates,
    explore_matchups,
    generate_bubble,
    generate_explore,
)
from rallypairing.pairing.matchup import Matchup, to_matches
from rallypairing.pairing.selection import select_wave_players
from rallypairing.pairing.snake import final_round_matches, snake_wave
from rallypairing.pairing.waves import (
    WaveResult,
    generate_later_round,
    generate_prelim_wave,
    generate_r1_wave,
    prepare_later_round,
    prepare_prelim_round,
    prepare_round1,
)

__all__ = [
    "Matchup",
    "WaveResult",
    "bubble_matchups",
    "compute_gates",
    "create_adaptive_matchups",
    "explore_matchups",
    "final_round_matches",
    "generate_bubble",
    "generate_explore",
    "generate_later_round",
    "generate_prelim_wave",
    "generate_r1_wave",
    "prepare_later_round",
    "prepare_prelim_round",
    "prepare_round1",
    "select_wave_players",
    "snake_wave",
    "to_matches",
]
