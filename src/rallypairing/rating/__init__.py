"""Seed priors, blending and the doubles Elo engine."""

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

from rallypairing.rating.elo import (
    DetailedEloDelta,
    EloDelta,
    doubles_elo_delta,
    doubles_elo_delta_detailed,
    wave_clamp,
)
from rallypairing.rating.seeding import (
    assign_seed_priors,
    blend,
    maturity_beta,
    rank_by_blend,
    seed_prior,
)

__all__ = [
    "DetailedEloDelta",
    "EloDelta",
    "assign_seed_priors",
    "blend",
    "doubles_elo_delta",
    "doubles_elo_delta_detailed",
    "maturity_beta",
    "rank_by_blend",
    "seed_prior",
    "wave_clamp",
]
