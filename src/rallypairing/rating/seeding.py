"""Seed-derived rating priors and maturity-weighted blending.

Early in a tournament live ratings carry almost no information, so pairing
works on a *blend* that starts at the seed prior and moves toward the live
rating as more waves are played.
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

from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from rallypairing.constants import (
    BETA_EARLY,
    BETA_MATURE,
    BETA_OPENING,
    BETA_SETTLED,
    SEED_PRIOR_BASE,
    SEED_PRIOR_SPREAD,
)
from rallypairing.models.player import Player
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


def seed_prior(seed: int, field_size: int, spread: float = SEED_PRIOR_SPREAD) -> float:
    """Rating anchor for a seed, centred on 1000.

    Seed 1 sits ``spread * (N - 1) / 2`` above the base and seed N the same
    distance below it.
    """
    return SEED_PRIOR_BASE + spread * ((field_size + 1 - 2 * seed) / 2)


def blend(rating: float, prior: float, beta: float) -> float:
    """Interpolate from ``prior`` (beta 0) to ``rating`` (beta 1)."""
    return prior + beta * (rating - prior)


def maturity_beta(round_index: int, wave_index: int) -> float:
    """Weight given to live rating for a wave of a round."""
    if round_index <= 1:
        if wave_index <= 1:
            return BETA_OPENING
        if wave_index == 2:
            return BETA_EARLY
        return BETA_SETTLED
    if round_index == 2:
        return BETA_SETTLED
    return BETA_MATURE


def field_size_for(players: Sequence[Player]) -> int:
    """Field size used to derive missing priors."""
    if not players:
        return 0
    return max(len(players), max(p.seed for p in players))


def player_prior(player: Player, field_size: int) -> float:
    if player.seed_prior is not None:
        return player.seed_prior
    return seed_prior(player.seed, field_size)


def assign_seed_priors(players: Sequence[Player]) -> List[Player]:
    """Return copies of ``players`` with ``seed_prior`` fixed from their seeds.

    Called once when the tournament starts; the prior never changes after.
    """
    size = field_size_for(players)
    updated = [replace(p, seed_prior=seed_prior(p.seed, size)) for p in players]
    logger.debug("Assigned seed priors for %s players", len(updated))
    return updated


def blend_map(
    players: Sequence[Player], beta: float, field_size: Optional[int] = None
) -> Dict[str, float]:
    """Blend value for every player, keyed by id."""
    size = field_size if field_size is not None else field_size_for(players)
    return {p.id: blend(p.rating, player_prior(p, size), beta) for p in players}


def rank_by_blend(players: Sequence[Player], beta: float) -> List[Player]:
    """Sort by blend descending, lower seed first on ties."""
    blends = blend_map(players, beta)
    return sorted(players, key=lambda p: (-blends[p.id], p.seed))
