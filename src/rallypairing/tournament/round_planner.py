"""Stage planning: field sizes from the starting roster down to the final."""

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
from typing import List, Optional

from rallypairing.constants import (
    EIGHT_SIZE,
    FINAL_SIZE,
    KIND_EIGHT,
    KIND_FINAL,
    KIND_PRELIM,
    MIN_PLAYERS,
    PROGRESSION_TABLE,
    THREE_ROUND_CAP,
)
from rallypairing.models.tournament import RoundPlanEntry, SchedulePrefs
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


def next_field_size(current: int) -> int:
    """Field size after cutting a stage of ``current`` players.

    Common sizes come from a fixed progression table. Other sizes are halved
    and rounded up to a multiple of 4, never below 4 and always strictly
    below ``current`` (so 14 -> 8 and 18 -> 12). Fields of 4 or fewer are
    already final-sized and are returned unchanged.
    """
    if current in PROGRESSION_TABLE:
        return PROGRESSION_TABLE[current]
    if current <= FINAL_SIZE:
        return current
    size = max(FINAL_SIZE, int(math.ceil(current / 2 / 4)) * 4)
    while size >= current:
        size -= 4
    return max(FINAL_SIZE, size)


def compute_round_plan(
    player_count: int, prefs: Optional[SchedulePrefs] = None
) -> List[RoundPlanEntry]:
    """Compute the stage plan for a tournament.

    Args:
        player_count: Players registered at the start
        prefs: Schedule preferences; only ``three_round_cap`` is consulted

    Returns:
        Ordered plan entries, indices starting at 1. Empty when fewer than 8
        players are registered, since the tournament cannot start.

    Example:
        >>> [e.target_size for e in compute_round_plan(16)]
        [12, 8, 4, 4]
    """
    prefs = prefs or SchedulePrefs()
    if player_count < MIN_PLAYERS:
        logger.warning(
            "Cannot plan a tournament for %s players (minimum %s)",
            player_count,
            MIN_PLAYERS,
        )
        return []

    if player_count == EIGHT_SIZE:
        kinds = [(KIND_PRELIM, FINAL_SIZE), (KIND_FINAL, FINAL_SIZE)]
    else:
        kinds = []
        current = player_count
        while current > EIGHT_SIZE:
            current = next_field_size(current)
            kinds.append((KIND_PRELIM, current))
        kinds.append((KIND_EIGHT, FINAL_SIZE))
        kinds.append((KIND_FINAL, FINAL_SIZE))

        if prefs.three_round_cap and len(kinds) > THREE_ROUND_CAP:
            kinds = [
                (KIND_PRELIM, EIGHT_SIZE),
                (KIND_EIGHT, FINAL_SIZE),
                (KIND_FINAL, FINAL_SIZE),
            ]

    plan = [
        RoundPlanEntry(index=i, kind=kind, target_size=size)
        for i, (kind, size) in enumerate(kinds, start=1)
    ]
    logger.info(
        "Round plan for %s players: %s",
        player_count,
        ", ".join(f"{e.kind}({e.target_size})" for e in plan),
    )
    return plan


def plan_entry_for(
    plan: List[RoundPlanEntry], index: int
) -> Optional[RoundPlanEntry]:
    """Return the plan entry with the given index, if any."""
    for entry in plan:
        if entry.index == index:
            return entry
    return None
