"""Recording match scores and applying them to players.

Scoring happens in two steps: :meth:`ResultRecorder.record` validates the
score and returns the completed match, :meth:`ResultRecorder.apply` turns a
completed match into updated player records.
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
from typing import Dict, Optional

from rallypairing.constants import MATCH_COMPLETED
from rallypairing.exceptions import (
    DuplicateResultException,
    InvalidResultException,
    PlayerNotFoundException,
)
from rallypairing.models.player import EloLogEntry, Player
from rallypairing.models.tournament import Match, PairingHistory, SchedulePrefs
from rallypairing.rating.elo import doubles_elo_delta_detailed
from rallypairing.utils import setup_logger
from rallypairing.utils.validation import validate_score_strict

logger = setup_logger(__name__)


class ResultRecorder:
    """Handles recording and applying doubles match results.

    This class is responsible for:
    - Validating scores before they are stored
    - Refusing to re-score a completed match
    - Updating ratings, game counts and point totals
    - Keeping each player's Elo log
    """

    def record(self, match: Match, score_a, score_b) -> Match:
        """Record the score of a scheduled match.

        Args:
            match: The scheduled match
            score_a: Points won by team A
            score_b: Points won by team B

        Returns:
            A completed copy of ``match``

        Raises:
            DuplicateResultException: If the match already has a result
            InvalidResultException: If a score is not a non-negative integer
        """
        if match.is_completed:
            raise DuplicateResultException(
                f"Match {match.id} already recorded as {match.score_a}-{match.score_b}"
            )
        a = validate_score_strict(score_a, "Team A score")
        b = validate_score_strict(score_b, "Team B score")
        logger.debug("Recorded match %s: %s-%s", match.id, a, b)
        return replace(match, score_a=a, score_b=b, status=MATCH_COMPLETED)

    def apply(
        self,
        players_by_id: Dict[str, Player],
        match: Match,
        history: PairingHistory,
        played_at: int,
        prefs: Optional[SchedulePrefs] = None,
    ) -> Dict[str, Player]:
        """Apply a completed match to the four players in it.

        Ratings move by the rounded team delta. Team B's rounded delta is the
        exact negation of team A's, so the sum of ratings never changes.

        Args:
            players_by_id: Roster keyed by id
            match: A completed match
            history: Pairings and oppositions from before this match
            played_at: Clock tick recorded as ``last_played_at``
            prefs: Schedule preferences, for the round's score cap

        Returns:
            A new roster dictionary with the four players updated

        Raises:
            InvalidResultException: If the match has no result yet
            PlayerNotFoundException: If a participant is not in the roster
        """
        if not match.is_completed:
            raise InvalidResultException(f"Match {match.id} has no result to apply")
        missing = [pid for pid in match.player_ids if pid not in players_by_id]
        if missing:
            raise PlayerNotFoundException(
                f"Match {match.id} references unknown players: {', '.join(missing)}"
            )

        a1, a2, b1, b2 = (players_by_id[pid] for pid in match.player_ids)
        repeat = history.opponent_repeats(match.team_a, match.team_b) > 0
        delta = doubles_elo_delta_detailed(
            a1,
            a2,
            b1,
            b2,
            match.score_a,
            match.score_b,
            match.round_index,
            match.mini_round_index,
            repeat_opponent_a=repeat,
            repeat_opponent_b=repeat,
            prefs=prefs,
        )
        change_a = int(round(delta.d_a))
        change_b = -change_a

        updated = dict(players_by_id)
        for player, teammate, change, pf, pa in (
            (a1, a2, change_a, match.score_a, match.score_b),
            (a2, a1, change_a, match.score_a, match.score_b),
            (b1, b2, change_b, match.score_b, match.score_a),
            (b2, b1, change_b, match.score_b, match.score_a),
        ):
            entry = EloLogEntry(
                match_id=match.id,
                delta=change,
                reason=delta.per_player[player.id].reason,
            )
            updated[player.id] = replace(
                player,
                rating=player.rating + change,
                games_played=player.games_played + 1,
                points_for=player.points_for + pf,
                points_against=player.points_against + pa,
                last_partner_id=teammate.id,
                last_played_at=played_at,
                elo_log=player.elo_log + [entry],
            )

        logger.debug("Applied match %s: %s", match.id, delta.reason)
        return updated
