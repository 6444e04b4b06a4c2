"""Round lifecycle: waves, closing and the tournament driver."""

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
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from rallypairing.constants import KIND_PRELIM, ROUND_ACTIVE, ROUND_CLOSED
from rallypairing.exceptions import TournamentStateException
from rallypairing.models.player import Player
from rallypairing.models.tournament import (
    Match,
    Round,
    RoundPlanEntry,
    SchedulePrefs,
    build_history,
)
from rallypairing.pairing.waves import (
    WaveResult,
    generate_prelim_wave,
    generate_r1_wave,
    prepare_later_round,
    prepare_prelim_round,
    prepare_round1,
)
from rallypairing.rating.seeding import assign_seed_priors
from rallypairing.tournament.elimination import (
    CutResult,
    apply_cut,
    cut_to_target,
    final_standings,
)
from rallypairing.tournament.result_recorder import ResultRecorder
from rallypairing.tournament.round_planner import compute_round_plan, plan_entry_for
from rallypairing.type_hints import MatchIdFactory
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


def add_wave(round_data: Round, matches: Sequence[Match]) -> Round:
    """Return a copy of ``round_data`` with one more wave of matches."""
    if round_data.is_closed:
        raise TournamentStateException(f"Round {round_data.index} is closed")
    return replace(
        round_data,
        matches=list(round_data.matches) + list(matches),
        current_wave=round_data.current_wave + 1,
        status=ROUND_ACTIVE,
    )


def close_round(
    round_data: Round, players: Sequence[Player], rounds: Sequence[Round]
) -> Tuple[Round, List[Player], CutResult]:
    """Close a round and cut the field to the round's target size.

    Args:
        round_data: The round to close
        players: Full roster
        rounds: Tournament rounds; an entry with the same index as
            ``round_data`` is replaced by it

    Returns:
        Tuple of (closed round, updated players, cut)

    Raises:
        TournamentStateException: If the round is closed, empty, or has
            matches without a result
    """
    if round_data.is_closed:
        raise TournamentStateException(f"Round {round_data.index} is already closed")
    if not round_data.all_completed:
        pending = [m.id for m in round_data.matches if not m.is_completed]
        raise TournamentStateException(
            f"Round {round_data.index} has unfinished matches: "
            f"{', '.join(pending) or 'no matches played'}"
        )

    closed = replace(round_data, status=ROUND_CLOSED)
    all_rounds = [r for r in rounds if r.index != closed.index] + [closed]
    cut = cut_to_target(players, all_rounds, closed.target_size)
    updated = apply_cut(players, cut, closed.index)
    logger.info(
        "Closed round %s (%s): %s survive, %s eliminated",
        closed.index,
        closed.kind,
        len(cut.keep_ids),
        len(cut.eliminated_ids),
    )
    return closed, updated, cut


class RoundManager:
    """Drives a tournament from registration to final standings.

    This class is responsible for:
    - Following the round plan computed at the start
    - Generating waves for prelim rounds and whole later rounds
    - Recording results and applying rating changes
    - Closing rounds and applying cuts

    All state lives on the manager; the functions it calls are pure.
    """

    def __init__(
        self,
        players: Sequence[Player],
        prefs: Optional[SchedulePrefs] = None,
        id_factory: Optional[MatchIdFactory] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """Initialize the round manager.

        Args:
            players: Registered players; seed priors are fixed here
            prefs: Schedule preferences
            id_factory: Builds match ids, deterministic by default
            clock: Returns the tick stored as ``last_played_at``; defaults to
                a counter of applied results
        """
        self.prefs = prefs or SchedulePrefs()
        self.id_factory = id_factory
        self._ticks = 0
        self._clock = clock or self._next_tick
        self.players: Dict[str, Player] = {
            p.id: p for p in assign_seed_priors(list(players))
        }
        self.plan: List[RoundPlanEntry] = compute_round_plan(len(self.players), self.prefs)
        self.rounds: List[Round] = []
        self.cuts: List[CutResult] = []
        self.recorder = ResultRecorder()

    def _next_tick(self) -> int:
        self._ticks += 1
        return self._ticks

    @property
    def current_round(self) -> Optional[Round]:
        return self.rounds[-1] if self.rounds else None

    @property
    def current_round_number(self) -> int:
        """The current round number (1-indexed), 0 before the first round."""
        return len(self.rounds)

    @property
    def is_finished(self) -> bool:
        """True once every planned round has been closed."""
        return (
            bool(self.plan)
            and len(self.rounds) == len(self.plan)
            and self.rounds[-1].is_closed
        )

    @property
    def active_players(self) -> List[Player]:
        return [p for p in self.players.values() if p.is_active]

    def get_round(self, round_number: int) -> Optional[Round]:
        if 1 <= round_number <= len(self.rounds):
            return self.rounds[round_number - 1]
        return None

    def start_next_round(self) -> Round:
        """Prepare the next planned round.

        Prelim rounds start empty and are filled with :meth:`next_wave`;
        eight and final rounds are generated in full.

        Raises:
            TournamentStateException: If the current round is still open or
                the plan is exhausted
            InsufficientPlayersException: With too few players to start
        """
        current = self.current_round
        if current is not None and not current.is_closed:
            raise TournamentStateException(
                f"Round {current.index} must be closed before starting another"
            )
        index = len(self.rounds) + 1
        players = list(self.players.values())
        if index == 1:
            round_data = prepare_round1(players, self.prefs)
        else:
            entry = plan_entry_for(self.plan, index)
            if entry is None:
                raise TournamentStateException("Every planned round has been played")
            if entry.kind == KIND_PRELIM:
                round_data = prepare_prelim_round(index, players, self.prefs, entry)
            else:
                round_data = prepare_later_round(
                    entry, players, self.rounds, self.prefs, self.id_factory
                )
        self.rounds.append(round_data)
        return round_data

    def has_more_waves(self) -> bool:
        current = self.current_round
        return (
            current is not None
            and not current.is_closed
            and current.kind == KIND_PRELIM
            and current.current_wave < current.total_waves
        )

    def next_wave(self) -> WaveResult:
        """Generate the next wave of the current prelim round.

        Raises:
            TournamentStateException: If there is no open prelim round, its
                waves are exhausted, or the previous wave is unfinished
        """
        current = self.current_round
        if current is None or current.is_closed:
            raise TournamentStateException("No open round to add a wave to")
        if current.kind != KIND_PRELIM:
            raise TournamentStateException(
                f"Round {current.index} ({current.kind}) is generated in full"
            )
        if current.current_wave >= current.total_waves:
            raise TournamentStateException(
                f"Round {current.index} already has {current.total_waves} waves"
            )
        if any(not m.is_completed for m in current.matches):
            raise TournamentStateException(
                f"Finish wave {current.current_wave} of round {current.index} first"
            )

        wave_index = current.current_wave + 1
        players = list(self.players.values())
        generate = generate_r1_wave if current.index == 1 else generate_prelim_wave
        result = generate(
            wave_index, players, current, self.rounds[:-1], self.prefs, self.id_factory
        )
        self.rounds[-1] = add_wave(current, result.matches)
        return result

    def undo_last_wave(self) -> bool:
        """Remove the last wave of the current round if nothing in it is scored.

        Returns:
            True if a wave was removed, False otherwise
        """
        current = self.current_round
        if current is None or current.is_closed or current.current_wave == 0:
            logger.warning("Cannot undo: no open wave")
            return False
        wave = current.wave_matches(current.current_wave)
        if current.kind != KIND_PRELIM or any(m.is_completed for m in wave):
            logger.warning(
                "Cannot undo wave %s of round %s", current.current_wave, current.index
            )
            return False
        self.rounds[-1] = replace(
            current,
            matches=[m for m in current.matches if m not in wave],
            current_wave=current.current_wave - 1,
        )
        logger.info("Undid wave %s of round %s", current.current_wave, current.index)
        return True

    def find_match(self, match_id: str) -> Match:
        current = self.current_round
        if current is not None:
            for match in current.matches:
                if match.id == match_id:
                    return match
        raise TournamentStateException(f"Match {match_id} is not in the open round")

    def record_result(self, match_id: str, score_a, score_b) -> Match:
        """Score a match of the open round and update the four players.

        Raises:
            TournamentStateException: If the match is not in the open round
            DuplicateResultException: If the match is already scored
            InvalidResultException: If a score is invalid
        """
        current = self.current_round
        match = self.find_match(match_id)
        completed = self.recorder.record(match, score_a, score_b)
        earlier = [
            m
            for r in self.rounds
            for m in r.matches
            if m.is_completed and m.id != match_id
        ]
        self.players = self.recorder.apply(
            self.players,
            completed,
            build_history(earlier),
            self._clock(),
            self.prefs,
        )
        self.rounds[-1] = replace(
            current,
            matches=[completed if m.id == match_id else m for m in current.matches],
        )
        return completed

    def close_current_round(self) -> CutResult:
        """Close the open round and apply its cut."""
        current = self.current_round
        if current is None:
            raise TournamentStateException("No round has been started")
        closed, updated, cut = close_round(
            current, list(self.players.values()), self.rounds
        )
        self.rounds[-1] = closed
        self.players = {p.id: p for p in updated}
        self.cuts.append(cut)
        return cut

    def standings(self) -> List[Player]:
        """Leaderboard: active players ranked, then eliminated by placement."""
        return final_standings(list(self.players.values()), self.rounds)
