"""Round preparation and wave generation.

These are the entry points the tournament driver calls: build a round shell
from the plan, then generate it wave by wave (prelim rounds) or all at once
(the eight and the final). Every function is pure: it reads players, rounds
and preferences and returns new objects.
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

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from rallypairing.constants import (
    KIND_FINAL,
    KIND_PRELIM,
    MIN_PLAYERS,
    ROUND_ACTIVE,
    WAVE_EXPLORE,
    WAVE_FORMAT_GATED,
)
from rallypairing.exceptions import (
    InsufficientPlayersException,
    TournamentStateException,
)
from rallypairing.models.player import Player
from rallypairing.models.tournament import (
    Match,
    Round,
    RoundPlanEntry,
    SchedulePrefs,
    history_from_rounds,
)
from rallypairing.pairing.adaptive import create_adaptive_matchups
from rallypairing.pairing.gated import generate_bubble, generate_explore
from rallypairing.pairing.selection import select_wave_players
from rallypairing.pairing.snake import final_round_matches, snake_wave
from rallypairing.rating.seeding import blend_map, field_size_for, maturity_beta
from rallypairing.tournament.round_planner import compute_round_plan, next_field_size
from rallypairing.tournament.scheduling import total_waves_for, wave_capacity
from rallypairing.type_hints import MatchIdFactory
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class WaveResult:
    """Matches of one wave and the ids of players sitting it out."""

    matches: List[Match] = field(default_factory=list)
    benched: List[str] = field(default_factory=list)


def _active(players: Sequence[Player]) -> List[Player]:
    return [p for p in players if p.is_active]


def _new_round(
    index: int, kind: str, target_size: int, player_count: int, prefs: SchedulePrefs
) -> Round:
    total = total_waves_for(kind, index, player_count, prefs)
    return Round(
        index=index,
        kind=kind,
        target_size=target_size,
        status=ROUND_ACTIVE,
        current_wave=0,
        total_waves=total,
        wave_kinds=[prefs.wave_kind(index, w) for w in range(1, total + 1)],
    )


def prepare_round1(
    players: Sequence[Player], prefs: Optional[SchedulePrefs] = None
) -> Round:
    """Create the first round from the plan.

    Raises:
        InsufficientPlayersException: With fewer than 8 active players
    """
    prefs = prefs or SchedulePrefs()
    active = _active(players)
    plan = compute_round_plan(len(active), prefs)
    if not plan:
        raise InsufficientPlayersException(
            f"A tournament needs at least {MIN_PLAYERS} players, got {len(active)}"
        )
    entry = plan[0]
    round_data = _new_round(1, entry.kind, entry.target_size, len(active), prefs)
    logger.info(
        "Prepared round 1 (%s) for %s players, %s waves, cut to %s",
        entry.kind,
        len(active),
        round_data.total_waves,
        entry.target_size,
    )
    return round_data


def prepare_prelim_round(
    index: int,
    players: Sequence[Player],
    prefs: Optional[SchedulePrefs] = None,
    plan_entry: Optional[RoundPlanEntry] = None,
) -> Round:
    """Create a prelim round for the active players.

    Without a plan entry the target size is the next field size after the
    current one.
    """
    prefs = prefs or SchedulePrefs()
    active = _active(players)
    if len(active) < 4:
        raise InsufficientPlayersException(
            f"Round {index} needs at least 4 active players, got {len(active)}"
        )
    kind = plan_entry.kind if plan_entry else KIND_PRELIM
    target = plan_entry.target_size if plan_entry else next_field_size(len(active))
    round_data = _new_round(index, kind, target, len(active), prefs)
    logger.info(
        "Prepared round %s (%s) for %s players, %s waves, cut to %s",
        index,
        kind,
        len(active),
        round_data.total_waves,
        target,
    )
    return round_data


def _use_gated(
    prefs: SchedulePrefs, playing: Sequence[Player], benched: Sequence[Player]
) -> bool:
    return (
        prefs.wave_format == WAVE_FORMAT_GATED
        and not benched
        and len(playing) >= 8
        and len(playing) % 4 == 0
    )


def generate_prelim_wave(
    wave_index: int,
    players: Sequence[Player],
    round_data: Round,
    prior_rounds: Sequence[Round],
    prefs: Optional[SchedulePrefs] = None,
    id_factory: Optional[MatchIdFactory] = None,
) -> WaveResult:
    """Generate one wave of a prelim round.

    Players beyond the wave capacity are benched first. The wave is then
    paired by one of three strategies:

    - gated format with the whole field on court: an explore or bubble wave,
      following the round's wave order, on players ranked by blend;
    - the opening wave of round 1: the seed snake;
    - otherwise: adaptive greedy pairing against the accumulated history.

    Args:
        wave_index: Wave number within the round, 1-indexed
        players: Roster; eliminated players are ignored
        round_data: The round being played, with matches of earlier waves
        prior_rounds: Every earlier round
        prefs: Schedule preferences
        id_factory: Builds match ids, deterministic by default

    Returns:
        WaveResult with the wave's matches and benched player ids

    Raises:
        InsufficientPlayersException: If fewer than 4 players can play
    """
    prefs = prefs or SchedulePrefs()
    active = _active(players)
    size = field_size_for(active)
    beta = maturity_beta(round_data.index, wave_index)
    blends = blend_map(active, beta, size)

    capacity = wave_capacity(len(active), prefs.courts)
    if capacity < 4:
        raise InsufficientPlayersException(
            f"Wave {wave_index} of round {round_data.index} needs 4 players, "
            f"{len(active)} active"
        )
    playing, benched = select_wave_players(
        active, capacity, round_data.appearances(), blends
    )

    round_index = round_data.index
    if _use_gated(prefs, playing, benched):
        ranked = sorted(playing, key=lambda p: (-blends[p.id], p.seed))
        wave_kind = prefs.wave_kind(round_index, wave_index)
        if wave_kind == WAVE_EXPLORE:
            matches = generate_explore(ranked, round_index, wave_index, id_factory)
        else:
            matches = generate_bubble(ranked, round_index, wave_index, id_factory)
        strategy = wave_kind
    elif round_index == 1 and wave_index == 1:
        matches = snake_wave(playing, round_index, wave_index, id_factory)
        strategy = "snake"
    else:
        history = history_from_rounds(list(prior_rounds) + [round_data])
        matches = create_adaptive_matchups(
            playing, history, beta, round_index, wave_index, id_factory, size
        )
        strategy = "adaptive"

    logger.debug(
        "Round %s wave %s: %s matches (%s), %s benched",
        round_index,
        wave_index,
        len(matches),
        strategy,
        len(benched),
    )
    return WaveResult(matches=matches, benched=[p.id for p in benched])


def generate_r1_wave(
    wave_index: int,
    players: Sequence[Player],
    round_data: Round,
    prior_rounds: Sequence[Round] = (),
    prefs: Optional[SchedulePrefs] = None,
    id_factory: Optional[MatchIdFactory] = None,
) -> WaveResult:
    """Generate one wave of the first round.

    Raises:
        TournamentStateException: If ``round_data`` is not round 1
    """
    if round_data.index != 1:
        raise TournamentStateException(
            f"generate_r1_wave called for round {round_data.index}"
        )
    return generate_prelim_wave(
        wave_index, players, round_data, prior_rounds, prefs, id_factory
    )


def generate_later_round(
    players: Sequence[Player],
    prior_rounds: Sequence[Round],
    round_index: int,
    kind: str,
    prefs: Optional[SchedulePrefs] = None,
    id_factory: Optional[MatchIdFactory] = None,
) -> List[Match]:
    """Generate every match of an eight or final round at once.

    The final plays the three partner splits of the four finalists. Other
    rounds pair each wave adaptively at the stage's maturity weight, feeding
    each generated wave into a private copy of the history so later waves
    avoid its partnerships.

    Raises:
        InvalidFieldSizeException: If a final does not have exactly 4 players
    """
    prefs = prefs or SchedulePrefs()
    active = _active(players)
    if kind == KIND_FINAL:
        matches = final_round_matches(active, round_index, id_factory)
        logger.info("Final round %s: %s matches", round_index, len(matches))
        return matches

    size = field_size_for(active)
    beta = maturity_beta(round_index, 1)
    blends = blend_map(active, beta, size)
    history = history_from_rounds(prior_rounds).clone()
    capacity = wave_capacity(len(active), prefs.courts)
    if capacity < 4:
        raise InsufficientPlayersException(
            f"Round {round_index} needs at least 4 active players, got {len(active)}"
        )

    matches: List[Match] = []
    appearances: dict = {}
    total = total_waves_for(kind, round_index, len(active), prefs)
    for wave_index in range(1, total + 1):
        playing, _ = select_wave_players(active, capacity, appearances, blends)
        wave = create_adaptive_matchups(
            playing, history, beta, round_index, wave_index, id_factory, size
        )
        for match in wave:
            history.apply_match(match)
            for pid in match.player_ids:
                appearances[pid] = appearances.get(pid, 0) + 1
        matches.extend(wave)

    logger.info(
        "Round %s (%s): %s matches over %s waves", round_index, kind, len(matches), total
    )
    return matches


def prepare_later_round(
    entry: RoundPlanEntry,
    players: Sequence[Player],
    prior_rounds: Sequence[Round],
    prefs: Optional[SchedulePrefs] = None,
    id_factory: Optional[MatchIdFactory] = None,
) -> Round:
    """Create an eight or final round with all of its matches generated."""
    prefs = prefs or SchedulePrefs()
    active = _active(players)
    round_data = _new_round(entry.index, entry.kind, entry.target_size, len(active), prefs)
    round_data.matches = generate_later_round(
        active, prior_rounds, entry.index, entry.kind, prefs, id_factory
    )
    round_data.current_wave = round_data.total_waves
    return round_data
