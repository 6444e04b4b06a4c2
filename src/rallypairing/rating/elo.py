"""Doubles Elo rating engine.

Ratings move by team: both members of a team receive the same delta and the
two teams' deltas always sum to zero. The K factor grows with rally points
played and with player inexperience, and every delta is clamped to a
wave-specific limit so opening waves cannot swing ratings wildly.
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

import math
from dataclasses import dataclass, field
from typing import Dict, Optional

from rallypairing.constants import (
    DIFFICULTY_LIMIT,
    ELO_BASE_K,
    ELO_K_MAX,
    ELO_K_MIN,
    ELO_SCALE,
    REPEAT_OPPONENT_DAMP,
    SAME_PARTNER_DAMP,
    SHARE_CEILING,
    SHARE_FLOOR,
    SURPRISE_BASE,
    TEAM_SPREAD_PENALTY,
    UNCERTAINTY_BOOST,
    WAVE_CLAMP_DEFAULT,
    WAVE_CLAMP_R1W1,
    WAVE_CLAMP_R1W2,
)
from rallypairing.models.player import Player
from rallypairing.models.tournament.schedule_prefs import SchedulePrefs


@dataclass(frozen=True)
class EloDelta:
    """Rating change for team A (``d_a``) and team B (``d_b``)."""

    d_a: float
    d_b: float


@dataclass(frozen=True)
class PlayerEloChange:
    """Per-player view of a rating change."""

    player_id: str
    delta: float
    same_partner: bool
    reason: str


@dataclass(frozen=True)
class DetailedEloDelta(EloDelta):
    """Rating change with explanation text for every participant."""

    reason: str = ""
    per_player: Dict[str, PlayerEloChange] = field(default_factory=dict)


def eff_team(r1: float, r2: float, spread_penalty: float = TEAM_SPREAD_PENALTY) -> float:
    """Team strength: the average, pulled down for uneven partnerships."""
    return (r1 + r2) / 2 - spread_penalty * abs(r1 - r2)


def expected_share(ra: float, rb: float) -> float:
    """Expected point share of team A under the logistic Elo curve."""
    return 1 / (1 + math.pow(10, (rb - ra) / ELO_SCALE))


def actual_share(score_a: int, score_b: int) -> float:
    """Point share of team A, kept away from 0 and 1."""
    share = score_a / max(1, score_a + score_b)
    return min(SHARE_CEILING, max(SHARE_FLOOR, share))


def wave_clamp(round_index: int, wave_index: Optional[int]) -> int:
    """Largest absolute delta allowed for a wave."""
    if round_index != 1:
        return WAVE_CLAMP_DEFAULT
    if wave_index == 1:
        return WAVE_CLAMP_R1W1
    if wave_index == 2:
        return WAVE_CLAMP_R1W2
    return WAVE_CLAMP_DEFAULT


def k_factor(
    score_a: int,
    score_b: int,
    cap_ref: int,
    avg_games_played: float,
    ra: float,
    rb: float,
    same_partner: bool,
    repeat_opponent: bool,
    expected: float,
    actual: float,
) -> float:
    """K factor for one side of a match.

    Args:
        score_a: Points won by the side being rated
        score_b: Points won by the other side
        cap_ref: Score cap of the round, the reference for a full game
        avg_games_played: Mean games played by the four participants
        ra: Effective rating of the side being rated
        rb: Effective rating of the other side
        same_partner: The side kept its previous partnership
        repeat_opponent: The side met an opponent it had already faced
        expected: Expected share of the side being rated
        actual: Actual share of the side being rated

    Returns:
        K, clamped to ``[ELO_K_MIN, ELO_K_MAX]``
    """
    intensity = (score_a + score_b) / cap_ref
    uncertainty = 1.0 + UNCERTAINTY_BOOST / math.sqrt(max(1, avg_games_played))
    difficulty = 1 + max(-DIFFICULTY_LIMIT, min(DIFFICULTY_LIMIT, (rb - ra) / ELO_SCALE))
    damp = (SAME_PARTNER_DAMP if same_partner else 1.0) * (
        REPEAT_OPPONENT_DAMP if repeat_opponent else 1.0
    )
    surprise = SURPRISE_BASE + abs(actual - expected)
    k = ELO_BASE_K * intensity * uncertainty * difficulty * damp * surprise
    return max(ELO_K_MIN, min(ELO_K_MAX, k))


def doubles_elo_delta(
    ra1: float,
    ra2: float,
    rb1: float,
    rb2: float,
    score_a: int,
    score_b: int,
    round_index: int,
    wave_index: Optional[int] = None,
    same_partner_a: bool = False,
    repeat_opponent_a: bool = False,
    same_partner_b: bool = False,
    repeat_opponent_b: bool = False,
    avg_games_played: float = 1,
    prefs: Optional[SchedulePrefs] = None,
) -> EloDelta:
    """Rating change for a completed doubles match.

    Team B's flags are accepted so both sides are described symmetrically,
    but only team A's K factor drives the update: ``d_b`` is exactly
    ``-d_a`` and ``|d_a|`` never exceeds :func:`wave_clamp`.

    Example:
        >>> delta = doubles_elo_delta(1000, 1000, 1000, 1000, 21, 18, 1, 1)
        >>> 0 < delta.d_a <= 20 and delta.d_b == -delta.d_a
        True
    """
    prefs = prefs or SchedulePrefs()
    ra = eff_team(ra1, ra2)
    rb = eff_team(rb1, rb2)
    expected = expected_share(ra, rb)
    actual = actual_share(score_a, score_b)

    k_a = k_factor(
        score_a,
        score_b,
        prefs.score_cap(round_index),
        avg_games_played,
        ra,
        rb,
        same_partner_a,
        repeat_opponent_a,
        expected,
        actual,
    )
    limit = wave_clamp(round_index, wave_index)
    d_a = max(-limit, min(limit, k_a * (actual - expected)))
    return EloDelta(d_a=d_a, d_b=-d_a)


def _same_partner(player: Player, teammate: Player) -> bool:
    return player.last_partner_id == teammate.id


def _player_reason(
    delta: float, score_for: int, score_against: int, same_partner: bool
) -> str:
    outcome = "won" if score_for > score_against else "lost"
    if score_for == score_against:
        outcome = "tied"
    text = f"{outcome} {score_for}-{score_against}, {delta:+.1f}"
    if same_partner:
        text += " (same partner as last match)"
    return text


def doubles_elo_delta_detailed(
    a1: Player,
    a2: Player,
    b1: Player,
    b2: Player,
    score_a: int,
    score_b: int,
    round_index: int,
    wave_index: Optional[int] = None,
    repeat_opponent_a: bool = False,
    repeat_opponent_b: bool = False,
    avg_games_played: Optional[float] = None,
    prefs: Optional[SchedulePrefs] = None,
) -> DetailedEloDelta:
    """Like :func:`doubles_elo_delta` but from players, with explanations.

    A team counts as a repeat partnership when either member's
    ``last_partner_id`` is the teammate. Each player's own reason text only
    mentions the partnership when that player's ``last_partner_id`` points
    at the teammate, so teammates may read differently while sharing the
    same numeric delta.
    """
    if avg_games_played is None:
        avg_games_played = (
            a1.games_played + a2.games_played + b1.games_played + b2.games_played
        ) / 4
    same_a = _same_partner(a1, a2) or _same_partner(a2, a1)
    same_b = _same_partner(b1, b2) or _same_partner(b2, b1)

    delta = doubles_elo_delta(
        a1.rating,
        a2.rating,
        b1.rating,
        b2.rating,
        score_a,
        score_b,
        round_index,
        wave_index,
        same_a,
        repeat_opponent_a,
        same_b,
        repeat_opponent_b,
        avg_games_played,
        prefs,
    )

    expected = expected_share(eff_team(a1.rating, a2.rating), eff_team(b1.rating, b2.rating))
    notes = []
    if same_a or same_b:
        notes.append("repeat partnership damped")
    if repeat_opponent_a or repeat_opponent_b:
        notes.append("repeat opponents damped")
    reason = (
        f"R{round_index}W{wave_index or '-'} {score_a}-{score_b}, "
        f"expected {expected:.0%} for A: A {delta.d_a:+.1f} / B {delta.d_b:+.1f}"
    )
    if notes:
        reason += " (" + ", ".join(notes) + ")"

    per_player: Dict[str, PlayerEloChange] = {}
    for player, teammate, d, pf, pa in (
        (a1, a2, delta.d_a, score_a, score_b),
        (a2, a1, delta.d_a, score_a, score_b),
        (b1, b2, delta.d_b, score_b, score_a),
        (b2, b1, delta.d_b, score_b, score_a),
    ):
        flag = _same_partner(player, teammate)
        per_player[player.id] = PlayerEloChange(
            player_id=player.id,
            delta=d,
            same_partner=flag,
            reason=_player_reason(d, pf, pa, flag),
        )

    return DetailedEloDelta(
        d_a=delta.d_a, d_b=delta.d_b, reason=reason, per_player=per_player
    )
