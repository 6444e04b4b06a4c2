"""Schedule preferences for a tournament."""

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
from typing import Any, Dict, Optional

from rallypairing.constants import (
    DEFAULT_WAVE_FORMAT,
    DEFAULT_WAVE_ORDER,
    FINAL_MATCHES,
    KIND_FINAL,
    LATER_SCORE_CAP,
    LATER_TARGET_GAMES,
    ROUND1_SCORE_CAP,
    ROUND1_TARGET_GAMES,
    WAVE_EXPLORE,
    WAVE_FORMATS,
    WAVE_ORDERS,
)
from rallypairing.exceptions import InvalidConfigurationException

# Single-round fields kept by older saved states, folded into the maps below
_LEGACY_SCORE_CAPS = {"r1ScoreCap": 1, "r2ScoreCap": 2, "r3ScoreCap": 3}
_LEGACY_TARGET_GAMES = {"r1TargetGamesPerPlayer": 1, "r2TargetGamesPerPlayer": 2}
_LEGACY_WAVE_ORDERS = {"r1WaveOrder": 1}


def _int_keyed(data: Optional[Dict[Any, Any]]) -> Dict[int, Any]:
    # JSON object keys arrive as strings
    return {int(k): v for k, v in (data or {}).items()}


def _fold(
    data: Dict[str, Any], snake_key: str, camel_key: str, legacy: Dict[str, int]
) -> Dict[int, Any]:
    folded: Dict[int, Any] = {}
    for legacy_key, round_index in legacy.items():
        if data.get(legacy_key) is not None:
            folded[round_index] = data[legacy_key]
    folded.update(_int_keyed(data.get(camel_key)))
    folded.update(_int_keyed(data.get(snake_key)))
    return folded


@dataclass
class SchedulePrefs:
    """Tunable scheduling knobs, keyed by round index.

    Any round missing from a map uses the documented default: score cap 21
    for round 1 and 11 afterwards; 3 target games in round 1, 2 in later
    rounds and 3 in the final; and the wave order of the closest earlier
    round that has one, else ``explore-showdown-explore-showdown``.

    Attributes:
        courts: Courts available, None for unlimited
        wave_format: ``adaptive`` or ``gated``
        three_round_cap: Collapse the plan to at most three stages
        round_score_caps: Round index to score cap
        round_target_games: Round index to games per player
        round_wave_orders: Round index to wave order pattern
    """

    courts: Optional[int] = None
    wave_format: str = DEFAULT_WAVE_FORMAT
    three_round_cap: bool = False
    round_score_caps: Dict[int, int] = field(default_factory=dict)
    round_target_games: Dict[int, int] = field(default_factory=dict)
    round_wave_orders: Dict[int, str] = field(default_factory=dict)

    def score_cap(self, round_index: int) -> int:
        """Score cap for a round, used as the rating reference cap."""
        if round_index in self.round_score_caps:
            return self.round_score_caps[round_index]
        return ROUND1_SCORE_CAP if round_index <= 1 else LATER_SCORE_CAP

    def target_games(self, round_index: int, kind: Optional[str] = None) -> int:
        """Games each player should get in a round."""
        if round_index in self.round_target_games:
            return self.round_target_games[round_index]
        if kind == KIND_FINAL:
            return FINAL_MATCHES
        return ROUND1_TARGET_GAMES if round_index <= 1 else LATER_TARGET_GAMES

    def wave_order(self, round_index: int) -> str:
        """Wave order for a round, inherited from earlier rounds when unset."""
        for index in range(round_index, 0, -1):
            if index in self.round_wave_orders:
                return self.round_wave_orders[index]
        return DEFAULT_WAVE_ORDER

    def wave_pattern(self, round_index: int) -> list:
        """Wave kinds of a round, e.g. ``["explore", "showdown", ...]``."""
        return self.wave_order(round_index).split("-")

    def wave_kind(self, round_index: int, wave_index: int) -> str:
        pattern = self.wave_pattern(round_index)
        if wave_index < 1:
            return WAVE_EXPLORE
        return pattern[(wave_index - 1) % len(pattern)]

    def validate(self) -> "SchedulePrefs":
        """Check every value, returning self for chaining.

        Raises:
            InvalidConfigurationException: If any value is out of range
        """
        if self.courts is not None and (
            not isinstance(self.courts, int) or self.courts <= 0
        ):
            raise InvalidConfigurationException(
                f"courts must be a positive integer or None, got {self.courts!r}"
            )
        if self.wave_format not in WAVE_FORMATS:
            raise InvalidConfigurationException(
                f"Unknown wave format {self.wave_format!r}, "
                f"expected one of {', '.join(WAVE_FORMATS)}"
            )
        for round_index, cap in self.round_score_caps.items():
            if not isinstance(cap, int) or cap <= 0:
                raise InvalidConfigurationException(
                    f"Score cap for round {round_index} must be positive, got {cap!r}"
                )
        for round_index, games in self.round_target_games.items():
            if not isinstance(games, int) or games < 0:
                raise InvalidConfigurationException(
                    f"Target games for round {round_index} cannot be negative, "
                    f"got {games!r}"
                )
        for round_index, order in self.round_wave_orders.items():
            if order not in WAVE_ORDERS:
                raise InvalidConfigurationException(
                    f"Unknown wave order {order!r} for round {round_index}"
                )
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Serialize preferences to dictionary."""
        return {
            "courts": self.courts,
            "wave_format": self.wave_format,
            "three_round_cap": self.three_round_cap,
            "round_score_caps": dict(self.round_score_caps),
            "round_target_games": dict(self.round_target_games),
            "round_wave_orders": dict(self.round_wave_orders),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchedulePrefs":
        """Deserialize preferences, folding in legacy single-round fields.

        Accepts snake_case keys, the camelCase generic maps and the legacy
        ``r1ScoreCap``-style fields. A generic map entry always wins over the
        legacy field for the same round.
        """
        three_round_cap = data.get("three_round_cap", data.get("threeRoundCap", False))
        return cls(
            courts=data.get("courts"),
            wave_format=data.get(
                "wave_format", data.get("waveFormat", DEFAULT_WAVE_FORMAT)
            ),
            three_round_cap=bool(three_round_cap),
            round_score_caps=_fold(
                data, "round_score_caps", "roundScoreCaps", _LEGACY_SCORE_CAPS
            ),
            round_target_games=_fold(
                data, "round_target_games", "roundTargetGames", _LEGACY_TARGET_GAMES
            ),
            round_wave_orders=_fold(
                data, "round_wave_orders", "roundWaveOrders", _LEGACY_WAVE_ORDERS
            ),
        )
