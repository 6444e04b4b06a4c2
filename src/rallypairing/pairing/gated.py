"""Gate-based waves: banded explore and promotion/relegation bubble.

Players are ranked (rank 1 is the strongest) and cut into bands of four.
*Explore* waves mix each pair of adjacent bands in a fixed pattern. *Bubble*
waves put the two players either side of every band boundary (a *gate*)
against each other, each with a partner from the same or adjacent band, and
put the four players no gate needed into one remainder match.

Both generators validate their output and raise rather than return a wave
that breaks a structural rule.
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

from dataclasses import dataclass
from itertools import combinations
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from rallypairing.constants import (
    BAND_SIZE,
    MAX_EDGE_CANDIDATES,
    PARTNER_GAP_CAP,
    PROGRESSION_TABLE,
)
from rallypairing.exceptions import InvalidFieldSizeException, NoPairingAvailableException
from rallypairing.models.player import Player
from rallypairing.models.tournament import Match
from rallypairing.pairing.matchup import Matchup, require_multiple_of_four, to_matches
from rallypairing.type_hints import MatchIdFactory
from rallypairing.utils import setup_logger
from rallypairing.validation.wave_checker import assert_valid_wave

logger = setup_logger(__name__)

Gate = Tuple[int, int]
# (max gap, count at cap, sum of gaps)
GapTotals = Tuple[int, int, int]

# Splits of four rank-sorted players, snake first so it wins ties
FILL_SPLITS = (
    ((0, 3), (1, 2)),
    ((0, 2), (1, 3)),
    ((0, 1), (2, 3)),
)


def band_of(rank: int) -> int:
    return (rank - 1) // BAND_SIZE


def team_is_valid(rank1: int, rank2: int) -> bool:
    """Partners must be within the gap cap and in the same or adjacent band."""
    return (
        abs(rank1 - rank2) <= PARTNER_GAP_CAP
        and abs(band_of(rank1) - band_of(rank2)) <= 1
    )


def _add_gaps(totals: GapTotals, gaps: Sequence[int]) -> GapTotals:
    max_gap, cap_count, gap_sum = totals
    for gap in gaps:
        max_gap = max(max_gap, gap)
        cap_count += gap == PARTNER_GAP_CAP
        gap_sum += gap
    return (max_gap, cap_count, gap_sum)


def wave_gap_totals(matchups: Sequence[Matchup], rank_of: Dict[str, int]) -> GapTotals:
    """Gap totals over every team of a wave."""
    gaps = [
        abs(rank_of[team[0]] - rank_of[team[1]])
        for m in matchups
        for team in (m.team_a, m.team_b)
    ]
    return _add_gaps((0, 0, 0), gaps)


def compute_gates(player_count: int) -> List[Gate]:
    """Rank pairs either side of each band boundary: (4, 5), (8, 9), ..."""
    return [(k, k + 1) for k in range(BAND_SIZE, player_count, BAND_SIZE)]


def primary_cutoff_rank(player_count: int, gates: Sequence[Gate]) -> int:
    """Upper rank of the gate where the next cut will fall."""
    target = PROGRESSION_TABLE.get(player_count)
    if target is not None and any(upper == target for upper, _ in gates):
        return target
    half = player_count // 2
    if any(upper == half for upper, _ in gates):
        return half
    return gates[len(gates) // 2][0]


def order_gates_cutoff_first(player_count: int, gates: Sequence[Gate]) -> List[Gate]:
    """Search order: the cutoff gate, then gates by distance from it."""
    if len(gates) <= 1:
        return list(gates)
    primary = primary_cutoff_rank(player_count, gates)
    primary_idx = next(i for i, (upper, _) in enumerate(gates) if upper == primary)
    center = (len(gates) - 1) / 2
    rest = sorted(
        (i for i in range(len(gates)) if i != primary_idx),
        key=lambda i: (abs(i - primary_idx), abs(i - center), i),
    )
    return [gates[i] for i in [primary_idx] + rest]


@dataclass(frozen=True)
class GateChoice:
    """Partners chosen for the two edge players of one gate."""

    gate: Gate
    upper_edge: str
    lower_edge: str
    partner_upper: str
    partner_lower: str
    gaps: Tuple[int, int]
    partner_ranks: Tuple[int, int]

    @property
    def player_ids(self) -> Tuple[str, str, str, str]:
        return (self.upper_edge, self.lower_edge, self.partner_upper, self.partner_lower)

    @property
    def sort_key(self) -> tuple:
        return (
            max(self.gaps),
            sum(1 for g in self.gaps if g == PARTNER_GAP_CAP),
            sum(self.gaps),
            tuple(sorted(self.partner_ranks)),
        )

    def to_matchup(self) -> Matchup:
        return Matchup(
            team_a=(self.upper_edge, self.partner_upper),
            team_b=(self.lower_edge, self.partner_lower),
        )


@dataclass(frozen=True)
class FillOption:
    """Four players left for the remainder match, with their tightest split."""

    player_ids: Tuple[str, ...]
    ranks: Tuple[int, ...]
    matchup: Matchup
    totals: GapTotals


class _Field:
    """Rank lookups shared by the bubble search."""

    def __init__(self, ranked: Sequence[Player]):
        self.ids = [p.id for p in ranked]
        self.rank_of = {pid: idx for idx, pid in enumerate(self.ids, start=1)}
        self.bands = [
            self.ids[i : i + BAND_SIZE] for i in range(0, len(self.ids), BAND_SIZE)
        ]
        self.gates = compute_gates(len(self.ids))
        self.edge_ids: Set[str] = set()
        for upper, lower in self.gates:
            self.edge_ids.add(self.ids[upper - 1])
            self.edge_ids.add(self.ids[lower - 1])

    def gap(self, a: str, b: str) -> int:
        return abs(self.rank_of[a] - self.rank_of[b])

    def can_complete(self, used: Set[str], open_gates: Set[Gate]) -> bool:
        """Whether the open gates can still take every unplaced player.

        A non-edge player can only partner an edge of the gate directly above
        or below its band, and every gate takes exactly two partners, so one
        pass down the bands decides it.
        """
        counts = [
            sum(1 for pid in band if pid not in self.edge_ids and pid not in used)
            for band in self.bands
        ]
        left = counts[0]
        for idx, gate in enumerate(self.gates):
            if gate not in open_gates:
                if left:
                    return False
                left = counts[idx + 1]
                continue
            # Leftovers of the band above can only go to this gate
            if left > 2:
                return False
            need = 2 - left
            if counts[idx + 1] < need:
                return False
            left = counts[idx + 1] - need
        return left == 0

    def candidates(self, gate: Gate, used: Set[str]) -> List[str]:
        """Partner pool for the edges of a gate.

        Both edges draw from the same pool: the band below the gate read from
        its far end toward the gate, then the band above read the same way.
        Gate edges and players already placed are never candidates.
        """
        upper_band = band_of(gate[0])
        pool: List[str] = []
        for band_idx, boundary in ((upper_band + 1, 0), (upper_band, BAND_SIZE - 1)):
            if not 0 <= band_idx < len(self.bands):
                continue
            band = self.bands[band_idx]
            order = sorted(
                (pos for pos in range(len(band)) if pos != boundary),
                key=lambda pos: (-abs(pos - boundary), -pos),
            )
            for pos in order:
                pid = band[pos]
                if pid in self.edge_ids or pid in used or pid in pool:
                    continue
                pool.append(pid)
        return pool[:MAX_EDGE_CANDIDATES]

    def gate_choices(self, gate: Gate, used: Set[str]) -> List[GateChoice]:
        upper_edge = self.ids[gate[0] - 1]
        lower_edge = self.ids[gate[1] - 1]
        pool = self.candidates(gate, used)
        choices = []
        for partner_upper in pool:
            for partner_lower in pool:
                if partner_upper == partner_lower:
                    continue
                ru, rl = self.rank_of[partner_upper], self.rank_of[partner_lower]
                if not team_is_valid(gate[0], ru) or not team_is_valid(gate[1], rl):
                    continue
                choices.append(
                    GateChoice(
                        gate=gate,
                        upper_edge=upper_edge,
                        lower_edge=lower_edge,
                        partner_upper=partner_upper,
                        partner_lower=partner_lower,
                        gaps=(abs(gate[0] - ru), abs(gate[1] - rl)),
                        partner_ranks=(ru, rl),
                    )
                )
        return sorted(choices, key=lambda c: c.sort_key)

    def fill_options(self) -> List[FillOption]:
        """Every feasible remainder foursome, in rank order.

        Each foursome takes its valid split with the smallest gap totals, the
        snake split winning ties.
        """
        free = [pid for pid in self.ids if pid not in self.edge_ids]
        options = []
        for group in combinations(free, 4):
            ranks = tuple(self.rank_of[pid] for pid in group)
            best: Optional[Tuple[GapTotals, Matchup]] = None
            for (a1, a2), (b1, b2) in FILL_SPLITS:
                if not team_is_valid(ranks[a1], ranks[a2]):
                    continue
                if not team_is_valid(ranks[b1], ranks[b2]):
                    continue
                totals = _add_gaps(
                    (0, 0, 0), (ranks[a2] - ranks[a1], ranks[b2] - ranks[b1])
                )
                if best is None or totals < best[0]:
                    matchup = Matchup(
                        team_a=(group[a1], group[a2]), team_b=(group[b1], group[b2])
                    )
                    best = (totals, matchup)
            if best is not None:
                options.append(
                    FillOption(
                        player_ids=group, ranks=ranks, matchup=best[1], totals=best[0]
                    )
                )
        return options


def _search_gates(
    field: _Field,
    gates: Sequence[Gate],
    fill: FillOption,
    bound: Optional[tuple],
) -> Tuple[Optional[tuple], Optional[List[GateChoice]]]:
    """Depth-first search over gate assignments for one fixed remainder.

    The search keeps an explicit stack of choice iterators, one per gate,
    and a path of committed choices. Gap totals only grow along a path, so a
    partial assignment already worse than the best complete one is dropped.

    Returns:
        Tuple of (key, choices) for the best assignment beating ``bound``,
        or ``(bound, None)`` when nothing does.
    """
    used: Set[str] = set(fill.player_ids)
    path: List[GateChoice] = []
    totals: List[GapTotals] = [fill.totals]
    stack: List[Iterator[GateChoice]] = [iter(field.gate_choices(gates[0], used))]
    best_key = bound
    best: Optional[List[GateChoice]] = None

    while stack:
        depth = len(stack) - 1
        if len(path) > depth:
            for pid in path.pop().player_ids:
                used.discard(pid)
            totals.pop()

        choice = next(stack[-1], None)
        if choice is None:
            stack.pop()
            continue

        running = _add_gaps(totals[-1], choice.gaps)
        if best_key is not None and running > best_key[:3]:
            continue

        path.append(choice)
        totals.append(running)
        used.update(choice.player_ids)

        if len(path) == len(gates):
            signature = tuple(
                rank
                for c in sorted(path, key=lambda c: c.gate)
                for rank in c.partner_ranks
            )
            key = running + (signature,)
            if best_key is None or key < best_key:
                best_key = key
                best = list(path)
            continue

        if not field.can_complete(used, set(gates[len(path) :])):
            continue
        stack.append(iter(field.gate_choices(gates[len(path)], used)))

    return best_key, best


def explore_matchups(ranked: Sequence[Player]) -> List[Matchup]:
    """Pair adjacent bands A, B as ``{A0,B1} v {A1,B0}`` and ``{A2,B3} v {A3,B2}``.

    A band without a partner band plays ``{C0,C3} v {C1,C2}``.
    """
    require_multiple_of_four(len(ranked), "Explore wave")
    ids = [p.id for p in ranked]
    bands = [ids[i : i + BAND_SIZE] for i in range(0, len(ids), BAND_SIZE)]
    matchups = []
    for i in range(0, len(bands), 2):
        a = bands[i]
        if i + 1 < len(bands):
            b = bands[i + 1]
            matchups.append(Matchup(team_a=(a[0], b[1]), team_b=(a[1], b[0])))
            matchups.append(Matchup(team_a=(a[2], b[3]), team_b=(a[3], b[2])))
        else:
            matchups.append(Matchup(team_a=(a[0], a[3]), team_b=(a[1], a[2])))
    return matchups


def bubble_matchups(ranked: Sequence[Player]) -> List[Matchup]:
    """Edge-versus-edge matches at every gate plus one remainder match.

    Every feasible remainder is tried and the gate assignments searched
    exhaustively. Whole waves are ranked by, in order: the largest partner
    gap, how many partner gaps sit at the cap, the sum of partner gaps, then
    the partner ranks gate by gate.

    Raises:
        InvalidFieldSizeException: If there are fewer than two bands
        NoPairingAvailableException: If no assignment satisfies the rules
    """
    require_multiple_of_four(len(ranked), "Bubble wave")
    field = _Field(ranked)
    if not field.gates:
        raise InvalidFieldSizeException(
            f"Bubble wave needs at least two bands, got {len(ranked)} players"
        )
    gates = order_gates_cutoff_first(len(ranked), field.gates)

    best_key: Optional[tuple] = None
    best_fill: Optional[FillOption] = None
    best_choices: Optional[List[GateChoice]] = None
    for fill in field.fill_options():
        if not field.can_complete(set(fill.player_ids), set(gates)):
            continue
        key, choices = _search_gates(field, gates, fill, best_key)
        if choices is not None:
            best_key, best_fill, best_choices = key, fill, choices

    if best_choices is None:
        raise NoPairingAvailableException(
            f"No feasible bubble assignment for {len(ranked)} players"
        )

    matchups = [c.to_matchup() for c in best_choices] + [best_fill.matchup]
    matchups.sort(
        key=lambda m: min(field.rank_of[pid] for pid in m.team_a + m.team_b)
    )
    logger.debug("Bubble wave key %s", best_key)
    return matchups


def _ranks(ranked: Sequence[Player]) -> Dict[str, int]:
    return {p.id: idx for idx, p in enumerate(ranked, start=1)}


def generate_explore(
    ranked: Sequence[Player],
    round_index: int,
    wave_index: int,
    id_factory: Optional[MatchIdFactory] = None,
) -> List[Match]:
    """Explore wave for players already in rank order.

    Example:
        Sixteen players ranked 1-16 give ``{1,6} v {2,5}``, ``{3,8} v {4,7}``,
        ``{9,14} v {10,13}`` and ``{11,16} v {12,15}``.
    """
    matches = to_matches(explore_matchups(ranked), round_index, wave_index, id_factory)
    assert_valid_wave(
        matches, [p.id for p in ranked], _ranks(ranked), f"Explore wave {wave_index}"
    )
    return matches


def generate_bubble(
    ranked: Sequence[Player],
    round_index: int,
    wave_index: int,
    id_factory: Optional[MatchIdFactory] = None,
) -> List[Match]:
    """Bubble wave for players already in rank order.

    Example:
        Eight players ranked 1-8 give ``{1,2} v {7,8}`` and ``{4,3} v {5,6}``.
    """
    matches = to_matches(bubble_matchups(ranked), round_index, wave_index, id_factory)
    assert_valid_wave(
        matches, [p.id for p in ranked], _ranks(ranked), f"Bubble wave {wave_index}"
    )
    return matches
