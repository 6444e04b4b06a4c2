"""Tournament simulator for exercising the pairing and rating engines.

Players get a hidden skill; scores are drawn from the skill gap between the
two teams. Everything random comes from one seeded ``random.Random`` so the
same configuration always produces the same tournament.
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

import json
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from rallypairing.constants import KIND_PRELIM, WAVE_FORMAT_ADAPTIVE
from rallypairing.models.player import Player
from rallypairing.models.tournament import Match, SchedulePrefs
from rallypairing.tournament.round_manager import RoundManager
from rallypairing.utils import setup_logger
from rallypairing.validation.wave_checker import check_round

logger = setup_logger(__name__)


class RatingDistribution(Enum):
    """Hidden skill distribution of simulated players."""

    UNIFORM = "uniform"
    NORMAL = "normal"
    SKEWED = "skewed"
    CLUB = "club"


class ScorePattern(Enum):
    """How simulated rallies translate skill into scores."""

    REALISTIC = "realistic"
    CLOSE = "close"
    BLOWOUT = "blowout"
    RANDOM = "random"


@dataclass
class SimulationConfig:
    """Configuration for the tournament simulator."""

    num_players: int
    seed: Optional[int] = None
    wave_format: str = WAVE_FORMAT_ADAPTIVE
    courts: Optional[int] = None
    three_round_cap: bool = False
    rating_distribution: RatingDistribution = RatingDistribution.NORMAL
    skill_range: Tuple[int, int] = (700, 1300)
    score_pattern: ScorePattern = ScorePattern.REALISTIC
    seed_noise: float = 40.0
    validate_waves: bool = True

    def prefs(self) -> SchedulePrefs:
        return SchedulePrefs(
            courts=self.courts,
            wave_format=self.wave_format,
            three_round_cap=self.three_round_cap,
        ).validate()


class PlayerFactory:
    """Creates seeded players with a hidden skill each."""

    def __init__(self, config: SimulationConfig, rng: random.Random):
        self.config = config
        self.random = rng
        self.skills: Dict[str, float] = {}

    def create_players(self) -> List[Player]:
        """Create players seeded by a noisy view of their skill."""
        skills = [self._generate_skill() for _ in range(self.config.num_players)]
        noisy = [s + self.random.gauss(0, self.config.seed_noise) for s in skills]
        order = sorted(range(len(skills)), key=lambda i: (-noisy[i], i))

        players = []
        for seed, i in enumerate(order, start=1):
            player = Player(name=f"Player-{i + 1:02d}", seed=seed, id=f"p{i + 1:02d}")
            self.skills[player.id] = skills[i]
            players.append(player)
        players.sort(key=lambda p: p.seed)

        logger.info(
            "Created %s players with %s skill distribution",
            len(players),
            self.config.rating_distribution.value,
        )
        return players

    def _generate_skill(self) -> float:
        low, high = self.config.skill_range
        distribution = self.config.rating_distribution
        if distribution == RatingDistribution.UNIFORM:
            return self.random.uniform(low, high)
        if distribution == RatingDistribution.SKEWED:
            if self.random.random() < 0.7:
                return self.random.uniform(low, (low + high) / 2)
            return self.random.uniform((low + high) / 2, high)
        if distribution == RatingDistribution.CLUB:
            base = self.random.choice([800, 950, 1100, 1250])
            return self.random.uniform(base - 75, base + 75)
        mean = (low + high) / 2
        std_dev = (high - low) / 6
        return max(low, min(high, self.random.gauss(mean, std_dev)))


class ScoreSimulator:
    """Simulates rally scores for doubles matches."""

    def __init__(self, config: SimulationConfig, rng: random.Random):
        self.config = config
        self.random = rng

    def simulate(
        self, match: Match, skills: Dict[str, float], cap: int
    ) -> Tuple[int, int]:
        """Return ``(score_a, score_b)``; the winner always reaches ``cap``."""
        skill_a = (skills[match.a1] + skills[match.a2]) / 2
        skill_b = (skills[match.b1] + skills[match.b2]) / 2
        p_a = 1.0 / (1.0 + math.pow(10.0, (skill_b - skill_a) / 400.0))

        pattern = self.config.score_pattern
        if pattern == ScorePattern.RANDOM:
            p_a = 0.5
        a_wins = self.random.random() < p_a
        closeness = min(p_a, 1.0 - p_a) * 2

        if pattern == ScorePattern.CLOSE:
            loser = cap - self.random.randint(2, 3)
        elif pattern == ScorePattern.BLOWOUT:
            loser = self.random.randint(0, max(1, cap // 3))
        else:
            mean = cap * (0.35 + 0.45 * closeness)
            loser = int(round(self.random.gauss(mean, cap / 8)))
        loser = max(0, min(cap - 2, loser))

        if a_wins:
            return cap, loser
        return loser, cap


class TournamentSimulator:
    """Runs a complete tournament from registration to final standings."""

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )
        self.player_factory = PlayerFactory(config, self.random)
        self.score_simulator = ScoreSimulator(config, self.random)

    def run(self) -> Dict:
        """Simulate every round and return a JSON-ready report."""
        prefs = self.config.prefs()
        logger.info(
            "Simulating tournament: %s players, %s format",
            self.config.num_players,
            prefs.wave_format,
        )
        players = self.player_factory.create_players()
        skills = self.player_factory.skills
        manager = RoundManager(players, prefs)
        rating_sum = sum(p.rating for p in manager.players.values())

        wave_issues: List[str] = []
        while not manager.is_finished:
            round_data = manager.start_next_round()
            cap = prefs.score_cap(round_data.index)
            if round_data.kind == KIND_PRELIM:
                while manager.has_more_waves():
                    wave = manager.next_wave()
                    self._play(manager, wave.matches, skills, cap)
            else:
                self._play(manager, round_data.matches, skills, cap)

            if self.config.validate_waves:
                for report in check_round(manager.current_round):
                    if not report.is_valid:
                        wave_issues.append(f"R{round_data.index} {report.summary}")
            manager.close_current_round()

        standings = manager.standings()
        final_sum = sum(p.rating for p in manager.players.values())
        report = {
            "config": {
                "num_players": self.config.num_players,
                "seed": self.config.seed,
                "rating_distribution": self.config.rating_distribution.value,
                "score_pattern": self.config.score_pattern.value,
                "prefs": prefs.to_dict(),
            },
            "plan": [entry.to_dict() for entry in manager.plan],
            "rounds": [r.to_dict() for r in manager.rounds],
            "standings": [
                {
                    "place": place,
                    "id": p.id,
                    "name": p.name,
                    "seed": p.seed,
                    "rating": p.rating,
                    "point_diff": p.point_diff,
                    "skill": round(skills[p.id], 1),
                    "eliminated_at_round": p.eliminated_at_round,
                }
                for place, p in enumerate(standings, start=1)
            ],
            "champion": standings[0].name if standings else None,
            "rating_sum": {"start": rating_sum, "end": final_sum},
            "wave_issues": wave_issues,
        }
        logger.info(
            "Simulation complete: %s rounds, champion %s",
            len(manager.rounds),
            report["champion"],
        )
        return report

    def _play(
        self,
        manager: RoundManager,
        matches: List[Match],
        skills: Dict[str, float],
        cap: int,
    ) -> None:
        for match in matches:
            score_a, score_b = self.score_simulator.simulate(match, skills, cap)
            manager.record_result(match.id, score_a, score_b)


def export_json(report: Dict) -> str:
    return json.dumps(report, indent=2)


def create_simulation(
    num_players: int = 16,
    seed: Optional[int] = None,
    wave_format: str = WAVE_FORMAT_ADAPTIVE,
) -> TournamentSimulator:
    """Create a simulator with default distribution and scoring."""
    config = SimulationConfig(num_players=num_players, seed=seed, wave_format=wave_format)
    return TournamentSimulator(config)
