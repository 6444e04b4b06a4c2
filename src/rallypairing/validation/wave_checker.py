"""Structural checks for generated waves."""

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
from enum import Enum
from typing import Dict, List, Optional, Sequence

from rallypairing.constants import BAND_SIZE, PARTNER_GAP_CAP
from rallypairing.exceptions import WaveValidationException
from rallypairing.models.tournament import Match, Round
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


class CheckStatus(Enum):
    """Status of a single wave check."""

    PASSED = "PASSED"
    FAILED = "FAILED"
    NOT_APPLICABLE = "NOT_APPLICABLE"


@dataclass
class CheckResult:
    """Result of one check against a wave."""

    check: str
    status: CheckStatus
    description: str = ""
    details: Dict[str, object] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.status != CheckStatus.FAILED


@dataclass
class WaveReport:
    """Complete report for one wave."""

    wave_index: Optional[int]
    results: List[CheckResult]
    compromises: Dict[str, int] = field(default_factory=dict)

    @property
    def violations(self) -> List[CheckResult]:
        return [r for r in self.results if not r.passed]

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def summary(self) -> str:
        status = "valid" if self.is_valid else f"{len(self.violations)} violation(s)"
        text = f"Wave {self.wave_index or '-'}: {status}"
        if self.compromises:
            text += ", compromises: " + ", ".join(
                f"{tag} x{count}" for tag, count in sorted(self.compromises.items())
            )
        return text


def _band(rank: int) -> int:
    return (rank - 1) // BAND_SIZE


def _check_coverage(matches: Sequence[Match], player_ids: Sequence[str]) -> CheckResult:
    seen: Dict[str, int] = {}
    for match in matches:
        for pid in match.player_ids:
            seen[pid] = seen.get(pid, 0) + 1
    expected = set(player_ids)
    duplicates = sorted(pid for pid, n in seen.items() if n > 1)
    missing = sorted(expected - set(seen))
    strangers = sorted(set(seen) - expected)
    if duplicates or missing or strangers:
        return CheckResult(
            "coverage",
            CheckStatus.FAILED,
            "Every player must appear exactly once",
            {"duplicates": duplicates, "missing": missing, "unexpected": strangers},
        )
    return CheckResult("coverage", CheckStatus.PASSED)


def _check_match_count(
    matches: Sequence[Match], player_ids: Sequence[str]
) -> CheckResult:
    expected = len(player_ids) // 4
    if len(player_ids) % 4 != 0 or len(matches) != expected:
        return CheckResult(
            "match_count",
            CheckStatus.FAILED,
            f"Expected {expected} matches for {len(player_ids)} players, "
            f"got {len(matches)}",
        )
    return CheckResult("match_count", CheckStatus.PASSED)


def _check_bands(matches: Sequence[Match], ranks: Optional[Dict[str, int]]) -> CheckResult:
    if ranks is None:
        return CheckResult("partner_bands", CheckStatus.NOT_APPLICABLE)
    bad = []
    for match in matches:
        for team in (match.team_a, match.team_b):
            r1, r2 = ranks.get(team[0]), ranks.get(team[1])
            if r1 is None or r2 is None:
                bad.append({"match": match.id, "team": team, "problem": "unranked"})
                continue
            if abs(r1 - r2) > PARTNER_GAP_CAP:
                bad.append({"match": match.id, "team": team, "gap": abs(r1 - r2)})
            elif abs(_band(r1) - _band(r2)) > 1:
                bad.append({"match": match.id, "team": team, "problem": "band"})
    if bad:
        return CheckResult(
            "partner_bands",
            CheckStatus.FAILED,
            f"Partners must be within {PARTNER_GAP_CAP} ranks and adjacent bands",
            {"teams": bad},
        )
    return CheckResult("partner_bands", CheckStatus.PASSED)


def check_wave(
    matches: Sequence[Match],
    player_ids: Sequence[str],
    ranks: Optional[Dict[str, int]] = None,
    wave_index: Optional[int] = None,
) -> WaveReport:
    """Check a wave against the structural rules.

    Args:
        matches: Matches of the wave
        player_ids: Players expected on court
        ranks: 1-based rank by player id; enables the partner gap and band
            checks used by gate-based waves
        wave_index: Wave number, for the report only

    Returns:
        WaveReport with every check result and a tally of compromises
    """
    compromises: Dict[str, int] = {}
    for match in matches:
        if match.compromise:
            compromises[match.compromise] = compromises.get(match.compromise, 0) + 1
    results = [
        _check_coverage(matches, player_ids),
        _check_match_count(matches, player_ids),
        _check_bands(matches, ranks),
    ]
    return WaveReport(wave_index=wave_index, results=results, compromises=compromises)


def assert_valid_wave(
    matches: Sequence[Match],
    player_ids: Sequence[str],
    ranks: Optional[Dict[str, int]] = None,
    context: str = "wave",
) -> None:
    """Raise if a generated wave breaks any structural rule.

    Raises:
        WaveValidationException: On the first failed check
    """
    report = check_wave(matches, player_ids, ranks)
    if not report.is_valid:
        failure = report.violations[0]
        logger.error("%s failed %s: %s", context, failure.check, failure.details)
        raise WaveValidationException(
            f"{context}: {failure.description} ({failure.details})"
        )


def check_round(round_data: Round) -> List[WaveReport]:
    """Check every generated wave of a round.

    The players expected in a wave are the players who appear in it, so this
    catches duplicates and short waves but not benching decisions.
    """
    reports = []
    for wave_index in range(1, round_data.current_wave + 1):
        matches = round_data.wave_matches(wave_index)
        player_ids = sorted({pid for m in matches for pid in m.player_ids})
        reports.append(check_wave(matches, player_ids, wave_index=wave_index))
    return reports
