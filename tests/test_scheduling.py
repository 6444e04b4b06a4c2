import pytest

from rallypairing.models.tournament import SchedulePrefs
from rallypairing.tournament.scheduling import (
    matches_needed,
    target_games_per_round,
    total_waves_for,
    wave_capacity,
    waves_needed,
)


def test_target_games_per_round():
    assert target_games_per_round(1) == 3
    assert target_games_per_round(2) == 2
    assert target_games_per_round(2, SchedulePrefs(round_target_games={2: 4})) == 4


@pytest.mark.parametrize(
    "players, round_index, expected",
    [(8, 1, 6), (12, 1, 9), (10, 1, 8), (8, 2, 4), (12, 2, 6)],
)
def test_matches_needed(players, round_index, expected):
    assert matches_needed(players, round_index) == expected


def test_final_always_has_three_matches():
    assert matches_needed(4, 5, kind="final") == 3


@pytest.mark.parametrize(
    "players, courts, expected",
    [(8, None, 8), (10, None, 8), (15, None, 12), (16, 2, 8), (3, None, 0)],
)
def test_wave_capacity(players, courts, expected):
    assert wave_capacity(players, courts) == expected


def test_waves_needed():
    assert waves_needed(0) == 0
    assert waves_needed(6) == 1
    assert waves_needed(6, courts=2) == 3
    assert waves_needed(6, player_count=8) == 3
    assert waves_needed(9, courts=4, player_count=12) == 3


def test_total_waves_for():
    assert total_waves_for("prelim", 1, 8) == 4
    assert total_waves_for("prelim", 1, 8, SchedulePrefs(courts=1)) == 6
    assert total_waves_for("eight", 2, 8) == 2
    assert total_waves_for("final", 3, 4) == 3
    front_loaded = SchedulePrefs(round_wave_orders={2: "explore-explore-showdown"})
    assert total_waves_for("prelim", 2, 16, front_loaded) == 3
