import pytest

from rallypairing.models.tournament import SchedulePrefs
from rallypairing.tournament.round_planner import (
    compute_round_plan,
    next_field_size,
    plan_entry_for,
)


def _shape(plan):
    return [(e.kind, e.target_size) for e in plan]


def test_eight_players_skip_the_eight_stage():
    assert _shape(compute_round_plan(8)) == [("prelim", 4), ("final", 4)]


def test_twelve_players():
    assert _shape(compute_round_plan(12)) == [
        ("prelim", 8),
        ("eight", 4),
        ("final", 4),
    ]


def test_sixteen_players_use_the_progression_table():
    assert _shape(compute_round_plan(16)) == [
        ("prelim", 12),
        ("prelim", 8),
        ("eight", 4),
        ("final", 4),
    ]


def test_twenty_four_players():
    assert _shape(compute_round_plan(24)) == [
        ("prelim", 16),
        ("prelim", 12),
        ("prelim", 8),
        ("eight", 4),
        ("final", 4),
    ]


def test_three_round_cap_collapses_long_plans():
    prefs = SchedulePrefs(three_round_cap=True)
    assert _shape(compute_round_plan(24, prefs)) == [
        ("prelim", 8),
        ("eight", 4),
        ("final", 4),
    ]


def test_three_round_cap_leaves_short_plans_alone():
    prefs = SchedulePrefs(three_round_cap=True)
    assert _shape(compute_round_plan(12, prefs)) == _shape(compute_round_plan(12))


def test_too_few_players_give_an_empty_plan():
    assert compute_round_plan(7) == []
    assert compute_round_plan(0) == []


def test_plan_indices_start_at_one():
    plan = compute_round_plan(20)
    assert [e.index for e in plan] == list(range(1, len(plan) + 1))


def test_plan_is_deterministic():
    assert compute_round_plan(18) == compute_round_plan(18)


@pytest.mark.parametrize(
    "current, expected",
    [(24, 16), (20, 16), (16, 12), (12, 8), (8, 4), (10, 8), (14, 8), (18, 12), (9, 8)],
)
def test_next_field_size(current, expected):
    assert next_field_size(current) == expected


def test_next_field_size_is_always_a_smaller_multiple_of_four():
    for n in range(9, 65):
        size = next_field_size(n)
        assert size % 4 == 0
        assert 4 <= size < n


def test_plan_entry_for():
    plan = compute_round_plan(12)
    assert plan_entry_for(plan, 2).kind == "eight"
    assert plan_entry_for(plan, 9) is None
