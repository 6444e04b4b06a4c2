import pytest

from rallypairing.exceptions import (
    InsufficientPlayersException,
    TournamentStateException,
)
from rallypairing.models.player import Player
from rallypairing.models.tournament import RoundPlanEntry, SchedulePrefs
from rallypairing.pairing.waves import (
    generate_later_round,
    generate_prelim_wave,
    generate_r1_wave,
    prepare_later_round,
    prepare_prelim_round,
    prepare_round1,
)
from rallypairing.rating.seeding import assign_seed_priors
from rallypairing.tournament.round_manager import add_wave


def _players(n):
    return assign_seed_priors(
        [Player(name=f"P{i}", seed=i, id=f"p{i}") for i in range(1, n + 1)]
    )


def _layout(matches):
    def ranks(team):
        return tuple(int(pid[1:]) for pid in team)

    return [(ranks(m.team_a), ranks(m.team_b)) for m in matches]


def test_prepare_round1_follows_the_plan():
    round_data = prepare_round1(_players(8))

    assert round_data.index == 1
    assert round_data.kind == "prelim"
    assert round_data.target_size == 4
    assert round_data.status == "active"
    assert round_data.total_waves == 4
    assert round_data.wave_kinds == ["explore", "showdown", "explore", "showdown"]
    assert round_data.matches == []


def test_prepare_round1_needs_eight_players():
    with pytest.raises(InsufficientPlayersException):
        prepare_round1(_players(7))


def test_prepare_prelim_round_defaults_to_next_field_size():
    round_data = prepare_prelim_round(2, _players(12))
    assert round_data.target_size == 8
    assert round_data.kind == "prelim"


def test_opening_wave_is_the_snake():
    players = _players(8)
    round_data = prepare_round1(players)
    result = generate_r1_wave(1, players, round_data)

    assert _layout(result.matches) == [((1, 4), (2, 3)), ((5, 8), (6, 7))]
    assert result.benched == []


def test_r1_wave_rejects_other_rounds():
    players = _players(8)
    round_data = prepare_prelim_round(2, players)
    with pytest.raises(TournamentStateException):
        generate_r1_wave(1, players, round_data)


def test_later_waves_avoid_earlier_partners():
    players = _players(8)
    round_data = prepare_round1(players)
    first = generate_r1_wave(1, players, round_data)
    round_data = add_wave(round_data, first.matches)
    second = generate_r1_wave(2, players, round_data)

    earlier = {frozenset(t) for m in first.matches for t in (m.team_a, m.team_b)}
    for m in second.matches:
        assert frozenset(m.team_a) not in earlier
        assert frozenset(m.team_b) not in earlier
    assert all(m.mini_round_index == 2 for m in second.matches)


def test_gated_format_alternates_explore_and_bubble():
    players = _players(8)
    prefs = SchedulePrefs(wave_format="gated")
    round_data = prepare_round1(players, prefs)

    first = generate_prelim_wave(1, players, round_data, [], prefs)
    assert _layout(first.matches) == [((1, 6), (2, 5)), ((3, 8), (4, 7))]

    round_data = add_wave(round_data, first.matches)
    second = generate_prelim_wave(2, players, round_data, [], prefs)
    assert _layout(second.matches) == [((1, 2), (7, 8)), ((4, 3), (5, 6))]


def test_spare_players_are_benched():
    players = _players(10)
    round_data = prepare_round1(players)
    result = generate_r1_wave(1, players, round_data)

    assert result.benched == ["p1", "p2"]
    assert len(result.matches) == 2
    on_court = {pid for m in result.matches for pid in m.player_ids}
    assert not on_court & set(result.benched)


def test_gated_format_falls_back_when_benching():
    players = _players(10)
    prefs = SchedulePrefs(wave_format="gated")
    round_data = prepare_round1(players, prefs)
    result = generate_prelim_wave(1, players, round_data, [], prefs)
    # Snake over the eight players on court
    assert _layout(result.matches) == [((3, 6), (4, 5)), ((7, 10), (8, 9))]


def test_courts_limit_the_wave():
    players = _players(8)
    prefs = SchedulePrefs(courts=1)
    round_data = prepare_round1(players, prefs)
    result = generate_r1_wave(1, players, round_data, prefs=prefs)

    assert len(result.matches) == 1
    assert len(result.benched) == 4


def test_eliminated_players_are_ignored():
    players = _players(12)
    for p in players[8:]:
        p.eliminated_at_round = 1
    round_data = prepare_prelim_round(2, players)
    result = generate_prelim_wave(1, players, round_data, [])

    on_court = {pid for m in result.matches for pid in m.player_ids}
    assert on_court == {f"p{i}" for i in range(1, 9)}


def test_final_round_is_generated_in_full():
    matches = generate_later_round(_players(4), [], 3, "final")
    assert len(matches) == 3
    assert [m.mini_round_index for m in matches] == [1, 2, 3]


def test_eight_round_gives_everyone_two_games_without_repeat_partners():
    players = _players(8)
    matches = generate_later_round(players, [], 2, "eight")

    assert len(matches) == 4
    games = {}
    for m in matches:
        for pid in m.player_ids:
            games[pid] = games.get(pid, 0) + 1
    assert set(games.values()) == {2}
    teams = [frozenset(t) for m in matches for t in (m.team_a, m.team_b)]
    assert len(teams) == len(set(teams))


def test_prepare_later_round_fills_every_wave():
    entry = RoundPlanEntry(index=2, kind="eight", target_size=4)
    round_data = prepare_later_round(entry, _players(8), [])

    assert round_data.total_waves == 2
    assert round_data.current_wave == 2
    assert len(round_data.matches) == 4
    assert [m.id for m in round_data.matches] == [
        "r2w1c1",
        "r2w1c2",
        "r2w2c1",
        "r2w2c2",
    ]
