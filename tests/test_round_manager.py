import pytest

from rallypairing.exceptions import (
    DuplicateResultException,
    TournamentStateException,
)
from rallypairing.models.player import Player
from rallypairing.models.tournament import SchedulePrefs
from rallypairing.tournament.round_manager import RoundManager, add_wave, close_round


def _players(n):
    return [Player(name=f"P{i}", seed=i, id=f"p{i}") for i in range(1, n + 1)]


def _score_open_matches(manager, score_a=21, score_b=15):
    for match in list(manager.current_round.matches):
        if not match.is_completed:
            manager.record_result(match.id, score_a, score_b)


def _play_round(manager):
    round_data = manager.start_next_round()
    if round_data.kind == "prelim":
        while manager.has_more_waves():
            manager.next_wave()
            _score_open_matches(manager)
    else:
        _score_open_matches(manager)
    return manager.close_current_round()


def test_eight_player_tournament_runs_to_a_champion():
    manager = RoundManager(_players(8))
    assert [e.kind for e in manager.plan] == ["prelim", "final"]

    first_cut = _play_round(manager)
    assert len(first_cut.keep_ids) == 4
    assert len(manager.active_players) == 4

    _play_round(manager)
    assert manager.is_finished

    standings = manager.standings()
    assert len(standings) == 8
    assert {p.id for p in standings[:4]} == set(first_cut.keep_ids)


def test_twelve_player_tournament_passes_through_the_eight():
    manager = RoundManager(_players(12))
    assert [e.kind for e in manager.plan] == ["prelim", "eight", "final"]

    cuts = [_play_round(manager) for _ in manager.plan]

    assert [len(c.keep_ids) for c in cuts] == [8, 4, 4]
    assert manager.rounds[1].total_waves == 2
    assert len(manager.rounds[2].matches) == 3
    assert manager.is_finished


def test_ratings_stay_zero_sum():
    manager = RoundManager(_players(12))
    before = sum(p.rating for p in manager.players.values())
    for _ in manager.plan:
        _play_round(manager)
    assert sum(p.rating for p in manager.players.values()) == before


def test_every_player_gets_round_one_games():
    manager = RoundManager(_players(8))
    manager.start_next_round()
    while manager.has_more_waves():
        manager.next_wave()
        _score_open_matches(manager)
    assert all(p.games_played == 4 for p in manager.players.values())


def test_clock_is_recorded_as_last_played():
    ticks = iter(range(100, 200))
    manager = RoundManager(_players(8), clock=lambda: next(ticks))
    manager.start_next_round()
    manager.next_wave()
    _score_open_matches(manager)
    assert sorted({p.last_played_at for p in manager.players.values()}) == [100, 101]


def test_next_wave_waits_for_scores():
    manager = RoundManager(_players(8))
    manager.start_next_round()
    manager.next_wave()
    with pytest.raises(TournamentStateException):
        manager.next_wave()


def test_next_wave_stops_after_the_last_wave():
    manager = RoundManager(_players(8))
    manager.start_next_round()
    for _ in range(4):
        manager.next_wave()
        _score_open_matches(manager)
    assert not manager.has_more_waves()
    with pytest.raises(TournamentStateException):
        manager.next_wave()


def test_next_wave_needs_an_open_round():
    with pytest.raises(TournamentStateException):
        RoundManager(_players(8)).next_wave()


def test_round_must_close_before_the_next_starts():
    manager = RoundManager(_players(8))
    manager.start_next_round()
    with pytest.raises(TournamentStateException):
        manager.start_next_round()


def test_unfinished_round_cannot_close():
    manager = RoundManager(_players(8))
    manager.start_next_round()
    manager.next_wave()
    with pytest.raises(TournamentStateException):
        manager.close_current_round()


def test_plan_cannot_be_overrun():
    manager = RoundManager(_players(8))
    for _ in manager.plan:
        _play_round(manager)
    with pytest.raises(TournamentStateException):
        manager.start_next_round()


def test_scores_are_recorded_once():
    manager = RoundManager(_players(8))
    manager.start_next_round()
    manager.next_wave()
    match_id = manager.current_round.matches[0].id
    manager.record_result(match_id, 21, 10)
    with pytest.raises(DuplicateResultException):
        manager.record_result(match_id, 21, 12)


def test_unknown_match_is_rejected():
    manager = RoundManager(_players(8))
    manager.start_next_round()
    manager.next_wave()
    with pytest.raises(TournamentStateException):
        manager.record_result("nope", 21, 10)


def test_undo_last_wave():
    manager = RoundManager(_players(8))
    manager.start_next_round()
    manager.next_wave()
    assert manager.undo_last_wave()
    assert manager.current_round.current_wave == 0
    assert manager.current_round.matches == []


def test_undo_refuses_scored_waves():
    manager = RoundManager(_players(8))
    manager.start_next_round()
    manager.next_wave()
    manager.record_result(manager.current_round.matches[0].id, 21, 10)
    assert not manager.undo_last_wave()
    assert manager.current_round.current_wave == 1


def test_courts_add_waves():
    manager = RoundManager(_players(8), SchedulePrefs(courts=1))
    round_data = manager.start_next_round()
    assert round_data.total_waves == 6


def test_add_wave_refuses_closed_rounds():
    manager = RoundManager(_players(8))
    _play_round(manager)
    with pytest.raises(TournamentStateException):
        add_wave(manager.rounds[0], [])


def test_close_round_cuts_to_target():
    manager = RoundManager(_players(8))
    manager.start_next_round()
    while manager.has_more_waves():
        manager.next_wave()
        _score_open_matches(manager)

    closed, updated, cut = close_round(
        manager.current_round, list(manager.players.values()), manager.rounds
    )
    assert closed.is_closed
    assert len(cut.eliminated_ids) == 4
    eliminated = [p for p in updated if not p.is_active]
    assert {p.eliminated_at_round for p in eliminated} == {1}
