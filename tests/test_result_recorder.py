import pytest

from rallypairing.exceptions import (
    DuplicateResultException,
    InvalidResultException,
    PlayerNotFoundException,
)
from rallypairing.models.player import Player
from rallypairing.models.tournament import Match, PairingHistory, build_history
from rallypairing.tournament.result_recorder import ResultRecorder


def _roster():
    return {
        pid: Player(name=pid.upper(), seed=seed, id=pid)
        for seed, pid in enumerate(["a1", "a2", "b1", "b2"], start=1)
    }


def _match(mid="r1w1c1"):
    return Match(
        id=mid, round_index=1, a1="a1", a2="a2", b1="b1", b2="b2", mini_round_index=1
    )


def test_record_completes_the_match():
    completed = ResultRecorder().record(_match(), 21, 18)
    assert completed.is_completed
    assert (completed.score_a, completed.score_b) == (21, 18)


def test_record_refuses_rescoring():
    recorder = ResultRecorder()
    completed = recorder.record(_match(), 21, 18)
    with pytest.raises(DuplicateResultException):
        recorder.record(completed, 21, 19)


@pytest.mark.parametrize("score_a, score_b", [(-1, 21), (21, None), (10.5, 21), (True, 3)])
def test_record_rejects_invalid_scores(score_a, score_b):
    with pytest.raises(InvalidResultException):
        ResultRecorder().record(_match(), score_a, score_b)


def test_apply_updates_players():
    recorder = ResultRecorder()
    completed = recorder.record(_match(), 21, 18)
    updated = recorder.apply(_roster(), completed, PairingHistory(), played_at=7)

    a1 = updated["a1"]
    assert a1.rating == 1001
    assert updated["b2"].rating == 999
    assert a1.games_played == 1
    assert (a1.points_for, a1.points_against) == (21, 18)
    assert updated["b1"].point_diff == -3
    assert a1.last_partner_id == "a2"
    assert updated["b2"].last_partner_id == "b1"
    assert a1.last_played_at == 7
    assert a1.elo_log[0].match_id == "r1w1c1"
    assert a1.elo_log[0].delta == 1


def test_apply_keeps_ratings_zero_sum():
    recorder = ResultRecorder()
    roster = _roster()
    roster["a1"].rating = 1200
    before = sum(p.rating for p in roster.values())

    history = PairingHistory()
    for i, (sa, sb) in enumerate([(21, 3), (5, 21), (21, 19), (0, 21)], start=1):
        completed = recorder.record(_match(f"m{i}"), sa, sb)
        roster = recorder.apply(roster, completed, history, played_at=i)
        history = build_history([completed])

    assert sum(p.rating for p in roster.values()) == before
    assert all(p.games_played == 4 for p in roster.values())


def test_apply_does_not_touch_the_input_roster():
    recorder = ResultRecorder()
    roster = _roster()
    completed = recorder.record(_match(), 21, 5)
    recorder.apply(roster, completed, PairingHistory(), played_at=1)
    assert roster["a1"].rating == 1000
    assert roster["a1"].games_played == 0


def test_apply_needs_a_result():
    with pytest.raises(InvalidResultException):
        ResultRecorder().apply(_roster(), _match(), PairingHistory(), played_at=1)


def test_apply_needs_every_player():
    recorder = ResultRecorder()
    completed = recorder.record(_match(), 21, 5)
    roster = _roster()
    del roster["b2"]
    with pytest.raises(PlayerNotFoundException):
        recorder.apply(roster, completed, PairingHistory(), played_at=1)
