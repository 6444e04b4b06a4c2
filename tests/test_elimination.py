from rallypairing.models.player import Player
from rallypairing.models.tournament import Match, Round
from rallypairing.tournament.elimination import (
    apply_cut,
    cut_to_target,
    final_standings,
    head_to_head_wins,
    rank_players,
)


def _player(seed, diff=0, **kwargs):
    points_for = max(diff, 0)
    points_against = max(-diff, 0)
    return Player(
        name=f"P{seed}",
        seed=seed,
        id=f"p{seed}",
        points_for=points_for,
        points_against=points_against,
        **kwargs,
    )


def _completed(mid, team_a, team_b, score_a, score_b):
    return Match(
        id=mid,
        round_index=1,
        a1=team_a[0],
        a2=team_a[1],
        b1=team_b[0],
        b2=team_b[1],
        score_a=score_a,
        score_b=score_b,
        status="completed",
    )


def _round(*matches):
    return Round(index=1, kind="prelim", target_size=4, matches=list(matches))


def test_point_differential_comes_first():
    players = [_player(1, -5), _player(2, 10), _player(3, 0)]
    assert [p.seed for p in rank_players(players, [])] == [2, 3, 1]


def test_head_to_head_breaks_ties():
    players = [_player(1, 3), _player(2, 3), _player(3), _player(4)]
    rounds = [_round(_completed("m1", ("p2", "p3"), ("p1", "p4"), 21, 15))]
    assert [p.seed for p in rank_players(players, rounds)][:2] == [2, 1]


def test_seed_breaks_remaining_ties():
    players = [_player(3), _player(1), _player(2)]
    assert [p.seed for p in rank_players(players, [])] == [1, 2, 3]


def test_equal_head_to_head_falls_back_to_seed():
    players = [_player(2), _player(1)]
    rounds = [
        _round(
            _completed("m1", ("p2", "p3"), ("p1", "p4"), 21, 15),
            _completed("m2", ("p1", "p3"), ("p2", "p4"), 21, 15),
        )
    ]
    assert [p.seed for p in rank_players(players, rounds)] == [1, 2]


def test_tied_and_scheduled_matches_count_for_nobody():
    tied = _completed("m1", ("p1", "p2"), ("p3", "p4"), 15, 15)
    scheduled = Match(id="m2", round_index=1, a1="p1", a2="p2", b1="p3", b2="p4")
    assert head_to_head_wins([_round(tied, scheduled)]) == {}


def test_cut_keeps_everyone_at_or_below_target():
    players = [_player(s) for s in range(1, 5)]
    cut = cut_to_target(players, [], 4)
    assert cut.keep_ids == ["p1", "p2", "p3", "p4"]
    assert cut.eliminated_ids == []

    cut = cut_to_target(players, [], 10)
    assert len(cut.keep_ids) == 4
    assert cut.eliminated_ids == []


def test_cut_ignores_eliminated_players():
    players = [_player(s) for s in range(1, 6)] + [_player(6, 50, eliminated_at_round=1)]
    cut = cut_to_target(players, [], 4)
    assert cut.keep_ids == ["p1", "p2", "p3", "p4"]
    assert cut.eliminated_ids == ["p5"]


def test_apply_cut_locks_rank():
    players = [_player(s, diff=10 - s) for s in range(1, 7)]
    cut = cut_to_target(players, [], 4)
    updated = {p.id: p for p in apply_cut(players, cut, 2)}

    assert updated["p5"].eliminated_at_round == 2
    assert updated["p5"].locked_rank == 5
    assert updated["p6"].locked_rank == 6
    assert updated["p1"].is_active
    assert updated["p1"].locked_rank is None


def test_final_standings_lists_active_then_eliminated():
    players = [
        _player(1, eliminated_at_round=1, locked_rank=6),
        _player(2, eliminated_at_round=1, locked_rank=5),
        _player(3, 4),
        _player(4, 8),
    ]
    assert [p.seed for p in final_standings(players, [])] == [4, 3, 2, 1]


def test_cut_below_target_keeps_only_active_players():
    players = [_player(s) for s in range(1, 4)] + [_player(4, eliminated_at_round=1)]
    cut = cut_to_target(players, [], 4)
    assert cut.keep_ids == ["p1", "p2", "p3"]
    assert cut.eliminated_ids == []
    assert "p4" not in cut.ranked_ids
