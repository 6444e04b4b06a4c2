from itertools import combinations

import pytest

from rallypairing.exceptions import InvalidFieldSizeException
from rallypairing.models.player import Player
from rallypairing.pairing.snake import final_round_matches, snake_wave


def _players(n):
    return [Player(name=f"P{i}", seed=i, id=f"p{i}") for i in range(1, n + 1)]


def test_snake_wave_for_eight_players():
    matches = snake_wave(_players(8))

    assert len(matches) == 2
    assert (matches[0].team_a, matches[0].team_b) == (("p1", "p4"), ("p2", "p3"))
    assert (matches[1].team_a, matches[1].team_b) == (("p5", "p8"), ("p6", "p7"))
    assert [m.id for m in matches] == ["r1w1c1", "r1w1c2"]
    assert [m.court for m in matches] == [1, 2]
    assert all(m.mini_round_index == 1 for m in matches)


def test_snake_wave_orders_by_seed():
    players = list(reversed(_players(8)))
    matches = snake_wave(players)
    assert matches[0].team_a == ("p1", "p4")


def test_snake_wave_uses_injected_ids():
    matches = snake_wave(_players(4), id_factory=lambda r, w, c: f"x-{r}-{w}-{c}")
    assert matches[0].id == "x-1-1-1"


def test_snake_wave_rejects_partial_fours():
    with pytest.raises(InvalidFieldSizeException):
        snake_wave(_players(6))


def test_final_covers_every_partnership_once():
    matches = final_round_matches(_players(4), 4)

    assert len(matches) == 3
    assert [m.mini_round_index for m in matches] == [1, 2, 3]
    partnerships = [frozenset(t) for m in matches for t in (m.team_a, m.team_b)]
    assert len(set(partnerships)) == 6
    assert set(partnerships) == {
        frozenset(pair) for pair in combinations(["p1", "p2", "p3", "p4"], 2)
    }
    assert matches[0].team_a == ("p1", "p2")


def test_final_needs_four_players():
    with pytest.raises(InvalidFieldSizeException):
        final_round_matches(_players(5), 3)
