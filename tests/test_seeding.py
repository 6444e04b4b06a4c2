import pytest

from rallypairing.models.player import Player
from rallypairing.rating.seeding import (
    assign_seed_priors,
    blend,
    blend_map,
    maturity_beta,
    rank_by_blend,
    seed_prior,
)


def _players(n):
    return [Player(name=f"P{i}", seed=i, id=f"p{i}") for i in range(1, n + 1)]


def test_seed_prior_is_centred_on_base():
    assert seed_prior(1, 8) == pytest.approx(1087.5)
    assert seed_prior(8, 8) == pytest.approx(912.5)
    total = sum(seed_prior(s, 8) for s in range(1, 9))
    assert total == pytest.approx(8000)


def test_seed_prior_decreases_with_seed():
    priors = [seed_prior(s, 16) for s in range(1, 17)]
    assert priors == sorted(priors, reverse=True)


def test_blend_interpolates():
    assert blend(1200, 1000, 0.0) == 1000
    assert blend(1200, 1000, 1.0) == 1200
    assert blend(1200, 1000, 0.4) == pytest.approx(1080)


@pytest.mark.parametrize(
    "round_index, wave_index, expected",
    [(1, 1, 0.0), (1, 2, 0.4), (1, 3, 0.7), (1, 6, 0.7), (2, 1, 0.7), (3, 1, 0.8), (5, 2, 0.8)],
)
def test_maturity_beta(round_index, wave_index, expected):
    assert maturity_beta(round_index, wave_index) == expected


def test_assign_seed_priors_fixes_prior_once():
    players = assign_seed_priors(_players(8))
    assert players[0].seed_prior == pytest.approx(1087.5)
    # A smaller field later keeps the stored prior
    assert blend_map(players[:4], 0.0)["p1"] == pytest.approx(1087.5)


def test_rank_by_blend_uses_seed_at_beta_zero():
    players = _players(8)
    players[7].rating = 1500
    assert [p.seed for p in rank_by_blend(players, 0.0)] == list(range(1, 9))
    assert rank_by_blend(players, 1.0)[0].id == "p8"
