import pytest

from rallypairing.exceptions import InvalidPairingException, InvalidPlayerDataException
from rallypairing.models.player import EloLogEntry, Player
from rallypairing.models.tournament import Match, Round, RoundPlanEntry


def test_player_defaults():
    player = Player(name="Ana", seed=3)
    assert player.rating == 1000
    assert player.is_active
    assert player.point_diff == 0
    assert player.id


@pytest.mark.parametrize(
    "kwargs",
    [
        {"seed": 0},
        {"seed": "1"},
        {"seed": 1, "rating": 1000.5},
        {"seed": 1, "rating": True},
    ],
)
def test_player_rejects_bad_fields(kwargs):
    with pytest.raises(InvalidPlayerDataException):
        Player(name="Bad", **kwargs)


def test_player_serialization_keeps_the_elo_log():
    player = Player(
        name="Ana",
        seed=2,
        id="ana",
        rating=1012,
        games_played=2,
        points_for=40,
        points_against=31,
        eliminated_at_round=2,
        elo_log=[EloLogEntry(match_id="r1w1c1", delta=12, reason="win")],
    )
    restored = Player.from_dict(player.to_dict())
    assert restored == player
    assert not restored.is_active


def test_match_needs_four_distinct_players():
    with pytest.raises(InvalidPairingException):
        Match(id="m", round_index=1, a1="a", a2="b", b1="a", b2="c")


def test_match_teams_and_teammates():
    match = Match(id="m", round_index=1, a1="a", a2="b", b1="c", b2="d")
    assert match.team_a == ("a", "b")
    assert match.team_b == ("c", "d")
    assert match.teammate_of("d") == "c"
    assert match.involves("b")
    assert not match.is_completed
    with pytest.raises(KeyError):
        match.teammate_of("z")


def test_round_tracks_waves_and_appearances():
    matches = [
        Match(id="1", round_index=1, a1="a", a2="b", b1="c", b2="d", mini_round_index=1),
        Match(id="2", round_index=1, a1="a", a2="c", b1="b", b2="e", mini_round_index=2),
    ]
    round_data = Round(
        index=1,
        kind="prelim",
        target_size=4,
        matches=matches,
        total_waves=2,
        wave_kinds=["explore", "showdown"],
    )

    assert [m.id for m in round_data.wave_matches(2)] == ["2"]
    assert round_data.wave_kind(2) == "showdown"
    assert round_data.appearances()["a"] == 2
    assert round_data.appearances()["e"] == 1
    assert not round_data.all_completed
    assert Round.from_dict(round_data.to_dict()) == round_data


def test_plan_entry_round_trip():
    entry = RoundPlanEntry(index=2, kind="eight", target_size=4)
    assert RoundPlanEntry.from_dict(entry.to_dict()) == entry
