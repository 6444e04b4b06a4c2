from rallypairing.models.player import Player
from rallypairing.pairing.selection import select_wave_players
from rallypairing.rating.seeding import blend_map


def _players(n):
    return [Player(name=f"P{i}", seed=i, id=f"p{i}") for i in range(1, n + 1)]


def _ids(players):
    return [p.id for p in players]


def test_everyone_plays_when_there_is_room():
    players = _players(8)
    playing, benched = select_wave_players(players, 8, {}, blend_map(players, 0.0))
    assert _ids(playing) == _ids(players)
    assert benched == []


def test_highest_blends_sit_out_first():
    players = _players(10)
    playing, benched = select_wave_players(players, 8, {}, blend_map(players, 0.0))
    assert _ids(benched) == ["p1", "p2"]
    assert len(playing) == 8


def test_players_with_more_appearances_sit_out():
    players = _players(10)
    playing, benched = select_wave_players(
        players, 8, {"p9": 1, "p10": 1}, blend_map(players, 0.0)
    )
    assert _ids(benched) == ["p9", "p10"]


def test_most_recent_player_sits_out():
    players = _players(5)
    players[2].last_played_at = 5
    blends = {p.id: 1000.0 for p in players}
    playing, benched = select_wave_players(players, 4, {}, blends)
    assert _ids(benched) == ["p3"]
    assert _ids(playing) == ["p1", "p2", "p4", "p5"]


def test_games_played_outranks_idle_time():
    players = _players(5)
    players[0].games_played = 3
    players[1].last_played_at = 9
    blends = {p.id: 1000.0 for p in players}
    _, benched = select_wave_players(players, 4, {}, blends)
    assert _ids(benched) == ["p1"]
