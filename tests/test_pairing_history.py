from rallypairing.models.tournament import (
    Match,
    PairingHistory,
    Round,
    build_history,
    history_from_rounds,
    merge_histories,
)


def _match(mid, a1, a2, b1, b2, **kwargs):
    return Match(id=mid, round_index=1, a1=a1, a2=a2, b1=b1, b2=b2, **kwargs)


def test_apply_match_records_partners_and_opponents():
    history = build_history([_match("m1", "a", "b", "c", "d")])

    assert history.have_partnered("a", "b")
    assert history.have_partnered("d", "c")
    assert not history.have_partnered("a", "c")
    assert history.have_opposed("a", "c")
    assert history.have_opposed("d", "b")
    assert not history.have_opposed("a", "b")


def test_opponent_repeats_counts_cross_team_pairs():
    history = build_history([_match("m1", "a", "b", "c", "d")])
    assert history.opponent_repeats(("a", "c"), ("b", "d")) == 2
    assert history.opponent_repeats(("a", "b"), ("c", "d")) == 4
    assert history.opponent_repeats(("a", "b"), ("e", "f")) == 0


def test_clone_is_independent():
    history = build_history([_match("m1", "a", "b", "c", "d")])
    copy = history.clone()
    copy.add_partners("a", "c")

    assert copy.have_partnered("a", "c")
    assert not history.have_partnered("a", "c")


def test_merge_histories_unions_sets():
    first = build_history([_match("m1", "a", "b", "c", "d")])
    second = build_history([_match("m2", "a", "c", "b", "d")])
    merged = merge_histories(first, second)

    assert merged.have_partnered("a", "b")
    assert merged.have_partnered("a", "c")
    assert not first.have_partnered("a", "c")


def test_history_from_rounds_includes_scheduled_matches():
    completed = _match("m1", "a", "b", "c", "d", score_a=21, score_b=10, status="completed")
    scheduled = _match("m2", "a", "c", "b", "d")
    rounds = [Round(index=1, kind="prelim", target_size=4, matches=[completed, scheduled])]

    history = history_from_rounds(rounds)
    assert history.have_partnered("a", "b")
    assert history.have_partnered("a", "c")


def test_to_dict_round_trip():
    history = build_history([_match("m1", "a", "b", "c", "d")])
    restored = PairingHistory.from_dict(history.to_dict())
    assert restored == history
