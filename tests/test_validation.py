import pytest

from rallypairing.exceptions import InvalidResultException
from rallypairing.utils import default_match_id, generate_id
from rallypairing.utils.validation import (
    validate_rating,
    validate_score,
    validate_score_strict,
    validate_seed,
)


@pytest.mark.parametrize("score", [0, 11, 21, 35])
def test_valid_scores(score):
    result = validate_score(score)
    assert result
    assert result.sanitized_value == score


@pytest.mark.parametrize("score", [None, -1, 2.5, "21", False])
def test_invalid_scores(score):
    assert not validate_score(score)


def test_strict_score_names_the_side():
    with pytest.raises(InvalidResultException, match="Team B score"):
        validate_score_strict(-3, "Team B score")


def test_rating_and_seed():
    assert validate_rating(-40)
    assert not validate_rating(1000.0)
    assert validate_seed(1)
    assert not validate_seed(0)


def test_ids():
    assert default_match_id(2, 3, 1) == "r2w3c1"
    assert generate_id() != generate_id()
