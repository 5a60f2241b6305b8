"""Unit tests for score ranges."""
import math

import pytest

from pyzset.ranges import ScoreRange


def test_parse_numbers():
    """Numeric bounds are inclusive."""
    rng = ScoreRange.parse(1, 2.5)
    assert rng == ScoreRange(1.0, 2.5)
    assert 1 in rng and 2.5 in rng
    assert 0.5 not in rng


def test_parse_exclusive_strings():
    """A leading parenthesis makes a bound exclusive."""
    rng = ScoreRange.parse("(1", "(3")
    assert rng.min_exclusive and rng.max_exclusive
    assert 1 not in rng and 3 not in rng
    assert 2 in rng


def test_parse_infinity():
    """Infinite bounds accept every finite score."""
    rng = ScoreRange.parse("-inf", "+inf")
    assert rng.min == -math.inf and rng.max == math.inf
    assert -1e300 in rng and 1e300 in rng
    assert ScoreRange.parse("-inf", "inf") == rng


@pytest.mark.parametrize("bad", ["abc", "(", "nan", math.nan])
def test_parse_invalid(bad):
    """Unparsable bounds are rejected."""
    with pytest.raises(ValueError, match="min or max is not a float"):
        ScoreRange.parse(bad, 1)


def test_is_empty():
    """Inverted or degenerate exclusive ranges are empty."""
    assert ScoreRange(2, 1).is_empty
    assert ScoreRange(1, 1, min_exclusive=True).is_empty
    assert ScoreRange(1, 1, max_exclusive=True).is_empty
    assert not ScoreRange(1, 1).is_empty


def test_str():
    assert str(ScoreRange(1.0, 2.0, min_exclusive=True)) == "(1.0, 2.0]"
