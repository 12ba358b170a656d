from fractions import Fraction

import pytest
from pydantic import ValidationError

from contracts import INT_MAX, INT_MIN, NEG_INF, POS_INF, DivisionCase, Interval


def iv(lower, upper):
    return Interval(lower=lower, upper=upper)


def test_add_sums_matching_ends():
    assert iv(1, 3) + iv(-2, 10) == iv(-1, 13)


def test_sub_crosses_ends():
    assert iv(1, 3) - iv(2, 5) == iv(-4, 1)


def test_mul_takes_min_and_max_of_pairwise_products():
    assert iv(-2, 3) * iv(4, 5) == iv(-10, 15)
    assert iv(-3, -1) * iv(-4, 2) == iv(-6, 12)


def test_add_saturates_instead_of_wrapping():
    assert iv(INT_MAX - 1, INT_MAX) + iv(5, 5) == iv(INT_MAX, INT_MAX)
    assert iv(INT_MIN, 0) - iv(1, 1) == iv(INT_MIN, -1)


def test_mul_saturates_both_ends():
    assert iv(-70000, 70000) * iv(-70000, 70000) == iv(INT_MIN, INT_MAX)


@pytest.mark.parametrize(
    "divisor, case",
    [
        (iv(2, 5), DivisionCase.OUTSIDE),
        (iv(-5, -2), DivisionCase.OUTSIDE),
        (iv(-5, 0), DivisionCase.UPPER_ZERO),
        (iv(0, 5), DivisionCase.LOWER_ZERO),
        (iv(-3, 4), DivisionCase.STRADDLES),
        (iv(0, 0), DivisionCase.STRADDLES),
    ],
)
def test_division_case_classification(divisor, case):
    assert divisor.division_case() is case


def test_reciprocal_is_exact_for_each_case():
    assert iv(2, 5).reciprocal() == (Fraction(1, 5), Fraction(1, 2))
    assert iv(-5, 0).reciprocal() == (Fraction(NEG_INF), Fraction(-1, 5))
    assert iv(0, 5).reciprocal() == (Fraction(1, 5), Fraction(POS_INF))
    assert iv(-3, 4).reciprocal() == (Fraction(NEG_INF), Fraction(POS_INF))


def test_div_case_zero_outside_divisor():
    assert iv(10, 20) / iv(2, 5) == iv(2, 10)
    assert iv(10, 20) / iv(-5, -2) == iv(-10, -2)


def test_div_case_upper_bound_zero_saturates_lower_end():
    assert iv(10, 20) / iv(-5, 0) == iv(INT_MIN, -2)


def test_div_case_lower_bound_zero_saturates_upper_end():
    assert iv(10, 20) / iv(0, 5) == iv(2, INT_MAX)


def test_div_case_zero_inside_is_unbounded():
    result = iv(10, 20) / iv(-3, 4)

    assert result == Interval.full()
    assert result.unbounded_below and result.unbounded_above
    assert iv(10, 20) / iv(0, 0) == iv(INT_MIN, INT_MAX)


def test_div_of_zero_interval_stays_zero_even_when_unbounded():
    assert iv(0, 0) / iv(-3, 4) == iv(0, 0)


def test_div_bounds_truncate_toward_zero():
    assert iv(-7, 7) / iv(2, 2) == iv(-3, 3)


def test_inverted_interval_is_rejected():
    with pytest.raises(ValidationError):
        iv(5, 1)


def test_interval_outside_int_range_is_rejected():
    with pytest.raises(ValidationError):
        iv(INT_MIN - 1, 0)
    with pytest.raises(ValidationError):
        iv(0, INT_MAX + 1)


def test_interval_is_frozen():
    bounds = iv(0, 10)

    with pytest.raises(ValidationError):
        bounds.lower = 3


def test_contains_is_inclusive():
    bounds = iv(0, 10)

    assert bounds.contains(0)
    assert bounds.contains(10)
    assert not bounds.contains(11)
    assert not bounds.contains(-1)
