from __future__ import annotations

from fractions import Fraction

from fpseries.formatting import format_rational, format_series, series_to_dict
from fpseries.series import Series

F = Fraction


def test_format_rational() -> None:
    assert format_rational(F(3)) == "3"
    assert format_rational(F(-4, 6)) == "-2/3"
    assert format_rational(F(0)) == "0"


def test_unit_coefficients_drop_the_number() -> None:
    assert format_series(Series([1, 1, 1, 1])) == "1 + x + x^2 + x^3 + O(x^4)"


def test_coefficients_are_space_separated() -> None:
    assert format_series(Series([0, 3, 0, F(-9, 2)])) == "3 x - 9/2 x^3 + O(x^4)"


def test_signs() -> None:
    assert format_series(Series([0, -1])) == "-x + O(x^2)"
    assert format_series(Series([F(-1, 2)])) == "-1/2 + O(x^1)"
    assert (
        format_series(Series([-3, 1, -2, F(-1, 2), -1]))
        == "-3 + x - 2 x^2 - 1/2 x^3 - x^4 + O(x^5)"
    )


def test_zero_series() -> None:
    assert format_series(Series.zero(3)) == "0 + O(x^4)"
    assert format_series(Series.zero(0)) == "0 + O(x^1)"


def test_constant_one_keeps_its_digit() -> None:
    assert format_series(Series([1, 0])) == "1 + O(x^2)"
    assert format_series(Series([-1, 0])) == "-1 + O(x^2)"


def test_series_to_dict() -> None:
    assert series_to_dict(Series([1, F(5), F(25, 2)])) == {
        "degree": 2,
        "series": "1 + 5 x + 25/2 x^2 + O(x^3)",
        "coefficients": ["1", "5", "25/2"],
    }
