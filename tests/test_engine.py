from __future__ import annotations

import logging

import pytest

from fpseries.engine import MAX_DEGREE, calc_series, clamp_degree, evaluate_expression
from fpseries.errors import (
    ExponentTooLarge,
    NonIntegerExponent,
    UnexpectedChar,
    UnexpectedEof,
    UnexpectedToken,
)


@pytest.mark.parametrize(
    ("source", "degree", "expected"),
    [
        ("1 / (1 - x)", 3, "1 + x + x^2 + x^3 + O(x^4)"),
        ("sin(3x)", 3, "3 x - 9/2 x^3 + O(x^4)"),
        ("exp(5x)", 3, "1 + 5 x + 25/2 x^2 + 125/6 x^3 + O(x^4)"),
        ("log(1 + 7x)", 3, "7 x - 49/2 x^2 + 343/3 x^3 + O(x^4)"),
        ("cos(5x)", 4, "1 - 25/2 x^2 + 625/24 x^4 + O(x^5)"),
        ("x - x", 2, "0 + O(x^3)"),
        ("x", 0, "0 + O(x^1)"),
    ],
)
def test_fixtures(source: str, degree: int, expected: str) -> None:
    assert str(evaluate_expression(source, degree)) == expected


def test_every_result_has_degree_plus_one_coefficients() -> None:
    for d in (0, 1, 7):
        assert len(evaluate_expression("1/(1-x)", d).coefficients) == d + 1


def test_stage_errors_surface_unchanged() -> None:
    with pytest.raises(UnexpectedChar):
        evaluate_expression("1 % x", 3)
    with pytest.raises(UnexpectedEof):
        evaluate_expression("(1 + x", 3)
    with pytest.raises(NonIntegerExponent):
        evaluate_expression("(1+x)^(x)", 3)
    with pytest.raises(ExponentTooLarge):
        evaluate_expression("(1+x)^(100000000000000000000)", 3)


def test_clamp_degree() -> None:
    assert clamp_degree(5) == 5
    assert clamp_degree(-3) == 0
    assert clamp_degree(1000) == MAX_DEGREE
    assert clamp_degree(0, low=1, high=32) == 1
    with pytest.raises(ValueError):
        clamp_degree(3, low=4, high=2)


def test_calc_series_success_and_clamping() -> None:
    assert calc_series("1/(1-x)", 5) == "1 + x + x^2 + x^3 + x^4 + x^5 + O(x^6)"
    assert calc_series("1/(1-x)", 0) == "1 + x + O(x^2)"
    assert calc_series("x^40", 100) == "0 + O(x^33)"


def test_calc_series_logs_and_returns_none(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="fpseries.engine"):
        assert calc_series("1 +", 3) is None
        assert calc_series("y", 3) is None
        assert calc_series("log(x)", 3) is None

    assert "Parsing error" in caplog.text
    assert "Tokenization error" in caplog.text
    assert "Evaluation error" in caplog.text


def test_deep_nesting_fails_cleanly(caplog) -> None:
    assert str(evaluate_expression("-" * 90 + "x", 1)) == "x + O(x^2)"
    assert str(evaluate_expression("(" * 90 + "1+x" + ")" * 90, 1)) == "1 + x + O(x^2)"

    with pytest.raises(UnexpectedToken):
        evaluate_expression("-" * 3000 + "x", 3)
    with caplog.at_level(logging.WARNING, logger="fpseries.engine"):
        assert calc_series("-" * 3000 + "x", 3) is None
        assert calc_series("(" * 3000 + "x" + ")" * 3000, 3) is None
    assert "Parsing error" in caplog.text
