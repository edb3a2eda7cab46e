from __future__ import annotations

from typing import assert_never

from fpseries.errors import ExponentTooLarge, NonIntegerExponent
from fpseries.parser import (
    Add,
    Cos,
    Div,
    Exp,
    Expr,
    Log,
    Mul,
    Neg,
    Num,
    Pow,
    Sin,
    Sub,
    Variable,
)
from fpseries.series import Series

# Exponents must fit in a signed 64-bit integer. Only the magnitude of the
# exponent is bounded: powi does O(log e) multiplications, but a constant base
# other than 0 or +-1 still grows its coefficients like base**e, so callers
# facing untrusted input should bound the exponent further.
EXPONENT_MIN = -(2**63)
EXPONENT_MAX = 2**63 - 1


def evaluate(expr: Expr, max_degree: int) -> Series:
    """Reduce ``expr`` to a series truncated at ``max_degree``.

    The degree is passed down unchanged, so both operands of every binary
    operation always share the same truncation.
    """

    if max_degree < 0:
        raise ValueError(f"max_degree must be non-negative, got {max_degree}")
    return _eval(expr, max_degree)


def _eval(expr: Expr, d: int) -> Series:
    match expr:
        case Num(value):
            return Series.constant(value, d)
        case Variable():
            return Series.variable(d)
        case Add(left, right):
            return _eval(left, d).add(_eval(right, d))
        case Sub(left, right):
            return _eval(left, d).sub(_eval(right, d))
        case Mul(left, right):
            return _eval(left, d).mul(_eval(right, d))
        case Div(left, right):
            return _eval(left, d).div(_eval(right, d))
        case Pow(base, exponent):
            b = _eval(base, d)
            return b.powi(_integer_exponent(_eval(exponent, d)))
        case Neg(inner):
            return _eval(inner, d).neg()
        case Sin(inner):
            return _eval(inner, d).sin()
        case Cos(inner):
            return _eval(inner, d).cos()
        case Exp(inner):
            return _eval(inner, d).exp()
        case Log(inner):
            return _eval(inner, d).log()
        case _:
            assert_never(expr)


def _integer_exponent(series: Series) -> int:
    if not series.is_constant():
        raise NonIntegerExponent()
    value = series.constant_term
    if value.denominator != 1:
        raise NonIntegerExponent()
    e = value.numerator
    if not EXPONENT_MIN <= e <= EXPONENT_MAX:
        raise ExponentTooLarge()
    return e
