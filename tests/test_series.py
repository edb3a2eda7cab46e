from __future__ import annotations

from fractions import Fraction

import pytest

from fpseries.errors import (
    DivisionByZero,
    FunctionRequiresZeroConstant,
    LogRequiresUnitConstant,
)
from fpseries.series import Series

F = Fraction


def s(*coeffs: int | Fraction) -> Series:
    return Series(coeffs)


def test_constructors_have_degree_plus_one_coefficients() -> None:
    assert Series.zero(3).coefficients == (0, 0, 0, 0)
    assert Series.one(2) == s(1, 0, 0)
    assert Series.constant(F(5, 2), 1) == s(F(5, 2), 0)
    assert Series.variable(2) == s(0, 1, 0)
    assert Series.variable(0) == s(0)
    assert Series.from_coefficients([1, 2, 3, 4], 1) == s(1, 2)
    assert Series.from_coefficients([7], 2) == s(7, 0, 0)


def test_empty_series_is_rejected() -> None:
    with pytest.raises(ValueError):
        Series([])


def test_accessors() -> None:
    a = s(2, 0, 3)
    assert a.max_degree == 2
    assert a.constant_term == 2
    assert a.coefficient(2) == 3
    assert a.coefficient(5) == 0
    assert not a.is_constant()
    assert s(4, 0, 0).is_constant()
    assert Series.zero(2).is_zero()
    assert Series.zero(2).is_constant()


def test_truncate_cuts_and_pads() -> None:
    a = s(1, 2, 3)
    assert a.truncate(1) == s(1, 2)
    assert a.truncate(4) == s(1, 2, 3, 0, 0)


def test_add_sub_neg() -> None:
    a, b = s(1, 2, 3), s(4, -5, F(1, 2))
    assert a.add(b) == s(5, -3, F(7, 2))
    assert a.sub(b) == s(-3, 7, F(5, 2))
    assert a.neg() == s(-1, -2, -3)
    assert a + b == a.add(b)
    assert a - b == a.sub(b)
    assert -a == a.neg()


def test_operations_return_new_values() -> None:
    a = s(1, 2)
    b = a.add(Series.zero(1))
    assert b == a
    assert b is not a


def test_multiplication_truncates_to_degree() -> None:
    assert s(1, 1, 0, 0).mul(s(1, -1, 0, 0)) == s(1, 0, -1, 0)
    assert s(0, 1, 0).mul(s(0, 0, 1)) == Series.zero(2)


def test_scale() -> None:
    assert s(1, 2).scale(F(1, 2)) == s(F(1, 2), 1)
    assert 3 * s(1, 2) == s(3, 6)
    assert s(1, 2) * 3 == s(3, 6)


def test_degree_mismatch_is_an_engine_error() -> None:
    with pytest.raises(ValueError, match="degree mismatch"):
        s(1, 2).add(s(1, 2, 3))
    with pytest.raises(ValueError):
        s(1, 2).mul(s(1))


def test_ring_laws() -> None:
    a, b, c = s(1, 2, F(-1, 3), 4), s(F(2, 5), 0, 7, -1), s(3, -1, 0, F(1, 2))
    zero = Series.zero(3)

    assert a * b == b * a
    assert (a * b) * c == a * (b * c)
    assert a + b == b + a
    assert (a + b) + c == a + (b + c)
    assert a + zero == a
    assert a * (b + c) == a * b + a * c


def test_inverse_of_one_plus_x() -> None:
    assert s(1, 1, 0, 0).inverse() == s(1, -1, 1, -1)


def test_inverse_requires_non_zero_constant() -> None:
    with pytest.raises(DivisionByZero):
        s(0, 1, 0).inverse()


def test_division_roundtrip() -> None:
    a, b = s(1, 2, 3, 4), s(2, 1, 0, 5)
    assert (a / b) * b == a
    assert b * b.inverse() == Series.one(3)


def test_division_by_zero_constant() -> None:
    with pytest.raises(DivisionByZero):
        s(1, 0).div(s(0, 1))


def test_powi() -> None:
    one_plus_x = s(1, 1, 0, 0, 0)
    assert one_plus_x.powi(0) == Series.one(4)
    assert one_plus_x.powi(1) == one_plus_x
    assert one_plus_x.powi(4) == s(1, 4, 6, 4, 1)
    assert one_plus_x ** 3 == s(1, 3, 3, 1, 0)
    assert Series.zero(2).powi(0) == Series.one(2)


def test_powi_negative_matches_inverse_of_positive() -> None:
    a = s(2, -1, 3, 0)
    for e in (1, 2, 5):
        assert a.powi(-e) == a.powi(e).inverse()


def test_powi_negative_of_zero_constant_fails() -> None:
    with pytest.raises(DivisionByZero):
        s(0, 1).powi(-2)


def test_powi_of_x_beyond_degree_vanishes() -> None:
    assert Series.variable(3).powi(4) == Series.zero(3)
    assert Series.variable(3).powi(2**40) == Series.zero(3)


def test_sin_cos_exp_of_x() -> None:
    x = Series.variable(5)
    assert x.sin() == s(0, 1, 0, F(-1, 6), 0, F(1, 120))
    assert x.cos() == s(1, 0, F(-1, 2), 0, F(1, 24), 0)
    assert x.exp() == s(1, 1, F(1, 2), F(1, 6), F(1, 24), F(1, 120))


def test_log_of_one_plus_x() -> None:
    assert s(1, 1, 0, 0, 0).log() == s(0, 1, F(-1, 2), F(1, 3), F(-1, 4))


def test_transcendental_identities() -> None:
    u = s(0, 2, -1, 3, 0, 1)
    assert u.sin() ** 2 + u.cos() ** 2 == Series.one(5)
    assert u.exp().log() == u
    v = s(1, 3, 0, -2, 1, 0)
    assert v.log().exp() == v


def test_degree_zero_expansions() -> None:
    z = Series.zero(0)
    assert z.sin() == s(0)
    assert z.cos() == s(1)
    assert z.exp() == s(1)
    assert Series.one(0).log() == s(0)


def test_domain_guards() -> None:
    with pytest.raises(FunctionRequiresZeroConstant) as exc:
        s(1, 1).sin()
    assert exc.value.function == "sin"
    with pytest.raises(FunctionRequiresZeroConstant, match="cos"):
        s(F(1, 2), 1).cos()
    with pytest.raises(FunctionRequiresZeroConstant, match="exp"):
        s(-1, 0).exp()
    with pytest.raises(LogRequiresUnitConstant):
        s(2, 1).log()
    with pytest.raises(LogRequiresUnitConstant):
        s(0, 1).log()


def test_str_uses_canonical_format() -> None:
    assert str(s(1, 1, 1, 1)) == "1 + x + x^2 + x^3 + O(x^4)"
    assert repr(s(1, F(1, 2))) == "Series([1, 1/2])"
