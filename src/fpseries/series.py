"""Truncated formal power series with exact rational coefficients.

A ``Series`` of degree ``d`` holds exactly ``d + 1`` coefficients; index ``i``
is the coefficient of ``x**i``. Every operation returns a new series with the
same truncation degree as its operands. Terms above the degree are never
computed.
"""

from __future__ import annotations

from collections.abc import Iterable
from fractions import Fraction

from fpseries.errors import (
    DivisionByZero,
    FunctionRequiresZeroConstant,
    LogRequiresUnitConstant,
)

Rational = Fraction | int


class Series:
    __slots__ = ("_coeffs",)

    def __init__(self, coeffs: Iterable[Rational]) -> None:
        c = tuple(Fraction(v) for v in coeffs)
        if not c:
            raise ValueError("a series needs at least one coefficient")
        self._coeffs = c

    # -- constructors -------------------------------------------------------

    @classmethod
    def zero(cls, max_degree: int) -> Series:
        return cls([0] * (max_degree + 1))

    @classmethod
    def one(cls, max_degree: int) -> Series:
        return cls.constant(1, max_degree)

    @classmethod
    def constant(cls, value: Rational, max_degree: int) -> Series:
        return cls([value] + [0] * max_degree)

    @classmethod
    def variable(cls, max_degree: int) -> Series:
        """The series ``x``; collapses to zero when ``max_degree`` is 0."""
        coeffs: list[Rational] = [0] * (max_degree + 1)
        if max_degree >= 1:
            coeffs[1] = 1
        return cls(coeffs)

    @classmethod
    def from_coefficients(cls, coeffs: Iterable[Rational], max_degree: int) -> Series:
        """Build a series from leading coefficients, zero-padded or cut to ``max_degree``."""
        head = list(coeffs)[: max_degree + 1]
        return cls(head + [0] * (max_degree + 1 - len(head)))

    # -- accessors ----------------------------------------------------------

    @property
    def coefficients(self) -> tuple[Fraction, ...]:
        return self._coeffs

    @property
    def max_degree(self) -> int:
        return len(self._coeffs) - 1

    @property
    def constant_term(self) -> Fraction:
        return self._coeffs[0]

    def coefficient(self, degree: int) -> Fraction:
        if 0 <= degree < len(self._coeffs):
            return self._coeffs[degree]
        return Fraction(0)

    def is_constant(self) -> bool:
        return all(c == 0 for c in self._coeffs[1:])

    def is_zero(self) -> bool:
        return all(c == 0 for c in self._coeffs)

    def truncate(self, max_degree: int) -> Series:
        """Re-truncate to another degree (padding with zeros when growing)."""
        return Series.from_coefficients(self._coeffs, max_degree)

    # -- ring operations ----------------------------------------------------

    def _check_compatible(self, other: Series) -> None:
        if len(self._coeffs) != len(other._coeffs):
            raise ValueError(
                f"series degree mismatch: {self.max_degree} != {other.max_degree}"
            )

    def add(self, other: Series) -> Series:
        self._check_compatible(other)
        return Series(a + b for a, b in zip(self._coeffs, other._coeffs))

    def sub(self, other: Series) -> Series:
        self._check_compatible(other)
        return Series(a - b for a, b in zip(self._coeffs, other._coeffs))

    def neg(self) -> Series:
        return Series(-a for a in self._coeffs)

    def scale(self, scalar: Rational) -> Series:
        return Series(a * scalar for a in self._coeffs)

    def mul(self, other: Series) -> Series:
        self._check_compatible(other)
        d = self.max_degree
        a, b = self._coeffs, other._coeffs
        out = [Fraction(0)] * (d + 1)
        for i, ai in enumerate(a):
            if ai == 0:
                continue
            for j in range(d + 1 - i):
                out[i + j] += ai * b[j]
        return Series(out)

    def inverse(self) -> Series:
        """The formal multiplicative inverse.

        r[0] = 1 / a[0]; r[n] = -(sum_{k=1..n} a[k] * r[n-k]) / a[0].
        """
        a = self._coeffs
        a0 = a[0]
        if a0 == 0:
            raise DivisionByZero()

        r = [Fraction(0)] * len(a)
        r[0] = 1 / a0
        for n in range(1, len(a)):
            acc = sum((a[k] * r[n - k] for k in range(1, n + 1)), Fraction(0))
            r[n] = -acc / a0
        return Series(r)

    def div(self, other: Series) -> Series:
        return self.mul(other.inverse())

    def powi(self, exponent: int) -> Series:
        """Integer power by repeated squaring; negative powers go through ``inverse``."""
        if exponent == 0:
            return Series.one(self.max_degree)
        if exponent < 0:
            return self.inverse().powi(-exponent)

        result = Series.one(self.max_degree)
        base = self
        e = exponent
        while e > 0:
            if e & 1:
                result = result.mul(base)
            e >>= 1
            if e:
                base = base.mul(base)
        return result

    # -- transcendental functions -------------------------------------------
    #
    # Each expansion sums c_n * self**n. The argument has zero constant term,
    # so self**n starts at x**n and terms with n > max_degree vanish.

    def _require_zero_constant(self, function: str) -> None:
        if self.constant_term != 0:
            raise FunctionRequiresZeroConstant(function)

    def sin(self) -> Series:
        self._require_zero_constant("sin")
        d = self.max_degree
        result = Series.zero(d)
        if d == 0:
            return result

        factorial = 1
        for n in range((d - 1) // 2 + 1):
            if n > 0:
                factorial *= (2 * n) * (2 * n + 1)
            sign = 1 if n % 2 == 0 else -1
            result = result.add(self.powi(2 * n + 1).scale(Fraction(sign, factorial)))
        return result

    def cos(self) -> Series:
        self._require_zero_constant("cos")
        d = self.max_degree
        result = Series.zero(d)

        factorial = 1
        for n in range(d // 2 + 1):
            if n > 0:
                factorial *= (2 * n - 1) * (2 * n)
            sign = 1 if n % 2 == 0 else -1
            result = result.add(self.powi(2 * n).scale(Fraction(sign, factorial)))
        return result

    def exp(self) -> Series:
        self._require_zero_constant("exp")
        d = self.max_degree
        result = Series.zero(d)

        factorial = 1
        for n in range(d + 1):
            if n > 0:
                factorial *= n
            result = result.add(self.powi(n).scale(Fraction(1, factorial)))
        return result

    def log(self) -> Series:
        """log(1 + u) = sum_{n>=1} (-1)**(n+1) * u**n / n, with u = self - 1."""
        if self.constant_term != 1:
            raise LogRequiresUnitConstant()
        d = self.max_degree
        result = Series.zero(d)
        u = self.sub(Series.one(d))

        for n in range(1, d + 1):
            sign = 1 if n % 2 == 1 else -1
            result = result.add(u.powi(n).scale(Fraction(sign, n)))
        return result

    # -- Python protocol ----------------------------------------------------

    def __add__(self, other: object) -> Series:
        if not isinstance(other, Series):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> Series:
        if not isinstance(other, Series):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, other: object) -> Series:
        if isinstance(other, Series):
            return self.mul(other)
        if isinstance(other, (int, Fraction)):
            return self.scale(other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other: object) -> Series:
        if not isinstance(other, Series):
            return NotImplemented
        return self.div(other)

    def __pow__(self, exponent: int) -> Series:
        if not isinstance(exponent, int):
            return NotImplemented
        return self.powi(exponent)

    def __neg__(self) -> Series:
        return self.neg()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Series):
            return NotImplemented
        return self._coeffs == other._coeffs

    def __hash__(self) -> int:
        return hash(self._coeffs)

    def __repr__(self) -> str:
        inner = ", ".join(str(c) for c in self._coeffs)
        return f"Series([{inner}])"

    def __str__(self) -> str:
        from fpseries.formatting import format_series

        return format_series(self)
