"""Canonical text rendering of a truncated series.

    1 / (1 - x), degree 3  ->  "1 + x + x^2 + x^3 + O(x^4)"
    sin(3x), degree 3      ->  "3 x - 9/2 x^3 + O(x^4)"

Non-zero terms in ascending degree, a leading ``-`` only for a negative first
term, and a ``O(x^{d+1})`` remainder that is always present.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Any

from fpseries.series import Series
from fpseries.tokenizer import VARIABLE


def format_rational(value: Fraction) -> str:
    if value.denominator == 1:
        return str(value.numerator)
    return f"{value.numerator}/{value.denominator}"


def _format_term(magnitude: Fraction, degree: int) -> str:
    if degree == 0:
        return format_rational(magnitude)
    power = VARIABLE if degree == 1 else f"{VARIABLE}^{degree}"
    if magnitude == 1:
        return power
    return f"{format_rational(magnitude)} {power}"


def format_series(series: Series) -> str:
    parts: list[str] = []
    for degree, coeff in enumerate(series.coefficients):
        if coeff == 0:
            continue
        term = _format_term(abs(coeff), degree)
        if not parts:
            parts.append(f"-{term}" if coeff < 0 else term)
        else:
            parts.append(f" - {term}" if coeff < 0 else f" + {term}")

    body = "".join(parts) if parts else "0"
    return f"{body} + O({VARIABLE}^{series.max_degree + 1})"


def series_to_dict(series: Series) -> dict[str, Any]:
    """JSON-ready view: canonical text plus exact coefficients as strings."""
    return {
        "degree": series.max_degree,
        "series": format_series(series),
        "coefficients": [format_rational(c) for c in series.coefficients],
    }
