from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version


def _package_version() -> str:
    try:
        return version("fpseries")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

from fpseries.engine import calc_series, clamp_degree, evaluate_expression  # noqa: E402
from fpseries.errors import (  # noqa: E402
    DivisionByZero,
    EvalError,
    ExponentTooLarge,
    FpsConfigError,
    FpsError,
    FunctionRequiresZeroConstant,
    LogRequiresUnitConstant,
    NonIntegerExponent,
    ParserError,
    TokenizerError,
    UnexpectedChar,
    UnexpectedEof,
    UnexpectedIdentifier,
    UnexpectedToken,
)
from fpseries.formatting import format_series  # noqa: E402
from fpseries.series import Series  # noqa: E402

__all__ = [
    "DivisionByZero",
    "EvalError",
    "ExponentTooLarge",
    "FpsConfigError",
    "FpsError",
    "FunctionRequiresZeroConstant",
    "LogRequiresUnitConstant",
    "NonIntegerExponent",
    "ParserError",
    "Series",
    "TokenizerError",
    "UnexpectedChar",
    "UnexpectedEof",
    "UnexpectedIdentifier",
    "UnexpectedToken",
    "__version__",
    "calc_series",
    "clamp_degree",
    "evaluate_expression",
    "format_series",
]
