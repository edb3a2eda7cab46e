"""Text-in, series-out pipeline shared by the CLI and interactive front ends."""

from __future__ import annotations

import logging

from fpseries.errors import EvalError, FpsError, ParserError, TokenizerError
from fpseries.evaluator import evaluate
from fpseries.formatting import format_series
from fpseries.parser import parse
from fpseries.series import Series
from fpseries.tokenizer import tokenize

logger = logging.getLogger("fpseries.engine")

# Factorial denominators grow quickly with the degree; interactive callers
# keep requests inside these bounds.
MIN_INTERACTIVE_DEGREE = 1
MAX_DEGREE = 32


def clamp_degree(degree: int, *, low: int = 0, high: int = MAX_DEGREE) -> int:
    if low > high:
        raise ValueError(f"empty degree range [{low}, {high}]")
    return max(low, min(high, degree))


def evaluate_expression(source: str, max_degree: int) -> Series:
    """Tokenize, parse and evaluate ``source`` at truncation ``max_degree``.

    The first failing stage raises; nothing is retried or recovered.
    """

    tokens = tokenize(source)
    logger.debug("tokenized %r into %d tokens", source, len(tokens))
    expr = parse(tokens)
    logger.debug("parsed %r: %r", source, expr)
    series = evaluate(expr, max_degree)
    logger.debug("evaluated %r at degree %d", source, max_degree)
    return series


def _stage(err: FpsError) -> str:
    if isinstance(err, TokenizerError):
        return "Tokenization"
    if isinstance(err, ParserError):
        return "Parsing"
    if isinstance(err, EvalError):
        return "Evaluation"
    return "Processing"


def calc_series(source: str, max_degree: int) -> str | None:
    """Canonical text for ``source``, or None if any stage fails.

    Failures are logged rather than raised; the degree is clamped to the
    interactive range first.
    """

    degree = clamp_degree(max_degree, low=MIN_INTERACTIVE_DEGREE, high=MAX_DEGREE)
    try:
        series = evaluate_expression(source, degree)
    except FpsError as e:
        logger.warning("%s error for %r: %s", _stage(e), source, e)
        return None
    return format_series(series)
