"""Watch mode: re-evaluate an expression file whenever it changes."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fpseries.engine import evaluate_expression
from fpseries.errors import FpsError
from fpseries.formatting import format_series

logger = logging.getLogger("fpseries.watch")


@dataclass(frozen=True, slots=True)
class WatchEvent:
    """A batch of relevant file changes."""

    changed_paths: frozenset[Path]
    timestamp: float


@dataclass(frozen=True, slots=True)
class LineResult:
    """Outcome of evaluating one expression line."""

    line_no: int
    expression: str
    series: str | None
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class WatchCycleResult:
    """Result of a single re-evaluation cycle."""

    results: tuple[LineResult, ...]
    degree: int
    duration_s: float
    changed_paths: frozenset[Path]

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)


def check_watchfiles_available() -> None:
    """Raise ImportError with a helpful message if watchfiles is not installed."""
    import importlib

    try:
        importlib.import_module("watchfiles")
    except ImportError:
        raise ImportError(
            "watchfiles is required for watch mode. Install it with: pip install fpseries[watch]"
        ) from None


def read_expressions(path: Path) -> list[tuple[int, str]]:
    """Return (1-based line number, expression) for each non-blank, non-comment line."""
    out: list[tuple[int, str]] = []
    for i, raw in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        out.append((i, line))
    return out


def evaluate_lines(lines: list[tuple[int, str]], degree: int) -> tuple[LineResult, ...]:
    results: list[LineResult] = []
    for line_no, expression in lines:
        try:
            text = format_series(evaluate_expression(expression, degree))
        except FpsError as e:
            logger.debug("line %d failed: %s", line_no, e)
            results.append(LineResult(line_no, expression, None, str(e)))
            continue
        results.append(LineResult(line_no, expression, text, None))
    return tuple(results)


def filter_watched(changed_paths: frozenset[Path], *, target: Path) -> frozenset[Path]:
    """Keep only changes to the watched file."""
    resolved = target.resolve()
    return frozenset(p for p in changed_paths if p.resolve() == resolved)


async def run_watch_loop(
    *,
    changes_iter: AsyncIterator[set[tuple[Any, str]]],
    run_cycle: Callable[[WatchEvent], WatchCycleResult],
    on_event: Callable[[str], None],
    on_cycle_result: Callable[[WatchCycleResult], None],
    on_error: Callable[[BaseException], None],
    target: Path,
) -> None:
    """Main watch loop. Consumes changes_iter, filters, and calls run_cycle."""
    async for raw_changes in changes_iter:
        paths = frozenset(Path(p) for _, p in raw_changes)
        relevant = filter_watched(paths, target=target)
        if not relevant:
            continue

        event = WatchEvent(changed_paths=relevant, timestamp=time.monotonic())
        on_event(f"[watch] change detected: {target}")

        try:
            result = run_cycle(event)
        except Exception as exc:
            on_error(exc)
            continue

        on_event(f"[watch] done ({result.duration_s:.1f}s)")
        on_cycle_result(result)


def format_watch_cycle_text(result: WatchCycleResult) -> list[str]:
    lines: list[str] = []
    for r in result.results:
        if r.ok:
            lines.append(f"{r.expression} = {r.series}")
        else:
            lines.append(f"{r.expression}: error: {r.error}")
    return lines


def format_watch_cycle_json(result: WatchCycleResult) -> dict[str, object]:
    """Format a cycle result as a JSON-serializable dict."""
    return {
        "command": "watch",
        "ok": result.ok,
        "degree": result.degree,
        "duration_s": round(result.duration_s, 2),
        "changed_paths": sorted(str(p) for p in result.changed_paths),
        "results": [
            {
                "line": r.line_no,
                "expression": r.expression,
                "ok": r.ok,
                "series": r.series,
                "error": r.error,
            }
            for r in result.results
        ],
    }


def build_cycle_runner(path: Path, *, degree: int) -> Callable[[WatchEvent], WatchCycleResult]:
    """Create a cycle runner that re-reads `path` and evaluates every line."""

    def runner(event: WatchEvent) -> WatchCycleResult:
        t0 = time.monotonic()
        results = evaluate_lines(read_expressions(path), degree)
        return WatchCycleResult(
            results=results,
            degree=degree,
            duration_s=time.monotonic() - t0,
            changed_paths=event.changed_paths,
        )

    return runner


def make_watchfiles_iter(
    watch_paths: list[Path],
    *,
    debounce_ms: int,
) -> AsyncIterator[set[tuple[Any, str]]]:
    """Create an async iterator using watchfiles.awatch()."""
    import watchfiles  # type: ignore[import-untyped]

    return watchfiles.awatch(*watch_paths, debounce=debounce_ms)
