"""Project configuration loading for fpseries.

This module is intentionally small and deterministic: it only reads
`fpseries.toml` and performs light validation. A missing file is not an error;
the defaults below apply.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fpseries.errors import FpsConfigError

CONFIG_FILENAME = "fpseries.toml"

DEFAULT_DEGREE = 3
DEFAULT_MIN_DEGREE = 0
DEFAULT_MAX_DEGREE = 32
DEFAULT_DEBOUNCE_MS = 200


@dataclass(frozen=True)
class EvalConfig:
    degree: int = DEFAULT_DEGREE
    min_degree: int = DEFAULT_MIN_DEGREE
    max_degree: int = DEFAULT_MAX_DEGREE


@dataclass(frozen=True)
class WatchConfig:
    debounce_ms: int = DEFAULT_DEBOUNCE_MS


@dataclass(frozen=True)
class FpsConfig:
    version: int = 1
    eval: EvalConfig = field(default_factory=EvalConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)
    path: Path | None = None


def find_config(start: Path) -> Path | None:
    """Walk upward from `start` (file or directory) looking for `fpseries.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        candidate = cur / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if cur.parent == cur:
            return None
        cur = cur.parent


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise FpsConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise FpsConfigError(f"Expected {name} to be an integer.")
    return value


def _non_negative(tbl: dict[str, Any], key: str, default: int, *, name: str) -> int:
    if key not in tbl:
        return default
    value = _as_int(tbl[key], name=name)
    if value < 0:
        raise FpsConfigError(f"Expected {name} to be non-negative, got {value}.")
    return value


def load_config(*, config_path: Path | None = None, start: Path | None = None) -> FpsConfig:
    """Load and validate `fpseries.toml`.

    An explicit `config_path` must exist. Otherwise the file is searched for
    upward from `start` (default: cwd) and defaults are returned if none is
    found.
    """

    if config_path is None:
        config_path = find_config(start if start is not None else Path.cwd())
        if config_path is None:
            return FpsConfig()

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise FpsConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise FpsConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise FpsConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise FpsConfigError(f"Invalid TOML in {config_path}: {e}") from e

    version = _as_int(data.get("version", 1), name="version")
    if version != 1:
        raise FpsConfigError(f"Unsupported config version: {version} (expected 1).")

    eval_tbl = _as_table(data.get("eval"), name="eval")
    watch_tbl = _as_table(data.get("watch"), name="watch")

    min_degree = _non_negative(eval_tbl, "min_degree", DEFAULT_MIN_DEGREE, name="eval.min_degree")
    max_degree = _non_negative(eval_tbl, "max_degree", DEFAULT_MAX_DEGREE, name="eval.max_degree")
    if min_degree > max_degree:
        raise FpsConfigError(
            f"eval.min_degree ({min_degree}) must not exceed eval.max_degree ({max_degree})."
        )
    degree = _non_negative(eval_tbl, "degree", DEFAULT_DEGREE, name="eval.degree")
    if not min_degree <= degree <= max_degree:
        raise FpsConfigError(
            f"eval.degree ({degree}) must lie in [{min_degree}, {max_degree}]."
        )

    debounce_ms = _non_negative(
        watch_tbl, "debounce_ms", DEFAULT_DEBOUNCE_MS, name="watch.debounce_ms"
    )

    return FpsConfig(
        version=version,
        eval=EvalConfig(degree=degree, min_degree=min_degree, max_degree=max_degree),
        watch=WatchConfig(debounce_ms=debounce_ms),
        path=config_path,
    )
