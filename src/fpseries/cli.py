from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path

from fpseries import __version__
from fpseries.config import FpsConfig, load_config
from fpseries.engine import clamp_degree, evaluate_expression
from fpseries.errors import EvalError, FpsConfigError, FpsError, ParserError, TokenizerError
from fpseries.formatting import series_to_dict

logger = logging.getLogger("fpseries.cli")

EXIT_OK = 0
EXIT_INPUT_ERROR = 2
EXIT_EVAL_ERROR = 3
EXIT_CONFIG_ERROR = 4


def _add_common_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-d",
        "--degree",
        type=int,
        default=None,
        help="Truncation degree (defaults to eval.degree from fpseries.toml, else 3).",
    )
    p.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to fpseries.toml (defaults to searching upward from cwd).",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit machine-readable JSON on stdout.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fps", description="Expand an expression in x as a truncated power series."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    eval_p = subparsers.add_parser("eval", help="Evaluate one expression.")
    eval_p.add_argument("expression", help='Expression in x, e.g. "1/(1-x)" or "sin(3x)".')
    _add_common_flags(eval_p)

    watch_p = subparsers.add_parser(
        "watch", help="Re-evaluate every line of a file whenever it changes."
    )
    watch_p.add_argument("file", help="File with one expression per line (# comments).")
    _add_common_flags(watch_p)

    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _is_json_mode(args: argparse.Namespace) -> bool:
    return bool(getattr(args, "json_output", False))


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _emit_json(data: dict[str, object]) -> None:
    print(json.dumps(data))


def _load_config(args: argparse.Namespace) -> FpsConfig:
    config_path = Path(args.config).resolve() if args.config else None
    return load_config(config_path=config_path)


def _resolve_degree(args: argparse.Namespace, cfg: FpsConfig) -> int:
    requested = args.degree if args.degree is not None else cfg.eval.degree
    degree = clamp_degree(requested, low=cfg.eval.min_degree, high=cfg.eval.max_degree)
    if degree != requested:
        logger.warning("degree %d clamped to %d", requested, degree)
    return degree


def _exit_code_for(err: FpsError) -> int:
    if isinstance(err, (TokenizerError, ParserError)):
        return EXIT_INPUT_ERROR
    if isinstance(err, EvalError):
        return EXIT_EVAL_ERROR
    return EXIT_CONFIG_ERROR


def _report_error(args: argparse.Namespace, err: FpsError, **extra: object) -> None:
    if _is_json_mode(args):
        _emit_json(
            {
                "command": args.command,
                "ok": False,
                "kind": type(err).__name__,
                "error": str(err),
                **extra,
            }
        )
    else:
        _eprint(f"error: {err}")


def cmd_eval(args: argparse.Namespace) -> int:
    try:
        cfg = _load_config(args)
        degree = _resolve_degree(args, cfg)
        series = evaluate_expression(args.expression, degree)
    except FpsError as e:
        _report_error(args, e, expression=args.expression)
        return _exit_code_for(e)

    if _is_json_mode(args):
        _emit_json(
            {"command": "eval", "ok": True, "expression": args.expression, **series_to_dict(series)}
        )
    else:
        print(str(series))
    return EXIT_OK


def cmd_watch(args: argparse.Namespace) -> int:
    from fpseries import watcher

    try:
        watcher.check_watchfiles_available()
    except ImportError as e:
        if _is_json_mode(args):
            _emit_json({"command": "watch", "ok": False, "error": str(e)})
        else:
            _eprint(f"error: {e}")
        return EXIT_CONFIG_ERROR

    try:
        cfg = _load_config(args)
        degree = _resolve_degree(args, cfg)
    except FpsConfigError as e:
        _report_error(args, e)
        return EXIT_CONFIG_ERROR

    path = Path(args.file).resolve()
    if not path.is_file():
        _report_error(args, FpsError(f"No such file: {path}"))
        return EXIT_INPUT_ERROR

    def on_event(msg: str) -> None:
        if not _is_json_mode(args):
            _eprint(msg)

    def on_cycle_result(result: watcher.WatchCycleResult) -> None:
        if _is_json_mode(args):
            _emit_json(watcher.format_watch_cycle_json(result))
            return
        for line in watcher.format_watch_cycle_text(result):
            print(line)

    def on_error(exc: BaseException) -> None:
        logger.warning("watch cycle failed: %s: %s", type(exc).__name__, exc)
        if _is_json_mode(args):
            _emit_json({"command": "watch", "ok": False, "error": str(exc)})
        else:
            _eprint(f"[watch] error: {type(exc).__name__}: {exc}")

    run_cycle = watcher.build_cycle_runner(path, degree=degree)
    try:
        first = run_cycle(watcher.WatchEvent(frozenset({path}), time.monotonic()))
    except Exception as exc:
        on_error(exc)
    else:
        on_cycle_result(first)

    # Watch the directory: editors often replace the file rather than write in place.
    changes = watcher.make_watchfiles_iter([path.parent], debounce_ms=cfg.watch.debounce_ms)
    try:
        asyncio.run(
            watcher.run_watch_loop(
                changes_iter=changes,
                run_cycle=run_cycle,
                on_event=on_event,
                on_cycle_result=on_cycle_result,
                on_error=on_error,
                target=path,
            )
        )
    except KeyboardInterrupt:
        on_event("[watch] stopped")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as e:
        # argparse uses SystemExit for --help/--version and parse errors.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_INPUT_ERROR

    _configure_logging(args)

    if args.command == "eval":
        return cmd_eval(args)
    if args.command == "watch":
        return cmd_watch(args)

    return EXIT_INPUT_ERROR


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
