from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from . import __version__
from .config import DEFAULT_CONDITIONAL_TIMEOUT_MS, DEFAULT_TIMEOUT_MS, EmitterOptions
from .models import PlanPayloadError, parse_plan_steps
from .script_writer import convert_plan_to_raw_code, convert_plan_to_test

logger = logging.getLogger("locatorforge.cli")


def _build_logger(level: int) -> logging.Logger:
    root = logging.getLogger("locatorforge")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        root.addHandler(handler)
        root.propagate = False
    return root


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locatorforge",
        description="Turn recorded browser plan steps into Playwright test code.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")

    subparsers = parser.add_subparsers(dest="command", required=True)
    emit = subparsers.add_parser("emit", help="Emit Playwright code for a recorded plan.")
    emit.add_argument("plan", type=Path, help="Plan JSON: a list of steps or an object with a 'steps' list.")
    emit.add_argument("--raw", action="store_true", help="Emit bare statements instead of a test file.")
    emit.add_argument("--test-name", default="Automated Test", help="Name of the generated test.")
    emit.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT_MS, help="Element wait timeout in ms.")
    emit.add_argument(
        "--conditional-timeout",
        type=int,
        default=DEFAULT_CONDITIONAL_TIMEOUT_MS,
        help="Element wait timeout in ms for conditional steps.",
    )
    emit.add_argument("--variables", type=Path, help="JSON object of test variables to declare.")
    emit.add_argument("-o", "--output", type=Path, help="Write code here instead of stdout.")
    return parser


def _load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _load_variables(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    payload = _load_json(path)
    if not isinstance(payload, dict):
        raise PlanPayloadError(f"Variables file must contain a JSON object: {path}")
    return payload


def _run_emit(args: argparse.Namespace) -> int:
    try:
        steps = parse_plan_steps(_load_json(args.plan))
        variables = _load_variables(args.variables)
    except (OSError, json.JSONDecodeError, PlanPayloadError) as exc:
        logger.error("Could not read plan: %s", exc)
        return 2

    options = EmitterOptions(
        test_name=args.test_name,
        timeout_ms=args.timeout,
        conditional_timeout_ms=args.conditional_timeout,
        variables=variables,
    )
    if args.raw:
        code = convert_plan_to_raw_code(steps, options)
    else:
        code = convert_plan_to_test(steps, options)

    if args.output is None:
        sys.stdout.write(code)
        return 0
    try:
        args.output.write_text(code, encoding="utf-8")
    except OSError as exc:
        logger.error("Could not write %s: %s", args.output, exc)
        return 2
    logger.info("Wrote %d step(s) to %s", len(steps), args.output)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.ERROR if args.quiet else logging.INFO
    _build_logger(level)
    if args.command == "emit":
        return _run_emit(args)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
