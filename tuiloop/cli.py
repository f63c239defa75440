"""Command-line front door for the bundled demos.

Parses CLI options, loads persisted runtime config, configures logging, and
runs one demo component inside an ``Application``.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace

from .demos import DEMOS
from .errors import TerminalInitError
from .runtime import Application, load_runtime_config


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a tuiloop demo component in the terminal.")
    parser.add_argument("demo", nargs="?", default="counter", choices=sorted(DEMOS), help="Demo to run.")
    parser.add_argument("--tick-ms", type=_positive_int, default=None, help="Tick interval in milliseconds.")
    parser.add_argument("--no-mouse", action="store_true", help="Do not enable mouse reporting.")
    parser.add_argument(
        "--log-file",
        default=None,
        help="Write debug logs to this file (stderr is unusable while the UI runs).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse ``argv`` and run the selected demo until it quits."""
    args = build_parser().parse_args(argv)
    if args.log_file is not None:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(threadName)s %(name)s %(levelname)s %(message)s",
        )

    config = load_runtime_config()
    if args.tick_ms is not None:
        config = replace(config, tick_interval_seconds=args.tick_ms / 1000.0)
    if args.no_mouse:
        config = replace(config, mouse_reporting=False)

    try:
        app = Application(DEMOS[args.demo](), config=config)
    except TerminalInitError as exc:
        raise SystemExit(f"tuiloop: {exc}") from exc
    app.run()


if __name__ == "__main__":
    main()
