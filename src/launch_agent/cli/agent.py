"""Command-line entry points for the agent's run modes."""

from __future__ import annotations

import argparse
import signal
import threading

from launch_agent.agent.loop import run_loop, run_once
from launch_agent.logging import get_logger


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid int value: {raw!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return value


def register_subcommands(subparsers) -> None:
    """Attach ``run`` and ``loop`` to the top-level ``argparse`` subparsers."""

    subparsers.add_parser("run", help="Run the agent action once and exit")
    loop_parser = subparsers.add_parser(
        "loop", help="Run the agent action repeatedly until terminated"
    )
    loop_parser.add_argument(
        "--interval-seconds",
        type=_positive_int,
        default=None,
        help="Seconds between iterations (default: configuration or 1)",
    )


def _install_stop_handlers(stop_event: threading.Event) -> None:
    def _stop(signum, _frame) -> None:
        get_logger().info("Received signal %s; stopping loop", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)


def dispatch(args, runtime) -> int:
    line_logger = runtime.line_logger
    line_logger.init_log_directory()

    if args.command == "run":
        return run_once(line_logger)

    if args.command == "loop":
        interval = args.interval_seconds
        if interval is None:
            interval = runtime.settings.interval_seconds
        stop_event = threading.Event()
        _install_stop_handlers(stop_event)
        run_loop(
            line_logger,
            interval_seconds=interval,
            stop_event=stop_event,
            configuration=runtime.configuration,
        )
        return 0

    raise SystemExit(f"Unknown agent command: {args.command}")
