# launch_agent/cli/main.py
from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass

from launch_agent.cli import agent, config as config_cli, logging as logging_cli
from launch_agent.config import (
    DEFAULT_CONFIG_FILE,
    AgentConfiguration,
    AgentSettings,
    ConfigurationError,
    default_base_dir,
)
from launch_agent.logging import LogDestination, RotatingLineLogger, get_logger, reset_logger


@dataclass
class Runtime:
    """Objects shared by every command, built once per process."""

    configuration: AgentConfiguration | None
    settings: AgentSettings
    line_logger: RotatingLineLogger
    log_dir_override: str | None = None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="launch-agent", description="Launch agent scaffold")
    parser.add_argument(
        "--config",
        default=None,
        help=(
            "JSON configuration file (default: $LAUNCH_AGENT_CONFIG, or "
            f"{DEFAULT_CONFIG_FILE} next to the executable when present)"
        ),
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Directory for the agent log (default: ~/Library/Caches/<agent_identifier>)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    agent.register_subcommands(subparsers)

    logging_parser = subparsers.add_parser("logging", help="Agent log utilities")
    logging_subparsers = logging_parser.add_subparsers(dest="subcommand", required=True)
    logging_cli.register_subcommands(logging_subparsers)

    config_parser = subparsers.add_parser("config", help="Configuration utilities")
    config_subparsers = config_parser.add_subparsers(dest="subcommand", required=True)
    config_cli.register_subcommands(config_subparsers)

    return parser


def load_configuration(path: str | None) -> AgentConfiguration | None:
    """Load the configuration named on the command line or by the environment.

    An explicitly named file is required. The default file next to the
    executable is only loaded when it exists.
    """

    explicit = path or (os.environ.get("LAUNCH_AGENT_CONFIG") or "").strip() or None
    if explicit:
        configuration = AgentConfiguration(explicit)
        configuration.load()
        return configuration

    default_path = default_base_dir() / DEFAULT_CONFIG_FILE
    if default_path.is_file():
        return AgentConfiguration.build(default_path.parent)
    return None


def _writes_logs(args) -> bool:
    """Only commands that touch the agent log get a diagnostic file handler."""

    if args.command in ("run", "loop"):
        return True
    return args.command == "logging" and args.subcommand == "rotate"


def build_runtime(args) -> Runtime:
    configuration = load_configuration(args.config)
    settings = AgentSettings.from_configuration(configuration)
    if args.log_dir:
        settings = settings.model_copy(update={"log_dir": args.log_dir})

    destination = LogDestination.for_agent(
        agent_identifier=settings.agent_identifier,
        agent_name=settings.agent_name,
        log_dir=settings.log_dir,
    )

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log_level: {settings.log_level!r}")
    reset_logger()
    get_logger(
        level=level,
        log_dir=destination.directory,
        to_file=_writes_logs(args),
        max_bytes=settings.max_log_size,
    )

    line_logger = RotatingLineLogger(destination, max_log_size=settings.max_log_size)
    return Runtime(
        configuration=configuration,
        settings=settings,
        line_logger=line_logger,
        log_dir_override=args.log_dir,
    )


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    runtime = build_runtime(args)

    # can expand this later, can use a hashmap/dict lookup if becomes larger
    if args.command in ("run", "loop"):
        return agent.dispatch(args, runtime)
    elif args.command == "logging":
        return logging_cli.dispatch(args, runtime)
    elif args.command == "config":
        return config_cli.dispatch(args, runtime)
    parser.error(f"Unknown command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
