"""Command-line helpers for inspecting and rotating the agent log."""

from launch_agent.logging import get_logger


def register_subcommands(subparsers):
    """Register logging subcommands on the provided ``argparse`` object.

    Parameters
    ----------
    subparsers : :class:`argparse._SubParsersAction`
        The ``argparse`` subparsers object to which logging commands are added.
    """

    subparsers.add_parser("show-path", help="Show the agent log file location")

    rotate_parser = subparsers.add_parser(
        "rotate", help="Rotate the agent log now if it exceeds the size threshold"
    )
    rotate_parser.add_argument(
        "--max-bytes",
        type=int,
        default=None,
        help="Override the rotation threshold in bytes for this call",
    )


def dispatch(args, runtime):
    """Execute the logging command associated with ``args.subcommand``."""

    line_logger = runtime.line_logger
    if args.subcommand == "show-path":
        print(line_logger.log_file.resolve())
    elif args.subcommand == "rotate":
        if args.max_bytes is not None:
            if args.max_bytes < 0:
                raise SystemExit("--max-bytes must be >= 0")
            line_logger.max_log_size = args.max_bytes
        rotated = line_logger.init_log_directory()
        if rotated:
            print(f"Rotated {line_logger.log_file} to {line_logger.backup_file}")
        else:
            print(f"No rotation needed for {line_logger.log_file}")
    else:
        get_logger().error("No handler for subcommand: %s", args.subcommand)
        return 1
    return 0
