"""Command-line helpers for inspecting the resolved agent configuration."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from launch_agent.config import AgentSettings
from launch_agent.logging import get_logger


def register_subcommands(subparsers) -> None:
    subparsers.add_parser("show", help="Show resolved settings and their sources")


def _render_settings(
    settings: AgentSettings,
    sources: dict[str, str],
    console: Console | None = None,
) -> None:
    """Pretty-print settings using ``rich``."""

    if console is None:
        console = Console()

    table = Table(title="Launch Agent Settings", show_lines=False)
    table.add_column("Setting", style="bold cyan")
    table.add_column("Value", style="green")
    table.add_column("Source", style="bright_black")

    for name, value in settings.model_dump().items():
        display = "[dim]-[/dim]" if value is None else str(value)
        table.add_row(name, display, sources.get(name, "default"))

    console.print(table)


def dispatch(args, runtime) -> int:
    if args.subcommand != "show":
        get_logger().error("No handler for subcommand: %s", args.subcommand)
        return 1

    configuration = runtime.configuration
    sources: dict[str, str] = {}
    if configuration is not None:
        for name in AgentSettings.model_fields:
            if configuration.get_value(name) is not None:
                sources[name] = str(configuration.path)
    if runtime.log_dir_override is not None:
        sources["log_dir"] = "--log-dir"

    _render_settings(runtime.settings, sources)
    print(f"Log file: {runtime.line_logger.log_file}")
    return 0
