"""Append-only agent log with coarse, size-bounded rotation.

The agent log is a plain text file that mirrors everything echoed to the
console. Its size is only checked when :meth:`RotatingLineLogger.init_log_directory`
runs (normally once per process start), so a single long-running process may
grow the file past the threshold; the next start rotates it.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from launch_agent.logging.logging import default_log_dir

DEFAULT_MAX_LOG_SIZE = 1024 * 1024 * 10
BACKUP_SUFFIX = ".bak"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogDestination:
    directory: Path
    file_name: str

    @classmethod
    def for_agent(
        cls,
        agent_identifier: str = "launch-agent",
        agent_name: str = "agent",
        log_dir: os.PathLike[str] | str | None = None,
    ) -> "LogDestination":
        """Resolve ``<log dir>/<agent_name>.log`` for an agent."""

        directory = Path(log_dir).expanduser() if log_dir is not None else default_log_dir(agent_identifier)
        return cls(directory=directory, file_name=f"{agent_name}.log")

    @property
    def log_file(self) -> Path:
        return self.directory / self.file_name

    @property
    def backup_file(self) -> Path:
        return self.log_file.with_name(self.file_name + BACKUP_SUFFIX)


class RotatingLineLogger:
    """Write agent output to a console stream and an append-only log file.

    ``max_log_size`` may be changed until :meth:`init_log_directory` runs;
    writes never look at it.
    """

    def __init__(
        self,
        destination: LogDestination,
        *,
        max_log_size: int = DEFAULT_MAX_LOG_SIZE,
        console: TextIO | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self.destination = destination
        self.max_log_size = max_log_size
        self._console = console
        self.encoding = encoding

    @property
    def console(self) -> TextIO:
        # Resolved lazily so pytest's capsys replacement of sys.stdout is honored.
        return self._console if self._console is not None else sys.stdout

    @property
    def log_file(self) -> Path:
        return self.destination.log_file

    @property
    def backup_file(self) -> Path:
        return self.destination.backup_file

    def init_log_directory(self) -> bool:
        """Create the log directory and rotate an oversized log file.

        Returns ``True`` when the current file was moved to the backup path.
        Any previous backup is replaced, not appended to. Filesystem failures
        propagate as :class:`OSError`.
        """

        self.destination.directory.mkdir(parents=True, exist_ok=True)

        log_file = self.log_file
        if not log_file.is_file():
            return False

        size = log_file.stat().st_size
        if size <= self.max_log_size:
            return False

        os.replace(log_file, self.backup_file)
        logger.info(
            "Rotated %s (%d bytes > %d) to %s",
            log_file,
            size,
            self.max_log_size,
            self.backup_file,
        )
        return True

    def write(self, message: str) -> None:
        """Echo ``message`` verbatim and append it to the log file."""

        self._echo(message)
        self._append(message)

    def write_line(self, message: str) -> None:
        self._echo(message + "\n")
        self._append(message + "\n")

    def write_lines(self, messages: Iterable[str]) -> None:
        for message in messages:
            self.write_line(message)

    def _echo(self, text: str) -> None:
        console = self.console
        console.write(text)
        # stdout is block-buffered when redirected to a file.
        console.flush()

    def _append(self, text: str) -> None:
        # Text mode translates "\n" into the platform newline.
        with self.log_file.open("a", encoding=self.encoding) as handle:
            handle.write(text)
