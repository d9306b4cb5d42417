"""Agent configuration loaded from a JSON file next to the executable.

The configuration is an explicit object: build it once and pass it to the
components that need it. Lookups are lenient and return ``None`` for unbuilt
configurations, missing keys and wrongly typed values; loading is strict and
raises :class:`ConfigurationError`.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from launch_agent.logging import DEFAULT_MAX_LOG_SIZE

DEFAULT_CONFIG_FILE = "launch-agent.json"
KEY_SEPARATOR = ":"

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when the agent configuration cannot be loaded or validated."""


def default_base_dir() -> Path:
    """Directory holding the configuration file.

    ``LAUNCH_AGENT_BASE_DIR`` wins; otherwise the directory of the running
    script is used.
    """

    raw = os.environ.get("LAUNCH_AGENT_BASE_DIR")
    if raw and raw.strip():
        return Path(raw).expanduser()
    return Path(sys.argv[0]).resolve().parent


def _load_json_object(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Configuration file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Configuration file {path} is not valid JSON: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Configuration file {path} could not be read: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
    return data


class AgentConfiguration:
    """Typed read access to the agent's JSON configuration."""

    def __init__(self, path: Optional[os.PathLike[str] | str] = None) -> None:
        self.path = Path(path) if path is not None else None
        self._data: dict[str, Any] | None = None
        self._mtime_ns: int | None = None

    @classmethod
    def build(
        cls,
        base_dir: Optional[os.PathLike[str] | str] = None,
        file_name: str = DEFAULT_CONFIG_FILE,
    ) -> "AgentConfiguration":
        """Load the required configuration file from ``base_dir``."""

        root = Path(base_dir) if base_dir is not None else default_base_dir()
        configuration = cls(root / file_name)
        configuration.load()
        return configuration

    @property
    def is_built(self) -> bool:
        return self._data is not None

    def load(self) -> None:
        if self.path is None:
            raise ConfigurationError("No configuration file path was provided")
        # Stat first so an edit landing during the read is seen by the next refresh.
        mtime_ns = self._current_mtime()
        data = _load_json_object(self.path)
        self._data = data
        self._mtime_ns = mtime_ns

    def refresh(self) -> bool:
        """Reload the file if it changed on disk since the last load.

        Returns ``True`` when a reload happened. An unbuilt configuration is
        left alone. A failed reload raises :class:`ConfigurationError` and
        keeps the previously loaded values.
        """

        if not self.is_built or self.path is None:
            return False
        if self._current_mtime() == self._mtime_ns:
            return False
        self.load()
        logger.info("Configuration %s changed; reloaded", self.path)
        return True

    def _current_mtime(self) -> int | None:
        try:
            return self.path.stat().st_mtime_ns if self.path is not None else None
        except FileNotFoundError:
            return None

    def get_value(self, key: str) -> Any:
        """Return the raw value at ``key`` or ``None``.

        Nested objects are addressed with ``:``, e.g. ``"loop:interval_seconds"``.
        """

        if self._data is None:
            return None
        node: Any = self._data
        for part in key.split(KEY_SEPARATOR):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def get_boolean(self, key: str) -> bool | None:
        value = self.get_value(key)
        return value if isinstance(value, bool) else None

    def get_integer(self, key: str) -> int | None:
        value = self.get_value(key)
        # bool is an int subclass; JSON true/false are not integers here.
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None

    def get_string(self, key: str) -> str | None:
        value = self.get_value(key)
        return value if isinstance(value, str) else None


class AgentSettings(BaseModel):
    """Resolved runtime settings with defaults for absent keys."""

    agent_identifier: str = Field("launch-agent", min_length=1)
    agent_name: str = Field("agent", min_length=1)
    log_dir: str | None = None
    max_log_size: int = Field(DEFAULT_MAX_LOG_SIZE, gt=0)
    interval_seconds: int = Field(1, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_configuration(cls, configuration: AgentConfiguration | None) -> "AgentSettings":
        if configuration is None:
            return cls()

        lookups = {
            "agent_identifier": configuration.get_string("agent_identifier"),
            "agent_name": configuration.get_string("agent_name"),
            "log_dir": configuration.get_string("log_dir"),
            "max_log_size": configuration.get_integer("max_log_size"),
            "interval_seconds": configuration.get_integer("interval_seconds"),
            "log_level": configuration.get_string("log_level"),
        }
        try:
            return cls(**{key: value for key, value in lookups.items() if value is not None})
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration in {configuration.path}: {exc}") from exc


__all__ = [
    "AgentConfiguration",
    "AgentSettings",
    "ConfigurationError",
    "DEFAULT_CONFIG_FILE",
    "default_base_dir",
]
