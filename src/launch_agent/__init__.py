"""Core package for the launch agent scaffold.

The top-level module re-exports the rotating agent log and the explicit
configuration object so deployments can drive them without the CLI.
"""

from .config import AgentConfiguration, AgentSettings, ConfigurationError
from .logging import LogDestination, RotatingLineLogger

__all__ = [
    "AgentConfiguration",
    "AgentSettings",
    "ConfigurationError",
    "LogDestination",
    "RotatingLineLogger",
]
