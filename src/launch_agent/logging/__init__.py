from launch_agent.logging.logging import default_log_dir, get_logger, reset_logger
from launch_agent.logging.rotating import (
    BACKUP_SUFFIX,
    DEFAULT_MAX_LOG_SIZE,
    LogDestination,
    RotatingLineLogger,
)

__all__ = [
    "BACKUP_SUFFIX",
    "DEFAULT_MAX_LOG_SIZE",
    "LogDestination",
    "RotatingLineLogger",
    "default_log_dir",
    "get_logger",
    "reset_logger",
]
