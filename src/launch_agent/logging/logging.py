# launch_agent/logging/logging.py
import os
import logging
import logging.handlers
import sys
from pathlib import Path

_DIAGNOSTIC_FILE_NAME = "launch-agent.debug.log"
_DEFAULT_MAX_BYTES = 1024 * 1024 * 10
# Names of loggers whose handlers have already been attached
_LOGGER_INITIALIZED = {}


def default_log_dir(agent_identifier="launch-agent"):
    """Return the per-user cache directory used for agent logs.

    ``LAUNCH_AGENT_LOG_DIR`` takes precedence over the
    ``~/Library/Caches/<agent_identifier>`` default.
    """
    raw = os.environ.get("LAUNCH_AGENT_LOG_DIR")
    if raw and raw.strip():
        return Path(raw).expanduser()
    return Path.home() / "Library" / "Caches" / agent_identifier


def _resolve_log_dir(log_dir=None):
    if log_dir is not None:
        return Path(log_dir)
    return default_log_dir()


def _resolve_log_file(log_file=None, log_dir=None):
    if log_file is not None:
        return Path(log_file)
    return _resolve_log_dir(log_dir) / _DIAGNOSTIC_FILE_NAME


def get_logger(
    name="launch_agent",
    level=logging.INFO,
    log_file=None,
    log_dir=None,
    to_file=True,
    console=True,
    max_bytes=_DEFAULT_MAX_BYTES,
    backup_count=1,
    fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    encoding="utf-8",
    propagate=False,
):
    """
    Get or create a diagnostic logger.
    - name: Logger name (default 'launch_agent')
    - level: Logging level (default logging.INFO)
    - log_file: File path for logs (default: <log_dir>/launch-agent.debug.log)
    - log_dir: Directory for logs (default: see :func:`default_log_dir`)
    - to_file: If False, no file handler is attached and nothing is created on disk
    - console: If True, records also go to stderr
    - max_bytes, backup_count: Size cap of the diagnostic file and how many
      rotated copies to keep
    - fmt, datefmt: Formatting for log records
    - encoding: Encoding for the log file
    - propagate: Whether to propagate to the root logger (default False)

    Handlers are attached only the first time a name is requested; later
    calls return the configured logger unchanged. Library modules log through
    ``logging.getLogger(__name__)`` and reach these handlers by propagation.
    """
    logger = logging.getLogger(name)
    if not _LOGGER_INITIALIZED.get(name, False):
        logger.setLevel(level)
        logger.propagate = propagate
        formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

        if to_file:
            file_path = _resolve_log_file(log_file, log_dir)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.handlers.RotatingFileHandler(
                file_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding=encoding,
            )
            fh.setFormatter(formatter)
            logger.addHandler(fh)

        if console:
            ch = logging.StreamHandler(sys.stderr)
            ch.setFormatter(formatter)
            logger.addHandler(ch)

        _LOGGER_INITIALIZED[name] = True

    return logger


def reset_logger(name=None):
    """Detach and close handlers so loggers can be reconfigured.

    Parameters
    ----------
    name : str, optional
        Logger to reset. If omitted, every logger configured through
        :func:`get_logger` is reset.
    """
    if name is None:
        names = list(_LOGGER_INITIALIZED.keys())
    else:
        names = [name]

    for n in names:
        logger = logging.getLogger(n)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    if name is None:
        _LOGGER_INITIALIZED.clear()
    else:
        _LOGGER_INITIALIZED.pop(name, None)

