from __future__ import annotations

import logging
import threading

from launch_agent.config import AgentConfiguration, ConfigurationError
from launch_agent.logging import RotatingLineLogger

RUN_ONCE_MESSAGE = "Running once"
LOOP_START_MESSAGE = "Starting loop"
LOOP_TICK_MESSAGE = "Looping every second"

logger = logging.getLogger(__name__)


def run_once(line_logger: RotatingLineLogger) -> int:
    """Perform the agent action a single time and return the exit status."""

    line_logger.write_line(RUN_ONCE_MESSAGE)
    return 0


def _interval_from(configuration: AgentConfiguration | None, fallback: float) -> float:
    if configuration is None:
        return fallback
    try:
        configuration.refresh()
    except ConfigurationError as exc:
        # Half-written or removed file; keep the last good values and retry next iteration.
        logger.warning("Keeping previous configuration: %s", exc)
    value = configuration.get_integer("interval_seconds")
    if value is None or value <= 0:
        return fallback
    return float(value)


def run_loop(
    line_logger: RotatingLineLogger,
    *,
    interval_seconds: float = 1.0,
    stop_event: threading.Event | None = None,
    configuration: AgentConfiguration | None = None,
) -> int:
    """Repeat the agent action until ``stop_event`` is set.

    Each iteration writes one line and then waits ``interval_seconds`` on the
    event, so setting it interrupts the delay immediately. Without an event
    the loop only ends when the process is killed. A configuration that fails
    to reload does not stop the loop. Returns the number of completed
    iterations.
    """

    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be > 0")
    if stop_event is None:
        stop_event = threading.Event()

    line_logger.write_line(LOOP_START_MESSAGE)
    logger.info("Agent loop started (interval=%ss)", interval_seconds)

    iterations = 0
    while not stop_event.is_set():
        line_logger.write_line(LOOP_TICK_MESSAGE)
        iterations += 1
        delay = _interval_from(configuration, interval_seconds)
        if delay != interval_seconds:
            logger.info("Loop interval changed from %ss to %ss", interval_seconds, delay)
            interval_seconds = delay
        stop_event.wait(interval_seconds)

    logger.info("Agent loop stopped after %d iteration(s)", iterations)
    return iterations
