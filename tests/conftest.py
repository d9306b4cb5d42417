import os
import sys
from pathlib import Path

import pytest

# Ensure the src directory is on the path for imports
root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(root / 'src'))

log_dir = root / "logs"
log_dir.mkdir(parents=True, exist_ok=True)
os.environ.setdefault("LAUNCH_AGENT_LOG_DIR", str(log_dir))
# Keep a stray launch-agent.json next to the test runner from being picked up
os.environ.setdefault("LAUNCH_AGENT_BASE_DIR", str(log_dir))
os.environ.pop("LAUNCH_AGENT_CONFIG", None)


@pytest.fixture(autouse=True)
def _reset_diagnostic_loggers():
    from launch_agent.logging import reset_logger

    reset_logger()
    yield
    reset_logger()
