from launch_agent.agent.loop import run_loop, run_once

__all__ = ["run_loop", "run_once"]
