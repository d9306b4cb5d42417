import sys

from launch_agent.cli.main import main

sys.exit(main())
