#!/usr/bin/env python3
"""Run the runner image builder from a source checkout."""

import sys
from pathlib import Path

# Add scripts directory to path for imports
script_dir = Path(__file__).parent
sys.path.insert(0, str(script_dir))

from runner_tools.build_image import main

if __name__ == "__main__":
    sys.exit(main())
