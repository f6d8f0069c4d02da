#!/usr/bin/env python3
"""Intcode Debugger Runner Script

Runs the interactive debugger from a source checkout without installing it.
"""

import sys
from pathlib import Path

# Add src to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / 'src'))

from intcode.debugger.main import main

if __name__ == '__main__':
    sys.exit(main())
