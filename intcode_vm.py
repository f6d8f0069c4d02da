#!/usr/bin/env python3
"""Intcode Virtual Machine Runner Script

Runs an Intcode program from a source checkout without installing it.

Usage:
    python intcode_vm.py --file <program.txt> [--input 1,2] [--poke 1=12] [--exact] [--last] [--trace]

Flags:
    --input VALUES   Input values (repeatable, or comma-separated)
    --poke A=V       Write V at address A before running
    --exact          Do not pad memory past the source
    --last           Only print the last output
    --trace          Log every executed instruction
"""

import sys
from pathlib import Path

# Add src to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / 'src'))

from intcode.program import main

if __name__ == '__main__':
    sys.exit(main())
