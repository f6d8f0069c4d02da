"""Intcode Debugger Main Entry Point

Command-line interface for the Intcode debugger.
"""

import sys
import argparse
from pathlib import Path
from typing import Optional, Sequence

from ..program import DEFAULT_MEMORY_SIZE, configure_logging
from .interactive_debugger import start_interactive_debugger


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the debugger."""
    parser = argparse.ArgumentParser(
        description="Intcode Debugger - Debug Intcode programs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  intcode-debug program.txt                 # Start debugger with a program loaded
  intcode-debug --exact program.txt         # Do not pad memory past the source
  intcode-debug                             # Start debugger, load later with 'load'
"""
    )

    parser.add_argument(
        "program",
        nargs="?",
        type=Path,
        help="Intcode source file to debug"
    )

    parser.add_argument(
        "--capacity",
        type=int,
        default=DEFAULT_MEMORY_SIZE,
        help=f"Pad memory to this many words (default: {DEFAULT_MEMORY_SIZE})"
    )

    parser.add_argument(
        "--exact",
        action="store_true",
        help="Do not pad memory past the source"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="Intcode Debugger v0.1.0"
    )

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        program_file = str(args.program) if args.program else None
        capacity = None if args.exact else args.capacity
        start_interactive_debugger(program_file, capacity)
        return 0

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
