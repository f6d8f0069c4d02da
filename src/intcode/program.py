"""Intcode Program

Owns one memory image plus the CPU executing it, and drives execution through
run-to-halt, run-to-next-output and resume.
"""

from collections import deque
from pathlib import Path
from typing import Any, Deque, Dict, Iterable, List, Optional, Sequence, Union
import logging
import sys

from .cpu import CPU
from .decoder import disassemble
from .errors import EmptyProgramError, IntcodeError
from .loader import load_source_file, load_source_string
from .memory import Memory
from .suspension import Halted, Running, Suspension

logger = logging.getLogger(__name__)

# Memory size programs are padded to when loaded from source, giving
# self-modifying programs scratch space past their literal words.
DEFAULT_MEMORY_SIZE = 10000


class Program:
    """An Intcode program: memory, instruction pointer and relative base."""

    def __init__(self, words: Iterable[int] = (), capacity: Optional[int] = None, trace: bool = False):
        """Initialize a program.

        Args:
            words: Initial memory contents
            capacity: Pad memory with zeros up to this many words (None for exact size)
            trace: Log every executed instruction at DEBUG level
        """
        self.capacity = capacity
        self.memory = Memory(words, capacity or 0)
        self.cpu = CPU(self.memory, trace)

        # Contents as loaded; mimic copies from here
        self._original: List[int] = self.memory.snapshot()

    @classmethod
    def from_source(cls, source: str, capacity: Optional[int] = DEFAULT_MEMORY_SIZE,
                    trace: bool = False) -> "Program":
        """Parse comma-separated source text into a program.

        Raises:
            ParseError: If a token is not an integer
        """
        words = load_source_string(source)
        logger.debug("Loaded %d words (capacity=%s)", len(words), capacity)
        return cls(words, capacity, trace)

    @classmethod
    def from_file(cls, filename: Union[str, Path], capacity: Optional[int] = DEFAULT_MEMORY_SIZE,
                  trace: bool = False) -> "Program":
        """Load a program from a source file."""
        words = load_source_file(filename)
        logger.debug("Loaded %d words from %s (capacity=%s)", len(words), filename, capacity)
        return cls(words, capacity, trace)

    @classmethod
    def empty(cls, capacity: int = 0) -> "Program":
        """Create a program with no memory, to be filled by ``mimic``.

        The capacity is kept as a hint only; memory length stays zero until
        the program mimics another one.
        """
        program = cls()
        program.capacity = capacity
        return program

    def mimic(self, other: "Program") -> None:
        """Reset to an independent copy of another program's original memory."""
        self._original = list(other._original)
        self.memory = Memory(self._original)
        self.cpu.reset(self.memory)
        logger.debug("Mimicked program of %d words", len(self.memory))

    # Memory access

    @property
    def mem_size(self) -> int:
        return len(self.memory)

    @property
    def ip(self) -> int:
        return self.cpu.ip

    @property
    def relative_base(self) -> int:
        return self.cpu.relative_base

    @property
    def is_halted(self) -> bool:
        return self.cpu.halted

    def read(self, address: int) -> int:
        return self.memory.read(address)

    def write(self, address: int, value: int) -> None:
        self.memory.write(address, value)

    # Execution

    def run(self, inputs: Sequence[int] = ()) -> Optional[int]:
        """Run until the program halts.

        Args:
            inputs: Every input the program will consume, in order

        Returns:
            The last output emitted, or None if there was none
        """
        suspended = self.run_suspended(inputs)
        while isinstance(suspended, Running):
            suspended = self.resume(suspended)
        return suspended.output

    def run_suspended(self, inputs: Sequence[int] = ()) -> Suspension:
        """Run until the next output or halt."""
        return self._execute(deque(inputs), None)

    def resume(self, suspension: Suspension) -> Suspension:
        """Continue a suspended execution; a halted one is returned unchanged."""
        if isinstance(suspension, Halted):
            return suspension
        return self._execute(deque(suspension.inputs), suspension.output)

    def run_outputs(self, inputs: Sequence[int] = ()) -> List[int]:
        """Run until halt, collecting every output in order."""
        outputs = []
        suspended = self.run_suspended(inputs)
        while isinstance(suspended, Running):
            outputs.append(suspended.output)
            suspended = self.resume(suspended)
        return outputs

    def step(self, inputs: Deque[int]) -> Optional[int]:
        """Execute a single instruction; returns its output, if any."""
        self._check_not_empty()
        return self.cpu.step(inputs)

    def _execute(self, inputs: Deque[int], output: Optional[int]) -> Suspension:
        self._check_not_empty()

        while True:
            emitted = self.cpu.step(inputs)
            if self.cpu.halted:
                logger.debug("Program halted after %d instructions", self.cpu.instruction_count)
                return Halted(output)
            if emitted is not None:
                return Running(tuple(inputs), emitted)

    def _check_not_empty(self) -> None:
        if len(self.memory) == 0:
            raise EmptyProgramError("no more data", ip=self.cpu.ip)

    # Debugging

    def get_memory_dump(self, start: int = 0, count: int = 16) -> Dict[int, int]:
        return self.memory.dump(start, count)

    def get_program_dump(self, start: int = 0, count: int = 10) -> List[str]:
        """Disassemble memory for debugging, as ``"address: text"`` lines."""
        return [f"{address:04d}: {text}" for address, text in disassemble(self.memory.cells, start, count)]

    def get_state(self) -> Dict[str, Any]:
        """Get program state for debugging."""
        return {
            'cpu': self.cpu.get_state(),
            'memory': {
                'size': len(self.memory),
                'capacity': self.capacity,
                'reads': self.memory.read_count,
                'writes': self.memory.write_count,
            },
        }


def create_program(source: str, config: Optional[Dict[str, Any]] = None) -> Program:
    """Create a program from source text with optional configuration.

    Args:
        source: Comma-separated program text
        config: Optional configuration dictionary (``capacity``, ``trace``)

    Returns:
        Configured Program instance
    """
    if config is None:
        config = {}

    return Program.from_source(
        source,
        capacity=config.get('capacity', DEFAULT_MEMORY_SIZE),
        trace=config.get('trace', False),
    )


def parse_values(values: Optional[Sequence[str]]) -> List[int]:
    """Flatten repeated and/or comma-separated integer arguments."""
    result = []
    for value in values or []:
        for part in value.split(','):
            if part.strip():
                result.append(int(part))
    return result


def parse_pokes(pokes: Optional[Sequence[str]]) -> List[tuple]:
    """Parse ``ADDRESS=VALUE`` arguments."""
    result = []
    for poke in pokes or []:
        address, sep, value = poke.partition('=')
        if not sep:
            raise ValueError(f"invalid poke (expected ADDRESS=VALUE): {poke}")
        result.append((int(address), int(value)))
    return result


def configure_logging(verbose: bool) -> None:
    """Configure logging for command-line entry points."""
    if not verbose:
        return

    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for running a program from the command line."""
    import argparse

    parser = argparse.ArgumentParser(description='Intcode Virtual Machine')
    parser.add_argument('--file', '-f', type=str, required=True, help='Source file to load and run')
    parser.add_argument('--input', '-i', action='append', metavar='VALUES',
                        help='Input values (repeatable, or comma-separated)')
    parser.add_argument('--poke', '-p', action='append', metavar='ADDRESS=VALUE',
                        help='Write a value to memory before running (repeatable)')
    parser.add_argument('--capacity', type=int, default=DEFAULT_MEMORY_SIZE,
                        help=f'Pad memory to this many words (default: {DEFAULT_MEMORY_SIZE})')
    parser.add_argument('--exact', action='store_true', help='Do not pad memory past the source')
    parser.add_argument('--last', action='store_true', help='Only print the last output')
    parser.add_argument('--dump', type=int, metavar='ADDRESS', action='append',
                        help='Print the value at an address after the program halts (repeatable)')
    parser.add_argument('--trace', action='store_true', help='Log every executed instruction')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)
    configure_logging(args.verbose or args.trace)

    try:
        inputs = parse_values(args.input)
        pokes = parse_pokes(args.poke)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        capacity = None if args.exact else args.capacity
        program = Program.from_file(args.file, capacity=capacity, trace=args.trace)

        for address, value in pokes:
            program.write(address, value)

        if args.last:
            output = program.run(inputs)
            if output is not None:
                print(output)
        else:
            for output in program.run_outputs(inputs):
                print(output)

        for address in args.dump or []:
            print(f"[{address}] = {program.read(address)}")

    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return 1
    except IntcodeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
