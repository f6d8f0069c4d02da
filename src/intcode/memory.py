"""Intcode Memory

Fixed-length, word-addressed store backing one program.
"""

from typing import Dict, Iterable, List

from .errors import OutOfBoundsError


class Memory:
    """Intcode memory unit.

    The length is fixed at construction. Every access is bounds-checked;
    nothing grows, wraps or truncates.
    """

    def __init__(self, words: Iterable[int] = (), size: int = 0):
        """Initialize memory from a word sequence.

        Args:
            words: Initial contents starting at address 0
            size: Minimum length; cells past the given words are zero
        """
        self.cells: List[int] = list(words)
        if size > len(self.cells):
            self.cells.extend([0] * (size - len(self.cells)))

        # Memory access statistics
        self.read_count = 0
        self.write_count = 0

    def __len__(self) -> int:
        return len(self.cells)

    def read(self, address: int) -> int:
        """Read the word stored at an address.

        Raises:
            OutOfBoundsError: If the address is outside memory
        """
        self._check_address(address, "read")
        self.read_count += 1
        return self.cells[address]

    def write(self, address: int, value: int) -> None:
        """Store a word at an address.

        Raises:
            OutOfBoundsError: If the address is outside memory
        """
        self._check_address(address, "write")
        self.write_count += 1
        self.cells[address] = value

    def snapshot(self) -> List[int]:
        """Return an independent copy of the contents."""
        return list(self.cells)

    def dump(self, start: int = 0, count: int = 16) -> Dict[int, int]:
        """Dump memory contents for debugging.

        Args:
            start: First address to dump
            count: Number of words to dump

        Returns:
            Dictionary mapping addresses to values (addresses outside memory are skipped)
        """
        result = {}
        for address in range(max(0, start), min(start + count, len(self.cells))):
            result[address] = self.cells[address]
        return result

    def _check_address(self, address: int, access: str) -> None:
        # Negative addresses are out of bounds too
        if address < 0 or address >= len(self.cells):
            raise OutOfBoundsError(
                f"{access}: index out of bounds: {address} ({len(self.cells)})",
                address=address,
            )
