"""Intcode Source Loader

Parses comma-separated program text into memory words.
"""

from pathlib import Path
from typing import List, Union
import re

from .errors import ParseError

_INTEGER = re.compile(r'^[+-]?[0-9]+$')


class SourceLoader:
    """Loads Intcode source into a list of words."""

    def __init__(self):
        self.words: List[int] = []

    def load_from_file(self, filename: Union[str, Path]) -> List[int]:
        """Load source from a file.

        Args:
            filename: Path to the source file

        Returns:
            Parsed words
        """
        with open(filename, 'r', encoding='utf-8') as f:
            content = f.read()

        return self.load_from_string(content)

    def load_from_string(self, source: str) -> List[int]:
        """Load source from a string.

        Args:
            source: One line (or whitespace-trimmed block) of comma-separated integers

        Returns:
            Parsed words

        Raises:
            ParseError: If any token is not an integer
        """
        self.words.clear()

        for index, token in enumerate(source.strip().split(',')):
            self.words.append(self._parse_token(token, index))

        return self.words.copy()

    def _parse_token(self, token: str, index: int) -> int:
        """Parse a single token.

        Surrounding whitespace is allowed; digit separators, floats and
        anything else Python's ``int()`` would be lenient about are not.
        """
        text = token.strip()
        if not _INTEGER.match(text):
            raise ParseError(f"cannot parse token {index}: {token!r}", token=token, index=index)
        return int(text)


def load_source_file(filename: Union[str, Path]) -> List[int]:
    """Convenience function to load source from a file."""
    loader = SourceLoader()
    return loader.load_from_file(filename)


def load_source_string(source: str) -> List[int]:
    """Convenience function to load source from a string."""
    loader = SourceLoader()
    return loader.load_from_string(source)
