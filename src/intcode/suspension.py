"""Suspended execution state.

A suspension is the plain-data result of running a program up to its next
output. It can be resumed with ``Program.resume`` or simply dropped.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Running:
    """Execution paused right after an OUTPUT instruction."""
    inputs: Tuple[int, ...] = ()
    output: Optional[int] = None

    @property
    def halted(self) -> bool:
        return False

    def feed(self, *values: int) -> "Running":
        """Return a copy with values appended to the pending inputs."""
        return replace(self, inputs=self.inputs + tuple(values))


@dataclass(frozen=True)
class Halted:
    """Execution reached a HALT instruction."""
    output: Optional[int] = None

    @property
    def halted(self) -> bool:
        return True

    def feed(self, *values: int) -> "Halted":
        return self


Suspension = Union[Running, Halted]


__all__ = ["Running", "Halted", "Suspension"]
