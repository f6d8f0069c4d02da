"""Intcode Interpreter Errors

Every failure the interpreter can report. All of them are terminal for the
current execution; the caller decides whether to retry or abandon.
"""

from typing import Optional


class IntcodeError(Exception):
    """Base exception for interpreter errors.

    Attributes:
        ip: Instruction pointer at the time of the failure, if known
        address: Offending memory address, if relevant
    """

    def __init__(self, message: str, ip: Optional[int] = None, address: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.ip = ip
        self.address = address

    def __str__(self) -> str:
        details = []
        if self.ip is not None:
            details.append(f"ip={self.ip}")
        if self.address is not None:
            details.append(f"address={self.address}")
        if details:
            return f"{self.message} ({', '.join(details)})"
        return self.message


class ParseError(IntcodeError):
    """A source token is not a valid integer."""

    def __init__(self, message: str, token: str = "", index: Optional[int] = None):
        super().__init__(message)
        self.token = token
        self.index = index


class OutOfBoundsError(IntcodeError):
    """A read, write or jump target lies outside memory."""
    pass


class MissingOperandError(IntcodeError):
    """An instruction's operands would extend past the end of memory."""
    pass


class UnsupportedParameterModeError(IntcodeError):
    """A parameter mode digit outside {0, 1, 2}."""

    def __init__(self, message: str, mode: int, ip: Optional[int] = None):
        super().__init__(message, ip=ip)
        self.mode = mode


class ImmediateWriteTargetError(IntcodeError):
    """A write target operand was given in immediate mode."""
    pass


class EmptyInputError(IntcodeError):
    """An input instruction ran with no pending input."""
    pass


class UnknownOpcodeError(IntcodeError):
    """The opcode is not part of the instruction set."""

    def __init__(self, message: str, opcode: int, ip: Optional[int] = None):
        super().__init__(message, ip=ip)
        self.opcode = opcode


class EmptyProgramError(IntcodeError):
    """Execution was requested on a program with no memory."""
    pass


__all__ = [
    "IntcodeError",
    "ParseError",
    "OutOfBoundsError",
    "MissingOperandError",
    "UnsupportedParameterModeError",
    "ImmediateWriteTargetError",
    "EmptyInputError",
    "UnknownOpcodeError",
    "EmptyProgramError",
]
