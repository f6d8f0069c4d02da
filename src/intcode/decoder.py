"""Intcode Instruction Decoder

Turns a raw instruction word into an opcode plus one parameter mode per operand.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

from .errors import UnknownOpcodeError, UnsupportedParameterModeError


class ParamMode(Enum):
    """Operand addressing modes."""
    POSITION = 0
    IMMEDIATE = 1
    RELATIVE = 2


class Opcode(Enum):
    """Instruction set.

    Each member is ``(code, arity, writes)`` where ``writes`` tells whether the
    last operand is a write target.
    """
    ADD = (1, 3, True)
    MULTIPLY = (2, 3, True)
    INPUT = (3, 1, True)
    OUTPUT = (4, 1, False)
    JUMP_IF_TRUE = (5, 2, False)
    JUMP_IF_FALSE = (6, 2, False)
    LESS_THAN = (7, 3, True)
    EQUALS = (8, 3, True)
    ADJUST_RELATIVE_BASE = (9, 1, False)
    HALT = (99, 0, False)

    def __init__(self, code: int, arity: int, writes: bool):
        self.code = code
        self.arity = arity
        self.writes = writes

    @classmethod
    def from_code(cls, code: int) -> "Opcode":
        try:
            return _OPCODES_BY_CODE[code]
        except KeyError:
            raise UnknownOpcodeError(f"unknown opcode: {code}", opcode=code) from None


_OPCODES_BY_CODE = {op.code: op for op in Opcode}


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction."""
    opcode: Opcode
    modes: Tuple[ParamMode, ...]
    address: int
    raw: int

    @property
    def size(self) -> int:
        """Number of words occupied, opcode word included."""
        return self.opcode.arity + 1


def decode(word: int, address: int = 0) -> Instruction:
    """Decode one instruction word.

    Args:
        word: Raw instruction word
        address: Address the word was fetched from

    Returns:
        Decoded instruction

    Raises:
        UnknownOpcodeError: If the opcode is not in the instruction set
        UnsupportedParameterModeError: If a mode digit is not 0, 1 or 2
    """
    if word < 0:
        raise UnknownOpcodeError(f"unknown opcode: {word}", opcode=word, ip=address)

    try:
        opcode = Opcode.from_code(word % 100)
    except UnknownOpcodeError as e:
        e.ip = address
        raise

    modes = []
    digits = word // 100
    for _ in range(opcode.arity):
        digit = digits % 10
        digits //= 10
        try:
            modes.append(ParamMode(digit))
        except ValueError:
            raise UnsupportedParameterModeError(
                f"unsupported parameter mode: {digit} ({word})", mode=digit, ip=address
            ) from None

    return Instruction(opcode, tuple(modes), address, word)


def format_operand(mode: ParamMode, value: int) -> str:
    """Render one operand for listings."""
    if mode is ParamMode.IMMEDIATE:
        return str(value)
    if mode is ParamMode.RELATIVE:
        return f"[rb{value:+d}]"
    return f"[{value}]"


def disassemble(words: Sequence[int], start: int = 0, count: int = 10) -> List[Tuple[int, str]]:
    """Render a listing of decoded instructions.

    Words that do not decode (data, or a truncated instruction at the end of
    memory) are shown as raw values and occupy a single cell.

    Args:
        words: Memory contents
        start: Address to start decoding at
        count: Maximum number of lines to produce

    Returns:
        List of (address, text) pairs
    """
    lines = []
    address = start
    while address < len(words) and len(lines) < count:
        word = words[address]
        try:
            instr = decode(word, address)
        except (UnknownOpcodeError, UnsupportedParameterModeError):
            lines.append((address, f"DATA {word}"))
            address += 1
            continue

        if address + instr.opcode.arity >= len(words):
            lines.append((address, f"DATA {word}"))
            address += 1
            continue

        operands = [
            format_operand(mode, words[address + 1 + i])
            for i, mode in enumerate(instr.modes)
        ]
        text = instr.opcode.name
        if operands:
            text += " " + ", ".join(operands)
        lines.append((address, text))
        address += instr.size

    return lines
