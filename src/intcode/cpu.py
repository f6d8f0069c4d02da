"""Intcode CPU

Resolves operands and executes decoded instructions against memory.
"""

from enum import Enum
from typing import Any, Deque, Dict, Optional
import logging

from .decoder import Instruction, Opcode, ParamMode, decode
from .errors import (
    EmptyInputError,
    ImmediateWriteTargetError,
    IntcodeError,
    MissingOperandError,
    OutOfBoundsError,
)
from .memory import Memory

logger = logging.getLogger(__name__)


class CPUState(Enum):
    """CPU execution states."""
    READY = "ready"
    RUNNING = "running"
    HALTED = "halted"
    ERROR = "error"


class CPU:
    """Intcode CPU.

    Holds the instruction pointer and relative base; memory is owned by the
    program and shared with the CPU by reference.
    """

    def __init__(self, memory: Memory, trace: bool = False):
        self.memory = memory
        self.trace = trace

        self.ip = 0
        self.relative_base = 0

        self.state = CPUState.READY
        self.halt_reason: Optional[str] = None
        self.instruction_count = 0

        self.instruction_handlers = {
            Opcode.ADD: self._exec_add,
            Opcode.MULTIPLY: self._exec_multiply,
            Opcode.INPUT: self._exec_input,
            Opcode.OUTPUT: self._exec_output,
            Opcode.JUMP_IF_TRUE: self._exec_jump_if_true,
            Opcode.JUMP_IF_FALSE: self._exec_jump_if_false,
            Opcode.LESS_THAN: self._exec_less_than,
            Opcode.EQUALS: self._exec_equals,
            Opcode.ADJUST_RELATIVE_BASE: self._exec_adjust_relative_base,
            Opcode.HALT: self._exec_halt,
        }
        missing = set(Opcode) - set(self.instruction_handlers)
        assert not missing, f"no handler for {missing}"

    def reset(self, memory: Optional[Memory] = None) -> None:
        """Reset CPU to initial state, optionally attaching new memory."""
        if memory is not None:
            self.memory = memory
        self.ip = 0
        self.relative_base = 0
        self.state = CPUState.READY
        self.halt_reason = None
        self.instruction_count = 0

    @property
    def halted(self) -> bool:
        return self.state == CPUState.HALTED

    def fetch(self) -> Instruction:
        """Decode the instruction at the current IP."""
        word = self.memory.read(self.ip)
        instr = decode(word, self.ip)
        if self.ip + instr.opcode.arity >= len(self.memory):
            raise MissingOperandError(
                f"cannot execute {instr.opcode.name}: operands extend past memory end "
                f"(memory={len(self.memory)})",
                ip=self.ip,
            )
        return instr

    def step(self, inputs: Deque[int]) -> Optional[int]:
        """Execute one instruction.

        Args:
            inputs: Pending inputs; an INPUT instruction pops from the left

        Returns:
            The emitted value if the instruction was an OUTPUT, else None
        """
        if self.state == CPUState.HALTED:
            return None

        self.state = CPUState.RUNNING
        try:
            instr = self.fetch()
            if self.trace:
                logger.debug("ip=%d rb=%d %s", self.ip, self.relative_base, self._describe(instr))

            output = self.instruction_handlers[instr.opcode](instr, inputs)
            self.instruction_count += 1
            return output
        except IntcodeError as e:
            if e.ip is None:
                e.ip = self.ip
            self.state = CPUState.ERROR
            self.halt_reason = str(e)
            raise

    # Operand resolution

    def _operand_word(self, instr: Instruction, slot: int) -> int:
        return self.memory.read(instr.address + 1 + slot)

    def read_operand(self, instr: Instruction, slot: int) -> int:
        """Resolve an operand to the value it denotes."""
        raw = self._operand_word(instr, slot)
        mode = instr.modes[slot]
        if mode is ParamMode.IMMEDIATE:
            return raw
        if mode is ParamMode.RELATIVE:
            return self.memory.read(self.relative_base + raw)
        return self.memory.read(raw)

    def write_address(self, instr: Instruction, slot: int) -> int:
        """Resolve a write-target operand to an effective address."""
        raw = self._operand_word(instr, slot)
        mode = instr.modes[slot]
        if mode is ParamMode.IMMEDIATE:
            raise ImmediateWriteTargetError(
                f"{instr.opcode.name}: write target not supported in immediate mode",
                ip=instr.address,
            )
        if mode is ParamMode.RELATIVE:
            return self.relative_base + raw
        return raw

    # Instruction implementations

    def _binary_op(self, instr: Instruction, func) -> None:
        a = self.read_operand(instr, 0)
        b = self.read_operand(instr, 1)
        self.memory.write(self.write_address(instr, 2), func(a, b))
        self.ip += instr.size

    def _exec_add(self, instr: Instruction, inputs: Deque[int]) -> None:
        self._binary_op(instr, lambda a, b: a + b)

    def _exec_multiply(self, instr: Instruction, inputs: Deque[int]) -> None:
        self._binary_op(instr, lambda a, b: a * b)

    def _exec_less_than(self, instr: Instruction, inputs: Deque[int]) -> None:
        self._binary_op(instr, lambda a, b: 1 if a < b else 0)

    def _exec_equals(self, instr: Instruction, inputs: Deque[int]) -> None:
        self._binary_op(instr, lambda a, b: 1 if a == b else 0)

    def _exec_input(self, instr: Instruction, inputs: Deque[int]) -> None:
        if not inputs:
            raise EmptyInputError("no input", ip=instr.address)
        address = self.write_address(instr, 0)
        self.memory.write(address, inputs[0])
        inputs.popleft()
        self.ip += instr.size

    def _exec_output(self, instr: Instruction, inputs: Deque[int]) -> int:
        value = self.read_operand(instr, 0)
        self.ip += instr.size
        return value

    def _jump(self, instr: Instruction, truth: bool) -> None:
        if (self.read_operand(instr, 0) != 0) == truth:
            target = self.read_operand(instr, 1)
            if target < 0 or target >= len(self.memory):
                raise OutOfBoundsError(
                    f"{instr.opcode.name}: jump target out of bounds ({len(self.memory)})",
                    ip=instr.address,
                    address=target,
                )
            self.ip = target
        else:
            self.ip += instr.size

    def _exec_jump_if_true(self, instr: Instruction, inputs: Deque[int]) -> None:
        self._jump(instr, True)

    def _exec_jump_if_false(self, instr: Instruction, inputs: Deque[int]) -> None:
        self._jump(instr, False)

    def _exec_adjust_relative_base(self, instr: Instruction, inputs: Deque[int]) -> None:
        self.relative_base += self.read_operand(instr, 0)
        self.ip += instr.size

    def _exec_halt(self, instr: Instruction, inputs: Deque[int]) -> None:
        self.state = CPUState.HALTED
        self.halt_reason = "HALT instruction executed"

    def _describe(self, instr: Instruction) -> str:
        operands = [
            f"{mode.name.lower()}:{self._operand_word(instr, i)}"
            for i, mode in enumerate(instr.modes)
        ]
        return f"{instr.opcode.name} {' '.join(operands)}".rstrip()

    def get_state(self) -> Dict[str, Any]:
        """Get CPU state for debugging."""
        return {
            'ip': self.ip,
            'relative_base': self.relative_base,
            'state': self.state.value,
            'halt_reason': self.halt_reason,
            'instruction_count': self.instruction_count,
        }
