"""
Tests for execution failures and the error details they carry.
"""

import unittest
from collections import deque
from test_program_framework import ProgramTestCase, run_program_test

from intcode.cpu import CPUState
from intcode.errors import (
    ImmediateWriteTargetError,
    IntcodeError,
    MissingOperandError,
    OutOfBoundsError,
    ParseError,
    UnknownOpcodeError,
    UnsupportedParameterModeError,
)
from intcode.program import Program


class TestExecutionErrors(unittest.TestCase):
    """Test that each failure is reported with its kind and location."""

    def check_error(self, case, ip=None, address=None):
        results = run_program_test(case)
        self.assertTrue(results['success'], results['errors'])
        if ip is not None:
            self.assertEqual(results['error'].ip, ip)
        if address is not None:
            self.assertEqual(results['error'].address, address)
        return results['error']

    def test_missing_operand(self):
        self.check_error(ProgramTestCase(
            "truncated_add", "1,0,0", capacity=None, expected_error=MissingOperandError
        ), ip=0)

    def test_immediate_write_target(self):
        for source in ("11101,1,1,0,99", "103,0,99", "11107,1,2,3,99"):
            with self.subTest(source=source):
                self.check_error(ProgramTestCase(
                    "immediate_target", source, inputs=[1], expected_error=ImmediateWriteTargetError
                ), ip=0)

    def test_unsupported_mode(self):
        error = self.check_error(ProgramTestCase(
            "mode_three", "1101,1,1,9,301,0,0,0,99", expected_error=UnsupportedParameterModeError
        ), ip=4)
        self.assertEqual(error.mode, 3)

    def test_unknown_opcode(self):
        error = self.check_error(ProgramTestCase(
            "opcode_42", "42,99", expected_error=UnknownOpcodeError
        ), ip=0)
        self.assertEqual(error.opcode, 42)

    def test_run_off_end(self):
        """Without a HALT, the IP walks off the end of memory."""
        self.check_error(ProgramTestCase(
            "no_halt", "1,0,0,0", capacity=None, expected_error=OutOfBoundsError
        ), ip=4, address=4)

    def test_out_of_bounds_accesses(self):
        test_cases = [
            (ProgramTestCase("read_past_end", "4,50,99", capacity=None, expected_error=OutOfBoundsError), 50),
            (ProgramTestCase("write_past_end", "1101,1,1,10,99", capacity=None, expected_error=OutOfBoundsError), 10),
            (ProgramTestCase("negative_relative", "109,-10,204,0,99", expected_error=OutOfBoundsError), -10),
            (ProgramTestCase("negative_position", "4,-1,99", expected_error=OutOfBoundsError), -1),
        ]
        for case, address in test_cases:
            with self.subTest(case=case.name):
                self.check_error(case, address=address)

    def test_padded_memory_end(self):
        self.check_error(ProgramTestCase(
            "read_past_padding", "4,64,99", capacity=64, expected_error=OutOfBoundsError
        ), ip=0, address=64)

    def test_failed_input_keeps_value(self):
        program = Program.from_source("3,100,99", capacity=None)
        inputs = deque([5])
        with self.assertRaises(OutOfBoundsError) as ctx:
            program.step(inputs)
        self.assertEqual(ctx.exception.address, 100)
        self.assertEqual(list(inputs), [5])

    def test_failure_state(self):
        program = Program.from_source("1101,1,1,9,42,99")
        with self.assertRaises(UnknownOpcodeError):
            program.run()
        self.assertEqual(program.ip, 4)
        self.assertEqual(program.cpu.state, CPUState.ERROR)
        self.assertIn("ip=4", program.cpu.halt_reason)
        self.assertFalse(program.is_halted)

    def test_error_message(self):
        with self.assertRaises(IntcodeError) as ctx:
            Program.from_source("3,0,99").run()
        self.assertEqual(str(ctx.exception), "no input (ip=0)")

        error = OutOfBoundsError("read: index out of bounds", ip=3, address=-1)
        self.assertEqual(str(error), "read: index out of bounds (ip=3, address=-1)")

    def test_parse_error(self):
        with self.assertRaises(ParseError) as ctx:
            Program.from_source("1,2,abc,4")
        self.assertEqual(ctx.exception.token, "abc")
        self.assertEqual(ctx.exception.index, 2)
        self.assertIsInstance(ctx.exception, IntcodeError)


if __name__ == '__main__':
    unittest.main()
