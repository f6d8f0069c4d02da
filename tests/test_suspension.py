"""
Tests for run-to-next-output execution and resuming.
"""

import unittest

from intcode.program import Program
from intcode.suspension import Halted, Running

ECHO_TWICE = "3,0,4,0,3,0,4,0,99"
THREE_OUTPUTS = "104,1,104,2,1101,3,4,20,4,20,99"


class TestSuspensionValues(unittest.TestCase):
    """Test the suspension data types."""

    def test_feed_appends(self):
        state = Running((1,), 2)
        self.assertEqual(state.feed(3, 4), Running((1, 3, 4), 2))
        self.assertEqual(state, Running((1,), 2))

    def test_halted_ignores_feed(self):
        state = Halted(5)
        self.assertIs(state.feed(1, 2), state)

    def test_halted_flag(self):
        self.assertFalse(Running().halted)
        self.assertTrue(Halted().halted)


class TestRunSuspended(unittest.TestCase):
    """Test suspending at each output."""

    def test_suspends_after_output(self):
        program = Program.from_source(ECHO_TWICE)
        state = program.run_suspended([5, 6])
        self.assertEqual(state, Running((6,), 5))
        self.assertEqual(program.ip, 4)

        state = program.resume(state)
        self.assertEqual(state, Running((), 6))

        state = program.resume(state)
        self.assertEqual(state, Halted(6))
        self.assertTrue(program.is_halted)

    def test_feed_between_outputs(self):
        program = Program.from_source(ECHO_TWICE)
        state = program.run_suspended([1])
        self.assertEqual(state.output, 1)

        state = program.resume(state.feed(2))
        self.assertEqual(state.output, 2)
        self.assertEqual(program.resume(state), Halted(2))

    def test_resume_halted_is_noop(self):
        program = Program.from_source("104,8,99")
        state = program.resume(program.run_suspended())
        self.assertEqual(state, Halted(8))
        self.assertIs(program.resume(state), state)
        self.assertEqual(program.ip, 2)

    def test_halt_without_output(self):
        program = Program.from_source("1101,1,1,5,99,0")
        self.assertEqual(program.run_suspended(), Halted(None))
        self.assertIsNone(Program.from_source("99").run())

    def test_already_halted(self):
        program = Program.from_source("104,8,99")
        self.assertEqual(program.run(), 8)
        self.assertEqual(program.run_suspended(), Halted(None))

    def test_matches_run(self):
        """Collecting outputs by resuming gives the same result as run."""
        suspended_program = Program.from_source(THREE_OUTPUTS)
        outputs = []
        state = suspended_program.run_suspended()
        while isinstance(state, Running):
            outputs.append(state.output)
            state = suspended_program.resume(state)

        program = Program.from_source(THREE_OUTPUTS)
        last = program.run()

        self.assertEqual(outputs, [1, 2, 7])
        self.assertEqual(state.output, last)
        self.assertEqual(last, 7)
        self.assertEqual(suspended_program.memory.snapshot(), program.memory.snapshot())
        self.assertEqual(Program.from_source(THREE_OUTPUTS).run_outputs(), outputs)

    def test_abandoned_suspension(self):
        """A suspension can be dropped; the program keeps its own state."""
        program = Program.from_source(THREE_OUTPUTS)
        program.run_suspended()
        self.assertEqual(program.ip, 2)
        state = program.run_suspended()
        self.assertEqual(state.output, 2)


if __name__ == '__main__':
    unittest.main()
