"""
Test runner for the Intcode instruction set.

Runs instruction tests in dependency order:
1. Memory and decoding (needed to execute anything)
2. Arithmetic instructions (ADD, MULTIPLY)
3. Comparisons and jumps (LESS_THAN, EQUALS, JUMP_IF_TRUE, JUMP_IF_FALSE)
4. I/O and relative addressing (INPUT, OUTPUT, ADJUST_RELATIVE_BASE)
5. Execution failures
"""

import unittest
import sys
import os

# Add the tests and src directories to Python path
sys.path.insert(0, os.path.dirname(__file__))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from test_memory_and_decoder import TestDecoder, TestMemory
from test_arithmetic_instructions import TestArithmeticInstructions
from test_jump_instructions import TestComparisonInstructions, TestJumpInstructions
from test_io_instructions import TestInputOutputInstructions, TestRelativeMode
from test_errors import TestExecutionErrors

TEST_GROUPS = {
    'memory': [TestMemory, TestDecoder],
    'arithmetic': [TestArithmeticInstructions],
    'jump': [TestComparisonInstructions, TestJumpInstructions],
    'io': [TestInputOutputInstructions, TestRelativeMode],
    'errors': [TestExecutionErrors],
}


def create_test_suite(groups=None):
    """Create test suite in dependency order."""
    suite = unittest.TestSuite()
    loader = unittest.TestLoader()

    for name, test_classes in TEST_GROUPS.items():
        if groups and name not in groups:
            continue
        for test_class in test_classes:
            suite.addTests(loader.loadTestsFromTestCase(test_class))

    return suite


def run_instruction_tests(groups=None, verbosity=2):
    """Run instruction tests with a summary."""
    print("=" * 70)
    print("INTCODE INSTRUCTION TEST SUITE")
    print("=" * 70)

    suite = create_test_suite(groups)
    runner = unittest.TextTestRunner(verbosity=verbosity, stream=sys.stdout)

    print(f"Running {suite.countTestCases()} instruction tests...")
    print()

    result = runner.run(suite)

    print()
    print(f"Tests run: {result.testsRun}")
    print(f"Failures: {len(result.failures)}")
    print(f"Errors: {len(result.errors)}")

    for test, _ in result.failures + result.errors:
        print(f"  - {test}")

    success = result.wasSuccessful()
    print(f"\nOVERALL: {'PASS' if success else 'FAIL'}")
    return success


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Run Intcode instruction tests')
    parser.add_argument('--group', '-g', action='append', choices=sorted(TEST_GROUPS),
                        help='Only run the given test group (repeatable)')
    parser.add_argument('--quiet', '-q', action='store_true', help='Minimal output')

    args = parser.parse_args()

    try:
        success = run_instruction_tests(args.group, 0 if args.quiet else 2)
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\nTest execution interrupted by user")
        sys.exit(1)
