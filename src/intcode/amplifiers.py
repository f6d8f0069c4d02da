"""Amplifier orchestration.

Chains several independent program instances so each one's output becomes
the next one's input, either once in series or round-robin in a feedback
loop. All scheduling happens here; the instances share no state.
"""

from itertools import permutations
from typing import Iterable, List, Optional, Sequence, Tuple
import logging

from .program import Program
from .suspension import Running, Suspension

logger = logging.getLogger(__name__)


def run_amplifier_chain(template: Program, phases: Sequence[int], signal: int = 0) -> int:
    """Run one amplifier per phase in series.

    Args:
        template: Program every amplifier is a fresh copy of
        phases: Phase setting fed as the first input of each amplifier
        signal: Input to the first amplifier

    Returns:
        Output of the last amplifier
    """
    amplifier = Program.empty(template.mem_size)
    for phase in phases:
        amplifier.mimic(template)
        output = amplifier.run([phase, signal])
        if output is None:
            raise ValueError(f"amplifier with phase {phase} produced no output")
        signal = output
    return signal


def run_feedback_loop(template: Program, phases: Sequence[int], signal: int = 0) -> int:
    """Run amplifiers in a ring until the last one halts.

    Amplifier ``i`` feeds amplifier ``(i + 1) % n``. Each amplifier starts
    with its phase setting; the first also gets ``signal``.

    Returns:
        Last output of the final amplifier
    """
    count = len(phases)
    if count == 0:
        raise ValueError("at least one phase setting is required")

    amplifiers: List[Program] = [Program.empty(template.mem_size) for _ in range(count)]
    for amplifier in amplifiers:
        amplifier.mimic(template)

    # Start every amplifier up to its first output, passing signals along
    suspended: List[Suspension] = []
    for amplifier, phase in zip(amplifiers, phases):
        state = amplifier.run_suspended([phase, signal])
        if state.output is None:
            raise ValueError(f"amplifier with phase {phase} halted without output")
        signal = state.output
        suspended.append(state)

    # Close the ring
    suspended[0] = suspended[0].feed(signal)

    rounds = 0
    while True:
        rounds += 1
        for i, amplifier in enumerate(amplifiers):
            suspended[i] = amplifier.resume(suspended[i])
            if isinstance(suspended[i], Running):
                nxt = (i + 1) % count
                suspended[nxt] = suspended[nxt].feed(suspended[i].output)

        last = suspended[-1]
        if last.halted:
            logger.debug("Feedback loop %s halted after %d rounds", list(phases), rounds)
            if last.output is None:
                raise ValueError("final amplifier halted without output")
            return last.output


def max_thruster_signal(template: Program, phase_settings: Iterable[int],
                        feedback: bool = False) -> Tuple[int, Tuple[int, ...]]:
    """Find the best signal over every ordering of the phase settings.

    Returns:
        (signal, phases) for the best ordering
    """
    runner = run_feedback_loop if feedback else run_amplifier_chain

    best: Optional[Tuple[int, Tuple[int, ...]]] = None
    for phases in permutations(phase_settings):
        signal = runner(template, phases)
        if best is None or signal > best[0]:
            best = (signal, phases)

    if best is None:
        raise ValueError("no phase settings given")
    return best
