"""
bfvm Execution Engine

Integrates:
  - Program (tuple of Instruction, from lexer.tokenize)
  - Memory tape + data pointer (tape.py)
  - Console I/O (console.py)

Execution model:
  1. If IP is past the end of the program → DONE
  2. Fetch instruction at IP
  3. Dispatch to its handler
  4. Handler returns ADVANCE (IP += 1) or JumpTo(target) (IP = target)
  5. Repeat

Jumps land ON the matching bracket, which then runs as the next step:
a taken '[' lands on ']' with the cell at zero (falls through), a taken
']' lands on '[' with the cell nonzero (falls through into the body).

Bracket matching is done on demand by scanning, every time a jump is
taken. Unbalanced programs are only detected when the offending jump
actually executes, never at load time.

Fatal conditions raise a VMError subclass out of step()/run(); the engine
never prints or exits on its own.
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Union

from .console import StreamConsole
from .errors import UnmatchedBracket
from .lexer import Instruction
from .tape import Tape, DEFAULT_TAPE_SIZE

logger = logging.getLogger(__name__)


class StopReason(Enum):
    DONE = 'DONE'        # IP ran past the last instruction
    TIMEOUT = 'TIMEOUT'  # max_steps exhausted first


# ══════════════════════════════════════════════
# Step results
# ══════════════════════════════════════════════

class Advance:
    """Step result: move on to the next instruction."""

    __slots__ = ()

    def __repr__(self):
        return "ADVANCE"


ADVANCE = Advance()


@dataclass(frozen=True)
class JumpTo:
    """Step result: continue at `target` instead of advancing."""
    target: int


StepResult = Union[Advance, JumpTo]


class Engine:
    """Fetch-decode-execute interpreter over a tokenized program.

    Usage:
        engine = Engine(tokenize(source), console=BufferConsole(b"hi"))
        engine.run()
        engine.console.output   # bytes written by '.'
        engine.tape.dump(0, 8)  # first 8 cells
    """

    def __init__(self, program: Sequence[Instruction],
                 tape_size: int = DEFAULT_TAPE_SIZE, console=None):
        self.program = tuple(program)
        self.tape = Tape(tape_size)
        if console is None:
            console = StreamConsole(sys.stdin.buffer, sys.stdout.buffer)
        self.console = console

        self.ip = 0
        self.steps = 0

        self._dispatch = self._build_dispatch()

        logger.debug("engine ready: %d instructions, %d cells",
                     len(self.program), self.tape.size)

    @property
    def finished(self) -> bool:
        return self.ip >= len(self.program)

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Optional[StopReason]:
        """Execute one instruction. Returns StopReason.DONE if nothing is left, else None."""
        if self.finished:
            return StopReason.DONE

        instruction = self.program[self.ip]
        result = self._dispatch[instruction]()

        if isinstance(result, JumpTo):
            self.ip = result.target
        else:
            self.ip += 1
        self.steps += 1
        return None

    def run(self, max_steps: Optional[int] = None) -> StopReason:
        """Run until the program finishes or `max_steps` instructions have executed.

        Any VMError raised by an instruction propagates to the caller and
        no further instructions run.
        """
        executed = 0
        while max_steps is None or executed < max_steps:
            if self.step() is StopReason.DONE:
                logger.debug("program finished after %d steps", self.steps)
                return StopReason.DONE
            executed += 1

        if self.finished:
            return StopReason.DONE
        logger.debug("step limit %d reached at ip=%d", max_steps, self.ip)
        return StopReason.TIMEOUT

    # ══════════════════════════════════════════════
    # Bracket matching
    # ══════════════════════════════════════════════

    def find_match(self, position: int) -> int:
        """Return the index of the bracket matching the one at `position`.

        Scans forward from '[' or backward from ']', counting nesting depth.
        Raises UnmatchedBracket if the scan runs off either end.
        """
        opener = self.program[position]
        if opener is Instruction.JUMP_FWD:
            direction, closer = 1, Instruction.JUMP_BACK
        elif opener is Instruction.JUMP_BACK:
            direction, closer = -1, Instruction.JUMP_FWD
        else:
            raise ValueError(f"no matching arm for instruction '{opener}' at {position}")

        depth = 1
        idx = position
        while True:
            idx += direction
            if idx < 0 or idx >= len(self.program):
                raise UnmatchedBracket(position, opener.value)

            inst = self.program[idx]
            if inst is opener:
                depth += 1
            elif inst is closer:
                depth -= 1
                if depth == 0:
                    return idx

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════

    def _build_dispatch(self) -> Dict[Instruction, Callable[[], StepResult]]:
        return {
            Instruction.INC_PTR:   self._op_inc_ptr,
            Instruction.DEC_PTR:   self._op_dec_ptr,
            Instruction.INC_VAL:   self._op_inc_val,
            Instruction.DEC_VAL:   self._op_dec_val,
            Instruction.OUTPUT:    self._op_output,
            Instruction.INPUT:     self._op_input,
            Instruction.JUMP_FWD:  self._op_jump_fwd,
            Instruction.JUMP_BACK: self._op_jump_back,
        }

    def _op_inc_ptr(self) -> StepResult:
        self.tape.move_right()
        return ADVANCE

    def _op_dec_ptr(self) -> StepResult:
        self.tape.move_left()
        return ADVANCE

    def _op_inc_val(self) -> StepResult:
        self.tape.increment()
        return ADVANCE

    def _op_dec_val(self) -> StepResult:
        self.tape.decrement()
        return ADVANCE

    def _op_output(self) -> StepResult:
        self.console.write_byte(self.tape.read())
        return ADVANCE

    def _op_input(self) -> StepResult:
        value = self.console.read_byte()
        # Exhausted input leaves the cell untouched
        if value is not None:
            self.tape.write(value)
        return ADVANCE

    def _op_jump_fwd(self) -> StepResult:
        if self.tape.read() != 0:
            return ADVANCE
        return JumpTo(self.find_match(self.ip))

    def _op_jump_back(self) -> StepResult:
        if self.tape.read() == 0:
            return ADVANCE
        return JumpTo(self.find_match(self.ip))
