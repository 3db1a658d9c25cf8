"""
bfvm: interpreter for the eight-instruction tape language
=========================================================
    >  <   move the data pointer right / left
    +  -   increment / decrement the current cell (wraps mod 256)
    .  ,   write / read the current cell as one byte
    [  ]   jump past the matching ] if the cell is zero /
           jump back to the matching [ if the cell is nonzero

Architecture:
    ┌──────────┐    ┌──────────┐    ┌───────────────────────────────┐
    │ Source   │───>│  Lexer   │───>│ Engine                        │
    │ (text)   │    │ (tokens) │    │  Tape (30,000 cells) + Console│
    └──────────┘    └──────────┘    └───────────────────────────────┘

    - lexer.py:   filters source text down to Instruction values
    - tape.py:    byte tape with a bounds-checked data pointer
    - console.py: byte-at-a-time input/output (streams or in-memory)
    - engine.py:  fetch/dispatch loop with on-demand bracket matching
    - errors.py:  fatal error taxonomy (all rooted at VMError)
"""

__version__ = "0.2.0"

from typing import Optional

from .lexer import Instruction, VALID_SOURCE_CHARS, tokenize, to_source
from .tape import Tape, DEFAULT_TAPE_SIZE
from .console import StreamConsole, BufferConsole
from .engine import Engine, StopReason, ADVANCE, JumpTo
from .errors import (
    VMError, ArgumentError, SourceReadError, TapeError, TapeOverflow,
    TapeUnderflow, UnmatchedBracket, ConsoleIOError,
)


def run_source(source: str, input_data: bytes = b"", *,
               tape_size: int = DEFAULT_TAPE_SIZE,
               max_steps: Optional[int] = None) -> bytes:
    """Tokenize and run `source` against in-memory input, returning its output.

    Full pipeline: tokenize -> Engine -> run over a BufferConsole.
    Raises VMError subclasses on fatal conditions, and RuntimeError if
    `max_steps` runs out before the program finishes.
    """
    console = BufferConsole(input_data)
    engine = Engine(tokenize(source), tape_size=tape_size, console=console)
    reason = engine.run(max_steps=max_steps)
    if reason is StopReason.TIMEOUT:
        raise RuntimeError(f"program did not finish within {max_steps} steps")
    return bytes(console.output)
