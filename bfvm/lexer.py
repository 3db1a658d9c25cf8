"""
Tokenizer for the bfvm interpreter.

Converts raw source text into the flat instruction list the engine runs.
Only the eight instruction characters are significant; every other
character (whitespace, letters, digits, newlines) is a comment and is
dropped without error. There is nothing else to lex: no literals, no
identifiers, no multi-character operators.
"""

from __future__ import annotations
import enum
from typing import Iterable, List, Optional


VALID_SOURCE_CHARS = "><+-.,[]"


# ──────────────────────────────────────────────
# Instruction set
# ──────────────────────────────────────────────

class Instruction(enum.Enum):
    INC_PTR = ">"     # move data pointer right
    DEC_PTR = "<"     # move data pointer left
    INC_VAL = "+"     # increment current cell (wraps)
    DEC_VAL = "-"     # decrement current cell (wraps)
    OUTPUT = "."      # write current cell to output
    INPUT = ","       # read one byte into current cell
    JUMP_FWD = "["    # jump past matching ] if cell is zero
    JUMP_BACK = "]"   # jump back to matching [ if cell is nonzero

    @classmethod
    def from_char(cls, ch: str) -> Optional[Instruction]:
        """Return the instruction for `ch`, or None if it is a comment char."""
        return _CHAR_MAP.get(ch)

    @property
    def is_jump(self) -> bool:
        return self in (Instruction.JUMP_FWD, Instruction.JUMP_BACK)

    def __str__(self):
        return self.value


_CHAR_MAP = {ins.value: ins for ins in Instruction}


# ──────────────────────────────────────────────
# Tokenize / re-serialize
# ──────────────────────────────────────────────

def tokenize(source: str) -> List[Instruction]:
    """Return the instructions in `source`, in order, comments dropped.

    Never fails: empty or comment-only input gives an empty list.
    """
    return [_CHAR_MAP[ch] for ch in source if ch in _CHAR_MAP]


def to_source(instructions: Iterable[Instruction]) -> str:
    """Inverse of tokenize() modulo comments."""
    return "".join(ins.value for ins in instructions)
