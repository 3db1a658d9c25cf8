"""
Error taxonomy for the bfvm interpreter.

Every error here is fatal. The engine never recovers from or retries any of
them; they propagate up to the caller (normally bfi.py), which prints the
diagnostic and exits.

    VMError
    ├── ArgumentError      no source path given
    ├── SourceReadError    source file missing / unreadable / not UTF-8
    ├── TapeError
    │   ├── TapeOverflow   data pointer moved to or past the tape end
    │   └── TapeUnderflow  data pointer moved below cell 0
    ├── UnmatchedBracket   jump with no counterpart (found at run time)
    └── ConsoleIOError     input or output stream failed
"""

from typing import Optional


class VMError(Exception):
    """Base class for every fatal interpreter condition."""


class ArgumentError(VMError):
    pass


class SourceReadError(VMError):
    def __init__(self, path: str, reason: str = ""):
        self.path = path
        msg = f"couldn't read file '{path}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class TapeError(VMError):
    """Data pointer left the tape. Carries the pointer it was moving from."""

    def __init__(self, message: str, pointer: int, size: int):
        self.pointer = pointer
        self.size = size
        super().__init__(message)


class TapeOverflow(TapeError):
    def __init__(self, pointer: int, size: int):
        super().__init__(
            f"exceeded memory limit of {size} cells "
            f"(moved right from cell {pointer})",
            pointer, size,
        )


class TapeUnderflow(TapeError):
    def __init__(self, pointer: int = 0, size: int = 0):
        super().__init__(
            "negative pointer: tried moving the data pointer below cell 0",
            pointer, size,
        )


class UnmatchedBracket(VMError):
    def __init__(self, position: int, char: Optional[str] = None):
        self.position = position
        self.char = char
        what = f"'{char}'" if char else "bracket"
        super().__init__(f"unmatched bracket: {what} at instruction {position}")


class ConsoleIOError(VMError):
    pass
