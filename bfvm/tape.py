"""
Memory tape for the bfvm interpreter.

A fixed-length run of unsigned 8-bit cells plus the data pointer that
selects the current one:

    cell:     0    1    2   ...   size-1
            ┌────┬────┬────┬─────┬────┐
            │ 00 │ 00 │ 00 │ ... │ 00 │
            └────┴────┴────┴─────┴────┘
              ^ pointer (starts at 0)

Cell arithmetic wraps modulo 256. Pointer movement does NOT wrap: leaving
[0, size) raises TapeOverflow / TapeUnderflow and leaves the pointer where
it was.
"""

from .errors import TapeOverflow, TapeUnderflow


DEFAULT_TAPE_SIZE = 30_000


class Tape:
    """Zero-initialized byte tape with a bounds-checked data pointer.

    Memory is a flat bytearray; reads and writes always go through the
    current pointer. Use dump() or indexing to inspect other cells.
    """

    def __init__(self, size: int = DEFAULT_TAPE_SIZE):
        if size < 1:
            raise ValueError(f"tape size must be at least 1 cell, got {size}")
        self._cells = bytearray(size)
        self.pointer = 0

    @property
    def size(self) -> int:
        return len(self._cells)

    def __len__(self):
        return len(self._cells)

    def __getitem__(self, index):
        return self._cells[index]

    # --- Pointer movement ---

    def move_right(self):
        if self.pointer + 1 >= len(self._cells):
            raise TapeOverflow(self.pointer, len(self._cells))
        self.pointer += 1

    def move_left(self):
        if self.pointer == 0:
            raise TapeUnderflow(self.pointer, len(self._cells))
        self.pointer -= 1

    # --- Current cell ---

    def read(self) -> int:
        return self._cells[self.pointer]

    def write(self, value: int):
        self._cells[self.pointer] = value & 0xFF

    def increment(self):
        self._cells[self.pointer] = (self._cells[self.pointer] + 1) & 0xFF

    def decrement(self):
        self._cells[self.pointer] = (self._cells[self.pointer] - 1) & 0xFF

    # --- Inspection ---

    def dump(self, start: int = 0, count: int = 16) -> bytes:
        """Return a copy of `count` cells starting at `start` (clipped to the tape)."""
        start = max(0, start)
        return bytes(self._cells[start:start + count])

    def __repr__(self):
        return f"Tape(size={len(self._cells)}, pointer={self.pointer})"
