"""
Console I/O for the bfvm interpreter.

The engine talks to the outside world through exactly two calls:

    read_byte()   -> int 0..255, or None when the input is exhausted
    write_byte(v) -> one byte out, flushed immediately

Two implementations:

  StreamConsole  : wraps binary streams (stdin/stdout, files, pipes).
                   Every write is followed by a flush so interactive
                   programs see output in exact program order.
  BufferConsole  : in-memory. Input comes from a byte queue fed up front
                   or via feed(); output collects in `output`.

Input exhaustion is not an error; stream failures raise ConsoleIOError.
"""

import logging
from collections import deque
from typing import BinaryIO, Optional

from .errors import ConsoleIOError

logger = logging.getLogger(__name__)


class StreamConsole:
    """Console over a pair of binary streams."""

    def __init__(self, input_stream: BinaryIO, output_stream: BinaryIO):
        self.input_stream = input_stream
        self.output_stream = output_stream

    def read_byte(self) -> Optional[int]:
        """Block until one byte is available. None if nothing was read.

        Every call reads the stream again, so a terminal can supply more
        input after an end-of-file keypress.
        """
        try:
            data = self.input_stream.read(1)
        except (OSError, ValueError) as e:
            raise ConsoleIOError(f"input read failed: {e}") from e
        if not data:
            logger.debug("input exhausted")
            return None
        return data[0]

    def write_byte(self, value: int):
        try:
            self.output_stream.write(bytes([value & 0xFF]))
            self.output_stream.flush()
        except (OSError, ValueError) as e:
            raise ConsoleIOError(f"output write failed: {e}") from e


class BufferConsole:
    """In-memory console for driving the engine programmatically.

    Usage:
        con = BufferConsole(b"A")
        Engine(tokenize(",."), console=con).run()
        con.output  # bytearray(b'A')
    """

    def __init__(self, input_data: bytes = b""):
        self._rx_queue: deque = deque(input_data)
        self.output: bytearray = bytearray()

    def feed(self, data: bytes):
        """Append more bytes to the pending input."""
        self._rx_queue.extend(data)

    @property
    def pending_input(self) -> int:
        return len(self._rx_queue)

    def read_byte(self) -> Optional[int]:
        if not self._rx_queue:
            return None
        return self._rx_queue.popleft()

    def write_byte(self, value: int):
        self.output.append(value & 0xFF)
