"""
Console I/O tests: byte-at-a-time reads, flushed writes, failure mapping.
"""
import io
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from bfvm.console import StreamConsole, BufferConsole
from bfvm.errors import ConsoleIOError


class _FlushCounter(io.BytesIO):
    """BytesIO that records what was visible at each flush."""

    def __init__(self):
        super().__init__()
        self.flushed = []

    def flush(self):
        super().flush()
        self.flushed.append(self.getvalue())


class _ScriptedStream(io.RawIOBase):
    """Input stream that returns one scripted chunk per read, then b""."""

    def __init__(self, chunks):
        super().__init__()
        self._chunks = list(chunks)

    def readable(self):
        return True

    def read(self, n=-1):
        return self._chunks.pop(0) if self._chunks else b""


class _BrokenStream(io.RawIOBase):
    def read(self, n=-1):
        raise OSError("device not ready")

    def write(self, b):
        raise OSError("broken pipe")


class TestStreamConsole:
    def test_reads_one_byte_at_a_time(self):
        con = StreamConsole(io.BytesIO(b"\x00\xffz"), io.BytesIO())
        assert [con.read_byte() for _ in range(3)] == [0x00, 0xFF, ord("z")]

    def test_exhaustion_returns_none(self):
        con = StreamConsole(io.BytesIO(b""), io.BytesIO())
        assert con.read_byte() is None

    def test_reads_again_after_exhaustion(self):
        """A terminal can deliver more bytes after an end-of-file keypress."""
        con = StreamConsole(_ScriptedStream([b"", b"Z"]), io.BytesIO())
        assert con.read_byte() is None
        assert con.read_byte() == ord("Z")
        assert con.read_byte() is None

    def test_every_write_is_flushed(self):
        out = _FlushCounter()
        con = StreamConsole(io.BytesIO(), out)
        for b in b"HI!":
            con.write_byte(b)
        assert out.flushed == [b"H", b"HI", b"HI!"]

    def test_read_failure(self):
        con = StreamConsole(_BrokenStream(), io.BytesIO())
        with pytest.raises(ConsoleIOError, match="device not ready"):
            con.read_byte()

    def test_write_failure(self):
        con = StreamConsole(io.BytesIO(), _BrokenStream())
        with pytest.raises(ConsoleIOError, match="broken pipe"):
            con.write_byte(1)

    def test_closed_input(self):
        src = io.BytesIO(b"abc")
        src.close()
        with pytest.raises(ConsoleIOError):
            StreamConsole(src, io.BytesIO()).read_byte()


class TestBufferConsole:
    def test_queue_and_output(self):
        con = BufferConsole(b"ab")
        assert con.pending_input == 2
        assert con.read_byte() == ord("a")
        con.write_byte(0x141)
        assert con.output == bytearray(b"A")

    def test_feed_after_exhaustion(self):
        con = BufferConsole()
        assert con.read_byte() is None
        con.feed(b"x")
        assert con.read_byte() == ord("x")
