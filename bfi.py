#!/usr/bin/env python3
"""
bfi: bfvm interpreter CLI

Usage:
    python bfi.py <source-file> [--tape-size 30000] [--tokens] [-v | -vv]

Runs the program against this process's stdin/stdout. Every '.' writes
one byte and flushes, so interactive programs work over a terminal or a
pipe. Characters other than ><+-.,[] in the source are comments.

Exit status:
    0  program ran off the end of its instructions
    1  bad arguments, unreadable source, tape overflow/underflow,
       unmatched bracket, or an I/O failure
    2  internal interpreter error

Examples:
    python bfi.py hello.b
    echo -n A | python bfi.py echo.b
    python bfi.py hello.b --tokens
    python bfi.py big.b --tape-size 65536 -v
"""

import argparse
import logging
import sys
import os

# Allow running from project root or as module
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from bfvm import __version__, tokenize, Engine, DEFAULT_TAPE_SIZE
from bfvm.console import StreamConsole
from bfvm.errors import VMError, ArgumentError, SourceReadError

logger = logging.getLogger("bfi")


def positive_int(value: str) -> int:
    """argparse type for --tape-size: decimal or 0x-prefixed hex, at least 1."""
    try:
        n = int(value.strip(), 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def read_source(path: str) -> str:
    """Return the full text of the program file, or raise SourceReadError."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        raise SourceReadError(path, "file not found")
    except UnicodeDecodeError as e:
        raise SourceReadError(path, f"not valid UTF-8 ({e.reason})")
    except OSError as e:
        raise SourceReadError(path, e.strerror or str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfi",
        description="Interpreter for the eight-instruction tape language",
    )
    parser.add_argument("source", nargs="?", default=None,
                        help="Program source file")
    parser.add_argument("--tape-size", type=positive_int, default=DEFAULT_TAPE_SIZE,
                        help=f"Number of memory cells (default: {DEFAULT_TAPE_SIZE})")
    parser.add_argument("--tokens", action="store_true",
                        help="Dump instruction stream and exit (debug)")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Log interpreter details to stderr (-v, -vv)")
    parser.add_argument("--version", action="version",
                        version=f"bfi {__version__}")
    return parser


def setup_logging(verbosity: int):
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="[%(name)s] %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None, stdin=None, stdout=None):
    """Parse arguments, run the program, and exit.

    stdin/stdout default to this process's binary streams; pass BytesIO
    objects to drive the CLI without a terminal.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if stdin is None:
        stdin = sys.stdin.buffer
    if stdout is None:
        stdout = sys.stdout.buffer

    try:
        if args.source is None:
            raise ArgumentError("couldn't get first argument: no source file given")

        source = read_source(args.source)
        program = tokenize(source)
        logger.info("%s: %d instructions from %d chars",
                    args.source, len(program), len(source))

        # Token dump mode
        if args.tokens:
            for pos, ins in enumerate(program):
                stdout.write(f"{pos:6d}  {ins.value}  {ins.name}\n".encode("ascii"))
            stdout.flush()
            sys.exit(0)

        engine = Engine(program, tape_size=args.tape_size,
                        console=StreamConsole(stdin, stdout))
        engine.run()
        logger.info("finished after %d steps, data pointer at %d",
                    engine.steps, engine.tape.pointer)

    except VMError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(2)


if __name__ == "__main__":
    main()
