from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional

from .compiler import compile_source
from .interpreter import IRInterpreter, InputExhausted
from .lexer import StructuralError

logger = logging.getLogger(__name__)


def _read_source(path: str) -> bytes:
    source_path = Path(path)
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    return source_path.read_bytes()


def main(
    argv: Optional[list[str]] = None,
    *,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> int:
    parser = argparse.ArgumentParser(description="Compile a Brainfuck program to IR and run it")
    parser.add_argument("source", help="Path to the Brainfuck source file")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="[%(levelname)s] %(message)s")

    try:
        source = _read_source(args.source)
    except OSError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    try:
        program = compile_source(source)
    except StructuralError as exc:
        print(f"Compilation error: {exc}", file=sys.stderr)
        return 1
    logger.debug("compiled %s into %d instructions", args.source, len(program))

    in_stream = stdin if stdin is not None else sys.stdin.buffer
    out_stream = stdout if stdout is not None else sys.stdout.buffer
    interpreter = IRInterpreter()
    try:
        try:
            interpreter.run(program, stdin=in_stream, stdout=out_stream)
        finally:
            # bytes written before a failure stay written
            out_stream.flush()
    except InputExhausted as exc:
        print(f"Runtime error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"I/O error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
