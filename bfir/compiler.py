from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Tuple, Union

from .lexer import StructuralError, Symbol, tokenize

logger = logging.getLogger(__name__)

MOVE_LIMIT = 0xFFFFFFFF
CELL_MASK = 0xFF


class UnmatchedLoopEnd(StructuralError):
    """Raised when a loop end is compiled while no loop start is pending."""


class UnclosedLoop(StructuralError):
    """Raised when symbols run out while loop starts are still pending."""


class Op(Enum):
    MOVE_RIGHT = ">"
    MOVE_LEFT = "<"
    INCREMENT = "+"
    DECREMENT = "-"
    OUTPUT = "."
    INPUT = ","
    JUMP_IF_ZERO = "["
    JUMP_IF_NOT_ZERO = "]"


@dataclass(frozen=True)
class Instruction:
    op: Op
    arg: int = 0


Program = Tuple[Instruction, ...]

_FOLDED = {
    Symbol.MOVE_RIGHT: Op.MOVE_RIGHT,
    Symbol.MOVE_LEFT: Op.MOVE_LEFT,
    Symbol.INCREMENT: Op.INCREMENT,
    Symbol.DECREMENT: Op.DECREMENT,
}
_WRAPPING = {Op.INCREMENT, Op.DECREMENT}


def _fold(instructions: List[Instruction], op: Op) -> None:
    if instructions and instructions[-1].op is op:
        last = instructions[-1]
        count = last.arg + 1
        if op in _WRAPPING:
            count &= CELL_MASK
        elif count > MOVE_LIMIT:
            raise OverflowError(f"More than {MOVE_LIMIT} consecutive '{op.value}' symbols")
        instructions[-1] = replace(last, arg=count)
    else:
        instructions.append(Instruction(op, 1))


def compile_symbols(symbols: Iterable[Symbol]) -> Program:
    """Compile a symbol sequence into a run-length folded instruction tuple.

    Runs of identical move/increment/decrement symbols collapse into one
    instruction when they are adjacent in the output; increment and
    decrement counts wrap modulo 256. Each loop start becomes a
    ``JUMP_IF_ZERO`` and each loop end a ``JUMP_IF_NOT_ZERO``, and the two
    carry each other's index as their target.
    """
    instructions: List[Instruction] = []
    pending: List[int] = []

    for position, symbol in enumerate(symbols):
        op = _FOLDED.get(symbol)
        if op is not None:
            _fold(instructions, op)
        elif symbol is Symbol.OUTPUT:
            instructions.append(Instruction(Op.OUTPUT))
        elif symbol is Symbol.INPUT:
            instructions.append(Instruction(Op.INPUT))
        elif symbol is Symbol.LOOP_START:
            instructions.append(Instruction(Op.JUMP_IF_ZERO))
            pending.append(len(instructions) - 1)
        elif symbol is Symbol.LOOP_END:
            if not pending:
                raise UnmatchedLoopEnd(
                    f"Loop end at symbol {position} has no matching loop start",
                    position,
                )
            opener = pending.pop()
            instructions.append(Instruction(Op.JUMP_IF_NOT_ZERO, opener))
            # back-patch the opener with the index of its closer
            instructions[opener] = replace(instructions[opener], arg=len(instructions) - 1)
        else:
            raise TypeError(f"Not a symbol: {symbol!r}")

    if pending:
        opener = pending[-1]
        raise UnclosedLoop(f"Loop start at instruction {opener} is never closed", opener)

    logger.debug("compiled program into %d instructions", len(instructions))
    return tuple(instructions)


def compile_source(data: Union[bytes, bytearray, str]) -> Program:
    return compile_symbols(tokenize(data))


__all__ = [
    "CELL_MASK",
    "Instruction",
    "MOVE_LIMIT",
    "Op",
    "Program",
    "UnclosedLoop",
    "UnmatchedLoopEnd",
    "compile_source",
    "compile_symbols",
]
